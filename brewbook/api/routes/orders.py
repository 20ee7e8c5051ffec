from __future__ import annotations

from fastapi import APIRouter, Depends

from ...models.recipe import OrderIn, OrderReceipt
from ...services.recipe_book import RecipeBook
from ..deps import get_book

router = APIRouter(prefix="/orders", tags=["orders"])


@router.post("", status_code=201)
async def make_beverage(body: OrderIn, book: RecipeBook = Depends(get_book)) -> OrderReceipt:
    """Brew one beverage: take payment, consume stock, hand back change."""
    return await book.make_beverage(body.recipe, body.paid)
