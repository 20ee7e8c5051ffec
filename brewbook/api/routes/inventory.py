from __future__ import annotations

from fastapi import APIRouter, Depends

from ...models.ingredient import InventoryIn
from ...services.recipe_book import RecipeBook
from ..deps import get_book

router = APIRouter(prefix="/inventory", tags=["inventory"])


@router.get("")
async def get_inventory(book: RecipeBook = Depends(get_book)) -> dict[str, int]:
    return await book.get_inventory()


@router.post("")
async def add_inventory(body: InventoryIn, book: RecipeBook = Depends(get_book)) -> dict[str, object]:
    level = await book.add_inventory(body.kind, body.amount)
    return {"kind": body.kind, "level": level}
