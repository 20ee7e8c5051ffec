from __future__ import annotations

from fastapi import APIRouter, Depends

from ...models.ingredient import KindIn
from ...services.recipe_book import RecipeBook
from ..deps import get_book

router = APIRouter(prefix="/kinds", tags=["kinds"])


@router.get("")
async def list_kinds(book: RecipeBook = Depends(get_book)) -> dict[str, object]:
    kinds = await book.list_kinds()
    return {"count": len(kinds), "kinds": kinds}


@router.post("", status_code=201)
async def register_kind(body: KindIn, book: RecipeBook = Depends(get_book)) -> dict[str, str]:
    return {"name": await book.register_kind(body.name)}
