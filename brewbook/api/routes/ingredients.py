from __future__ import annotations

from fastapi import APIRouter, Depends, Response

from ...models.ingredient import IngredientEntry, IngredientIn, IngredientPatch
from ...services.recipe_book import RecipeBook
from ..deps import get_book

router = APIRouter(prefix="/ingredients", tags=["ingredients"])


@router.get("")
async def list_ingredients(book: RecipeBook = Depends(get_book)) -> list[IngredientEntry]:
    return await book.list_ingredients()


@router.post("", status_code=201)
async def create_ingredient(body: IngredientIn, book: RecipeBook = Depends(get_book)) -> IngredientEntry:
    return await book.create_ingredient(body.kind, body.amount)


@router.get("/{ingredient_id}")
async def get_ingredient(ingredient_id: str, book: RecipeBook = Depends(get_book)) -> IngredientEntry:
    return await book.get_ingredient(ingredient_id)


@router.put("/{ingredient_id}")
async def update_ingredient(
    ingredient_id: str,
    body: IngredientPatch,
    book: RecipeBook = Depends(get_book),
) -> IngredientEntry:
    """Change kind and/or amount; omitted fields keep their stored value."""
    return await book.update_ingredient(ingredient_id, kind=body.kind, amount=body.amount)


@router.delete("/{ingredient_id}", status_code=204)
async def delete_ingredient(ingredient_id: str, book: RecipeBook = Depends(get_book)) -> Response:
    await book.delete_ingredient(ingredient_id)
    return Response(status_code=204)
