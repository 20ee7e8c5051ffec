from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Response

from ...models.recipe import EntryAmountIn, EntryIn, Recipe, RecipeIn
from ...services.recipe_book import RecipeBook
from ..deps import get_book

router = APIRouter(prefix="/recipes", tags=["recipes"])


@router.get("")
async def list_recipes(
    name: str | None = Query(None, description="Exact recipe name"),
    book: RecipeBook = Depends(get_book),
) -> list[Recipe]:
    """List every recipe, or only the one called ``name``."""
    if name is not None:
        return [await book.find_recipe(name)]
    return await book.list_recipes()


@router.post("", status_code=201)
async def create_recipe(body: RecipeIn, book: RecipeBook = Depends(get_book)) -> Recipe:
    return await book.create_recipe(body.name, body.price, body.entries)


@router.get("/{recipe_id}")
async def get_recipe(recipe_id: str, book: RecipeBook = Depends(get_book)) -> Recipe:
    return await book.get_recipe(recipe_id)


@router.put("/{recipe_id}")
async def update_recipe(recipe_id: str, body: RecipeIn, book: RecipeBook = Depends(get_book)) -> Recipe:
    """Full replace of name, price and entries."""
    return await book.update_recipe(recipe_id, body.name, body.price, body.entries)


@router.delete("/{recipe_id}", status_code=204)
async def delete_recipe(recipe_id: str, book: RecipeBook = Depends(get_book)) -> Response:
    await book.delete_recipe(recipe_id)
    return Response(status_code=204)


@router.post("/{recipe_id}/entries", status_code=201)
async def add_entry(recipe_id: str, body: EntryIn, book: RecipeBook = Depends(get_book)) -> Recipe:
    return await book.add_recipe_entry(recipe_id, body.kind, body.amount)


@router.put("/{recipe_id}/entries/{entry_id}")
async def update_entry(
    recipe_id: str,
    entry_id: str,
    body: EntryAmountIn,
    book: RecipeBook = Depends(get_book),
) -> Recipe:
    return await book.update_recipe_entry(recipe_id, entry_id, body.amount)


@router.delete("/{recipe_id}/entries/{entry_id}")
async def remove_entry(recipe_id: str, entry_id: str, book: RecipeBook = Depends(get_book)) -> Recipe:
    return await book.remove_recipe_entry(recipe_id, entry_id)
