from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import TypeAdapter

from ..errors import DuplicateKind, DuplicateName
from ..logging import get_logger
from ..models.recipe import RecipeIn
from .recipe_book import RecipeBook

_log = get_logger()

# The classic coffee-maker menu
DEFAULT_MENU: list[dict[str, Any]] = [
    {"name": "Coffee", "price": 50, "entries": [{"kind": "COFFEE", "amount": 3}, {"kind": "MILK", "amount": 1}, {"kind": "SUGAR", "amount": 1}]},
    {"name": "Latte", "price": 100, "entries": [{"kind": "COFFEE", "amount": 3}, {"kind": "MILK", "amount": 3}, {"kind": "SUGAR", "amount": 1}]},
    {"name": "Mocha", "price": 75, "entries": [{"kind": "COFFEE", "amount": 3}, {"kind": "MILK", "amount": 1}, {"kind": "SUGAR", "amount": 1}, {"kind": "CHOCOLATE", "amount": 2}]},
    {"name": "Hot Chocolate", "price": 60, "entries": [{"kind": "MILK", "amount": 2}, {"kind": "CHOCOLATE", "amount": 3}]},
]

_menu_adapter = TypeAdapter(list[RecipeIn])


def parse_menu(raw: Iterable[Mapping[str, Any]]) -> list[RecipeIn]:
    return _menu_adapter.validate_python(list(raw))


async def seed_menu(
    book: RecipeBook,
    menu: Iterable[RecipeIn],
    stock: Mapping[str, int] | None = None,
    progress: Any = None,
) -> dict[str, int]:
    """Load recipes (and optional starting stock) into an existing store.

    Kinds the menu mentions are registered on the fly. Recipes whose name is
    already taken are skipped, so running twice is harmless. ``progress`` is
    an optional wrapper such as ``tqdm`` applied to the recipe iterable.
    """
    recipes = list(menu)
    kinds = {e.kind for r in recipes for e in r.entries} | set(stock or {})
    registered = 0
    for kind in sorted(kinds):
        try:
            await book.register_kind(kind)
            registered += 1
        except DuplicateKind:
            pass

    created = skipped = 0
    for recipe in progress(recipes) if progress else recipes:
        try:
            await book.create_recipe(recipe.name, recipe.price, recipe.entries)
            created += 1
        except DuplicateName:
            skipped += 1

    for kind, amount in (stock or {}).items():
        await book.add_inventory(kind, amount)

    summary = {"kinds_registered": registered, "recipes_created": created, "recipes_skipped": skipped}
    _log.info("menu_seeded", **summary)
    return summary
