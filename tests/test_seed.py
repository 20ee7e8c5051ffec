from __future__ import annotations

import pytest
from pydantic import ValidationError

from brewbook.services.recipe_book import RecipeBook
from brewbook.services.seed import DEFAULT_MENU, parse_menu, seed_menu


@pytest.mark.asyncio
async def test_seed_default_menu_twice(book: RecipeBook) -> None:
    menu = parse_menu(DEFAULT_MENU)
    first = await seed_menu(book, menu, stock={"COFFEE": 20})
    assert first["recipes_created"] == len(DEFAULT_MENU)
    assert first["recipes_skipped"] == 0

    second = await seed_menu(book, menu)
    assert second == {"kinds_registered": 0, "recipes_created": 0, "recipes_skipped": len(DEFAULT_MENU)}

    mocha = await book.find_recipe("Mocha")
    assert mocha.requirements() == {"COFFEE": 3, "MILK": 1, "SUGAR": 1, "CHOCOLATE": 2}
    assert (await book.get_inventory())["COFFEE"] == 20


@pytest.mark.asyncio
async def test_seed_registers_new_kinds(book: RecipeBook) -> None:
    menu = parse_menu([{"name": "Chai", "price": 4, "entries": [{"kind": "CHAI", "amount": 2}]}])
    summary = await seed_menu(book, menu)
    assert summary["kinds_registered"] == 1
    assert await book.catalog.is_valid_kind("CHAI")


def test_parse_menu_rejects_malformed() -> None:
    with pytest.raises(ValidationError):
        parse_menu([{"name": "No price"}])
