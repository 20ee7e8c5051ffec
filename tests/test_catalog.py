from __future__ import annotations

import pytest

from brewbook.errors import DuplicateKind, InvalidName
from brewbook.services.recipe_book import RecipeBook


@pytest.mark.asyncio
async def test_register_and_validate_kind(book: RecipeBook) -> None:
    assert not await book.catalog.is_valid_kind("OAT_MILK")
    assert await book.register_kind("OAT_MILK") == "OAT_MILK"
    assert await book.catalog.is_valid_kind("OAT_MILK")
    assert "OAT_MILK" in await book.list_kinds()


@pytest.mark.asyncio
async def test_kind_names_are_case_sensitive(book: RecipeBook) -> None:
    assert await book.catalog.is_valid_kind("COFFEE")
    assert not await book.catalog.is_valid_kind("coffee")
    # a different spelling is a different kind
    await book.register_kind("coffee")
    assert await book.catalog.is_valid_kind("coffee")


@pytest.mark.asyncio
async def test_register_duplicate_kind_fails(book: RecipeBook) -> None:
    with pytest.raises(DuplicateKind):
        await book.register_kind("MILK")


@pytest.mark.asyncio
@pytest.mark.parametrize("name", ["", "   "])
async def test_register_blank_kind_fails(book: RecipeBook, name: str) -> None:
    with pytest.raises(InvalidName):
        await book.register_kind(name)


@pytest.mark.asyncio
async def test_bootstrap_is_idempotent(book: RecipeBook) -> None:
    assert await book.catalog.bootstrap(["COFFEE", "VANILLA", " "]) == 1
    assert await book.catalog.bootstrap(["COFFEE", "VANILLA"]) == 0
    kinds = await book.list_kinds()
    assert kinds == sorted(kinds)
    assert "VANILLA" in kinds
