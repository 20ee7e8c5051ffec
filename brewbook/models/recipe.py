from __future__ import annotations

from collections.abc import Iterable

from pydantic import BaseModel, Field

from ..errors import (
    DuplicateIngredientKind,
    EntryNotFound,
    InvalidAmount,
    InvalidName,
    InvalidPrice,
)
from .ingredient import IngredientEntry


def check_amount(amount: object) -> int:
    if isinstance(amount, bool) or not isinstance(amount, int) or amount < 0:
        raise InvalidAmount(amount)
    return amount


class EntryIn(BaseModel):
    kind: str
    amount: int


class EntryAmountIn(BaseModel):
    amount: int


class Recipe(BaseModel):
    """A named, priced set of ingredient entries, at most one per kind.

    The mutators below enforce the invariants in memory; the stores call
    ``check_invariants()`` again before anything is written.
    """

    id: str | None = None
    name: str
    price: int = 0
    entries: list[IngredientEntry] = Field(default_factory=list)

    @classmethod
    def compose(cls, name: str, price: int, entries: Iterable[EntryIn | tuple[str, int]] = ()) -> Recipe:
        recipe = cls.model_construct(id=None, name="", price=0, entries=[])
        recipe.rename(name)
        recipe.set_price(price)
        for e in entries:
            kind, amount = (e.kind, e.amount) if isinstance(e, EntryIn) else e
            recipe.add_entry(kind, amount)
        return recipe

    def entry_of_kind(self, kind: str) -> IngredientEntry | None:
        return next((e for e in self.entries if e.kind == kind), None)

    def add_entry(self, kind: str, amount: int) -> IngredientEntry:
        check_amount(amount)
        if self.entry_of_kind(kind) is not None:
            raise DuplicateIngredientKind(kind)
        entry = IngredientEntry(kind=kind, amount=amount, recipe_id=self.id)
        self.entries.append(entry)
        return entry

    def remove_entry(self, entry_id: str) -> IngredientEntry:
        for i, e in enumerate(self.entries):
            if e.id is not None and e.id == entry_id:
                return self.entries.pop(i)
        raise EntryNotFound(entry_id)

    def update_entry(self, entry_id: str, amount: int) -> IngredientEntry:
        check_amount(amount)
        for e in self.entries:
            if e.id is not None and e.id == entry_id:
                e.amount = amount
                return e
        raise EntryNotFound(entry_id)

    def set_price(self, price: int) -> None:
        if isinstance(price, bool) or not isinstance(price, int) or price < 0:
            raise InvalidPrice(price)
        self.price = price

    def rename(self, name: str) -> None:
        if not isinstance(name, str) or not name.strip():
            raise InvalidName(name)
        self.name = name

    def check_invariants(self) -> None:
        self.rename(self.name)
        self.set_price(self.price)
        seen: set[str] = set()
        for e in self.entries:
            check_amount(e.amount)
            if e.kind in seen:
                raise DuplicateIngredientKind(e.kind)
            seen.add(e.kind)

    def kinds(self) -> list[str]:
        return [e.kind for e in self.entries]

    def requirements(self) -> dict[str, int]:
        return {e.kind: e.amount for e in self.entries}


class RecipeIn(BaseModel):
    name: str
    price: int
    entries: list[EntryIn] = Field(default_factory=list)


class OrderIn(BaseModel):
    recipe: str = Field(..., description="Recipe name")
    paid: int


class OrderReceipt(BaseModel):
    recipe_id: str
    recipe: str
    price: int
    paid: int
    change: int
