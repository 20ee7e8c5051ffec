from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from redis.asyncio import Redis

from ..db.catalog import IngredientCatalog
from ..db.connection import Keys
from ..db.ingredients import IngredientStore
from ..db.inventory import InventoryStore
from ..db.recipes import RecipeStore
from ..errors import InsufficientFunds, UnknownKind
from ..logging import get_logger
from ..models.ingredient import IngredientEntry
from ..models.recipe import EntryIn, OrderReceipt, Recipe

_log = get_logger()

EntrySpec = EntryIn | tuple[str, int]


@dataclass
class RecipeBook:
    """Entry point for the request layer.

    Validates through the recipe aggregate and the catalog, persists through
    the stores and raises only ``brewbook.errors`` types.
    """

    catalog: IngredientCatalog
    ingredients: IngredientStore
    recipes: RecipeStore
    inventory: InventoryStore

    # kinds

    async def register_kind(self, name: str) -> str:
        return await self.catalog.register_kind(name)

    async def list_kinds(self) -> list[str]:
        return await self.catalog.list_kinds()

    # standalone ingredients

    async def create_ingredient(self, kind: str, amount: int) -> IngredientEntry:
        return await self.ingredients.create(kind, amount)

    async def get_ingredient(self, ingredient_id: str) -> IngredientEntry:
        return await self.ingredients.get(ingredient_id)

    async def update_ingredient(
        self, ingredient_id: str, kind: str | None = None, amount: int | None = None
    ) -> IngredientEntry:
        return await self.ingredients.update(ingredient_id, kind=kind, amount=amount)

    async def delete_ingredient(self, ingredient_id: str) -> None:
        await self.ingredients.delete(ingredient_id)

    async def list_ingredients(self) -> list[IngredientEntry]:
        return await self.ingredients.list_all()

    # recipes

    async def create_recipe(self, name: str, price: int, entries: Iterable[EntrySpec] = ()) -> Recipe:
        recipe = Recipe.compose(name, price, entries)
        await self._require_kinds(recipe.kinds())
        return await self.recipes.create(recipe)

    async def get_recipe(self, recipe_id: str) -> Recipe:
        return await self.recipes.get(recipe_id)

    async def find_recipe(self, name: str) -> Recipe:
        return await self.recipes.find_by_name(name)

    async def list_recipes(self) -> list[Recipe]:
        return await self.recipes.list_all()

    async def update_recipe(
        self, recipe_id: str, name: str, price: int, entries: Iterable[EntrySpec]
    ) -> Recipe:
        target = Recipe.compose(name, price, entries)
        await self._require_kinds(target.kinds())
        return await self.recipes.update(recipe_id, target.name, target.price, target.entries)

    async def delete_recipe(self, recipe_id: str) -> None:
        await self.recipes.delete(recipe_id)

    async def add_recipe_entry(self, recipe_id: str, kind: str, amount: int) -> Recipe:
        await self._require_kinds([kind])
        return await self.recipes.add_entry(recipe_id, kind, amount)

    async def update_recipe_entry(self, recipe_id: str, entry_id: str, amount: int) -> Recipe:
        return await self.recipes.update_entry(recipe_id, entry_id, amount)

    async def remove_recipe_entry(self, recipe_id: str, entry_id: str) -> Recipe:
        return await self.recipes.remove_entry(recipe_id, entry_id)

    # inventory and orders

    async def get_inventory(self) -> dict[str, int]:
        return await self.inventory.get()

    async def add_inventory(self, kind: str, amount: int) -> int:
        return await self.inventory.add(kind, amount)

    async def make_beverage(self, name: str, paid: int) -> OrderReceipt:
        recipe = await self.recipes.find_by_name(name)
        assert recipe.id is not None
        if paid < recipe.price:
            raise InsufficientFunds(paid, recipe.price)
        await self.inventory.consume(recipe.requirements())
        receipt = OrderReceipt(
            recipe_id=recipe.id,
            recipe=recipe.name,
            price=recipe.price,
            paid=paid,
            change=paid - recipe.price,
        )
        _log.info("beverage_made", recipe=recipe.name, paid=paid, change=receipt.change)
        return receipt

    async def _require_kinds(self, kinds: Iterable[str]) -> None:
        # fail fast; the stores re-check inside their transactions
        for kind in kinds:
            if not await self.catalog.is_valid_kind(kind):
                raise UnknownKind(kind)


def build_recipe_book(redis: Redis[str], prefix: str | None = None) -> RecipeBook:
    keys = Keys(prefix)
    return RecipeBook(
        catalog=IngredientCatalog(redis, keys),
        ingredients=IngredientStore(redis, keys),
        recipes=RecipeStore(redis, keys),
        inventory=InventoryStore(redis, keys),
    )
