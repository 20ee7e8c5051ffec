from __future__ import annotations

from collections.abc import Callable, Iterable
from uuid import uuid4

from redis.asyncio import Redis
from redis.asyncio.client import Pipeline

from ..errors import DuplicateName, NotFound, UnknownKind
from ..logging import get_logger
from ..models.ingredient import IngredientEntry
from ..models.recipe import EntryIn, Recipe
from .connection import Keys, run_transaction, storage_errors
from .ingredients import entry_from_hash, queue_entry_write

_log = get_logger()


class RecipeStore:
    """Recipes and their owned entries.

    Each mutation is one MULTI/EXEC. Inside it entry rows are written before
    the link list references them, and links are dropped before the rows
    they point at.
    """

    def __init__(self, redis: Redis[str], keys: Keys | None = None) -> None:
        self.redis = redis
        self.keys = keys or Keys()

    async def _load(self, pipe: Pipeline, recipe_id: str) -> Recipe:
        """Read a recipe while watching every key it was built from."""
        rkey = self.keys.recipe(recipe_id)
        lkey = self.keys.recipe_links(recipe_id)
        await pipe.watch(rkey, lkey)
        head = await pipe.hgetall(rkey)
        if not head:
            raise NotFound("recipe", recipe_id)
        ids = await pipe.lrange(lkey, 0, -1)
        entries: list[IngredientEntry] = []
        if ids:
            entry_keys = [self.keys.ingredient(i) for i in ids]
            await pipe.watch(*entry_keys)
            for ek in entry_keys:
                data = await pipe.hgetall(ek)
                if data:
                    entries.append(entry_from_hash(data, recipe_id))
        return Recipe(id=recipe_id, name=head["name"], price=int(head["price"]), entries=entries)

    async def _check_kinds(self, pipe: Pipeline, kinds: Iterable[str]) -> None:
        for kind in kinds:
            if not await pipe.sismember(self.keys.kinds, kind):
                raise UnknownKind(kind)

    def _queue_links(self, pipe: Pipeline, recipe_id: str, entries: list[IngredientEntry]) -> None:
        lkey = self.keys.recipe_links(recipe_id)
        pipe.delete(lkey)
        if entries:
            pipe.rpush(lkey, *[e.id for e in entries])
            pipe.hset(self.keys.owners, mapping={e.id: recipe_id for e in entries})

    async def create(self, recipe: Recipe) -> Recipe:
        recipe.check_invariants()
        recipe_id = uuid4().hex
        entries = [
            IngredientEntry(id=uuid4().hex, kind=e.kind, amount=e.amount, recipe_id=recipe_id)
            for e in recipe.entries
        ]
        created = Recipe(id=recipe_id, name=recipe.name, price=recipe.price, entries=entries)

        async def _body(pipe: Pipeline) -> Recipe:
            if await pipe.hexists(self.keys.recipe_names, created.name):
                raise DuplicateName(created.name)
            await self._check_kinds(pipe, created.kinds())
            pipe.multi()
            for e in entries:
                queue_entry_write(pipe, self.keys, e)
            pipe.hset(
                self.keys.recipe(recipe_id),
                mapping={"id": recipe_id, "name": created.name, "price": created.price},
            )
            pipe.sadd(self.keys.recipes, recipe_id)
            pipe.hset(self.keys.recipe_names, created.name, recipe_id)
            self._queue_links(pipe, recipe_id, entries)
            return created

        result = await run_transaction(
            self.redis, _body, self.keys.recipe_names, self.keys.kinds, op="recipe.create"
        )
        _log.info("recipe_created", recipe_id=recipe_id, name=result.name, entries=len(entries))
        return result

    async def get(self, recipe_id: str) -> Recipe:
        async def _body(pipe: Pipeline) -> Recipe:
            recipe = await self._load(pipe, recipe_id)
            pipe.multi()
            return recipe

        return await run_transaction(self.redis, _body, self.keys.recipe(recipe_id), op="recipe.get")

    async def find_by_name(self, name: str) -> Recipe:
        async def _body(pipe: Pipeline) -> Recipe:
            recipe_id = await pipe.hget(self.keys.recipe_names, name)
            if recipe_id is None:
                raise NotFound("recipe", name)
            recipe = await self._load(pipe, recipe_id)
            pipe.multi()
            return recipe

        return await run_transaction(self.redis, _body, self.keys.recipe_names, op="recipe.find_by_name")

    async def update(
        self,
        recipe_id: str,
        name: str,
        price: int,
        entries: Iterable[EntryIn | IngredientEntry | tuple[str, int]],
    ) -> Recipe:
        """Replace name, price and entries of a stored recipe.

        Entries are matched by kind: a kind present before and after keeps its
        persisted id and takes the new amount, vanished kinds are deleted and
        new kinds get fresh rows.
        """
        target = Recipe.compose(
            name,
            price,
            [(e.kind, e.amount) if isinstance(e, (EntryIn, IngredientEntry)) else e for e in entries],
        )

        async def _body(pipe: Pipeline) -> Recipe:
            current = await self._load(pipe, recipe_id)
            holder = await pipe.hget(self.keys.recipe_names, target.name)
            if holder is not None and holder != recipe_id:
                raise DuplicateName(target.name)
            await self._check_kinds(pipe, target.kinds())
            return self._queue_replacement(pipe, current, target)

        result = await run_transaction(
            self.redis,
            _body,
            self.keys.recipe(recipe_id),
            self.keys.recipe_names,
            self.keys.kinds,
            op="recipe.update",
        )
        _log.info("recipe_updated", recipe_id=recipe_id, name=result.name, entries=len(result.entries))
        return result

    def _queue_replacement(self, pipe: Pipeline, current: Recipe, target: Recipe) -> Recipe:
        """Switch ``pipe`` to MULTI and queue the writes turning ``current`` into ``target``."""
        assert current.id is not None
        recipe_id = current.id
        previous = {e.kind: e for e in current.entries}
        wanted = set(target.kinds())
        kept: list[IngredientEntry] = []
        added: list[IngredientEntry] = []
        changed: list[IngredientEntry] = []
        for e in target.entries:
            prev = previous.get(e.kind)
            if prev is None:
                entry = IngredientEntry(id=uuid4().hex, kind=e.kind, amount=e.amount, recipe_id=recipe_id)
                added.append(entry)
            else:
                entry = prev.model_copy(update={"amount": e.amount})
                if prev.amount != e.amount:
                    changed.append(entry)
            kept.append(entry)
        removed = [e for e in current.entries if e.kind not in wanted]

        pipe.multi()
        for e in added:
            queue_entry_write(pipe, self.keys, e)
        for e in changed:
            pipe.hset(self.keys.ingredient(e.id), "amount", e.amount)
        self._queue_links(pipe, recipe_id, kept)
        if removed:
            removed_ids = [e.id for e in removed]
            pipe.hdel(self.keys.owners, *removed_ids)
            pipe.delete(*[self.keys.ingredient(i) for i in removed_ids])
            pipe.srem(self.keys.ingredients, *removed_ids)
        if current.name != target.name:
            pipe.hdel(self.keys.recipe_names, current.name)
            pipe.hset(self.keys.recipe_names, target.name, recipe_id)
        pipe.hset(self.keys.recipe(recipe_id), mapping={"name": target.name, "price": target.price})
        _log.debug(
            "recipe_entries_diff",
            recipe_id=recipe_id,
            added=len(added),
            changed=len(changed),
            removed=len(removed),
        )
        return Recipe(id=recipe_id, name=target.name, price=target.price, entries=kept)

    async def _edit(self, recipe_id: str, edit: Callable[[Recipe], object], op: str, *kinds: str) -> Recipe:
        """Apply an aggregate mutator to the stored recipe in one transaction.

        The recipe is loaded under WATCH, so a concurrent writer makes the
        edit re-run against the newer version instead of overwriting it.
        """

        async def _body(pipe: Pipeline) -> Recipe:
            current = await self._load(pipe, recipe_id)
            target = current.model_copy(deep=True)
            edit(target)
            await self._check_kinds(pipe, kinds)
            return self._queue_replacement(pipe, current, target)

        return await run_transaction(self.redis, _body, self.keys.recipe(recipe_id), self.keys.kinds, op=op)

    async def add_entry(self, recipe_id: str, kind: str, amount: int) -> Recipe:
        result = await self._edit(recipe_id, lambda r: r.add_entry(kind, amount), "recipe.add_entry", kind)
        _log.info("recipe_entry_added", recipe_id=recipe_id, kind=kind, amount=amount)
        return result

    async def update_entry(self, recipe_id: str, entry_id: str, amount: int) -> Recipe:
        result = await self._edit(recipe_id, lambda r: r.update_entry(entry_id, amount), "recipe.update_entry")
        _log.info("recipe_entry_updated", recipe_id=recipe_id, entry_id=entry_id, amount=amount)
        return result

    async def remove_entry(self, recipe_id: str, entry_id: str) -> Recipe:
        result = await self._edit(recipe_id, lambda r: r.remove_entry(entry_id), "recipe.remove_entry")
        _log.info("recipe_entry_removed", recipe_id=recipe_id, entry_id=entry_id)
        return result

    async def delete(self, recipe_id: str) -> Recipe:
        async def _body(pipe: Pipeline) -> Recipe:
            current = await self._load(pipe, recipe_id)
            ids = [e.id for e in current.entries]
            pipe.multi()
            pipe.delete(self.keys.recipe_links(recipe_id))
            if ids:
                pipe.hdel(self.keys.owners, *ids)
                pipe.delete(*[self.keys.ingredient(i) for i in ids])
                pipe.srem(self.keys.ingredients, *ids)
            pipe.delete(self.keys.recipe(recipe_id))
            pipe.srem(self.keys.recipes, recipe_id)
            pipe.hdel(self.keys.recipe_names, current.name)
            return current

        removed = await run_transaction(self.redis, _body, self.keys.recipe(recipe_id), op="recipe.delete")
        _log.info("recipe_deleted", recipe_id=recipe_id, name=removed.name, entries=len(removed.entries))
        return removed

    async def list_all(self) -> list[Recipe]:
        """Every recipe, sorted by name.

        Each recipe is read in its own snapshot transaction, so every recipe
        is internally consistent but the list as a whole is not one
        point-in-time view across recipes.
        """
        with storage_errors("recipe.list_all"):
            ids = await self.redis.smembers(self.keys.recipes)
        recipes: list[Recipe] = []
        for rid in ids:
            try:
                recipes.append(await self.get(rid))
            except NotFound:
                # deleted after SMEMBERS
                continue
        recipes.sort(key=lambda r: r.name)
        return recipes

    async def count(self) -> int:
        with storage_errors("recipe.count"):
            return int(await self.redis.scard(self.keys.recipes))
