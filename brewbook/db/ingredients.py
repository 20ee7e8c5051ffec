from __future__ import annotations

from uuid import uuid4

from redis.asyncio import Redis
from redis.asyncio.client import Pipeline

from ..errors import DuplicateIngredientKind, NotFound, UnknownKind
from ..logging import get_logger
from ..models.ingredient import IngredientEntry
from ..models.recipe import check_amount
from .connection import Keys, run_transaction, storage_errors

_log = get_logger()


def entry_from_hash(data: dict[str, str], owner: str | None = None) -> IngredientEntry:
    return IngredientEntry(
        id=data["id"],
        kind=data["kind"],
        amount=int(data["amount"]),
        recipe_id=owner or None,
    )


def queue_entry_write(pipe: Pipeline, keys: Keys, entry: IngredientEntry) -> None:
    """Queue the ingredient row and its index membership (inside MULTI)."""
    assert entry.id is not None
    pipe.hset(keys.ingredient(entry.id), mapping={"id": entry.id, "kind": entry.kind, "amount": entry.amount})
    pipe.sadd(keys.ingredients, entry.id)


class IngredientStore:
    """Ingredient rows, standalone or owned by a recipe.

    Ownership lives in the ``ingredient_owner`` hash and the owning recipe's
    link list; both are maintained here whenever a single entry is deleted.
    """

    def __init__(self, redis: Redis[str], keys: Keys | None = None) -> None:
        self.redis = redis
        self.keys = keys or Keys()

    async def create(self, kind: str, amount: int) -> IngredientEntry:
        check_amount(amount)
        entry = IngredientEntry(id=uuid4().hex, kind=kind, amount=amount)

        async def _body(pipe: Pipeline) -> IngredientEntry:
            if not await pipe.sismember(self.keys.kinds, kind):
                raise UnknownKind(kind)
            pipe.multi()
            queue_entry_write(pipe, self.keys, entry)
            return entry

        created = await run_transaction(self.redis, _body, self.keys.kinds, op="ingredient.create")
        _log.info("ingredient_created", ingredient_id=created.id, kind=kind, amount=amount)
        return created

    async def get(self, ingredient_id: str) -> IngredientEntry:
        with storage_errors("ingredient.get"):
            async with self.redis.pipeline(transaction=True) as pipe:
                pipe.hgetall(self.keys.ingredient(ingredient_id))
                pipe.hget(self.keys.owners, ingredient_id)
                data, owner = await pipe.execute()
        if not data:
            raise NotFound("ingredient", ingredient_id)
        return entry_from_hash(data, owner)

    async def update(
        self,
        ingredient_id: str,
        kind: str | None = None,
        amount: int | None = None,
    ) -> IngredientEntry:
        if amount is not None:
            check_amount(amount)
        key = self.keys.ingredient(ingredient_id)

        async def _body(pipe: Pipeline) -> IngredientEntry:
            data = await pipe.hgetall(key)
            if not data:
                raise NotFound("ingredient", ingredient_id)
            owner = await pipe.hget(self.keys.owners, ingredient_id)
            current = entry_from_hash(data, owner)
            new_kind = current.kind if kind is None else kind
            new_amount = current.amount if amount is None else amount
            if new_kind != current.kind:
                if not await pipe.sismember(self.keys.kinds, new_kind):
                    raise UnknownKind(new_kind)
                if owner:
                    await self._check_sibling_kinds(pipe, owner, ingredient_id, new_kind)
            pipe.multi()
            pipe.hset(key, mapping={"kind": new_kind, "amount": new_amount})
            return current.model_copy(update={"kind": new_kind, "amount": new_amount})

        updated = await run_transaction(
            self.redis, _body, key, self.keys.owners, self.keys.kinds, op="ingredient.update"
        )
        _log.info("ingredient_updated", ingredient_id=ingredient_id, kind=updated.kind, amount=updated.amount)
        return updated

    async def _check_sibling_kinds(self, pipe: Pipeline, recipe_id: str, ingredient_id: str, kind: str) -> None:
        links = self.keys.recipe_links(recipe_id)
        await pipe.watch(links)
        siblings = [i for i in await pipe.lrange(links, 0, -1) if i != ingredient_id]
        if not siblings:
            return
        sibling_keys = [self.keys.ingredient(i) for i in siblings]
        await pipe.watch(*sibling_keys)
        for sk in sibling_keys:
            if await pipe.hget(sk, "kind") == kind:
                raise DuplicateIngredientKind(kind)

    async def delete(self, ingredient_id: str) -> None:
        key = self.keys.ingredient(ingredient_id)

        async def _body(pipe: Pipeline) -> str | None:
            if not await pipe.exists(key):
                raise NotFound("ingredient", ingredient_id)
            owner = await pipe.hget(self.keys.owners, ingredient_id)
            pipe.multi()
            # unlink before the row goes away
            if owner:
                pipe.lrem(self.keys.recipe_links(owner), 0, ingredient_id)
                pipe.hdel(self.keys.owners, ingredient_id)
            pipe.delete(key)
            pipe.srem(self.keys.ingredients, ingredient_id)
            return owner

        owner = await run_transaction(self.redis, _body, key, self.keys.owners, op="ingredient.delete")
        _log.info("ingredient_deleted", ingredient_id=ingredient_id, recipe_id=owner)

    async def list_all(self) -> list[IngredientEntry]:
        with storage_errors("ingredient.list_all"):
            ids = sorted(await self.redis.smembers(self.keys.ingredients))
            if not ids:
                return []
            async with self.redis.pipeline(transaction=True) as pipe:
                for iid in ids:
                    pipe.hgetall(self.keys.ingredient(iid))
                pipe.hgetall(self.keys.owners)
                *rows, owners = await pipe.execute()
        # rows deleted between SMEMBERS and EXEC come back empty
        return [entry_from_hash(row, owners.get(row["id"])) for row in rows if row]

    async def count(self) -> int:
        with storage_errors("ingredient.count"):
            return int(await self.redis.scard(self.keys.ingredients))
