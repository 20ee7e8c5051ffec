from __future__ import annotations

from redis.asyncio import Redis
from redis.asyncio.client import Pipeline

from ..errors import InsufficientInventory, UnknownKind
from ..logging import get_logger
from ..models.recipe import check_amount
from .connection import Keys, run_transaction, storage_errors

_log = get_logger()


class InventoryStore:
    """Units on hand per ingredient kind (one Redis hash)."""

    def __init__(self, redis: Redis[str], keys: Keys | None = None) -> None:
        self.redis = redis
        self.keys = keys or Keys()

    async def get(self) -> dict[str, int]:
        with storage_errors("inventory.get"):
            raw = await self.redis.hgetall(self.keys.inventory)
        return {k: int(v) for k, v in sorted(raw.items())}

    async def add(self, kind: str, amount: int) -> int:
        """Add stock for ``kind`` and return the new level."""
        check_amount(amount)

        async def _body(pipe: Pipeline) -> int:
            if not await pipe.sismember(self.keys.kinds, kind):
                raise UnknownKind(kind)
            level = int(await pipe.hget(self.keys.inventory, kind) or 0) + amount
            pipe.multi()
            pipe.hset(self.keys.inventory, kind, level)
            return level

        level = await run_transaction(
            self.redis, _body, self.keys.kinds, self.keys.inventory, op="inventory.add"
        )
        _log.info("inventory_added", kind=kind, amount=amount, level=level)
        return level

    async def consume(self, requirements: dict[str, int]) -> dict[str, int]:
        """Deduct every requirement or nothing; returns the remaining levels."""
        for amount in requirements.values():
            check_amount(amount)

        async def _body(pipe: Pipeline) -> dict[str, int]:
            levels = {k: int(v) for k, v in (await pipe.hgetall(self.keys.inventory)).items()}
            shortages = {
                kind: need - levels.get(kind, 0)
                for kind, need in requirements.items()
                if levels.get(kind, 0) < need
            }
            if shortages:
                raise InsufficientInventory(shortages)
            remaining = dict(levels)
            for kind, need in requirements.items():
                remaining[kind] = levels.get(kind, 0) - need
            pipe.multi()
            if requirements:
                pipe.hset(self.keys.inventory, mapping={k: remaining[k] for k in requirements})
            return remaining

        remaining = await run_transaction(self.redis, _body, self.keys.inventory, op="inventory.consume")
        _log.info("inventory_consumed", kinds=sorted(requirements))
        return remaining
