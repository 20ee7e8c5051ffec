from __future__ import annotations

from collections.abc import Iterable

from redis.asyncio import Redis

from ..errors import DuplicateKind, InvalidName
from ..logging import get_logger
from .connection import Keys, storage_errors

_log = get_logger()


class IngredientCatalog:
    """Registry of ingredient kinds, stored as one Redis set.

    Names are matched exactly (case-sensitive). SADD reports whether the
    member was new, so registration is race-free without a transaction.
    """

    def __init__(self, redis: Redis[str], keys: Keys | None = None) -> None:
        self.redis = redis
        self.keys = keys or Keys()

    async def is_valid_kind(self, name: str) -> bool:
        with storage_errors("catalog.is_valid_kind"):
            return bool(await self.redis.sismember(self.keys.kinds, name))

    async def register_kind(self, name: str) -> str:
        if not isinstance(name, str) or not name.strip():
            raise InvalidName(name)
        with storage_errors("catalog.register_kind"):
            added = await self.redis.sadd(self.keys.kinds, name)
        if not added:
            raise DuplicateKind(name)
        _log.info("kind_registered", kind=name)
        return name

    async def list_kinds(self) -> list[str]:
        with storage_errors("catalog.list_kinds"):
            members = await self.redis.smembers(self.keys.kinds)
        return sorted(members)

    async def bootstrap(self, kinds: Iterable[str]) -> int:
        names = [k for k in kinds if k and k.strip()]
        if not names:
            return 0
        with storage_errors("catalog.bootstrap"):
            added = int(await self.redis.sadd(self.keys.kinds, *names))
        if added:
            _log.info("kinds_bootstrapped", added=added)
        return added
