from __future__ import annotations

from collections.abc import Awaitable, Callable, Iterator
from contextlib import contextmanager
from functools import lru_cache
from typing import TypeVar

from redis.asyncio import Redis
from redis.asyncio.client import Pipeline
from redis.exceptions import RedisError, WatchError
from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_random

from ..config import settings
from ..errors import StorageFailure
from ..logging import get_logger

_log = get_logger()

T = TypeVar("T")


@lru_cache(maxsize=1)
def get_redis() -> Redis[str]:
    return Redis.from_url(settings.REDIS_URL, decode_responses=True)


def ns(namespace: str, key: str) -> str:
    return f"{namespace}:{key}"


class Keys:
    """Key layout for one prefix."""

    def __init__(self, prefix: str | None = None) -> None:
        self.prefix = prefix or settings.KEY_PREFIX
        self.kinds = ns(self.prefix, "kinds")
        self.ingredients = ns(self.prefix, "ingredients")
        self.owners = ns(self.prefix, "ingredient_owner")
        self.recipes = ns(self.prefix, "recipes")
        self.recipe_names = ns(self.prefix, "recipe_names")
        self.inventory = ns(self.prefix, "inventory")

    def ingredient(self, ingredient_id: str) -> str:
        return ns(self.prefix, f"ingredient:{ingredient_id}")

    def recipe(self, recipe_id: str) -> str:
        return ns(self.prefix, f"recipe:{recipe_id}")

    def recipe_links(self, recipe_id: str) -> str:
        return ns(self.prefix, f"recipe_links:{recipe_id}")


@contextmanager
def storage_errors(op: str) -> Iterator[None]:
    try:
        yield
    except RedisError as exc:
        _log.error("storage_failure", op=op, error=str(exc))
        raise StorageFailure(f"{op} failed: {exc}") from exc


def _retryer() -> AsyncRetrying:
    return AsyncRetrying(
        reraise=True,
        stop=stop_after_attempt(settings.TX_RETRY_MAX),
        wait=wait_random(0, settings.TX_RETRY_WAIT_MAX),
        retry=retry_if_exception_type(WatchError),
        before_sleep=lambda rs: _log.debug("tx_conflict_retry", attempt=rs.attempt_number),
    )


async def run_transaction(
    redis: Redis[str],
    body: Callable[[Pipeline], Awaitable[T]],
    *watches: str,
    op: str,
) -> T:
    """Run ``body`` inside WATCH/MULTI/EXEC and return its value.

    ``body`` reads through the pipeline while it is in immediate mode, raises a
    domain error to abort, then calls ``pipe.multi()`` and queues its writes.
    It may WATCH more keys before calling ``multi()``. When a watched key
    changes before EXEC the whole body is re-run with fresh reads.
    """
    try:
        async for attempt in _retryer():
            with attempt:
                async with redis.pipeline(transaction=True) as pipe:
                    await pipe.watch(*watches)
                    value = await body(pipe)
                    await pipe.execute()
                    return value
    except WatchError as exc:
        _log.warning("tx_conflict_exhausted", op=op, attempts=settings.TX_RETRY_MAX)
        raise StorageFailure(f"{op} kept conflicting with concurrent writers") from exc
    except RedisError as exc:
        _log.error("storage_failure", op=op, error=str(exc))
        raise StorageFailure(f"{op} failed: {exc}") from exc
    raise StorageFailure(f"{op} did not run")  # pragma: no cover


async def ping(redis: Redis[str]) -> bool:
    try:
        return bool(await redis.ping())
    except RedisError:
        return False
