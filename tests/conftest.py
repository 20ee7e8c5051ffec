from __future__ import annotations

from collections.abc import AsyncIterator, Iterator

import pytest
from fakeredis import FakeServer, aioredis
from fastapi.testclient import TestClient

from brewbook.api.main import create_app
from brewbook.services.recipe_book import RecipeBook, build_recipe_book

DEFAULT_KINDS = ["COFFEE", "MILK", "SUGAR", "CHOCOLATE", "PUMPKIN_SPICE"]


def _fake_redis() -> aioredis.FakeRedis:
    # A fresh server per test keeps keyspaces apart
    return aioredis.FakeRedis(server=FakeServer(), decode_responses=True)


@pytest.fixture()
async def redis() -> AsyncIterator[aioredis.FakeRedis]:
    r = _fake_redis()
    yield r
    await r.aclose()


@pytest.fixture()
async def book(redis: aioredis.FakeRedis) -> RecipeBook:
    b = build_recipe_book(redis, prefix="test")
    await b.catalog.bootstrap(DEFAULT_KINDS)
    return b


@pytest.fixture()
def client() -> Iterator[TestClient]:
    app = create_app(redis=_fake_redis())
    with TestClient(app) as c:
        yield c
