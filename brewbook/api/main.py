from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from redis.asyncio import Redis

from .. import __version__
from ..config import settings
from ..db.connection import get_redis
from ..logging import configure_logging, get_logger, request_id_middleware
from ..services.recipe_book import build_recipe_book
from .errors import install_error_handlers
from .routes import export, health, ingredients, inventory, kinds, orders, recipes

_log = get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    # Register the default kinds so a fresh store can take recipes right away
    added = await app.state.book.catalog.bootstrap(settings.default_kinds())
    _log.info("startup", default_kinds_added=added)
    yield


def create_app(redis: Redis[str] | None = None) -> FastAPI:
    configure_logging()
    app = FastAPI(title="Brewbook", version=__version__, lifespan=lifespan)
    app.state.redis = redis if redis is not None else get_redis()
    app.state.book = build_recipe_book(app.state.redis)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.middleware("http")(request_id_middleware)
    install_error_handlers(app)

    app.include_router(health.router)
    app.include_router(kinds.router)
    app.include_router(ingredients.router)
    app.include_router(recipes.router)
    app.include_router(inventory.router)
    app.include_router(orders.router)
    app.include_router(export.router)

    return app


app = create_app()
