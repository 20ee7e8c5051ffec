from __future__ import annotations

from fastapi import Request

from ..services.recipe_book import RecipeBook


def get_book(request: Request) -> RecipeBook:
    """The facade built by ``create_app`` for this application."""
    return request.app.state.book  # type: ignore[no-any-return]
