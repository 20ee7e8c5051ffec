from __future__ import annotations

from pydantic import BaseModel, Field


class IngredientEntry(BaseModel):
    id: str | None = None
    kind: str
    amount: int
    recipe_id: str | None = None  # owning recipe, None when standalone


class IngredientIn(BaseModel):
    kind: str
    amount: int


class IngredientPatch(BaseModel):
    kind: str | None = None
    amount: int | None = None


class KindIn(BaseModel):
    name: str = Field(..., description="Ingredient kind, e.g. PUMPKIN_SPICE")


class InventoryIn(BaseModel):
    kind: str
    amount: int
