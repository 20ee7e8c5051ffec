from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import datetime, timezone
from typing import Any, cast

from openpyxl import Workbook
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from ..models.ingredient import IngredientEntry
from ..models.recipe import Recipe


def _auto_fit(ws: Worksheet) -> None:
    widths: dict[int, int] = {}
    for row in ws.rows:
        for cell in row:
            value = str(cell.value) if cell.value is not None else ""
            col_idx = int(getattr(cell, "col_idx", getattr(cell, "column", 0)))
            widths[col_idx] = max(widths.get(col_idx, 0), len(value) + 2)
    for col, width in widths.items():
        ws.column_dimensions[get_column_letter(col)].width = min(60, width)


def _fill(ws: Worksheet, headers: list[str], rows: Iterable[list[Any]]) -> None:
    ws.append(headers)
    for h in ws[1]:
        h.font = Font(bold=True)
    for row in rows:
        ws.append(row)
    ws.auto_filter.ref = ws.dimensions
    ws.freeze_panes = "A2"
    _auto_fit(ws)


def build_workbook(
    recipes: Iterable[Recipe],
    ingredients: Iterable[IngredientEntry],
    inventory: Mapping[str, int],
) -> Workbook:
    wb = Workbook()
    ws_recipes = cast(Worksheet, wb.active)
    ws_recipes.title = "Recipes"
    ws_ingredients = cast(Worksheet, wb.create_sheet("Ingredients"))
    ws_inventory = cast(Worksheet, wb.create_sheet("Inventory"))

    # One row per recipe, entries flattened as KIND=amount
    _fill(
        ws_recipes,
        ["recipe_id", "name", "price", "entries"],
        (
            [r.id, r.name, r.price, ", ".join(f"{e.kind}={e.amount}" for e in r.entries)]
            for r in recipes
        ),
    )
    _fill(
        ws_ingredients,
        ["ingredient_id", "kind", "amount", "recipe_id"],
        ([i.id, i.kind, i.amount, i.recipe_id] for i in ingredients),
    )
    _fill(
        ws_inventory,
        ["kind", "units"],
        ([kind, units] for kind, units in sorted(inventory.items())),
    )

    ts = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M UTC")
    for ws in (ws_recipes, ws_ingredients, ws_inventory):
        ws.oddFooter.center.text = f"Exported {ts}"  # type: ignore[union-attr]

    return wb
