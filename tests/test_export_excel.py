from __future__ import annotations

from brewbook.exporters.excel import build_workbook
from brewbook.models.ingredient import IngredientEntry
from brewbook.models.recipe import Recipe


def test_build_workbook_sheets() -> None:
    entries = [
        IngredientEntry(id="e1", kind="COFFEE", amount=2, recipe_id="r1"),
        IngredientEntry(id="e2", kind="CHOCOLATE", amount=1, recipe_id="r1"),
    ]
    recipe = Recipe(id="r1", name="Mocha", price=5, entries=entries)
    loose = IngredientEntry(id="e3", kind="SUGAR", amount=9)

    wb = build_workbook(recipes=[recipe], ingredients=[*entries, loose], inventory={"MILK": 3, "COFFEE": 8})

    assert wb.sheetnames == ["Recipes", "Ingredients", "Inventory"]
    recipes = list(wb["Recipes"].values)
    assert recipes[0] == ("recipe_id", "name", "price", "entries")
    assert recipes[1] == ("r1", "Mocha", 5, "COFFEE=2, CHOCOLATE=1")

    ingredients = list(wb["Ingredients"].values)
    assert len(ingredients) == 4
    assert ingredients[3] == ("e3", "SUGAR", 9, None)

    inventory = list(wb["Inventory"].values)
    assert inventory[1:] == [("COFFEE", 8), ("MILK", 3)]
    assert wb["Recipes"].freeze_panes == "A2"
    assert wb["Recipes"]["A1"].font.bold
