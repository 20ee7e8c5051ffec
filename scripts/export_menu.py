from __future__ import annotations

import argparse
import asyncio
import json
from pathlib import Path

from brewbook.db.connection import get_redis
from brewbook.exporters.excel import build_workbook
from brewbook.services.recipe_book import build_recipe_book


async def main() -> None:
    ap = argparse.ArgumentParser(description="Export recipes, ingredients and inventory from Redis")
    ap.add_argument("--format", choices=["json", "xlsx"], default="xlsx")
    ap.add_argument("--out", default="data/brewbook_menu.xlsx")
    ap.add_argument("--prefix", default=None, help="Key prefix (default KEY_PREFIX)")
    args = ap.parse_args()

    book = build_recipe_book(get_redis(), prefix=args.prefix)
    recipes = await book.list_recipes()
    ingredients = await book.list_ingredients()
    inventory = await book.get_inventory()
    Path(args.out).parent.mkdir(parents=True, exist_ok=True)

    if args.format == "xlsx":
        wb = build_workbook(recipes=recipes, ingredients=ingredients, inventory=inventory)
        wb.save(args.out)
    else:
        with open(args.out, "w", encoding="utf-8") as f:
            json.dump(
                {
                    "recipes": [r.model_dump() for r in recipes],
                    "ingredients": [i.model_dump() for i in ingredients],
                    "inventory": inventory,
                },
                f,
                ensure_ascii=False,
                indent=2,
            )
    print(f"Wrote {args.format.upper()}: {args.out} ({len(recipes)} recipes)")


if __name__ == "__main__":
    asyncio.run(main())
