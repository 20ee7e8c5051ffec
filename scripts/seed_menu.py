from __future__ import annotations

import argparse
import asyncio
import json
from pathlib import Path

from tqdm import tqdm

from brewbook.db.connection import get_redis
from brewbook.services.recipe_book import build_recipe_book
from brewbook.services.seed import DEFAULT_MENU, parse_menu, seed_menu


async def main() -> None:
    ap = argparse.ArgumentParser(description="Load a recipe menu into Redis")
    ap.add_argument("--menu", help="JSON file with a list of {name, price, entries}; default built-in menu")
    ap.add_argument("--stock", type=int, default=0, help="Starting units for every kind on the menu")
    ap.add_argument("--prefix", default=None, help="Key prefix (default KEY_PREFIX)")
    args = ap.parse_args()

    if args.menu:
        with open(Path(args.menu), "r", encoding="utf-8") as f:
            raw = json.load(f)
    else:
        raw = DEFAULT_MENU
    menu = parse_menu(raw)

    stock: dict[str, int] = {}
    if args.stock > 0:
        stock = {e.kind: args.stock for r in menu for e in r.entries}

    book = build_recipe_book(get_redis(), prefix=args.prefix)
    summary = await seed_menu(book, menu, stock=stock, progress=lambda it: tqdm(it, desc="Recipes"))
    print(
        f"Registered {summary['kinds_registered']} kinds, created {summary['recipes_created']} recipes"
        f" ({summary['recipes_skipped']} already present)"
    )


if __name__ == "__main__":
    asyncio.run(main())
