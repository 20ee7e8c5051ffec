from __future__ import annotations

from datetime import datetime, timezone
from io import BytesIO

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse

from ...exporters.excel import build_workbook
from ...services.recipe_book import RecipeBook
from ..deps import get_book

router = APIRouter(prefix="/export", tags=["export"])


@router.get("/excel")
async def export_excel(book: RecipeBook = Depends(get_book)) -> StreamingResponse:
    """Download recipes, ingredients and inventory as one workbook."""
    recipes = await book.list_recipes()
    ingredients = await book.list_ingredients()
    inventory = await book.get_inventory()

    wb = build_workbook(recipes=recipes, ingredients=ingredients, inventory=inventory)
    buf = BytesIO()
    wb.save(buf)
    buf.seek(0)
    stamp = datetime.now(timezone.utc).strftime("%Y%m%d")
    headers = {"Content-Disposition": f"attachment; filename=brewbook_{stamp}.xlsx"}
    return StreamingResponse(
        buf,
        media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        headers=headers,
    )
