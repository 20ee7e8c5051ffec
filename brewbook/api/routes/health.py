from __future__ import annotations

from fastapi import APIRouter, Request

from ... import __version__
from ...db.connection import ping

router = APIRouter()


@router.get("/healthz")
async def healthz(request: Request) -> dict[str, object]:
    redis_ok = await ping(request.app.state.redis)
    return {"status": "ok", "version": __version__, "redis": redis_ok}
