from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from ..errors import BrewbookError, Conflict, NotFound, StorageFailure, ValidationFailure
from ..logging import get_logger

_log = get_logger()

# Most specific first; the first isinstance match wins.
STATUS_BY_ERROR: list[tuple[type[BrewbookError], int, str]] = [
    (NotFound, 404, "not_found"),
    (Conflict, 409, "conflict"),
    (ValidationFailure, 400, "validation"),
    (StorageFailure, 503, "storage_failure"),
]


def status_for(exc: BrewbookError) -> tuple[int, str]:
    for cls, status, category in STATUS_BY_ERROR:
        if isinstance(exc, cls):
            return status, category
    return 500, "error"


async def brewbook_error_handler(request: Request, exc: Exception) -> JSONResponse:
    assert isinstance(exc, BrewbookError)
    status, category = status_for(exc)
    if status >= 500:
        _log.error("request_failed", path=request.url.path, error=type(exc).__name__, detail=str(exc))
    else:
        _log.info("request_rejected", path=request.url.path, error=type(exc).__name__)
    return JSONResponse(
        status_code=status,
        content={"error": type(exc).__name__, "category": category, "detail": str(exc)},
    )


def install_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(BrewbookError, brewbook_error_handler)
