"""Error Handlers — map DailyGridError, request validation and crashes to JSON envelopes.

Invariants:
    - Every error body has the same {"error": {code, message, category, severity}} shape
    - DailyGridError log level follows its severity; grid_date/template_id from the
      error context are logged as structured fields
    - Request validation is 400 VALIDATION_ERROR; each detail names where the bad
      value came from (body/query/path) and, for attribute lists, which axis
    - The catch-all never leaks internal details

Design Decisions:
    - Kept out of main.py so the app module only wires things together
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from dailygrid.core.errors import DailyGridError, ErrorSeverity

logger = logging.getLogger(__name__)

_LOG_LEVELS = {
    ErrorSeverity.WARNING: logging.WARNING,
    ErrorSeverity.ERROR: logging.ERROR,
    ErrorSeverity.CRITICAL: logging.CRITICAL,
}

_AXES = {"row_attributes": "rows", "col_attributes": "columns"}


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DailyGridError, domain_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)


async def domain_error_handler(request: Request, exc: DailyGridError):
    # 4xx are caller mistakes: never louder than a warning
    level = _LOG_LEVELS.get(exc.severity, logging.ERROR)
    if exc.http_status < 500:
        level = min(level, logging.WARNING)
    logger.log(
        level,
        f"{exc.code} on {request.method} {request.url.path}: {exc.message}",
        extra={
            "error_code": exc.code,
            "path": request.url.path,
            "grid_date": exc.context.grid_date,
            "template_id": exc.context.template_id,
        },
    )
    return JSONResponse(status_code=exc.http_status, content=exc.to_response())


async def validation_error_handler(request: Request, exc: RequestValidationError):
    details = [_detail(e) for e in exc.errors()]
    logger.warning(
        f"Invalid request on {request.url.path}: "
        + "; ".join(f"{d['field']}: {d['message']}" for d in details),
        extra={"error_code": "VALIDATION_ERROR", "path": request.url.path},
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": {
                "code": "VALIDATION_ERROR",
                "message": "Invalid request data",
                "category": "validation",
                "severity": ErrorSeverity.ERROR.value,
                "details": details,
            },
        },
    )


async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error(
        f"Unhandled {type(exc).__name__} on {request.method} {request.url.path}",
        exc_info=exc,
        extra={"error_code": "INTERNAL_ERROR", "path": request.url.path},
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": {
                "code": "INTERNAL_ERROR",
                "message": "An unexpected error occurred",
                "category": "internal",
                "severity": ErrorSeverity.CRITICAL.value,
            },
        },
    )


def _detail(error: dict) -> dict:
    """One pydantic error → {location, field, message, type[, axis]}."""
    loc = [str(part) for part in error.get("loc", ())]
    location = loc[0] if loc and loc[0] in ("body", "query", "path", "header") else None
    field_path = loc[1:] if location else loc
    detail = {
        "location": location,
        "field": ".".join(field_path),
        "message": error.get("msg", ""),
        "type": error.get("type", ""),
    }
    if field_path and field_path[0] in _AXES:
        detail["axis"] = _AXES[field_path[0]]
    return detail
