"""Exception handlers producing the structured error body."""

import logging

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ..exceptions import ErrorCode, TabloomException

logger = logging.getLogger(__name__)


async def tabloom_exception_handler(request: Request, exc: TabloomException) -> JSONResponse:
    """Render a ``TabloomException`` as ``{"error", "message", "details"}``.

    Client errors log at warning, server errors at error.
    """
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(
        f"TabloomException: {exc.error_code.value}",
        extra={
            "error_code": exc.error_code.value,
            "path": request.url.path,
            "method": request.method,
            "details": exc.details,
            "status_code": exc.status_code,
        },
    )
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


def _field_name(loc) -> str:
    # ("body", "parentId") -> "parentId"; ("query", "limit") -> "limit"
    parts = [str(p) for p in loc if p not in ("body", "query", "path")]
    return ".".join(parts)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed bodies and query parameters are 400 VALIDATION_ERROR."""
    errors = exc.errors()
    first = errors[0] if errors else {}
    message = str(first.get("msg", "Invalid request"))
    if message.startswith("Value error, "):
        message = message[len("Value error, "):]

    details = {}
    field = _field_name(first.get("loc", ()))
    if field:
        details["field"] = field

    logger.warning(
        "Request validation failed",
        extra={"path": request.url.path, "method": request.method, "details": details},
    )
    return JSONResponse(
        status_code=400,
        content={
            "error": ErrorCode.VALIDATION_ERROR.value,
            "message": message,
            "details": details,
        },
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last resort: log the traceback, never leak it."""
    logger.exception(
        f"Unhandled exception: {type(exc).__name__}",
        extra={"path": request.url.path, "method": request.method},
    )
    return JSONResponse(
        status_code=500,
        content={
            "error": ErrorCode.INTERNAL_ERROR.value,
            "message": "An unexpected error occurred",
            "details": {},
        },
    )
