"""
FastAPI exception handlers.

WHY: Every failure leaves the API in the same envelope
({"error", "message", "status_code", "details"}) so the admin UI can show
the message without caring which layer raised it.
"""

import logging

from fastapi import Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import DBAPIError, IntegrityError, OperationalError
from starlette.exceptions import HTTPException as StarletteHTTPException

from infraworks.core.exceptions import AppException

logger = logging.getLogger(__name__)


def _envelope(error: str, message: str, status_code: int, details=None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "error": error,
            "message": message,
            "status_code": status_code,
            "details": details,
        },
    )


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """
    Handle AppException and its subclasses.

    Args:
        request: The FastAPI request object
        exc: The custom exception instance

    Returns:
        JSONResponse with the exception's status code and filtered context
    """
    if exc.status_code >= 500:
        logger.warning("%s on %s: %s", exc.__class__.__name__, request.url.path, exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict(),
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """
    Handle Pydantic request validation errors.

    WHY: Field-level messages ("progress: Input should be less than or equal
    to 100") let the form highlight the offending input.
    """
    errors = []
    for error in exc.errors():
        errors.append(
            {
                "field": ".".join(str(loc) for loc in error["loc"]),
                "message": error["msg"],
                "type": error["type"],
            }
        )

    return _envelope("ValidationError", "Request validation failed", 400, {"errors": errors})


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """
    Handle Starlette HTTP exceptions (unknown routes, wrong methods).
    """
    return _envelope("HTTPException", exc.detail, exc.status_code)


async def integrity_exception_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    """Map constraint violations (duplicate ids, racing inserts) to 409."""
    logger.warning(
        "Constraint violation on %s %s: %s", request.method, request.url.path, exc.orig
    )
    return _envelope("ResourceAlreadyExistsError", "Resource already exists", 409)


async def database_exception_handler(request: Request, exc: DBAPIError) -> JSONResponse:
    """
    Map driver-level failures to 503 BackendUnavailable.

    WHY: A lost connection or lock timeout is transient. The caller should
    retry, so it must not look like a bug (500) in the UI.
    """
    logger.error(
        "Document store failure on %s %s: %s",
        request.method,
        request.url.path,
        exc.__class__.__name__,
        exc_info=exc,
    )
    return _envelope("BackendUnavailableError", "Document store unavailable", 503)


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Catch-all handler for unexpected exceptions.

    WHY: Logs the full traceback but returns a generic message so internals
    do not leak to the browser.
    """
    logger.exception("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return _envelope("InternalServerError", "An unexpected error occurred", 500)


def register_exception_handlers(app) -> None:
    """Attach all handlers to a FastAPI app."""
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(IntegrityError, integrity_exception_handler)
    app.add_exception_handler(OperationalError, database_exception_handler)
    app.add_exception_handler(DBAPIError, database_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)
