"""
Error handling: turn every failure into a ``{"message": ...}`` envelope.

Domain errors keep their own status and message. Request validation errors
become 422, anything unexpected becomes a logged 500.
"""

import logging
from fastapi import Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from core.exceptions import TalentflowError

logger = logging.getLogger(__name__)


def format_validation_errors(exc: RequestValidationError) -> dict[str, str]:
    """
    Flatten pydantic errors into ``{"field.path": "message"}``.

    The leading ``body`` / ``query`` location segment is dropped.
    """
    errors: dict[str, str] = {}
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ())]
        if location and location[0] in ("body", "query", "path"):
            location = location[1:]
        field = ".".join(location) or "request"
        errors.setdefault(field, error.get("msg", "Invalid value"))
    return errors


def setup_error_handlers(app):
    """
    Set up exception handlers for FastAPI application.

    Args:
        app: FastAPI application instance
    """

    @app.exception_handler(TalentflowError)
    async def domain_exception_handler(request: Request, exc: TalentflowError):
        """Handle NotFound / ValidationFailed / TransientWriteFailure."""
        logger.info(
            f"{type(exc).__name__}: {request.method} {request.url.path} - {exc.message}"
        )
        return JSONResponse(status_code=exc.status_code, content=exc.to_envelope())

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """Handle HTTP exceptions."""
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": str(exc.detail)},
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Handle validation errors."""
        errors = format_validation_errors(exc)
        logger.info(
            f"Validation error: {request.method} {request.url.path} - Errors: {errors}"
        )
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"message": "Request validation failed", "errors": errors},
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        """Handle all other exceptions."""
        logger.error(
            f"Unhandled exception: {request.method} {request.url.path} - "
            f"{type(exc).__name__}: {exc}",
            exc_info=True
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"message": "An unexpected error occurred"},
        )
