"""Exception handlers for FastAPI.

Centralized exception handling for the application.
Transforms various exception types into the unified
``{"error": {"code": ..., "message": ...}}`` envelope.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .base import AppError
from .domain import RateLimitError
from .schemas import ErrorResponse

logger = logging.getLogger(__name__)


def setup_exception_handlers(app: FastAPI) -> None:
    """Register exception handlers in FastAPI application.

    Registers handlers for:
    - Business errors (AppError)
    - Validation errors (RequestValidationError)
    - HTTP errors (StarletteHTTPException)
    - Unexpected exceptions (Exception)

    Args:
        app: FastAPI application instance
    """

    @app.exception_handler(AppError)
    async def app_exception_handler(request: Request, exc: AppError) -> JSONResponse:
        """Handle application business errors.

        Transforms AppError into JSON response with appropriate HTTP status.
        """
        if exc.status_code >= 500:
            logger.error(
                f"{exc.code} on {request.method} {request.url.path}: {exc.message}",
                extra={"details": exc.details},
            )

        headers = {"X-Error-Code": exc.code}
        if isinstance(exc, RateLimitError):
            headers["Retry-After"] = str(exc.retry_after)

        return JSONResponse(
            status_code=int(exc.status_code),
            content=exc.to_dict(),
            headers=headers,
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Handle Pydantic validation errors.

        Body and query validation failures are client errors (400) with a
        short summary of the first offending field.
        """
        errors = exc.errors()
        message = "Invalid request data"
        if errors:
            first = errors[0]
            location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
            message = f"{location}: {first.get('msg')}" if location else str(first.get("msg"))

        response = ErrorResponse.build(code="validation_error", message=message)
        return JSONResponse(
            status_code=400,
            content=response.model_dump(),
            headers={"X-Error-Code": "validation_error"},
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        """Handle standard HTTP exceptions from FastAPI/Starlette."""
        error_code = f"http_{exc.status_code}"
        response = ErrorResponse.build(code=error_code, message=str(exc.detail))
        return JSONResponse(
            status_code=exc.status_code,
            content=response.model_dump(),
            headers={"X-Error-Code": error_code},
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Handle all unhandled exceptions (last line of defense).

        Catches all unexpected errors and returns generic 500 response.
        Logs full traceback for investigation.
        """
        logger.exception("CRITICAL: Unhandled exception")

        response = ErrorResponse.build(
            code="internal_server_error",
            message="Internal server error",
        )
        return JSONResponse(
            status_code=500,
            content=response.model_dump(),
            headers={"X-Error-Code": "internal_server_error"},
        )
