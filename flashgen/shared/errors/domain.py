"""Standard domain error types.

Catalog of standard error types for use across the application.
"""

from http import HTTPStatus

from .base import AppError


class BadRequestError(AppError):
    """Bad request - malformed or invalid."""

    status_code = HTTPStatus.BAD_REQUEST


class ValidationError(BadRequestError):
    """Input validation error."""

    code = "validation_error"


class AuthenticationError(AppError):
    """Authentication required or failed."""

    status_code = HTTPStatus.UNAUTHORIZED
    code = "authentication_error"


class ForbiddenError(AppError):
    """Access denied - insufficient permissions."""

    status_code = HTTPStatus.FORBIDDEN


class NotFoundError(AppError):
    """Resource not found."""

    status_code = HTTPStatus.NOT_FOUND


class RateLimitError(AppError):
    """Rate limit exceeded."""

    status_code = HTTPStatus.TOO_MANY_REQUESTS
    code = "too_many_requests"

    def __init__(self, message: str | None = None, retry_after: int = 60) -> None:
        self.retry_after = retry_after
        super().__init__(message, details={"retry_after": retry_after})


class PersistenceFailedError(AppError):
    """Database operation failed."""

    status_code = HTTPStatus.INTERNAL_SERVER_ERROR
    code = "internal_server_error"
