"""Shared errors package.

Centralized error handling and exception management.
"""

from .base import AppError
from .decorators import safe
from .domain import (
    AuthenticationError,
    BadRequestError,
    ForbiddenError,
    NotFoundError,
    PersistenceFailedError,
    RateLimitError,
    ValidationError,
)
from .handlers import setup_exception_handlers
from .mapping import ExceptionMapper
from .schemas import ErrorBody, ErrorDetail, ErrorResponse

__all__ = [
    # Base
    "AppError",
    # Domain errors
    "AuthenticationError",
    "BadRequestError",
    "ForbiddenError",
    "NotFoundError",
    "PersistenceFailedError",
    "RateLimitError",
    "ValidationError",
    # Mapping
    "ExceptionMapper",
    # Decorators
    "safe",
    # Handlers
    "setup_exception_handlers",
    # Schemas
    "ErrorBody",
    "ErrorDetail",
    "ErrorResponse",
]
