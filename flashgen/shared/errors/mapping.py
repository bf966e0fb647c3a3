"""Mapping of infrastructure errors to domain errors.

Centralized exception mapping for SQLAlchemy and other infrastructure.
"""

import logging
from collections.abc import Callable
from typing import Any

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from .base import AppError
from .domain import PersistenceFailedError

logger = logging.getLogger(__name__)


class ExceptionMapper:
    """Centralized mapping of technical exceptions to domain exceptions."""

    _handlers: dict[type[Exception], Callable[[Exception, str], AppError]] = {}

    @classmethod
    def register(
        cls, *exception_types: type[Exception]
    ) -> Callable[[Callable[[Any, str], AppError]], Callable[[Any, str], AppError]]:
        """Register a handler for exception types.

        Usage:
            @ExceptionMapper.register(IntegrityError)
            def _handle_integrity_error(exc: IntegrityError, func_name: str) -> AppError:
                return PersistenceFailedError(message="Constraint violated")
        """

        def decorator(
            handler: Callable[[Any, str], AppError]
        ) -> Callable[[Any, str], AppError]:
            for exc_type in exception_types:
                cls._handlers[exc_type] = handler
            return handler

        return decorator

    @classmethod
    def map(cls, exc: Exception, func_name: str = "") -> AppError:
        """Map a technical exception to a domain exception.

        Args:
            exc: The technical exception to map
            func_name: Name of the function where exception occurred (for logging)

        Returns:
            Mapped domain exception (AppError subclass)
        """
        # Direct type match
        handler = cls._handlers.get(type(exc))

        # Try inheritance match if no direct match
        if handler is None:
            for exc_type, exc_handler in cls._handlers.items():
                if isinstance(exc, exc_type):
                    handler = exc_handler
                    break

        if handler:
            return handler(exc, func_name)

        # Fallback for unhandled exceptions
        logger.exception(f"CRITICAL: Unhandled exception in {func_name}: {type(exc).__name__}")
        return AppError(
            message="Internal server error",
            details={"function": func_name} if func_name else {},
        )


# --- Register default handlers ---


@ExceptionMapper.register(IntegrityError)
def _handle_integrity_error(exc: IntegrityError, func_name: str) -> AppError:
    """Database: integrity constraint violation."""
    err_msg = str(exc).lower()
    constraint = "foreign_key" if "foreign key" in err_msg else "integrity"
    logger.warning(f"Integrity error in {func_name}: {exc}")
    return PersistenceFailedError(
        message="Database constraint violation",
        details={"constraint": constraint},
    )


@ExceptionMapper.register(SQLAlchemyError)
def _handle_database_error(exc: Exception, func_name: str) -> AppError:
    """Database: connection or operational error."""
    logger.error(f"Database error in {func_name}: {exc}")
    return PersistenceFailedError(
        message="Database operation failed",
        details={"service": "database"},
    )


@ExceptionMapper.register(OSError)
def _handle_connection_error(exc: Exception, func_name: str) -> AppError:
    """Database: driver-level socket error outside SQLAlchemy wrapping."""
    logger.error(f"Connection error in {func_name}: {exc}")
    return PersistenceFailedError(
        message="Database operation failed",
        details={"service": "database"},
    )
