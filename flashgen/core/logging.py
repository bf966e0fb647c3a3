"""
Structured logging with Loguru.

Request-scoped logging context and a thin wrapper around the shared
Loguru setup. New code may import directly from flashgen.shared.logging.
"""

from typing import Any

from loguru import logger

from flashgen.shared.context import request_id_var, trace_id_var, user_id_var
from flashgen.shared.logging import get_logger, setup_logger


def set_request_context(
    request_id: str | None = None,
    user_id: str | None = None,
    trace_id: str | None = None,
) -> None:
    """Set request context for logging."""
    if request_id is not None:
        request_id_var.set(request_id)
    if user_id is not None:
        user_id_var.set(user_id)
    if trace_id is not None:
        trace_id_var.set(trace_id)


def clear_request_context() -> None:
    """Clear request context."""
    request_id_var.set("")
    user_id_var.set("")
    trace_id_var.set("")


def get_request_context() -> dict[str, str]:
    """Get current request context."""
    return {
        "request_id": request_id_var.get(),
        "user_id": user_id_var.get(),
        "trace_id": trace_id_var.get(),
    }


def setup_logging() -> None:
    """Configure application logging."""
    setup_logger()


# ==================== StructuredLogger wrapper ====================


class StructuredLogger:
    """Wrapper for structured logging with additional fields.

    Keyword arguments become structured fields; the current request
    context is attached to every record.

        logger = get_structured_logger(__name__)
        logger.info("Generation created", generation_id=42)
    """

    def __init__(self, name: str) -> None:
        self._name = name
        self._logger = logger.bind(name=name)

    def _bound(self) -> Any:
        context = {key: value for key, value in get_request_context().items() if value}
        return self._logger.bind(**context) if context else self._logger

    def bind(self, **kwargs: Any) -> "StructuredLogger":
        """Create a new logger with additional fields."""
        new_logger = StructuredLogger(self._name)
        new_logger._logger = self._logger.bind(**kwargs)
        return new_logger

    def debug(self, message: str, *args: Any, **kwargs: Any) -> None:
        """Log DEBUG message."""
        self._bound().debug(message, *args, **kwargs)

    def info(self, message: str, *args: Any, **kwargs: Any) -> None:
        """Log INFO message."""
        self._bound().info(message, *args, **kwargs)

    def warning(self, message: str, *args: Any, **kwargs: Any) -> None:
        """Log WARNING message."""
        self._bound().warning(message, *args, **kwargs)

    def error(self, message: str, *args: Any, exc_info: bool = False, **kwargs: Any) -> None:
        """Log ERROR message."""
        if exc_info:
            self._bound().opt(exception=True).error(message, *args, **kwargs)
        else:
            self._bound().error(message, *args, **kwargs)

    def exception(self, message: str, *args: Any, **kwargs: Any) -> None:
        """Log exception with traceback."""
        self._bound().opt(exception=True).error(message, *args, **kwargs)


def get_structured_logger(name: str) -> StructuredLogger:
    """Get a structured logger.

    Args:
        name: Logger name (usually __name__).

    Returns:
        Structured logger wrapper.
    """
    return StructuredLogger(name)


__all__ = [
    "logger",
    "setup_logger",
    "get_logger",
    "setup_logging",
    "get_structured_logger",
    "StructuredLogger",
    "set_request_context",
    "clear_request_context",
    "get_request_context",
]
