"""flashgen - Logger Configuration.

Loguru-based structured logging configuration.

This module configures a unified logger for the application:
- Loguru for application logs (pretty format, colors, structured data)
- Intercept handler for third-party library logs (uvicorn, fastapi, asyncpg)
- OpenTelemetry integration for trace correlation
"""

from __future__ import annotations

import json
import logging
import re
import sys
from typing import TYPE_CHECKING, Any

from loguru import logger
from opentelemetry import trace

if TYPE_CHECKING:
    from flashgen.core.config import Settings

# Default trace/span IDs when no active trace
NO_TRACE = "0" * 32
NO_SPAN = "0" * 16

# Sensitive field patterns for redaction
SENSITIVE_PATTERNS = re.compile(
    r"(password|token|secret|key|auth|credential|api_key|access_token|refresh_token)",
    re.IGNORECASE,
)

# Fields already emitted as top-level keys
EXCLUDED_KEYS = {"trace_id", "span_id", "request_id", "user_id", "name"}

_settings_cache: Settings | None = None


def _get_settings() -> Settings:
    """Get settings lazily to avoid circular imports."""
    global _settings_cache
    if _settings_cache is None:
        from flashgen.core.config import settings

        _settings_cache = settings
    return _settings_cache


class InterceptHandler(logging.Handler):
    """Handler for intercepting standard logging and redirecting to Loguru.

    Many libraries (uvicorn, fastapi, sqlalchemy) use standard logging module.
    To have all logs in unified Loguru format, we intercept them through this handler.
    """

    def emit(self, record: logging.LogRecord) -> None:
        """Process a single log record from standard logging.

        Args:
            record: Log record from standard logging with all information
                   (level, message, file, line, exception, etc.)
        """
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = str(record.levelno)

        frame = logging.currentframe()
        depth = 2

        if frame:
            while frame.f_code.co_filename == logging.__file__:
                if frame.f_back:
                    frame = frame.f_back
                    depth += 1
                else:
                    break

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def _otel_patcher(record: dict[str, Any]) -> None:
    """Patcher for adding trace_id from OpenTelemetry to Loguru.

    This function is called for every log record to inject
    OpenTelemetry trace context for log correlation.
    """
    span = trace.get_current_span()

    if span == trace.INVALID_SPAN:
        record["extra"].setdefault("trace_id", NO_TRACE)
        record["extra"].setdefault("span_id", NO_SPAN)
    else:
        ctx = span.get_span_context()
        record["extra"]["trace_id"] = trace.format_trace_id(ctx.trace_id)
        record["extra"]["span_id"] = trace.format_span_id(ctx.span_id)


def _redact_sensitive_value(key: str, value: Any) -> Any:
    """Redact sensitive values based on key name."""
    if SENSITIVE_PATTERNS.search(key):
        return "***REDACTED***"
    return value


def build_json_entry(record: dict[str, Any], service_name: str) -> dict[str, Any]:
    """Build a structured JSON log entry from a Loguru record.

    Args:
        record: Loguru log record
        service_name: Name of the service for log entries

    Returns:
        Dictionary ready for json.dumps
    """
    log_entry: dict[str, Any] = {
        "timestamp": record["time"].isoformat(),
        "level": record["level"].name,
        "message": record["message"],
        "module": record["extra"].get("name", record["name"]),
        "function": record["function"],
        "line": record["line"],
        "trace_id": record["extra"].get("trace_id", NO_TRACE),
        "span_id": record["extra"].get("span_id", NO_SPAN),
        "service": service_name,
    }

    if "request_id" in record["extra"]:
        log_entry["request_id"] = record["extra"]["request_id"]

    if "user_id" in record["extra"]:
        log_entry["user_id"] = record["extra"]["user_id"]

    for key, value in record["extra"].items():
        if key not in EXCLUDED_KEYS:
            log_entry[key] = _redact_sensitive_value(key, value)

    if record.get("exception"):
        exc = record["exception"]
        log_entry["exception"] = {
            "type": exc.type.__name__ if exc.type else None,
            "value": str(exc.value) if exc.value else None,
        }

    return log_entry


def _create_json_sink(service_name: str) -> Any:
    """Create a JSON sink for stdout logging."""

    def json_sink(message: Any) -> None:
        """Write JSON formatted log to stdout."""
        log_entry = build_json_entry(message.record, service_name)
        sys.stdout.write(json.dumps(log_entry, ensure_ascii=False, default=str) + "\n")
        sys.stdout.flush()

    return json_sink


def setup_logger() -> None:
    """Configure Loguru logger.

    Sets up:
    - Console handler with colored output (dev) or JSON format (prod)
    - OpenTelemetry trace correlation
    - Third-party library log interception
    - Thread-safe async logging with enqueue=True
    """
    settings = _get_settings()

    logger.remove()
    logger.configure(patcher=_otel_patcher)

    is_prod = settings.logging.format.lower() == "json"

    if is_prod:
        logger.add(
            _create_json_sink(settings.app.name),
            level=settings.logging.level.upper(),
            backtrace=True,
            diagnose=False,  # Don't expose internal state in production
            enqueue=True,
        )
    else:
        dev_format = (
            "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
            "<level>{message}</level> | "
            "<dim>trace_id={extra[trace_id]}</dim>"
        )
        logger.add(
            sys.stdout,
            format=dev_format,
            level=settings.logging.level.upper(),
            colorize=True,
            backtrace=True,
            diagnose=settings.app.debug,
            enqueue=True,
        )

    configure_third_party_loggers()

    logger.info(
        "Logger configured",
        level=settings.logging.level,
        format="json" if is_prod else "console",
    )


def configure_third_party_loggers() -> None:
    """Configure logging for third-party libraries.

    Intercepts logs from uvicorn, fastapi, asyncpg and sqlalchemy,
    redirects them to Loguru and caps their verbosity.
    """
    settings = _get_settings()

    logging.root.handlers = []
    logging.root.setLevel(logging.INFO)

    loggers_to_configure = [
        "",  # root logger
        "uvicorn",
        "uvicorn.access",
        "uvicorn.error",
        "fastapi",
        "asyncpg",
        "sqlalchemy",
        "sqlalchemy.engine",
        "httpx",
        "httpcore",
        "redis",
    ]

    is_prod = settings.logging.format.lower() == "json"

    for logger_name in loggers_to_configure:
        logging_logger = logging.getLogger(logger_name)
        logging_logger.handlers.clear()
        logging_logger.addHandler(InterceptHandler())
        logging_logger.propagate = False

        if logger_name in ["uvicorn.access", "asyncpg"]:
            logging_logger.setLevel(logging.WARNING if is_prod else logging.INFO)
        elif logger_name in ["sqlalchemy", "sqlalchemy.engine", "httpx", "httpcore"]:
            logging_logger.setLevel(logging.WARNING)
        else:
            logging_logger.setLevel(logging.INFO)

    logger.debug("Third-party loggers configured")


def get_logger(name: str):
    """Get a logger with the specified name.

    Args:
        name: Logger name (usually __name__ of the module)

    Returns:
        Configured Loguru logger with bound name
    """
    return logger.bind(name=name)
