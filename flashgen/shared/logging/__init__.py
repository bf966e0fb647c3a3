"""flashgen - Shared Logging Configuration.

Loguru-based logging module with:
- Structured JSON logging for production
- Colored console output for development
- OpenTelemetry trace correlation
- Automatic sensitive data redaction
"""

from loguru import logger

from .config import (
    InterceptHandler,
    build_json_entry,
    configure_third_party_loggers,
    get_logger,
    setup_logger,
)
from .event_logger import (
    log_flashcards_accepted,
    log_generation_completed,
    log_generation_failed,
    log_generation_rejected,
    log_generation_started,
)

__all__ = [
    # Core logging
    "logger",
    "setup_logger",
    "get_logger",
    "build_json_entry",
    "InterceptHandler",
    "configure_third_party_loggers",
    # Event logging
    "log_generation_started",
    "log_generation_completed",
    "log_generation_failed",
    "log_flashcards_accepted",
    "log_generation_rejected",
]
