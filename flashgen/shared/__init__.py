"""
Shared module - cross-cutting concerns and utilities.

This module provides shared functionality used across the application:
- Context variables for request/trace IDs and the current user
- Logging utilities with Loguru
"""

from .context import request_id_var, trace_id_var, user_id_var
from .logging import (
    get_logger,
    log_flashcards_accepted,
    log_generation_completed,
    log_generation_failed,
    log_generation_rejected,
    log_generation_started,
    logger,
    setup_logger,
)

__all__ = [
    # Context
    "request_id_var",
    "trace_id_var",
    "user_id_var",
    # Logging
    "logger",
    "setup_logger",
    "get_logger",
    "log_generation_started",
    "log_generation_completed",
    "log_generation_failed",
    "log_flashcards_accepted",
    "log_generation_rejected",
]
