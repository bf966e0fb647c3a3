"""flashgen - Event Logger.

Structured event logging for the generation lifecycle.
Provides type-safe logging functions for observability.
"""

from uuid import UUID

from loguru import logger


def log_generation_started(
    generation_id: int,
    source_text_length: int,
    *,
    user_id: UUID | str | None = None,
) -> None:
    """Log the start of a flashcard generation.

    Args:
        generation_id: Identifier of the freshly inserted generation row
        source_text_length: Length of the submitted source text
        user_id: Optional user identifier
    """
    logger.info(
        "Flashcard generation started",
        event="generation.started",
        generation_id=generation_id,
        source_text_length=source_text_length,
        user_id=str(user_id) if user_id else None,
    )


def log_generation_completed(
    generation_id: int,
    proposals_count: int,
    duration_ms: int,
    *,
    user_id: UUID | str | None = None,
    model: str | None = None,
) -> None:
    """Log the successful completion of a flashcard generation.

    Args:
        generation_id: Identifier of the generation
        proposals_count: Number of proposals produced
        duration_ms: Total duration in milliseconds
        user_id: Optional user identifier
        model: Optional model used for generation
    """
    logger.info(
        "Flashcard generation completed",
        event="generation.completed",
        generation_id=generation_id,
        proposals_count=proposals_count,
        duration_ms=duration_ms,
        user_id=str(user_id) if user_id else None,
        model=model,
    )


def log_generation_failed(
    error_code: str,
    error: str,
    *,
    generation_id: int | None = None,
    user_id: UUID | str | None = None,
) -> None:
    """Log a flashcard generation failure.

    Args:
        error_code: Code written to the generation error log
        error: Error message describing the failure
        generation_id: Generation identifier, if the row was created
        user_id: Optional user identifier
    """
    logger.error(
        "Flashcard generation failed",
        event="generation.failed",
        error_code=error_code,
        error=error,
        generation_id=generation_id,
        user_id=str(user_id) if user_id else None,
    )


def log_flashcards_accepted(
    generation_id: int,
    unedited_count: int,
    edited_count: int,
    *,
    user_id: UUID | str | None = None,
) -> None:
    """Log acceptance of proposals into permanent flashcards."""
    logger.info(
        "Generation flashcards accepted",
        event="generation.accepted",
        generation_id=generation_id,
        unedited_count=unedited_count,
        edited_count=edited_count,
        user_id=str(user_id) if user_id else None,
    )


def log_generation_rejected(
    generation_id: int,
    *,
    user_id: UUID | str | None = None,
) -> None:
    """Log rejection of a generation."""
    logger.info(
        "Generation rejected",
        event="generation.rejected",
        generation_id=generation_id,
        user_id=str(user_id) if user_id else None,
    )
