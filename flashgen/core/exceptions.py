"""
Generation domain exceptions.

Builds the generation lifecycle taxonomy on top of the shared error catalog.
Every exception carries its HTTP status and stable snake_case code, so the
routers never inspect messages.
"""

from http import HTTPStatus

from flashgen.shared.errors import (
    AppError,
    AuthenticationError,
    BadRequestError,
    ExceptionMapper,
    ForbiddenError,
    NotFoundError,
    PersistenceFailedError,
    RateLimitError,
    ValidationError,
    safe,
    setup_exception_handlers,
)

__all__ = [
    # Base class
    "AppError",
    # Authentication
    "AuthenticationError",
    "TokenExpiredError",
    "TokenInvalidError",
    # Authorization
    "ForbiddenError",
    "GenerationAccessDeniedError",
    # Resources
    "NotFoundError",
    "GenerationNotFoundError",
    # Validation
    "BadRequestError",
    "ValidationError",
    "InvalidInputError",
    "InvalidIdError",
    "MismatchedGenerationError",
    "InvalidFlashcardsDataError",
    # Persistence
    "PersistenceFailedError",
    # External services
    "GenerationFailedError",
    # Limits
    "RateLimitError",
    # Handlers
    "setup_exception_handlers",
    "safe",
    "ExceptionMapper",
]


# ==================== Authentication exceptions ====================


class TokenExpiredError(AuthenticationError):
    """Token has expired."""

    code = "authentication_error"


class TokenInvalidError(AuthenticationError):
    """Invalid token."""

    code = "authentication_error"


# ==================== Validation exceptions ====================


class InvalidInputError(BadRequestError):
    """Invalid input data."""


class InvalidIdError(BadRequestError):
    """Invalid generation ID."""

    default_message = "Invalid generation ID"


class MismatchedGenerationError(BadRequestError):
    """One or more flashcards do not belong to the specified generation."""

    default_message = "One or more flashcards do not belong to the specified generation"

    def __init__(self, generation_id: int, mismatched_ids: list[int]) -> None:
        self.generation_id = generation_id
        self.mismatched_ids = mismatched_ids
        super().__init__(
            details={
                "resource_id": generation_id,
                "resource_type": "generation",
                "value": mismatched_ids,
            }
        )


class InvalidFlashcardsDataError(MismatchedGenerationError):
    """One or more flashcards do not belong to the specified generation."""

    code = "invalid_data"
    default_message = "One or more flashcards do not belong to the specified generation"


# ==================== Resource exceptions ====================


class GenerationNotFoundError(NotFoundError):
    """Generation not found."""

    code = "not_found"
    default_message = "Generation not found"

    def __init__(self, generation_id: int) -> None:
        self.generation_id = generation_id
        super().__init__(
            details={"resource_id": generation_id, "resource_type": "generation"},
        )


class GenerationAccessDeniedError(ForbiddenError):
    """You do not have access to this generation."""

    code = "forbidden"
    default_message = "You do not have access to this generation"

    def __init__(self, generation_id: int) -> None:
        self.generation_id = generation_id
        super().__init__(
            details={"resource_id": generation_id, "resource_type": "generation"},
        )


# ==================== External service exceptions ====================


class GenerationFailedError(AppError):
    """Generation error occurred."""

    status_code = HTTPStatus.INTERNAL_SERVER_ERROR
    code = "internal_server_error"
    default_message = "Generation error occurred"

    def __init__(self, reason: str, *, timed_out: bool = False) -> None:
        self.reason = reason
        self.timed_out = timed_out
        super().__init__(details={"service": "proposal_generator", "value": reason})
