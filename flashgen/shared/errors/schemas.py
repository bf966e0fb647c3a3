"""Pydantic models for error handling.

Data structures for error responses and details.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ErrorDetail(BaseModel):
    """Strict schema for error details.

    Details are kept on the exception for logging; they are not part of the
    public response body.
    """

    model_config = ConfigDict(extra="allow")

    field: str | None = None
    value: Any | None = None
    expected: Any | None = None
    constraint: str | None = None
    resource_id: str | int | None = None
    resource_type: str | None = None
    errors: list[dict[str, Any]] | None = None
    service: str | None = None


class ErrorBody(BaseModel):
    """Machine-readable code plus human-readable message."""

    code: str = Field(..., description="Error code (snake_case)")
    message: str = Field(..., description="Human-readable error description")


class ErrorResponse(BaseModel):
    """Unified error response schema."""

    error: ErrorBody

    @classmethod
    def build(cls, code: str, message: str) -> "ErrorResponse":
        return cls(error=ErrorBody(code=code, message=message))
