"""SQLAlchemy model mixins for common functionality."""

from datetime import datetime

from sqlalchemy import BigInteger, DateTime, Identity, func
from sqlalchemy.orm import Mapped, mapped_column


class IntIdMixin:
    """Mixin providing an auto-incrementing integer primary key.

    Generation ids travel in URL paths, so they are plain positive integers.

    Example:
        class Generation(IntIdMixin, Base):
            __tablename__ = "generations"
    """

    id: Mapped[int] = mapped_column(
        BigInteger,
        Identity(always=False),
        primary_key=True,
    )


class TimestampMixin:
    """Mixin providing created_at and updated_at timestamps.

    Automatically sets created_at on insert and updates updated_at
    on every update operation.

    Example:
        class Flashcard(TimestampMixin, Base):
            __tablename__ = "flashcards"
            front_text: Mapped[str] = mapped_column(String(200))
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
