"""
Модели SQLAlchemy для карточек.

Основные компоненты:
    - SourceType: происхождение карточки
    - Flashcard: постоянная карточка пользователя
"""

from __future__ import annotations

from enum import Enum
from uuid import UUID

from sqlalchemy import BigInteger, ForeignKey, String
from sqlalchemy import Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column

from flashgen.core.database import Base
from flashgen.shared.mixins import IntIdMixin, TimestampMixin

FRONT_TEXT_MAX_LENGTH = 200
BACK_TEXT_MAX_LENGTH = 500


class SourceType(str, Enum):
    """
    Происхождение карточки.

    - AI_FULL: предложение генератора принято без изменений
    - AI_EDITED: предложение генератора отредактировано перед принятием
    - MANUAL: карточка создана вручную
    """

    AI_FULL = "ai_full"
    AI_EDITED = "ai_edited"
    MANUAL = "manual"


class Flashcard(IntIdMixin, TimestampMixin, Base):
    """
    Модель постоянной карточки.

    Карточки создаются только на шаге принятия предложений генерации.
    Для ручных карточек generation_id равен NULL.

    Attributes:
        id: Уникальный идентификатор
        front_text: Лицевая сторона
        back_text: Оборотная сторона
        source_type: Происхождение карточки
        generation_id: ID генерации, из которой получена карточка
        user_id: UUID владельца
        created_at: Дата создания
        updated_at: Дата обновления
    """

    __tablename__ = "flashcards"

    front_text: Mapped[str] = mapped_column(String(FRONT_TEXT_MAX_LENGTH), nullable=False)
    back_text: Mapped[str] = mapped_column(String(BACK_TEXT_MAX_LENGTH), nullable=False)
    source_type: Mapped[SourceType] = mapped_column(
        SQLEnum(
            SourceType,
            name="source_type",
            values_callable=lambda x: [e.value for e in x],
        ),
        nullable=False,
    )
    generation_id: Mapped[int | None] = mapped_column(
        BigInteger,
        ForeignKey("generations.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    user_id: Mapped[UUID] = mapped_column(nullable=False, index=True)
