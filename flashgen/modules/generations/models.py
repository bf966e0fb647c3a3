"""
Модели SQLAlchemy для генераций карточек.

Основные компоненты:
    - GenerationStatus: статус генерации в жизненном цикле
    - Generation: метаданные одного запуска генерации
    - GenerationErrorLog: журнал ошибок генерации (только добавление)
"""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum
from uuid import UUID

from sqlalchemy import BigInteger, DateTime, ForeignKey, Integer, String, Text, func
from sqlalchemy import Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column

from flashgen.core.database import Base
from flashgen.shared.mixins import IntIdMixin, TimestampMixin


class GenerationStatus(StrEnum):
    """
    Статус генерации.

    - PENDING: предложения созданы, решение пользователя не принято
    - ACCEPTED: пользователь принял часть предложений
    - REJECTED: пользователь отклонил генерацию целиком
    """

    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class Generation(IntIdMixin, TimestampMixin, Base):
    """
    Модель генерации.

    Строка создаётся до вызова генератора предложений и
    обновляется после получения предложений. Сами предложения
    не сохраняются. Генерации никогда не удаляются.

    Attributes:
        id: Уникальный идентификатор
        user_id: UUID владельца
        source_text_length: Длина исходного текста
        generation_duration: Длительность генерации в миллисекундах
        flashcards_count: Количество полученных предложений
        accepted_unedited_count: Принято без изменений
        accepted_edited_count: Принято с редактированием
        status: Текущий статус
        created_at: Дата создания
        updated_at: Дата обновления
    """

    __tablename__ = "generations"

    user_id: Mapped[UUID] = mapped_column(nullable=False, index=True)
    source_text_length: Mapped[int] = mapped_column(Integer, nullable=False)
    generation_duration: Mapped[int | None] = mapped_column(Integer, nullable=True)
    flashcards_count: Mapped[int] = mapped_column(
        Integer,
        default=0,
        server_default="0",
        nullable=False,
    )
    accepted_unedited_count: Mapped[int | None] = mapped_column(Integer, nullable=True)
    accepted_edited_count: Mapped[int | None] = mapped_column(Integer, nullable=True)
    status: Mapped[GenerationStatus] = mapped_column(
        SQLEnum(
            GenerationStatus,
            name="generation_status",
            values_callable=lambda x: [e.value for e in x],
        ),
        default=GenerationStatus.PENDING,
        server_default=GenerationStatus.PENDING.value,
        nullable=False,
    )


class GenerationErrorLog(IntIdMixin, Base):
    """
    Запись журнала ошибок генерации.

    Attributes:
        id: Уникальный идентификатор
        user_id: UUID пользователя, запустившего генерацию
        generation_id: ID генерации (NULL, если строка не была создана)
        error_code: Код ошибки (db_insert_failed, ai_service_error, ...)
        error_message: Описание ошибки
        source_text_length: Длина исходного текста
        model: Идентификатор модели генератора
        created_at: Дата создания
    """

    __tablename__ = "generation_error_logs"

    user_id: Mapped[UUID] = mapped_column(nullable=False, index=True)
    generation_id: Mapped[int | None] = mapped_column(
        BigInteger,
        ForeignKey("generations.id", ondelete="SET NULL"),
        nullable=True,
    )
    error_code: Mapped[str] = mapped_column(String(100), nullable=False)
    error_message: Mapped[str] = mapped_column(Text, nullable=False)
    source_text_length: Mapped[int] = mapped_column(Integer, nullable=False)
    model: Mapped[str] = mapped_column(String(100), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
