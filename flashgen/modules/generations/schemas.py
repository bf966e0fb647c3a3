"""Схемы Pydantic для модуля генерации карточек."""

from __future__ import annotations

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import Field

from flashgen.core.config import settings
from flashgen.modules.flashcards.models import SourceType
from flashgen.modules.flashcards.schemas import FlashcardAccept, FlashcardResponse
from flashgen.shared.schemas import BaseSchema, SuccessResponse

from .models import GenerationStatus


class StartGenerationRequest(BaseSchema):
    """Схема запроса на запуск генерации."""

    source_text: str = Field(
        ...,
        min_length=settings.generation.min_source_length,
        max_length=settings.generation.max_source_length,
        description="Исходный текст, из которого генерируются карточки",
    )


class FlashcardProposal(BaseSchema):
    """Предложенная генератором карточка (не сохраняется)."""

    front_text: str = Field(..., description="Лицевая сторона")
    back_text: str = Field(..., description="Оборотная сторона")
    source_type: Literal[SourceType.AI_FULL] = Field(
        default=SourceType.AI_FULL,
        description="Генератор всегда возвращает ai_full",
    )


class GenerationDetail(BaseSchema):
    """Метаданные генерации."""

    id: int = Field(..., description="ID генерации")
    user_id: UUID = Field(..., description="ID владельца")
    source_text_length: int = Field(..., description="Длина исходного текста")
    generation_duration: int | None = Field(
        default=None,
        description="Длительность генерации в миллисекундах",
    )
    flashcards_count: int = Field(
        default=0,
        description="Количество полученных предложений",
    )
    status: GenerationStatus = Field(
        default=GenerationStatus.PENDING,
        description="Текущий статус генерации",
    )
    created_at: datetime = Field(..., description="Время создания")


class StartGenerationResponse(GenerationDetail):
    """Ответ на запуск генерации: метаданные и предложения."""

    flashcards_proposals: list[FlashcardProposal] = Field(
        ...,
        description="Предложенные карточки",
    )


class GenerationDetailResponse(GenerationDetail):
    """Генерация вместе с принятыми из неё карточками."""

    accepted_unedited_count: int | None = Field(
        default=None,
        description="Принято без изменений",
    )
    accepted_edited_count: int | None = Field(
        default=None,
        description="Принято с редактированием",
    )
    flashcards: list[FlashcardResponse] = Field(
        default=[],
        description="Карточки, сохранённые из этой генерации",
    )


class AcceptGenerationFlashcardsRequest(BaseSchema):
    """Схема запроса на принятие предложений."""

    flashcards: list[FlashcardAccept] = Field(
        ...,
        min_length=1,
        description="Принимаемые карточки",
    )


class AcceptGenerationFlashcardsResponse(BaseSchema):
    """Итог принятия предложений."""

    accepted_count: int = Field(..., description="Количество сохранённых карточек")
    flashcards: list[FlashcardResponse] = Field(
        ...,
        description="Сохранённые карточки",
    )


class RejectGenerationResponse(SuccessResponse):
    """Ответ на отклонение генерации."""


class GenerationCreate(BaseSchema):
    """Данные для вставки строки генерации."""

    user_id: UUID
    source_text_length: int
    status: GenerationStatus = GenerationStatus.PENDING


class GenerationErrorLogCreate(BaseSchema):
    """Данные для записи в журнал ошибок генерации."""

    user_id: UUID
    generation_id: int | None = None
    error_code: str
    error_message: str
    source_text_length: int
    model: str
