"""Схемы Pydantic для операций с карточками."""

from __future__ import annotations

from typing import Literal
from uuid import UUID

from pydantic import Field

from flashgen.shared.schemas import BaseSchema, IdTimestampSchema

from .models import BACK_TEXT_MAX_LENGTH, FRONT_TEXT_MAX_LENGTH, SourceType


class FlashcardAccept(BaseSchema):
    """Карточка, выбранная пользователем из предложений генерации.

    Принимаются только AI-карточки: без изменений (ai_full)
    или отредактированные (ai_edited).
    """

    id: int | None = Field(
        default=None,
        description="Клиентский идентификатор предложения (не сохраняется)",
    )
    front_text: str = Field(
        ...,
        min_length=1,
        max_length=FRONT_TEXT_MAX_LENGTH,
        description="Лицевая сторона карточки",
    )
    back_text: str = Field(
        ...,
        min_length=1,
        max_length=BACK_TEXT_MAX_LENGTH,
        description="Оборотная сторона карточки",
    )
    source_type: Literal[SourceType.AI_FULL, SourceType.AI_EDITED] = Field(
        ...,
        description="Происхождение карточки",
    )
    generation_id: int = Field(
        ...,
        gt=0,
        description="ID генерации, из которой получено предложение",
    )


class FlashcardCreate(BaseSchema):
    """Данные для вставки карточки в хранилище."""

    front_text: str
    back_text: str
    source_type: SourceType
    generation_id: int | None = None
    user_id: UUID = Field(..., description="UUID владельца")


class FlashcardResponse(IdTimestampSchema):
    """Схема ответа с данными карточки."""

    front_text: str = Field(..., description="Лицевая сторона карточки")
    back_text: str = Field(..., description="Оборотная сторона карточки")
    source_type: SourceType = Field(..., description="Происхождение карточки")
    generation_id: int | None = Field(
        default=None,
        description="ID генерации (NULL для ручных карточек)",
    )
