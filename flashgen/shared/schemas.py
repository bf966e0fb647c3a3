"""Базовые схемы Pydantic для обработки API запросов и ответов."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class BaseSchema(BaseModel):
    """Базовая схема с общей конфигурацией.

    Все схемы должны наследоваться от этого базового класса
    для обеспечения единообразного поведения в приложении.
    """

    model_config = ConfigDict(
        from_attributes=True,
        validate_assignment=True,
        populate_by_name=True,
    )


class IdTimestampSchema(BaseSchema):
    """Схема с целочисленным идентификатором и временными метками.

    Наиболее часто используемая база для схем ответов.
    """

    id: int = Field(..., description="Уникальный идентификатор")
    created_at: datetime = Field(..., description="Время создания")
    updated_at: datetime = Field(..., description="Время последнего обновления")


class SuccessResponse(BaseSchema):
    """Ответ об успешном выполнении операции над ресурсом."""

    success: bool = Field(default=True, description="Признак успешного выполнения")
    id: int = Field(..., description="Идентификатор затронутого ресурса")


class HealthResponse(BaseSchema):
    """Ответ проверки работоспособности сервиса."""

    status: str = Field(..., description="healthy или unhealthy")
    version: str = Field(..., description="Версия приложения")
    dependencies: dict[str, str] = Field(
        default_factory=dict,
        description="Статус внешних зависимостей",
    )
