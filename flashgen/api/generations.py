"""FastAPI роутер для эндпоинтов жизненного цикла генерации."""

from typing import Annotated, TypeVar

from fastapi import APIRouter, Depends, Request, status
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from flashgen.core.config import settings
from flashgen.core.dependencies import CurrentUserId, DatabaseSession
from flashgen.core.exceptions import (
    AuthenticationError,
    GenerationAccessDeniedError,
    GenerationFailedError,
    GenerationNotFoundError,
    InvalidIdError,
    MismatchedGenerationError,
    PersistenceFailedError,
    RateLimitError,
    ValidationError,
)
from flashgen.core.logging import get_structured_logger
from flashgen.core.rate_limit import GENERATION_LIMITER, rate_limit
from flashgen.modules.generations.proposals import get_proposal_generator
from flashgen.modules.generations.schemas import (
    AcceptGenerationFlashcardsRequest,
    AcceptGenerationFlashcardsResponse,
    GenerationDetailResponse,
    RejectGenerationResponse,
    StartGenerationRequest,
    StartGenerationResponse,
)
from flashgen.modules.generations.service import GenerationService

logger = get_structured_logger(__name__)

router = APIRouter(prefix="/generations", tags=["Генерации"])

SchemaT = TypeVar("SchemaT", bound=BaseModel)

SOURCE_TEXT_MESSAGE = (
    f"Source text must be between {settings.generation.min_source_length} "
    f"and {settings.generation.max_source_length} characters"
)
FLASHCARDS_MESSAGE = "Invalid flashcards data"

# Верхняя граница BIGINT первичного ключа
MAX_GENERATION_ID = 2**63 - 1


async def get_generation_service(session: DatabaseSession) -> GenerationService:
    """Получить экземпляр сервиса генерации на сессии запроса."""
    return GenerationService(session, get_proposal_generator())


GenerationServiceDep = Annotated[GenerationService, Depends(get_generation_service)]


def parse_generation_id(raw: str) -> int:
    """Разобрать ID генерации из пути: только положительное целое.

    Raises:
        InvalidIdError: ID не является положительным целым числом
    """
    if not raw.isascii() or not raw.isdigit():
        raise InvalidIdError()
    generation_id = int(raw)
    if not 0 < generation_id <= MAX_GENERATION_ID:
        raise InvalidIdError()
    return generation_id


async def parse_body(request: Request, schema: type[SchemaT], message: str) -> SchemaT:
    """Прочитать и валидировать JSON тело запроса.

    Тело разбирается внутри обработчика, чтобы ошибка ID пути
    всегда имела приоритет над ошибками тела.

    Raises:
        ValidationError: Тело не является JSON или не проходит схему
    """
    try:
        payload = await request.json()
    except ValueError as e:
        raise ValidationError(message) from e

    try:
        return schema.model_validate(payload)
    except PydanticValidationError as e:
        raise ValidationError(
            message,
            details={"errors": e.errors(include_url=False, include_context=False)},
        ) from e


@router.post(
    "",
    response_model=StartGenerationResponse,
    status_code=status.HTTP_200_OK,
    summary="Запустить генерацию карточек",
    responses={
        400: ValidationError.openapi_response(),
        401: AuthenticationError.openapi_response(),
        429: RateLimitError.openapi_response(),
        500: GenerationFailedError.openapi_response(),
    },
)
@rate_limit(GENERATION_LIMITER)
async def start_generation(
    request: Request,
    user_id: CurrentUserId,
    service: GenerationServiceDep,
) -> StartGenerationResponse:
    """Запустить генерацию предложений по исходному тексту.

    Тело: `{"source_text": "..."}` длиной от 1000 до 10000 символов.
    Предложения возвращаются в ответе и не сохраняются до принятия.
    """
    body = await parse_body(request, StartGenerationRequest, SOURCE_TEXT_MESSAGE)

    logger.info(
        "Starting flashcard generation",
        user_id=str(user_id),
        source_text_length=len(body.source_text),
    )

    return await service.start_generation(user_id, body.source_text)


@router.get(
    "/{generation_id}",
    response_model=GenerationDetailResponse,
    summary="Получить генерацию",
    responses={
        400: InvalidIdError.openapi_response(),
        401: AuthenticationError.openapi_response(),
        403: GenerationAccessDeniedError.openapi_response(),
        404: GenerationNotFoundError.openapi_response(),
        500: PersistenceFailedError.openapi_response(),
    },
)
async def get_generation(
    generation_id: str,
    user_id: CurrentUserId,
    service: GenerationServiceDep,
) -> GenerationDetailResponse:
    """Получить генерацию и карточки, сохранённые из неё."""
    return await service.get_generation_by_id(parse_generation_id(generation_id), user_id)


@router.post(
    "/{generation_id}/accept",
    response_model=AcceptGenerationFlashcardsResponse,
    summary="Принять предложенные карточки",
    responses={
        400: MismatchedGenerationError.openapi_response(),
        401: AuthenticationError.openapi_response(),
        404: GenerationNotFoundError.openapi_response(),
        500: PersistenceFailedError.openapi_response(),
    },
)
async def accept_generation_flashcards(
    generation_id: str,
    request: Request,
    user_id: CurrentUserId,
    service: GenerationServiceDep,
) -> AcceptGenerationFlashcardsResponse:
    """Сохранить выбранные (возможно отредактированные) предложения.

    Тело: `{"flashcards": [{front_text, back_text, source_type, generation_id, id?}]}`.
    Каждая карточка должна ссылаться на генерацию из пути.
    """
    parsed_id = parse_generation_id(generation_id)
    body = await parse_body(request, AcceptGenerationFlashcardsRequest, FLASHCARDS_MESSAGE)

    mismatched = [card.generation_id for card in body.flashcards if card.generation_id != parsed_id]
    if mismatched:
        raise MismatchedGenerationError(parsed_id, mismatched)

    return await service.accept_generation_flashcards(parsed_id, body.flashcards, user_id)


@router.post(
    "/{generation_id}/reject",
    response_model=RejectGenerationResponse,
    summary="Отклонить генерацию",
    responses={
        400: InvalidIdError.openapi_response(),
        401: AuthenticationError.openapi_response(),
        404: GenerationNotFoundError.openapi_response(),
        500: PersistenceFailedError.openapi_response(),
    },
)
async def reject_generation(
    generation_id: str,
    user_id: CurrentUserId,
    service: GenerationServiceDep,
) -> RejectGenerationResponse:
    """Отклонить генерацию целиком. Карточки не создаются."""
    return await service.reject_generation(parse_generation_id(generation_id), user_id)
