"""
Сервис жизненного цикла генерации карточек.

Основные компоненты:
    - GenerationService: запуск генерации, просмотр, принятие и отклонение
    - write_error_log: запись журнала ошибок в отдельной сессии
"""

import asyncio
from collections.abc import Awaitable, Callable
from time import perf_counter
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from flashgen.core.config import settings
from flashgen.core.database import db_manager
from flashgen.core.exceptions import (
    GenerationAccessDeniedError,
    GenerationFailedError,
    GenerationNotFoundError,
    InvalidFlashcardsDataError,
    InvalidInputError,
    PersistenceFailedError,
)
from flashgen.core.logging import get_structured_logger
from flashgen.core.metrics import (
    record_error_log_failure,
    record_flashcards_accepted,
    record_generation,
    record_generation_rejected,
)
from flashgen.modules.flashcards.models import SourceType
from flashgen.modules.flashcards.repository import FlashcardRepository
from flashgen.modules.flashcards.schemas import (
    FlashcardAccept,
    FlashcardCreate,
    FlashcardResponse,
)
from flashgen.shared.logging import (
    log_flashcards_accepted,
    log_generation_completed,
    log_generation_failed,
    log_generation_rejected,
    log_generation_started,
)

from .models import Generation, GenerationStatus
from .proposals import ProposalGenerator, get_proposal_generator
from .repository import GenerationErrorLogRepository, GenerationRepository
from .schemas import (
    AcceptGenerationFlashcardsResponse,
    FlashcardProposal,
    GenerationCreate,
    GenerationDetail,
    GenerationDetailResponse,
    GenerationErrorLogCreate,
    RejectGenerationResponse,
    StartGenerationResponse,
)

logger = get_structured_logger(__name__)

ErrorLogWriter = Callable[[GenerationErrorLogCreate], Awaitable[None]]

# Коды журнала ошибок генерации
DB_INSERT_FAILED = "db_insert_failed"
DB_UPDATE_FAILED = "db_update_failed"
AI_SERVICE_ERROR = "ai_service_error"
AI_SERVICE_TIMEOUT = "ai_service_timeout"


async def write_error_log(entry: GenerationErrorLogCreate) -> None:
    """
    Записать строку журнала ошибок в собственной сессии.

    Сессия запроса при ошибке откатывается, поэтому запись журнала
    коммитится независимо от неё.
    """
    async with db_manager.session() as session:
        await GenerationErrorLogRepository(session).append(entry)


class GenerationService:
    """
    Сервис жизненного цикла генерации.

    Проверяет входные данные, создаёт запись генерации, вызывает генератор
    предложений с ограничением по времени и сохраняет принятые карточки.

    Attributes:
        timeout_seconds: Максимальное время ожидания генератора
    """

    def __init__(
        self,
        session: AsyncSession,
        proposal_generator: ProposalGenerator | None = None,
        *,
        error_log_writer: ErrorLogWriter | None = None,
        timeout_seconds: float | None = None,
        generations: GenerationRepository | None = None,
        flashcards: FlashcardRepository | None = None,
    ) -> None:
        """
        Инициализировать сервис генерации.

        Args:
            session: Сессия базы данных текущего запроса
            proposal_generator: Генератор предложений
            error_log_writer: Запись журнала ошибок (по умолчанию отдельная сессия)
            timeout_seconds: Таймаут генератора (по умолчанию из настроек)
            generations: Репозиторий генераций (по умолчанию на сессии)
            flashcards: Репозиторий карточек (по умолчанию на сессии)
        """
        self._session = session
        self._generations = generations or GenerationRepository(session)
        self._flashcards = flashcards or FlashcardRepository(session)
        self._generator = proposal_generator or get_proposal_generator()
        self._write_error_log = error_log_writer or write_error_log
        self.timeout_seconds = (
            settings.generation.timeout_seconds if timeout_seconds is None else timeout_seconds
        )

    @property
    def model(self) -> str:
        return getattr(self._generator, "model", "unknown")

    # ==================== Start ====================

    async def start_generation(self, user_id: UUID, source_text: str) -> StartGenerationResponse:
        """
        Запустить генерацию предложений по исходному тексту.

        Строка генерации создаётся и коммитится до вызова генератора,
        поэтому запись существует даже при последующей ошибке.

        Args:
            user_id: UUID пользователя
            source_text: Исходный текст

        Returns:
            Метаданные генерации и список предложений (не сохраняются)

        Raises:
            InvalidInputError: Длина текста вне допустимого диапазона
            PersistenceFailedError: Не удалось создать или обновить запись
            GenerationFailedError: Генератор завершился ошибкой или по таймауту
        """
        min_length = settings.generation.min_source_length
        max_length = settings.generation.max_source_length
        text_length = len(source_text)
        if not min_length <= text_length <= max_length:
            raise InvalidInputError(
                f"Source text must be between {min_length} and {max_length} characters"
            )

        started = perf_counter()
        insert_error: PersistenceFailedError | None = None
        try:
            generation = await self._generations.create_pending(
                GenerationCreate(
                    user_id=user_id,
                    source_text_length=text_length,
                    status=GenerationStatus.PENDING,
                ).model_dump()
            )
        except PersistenceFailedError as e:
            insert_error = e

        if insert_error is not None:
            await self._fail(
                DB_INSERT_FAILED,
                "Failed to create generation record",
                user_id=user_id,
                source_text_length=text_length,
            )
            raise PersistenceFailedError("Failed to start generation process") from insert_error

        log_generation_started(generation.id, text_length, user_id=user_id)

        generation_error: GenerationFailedError | None = None
        try:
            proposals = await self._generate_proposals(source_text)
        except GenerationFailedError as e:
            generation_error = e

        if generation_error is not None:
            await self._fail(
                AI_SERVICE_TIMEOUT if generation_error.timed_out else AI_SERVICE_ERROR,
                generation_error.reason,
                user_id=user_id,
                source_text_length=text_length,
                generation_id=generation.id,
            )
            raise generation_error

        duration_ms = int((perf_counter() - started) * 1000)

        update_error: PersistenceFailedError | None = None
        try:
            generation = await self._generations.set_fields(
                generation,
                generation_duration=duration_ms,
                flashcards_count=len(proposals),
            )
        except PersistenceFailedError as e:
            update_error = e

        if update_error is not None:
            await self._fail(
                DB_UPDATE_FAILED,
                "Failed to update generation record",
                user_id=user_id,
                source_text_length=text_length,
                generation_id=generation.id,
            )
            raise PersistenceFailedError("Failed to update generation record") from update_error

        record_generation("success", duration_ms / 1000, model=self.model)
        log_generation_completed(
            generation.id,
            len(proposals),
            duration_ms,
            user_id=user_id,
            model=self.model,
        )

        return StartGenerationResponse(
            **GenerationDetail.model_validate(generation).model_dump(),
            flashcards_proposals=proposals,
        )

    async def _generate_proposals(self, source_text: str) -> list[FlashcardProposal]:
        """Call the generator under the timeout; the slow call is cancelled."""
        try:
            proposals = await asyncio.wait_for(
                self._generator.generate(source_text),
                timeout=self.timeout_seconds,
            )
        except TimeoutError as e:
            raise GenerationFailedError(
                f"AI service timeout after {self.timeout_seconds:g} seconds",
                timed_out=True,
            ) from e
        except Exception as e:
            raise GenerationFailedError(str(e) or type(e).__name__) from e

        if not proposals:
            raise GenerationFailedError("AI service returned no flashcard proposals")
        return proposals

    async def _fail(
        self,
        error_code: str,
        error_message: str,
        *,
        user_id: UUID,
        source_text_length: int,
        generation_id: int | None = None,
    ) -> None:
        """Report a start failure: metrics, event log and the best-effort error log row."""
        record_generation("timeout" if error_code == AI_SERVICE_TIMEOUT else "error")
        log_generation_failed(
            error_code,
            error_message,
            generation_id=generation_id,
            user_id=user_id,
        )

        entry = GenerationErrorLogCreate(
            user_id=user_id,
            generation_id=generation_id,
            error_code=error_code,
            error_message=error_message,
            source_text_length=source_text_length,
            model=self.model,
        )
        try:
            await self._write_error_log(entry)
        except Exception as e:
            # The original failure is re-raised by the caller
            record_error_log_failure(error_code)
            logger.error(
                "Failed to write generation error log",
                error_code=error_code,
                generation_id=generation_id,
                error=str(e),
            )

    # ==================== Read ====================

    async def get_generation_by_id(
        self,
        generation_id: int,
        user_id: UUID,
    ) -> GenerationDetailResponse:
        """
        Получить генерацию вместе с сохранёнными из неё карточками.

        Существование проверяется раньше владения, поэтому чужая
        генерация даёт Forbidden, а отсутствующая NotFound.

        Raises:
            GenerationNotFoundError: Генерация не найдена
            GenerationAccessDeniedError: Генерация принадлежит другому пользователю
        """
        generation = await self._generations.get_by_id(generation_id)
        if generation is None:
            raise GenerationNotFoundError(generation_id)
        if generation.user_id != user_id:
            raise GenerationAccessDeniedError(generation_id)

        flashcards = await self._flashcards.list_by_generation(generation_id)

        return GenerationDetailResponse(
            **GenerationDetail.model_validate(generation).model_dump(),
            accepted_unedited_count=generation.accepted_unedited_count,
            accepted_edited_count=generation.accepted_edited_count,
            flashcards=[FlashcardResponse.model_validate(card) for card in flashcards],
        )

    # ==================== Accept / reject ====================

    async def accept_generation_flashcards(
        self,
        generation_id: int,
        flashcards: list[FlashcardAccept],
        user_id: UUID,
    ) -> AcceptGenerationFlashcardsResponse:
        """
        Сохранить выбранные предложения как постоянные карточки.

        Счётчики ai_full и ai_edited считаются по присланным карточкам.

        Raises:
            GenerationNotFoundError: Нет генерации с таким ID у этого пользователя
            InvalidFlashcardsDataError: generation_id карточки не совпадает с ID генерации
            PersistenceFailedError: Ошибка записи
        """
        generation = await self._get_owned(generation_id, user_id)

        mismatched = [card.generation_id for card in flashcards if card.generation_id != generation_id]
        if mismatched:
            raise InvalidFlashcardsDataError(generation_id, mismatched)

        inserted = await self._flashcards.create_for_generation(
            [
                FlashcardCreate(
                    front_text=card.front_text,
                    back_text=card.back_text,
                    source_type=card.source_type,
                    generation_id=generation_id,
                    user_id=user_id,
                )
                for card in flashcards
            ]
        )

        unedited = sum(1 for card in flashcards if card.source_type == SourceType.AI_FULL)
        edited = sum(1 for card in flashcards if card.source_type == SourceType.AI_EDITED)

        await self._generations.set_fields(
            generation,
            accepted_unedited_count=unedited,
            accepted_edited_count=edited,
            status=GenerationStatus.ACCEPTED,
        )

        record_flashcards_accepted(unedited, edited)
        log_flashcards_accepted(generation_id, unedited, edited, user_id=user_id)

        return AcceptGenerationFlashcardsResponse(
            accepted_count=len(inserted),
            flashcards=[FlashcardResponse.model_validate(card) for card in inserted],
        )

    async def reject_generation(self, generation_id: int, user_id: UUID) -> RejectGenerationResponse:
        """
        Отклонить генерацию. Карточки не создаются и не удаляются.

        Raises:
            GenerationNotFoundError: Нет генерации с таким ID у этого пользователя
            PersistenceFailedError: Ошибка обновления
        """
        generation = await self._get_owned(generation_id, user_id)

        await self._generations.set_fields(generation, status=GenerationStatus.REJECTED)

        record_generation_rejected()
        log_generation_rejected(generation_id, user_id=user_id)

        return RejectGenerationResponse(success=True, id=generation_id)

    async def _get_owned(self, generation_id: int, user_id: UUID) -> Generation:
        generation = await self._generations.get_for_user(generation_id, user_id)
        if generation is None:
            raise GenerationNotFoundError(generation_id)
        return generation
