"""Repositories for generations and the generation error log."""

from typing import Any
from uuid import UUID

from sqlalchemy import and_, select
from sqlalchemy.ext.asyncio import AsyncSession

from flashgen.shared.errors import safe
from flashgen.shared.repository import BaseRepository

from .models import Generation, GenerationErrorLog
from .schemas import GenerationErrorLogCreate


class GenerationRepository(BaseRepository[Generation]):
    """Row access for the generations table."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Generation)

    @safe
    async def get_for_user(self, generation_id: int, user_id: UUID) -> Generation | None:
        """Get a generation by ID only if it belongs to the user.

        Existence and ownership are a single predicate, so a foreign
        generation is indistinguishable from a missing one.
        """
        query = select(Generation).where(
            and_(Generation.id == generation_id, Generation.user_id == user_id)
        )
        result = await self._session.execute(query)
        return result.scalar_one_or_none()

    @safe
    async def create_pending(self, data: dict[str, Any]) -> Generation:
        """Insert a generation row and commit it at once.

        The row must outlive a rollback of the request session, and the
        error log written from another session references it.
        """
        generation = await self.create(data)
        await self._session.commit()
        return generation

    async def set_fields(self, generation: Generation, **fields: Any) -> Generation:
        """Update selected columns of a generation."""
        return await self.update(generation, fields)


class GenerationErrorLogRepository(BaseRepository[GenerationErrorLog]):
    """Append-only access to generation_error_logs."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, GenerationErrorLog)

    async def append(self, entry: GenerationErrorLogCreate) -> GenerationErrorLog:
        """Append a single error log row."""
        return await self.create(entry.model_dump())
