"""Repository for persisted flashcards."""

from collections.abc import Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from flashgen.shared.errors import safe
from flashgen.shared.repository import BaseRepository

from .models import Flashcard
from .schemas import FlashcardCreate


class FlashcardRepository(BaseRepository[Flashcard]):
    """Insert and lookup of flashcards."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Flashcard)

    async def create_for_generation(self, cards: list[FlashcardCreate]) -> list[Flashcard]:
        """Insert accepted flashcards in one batch, preserving input order."""
        return await self.create_many(cards)

    @safe
    async def list_by_generation(self, generation_id: int) -> Sequence[Flashcard]:
        """All flashcards whose generation_id equals the given generation."""
        query = (
            select(Flashcard)
            .where(Flashcard.generation_id == generation_id)
            .order_by(Flashcard.id.asc())
        )
        result = await self._session.execute(query)
        return result.scalars().all()
