"""In-memory doubles for repositories, proposal generators and the error log."""

import asyncio
from collections.abc import Sequence
from datetime import UTC, datetime
from typing import Any
from uuid import UUID

from flashgen.core.exceptions import PersistenceFailedError
from flashgen.modules.flashcards.models import Flashcard, SourceType
from flashgen.modules.flashcards.schemas import FlashcardCreate
from flashgen.modules.generations.models import Generation
from flashgen.modules.generations.schemas import FlashcardProposal, GenerationErrorLogCreate
from flashgen.tests.factories import FlashcardFactory, GenerationFactory


# ==================== Repositories ====================


class FakeGenerationRepository:
    """Stores generations in a dict keyed by id."""

    def __init__(
        self,
        rows: Sequence[Generation] = (),
        *,
        fail_on_create: bool = False,
        fail_on_update: bool = False,
    ) -> None:
        self.rows: dict[int, Generation] = {row.id: row for row in rows}
        self.fail_on_create = fail_on_create
        self.fail_on_update = fail_on_update
        self.create_calls = 0
        self.update_calls: list[dict[str, Any]] = []

    def add(self, generation: Generation) -> Generation:
        self.rows[generation.id] = generation
        return generation

    async def create_pending(self, data: dict[str, Any]) -> Generation:
        self.create_calls += 1
        if self.fail_on_create:
            raise PersistenceFailedError("Database operation failed")
        next_id = max(self.rows, default=0) + 1
        return self.add(GenerationFactory.build(id=next_id, **data))

    async def get_by_id(self, id: int) -> Generation | None:
        return self.rows.get(id)

    async def get_for_user(self, generation_id: int, user_id: UUID) -> Generation | None:
        generation = self.rows.get(generation_id)
        if generation is None or generation.user_id != user_id:
            return None
        return generation

    async def set_fields(self, generation: Generation, **fields: Any) -> Generation:
        self.update_calls.append(fields)
        if self.fail_on_update:
            raise PersistenceFailedError("Database operation failed")
        for field, value in fields.items():
            setattr(generation, field, value)
        generation.updated_at = datetime.now(UTC)
        return generation


class FakeFlashcardRepository:
    """Appends flashcards to a list, assigning sequential ids."""

    def __init__(self, rows: Sequence[Flashcard] = (), *, fail_on_create: bool = False) -> None:
        self.rows: list[Flashcard] = list(rows)
        self.fail_on_create = fail_on_create
        self.create_calls = 0

    async def create_for_generation(self, cards: list[FlashcardCreate]) -> list[Flashcard]:
        self.create_calls += 1
        if self.fail_on_create:
            raise PersistenceFailedError("Database operation failed")
        inserted = []
        for card in cards:
            next_id = max((row.id for row in self.rows), default=0) + 1
            flashcard = FlashcardFactory.build(id=next_id, **card.model_dump())
            self.rows.append(flashcard)
            inserted.append(flashcard)
        return inserted

    async def list_by_generation(self, generation_id: int) -> list[Flashcard]:
        return [row for row in self.rows if row.generation_id == generation_id]


# ==================== Proposal generators ====================


class StaticProposalGenerator:
    """Returns the same proposals every time and counts calls."""

    model = "static-test"

    def __init__(self, proposals: list[FlashcardProposal] | None = None) -> None:
        self.proposals = (
            proposals
            if proposals is not None
            else [
                FlashcardProposal(front_text="What is photosynthesis?", back_text="Light to food"),
                FlashcardProposal(front_text="Where does it happen?", back_text="Chloroplasts"),
            ]
        )
        self.calls: list[str] = []

    async def generate(self, source_text: str) -> list[FlashcardProposal]:
        self.calls.append(source_text)
        return list(self.proposals)


class FailingProposalGenerator:
    """Raises the given exception from generate."""

    model = "failing-test"

    def __init__(self, error: Exception) -> None:
        self.error = error

    async def generate(self, source_text: str) -> list[FlashcardProposal]:
        raise self.error


class SlowProposalGenerator:
    """Sleeps far beyond any test timeout and records its cancellation."""

    model = "slow-test"

    def __init__(self, delay: float = 30.0) -> None:
        self.delay = delay
        self.cancelled = False

    async def generate(self, source_text: str) -> list[FlashcardProposal]:
        try:
            await asyncio.sleep(self.delay)
        except asyncio.CancelledError:
            self.cancelled = True
            raise
        return [FlashcardProposal(front_text="late", back_text="late")]


# ==================== Error log ====================


class RecordingErrorLog:
    """Error log writer that keeps entries in memory."""

    def __init__(self) -> None:
        self.entries: list[GenerationErrorLogCreate] = []

    async def __call__(self, entry: GenerationErrorLogCreate) -> None:
        self.entries.append(entry)


class FailingErrorLog:
    """Error log writer whose store is unavailable."""

    def __init__(self) -> None:
        self.attempts = 0

    async def __call__(self, entry: GenerationErrorLogCreate) -> None:
        self.attempts += 1
        raise ConnectionError("error log store unavailable")


def accept_payload(
    generation_id: int,
    *source_types: SourceType,
) -> list[dict[str, Any]]:
    """Build accept-request flashcards, one per given source type."""
    return [
        {
            "id": index,
            "front_text": f"Front {index}",
            "back_text": f"Back {index}",
            "source_type": source_type.value,
            "generation_id": generation_id,
        }
        for index, source_type in enumerate(source_types, start=1)
    ]
