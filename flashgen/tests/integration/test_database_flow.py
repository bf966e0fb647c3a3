"""Integration tests for the generation lifecycle against a real database.

The application runs unmodified on top of a SQLite engine: the request
session from get_db, the real repositories and the error log written from
its own session. Only the proposal generator is swapped where a failure is
needed.
"""

from uuid import UUID

import pytest
from fastapi import FastAPI, status
from httpx import ASGITransport, AsyncClient
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from flashgen.api.generations import get_generation_service
from flashgen.core.dependencies import DatabaseSession
from flashgen.core.security import create_access_token
from flashgen.modules.flashcards.models import Flashcard
from flashgen.modules.generations.models import (
    Generation,
    GenerationErrorLog,
    GenerationStatus,
)
from flashgen.modules.generations.proposals import ProposalGenerator
from flashgen.modules.generations.service import (
    AI_SERVICE_ERROR,
    AI_SERVICE_TIMEOUT,
    GenerationService,
)
from flashgen.tests.fakes import FailingProposalGenerator, SlowProposalGenerator


def bearer(user_id: UUID) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user_id)}"}


def use_generator(app: FastAPI, generator: ProposalGenerator, **options) -> None:
    """Build the service on the request session with the given generator."""

    async def service(session: DatabaseSession) -> GenerationService:
        return GenerationService(session, generator, **options)

    app.dependency_overrides[get_generation_service] = service


@pytest.fixture
async def http(app: FastAPI, session_factory: async_sessionmaker[AsyncSession]):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client


async def count(factory: async_sessionmaker[AsyncSession], model) -> int:
    async with factory() as session:
        return await session.scalar(select(func.count()).select_from(model))


@pytest.mark.asyncio
class TestFailedStartPersists:
    """A failed start keeps the pending generation and its error log row."""

    async def test_generator_error_keeps_row_and_error_log(
        self,
        app: FastAPI,
        http: AsyncClient,
        session_factory: async_sessionmaker[AsyncSession],
        user_id: UUID,
        source_text: str,
    ):
        use_generator(app, FailingProposalGenerator(RuntimeError("provider down")))

        response = await http.post(
            "/api/generations", json={"source_text": source_text}, headers=bearer(user_id)
        )

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.json()["error"]["code"] == "internal_server_error"

        async with session_factory() as session:
            (generation,) = (await session.scalars(select(Generation))).all()
            (entry,) = (await session.scalars(select(GenerationErrorLog))).all()

        assert generation.user_id == user_id
        assert generation.status == GenerationStatus.PENDING
        assert generation.source_text_length == len(source_text)
        assert generation.generation_duration is None
        assert entry.generation_id == generation.id
        assert entry.error_code == AI_SERVICE_ERROR
        assert entry.error_message == "provider down"
        assert entry.user_id == user_id
        assert entry.model == FailingProposalGenerator.model

    async def test_timeout_keeps_row_and_error_log(
        self,
        app: FastAPI,
        http: AsyncClient,
        session_factory: async_sessionmaker[AsyncSession],
        user_id: UUID,
        source_text: str,
    ):
        generator = SlowProposalGenerator()
        use_generator(app, generator, timeout_seconds=0.05)

        response = await http.post(
            "/api/generations", json={"source_text": source_text}, headers=bearer(user_id)
        )

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert generator.cancelled is True
        assert await count(session_factory, Generation) == 1

        async with session_factory() as session:
            (entry,) = (await session.scalars(select(GenerationErrorLog))).all()

        assert entry.error_code == AI_SERVICE_TIMEOUT
        assert entry.generation_id is not None

    async def test_short_text_writes_nothing(
        self,
        http: AsyncClient,
        session_factory: async_sessionmaker[AsyncSession],
        user_id: UUID,
    ):
        response = await http.post(
            "/api/generations", json={"source_text": "too short"}, headers=bearer(user_id)
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert await count(session_factory, Generation) == 0
        assert await count(session_factory, GenerationErrorLog) == 0


@pytest.mark.asyncio
class TestLifecycleRoundTrip:
    """Start, accept, read back and reject through the real repositories."""

    async def test_start_accept_then_get(
        self,
        http: AsyncClient,
        session_factory: async_sessionmaker[AsyncSession],
        user_id: UUID,
        source_text: str,
    ):
        headers = bearer(user_id)

        started = await http.post(
            "/api/generations", json={"source_text": source_text}, headers=headers
        )

        assert started.status_code == status.HTTP_200_OK
        generation = started.json()
        generation_id = generation["id"]
        assert generation["status"] == "pending"
        assert generation["flashcards_count"] == len(generation["flashcards_proposals"])
        assert await count(session_factory, Flashcard) == 0

        first = generation["flashcards_proposals"][0]
        accepted = await http.post(
            f"/api/generations/{generation_id}/accept",
            json={
                "flashcards": [
                    {
                        "front_text": first["front_text"],
                        "back_text": first["back_text"],
                        "source_type": "ai_full",
                        "generation_id": generation_id,
                    },
                    {
                        "front_text": "What do chloroplasts contain?",
                        "back_text": "Chlorophyll",
                        "source_type": "ai_edited",
                        "generation_id": generation_id,
                    },
                ]
            },
            headers=headers,
        )

        assert accepted.status_code == status.HTTP_200_OK
        assert accepted.json()["accepted_count"] == 2

        fetched = await http.get(f"/api/generations/{generation_id}", headers=headers)

        assert fetched.status_code == status.HTTP_200_OK
        detail = fetched.json()
        assert detail["status"] == "accepted"
        assert detail["accepted_unedited_count"] == 1
        assert detail["accepted_edited_count"] == 1
        assert [card["source_type"] for card in detail["flashcards"]] == ["ai_full", "ai_edited"]
        assert all(card["generation_id"] == generation_id for card in detail["flashcards"])
        assert await count(session_factory, GenerationErrorLog) == 0

    async def test_reject_and_foreign_access(
        self,
        http: AsyncClient,
        user_id: UUID,
        other_user_id: UUID,
        source_text: str,
    ):
        started = await http.post(
            "/api/generations", json={"source_text": source_text}, headers=bearer(user_id)
        )
        generation_id = started.json()["id"]

        foreign_get = await http.get(
            f"/api/generations/{generation_id}", headers=bearer(other_user_id)
        )
        foreign_reject = await http.post(
            f"/api/generations/{generation_id}/reject", headers=bearer(other_user_id)
        )
        rejected = await http.post(
            f"/api/generations/{generation_id}/reject", headers=bearer(user_id)
        )
        fetched = await http.get(f"/api/generations/{generation_id}", headers=bearer(user_id))

        assert foreign_get.status_code == status.HTTP_403_FORBIDDEN
        assert foreign_reject.status_code == status.HTTP_404_NOT_FOUND
        assert rejected.json() == {"success": True, "id": generation_id}
        assert fetched.json()["status"] == "rejected"
        assert fetched.json()["flashcards"] == []

    async def test_out_of_range_id_is_invalid_not_a_server_error(
        self,
        http: AsyncClient,
        user_id: UUID,
    ):
        response = await http.post(
            "/api/generations/99999999999999999999/reject", headers=bearer(user_id)
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["error"]["code"] == "invalid_id"
