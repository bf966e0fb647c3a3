"""Pytest configuration and fixtures for flashgen tests.

Environment overrides are applied before any flashgen module is imported,
because settings are read once at import time.
"""

import os

os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-for-flashgen-tests-only")
os.environ.setdefault("JWT_AUDIENCE", "")
os.environ.setdefault("GENERATION_MOCK_LATENCY_SECONDS", "0")
os.environ.setdefault("GENERATION_TIMEOUT_SECONDS", "5")
os.environ.setdefault("OTEL_ENABLED", "false")
os.environ.setdefault("APP_DEBUG", "false")

from collections.abc import AsyncGenerator, Iterator
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock
from uuid import UUID, uuid4

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import BigInteger, event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.ext.compiler import compiles
from sqlalchemy.pool import NullPool

from flashgen.api.generations import get_generation_service
from flashgen.core.database import Base, db_manager
from flashgen.core.dependencies import get_current_user_id
from flashgen.core.security import create_access_token
from flashgen.main import create_app
from flashgen.modules.generations.service import GenerationService
from flashgen.tests.fakes import (
    FakeFlashcardRepository,
    FakeGenerationRepository,
    RecordingErrorLog,
    StaticProposalGenerator,
)

SOURCE_TEXT = (
    "Photosynthesis is the process by which green plants and some other organisms "
    "use sunlight to synthesize foods from carbon dioxide and water. "
) * 10


# ==================== Identity Fixtures ====================


@pytest.fixture
def user_id() -> UUID:
    """ID of the authenticated caller."""
    return uuid4()


@pytest.fixture
def other_user_id() -> UUID:
    """ID of a different user."""
    return uuid4()


@pytest.fixture
def auth_headers(user_id: UUID) -> dict[str, str]:
    """Bearer headers carrying a valid token for ``user_id``."""
    return {"Authorization": f"Bearer {create_access_token(user_id)}"}


@pytest.fixture
def source_text() -> str:
    """Source text within the accepted length range."""
    assert 1000 <= len(SOURCE_TEXT) <= 10000
    return SOURCE_TEXT


# ==================== Database Fixtures ====================


@pytest.fixture
def mock_session() -> AsyncMock:
    """Create a mock AsyncSession for testing.

    This session mocks all common SQLAlchemy AsyncSession methods.
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.commit = AsyncMock()
    session.flush = AsyncMock()
    session.refresh = AsyncMock()
    session.add = MagicMock()
    session.add_all = MagicMock()
    return session


@compiles(BigInteger, "sqlite")
def _compile_big_integer_for_sqlite(type_, compiler, **kw) -> str:
    # SQLite autoincrements only an INTEGER PRIMARY KEY
    return "INTEGER"


@pytest.fixture
async def engine(tmp_path: Path) -> AsyncGenerator[AsyncEngine, None]:
    """Create a file-backed SQLite engine with the schema and foreign keys on.

    A file is used instead of :memory: so that separate sessions reach
    the same database through separate connections.
    """
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'flashgen.db'}",
        poolclass=NullPool,
        echo=False,
    )

    @event.listens_for(engine.sync_engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record) -> None:
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(
    engine: AsyncEngine, monkeypatch: pytest.MonkeyPatch
) -> async_sessionmaker[AsyncSession]:
    """Point the global database manager at the test engine."""
    factory = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )
    monkeypatch.setattr(db_manager, "_engine", engine)
    monkeypatch.setattr(db_manager, "_session_factory", factory)
    return factory


# ==================== Service Fixtures ====================


@pytest.fixture
def generation_repo() -> FakeGenerationRepository:
    return FakeGenerationRepository()


@pytest.fixture
def flashcard_repo() -> FakeFlashcardRepository:
    return FakeFlashcardRepository()


@pytest.fixture
def error_log() -> RecordingErrorLog:
    return RecordingErrorLog()


@pytest.fixture
def proposal_generator() -> StaticProposalGenerator:
    return StaticProposalGenerator()


@pytest.fixture
def generation_service(
    mock_session: AsyncMock,
    proposal_generator: StaticProposalGenerator,
    error_log: RecordingErrorLog,
    generation_repo: FakeGenerationRepository,
    flashcard_repo: FakeFlashcardRepository,
) -> GenerationService:
    """GenerationService wired to in-memory repositories."""
    return GenerationService(
        mock_session,
        proposal_generator,
        error_log_writer=error_log,
        generations=generation_repo,
        flashcards=flashcard_repo,
    )


# ==================== Application Fixtures ====================


@pytest.fixture
def app() -> Iterator[FastAPI]:
    """Fresh application instance; overrides are cleared afterwards."""
    application = create_app()
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
def mock_service() -> AsyncMock:
    """GenerationService double for router tests."""
    return AsyncMock(spec=GenerationService)


@pytest.fixture
def client(app: FastAPI, user_id: UUID, mock_service: AsyncMock) -> TestClient:
    """Client with the caller's identity and the service overridden."""
    app.dependency_overrides[get_current_user_id] = lambda: user_id
    app.dependency_overrides[get_generation_service] = lambda: mock_service
    return TestClient(app, raise_server_exceptions=False)
