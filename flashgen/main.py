"""FastAPI application entry point"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from flashgen.api import generations as generations_router
from flashgen.api import system as system_router
from flashgen.core.config import settings
from flashgen.core.database import db_manager
from flashgen.core.dependencies import close_dependencies
from flashgen.core.exceptions import setup_exception_handlers
from flashgen.core.logging import get_structured_logger, setup_logging
from flashgen.core.metrics import init_metrics
from flashgen.core.middleware import setup_middleware
from flashgen.core.telemetry import setup_telemetry, shutdown_telemetry

# Import all models first to ensure proper mapper configuration
from flashgen.modules.flashcards.models import Flashcard  # noqa: F401
from flashgen.modules.generations.models import Generation, GenerationErrorLog  # noqa: F401

logger = get_structured_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager for startup and shutdown events."""
    # Startup
    setup_logging()
    logger.info(f"Starting {settings.app.name}...")

    db_manager.init()
    logger.info("Database connection pool initialized")

    init_metrics()

    yield

    # Shutdown
    logger.info("Shutting down...")
    await close_dependencies()
    logger.info("Redis connection closed")
    await db_manager.close()
    logger.info("Database connections closed")
    shutdown_telemetry()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance.
    """
    app = FastAPI(
        title=settings.app.name,
        description="Flashcard generation lifecycle API",
        version=settings.app.version,
        debug=settings.app.debug,
        lifespan=lifespan,
        docs_url="/api/docs" if settings.app.debug else None,
        redoc_url="/api/redoc" if settings.app.debug else None,
        openapi_url="/api/openapi.json" if settings.app.debug else None,
        redirect_slashes=False,
    )

    setup_middleware(app)

    # Setup OpenTelemetry tracing
    setup_telemetry(app)

    # Register exception handlers
    setup_exception_handlers(app)

    # Include API routers with /api prefix
    app.include_router(generations_router.router, prefix="/api")

    # System router (no /api prefix - accessible at root)
    app.include_router(system_router.router)

    return app


# Create the application instance
app = create_app()
