"""Health, metrics, and readiness endpoints"""

from fastapi import APIRouter
from fastapi.responses import Response

from flashgen.core.config import settings
from flashgen.core.database import db_manager
from flashgen.core.dependencies import RedisManager
from flashgen.core.metrics import metrics_endpoint
from flashgen.shared.schemas import HealthResponse

router = APIRouter(prefix="/observability", tags=["Системные"])


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Health check endpoint for load balancer."""
    dependencies = {
        "postgres": "healthy" if await db_manager.health_check() else "unhealthy",
        "redis": "healthy" if await RedisManager.health_check() else "unhealthy",
    }

    status = "healthy" if all(v == "healthy" for v in dependencies.values()) else "unhealthy"

    return HealthResponse(status=status, version=settings.app.version, dependencies=dependencies)


@router.get("/ready")
async def readiness_check() -> dict[str, bool]:
    """Readiness check endpoint."""
    return {"ready": await db_manager.health_check()}


@router.get("/live")
async def liveness_check() -> dict[str, bool]:
    """Liveness check endpoint."""
    return {"alive": True}


@router.get("/metrics")
async def get_metrics() -> Response:
    """Prometheus metrics endpoint."""
    return await metrics_endpoint()
