"""
Middleware для обработки запросов.
"""

import time
import uuid
from collections.abc import Awaitable, Callable

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware

from .config import settings
from .logging import clear_request_context, get_structured_logger, set_request_context
from .metrics import HTTP_REQUEST_IN_PROGRESS, record_http_request
from .telemetry import get_trace_id

logger = get_structured_logger(__name__)


# ==================== Request Tracing Middleware ====================


class RequestTracingMiddleware(BaseHTTPMiddleware):
    """Middleware для трейсинга и логирования запросов.

    Добавляет request ID ко всем запросам и логирует детали запросов/ответов.
    """

    # Endpoints для пропуска детального логирования
    SKIP_LOG_ENDPOINTS: set[str] = {
        "/observability/health",
        "/observability/ready",
        "/observability/live",
        "/observability/metrics",
    }

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        """Обработать запрос с трейсингом и метриками."""
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id

        # Используем request_id как fallback если телеметрия отключена
        trace_id = get_trace_id() or request_id

        set_request_context(request_id=request_id, trace_id=trace_id)

        endpoint = self._get_endpoint(request)
        method = request.method
        in_progress = HTTP_REQUEST_IN_PROGRESS.labels(method=method, endpoint=endpoint)

        in_progress.inc()
        start_time = time.perf_counter()

        try:
            response = await call_next(request)
            duration = time.perf_counter() - start_time

            # Route известен только после обработки запроса
            endpoint = self._get_endpoint(request)
            record_http_request(method, endpoint, response.status_code, duration)

            response.headers["X-Request-ID"] = request_id

            self._log_request(
                request=request,
                response=response,
                duration=duration,
                request_id=request_id,
            )

            return response

        except Exception as e:
            duration = time.perf_counter() - start_time
            record_http_request(method, endpoint, 500, duration)

            logger.error(
                "Request failed",
                request_id=request_id,
                method=method,
                path=str(request.url.path),
                duration_ms=round(duration * 1000, 2),
                error=str(e),
                exc_info=True,
            )

            raise

        finally:
            in_progress.dec()
            clear_request_context()

    def _get_endpoint(self, request: Request) -> str:
        """Получить нормализованный endpoint для метрик.

        Заменяет динамические параметры пути на placeholders.
        """
        route = request.scope.get("route")
        if route is not None and hasattr(route, "path"):
            return route.path

        return request.url.path

    def _log_request(
        self,
        request: Request,
        response: Response,
        duration: float,
        request_id: str,
    ) -> None:
        """Логировать детали запроса."""
        if request.url.path in self.SKIP_LOG_ENDPOINTS:
            return

        log_level = "info" if response.status_code < 400 else "warning"
        if response.status_code >= 500:
            log_level = "error"

        log_method = getattr(logger, log_level)
        log_method(
            f"{request.method} {request.url.path}",
            request_id=request_id,
            method=request.method,
            path=str(request.url.path),
            status_code=response.status_code,
            duration_ms=round(duration * 1000, 2),
            client_ip=self._get_client_ip(request),
        )

    def _get_client_ip(self, request: Request) -> str:
        """Извлечь IP клиента из запроса."""
        forwarded_for = request.headers.get("X-Forwarded-For")
        if forwarded_for:
            return forwarded_for.split(",")[0].strip()

        if request.client:
            return request.client.host

        return "unknown"


def setup_middleware(app: FastAPI) -> None:
    """Настроить все middleware для приложения.

    Args:
        app: FastAPI приложение.
    """
    # Порядок важен: последний добавленный - первый выполняемый
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.app.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )

    app.add_middleware(RequestTracingMiddleware)
