"""
Prometheus метрики для мониторинга приложения.
"""

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    Info,
    generate_latest,
    multiprocess,
)

from .config import settings

# ==================== Registry ====================


def create_registry() -> CollectorRegistry:
    """Создать registry для метрик."""
    registry = CollectorRegistry(auto_describe=True)

    # Для multiprocess режима (gunicorn с несколькими воркерами)
    try:
        multiprocess.MultiProcessCollector(registry)
    except ValueError:
        # Не в multiprocess режиме
        pass

    return registry


# Глобальный registry
REGISTRY = create_registry()


# ==================== Application Info ====================

APP_INFO = Info(
    "flashgen_app",
    "Application information",
    registry=REGISTRY,
)


# ==================== HTTP Metrics ====================

HTTP_REQUEST_COUNT = Counter(
    "flashgen_http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status_code"],
    registry=REGISTRY,
)

HTTP_REQUEST_LATENCY = Histogram(
    "flashgen_http_request_duration_seconds",
    "HTTP request latency in seconds",
    ["method", "endpoint"],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.075, 0.1, 0.25, 0.5, 0.75, 1.0, 2.5, 5.0, 7.5, 10.0),
    registry=REGISTRY,
)

HTTP_REQUEST_IN_PROGRESS = Gauge(
    "flashgen_http_requests_in_progress",
    "Number of HTTP requests currently in progress",
    ["method", "endpoint"],
    registry=REGISTRY,
)


# ==================== Generation Metrics ====================

GENERATION_COUNT = Counter(
    "flashgen_generations_total",
    "Total flashcard generation attempts by outcome",
    ["status"],
    registry=REGISTRY,
)

GENERATION_LATENCY = Histogram(
    "flashgen_generation_duration_seconds",
    "Proposal generation latency in seconds",
    ["model"],
    buckets=(0.5, 1.0, 2.5, 5.0, 10.0, 15.0, 30.0, 60.0, 120.0),
    registry=REGISTRY,
)

FLASHCARDS_ACCEPTED = Counter(
    "flashgen_flashcards_accepted_total",
    "Total number of accepted flashcards",
    ["source_type"],
    registry=REGISTRY,
)

GENERATIONS_REJECTED = Counter(
    "flashgen_generations_rejected_total",
    "Total number of rejected generations",
    registry=REGISTRY,
)

GENERATION_ERROR_LOG_FAILURES = Counter(
    "flashgen_generation_error_log_failures_total",
    "Error log rows that could not be written",
    ["error_code"],
    registry=REGISTRY,
)


# ==================== Recording helpers ====================


def record_http_request(
    method: str,
    endpoint: str,
    status_code: int,
    duration: float,
) -> None:
    """Записать метрики HTTP запроса."""
    HTTP_REQUEST_COUNT.labels(
        method=method,
        endpoint=endpoint,
        status_code=str(status_code),
    ).inc()

    HTTP_REQUEST_LATENCY.labels(
        method=method,
        endpoint=endpoint,
    ).observe(duration)


def record_generation(status: str, duration: float | None = None, model: str = "unknown") -> None:
    """Записать исход генерации и (для успешных) её длительность."""
    GENERATION_COUNT.labels(status=status).inc()
    if duration is not None:
        GENERATION_LATENCY.labels(model=model).observe(duration)


def record_flashcards_accepted(unedited: int, edited: int) -> None:
    """Записать количество принятых карточек по типу происхождения."""
    if unedited > 0:
        FLASHCARDS_ACCEPTED.labels(source_type="ai_full").inc(unedited)
    if edited > 0:
        FLASHCARDS_ACCEPTED.labels(source_type="ai_edited").inc(edited)


def record_generation_rejected() -> None:
    """Записать отклонение генерации."""
    GENERATIONS_REJECTED.inc()


def record_error_log_failure(error_code: str) -> None:
    """Записать неудачную попытку записи в журнал ошибок."""
    GENERATION_ERROR_LOG_FAILURES.labels(error_code=error_code).inc()


# ==================== Export ====================


def get_metrics() -> tuple[bytes, str]:
    """
    Получить метрики в формате Prometheus.

    Returns:
        Tuple из (содержимое, content-type).
    """
    return generate_latest(REGISTRY), CONTENT_TYPE_LATEST


async def metrics_endpoint():
    """Endpoint для экспорта метрик."""
    from fastapi.responses import Response

    content, content_type = get_metrics()
    return Response(content=content, media_type=content_type)


# ==================== Initialization ====================


def init_metrics() -> None:
    """Инициализировать метрики при старте приложения."""
    APP_INFO.info(
        {
            "name": settings.app.name,
            "version": settings.app.version,
            "debug": str(settings.app.debug),
        }
    )
