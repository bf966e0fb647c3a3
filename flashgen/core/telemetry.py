"""
OpenTelemetry setup with auto-instrumentation.

Uses NoOpSpanExporter when no OTLP endpoint is configured so trace ids are
still generated for log correlation.
"""

from collections.abc import Sequence

from fastapi import FastAPI
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.redis import RedisInstrumentor
from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import ReadableSpan, TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, SpanExporter, SpanExportResult

from flashgen.core.config import settings
from flashgen.core.database import db_manager
from flashgen.shared.context import trace_id_var

# Excluded URLs for FastAPI instrumentation (health checks, metrics)
EXCLUDED_URLS = (
    "observability/health,"
    "observability/ready,"
    "observability/live,"
    "observability/metrics"
)


class NoOpSpanExporter(SpanExporter):
    """No-op exporter that does nothing but allows spans to be recorded."""

    def export(self, spans: Sequence[ReadableSpan]) -> SpanExportResult:
        return SpanExportResult.SUCCESS

    def shutdown(self) -> None:
        pass


_tracer_provider: TracerProvider | None = None


def setup_telemetry(app: FastAPI) -> None:
    """Setup OpenTelemetry with auto-instrumentation for FastAPI app.

    Instruments FastAPI requests, SQLAlchemy queries and Redis operations.
    Does nothing unless ``OTEL_ENABLED`` is set.

    Args:
        app: FastAPI application instance.
    """
    global _tracer_provider
    if not settings.telemetry.enabled:
        return

    resource = Resource.create(
        attributes={
            "service.name": settings.telemetry.service_name,
            "service.version": settings.app.version,
            "deployment.environment": "development" if settings.app.debug else "production",
        }
    )

    tracer_provider = TracerProvider(resource=resource)

    if settings.telemetry.exporter_otlp_endpoint:
        span_exporter: SpanExporter = OTLPSpanExporter(
            endpoint=settings.telemetry.exporter_otlp_endpoint,
            insecure=True,
        )
    else:
        span_exporter = NoOpSpanExporter()

    tracer_provider.add_span_processor(BatchSpanProcessor(span_exporter))
    trace.set_tracer_provider(tracer_provider)
    _tracer_provider = tracer_provider

    FastAPIInstrumentor.instrument_app(
        app,
        tracer_provider=tracer_provider,
        excluded_urls=EXCLUDED_URLS,
    )

    try:
        SQLAlchemyInstrumentor().instrument(
            engine=db_manager.engine.sync_engine,
            tracer_provider=tracer_provider,
        )
    except RuntimeError:
        # Database not initialized yet
        pass

    RedisInstrumentor().instrument(tracer_provider=tracer_provider)


def shutdown_telemetry() -> None:
    """Flush and shut down the tracer provider, if one was installed."""
    global _tracer_provider
    if _tracer_provider is not None:
        _tracer_provider.shutdown()
        _tracer_provider = None


def get_trace_id() -> str | None:
    """Get trace ID of current span.

    Returns:
        Trace ID as hex string or None if not in a traced context.
    """
    span = trace.get_current_span()
    context = span.get_span_context()
    if not context.is_valid:
        return None

    trace_id = format(context.trace_id, "032x")
    # Update context variable for use in logging
    trace_id_var.set(trace_id)
    return trace_id
