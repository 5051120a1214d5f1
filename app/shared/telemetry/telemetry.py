"""OpenTelemetry tracing for catalog-search.

One tracer provider per process, installed by init_telemetry() from the
lifespan when TELEMETRY_ENABLED is set. Spans come from three places:
FastAPI requests (health checks excluded), SQL statements on the catalog engine,
and the traced() / TracedOperation helpers around index synchronization,
search and reindex. Log records get trace_id / span_id injected.

Exporters: console, otlp (gRPC), or none.
"""

import logging
import threading
from collections.abc import Callable

from fastapi import FastAPI
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.logging import LoggingInstrumentor
from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor
from opentelemetry.sdk.resources import SERVICE_NAME, SERVICE_VERSION, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import (
    BatchSpanProcessor,
    ConsoleSpanExporter,
    SpanExporter,
)
from opentelemetry.sdk.trace.sampling import TraceIdRatioBased
from sqlalchemy.ext.asyncio import AsyncEngine

from app.core.config import Settings

logger = logging.getLogger(__name__)

EXPORTER_CONSOLE = "console"
EXPORTER_OTLP = "otlp"
EXPORTER_NONE = "none"

# Liveness and readiness checks would otherwise dominate the trace volume
_EXCLUDED_URLS = "/api/v1/health,/api/v1/health/ready"


def _build_exporter(exporter_type: str, otlp_endpoint: str | None) -> SpanExporter | None:
    """Return the span exporter for exporter_type; None for 'none'."""
    if exporter_type == EXPORTER_NONE:
        return None
    if exporter_type == EXPORTER_OTLP:
        if otlp_endpoint:
            return OTLPSpanExporter(
                endpoint=otlp_endpoint, insecure=otlp_endpoint.startswith("http://")
            )
        logger.warning("TELEMETRY_EXPORTER=otlp without TELEMETRY_OTLP_ENDPOINT, using console")
    elif exporter_type != EXPORTER_CONSOLE:
        logger.warning("Unknown exporter type '%s', using console", exporter_type)
    return ConsoleSpanExporter()


class TelemetryConfig:
    """Tracer provider for the service plus its instrumentors."""

    def __init__(
        self,
        service_name: str,
        service_version: str,
        enabled: bool = True,
        environment: str = "development",
    ) -> None:
        self.service_name = service_name
        self.service_version = service_version
        self.enabled = enabled
        self.environment = environment
        self.tracer_provider: TracerProvider | None = None
        self.instrumented: list[str] = []

    @classmethod
    def from_settings(cls, settings: Settings) -> "TelemetryConfig":
        return cls(
            service_name=settings.app_name,
            service_version=settings.app_version,
            enabled=settings.telemetry_enabled,
            environment=settings.telemetry_environment,
        )

    @property
    def active(self) -> bool:
        return self.enabled and self.tracer_provider is not None

    def setup_telemetry(
        self,
        exporter_type: str = EXPORTER_CONSOLE,
        otlp_endpoint: str | None = None,
        sample_rate: float = 1.0,
    ) -> TracerProvider | None:
        """Create the tracer provider and install it as the global provider.

        Returns None (and leaves tracing off) when disabled or when the
        provider cannot be created; the service runs without spans then.
        """
        if not self.enabled:
            logger.info("Telemetry disabled")
            return None
        resource = Resource(
            attributes={
                SERVICE_NAME: self.service_name,
                SERVICE_VERSION: self.service_version,
                "deployment.environment": self.environment,
            }
        )
        try:
            provider = TracerProvider(resource=resource, sampler=TraceIdRatioBased(sample_rate))
            exporter = _build_exporter(exporter_type, otlp_endpoint)
            if exporter is not None:
                provider.add_span_processor(BatchSpanProcessor(exporter))
        except Exception as e:
            logger.exception("Failed to initialize telemetry: %s", e)
            return None
        trace.set_tracer_provider(provider)
        self.tracer_provider = provider
        logger.info(
            "OpenTelemetry initialized: service=%s version=%s exporter=%s sample_rate=%s",
            self.service_name,
            self.service_version,
            exporter_type,
            sample_rate,
        )
        return provider

    def _instrument(self, name: str, apply: Callable[[], None]) -> None:
        if not self.active:
            return
        try:
            apply()
        except Exception as e:
            logger.exception("Failed to instrument %s: %s", name, e)
            return
        self.instrumented.append(name)
        logger.info("%s instrumentation enabled", name)

    def instrument_fastapi(self, app: FastAPI) -> None:
        """Trace API requests, health checks excluded."""
        self._instrument(
            "FastAPI",
            lambda: FastAPIInstrumentor.instrument_app(
                app, tracer_provider=self.tracer_provider, excluded_urls=_EXCLUDED_URLS
            ),
        )

    def instrument_sqlalchemy(self, engine: AsyncEngine) -> None:
        """Trace statements on the catalog database engine."""
        self._instrument(
            "SQLAlchemy",
            lambda: SQLAlchemyInstrumentor().instrument(
                engine=engine.sync_engine, tracer_provider=self.tracer_provider
            ),
        )

    def instrument_logging(self) -> None:
        """Inject trace_id and span_id into log records."""
        self._instrument(
            "logging",
            lambda: LoggingInstrumentor().instrument(
                tracer_provider=self.tracer_provider, set_logging_format=True
            ),
        )

    def shutdown(self) -> None:
        """Flush pending spans and shut the provider down."""
        if self.tracer_provider is None:
            return
        try:
            self.tracer_provider.shutdown()
        except Exception as e:
            logger.exception("Error during telemetry shutdown: %s", e)
            return
        logger.info("Telemetry shutdown complete")


def init_telemetry(settings: Settings, app: FastAPI, engine: AsyncEngine) -> TelemetryConfig:
    """Set up tracing for the API and the catalog database; register the instance globally."""
    telemetry = TelemetryConfig.from_settings(settings)
    telemetry.setup_telemetry(
        exporter_type=settings.telemetry_exporter,
        otlp_endpoint=settings.telemetry_otlp_endpoint,
        sample_rate=settings.telemetry_sample_rate,
    )
    telemetry.instrument_fastapi(app)
    telemetry.instrument_sqlalchemy(engine)
    telemetry.instrument_logging()
    set_telemetry(telemetry)
    return telemetry


_telemetry: TelemetryConfig | None = None
_telemetry_lock = threading.RLock()


def get_telemetry() -> TelemetryConfig | None:
    """Return the process telemetry instance (set at startup)."""
    with _telemetry_lock:
        return _telemetry


def set_telemetry(telemetry: TelemetryConfig | None) -> None:
    """Set (or clear, on shutdown) the process telemetry instance."""
    global _telemetry
    with _telemetry_lock:
        _telemetry = telemetry
