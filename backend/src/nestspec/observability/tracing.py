"""OpenTelemetry tracing helpers."""

from __future__ import annotations

import os
from typing import Optional

from opentelemetry import trace
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import (
    BatchSpanProcessor,
    ConsoleSpanExporter,
    SimpleSpanProcessor,
    SpanExporter,
    SpanExportResult,
)

from nestspec.config import get_settings

_provider: Optional[TracerProvider] = None
_default_processor_configured = False


def configure_tracing(*, exporter: Optional[SpanExporter] = None) -> TracerProvider:
    """Install the SDK tracer provider once and attach ``exporter`` if given."""

    global _provider, _default_processor_configured

    if _provider is None:
        provider = TracerProvider(
            resource=Resource.create(
                {
                    "service.name": os.getenv("OTEL_SERVICE_NAME", "nestspec"),
                    "deployment.environment": get_settings().environment,
                }
            ),
        )
        trace.set_tracer_provider(provider)
        _provider = provider
    else:
        provider = _provider

    if exporter is None and not _default_processor_configured:
        provider.add_span_processor(BatchSpanProcessor(_default_exporter()))
        _default_processor_configured = True
    elif exporter is not None:
        provider.add_span_processor(SimpleSpanProcessor(exporter))

    return provider


def get_tracer(name: str = "nestspec") -> trace.Tracer:
    """Return a tracer from the globally configured provider."""

    return trace.get_tracer(name)


def _default_exporter() -> SpanExporter:
    if os.getenv("OTEL_TRACING_CONSOLE", "false").lower() == "true":
        return ConsoleSpanExporter()
    return _NullSpanExporter()


class _NullSpanExporter(SpanExporter):
    """A no-op exporter used when no backend is configured."""

    def export(self, spans):
        return SpanExportResult.SUCCESS

    def shutdown(self):
        return
