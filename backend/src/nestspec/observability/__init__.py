"""Observability utilities for logging, tracing, and metrics."""

from __future__ import annotations

from typing import Optional

from opentelemetry.sdk.trace.export import SpanExporter

from .logging import configure_logging_once, get_logger
from .metrics import record_example_outcome, render_metrics
from .tracing import configure_tracing, get_tracer

_configured = False


def setup_observability(*, tracing_exporter: Optional[SpanExporter] = None) -> None:
    """
    Configure logging, tracing, and metrics for spec runs.

    The configuration is idempotent; subsequent calls are ignored unless a
    ``tracing_exporter`` is passed, which is attached to the existing provider.
    Tests can pass an ``InMemorySpanExporter`` for assertions.
    """

    global _configured
    if _configured and tracing_exporter is None:
        return

    configure_logging_once()
    configure_tracing(exporter=tracing_exporter)

    _configured = True


__all__ = [
    "setup_observability",
    "configure_logging_once",
    "configure_tracing",
    "get_logger",
    "get_tracer",
    "record_example_outcome",
    "render_metrics",
]
