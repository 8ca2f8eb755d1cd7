"""Prometheus metrics for example outcomes."""

from __future__ import annotations

from prometheus_client import REGISTRY, Counter, Histogram, generate_latest

EXAMPLE_OUTCOME_COUNTER = Counter(
    "nestspec_example_outcomes_total",
    "Total number of example outcomes recorded by state",
    ["outcome"],
)

EXAMPLE_DURATION = Histogram(
    "nestspec_example_duration_seconds",
    "Example body execution time in seconds",
    buckets=(0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1, 5),
)


def record_example_outcome(outcome: str, duration_seconds: float) -> None:
    EXAMPLE_OUTCOME_COUNTER.labels(outcome=outcome).inc()
    EXAMPLE_DURATION.observe(max(duration_seconds, 0.0))


def render_metrics() -> str:
    """Return the Prometheus text exposition for the default registry."""

    return generate_latest(REGISTRY).decode("utf-8")
