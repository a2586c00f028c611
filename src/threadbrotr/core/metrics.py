"""
Prometheus metrics for thread resolution.

Module-level metric objects are process-wide singletons (thread-safe in
``prometheus_client``). They are only touched when
[MetricsConfig.enabled][threadbrotr.core.metrics.MetricsConfig] is set, so
embedding applications that never scrape pay nothing.

Architecture:
    RELAY_QUERIES:               Per-relay query outcomes (ok / failed / timeout).
    RESOLUTION_DURATION_SECONDS: End-to-end latency of one resolution request.
    COLLECTED_EVENTS:            Size distribution of collected reply sets.
"""

from __future__ import annotations

from prometheus_client import Counter, Histogram
from pydantic import BaseModel, Field


class MetricsConfig(BaseModel):
    """Configuration for Prometheus metric recording."""

    enabled: bool = Field(default=False, description="Record Prometheus metrics")


RELAY_QUERIES = Counter(
    "threadbrotr_relay_queries",
    "Relay query outcomes",
    ["relay", "outcome"],
)

RESOLUTION_DURATION_SECONDS = Histogram(
    "threadbrotr_resolution_duration_seconds",
    "Duration of one thread resolution request in seconds",
    buckets=(0.5, 1, 2, 5, 10, 20, 30, 60, 120),
)

COLLECTED_EVENTS = Histogram(
    "threadbrotr_collected_events",
    "Number of replies collected per resolution request",
    buckets=(0, 1, 10, 50, 100, 250, 500, 1000, 2000, 5000),
)


def record_relay_query(config: MetricsConfig, relay_url: str, outcome: str) -> None:
    """Increment the relay query counter when metrics are enabled."""
    if config.enabled:
        RELAY_QUERIES.labels(relay=relay_url, outcome=outcome).inc()


def record_resolution(config: MetricsConfig, duration: float, collected: int) -> None:
    """Observe resolution latency and reply count when metrics are enabled."""
    if not config.enabled:
        return
    RESOLUTION_DURATION_SECONDS.observe(duration)
    COLLECTED_EVENTS.observe(collected)
