"""Prometheus metrics instrumentation."""

from __future__ import annotations

from fastapi import Response
from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    generate_latest,
)

REGISTRY = CollectorRegistry()

PAGES_FETCHED = Counter(
    "chtb_pages_fetched_total",
    "Upstream pages fetched by the aggregator",
    registry=REGISTRY,
)

FETCH_FAILURES = Counter(
    "chtb_fetch_failures_total",
    "Aggregator runs aborted by a fetch failure",
    labelnames=("reason",),
    registry=REGISTRY,
)

RECORDS_LOADED = Gauge(
    "chtb_records_loaded",
    "Number of characters held in the table",
    registry=REGISTRY,
)

LOAD_DURATION = Histogram(
    "chtb_load_duration_seconds",
    "Duration of a full fetch-all run",
    registry=REGISTRY,
)


def metrics_response() -> Response:
    """Return Prometheus metrics as an HTTP response."""
    payload = generate_latest(REGISTRY)
    return Response(content=payload, media_type=CONTENT_TYPE_LATEST)


__all__ = [
    "REGISTRY",
    "PAGES_FETCHED",
    "FETCH_FAILURES",
    "RECORDS_LOADED",
    "LOAD_DURATION",
    "metrics_response",
]
