"""Prometheus metrics for the search index and query path."""

from __future__ import annotations

from contextlib import contextmanager
import time
from typing import TYPE_CHECKING

from prometheus_client import CONTENT_TYPE_LATEST, Counter, Gauge, Histogram, generate_latest


if TYPE_CHECKING:
    from collections.abc import Generator


REQUEST_LATENCY = Histogram(
    "content_search_request_latency_seconds",
    "HTTP request latency in seconds",
    ["route"],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5),
)

REQUEST_COUNT = Counter(
    "content_search_requests_total",
    "Total HTTP requests",
    ["route", "status"],
)

QUERY_LATENCY = Histogram(
    "content_search_query_seconds",
    "Search query latency",
    ["surface"],
    buckets=(0.0005, 0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25),
)

QUERY_COUNT = Counter(
    "content_search_queries_total",
    "Search queries executed",
    ["surface", "outcome"],
)

INDEX_DOC_COUNT = Gauge(
    "content_search_index_documents",
    "Documents in the cached search index",
)

INDEX_BUILD_COUNT = Counter(
    "content_search_index_builds_total",
    "Search index builds",
    ["outcome"],
)

SCAN_ERROR_COUNT = Counter(
    "content_search_scan_errors_total",
    "Content files that failed to scan",
    ["namespace"],
)

INDEX_FETCH_COUNT = Counter(
    "content_search_index_fetches_total",
    "Client-side index fetches",
    ["outcome"],
)


@contextmanager
def track_latency(histogram: Histogram, **labels: str) -> Generator[None, None, None]:
    """Context manager to track operation latency."""
    start = time.perf_counter()
    try:
        yield
    finally:
        metric = histogram.labels(**labels) if labels else histogram
        metric.observe(time.perf_counter() - start)


def get_metrics() -> bytes:
    """Generate Prometheus metrics output."""
    return generate_latest()


def get_metrics_content_type() -> str:
    """Get content type for metrics endpoint."""
    return CONTENT_TYPE_LATEST
