"""Observability module for tracing, metrics, and structured logging."""

from content_search.observability.context import bind_trace_context, get_trace_context, reset_trace_context
from content_search.observability.logging import JsonFormatter, configure_logging
from content_search.observability.metrics import (
    INDEX_BUILD_COUNT,
    INDEX_DOC_COUNT,
    INDEX_FETCH_COUNT,
    QUERY_COUNT,
    QUERY_LATENCY,
    REQUEST_COUNT,
    REQUEST_LATENCY,
    SCAN_ERROR_COUNT,
    get_metrics,
    get_metrics_content_type,
    track_latency,
)
from content_search.observability.tracing import (
    TraceContextMiddleware,
    create_span,
    get_tracer,
    init_tracing,
    trace_request,
)


__all__ = [
    "INDEX_BUILD_COUNT",
    "INDEX_DOC_COUNT",
    "INDEX_FETCH_COUNT",
    "QUERY_COUNT",
    "QUERY_LATENCY",
    "REQUEST_COUNT",
    "REQUEST_LATENCY",
    "SCAN_ERROR_COUNT",
    "JsonFormatter",
    "TraceContextMiddleware",
    "bind_trace_context",
    "configure_logging",
    "create_span",
    "get_metrics",
    "get_metrics_content_type",
    "get_trace_context",
    "get_tracer",
    "init_tracing",
    "reset_trace_context",
    "trace_request",
    "track_latency",
]
