"""OpenTelemetry spans for index builds, queries and HTTP requests."""

from __future__ import annotations

from contextlib import contextmanager
import logging
import time
from typing import TYPE_CHECKING, Any

from opentelemetry import trace
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.trace import SpanKind, Status, StatusCode

from content_search.observability.context import (
    bind_trace_context,
    new_trace_id,
    reset_trace_context,
    update_span_id,
)
from content_search.observability.metrics import REQUEST_COUNT, REQUEST_LATENCY


if TYPE_CHECKING:
    from collections.abc import Generator

    from opentelemetry.trace import Span, Tracer
    from starlette.requests import Request
    from starlette.responses import Response

logger = logging.getLogger(__name__)

SERVICE_NAME = "content-search"
TRACE_HEADER = b"x-trace-id"
# Metric label for requests that matched no route.
UNMATCHED_ROUTE = "unmatched"

_tracer_holder: dict[str, Tracer | None] = {"tracer": None}


def init_tracing(service_name: str = SERVICE_NAME, **resource_attributes: str) -> TracerProvider:
    """Install an SDK tracer provider for this process."""
    provider = TracerProvider(resource=Resource.create({"service.name": service_name, **resource_attributes}))
    trace.set_tracer_provider(provider)
    _tracer_holder["tracer"] = provider.get_tracer(__name__)
    logger.info("Tracing initialized for service: %s", service_name)
    return provider


def get_tracer() -> Tracer:
    """Configured tracer, or the global (no-op until ``init_tracing``) one."""
    if _tracer_holder["tracer"] is None:
        _tracer_holder["tracer"] = trace.get_tracer(__name__)
    return _tracer_holder["tracer"]  # type: ignore[return-value]


@contextmanager
def create_span(
    name: str,
    kind: SpanKind = SpanKind.INTERNAL,
    attributes: dict[str, Any] | None = None,
) -> Generator[Span, None, None]:
    """Start ``name`` as the current span and point log correlation at it.

    An exception leaving the block is recorded on the span, which is marked
    as failed, and then re-raised.
    """
    with get_tracer().start_as_current_span(name, kind=kind, attributes=attributes) as span:
        span_context = span.get_span_context()
        if span_context.is_valid:
            update_span_id(format(span_context.span_id, "016x"))
        yield span


class TraceContextMiddleware:
    """ASGI middleware binding the request's trace id (``x-trace-id`` or a fresh one)."""

    def __init__(self, app: Any) -> None:
        self.app = app

    async def __call__(self, scope: dict, receive: Any, send: Any) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        headers = dict(scope.get("headers", []))
        trace_id = headers.get(TRACE_HEADER, b"").decode("latin-1").strip() or new_trace_id()

        token = bind_trace_context(trace_id)
        try:
            await self.app(scope, receive, send)
        finally:
            reset_trace_context(token)


async def trace_request(request: Request, call_next: Any) -> Response:
    """HTTP middleware: one server span, a latency sample and a status count per request."""
    path = request.url.path
    started = time.perf_counter()

    with create_span(
        "http.request",
        kind=SpanKind.SERVER,
        attributes={"http.method": request.method, "http.target": path},
    ) as span:
        try:
            response: Response = await call_next(request)
        except Exception:
            _observe(path, "500", started)
            raise

        span.set_attribute("http.status_code", response.status_code)
        if response.status_code >= 500:
            span.set_status(Status(StatusCode.ERROR, f"HTTP {response.status_code}"))

    route = UNMATCHED_ROUTE if response.status_code == 404 else path
    _observe(route, str(response.status_code), started)
    return response


def _observe(route: str, status: str, started: float) -> None:
    REQUEST_LATENCY.labels(route=route).observe(time.perf_counter() - started)
    REQUEST_COUNT.labels(route=route, status=status).inc()
