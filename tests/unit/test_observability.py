"""Unit tests for logging, trace context and metrics helpers."""

import logging
from pathlib import Path
import sys

import orjson
from prometheus_client import REGISTRY
import pytest
from starlette.applications import Starlette
from starlette.responses import JSONResponse
from starlette.routing import Route
from starlette.testclient import TestClient

from content_search.observability import context
from content_search.observability.logging import JsonFormatter, configure_logging
from content_search.observability.metrics import QUERY_LATENCY, get_metrics, get_metrics_content_type, track_latency
from content_search.observability.tracing import TraceContextMiddleware, create_span, get_tracer


pytestmark = pytest.mark.unit


def make_record(msg: str = "hello", **extra) -> logging.LogRecord:
    record = logging.LogRecord("content_search.search.scanner", logging.INFO, __file__, 1, msg, (), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJsonFormatter:
    def test_formats_core_fields_with_trace_ids(self) -> None:
        token = context.bind_trace_context("a" * 32, "b" * 16)
        try:
            payload = orjson.loads(JsonFormatter().format(make_record()))
        finally:
            context.reset_trace_context(token)

        assert payload["message"] == "hello"
        assert payload["level"] == "INFO"
        assert payload["logger"] == "content_search.search.scanner"
        assert payload["component"] == "scanner"
        assert payload["trace_id"] == "a" * 32
        assert payload["span_id"] == "b" * 16

    def test_extras_are_included_and_secrets_redacted(self) -> None:
        record = make_record(namespace="blog", token="s3cret", path=Path("/tmp/x"), tags={"b", "a"})

        payload = orjson.loads(JsonFormatter().format(record))

        assert payload["namespace"] == "blog"
        assert payload["token"] == "[REDACTED]"
        assert payload["path"] == "/tmp/x"
        assert payload["tags"] == ["a", "b"]

    def test_long_messages_are_truncated(self) -> None:
        payload = orjson.loads(JsonFormatter().format(make_record("x" * 5000)))

        assert len(payload["message"]) == JsonFormatter.MAX_MESSAGE_LEN + 3
        assert payload["message"].endswith("...")

    def test_exception_info(self) -> None:
        try:
            raise ValueError("bad front matter")
        except ValueError:
            record = logging.LogRecord("x", logging.ERROR, __file__, 1, "failed", (), sys.exc_info())

        payload = orjson.loads(JsonFormatter().format(record))

        assert "ValueError: bad front matter" in payload["exception"]


class TestConfigureLogging:
    def test_installs_single_handler(self) -> None:
        configure_logging("debug", json_output=True, logger_levels={"content_search.search": "error"})
        configure_logging("debug", json_output=True)

        root = logging.getLogger()
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, JsonFormatter)
        assert root.level == logging.DEBUG
        assert logging.getLogger("uvicorn.access").level == logging.WARNING

    def test_plain_text_output(self) -> None:
        configure_logging("warning", json_output=False)

        root = logging.getLogger()
        assert not isinstance(root.handlers[0].formatter, JsonFormatter)
        assert root.level == logging.WARNING


class TestTraceContext:
    def test_fresh_trace_is_started_on_demand(self) -> None:
        token = context._current_trace.set(None)
        try:
            ctx = context.get_trace_context()
            assert len(ctx["trace_id"]) == 32
            assert len(ctx["span_id"]) == 16
            assert context.get_trace_context() == ctx
        finally:
            context._current_trace.reset(token)

    def test_update_span_id_keeps_trace(self) -> None:
        token = context.bind_trace_context("t" * 32, "s" * 16)
        try:
            context.update_span_id("n" * 16)
            assert context.get_trace_context() == {"trace_id": "t" * 32, "span_id": "n" * 16}
        finally:
            context.reset_trace_context(token)

    def test_middleware_binds_incoming_trace_id(self) -> None:
        async def echo(_):
            return JSONResponse(context.get_trace_context())

        app = TraceContextMiddleware(Starlette(routes=[Route("/", echo)]))
        client = TestClient(app)

        seeded = client.get("/", headers={"x-trace-id": "f" * 32}).json()
        generated = client.get("/").json()

        assert seeded["trace_id"] == "f" * 32
        assert len(generated["trace_id"]) == 32
        assert generated["trace_id"] != "f" * 32


class TestSpansAndMetrics:
    def test_create_span_records_attributes_and_reraises(self) -> None:
        assert get_tracer() is not None

        with create_span("test.span", attributes={"search.limit": 3}) as span:
            assert span is not None

        with pytest.raises(RuntimeError), create_span("test.failure"):
            raise RuntimeError("boom")

    def test_track_latency_observes_histogram(self) -> None:
        labels = {"surface": "unit-test"}
        before = REGISTRY.get_sample_value("content_search_query_seconds_count", labels) or 0

        with track_latency(QUERY_LATENCY, surface="unit-test"):
            sum(range(1000))

        assert REGISTRY.get_sample_value("content_search_query_seconds_count", labels) == before + 1

    def test_exposition(self) -> None:
        assert b"content_search_query_seconds" in get_metrics()
        assert get_metrics_content_type().startswith("text/plain")
