"""Trace identifiers carried in a context variable.

Every log line emitted while serving a request or building the index picks
up the active ids, so JSON logs can be joined with spans.
"""

from __future__ import annotations

from contextvars import ContextVar, Token
from uuid import uuid4


_current_trace: ContextVar[dict[str, str] | None] = ContextVar("content_search_trace", default=None)


def new_trace_id() -> str:
    """32-char hex trace id."""
    return uuid4().hex


def new_span_id() -> str:
    """16-char hex span id."""
    return uuid4().hex[:16]


def get_trace_context() -> dict[str, str]:
    """Return the active ids, starting a fresh trace when none is bound."""
    ctx = _current_trace.get()
    if not ctx or not ctx.get("trace_id"):
        ctx = {"trace_id": new_trace_id(), "span_id": new_span_id()}
        _current_trace.set(ctx)
    return ctx


def bind_trace_context(trace_id: str, span_id: str | None = None) -> Token:
    """Bind ids for the current context; hand the token to ``reset_trace_context``."""
    return _current_trace.set({"trace_id": trace_id, "span_id": span_id or new_span_id()})


def reset_trace_context(token: Token) -> None:
    _current_trace.reset(token)


def update_span_id(span_id: str) -> None:
    """Point log correlation at a new span of the current trace."""
    ctx = get_trace_context()
    _current_trace.set({**ctx, "span_id": span_id})
