"""Structured logging for the index builder, the HTTP server and the CLI.

JSON lines carry the active trace ids so entries can be joined with spans.
The plain formatter is meant for terminals.
"""

from __future__ import annotations

from datetime import datetime, timezone
import logging
from pathlib import Path
import sys
from typing import Any, TextIO

import orjson

from content_search.observability.context import get_trace_context


PLAIN_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
SENSITIVE_KEYS = frozenset({"authorization", "cookie", "password", "secret", "token"})
MAX_EXTRA_CHARS = 500
QUIET_LOGGERS = ("httpx", "httpcore")

_STANDARD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {"message", "asctime"}


def _clip(text: str, limit: int) -> str:
    return text if len(text) <= limit else f"{text[:limit]}..."


def _to_json(value: Any) -> Any:
    if isinstance(value, (set, frozenset)):
        return sorted(value, key=str)
    if isinstance(value, (Path, Exception)):
        return str(value)
    if isinstance(value, (bytes, bytearray)):
        return value.decode("utf-8", errors="replace")
    if hasattr(value, "model_dump"):
        return value.model_dump(exclude_none=True)
    return repr(value)


class JsonFormatter(logging.Formatter):
    """One JSON object per record, correlated with the current trace."""

    MAX_MESSAGE_LEN = 2000

    def format(self, record: logging.LogRecord) -> str:
        ctx = get_trace_context()
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "component": record.name.rsplit(".", 1)[-1],
            "message": _clip(record.getMessage(), self.MAX_MESSAGE_LEN),
            "trace_id": ctx["trace_id"],
            "span_id": ctx["span_id"],
        }
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        entry.update(self.extra_fields(record))
        return orjson.dumps(entry, default=_to_json).decode("utf-8")

    @staticmethod
    def extra_fields(record: logging.LogRecord) -> dict[str, Any]:
        """Fields passed through ``extra=``, with secrets masked and long strings clipped."""
        fields: dict[str, Any] = {}
        for key, value in vars(record).items():
            if key in _STANDARD_ATTRS or key.startswith("_"):
                continue
            if key.lower() in SENSITIVE_KEYS:
                value = "[REDACTED]"
            elif isinstance(value, str):
                value = _clip(value, MAX_EXTRA_CHARS)
            fields[key] = value
        return fields


def configure_logging(
    level: str = "INFO",
    json_output: bool = True,
    *,
    logger_levels: dict[str, str] | None = None,
    access_log: bool = False,
    stream: TextIO | None = None,
) -> None:
    """Install a single root handler, replacing whatever was there.

    Args:
        level: Root log level name, case-insensitive
        json_output: Emit ``JsonFormatter`` lines instead of plain text
        logger_levels: Per-logger level overrides (logger name -> level name)
        access_log: Leave ``uvicorn.access`` at the root level (otherwise WARNING)
        stream: Destination for log lines (defaults to stdout)
    """
    root = logging.getLogger()
    root.setLevel(_resolve_level(level))
    for existing in root.handlers[:]:
        root.removeHandler(existing)

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(JsonFormatter() if json_output else logging.Formatter(PLAIN_FORMAT))
    root.addHandler(handler)

    quiet = [*QUIET_LOGGERS] if access_log else [*QUIET_LOGGERS, "uvicorn.access"]
    for name in quiet:
        logging.getLogger(name).setLevel(logging.WARNING)

    for name, name_level in (logger_levels or {}).items():
        logging.getLogger(name).setLevel(_resolve_level(name_level))


def _resolve_level(level: str) -> int:
    return getattr(logging, level.upper(), logging.INFO)
