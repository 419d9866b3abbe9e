"""Process-lifetime cache of the aggregated search index."""

from __future__ import annotations

from datetime import datetime, timezone
import logging
import threading

from content_search.domain.model import SearchIndexItem
from content_search.observability.metrics import INDEX_BUILD_COUNT, INDEX_DOC_COUNT
from content_search.observability.tracing import create_span
from content_search.search.scanner import ContentScanner, ScanReport


logger = logging.getLogger(__name__)


class IndexCache:
    """Hold the scanned index until explicitly cleared.

    There is no TTL: the index stays valid until ``clear()`` is called (for
    example while authoring content) or the process restarts. Starlette runs
    sync endpoints in a threadpool, so the first build is guarded by a lock
    and concurrent first callers share a single scan.
    """

    def __init__(self, scanner: ContentScanner) -> None:
        self.scanner = scanner
        self._items: tuple[SearchIndexItem, ...] | None = None
        self._report: ScanReport | None = None
        self._built_at: datetime | None = None
        self._lock = threading.Lock()

    def get(self) -> tuple[SearchIndexItem, ...]:
        """Return the cached index, building it on first use.

        The index is an immutable tuple shared by every caller until ``clear()``.
        """
        items = self._items
        if items is not None:
            return items

        with self._lock:
            if self._items is None:
                self._build()
            return self._items  # type: ignore[return-value]

    def clear(self) -> None:
        """Drop the cached index so the next ``get()`` rescans the content root."""
        with self._lock:
            self._items = None
            self._report = None
            self._built_at = None
        INDEX_DOC_COUNT.set(0)
        logger.info("Search index cache cleared")

    @property
    def is_built(self) -> bool:
        return self._items is not None

    @property
    def last_report(self) -> ScanReport | None:
        return self._report

    @property
    def built_at(self) -> datetime | None:
        return self._built_at

    def _build(self) -> None:
        with create_span("search.index.build", attributes={"content.root": str(self.scanner.content_root)}) as span:
            try:
                report = self.scanner.scan()
            except Exception:
                INDEX_BUILD_COUNT.labels(outcome="error").inc()
                raise

            span.set_attribute("index.documents", report.documents_indexed)
            span.set_attribute("index.skipped", report.documents_skipped)

        self._items = report.items
        self._report = report
        self._built_at = datetime.now(timezone.utc)
        INDEX_DOC_COUNT.set(report.documents_indexed)
        INDEX_BUILD_COUNT.labels(outcome="partial" if report.errors else "success").inc()
        logger.info("Search index built with %d documents", report.documents_indexed)
