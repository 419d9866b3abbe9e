"""Search session orchestration.

Holds the state a search UI renders (query, results, loading flags, error)
and drives the engine. Nothing raised below this layer escapes ``search()``:
failures become an ``error`` message plus an empty result list.

Known race: queries are not cancelled. If an older, slower query resolves
after a newer one, it overwrites the newer results. Callers that need strict
ordering must debounce or compare query tokens themselves.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
import logging

from content_search.domain.search import SearchResult
from content_search.search.engine import SESSION_SEARCH_LIMIT, LocalSearchEngine


logger = logging.getLogger(__name__)

DEFAULT_ERROR_MESSAGE = "Search failed"


@dataclass
class SearchState:
    """Observable session state.

    ``loading`` tracks a query in flight; ``index_loading`` tracks the
    initial index download and stays ``True`` until the first ``start()``
    finishes. They are independent.
    """

    query: str = ""
    results: list[SearchResult] = field(default_factory=list)
    loading: bool = False
    index_loading: bool = True
    error: str | None = None


class SearchSession:
    """Query/result/loading/error state machine on top of ``LocalSearchEngine``."""

    def __init__(self, engine: LocalSearchEngine, *, limit: int = SESSION_SEARCH_LIMIT) -> None:
        self.engine = engine
        self.limit = limit
        self.state = SearchState()

    def snapshot(self) -> SearchState:
        """Copy of the current state, safe to hand to renderers."""
        return replace(self.state, results=list(self.state.results))

    async def start(self) -> None:
        """Preload the index, flagging ``index_loading`` while it downloads."""
        self.state.index_loading = True
        try:
            await self.engine.preload_index()
        except Exception as exc:
            logger.warning("Failed to preload search index: %s", exc)
        finally:
            self.state.index_loading = False

    def set_query(self, query: str) -> None:
        """Record the current input; does not search."""
        self.state.query = query

    async def search(self, query: str) -> None:
        if not query.strip():
            self.state.results = []
            return

        self.state.loading = True
        self.state.error = None
        try:
            self.state.results = await self.engine.perform_search(query, self.limit)
        except Exception as exc:
            logger.error("Search for %r failed: %s", query, exc, exc_info=True)
            self.state.error = str(exc) or DEFAULT_ERROR_MESSAGE
            self.state.results = []
        finally:
            self.state.loading = False

    def reset_search(self) -> None:
        """Back to the empty state; ``index_loading`` is left alone."""
        self.state.query = ""
        self.state.results = []
        self.state.loading = False
        self.state.error = None
