"""Local query engine: additive substring scoring over the in-memory index.

Every item is scored against the query on each call. There is no inverted
index, so a query is O(N) over the corpus; this is meant for small and
medium content sites.

Score contributions (each applied at most once, all independent):

    title == query (case-sensitive)        100
    title starts with query                 80   (only if not exact)
    title contains query                    60   (only if neither above)
    description contains query              30
    any tag contains query                  40
    category contains query                 20
    content contains query                  10
"""

from __future__ import annotations

from collections.abc import Iterable
import logging

from content_search.domain.model import Heading, SearchIndexItem
from content_search.domain.search import SearchResult
from content_search.observability.metrics import QUERY_COUNT, QUERY_LATENCY, track_latency
from content_search.observability.tracing import create_span
from content_search.search.loader import IndexLoader


logger = logging.getLogger(__name__)

DEFAULT_SEARCH_LIMIT = 10
SESSION_SEARCH_LIMIT = 15

TITLE_EXACT_SCORE = 100
TITLE_PREFIX_SCORE = 80
TITLE_CONTAINS_SCORE = 60
DESCRIPTION_SCORE = 30
TAG_SCORE = 40
CATEGORY_SCORE = 20
CONTENT_SCORE = 10


def score_item(item: SearchIndexItem, query: str, query_lower: str) -> int:
    """Return the additive relevance score of ``item`` (0 means no match)."""
    score = 0
    title_lower = item.title.lower()

    if item.title == query:
        score += TITLE_EXACT_SCORE
    elif title_lower.startswith(query_lower):
        score += TITLE_PREFIX_SCORE
    elif query_lower in title_lower:
        score += TITLE_CONTAINS_SCORE

    if item.description and query_lower in item.description.lower():
        score += DESCRIPTION_SCORE

    if item.tags and any(query_lower in tag.lower() for tag in item.tags):
        score += TAG_SCORE

    if item.category and query_lower in item.category.lower():
        score += CATEGORY_SCORE

    if item.content and query_lower in item.content.lower():
        score += CONTENT_SCORE

    return score


def find_matching_heading(item: SearchIndexItem, query_lower: str) -> Heading | None:
    """First heading in document order whose text contains the query."""
    for heading in item.headings or ():
        if query_lower in heading.text.lower():
            return heading
    return None


def rank_items(index: Iterable[SearchIndexItem], query: str, limit: int = DEFAULT_SEARCH_LIMIT) -> list[SearchResult]:
    """Score, filter, sort and truncate ``index`` for ``query``.

    Ties keep index order since ``sorted`` is stable.
    """
    if not query.strip():
        return []

    query_lower = query.lower().strip()
    results: list[SearchResult] = []

    for item in index:
        score = score_item(item, query, query_lower)
        if score <= 0:
            continue

        heading = find_matching_heading(item, query_lower)
        results.append(
            SearchResult(
                title=item.title,
                description=item.description,
                path=f"{item.path}#{heading.id}" if heading else item.path,
                tags=item.tags,
                category=item.category,
                heading_id=heading.id if heading else None,
                heading_text=heading.text if heading else None,
                score=score,
            )
        )

    ranked = sorted(results, key=lambda result: result.score, reverse=True)
    return ranked[: max(limit, 0)]


class LocalSearchEngine:
    """Search entry points bound to an explicit ``IndexLoader``."""

    def __init__(self, loader: IndexLoader, *, surface: str = "client") -> None:
        self.loader = loader
        self.surface = surface

    async def perform_search(self, query: str, limit: int = DEFAULT_SEARCH_LIMIT) -> list[SearchResult]:
        """Rank the loaded index for ``query``.

        A blank query returns ``[]`` without loading the index.
        """
        if not query.strip():
            return []

        index = await self.loader.load()
        if not index:
            QUERY_COUNT.labels(surface=self.surface, outcome="empty_index").inc()
            return []

        with (
            create_span("search.query", attributes={"search.limit": limit}) as span,
            track_latency(QUERY_LATENCY, surface=self.surface),
        ):
            results = rank_items(index, query, limit)
            span.set_attribute("search.results", len(results))

        QUERY_COUNT.labels(surface=self.surface, outcome="hit" if results else "miss").inc()
        logger.debug("Query %r matched %d results", query, len(results))
        return results

    def preload_index(self):
        """Kick off the index download; returns the underlying future."""
        return self.loader.preload()

    def clear_index_cache(self) -> None:
        self.loader.clear_cache()

    def is_index_loaded(self) -> bool:
        return self.loader.is_loaded()
