"""Domain layer - index records and query results with no infrastructure dependencies."""

from content_search.domain.model import DocumentFrontMatter, Heading, SearchIndexItem
from content_search.domain.search import SearchResult


__all__ = [
    "DocumentFrontMatter",
    "Heading",
    "SearchIndexItem",
    "SearchResult",
]
