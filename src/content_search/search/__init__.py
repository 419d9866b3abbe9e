"""
Local search package.

- markdown: heading extraction, heading ids and plain-text cleaning
- scanner: MDX content tree -> index items
- index_cache: process-lifetime server cache
- loader: client-side fetch with single-flight de-duplication
- engine: additive scoring, heading deep links and ranking
"""

from content_search.search.engine import (
    DEFAULT_SEARCH_LIMIT,
    SESSION_SEARCH_LIMIT,
    LocalSearchEngine,
    find_matching_heading,
    rank_items,
    score_item,
)
from content_search.search.index_cache import IndexCache
from content_search.search.loader import IndexLoader
from content_search.search.scanner import ContentScanner, ScanReport, ScanSkip


__all__ = [
    "DEFAULT_SEARCH_LIMIT",
    "SESSION_SEARCH_LIMIT",
    "ContentScanner",
    "IndexCache",
    "IndexLoader",
    "LocalSearchEngine",
    "ScanReport",
    "ScanSkip",
    "find_matching_heading",
    "rank_items",
    "score_item",
]
