"""Service layer - orchestrates the search engine for interactive callers."""

from .search_session import SearchSession, SearchState


__all__ = [
    "SearchSession",
    "SearchState",
]
