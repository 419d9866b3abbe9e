"""Client-side loader for the search index.

Fetches the JSON index once and memoizes it for the lifetime of the loader.
Concurrent first loads are coalesced: every caller that arrives while a fetch
is running awaits the same task, so only one request hits the wire. Callers
get a shielded view of that task; cancelling one caller leaves the fetch
running for the others.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable
import logging

import httpx
from pydantic import ValidationError

from content_search.domain.model import SearchIndexItem
from content_search.errors import IndexFetchError
from content_search.observability.metrics import INDEX_FETCH_COUNT


logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_S = 10.0


class IndexLoader:
    """Fetch, memoize and single-flight the search index.

    State is two fields: the resolved index (``None`` until loaded) and the
    in-flight fetch task (``None`` when idle). Both are only touched from the
    event loop thread and the check-and-set in ``load()`` runs before any
    ``await``, which is what makes the de-duplication hold.
    """

    def __init__(
        self,
        index_url: str,
        *,
        client: httpx.AsyncClient | None = None,
        timeout: float = DEFAULT_TIMEOUT_S,
    ) -> None:
        self.index_url = index_url
        self._client = client
        self._owns_client = client is None
        self._timeout = timeout
        self._index: list[SearchIndexItem] | None = None
        self._inflight: asyncio.Task[list[SearchIndexItem]] | None = None
        # Bumped by clear_cache() so a fetch started before the clear cannot repopulate the cache.
        self._generation = 0

    async def __aenter__(self) -> IndexLoader:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    def load(self) -> Awaitable[list[SearchIndexItem]]:
        """Return an awaitable resolving to the index.

        Resolves to an empty list when the fetch fails; the failure is not
        cached, so the next call fetches again.
        """
        loop = asyncio.get_running_loop()
        if self._index is not None:
            resolved: asyncio.Future[list[SearchIndexItem]] = loop.create_future()
            resolved.set_result(self._index)
            return resolved

        if self._inflight is None:
            self._inflight = loop.create_task(self._load(self._generation))
        return asyncio.shield(self._inflight)

    def preload(self) -> asyncio.Future[list[SearchIndexItem]]:
        """Start loading in the background; failures are logged, never raised."""
        return asyncio.ensure_future(self.load())

    def is_loaded(self) -> bool:
        return self._index is not None

    def clear_cache(self) -> None:
        """Forget the resolved index and any in-flight fetch."""
        self._index = None
        self._inflight = None
        self._generation += 1

    async def aclose(self) -> None:
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _load(self, generation: int) -> list[SearchIndexItem]:
        try:
            index = await self._fetch()
        except IndexFetchError as exc:
            logger.error("Failed to load search index from %s: %s", self.index_url, exc)
            INDEX_FETCH_COUNT.labels(outcome="error").inc()
            return []
        except Exception as exc:
            logger.error("Unexpected error loading search index from %s: %s", self.index_url, exc, exc_info=True)
            INDEX_FETCH_COUNT.labels(outcome="error").inc()
            return []
        finally:
            if generation == self._generation:
                self._inflight = None

        INDEX_FETCH_COUNT.labels(outcome="success").inc()
        if generation == self._generation:
            self._index = index
        logger.debug("Loaded search index with %d items", len(index))
        return index

    async def _fetch(self) -> list[SearchIndexItem]:
        client = self._get_client()
        try:
            response = await client.get(self.index_url)
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as exc:
            raise IndexFetchError(f"Failed to load search index: {exc.response.status_code}") from exc
        except httpx.HTTPError as exc:
            raise IndexFetchError(f"Search index unreachable: {exc}") from exc
        except ValueError as exc:
            raise IndexFetchError(f"Search index is not valid JSON: {exc}") from exc

        entries = payload.get("index") if isinstance(payload, dict) else None
        if not isinstance(entries, list):
            raise IndexFetchError("Search index payload has no 'index' list")

        try:
            return [SearchIndexItem.model_validate(entry) for entry in entries]
        except ValidationError as exc:
            raise IndexFetchError(f"Search index contains invalid items: {exc.error_count()} errors") from exc

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout, follow_redirects=True)
            self._owns_client = True
        return self._client
