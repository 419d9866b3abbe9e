"""Composable builder for the content search HTTP server."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from starlette.applications import Starlette
from starlette.concurrency import run_in_threadpool
from starlette.responses import JSONResponse, Response
from starlette.routing import Route

from content_search.observability import (
    QUERY_COUNT,
    QUERY_LATENCY,
    TraceContextMiddleware,
    get_metrics,
    get_metrics_content_type,
    trace_request,
    track_latency,
)
from content_search.runtime.health import build_health_endpoint
from content_search.search.engine import rank_items
from content_search.search.index_cache import IndexCache
from content_search.search.scanner import ContentScanner
from content_search.utils.cache_control import cache_headers

from .config import Settings


if TYPE_CHECKING:
    from starlette.requests import Request


logger = logging.getLogger(__name__)


class AppBuilder:
    """Builds the ASGI app serving the search index from settings."""

    def __init__(self, settings: Settings | None = None, *, index_cache: IndexCache | None = None) -> None:
        self.settings = settings or Settings()
        self.index_cache = index_cache or IndexCache(
            ContentScanner(self.settings.content_root, route_base=self.settings.route_base)
        )

    def build(self) -> Starlette:
        """Build and return the Starlette application."""
        app = Starlette(
            debug=self.settings.log_level.lower() == "debug",
            routes=self._build_routes(),
        )
        app.middleware("http")(trace_request)
        app.add_middleware(TraceContextMiddleware)
        app.state.index_cache = self.index_cache
        app.state.settings = self.settings

        logger.info(
            "Content search server initialized for %s (index at %s)",
            self.settings.content_root,
            self.settings.index_endpoint,
        )
        return app

    def _build_routes(self) -> list[Route]:
        settings = self.settings
        routes = [
            Route(settings.index_endpoint, endpoint=self._build_index_endpoint(), methods=["GET"]),
            Route(settings.search_endpoint, endpoint=self._build_search_endpoint(), methods=["GET"]),
            Route("/health", endpoint=build_health_endpoint(self.index_cache), methods=["GET"]),
            Route("/metrics", endpoint=self._build_metrics_endpoint(), methods=["GET"]),
        ]
        if settings.allow_cache_clear:
            routes.append(
                Route(f"{settings.index_endpoint}/clear", endpoint=self._build_clear_endpoint(), methods=["POST"])
            )
        return routes

    def _build_index_endpoint(self):
        headers = cache_headers(self.settings.index_cache_strategy)

        async def index_endpoint(_: Request) -> JSONResponse:
            try:
                items = await run_in_threadpool(self.index_cache.get)
            except Exception as exc:
                logger.error("Failed to get search index: %s", exc, exc_info=True)
                return JSONResponse({"error": "Failed to load search index"}, status_code=500)

            return JSONResponse({"index": [item.to_payload() for item in items]}, headers=headers)

        return index_endpoint

    def _build_search_endpoint(self):
        settings = self.settings
        headers = cache_headers("dynamic")

        async def search_endpoint(request: Request) -> JSONResponse:
            query = request.query_params.get("query", "")
            if not query.strip():
                return JSONResponse({"error": "Query parameter is required"}, status_code=400)

            limit = settings.clamp_limit(_parse_int(request.query_params.get("limit")))
            try:
                items = await run_in_threadpool(self.index_cache.get)
                with track_latency(QUERY_LATENCY, surface="server"):
                    results = rank_items(items, query, limit)
            except Exception as exc:
                logger.error("Error searching content for %r: %s", query, exc, exc_info=True)
                QUERY_COUNT.labels(surface="server", outcome="error").inc()
                return JSONResponse({"error": "Internal server error"}, status_code=500)

            QUERY_COUNT.labels(surface="server", outcome="hit" if results else "miss").inc()
            return JSONResponse([result.to_payload() for result in results], headers=headers)

        return search_endpoint

    def _build_clear_endpoint(self):
        async def clear_endpoint(_: Request) -> JSONResponse:
            self.index_cache.clear()
            return JSONResponse({"cleared": True})

        return clear_endpoint

    def _build_metrics_endpoint(self):
        async def metrics_endpoint(_: Request) -> Response:
            return Response(content=get_metrics(), media_type=get_metrics_content_type())

        return metrics_endpoint


def create_app(settings: Settings | None = None) -> Starlette:
    """Create the ASGI application."""
    return AppBuilder(settings).build()


def _parse_int(value: str | None) -> int | None:
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None
