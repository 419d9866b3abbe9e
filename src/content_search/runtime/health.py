"""Health endpoint factory."""

from __future__ import annotations

from typing import TYPE_CHECKING

from starlette.responses import JSONResponse


if TYPE_CHECKING:
    from starlette.requests import Request

    from content_search.search.index_cache import IndexCache


def build_health_endpoint(index_cache: IndexCache):
    """Return a coroutine function reporting the state of the server index."""

    async def health_check(_: Request) -> JSONResponse:
        report = index_cache.last_report
        built_at = index_cache.built_at
        status = "healthy"
        if report is not None and report.errors:
            status = "degraded"

        return JSONResponse(
            {
                "status": status,
                "index": {
                    "built": index_cache.is_built,
                    "built_at": built_at.isoformat() if built_at else None,
                    "documents": report.documents_indexed if report else 0,
                    "skipped": report.documents_skipped if report else 0,
                    "errors": len(report.errors) if report else 0,
                    "namespaces": list(report.namespaces) if report else [],
                },
                "content_root": str(index_cache.scanner.content_root),
            }
        )

    return health_check
