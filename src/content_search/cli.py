"""Command line entry point.

Usage:
    content-search serve
    content-search build-index --output public/search-index.json
    content-search search "setup guide" --limit 5

Settings come from ``CONTENT_SEARCH_*`` environment variables (or ``.env``);
``--content-root`` overrides the configured content directory.
"""

# ruff: noqa: T201  # CLI intentionally prints operator feedback

from __future__ import annotations

import argparse
from collections.abc import Sequence
import logging
from pathlib import Path
import sys
import textwrap

import orjson

from content_search.app_builder import create_app
from content_search.config import Settings
from content_search.observability import configure_logging, init_tracing
from content_search.search.engine import rank_items
from content_search.search.scanner import ContentScanner


logger = logging.getLogger(__name__)


def build_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="content-search",
        description="Index MDX content and serve or query the local search index",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=textwrap.dedent(
            """
            Examples:
              content-search serve --port 8000
              content-search build-index --content-root src/content --output index.json
              content-search search "hello" --limit 3
            """
        ).strip(),
    )
    parser.add_argument(
        "--content-root",
        type=Path,
        help="Content directory with one subdirectory per namespace (default: CONTENT_SEARCH_CONTENT_ROOT)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve = subparsers.add_parser("serve", help="Run the HTTP server")
    serve.add_argument("--host", help="Bind host (default: CONTENT_SEARCH_HOST)")
    serve.add_argument("--port", type=int, help="Bind port (default: CONTENT_SEARCH_PORT)")

    build = subparsers.add_parser("build-index", help="Scan content and emit the JSON index")
    build.add_argument("--output", type=Path, help="Write the index to this file instead of stdout")

    search = subparsers.add_parser("search", help="Rank local content for a query")
    search.add_argument("query", help="Free-text query")
    search.add_argument("--limit", type=int, help="Maximum results (default: CONTENT_SEARCH_DEFAULT_LIMIT)")

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_argument_parser().parse_args(argv)

    settings = Settings()
    if args.content_root is not None:
        settings = settings.model_copy(update={"content_root": args.content_root})

    if args.command == "serve":
        return _serve(settings, host=args.host, port=args.port)

    configure_logging(level="warning", json_output=False, stream=sys.stderr)
    if not settings.content_root.is_dir():
        print(f"Content root not found: {settings.content_root}", file=sys.stderr)
        return 1

    scanner = ContentScanner(settings.content_root, route_base=settings.route_base)
    report = scanner.scan()

    if args.command == "build-index":
        payload = orjson.dumps({"index": [item.to_payload() for item in report.items]})
        if args.output:
            args.output.parent.mkdir(parents=True, exist_ok=True)
            args.output.write_bytes(payload)
        else:
            sys.stdout.write(payload.decode("utf-8") + "\n")
        print(
            f"Indexed {report.documents_indexed} documents from {len(report.namespaces)} namespaces "
            f"({report.documents_skipped} skipped, {len(report.errors)} errors)",
            file=sys.stderr,
        )
        for error in report.errors:
            print(f"  ! {error}", file=sys.stderr)
        return 0

    results = rank_items(report.items, args.query, settings.clamp_limit(args.limit))
    payload = orjson.dumps([result.to_payload() for result in results], option=orjson.OPT_INDENT_2)
    sys.stdout.write(payload.decode("utf-8") + "\n")
    return 0


def _serve(settings: Settings, *, host: str | None, port: int | None) -> int:
    import uvicorn

    configure_logging(level=settings.log_level, json_output=settings.json_logs)
    init_tracing()

    host = host or settings.host
    port = port or settings.port
    app = create_app(settings)

    logger.info("Starting content search server on %s:%d", host, port)
    logger.info("Index endpoint: http://%s:%d%s", host, port, settings.index_endpoint)

    uvicorn.run(
        app,
        host=host,
        port=port,
        log_level=settings.log_level.lower(),
        log_config=None,  # Don't let uvicorn override our logging config
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
