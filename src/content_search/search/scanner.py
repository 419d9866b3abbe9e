"""Filesystem scanner that turns MDX content into search index items.

The content root holds one subdirectory per namespace (one per content type).
Every ``*.mdx`` file below a namespace becomes one ``SearchIndexItem``. A file
that cannot be read or parsed is logged and skipped; scanning always carries
on with the rest of the corpus.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
import logging
from pathlib import Path

from pydantic import ValidationError

from content_search.domain.model import DocumentFrontMatter, SearchIndexItem
from content_search.errors import FrontMatterError, ScanError
from content_search.observability.metrics import SCAN_ERROR_COUNT
from content_search.search.markdown import clean_content, extract_headings
from content_search.utils.front_matter import parse_front_matter


logger = logging.getLogger(__name__)

DEFAULT_ROUTE_BASE = "/posts"
DEFAULT_EXTENSIONS: tuple[str, ...] = (".mdx",)


@dataclass(frozen=True)
class ScanSkip:
    """A document that was intentionally left out of the index."""

    path: Path
    reason: str


@dataclass(frozen=True)
class ScanReport:
    """Outcome of a corpus scan."""

    items: tuple[SearchIndexItem, ...]
    namespaces: tuple[str, ...]
    documents_skipped: int = 0
    errors: tuple[str, ...] = field(default_factory=tuple)

    @property
    def documents_indexed(self) -> int:
        return len(self.items)


class ContentScanner:
    """Scan a content root into index items, namespace by namespace."""

    def __init__(
        self,
        content_root: Path | str,
        *,
        route_base: str = DEFAULT_ROUTE_BASE,
        extensions: Sequence[str] = DEFAULT_EXTENSIONS,
    ) -> None:
        self.content_root = Path(content_root)
        self.route_base = route_base.rstrip("/")
        self.extensions = tuple(ext.lower() for ext in extensions)

    def scan(self) -> ScanReport:
        """Scan every namespace and return the flat, order-preserving result."""
        items: list[SearchIndexItem] = []
        errors: list[str] = []
        skipped = 0
        namespaces = self.discover_namespaces()

        for namespace in namespaces:
            report = self.scan_namespace(namespace)
            items.extend(report.items)
            errors.extend(report.errors)
            skipped += report.documents_skipped

        logger.info(
            "Scanned %d namespaces under %s: %d indexed, %d skipped, %d errors",
            len(namespaces),
            self.content_root,
            len(items),
            skipped,
            len(errors),
        )
        return ScanReport(
            items=tuple(items),
            namespaces=tuple(namespaces),
            documents_skipped=skipped,
            errors=tuple(errors),
        )

    def scan_namespace(self, namespace: str) -> ScanReport:
        """Scan a single namespace directory."""
        items: list[SearchIndexItem] = []
        errors: list[str] = []
        skipped = 0

        for file_path in self._discover_content_files(namespace):
            try:
                outcome = self.scan_file(file_path, namespace)
            except ScanError as exc:
                logger.warning("Skipping %s: %s", file_path, exc.reason)
                SCAN_ERROR_COUNT.labels(namespace=namespace).inc()
                errors.append(str(exc))
                skipped += 1
                continue

            if isinstance(outcome, ScanSkip):
                logger.debug("Skipping %s: %s", outcome.path, outcome.reason)
                skipped += 1
                continue

            items.append(outcome)

        return ScanReport(
            items=tuple(items),
            namespaces=(namespace,),
            documents_skipped=skipped,
            errors=tuple(errors),
        )

    def scan_file(self, file_path: Path, namespace: str) -> SearchIndexItem | ScanSkip:
        """Build the index item for one file.

        Raises:
            ScanError: The file could not be read, decoded or its front matter parsed.
        """
        try:
            raw = file_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise ScanError(file_path, f"unreadable: {exc}") from exc

        try:
            metadata, body = parse_front_matter(raw)
        except FrontMatterError as exc:
            raise ScanError(file_path, str(exc)) from exc

        try:
            front_matter = DocumentFrontMatter.model_validate(metadata)
        except ValidationError:
            return ScanSkip(path=file_path, reason="missing or invalid title")

        return SearchIndexItem(
            title=front_matter.title,
            description=front_matter.description,
            path=self.route_for(file_path, namespace),
            category=front_matter.category or namespace,
            tags=front_matter.tags,
            content=clean_content(body),
            headings=extract_headings(body),
        )

    def route_for(self, file_path: Path, namespace: str) -> str:
        """Return ``<route_base>/<namespace>/<slug>`` for a content file."""
        relative = file_path.relative_to(self.content_root / namespace)
        slug = relative.with_suffix("").as_posix()
        return f"{self.route_base}/{namespace}/{slug}"

    def discover_namespaces(self) -> list[str]:
        """Immediate, non-hidden subdirectories of the content root, sorted by name."""
        if not self.content_root.is_dir():
            logger.warning("Content root missing: %s", self.content_root)
            return []

        return sorted(
            entry.name for entry in self.content_root.iterdir() if entry.is_dir() and not entry.name.startswith(".")
        )

    # --- internal helpers -------------------------------------------------

    def _discover_content_files(self, namespace: str) -> Iterator[Path]:
        root = self.content_root / namespace
        if not root.is_dir():
            return iter(())

        candidates = (
            path for path in root.rglob("*") if path.suffix.lower() in self.extensions and path.is_file()
        )
        return iter(sorted(candidates, key=lambda path: path.relative_to(root).as_posix()))
