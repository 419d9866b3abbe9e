"""Markdown helpers used while building index items.

Everything here is regex based and line oriented. It approximates what a
markdown renderer would produce closely enough for substring matching: code,
images, links, HTML, heading/list/quote markers and emphasis are removed and
only readable text is kept.
"""

from __future__ import annotations

import re

from content_search.domain.model import Heading


_HEADING_LINE_PATTERN = re.compile(r"^(#{1,6})\s+(.+)$")
_LINK_PATTERN = re.compile(r"\[([^\]]+)\]\([^)]+\)")
# Anything outside a-z, 0-9 and the CJK unified ideographs block becomes a separator.
_SLUG_SEPARATOR_PATTERN = re.compile(r"[^\u4e00-\u9fa5a-z0-9]+")

_CLEANING_STEPS: tuple[tuple[re.Pattern[str], str], ...] = (
    # front matter remnants
    (re.compile(r"^---[\s\S]*?---"), ""),
    # fenced code blocks
    (re.compile(r"```[\s\S]*?```"), ""),
    # inline code
    (re.compile(r"`[^`]+`"), ""),
    # images
    (re.compile(r"!\[([^\]]*)\]\([^)]+\)"), ""),
    # links keep their label
    (_LINK_PATTERN, r"\1"),
    # html tags
    (re.compile(r"<[^>]+>"), ""),
    # heading markers
    (re.compile(r"^#+\s+", re.MULTILINE), ""),
    # bulleted and numbered list markers
    (re.compile(r"^\s*[-*+]\s+", re.MULTILINE), ""),
    (re.compile(r"^\s*\d+\.\s+", re.MULTILINE), ""),
    # blockquotes
    (re.compile(r"^>\s+", re.MULTILINE), ""),
    # bold / italic
    (re.compile(r"[*_]{1,3}([^*_]+)[*_]{1,3}"), r"\1"),
)
_WHITESPACE_PATTERN = re.compile(r"\s+")


def heading_id(text: str) -> str:
    """Return the anchor id for a heading text.

    Pure function of ``text``: equal texts always yield equal ids, so two
    headings with the same text in one document share an anchor.

    >>> heading_id("Setup Guide (v2)")
    'setup-guide-v2'
    """
    return _SLUG_SEPARATOR_PATTERN.sub("-", text.lower()).strip("-")


def strip_links(text: str) -> str:
    """Replace ``[label](url)`` with ``label``."""
    return _LINK_PATTERN.sub(r"\1", text)


def extract_headings(markdown: str) -> list[Heading]:
    """Collect ``#``-style headings in document order."""
    headings: list[Heading] = []
    for line in markdown.split("\n"):
        match = _HEADING_LINE_PATTERN.match(line)
        if not match:
            continue

        text = strip_links(match.group(2).strip())
        headings.append(Heading(level=len(match.group(1)), text=text, id=heading_id(text)))

    return headings


def clean_content(markdown: str) -> str:
    """Strip markdown syntax and collapse whitespace into plain searchable text."""
    cleaned = markdown
    for pattern, replacement in _CLEANING_STEPS:
        cleaned = pattern.sub(replacement, cleaned)
    return _WHITESPACE_PATTERN.sub(" ", cleaned).strip()
