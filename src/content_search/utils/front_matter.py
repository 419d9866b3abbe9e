"""YAML front matter utilities for MDX documents.

Splits the ``---`` delimited YAML block at the top of a content file from the
markdown body that follows it.

Example document:
    ---
    title: Publishing packages to npm
    description: A walkthrough of the release pipeline
    tags: [npm, release]
    ---
    # Introduction

    This post covers...
"""

import re
from typing import Any

import yaml

from content_search.errors import FrontMatterError


# Front matter delimiter (3 dashes)
DELIMITER = "---"

_FRONT_MATTER_PATTERN = re.compile(
    rf"^\ufeff?{re.escape(DELIMITER)}[ \t]*\r?\n(.*?)\r?\n{re.escape(DELIMITER)}[ \t]*(?:\r?\n|$)",
    re.DOTALL,
)
_EMPTY_FRONT_MATTER_PATTERN = re.compile(
    rf"^\ufeff?{re.escape(DELIMITER)}[ \t]*\r?\n{re.escape(DELIMITER)}[ \t]*(?:\r?\n|$)"
)


def parse_front_matter(content: str) -> tuple[dict[str, Any], str]:
    """Parse YAML front matter from MDX content.

    Args:
        content: Full document content including front matter

    Returns:
        Tuple of (front_matter_dict, markdown_body).
        If no front matter block is present, returns (empty dict, original content).

    Raises:
        FrontMatterError: The block exists but is not valid YAML or is not a mapping.

    Example:
        >>> metadata, body = parse_front_matter("---\\ntitle: Hello\\n---\\n# Content")
        >>> metadata["title"]
        'Hello'
        >>> body
        '# Content'
    """
    empty_match = _EMPTY_FRONT_MATTER_PATTERN.match(content)
    if empty_match:
        return {}, content[empty_match.end() :]

    match = _FRONT_MATTER_PATTERN.match(content)
    if not match:
        return {}, content

    yaml_text = match.group(1)
    body = content[match.end() :]

    try:
        metadata = yaml.safe_load(yaml_text)
    except yaml.YAMLError as exc:
        raise FrontMatterError(f"Invalid YAML front matter: {exc}") from exc

    if metadata is None:
        return {}, body

    if not isinstance(metadata, dict):
        raise FrontMatterError(f"Front matter must be a mapping, got {type(metadata).__name__}")

    return metadata, body
