"""Shared test fixtures and configuration."""

from collections.abc import Callable
import logging
import os
from pathlib import Path
from typing import Any

import pytest
import yaml


# Complete test environment that overrides every configurable value
TEST_ENV = {
    "CONTENT_SEARCH_CONTENT_ROOT": "content",
    "CONTENT_SEARCH_ROUTE_BASE": "/posts",
    "CONTENT_SEARCH_INDEX_ENDPOINT": "/api/search/index",
    "CONTENT_SEARCH_SEARCH_ENDPOINT": "/api/search/blog",
    "CONTENT_SEARCH_INDEX_CACHE_STRATEGY": "dynamic",
    "CONTENT_SEARCH_ALLOW_CACHE_CLEAR": "false",
    "CONTENT_SEARCH_INDEX_URL": "http://testserver/api/search/index",
    "CONTENT_SEARCH_HTTP_TIMEOUT": "5",
    "CONTENT_SEARCH_DEFAULT_LIMIT": "10",
    "CONTENT_SEARCH_SESSION_LIMIT": "15",
    "CONTENT_SEARCH_MAX_LIMIT": "100",
    "CONTENT_SEARCH_HOST": "127.0.0.1",
    "CONTENT_SEARCH_PORT": "8000",
    "CONTENT_SEARCH_LOG_LEVEL": "info",
    "CONTENT_SEARCH_JSON_LOGS": "false",
    # Proxy settings - ensure they're cleared for tests
    "http_proxy": "",
    "https_proxy": "",
    "all_proxy": "",
    "no_proxy": "",
}

for key, value in TEST_ENV.items():
    os.environ[key] = value


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Pin the environment before each test."""
    for key, value in TEST_ENV.items():
        monkeypatch.setenv(key, value)


def render_mdx(front_matter: dict[str, Any], body: str) -> str:
    """MDX text with a sorted ``---`` YAML block, or just the body when there is no metadata."""
    if not front_matter:
        return body
    yaml_text = yaml.safe_dump(front_matter, default_flow_style=False, allow_unicode=True, sort_keys=True)
    return f"---\n{yaml_text}---\n{body}"


WriteMdx = Callable[..., Path]


@pytest.fixture
def write_mdx() -> WriteMdx:
    """Return a helper that writes an MDX document below a content root."""

    def _write(root: Path, relative: str, body: str = "", **front_matter: Any) -> Path:
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(render_mdx(front_matter, body), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def content_root(tmp_path: Path, write_mdx: WriteMdx) -> Path:
    """Two namespaces with a handful of documents, one of them invalid."""
    root = tmp_path / "content"
    write_mdx(
        root,
        "blog/hello-world.mdx",
        "# Hello World\n\nWelcome to the [blog](https://example.com).\n\n## Setup Guide\n\nInstall things.\n",
        title="Hello World",
        description="intro",
        tags=["js", "intro"],
    )
    write_mdx(
        root,
        "blog/nested/deep-post.mdx",
        "Some **bold** text about deployment.\n\n```bash\nnpm run deploy\n```\n",
        title="Deep Post",
        category="ops",
    )
    write_mdx(root, "blog/untitled.mdx", "No title here.\n", description="missing title")
    write_mdx(
        root,
        "dev/tools.mdx",
        "## Editor\n\nUse a good editor.\n",
        title="Tools",
        tags=["editor"],
    )
    (root / "dev" / "notes.md").write_text("---\ntitle: Not MDX\n---\nignored\n", encoding="utf-8")
    (root / ".drafts").mkdir(parents=True)
    write_mdx(root, ".drafts/secret.mdx", "draft", title="Secret")
    return root


@pytest.fixture(autouse=True)
def restore_logging():
    """Undo configure_logging() calls made by a test."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    for handler in root.handlers[:]:
        if handler not in handlers and type(handler) is logging.StreamHandler:
            root.removeHandler(handler)
    root.setLevel(level)
