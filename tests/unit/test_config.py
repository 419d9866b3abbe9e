"""Unit tests for Settings."""

from pathlib import Path

from pydantic import ValidationError
import pytest

from content_search.config import Settings


pytestmark = pytest.mark.unit


def test_values_come_from_environment() -> None:
    settings = Settings()

    assert settings.content_root == Path("content")
    assert settings.index_url == "http://testserver/api/search/index"
    assert settings.http_timeout == 5.0
    assert settings.json_logs is False


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CONTENT_SEARCH_ROUTE_BASE", "/articles")
    monkeypatch.setenv("CONTENT_SEARCH_ALLOW_CACHE_CLEAR", "true")
    monkeypatch.setenv("CONTENT_SEARCH_INDEX_CACHE_STRATEGY", "static")

    settings = Settings()

    assert settings.route_base == "/articles"
    assert settings.allow_cache_clear is True
    assert settings.index_cache_strategy == "static"


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("/posts/", "/posts"), ("/posts", "/posts"), ("/", "/"), ("/api/search/index//", "/api/search/index")],
)
def test_routes_are_normalized(raw: str, expected: str) -> None:
    assert Settings(route_base=raw).route_base == expected


def test_relative_routes_are_rejected() -> None:
    with pytest.raises(ValidationError, match="must start with"):
        Settings(index_endpoint="api/search/index")


@pytest.mark.parametrize(
    "overrides",
    [
        {"index_cache_strategy": "forever"},
        {"port": 0},
        {"http_timeout": 0},
        {"default_limit": 0},
        {"default_limit": 50, "max_limit": 20},
    ],
)
def test_invalid_values_are_rejected(overrides: dict) -> None:
    with pytest.raises(ValidationError):
        Settings(**overrides)


@pytest.mark.parametrize(
    ("limit", "expected"),
    [(None, 10), (0, 10), (-3, 10), (1, 1), (25, 25), (100, 100), (1000, 100)],
)
def test_clamp_limit(limit: int | None, expected: int) -> None:
    assert Settings().clamp_limit(limit) == expected
