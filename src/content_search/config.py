"""Centralized configuration for content-search using Pydantic Settings."""

from pathlib import Path

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from content_search.utils.cache_control import CacheStrategy


class Settings(BaseSettings):
    """Strictly typed configuration loaded from ``CONTENT_SEARCH_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="CONTENT_SEARCH_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        validate_default=True,
        extra="ignore",
    )

    # Content
    content_root: Path = Field(default=Path("content"), description="Directory holding one subdirectory per namespace")
    route_base: str = Field(default="/posts", description="Route prefix for document paths")

    # Transport
    index_endpoint: str = Field(default="/api/search/index", description="Path serving the full JSON index")
    search_endpoint: str = Field(default="/api/search/blog", description="Path serving server-side ranked results")
    index_cache_strategy: CacheStrategy = Field(
        default="dynamic", description="Cache-Control strategy for the index endpoint"
    )
    allow_cache_clear: bool = Field(
        default=False, description="Expose POST <index_endpoint>/clear to invalidate the server cache"
    )

    # Client
    index_url: str = Field(
        default="http://127.0.0.1:8000/api/search/index", description="URL the client loader fetches"
    )
    http_timeout: float = Field(default=10.0, gt=0, description="Index fetch timeout in seconds")

    # Ranking
    default_limit: int = Field(default=10, ge=1, description="Result limit for the general entry point")
    session_limit: int = Field(default=15, ge=1, description="Result limit for interactive search sessions")
    max_limit: int = Field(default=100, ge=1, description="Upper bound accepted by the HTTP search endpoint")

    # Server
    host: str = Field(default="127.0.0.1", description="Bind host")
    port: int = Field(default=8000, ge=1, le=65535, description="Bind port")

    # Logging
    log_level: str = Field(default="info", description="Logging level")
    json_logs: bool = Field(default=True, description="Emit structured JSON logs")

    @field_validator("route_base", "index_endpoint", "search_endpoint")
    @classmethod
    def _normalize_route(cls, value: str) -> str:
        if not value.startswith("/"):
            raise ValueError(f"route must start with '/': {value!r}")
        return value.rstrip("/") or "/"

    @model_validator(mode="after")
    def _check_limits(self) -> "Settings":
        if self.default_limit > self.max_limit:
            raise ValueError("default_limit must not exceed max_limit")
        return self

    def clamp_limit(self, limit: int | None) -> int:
        """Return ``limit`` bounded to ``1..max_limit``, or the default when missing."""
        if limit is None or limit < 1:
            return self.default_limit
        return min(limit, self.max_limit)
