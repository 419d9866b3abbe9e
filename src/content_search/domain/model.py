"""Domain model for the search index.

Value objects are immutable pydantic models. Optional fields default to
``None`` and are dropped on serialization so the wire format only carries
keys a document actually has.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Heading(BaseModel):
    """One entry of a document outline."""

    model_config = ConfigDict(frozen=True)

    level: int = Field(ge=1, le=6)
    text: str
    id: str


class SearchIndexItem(BaseModel):
    """Searchable projection of one content document."""

    model_config = ConfigDict(frozen=True)

    title: str = Field(min_length=1)
    description: str | None = None
    path: str
    category: str | None = None
    tags: list[str] | None = None
    content: str | None = None
    headings: list[Heading] | None = None

    def to_payload(self) -> dict[str, Any]:
        """Serialize for the JSON transport, omitting absent fields."""
        return self.model_dump(exclude_none=True)


class DocumentFrontMatter(BaseModel):
    """Validated view of the front matter keys the scanner reads.

    ``title`` is the only required key. Optional keys with the wrong type are
    treated as absent instead of failing the whole document.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    title: str = Field(min_length=1)
    description: str | None = None
    category: str | None = None
    tags: list[str] | None = None

    @field_validator("title", mode="before")
    @classmethod
    def _require_string_title(cls, value: Any) -> Any:
        if not isinstance(value, str):
            raise ValueError("title must be a string")
        return value

    @field_validator("description", "category", mode="before")
    @classmethod
    def _drop_non_string(cls, value: Any) -> str | None:
        return value if isinstance(value, str) else None

    @field_validator("tags", mode="before")
    @classmethod
    def _coerce_tags(cls, value: Any) -> list[str] | None:
        if not isinstance(value, list):
            return None
        return [str(item) for item in value]
