"""Domain models for query results."""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class SearchResult(BaseModel):
    """Value object for a single ranked match.

    Built per query and discarded after rendering. ``heading_id`` and
    ``heading_text`` are only set when a heading of the document matched,
    in which case ``path`` already carries the ``#heading-id`` fragment.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    type: Literal["blog"] = "blog"
    title: str
    description: str | None = None
    path: str | None = None
    tags: list[str] | None = None
    category: str | None = None
    heading_id: str | None = Field(default=None, alias="headingId")
    heading_text: str | None = Field(default=None, alias="headingText")
    score: int = Field(gt=0)

    def to_payload(self) -> dict[str, Any]:
        """Serialize with the camelCase keys used on the wire."""
        return self.model_dump(by_alias=True, exclude_none=True)
