"""Search API types."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class Tweet(BaseModel):
    """A single post returned by the search API."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str = Field(..., min_length=1, description="Tweet identifier")
    text: str = Field(default="", description="Tweet body")
    author_id: str | None = Field(default=None, description="Author identifier")
    created_at: str | None = Field(default=None, description="Creation timestamp (ISO 8601)")


class PageCursor(BaseModel):
    """Continuation token handed out by the search API."""

    model_config = ConfigDict(frozen=True)

    token: str = Field(..., min_length=1, description="Opaque continuation token")
    result_count: int = Field(default=0, ge=0, description="Result count of the page it came with")


class Page(BaseModel):
    """One page of search results."""

    model_config = ConfigDict(frozen=True)

    items: list[Tweet] = Field(default_factory=list)
    next_cursor: PageCursor | None = Field(default=None)
    result_count: int = Field(default=0, ge=0)
    newest_id: str | None = Field(default=None)
    oldest_id: str | None = Field(default=None)

    @property
    def exhausted(self) -> bool:
        """No further pages exist after this one."""
        return self.next_cursor is None
