"""Search API configuration."""

from __future__ import annotations

from pydantic import Field

from tweet_sentiment.common.config import BaseConfig


class SearchConfig(BaseConfig):
    """Twitter recent-search configuration."""

    api_url: str = Field(
        default="https://api.twitter.com/2/tweets/search/recent",
        description="Recent search endpoint",
        pattern=r"^https?://",
    )
    tweet_fields: list[str] = Field(
        default_factory=lambda: ["id", "text", "created_at", "author_id"],
        description="Fields requested via tweet.fields",
        min_length=1,
    )
    max_page_size: int = Field(
        default=100,
        description="Upstream cap on max_results",
        ge=1,
    )
    timeout: float = Field(
        default=10.0,
        description="Request timeout in seconds",
        gt=0,
        le=60,
    )
