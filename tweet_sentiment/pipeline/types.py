"""Pipeline types."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict

from tweet_sentiment.inference.models.sentiment import SentimentResult
from tweet_sentiment.search.types import PageCursor, Tweet


class PipelineState(str, Enum):
    """Batch pipeline states."""

    FETCHING_PAGE = "FETCHING_PAGE"
    SCORING_ITEM = "SCORING_ITEM"
    STORING_ITEM = "STORING_ITEM"
    DONE = "DONE"
    CANCELLED = "CANCELLED"
    FAILED = "FAILED"

    @classmethod
    def terminal_states(cls) -> set[PipelineState]:
        """States where no further transitions occur."""
        return {cls.DONE, cls.CANCELLED, cls.FAILED}


class ScoredItem(BaseModel):
    """A tweet joined with its sentiment."""

    model_config = ConfigDict(frozen=True)

    tweet: Tweet
    sentiment: SentimentResult

    @property
    def key(self) -> str:
        return self.tweet.id

    def to_record(self) -> dict[str, Any]:
        """Row persisted by the result store."""
        return {
            "tweet_id": self.tweet.id,
            "text": self.tweet.text,
            "author_id": self.tweet.author_id,
            "created_at": self.tweet.created_at,
            "sentiment_label": self.sentiment.label,
            "sentiment_score": self.sentiment.score,
        }

    def to_response(self) -> dict[str, Any]:
        """Entry of the response list."""
        return {
            "tweet_id": self.tweet.id,
            "text": self.tweet.text,
            "sentiment_label": self.sentiment.label,
            "sentiment_score": self.sentiment.score,
        }


@dataclass
class BatchState:
    """Progress of one pipeline invocation. Never shared between invocations."""

    state: PipelineState = PipelineState.FETCHING_PAGE
    processed: int = 0
    skipped: int = 0
    pages: int = 0
    requests: int = 0
    window_requests: int = 0
    cooldowns: int = 0
    cursor: PageCursor | None = None
    results: list[ScoredItem] = field(default_factory=list)

    def responses(self) -> list[dict[str, Any]]:
        return [r.to_response() for r in self.results]
