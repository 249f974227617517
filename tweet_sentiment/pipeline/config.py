"""Batch pipeline configuration."""

from __future__ import annotations

from pydantic import Field, model_validator

from tweet_sentiment.common.config import BaseConfig


class PipelineConfig(BaseConfig):
    """Budget, pacing and retry settings for one invocation."""

    # budget
    max_total_items: int = Field(
        default=30,
        description="Ceiling on tweets processed per invocation",
        ge=1,
    )
    page_size: int = Field(
        default=10,
        description="Tweets requested per page",
        ge=1,
    )
    max_pages: int | None = Field(
        default=None,
        description="Hard cap on pages fetched; None follows cursors",
        ge=1,
    )

    # rate window
    requests_per_window: int | None = Field(
        default=None,
        description="Search requests allowed before a cooldown; None disables pacing",
        ge=1,
    )
    cooldown_seconds: float = Field(
        default=0.0,
        description="Pause once the window budget is spent",
        ge=0.0,
    )
    max_cooldowns: int | None = Field(
        default=None,
        description="Cooldowns allowed per invocation; stop when exhausted",
        ge=0,
    )

    # caller-side retry of page fetches
    retry_attempts: int = Field(
        default=3,
        description="Attempts per page fetch on retryable upstream errors",
        ge=1,
        le=10,
    )
    retry_wait_min: float = Field(
        default=1.0,
        description="Minimum backoff in seconds",
        ge=0.0,
    )
    retry_wait_max: float = Field(
        default=10.0,
        description="Maximum backoff in seconds",
        ge=0.0,
    )

    @model_validator(mode="after")
    def validate_backoff(self) -> PipelineConfig:
        if self.retry_wait_max < self.retry_wait_min:
            raise ValueError("retry_wait_max must not be below retry_wait_min")
        return self
