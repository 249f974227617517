"""Inference configuration."""

from __future__ import annotations

from pydantic import Field

from tweet_sentiment.common.config import BaseConfig


class InferenceConfig(BaseConfig):
    """Inference configuration."""

    api_base: str = Field(
        default="https://api-inference.huggingface.co/models",
        description="API base URL",
        pattern=r"^https?://",
    )
    model: str = Field(
        default="distilbert/distilbert-base-uncased-finetuned-sst-2-english",
        description="Hosted sentiment model",
        min_length=1,
    )
    timeout: float = Field(
        default=30.0,
        description="Request timeout in seconds",
        gt=0,
        le=60,
    )

    @property
    def endpoint(self) -> str:
        return f"{self.api_base.rstrip('/')}/{self.model}"
