"""Result store configuration."""

from __future__ import annotations

from pydantic import Field

from tweet_sentiment.common.config import BaseConfig


class StoreConfig(BaseConfig):
    """DynamoDB result store configuration."""

    table: str = Field(
        default="Tweets",
        description="DynamoDB table name",
        pattern=r"^[a-zA-Z0-9_.-]{3,255}$",
    )
    key_field: str = Field(
        default="tweet_id",
        description="Partition key of the table",
        min_length=1,
    )
    region: str | None = Field(
        default=None,
        description="AWS region, falls back to AWS_REGION",
    )
    endpoint_url: str | None = Field(
        default=None,
        description="Override endpoint, e.g. for DynamoDB Local",
    )
