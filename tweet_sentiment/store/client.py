"""DynamoDB result store."""

from __future__ import annotations

import logging
import os
from contextlib import AsyncExitStack
from decimal import Decimal
from typing import Any

import aioboto3
from botocore.exceptions import BotoCoreError, ClientError

from tweet_sentiment.common.component import ComponentFactory
from tweet_sentiment.common.errors import StorageError
from tweet_sentiment.pipeline.types import ScoredItem

from .config import StoreConfig

logger = logging.getLogger(__name__)


class ResultStore(ComponentFactory[StoreConfig]):
    """Upserts scored tweets into DynamoDB, keyed by tweet id.

    ``put_item`` replaces any existing item with the same key, so writing
    the same tweet twice leaves a single record holding the latest values.
    """

    _config_type = StoreConfig

    def __init__(self, config: StoreConfig, session: aioboto3.Session | None = None) -> None:
        """Initialize result store."""
        super().__init__(config)
        self._session = session
        self._stack: AsyncExitStack | None = None
        self._table: Any = None

    @property
    def region(self) -> str:
        return self.config.region or os.environ.get("AWS_REGION", "eu-central-1")

    async def connect(self) -> None:
        """Open the DynamoDB resource and bind the table."""
        if self._table is not None:
            return

        if not self._session:
            self._session = aioboto3.Session(region_name=self.region)

        self._stack = AsyncExitStack()
        try:
            resource = await self._stack.enter_async_context(
                self._session.resource("dynamodb", endpoint_url=self.config.endpoint_url)
            )
            self._table = await resource.Table(self.config.table)
        except (BotoCoreError, ClientError) as e:
            await self.disconnect()
            raise StorageError(f"Failed to open table {self.config.table}: {e}") from e

        logger.info(f"Connected to DynamoDB table: {self.config.table}")

    async def disconnect(self) -> None:
        """Release the DynamoDB resource."""
        self._table = None
        if self._stack:
            try:
                await self._stack.aclose()
            finally:
                self._stack = None
                logger.info(f"Disconnected from DynamoDB table: {self.config.table}")

    def _to_item(self, scored: ScoredItem) -> dict[str, Any]:
        record = scored.to_record()
        record[self.config.key_field] = record.pop("tweet_id")
        # boto3 refuses floats
        record["sentiment_score"] = Decimal(str(record["sentiment_score"]))
        return record

    async def upsert(self, scored: ScoredItem) -> None:
        """Insert or overwrite the record for ``scored.key``."""
        if self._table is None:
            raise StorageError("Not connected to DynamoDB")

        item = self._to_item(scored)
        logger.debug(f"Storing tweet in DynamoDB: {item}")

        try:
            await self._table.put_item(Item=item)
        except (BotoCoreError, ClientError) as e:
            raise StorageError(f"Error storing tweet {scored.key}: {e}") from e

        logger.info(f"Tweet {scored.key} stored successfully.")

    async def __aenter__(self) -> ResultStore:
        """Enter context."""
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Exit context."""
        await self.disconnect()
