"""Sentiment scoring against a hosted inference endpoint."""

from __future__ import annotations

import logging

import httpx

from tweet_sentiment.common.component import ComponentFactory
from tweet_sentiment.common.errors import InvalidInput, MalformedResponseError, UpstreamError

from .config import InferenceConfig
from .models.sentiment import SERVICE, SentimentResult

logger = logging.getLogger(__name__)


class SentimentScorer(ComponentFactory[InferenceConfig]):
    """Scores one text per request.

    Texts are never batched into a single request so that one bad input
    cannot spoil the results of the others.
    """

    _config_type = InferenceConfig

    def __init__(
        self,
        config: InferenceConfig,
        token: str,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize scorer."""
        super().__init__(config)
        if not token:
            raise InvalidInput("Inference API token is required")

        self._token = token
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

        logger.debug(f"Sentiment scorer initialized for {self.config.endpoint}")

    @property
    def client(self) -> httpx.AsyncClient:
        """Lazy load client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                headers={
                    "Authorization": f"Bearer {self._token}",
                    "Content-Type": "application/json",
                },
                timeout=self.config.timeout,
                transport=self._transport,
            )
        return self._client

    async def score(self, text: str) -> SentimentResult:
        """Return the best sentiment label for ``text``."""
        if text is None or not text.strip():
            raise InvalidInput("Text to score must not be empty")

        logger.debug(f'Sending text to inference API: "{text}"')
        try:
            response = await self.client.post(self.config.endpoint, json={"inputs": text})
        except httpx.HTTPError as e:
            raise UpstreamError(SERVICE, None, str(e)) from e

        if not response.is_success:
            raise UpstreamError(SERVICE, response.status_code, response.text)

        try:
            payload = response.json()
        except ValueError as e:
            raise MalformedResponseError(SERVICE, response.text, "body is not JSON") from e

        logger.debug(f"Inference API response: {payload}")
        return SentimentResult.from_response(payload)

    async def close(self):
        """Close client."""
        if self._client:
            try:
                await self._client.aclose()
            finally:
                self._client = None

    async def __aenter__(self) -> SentimentScorer:
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit, cleanup resources."""
        await self.close()
