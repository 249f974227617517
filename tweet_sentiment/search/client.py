"""Paginated client for the Twitter recent-search API."""

from __future__ import annotations

import logging

import httpx
from pydantic import ValidationError

from tweet_sentiment.common.component import ComponentFactory
from tweet_sentiment.common.errors import InvalidInput, MalformedResponseError, UpstreamError

from .config import SearchConfig
from .types import Page, PageCursor, Tweet

logger = logging.getLogger(__name__)

SERVICE = "Twitter"


class SearchPager(ComponentFactory[SearchConfig]):
    """Fetches one page of matching tweets per call.

    The pager keeps no cursor state of its own: callers thread the
    ``PageCursor`` returned with each page into the next call.
    """

    _config_type = SearchConfig

    def __init__(
        self,
        config: SearchConfig,
        token: str,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize pager."""
        super().__init__(config)
        if not token:
            raise InvalidInput("Search bearer token is required")

        self._token = token
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

        logger.debug(f"Search pager initialized for {self.config.api_url}")

    @property
    def client(self) -> httpx.AsyncClient:
        """Lazy load client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                headers={"Authorization": f"Bearer {self._token}"},
                timeout=self.config.timeout,
                transport=self._transport,
            )
        return self._client

    def _params(self, query: str, page_size: int, cursor: PageCursor | None) -> dict[str, str]:
        params = {
            "query": query,
            "max_results": str(page_size),
            "tweet.fields": ",".join(self.config.tweet_fields),
        }
        if cursor is not None:
            params["next_token"] = cursor.token
        return params

    async def next_page(
        self,
        query: str,
        page_size: int,
        cursor: PageCursor | None = None,
    ) -> Page:
        """Fetch the page following ``cursor`` (or the first page)."""
        if not query or not query.strip():
            raise InvalidInput("Query parameter is required.")
        if page_size < 1:
            raise InvalidInput(f"page_size must be positive, got {page_size}")
        if page_size > self.config.max_page_size:
            raise InvalidInput(
                f"page_size {page_size} exceeds upstream cap {self.config.max_page_size}"
            )

        params = self._params(query, page_size, cursor)
        logger.info(
            f'Fetching tweets for query: "{query}" (cursor: {cursor.token if cursor else None})'
        )

        try:
            response = await self.client.get(self.config.api_url, params=params)
        except httpx.HTTPError as e:
            raise UpstreamError(SERVICE, None, str(e)) from e

        if not response.is_success:
            raise UpstreamError(SERVICE, response.status_code, response.text)

        try:
            payload = response.json()
        except ValueError as e:
            raise MalformedResponseError(SERVICE, response.text, "body is not JSON") from e

        return self._parse(payload)

    @staticmethod
    def _parse(payload: object) -> Page:
        """Convert a search response body into a ``Page``."""
        if not isinstance(payload, dict):
            raise MalformedResponseError(SERVICE, payload, "expected an object")

        meta = payload.get("meta") or {}
        if not isinstance(meta, dict):
            raise MalformedResponseError(SERVICE, payload, "meta is not an object")

        try:
            items = [Tweet.model_validate(t) for t in payload.get("data") or []]
            result_count = int(meta.get("result_count", len(items)))
        except (ValidationError, TypeError, ValueError) as e:
            raise MalformedResponseError(SERVICE, payload, str(e)) from e

        next_token = meta.get("next_token")
        next_cursor = PageCursor(token=next_token, result_count=result_count) if next_token else None

        logger.info(f"Fetched {result_count} tweets. Pagination token: {next_token or 'None'}")
        return Page(
            items=items,
            next_cursor=next_cursor,
            result_count=result_count,
            newest_id=meta.get("newest_id"),
            oldest_id=meta.get("oldest_id"),
        )

    async def close(self):
        """Close client."""
        if self._client:
            try:
                await self._client.aclose()
            finally:
                self._client = None

    async def __aenter__(self) -> SearchPager:
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit, cleanup resources."""
        await self.close()
