"""Cursor-driven iteration over search result pages."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Awaitable, Callable

from tweet_sentiment.search.types import Page, PageCursor

logger = logging.getLogger(__name__)

FetchPage = Callable[[PageCursor | None], Awaitable[Page]]


class PageIterator:
    """Lazily yields pages in cursor order.

    Each ``async for`` starts again from the first page. Iteration ends when
    the upstream stops returning a cursor, hands back the cursor that was
    just consumed, or ``max_pages`` (if set) have been fetched. The consumer
    decides when it has seen enough items and simply stops iterating.
    """

    def __init__(self, fetch: FetchPage, max_pages: int | None = None) -> None:
        if max_pages is not None and max_pages < 1:
            raise ValueError(f"max_pages must be positive, got {max_pages}")
        self._fetch = fetch
        self.max_pages = max_pages

    def __aiter__(self) -> AsyncIterator[Page]:
        return self._pages()

    async def _pages(self) -> AsyncIterator[Page]:
        cursor: PageCursor | None = None
        fetched = 0
        while True:
            page = await self._fetch(cursor)
            fetched += 1
            yield page

            if page.next_cursor is None:
                logger.debug(f"No continuation token after page {fetched}")
                return
            if cursor is not None and page.next_cursor.token == cursor.token:
                logger.warning(f"Upstream repeated consumed cursor {cursor.token}, stopping")
                return
            if self.max_pages is not None and fetched >= self.max_pages:
                logger.warning(f"Page cap of {self.max_pages} reached, stopping")
                return
            cursor = page.next_cursor
