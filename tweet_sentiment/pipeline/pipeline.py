"""Fetch, score and store tweets one at a time."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from tweet_sentiment.common.component import ComponentFactory
from tweet_sentiment.common.errors import InvalidInput, PageFetchError, PipelineError, UpstreamError

from .config import PipelineConfig
from .pager import PageIterator
from .types import BatchState, PipelineState, ScoredItem

if TYPE_CHECKING:
    from tweet_sentiment.inference.client import SentimentScorer
    from tweet_sentiment.search.client import SearchPager
    from tweet_sentiment.search.types import Page, PageCursor, Tweet
    from tweet_sentiment.store.client import ResultStore

logger = logging.getLogger(__name__)


def _is_retryable(e: BaseException) -> bool:
    return isinstance(e, UpstreamError) and e.retryable


class BatchPipeline(ComponentFactory[PipelineConfig]):
    """Runs search -> sentiment -> store for every tweet of a query.

    Work is strictly sequential: a tweet is scored and stored before the
    next one starts. A failure while scoring or storing one tweet skips that
    tweet only. Failing to fetch a page ends the invocation.
    """

    _config_type = PipelineConfig

    def __init__(
        self,
        config: PipelineConfig,
        pager: SearchPager,
        scorer: SentimentScorer,
        store: ResultStore,
    ) -> None:
        super().__init__(config)
        self.pager = pager
        self.scorer = scorer
        self.store = store

    async def run(
        self,
        query: str,
        stop: asyncio.Event | None = None,
        max_total_items: int | None = None,
    ) -> BatchState:
        """Process up to ``max_total_items`` tweets matching ``query``.

        Setting ``stop`` makes the pipeline finish before the next tweet (or
        page) and return what it has so far. Writes already made are kept.
        """
        if not query or not query.strip():
            raise InvalidInput("Query parameter is required.")

        limit = self.config.max_total_items if max_total_items is None else max_total_items
        if limit < 1:
            raise InvalidInput(f"max_total_items must be positive, got {limit}")

        stop = stop or asyncio.Event()
        state = BatchState()

        async def fetch(cursor: PageCursor | None) -> Page:
            return await self._fetch(query, cursor, state)

        pages = PageIterator(fetch, max_pages=self.config.max_pages)
        logger.info(f'Processing up to {limit} tweets for query: "{query}"')

        try:
            async for page in pages:
                state.pages += 1
                state.cursor = page.next_cursor

                items = page.items[: limit - state.processed]
                for item in items:
                    if stop.is_set():
                        return self._cancel(state)
                    await self._process(item, state)
                    state.processed += 1

                if state.processed >= limit or page.exhausted:
                    break
                if stop.is_set():
                    return self._cancel(state)
                if not await self._pace(state, stop):
                    if stop.is_set():
                        return self._cancel(state)
                    break
        except PipelineError:
            state.state = PipelineState.FAILED
            raise

        state.state = PipelineState.DONE
        logger.info(
            f"Processed {state.processed} tweets over {state.pages} pages: "
            f"{len(state.results)} stored, {state.skipped} skipped"
        )
        return state

    async def _fetch(self, query: str, cursor: PageCursor | None, state: BatchState) -> Page:
        """Fetch one page, retrying retryable upstream errors."""
        state.state = PipelineState.FETCHING_PAGE
        retrying = AsyncRetrying(
            retry=retry_if_exception(_is_retryable),
            wait=wait_exponential(
                multiplier=1, min=self.config.retry_wait_min, max=self.config.retry_wait_max
            ),
            stop=stop_after_attempt(self.config.retry_attempts),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )

        try:
            async for attempt in retrying:
                with attempt:
                    state.requests += 1
                    state.window_requests += 1
                    page = await self.pager.next_page(query, self.config.page_size, cursor)
        except UpstreamError as e:
            logger.error(f"Failed to fetch page after {state.processed} tweets: {e}")
            raise PageFetchError(e, state.processed) from e

        return page

    async def _process(self, item: Tweet, state: BatchState) -> None:
        """Score and store one tweet; never raises."""
        logger.info(f"Processing tweet ID: {item.id}")
        try:
            state.state = PipelineState.SCORING_ITEM
            sentiment = await self.scorer.score(item.text)

            if sentiment is None or not sentiment.label:
                logger.warning(f"Skipping tweet {item.id} due to missing sentiment.")
                state.skipped += 1
                return

            logger.info(f"Sentiment for tweet ID {item.id}: {sentiment.label} ({sentiment.score})")
            scored = ScoredItem(tweet=item, sentiment=sentiment)

            state.state = PipelineState.STORING_ITEM
            await self.store.upsert(scored)
            state.results.append(scored)
        except Exception as e:
            logger.error(f"Error processing tweet {item.id}: {e}")
            state.skipped += 1

    async def _pace(self, state: BatchState, stop: asyncio.Event) -> bool:
        """Cool down if the request window is spent. False means stop."""
        per_window = self.config.requests_per_window
        if per_window is None or state.window_requests < per_window:
            return True

        if self.config.max_cooldowns is not None and state.cooldowns >= self.config.max_cooldowns:
            logger.info(f"Cooldown allowance of {self.config.max_cooldowns} exhausted, stopping")
            return False

        logger.info(
            f"Request window of {per_window} spent, cooling down for "
            f"{self.config.cooldown_seconds:.1f} seconds"
        )
        state.cooldowns += 1
        try:
            await asyncio.wait_for(stop.wait(), timeout=self.config.cooldown_seconds)
            logger.info("Stop requested during cooldown")
            return False
        except asyncio.TimeoutError:
            state.window_requests = 0
            return True

    @staticmethod
    def _cancel(state: BatchState) -> BatchState:
        state.state = PipelineState.CANCELLED
        logger.warning(
            f"Stop requested, returning {len(state.results)} results after {state.processed} tweets"
        )
        return state
