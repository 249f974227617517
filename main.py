"""Tweet sentiment job."""

from __future__ import annotations

import asyncio
import json
import logging
import signal

import aioboto3
import httpx

from tweet_sentiment.aws import Credentials, SecretsProvider
from tweet_sentiment.common import CustomEncoder, InvalidInput, RootConfig
from tweet_sentiment.inference import SentimentScorer
from tweet_sentiment.pipeline import BatchPipeline, BatchState
from tweet_sentiment.search import SearchPager
from tweet_sentiment.store import ResultStore

logger = logging.getLogger(__name__)


async def main(
    config: RootConfig,
    query: str,
    stop: asyncio.Event | None = None,
    max_total_items: int | None = None,
    credentials: Credentials | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
    session: aioboto3.Session | None = None,
) -> BatchState:
    """Run one pipeline invocation for ``query``."""
    if not query or not query.strip():
        raise InvalidInput("Query parameter is required.")

    logger.info("Starting process")
    logger.debug(f"Validated config: {config.model_dump_json(indent=2)}")

    # Credentials are resolved before any client exists
    if credentials is None:
        secrets = SecretsProvider.from_config(config.secrets, session=session)
        credentials = await secrets.credentials()

    async with SearchPager.from_config(
        config.search, token=credentials.search_token, transport=transport
    ) as pager:
        async with SentimentScorer.from_config(
            config.inference, token=credentials.inference_token, transport=transport
        ) as scorer:
            async with ResultStore.from_config(config.store, session=session) as store:
                pipeline = BatchPipeline.from_config(
                    config.pipeline, pager=pager, scorer=scorer, store=store
                )
                return await pipeline.run(query, stop=stop, max_total_items=max_total_items)


async def _run_cli(config: RootConfig, query: str, max_total_items: int | None) -> BatchState:
    stop = asyncio.Event()

    # First signal asks the pipeline to stop after the current tweet
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, stop.set)

    return await main(config, query, stop=stop, max_total_items=max_total_items)


if __name__ == "__main__":
    import argparse
    import time

    # Configure logging
    logging.basicConfig(
        level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    parser = argparse.ArgumentParser(description="Run tweet sentiment job")
    parser.add_argument("--query", type=str, required=True, help="Search query")
    parser.add_argument("--config", type=str, default=None, help="Path to YAML config")
    parser.add_argument("--max-items", type=int, default=None, help="Override max_total_items")
    args = parser.parse_args()

    config = RootConfig.load(args.config)

    start = time.time()
    state = asyncio.run(_run_cli(config, args.query, args.max_items))
    end = time.time()

    print(json.dumps(state.responses(), indent=2, cls=CustomEncoder))
    logger.info(f"Workflow {state.state.value} in {end - start:.2f} seconds")
