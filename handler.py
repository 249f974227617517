import asyncio
import base64
import binascii
import json
import logging
import time
from typing import Any

import aioboto3
import httpx

from main import main
from tweet_sentiment.common import CustomEncoder, InvalidInput, PipelineError, RootConfig

# Setup logger
logger = logging.getLogger(__name__)
logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)

QUERY_REQUIRED = "Query parameter is required."

_HEADERS = {
    "Content-Type": "application/json",
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "Content-Type",
    "Access-Control-Allow-Methods": "OPTIONS,POST",
}


def respond(status: int, body: Any) -> dict[str, Any]:
    """Build an API Gateway proxy response."""
    return {
        "statusCode": status,
        "headers": dict(_HEADERS),
        "body": json.dumps(body, cls=CustomEncoder),
    }


def parse_request(event: dict[str, Any]) -> tuple[str, int | None]:
    """Extract the query and optional item budget from the event."""
    raw = event.get("body") or "{}"
    if event.get("isBase64Encoded"):
        try:
            raw = base64.b64decode(raw).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError) as e:
            raise InvalidInput("Invalid request body.") from e

    try:
        body = json.loads(raw) if isinstance(raw, str) else raw
    except json.JSONDecodeError as e:
        raise InvalidInput("Invalid request body.") from e
    if not isinstance(body, dict):
        raise InvalidInput("Invalid request body.")

    query = body.get("query")
    if not isinstance(query, str) or not query.strip():
        raise InvalidInput(QUERY_REQUIRED)

    max_items = None
    query_params = event.get("queryStringParameters") or {}
    if (value := query_params.get("max_items")) is not None:
        try:
            max_items = int(value)
        except ValueError:
            logger.warning("Invalid max_items parameter, using default")
        else:
            if max_items < 1:
                logger.warning("Non-positive max_items parameter, using default")
                max_items = None

    return query.strip(), max_items


def _arm_deadline(
    stop: asyncio.Event, context: Any | None, margin: float
) -> asyncio.TimerHandle | None:
    """Set ``stop`` shortly before the Lambda invocation runs out of time."""
    if context is None or not hasattr(context, "get_remaining_time_in_millis"):
        return None

    remaining = context.get_remaining_time_in_millis() / 1000
    delay = max(remaining - margin, 0.0)
    logger.info(f"Invocation deadline in {remaining:.1f}s, stopping after {delay:.1f}s")
    return asyncio.get_running_loop().call_later(delay, stop.set)


async def process_request(
    event: dict[str, Any],
    context: Any | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
    session: aioboto3.Session | None = None,
) -> dict[str, Any]:
    """Process the incoming Lambda request."""
    logger.info(f"Received event: {json.dumps(event, default=str)}")

    try:
        query, max_items = parse_request(event)
    except InvalidInput as e:
        logger.warning(f"Rejected request: {e}")
        return respond(400, {"error": str(e)})

    logger.info(f'Query received: "{query}"')
    stop = asyncio.Event()
    timer = None

    try:
        config = RootConfig.load()
        timer = _arm_deadline(stop, context, config.deadline_margin_seconds)

        start = time.time()
        state = await main(
            config,
            query,
            stop=stop,
            max_total_items=max_items,
            transport=transport,
            session=session,
        )
        end = time.time()

        logger.info(
            f"Pipeline {state.state.value} with {len(state.results)} results "
            f"in {end - start:.2f} seconds"
        )
        return respond(200, state.responses())
    except PipelineError as e:
        logger.error(f"Error during pipeline execution: {e}")
        return respond(500, {"error": "An internal error occurred.", "details": str(e)})
    except Exception as e:
        logger.error(f"Error processing request: {e}", exc_info=True)
        return respond(500, {"error": "An internal error occurred.", "details": str(e)})
    finally:
        if timer is not None:
            timer.cancel()


def lambda_handler(event: dict[str, Any], context: Any | None = None) -> dict[str, Any]:
    """AWS Lambda entry point."""
    logger.info("Starting Lambda handler...")
    try:
        return asyncio.run(process_request(event, context))
    except Exception as e:
        logger.error(f"Unhandled exception: {e}")
        return respond(500, {"error": "An unknown error occurred."})
