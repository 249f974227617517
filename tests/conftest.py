"""Pytest configuration."""

from __future__ import annotations

import json
from collections.abc import Callable
from typing import Any
from unittest.mock import AsyncMock

import httpx
import pytest
import yaml
from botocore.exceptions import ClientError

from tweet_sentiment.common import StorageError
from tweet_sentiment.inference import InferenceConfig, SentimentResult
from tweet_sentiment.pipeline import PipelineConfig, ScoredItem
from tweet_sentiment.search import Page, PageCursor, SearchConfig, Tweet

SEARCH_URL = "https://api.test/2/tweets/search/recent"
INFERENCE_BASE = "https://inference.test/models"
INFERENCE_MODEL = "test/sentiment-model"


def _tweet(i: int | str, text: str | None = None) -> Tweet:
    """Build a tweet with predictable fields."""
    return Tweet(
        id=str(i),
        text=f"tweet number {i}" if text is None else text,
        author_id=f"author-{i}",
        created_at="2024-01-01T00:00:00.000Z",
    )


def _page(tweets: list[Tweet], next_token: str | None = None) -> Page:
    """Build a page as the search client would return it."""
    return Page(
        items=tweets,
        next_cursor=PageCursor(token=next_token, result_count=len(tweets)) if next_token else None,
        result_count=len(tweets),
    )


def _search_body(tweets: list[Tweet], next_token: str | None = None) -> dict[str, Any]:
    """Build a recent-search JSON response body."""
    meta: dict[str, Any] = {"result_count": len(tweets)}
    if tweets:
        meta["newest_id"] = tweets[0].id
        meta["oldest_id"] = tweets[-1].id
    if next_token:
        meta["next_token"] = next_token

    body: dict[str, Any] = {"meta": meta}
    if tweets:
        body["data"] = [t.model_dump() for t in tweets]
    return body


class FakeTable:
    """In-memory stand-in for a DynamoDB table resource."""

    def __init__(self, key: str = "tweet_id", fail_for: set[str] | None = None) -> None:
        self.key = key
        self.items: dict[str, dict[str, Any]] = {}
        self.writes: list[dict[str, Any]] = []
        self.fail_for = fail_for or set()

    async def put_item(self, Item: dict[str, Any]) -> dict[str, Any]:
        if Item[self.key] in self.fail_for:
            raise ClientError(
                {"Error": {"Code": "ProvisionedThroughputExceededException", "Message": "slow down"}},
                "PutItem",
            )
        self.writes.append(Item)
        self.items[Item[self.key]] = dict(Item)
        return {}


class _AsyncContext:
    def __init__(self, value: Any) -> None:
        self.value = value

    async def __aenter__(self) -> Any:
        return self.value

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        return None


class FakeResource:
    def __init__(self, table: FakeTable) -> None:
        self.table = table
        self.table_names: list[str] = []

    async def Table(self, name: str) -> FakeTable:
        self.table_names.append(name)
        return self.table


class FakeSecretsClient:
    def __init__(self, secret: dict[str, Any] | None, error: Exception | None) -> None:
        self.secret = secret
        self.error = error
        self.calls: list[str] = []

    async def get_secret_value(self, SecretId: str) -> dict[str, Any]:
        self.calls.append(SecretId)
        if self.error:
            raise self.error
        return {"SecretString": json.dumps(self.secret)}


class FakeSession:
    """Minimal aioboto3 session serving Secrets Manager and DynamoDB."""

    def __init__(
        self,
        secret: dict[str, Any] | None = None,
        secret_error: Exception | None = None,
        table: FakeTable | None = None,
    ) -> None:
        self.table = table or FakeTable()
        self.resource_obj = FakeResource(self.table)
        self.secrets_client = FakeSecretsClient(secret, secret_error)

    def client(self, service_name: str, **kwargs: Any) -> _AsyncContext:
        assert service_name == "secretsmanager"
        return _AsyncContext(self.secrets_client)

    def resource(self, service_name: str, **kwargs: Any) -> _AsyncContext:
        assert service_name == "dynamodb"
        return _AsyncContext(self.resource_obj)


class FakeStore:
    """Result store double recording every upsert."""

    def __init__(self, fail_for: set[str] | None = None) -> None:
        self.records: dict[str, ScoredItem] = {}
        self.calls: list[ScoredItem] = []
        self.fail_for = fail_for or set()

    async def upsert(self, scored: ScoredItem) -> None:
        self.calls.append(scored)
        if scored.key in self.fail_for:
            raise StorageError(f"Error storing tweet {scored.key}")
        self.records[scored.key] = scored


class RecordingTransport:
    """``httpx.MockTransport`` wrapper that remembers every request."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]) -> None:
        self.requests: list[httpx.Request] = []

        def record(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        self.transport = httpx.MockTransport(record)

    def to(self, host: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.host == host]


@pytest.fixture
def search_config() -> SearchConfig:
    """Create a test search config."""
    return SearchConfig(api_url=SEARCH_URL)


@pytest.fixture
def inference_config() -> InferenceConfig:
    """Create a test inference config."""
    return InferenceConfig(api_base=INFERENCE_BASE, model=INFERENCE_MODEL)


@pytest.fixture
def pipeline_config() -> PipelineConfig:
    """Pipeline config without backoff delays."""
    return PipelineConfig(
        max_total_items=30,
        page_size=10,
        retry_attempts=3,
        retry_wait_min=0,
        retry_wait_max=0,
    )


@pytest.fixture
def scorer() -> AsyncMock:
    """Scorer double returning POSITIVE for every text."""
    mock = AsyncMock()
    mock.score = AsyncMock(return_value=SentimentResult(label="POSITIVE", score=0.9))
    return mock


@pytest.fixture
def store() -> FakeStore:
    return FakeStore()


@pytest.fixture
def config_file(tmp_path, monkeypatch) -> Callable[..., str]:
    """Write a YAML config and point SENTIMENT_CONFIG at it."""

    def write(**overrides: Any) -> str:
        config: dict[str, Any] = {
            "search": {"api_url": SEARCH_URL},
            "inference": {"api_base": INFERENCE_BASE, "model": INFERENCE_MODEL},
            "store": {"table": "Tweets"},
            "secrets": {"secret_name": "test/sentiment"},
            "pipeline": {
                "max_total_items": 30,
                "page_size": 10,
                "retry_wait_min": 0,
                "retry_wait_max": 0,
            },
        }
        for section, values in overrides.items():
            if isinstance(values, dict):
                config.setdefault(section, {}).update(values)
            else:
                config[section] = values

        path = tmp_path / "config.yaml"
        path.write_text(yaml.safe_dump(config))
        monkeypatch.setenv("SENTIMENT_CONFIG", str(path))
        monkeypatch.delenv("SENTIMENT_SECRET_NAME", raising=False)
        return str(path)

    return write


@pytest.fixture
def make_tweet() -> Callable[..., Tweet]:
    """Factory for tweets with predictable fields."""
    return _tweet


@pytest.fixture
def make_page() -> Callable[..., Page]:
    """Factory for pages as the search client returns them."""
    return _page


@pytest.fixture
def search_body() -> Callable[..., dict[str, Any]]:
    """Factory for recent-search response bodies."""
    return _search_body


@pytest.fixture
def fake_table() -> type[FakeTable]:
    return FakeTable


@pytest.fixture
def fake_session() -> type[FakeSession]:
    """aioboto3 session double; call with ``secret=``, ``secret_error=`` or ``table=``."""
    return FakeSession


@pytest.fixture
def fake_store() -> type[FakeStore]:
    return FakeStore


@pytest.fixture
def recording_transport() -> type[RecordingTransport]:
    """Wrap a request handler in a recording ``httpx.MockTransport``."""
    return RecordingTransport
