"""Sentiment scorer test suite."""

import json

import httpx
import pytest

from tweet_sentiment.common import InvalidInput, MalformedResponseError, UpstreamError
from tweet_sentiment.inference import InferenceConfig, SentimentResult, SentimentScorer


class TestSentimentResult:
    """Test suite for response normalization."""

    @pytest.mark.parametrize(
        "payload",
        [
            {"label": "POSITIVE", "score": 0.9},
            [{"label": "POSITIVE", "score": 0.9}],
            [[{"label": "POSITIVE", "score": 0.9}, {"label": "NEGATIVE", "score": 0.1}]],
        ],
        ids=["object", "list", "nested"],
    )
    def test_accepted_shapes(self, payload):
        """Each accepted shape yields the same result."""
        result = SentimentResult.from_response(payload)
        assert result.label == "POSITIVE"
        assert result.score == pytest.approx(0.9)

    def test_nested_picks_highest_score(self):
        """Nested lists are ranked by score, not position."""
        payload = [[{"label": "NEGATIVE", "score": 0.2}, {"label": "POSITIVE", "score": 0.8}]]
        assert SentimentResult.from_response(payload).label == "POSITIVE"

    def test_flat_list_takes_first(self):
        """A flat list is taken in upstream order."""
        payload = [{"label": "NEGATIVE", "score": 0.4}, {"label": "POSITIVE", "score": 0.6}]
        assert SentimentResult.from_response(payload).label == "NEGATIVE"

    def test_label_is_stripped(self):
        assert SentimentResult.from_response({"label": " NEUTRAL ", "score": 0.5}).label == "NEUTRAL"

    @pytest.mark.parametrize(
        "payload",
        [
            [],
            [[]],
            [["POSITIVE"]],
            {"error": "Model is loading"},
            {"label": "", "score": 0.5},
            {"label": "POSITIVE", "score": 1.5},
            {"label": "POSITIVE"},
            "POSITIVE",
            None,
        ],
    )
    def test_malformed_shapes(self, payload):
        """Anything without a usable label/score pair is rejected."""
        with pytest.raises(MalformedResponseError) as exc_info:
            SentimentResult.from_response(payload)

        assert exc_info.value.service == "HuggingFace"
        assert not exc_info.value.retryable


class TestSentimentScorer:
    """Test suite for the scorer client."""

    @pytest.mark.asyncio
    async def test_one_request_per_text(self, inference_config, recording_transport):
        """Each call posts exactly one JSON body holding the text."""
        recorder = recording_transport(
            lambda r: httpx.Response(200, json=[[{"label": "POSITIVE", "score": 0.9}]])
        )
        async with SentimentScorer(
            inference_config, token="hf-token", transport=recorder.transport
        ) as scorer:
            result = await scorer.score("I love this")

        assert result == SentimentResult(label="POSITIVE", score=0.9)
        assert len(recorder.requests) == 1

        request = recorder.requests[0]
        assert request.method == "POST"
        assert str(request.url) == inference_config.endpoint
        assert request.headers["Authorization"] == "Bearer hf-token"
        assert json.loads(request.content) == {"inputs": "I love this"}

    @pytest.mark.asyncio
    @pytest.mark.parametrize("text", ["", "   ", None])
    async def test_empty_text(self, inference_config, recording_transport, text):
        """Blank texts never reach the endpoint."""
        recorder = recording_transport(lambda r: httpx.Response(200, json={}))
        scorer = SentimentScorer(inference_config, token="hf-token", transport=recorder.transport)

        with pytest.raises(InvalidInput):
            await scorer.score(text)
        assert recorder.requests == []

    @pytest.mark.asyncio
    async def test_non_success_status(self, inference_config, recording_transport):
        recorder = recording_transport(lambda r: httpx.Response(503, text="Model is loading"))
        async with SentimentScorer(
            inference_config, token="hf-token", transport=recorder.transport
        ) as scorer:
            with pytest.raises(UpstreamError) as exc_info:
                await scorer.score("hello")

        assert exc_info.value.status == 503
        assert "Model is loading" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_unexpected_payload(self, inference_config, recording_transport):
        recorder = recording_transport(lambda r: httpx.Response(200, json={"error": "nope"}))
        async with SentimentScorer(
            inference_config, token="hf-token", transport=recorder.transport
        ) as scorer:
            with pytest.raises(MalformedResponseError):
                await scorer.score("hello")

    def test_from_config(self):
        """Scorer is built from a plain config section."""
        scorer = SentimentScorer.from_config(
            {"api_base": "https://inference.test/models/", "model": "m"}, token="t"
        )
        assert isinstance(scorer.config, InferenceConfig)
        assert scorer.config.endpoint == "https://inference.test/models/m"
