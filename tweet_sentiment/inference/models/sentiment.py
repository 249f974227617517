from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from tweet_sentiment.common.errors import MalformedResponseError

SERVICE = "HuggingFace"


class SentimentResult(BaseModel):
    """Best label and its confidence for one text."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    label: str = Field(
        ...,
        min_length=1,
        description="Sentiment label, e.g. POSITIVE or NEGATIVE",
    )
    score: float = Field(
        ...,
        ge=0.0,
        le=1.0,
        description="Confidence in the label",
    )

    @field_validator("label", mode="before")
    @classmethod
    def strip_label(cls, v: Any) -> Any:
        return v.strip() if isinstance(v, str) else v

    @classmethod
    def from_response(cls, payload: Any) -> SentimentResult:
        """Normalize an inference response into a single result.

        Accepted shapes:
          * ``{"label": ..., "score": ...}``
          * ``[{"label": ..., "score": ...}, ...]``, first element wins
          * ``[[{"label": ..., "score": ...}, ...], ...]``, highest score of
            the first inner list wins

        Anything else raises ``MalformedResponseError``.
        """
        candidate = payload
        if isinstance(candidate, list):
            if not candidate:
                raise MalformedResponseError(SERVICE, payload, "empty list")

            head = candidate[0]
            if isinstance(head, list):
                if not head:
                    raise MalformedResponseError(SERVICE, payload, "empty inner list")
                if not all(isinstance(c, dict) for c in head):
                    raise MalformedResponseError(SERVICE, payload, "inner list holds non-objects")
                candidate = max(head, key=_score_key)
            else:
                candidate = head

        if not isinstance(candidate, dict):
            raise MalformedResponseError(SERVICE, payload, "no label/score object")

        try:
            return cls.model_validate(candidate)
        except ValidationError as e:
            raise MalformedResponseError(SERVICE, payload, "missing or invalid label/score") from e


def _score_key(candidate: dict[str, Any]) -> float:
    score = candidate.get("score")
    if isinstance(score, bool) or not isinstance(score, int | float):
        return float("-inf")
    return float(score)
