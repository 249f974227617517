"""Inference package for social media analytics."""

from .client import SentimentScorer
from .config import InferenceConfig
from .models.sentiment import SentimentResult

__all__ = ["InferenceConfig", "SentimentResult", "SentimentScorer"]
