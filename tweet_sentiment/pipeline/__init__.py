"""Batch pipeline package for social media analytics."""

from .config import PipelineConfig
from .pager import PageIterator
from .pipeline import BatchPipeline
from .types import BatchState, PipelineState, ScoredItem

__all__ = [
    "BatchPipeline",
    "BatchState",
    "PageIterator",
    "PipelineConfig",
    "PipelineState",
    "ScoredItem",
]
