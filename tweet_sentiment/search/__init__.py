"""Search package for social media analytics."""

from .client import SearchPager
from .config import SearchConfig
from .types import Page, PageCursor, Tweet

__all__ = ["Page", "PageCursor", "SearchConfig", "SearchPager", "Tweet"]
