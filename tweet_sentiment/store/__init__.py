"""Result store package for social media analytics."""

from .client import ResultStore
from .config import StoreConfig

__all__ = ["ResultStore", "StoreConfig"]
