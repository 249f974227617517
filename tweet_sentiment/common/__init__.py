import json
from datetime import datetime
from decimal import Decimal

from .config import RootConfig
from .errors import (
    ConfigError,
    CredentialError,
    InvalidInput,
    MalformedResponseError,
    PageFetchError,
    PipelineError,
    StorageError,
    UpstreamError,
)


class CustomEncoder(json.JSONEncoder):
    def default(self, o):
        # Handle datetime
        if isinstance(o, datetime):
            return o.isoformat()

        # DynamoDB hands numbers back as Decimal
        if isinstance(o, Decimal):
            return float(o)

        return super().default(o)


__all__ = [
    "ConfigError",
    "CredentialError",
    "CustomEncoder",
    "InvalidInput",
    "MalformedResponseError",
    "PageFetchError",
    "PipelineError",
    "RootConfig",
    "StorageError",
    "UpstreamError",
]
