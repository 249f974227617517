from __future__ import annotations

from typing import Any, Generic

from pydantic import ValidationError

from tweet_sentiment.common.config import TConf
from tweet_sentiment.common.errors import ConfigError


class ComponentFactory(Generic[TConf]):
    """Base class for configurable components."""

    # This is a class variable that will be set by subclasses
    _config_type: type[TConf]
    _instance_config: TConf

    def __init__(self, config: TConf) -> None:
        """Initialize with configuration."""
        self._instance_config = config

    @classmethod
    def from_config(cls, config: dict[str, Any], **kwargs: Any):
        """Create a component from a configuration dictionary."""
        try:
            parsed = cls._config_type(**config)
        except ValidationError as e:
            raise ConfigError(f"Invalid {cls.__name__} configuration: {e}") from e
        return cls(parsed, **kwargs)

    @property
    def config(self) -> TConf:
        """Access the configuration."""
        return self._instance_config
