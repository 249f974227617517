"""Common configuration classes."""

from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler
from typing import Any, TypeVar

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from tweet_sentiment.common.errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = os.path.join(
    os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))),
    "config",
    "default.yaml",
)


class BaseConfig(BaseModel):
    model_config = ConfigDict(
        extra="forbid",
        validate_assignment=True,
        from_attributes=True,
    )


class LoggingConfig(BaseConfig):
    """Logging configuration."""

    level: str = Field(
        default="INFO",
        description="Root log level",
    )
    format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log record format",
    )
    filename: str | None = Field(
        default=None,
        description="Optional rotating log file",
    )
    max_bytes: int = Field(
        default=10 * 1024 * 1024,
        description="Rotate the log file after this many bytes",
        ge=1,
    )
    backup_count: int = Field(
        default=5,
        description="Number of rotated log files to keep",
        ge=0,
    )


class RootConfig(BaseConfig):
    """Root configuration."""

    search: dict[str, Any] = Field(
        default_factory=dict,
        description="Search API configuration",
    )
    inference: dict[str, Any] = Field(
        default_factory=dict,
        description="Inference configuration",
    )
    store: dict[str, Any] = Field(
        default_factory=dict,
        description="Result store configuration",
    )
    secrets: dict[str, Any] = Field(
        default_factory=dict,
        description="Secrets Manager configuration",
    )
    pipeline: dict[str, Any] = Field(
        default_factory=dict,
        description="Batch pipeline configuration",
    )
    logging: LoggingConfig | None = Field(
        default=None,
        description="Logging configuration",
    )
    deadline_margin_seconds: float = Field(
        default=5.0,
        description="Stop this long before the invocation deadline",
        ge=0.0,
    )

    def __init__(self, **data):
        """Initialize root config."""
        super().__init__(**data)
        if self.logging:
            self.setup_logging(self.logging)

    @classmethod
    def setup_logging(cls, config: LoggingConfig) -> None:
        """Setup logging based on configuration."""
        logging.basicConfig(level=config.level, format=config.format)
        root = logging.getLogger()
        root.setLevel(config.level)

        if config.filename and not any(
            isinstance(h, RotatingFileHandler)
            and h.baseFilename == os.path.abspath(config.filename)
            for h in root.handlers
        ):
            handler = RotatingFileHandler(
                filename=config.filename,
                maxBytes=config.max_bytes,
                backupCount=config.backup_count,
            )
            handler.setFormatter(logging.Formatter(config.format))
            root.addHandler(handler)

    @classmethod
    def load(cls, path: str | None = None) -> RootConfig:
        """Load and validate a YAML configuration file."""
        path = path or os.environ.get("SENTIMENT_CONFIG") or DEFAULT_CONFIG_PATH
        logger.info(f"Loading configuration from {path}")

        try:
            with open(path) as f:
                raw = yaml.safe_load(f) or {}
        except FileNotFoundError as e:
            raise ConfigError(f"Config file not found: {path}") from e
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}") from e

        if not isinstance(raw, dict):
            raise ConfigError(f"Config root must be a mapping: {path}")

        try:
            return cls(**raw)
        except ValidationError as e:
            raise ConfigError(f"Invalid configuration: {e}") from e


TConf = TypeVar("TConf", bound=BaseConfig)
