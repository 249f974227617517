"""Bearer token retrieval from AWS Secrets Manager."""

from __future__ import annotations

import json
import logging
import os

import aioboto3
from botocore.exceptions import BotoCoreError, ClientError
from pydantic import BaseModel, ConfigDict, Field

from tweet_sentiment.common.component import ComponentFactory
from tweet_sentiment.common.config import BaseConfig
from tweet_sentiment.common.errors import CredentialError

logger = logging.getLogger(__name__)


class SecretsConfig(BaseConfig):
    """Secrets Manager configuration."""

    secret_name: str = Field(
        default="dev/sentiment",
        description="Secret holding both bearer tokens",
        min_length=1,
    )
    region: str | None = Field(
        default=None,
        description="AWS region, falls back to AWS_REGION",
    )
    search_token_key: str = Field(
        default="TwitterBearerToken",
        description="Key of the search API token inside the secret",
    )
    inference_token_key: str = Field(
        default="HuggingFaceAPI",
        description="Key of the inference API token inside the secret",
    )


class Credentials(BaseModel):
    """Resolved bearer tokens."""

    model_config = ConfigDict(frozen=True)

    search_token: str = Field(..., min_length=1, repr=False)
    inference_token: str = Field(..., min_length=1, repr=False)


class SecretsProvider(ComponentFactory[SecretsConfig]):
    """Resolves the pipeline's bearer tokens at invocation time."""

    _config_type = SecretsConfig

    def __init__(self, config: SecretsConfig, session: aioboto3.Session | None = None) -> None:
        super().__init__(config)
        self._session = session

    @property
    def secret_name(self) -> str:
        return os.environ.get("SENTIMENT_SECRET_NAME") or self.config.secret_name

    @property
    def region(self) -> str:
        return self.config.region or os.environ.get("AWS_REGION", "eu-central-1")

    async def get_secret(self) -> dict[str, str]:
        """Fetch and decode the secret JSON."""
        logger.info("Fetching secrets from Secrets Manager...")
        session = self._session or aioboto3.Session()

        try:
            async with session.client(
                service_name="secretsmanager", region_name=self.region
            ) as client:
                response = await client.get_secret_value(SecretId=self.secret_name)
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Failed to retrieve secret {self.secret_name}: {e}")
            raise CredentialError(f"Failed to retrieve secret {self.secret_name}") from e

        if not response.get("SecretString"):
            raise CredentialError("Secret string is empty.")

        try:
            secret = json.loads(response["SecretString"])
        except json.JSONDecodeError as e:
            raise CredentialError(f"Secret {self.secret_name} is not valid JSON") from e

        if not isinstance(secret, dict):
            raise CredentialError(f"Secret {self.secret_name} must be a JSON object")

        logger.info("Secrets fetched successfully.")
        return secret

    async def credentials(self) -> Credentials:
        """Resolve both bearer tokens."""
        secret = await self.get_secret()

        missing = [
            key
            for key in (self.config.search_token_key, self.config.inference_token_key)
            if not secret.get(key)
        ]
        if missing:
            raise CredentialError(f"Secret {self.secret_name} is missing keys: {', '.join(missing)}")

        return Credentials(
            search_token=secret[self.config.search_token_key],
            inference_token=secret[self.config.inference_token_key],
        )
