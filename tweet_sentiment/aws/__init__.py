"""AWS package for social media analytics."""

from .secrets import Credentials, SecretsConfig, SecretsProvider

__all__ = ["Credentials", "SecretsConfig", "SecretsProvider"]
