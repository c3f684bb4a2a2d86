from __future__ import annotations

import logging
import os
from abc import ABC, abstractmethod
from functools import lru_cache
from typing import Optional

from azure.identity import DefaultAzureCredential
from azure.keyvault.secrets import SecretClient

from .settings import get_settings

logger = logging.getLogger(__name__)

API_KEY_SECRET_NAME = "ApiKey"


# PUBLIC_INTERFACE
class SecretProvider(ABC):
    """Source of named secrets. Implementations must not cache secret values."""

    @abstractmethod
    def get_secret(self, name: str) -> Optional[str]:
        """Return the current value of the named secret, or None if it has no value."""


class KeyVaultSecretProvider(SecretProvider):
    """
    Reads secrets from Azure Key Vault.

    The SDK client is reused across calls; every call still performs a fresh
    lookup so a rotated key takes effect on the next request.
    """

    def __init__(self, vault_url: str, client: Optional[SecretClient] = None) -> None:
        self._vault_url = vault_url
        self._client = client or SecretClient(vault_url=vault_url, credential=DefaultAzureCredential())

    def get_secret(self, name: str) -> Optional[str]:
        logger.debug("Fetching secret %s from %s", name, self._vault_url)
        return self._client.get_secret(name).value


class EnvironmentSecretProvider(SecretProvider):
    """Reads secrets from the process environment on every call (local development)."""

    def get_secret(self, name: str) -> Optional[str]:
        value = os.environ.get(name)
        return value if value else None


@lru_cache(maxsize=None)
def _key_vault_provider(vault_url: str) -> KeyVaultSecretProvider:
    return KeyVaultSecretProvider(vault_url)


# PUBLIC_INTERFACE
def get_secret_provider() -> SecretProvider:
    """
    Factory to return the configured secret provider.
    - KeyVaultUrl set: KeyVaultSecretProvider
    - otherwise: EnvironmentSecretProvider
    """
    settings = get_settings()
    if settings.key_vault_url:
        return _key_vault_provider(settings.key_vault_url)
    return EnvironmentSecretProvider()
