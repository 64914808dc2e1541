"""
HashiCorp Vault access for marketplace API credentials.

AppRole login from VAULT_* environment variables. Every secret path is
resolved under the 'marketplace/' mount prefix; callers cannot reach other
projects' secrets. Secrets are read once per process and cached whole.
"""

import logging
import os
from typing import Dict

import hvac
from hvac.exceptions import Forbidden, InvalidPath, Unauthorized

logger = logging.getLogger(__name__)

_SECRET_PREFIX = "marketplace"

_vault_client_instance: "VaultClient | None" = None
_secret_cache: Dict[str, Dict[str, str]] = {}


class VaultError(Exception):
    """A required secret could not be read. The API client cannot be built without it."""


def _shared_client() -> "VaultClient":
    global _vault_client_instance
    if _vault_client_instance is None:
        _vault_client_instance = VaultClient()
    return _vault_client_instance


class VaultClient:
    """AppRole-authenticated reader for KV v2 secrets under marketplace/."""

    def __init__(self, vault_addr: str | None = None, vault_namespace: str | None = None):
        """
        Connect and log in.

        Raises:
            ValueError: VAULT_ADDR, VAULT_ROLE_ID or VAULT_SECRET_ID missing
            PermissionError: Login rejected
        """
        self.vault_addr = vault_addr or os.getenv("VAULT_ADDR")
        if not self.vault_addr:
            raise ValueError("VAULT_ADDR environment variable is required")

        role_id = os.getenv("VAULT_ROLE_ID")
        secret_id = os.getenv("VAULT_SECRET_ID")
        if not (role_id and secret_id):
            raise ValueError("VAULT_ROLE_ID and VAULT_SECRET_ID environment variables are required")

        namespace = vault_namespace or os.getenv("VAULT_NAMESPACE")
        options = {"url": self.vault_addr}
        if namespace:
            options["namespace"] = namespace

        self.client = hvac.Client(**options)
        self._login(role_id, secret_id)
        logger.info(f"Vault client ready at {self.vault_addr}")

    def _login(self, role_id: str, secret_id: str) -> None:
        try:
            result = self.client.auth.approle.login(role_id=role_id, secret_id=secret_id)
        except Exception as e:
            logger.error(f"AppRole authentication failed: {e}")
            raise PermissionError(f"AppRole authentication failed: {e}")

        self.client.token = result["auth"]["client_token"]
        if not self.client.is_authenticated():
            raise PermissionError("Vault authentication failed")

    def read_secret(self, path: str) -> Dict[str, str]:
        """
        All fields of the secret at marketplace/<path>.

        Raises:
            PermissionError: Path missing or access denied
        """
        full_path = f"{_SECRET_PREFIX}/{path}"
        try:
            response = self.client.secrets.kv.v2.read_secret_version(
                path=full_path, raise_on_deleted_version=True
            )
        except InvalidPath:
            logger.error(f"Secret path not found: {full_path}")
            raise PermissionError(f"Secret path '{full_path}' not found in Vault")
        except (Unauthorized, Forbidden) as e:
            logger.error(f"Access denied to secret {full_path}: {e}")
            raise PermissionError(f"Access denied to secret '{full_path}': {e}")
        return response["data"]["data"]

    def get_secret(self, path: str, field: str) -> str:
        """
        One field of the secret at marketplace/<path>.

        Raises:
            PermissionError: Path missing or access denied
            KeyError: Field not present in the secret
        """
        data = self.read_secret(path)
        if field not in data:
            raise KeyError(
                f"Field '{field}' not found in secret '{_SECRET_PREFIX}/{path}'. "
                f"Available: {', '.join(data)}"
            )
        return data[field]


def _cached_fields(path: str, fields: list[str]) -> Dict[str, str]:
    """
    Selected fields of one secret, read from Vault at most once per process.

    Raises:
        VaultError: If the secret or any field cannot be read
    """
    if path not in _secret_cache:
        try:
            _secret_cache[path] = _shared_client().read_secret(path)
        except PermissionError as e:
            raise VaultError(f"Cannot read {_SECRET_PREFIX}/{path}: {e}") from e

    secret = _secret_cache[path]
    missing = [field for field in fields if field not in secret]
    if missing:
        raise VaultError(f"Secret {_SECRET_PREFIX}/{path} is missing: {', '.join(missing)}")
    return {field: secret[field] for field in fields}


def get_marketplace_api_config() -> Dict[str, str]:
    """Marketplace API location and token, as {"base_url", "api_token"}."""
    return _cached_fields("api", ["base_url", "api_token"])
