"""
vaultkv - HashiCorp Vault KV version-1 client

A Python client for reading and writing secrets in Vault's KV v1 engine, with
an in-memory backend that honors the same contract for tests.

Quick Start:
    from vaultkv import VaultClient

    client = VaultClient("https://vault.example.com:8200", token="s.abc123")

    # Write and read a secret
    client.write_secret("kv/app/api", {"key": "xyz"})
    secret = client.read_secret("kv/app/api")

    # Fall back instead of raising when a secret is missing
    secret = client.read_secret("kv/app/other", {"not_found": {}})

    # List a directory
    client.list_secrets("kv/app")

Offline / tests:
    from vaultkv import new_client

    client = new_client("mock:fixtures/secrets.yml")
"""

__version__ = "1.0.0"

from .base import AuthInfo, SecretClient
from .client import VaultClient, ApiResponse
from .memory import MemoryClient
from .factory import new_client
from .transport import Transport, RequestsTransport, Response
from .exceptions import (
    VaultError,
    VaultValidationError,
    VaultAuthError,
    VaultAPIError,
    VaultNotFoundError,
    VaultPermissionError,
    VaultRedirectError,
    supports_not_found,
)

__all__ = [
    # Clients
    "SecretClient",
    "VaultClient",
    "MemoryClient",
    "new_client",
    "AuthInfo",
    "ApiResponse",
    # Transport
    "Transport",
    "RequestsTransport",
    "Response",
    # Exceptions
    "VaultError",
    "VaultValidationError",
    "VaultAuthError",
    "VaultAPIError",
    "VaultNotFoundError",
    "VaultPermissionError",
    "VaultRedirectError",
    "supports_not_found",
    # Metadata
    "__version__",
]
