"""Build a secret client from an address string"""

from typing import Optional

from .base import SecretClient
from .client import VaultClient
from .exceptions import VaultValidationError
from .memory import MemoryClient

MOCK_SCHEME = 'mock:'


def new_client(address: str, token: Optional[str] = None, **kwargs) -> SecretClient:
    """
    Create a client for the given address.

    Supported addresses:
        http://... or https://...  VaultClient against a live server
        mock:-                     empty MemoryClient
        mock:<fixture file>        MemoryClient seeded from a YAML/JSON file

    Args:
        address: Vault address or mock spec
        token: Optional token to authenticate the client with
        **kwargs: Passed to VaultClient (transport, headers, timeout, verify)
    """
    if not isinstance(address, str) or not address:
        raise VaultValidationError(f"Client address must be a non-empty string, got: {address!r}")

    if address.startswith(MOCK_SCHEME):
        fixture = address[len(MOCK_SCHEME):]
        client = MemoryClient() if fixture in ('', '-') else MemoryClient.from_file(fixture)
        if token:
            client.authenticate(token)
        return client

    if address.startswith(('http://', 'https://')):
        return VaultClient(address, token=token, **kwargs)

    raise VaultValidationError(f"Unsupported client address: {address}")
