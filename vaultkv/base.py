"""Backend-neutral secret client contract"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

from .exceptions import VaultValidationError


@dataclass(frozen=True)
class AuthInfo:
    """Authentication state of a client. Replaced as a whole, never mutated."""
    client_token: str


def check_path(path: Any) -> str:
    """Raise VaultValidationError unless path is a non-blank string."""
    if not isinstance(path, str) or not path.strip():
        raise VaultValidationError(f"API path must be a non-empty string, got: {path!r}")
    return path


def check_secret(data: Any) -> Mapping[str, Any]:
    """Raise VaultValidationError unless data is a mapping."""
    if not isinstance(data, Mapping):
        raise VaultValidationError(f"Secret data must be a mapping, got: {data!r}")
    return data


class SecretClient(ABC):
    """
    The four KV version-1 secret operations.

    Implemented by VaultClient (live HTTP API) and MemoryClient (process-local
    tree). Both raise VaultNotFoundError for missing paths, so calling code
    works unchanged against either.
    """

    auth: Optional[AuthInfo] = None

    def authenticate(self, token: str) -> None:
        """
        Set or replace the authentication token.

        Args:
            token: Vault client token
        """
        if not isinstance(token, str) or not token:
            raise VaultValidationError("Token must be a non-empty string")
        self.auth = AuthInfo(client_token=token)

    def clear_auth(self) -> None:
        """Forget the current token."""
        self.auth = None

    @abstractmethod
    def list_secrets(self, path: str) -> List[str]:
        """List child names under path; directories end with '/'."""

    @abstractmethod
    def read_secret(self, path: str, opts: Optional[Mapping[str, Any]] = None) -> Any:
        """Read the secret at path. opts may carry a 'not_found' fallback."""

    @abstractmethod
    def write_secret(self, path: str, data: Dict[str, Any]) -> bool:
        """Create or replace the secret at path."""

    @abstractmethod
    def delete_secret(self, path: str) -> bool:
        """Delete the secret at path. Absent paths succeed."""
