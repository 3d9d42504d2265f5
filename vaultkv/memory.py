"""
In-memory KV version-1 backend.

MemoryClient keeps secrets in a process-local tree keyed by path segments and
honors the same contract as VaultClient, so it can stand in for a live Vault
in tests and offline development.

Listing order: entries are sorted lexicographically by their rendered name
("bar" sorts before "bar/"). Code that must work against both backends should
only rely on list membership.

Example:
    from vaultkv import MemoryClient

    client = MemoryClient({"kv/app/database": {"password": "hunter2"}})
    client.list_secrets("kv/app")          # ["database"]
    client.read_secret("kv/app/database")  # {"password": "hunter2"}
"""

import copy
import logging
import threading
from typing import Any, Dict, List, Mapping, Optional

import yaml

from .base import SecretClient, check_path, check_secret
from .exceptions import VaultNotFoundError, VaultValidationError, not_found_options, supports_not_found

logger = logging.getLogger(__name__)


class _Node:
    __slots__ = ('secret', 'children')

    def __init__(self):
        self.secret: Optional[Dict[str, Any]] = None
        self.children: Dict[str, '_Node'] = {}

    def is_empty(self) -> bool:
        return self.secret is None and not self.children


def _segments(path: str) -> List[str]:
    check_path(path)
    segments = [s for s in path.split('/') if s]
    if not segments:
        raise VaultValidationError(f"API path must name at least one segment, got: {path!r}")
    return segments


class MemoryClient(SecretClient):
    """
    Secret client backed by an in-memory tree.

    Args:
        secrets: Optional initial {path: secret} mapping
    """

    def __init__(self, secrets: Optional[Mapping[str, Dict[str, Any]]] = None):
        self._root = _Node()
        self._lock = threading.RLock()
        self.auth = None
        for path, secret in (secrets or {}).items():
            self.write_secret(path, secret)

    @classmethod
    def from_file(cls, path) -> 'MemoryClient':
        """
        Build a client seeded from a YAML (or JSON) fixture file mapping
        secret paths to secret data.
        """
        with open(path, 'r') as f:
            fixture = yaml.safe_load(f)
        if fixture is None:
            fixture = {}
        if not isinstance(fixture, dict):
            raise VaultValidationError(f"Fixture {path} must contain a mapping of paths to secrets")
        for secret_path, secret in fixture.items():
            if not isinstance(secret, dict):
                raise VaultValidationError(f"Fixture entry {secret_path!r} must be a mapping")
        logger.debug("Loaded %d fixture secrets from %s", len(fixture), path)
        return cls(fixture)

    def __repr__(self) -> str:
        return "MemoryClient()"

    def _find(self, segments: List[str]) -> Optional[_Node]:
        node = self._root
        for name in segments:
            node = node.children.get(name)
            if node is None:
                return None
        return node

    # ============ Secrets ============

    def list_secrets(self, path: str) -> List[str]:
        """
        List immediate children of path.

        Raises:
            VaultNotFoundError: If path has no children
        """
        segments = _segments(path)
        with self._lock:
            node = self._find(segments)
            if node is None or not node.children:
                raise VaultNotFoundError(f"No such secret path: {path}", errors=[f"No such secret path: {path}"])
            entries = []
            for name, child in node.children.items():
                if child.secret is not None:
                    entries.append(name)
                if child.children:
                    entries.append(name + '/')
        return sorted(entries)

    def read_secret(self, path: str, opts: Optional[Mapping[str, Any]] = None) -> Any:
        """
        Read the secret at path. A directory without its own secret counts
        as missing.
        """
        opts = not_found_options(opts)
        segments = _segments(path)

        def read():
            with self._lock:
                node = self._find(segments)
                if node is None or node.secret is None:
                    raise VaultNotFoundError(f"No such secret: {path}", errors=[f"No such secret: {path}"])
                return copy.deepcopy(node.secret)

        return supports_not_found(opts, read)

    def write_secret(self, path: str, data: Dict[str, Any]) -> bool:
        check_secret(data)
        segments = _segments(path)
        secret = copy.deepcopy(dict(data))
        with self._lock:
            node = self._root
            for name in segments:
                node = node.children.setdefault(name, _Node())
            node.secret = secret
        return True

    def delete_secret(self, path: str) -> bool:
        segments = _segments(path)
        with self._lock:
            trail = [self._root]
            for name in segments:
                child = trail[-1].children.get(name)
                if child is None:
                    return True
                trail.append(child)
            trail[-1].secret = None
            # prune directories left empty by the delete
            for name, parent, node in zip(reversed(segments), reversed(trail[:-1]), reversed(trail[1:])):
                if not node.is_empty():
                    break
                del parent.children[name]
        return True
