"""
Key-case normalization for Vault request/response bodies.

Vault responds with underscore-separated field names (lease_duration,
lease_id); vaultkv exposes them hyphenated (lease-duration, lease-id). The
'data' field of an envelope holds caller-defined secret field names and is
never rewritten.
"""

import json
from typing import Any, Optional

DATA_KEY = 'data'


def swap_key_chars(value: Any, find: str, replace: str) -> Any:
    """Recursively rewrite mapping keys, replacing `find` with `replace`."""
    if isinstance(value, dict):
        return {
            (k.replace(find, replace) if isinstance(k, str) else k): swap_key_chars(v, find, replace)
            for k, v in value.items()
        }
    if isinstance(value, (list, tuple)):
        return type(value)(swap_key_chars(x, find, replace) for x in value)
    return value


def kebabify_keys(value: Any) -> Any:
    """Rewrite mapping keys with underscores changed to dashes."""
    return swap_key_chars(value, '_', '-')


def snakeify_keys(value: Any) -> Any:
    """Rewrite mapping keys with dashes changed to underscores."""
    return swap_key_chars(value, '-', '_')


def _rewrite_envelope(envelope: Any, find: str, replace: str) -> Any:
    if not isinstance(envelope, dict):
        return envelope
    rest = {k: v for k, v in envelope.items() if k != DATA_KEY}
    result = swap_key_chars(rest, find, replace)
    result[DATA_KEY] = envelope.get(DATA_KEY)
    # only top-level nulls are dropped
    return {k: v for k, v in result.items() if v is not None}


def kebabify_envelope(envelope: Any) -> Any:
    """Normalize an inbound response envelope, leaving 'data' untouched."""
    return _rewrite_envelope(envelope, '_', '-')


def snakeify_envelope(envelope: Any) -> Any:
    """Reverse of kebabify_envelope, for sending envelopes back to Vault."""
    return _rewrite_envelope(envelope, '-', '_')


def clean_body(body: Optional[str]) -> Any:
    """
    Parse and normalize a raw response body.

    Returns None for empty bodies (e.g. 204 No Content).
    """
    if not body or not body.strip():
        return None
    return kebabify_envelope(json.loads(body))
