"""
HTTP transport used by VaultClient.

The request pipeline only depends on the Transport interface, so tests (or
callers with special networking needs) can supply their own implementation.
"""

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Protocol

import requests


@dataclass
class Response:
    """Raw transport response: status, headers and undecoded body text."""
    status: int
    headers: Mapping[str, str] = field(default_factory=dict)
    body: Optional[str] = None


class Transport(Protocol):
    def request(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str],
        body: Optional[str] = None,
        params: Optional[Mapping[str, Any]] = None
    ) -> Response:
        ...


class RequestsTransport:
    """
    Transport backed by a requests.Session.

    Redirects are never followed here; the request pipeline follows them
    itself so it can enforce its redirect budget.

    Args:
        session: Optional pre-configured requests.Session
        timeout: Passed through to requests (seconds or (connect, read) tuple)
        verify: TLS verification flag or CA bundle path
    """

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        timeout: Any = None,
        verify: Any = True
    ):
        self.session = session or requests.Session()
        self.timeout = timeout
        self.verify = verify

    def request(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str],
        body: Optional[str] = None,
        params: Optional[Mapping[str, Any]] = None
    ) -> Response:
        resp = self.session.request(
            method,
            url,
            headers=dict(headers),
            data=body.encode('utf-8') if body is not None else None,
            params=params,
            allow_redirects=False,
            timeout=self.timeout,
            verify=self.verify,
        )
        return Response(
            status=resp.status_code,
            headers=resp.headers,
            body=resp.text or None,
        )

    def close(self) -> None:
        self.session.close()
