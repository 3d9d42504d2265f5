"""
vaultkv HTTP Client

A Python client for the HashiCorp Vault KV version-1 secrets engine.

Example:
    from vaultkv import VaultClient

    client = VaultClient("https://vault.example.com:8200", token="s.abc123")

    # Write a secret
    client.write_secret("kv/app/database", {"user": "app", "password": "..."})

    # Read it back
    secret = client.read_secret("kv/app/database")
    print(secret["password"])

    # List a directory
    client.list_secrets("kv/app")   # ["database"]
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Optional, Dict, Any, List, Mapping
from urllib.parse import quote, urljoin

from .base import SecretClient, check_path, check_secret
from .casing import clean_body
from .exceptions import (
    ResponseFailure,
    VaultAPIError,
    VaultAuthError,
    VaultRedirectError,
    classify_error,
    not_found_options,
    supports_not_found,
)
from .transport import RequestsTransport, Transport

logger = logging.getLogger(__name__)

# SDK version for User-Agent header
SDK_VERSION = "1.0.0"
USER_AGENT = f"vaultkv-python/{SDK_VERSION}"

TOKEN_HEADER = 'X-Vault-Token'
REDIRECT_STATUSES = (303, 307)
MAX_REDIRECTS = 2


@dataclass
class ApiResponse:
    """Response with its body parsed and normalized (None when empty)."""
    status: int
    headers: Mapping[str, str] = field(default_factory=dict)
    body: Any = None

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


class VaultClient(SecretClient):
    """
    Client for the Vault HTTP API.

    Args:
        base_url: Vault address (e.g., "https://vault.example.com:8200")
        token: Optional client token; can be set later with authenticate()
        transport: Transport implementation (defaults to RequestsTransport)
        headers: Extra headers sent with every request
        timeout: Request timeout passed to the default transport
        verify: TLS verification passed to the default transport

    Example:
        >>> client = VaultClient("https://vault.example.com:8200", token="...")
        >>> client.read_secret("kv/app/database")
        {'user': 'app', 'password': '...'}
    """

    def __init__(
        self,
        base_url: str,
        token: Optional[str] = None,
        transport: Optional[Transport] = None,
        headers: Optional[Dict[str, str]] = None,
        timeout: Any = None,
        verify: Any = True
    ):
        self.base_url = base_url.rstrip('/')
        self.transport = transport or RequestsTransport(timeout=timeout, verify=verify)
        self.headers = dict(headers or {})
        self.auth = None
        if token:
            self.authenticate(token)

    def __repr__(self) -> str:
        return f"VaultClient({self.base_url!r})"

    def _default_headers(self) -> Dict[str, str]:
        headers = {'Accept': 'application/json', 'User-Agent': USER_AGENT}
        headers.update(self.headers)
        return headers

    def _do_api_request(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str],
        body: Optional[str] = None,
        params: Optional[Mapping[str, Any]] = None
    ) -> ApiResponse:
        """
        Perform a request against a full API URL, following 303/307
        redirects. The request is abandoned once MAX_REDIRECTS redirects
        have been received.

        Raises:
            VaultRedirectError: If the redirect budget is exhausted
            VaultAPIError: For responses with status >= 400, or a redirect
                without a Location header
        """
        request_url = url
        redirects = 0
        while True:
            if redirects >= MAX_REDIRECTS:
                raise VaultRedirectError(method, url, request_url, redirects)
            logger.debug("%s %s", method, request_url)
            try:
                resp = self.transport.request(method, request_url, headers, body=body, params=params)
                if resp.status >= 400:
                    raise ResponseFailure(resp.status, resp.body, resp.headers)
                if resp.status not in REDIRECT_STATUSES:
                    return ApiResponse(resp.status, resp.headers, clean_body(resp.body))
                location = resp.headers.get('Location')
                if not location:
                    raise VaultAPIError(
                        f"Vault API redirect {resp.status} without Location header",
                        status_code=resp.status,
                    )
            except Exception as e:
                logger.debug("Vault API request %s %s failed: %r", method, request_url, e)
                classified = classify_error(e)
                if classified is e:
                    raise
                raise classified from e

            request_url = urljoin(request_url, location)
            redirects += 1
            logger.debug("Retrying API request redirected to %s", request_url)

    def _api_request(
        self,
        method: str,
        path: str,
        params: Optional[Mapping[str, Any]] = None,
        json: Any = None,
        headers: Optional[Mapping[str, str]] = None
    ) -> ApiResponse:
        """
        Make an API request relative to the /v1/ root with common headers.

        Args:
            method: HTTP method (GET, POST, DELETE, ...)
            path: API path relative to /v1/
            params: Query parameters
            json: Optional body, serialized as JSON
            headers: Extra request headers (cannot override the token header)

        Raises:
            VaultValidationError: If path is not a non-empty string
            VaultAuthError: If the client has no token
        """
        check_path(path)
        auth = self.auth
        if auth is None or not auth.client_token:
            raise VaultAuthError("Cannot call API path with unauthenticated client.")

        request_headers = self._default_headers()
        request_headers.update(headers or {})
        body = None
        if json is not None:
            body = _json_dumps(json)
            request_headers['Content-Type'] = 'application/json'
        request_headers[TOKEN_HEADER] = auth.client_token

        url = f"{self.base_url}/v1/{quote(path, safe='/')}"
        return self._do_api_request(method, url, request_headers, body=body, params=params)

    # ============ Secrets ============

    def list_secrets(self, path: str) -> List[str]:
        """
        List the children of a path.

        Returns:
            Child names; directories carry a trailing '/'

        Raises:
            VaultNotFoundError: If nothing exists below path

        Example:
            >>> client.list_secrets("kv/foo")
            ['abc', 'bar/', 'qux/']
        """
        resp = self._api_request('GET', path, params={'list': 'true'})
        data = (resp.body or {}).get('data') or {}
        return list(data.get('keys') or [])

    def read_secret(self, path: str, opts: Optional[Mapping[str, Any]] = None) -> Any:
        """
        Read the secret stored at path.

        Args:
            path: Secret path
            opts: Optional options; {'not_found': value} returns value
                instead of raising when the secret does not exist

        Returns:
            The secret's data mapping

        Example:
            >>> client.read_secret("kv/not/here", {'not_found': None})
        """
        opts = not_found_options(opts)

        def read():
            resp = self._api_request('GET', path)
            return (resp.body or {}).get('data')

        return supports_not_found(opts, read)

    def write_secret(self, path: str, data: Dict[str, Any]) -> bool:
        """
        Create or replace the secret at path.

        Returns:
            True when Vault accepted the write (any 2xx, usually 204)

        Raises:
            VaultValidationError: If data is not a mapping
        """
        check_secret(data)
        return self._api_request('POST', path, json=data).ok

    def delete_secret(self, path: str) -> bool:
        """
        Delete the secret at path. Deleting a missing secret succeeds.

        Returns:
            True when Vault accepted the delete
        """
        return self._api_request('DELETE', path).ok

    # ============ Response Wrapping ============

    def unwrap(self, wrap_token: str) -> ApiResponse:
        """
        Unwrap a response-wrapping token.

        The wrapping token authenticates the call, so this works on a client
        without a token of its own.

        Returns:
            ApiResponse whose body is the wrapped response envelope
        """
        if not isinstance(wrap_token, str) or not wrap_token:
            raise VaultAuthError("Cannot unwrap without a wrapping token.")
        headers = self._default_headers()
        headers[TOKEN_HEADER] = wrap_token
        return self._do_api_request('POST', f'{self.base_url}/v1/sys/wrapping/unwrap', headers)


def _json_dumps(value: Any) -> str:
    return json.dumps(value, separators=(',', ':'))
