"""vaultkv Exceptions"""

import json
from typing import Any, Callable, Dict, List, Mapping, Optional


class VaultError(Exception):
    """Base exception for vaultkv errors"""
    kind = 'error'


class VaultValidationError(VaultError, ValueError):
    """Malformed input, raised before any network activity"""
    kind = 'validation'


class VaultAuthError(VaultError):
    """Client has no token to authenticate with"""
    kind = 'authentication'


class VaultAPIError(VaultError):
    """Classified API error with status code and server error messages"""
    kind = 'api'

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        errors: Optional[List[str]] = None,
        response: Any = None
    ):
        super().__init__(message)
        self.status_code = status_code
        self.errors = list(errors or [])
        self.response = response


class VaultNotFoundError(VaultAPIError):
    """Secret or path not found (404)"""
    kind = 'not-found'

    def __init__(self, message: str, status_code: int = 404, errors: Optional[List[str]] = None, response: Any = None):
        super().__init__(message, status_code=status_code, errors=errors, response=response)


class VaultPermissionError(VaultAPIError):
    """Token rejected or permission denied (401/403)"""
    kind = 'permission'


class VaultRedirectError(VaultError):
    """Redirect budget exhausted while following 303/307 responses"""
    kind = 'redirect'

    def __init__(self, method: str, url: str, location: str, redirects: int):
        super().__init__(
            f"Aborting Vault API request after {redirects} redirects: "
            f"{method} {url} (next location: {location})"
        )
        self.method = method
        self.url = url
        self.location = location
        self.redirects = redirects


class ResponseFailure(Exception):
    """
    Raw failure for a response with status >= 400.

    Raised by the request pipeline and handed to classify_error; callers
    normally only see the classified form.
    """

    def __init__(self, status: int, body: Optional[str] = None, headers: Optional[Mapping[str, str]] = None):
        super().__init__(f"status: {status}")
        self.status = status
        self.body = body
        self.headers = dict(headers or {})


def _failure_parts(exc: BaseException):
    """Extract (status, body, error) from a pipeline or requests failure."""
    status = getattr(exc, 'status', None)
    body = getattr(exc, 'body', None)
    response = getattr(exc, 'response', None)
    if status is None and response is not None:
        status = getattr(response, 'status_code', None)
        body = getattr(response, 'text', None)
    return status, body, getattr(exc, 'error', None)


def body_errors(body: Optional[str]):
    """
    Parse an error response body.

    Returns:
        Tuple of (errors list, parsed body). The list holds the body's
        'errors' strings, or a textual dump of the body when it has none.
    """
    if not body:
        return [], None
    try:
        parsed = json.loads(body)
    except ValueError:
        return [body], None
    if isinstance(parsed, dict) and isinstance(parsed.get('errors'), list):
        return [str(e) for e in parsed['errors']], parsed
    return [repr(parsed)], parsed


def classify_error(exc: BaseException) -> BaseException:
    """
    Inspect a raised failure and return a classified VaultAPIError if its
    shape is understood. Otherwise return the original failure unchanged.

    Args:
        exc: Exception raised while performing a request

    Returns:
        VaultNotFoundError: 404 responses
        VaultPermissionError: 401/403 responses
        VaultAPIError: Other failures carrying a status >= 400 or an error object
        exc itself: Anything else (connection errors, timeouts, ...)
    """
    if isinstance(exc, VaultError):
        return exc

    status, body, error = _failure_parts(exc)
    if error is None and not (isinstance(status, int) and status >= 400):
        return exc

    if error is not None:
        errors, parsed = [str(error)], None
    else:
        errors, parsed = body_errors(body)
    message = "Vault API server errors: " + ", ".join(errors)

    if status == 404:
        return VaultNotFoundError(message, errors=errors, response=parsed)
    elif status in (401, 403):
        return VaultPermissionError(message, status_code=status, errors=errors, response=parsed)
    else:
        return VaultAPIError(message, status_code=status, errors=errors, response=parsed)


def supports_not_found(opts: Optional[Mapping[str, Any]], operation: Callable[[], Any]) -> Any:
    """
    Call operation(), returning opts['not_found'] instead of raising when it
    fails with a 404 and the caller supplied a 'not_found' value.

    Example:
        >>> supports_not_found({'not_found': {}}, lambda: client.read_secret('kv/missing'))
        {}
    """
    try:
        return operation()
    except VaultAPIError as e:
        if opts is not None and 'not_found' in opts and e.status_code == 404:
            return opts['not_found']
        raise


def not_found_options(opts: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """Validate a read options mapping."""
    if opts is None:
        return {}
    if not isinstance(opts, Mapping):
        raise VaultValidationError(f"Read options must be a mapping, got: {opts!r}")
    return dict(opts)
