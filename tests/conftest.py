"""Shared fixtures: scripted and fake-server transports for VaultClient."""

import json
from urllib.parse import unquote, urlsplit

import pytest

from vaultkv import MemoryClient, VaultClient
from vaultkv.transport import Response

VAULT_URL = "https://vault.example.com"
TOKEN = "fake-token"


class StubTransport:
    """Returns scripted responses in order and records every request."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    def request(self, method, url, headers, body=None, params=None):
        self.calls.append({
            'method': method,
            'url': url,
            'headers': dict(headers),
            'body': body,
            'params': params,
        })
        if not self.responses:
            raise AssertionError(f"Unexpected request: {method} {url}")
        resp = self.responses.pop(0)
        if isinstance(resp, Exception):
            raise resp
        return resp


class FakeVaultTransport:
    """
    Fake Vault server implementing the KV v1 API over a dict.

    Mirrors live behavior: 404 with an empty errors list for missing
    secrets and paths, 204 for writes and deletes, sorted list keys.
    """

    def __init__(self, token=TOKEN):
        self.token = token
        self.secrets = {}
        self.calls = []

    def request(self, method, url, headers, body=None, params=None):
        self.calls.append((method, url))
        if headers.get('X-Vault-Token') != self.token:
            return _json_response(403, {'errors': ['permission denied']})

        path = unquote(urlsplit(url).path)
        assert path.startswith('/v1/')
        path = path[len('/v1/'):].strip('/')

        if method == 'GET' and params and params.get('list') == 'true':
            return self._list(path)
        if method == 'GET':
            if path not in self.secrets:
                return _json_response(404, {'errors': []})
            return _json_response(200, {
                'auth': None,
                'data': self.secrets[path],
                'lease_duration': 2764800,
                'lease_id': '',
                'renewable': False,
            })
        if method == 'POST':
            self.secrets[path] = json.loads(body)
            return Response(204)
        if method == 'DELETE':
            self.secrets.pop(path, None)
            return Response(204)
        return _json_response(405, {'errors': ['unsupported operation']})

    def _list(self, path):
        prefix = path + '/'
        entries = set()
        for key in self.secrets:
            if key.startswith(prefix):
                head, sep, _ = key[len(prefix):].partition('/')
                entries.add(head + sep)
        if not entries:
            return _json_response(404, {'errors': []})
        return _json_response(200, {
            'auth': None,
            'data': {'keys': sorted(entries)},
            'lease_duration': 0,
            'lease_id': '',
            'renewable': False,
        })


def _json_response(status, payload, headers=None):
    return Response(status, headers or {}, json.dumps(payload))


@pytest.fixture
def json_response():
    return _json_response


@pytest.fixture
def fake_vault():
    return FakeVaultTransport()


@pytest.fixture
def http_client(fake_vault):
    return VaultClient(VAULT_URL, token=TOKEN, transport=fake_vault)


@pytest.fixture(params=['http', 'memory'])
def backend(request, fake_vault):
    """Each secret client implementation, empty."""
    if request.param == 'http':
        return VaultClient(VAULT_URL, token=TOKEN, transport=fake_vault)
    return MemoryClient()
