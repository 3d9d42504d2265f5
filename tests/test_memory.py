import threading

import pytest

from vaultkv import MemoryClient, VaultNotFoundError, VaultValidationError


@pytest.fixture
def client():
    return MemoryClient({
        'identities': {'batman': 'Bruce Wayne', 'captain-marvel': 'Carol Danvers'},
    })


def test_reads_initial_values(client):
    assert client.read_secret('identities') == {'batman': 'Bruce Wayne', 'captain-marvel': 'Carol Danvers'}


def test_missing_secret_uses_store_wording(client):
    with pytest.raises(VaultNotFoundError, match="No such secret: hello") as exc_info:
        client.read_secret('hello')
    assert exc_info.value.status_code == 404
    assert exc_info.value.kind == 'not-found'
    with pytest.raises(VaultNotFoundError, match="No such secret: identities"):
        MemoryClient().read_secret('identities')


def test_write_update_and_read(client):
    assert client.write_secret('hello', {'and-i-say': 'goodbye'}) is True
    assert client.write_secret('identities', {'intersect': 'Chuck'}) is True
    assert client.read_secret('hello') == {'and-i-say': 'goodbye'}
    assert client.read_secret('identities') == {'intersect': 'Chuck'}


def test_read_returns_copy(client):
    secret = client.read_secret('identities')
    secret['batman'] = 'Dick Grayson'
    assert client.read_secret('identities')['batman'] == 'Bruce Wayne'


def test_write_stores_copy():
    client = MemoryClient()
    data = {'tags': ['a']}
    client.write_secret('kv/x', data)
    data['tags'].append('b')
    assert client.read_secret('kv/x') == {'tags': ['a']}


def test_directory_is_not_a_secret():
    client = MemoryClient({'kv/foo/bar': {'a': 1}})
    with pytest.raises(VaultNotFoundError):
        client.read_secret('kv/foo')
    assert client.read_secret('kv/foo', {'not_found': 'missing'}) == 'missing'


def test_leaf_and_directory_coexist():
    client = MemoryClient({'kv/foo/bar': {'leaf': True}, 'kv/foo/bar/baz': {'deeper': True}})
    assert client.read_secret('kv/foo/bar') == {'leaf': True}
    assert client.list_secrets('kv/foo') == ['bar', 'bar/']
    assert client.list_secrets('kv/foo/bar') == ['baz']


def test_list_is_sorted_by_entry():
    client = MemoryClient()
    for path in ['kv/zeta', 'kv/alpha/one', 'kv/mid', 'kv/beta']:
        client.write_secret(path, {'v': path})
    assert client.list_secrets('kv') == ['alpha/', 'beta', 'mid', 'zeta']


def test_list_missing_or_leaf_only_path(client):
    with pytest.raises(VaultNotFoundError, match="No such secret path: hello"):
        client.list_secrets('hello')
    with pytest.raises(VaultNotFoundError):
        client.list_secrets('identities')


def test_delete_keeps_subtree():
    client = MemoryClient({'kv/foo/bar': {'leaf': True}, 'kv/foo/bar/baz': {'deeper': True}})
    assert client.delete_secret('kv/foo/bar') is True
    with pytest.raises(VaultNotFoundError):
        client.read_secret('kv/foo/bar')
    assert client.read_secret('kv/foo/bar/baz') == {'deeper': True}
    assert client.list_secrets('kv/foo') == ['bar/']


def test_delete_prunes_empty_directories():
    client = MemoryClient({'kv/a/b/c': {'x': 1}, 'kv/d': {'y': 2}})
    client.delete_secret('kv/a/b/c')
    assert client.list_secrets('kv') == ['d']
    with pytest.raises(VaultNotFoundError):
        client.list_secrets('kv/a')


def test_delete_missing_path_succeeds(client):
    assert client.delete_secret('not/here') is True
    assert client.delete_secret('identities/not-here') is True
    assert client.read_secret('identities')['batman'] == 'Bruce Wayne'


def test_delete_then_read(client):
    assert client.delete_secret('identities') is True
    with pytest.raises(VaultNotFoundError):
        client.read_secret('identities')


def test_extra_slashes_are_ignored():
    client = MemoryClient()
    client.write_secret('/kv//foo/', {'a': 1})
    assert client.read_secret('kv/foo') == {'a': 1}
    assert client.list_secrets('kv/') == ['foo']


@pytest.mark.parametrize('path', ['', '/', '//', None])
def test_invalid_paths(path):
    with pytest.raises(VaultValidationError):
        MemoryClient().read_secret(path)


def test_from_yaml_fixture(tmp_path):
    fixture = tmp_path / 'secrets.yml'
    fixture.write_text(
        "kv/app/db:\n"
        "  user: app\n"
        "  port: 5432\n"
        "kv/app/api:\n"
        "  key: xyz\n"
    )
    client = MemoryClient.from_file(fixture)
    assert client.read_secret('kv/app/db') == {'user': 'app', 'port': 5432}
    assert client.list_secrets('kv/app') == ['api', 'db']


def test_from_json_fixture(tmp_path):
    fixture = tmp_path / 'secrets.json'
    fixture.write_text('{"kv/one": {"three": ["four"]}}')
    assert MemoryClient.from_file(fixture).read_secret('kv/one') == {'three': ['four']}


def test_empty_fixture(tmp_path):
    fixture = tmp_path / 'empty.yml'
    fixture.write_text('')
    with pytest.raises(VaultNotFoundError):
        MemoryClient.from_file(fixture).read_secret('kv/x')


@pytest.mark.parametrize('content', ['- just\n- a list\n', 'kv/x: not-a-mapping\n'])
def test_invalid_fixture(tmp_path, content):
    fixture = tmp_path / 'bad.yml'
    fixture.write_text(content)
    with pytest.raises(VaultValidationError):
        MemoryClient.from_file(fixture)


def test_authenticate_is_optional():
    client = MemoryClient()
    client.authenticate('token')
    assert client.auth.client_token == 'token'
    client.write_secret('kv/x', {'a': 1})
    client.clear_auth()
    assert client.read_secret('kv/x') == {'a': 1}


def test_concurrent_writes():
    client = MemoryClient()

    def writer(n):
        for i in range(50):
            client.write_secret(f'kv/t{n}/s{i}', {'i': i})

    threads = [threading.Thread(target=writer, args=(n,)) for n in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert client.list_secrets('kv') == sorted(f't{n}/' for n in range(8))
    assert len(client.list_secrets('kv/t3')) == 50
