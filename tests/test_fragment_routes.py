"""Tests for the Fragments HTTP API."""

import inspect
import io

import pytest
from fastapi.routing import APIRoute
from PIL import Image

from fragments.auth import get_current_user
from fragments.exceptions import StorageError


def post_fragment(client, auth, data, content_type='text/plain'):
    return client.post('/v1/fragments', content=data, headers={'Content-Type': content_type}, auth=auth)


class TestHealth:

    def test_root(self, client):
        response = client.get('/')
        assert response.status_code == 200
        assert response.headers['Cache-Control'] == 'no-cache'
        body = response.json()
        assert body['status'] == 'ok'
        assert set(body) == {'status', 'author', 'githubUrl', 'version'}

    def test_request_id_header(self, client):
        assert client.get('/health').headers['X-Request-ID']


class TestAuthentication:

    def test_missing_credentials(self, client):
        response = client.get('/v1/fragments')
        assert response.status_code == 401
        assert response.json() == {'status': 'error', 'error': {'message': 'Unauthorized', 'code': 401}}
        assert response.headers['WWW-Authenticate'].startswith('Basic')

    def test_wrong_password(self, client):
        response = client.get('/v1/fragments', auth=('user1@email.com', 'wrong'))
        assert response.status_code == 401

    def test_unknown_user(self, client):
        response = client.get('/v1/fragments', auth=('nobody@email.com', 'password1'))
        assert response.status_code == 401

    def test_valid_credentials(self, client, user1):
        assert client.get('/v1/fragments', auth=user1).status_code == 200


class TestCreateFragment:

    def test_create_text_fragment(self, client, user1):
        response = post_fragment(client, user1, b'hello')
        assert response.status_code == 201

        fragment = response.json()['fragment']
        assert response.json()['status'] == 'ok'
        assert fragment['type'] == 'text/plain'
        assert fragment['size'] == 5
        assert set(fragment) == {'id', 'ownerId', 'created', 'updated', 'type', 'size'}
        assert response.headers['Location'].endswith(f"/v1/fragments/{fragment['id']}")

    def test_location_uses_api_url(self, client, user1, monkeypatch):
        monkeypatch.setattr('fragments.config.API_URL', 'https://fragments.example.com')
        response = post_fragment(client, user1, b'hello')
        fragment_id = response.json()['fragment']['id']
        assert response.headers['Location'] == f'https://fragments.example.com/v1/fragments/{fragment_id}'

    def test_charset_is_kept_in_type(self, client, user1):
        response = post_fragment(client, user1, b'hello', 'text/plain; charset=utf-8')
        assert response.status_code == 201
        assert response.json()['fragment']['type'] == 'text/plain; charset=utf-8'

    def test_owner_is_hashed_username(self, client, user1):
        import hashlib
        response = post_fragment(client, user1, b'hello')
        expected = hashlib.sha256(user1[0].encode()).hexdigest()
        assert response.json()['fragment']['ownerId'] == expected

    def test_unsupported_type(self, client, user1):
        response = post_fragment(client, user1, b'%PDF', 'application/pdf')
        assert response.status_code == 415
        assert response.json()['error']['code'] == 415

    def test_missing_content_type(self, client, user1):
        response = client.post('/v1/fragments', content=b'hello', auth=user1)
        assert response.status_code == 415

    def test_too_large(self, client, user1, monkeypatch):
        monkeypatch.setattr('fragments.config.MAX_FRAGMENT_SIZE', 4)
        response = post_fragment(client, user1, b'hello')
        assert response.status_code == 413

    def test_create_image_fragment(self, client, user1, png_bytes):
        response = post_fragment(client, user1, png_bytes, 'image/png')
        assert response.status_code == 201
        assert response.json()['fragment']['size'] == len(png_bytes)


class TestListFragments:

    def test_empty_list(self, client, user1):
        response = client.get('/v1/fragments', auth=user1)
        assert response.json() == {'status': 'ok', 'fragments': []}

    def test_lists_ids(self, client, user1):
        ids = [post_fragment(client, user1, b'x').json()['fragment']['id'] for _ in range(2)]
        response = client.get('/v1/fragments', auth=user1)
        assert sorted(response.json()['fragments']) == sorted(ids)

    def test_expand(self, client, user1):
        created = post_fragment(client, user1, b'x').json()['fragment']
        response = client.get('/v1/fragments?expand=1', auth=user1)
        assert response.json()['fragments'] == [created]

    def test_users_see_only_their_own(self, client, user1, user2):
        post_fragment(client, user1, b'mine')
        assert client.get('/v1/fragments', auth=user2).json()['fragments'] == []


class TestGetFragment:

    def test_get_data(self, client, user1):
        fragment_id = post_fragment(client, user1, b'hello').json()['fragment']['id']
        response = client.get(f'/v1/fragments/{fragment_id}', auth=user1)
        assert response.status_code == 200
        assert response.content == b'hello'
        assert response.headers['Content-Type'].startswith('text/plain')

    def test_get_info(self, client, user1):
        created = post_fragment(client, user1, b'hello').json()['fragment']
        response = client.get(f"/v1/fragments/{created['id']}/info", auth=user1)
        assert response.status_code == 200
        assert response.json() == {'status': 'ok', 'fragment': created}

    def test_unknown_id(self, client, user1):
        response = client.get('/v1/fragments/missing', auth=user1)
        assert response.status_code == 404
        assert response.json()['error'] == {'message': 'Fragment not found', 'code': 404}

    def test_unknown_id_info(self, client, user1):
        assert client.get('/v1/fragments/missing/info', auth=user1).status_code == 404

    def test_other_users_fragment_is_not_found(self, client, user1, user2):
        fragment_id = post_fragment(client, user1, b'secret').json()['fragment']['id']
        assert client.get(f'/v1/fragments/{fragment_id}', auth=user2).status_code == 404

    def test_markdown_as_html(self, client, user1):
        fragment_id = post_fragment(client, user1, b'# Heading', 'text/markdown').json()['fragment']['id']
        response = client.get(f'/v1/fragments/{fragment_id}.html', auth=user1)
        assert response.status_code == 200
        assert response.headers['Content-Type'].startswith('text/html')
        assert '<h1>Heading</h1>' in response.text

    def test_html_as_text(self, client, user1):
        fragment_id = post_fragment(client, user1, b'<h1>Title</h1>', 'text/html').json()['fragment']['id']
        response = client.get(f'/v1/fragments/{fragment_id}.txt', auth=user1)
        assert response.status_code == 200
        assert response.text == 'Title'

    def test_own_extension_returns_original(self, client, user1):
        fragment_id = post_fragment(client, user1, b'# Heading', 'text/markdown').json()['fragment']['id']
        response = client.get(f'/v1/fragments/{fragment_id}.md', auth=user1)
        assert response.status_code == 200
        assert response.content == b'# Heading'
        assert response.headers['Content-Type'].startswith('text/markdown')

    def test_illegal_conversion(self, client, user1):
        fragment_id = post_fragment(client, user1, b'{"a": 1}', 'application/json').json()['fragment']['id']
        response = client.get(f'/v1/fragments/{fragment_id}.html', auth=user1)
        assert response.status_code == 415

    def test_unknown_extension(self, client, user1):
        fragment_id = post_fragment(client, user1, b'hello').json()['fragment']['id']
        response = client.get(f'/v1/fragments/{fragment_id}.pdf', auth=user1)
        assert response.status_code == 415
        assert response.json()['error']['message'] == 'Unsupported file extension: .pdf'

    def test_png_as_jpeg(self, client, user1, png_bytes):
        fragment_id = post_fragment(client, user1, png_bytes, 'image/png').json()['fragment']['id']
        response = client.get(f'/v1/fragments/{fragment_id}.jpg', auth=user1)
        assert response.status_code == 200
        assert response.headers['Content-Type'] == 'image/jpeg'
        assert Image.open(io.BytesIO(response.content)).format == 'JPEG'


class TestUpdateFragment:

    def test_update_data(self, client, user1):
        created = post_fragment(client, user1, b'old').json()['fragment']
        response = client.put(
            f"/v1/fragments/{created['id']}",
            content=b'new content',
            headers={'Content-Type': 'text/plain'},
            auth=user1,
        )
        assert response.status_code == 200
        updated = response.json()['fragment']
        assert updated['size'] == len(b'new content')
        assert updated['created'] == created['created']
        assert updated['updated'] > created['updated']
        assert client.get(f"/v1/fragments/{created['id']}", auth=user1).content == b'new content'

    def test_type_cannot_change(self, client, user1):
        fragment_id = post_fragment(client, user1, b'old').json()['fragment']['id']
        response = client.put(
            f'/v1/fragments/{fragment_id}',
            content=b'<p>new</p>',
            headers={'Content-Type': 'text/html'},
            auth=user1,
        )
        assert response.status_code == 400

    def test_update_missing(self, client, user1):
        response = client.put(
            '/v1/fragments/missing',
            content=b'data',
            headers={'Content-Type': 'text/plain'},
            auth=user1,
        )
        assert response.status_code == 404


class TestDeleteFragment:

    def test_delete(self, client, user1):
        fragment_id = post_fragment(client, user1, b'bye').json()['fragment']['id']
        response = client.delete(f'/v1/fragments/{fragment_id}', auth=user1)
        assert response.status_code == 200
        assert response.json() == {'status': 'ok'}
        assert client.get(f'/v1/fragments/{fragment_id}', auth=user1).status_code == 404

    def test_delete_missing(self, client, user1):
        assert client.delete('/v1/fragments/missing', auth=user1).status_code == 404

    def test_storage_failure_is_a_500(self, client, user1, backend, monkeypatch):
        fragment_id = post_fragment(client, user1, b'bye').json()['fragment']['id']

        def fail(owner_id, fragment_id):
            raise StorageError("unable to delete fragment data")

        monkeypatch.setattr(backend, 'delete_fragment', fail)
        response = client.delete(f'/v1/fragments/{fragment_id}', auth=user1)
        assert response.status_code == 500
        assert response.json()['error'] == {'message': 'Internal Server Error', 'code': 500}


@pytest.mark.parametrize('path', ['/v1/fragments', '/v1/fragments/abc', '/v1/fragments/abc/info'])
def test_v1_routes_require_auth(client, path):
    assert client.get(path).status_code == 401


def test_extension_without_id_is_not_found(client, user1):
    response = client.get('/v1/fragments/.html', auth=user1)
    assert response.status_code == 404
    assert response.json()['error'] == {'message': 'Fragment not found', 'code': 404}


def test_root_reports_project_links(client):
    body = client.get('/').json()
    assert body['githubUrl'] == 'https://github.com/FurqanKhurrum/fragments'
    assert body['author']


def test_credentials_are_checked_before_body_size(client, monkeypatch):
    monkeypatch.setattr('fragments.config.MAX_FRAGMENT_SIZE', 4)
    response = client.post('/v1/fragments', content=b'hello', headers={'Content-Type': 'text/plain'})
    assert response.status_code == 401


def test_blocking_handlers_run_in_threadpool(client):
    fragment_routes = [
        route for route in client.app.routes
        if isinstance(route, APIRoute) and route.path.startswith('/v1/fragments')
    ]
    assert fragment_routes
    for route in fragment_routes:
        assert not inspect.iscoroutinefunction(route.endpoint), route.path
    assert not inspect.iscoroutinefunction(get_current_user)
