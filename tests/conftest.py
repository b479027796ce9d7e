"""Shared pytest fixtures for all tests."""

import io

import bcrypt
import pytest
from fastapi.testclient import TestClient
from PIL import Image

from fragments.auth import HtpasswdAuthenticator
from fragments.main import create_app
from fragments.repositories.fragment_repository import FragmentRepository
from fragments.storage.memory import MemoryBackend

TEST_USERS = {
    'user1@email.com': 'password1',
    'user2@email.com': 'password2',
}


@pytest.fixture
def backend():
    """Fresh in-memory backend for each test."""
    return MemoryBackend()


@pytest.fixture
def repository(backend):
    return FragmentRepository(backend)


@pytest.fixture(scope='session')
def htpasswd_file(tmp_path_factory):
    """
    Write an htpasswd file with bcrypt entries for the test users.

    Returns:
        Path to the htpasswd file
    """
    path = tmp_path_factory.mktemp('auth') / '.htpasswd'
    lines = []
    for username, password in TEST_USERS.items():
        hashed = bcrypt.hashpw(password.encode('utf-8'), bcrypt.gensalt(rounds=4)).decode('utf-8')
        # Apache's htpasswd -B writes the $2y$ prefix
        lines.append(f"{username}:{hashed.replace('$2b$', '$2y$', 1)}")
    path.write_text('\n'.join(lines) + '\n')
    return path


@pytest.fixture(scope='session')
def authenticator(htpasswd_file):
    return HtpasswdAuthenticator.from_file(str(htpasswd_file))


@pytest.fixture
def client(repository, authenticator):
    """FastAPI test client over an isolated in-memory repository."""
    return TestClient(create_app(repository=repository, authenticator=authenticator))


@pytest.fixture
def user1():
    return ('user1@email.com', 'password1')


@pytest.fixture
def user2():
    return ('user2@email.com', 'password2')


def make_image(fmt: str = 'PNG', size=(8, 6), mode: str = 'RGB', color=(200, 30, 30)) -> bytes:
    """
    Encode a small solid-colour image.
    """
    buffer = io.BytesIO()
    Image.new(mode, size, color).save(buffer, format=fmt)
    return buffer.getvalue()


def make_animated_gif(frames: int = 3, size=(8, 8)) -> bytes:
    colors = [(255, 0, 0), (0, 255, 0), (0, 0, 255), (255, 255, 0)]
    images = [Image.new('RGB', size, colors[i % len(colors)]) for i in range(frames)]
    buffer = io.BytesIO()
    images[0].save(buffer, format='GIF', save_all=True, append_images=images[1:], duration=50, loop=0)
    return buffer.getvalue()


@pytest.fixture
def image_bytes():
    """Factory fixture returning make_image."""
    return make_image


@pytest.fixture
def animated_gif():
    return make_animated_gif(3)


@pytest.fixture
def png_bytes():
    return make_image('PNG')
