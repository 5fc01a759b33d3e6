# Test fixtures and configuration
import pytest
import sys
from pathlib import Path

import httpx

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from api.server import create_app
from tryiton.config import ApiConfig, StorageConfig
from tryiton.exceptions import StorageError
from tryiton.services import TryItOnClient
from tryiton.session import AccountSession
from tryiton.storage import DualScopePersistence, InMemoryScope


class FailingScope(InMemoryScope):
    """Scope whose every access fails, like an unreadable store."""

    def get(self, key, default=None):
        raise StorageError(f"{self.name} is unreadable")

    def set(self, key, value):
        raise StorageError(f"{self.name} is read-only")

    def remove(self, key):
        raise StorageError(f"{self.name} is read-only")

    def synchronize(self):
        raise StorageError(f"{self.name} cannot sync")


@pytest.fixture
def private_scope():
    return InMemoryScope("private")


@pytest.fixture
def shared_scope():
    return InMemoryScope("group.com.neocore.tech.TryItOn")


@pytest.fixture
def persistence(private_scope, shared_scope):
    return DualScopePersistence(private_scope, shared_scope)


@pytest.fixture
def backend_app():
    """Fresh in-memory backend."""
    return create_app()


@pytest.fixture
def api_config():
    return ApiConfig(base_url="http://testserver")


@pytest.fixture
def api_client(backend_app, api_config):
    """Client wired to the in-memory backend."""
    return TryItOnClient(api_config, transport=httpx.ASGITransport(app=backend_app))


@pytest.fixture
def session(persistence):
    """Session without a backend client."""
    return AccountSession(persistence)


@pytest.fixture
def online_session(persistence, api_client):
    """Session that talks to the in-memory backend."""
    return AccountSession(persistence, client=api_client)


@pytest.fixture
def storage_config(tmp_path):
    """Storage rooted in a temp dir, with the group container present."""
    config = StorageConfig(
        data_dir=tmp_path / "app",
        group_containers_dir=tmp_path / "groups",
    )
    config.group_container.mkdir(parents=True)
    return config


@pytest.fixture
def minimal_jpeg_bytes():
    """JPEG start/end markers, enough for an upload."""
    return b"\xff\xd8\xff\xe0\x00\x10JFIF\x00\x01\x01\x00\x00\x01\x00\x01\x00\x00\xff\xd9"
