"""Tests for configuration loading and component wiring."""

from pathlib import Path

from tryiton import create_session, create_share_extension
from tryiton.config import ApiConfig, StorageConfig, SyncConfig, load_config


class TestConfig:

    def test_defaults(self):
        config = SyncConfig()

        assert config.api.base_url == "https://tryiton.shopping"
        assert config.storage.group_identifier == "group.com.neocore.tech.TryItOn"

    def test_nested_env_override(self, monkeypatch):
        monkeypatch.setenv("TRYITON_API__BASE_URL", "http://localhost:8000")
        monkeypatch.setenv("TRYITON_STORAGE__DATA_DIR", "/tmp/tryiton-test")

        config = load_config()

        assert config.api.base_url == "http://localhost:8000"
        assert config.storage.data_dir == Path("/tmp/tryiton-test")

    def test_url_joining(self):
        api = ApiConfig(base_url="http://localhost:8000/")

        assert api.url("/users/") == "http://localhost:8000/users/"

    def test_storage_paths(self, tmp_path):
        storage = StorageConfig(data_dir=tmp_path / "app", group_containers_dir=tmp_path / "groups")

        assert storage.private_path == tmp_path / "app" / "defaults.json"
        assert storage.shared_path == (
            tmp_path / "groups" / "group.com.neocore.tech.TryItOn" / "defaults.json"
        )


class TestWiring:

    def test_create_session_with_group_container(self, storage_config):
        session = create_session(SyncConfig(storage=storage_config))

        assert session.persistence.shared_available
        assert session.client is not None

    def test_create_session_without_group_container(self, tmp_path):
        storage = StorageConfig(data_dir=tmp_path / "app", group_containers_dir=tmp_path / "groups")

        session = create_session(SyncConfig(storage=storage))
        session.login("alice", is_pro=True)

        assert not session.persistence.shared_available
        assert session.restore_on_launch().username == "alice"

    def test_share_extension_sees_app_login(self, storage_config):
        config = SyncConfig(storage=storage_config)
        session = create_session(config)
        extension = create_share_extension(config)

        session.login("alice")

        assert extension.current_username() == "alice"
