"""Configuration management for TryItOn account sync."""

from pathlib import Path
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings


class ApiConfig(BaseModel):
    """Try-on backend connection settings."""
    base_url: str = "https://tryiton.shopping"
    timeout: float = 30.0

    def url(self, path: str) -> str:
        return f"{self.base_url.rstrip('/')}/{path.lstrip('/')}"


class StorageConfig(BaseModel):
    """Where the private and shared key-value scopes live."""
    data_dir: Path = Path.home() / ".tryiton"
    group_containers_dir: Path = Path.home() / ".tryiton-groups"
    group_identifier: str = "group.com.neocore.tech.TryItOn"
    defaults_filename: str = "defaults.json"

    @property
    def private_path(self) -> Path:
        return self.data_dir / self.defaults_filename

    @property
    def group_container(self) -> Path:
        return self.group_containers_dir / self.group_identifier

    @property
    def shared_path(self) -> Path:
        return self.group_container / self.defaults_filename


class SyncConfig(BaseSettings):
    """Main configuration."""

    api: ApiConfig = Field(default_factory=ApiConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)

    # Google Sign-In (loaded from .env)
    google_client_id: str | None = None

    class Config:
        env_file = ".env"
        env_prefix = "TRYITON_"
        env_nested_delimiter = "__"
        extra = "ignore"


def load_config() -> SyncConfig:
    """Load configuration from environment and defaults."""
    return SyncConfig()
