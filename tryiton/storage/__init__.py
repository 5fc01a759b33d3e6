"""Storage scopes and the dual-scope persistence adapter."""

from .scope import (
    StorageScope,
    InMemoryScope,
    JsonFileScope,
    open_private_scope,
    open_shared_scope,
)
from .adapter import DualScopePersistence

__all__ = [
    "StorageScope",
    "InMemoryScope",
    "JsonFileScope",
    "open_private_scope",
    "open_shared_scope",
    "DualScopePersistence",
]
