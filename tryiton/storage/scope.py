"""Key-value storage scopes.

Two scopes hold the account: the app-private one and the one in the group
container that the share extension reads. Both follow ``StorageScope``.
"""

from __future__ import annotations

import base64
import json
import logging
import os
from pathlib import Path
from typing import Any, Iterator, Protocol

from ..config import StorageConfig
from ..exceptions import StorageError, StorageUnavailableError

logger = logging.getLogger(__name__)

_PRIMITIVES = (str, bool, int, float, bytes)


class StorageScope(Protocol):
    """A namespaced mapping of string keys to primitive values."""

    name: str

    def get(self, key: str, default: Any = None) -> Any:
        """Return the value for ``key`` or ``default``."""

    def set(self, key: str, value: Any) -> None:
        """Store a primitive value under ``key``."""

    def remove(self, key: str) -> None:
        """Delete ``key``; missing keys are ignored."""

    def keys(self) -> Iterator[str]:
        """Iterate over stored keys."""

    def synchronize(self) -> None:
        """Make pending writes durable."""

    def reload(self) -> None:
        """Discard in-memory state and re-read the backing store."""


def _check_value(key: str, value: Any) -> None:
    if not isinstance(value, _PRIMITIVES):
        raise TypeError(f"Cannot store {type(value).__name__} under {key!r}")


class InMemoryScope:
    """Dictionary-backed scope, used in tests and as a scratch store."""

    def __init__(self, name: str = "memory", values: dict[str, Any] | None = None):
        self.name = name
        self._values: dict[str, Any] = dict(values or {})
        self.writes = 0
        self.syncs = 0

    def get(self, key: str, default: Any = None) -> Any:
        return self._values.get(key, default)

    def set(self, key: str, value: Any) -> None:
        _check_value(key, value)
        self._values[key] = value
        self.writes += 1

    def remove(self, key: str) -> None:
        if key in self._values:
            del self._values[key]
            self.writes += 1

    def keys(self) -> Iterator[str]:
        return iter(list(self._values))

    def synchronize(self) -> None:
        self.syncs += 1

    def reload(self) -> None:
        pass

    def snapshot(self) -> dict[str, Any]:
        return dict(self._values)


def _encode(value: Any) -> Any:
    if isinstance(value, bytes):
        return {"__bytes__": base64.b64encode(value).decode("ascii")}
    return value


def _decode(value: Any) -> Any:
    if isinstance(value, dict) and "__bytes__" in value:
        return base64.b64decode(value["__bytes__"])
    return value


class JsonFileScope:
    """Scope persisted as a single JSON file.

    With ``autosync`` every mutation is written through immediately. Without
    it, mutations stay in memory until ``synchronize()`` replaces the file,
    so a reader in another process never sees a half-written file.
    """

    def __init__(self, path: Path, autosync: bool = True, name: str | None = None):
        if not path.parent.is_dir():
            raise StorageUnavailableError(f"Storage directory does not exist: {path.parent}")
        self.path = path
        self.autosync = autosync
        self.name = name or path.parent.name
        self._dirty = False
        self._values = self._load()

    def _load(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning("Failed to load scope %s from %s: %s", self.name, self.path, e)
            return {}
        if not isinstance(raw, dict):
            logger.warning("Scope file %s does not hold an object, ignoring it", self.path)
            return {}
        return {key: _decode(value) for key, value in raw.items()}

    def get(self, key: str, default: Any = None) -> Any:
        return self._values.get(key, default)

    def set(self, key: str, value: Any) -> None:
        _check_value(key, value)
        self._values[key] = value
        self._changed()

    def remove(self, key: str) -> None:
        if key in self._values:
            del self._values[key]
            self._changed()

    def keys(self) -> Iterator[str]:
        return iter(list(self._values))

    def _changed(self) -> None:
        self._dirty = True
        if self.autosync:
            self.synchronize()

    def synchronize(self) -> None:
        if not self._dirty:
            return
        payload = {key: _encode(value) for key, value in self._values.items()}
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        try:
            tmp_path.write_text(json.dumps(payload, indent=2, sort_keys=True), encoding="utf-8")
            os.replace(tmp_path, self.path)
        except OSError as e:
            raise StorageError(f"Cannot write scope {self.name} to {self.path}: {e}") from e
        self._dirty = False

    def reload(self) -> None:
        self._values = self._load()
        self._dirty = False


def open_private_scope(config: StorageConfig) -> JsonFileScope:
    """Open the app-private scope, creating its directory if needed."""
    config.data_dir.mkdir(parents=True, exist_ok=True)
    return JsonFileScope(config.private_path, autosync=True, name="private")


def open_shared_scope(config: StorageConfig) -> JsonFileScope | None:
    """Open the group-container scope, or ``None`` if it is unreachable.

    The group container is never created here; its absence means this
    process has no access to it.
    """
    try:
        scope = JsonFileScope(config.shared_path, autosync=False, name=config.group_identifier)
    except StorageUnavailableError as e:
        logger.error("Failed to access shared container %s: %s", config.group_identifier, e)
        return None
    logger.info("Accessed shared container %s", config.group_identifier)
    return scope
