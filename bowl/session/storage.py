"""
Session Storage - Persists sessions as JSON blobs in a key-value store.

Keys are namespaced under a prefix (default "bowl:"):
    bowl:session:<id>          one serialized GameSession
    bowl:lastActiveGameId      id of the session to resume

Backends:
- InMemoryKeyValueStore: for tests and throwaway processes
- FileKeyValueStore: one JSON document per key on local disk

Every load goes through migrate_session(), so blobs written by any
earlier version come back in the current shape.
"""

from __future__ import annotations
import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from urllib.parse import quote, unquote

from ..config import settings
from ..engine_core.exceptions import InvalidSessionError
from ..engine_core.migration import migrate_session
from ..engine_core.state import GameSession

logger = logging.getLogger(__name__)


class KeyValueStore(ABC):
    """String-to-string store the game storage is built on."""

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Value for `key`, or None if absent."""

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        ...

    @abstractmethod
    def remove(self, key: str) -> None:
        """Delete `key`; missing keys are ignored."""

    @abstractmethod
    def keys(self) -> list[str]:
        ...

    def remove_many(self, keys: list[str]) -> None:
        for key in keys:
            self.remove(key)


class InMemoryKeyValueStore(KeyValueStore):

    def __init__(self):
        self._data: dict[str, str] = {}

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._data)


class FileKeyValueStore(KeyValueStore):
    """
    File-based key-value store.

    Usage:
        store = FileKeyValueStore("~/.bowl/storage")
        store.set("bowl:lastActiveGameId", "abc")

    Each key is one file named after the percent-encoded key. A file
    that cannot be read back is treated as a miss and deleted.
    """

    def __init__(self, directory: str | Path | None = None):
        if directory is None:
            directory = settings.storage_dir
        self.directory = Path(directory).expanduser()

        # Ensure storage directory exists
        self.directory.mkdir(parents=True, exist_ok=True)

    def get(self, key: str) -> str | None:
        path = self._path_for(key)
        if not path.exists():
            return None

        try:
            with open(path, "r", encoding="utf-8") as f:
                entry = json.load(f)
            return entry["value"]
        except (OSError, ValueError, KeyError, TypeError):
            logger.warning("Unreadable storage entry %s, discarding", path.name)
            path.unlink(missing_ok=True)
            return None

    def set(self, key: str, value: str) -> None:
        path = self._path_for(key)
        tmp_path = path.with_suffix(".tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump({"key": key, "value": value}, f)
        tmp_path.replace(path)

    def remove(self, key: str) -> None:
        self._path_for(key).unlink(missing_ok=True)

    def keys(self) -> list[str]:
        if not self.directory.exists():
            return []
        return [unquote(f.stem) for f in self.directory.glob("*.json")]

    def _path_for(self, key: str) -> Path:
        return self.directory / f"{quote(key, safe='')}.json"


class GameStorage:
    """
    Namespaced session persistence.

    Usage:
        storage = GameStorage(FileKeyValueStore())
        storage.save_session(session)
        storage.save_last_active_id(session.id)

        session = storage.load_session(storage.load_last_active_id())
    """

    def __init__(self, backend: KeyValueStore | None = None, prefix: str | None = None):
        self.backend = backend if backend is not None else InMemoryKeyValueStore()
        self.prefix = prefix if prefix is not None else settings.key_prefix

    @property
    def last_active_key(self) -> str:
        return f"{self.prefix}lastActiveGameId"

    def session_key(self, session_id: str) -> str:
        return f"{self.prefix}session:{session_id}"

    def save_session(self, session: GameSession) -> None:
        self.backend.set(self.session_key(session.id), json.dumps(session.to_dict()))

    def load_session(self, session_id: str) -> GameSession | None:
        """
        Load and migrate a session.

        Returns None when nothing is stored or the blob is unusable.
        """
        raw = self.backend.get(self.session_key(session_id))
        if not raw:
            return None

        try:
            return migrate_session(json.loads(raw))
        except (ValueError, InvalidSessionError) as exc:
            logger.warning("Stored session %s could not be loaded: %s", session_id, exc)
            return None

    def save_last_active_id(self, session_id: str | None) -> None:
        if session_id is None:
            self.backend.remove(self.last_active_key)
        else:
            self.backend.set(self.last_active_key, session_id)

    def load_last_active_id(self) -> str | None:
        return self.backend.get(self.last_active_key)

    def clear_all(self) -> None:
        """Remove every key in this storage's namespace."""
        keys = [key for key in self.backend.keys() if key.startswith(self.prefix)]
        if keys:
            self.backend.remove_many(keys)
