"""Key-Value Storage - Local persistence for journal records.

This module handles all storage I/O. Records are plain strings keyed by
name, the same shape as a browser's per-origin local store. Business logic
is in the core module.
"""

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol


logger = logging.getLogger(__name__)

MEMORY_PATH = ":memory:"


class KeyValueStorage(Protocol):
    """The store the journal reads and writes."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...

    def list_keys(self) -> list[str]: ...


class InMemoryStorage:
    """Storage held in a dict, lost when the process exits."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def list_keys(self) -> list[str]:
        return list(self._data)


class JsonFileStorage:
    """Storage kept in a single JSON object file.

    The file is read on every access and rewritten on every change, so
    two processes sharing a file see each other's writes but can still
    overwrite one another (last write wins).
    """

    def __init__(self, path: str | os.PathLike[str]) -> None:
        """Initialize file storage.

        Args:
            path: Location of the JSON file; created on first write
        """
        self.path = Path(path)

    def _read(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with self.path.open(encoding="utf-8") as fh:
                data = json.load(fh)
        except ValueError as e:
            logger.warning("Ignoring unreadable storage file %s: %s", self.path, str(e))
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring storage file %s: not a JSON object", self.path)
            return {}
        return data

    def _write(self, data: dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        with tmp_path.open("w", encoding="utf-8") as fh:
            json.dump(data, fh, indent=2, sort_keys=True)
        os.replace(tmp_path, self.path)

    def get(self, key: str) -> str | None:
        return self._read().get(key)

    def set(self, key: str, value: str) -> None:
        logger.debug("Writing key %s to %s", key, self.path)
        data = self._read()
        data[key] = value
        self._write(data)

    def delete(self, key: str) -> None:
        data = self._read()
        if data.pop(key, None) is not None:
            logger.debug("Deleted key %s from %s", key, self.path)
            self._write(data)

    def list_keys(self) -> list[str]:
        return list(self._read())


@dataclass
class StorageConfig:
    """Configuration for journal storage.

    Attributes:
        path: JSON file location, or ":memory:" for in-memory storage
    """

    path: str = "food-journal.json"

    @classmethod
    def from_env(cls) -> "StorageConfig":
        """Read JOURNAL_STORAGE_PATH, falling back to the default file."""
        return cls(path=os.environ.get("JOURNAL_STORAGE_PATH", cls.path))


def create_storage(config: StorageConfig | None = None) -> KeyValueStorage:
    """Build the storage backend described by the config."""
    config = config or StorageConfig()
    if config.path == MEMORY_PATH:
        logger.info("Using in-memory journal storage")
        return InMemoryStorage()
    logger.info("Using journal storage file %s", config.path)
    return JsonFileStorage(config.path)
