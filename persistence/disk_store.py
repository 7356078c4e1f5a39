from __future__ import annotations

import copy
import logging
import threading
from pathlib import Path
from typing import Any

from json_store import atomic_write_json, read_json

from .interfaces import StorageService
from .paths import ensure_dir, storage_path

logger = logging.getLogger(__name__)


class DiskStorageService(StorageService):
    """
    Stores each named JSON document as one file under a base directory.

    - Returns None for missing/empty/invalid files.
    - Writes atomically.
    - One lock per resolved file path, so unrelated names never contend.
    """

    def __init__(self, base_dir: Path):
        self._base_dir = ensure_dir(base_dir)
        self._guard = threading.Lock()
        self._locks: dict[str, threading.Lock] = {}

    def path_for(self, name: str) -> Path:
        return storage_path(self._base_dir, name)

    def _lock_for(self, path: Path) -> threading.Lock:
        key = str(path.resolve())
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = threading.Lock()
                self._locks[key] = lock
            return lock

    def write(self, name: str, document: Any) -> None:
        path = self.path_for(name)
        with self._lock_for(path):
            atomic_write_json(path, document)
        logger.debug("STORAGE WRITE: %s", path)

    def try_read(self, name: str) -> Any | None:
        path = self.path_for(name)
        with self._lock_for(path):
            return read_json(path)


class InMemoryStorageService(StorageService):
    """
    Process-local storage used when disk persistence is turned off (and in tests).
    Documents are deep-copied in and out, like a real serialization round trip.
    """

    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        self._lock = threading.Lock()
        self._documents: dict[str, Any] = copy.deepcopy(initial) if initial else {}
        self.write_count = 0

    def write(self, name: str, document: Any) -> None:
        with self._lock:
            self._documents[name] = copy.deepcopy(document)
            self.write_count += 1

    def try_read(self, name: str) -> Any | None:
        with self._lock:
            if name not in self._documents:
                return None
            return copy.deepcopy(self._documents[name])
