from __future__ import annotations

from .disk_store import DiskStorageService, InMemoryStorageService
from .interfaces import StorageService

__all__ = [
    "StorageService",
    "DiskStorageService",
    "InMemoryStorageService",
]
