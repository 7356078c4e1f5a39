from __future__ import annotations

from typing import Any, Protocol


class StorageService(Protocol):
    """
    Durable storage of whole JSON documents, each under a caller-owned name.
    """

    def write(self, name: str, document: Any) -> None:
        """Persist the full document under `name`, replacing any previous one."""
        ...

    def try_read(self, name: str) -> Any | None:
        """Return the document last written under `name`, or None if there is none."""
        ...
