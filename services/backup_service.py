from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Mapping, Protocol

from .errors import UnsupportedRequestShape

logger = logging.getLogger(__name__)

BACKUP_TYPE = "settings-hub.backup"
BACKUP_VERSION = 1

CreatingBackupHandler = Callable[[dict[str, Any]], None]
RestoringBackupHandler = Callable[[Mapping[str, Any]], None]


class BackupPort(Protocol):
    def register(self, on_creating: CreatingBackupHandler, on_restoring: RestoringBackupHandler) -> None:
        ...


@dataclass(frozen=True)
class _Participant:
    on_creating: CreatingBackupHandler
    on_restoring: RestoringBackupHandler


class BackupService(BackupPort):
    """
    Builds backup envelopes and drives restores.

    Services register two hooks: one writes the service's section into an
    outgoing envelope, the other reads it back out of an incoming one.
    Hooks run in registration order.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._participants: list[_Participant] = []

    def register(self, on_creating: CreatingBackupHandler, on_restoring: RestoringBackupHandler) -> None:
        with self._lock:
            self._participants.append(_Participant(on_creating=on_creating, on_restoring=on_restoring))

    def _snapshot_participants(self) -> list[_Participant]:
        with self._lock:
            return list(self._participants)

    def create_backup(self, *, now: datetime | None = None) -> dict[str, Any]:
        created_at = (now or datetime.now(timezone.utc)).isoformat()
        envelope: dict[str, Any] = {
            "type": BACKUP_TYPE,
            "version": BACKUP_VERSION,
            "created_at": created_at,
        }
        participants = self._snapshot_participants()
        for participant in participants:
            participant.on_creating(envelope)
        logger.info("BACKUP: created backup with %d participant(s)", len(participants))
        return envelope

    def restore_backup(self, envelope: Any) -> None:
        if not isinstance(envelope, Mapping):
            raise UnsupportedRequestShape(f"backup must be an object, got {type(envelope).__name__}")
        for participant in self._snapshot_participants():
            participant.on_restoring(envelope)
        logger.info("BACKUP: restored backup created at %s", envelope.get("created_at"))
