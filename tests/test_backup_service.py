from __future__ import annotations

from datetime import datetime, timezone

import pytest

from persistence import InMemoryStorageService
from services.backup_service import BACKUP_TYPE, BackupService
from services.errors import UnsupportedRequestShape
from services.settings_service import SettingsService


def _store(backup: BackupService, **kwargs) -> tuple[SettingsService, InMemoryStorageService]:
    storage = InMemoryStorageService()
    store = SettingsService(storage, backup, **kwargs)
    store.initialize()
    return store, storage


def test_envelope_contains_settings_section(backup):
    store, _ = _store(backup)
    store.replace("Office/Heater", {"target": 21.5})

    envelope = backup.create_backup(now=datetime(2026, 1, 2, tzinfo=timezone.utc))

    assert envelope["type"] == BACKUP_TYPE
    assert envelope["created_at"] == "2026-01-02T00:00:00+00:00"
    assert envelope["Settings"] == {"Office/Heater": {"target": 21.5}}


def test_backup_restores_into_another_store():
    source_backup = BackupService()
    source, _ = _store(source_backup)
    source.replace("a", {"v": 1})
    source.replace("b", {"v": [1, 2]})
    envelope = source_backup.create_backup()

    target_backup = BackupService()
    target, target_storage = _store(target_backup)
    target.replace("c", {"v": 3})
    changed: list[str] = []
    target.channel.subscribe("a", lambda e: changed.append(e.uri))
    target.channel.subscribe("b", lambda e: changed.append(e.uri))

    target_backup.restore_backup(envelope)

    assert target.create_backup() == {"c": {"v": 3}, "a": {"v": 1}, "b": {"v": [1, 2]}}
    assert target_storage.try_read("SettingsService.json") == target.create_backup()
    assert changed == ["a", "b"]


def test_envelope_without_section_is_a_no_op(backup):
    store, storage = _store(backup)
    store.replace("a", {"v": 1})
    writes = storage.write_count

    backup.restore_backup({"type": BACKUP_TYPE, "Other": {}})

    assert storage.write_count == writes
    assert store.get_raw("a") == {"v": 1}


def test_custom_section_name(backup):
    store, _ = _store(backup, backup_section="HubSettings")
    store.replace("a", {"v": 1})
    assert "HubSettings" in backup.create_backup()


def test_restore_rejects_non_object_envelope(backup):
    _store(backup)
    with pytest.raises(UnsupportedRequestShape):
        backup.restore_backup("nope")


def test_restore_rejects_non_object_section(backup):
    store, storage = _store(backup)
    with pytest.raises(UnsupportedRequestShape):
        backup.restore_backup({"Settings": ["a"]})
    assert storage.write_count == 0
    assert store.uris() == []


class HookRecorder:
    def __init__(self) -> None:
        self.hooks = []

    def register(self, on_creating, on_restoring) -> None:
        self.hooks.append((on_creating, on_restoring))


def test_store_registers_its_hooks_with_any_backup_port():
    port = HookRecorder()
    store = SettingsService(InMemoryStorageService(), port)
    store.initialize()
    store.replace("a", {"v": 1})

    assert len(port.hooks) == 1
    on_creating, on_restoring = port.hooks[0]
    envelope: dict = {}
    on_creating(envelope)
    assert envelope == {"Settings": {"a": {"v": 1}}}

    on_restoring({"Settings": {"b": {"v": 2}}})
    assert store.get_raw("b") == {"v": 2}
