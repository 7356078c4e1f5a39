from __future__ import annotations

from pathlib import Path

import pytest

from config import get_config


def test_defaults(monkeypatch: pytest.MonkeyPatch, sandbox_project: Path):
    monkeypatch.delenv("SETTINGS_DATA_DIR", raising=False)
    for name in ("SETTINGS_STORAGE_NAME", "SETTINGS_BACKUP_SECTION", "PERSIST_TO_DISK", "LOG_LEVEL", "DEBUG_LOG_REQUESTS"):
        monkeypatch.delenv(name, raising=False)

    config = get_config()

    assert config.data_dir == sandbox_project / "data"
    assert config.storage_name == "SettingsService.json"
    assert config.backup_section == "Settings"
    assert config.persist_to_disk is True
    assert config.log_level == "INFO"
    assert config.debug_log_requests is False


def test_env_overrides(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    monkeypatch.setenv("SETTINGS_DATA_DIR", str(tmp_path / "custom"))
    monkeypatch.setenv("SETTINGS_STORAGE_NAME", "hub.json")
    monkeypatch.setenv("SETTINGS_BACKUP_SECTION", "Hub")
    monkeypatch.setenv("PERSIST_TO_DISK", "no")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("DEBUG_LOG_REQUESTS", "1")

    config = get_config()

    assert config.data_dir == tmp_path / "custom"
    assert config.storage_name == "hub.json"
    assert config.backup_section == "Hub"
    assert config.persist_to_disk is False
    assert config.log_level == "DEBUG"
    assert config.debug_log_requests is True
