from __future__ import annotations

from pathlib import Path
import sys


import pytest


# Ensure the repository root (parent of ./tests) is importable during pytest collection.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))


@pytest.fixture
def sandbox_project(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    """
    Redirect persistence paths to a temp project directory so tests never touch real ./data.
    """
    import persistence.paths as paths

    def _project_root() -> Path:
        return tmp_path

    def _data_dir() -> Path:
        return tmp_path / "data"

    monkeypatch.setattr(paths, "project_root", _project_root)
    monkeypatch.setattr(paths, "data_dir", _data_dir)
    monkeypatch.setenv("SETTINGS_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("PERSIST_TO_DISK", "true")
    return tmp_path


@pytest.fixture
def storage():
    from persistence import InMemoryStorageService

    return InMemoryStorageService()


@pytest.fixture
def backup():
    from services.backup_service import BackupService

    return BackupService()


@pytest.fixture
def store(storage, backup):
    from services.settings_service import SettingsService

    service = SettingsService(storage, backup)
    service.initialize()
    return service
