from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from persistence import paths


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class AppConfig:
    # Persistence
    data_dir: Path
    storage_name: str
    persist_to_disk: bool

    # Backup
    backup_section: str

    # Logging / debug
    log_level: str
    debug_log_requests: bool


def get_config() -> AppConfig:
    raw_dir = os.getenv("SETTINGS_DATA_DIR", "").strip()
    settings_dir = Path(raw_dir).expanduser() if raw_dir else paths.data_dir()

    storage_name = os.getenv("SETTINGS_STORAGE_NAME", "SettingsService.json").strip() or "SettingsService.json"
    backup_section = os.getenv("SETTINGS_BACKUP_SECTION", "Settings").strip() or "Settings"

    persist_to_disk = _env_bool("PERSIST_TO_DISK", True)

    log_level = (os.getenv("LOG_LEVEL") or "INFO").strip().upper()
    debug_log_requests = _env_bool("DEBUG_LOG_REQUESTS", False)

    return AppConfig(
        data_dir=settings_dir,
        storage_name=storage_name,
        persist_to_disk=persist_to_disk,
        backup_section=backup_section,
        log_level=log_level,
        debug_log_requests=debug_log_requests,
    )


def configure_logging(config: AppConfig) -> None:
    """Configure the root logger once (idempotent)."""
    level = getattr(logging, config.log_level, logging.INFO)
    root = logging.getLogger()
    if getattr(root, "_settings_hub_configured", False):
        root.setLevel(level)
        return
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s - %(message)s",
    )
    root._settings_hub_configured = True  # type: ignore[attr-defined]
