from __future__ import annotations

from pathlib import Path


def project_root() -> Path:
    # persistence/paths.py -> persistence -> project root
    return Path(__file__).resolve().parents[1]


def data_dir() -> Path:
    return project_root() / "data"


def ensure_dir(path: Path) -> Path:
    path.mkdir(parents=True, exist_ok=True)
    return path


def storage_path(base_dir: Path, name: str) -> Path:
    """
    Resolve a storage name to a file inside `base_dir`.

    Names are flat: path separators are rejected so a name can never escape the directory.
    """
    cleaned = name.strip()
    if not cleaned or cleaned in (".", "..") or "/" in cleaned or "\\" in cleaned:
        raise ValueError(f"Invalid storage name: {name!r}")
    return base_dir / cleaned
