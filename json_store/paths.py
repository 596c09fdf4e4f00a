from __future__ import annotations

from pathlib import Path

from .settings import get_settings

STORE_FILENAME = "jsonstore_db.json"


def project_root() -> Path:
    # json_store/paths.py -> json_store -> project root
    return Path(__file__).resolve().parents[1]


def ensure_dir(path: Path) -> Path:
    path.mkdir(parents=True, exist_ok=True)
    return path


def data_dir() -> Path:
    configured = get_settings().data_dir
    if configured is not None:
        return ensure_dir(configured)
    return ensure_dir(project_root() / "data")


def store_file_path() -> Path:
    return data_dir() / STORE_FILENAME
