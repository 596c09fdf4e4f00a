from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _env_int(name: str) -> int | None:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return None
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


@dataclass(frozen=True)
class Settings:
    # Directory for the default store file; None -> <project root>/data
    data_dir: Path | None

    # Move unreadable store files aside before starting empty
    quarantine_corrupt: bool

    # Pretty-print the store file (None/0 -> compact)
    indent: int | None


def get_settings() -> Settings:
    load_dotenv()

    raw_dir = os.getenv("JSON_STORE_DATA_DIR", "").strip()
    data_dir = Path(raw_dir).expanduser() if raw_dir else None

    quarantine_corrupt = _env_bool("JSON_STORE_QUARANTINE_CORRUPT", True)

    indent = _env_int("JSON_STORE_INDENT")
    if indent is not None and indent <= 0:
        indent = None

    return Settings(
        data_dir=data_dir,
        quarantine_corrupt=quarantine_corrupt,
        indent=indent,
    )
