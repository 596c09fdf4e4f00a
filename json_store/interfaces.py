from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Protocol


class WriteMode(str, Enum):
    OVERWRITE = "overwrite"
    MERGE = "merge"


class PathResolver(Protocol):
    """
    Returns a directory the process can write; the store file keeps its fixed
    name (jsonstore_db.json) inside it.
    """

    def __call__(self) -> Path:
        ...


class IdGenerator(Protocol):
    """
    Returns a fresh document id, unique across calls with overwhelming probability.
    """

    def __call__(self) -> str:
        ...
