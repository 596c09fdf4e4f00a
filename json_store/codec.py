from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

# Returned for blank files, so a decoded JSON `null` stays distinguishable.
EMPTY_DOCUMENT: Any = object()


class JsonDecodeError(ValueError):
    """Raised when bytes on disk are not a JSON document."""

    def __init__(self, path: Path, reason: str):
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason


def encode_json(payload: Any, *, indent: int | None = None) -> str:
    """
    Encode a JSON-value tree.

    Raises TypeError/ValueError for values outside the JSON model
    (including NaN and infinities).
    """
    text = json.dumps(payload, indent=indent, ensure_ascii=False, allow_nan=False)
    return text + "\n"


def decode_json(raw: str, *, path: Path) -> Any:
    """
    Decode JSON text. Empty or whitespace-only text decodes to EMPTY_DOCUMENT.
    """
    if not raw.strip():
        return EMPTY_DOCUMENT
    try:
        return json.loads(raw)
    except json.JSONDecodeError as e:
        raise JsonDecodeError(path, str(e)) from e


def read_json_file(path: Path) -> Any:
    """
    Read JSON from disk.

    Returns EMPTY_DOCUMENT for empty files. OSError propagates for I/O failures
    (missing file included); JsonDecodeError for invalid content.
    """
    try:
        raw = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise JsonDecodeError(path, f"not valid UTF-8: {e}") from e
    return decode_json(raw, path=path)


def atomic_write_text(path: Path, text: str) -> None:
    """
    Atomically replace `path` by writing to a temp file then renaming.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_suffix(path.suffix + ".tmp")
    try:
        with tmp_path.open("w", encoding="utf-8") as f:
            f.write(text)
            f.flush()
            os.fsync(f.fileno())
        tmp_path.replace(path)
    except OSError:
        tmp_path.unlink(missing_ok=True)
        raise


def atomic_write_json(path: Path, payload: Any, *, indent: int | None = None) -> None:
    """
    Encode then atomically write JSON. Encoding happens before the file is touched.
    """
    atomic_write_text(path, encode_json(payload, indent=indent))
