"""
Exception hierarchy for the document store.
"""

from __future__ import annotations

from pathlib import Path


class StoreError(Exception):
    """Base error for the document store."""


class StoreLoadError(StoreError):
    """Raised when the backing file cannot be loaded at initialization."""

    def __init__(self, path: Path, message: str):
        super().__init__(f"Error loading data from {path}: {message}")
        self.path = path


class StoreCorruptError(StoreLoadError):
    """Raised when the backing file exists but is not a valid store document."""

    def __init__(self, path: Path, message: str, quarantine_path: Path | None = None):
        super().__init__(path, message)
        self.quarantine_path = quarantine_path


class StorePersistError(StoreError):
    """Raised when writing the backing file fails."""

    def __init__(self, path: Path, message: str):
        super().__init__(f"Error writing data to {path}: {message}")
        self.path = path


class StoreSerializationError(StoreError):
    """Raised when a value is not representable in the JSON value model."""
