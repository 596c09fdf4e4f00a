from __future__ import annotations

from .engine import StoreEngine, StoreState
from .errors import (
    StoreCorruptError,
    StoreError,
    StoreLoadError,
    StorePersistError,
    StoreSerializationError,
)
from .interfaces import IdGenerator, PathResolver, WriteMode
from .references import CollectionReference, DocumentReference
from .snapshots import DocumentSnapshot, QuerySnapshot
from .store import JsonStore

__all__ = [
    "JsonStore",
    "StoreEngine",
    "StoreState",
    "WriteMode",
    "CollectionReference",
    "DocumentReference",
    "DocumentSnapshot",
    "QuerySnapshot",
    "IdGenerator",
    "PathResolver",
    "StoreError",
    "StoreLoadError",
    "StoreCorruptError",
    "StorePersistError",
    "StoreSerializationError",
]
