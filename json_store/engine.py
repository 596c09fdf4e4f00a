from __future__ import annotations

import copy
import logging
import threading
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any, NoReturn

from pydantic import ValidationError

from .codec import EMPTY_DOCUMENT, JsonDecodeError, atomic_write_json, read_json_file
from .errors import (
    StoreCorruptError,
    StoreError,
    StoreLoadError,
    StorePersistError,
    StoreSerializationError,
)
from .interfaces import WriteMode
from .registry import GLOBAL_ENGINES
from .settings import get_settings
from .values import CollectionData, DocumentData, StoreData, validate_document, validate_store

logger = logging.getLogger(__name__)


class StoreState(str, Enum):
    UNINITIALIZED = "uninitialized"
    LOADING = "loading"
    READY = "ready"
    MUTATING = "mutating"
    CLOSED = "closed"


class StoreEngine:
    """
    Owns the canonical collection -> doc id -> fields mapping for one JSON file.

    - Loads the file once (initialize()), then serves every read from memory.
    - Every mutation rewrites the whole file atomically.
    - read -> mutate -> persist runs under one lock; only one engine per
      file exists in a process (see StoreEngine.shared()).
    - A failed persist rolls the in-memory change back, so memory never
      holds a write the file does not.
    """

    def __init__(
        self,
        path: Path,
        *,
        quarantine_corrupt: bool | None = None,
        indent: int | None = None,
    ):
        settings = get_settings()
        self._path = Path(path)
        self._lock = threading.RLock()
        self._quarantine_corrupt = (
            settings.quarantine_corrupt if quarantine_corrupt is None else quarantine_corrupt
        )
        self._indent = settings.indent if indent is None else (indent or None)
        self._data: StoreData = {}
        self._state = StoreState.UNINITIALIZED
        GLOBAL_ENGINES.claim(self)

    @classmethod
    def shared(cls, path: Path, **kwargs: Any) -> "StoreEngine":
        """
        Returns the live engine for `path`, creating one if none exists.
        Options only apply when a new engine is created.
        """
        return GLOBAL_ENGINES.get_or_create(Path(path), lambda: cls(path, **kwargs))

    def close(self) -> None:
        """Release the file so another engine may open it. Further calls raise."""
        with self._lock:
            GLOBAL_ENGINES.release(self)
            self._state = StoreState.CLOSED

    @property
    def path(self) -> Path:
        return self._path

    @property
    def state(self) -> StoreState:
        return self._state

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------
    def initialize(self) -> None:
        """
        Load the backing file, creating an empty one if it does not exist.

        Runs once; later calls are no-ops. On failure the engine still ends up
        ready with an empty mapping and the load error is raised.
        """
        with self._lock:
            if self._state is StoreState.CLOSED:
                raise StoreError(f"store {self._path} is closed")
            if self._state is not StoreState.UNINITIALIZED:
                return
            self._state = StoreState.LOADING
            try:
                self._load()
            finally:
                self._state = StoreState.READY

    def _load(self) -> None:
        try:
            raw = read_json_file(self._path)
        except FileNotFoundError:
            self._data = {}
            logger.info("JSON STORE LOAD: %s not found, creating empty store", self._path)
            try:
                self._write()
            except StorePersistError as e:
                raise StoreLoadError(self._path, f"could not create store file: {e}") from e
            return
        except JsonDecodeError as e:
            self._reset_corrupt(e.reason)
        except OSError as e:
            self._data = {}
            raise StoreLoadError(self._path, repr(e)) from e

        if raw is EMPTY_DOCUMENT:
            self._data = {}
            return

        try:
            loaded = validate_store(raw)
        except ValidationError as e:
            self._reset_corrupt(f"unexpected document shape: {e}")

        # Collections only exist while they hold documents.
        self._data = {name: docs for name, docs in loaded.items() if docs}
        logger.info(
            "JSON STORE LOAD: loaded %d collection(s) from %s", len(self._data), self._path
        )

    def _reset_corrupt(self, reason: str) -> NoReturn:
        self._data = {}
        quarantine_path = self._quarantine() if self._quarantine_corrupt else None
        logger.warning(
            "JSON STORE LOAD: %s is not a valid store (%s); starting empty, quarantined to %s",
            self._path,
            reason,
            quarantine_path,
        )
        raise StoreCorruptError(self._path, reason, quarantine_path)

    def _quarantine(self) -> Path | None:
        stamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%S%fZ")
        target = self._path.with_name(f"{self._path.name}.corrupt-{stamp}")
        try:
            self._path.replace(target)
        except OSError as e:
            logger.warning("JSON STORE LOAD: could not quarantine %s: %r", self._path, e)
            return None
        try:
            self._write()
        except StorePersistError as e:
            logger.warning("JSON STORE LOAD: could not recreate %s: %r", self._path, e)
        return target

    def _require_ready(self) -> None:
        if self._state is StoreState.UNINITIALIZED:
            raise StoreError(f"store {self._path} is not initialized; call initialize() first")
        if self._state is StoreState.CLOSED:
            raise StoreError(f"store {self._path} is closed")

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------
    def get_document(self, collection: str, doc_id: str) -> DocumentData | None:
        with self._lock:
            self._require_ready()
            doc = self._data.get(collection, {}).get(doc_id)
            return copy.deepcopy(doc) if doc is not None else None

    def get_collection(self, collection: str) -> CollectionData:
        with self._lock:
            self._require_ready()
            return copy.deepcopy(self._data.get(collection, {}))

    def snapshot(self) -> StoreData:
        with self._lock:
            self._require_ready()
            return copy.deepcopy(self._data)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------
    def upsert_document(
        self,
        collection: str,
        doc_id: str,
        data: dict[str, Any],
        mode: WriteMode = WriteMode.OVERWRITE,
    ) -> None:
        """
        Write `data` to (collection, doc_id).

        OVERWRITE replaces the stored fields. MERGE replaces only the
        top-level keys present in `data` (nested mappings are replaced, not
        merged) and behaves like OVERWRITE when the document is missing.
        """
        mode = WriteMode(mode)
        fields = validate_document(data)
        with self._lock:
            self._require_ready()
            self._state = StoreState.MUTATING
            try:
                checkpoint = self._checkpoint(collection)
                docs = self._data.setdefault(collection, {})
                existing = docs.get(doc_id)
                if mode is WriteMode.MERGE and existing is not None:
                    # Build a new dict; the checkpoint still references the old one.
                    docs[doc_id] = {**existing, **fields}
                else:
                    docs[doc_id] = fields
                self._commit(checkpoint)
            finally:
                self._state = StoreState.READY

    def delete_document(self, collection: str, doc_id: str) -> None:
        with self._lock:
            self._require_ready()
            docs = self._data.get(collection)
            if docs is None or doc_id not in docs:
                return
            self._state = StoreState.MUTATING
            try:
                checkpoint = self._checkpoint(collection)
                del docs[doc_id]
                if not docs:
                    del self._data[collection]
                self._commit(checkpoint)
            finally:
                self._state = StoreState.READY

    def persist(self) -> None:
        """Rewrite the backing file from the full in-memory mapping."""
        with self._lock:
            self._require_ready()
            self._write()

    def _checkpoint(self, collection: str) -> StoreData:
        # Document dicts are never mutated in place, so shallow copies suffice.
        top = dict(self._data)
        if collection in top:
            top[collection] = dict(top[collection])
        return top

    def _commit(self, checkpoint: StoreData) -> None:
        try:
            self._write()
        except (StoreSerializationError, StorePersistError) as e:
            self._data = checkpoint
            logger.warning("JSON STORE SAVE: change rolled back for %s: %r", self._path, e)
            raise

    def _write(self) -> None:
        # Encoding runs before the file is touched; OSError only comes from the write.
        try:
            atomic_write_json(self._path, self._data, indent=self._indent)
        except OSError as e:
            raise StorePersistError(self._path, repr(e)) from e
        except (TypeError, ValueError) as e:
            raise StoreSerializationError(f"store is not JSON-representable: {e}") from e
        logger.debug("JSON STORE SAVE: wrote %s", self._path)
