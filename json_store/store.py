from __future__ import annotations

import asyncio
import logging
import threading
from pathlib import Path
from typing import Any

from .engine import StoreEngine
from .ids import new_document_id
from .interfaces import IdGenerator, PathResolver, WriteMode
from .paths import STORE_FILENAME, data_dir, ensure_dir, store_file_path
from .references import CollectionReference
from .values import CollectionData, DocumentData, StoreData

logger = logging.getLogger(__name__)

_INSTANCE_LOCK = threading.Lock()
_instance: JsonStore | None = None


class JsonStore:
    """
    Async handle over a StoreEngine.

    Engine calls run in a worker thread (asyncio.to_thread) so file I/O never
    blocks the event loop. Serialization of writes lives in the engine.
    """

    def __init__(self, engine: StoreEngine, *, id_generator: IdGenerator | None = None):
        self._engine = engine
        self._id_generator: IdGenerator = id_generator or new_document_id

    @classmethod
    async def open(
        cls,
        *,
        path_resolver: PathResolver | None = None,
        id_generator: IdGenerator | None = None,
    ) -> "JsonStore":
        """
        Open the store file (jsonstore_db.json) inside the directory the
        resolver returns; defaults to the configured data dir.

        Handles opened on the same file share one engine.
        """
        directory = ensure_dir(Path((path_resolver or data_dir)()))
        engine = StoreEngine.shared(directory / STORE_FILENAME)
        store = cls(engine, id_generator=id_generator)
        await store.initialize()
        return store

    @classmethod
    async def instance(cls) -> "JsonStore":
        """
        Returns the process-wide default store, loading it on first use.
        """
        return await asyncio.to_thread(cls._instance_sync)

    @classmethod
    def _instance_sync(cls) -> "JsonStore":
        global _instance
        with _INSTANCE_LOCK:
            if _instance is None:
                _instance = cls(StoreEngine.shared(store_file_path()))
                logger.info("JSON STORE: default store at %s", _instance.path)
                # Registered before loading: on a load error the empty store stays usable.
                _instance._engine.initialize()
            return _instance

    @classmethod
    def reset_instance(cls) -> None:
        global _instance
        with _INSTANCE_LOCK:
            _instance = None

    @property
    def engine(self) -> StoreEngine:
        return self._engine

    @property
    def path(self) -> Path:
        return self._engine.path

    def new_id(self) -> str:
        return self._id_generator()

    def collection(self, path: str) -> CollectionReference:
        return CollectionReference(path, self)

    async def initialize(self) -> None:
        await asyncio.to_thread(self._engine.initialize)

    async def get_document(self, collection: str, doc_id: str) -> DocumentData | None:
        return await asyncio.to_thread(self._engine.get_document, collection, doc_id)

    async def get_collection(self, collection: str) -> CollectionData:
        return await asyncio.to_thread(self._engine.get_collection, collection)

    async def upsert_document(
        self,
        collection: str,
        doc_id: str,
        data: dict[str, Any],
        mode: WriteMode = WriteMode.OVERWRITE,
    ) -> None:
        await asyncio.to_thread(self._engine.upsert_document, collection, doc_id, data, mode)

    async def delete_document(self, collection: str, doc_id: str) -> None:
        await asyncio.to_thread(self._engine.delete_document, collection, doc_id)

    async def persist(self) -> None:
        await asyncio.to_thread(self._engine.persist)

    async def snapshot(self) -> StoreData:
        return await asyncio.to_thread(self._engine.snapshot)
