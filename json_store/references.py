from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .interfaces import WriteMode
from .snapshots import DocumentSnapshot, QuerySnapshot

if TYPE_CHECKING:
    from .store import JsonStore


def _require_name(kind: str, value: Any) -> str:
    if not isinstance(value, str) or not value:
        raise ValueError(f"{kind} must be a non-empty string, got {value!r}")
    return value


class DocumentReference:
    """Points at one document; holds no data."""

    def __init__(self, collection_path: str, doc_id: str, store: "JsonStore"):
        self._collection_path = _require_name("collection path", collection_path)
        self.id = _require_name("document id", doc_id)
        self._store = store

    @property
    def collection_path(self) -> str:
        return self._collection_path

    @property
    def path(self) -> str:
        return f"{self._collection_path}/{self.id}"

    async def set(self, data: dict[str, Any]) -> None:
        """Writes the document, replacing every existing field."""
        await self._store.upsert_document(self._collection_path, self.id, data, WriteMode.OVERWRITE)

    async def update(self, data: dict[str, Any]) -> None:
        """Writes the named top-level fields; others are left as they are."""
        await self._store.upsert_document(self._collection_path, self.id, data, WriteMode.MERGE)

    async def get(self) -> DocumentSnapshot:
        data = await self._store.get_document(self._collection_path, self.id)
        return DocumentSnapshot(id=self.id, data=data)

    async def delete(self) -> None:
        await self._store.delete_document(self._collection_path, self.id)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DocumentReference):
            return NotImplemented
        return self._store is other._store and self.path == other.path

    def __hash__(self) -> int:
        return hash((id(self._store), self.path))

    def __repr__(self) -> str:
        return f"DocumentReference({self.path!r})"


class CollectionReference:
    """Points at a named collection; holds no data."""

    def __init__(self, path: str, store: "JsonStore"):
        self.path = _require_name("collection path", path)
        self._store = store

    def doc(self, doc_id: str) -> DocumentReference:
        return DocumentReference(self.path, doc_id, self._store)

    async def add(self, data: dict[str, Any]) -> DocumentReference:
        """
        Creates a document under a freshly generated id and returns its reference.
        """
        ref = self.doc(self._store.new_id())
        await ref.set(data)
        return ref

    async def get(self) -> QuerySnapshot:
        docs = await self._store.get_collection(self.path)
        return QuerySnapshot(
            docs=tuple(DocumentSnapshot(id=doc_id, data=data) for doc_id, data in docs.items())
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CollectionReference):
            return NotImplemented
        return self._store is other._store and self.path == other.path

    def __hash__(self) -> int:
        return hash((id(self._store), self.path))

    def __repr__(self) -> str:
        return f"CollectionReference({self.path!r})"
