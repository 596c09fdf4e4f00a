from __future__ import annotations

import copy
from typing import Any, Iterator

from pydantic import BaseModel, ConfigDict, JsonValue, PrivateAttr, computed_field

from .values import DocumentData


class DocumentSnapshot(BaseModel):
    """
    Point-in-time copy of one document. `data` is None when the document
    did not exist at read time; an empty mapping still exists.

    The fields are held privately; every access hands out a fresh copy, so
    nothing a caller does to the result reaches the snapshot.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    _fields: DocumentData | None = PrivateAttr(default=None)

    def __init__(self, id: str, data: DocumentData | None = None, **kwargs: Any):
        super().__init__(id=id, **kwargs)
        self._fields = copy.deepcopy(data)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def data(self) -> DocumentData | None:
        return copy.deepcopy(self._fields)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def exists(self) -> bool:
        return self._fields is not None

    def get(self, field: str | None = None) -> DocumentData | JsonValue | None:
        """
        Returns a copy of the fields, or of a single top-level field when named.
        """
        if self._fields is None:
            return None
        if field is None:
            return copy.deepcopy(self._fields)
        return copy.deepcopy(self._fields.get(field))


class QuerySnapshot(BaseModel):
    """Point-in-time copy of every document in a collection."""

    model_config = ConfigDict(frozen=True)

    docs: tuple[DocumentSnapshot, ...] = ()

    def get(self) -> list[DocumentSnapshot]:
        return list(self.docs)

    @property
    def size(self) -> int:
        return len(self.docs)

    @property
    def empty(self) -> bool:
        return not self.docs

    def __len__(self) -> int:
        return len(self.docs)

    def __iter__(self) -> Iterator[DocumentSnapshot]:  # type: ignore[override]
        return iter(self.docs)
