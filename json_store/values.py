from __future__ import annotations

import copy
from typing import Any, Dict

from pydantic import JsonValue, TypeAdapter, ValidationError

from .errors import StoreSerializationError

DocumentData = Dict[str, JsonValue]
CollectionData = Dict[str, DocumentData]
StoreData = Dict[str, CollectionData]

_DOCUMENT_ADAPTER: TypeAdapter[DocumentData] = TypeAdapter(DocumentData)
_STORE_ADAPTER: TypeAdapter[StoreData] = TypeAdapter(StoreData)


def validate_document(data: Any) -> DocumentData:
    """
    Check `data` against the JSON value model and return a fresh copy.

    Non-string keys, tuples, sets and arbitrary objects are rejected here,
    at the write boundary, instead of deep inside serialization.
    """
    if not isinstance(data, dict):
        raise StoreSerializationError(
            f"document data must be a mapping of field names, got {type(data).__name__}"
        )
    try:
        validated = _DOCUMENT_ADAPTER.validate_python(data)
    except ValidationError as e:
        raise StoreSerializationError(f"document data is not JSON-representable: {e}") from e
    return copy.deepcopy(validated)


def validate_store(raw: Any) -> StoreData:
    """
    Validate a decoded file as {collection: {doc_id: {field: value}}}.

    Raises pydantic.ValidationError on the wrong shape.
    """
    return _STORE_ADAPTER.validate_python(raw)
