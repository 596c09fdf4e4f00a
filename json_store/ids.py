from __future__ import annotations

import uuid


def new_document_id() -> str:
    return str(uuid.uuid4())
