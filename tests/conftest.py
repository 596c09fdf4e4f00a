from __future__ import annotations

from pathlib import Path
import sys


import pytest


# Ensure the repository root (parent of ./tests) is importable during pytest collection.
# This avoids ModuleNotFoundError for `import json_store` under pytest import modes
# that don't automatically prepend the cwd/rootdir to sys.path.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))


@pytest.fixture
def sandbox_data_dir(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    """
    Point the default path resolver at a temp directory so tests never touch real ./data,
    and forget any default store left over from another test.
    """
    from json_store.store import JsonStore

    data = tmp_path / "data"
    monkeypatch.setenv("JSON_STORE_DATA_DIR", str(data))
    monkeypatch.delenv("JSON_STORE_QUARANTINE_CORRUPT", raising=False)
    monkeypatch.delenv("JSON_STORE_INDENT", raising=False)
    JsonStore.reset_instance()
    yield data
    JsonStore.reset_instance()


@pytest.fixture
def store_path(sandbox_data_dir: Path) -> Path:
    return sandbox_data_dir / "jsonstore_db.json"


@pytest.fixture
def engine(store_path: Path):
    from json_store.engine import StoreEngine

    eng = StoreEngine(store_path)
    eng.initialize()
    yield eng
    eng.close()


@pytest.fixture
def store(sandbox_data_dir: Path):
    import asyncio

    from json_store.store import JsonStore

    store = asyncio.run(JsonStore.open())
    yield store
    store.engine.close()
