from __future__ import annotations

import threading
import weakref
from pathlib import Path
from typing import TYPE_CHECKING, Callable

from .errors import StoreError

if TYPE_CHECKING:
    from .engine import StoreEngine


class EngineRegistry:
    """
    Tracks the live StoreEngine for each resolved file path.

    A file has at most one engine per process: two engines would each hold
    their own mapping and the next persist of one would drop the other's
    acknowledged writes. Entries are weak, so an engine nobody references
    frees its path.
    """

    def __init__(self) -> None:
        self._guard = threading.RLock()
        self._engines: weakref.WeakValueDictionary[str, StoreEngine] = weakref.WeakValueDictionary()

    @staticmethod
    def key_for(path: Path) -> str:
        return str(Path(path).resolve())

    def get(self, path: Path) -> StoreEngine | None:
        with self._guard:
            return self._engines.get(self.key_for(path))

    def claim(self, engine: StoreEngine) -> None:
        key = self.key_for(engine.path)
        with self._guard:
            current = self._engines.get(key)
            if current is not None and current is not engine:
                raise StoreError(
                    f"{engine.path} is already open in this process; "
                    "use StoreEngine.shared() or close() the other engine first"
                )
            self._engines[key] = engine

    def release(self, engine: StoreEngine) -> None:
        key = self.key_for(engine.path)
        with self._guard:
            if self._engines.get(key) is engine:
                del self._engines[key]

    def get_or_create(self, path: Path, factory: Callable[[], StoreEngine]) -> StoreEngine:
        with self._guard:
            engine = self.get(path)
            if engine is None:
                # factory() claims the path itself; the RLock allows the re-entry.
                engine = factory()
            return engine


GLOBAL_ENGINES = EngineRegistry()
