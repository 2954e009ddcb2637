from __future__ import annotations

import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator


class FileLockRegistry:
    """
    One lock per resolved document path.

    Disk I/O runs on worker threads (asyncio.to_thread), so these are thread locks.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[str, threading.Lock] = {}

    def lock_for(self, path: Path) -> threading.Lock:
        key = str(path.resolve())
        with self._guard:
            return self._locks.setdefault(key, threading.Lock())

    @contextmanager
    def holding(self, path: Path) -> Iterator[None]:
        with self.lock_for(path):
            yield


FILE_LOCKS = FileLockRegistry()
