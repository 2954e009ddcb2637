from __future__ import annotations

import asyncio
from pathlib import Path

from json_store import atomic_write_document, read_document, remove_document

from .interfaces import KeyValueMedium
from .locks import FILE_LOCKS
from .paths import ensure_dir, key_path


class DiskKeyValueMedium(KeyValueMedium):
    """
    Stores each key as its own JSON file under a data directory.

    - Missing or blank files read as None.
    - Writes are atomic (temp file + replace).
    - File I/O runs in a worker thread so the event loop never blocks on disk.
    """

    def __init__(self, data_dir: Path):
        self._data_dir = ensure_dir(data_dir)
        self._claimed: dict[Path, str] = {}

    @property
    def data_dir(self) -> Path:
        return self._data_dir

    def path_for(self, key: str) -> Path:
        path = key_path(self._data_dir, key)
        owner = self._claimed.setdefault(path, key)
        if owner != key:
            raise ValueError(f"Storage key {key!r} maps to the same file as {owner!r}: {path.name}")
        return path

    def _read(self, path: Path) -> str | None:
        with FILE_LOCKS.holding(path):
            return read_document(path)

    def _write(self, path: Path, value: str) -> None:
        with FILE_LOCKS.holding(path):
            atomic_write_document(path, value)

    def _remove(self, path: Path) -> None:
        with FILE_LOCKS.holding(path):
            remove_document(path)

    async def get(self, key: str) -> str | None:
        return await asyncio.to_thread(self._read, self.path_for(key))

    async def set(self, key: str, value: str) -> None:
        await asyncio.to_thread(self._write, self.path_for(key), value)

    async def remove(self, key: str) -> None:
        await asyncio.to_thread(self._remove, self.path_for(key))
