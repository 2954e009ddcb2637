from __future__ import annotations

from .interfaces import KeyValueMedium


class InMemoryKeyValueMedium(KeyValueMedium):
    """
    Process-local medium. Nothing survives a restart.

    Keeps simple counters so callers can see how often the stores actually
    hit storage.
    """

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._values: dict[str, str] = dict(initial or {})
        self.reads = 0
        self.writes = 0
        self.removes = 0

    def snapshot(self) -> dict[str, str]:
        return dict(self._values)

    async def get(self, key: str) -> str | None:
        self.reads += 1
        return self._values.get(key)

    async def set(self, key: str, value: str) -> None:
        self.writes += 1
        self._values[key] = value

    async def remove(self, key: str) -> None:
        self.removes += 1
        self._values.pop(key, None)
