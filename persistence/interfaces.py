from __future__ import annotations

from typing import Protocol


class KeyValueMedium(Protocol):
    """
    Durable key-value storage over string values. One key per entity kind.

    Implementations raise on I/O failure; the stores decide how to degrade.
    """

    async def get(self, key: str) -> str | None:
        """Return the stored value, or None when the key is absent."""
        ...

    async def set(self, key: str, value: str) -> None:
        """Persist the value; durable once this returns."""
        ...

    async def remove(self, key: str) -> None:
        """Delete the key. Removing an absent key is not an error."""
        ...
