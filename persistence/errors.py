from __future__ import annotations


class StoreError(Exception):
    """Base class for failures at the storage boundary."""


class LoadError(StoreError):
    """The durable read failed or returned an unusable top-level document."""

    def __init__(self, message: str, *, key: str | None = None):
        super().__init__(message)
        self.key = key

    def __str__(self) -> str:
        base = super().__str__()
        if self.key is not None:
            base += f" (key {self.key})"
        return base


class DecodeError(StoreError):
    """A single stored record could not be turned back into an entity."""

    def __init__(self, message: str, *, record_id: str | None = None):
        super().__init__(message)
        self.record_id = record_id

    def __str__(self) -> str:
        base = super().__str__()
        if self.record_id is not None:
            base += f" (record {self.record_id})"
        return base


class PersistError(StoreError):
    """Writing to (or removing from) the durable medium failed."""

    def __init__(self, message: str, *, key: str | None = None):
        super().__init__(message)
        self.key = key

    def __str__(self) -> str:
        base = super().__str__()
        if self.key is not None:
            base += f" (key {self.key})"
        return base
