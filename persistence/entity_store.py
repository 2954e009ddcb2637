from __future__ import annotations

import asyncio
import logging
from typing import Any, ClassVar, Generic, TypeVar

from .codec import RecordCodec, dump_document, load_document
from .debounce import Debouncer
from .errors import DecodeError, LoadError, PersistError
from .interfaces import KeyValueMedium
from .models import EntityRecord

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=EntityRecord)

DEFAULT_DEBOUNCE_SECONDS = 0.3


class EntityStore(Generic[E]):
    """
    Lazily loaded in-memory cache of one entity kind, written through to a
    single key of a KeyValueMedium.

    - The first read or write loads the key once. A failed load degrades to an
      empty cache and is never retried: ``loaded`` is sticky.
    - Mutations change the cache synchronously and then (re)start a debounce
      timer. Only the surviving timer writes, and it writes the whole cache as
      it is at that moment. Mutations inside the window are lost if the
      process dies before the timer fires.
    - I/O failures are logged, never raised to callers.

    Build exactly one instance per kind per process and pass it around; two
    instances on the same key would overwrite each other.
    """

    storage_key: ClassVar[str]
    label: ClassVar[str]
    codec: ClassVar[RecordCodec[Any]]

    def __init__(self, medium: KeyValueMedium, *, debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS):
        self._medium = medium
        self._entities: dict[str, E] = {}
        self._loaded = False
        self._load_lock = asyncio.Lock()
        self._write_lock = asyncio.Lock()
        self._debouncer = Debouncer(debounce_seconds, self._write_snapshot)

    @property
    def loaded(self) -> bool:
        return self._loaded

    @property
    def has_pending_write(self) -> bool:
        return self._debouncer.pending

    def _sort_key(self, entity: E) -> Any:
        raise NotImplementedError

    # ------------------------------------------------------------------
    # load
    # ------------------------------------------------------------------

    async def ensure_loaded(self) -> None:
        if self._loaded:
            return
        async with self._load_lock:
            # Another caller may have finished the load while we waited.
            if self._loaded:
                return
            try:
                records = load_document(await self._read(), key=self.storage_key)
            except LoadError as e:
                logger.warning("Failed to load %s from storage, starting empty: %s", self.label, e, exc_info=True)
                records = []

            entities: dict[str, E] = {}
            skipped = 0
            for raw in records:
                try:
                    entity = self.codec.decode(raw)
                except DecodeError as e:
                    skipped += 1
                    logger.warning("Skipping unreadable %s record: %s", self.label, e)
                    continue
                entities[entity.id] = entity

            self._entities = entities
            self._loaded = True
            logger.debug("Loaded %d %s (%d skipped)", len(entities), self.label, skipped)

    async def _read(self) -> str | None:
        try:
            return await self._medium.get(self.storage_key)
        except Exception as e:
            raise LoadError(f"durable read failed: {e}", key=self.storage_key) from e

    # ------------------------------------------------------------------
    # persist
    # ------------------------------------------------------------------

    def _schedule_persist(self) -> None:
        self._debouncer.trigger()

    async def _write_snapshot(self) -> None:
        # Serialized so a slow write can never land after a newer one.
        async with self._write_lock:
            records = [self.codec.encode(entity) for entity in self._entities.values()]
            try:
                await self._persist(dump_document(records))
            except PersistError as e:
                logger.warning("Failed to persist %s: %s", self.label, e, exc_info=True)
                return
            logger.debug("Persisted %d %s", len(records), self.label)

    async def _persist(self, document: str) -> None:
        try:
            await self._medium.set(self.storage_key, document)
        except Exception as e:
            raise PersistError(f"durable write failed: {e}", key=self.storage_key) from e

    async def flush(self) -> None:
        """Write any pending changes now and wait for in-flight writes."""
        await self._debouncer.flush()

    async def aclose(self) -> None:
        await self.flush()

    # ------------------------------------------------------------------
    # reads
    # ------------------------------------------------------------------

    async def get_all(self) -> list[E]:
        """Visible (not soft-deleted) entities, ascending by natural key."""
        await self.ensure_loaded()
        return sorted((e for e in self._entities.values() if not e.deleted), key=self._sort_key)

    async def get_one(self, entity_id: str) -> E | None:
        """
        The cached entity by id, soft-deleted or not.

        Edit, duplicate and toggle flows look entities up here before
        re-upserting them, so this must not filter deleted records.
        """
        await self.ensure_loaded()
        return self._entities.get(entity_id)

    # ------------------------------------------------------------------
    # writes
    # ------------------------------------------------------------------

    async def upsert(self, entity: E) -> None:
        if not isinstance(entity, self.codec.model):
            raise TypeError(f"expected {self.codec.model.__name__}, got {type(entity).__name__}")
        await self.ensure_loaded()
        # model_copy(update=...) skips validation; re-validate so timestamps are normalized.
        self._entities[entity.id] = self.codec.model.model_validate(entity.model_dump())
        self._schedule_persist()

    async def soft_delete(self, entity_id: str) -> None:
        await self.ensure_loaded()
        entity = self._entities.get(entity_id)
        if entity is None:
            return
        self._entities[entity_id] = entity.model_copy(update={"deleted": True})
        self._schedule_persist()

    async def hard_delete(self, entity_id: str) -> None:
        await self.ensure_loaded()
        self._entities.pop(entity_id, None)
        self._schedule_persist()

    async def _restore(self, entity_id: str) -> None:
        await self.ensure_loaded()
        entity = self._entities.get(entity_id)
        if entity is None or not entity.deleted:
            return
        self._entities[entity_id] = entity.model_copy(update={"deleted": False})
        self._schedule_persist()

    async def clear(self) -> None:
        """Empty the cache and remove the durable key right away."""
        async with self._load_lock:
            self._debouncer.cancel()
            self._entities.clear()
            self._loaded = True
        async with self._write_lock:
            try:
                await self._medium.remove(self.storage_key)
            except Exception as e:
                err = PersistError(f"durable remove failed: {e}", key=self.storage_key)
                logger.warning("Failed to clear %s: %s", self.label, err, exc_info=True)
