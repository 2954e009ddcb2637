from __future__ import annotations

import json
import logging
from datetime import datetime
from typing import Any, Callable, Generic, Mapping, TypeVar

from pydantic import ValidationError

from .errors import DecodeError, LoadError
from .models import EntityRecord, Todo, TodoList, normalize_timestamp

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=EntityRecord)

# Version written into every stored document. Bump together with a MIGRATIONS entry.
SCHEMA_VERSION = 1


def format_timestamp(value: datetime) -> str:
    """ISO-8601, UTC, millisecond precision: 2024-01-10T00:00:00.000Z"""
    return normalize_timestamp(value).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_timestamp(raw: Any, field: str) -> datetime:
    if not isinstance(raw, str) or not raw.strip():
        raise DecodeError(f"{field} is not an ISO-8601 string: {raw!r}")
    try:
        return normalize_timestamp(datetime.fromisoformat(raw.strip()))
    except (ValueError, OverflowError) as e:
        raise DecodeError(f"{field} is not an ISO-8601 string: {raw!r}") from e


class RecordCodec(Generic[E]):
    """
    Maps an entity to its storable record (timestamps as ISO-8601 strings) and back.

    Absent optional fields stay absent in the record: never null, never "".
    """

    def __init__(self, model: type[E], *, required_timestamps: tuple[str, ...], optional_timestamps: tuple[str, ...] = ()):
        self.model = model
        self.required_timestamps = required_timestamps
        self.timestamp_fields = required_timestamps + optional_timestamps

    def encode(self, entity: E) -> dict[str, Any]:
        record = entity.model_dump(by_alias=True, exclude_none=True)
        for field in self.timestamp_fields:
            if field in record:
                record[field] = format_timestamp(record[field])
        return record

    def decode(self, record: Any) -> E:
        if not isinstance(record, Mapping):
            raise DecodeError(f"{self.model.__name__} record is not an object: {type(record).__name__}")

        data = dict(record)
        record_id = data.get("id") if isinstance(data.get("id"), str) else None

        for field in self.required_timestamps:
            if data.get(field) is None:
                raise DecodeError(f"missing required timestamp {field}", record_id=record_id)

        for field in self.timestamp_fields:
            raw = data.get(field)
            if raw is None:
                data.pop(field, None)
                continue
            try:
                data[field] = parse_timestamp(raw, field)
            except DecodeError as e:
                e.record_id = record_id
                raise

        try:
            return self.model.model_validate(data)
        except ValidationError as e:
            raise DecodeError(
                f"invalid {self.model.__name__} record ({e.error_count()} error(s))",
                record_id=record_id,
            ) from e


TODO_CODEC: RecordCodec[Todo] = RecordCodec(
    Todo,
    required_timestamps=("createdAt", "scheduledFor"),
    optional_timestamps=("updatedAt", "completedAt"),
)

LIST_CODEC: RecordCodec[TodoList] = RecordCodec(TodoList, required_timestamps=("createdAt",))


def _from_unversioned(records: list[Any]) -> list[Any]:
    # The legacy format was a bare array with the same record shape.
    return records


# version -> step that upgrades records from that version to version + 1
MIGRATIONS: dict[int, Callable[[list[Any]], list[Any]]] = {
    0: _from_unversioned,
}


def load_document(raw: str | None, *, key: str | None = None) -> list[Any]:
    """
    Parse a stored document into its (migrated) list of raw records.

    - None / blank -> []
    - bare JSON array -> legacy unversioned document (version 0)
    - {"version": n, "records": [...]} -> current format

    Raises LoadError for invalid JSON or any other top-level shape.
    """
    if raw is None or not raw.strip():
        return []

    try:
        doc = json.loads(raw)
    except json.JSONDecodeError as e:
        raise LoadError(f"stored value is not valid JSON: {e.msg}", key=key) from e

    if isinstance(doc, list):
        version, records = 0, doc
    elif isinstance(doc, dict) and isinstance(doc.get("records"), list):
        version = doc.get("version")
        if not isinstance(version, int) or isinstance(version, bool) or version < 0:
            raise LoadError(f"stored document has an invalid version: {version!r}", key=key)
        records = doc["records"]
    else:
        raise LoadError(f"stored document has unexpected shape: {type(doc).__name__}", key=key)

    if version > SCHEMA_VERSION:
        logger.warning(
            "Stored document for %s has version %s, newer than %s; decoding best-effort",
            key,
            version,
            SCHEMA_VERSION,
        )
        return records

    while version < SCHEMA_VERSION:
        records = MIGRATIONS[version](records)
        version += 1
    return records


def dump_document(records: list[dict[str, Any]]) -> str:
    return json.dumps({"version": SCHEMA_VERSION, "records": records}, indent=2, sort_keys=True)
