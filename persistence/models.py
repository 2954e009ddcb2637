from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


def normalize_timestamp(value: datetime) -> datetime:
    """
    Aware UTC, truncated to milliseconds. Naive values are taken to be UTC.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    else:
        value = value.astimezone(timezone.utc)
    return value.replace(microsecond=value.microsecond - value.microsecond % 1000)


class EntityRecord(BaseModel):
    """
    Fields shared by every stored entity.

    Entities are immutable: to change one, build a copy with
    ``model_copy(update=...)`` and upsert it. Attribute names are snake_case;
    the camelCase aliases are the keys used in the stored records.
    """

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    id: str = Field(min_length=1)
    created_at: datetime
    deleted: bool = False

    @field_validator("*", mode="after")
    @classmethod
    def _normalize_timestamps(cls, value: Any) -> Any:
        if isinstance(value, datetime):
            return normalize_timestamp(value)
        return value


class Todo(EntityRecord):
    title: str = Field(min_length=1)
    notes: str | None = None
    updated_at: datetime | None = None
    # Start of the day the todo belongs to.
    scheduled_for: datetime
    completed_at: datetime | None = None
    long_term: bool | None = None
    list_id: str | None = None
    sort_order: int | None = None

    @property
    def completed(self) -> bool:
        return self.completed_at is not None


class TodoList(EntityRecord):
    name: str = Field(min_length=1)
    color: str | None = None
