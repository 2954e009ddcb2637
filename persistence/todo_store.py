from __future__ import annotations

from datetime import datetime

from .codec import TODO_CODEC
from .entity_store import EntityStore
from .models import Todo

TODOS_KEY = "@yata_todos"


class TodoStore(EntityStore[Todo]):
    storage_key = TODOS_KEY
    label = "todos"
    codec = TODO_CODEC

    def _sort_key(self, entity: Todo) -> datetime:
        return entity.scheduled_for

    async def get_todos(self) -> list[Todo]:
        return await self.get_all()

    async def get_todo(self, todo_id: str) -> Todo | None:
        return await self.get_one(todo_id)

    async def restore(self, todo_id: str) -> None:
        """Bring back a soft-deleted todo. No-op if it is missing or not deleted."""
        await self._restore(todo_id)
