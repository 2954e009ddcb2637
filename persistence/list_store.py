from __future__ import annotations

from datetime import datetime

from .codec import LIST_CODEC
from .entity_store import EntityStore
from .models import TodoList

LISTS_KEY = "@yata_lists"


class ListStore(EntityStore[TodoList]):
    storage_key = LISTS_KEY
    label = "lists"
    codec = LIST_CODEC

    def _sort_key(self, entity: TodoList) -> datetime:
        return entity.created_at

    async def get_lists(self) -> list[TodoList]:
        return await self.get_all()

    async def get_list(self, list_id: str) -> TodoList | None:
        return await self.get_one(list_id)
