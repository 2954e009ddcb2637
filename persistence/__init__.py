from __future__ import annotations

from .disk_store import DiskKeyValueMedium
from .entity_store import EntityStore
from .errors import DecodeError, LoadError, PersistError, StoreError
from .interfaces import KeyValueMedium
from .list_store import LISTS_KEY, ListStore
from .memory_store import InMemoryKeyValueMedium
from .models import Todo, TodoList
from .repositories import PlannerRepository, StorePlannerRepository, create_planner_repository
from .todo_store import TODOS_KEY, TodoStore

__all__ = [
    "KeyValueMedium",
    "DiskKeyValueMedium",
    "InMemoryKeyValueMedium",
    "Todo",
    "TodoList",
    "EntityStore",
    "TodoStore",
    "ListStore",
    "TODOS_KEY",
    "LISTS_KEY",
    "StoreError",
    "LoadError",
    "DecodeError",
    "PersistError",
    "PlannerRepository",
    "StorePlannerRepository",
    "create_planner_repository",
]
