from __future__ import annotations

import logging
import time
import uuid
from datetime import date, datetime, timezone
from typing import Callable, Iterable, Protocol

from settings import Settings

from .days import is_same_day, normalize_to_day, start_of_today
from .disk_store import DiskKeyValueMedium
from .interfaces import KeyValueMedium
from .list_store import ListStore
from .memory_store import InMemoryKeyValueMedium
from .models import Todo, TodoList, normalize_timestamp
from .todo_store import TodoStore

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_id(prefix: str) -> str:
    return f"{prefix}-{int(time.time() * 1000)}-{uuid.uuid4().hex[:9]}"


def _manual_order(todos: Iterable[Todo]) -> list[Todo]:
    # Explicit sort_order first (lower first); unset keeps store order at the end.
    return sorted(todos, key=lambda t: (t.sort_order is None, t.sort_order or 0))


class PlannerRepository(Protocol):
    """
    The flows the planner screens run against the stores.
    Every mutation is "fetch by id, build a changed copy, upsert".
    """

    async def add_todo(
        self,
        title: str,
        scheduled_for: datetime | date,
        *,
        long_term: bool = False,
        list_id: str | None = None,
        notes: str | None = None,
    ) -> Todo: ...

    async def edit_title(self, todo_id: str, title: str) -> Todo | None: ...
    async def toggle_complete(self, todo_id: str) -> Todo | None: ...
    async def toggle_long_term(self, todo_id: str) -> Todo | None: ...
    async def move_todo(self, todo_id: str, day: datetime | date) -> Todo | None: ...
    async def duplicate(self, todo_id: str) -> Todo | None: ...
    async def reorder(self, todo_ids: list[str]) -> list[Todo]: ...
    async def roll_over_overdue(self, today: datetime | date | None = None) -> list[Todo]: ...

    async def todos_for_day(self, day: datetime | date) -> list[Todo]: ...
    async def long_term_todos(self) -> list[Todo]: ...
    async def todos_for_list(self, list_id: str) -> list[Todo]: ...

    async def add_list(self, name: str, color: str | None = None) -> TodoList: ...
    async def rename_list(self, list_id: str, *, name: str | None = None, color: str | None = None) -> TodoList | None: ...
    async def delete_list(self, list_id: str) -> int: ...

    async def reset(self) -> None: ...
    async def aclose(self) -> None: ...


class StorePlannerRepository(PlannerRepository):
    """
    PlannerRepository over a TodoStore and a ListStore.

    Day-based operations bucket by calendar day in ``tz``.
    """

    def __init__(
        self,
        todos: TodoStore,
        lists: ListStore,
        *,
        tz: str = "UTC",
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.todos = todos
        self.lists = lists
        self._tz = tz
        self._clock = clock

    def _now(self) -> datetime:
        return normalize_timestamp(self._clock())

    def _day(self, value: datetime | date) -> datetime:
        return normalize_to_day(value, self._tz)

    async def _update(self, todo_id: str, **changes) -> Todo | None:
        todo = await self.todos.get_todo(todo_id)
        if todo is None:
            return None
        await self.todos.upsert(todo.model_copy(update={**changes, "updated_at": self._now()}))
        return await self.todos.get_todo(todo_id)

    # ------------------------------------------------------------------
    # todos
    # ------------------------------------------------------------------

    async def add_todo(
        self,
        title: str,
        scheduled_for: datetime | date,
        *,
        long_term: bool = False,
        list_id: str | None = None,
        notes: str | None = None,
    ) -> Todo:
        title = title.strip()
        if not title:
            raise ValueError("title must not be empty")

        todo = Todo(
            id=new_id("todo"),
            title=title,
            notes=notes,
            created_at=self._now(),
            scheduled_for=self._day(scheduled_for),
            deleted=False,
            long_term=long_term,
            list_id=list_id,
        )
        await self.todos.upsert(todo)
        return todo

    async def edit_title(self, todo_id: str, title: str) -> Todo | None:
        title = title.strip()
        if not title:
            raise ValueError("title must not be empty")
        return await self._update(todo_id, title=title)

    async def toggle_complete(self, todo_id: str) -> Todo | None:
        todo = await self.todos.get_todo(todo_id)
        if todo is None:
            return None
        return await self._update(todo_id, completed_at=None if todo.completed else self._now())

    async def toggle_long_term(self, todo_id: str) -> Todo | None:
        todo = await self.todos.get_todo(todo_id)
        if todo is None:
            return None
        return await self._update(todo_id, long_term=not todo.long_term)

    async def move_todo(self, todo_id: str, day: datetime | date) -> Todo | None:
        return await self._update(todo_id, scheduled_for=self._day(day))

    async def duplicate(self, todo_id: str) -> Todo | None:
        original = await self.todos.get_todo(todo_id)
        if original is None:
            return None
        copy = Todo(
            id=new_id("todo"),
            title=original.title,
            notes=original.notes,
            created_at=self._now(),
            scheduled_for=original.scheduled_for,
            deleted=False,
            list_id=original.list_id,
        )
        await self.todos.upsert(copy)
        return copy

    async def reorder(self, todo_ids: list[str]) -> list[Todo]:
        reordered: list[Todo] = []
        for index, todo_id in enumerate(todo_ids):
            updated = await self._update(todo_id, sort_order=index)
            if updated is None:
                logger.debug("Skipping unknown todo %s in reorder", todo_id)
                continue
            reordered.append(updated)
        return reordered

    async def roll_over_overdue(self, today: datetime | date | None = None) -> list[Todo]:
        target = self._day(today) if today is not None else start_of_today(self._tz, now=self._now())
        overdue = [
            t for t in await self.todos.get_todos()
            if not t.completed and not t.long_term and t.scheduled_for < target
        ]
        moved: list[Todo] = []
        for todo in overdue:
            updated = await self._update(todo.id, scheduled_for=target)
            if updated is not None:
                moved.append(updated)
        if moved:
            logger.info("Rolled %d overdue todo(s) over to %s", len(moved), target.date().isoformat())
        return moved

    async def todos_for_day(self, day: datetime | date) -> list[Todo]:
        todos = await self.todos.get_todos()
        return _manual_order(t for t in todos if not t.long_term and is_same_day(t.scheduled_for, day, self._tz))

    async def long_term_todos(self) -> list[Todo]:
        return _manual_order(t for t in await self.todos.get_todos() if t.long_term)

    async def todos_for_list(self, list_id: str) -> list[Todo]:
        return _manual_order(t for t in await self.todos.get_todos() if t.list_id == list_id)

    # ------------------------------------------------------------------
    # lists
    # ------------------------------------------------------------------

    async def add_list(self, name: str, color: str | None = None) -> TodoList:
        name = name.strip()
        if not name:
            raise ValueError("name must not be empty")
        todo_list = TodoList(id=new_id("list"), name=name, color=color, created_at=self._now(), deleted=False)
        await self.lists.upsert(todo_list)
        return todo_list

    async def rename_list(self, list_id: str, *, name: str | None = None, color: str | None = None) -> TodoList | None:
        todo_list = await self.lists.get_list(list_id)
        if todo_list is None:
            return None
        changes: dict[str, str] = {}
        if name is not None:
            name = name.strip()
            if not name:
                raise ValueError("name must not be empty")
            changes["name"] = name
        if color is not None:
            changes["color"] = color
        await self.lists.upsert(todo_list.model_copy(update=changes))
        return await self.lists.get_list(list_id)

    async def delete_list(self, list_id: str) -> int:
        """Soft-delete the list and every visible todo in it. Returns the todo count."""
        await self.lists.soft_delete(list_id)
        members = await self.todos_for_list(list_id)
        for todo in members:
            await self.todos.soft_delete(todo.id)
        return len(members)

    # ------------------------------------------------------------------
    # lifecycle
    # ------------------------------------------------------------------

    async def reset(self) -> None:
        await self.todos.clear()
        await self.lists.clear()

    async def aclose(self) -> None:
        await self.todos.aclose()
        await self.lists.aclose()


def open_medium(settings: Settings) -> KeyValueMedium:
    if settings.persist_to_disk:
        return DiskKeyValueMedium(settings.data_dir)
    logger.info("PERSIST_TO_DISK is off; todos and lists live in memory only")
    return InMemoryKeyValueMedium()


def create_planner_repository(settings: Settings, *, medium: KeyValueMedium | None = None) -> StorePlannerRepository:
    medium = medium if medium is not None else open_medium(settings)
    delay = settings.persist_debounce_seconds
    return StorePlannerRepository(
        TodoStore(medium, debounce_seconds=delay),
        ListStore(medium, debounce_seconds=delay),
        tz=settings.timezone,
    )
