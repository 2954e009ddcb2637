from __future__ import annotations

from datetime import date, datetime
from typing import Annotated, Any

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict, Field, PlainValidator
from pydantic.alias_generators import to_camel

from endpoints.dependencies import get_planner, not_found
from persistence.codec import TODO_CODEC
from persistence.errors import DecodeError
from persistence.models import Todo
from persistence.repositories import StorePlannerRepository

router = APIRouter(tags=["todos"])


def _parse_day_input(value: Any) -> date | datetime:
    # A bare "YYYY-MM-DD" is a calendar day in the configured zone, not UTC midnight.
    if isinstance(value, (date, datetime)):
        return value
    if not isinstance(value, str):
        raise ValueError(f"expected an ISO-8601 date or datetime, got {value!r}")
    text = value.strip()
    try:
        return date.fromisoformat(text) if len(text) == 10 else datetime.fromisoformat(text)
    except ValueError as e:
        raise ValueError(f"expected an ISO-8601 date or datetime, got {value!r}") from e


DayInput = Annotated[date | datetime, PlainValidator(_parse_day_input, json_schema_input_type=str)]


class _Body(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class NewTodoBody(_Body):
    title: str = Field(min_length=1)
    scheduled_for: DayInput
    long_term: bool = False
    list_id: str | None = None
    notes: str | None = None


class EditTodoBody(_Body):
    title: str = Field(min_length=1)


class MoveTodoBody(_Body):
    day: DayInput


class ReorderBody(_Body):
    ids: list[str]


class RolloverBody(_Body):
    today: DayInput | None = None


def _out(todo: Todo) -> dict[str, Any]:
    return TODO_CODEC.encode(todo)


def _out_many(todos: list[Todo]) -> list[dict[str, Any]]:
    return [TODO_CODEC.encode(t) for t in todos]


@router.get("/todos")
async def list_todos(planner: StorePlannerRepository = Depends(get_planner)):
    return _out_many(await planner.todos.get_todos())


@router.post("/todos", status_code=201)
async def create_todo(body: NewTodoBody, planner: StorePlannerRepository = Depends(get_planner)):
    try:
        todo = await planner.add_todo(
            body.title,
            body.scheduled_for,
            long_term=body.long_term,
            list_id=body.list_id,
            notes=body.notes,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    return _out(todo)


@router.post("/todos/reorder")
async def reorder_todos(body: ReorderBody, planner: StorePlannerRepository = Depends(get_planner)):
    return _out_many(await planner.reorder(body.ids))


@router.post("/todos/rollover")
async def roll_over_todos(body: RolloverBody | None = None, planner: StorePlannerRepository = Depends(get_planner)):
    today = body.today if body is not None else None
    return _out_many(await planner.roll_over_overdue(today))


@router.get("/todos/{todo_id}")
async def get_todo(todo_id: str, planner: StorePlannerRepository = Depends(get_planner)):
    # Soft-deleted todos are still returned by id.
    todo = await planner.todos.get_todo(todo_id)
    if todo is None:
        raise not_found("todo", todo_id)
    return _out(todo)


@router.put("/todos/{todo_id}")
async def put_todo(todo_id: str, body: dict[str, Any], planner: StorePlannerRepository = Depends(get_planner)):
    """Full replace: the body is a stored-record shaped todo."""
    try:
        todo = TODO_CODEC.decode(body)
    except DecodeError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    if todo.id != todo_id:
        raise HTTPException(status_code=400, detail="id in body does not match path")
    await planner.todos.upsert(todo)
    return _out(todo)


@router.delete("/todos/{todo_id}", status_code=204)
async def delete_todo(todo_id: str, hard: bool = False, planner: StorePlannerRepository = Depends(get_planner)):
    # Unknown ids are a no-op, matching the store.
    if hard:
        await planner.todos.hard_delete(todo_id)
    else:
        await planner.todos.soft_delete(todo_id)


@router.post("/todos/{todo_id}/restore")
async def restore_todo(todo_id: str, planner: StorePlannerRepository = Depends(get_planner)):
    await planner.todos.restore(todo_id)
    todo = await planner.todos.get_todo(todo_id)
    if todo is None:
        raise not_found("todo", todo_id)
    return _out(todo)


@router.patch("/todos/{todo_id}")
async def edit_todo(todo_id: str, body: EditTodoBody, planner: StorePlannerRepository = Depends(get_planner)):
    try:
        todo = await planner.edit_title(todo_id, body.title)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    if todo is None:
        raise not_found("todo", todo_id)
    return _out(todo)


@router.post("/todos/{todo_id}/toggle-complete")
async def toggle_complete(todo_id: str, planner: StorePlannerRepository = Depends(get_planner)):
    todo = await planner.toggle_complete(todo_id)
    if todo is None:
        raise not_found("todo", todo_id)
    return _out(todo)


@router.post("/todos/{todo_id}/toggle-long-term")
async def toggle_long_term(todo_id: str, planner: StorePlannerRepository = Depends(get_planner)):
    todo = await planner.toggle_long_term(todo_id)
    if todo is None:
        raise not_found("todo", todo_id)
    return _out(todo)


@router.post("/todos/{todo_id}/move")
async def move_todo(todo_id: str, body: MoveTodoBody, planner: StorePlannerRepository = Depends(get_planner)):
    todo = await planner.move_todo(todo_id, body.day)
    if todo is None:
        raise not_found("todo", todo_id)
    return _out(todo)


@router.post("/todos/{todo_id}/duplicate", status_code=201)
async def duplicate_todo(todo_id: str, planner: StorePlannerRepository = Depends(get_planner)):
    todo = await planner.duplicate(todo_id)
    if todo is None:
        raise not_found("todo", todo_id)
    return _out(todo)


@router.get("/days/{day}/todos")
async def todos_for_day(day: date, planner: StorePlannerRepository = Depends(get_planner)):
    return _out_many(await planner.todos_for_day(day))


@router.get("/backlog")
async def backlog(planner: StorePlannerRepository = Depends(get_planner)):
    return _out_many(await planner.long_term_todos())
