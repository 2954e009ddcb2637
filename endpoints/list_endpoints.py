from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from endpoints.dependencies import get_planner, not_found
from persistence.codec import LIST_CODEC, TODO_CODEC
from persistence.errors import DecodeError
from persistence.repositories import StorePlannerRepository

router = APIRouter(tags=["lists"])


class NewListBody(BaseModel):
    name: str = Field(min_length=1)
    color: str | None = None


class ListPatchBody(BaseModel):
    name: str | None = None
    color: str | None = None


@router.get("/lists")
async def list_lists(planner: StorePlannerRepository = Depends(get_planner)):
    return [LIST_CODEC.encode(lst) for lst in await planner.lists.get_lists()]


@router.post("/lists", status_code=201)
async def create_list(body: NewListBody, planner: StorePlannerRepository = Depends(get_planner)):
    try:
        todo_list = await planner.add_list(body.name, body.color)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    return LIST_CODEC.encode(todo_list)


@router.get("/lists/{list_id}")
async def get_list(list_id: str, planner: StorePlannerRepository = Depends(get_planner)):
    todo_list = await planner.lists.get_list(list_id)
    if todo_list is None:
        raise not_found("list", list_id)
    return LIST_CODEC.encode(todo_list)


@router.put("/lists/{list_id}")
async def put_list(list_id: str, body: dict[str, Any], planner: StorePlannerRepository = Depends(get_planner)):
    try:
        todo_list = LIST_CODEC.decode(body)
    except DecodeError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    if todo_list.id != list_id:
        raise HTTPException(status_code=400, detail="id in body does not match path")
    await planner.lists.upsert(todo_list)
    return LIST_CODEC.encode(todo_list)


@router.patch("/lists/{list_id}")
async def patch_list(list_id: str, body: ListPatchBody, planner: StorePlannerRepository = Depends(get_planner)):
    try:
        todo_list = await planner.rename_list(list_id, name=body.name, color=body.color)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    if todo_list is None:
        raise not_found("list", list_id)
    return LIST_CODEC.encode(todo_list)


@router.delete("/lists/{list_id}")
async def delete_list(list_id: str, planner: StorePlannerRepository = Depends(get_planner)):
    deleted_todos = await planner.delete_list(list_id)
    return {"id": list_id, "deletedTodos": deleted_todos}


@router.get("/lists/{list_id}/todos")
async def list_todos(list_id: str, planner: StorePlannerRepository = Depends(get_planner)):
    return [TODO_CODEC.encode(t) for t in await planner.todos_for_list(list_id)]
