from __future__ import annotations

from fastapi import HTTPException, Request

from persistence.repositories import StorePlannerRepository


def get_planner(request: Request) -> StorePlannerRepository:
    planner = getattr(request.app.state, "planner", None)
    if planner is None:
        raise HTTPException(status_code=503, detail="planner not initialised")
    return planner


def not_found(kind: str, entity_id: str) -> HTTPException:
    return HTTPException(status_code=404, detail=f"{kind} not found: {entity_id}")
