from __future__ import annotations

import contextlib
import logging

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from dotenv import load_dotenv

from endpoints.dependencies import get_planner
from persistence.repositories import StorePlannerRepository, create_planner_repository
from settings import Settings, get_settings

logger = logging.getLogger(__name__)


@contextlib.asynccontextmanager
async def lifespan(app: FastAPI):
    try:
        yield
    finally:
        # Write out anything still inside the debounce window.
        await app.state.planner.aclose()


def create_app(settings: Settings | None = None, *, planner: StorePlannerRepository | None = None) -> FastAPI:
    load_dotenv("local.env")
    settings = settings or get_settings()
    logging.basicConfig(level=settings.log_level)

    from endpoints.list_endpoints import router as list_router
    from endpoints.todo_endpoints import router as todo_router

    app = FastAPI(lifespan=lifespan)
    app.state.planner = planner or create_planner_repository(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/healthz")
    async def healthz():
        return {"ok": True}

    @app.post("/reset", status_code=204)
    async def reset(planner: StorePlannerRepository = Depends(get_planner)):
        await planner.reset()
        logger.info("Cleared all todos and lists")

    app.include_router(todo_router)
    app.include_router(list_router)

    return app
