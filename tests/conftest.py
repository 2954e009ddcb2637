from __future__ import annotations

from datetime import datetime, timedelta, timezone
from pathlib import Path
import sys


import pytest


# Ensure the repository root (parent of ./tests) is importable during pytest collection.
# This avoids ModuleNotFoundError for imports like `import persistence...` under pytest import modes
# that don't automatically prepend the cwd/rootdir to sys.path.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from persistence.memory_store import InMemoryKeyValueMedium  # noqa: E402
from persistence.models import Todo, TodoList  # noqa: E402
from settings import Settings  # noqa: E402

# Short enough to keep tests quick, long enough that back-to-back calls land inside it.
FAST_DEBOUNCE = 0.05

DAY_ONE = datetime(2024, 1, 10, tzinfo=timezone.utc)


def day(n: int) -> datetime:
    """Start of day ``n``; day(1) is 2024-01-10."""
    return DAY_ONE + timedelta(days=n - 1)


def make_todo(todo_id: str, scheduled_for: datetime | None = None, **fields) -> Todo:
    fields.setdefault("title", f"todo {todo_id}")
    fields.setdefault("created_at", DAY_ONE)
    return Todo(id=todo_id, scheduled_for=scheduled_for or DAY_ONE, **fields)


def make_list(list_id: str, created_at: datetime | None = None, **fields) -> TodoList:
    fields.setdefault("name", f"list {list_id}")
    return TodoList(id=list_id, created_at=created_at or DAY_ONE, **fields)


@pytest.fixture
def medium() -> InMemoryKeyValueMedium:
    return InMemoryKeyValueMedium()


@pytest.fixture
def sandbox_settings(tmp_path: Path) -> Settings:
    """
    Settings pointing at a temp data dir so tests never touch real ./data.
    """
    return Settings(
        data_dir=tmp_path / "data",
        persist_to_disk=True,
        persist_debounce_ms=10,
        timezone="UTC",
        log_level="WARNING",
    )
