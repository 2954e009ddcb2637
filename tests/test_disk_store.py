from __future__ import annotations

import asyncio
import json

import pytest

from conftest import FAST_DEBOUNCE, make_todo
from persistence.disk_store import DiskKeyValueMedium
from persistence.paths import key_filename
from persistence.todo_store import TODOS_KEY, TodoStore


@pytest.mark.parametrize(
    "key, expected",
    [
        ("@yata_todos", "yata_todos.json"),
        ("@yata_lists", "yata_lists.json"),
        ("../../etc/passwd", "etc_passwd.json"),
    ],
)
def test_key_filename_sanitizes(key, expected):
    assert key_filename(key) == expected


def test_key_filename_rejects_empty_key():
    with pytest.raises(ValueError):
        key_filename("@@@")


def test_disk_medium_get_set_remove(tmp_path):
    async def _run():
        medium = DiskKeyValueMedium(tmp_path / "data")
        assert await medium.get(TODOS_KEY) is None

        await medium.set(TODOS_KEY, '{"version": 1, "records": []}')
        path = medium.path_for(TODOS_KEY)
        assert path.name == "yata_todos.json"
        assert not path.with_suffix(path.suffix + ".tmp").exists()
        assert json.loads(await medium.get(TODOS_KEY)) == {"version": 1, "records": []}

        await medium.remove(TODOS_KEY)
        assert not path.exists()
        assert await medium.get(TODOS_KEY) is None

        # Removing again is fine.
        await medium.remove(TODOS_KEY)

    asyncio.run(_run())


def test_blank_file_reads_as_missing(tmp_path):
    async def _run():
        medium = DiskKeyValueMedium(tmp_path)
        medium.path_for(TODOS_KEY).write_text("   \n", encoding="utf-8")
        assert await medium.get(TODOS_KEY) is None

    asyncio.run(_run())


def test_todo_store_survives_restart_on_disk(tmp_path):
    async def _run():
        store = TodoStore(DiskKeyValueMedium(tmp_path), debounce_seconds=FAST_DEBOUNCE)
        await store.upsert(make_todo("t1", title="Buy milk"))
        await store.aclose()

        restarted = TodoStore(DiskKeyValueMedium(tmp_path), debounce_seconds=FAST_DEBOUNCE)
        [todo] = await restarted.get_todos()
        assert todo.id == "t1"
        assert todo.title == "Buy milk"

    asyncio.run(_run())


def test_corrupt_file_degrades_to_empty(tmp_path):
    async def _run():
        medium = DiskKeyValueMedium(tmp_path)
        medium.path_for(TODOS_KEY).write_text("[{oops", encoding="utf-8")

        store = TodoStore(medium, debounce_seconds=FAST_DEBOUNCE)
        assert await store.get_todos() == []
        assert store.loaded is True

    asyncio.run(_run())


def test_colliding_keys_are_refused(tmp_path):
    medium = DiskKeyValueMedium(tmp_path / "data")
    assert medium.path_for("@yata_todos").name == "yata_todos.json"
    assert medium.path_for("@yata_todos").name == "yata_todos.json"
    with pytest.raises(ValueError):
        medium.path_for("yata_todos")
