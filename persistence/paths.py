from __future__ import annotations

import re
from pathlib import Path

_UNSAFE_KEY_CHARS = re.compile(r"[^A-Za-z0-9_.-]+")


def ensure_dir(path: Path) -> Path:
    path.mkdir(parents=True, exist_ok=True)
    return path


def key_filename(key: str) -> str:
    """
    Map a storage key to a file name, e.g. "@yata_todos" -> "yata_todos.json".

    Not injective: "@yata_todos" and "yata_todos" share a file. DiskKeyValueMedium
    refuses a second key that lands on an already claimed file.
    """
    stem = _UNSAFE_KEY_CHARS.sub("_", key).strip("_.")
    if not stem:
        raise ValueError(f"Storage key {key!r} has no usable characters")
    return f"{stem}.json"


def key_path(data_dir: Path, key: str) -> Path:
    return data_dir / key_filename(key)
