from __future__ import annotations

from pathlib import Path


def read_document(path: Path) -> str | None:
    """
    Read a stored JSON document as text.

    Returns None for missing or blank files. I/O errors propagate so the caller
    can decide how to degrade.
    """
    if not path.exists():
        return None
    raw = path.read_text(encoding="utf-8")
    if not raw.strip():
        return None
    return raw


def atomic_write_document(path: Path, text: str) -> None:
    """
    Atomically write a document to disk by writing to a temp file then replacing.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_suffix(path.suffix + ".tmp")
    with tmp_path.open("w", encoding="utf-8") as f:
        f.write(text)
        f.write("\n")
    tmp_path.replace(path)


def remove_document(path: Path) -> None:
    path.unlink(missing_ok=True)
    path.with_suffix(path.suffix + ".tmp").unlink(missing_ok=True)
