from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return int(raw)


@dataclass(frozen=True)
class Settings:
    # Storage
    data_dir: Path
    persist_to_disk: bool
    persist_debounce_ms: int

    # Day bucketing (IANA zone name)
    timezone: str

    # Logging
    log_level: str

    @property
    def persist_debounce_seconds(self) -> float:
        return self.persist_debounce_ms / 1000.0


def get_settings() -> Settings:
    default_data_dir = Path(__file__).resolve().parent / "data"
    data_dir = Path(os.getenv("YATA_DATA_DIR") or default_data_dir)

    # Off means everything lives in memory for the life of the process.
    persist_to_disk = _env_bool("PERSIST_TO_DISK", True)
    persist_debounce_ms = max(0, _env_int("PERSIST_DEBOUNCE_MS", 300))

    timezone = (os.getenv("YATA_TIMEZONE") or "UTC").strip()
    log_level = (os.getenv("LOG_LEVEL") or "INFO").strip().upper()

    return Settings(
        data_dir=data_dir,
        persist_to_disk=persist_to_disk,
        persist_debounce_ms=persist_debounce_ms,
        timezone=timezone,
        log_level=log_level,
    )
