"""
Configuration helpers for the Sherlouk backend.

Routers/services never fetch os.environ directly: they receive a Settings
instance (from get_settings() or handed to create_app in tests).
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
import os

ROOT_DIR = Path(__file__).resolve().parents[2]


@dataclass(frozen=True)
class Settings:
    """Typed view of environment variables."""

    app_env: str
    host: str
    port: int
    data_file: Path
    static_dir: Path
    cors_origins: tuple[str, ...]
    log_level: str


def _int(value: str | None, default: int = 0) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _list(value: str | None, default: tuple[str, ...] = ()) -> tuple[str, ...]:
    if value is None:
        return default
    items = tuple(part.strip() for part in value.split(",") if part.strip())
    return items or default


@lru_cache
def get_settings() -> Settings:
    """Read the current environment and build a Settings instance."""
    return Settings(
        app_env=(os.getenv("APP_ENV") or "dev").lower(),
        host=os.getenv("HOST", "127.0.0.1"),
        port=_int(os.getenv("PORT", "4000"), 4000),
        data_file=Path(os.getenv("DATA_FILE") or ROOT_DIR / "db.json"),
        static_dir=Path(os.getenv("STATIC_DIR") or ROOT_DIR / "dist"),
        cors_origins=_list(os.getenv("CORS_ORIGINS"), ("*",)),
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
    )
