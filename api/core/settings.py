"""
Process settings read from environment variables.

Everything here has a development-friendly default so the API can start
locally with only DATABASE_URL set.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

DEFAULT_UPLOAD_DIR = "uploads"
DEFAULT_MAX_IMAGE_BYTES = 5 * 1024 * 1024  # 5 MiB
DEFAULT_POOL_MAX_SIZE = 5
DEFAULT_CORS_ORIGINS = ("http://localhost:3000", "http://127.0.0.1:3000")


def _env_str(name: str, default: str) -> str:
    return os.environ.get(name, default).strip() or default


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.environ.get(name, "").strip().lower()
    if not raw:
        return default
    return raw in {"1", "true", "yes", "on"}


def _env_list(name: str, default: tuple[str, ...]) -> tuple[str, ...]:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    return tuple(part.strip() for part in raw.split(",") if part.strip())


@dataclass(frozen=True)
class Settings:
    database_url: str
    db_pool_max_size: int
    db_create_schema: bool
    upload_dir: Path
    max_image_bytes: int
    app_env: str
    log_level: str
    cors_origins: tuple[str, ...]

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"

    @property
    def is_development(self) -> bool:
        return self.app_env == "development"


def load_settings() -> Settings:
    max_image_bytes = _env_int("MAX_IMAGE_BYTES", DEFAULT_MAX_IMAGE_BYTES)
    if max_image_bytes <= 0:
        max_image_bytes = DEFAULT_MAX_IMAGE_BYTES

    pool_max_size = _env_int("DB_POOL_MAX_SIZE", DEFAULT_POOL_MAX_SIZE)
    if pool_max_size <= 0:
        pool_max_size = DEFAULT_POOL_MAX_SIZE

    # Relative paths resolve against the working directory the server runs in.
    upload_dir = Path(_env_str("UPLOAD_DIR", DEFAULT_UPLOAD_DIR)).resolve()

    return Settings(
        database_url=os.environ.get("DATABASE_URL", "").strip(),
        db_pool_max_size=pool_max_size,
        db_create_schema=_env_bool("DB_CREATE_SCHEMA"),
        upload_dir=upload_dir,
        max_image_bytes=max_image_bytes,
        app_env=_env_str("APP_ENV", "development").lower(),
        log_level=_env_str("LOG_LEVEL", "INFO").upper(),
        cors_origins=_env_list("CORS_ORIGINS", DEFAULT_CORS_ORIGINS),
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Cached settings; also used as a FastAPI dependency so tests can override it.
    """
    return load_settings()
