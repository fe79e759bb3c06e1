"""
Configuration helpers for the recovery backend.

Routers/repositories read the Settings object instead of fetching os.environ
directly (storage backend, database URL, demo user, logging level, etc.).
"""

from dataclasses import dataclass
from functools import lru_cache
import os


@dataclass(frozen=True)
class Settings:
    """Typed view of environment variables."""

    app_env: str
    public_base_url: str
    storage_backend: str
    database_url: str
    log_level: str
    demo_user_id: int
    mood_log_default_limit: int


@lru_cache
def get_settings() -> Settings:
    """Read the current environment and build a Settings instance."""
    def _int(value: str | None, default: int = 0) -> int:
        try:
            return int(value)
        except (TypeError, ValueError):
            return default

    return Settings(
        app_env=(os.getenv("APP_ENV") or "dev").lower(),
        public_base_url=os.getenv("PUBLIC_BASE_URL", "http://localhost:8000").rstrip("/"),
        storage_backend=(os.getenv("STORAGE_BACKEND") or "memory").strip().lower(),
        database_url=os.getenv("DATABASE_URL", "").strip(),
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
        demo_user_id=_int(os.getenv("DEMO_USER_ID", "1"), 1),
        mood_log_default_limit=_int(os.getenv("MOOD_LOG_DEFAULT_LIMIT", "10"), 10),
    )
