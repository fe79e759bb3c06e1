"""Pick the Storage backend named in Settings."""
from __future__ import annotations

import logging

from recovery_api.core.config import Settings
from recovery_api.db.create_tables import create_all
from recovery_api.repositories.base import Storage
from recovery_api.repositories.memory_storage import MemoryStorage
from recovery_api.repositories.sql_repository import SQLStorage

logger = logging.getLogger(__name__)

BACKENDS = ("memory", "sql")


def create_storage(settings: Settings) -> Storage:
    backend = settings.storage_backend
    if backend == "memory":
        logger.info("Using in-memory storage (demo data, lost on restart)")
        return MemoryStorage()
    if backend == "sql":
        create_all()
        logger.info("Using SQL storage")
        return SQLStorage()
    raise ValueError(f"Unknown STORAGE_BACKEND {backend!r}; expected one of {', '.join(BACKENDS)}")
