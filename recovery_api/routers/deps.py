"""Shared FastAPI dependencies."""
from __future__ import annotations

from fastapi import Request

from recovery_api.core.config import Settings, get_settings
from recovery_api.repositories.base import Storage


def get_storage(request: Request) -> Storage:
    storage = getattr(getattr(request.app, "state", None), "storage", None)
    if storage is None:
        raise RuntimeError("Storage not configured")
    return storage


def get_app_settings(request: Request) -> Settings:
    return getattr(getattr(request.app, "state", None), "settings", None) or get_settings()


def resolve_user_id(user_id: int | None, settings: Settings) -> int:
    """Requests without an explicit user act on behalf of the demo user."""
    return user_id if user_id is not None else settings.demo_user_id
