from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query

from recovery_api.core.config import Settings
from recovery_api.repositories.base import Storage
from recovery_api.routers.deps import get_app_settings, get_storage
from recovery_api.schemas import MoodLogIn

router = APIRouter(prefix="/api/mood-logs", tags=["mood-logs"])


@router.get("/{user_id}")
def list_mood_logs(
    user_id: int,
    limit: Optional[int] = Query(None, ge=1),
    storage: Storage = Depends(get_storage),
    settings: Settings = Depends(get_app_settings),
):
    return storage.get_mood_logs_by_user(user_id, limit or settings.mood_log_default_limit)


@router.post("", status_code=201)
def create_mood_log(payload: MoodLogIn, storage: Storage = Depends(get_storage)):
    return storage.create_mood_log(payload.to_domain())
