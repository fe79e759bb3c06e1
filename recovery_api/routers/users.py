from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from recovery_api.repositories.base import Storage
from recovery_api.routers.deps import get_storage
from recovery_api.schemas import UserOut, UserUpdateIn

router = APIRouter(prefix="/api/user", tags=["users"])


@router.get("/{user_id}", response_model=UserOut)
def get_user(user_id: int, storage: Storage = Depends(get_storage)):
    user = storage.get_user(user_id)
    if not user:
        raise HTTPException(404, "User not found")
    return user


@router.patch("/{user_id}", response_model=UserOut)
def update_user(user_id: int, payload: UserUpdateIn, storage: Storage = Depends(get_storage)):
    return storage.update_user(user_id, payload.to_domain())
