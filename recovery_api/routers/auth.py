from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from recovery_api.repositories.base import Storage
from recovery_api.routers.deps import get_storage
from recovery_api.schemas import LoginIn, RegisterIn, UserOut

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/login", response_model=UserOut)
def login(payload: LoginIn, storage: Storage = Depends(get_storage)):
    user = storage.login(payload.to_domain())
    if not user:
        raise HTTPException(401, "Invalid credentials")
    return user


@router.post("/register", response_model=UserOut, status_code=201)
def register(payload: RegisterIn, storage: Storage = Depends(get_storage)):
    return storage.register(payload.to_domain())
