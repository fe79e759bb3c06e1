from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends

from recovery_api.repositories.base import Storage
from recovery_api.routers.deps import get_storage
from recovery_api.schemas import ProfessionalIn, ResourceIn

router = APIRouter(prefix="/api/resources", tags=["resources"])
professionals_router = APIRouter(prefix="/api/professionals", tags=["professionals"])


@router.get("")
def list_resources(category: Optional[str] = None, storage: Storage = Depends(get_storage)):
    if category:
        return storage.get_resources_by_category(category)
    return storage.get_all_resources()


@router.post("", status_code=201)
def create_resource(payload: ResourceIn, storage: Storage = Depends(get_storage)):
    return storage.create_resource(payload.to_domain())


@professionals_router.get("")
def list_professionals(storage: Storage = Depends(get_storage)):
    return storage.get_all_professionals()


@professionals_router.post("", status_code=201)
def create_professional(payload: ProfessionalIn, storage: Storage = Depends(get_storage)):
    return storage.create_professional(payload.to_domain())
