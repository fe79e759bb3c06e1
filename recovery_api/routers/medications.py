from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from recovery_api.core.config import Settings
from recovery_api.repositories.base import Storage
from recovery_api.routers.deps import get_app_settings, get_storage, resolve_user_id
from recovery_api.schemas import MedicationIn, MedicationLogIn, MedicationUpdateIn

router = APIRouter(prefix="/api/medications", tags=["medications"])
logs_router = APIRouter(prefix="/api/medication-logs", tags=["medications"])


@router.get("")
def list_medications(
    user_id: Optional[int] = None,
    storage: Storage = Depends(get_storage),
    settings: Settings = Depends(get_app_settings),
):
    return storage.get_medications_by_user(resolve_user_id(user_id, settings))


@router.post("", status_code=201)
def create_medication(
    payload: MedicationIn,
    storage: Storage = Depends(get_storage),
    settings: Settings = Depends(get_app_settings),
):
    return storage.create_medication(payload.to_domain(resolve_user_id(payload.user_id, settings)))


@router.get("/{medication_id}")
def get_medication(medication_id: int, storage: Storage = Depends(get_storage)):
    medication = storage.get_medication(medication_id)
    if not medication:
        raise HTTPException(404, "Medication not found")
    return medication


@router.patch("/{medication_id}")
def update_medication(
    medication_id: int,
    payload: MedicationUpdateIn,
    storage: Storage = Depends(get_storage),
):
    return storage.update_medication(medication_id, payload.to_domain())


@logs_router.get("")
def list_medication_logs(
    user_id: Optional[int] = None,
    storage: Storage = Depends(get_storage),
    settings: Settings = Depends(get_app_settings),
):
    return storage.get_medication_logs_by_user(resolve_user_id(user_id, settings))


@logs_router.post("", status_code=201)
def create_medication_log(
    payload: MedicationLogIn,
    storage: Storage = Depends(get_storage),
    settings: Settings = Depends(get_app_settings),
):
    return storage.create_medication_log(payload.to_domain(resolve_user_id(payload.user_id, settings)))
