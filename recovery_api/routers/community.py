from __future__ import annotations

from fastapi import APIRouter, Depends

from recovery_api.core.config import Settings
from recovery_api.repositories.base import Storage
from recovery_api.routers.deps import get_app_settings, get_storage, resolve_user_id
from recovery_api.schemas import CommunityPostIn, CommunityReplyIn

router = APIRouter(prefix="/api/community", tags=["community"])


@router.get("/posts")
def list_posts(storage: Storage = Depends(get_storage)):
    return storage.get_all_community_posts()


@router.post("/posts", status_code=201)
def create_post(
    payload: CommunityPostIn,
    storage: Storage = Depends(get_storage),
    settings: Settings = Depends(get_app_settings),
):
    return storage.create_community_post(payload.to_domain(resolve_user_id(payload.user_id, settings)))


@router.get("/posts/{post_id}/replies")
def list_replies(post_id: int, storage: Storage = Depends(get_storage)):
    # unknown post ids simply have no replies
    return storage.get_replies_by_post(post_id)


@router.post("/posts/{post_id}/replies", status_code=201)
def create_reply(
    post_id: int,
    payload: CommunityReplyIn,
    storage: Storage = Depends(get_storage),
    settings: Settings = Depends(get_app_settings),
):
    return storage.create_community_reply(
        payload.to_domain(post_id, resolve_user_id(payload.user_id, settings))
    )
