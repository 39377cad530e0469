# vidshare/routes/user_routes.py
# -*- coding: utf-8 -*-
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, File, Query, UploadFile
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from vidshare.constants import MSG_USER_NOT_FOUND
from vidshare.crud import user_crud, video_crud
from vidshare.db import get_db
from vidshare.dependencies import get_current_user
from vidshare.errors import NotFoundError, ValidationError
from vidshare.models import User
from vidshare.schemas.user import UserOut, UserPrivateOut
from vidshare.schemas.video import VideoOut
from vidshare.services import storage
from vidshare.utils.pagination import PageParams
from vidshare.utils.response import ok, paginated

router = APIRouter(prefix="/users", tags=["Users"])


@router.get("")
def list_users(
    page: Optional[int] = Query(None),
    limit: Optional[int] = Query(None),
    search: Optional[str] = Query(None, max_length=100),
    db: Session = Depends(get_db),
):
    result = user_crud.list_active(db, PageParams.from_query(page, limit), search=search)
    return paginated(result, UserOut, "Users retrieved successfully")


@router.get("/username/{username}")
def get_by_username(username: str, db: Session = Depends(get_db)):
    user = user_crud.get_by_username(db, username)
    if user is None or not user.is_active:
        raise NotFoundError(MSG_USER_NOT_FOUND)
    return ok({"user": UserOut.model_validate(user)}, "User retrieved successfully")


@router.put("/avatar")
async def update_avatar(
    avatar: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    if avatar is None or not avatar.filename:
        raise ValidationError("Please upload an image file")
    stored = await storage.save_upload(avatar, "avatar")
    previous = current_user.avatar
    try:
        user = await run_in_threadpool(
            user_crud.set_avatar, db, user=current_user, file_name=stored.name
        )
    except Exception:
        storage.delete_media(stored.name, "avatar")
        raise
    if previous and previous != "default-avatar.png":
        storage.delete_media(previous, "avatar")
    return ok({"user": UserPrivateOut.model_validate(user)}, "Avatar updated successfully")


@router.get("/{user_id}/channel")
def get_channel(user_id: int, db: Session = Depends(get_db)):
    user = user_crud.get_active(db, user_id)
    if user is None:
        raise NotFoundError(MSG_USER_NOT_FOUND)
    videos = video_crud.latest_for_channel(db, user_id)
    channel = UserOut.model_validate(user).model_dump(by_alias=True)
    channel["videos"] = [VideoOut.model_validate(v) for v in videos]
    return ok({"channel": channel}, "Channel retrieved successfully")


@router.get("/{user_id}")
def get_user(user_id: int, db: Session = Depends(get_db)):
    user = user_crud.get_active(db, user_id)
    if user is None:
        raise NotFoundError(MSG_USER_NOT_FOUND)
    return ok({"user": UserOut.model_validate(user)}, "User retrieved successfully")
