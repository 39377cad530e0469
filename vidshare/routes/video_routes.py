# vidshare/routes/video_routes.py
# -*- coding: utf-8 -*-
from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from vidshare.constants import (
    MSG_UNAUTHORIZED,
    MSG_VIDEO_DELETE_SUCCESS,
    MSG_VIDEO_UPDATE_SUCCESS,
    MSG_VIDEO_UPLOAD_SUCCESS,
    VideoCategory,
)
from vidshare.crud import video_crud
from vidshare.db import get_db
from vidshare.dependencies import can_manage, get_current_user, get_optional_user, get_staff_user
from vidshare.errors import ForbiddenError, ValidationError
from vidshare.models import User
from vidshare.schemas.video import VideoCreate, VideoOut, VideoStatusIn, VideoUpdate
from vidshare.services import storage
from vidshare.utils.pagination import PageParams
from vidshare.utils.response import ok, paginated

logger = logging.getLogger("vidshare.videos")

router = APIRouter(prefix="/videos", tags=["Videos"])


def _out(video) -> VideoOut:
    return VideoOut.model_validate(video)


# ---------- Upload ----------
@router.post("/upload", status_code=status.HTTP_201_CREATED)
async def upload_video(
    title: str = Form(...),
    description: str = Form(...),
    category: Optional[VideoCategory] = Form(None),
    privacy: Optional[str] = Form(None),
    tags: Optional[List[str]] = Form(None),
    video: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    if video is None or not video.filename:
        raise ValidationError("Please upload a video file")

    fields = {"title": title, "description": description, "tags": tags}
    if category is not None:
        fields["category"] = category
    if privacy:
        fields["privacy"] = privacy
    data = VideoCreate.model_validate(fields)

    stored = await storage.save_upload(video, "video")
    try:
        created = await run_in_threadpool(
            video_crud.create, db, owner=current_user, obj_in=data, stored=stored
        )
    except Exception:
        # no row points at the file
        storage.delete_media(stored.name, "video")
        raise
    return ok({"video": _out(created)}, MSG_VIDEO_UPLOAD_SUCCESS)


# ---------- Feeds ----------
@router.get("")
def list_videos(
    page: Optional[int] = Query(None),
    limit: Optional[int] = Query(None),
    sort: Optional[str] = Query(None),
    category: Optional[VideoCategory] = Query(None),
    search: Optional[str] = Query(None, max_length=200),
    db: Session = Depends(get_db),
):
    result = video_crud.list_public(
        db,
        PageParams.from_query(page, limit),
        sort=sort,
        category=category.value if category else None,
        search=search,
    )
    return paginated(result, VideoOut, "Videos retrieved successfully")


@router.get("/trending")
def trending_videos(limit: Optional[int] = Query(None), db: Session = Depends(get_db)):
    videos = video_crud.trending(db, limit)
    return ok({"videos": [_out(v) for v in videos]}, "Trending videos retrieved successfully")


@router.get("/user/{user_id}")
def user_videos(
    user_id: int,
    page: Optional[int] = Query(None),
    limit: Optional[int] = Query(None),
    db: Session = Depends(get_db),
    viewer: Optional[User] = Depends(get_optional_user),
):
    result = video_crud.list_by_owner(
        db, user_id, PageParams.from_query(page, limit), viewer_id=viewer.id if viewer else None
    )
    return paginated(result, VideoOut, "User videos retrieved successfully")


# ---------- Single video ----------
@router.get("/{video_id}")
def get_video(
    video_id: int,
    db: Session = Depends(get_db),
    viewer: Optional[User] = Depends(get_optional_user),
):
    video = video_crud.open_for_viewer(db, video_id, viewer.id if viewer else None)
    return ok({"video": _out(video)}, "Video retrieved successfully")


@router.get("/{video_id}/recommended")
def recommended_videos(
    video_id: int,
    limit: Optional[int] = Query(None),
    db: Session = Depends(get_db),
    viewer: Optional[User] = Depends(get_optional_user),
):
    video = video_crud.get_visible(db, video_id, viewer.id if viewer else None)
    videos = video_crud.recommended(db, video, limit)
    return ok({"videos": [_out(v) for v in videos]}, "Recommended videos retrieved successfully")


@router.put("/{video_id}")
def update_video(
    video_id: int,
    payload: VideoUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    video = video_crud.get_or_404(db, video_id)
    if not can_manage(current_user, video.owner_id):
        raise ForbiddenError(MSG_UNAUTHORIZED)
    video = video_crud.update(db, db_obj=video, obj_in=payload)
    return ok({"video": _out(video)}, MSG_VIDEO_UPDATE_SUCCESS)


@router.delete("/{video_id}")
def delete_video(
    video_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    video = video_crud.get_or_404(db, video_id)
    if not can_manage(current_user, video.owner_id):
        raise ForbiddenError(MSG_UNAUTHORIZED)
    video_crud.remove(db, video=video)
    return ok(None, MSG_VIDEO_DELETE_SUCCESS)


@router.patch("/{video_id}/status")
def set_video_status(
    video_id: int,
    payload: VideoStatusIn,
    db: Session = Depends(get_db),
    staff: User = Depends(get_staff_user),
):
    video = video_crud.get_or_404(db, video_id)
    video = video_crud.set_status(db, video=video, status=payload.status)
    logger.info("status change by staff=%s video=%s", staff.id, video.id)
    return ok({"video": _out(video)}, "Video status updated successfully")
