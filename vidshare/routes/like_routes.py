# vidshare/routes/like_routes.py
# -*- coding: utf-8 -*-
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from vidshare.constants import LikeType
from vidshare.crud import video_crud
from vidshare.db import get_db
from vidshare.dependencies import get_current_user, get_optional_user
from vidshare.models import Comment, CommentTarget, LikeTarget, User, Video, VideoTarget
from vidshare.schemas.like import LikeOut, LikerOut, LikeStatusOut, ToggleOut
from vidshare.services.likes import get_like_status, list_likers, toggle_like
from vidshare.utils.pagination import PageParams
from vidshare.utils.response import ok, paginated

router = APIRouter(tags=["Likes"])


def _toggle(db: Session, user: User, target: LikeTarget, like_type: LikeType) -> dict:
    result = toggle_like(db, user.id, target, like_type)
    out = ToggleOut(
        action=result.action,
        type=result.type,
        data=LikeOut.model_validate(result.like) if result.like is not None else None,
    )
    # counters after the recount
    if isinstance(target, VideoTarget):
        video = db.get(Video, target.id)
        if video is not None:
            db.refresh(video)
            out.likes_count, out.dislikes_count = video.likes_count, video.dislikes_count
    else:
        comment = db.get(Comment, target.id)
        if comment is not None:
            db.refresh(comment)
            out.likes_count = comment.likes_count
    noun = "Video" if isinstance(target, VideoTarget) else "Comment"
    return ok(out, f"{noun} {result.action} successfully")


@router.post("/videos/{video_id}/like")
def like_video(
    video_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return _toggle(db, current_user, VideoTarget(video_id), LikeType.like)


@router.post("/videos/{video_id}/dislike")
def dislike_video(
    video_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return _toggle(db, current_user, VideoTarget(video_id), LikeType.dislike)


@router.post("/comments/{comment_id}/like")
def like_comment(
    comment_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return _toggle(db, current_user, CommentTarget(comment_id), LikeType.like)


@router.get("/videos/{video_id}/like-status")
def video_like_status(
    video_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    video_crud.get_visible(db, video_id, current_user.id)
    status = get_like_status(db, current_user.id, VideoTarget(video_id))
    return ok(LikeStatusOut(like_status=status), "Like status retrieved successfully")


@router.get("/videos/{video_id}/likers")
def video_likers(
    video_id: int,
    type: LikeType = Query(LikeType.like),
    page: Optional[int] = Query(None),
    limit: Optional[int] = Query(None),
    db: Session = Depends(get_db),
    viewer: Optional[User] = Depends(get_optional_user),
):
    video_crud.get_visible(db, video_id, viewer.id if viewer else None)
    result = list_likers(db, VideoTarget(video_id), PageParams.from_query(page, limit), type)
    return paginated(result, LikerOut, "Likers retrieved successfully")
