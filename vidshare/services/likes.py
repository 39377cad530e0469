# vidshare/services/likes.py
# -*- coding: utf-8 -*-
"""
Like/dislike toggle per (user, target).

State per pair is one of {absent, like, dislike}:

    absent  + T      -> T        ("created")
    T       + T      -> absent   ("removed")
    T       + other  -> other    ("updated", same row)

Two concurrent first toggles race on the unique (user, target) index; the
loser re-reads the winning row and applies its toggle to it, so at most
one row ever exists. Every toggle ends with a recount of the target.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Union

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from vidshare.constants import (
    MSG_COMMENT_NOT_FOUND,
    MSG_VIDEO_NOT_FOUND,
    LikeType,
    TargetKind,
    VideoStatus,
)
from vidshare.crud.video_crud import ensure_visible
from vidshare.errors import ForbiddenError, NotFoundError
from vidshare.models import Comment, Like, LikeTarget, Video
from vidshare.services import engagement
from vidshare.utils.pagination import Page, PageParams, paginate

log = logging.getLogger("vidshare.likes")

MSG_LIKES_DISABLED = "Likes are disabled for this video"


@dataclass(frozen=True)
class ToggleResult:
    action: str  # created | removed | updated
    type: str
    like: Optional[Like] = None


def _find(db: Session, user_id: int, target: LikeTarget) -> Optional[Like]:
    stmt = select(Like).where(
        Like.user_id == user_id,
        Like.target_kind == target.kind,
        Like.target_id == target.id,
    )
    return db.scalars(stmt).first()


def load_target(
    db: Session, target: LikeTarget, viewer_id: Optional[int] = None
) -> Union[Video, Comment]:
    """
    Resolve a target or raise NotFoundError. The video (or the comment's
    video) must be visible to `viewer_id`; videos must accept likes.
    """
    if target.kind == TargetKind.video.value:
        video = ensure_visible(_live_video(db, target.id), viewer_id)
        if not video.allow_likes:
            raise ForbiddenError(MSG_LIKES_DISABLED)
        return video
    comment = db.get(Comment, target.id)
    if comment is None:
        raise NotFoundError(MSG_COMMENT_NOT_FOUND)
    ensure_visible(_live_video(db, comment.video_id), viewer_id)
    return comment


def _live_video(db: Session, video_id: int) -> Video:
    video = db.get(Video, video_id)
    if video is None or video.status == VideoStatus.deleted.value:
        raise NotFoundError(MSG_VIDEO_NOT_FOUND)
    return video


def _apply(db: Session, existing: Like, requested: str) -> ToggleResult:
    if existing.type == requested:
        db.delete(existing)
        db.commit()
        return ToggleResult("removed", requested)
    existing.type = requested
    db.commit()
    db.refresh(existing)
    return ToggleResult("updated", requested, existing)


def toggle_like(
    db: Session,
    user_id: int,
    target: LikeTarget,
    requested_type: LikeType | str = LikeType.like,
) -> ToggleResult:
    requested = LikeType(requested_type).value
    load_target(db, target, viewer_id=user_id)

    existing = _find(db, user_id, target)
    if existing is not None:
        result = _apply(db, existing, requested)
    else:
        like = Like(user_id=user_id, target_kind=target.kind, target_id=target.id, type=requested)
        db.add(like)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            winner = _find(db, user_id, target)
            if winner is None:
                raise
            log.info(
                "like race lost: user=%s target=%s:%s; applying toggle to existing row",
                user_id, target.kind, target.id,
            )
            result = _apply(db, winner, requested)
        else:
            db.refresh(like)
            result = ToggleResult("created", requested, like)

    engagement.refresh_target(db, target)
    return result


def get_like_status(db: Session, user_id: int, target: LikeTarget) -> Optional[str]:
    like = _find(db, user_id, target)
    return like.type if like else None


def list_likers(
    db: Session,
    target: LikeTarget,
    params: PageParams,
    like_type: LikeType | str = LikeType.like,
) -> Page:
    stmt = (
        select(Like)
        .where(
            Like.target_kind == target.kind,
            Like.target_id == target.id,
            Like.type == LikeType(like_type).value,
        )
        .order_by(Like.created_at.desc(), Like.id.desc())
    )
    return paginate(db, stmt, params)


__all__ = ["ToggleResult", "toggle_like", "get_like_status", "list_likers", "load_target"]
