# vidshare/services/engagement.py
# -*- coding: utf-8 -*-
"""
Engagement aggregator: keeps the denormalized counters on Video, Comment
and User in line with the rows they summarize.

Command handlers commit their own mutation first and then call one of the
`on_*` / `refresh_*` functions below. Each of those runs in its own
transaction; a database failure there is logged and rolled back while the
primary mutation stands. Drift left behind by such a failure is healed by
the next full recount (`refresh_video_engagement`).

    likes on a video      -> full recount of likes/dislikes/comments + trending
    likes on a comment    -> recount of 'like' rows only
    comment created       -> video.comments_count +1, parent.replies_count +1
    comment removed       -> the same counters -1 (if it was active), minus
                             the active replies removed with it
    comment hidden/shown  -> like removed / created
    video viewed          -> views +1, trending recomputed, owner.total_views +1
"""

from __future__ import annotations

import datetime as dt
import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, Optional

from sqlalchemy import case, func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from vidshare.constants import CommentStatus, LikeType, TargetKind
from vidshare.models import Comment, Like, LikeTarget, User, Video
from vidshare.models._types import as_aware, utcnow

log = logging.getLogger("vidshare.engagement")

VIEW_WEIGHT = 1
LIKE_WEIGHT = 5
COMMENT_WEIGHT = 3
RECENCY_WINDOW_HOURS = 100


# ───────────────────────────── Trending ─────────────────────────────
def compute_trending_score(
    views: int,
    likes_count: int,
    comments_count: int,
    created_at: dt.datetime,
    now: Optional[dt.datetime] = None,
) -> float:
    """views*1 + likes*5 + comments*3 + max(0, 100 - age_in_hours)."""
    now = as_aware(now or utcnow())
    age_hours = (now - as_aware(created_at)).total_seconds() / 3600.0
    recency = max(0.0, RECENCY_WINDOW_HOURS - age_hours)
    return float(
        (views or 0) * VIEW_WEIGHT
        + (likes_count or 0) * LIKE_WEIGHT
        + (comments_count or 0) * COMMENT_WEIGHT
        + recency
    )


def apply_trending(video: Video, now: Optional[dt.datetime] = None) -> float:
    video.trending_score = compute_trending_score(
        video.views,
        video.likes_count,
        video.comments_count,
        video.created_at or utcnow(),
        now=now,
    )
    return video.trending_score


# ───────────────────────────── Plumbing ─────────────────────────────
@contextmanager
def _aggregation(db: Session, what: str, **ctx) -> Iterator[None]:
    """Own transaction for one counter update; failures are logged, not raised."""
    try:
        yield
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        log.exception("engagement update failed: %s %s", what, ctx)


def non_negative_add(column, n: int):
    """SQL expression `column + n`, floored at zero."""
    return case((column + n < 0, 0), else_=column + n)


def _bump_video_comments(db: Session, video_id: int, n: int) -> None:
    if n:
        db.execute(
            update(Video)
            .where(Video.id == video_id)
            .values(comments_count=non_negative_add(Video.comments_count, n))
            .execution_options(synchronize_session=False)
        )


def _bump_replies(db: Session, comment_id: int, n: int) -> None:
    if n:
        db.execute(
            update(Comment)
            .where(Comment.id == comment_id)
            .values(replies_count=non_negative_add(Comment.replies_count, n))
            .execution_options(synchronize_session=False)
        )


def _count_likes(db: Session, kind: TargetKind, target_id: int, like_type: LikeType) -> int:
    stmt = select(func.count(Like.id)).where(
        Like.target_kind == kind.value,
        Like.target_id == target_id,
        Like.type == like_type.value,
    )
    return int(db.scalar(stmt) or 0)


def count_active_comments(db: Session, video_id: int) -> int:
    stmt = select(func.count(Comment.id)).where(
        Comment.video_id == video_id,
        Comment.status == CommentStatus.active.value,
    )
    return int(db.scalar(stmt) or 0)


def count_active_replies(db: Session, comment_id: int) -> int:
    stmt = select(func.count(Comment.id)).where(
        Comment.parent_id == comment_id,
        Comment.status == CommentStatus.active.value,
    )
    return int(db.scalar(stmt) or 0)


# ───────────────────────────── Like-driven recounts ─────────────────────────────
def refresh_video_engagement(db: Session, video_id: int) -> Optional[Video]:
    """Full recount of a video's like/dislike/comment counters, then trending."""
    video: Optional[Video] = None
    with _aggregation(db, "video recount", video_id=video_id):
        video = db.get(Video, video_id)
        if video is None:
            return None
        video.likes_count = _count_likes(db, TargetKind.video, video_id, LikeType.like)
        video.dislikes_count = _count_likes(db, TargetKind.video, video_id, LikeType.dislike)
        video.comments_count = count_active_comments(db, video_id)
        apply_trending(video)
    return video


def refresh_comment_likes(db: Session, comment_id: int) -> Optional[Comment]:
    """Comments only track 'like' rows; dislikes on comments are not counted."""
    comment: Optional[Comment] = None
    with _aggregation(db, "comment like recount", comment_id=comment_id):
        comment = db.get(Comment, comment_id)
        if comment is None:
            return None
        comment.likes_count = _count_likes(db, TargetKind.comment, comment_id, LikeType.like)
    return comment


def refresh_target(db: Session, target: LikeTarget) -> None:
    if target.kind == TargetKind.video.value:
        refresh_video_engagement(db, target.id)
    else:
        refresh_comment_likes(db, target.id)


# ───────────────────────────── Comment-driven increments ─────────────────────────────
@dataclass(frozen=True)
class CommentRemoval:
    """What a committed comment delete took with it."""
    comment_id: int
    video_id: int
    parent_id: Optional[int]
    was_active: bool
    active_replies_removed: int = 0


def on_comment_created(db: Session, comment: Comment) -> None:
    if not comment.is_active:
        return
    video_id, parent_id = comment.video_id, comment.parent_id
    with _aggregation(db, "comment created", comment_id=comment.id, video_id=video_id):
        _bump_video_comments(db, video_id, +1)
        if parent_id:
            _bump_replies(db, parent_id, +1)


def on_comment_removed(db: Session, removal: CommentRemoval) -> None:
    own = 1 if removal.was_active else 0
    with _aggregation(db, "comment removed", comment_id=removal.comment_id, video_id=removal.video_id):
        _bump_video_comments(db, removal.video_id, -(own + removal.active_replies_removed))
        if removal.parent_id and own:
            _bump_replies(db, removal.parent_id, -1)


def on_comment_status_changed(db: Session, comment: Comment, previous_status: str) -> None:
    was_active = previous_status == CommentStatus.active.value
    is_active = comment.is_active
    if was_active == is_active:
        return
    delta = 1 if is_active else -1
    video_id, parent_id = comment.video_id, comment.parent_id
    with _aggregation(db, "comment status", comment_id=comment.id, status=comment.status):
        _bump_video_comments(db, video_id, delta)
        if parent_id:
            _bump_replies(db, parent_id, delta)


# ───────────────────────────── Views ─────────────────────────────
def record_view(db: Session, video: Video) -> Video:
    """
    Count one view: bump views, recompute trending, credit the owner's
    total_views. Callers decide whether the read counts (owners never do).
    """
    video.bump_views(1)
    apply_trending(video)
    db.execute(
        update(User)
        .where(User.id == video.owner_id)
        .values(total_views=non_negative_add(User.total_views, 1))
        .execution_options(synchronize_session=False)
    )
    db.commit()
    db.refresh(video)
    return video


__all__ = [
    "compute_trending_score",
    "apply_trending",
    "non_negative_add",
    "refresh_video_engagement",
    "refresh_comment_likes",
    "refresh_target",
    "count_active_comments",
    "count_active_replies",
    "CommentRemoval",
    "on_comment_created",
    "on_comment_removed",
    "on_comment_status_changed",
    "record_view",
]
