from __future__ import annotations
# vidshare/crud/video_crud.py
"""
Video queries and mutations.

Feeds (listing, search, trending, recommended) only surface public, ready,
published videos. A private video is readable by its owner alone; every
other reader gets ForbiddenError and no view is counted.
"""
import logging
from typing import List, Optional

from sqlalchemy import String, and_, cast, delete, or_, select, update
from sqlalchemy.orm import Session

from vidshare.constants import (
    MAX_LIMIT,
    MSG_VIDEO_NOT_FOUND,
    RECOMMENDED_DEFAULT_LIMIT,
    TRENDING_DEFAULT_LIMIT,
    TargetKind,
    VideoPrivacy,
    VideoSort,
    VideoStatus,
)
from vidshare.crud.crud_base import LIKE_ESCAPE, CRUDBase, contains_pattern
from vidshare.crud.like_crud import delete_likes_for
from vidshare.errors import ForbiddenError, NotFoundError, ValidationError
from vidshare.models import Comment, User, Video
from vidshare.schemas.video import VideoCreate, VideoUpdate
from vidshare.services import engagement, storage
from vidshare.services.storage import StoredFile
from vidshare.utils.pagination import Page, PageParams, clamp_limit, paginate

logger = logging.getLogger("vidshare.videos")

MSG_PRIVATE = "This video is private"

_SORTS = {
    VideoSort.newest.value: (Video.created_at.desc(), Video.id.desc()),
    VideoSort.oldest.value: (Video.created_at.asc(), Video.id.asc()),
    VideoSort.most_views.value: (Video.views.desc(), Video.id.desc()),
    VideoSort.most_likes.value: (Video.likes_count.desc(), Video.id.desc()),
    VideoSort.trending.value: (Video.trending_score.desc(), Video.id.desc()),
}


def public_feed_filter():
    return and_(
        Video.privacy == VideoPrivacy.public.value,
        Video.status == VideoStatus.ready.value,
        Video.is_published.is_(True),
    )


def search_filter(search: str):
    """Any whitespace-separated term, case-insensitive, in title/description/tags."""
    clauses = []
    for term in search.split():
        like = contains_pattern(term)
        clauses.append(
            or_(
                Video.title.ilike(like, escape=LIKE_ESCAPE),
                Video.description.ilike(like, escape=LIKE_ESCAPE),
                cast(Video.tags, String).ilike(like, escape=LIKE_ESCAPE),
            )
        )
    return or_(*clauses)


def ensure_visible(video: Video, viewer_id: Optional[int]) -> Video:
    if video.privacy == VideoPrivacy.private.value and not video.is_owned_by(viewer_id):
        raise ForbiddenError(MSG_PRIVATE)
    return video


def order_for(sort: Optional[str]):
    key = sort or VideoSort.newest.value
    if key not in _SORTS:
        allowed = ", ".join(_SORTS)
        raise ValidationError(
            "Invalid sort option",
            errors=[{"field": "sort", "message": f"must be one of: {allowed}", "value": sort}],
        )
    return _SORTS[key]


class CRUDVideo(CRUDBase[Video, VideoUpdate]):
    # ----- READ -----
    def get_or_404(self, db: Session, video_id: int) -> Video:
        video = db.get(Video, video_id)
        if video is None or video.status == VideoStatus.deleted.value:
            raise NotFoundError(MSG_VIDEO_NOT_FOUND)
        return video

    def get_visible(self, db: Session, video_id: int, viewer_id: Optional[int]) -> Video:
        """get_or_404 plus the private-video rule for `viewer_id` (None = anonymous)."""
        return ensure_visible(self.get_or_404(db, video_id), viewer_id)

    def open_for_viewer(self, db: Session, video_id: int, viewer_id: Optional[int]) -> Video:
        """Read a video as `viewer_id`, counting the view."""
        video = self.get_visible(db, video_id, viewer_id)
        if not video.is_owned_by(viewer_id):
            video = engagement.record_view(db, video)
        return video

    def list_public(
        self,
        db: Session,
        params: PageParams,
        *,
        sort: Optional[str] = None,
        category: Optional[str] = None,
        search: Optional[str] = None,
    ) -> Page:
        stmt = select(Video).where(public_feed_filter())
        if category:
            stmt = stmt.where(Video.category == category)
        if search and search.strip():
            stmt = stmt.where(search_filter(search))
        stmt = stmt.order_by(*order_for(sort))
        return paginate(db, stmt, params)

    def trending(self, db: Session, limit: Optional[int] = None) -> List[Video]:
        n = clamp_limit(limit, default=TRENDING_DEFAULT_LIMIT, maximum=MAX_LIMIT)
        stmt = (
            select(Video)
            .where(public_feed_filter())
            .order_by(Video.trending_score.desc(), Video.views.desc(), Video.id.desc())
            .limit(n)
        )
        return list(db.scalars(stmt).unique().all())

    def recommended(self, db: Session, video: Video, limit: Optional[int] = None) -> List[Video]:
        n = clamp_limit(limit, default=RECOMMENDED_DEFAULT_LIMIT, maximum=MAX_LIMIT)
        stmt = (
            select(Video)
            .where(
                public_feed_filter(),
                Video.category == video.category,
                Video.id != video.id,
            )
            .order_by(Video.views.desc(), Video.likes_count.desc(), Video.id.desc())
            .limit(n)
        )
        return list(db.scalars(stmt).unique().all())

    def list_by_owner(
        self, db: Session, owner_id: int, params: PageParams, viewer_id: Optional[int] = None
    ) -> Page:
        stmt = select(Video).where(Video.owner_id == owner_id, Video.is_published.is_(True))
        if viewer_id != owner_id:
            stmt = stmt.where(
                Video.privacy == VideoPrivacy.public.value,
                Video.status == VideoStatus.ready.value,
            )
        stmt = stmt.order_by(Video.created_at.desc(), Video.id.desc())
        return paginate(db, stmt, params)

    def latest_for_channel(self, db: Session, owner_id: int, limit: int = 12) -> List[Video]:
        stmt = (
            select(Video)
            .where(Video.owner_id == owner_id, Video.is_published.is_(True), public_feed_filter())
            .order_by(Video.created_at.desc(), Video.id.desc())
            .limit(limit)
        )
        return list(db.scalars(stmt).unique().all())

    # ----- CREATE -----
    def create(self, db: Session, *, owner: User, obj_in: VideoCreate, stored: StoredFile) -> Video:
        video = Video(
            owner_id=owner.id,
            title=obj_in.title,
            description=obj_in.description,
            category=obj_in.category.value,
            privacy=obj_in.privacy.value,
            tags=list(obj_in.tags),
            video_file=stored.name,
            file_size=stored.size,
            format=stored.content_type,
            duration=0,
            status=VideoStatus.processing.value,
        )
        db.add(video)
        db.execute(
            update(User)
            .where(User.id == owner.id)
            .values(total_videos=User.total_videos + 1)
            .execution_options(synchronize_session=False)
        )
        db.commit()
        db.refresh(video)
        logger.info("video uploaded id=%s owner=%s file=%s", video.id, owner.id, stored.name)
        return video

    # ----- UPDATE -----
    def set_status(self, db: Session, *, video: Video, status: VideoStatus) -> Video:
        video.set_status(status)
        db.commit()
        db.refresh(video)
        logger.info("video id=%s status -> %s", video.id, video.status)
        return video

    # ----- DELETE -----
    def remove(self, db: Session, *, video: Video) -> None:
        """
        Best-effort file removal first, then the row together with its
        comments and every like on the video or on those comments.
        """
        video_id, owner_id = video.id, video.owner_id
        storage.delete_media(video.video_file, "video")

        comment_ids = list(db.scalars(select(Comment.id).where(Comment.video_id == video_id)))
        delete_likes_for(db, TargetKind.comment, comment_ids)
        delete_likes_for(db, TargetKind.video, [video_id])
        # replies first so the self-referencing FK never dangles
        db.execute(
            delete(Comment)
            .where(Comment.video_id == video_id, Comment.parent_id.is_not(None))
            .execution_options(synchronize_session=False)
        )
        db.execute(
            delete(Comment)
            .where(Comment.video_id == video_id)
            .execution_options(synchronize_session=False)
        )
        db.delete(video)
        db.execute(
            update(User)
            .where(User.id == owner_id)
            .values(total_videos=engagement.non_negative_add(User.total_videos, -1))
            .execution_options(synchronize_session=False)
        )
        db.commit()
        logger.info("video deleted id=%s owner=%s comments=%d", video_id, owner_id, len(comment_ids))


video_crud = CRUDVideo(Video)
