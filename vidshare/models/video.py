# vidshare/models/video.py
# -*- coding: utf-8 -*-
from __future__ import annotations

import datetime as dt
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from vidshare.constants import (
    MAX_TAG_LEN,
    MAX_TAGS,
    VideoCategory,
    VideoPrivacy,
    VideoStatus,
)
from vidshare.db import Base
from vidshare.models._types import JSON_VARIANT, as_mutable_list, utcnow

if TYPE_CHECKING:
    from .user import User
    from .comment import Comment


class Video(Base):
    """
    Uploaded video plus its denormalized engagement counters.

    - owner_id is fixed at creation
    - status: processing -> ready | failed (| deleted)
    - likes/dislikes/comments counters are maintained by
      vidshare.services.engagement, never by ORM hooks
    - trending_score is derived from views, likes, comments and age
    """
    __tablename__ = "videos"
    __mapper_args__ = {"eager_defaults": True}

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)

    owner_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )

    # Content
    title: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str] = mapped_column(Text, default="", nullable=False)
    video_file: Mapped[str] = mapped_column(String(255), nullable=False)
    thumbnail: Mapped[str] = mapped_column(String(255), default="default-thumbnail.jpg", nullable=False)
    duration: Mapped[int] = mapped_column(Integer, default=0, nullable=False)  # seconds
    file_size: Mapped[int] = mapped_column(Integer, default=0, nullable=False)  # bytes
    format: Mapped[Optional[str]] = mapped_column(String(64), default=None)  # mime type

    # Lifecycle & visibility
    status: Mapped[str] = mapped_column(
        String(16), default=VideoStatus.processing.value, nullable=False, index=True
    )
    privacy: Mapped[str] = mapped_column(
        String(12), default=VideoPrivacy.public.value, nullable=False, index=True
    )
    is_published: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    published_at: Mapped[Optional[dt.datetime]] = mapped_column(
        DateTime(timezone=True), default=utcnow, index=True
    )

    # Classification
    category: Mapped[str] = mapped_column(
        String(24), default=VideoCategory.other.value, nullable=False, index=True
    )
    tags: Mapped[List[str]] = mapped_column(as_mutable_list(JSON_VARIANT), default=list, nullable=False)
    language: Mapped[str] = mapped_column(String(8), default="en", nullable=False)

    # Settings
    allow_comments: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    allow_likes: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    # Denormalized counters
    views: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    likes_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    dislikes_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    comments_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    shares_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    trending_score: Mapped[float] = mapped_column(Float, default=0.0, nullable=False, index=True)

    # Timestamps
    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False, index=True
    )
    updated_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), onupdate=utcnow, nullable=False
    )

    # Relationships
    owner: Mapped["User"] = relationship("User", back_populates="videos", lazy="joined")
    comments: Mapped[List["Comment"]] = relationship(
        "Comment", back_populates="video", passive_deletes=True, lazy="select"
    )

    __table_args__ = (
        CheckConstraint(
            "views >= 0 AND likes_count >= 0 AND dislikes_count >= 0 "
            "AND comments_count >= 0 AND shares_count >= 0",
            name="ck_videos_counts_nonneg",
        ),
        CheckConstraint(
            "privacy in ('public','private','unlisted')",
            name="ck_videos_privacy_enum",
        ),
        CheckConstraint(
            "status in ('processing','ready','failed','deleted')",
            name="ck_videos_status_enum",
        ),
        Index("ix_videos_feed", "privacy", "status", "is_published", "created_at"),
        Index("ix_videos_trending", "trending_score", "views"),
        Index("ix_videos_owner_created", "owner_id", "created_at"),
    )

    # ----------------- Validators -----------------
    @validates("tags")
    def _v_tags(self, _k, tags: Optional[List[str]]) -> List[str]:
        cleaned: List[str] = []
        for t in tags or []:
            t = (t or "").strip()
            if t and t not in cleaned:
                cleaned.append(t[:MAX_TAG_LEN])
        if len(cleaned) > MAX_TAGS:
            raise ValueError(f"Cannot have more than {MAX_TAGS} tags")
        return cleaned

    # ----------------- Helpers (no DB I/O) -----------------
    def is_owned_by(self, user_id: Optional[int]) -> bool:
        return user_id is not None and self.owner_id == user_id

    def bump_views(self, n: int = 1) -> None:
        self.views = max(0, (self.views or 0) + n)

    def set_status(self, status: VideoStatus | str) -> None:
        sv = status.value if isinstance(status, VideoStatus) else str(status).strip().lower()
        if sv not in {s.value for s in VideoStatus}:
            raise ValueError(f"invalid status: {status!r}")
        self.status = sv

    def __repr__(self) -> str:  # pragma: no cover
        return (
            f"<Video id={self.id} owner={self.owner_id} status={self.status} "
            f"privacy={self.privacy} views={self.views} likes={self.likes_count}>"
        )
