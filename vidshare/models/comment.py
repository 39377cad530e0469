# vidshare/models/comment.py
# -*- coding: utf-8 -*-
from __future__ import annotations

import datetime as dt
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from vidshare.constants import COMMENT_MAX, CommentStatus
from vidshare.db import Base
from vidshare.models._types import utcnow

if TYPE_CHECKING:
    from .user import User
    from .video import Video


class Comment(Base):
    """
    Comment on a video, at most two levels deep.

    - parent_id is null for top-level comments; replies always point at a
      top-level comment (reply-to-reply is re-parented by the CRUD layer and
      remembered in reply_to_user_id)
    - status: active | hidden | deleted; only active rows are counted
    - likes_count / replies_count are maintained by the engagement service
    """
    __tablename__ = "comments"
    __mapper_args__ = {"eager_defaults": True}

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)

    # Ownership
    video_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("videos.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )

    # Threading (null = top-level)
    parent_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("comments.id", ondelete="CASCADE"), nullable=True, index=True
    )
    reply_to_user_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )

    # Content
    content: Mapped[str] = mapped_column(Text, nullable=False)

    # Moderation
    status: Mapped[str] = mapped_column(
        String(16), default=CommentStatus.active.value, nullable=False, index=True
    )
    is_pinned: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_edited: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    edited_at: Mapped[Optional[dt.datetime]] = mapped_column(DateTime(timezone=True), default=None)

    # Counters
    likes_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    replies_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    # Timestamps
    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False, index=True
    )
    updated_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), onupdate=utcnow, nullable=False
    )

    # Relationships
    user: Mapped["User"] = relationship(
        "User", back_populates="comments", foreign_keys=[user_id], lazy="joined"
    )
    reply_to_user: Mapped[Optional["User"]] = relationship(
        "User", foreign_keys=[reply_to_user_id], lazy="joined"
    )
    video: Mapped["Video"] = relationship("Video", back_populates="comments", lazy="select")
    parent: Mapped[Optional["Comment"]] = relationship(
        "Comment", remote_side=[id], back_populates="replies", lazy="select"
    )
    replies: Mapped[List["Comment"]] = relationship(
        "Comment", back_populates="parent", passive_deletes=True, lazy="select"
    )

    __table_args__ = (
        CheckConstraint(
            "likes_count >= 0 AND replies_count >= 0",
            name="ck_comments_counts_nonneg",
        ),
        CheckConstraint(
            "status in ('active','hidden','deleted')",
            name="ck_comments_status_enum",
        ),
        Index("ix_comments_video_parent_time", "video_id", "parent_id", "created_at"),
        Index("ix_comments_parent_status", "parent_id", "status"),
    )

    @validates("content")
    def _v_content(self, _k, v: str) -> str:
        v = (v or "").strip()
        if not v:
            raise ValueError("Comment content is required")
        if len(v) > COMMENT_MAX:
            raise ValueError(f"Comment cannot exceed {COMMENT_MAX} characters")
        return v

    # ---------- Helpers (no DB I/O) ----------
    @property
    def is_active(self) -> bool:
        return self.status == CommentStatus.active.value

    def edit(self, content: str) -> None:
        self.content = content
        self.is_edited = True
        self.edited_at = utcnow()

    def __repr__(self) -> str:  # pragma: no cover
        return (
            f"<Comment id={self.id} video={self.video_id} user={self.user_id} "
            f"parent={self.parent_id} status={self.status}>"
        )
