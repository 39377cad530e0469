# vidshare/models/user.py
# -*- coding: utf-8 -*-
"""
User: account, channel profile and channel-level counters.

- username / email unique, always stored lowercase
- soft delete only (is_active=False); rows are never removed
- total_videos / total_views are bumped by video side effects
- password_changed_at invalidates tokens issued before it
"""

from __future__ import annotations

import datetime as dt
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    Index,
    Integer,
    String,
    Text,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from vidshare.constants import UserRole
from vidshare.db import Base
from vidshare.models._types import utcnow

if TYPE_CHECKING:
    from .video import Video
    from .comment import Comment


class User(Base):
    __tablename__ = "users"
    __mapper_args__ = {"eager_defaults": True}

    __table_args__ = (
        CheckConstraint(
            "subscribers_count >= 0 AND total_videos >= 0 AND total_views >= 0",
            name="ck_users_counts_nonneg",
        ),
        CheckConstraint("role in ('user','admin','moderator')", name="ck_users_role_enum"),
        Index("ix_users_active_created", "is_active", "created_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)

    # ---------- Identity ----------
    username: Mapped[str] = mapped_column(String(20), unique=True, index=True, nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)

    # ---------- Profile ----------
    full_name: Mapped[str] = mapped_column(String(50), nullable=False)
    avatar: Mapped[str] = mapped_column(String(255), default="default-avatar.png", nullable=False)
    cover_image: Mapped[Optional[str]] = mapped_column(String(255), default=None)
    bio: Mapped[str] = mapped_column(String(500), default="", nullable=False)
    channel_name: Mapped[Optional[str]] = mapped_column(String(100), default=None)
    channel_description: Mapped[str] = mapped_column(Text, default="", nullable=False)

    # ---------- Counters ----------
    subscribers_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    total_videos: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    total_views: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    # ---------- Access ----------
    role: Mapped[str] = mapped_column(String(16), default=UserRole.user.value, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    is_verified: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    last_login_at: Mapped[Optional[dt.datetime]] = mapped_column(DateTime(timezone=True), default=None)
    login_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    password_changed_at: Mapped[Optional[dt.datetime]] = mapped_column(
        DateTime(timezone=True), default=None
    )

    # ---------- Timestamps ----------
    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False, index=True
    )
    updated_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), onupdate=utcnow, nullable=False
    )

    # ---------- Relationships ----------
    videos: Mapped[List["Video"]] = relationship("Video", back_populates="owner", lazy="select")
    comments: Mapped[List["Comment"]] = relationship(
        "Comment", back_populates="user", foreign_keys="Comment.user_id", lazy="select"
    )

    # ---------- Validators ----------
    @validates("username", "email")
    def _v_lower(self, _k, v: str) -> str:
        return (v or "").strip().lower()

    # ---------- Helpers (no DB I/O) ----------
    def mark_login(self) -> None:
        self.last_login_at = utcnow()
        self.login_count = (self.login_count or 0) + 1

    def set_password_hash(self, hashed: str) -> None:
        self.password_hash = hashed
        self.password_changed_at = utcnow()

    def soft_delete(self) -> None:
        self.is_active = False

    def __repr__(self) -> str:  # pragma: no cover
        return f"<User id={self.id} username={self.username!r} role={self.role} active={self.is_active}>"
