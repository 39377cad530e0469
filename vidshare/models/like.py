# vidshare/models/like.py
# -*- coding: utf-8 -*-
from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal, Union

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from vidshare.constants import LikeType, TargetKind
from vidshare.db import Base
from vidshare.models._types import utcnow

if TYPE_CHECKING:
    from .user import User


# -------- Target (tagged variant) --------
@dataclass(frozen=True)
class VideoTarget:
    id: int
    kind: Literal["video"] = "video"


@dataclass(frozen=True)
class CommentTarget:
    id: int
    kind: Literal["comment"] = "comment"


LikeTarget = Union[VideoTarget, CommentTarget]


def make_target(kind: TargetKind | str, target_id: int) -> LikeTarget:
    kv = kind.value if isinstance(kind, TargetKind) else str(kind)
    if kv == TargetKind.video.value:
        return VideoTarget(int(target_id))
    if kv == TargetKind.comment.value:
        return CommentTarget(int(target_id))
    raise ValueError(f"unknown like target kind: {kind!r}")


class Like(Base):
    """
    One like/dislike per (user, target).

    The target is stored as (target_kind, target_id) so a row can only ever
    point at exactly one video or one comment. Rows are removed explicitly
    when their target is deleted.
    """
    __tablename__ = "likes"
    __mapper_args__ = {"eager_defaults": True}

    __table_args__ = (
        UniqueConstraint("user_id", "target_kind", "target_id", name="uq_like_user_target"),
        Index("ix_like_target_type", "target_kind", "target_id", "type"),
        CheckConstraint("target_kind in ('video','comment')", name="ck_like_target_kind"),
        CheckConstraint("type in ('like','dislike')", name="ck_like_type_enum"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)

    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    target_kind: Mapped[str] = mapped_column(String(16), nullable=False)
    target_id: Mapped[int] = mapped_column(Integer, nullable=False)
    type: Mapped[str] = mapped_column(String(8), default=LikeType.like.value, nullable=False)

    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False, index=True
    )
    updated_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), onupdate=utcnow, nullable=False
    )

    user: Mapped["User"] = relationship("User", lazy="joined")

    # ---------- Target ----------
    @property
    def target(self) -> LikeTarget:
        return make_target(self.target_kind, self.target_id)

    @target.setter
    def target(self, value: LikeTarget) -> None:
        self.target_kind = value.kind
        self.target_id = value.id

    @property
    def video_id(self):
        return self.target_id if self.target_kind == TargetKind.video.value else None

    @property
    def comment_id(self):
        return self.target_id if self.target_kind == TargetKind.comment.value else None

    @validates("type")
    def _v_type(self, _k, v: LikeType | str) -> str:
        tv = v.value if isinstance(v, LikeType) else str(v or "").strip().lower()
        if tv not in {t.value for t in LikeType}:
            raise ValueError(f"invalid like type: {v!r}")
        return tv

    def __repr__(self) -> str:  # pragma: no cover
        return f"<Like id={self.id} user={self.user_id} target={self.target_kind}:{self.target_id} type={self.type}>"
