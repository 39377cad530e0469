# vidshare/schemas/comment.py
# -*- coding: utf-8 -*-
from __future__ import annotations

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import Field, field_validator

from vidshare.constants import COMMENT_MAX
from vidshare.schemas.common import CamelModel
from vidshare.schemas.user import UserSummary


def _content(v) -> str:
    s = str(v or "").strip()
    if not s:
        raise ValueError("Comment content is required")
    if len(s) > COMMENT_MAX:
        raise ValueError(f"Comment cannot exceed {COMMENT_MAX} characters")
    return s


class CommentCreate(CamelModel):
    content: str
    # JSON key stays "parentComment"
    parent_id: Optional[int] = Field(None, alias="parentComment")

    @field_validator("content", mode="before")
    @classmethod
    def _v_content(cls, v):
        return _content(v)


class CommentUpdate(CamelModel):
    content: str

    @field_validator("content", mode="before")
    @classmethod
    def _v_content(cls, v):
        return _content(v)


ModerationAction = Literal["hide", "unhide"]


class CommentOut(CamelModel):
    id: int
    video_id: int
    user_id: int
    user: Optional[UserSummary] = None
    parent_id: Optional[int] = Field(None, serialization_alias="parentComment")
    reply_to_user_id: Optional[int] = None
    reply_to_user: Optional[UserSummary] = None
    content: str
    status: str
    is_pinned: bool = False
    is_edited: bool = False
    edited_at: Optional[datetime] = None
    likes_count: int = 0
    replies_count: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class CommentThreadOut(CommentOut):
    """Top-level comment with a preview of its earliest replies."""
    replies: List[CommentOut] = Field(default_factory=list)
