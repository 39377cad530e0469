# vidshare/schemas/like.py
# -*- coding: utf-8 -*-
from __future__ import annotations

from datetime import datetime
from typing import Literal, Optional

from vidshare.schemas.common import CamelModel
from vidshare.schemas.user import UserSummary


class LikeOut(CamelModel):
    id: int
    user_id: int
    target_kind: str
    target_id: int
    video_id: Optional[int] = None
    comment_id: Optional[int] = None
    type: str
    created_at: Optional[datetime] = None


class ToggleOut(CamelModel):
    action: Literal["created", "removed", "updated"]
    type: str
    data: Optional[LikeOut] = None
    likes_count: Optional[int] = None
    dislikes_count: Optional[int] = None


class LikeStatusOut(CamelModel):
    like_status: Optional[Literal["like", "dislike"]] = None


class LikerOut(CamelModel):
    user: UserSummary
    type: str
    created_at: Optional[datetime] = None
