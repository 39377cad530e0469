# vidshare/schemas/video.py
# -*- coding: utf-8 -*-
from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import Field, field_validator

from vidshare.constants import (
    DESCRIPTION_MAX,
    MAX_TAG_LEN,
    MAX_TAGS,
    TITLE_MAX,
    VideoCategory,
    VideoPrivacy,
    VideoStatus,
)
from vidshare.schemas.common import CamelModel
from vidshare.schemas.user import UserSummary


def _clean_tags(v) -> Optional[List[str]]:
    if v is None:
        return None
    if isinstance(v, str):
        v = [v]
    out: List[str] = []
    for item in v:
        # multipart forms send either repeated fields or one CSV value
        for t in str(item or "").split(","):
            t = t.strip()
            if not t:
                continue
            if len(t) > MAX_TAG_LEN:
                raise ValueError(f"Each tag must be 1-{MAX_TAG_LEN} characters")
            if t not in out:
                out.append(t)
    if len(out) > MAX_TAGS:
        raise ValueError(f"Tags must be an array with maximum {MAX_TAGS} items")
    return out


def _non_empty(v, label: str) -> str:
    s = str(v or "").strip()
    if not s:
        raise ValueError(f"{label} is required")
    return s


# ───────────────────────────── Inputs ─────────────────────────────
class VideoCreate(CamelModel):
    title: str = Field(..., max_length=TITLE_MAX)
    description: str = Field(..., max_length=DESCRIPTION_MAX)
    category: VideoCategory = VideoCategory.other
    privacy: VideoPrivacy = VideoPrivacy.public
    tags: List[str] = Field(default_factory=list)

    @field_validator("title", mode="before")
    @classmethod
    def _v_title(cls, v):
        return _non_empty(v, "Video title")

    @field_validator("description", mode="before")
    @classmethod
    def _v_description(cls, v):
        return _non_empty(v, "Video description")

    @field_validator("tags", mode="before")
    @classmethod
    def _v_tags(cls, v):
        return _clean_tags(v) or []


class VideoUpdate(CamelModel):
    """Owner-editable fields; anything else in the body is ignored."""
    title: Optional[str] = Field(None, max_length=TITLE_MAX)
    description: Optional[str] = Field(None, max_length=DESCRIPTION_MAX)
    category: Optional[VideoCategory] = None
    privacy: Optional[VideoPrivacy] = None
    tags: Optional[List[str]] = None
    allow_comments: Optional[bool] = None
    allow_likes: Optional[bool] = None

    @field_validator("title", mode="before")
    @classmethod
    def _v_title(cls, v):
        return None if v is None else _non_empty(v, "Title")

    @field_validator("description", mode="before")
    @classmethod
    def _v_description(cls, v):
        return None if v is None else _non_empty(v, "Description")

    @field_validator("tags", mode="before")
    @classmethod
    def _v_tags(cls, v):
        return _clean_tags(v)


class VideoStatusIn(CamelModel):
    status: VideoStatus

    @field_validator("status")
    @classmethod
    def _v_status(cls, v: VideoStatus) -> VideoStatus:
        if v == VideoStatus.deleted:
            raise ValueError("Use DELETE /videos/{id} to delete a video")
        return v


# ───────────────────────────── Outputs ─────────────────────────────
class VideoOut(CamelModel):
    id: int
    owner_id: int
    owner: Optional[UserSummary] = None

    title: str
    description: str
    video_file: str
    thumbnail: str
    duration: int = 0
    file_size: int = 0
    format: Optional[str] = None

    status: str
    privacy: str
    is_published: bool
    published_at: Optional[datetime] = None
    category: str
    tags: List[str] = Field(default_factory=list)
    language: str = "en"
    allow_comments: bool = True
    allow_likes: bool = True

    views: int = 0
    likes_count: int = 0
    dislikes_count: int = 0
    comments_count: int = 0
    shares_count: int = 0
    trending_score: float = 0.0

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
