# -*- coding: utf-8 -*-
"""
Register every SQLAlchemy model on `Base.metadata`.

Import order follows the FK graph (users -> videos -> comments -> likes) so
`Base.metadata.create_all` and Alembic autogenerate see all tables.
"""
from __future__ import annotations

from vidshare.db import Base
from vidshare.models.user import User
from vidshare.models.video import Video
from vidshare.models.comment import Comment
from vidshare.models.like import (
    CommentTarget,
    Like,
    LikeTarget,
    VideoTarget,
    make_target,
)

__all__ = [
    "Base",
    "User",
    "Video",
    "Comment",
    "Like",
    "LikeTarget",
    "VideoTarget",
    "CommentTarget",
    "make_target",
]
