# vidshare/constants.py
# -*- coding: utf-8 -*-
from __future__ import annotations

import enum


# -------- Enums --------
class UserRole(str, enum.Enum):
    user = "user"
    admin = "admin"
    moderator = "moderator"


class VideoStatus(str, enum.Enum):
    processing = "processing"
    ready = "ready"
    failed = "failed"
    deleted = "deleted"


class VideoPrivacy(str, enum.Enum):
    public = "public"
    private = "private"
    unlisted = "unlisted"


class VideoCategory(str, enum.Enum):
    education = "Education"
    entertainment = "Entertainment"
    gaming = "Gaming"
    music = "Music"
    sports = "Sports"
    technology = "Technology"
    travel = "Travel"
    lifestyle = "Lifestyle"
    news = "News"
    other = "Other"


class CommentStatus(str, enum.Enum):
    active = "active"
    hidden = "hidden"
    deleted = "deleted"


class LikeType(str, enum.Enum):
    like = "like"
    dislike = "dislike"


class TargetKind(str, enum.Enum):
    video = "video"
    comment = "comment"


class VideoSort(str, enum.Enum):
    newest = "-createdAt"
    oldest = "createdAt"
    most_views = "-views"
    most_likes = "-likesCount"
    trending = "-trendingScore"


# -------- Pagination --------
DEFAULT_PAGE = 1
DEFAULT_LIMIT = 12
MAX_LIMIT = 100

TRENDING_DEFAULT_LIMIT = 20
RECOMMENDED_DEFAULT_LIMIT = 10
PREVIEW_REPLIES = 3

# -------- Field limits --------
MAX_TAGS = 10
MAX_TAG_LEN = 30
TITLE_MAX = 100
DESCRIPTION_MAX = 5000
COMMENT_MAX = 1000

USERNAME_PATTERN = r"^[a-zA-Z0-9_]{3,20}$"
MIN_PASSWORD_LEN = 8

# -------- Messages --------
MSG_UNAUTHORIZED = "You are not authorized to perform this action"
MSG_INVALID_CREDENTIALS = "Invalid email or password"
MSG_EMAIL_EXISTS = "Email already exists"
MSG_USERNAME_EXISTS = "Username already exists"
MSG_VIDEO_NOT_FOUND = "Video not found"
MSG_USER_NOT_FOUND = "User not found"
MSG_COMMENT_NOT_FOUND = "Comment not found"

MSG_REGISTER_SUCCESS = "User registered successfully"
MSG_LOGIN_SUCCESS = "Login successful"
MSG_LOGOUT_SUCCESS = "Logout successful"
MSG_VIDEO_UPLOAD_SUCCESS = "Video uploaded successfully"
MSG_VIDEO_UPDATE_SUCCESS = "Video updated successfully"
MSG_VIDEO_DELETE_SUCCESS = "Video deleted successfully"
MSG_PROFILE_UPDATE_SUCCESS = "Profile updated successfully"
MSG_COMMENT_POST_SUCCESS = "Comment posted successfully"
MSG_COMMENT_DELETE_SUCCESS = "Comment deleted successfully"
