# vidshare/schemas/user.py
# -*- coding: utf-8 -*-
"""
User & auth schemas

- RegisterIn / LoginIn:          credentials in
- UpdatePasswordIn:              current + new + confirmation
- UpdateProfileIn:               partial channel/profile update
- DeleteAccountIn:               password-confirmed soft delete
- UserSummary:                   embedded author/owner card
- UserOut / UserPrivateOut:      public profile vs. "me"
- AuthOut:                       user + bearer token
"""

from __future__ import annotations

import re
from datetime import datetime
from typing import Optional

from pydantic import EmailStr, Field, field_validator, model_validator

from vidshare.constants import MIN_PASSWORD_LEN, USERNAME_PATTERN
from vidshare.schemas.common import CamelModel

_USERNAME_RE = re.compile(USERNAME_PATTERN)


def _required(v: object, label: str) -> str:
    s = str(v or "").strip()
    if not s:
        raise ValueError(f"{label} is required")
    return s


# ───────────────────────────────── Inputs ─────────────────────────────────
class RegisterIn(CamelModel):
    username: str
    email: EmailStr
    password: str
    full_name: str = Field(..., max_length=50)

    @field_validator("username", mode="before")
    @classmethod
    def _v_username(cls, v):
        v = _required(v, "Username")
        if not _USERNAME_RE.match(v):
            raise ValueError(
                "Username must be 3-20 characters: letters, numbers, and underscores only"
            )
        return v.lower()

    @field_validator("email", mode="before")
    @classmethod
    def _v_email(cls, v):
        return _required(v, "Email").lower()

    @field_validator("password")
    @classmethod
    def _v_password(cls, v: str) -> str:
        if len(v or "") < MIN_PASSWORD_LEN:
            raise ValueError(f"Password must be at least {MIN_PASSWORD_LEN} characters long")
        return v

    @field_validator("full_name", mode="before")
    @classmethod
    def _v_full_name(cls, v):
        return _required(v, "Full name")


class LoginIn(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=1)

    @field_validator("email", mode="before")
    @classmethod
    def _v_email(cls, v):
        return _required(v, "Email").lower()


class UpdatePasswordIn(CamelModel):
    current_password: str = Field(..., min_length=1)
    new_password: str
    confirm_password: str

    @field_validator("new_password")
    @classmethod
    def _v_new(cls, v: str) -> str:
        if len(v or "") < MIN_PASSWORD_LEN:
            raise ValueError(f"Password must be at least {MIN_PASSWORD_LEN} characters long")
        return v

    @model_validator(mode="after")
    def _v_match(self):
        if self.new_password != self.confirm_password:
            raise ValueError("Passwords do not match")
        return self


class UpdateProfileIn(CamelModel):
    full_name: Optional[str] = Field(None, max_length=50)
    bio: Optional[str] = Field(None, max_length=500)
    channel_name: Optional[str] = Field(None, max_length=100)
    channel_description: Optional[str] = Field(None, max_length=1000)

    @field_validator("full_name", "channel_name", mode="before")
    @classmethod
    def _v_strip_non_empty(cls, v):
        if v is None:
            return None
        s = str(v).strip()
        if not s:
            raise ValueError("cannot be empty")
        return s


class DeleteAccountIn(CamelModel):
    password: str = Field(..., min_length=1)


# ───────────────────────────────── Outputs ────────────────────────────────
class UserSummary(CamelModel):
    id: int
    username: str
    full_name: str
    avatar: str
    channel_name: Optional[str] = None


class UserOut(UserSummary):
    bio: str = ""
    cover_image: Optional[str] = None
    channel_description: str = ""
    subscribers_count: int = 0
    total_videos: int = 0
    total_views: int = 0
    is_verified: bool = False
    created_at: Optional[datetime] = None


class UserPrivateOut(UserOut):
    email: str
    role: str
    is_active: bool = True
    last_login_at: Optional[datetime] = None
    login_count: int = 0


class AuthOut(CamelModel):
    user: UserPrivateOut
    token: str
    token_type: str = "bearer"
