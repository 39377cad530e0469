# vidshare/dependencies.py
# -*- coding: utf-8 -*-
"""
Auth dependencies (bearer-only).

    get_current_user   valid token for an active user, else AuthError (401)
    get_optional_user  same, but anonymous/invalid -> None
    require_roles(...) role guard, ForbiddenError (403)
"""
from __future__ import annotations

import logging
from typing import Optional, Set

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from vidshare.constants import MSG_UNAUTHORIZED, UserRole
from vidshare.db import get_db
from vidshare.errors import AuthError, ForbiddenError
from vidshare.models import User
from vidshare.utils.security import issued_before, safe_decode_token

logger = logging.getLogger("vidshare.auth")

bearer_scheme = HTTPBearer(auto_error=False)


# ------------- Helpers -------------
def _norm(s: Optional[str]) -> Optional[str]:
    return s.lower().strip() if isinstance(s, str) else None


def _resolve_user(db: Session, token: str) -> User:
    ok, claims, err = safe_decode_token(token)
    if not ok or not claims:
        logger.debug("token rejected: %s", err)
        raise AuthError("Invalid token. Please log in again.")

    sub = claims.get("sub")
    try:
        user_id = int(sub)
    except (TypeError, ValueError):
        raise AuthError("Invalid token payload")

    user = db.get(User, user_id)
    if user is None:
        raise AuthError("The user belonging to this token no longer exists")
    if not user.is_active:
        raise AuthError("Your account has been deactivated")
    if issued_before(claims, user.password_changed_at):
        raise AuthError("Password recently changed. Please log in again.")
    return user


# ------------- Current user -------------
def get_current_user(
    creds: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> User:
    if creds is None or not creds.credentials:
        raise AuthError("You are not logged in. Please log in to get access.")
    return _resolve_user(db, creds.credentials)


def get_optional_user(
    creds: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> Optional[User]:
    if creds is None or not creds.credentials:
        return None
    try:
        return _resolve_user(db, creds.credentials)
    except AuthError as e:
        logger.debug("optional auth ignored: %s", e.message)
        return None


# ------------- Role guards -------------
def require_roles(*roles: UserRole | str):
    """
    Use as a dependency:
        @router.patch(..., dependencies=[Depends(require_roles("admin", "moderator"))])
    """
    allowed: Set[str] = {_norm(r.value if isinstance(r, UserRole) else r) for r in roles if r}
    if not allowed:
        raise ValueError("require_roles() needs at least one role")

    def checker(current_user: User = Depends(get_current_user)) -> User:
        role = _norm(getattr(current_user, "role", UserRole.user.value))
        if role not in allowed:
            logger.warning(
                "Role access denied user=%s role=%s allowed=%s",
                current_user.id, role, sorted(allowed),
            )
            raise ForbiddenError(MSG_UNAUTHORIZED)
        return current_user

    return checker


get_staff_user = require_roles(UserRole.admin, UserRole.moderator)


def can_manage(user: User, owner_id: int) -> bool:
    """Owner or admin may edit/delete a resource."""
    return user.id == owner_id or _norm(user.role) == UserRole.admin.value


__all__ = [
    "bearer_scheme",
    "get_current_user",
    "get_optional_user",
    "require_roles",
    "get_staff_user",
    "can_manage",
]
