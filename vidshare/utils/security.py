# vidshare/utils/security.py
# -*- coding: utf-8 -*-
from __future__ import annotations

"""
Security helpers for VidShare.

- Password hashing/verification (passlib CryptContext; schemes from
  PASSWORD_HASH_SCHEMES, bcrypt by default)
- JWT access tokens (python-jose), subject = user id
- Strict defaults (issuer, audience, leeway)

Settings used (vidshare.config.settings):
  SECRET_KEY, JWT_ALG (default HS256), ACCESS_TOKEN_EXPIRE_MINUTES (default 7 days)
"""

import datetime as dt
import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional, Union

from jose import JWTError, jwt  # python-jose
from passlib.context import CryptContext

from vidshare.config import settings

logger = logging.getLogger("vidshare.security")

__all__ = [
    "pwd_context",
    "verify_password",
    "get_password_hash",
    "create_access_token",
    "decode_token",
    "safe_decode_token",
    "issued_before",
    "JWTError",
]

SECRET_KEY: str = settings.SECRET_KEY or ""
ALGORITHM: str = settings.JWT_ALG
ACCESS_TOKEN_EXPIRE_MINUTES: int = int(settings.ACCESS_TOKEN_EXPIRE_MINUTES)
TOKEN_AUDIENCE = "vidshare-api"
ISSUER = "vidshare"
JWT_LEEWAY_SECONDS = 10


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


# =========================
# Password hashing
# =========================
def _build_pwd_context() -> CryptContext:
    ctx = CryptContext(schemes=settings.password_schemes, deprecated="auto")
    # Soft self-check: a broken bcrypt backend should be loud, not fatal
    try:
        test_hash = ctx.hash("self-check")
        if not ctx.verify("self-check", test_hash):
            raise RuntimeError("hash self-check failed")
    except Exception as e:
        logger.warning("Passlib backend check failed (%s): %s", settings.password_schemes, e)
    return ctx


pwd_context = _build_pwd_context()


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Return True if password matches the hash (never raises)."""
    if not (isinstance(plain_password, str) and isinstance(hashed_password, str)):
        return False
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (ValueError, TypeError) as e:
        logger.debug("verify_password error: %s", e)
        return False


def get_password_hash(password: str) -> str:
    if not isinstance(password, str) or not password:
        raise ValueError("Password missing")
    return pwd_context.hash(password)


# =========================
# JWT helpers
# =========================
def create_access_token(
    subject: Union[str, int],
    *,
    expires_delta: Optional[timedelta] = None,
    extra: Optional[Dict[str, Any]] = None,
) -> str:
    now = _now_utc()
    claims: Dict[str, Any] = dict(extra or {})
    claims.update(
        {
            "sub": str(subject),
            "aud": TOKEN_AUDIENCE,
            "iss": ISSUER,
            "jti": uuid.uuid4().hex,
            "type": "access",
            "iat": int(now.timestamp()),
            "nbf": int(now.timestamp()),
            "exp": now + (expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)),
        }
    )
    return jwt.encode(claims, SECRET_KEY, algorithm=ALGORITHM)


def decode_token(token: str) -> Dict[str, Any]:
    """
    Decode & validate a JWT and return its claims.
    Raises JWTError on invalid/expired token.
    """
    return jwt.decode(
        token,
        SECRET_KEY,
        algorithms=[ALGORITHM],
        audience=TOKEN_AUDIENCE,
        issuer=ISSUER,
        options={"leeway": JWT_LEEWAY_SECONDS},
    )


def safe_decode_token(token: str) -> tuple[bool, Dict[str, Any] | None, str | None]:
    """Like decode_token but never raises. Returns (ok, claims, error_message)."""
    try:
        return True, decode_token(token), None
    except JWTError as e:
        return False, None, str(e)


def issued_before(claims: Dict[str, Any], moment: Optional[dt.datetime]) -> bool:
    """True when the token was issued before `moment` (e.g. a password change)."""
    if moment is None:
        return False
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    iat = int(claims.get("iat") or 0)
    return int(moment.timestamp()) > iat
