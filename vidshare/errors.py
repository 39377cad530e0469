# vidshare/errors.py
# -*- coding: utf-8 -*-
"""
Error taxonomy surfaced to clients.

Every error carries a human message and an HTTP status; the handlers
registered in vidshare.main turn them into the
`{"success": false, "message": ..., "errors": ...}` envelope.
"""

from __future__ import annotations

from typing import Any, List, Optional


class AppError(Exception):
    status_code: int = 500

    def __init__(self, message: str, *, errors: Optional[List[Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.errors = errors


class ValidationError(AppError):
    """Malformed/missing input or a duplicate unique field."""
    status_code = 400


class AuthError(AppError):
    """Missing, invalid or expired credential."""
    status_code = 401


class ForbiddenError(AppError):
    """Authenticated but not allowed (wrong owner, disabled feature)."""
    status_code = 403


class NotFoundError(AppError):
    status_code = 404


class InternalError(AppError):
    status_code = 500


__all__ = [
    "AppError",
    "ValidationError",
    "AuthError",
    "ForbiddenError",
    "NotFoundError",
    "InternalError",
]
