from __future__ import annotations
# vidshare/crud/user_crud.py
import logging
from typing import Optional

from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from vidshare.constants import (
    MSG_EMAIL_EXISTS,
    MSG_INVALID_CREDENTIALS,
    MSG_USERNAME_EXISTS,
)
from vidshare.crud.crud_base import LIKE_ESCAPE, CRUDBase, contains_pattern
from vidshare.errors import AuthError, ValidationError
from vidshare.models import User
from vidshare.schemas.user import RegisterIn, UpdateProfileIn
from vidshare.utils.pagination import Page, PageParams, paginate
from vidshare.utils.security import get_password_hash, verify_password

logger = logging.getLogger("vidshare.users")


class CRUDUser(CRUDBase[User, UpdateProfileIn]):
    def get_active(self, db: Session, user_id: int) -> Optional[User]:
        user = db.get(User, user_id)
        return user if user is not None and user.is_active else None

    def get_by_email(self, db: Session, email: str) -> Optional[User]:
        return db.scalars(select(User).where(User.email == (email or "").strip().lower())).first()

    def get_by_username(self, db: Session, username: str) -> Optional[User]:
        return db.scalars(
            select(User).where(User.username == (username or "").strip().lower())
        ).first()

    def create(self, db: Session, *, obj_in: RegisterIn) -> User:
        if self.get_by_email(db, obj_in.email):
            raise ValidationError(MSG_EMAIL_EXISTS)
        if self.get_by_username(db, obj_in.username):
            raise ValidationError(MSG_USERNAME_EXISTS)
        user = User(
            username=obj_in.username,
            email=str(obj_in.email),
            password_hash=get_password_hash(obj_in.password),
            full_name=obj_in.full_name,
            channel_name=obj_in.full_name,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        logger.info("registered user id=%s username=%s", user.id, user.username)
        return user

    def authenticate(self, db: Session, *, email: str, password: str) -> User:
        user = self.get_by_email(db, email)
        if user is None or not verify_password(password, user.password_hash):
            raise AuthError(MSG_INVALID_CREDENTIALS)
        if not user.is_active:
            raise AuthError("Your account has been deactivated")
        user.mark_login()
        db.commit()
        db.refresh(user)
        return user

    def change_password(self, db: Session, *, user: User, current: str, new: str) -> User:
        if not verify_password(current, user.password_hash):
            raise AuthError("Current password is incorrect")
        user.set_password_hash(get_password_hash(new))
        db.commit()
        db.refresh(user)
        return user

    def deactivate(self, db: Session, *, user: User, password: str) -> User:
        if not verify_password(password, user.password_hash):
            raise AuthError("Password is incorrect")
        user.soft_delete()
        db.commit()
        logger.info("deactivated user id=%s", user.id)
        return user

    def set_avatar(self, db: Session, *, user: User, file_name: str) -> User:
        user.avatar = file_name
        db.commit()
        db.refresh(user)
        return user

    def list_active(self, db: Session, params: PageParams, search: Optional[str] = None) -> Page:
        stmt = select(User).where(User.is_active.is_(True))
        term = (search or "").strip()
        if term:
            like = contains_pattern(term)
            stmt = stmt.where(
                or_(
                    User.username.ilike(like, escape=LIKE_ESCAPE),
                    User.full_name.ilike(like, escape=LIKE_ESCAPE),
                )
            )
        stmt = stmt.order_by(User.created_at.desc(), User.id.desc())
        return paginate(db, stmt, params)


user_crud = CRUDUser(User)
