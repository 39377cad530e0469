# vidshare/routes/auth_routes.py
# -*- coding: utf-8 -*-
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from vidshare.constants import (
    MSG_LOGIN_SUCCESS,
    MSG_LOGOUT_SUCCESS,
    MSG_PROFILE_UPDATE_SUCCESS,
    MSG_REGISTER_SUCCESS,
)
from vidshare.crud import user_crud
from vidshare.db import get_db
from vidshare.dependencies import get_current_user
from vidshare.models import User
from vidshare.schemas.user import (
    AuthOut,
    DeleteAccountIn,
    LoginIn,
    RegisterIn,
    UpdatePasswordIn,
    UpdateProfileIn,
    UserPrivateOut,
)
from vidshare.utils.response import ok
from vidshare.utils.security import create_access_token

logger = logging.getLogger("vidshare.auth")

router = APIRouter(prefix="/auth", tags=["Auth"])


def _auth_payload(user: User) -> AuthOut:
    return AuthOut(user=UserPrivateOut.model_validate(user), token=create_access_token(user.id))


@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(payload: RegisterIn, db: Session = Depends(get_db)):
    user = user_crud.create(db, obj_in=payload)
    return ok(_auth_payload(user), MSG_REGISTER_SUCCESS)


@router.post("/login")
def login(payload: LoginIn, db: Session = Depends(get_db)):
    user = user_crud.authenticate(db, email=payload.email, password=payload.password)
    logger.info("login user=%s count=%s", user.id, user.login_count)
    return ok(_auth_payload(user), MSG_LOGIN_SUCCESS)


@router.post("/logout")
def logout(current_user: User = Depends(get_current_user)):
    # bearer tokens are stateless; the client drops its copy
    logger.info("logout user=%s", current_user.id)
    return ok(None, MSG_LOGOUT_SUCCESS)


@router.get("/me")
def me(current_user: User = Depends(get_current_user)):
    return ok({"user": UserPrivateOut.model_validate(current_user)}, "User retrieved successfully")


@router.put("/update-password")
def update_password(
    payload: UpdatePasswordIn,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    user = user_crud.change_password(
        db, user=current_user, current=payload.current_password, new=payload.new_password
    )
    return ok(_auth_payload(user), "Password updated successfully")


@router.put("/update-profile")
def update_profile(
    payload: UpdateProfileIn,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    user = user_crud.update(db, db_obj=current_user, obj_in=payload)
    return ok({"user": UserPrivateOut.model_validate(user)}, MSG_PROFILE_UPDATE_SUCCESS)


@router.delete("/delete-account")
def delete_account(
    payload: DeleteAccountIn,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    user_crud.deactivate(db, user=current_user, password=payload.password)
    return ok(None, "Account deleted successfully")
