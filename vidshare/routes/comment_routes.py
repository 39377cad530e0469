# vidshare/routes/comment_routes.py
# -*- coding: utf-8 -*-
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from vidshare.constants import (
    MSG_COMMENT_DELETE_SUCCESS,
    MSG_COMMENT_POST_SUCCESS,
    MSG_UNAUTHORIZED,
)
from vidshare.crud import comment_crud, video_crud
from vidshare.db import get_db
from vidshare.dependencies import can_manage, get_current_user, get_optional_user, get_staff_user
from vidshare.errors import ForbiddenError
from vidshare.models import User
from vidshare.schemas.comment import (
    CommentCreate,
    CommentOut,
    CommentThreadOut,
    CommentUpdate,
    ModerationAction,
)
from vidshare.utils.pagination import PageParams
from vidshare.utils.response import ok, page_body, paginated

router = APIRouter(tags=["Comments"])


# ---------- Per-video ----------
@router.post("/videos/{video_id}/comments", status_code=status.HTTP_201_CREATED)
def create_comment(
    video_id: int,
    payload: CommentCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    video = video_crud.get_visible(db, video_id, current_user.id)
    comment = comment_crud.create(db, video=video, author=current_user, obj_in=payload)
    return ok({"comment": CommentOut.model_validate(comment)}, MSG_COMMENT_POST_SUCCESS)


@router.get("/videos/{video_id}/comments")
def list_comments(
    video_id: int,
    page: Optional[int] = Query(None),
    limit: Optional[int] = Query(None),
    sort: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    viewer: Optional[User] = Depends(get_optional_user),
):
    video_crud.get_visible(db, video_id, viewer.id if viewer else None)
    result = comment_crud.list_top_level(db, video_id, PageParams.from_query(page, limit), sort=sort)
    previews = comment_crud.preview_replies(db, [c.id for c in result.items])
    threads = [
        CommentThreadOut(
            **CommentOut.model_validate(c).model_dump(),
            replies=[CommentOut.model_validate(r) for r in previews.get(c.id, [])],
        )
        for c in result.items
    ]
    return page_body(result, threads, "Comments retrieved successfully")


# ---------- Single comment ----------
@router.put("/comments/{comment_id}")
def update_comment(
    comment_id: int,
    payload: CommentUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    comment = comment_crud.get_or_404(db, comment_id)
    if comment.user_id != current_user.id:
        raise ForbiddenError(MSG_UNAUTHORIZED)
    comment = comment_crud.edit(db, comment=comment, obj_in=payload)
    return ok({"comment": CommentOut.model_validate(comment)}, "Comment updated successfully")


@router.delete("/comments/{comment_id}")
def delete_comment(
    comment_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    comment = comment_crud.get_or_404(db, comment_id)
    if not can_manage(current_user, comment.user_id):
        raise ForbiddenError(MSG_UNAUTHORIZED)
    comment_crud.remove(db, comment=comment)
    return ok(None, MSG_COMMENT_DELETE_SUCCESS)


@router.get("/comments/{comment_id}/replies")
def list_replies(
    comment_id: int,
    page: Optional[int] = Query(None),
    limit: Optional[int] = Query(None),
    db: Session = Depends(get_db),
    viewer: Optional[User] = Depends(get_optional_user),
):
    comment = comment_crud.get_or_404(db, comment_id)
    video_crud.get_visible(db, comment.video_id, viewer.id if viewer else None)
    result = comment_crud.list_replies(db, comment_id, PageParams.from_query(page, limit))
    return paginated(result, CommentOut, "Replies retrieved successfully")


@router.post("/comments/{comment_id}/moderate/{action}")
def moderate_comment(
    comment_id: int,
    action: ModerationAction,
    db: Session = Depends(get_db),
    _staff: User = Depends(get_staff_user),
):
    comment = comment_crud.get_or_404(db, comment_id)
    comment = comment_crud.moderate(db, comment=comment, action=action)
    return ok({"comment": CommentOut.model_validate(comment)}, f"Comment {action} applied")
