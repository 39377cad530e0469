from __future__ import annotations
# vidshare/crud/comment_crud.py
"""
Comment queries and mutations.

Threads are two levels deep: a reply to a reply is attached to the
top-level comment and remembers whom it answered in reply_to_user_id.
Every mutation here commits on its own; counters are adjusted afterwards
by vidshare.services.engagement.
"""
import logging
from typing import Dict, List, Optional

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from vidshare.constants import (
    MSG_COMMENT_NOT_FOUND,
    PREVIEW_REPLIES,
    CommentStatus,
    TargetKind,
)
from vidshare.crud.crud_base import CRUDBase
from vidshare.crud.like_crud import delete_likes_for
from vidshare.errors import ForbiddenError, NotFoundError, ValidationError
from vidshare.models import Comment, User, Video
from vidshare.schemas.comment import CommentCreate, CommentUpdate
from vidshare.services import engagement
from vidshare.services.engagement import CommentRemoval
from vidshare.utils.pagination import Page, PageParams, paginate

logger = logging.getLogger("vidshare.comments")

MSG_COMMENTS_DISABLED = "Comments are disabled for this video"
MSG_PARENT_NOT_FOUND = "Parent comment not found"

_COMMENT_SORTS = {
    "-createdAt": (Comment.created_at.desc(), Comment.id.desc()),
    "createdAt": (Comment.created_at.asc(), Comment.id.asc()),
    "-likesCount": (Comment.likes_count.desc(), Comment.id.desc()),
}


class CRUDComment(CRUDBase[Comment, CommentUpdate]):
    # ----- READ -----
    def get_or_404(self, db: Session, comment_id: int) -> Comment:
        comment = db.get(Comment, comment_id)
        if comment is None or comment.status == CommentStatus.deleted.value:
            raise NotFoundError(MSG_COMMENT_NOT_FOUND)
        return comment

    def list_top_level(
        self, db: Session, video_id: int, params: PageParams, sort: Optional[str] = None
    ) -> Page:
        order = _COMMENT_SORTS.get(sort or "-createdAt")
        if order is None:
            raise ValidationError(
                "Invalid sort option",
                errors=[{"field": "sort", "message": f"must be one of: {', '.join(_COMMENT_SORTS)}", "value": sort}],
            )
        stmt = (
            select(Comment)
            .where(
                Comment.video_id == video_id,
                Comment.parent_id.is_(None),
                Comment.status == CommentStatus.active.value,
            )
            .order_by(*order)
        )
        return paginate(db, stmt, params)

    def preview_replies(
        self, db: Session, parent_ids: List[int], per_parent: int = PREVIEW_REPLIES
    ) -> Dict[int, List[Comment]]:
        """Earliest active replies for each parent, at most `per_parent` each."""
        out: Dict[int, List[Comment]] = {pid: [] for pid in parent_ids}
        if not parent_ids:
            return out
        stmt = (
            select(Comment)
            .where(
                Comment.parent_id.in_(parent_ids),
                Comment.status == CommentStatus.active.value,
            )
            .order_by(Comment.created_at.asc(), Comment.id.asc())
        )
        for reply in db.scalars(stmt).unique():
            bucket = out[reply.parent_id]
            if len(bucket) < per_parent:
                bucket.append(reply)
        return out

    def list_replies(self, db: Session, comment_id: int, params: PageParams) -> Page:
        stmt = (
            select(Comment)
            .where(
                Comment.parent_id == comment_id,
                Comment.status == CommentStatus.active.value,
            )
            .order_by(Comment.created_at.asc(), Comment.id.asc())
        )
        return paginate(db, stmt, params)

    # ----- CREATE -----
    def create(self, db: Session, *, video: Video, author: User, obj_in: CommentCreate) -> Comment:
        if not video.allow_comments:
            raise ForbiddenError(MSG_COMMENTS_DISABLED)

        parent_id: Optional[int] = None
        reply_to_user_id: Optional[int] = None
        if obj_in.parent_id is not None:
            parent = db.get(Comment, obj_in.parent_id)
            if parent is None or parent.status == CommentStatus.deleted.value:
                raise NotFoundError(MSG_PARENT_NOT_FOUND)
            if parent.video_id != video.id:
                raise ValidationError("Parent comment belongs to a different video")
            if parent.parent_id is not None:
                # reply to a reply: keep the tree two levels deep
                reply_to_user_id = parent.user_id
                parent_id = parent.parent_id
            else:
                parent_id = parent.id

        comment = Comment(
            video_id=video.id,
            user_id=author.id,
            parent_id=parent_id,
            reply_to_user_id=reply_to_user_id,
            content=obj_in.content,
            status=CommentStatus.active.value,
        )
        db.add(comment)
        db.commit()
        db.refresh(comment)

        engagement.on_comment_created(db, comment)
        db.refresh(comment)
        return comment

    # ----- UPDATE -----
    def edit(self, db: Session, *, comment: Comment, obj_in: CommentUpdate) -> Comment:
        comment.edit(obj_in.content)
        db.commit()
        db.refresh(comment)
        return comment

    def moderate(self, db: Session, *, comment: Comment, action: str) -> Comment:
        previous = comment.status
        if action == "hide":
            comment.status = CommentStatus.hidden.value
        elif action == "unhide":
            comment.status = CommentStatus.active.value
        else:
            raise ValidationError(f"Unknown moderation action: {action}")
        db.commit()
        db.refresh(comment)
        logger.info("comment id=%s moderated %s -> %s", comment.id, previous, comment.status)

        engagement.on_comment_status_changed(db, comment, previous)
        db.refresh(comment)
        return comment

    # ----- DELETE -----
    def remove(self, db: Session, *, comment: Comment) -> CommentRemoval:
        """
        Hard-delete a comment, its direct replies and every like on them,
        then adjust the video/parent counters.
        """
        reply_rows = db.execute(
            select(Comment.id, Comment.status).where(Comment.parent_id == comment.id)
        ).all()
        reply_ids = [r.id for r in reply_rows]
        removal = CommentRemoval(
            comment_id=comment.id,
            video_id=comment.video_id,
            parent_id=comment.parent_id,
            was_active=comment.is_active,
            active_replies_removed=sum(1 for r in reply_rows if r.status == CommentStatus.active.value),
        )

        delete_likes_for(db, TargetKind.comment, [comment.id, *reply_ids])
        if reply_ids:
            db.execute(
                delete(Comment)
                .where(Comment.id.in_(reply_ids))
                .execution_options(synchronize_session=False)
            )
        db.delete(comment)
        db.commit()
        logger.info(
            "comment deleted id=%s video=%s replies=%d",
            removal.comment_id, removal.video_id, len(reply_ids),
        )

        engagement.on_comment_removed(db, removal)
        return removal


comment_crud = CRUDComment(Comment)
