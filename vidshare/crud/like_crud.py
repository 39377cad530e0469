from __future__ import annotations
# vidshare/crud/like_crud.py
from typing import Iterable

from sqlalchemy import delete
from sqlalchemy.orm import Session

from vidshare.constants import TargetKind
from vidshare.models import Like


def delete_likes_for(db: Session, kind: TargetKind, target_ids: Iterable[int]) -> int:
    """Remove every like pointing at the given targets (no commit)."""
    ids = list(target_ids)
    if not ids:
        return 0
    res = db.execute(
        delete(Like)
        .where(Like.target_kind == kind.value, Like.target_id.in_(ids))
        .execution_options(synchronize_session=False)
    )
    return int(res.rowcount or 0)
