# vidshare/utils/pagination.py
# -*- coding: utf-8 -*-
"""
Offset pagination over SQLAlchemy 2.0 `select()` statements.

    params = PageParams.from_query(page, limit)
    page = paginate(db, select(Video).where(...).order_by(...), params)

`page` is floored at 1 and `limit` clamped to [1, MAX_LIMIT]; a missing
or zero value falls back to the defaults. A page past the last one comes
back empty without querying rows. total_pages = ceil(total / limit).
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Generic, List, Optional, TypeVar

from sqlalchemy import Select, func, select
from sqlalchemy.orm import Session

from vidshare.constants import DEFAULT_LIMIT, DEFAULT_PAGE, MAX_LIMIT

T = TypeVar("T")


def clamp_limit(limit: Optional[int], default: int = DEFAULT_LIMIT, maximum: int = MAX_LIMIT) -> int:
    if not limit:
        return default
    return max(1, min(int(limit), maximum))


def clamp_page(page: Optional[int]) -> int:
    if page is None:
        return DEFAULT_PAGE
    return max(1, int(page))


@dataclass(frozen=True)
class PageParams:
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT

    @classmethod
    def from_query(cls, page: Optional[int] = None, limit: Optional[int] = None) -> "PageParams":
        return cls(page=clamp_page(page), limit=clamp_limit(limit))

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


@dataclass
class Page(Generic[T]):
    items: List[T] = field(default_factory=list)
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT
    total_items: int = 0

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_items / self.limit) if self.limit else 0

    @property
    def has_next_page(self) -> bool:
        return self.page < self.total_pages

    @property
    def has_previous_page(self) -> bool:
        return self.page > 1

    def meta(self) -> dict[str, Any]:
        return {
            "current_page": self.page,
            "total_pages": self.total_pages,
            "total_items": self.total_items,
            "items_per_page": self.limit,
            "has_next_page": self.has_next_page,
            "has_previous_page": self.has_previous_page,
        }


def count_rows(db: Session, stmt: Select) -> int:
    count_stmt = select(func.count()).select_from(stmt.order_by(None).subquery())
    return int(db.scalar(count_stmt) or 0)


def paginate(db: Session, stmt: Select, params: PageParams) -> Page:
    total = count_rows(db, stmt)
    if params.offset >= total:
        return Page(items=[], page=params.page, limit=params.limit, total_items=total)
    rows = db.scalars(stmt.offset(params.offset).limit(params.limit)).unique().all()
    return Page(items=list(rows), page=params.page, limit=params.limit, total_items=total)
