# -*- coding: utf-8 -*-
from __future__ import annotations

import datetime as dt

from sqlalchemy import JSON as SA_JSON
from sqlalchemy.dialects.postgresql import JSONB as PG_JSONB
from sqlalchemy.ext.mutable import MutableList

# JSON portable: SQLite/others -> JSON, Postgres -> JSONB
JSON_VARIANT = SA_JSON().with_variant(PG_JSONB, "postgresql")


def as_mutable_list(column_type=JSON_VARIANT):
    """Use for list columns (tags) so in-place appends are tracked."""
    return MutableList.as_mutable(column_type)


def utcnow() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


def as_aware(value: dt.datetime) -> dt.datetime:
    """SQLite hands back naive datetimes; treat them as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=dt.timezone.utc)
    return value
