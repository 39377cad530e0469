# vidshare/utils/response.py
# -*- coding: utf-8 -*-
"""Success envelopes: {success, message, data, pagination?}."""
from __future__ import annotations

from typing import Any, Dict, List, Type

from pydantic import BaseModel

from vidshare.schemas.common import PaginationMeta
from vidshare.utils.pagination import Page


def ok(data: Any = None, message: str = "Success") -> Dict[str, Any]:
    return {"success": True, "message": message, "data": data}


def page_body(page: Page, data: List[Any], message: str = "Success") -> Dict[str, Any]:
    return {"success": True, "message": message, "data": data, "pagination": PaginationMeta(**page.meta())}


def paginated(page: Page, schema: Type[BaseModel], message: str = "Success") -> Dict[str, Any]:
    return page_body(page, [schema.model_validate(r) for r in page.items], message)
