# -*- coding: utf-8 -*-
from vidshare.schemas.common import CamelModel, ErrorDetail, PaginationMeta

__all__ = ["CamelModel", "ErrorDetail", "PaginationMeta"]
