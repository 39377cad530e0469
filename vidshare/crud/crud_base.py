from __future__ import annotations
# vidshare/crud/crud_base.py
import enum
from typing import Any, Dict, Generic, Optional, Type, TypeVar

from pydantic import BaseModel
from sqlalchemy.orm import Session

ModelType = TypeVar("ModelType")
UpdateSchemaType = TypeVar("UpdateSchemaType", bound=BaseModel)


def _plain(value: Any) -> Any:
    return value.value if isinstance(value, enum.Enum) else value


LIKE_ESCAPE = "\\"


def contains_pattern(term: str) -> str:
    """`%term%` for ilike(..., escape=LIKE_ESCAPE); `%` and `_` in `term` match literally."""
    escaped = term.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2).replace("%", r"\%").replace("_", r"\_")
    return f"%{escaped}%"


class CRUDBase(Generic[ModelType, UpdateSchemaType]):
    def __init__(self, model: Type[ModelType]):
        self.model = model

    # ----- READ -----
    def get(self, db: Session, id: Any) -> Optional[ModelType]:
        return db.get(self.model, id)

    # ----- UPDATE (partial) -----
    def update(
        self, db: Session, *, db_obj: ModelType, obj_in: UpdateSchemaType | Dict[str, Any]
    ) -> ModelType:
        if isinstance(obj_in, BaseModel):
            update_data = obj_in.model_dump(exclude_unset=True, exclude_none=True)
        else:
            update_data = {k: v for k, v in obj_in.items() if v is not None}
        for field, value in update_data.items():
            if hasattr(db_obj, field):
                setattr(db_obj, field, _plain(value))
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj
