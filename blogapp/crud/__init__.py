"""CRUD operations package - exports singleton instances for all collections."""

from .base import CRUDBase
from .comment import crud_comment
from .like import crud_like
from .post import crud_post


__all__ = [
    # Base
    "CRUDBase",
    # CRUD instances
    "crud_comment",
    "crud_like",
    "crud_post",
]
