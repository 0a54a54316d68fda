"""Keyset (cursor) pagination for MongoDB collections."""

from keyset_service.core.database import CollectionSchema, FieldSpec, FieldType
from keyset_service.core.exceptions import (
    CursorDecodeError,
    CursorSchemaMismatchError,
    InputError,
    PaginationError,
    StoreError,
    UnknownFieldError,
)
from keyset_service.core.pagination import Edge, KeysetPaginator, Page, PageInfo, paginate

__version__ = "0.1.0"

__all__ = [
    "CollectionSchema",
    "CursorDecodeError",
    "CursorSchemaMismatchError",
    "Edge",
    "FieldSpec",
    "FieldType",
    "InputError",
    "KeysetPaginator",
    "Page",
    "PageInfo",
    "PaginationError",
    "StoreError",
    "UnknownFieldError",
    "__version__",
    "paginate",
]
