"""FastAPI dependencies."""

from keyset_service.core.dependencies.pagination import (
    CursorPagination,
    CursorPaginationParams,
    get_cursor_pagination,
)

__all__ = ["CursorPagination", "CursorPaginationParams", "get_cursor_pagination"]
