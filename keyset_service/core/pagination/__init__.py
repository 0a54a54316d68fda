"""Keyset (cursor) pagination.

This module provides cursor-based pagination over document collections.
A cursor is the sort-field projection of a row, encoded as an opaque token,
so a page request can seek to that row's position instead of relying on an
offset that drifts under concurrent writes.

Usage:
    from keyset_service.core.pagination import KeysetPaginator

    paginator = KeysetPaginator(executor, schema)
    page = await paginator.paginate({"status": "active"}, sort="-created_at", first=20)

    # Next page
    page = await paginator.paginate(
        {"status": "active"},
        sort="-created_at",
        first=20,
        after=page.page_info.end_cursor,
    )
"""

from keyset_service.core.pagination.conditions import (
    Boundary,
    build_boundary,
    build_strict_condition,
)
from keyset_service.core.pagination.cursor import CursorCodec, decode_base64, encode_base64
from keyset_service.core.pagination.index_finder import find_index, sort_compare
from keyset_service.core.pagination.paginator import (
    Direction,
    KeysetPaginator,
    get_limit_and_direction,
    paginate,
    row_projection,
)
from keyset_service.core.pagination.ranking import ABSENT, RankedValue, ValueKind, classify, compare
from keyset_service.core.pagination.schemas import Document, Edge, Page, PageInfo
from keyset_service.core.pagination.sorting import (
    get_value_by_path,
    normalize_select,
    normalize_sort,
    reverse_sort_order,
    to_projection,
)
from keyset_service.core.pagination.validation import validate_cursor

__all__ = [
    "ABSENT",
    "Boundary",
    "CursorCodec",
    "Direction",
    "Document",
    "Edge",
    "KeysetPaginator",
    "Page",
    "PageInfo",
    "RankedValue",
    "ValueKind",
    "build_boundary",
    "build_strict_condition",
    "classify",
    "compare",
    "decode_base64",
    "encode_base64",
    "find_index",
    "get_limit_and_direction",
    "get_value_by_path",
    "normalize_select",
    "normalize_sort",
    "paginate",
    "reverse_sort_order",
    "row_projection",
    "sort_compare",
    "to_projection",
    "validate_cursor",
]
