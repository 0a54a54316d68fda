"""Locate a cursor inside a tie group.

A tie group is the set of rows sharing the cursor's value in the leading
sort field. The store returns it sorted by the full sort spec, so a binary
search with the in-memory comparator finds the cursor's rank inside the
group without scanning the collection.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from keyset_service.core.pagination.ranking import compare
from keyset_service.core.pagination.sorting import SortSpec, get_value_by_path


def sort_compare(a: Mapping[str, Any], b: Mapping[str, Any], sort: SortSpec) -> int:
    """Compare two rows by a full sort spec.

    Each field is compared with the comparator using the field's own order
    as direction, then the sign is flipped for descending fields. The first
    non-zero field decides.

    Returns:
        -1 if ``a`` comes first in ``sort`` order, 1 if ``b`` does, else 0.
    """
    for field, order in sort:
        result = compare(get_value_by_path(a, field), get_value_by_path(b, field), order)
        if result:
            return result * order
    return 0


def find_index(
    direction: int,
    cursor: Mapping[str, Any],
    rows: Sequence[Mapping[str, Any]],
    sort: SortSpec,
    skip_cursor: bool,
) -> int:
    """Return the cursor's boundary index in a sorted tie group.

    Args:
        direction: 1 when paginating forward, -1 when backward.
        cursor: Decoded cursor values.
        rows: Tie group, sorted ascending by ``sort_compare``.
        sort: Full sort spec.
        skip_cursor: Whether the cursor's own row is excluded from the window.

    Returns:
        On an exact match at ``mid``: ``mid + 1`` when skipping the cursor
        forward or keeping it backward, otherwise ``mid``. Without a match,
        the insertion index in ``0..len(rows)``.
    """
    low = 0
    high = len(rows) - 1

    while low <= high:
        mid = (low + high) // 2
        comparison = sort_compare(cursor, rows[mid], sort)

        if comparison == 0:
            if (skip_cursor and direction == 1) or (not skip_cursor and direction == -1):
                return mid + 1
            return mid
        if comparison < 0:
            high = mid - 1
        else:
            low = mid + 1

    return low


__all__ = ["find_index", "sort_compare"]
