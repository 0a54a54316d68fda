"""Sort and projection normalization.

Callers describe sort orders and projections in several shapes. These
helpers reduce them to ordered ``(field, order)`` tuples:

    >>> normalize_sort("-created_at name")
    [('created_at', -1), ('name', 1), ('_id', 1)]
    >>> normalize_select("name -secret")
    [('name', 1), ('secret', 0)]
"""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any, Literal

from keyset_service.core.exceptions import InputError
from keyset_service.core.pagination.ranking import ABSENT

if TYPE_CHECKING:
    from keyset_service.core.pagination.ranking import SortDirection

type SortSpec = list[tuple[str, SortDirection]]
type SelectSpec = list[tuple[str, Literal[0, 1]]]
type SortInput = str | Mapping[str, Any] | Sequence[tuple[str, Any]] | None
type SelectInput = str | Mapping[str, Any] | Sequence[str] | None

_TOKEN_PATTERN = re.compile(r"^(?P<minus>-*)(?P<field>.+)$", re.DOTALL)
_ASCENDING = frozenset({"1", "asc", "ascending"})
_DESCENDING = frozenset({"-1", "desc", "descending"})


def parse_order(order: Any) -> SortDirection:
    """Convert a sort order token into 1 or -1.

    Accepts ``1``, ``-1``, ``"asc"``, ``"ascending"``, ``"desc"`` and
    ``"descending"`` (case-insensitive).

    Raises:
        InputError: If the token is not a recognized sort order.
    """
    if isinstance(order, bool):
        raise InputError(f"Invalid sort order: {order!r}")
    token = str(order).strip().lower()
    if token in _ASCENDING:
        return 1
    if token in _DESCENDING:
        return -1
    raise InputError(f"Invalid sort order: {order!r}")


def _split_tokens(text: str) -> list[tuple[str, bool]]:
    result: list[tuple[str, bool]] = []
    for token in text.split():
        match = _TOKEN_PATTERN.match(token)
        if match is None or not match.group("field").lstrip("-"):
            continue
        result.append((match.group("field"), bool(match.group("minus"))))
    return result


def normalize_sort(sort: SortInput, identity_field: str = "_id") -> SortSpec:
    """Normalize a sort description into ordered ``(field, order)`` pairs.

    Args:
        sort: ``None``, a string such as ``"-a b"``, a mapping of field to
            order, or a sequence of ``(field, order)`` pairs.
        identity_field: Unique field appended ascending when missing, so the
            resulting order has no ties.

    Returns:
        The normalized sort spec. ``None`` or an empty input yields
        ``[(identity_field, 1)]``.

    Raises:
        InputError: If an order token is invalid, a field is repeated, or the
            input has an unsupported shape.
    """
    result: SortSpec = []
    if sort is None:
        pass
    elif isinstance(sort, str):
        result = [(field, -1 if descending else 1) for field, descending in _split_tokens(sort)]
    elif isinstance(sort, Mapping):
        result = [(str(field), parse_order(order)) for field, order in sort.items()]
    elif isinstance(sort, Sequence):
        for item in sort:
            if not isinstance(item, Sequence) or isinstance(item, str) or len(item) != 2:
                raise InputError(f"Invalid sort entry: {item!r}")
            field, order = item
            result.append((str(field), parse_order(order)))
    else:
        raise InputError(f"Unsupported sort specification: {type(sort).__name__}")

    fields = [field for field, _ in result]
    if len(set(fields)) != len(fields):
        raise InputError("Sort specification repeats a field")
    if identity_field not in fields:
        result.append((identity_field, 1))
    return result


def reverse_sort_order(sort: SortSpec) -> SortSpec:
    """Flip every order in a sort spec."""
    return [(field, 1 if order == -1 else -1) for field, order in sort]


def normalize_select(select: SelectInput) -> SelectSpec:
    """Normalize a projection description into ``(field, 0|1)`` pairs.

    ``"a -b"`` selects ``a`` and excludes ``b``; a sequence of names selects
    each; a mapping keeps its truthiness per field.
    """
    if select is None:
        return []
    if isinstance(select, str):
        return [(field, 0 if excluded else 1) for field, excluded in _split_tokens(select)]
    if isinstance(select, Mapping):
        return [(str(field), 1 if value else 0) for field, value in select.items()]
    if isinstance(select, Sequence):
        return [(str(field), 1) for field in select]
    raise InputError(f"Unsupported projection specification: {type(select).__name__}")


def to_projection(select: SelectSpec | SortSpec) -> dict[str, int] | None:
    """Build a store projection mapping from normalized pairs.

    Sort specs may be passed directly: every sort field is included.
    """
    if not select:
        return None
    return {field: 1 if flag else 0 for field, flag in select}


def get_value_by_path(document: Mapping[str, Any], path: str) -> Any:
    """Read a dotted path from a nested mapping.

    Returns:
        The value, or ``ABSENT`` when any segment of the path is missing.
    """
    current: Any = document
    for key in path.split("."):
        if isinstance(current, Mapping) and key in current:
            current = current[key]
        else:
            return ABSENT
    return current


__all__ = [
    "SelectInput",
    "SelectSpec",
    "SortInput",
    "SortSpec",
    "get_value_by_path",
    "normalize_select",
    "normalize_sort",
    "parse_order",
    "reverse_sort_order",
    "to_projection",
]
