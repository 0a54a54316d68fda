"""Store-side filter fragments bounding a page around a cursor.

Two fragments are built from the leading sort field:

* the window boundary restricts the paged query to rows at or beyond the
  cursor in the traversal direction (strictly beyond only for a unique field
  whose cursor row is skipped), so the tie-group offset can still be applied
  inside it;
* the strict condition selects rows whose leading value lies strictly
  beyond the cursor. Counting it in the backward direction gives the number
  of rows that precede the cursor's tie group.

Null and missing values sort below every other value, so a ``$lt``-family
fragment also admits them through an ``$or`` with ``{field: None}``.

Boolean fields have a two-value domain and use equality instead of range
operators. A boolean field that may hold null or be missing is ``nullable``:
those rows sort below ``False``, so they join the lower side of each
fragment.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from keyset_service.core.database.protocols import FieldType
from keyset_service.core.exceptions import InputError
from keyset_service.core.pagination.ranking import ABSENT

_UNORDERED_TYPES = frozenset({FieldType.ARRAY, FieldType.MIXED})


@dataclass(frozen=True, slots=True)
class Boundary:
    """Window fragment for the leading sort field.

    Attributes:
        condition: Filter fragment, or ``None`` when the window is unbounded.
        strict: Whether the fragment already excludes the cursor's tie group.
    """

    condition: dict[str, Any] | None
    strict: bool = False


def ensure_orderable(field: str, field_type: FieldType) -> None:
    """Reject leading sort fields that range operators cannot bound.

    Raises:
        InputError: If the field is typed ``array`` or ``mixed``.
    """
    if field_type in _UNORDERED_TYPES:
        raise InputError(
            f"Cannot paginate on leading sort field '{field}' of type {field_type}",
            extra={"field": field, "field_type": str(field_type)},
        )


def _is_null(value: Any) -> bool:
    return value is None or value is ABSENT


def _uses_equality(field_type: FieldType, value: Any) -> bool:
    return field_type is FieldType.BOOLEAN and isinstance(value, bool)


def _or_null(field: str, condition: dict[str, Any]) -> dict[str, Any]:
    return {"$or": [condition, {field: None}]}


def _range(field: str, operator: str, value: Any) -> dict[str, Any]:
    condition = {field: {operator: value}}
    if operator.startswith("$lt"):
        # range operators never match null or missing, which sort below every value
        return _or_null(field, condition)
    return condition


def build_strict_condition(
    field: str,
    order: int,
    value: Any,
    *,
    field_type: FieldType,
    direction: int,
    nullable: bool = False,
) -> dict[str, Any] | None:
    """Build the fragment for rows strictly beyond the cursor value.

    Args:
        field: Leading sort field.
        order: The field's sort order (1 or -1).
        value: Cursor value of the field.
        field_type: Declared type of the field.
        direction: Traversal direction (1 forward, -1 backward).
        nullable: Whether a boolean field may be null or missing.

    Returns:
        The fragment, or ``None`` when no row can lie strictly beyond.

    Boolean fields:

        direction  order  value  fragment
        forward    asc    True   None
        forward    asc    False  {field: True}
        forward    desc   True   {field: False}
        forward    desc   False  None
        backward   asc    True   {field: False}
        backward   asc    False  None
        backward   desc   True   None
        backward   desc   False  {field: True}

    When ``nullable``, a fragment toward lower values also matches null and
    missing rows: ``True`` becomes ``$or: [False, null]`` and ``False``
    becomes ``{field: None}``.
    """
    ahead = direction == order

    if _uses_equality(field_type, value):
        if nullable and not ahead:
            return _or_null(field, {field: False}) if value else {field: None}
        # True sorts after False, so only one side of each value is non-empty
        if value is ahead:
            return None
        return {field: ahead}

    if _is_null(value):
        # null and missing sort first ascending and last descending
        if ahead:
            return {field: {"$ne": None}}
        return None

    return _range(field, "$gt" if ahead else "$lt", value)


def build_boundary(
    field: str,
    order: int,
    value: Any,
    *,
    field_type: FieldType,
    unique: bool,
    skip_cursor: bool,
    direction: int,
    nullable: bool = False,
) -> Boundary:
    """Build the window fragment for the paged query.

    The operator family is ``$gt`` when the traversal direction matches the
    field order and ``$lt`` otherwise. It is inclusive unless the field is
    unique and the cursor row is skipped. Boolean fields select the
    at-or-beyond values by equality, keeping null and missing rows on the
    lower side when ``nullable``. A null or missing cursor value leaves the
    window unbounded.
    """
    if _is_null(value):
        return Boundary(None)

    ahead = direction == order

    if _uses_equality(field_type, value):
        if nullable:
            if ahead:
                return Boundary({field: True} if value else {field: {"$ne": None}})
            return Boundary(None if value else _or_null(field, {field: False}))
        if value is not ahead:
            # every row is at or beyond this value
            return Boundary(None)
        return Boundary({field: value})

    strict = unique and skip_cursor
    operator = "$gt" if ahead else "$lt"
    if not strict:
        operator += "e"
    return Boundary(_range(field, operator, value), strict=strict)


def and_conditions(*conditions: Mapping[str, Any] | None) -> dict[str, Any]:
    """Combine filter fragments with ``$and``, dropping empty ones."""
    present = [condition for condition in conditions if condition]
    if not present:
        return {}
    if len(present) == 1:
        return dict(present[0])
    return {"$and": present}


__all__ = [
    "Boundary",
    "and_conditions",
    "build_boundary",
    "build_strict_condition",
    "ensure_orderable",
]
