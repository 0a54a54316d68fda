"""Structural validation of decoded cursors against a collection schema."""

from __future__ import annotations

import uuid
from collections.abc import Mapping
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from bson import Binary, Decimal128, ObjectId
from bson.binary import UUID_SUBTYPE

from keyset_service.core.database.protocols import FieldType
from keyset_service.core.exceptions import CursorSchemaMismatchError
from keyset_service.core.pagination.ranking import ABSENT
from keyset_service.core.pagination.sorting import get_value_by_path

if TYPE_CHECKING:
    from keyset_service.core.database.protocols import SchemaProvider
    from keyset_service.core.pagination.sorting import SortSpec


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float, Decimal, Decimal128)) and not isinstance(value, bool)


def _is_uuid(value: Any) -> bool:
    if isinstance(value, uuid.UUID):
        return True
    return isinstance(value, Binary) and value.subtype == UUID_SUBTYPE


_TYPE_CHECKS = {
    FieldType.STRING: lambda value: isinstance(value, str),
    FieldType.NUMBER: _is_number,
    FieldType.DECIMAL: _is_number,
    FieldType.BOOLEAN: lambda value: isinstance(value, bool),
    FieldType.DATE: lambda value: isinstance(value, datetime),
    FieldType.OBJECT_ID: lambda value: isinstance(value, ObjectId),
    FieldType.BINARY: lambda value: isinstance(value, (bytes, uuid.UUID)),
    FieldType.UUID: _is_uuid,
    FieldType.DOCUMENT: lambda value: isinstance(value, Mapping),
    FieldType.ARRAY: lambda value: isinstance(value, (list, tuple)),
    FieldType.MIXED: lambda value: True,
}


def matches_type(field_type: FieldType, value: Any) -> bool:
    """Return whether a non-null value fits the declared field type."""
    return _TYPE_CHECKS[field_type](value)


def validate_cursor(
    cursor: Mapping[str, Any],
    schema: SchemaProvider,
    sort: SortSpec,
    identity_field: str = "_id",
) -> None:
    """Check that a decoded cursor describes a row of this collection.

    Rules:
        * every top-level key is the root of a sort path
        * the identity field is present and non-null
        * every present sort value matches the schema type; ``None`` is
          accepted unless the field is required

    Raises:
        CursorSchemaMismatchError: If any rule fails.
        UnknownFieldError: If a sort path is not in the schema.
    """
    roots = {field.split(".", 1)[0] for field, _ in sort}
    unexpected = sorted(key for key in cursor if key not in roots)
    if unexpected:
        raise CursorSchemaMismatchError(
            f"Cursor contains fields outside the sort: {', '.join(unexpected)}",
            extra={"fields": unexpected},
        )

    identity = get_value_by_path(cursor, identity_field)
    if identity is ABSENT or identity is None:
        raise CursorSchemaMismatchError(
            f"Cursor is missing the identity field '{identity_field}'",
            extra={"field": identity_field},
        )

    for field, _ in sort:
        value = get_value_by_path(cursor, field)
        if value is ABSENT:
            continue
        if value is None:
            if schema.is_required(field):
                raise CursorSchemaMismatchError(
                    f"Cursor value for '{field}' must not be null",
                    extra={"field": field},
                )
            continue
        field_type = schema.field_type(field)
        if not matches_type(field_type, value):
            raise CursorSchemaMismatchError(
                f"Cursor value for '{field}' is not of type {field_type}",
                extra={"field": field, "expected": str(field_type)},
            )


__all__ = ["matches_type", "validate_cursor"]
