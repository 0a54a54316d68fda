"""Protocols for the collaborators the paginator talks to.

The paginator never touches a driver directly. It needs a query executor
that can count, find and re-fetch documents, and a schema provider that
knows each field's type and uniqueness. Uses structural typing (Protocol)
rather than inheritance so any store adapter can plug in.
"""

from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from keyset_service.core.pagination.sorting import SortSpec


class FieldType(StrEnum):
    """Declared type of a collection field."""

    STRING = "string"
    NUMBER = "number"
    DECIMAL = "decimal"
    BOOLEAN = "boolean"
    DATE = "date"
    OBJECT_ID = "object_id"
    BINARY = "binary"
    UUID = "uuid"
    DOCUMENT = "document"
    ARRAY = "array"
    MIXED = "mixed"


class QueryExecutor(Protocol):
    """Async query interface over one document collection.

    Implementations must sort exactly the way the store does natively, so
    that offsets computed in memory select the same rows the store returns.
    Failures surface as ``StoreError``.
    """

    async def count(self, filter: Mapping[str, Any]) -> int:
        """Count documents matching ``filter``."""
        ...

    async def find(
        self,
        filter: Mapping[str, Any],
        *,
        sort: SortSpec,
        projection: Mapping[str, Any] | None = None,
        skip: int = 0,
        limit: int | None = None,
    ) -> Sequence[Mapping[str, Any]]:
        """Return matching documents in ``sort`` order.

        ``limit=None`` means no limit.
        """
        ...

    async def find_by_id(
        self,
        identity: Any,
        *,
        projection: Mapping[str, Any] | None = None,
        options: Mapping[str, Any] | None = None,
    ) -> Mapping[str, Any] | None:
        """Re-fetch one full document by its identity value."""
        ...


class SchemaProvider(Protocol):
    """Field metadata lookup for one collection.

    Both methods raise ``UnknownFieldError`` for paths the schema does not
    know.
    """

    def field_type(self, path: str) -> FieldType:
        """Return the declared type of ``path``."""
        ...

    def is_unique(self, path: str) -> bool:
        """Return whether ``path`` carries a unique index."""
        ...

    def is_required(self, path: str) -> bool:
        """Return whether ``path`` must hold a non-null value."""
        ...


__all__ = ["FieldType", "QueryExecutor", "SchemaProvider"]
