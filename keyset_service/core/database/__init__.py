"""Collaborator contracts and schema metadata for paginated collections."""

from __future__ import annotations

from .protocols import FieldType, QueryExecutor, SchemaProvider
from .schema import CollectionSchema, FieldSpec

__all__ = [
    "CollectionSchema",
    "FieldSpec",
    "FieldType",
    "QueryExecutor",
    "SchemaProvider",
]
