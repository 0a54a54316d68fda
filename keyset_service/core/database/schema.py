"""Declarative collection schema.

``CollectionSchema`` is a ready-made ``SchemaProvider`` for collections whose
field layout is known up front:

    schema = CollectionSchema(
        {
            "name": FieldSpec(FieldType.STRING, required=True),
            "email": FieldSpec(FieldType.STRING, unique=True),
            "profile": FieldSpec(FieldType.DOCUMENT),
            "profile.age": FieldSpec(FieldType.NUMBER),
        }
    )
    schema.field_type("profile.age")  # FieldType.NUMBER
    schema.field_type("profile.city")  # FieldType.MIXED
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from keyset_service.core.database.protocols import FieldType
from keyset_service.core.exceptions import UnknownFieldError

if TYPE_CHECKING:
    from collections.abc import Mapping

_OPEN_TYPES = frozenset({FieldType.DOCUMENT, FieldType.MIXED})


@dataclass(frozen=True, slots=True)
class FieldSpec:
    """Metadata for one field path.

    Attributes:
        type: Declared field type.
        unique: Whether the field carries a unique index.
        required: Whether the field must hold a non-null value.
    """

    type: FieldType
    unique: bool = False
    required: bool = False


class CollectionSchema:
    """In-memory ``SchemaProvider`` built from ``{path: FieldSpec}``.

    The identity field is always present, typed as an ObjectId, unique and
    required, unless the caller declares it explicitly. Paths below a
    declared ``document`` or ``mixed`` field that are not themselves declared
    resolve to ``mixed``.
    """

    def __init__(
        self,
        fields: Mapping[str, FieldSpec],
        *,
        identity_field: str = "_id",
    ) -> None:
        self.identity_field = identity_field
        self._fields: dict[str, FieldSpec] = {
            identity_field: FieldSpec(FieldType.OBJECT_ID, unique=True, required=True),
            **fields,
        }

    def __contains__(self, path: object) -> bool:
        return isinstance(path, str) and self._lookup(path) is not None

    @property
    def paths(self) -> list[str]:
        """Declared field paths in declaration order."""
        return list(self._fields)

    def _lookup(self, path: str) -> FieldSpec | None:
        spec = self._fields.get(path)
        if spec is not None:
            return spec
        parts = path.split(".")
        for end in range(len(parts) - 1, 0, -1):
            parent = self._fields.get(".".join(parts[:end]))
            if parent is not None:
                if parent.type in _OPEN_TYPES:
                    return FieldSpec(FieldType.MIXED)
                return None
        return None

    def get(self, path: str) -> FieldSpec:
        """Return the field spec for ``path``.

        Raises:
            UnknownFieldError: If the path is not part of the schema.
        """
        spec = self._lookup(path)
        if spec is None:
            raise UnknownFieldError(path)
        return spec

    def field_type(self, path: str) -> FieldType:
        return self.get(path).type

    def is_unique(self, path: str) -> bool:
        return self.get(path).unique

    def is_required(self, path: str) -> bool:
        return self.get(path).required


__all__ = ["CollectionSchema", "FieldSpec"]
