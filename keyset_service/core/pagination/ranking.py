"""Total ordering of heterogeneous document values.

MongoDB sorts values of different BSON types by a fixed type order and
values of the same type by a type-specific rule. Keyset pagination computes
skip offsets in memory, so the in-memory order must agree with the store's
order for every value a sort field can hold.

Every raw value is classified once into a ``RankedValue``: a tagged variant
holding the value kind, its numeric rank and a normalized payload that the
per-kind comparison works on. Comparison never inspects raw Python types.

Rank table (lower sorts first in ascending order):

    -1    empty list
    0/1   null / absent (swapped when the direction is descending)
    2     numbers (int, float, Decimal, Decimal128)
    3     strings (locale-aware)
    4     mappings
    5     non-empty lists
    6     binary (bytes, Binary, UUID)
    7     ObjectId
    8     False
    8.5   True
    9     datetimes
    10    regular expressions

Example:
    >>> compare(1, "a")
    -1
    >>> compare(None, ABSENT, direction=-1)
    1
"""

from __future__ import annotations

import locale
import math
import re
import uuid
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import UTC, datetime
from decimal import Decimal
from enum import StrEnum
from typing import Any, Final, Literal

from bson import Decimal128, ObjectId
from bson.datetime_ms import DatetimeMS
from bson.regex import Regex

SortDirection = Literal[1, -1]

_EPOCH: Final = datetime(1970, 1, 1, tzinfo=UTC)

_REGEX_FLAG_LETTERS: Final = (
    (re.IGNORECASE, "i"),
    (re.LOCALE, "l"),
    (re.MULTILINE, "m"),
    (re.DOTALL, "s"),
    (re.VERBOSE, "x"),
)


class _Absent:
    """Marker for a field missing from a document."""

    _instance: _Absent | None = None

    def __new__(cls) -> _Absent:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "ABSENT"

    def __bool__(self) -> bool:
        return False

    def __reduce__(self) -> str:
        return "ABSENT"


ABSENT: Final = _Absent()
"""Sentinel for a missing field, distinct from an explicit ``None``."""


class ValueKind(StrEnum):
    """Value categories recognized by the comparator."""

    EMPTY_LIST = "empty_list"
    NULL = "null"
    ABSENT = "absent"
    NUMBER = "number"
    STRING = "string"
    MAPPING = "mapping"
    LIST = "list"
    BINARY = "binary"
    OBJECT_ID = "object_id"
    BOOLEAN = "boolean"
    DATE = "date"
    REGEX = "regex"


@dataclass(frozen=True, slots=True)
class RankedValue:
    """A value classified for comparison.

    Attributes:
        kind: Value category.
        rank: Type rank; cross-kind comparisons use this alone.
        value: Normalized payload compared within the same rank. Numbers
            become ``(is_number, magnitude)`` keys, mappings a tuple of
            ``(key, RankedValue)`` pairs, lists a tuple of ``RankedValue``
            sorted by the traversal direction, binaries ``bytes``, dates
            epoch microseconds and regexes their ``/pattern/flags`` form.
        direction: Direction the value was classified for.
    """

    kind: ValueKind
    rank: float
    value: Any
    direction: SortDirection = 1

    def compare(self, other: RankedValue) -> int:
        """Compare with another ranked value, returning -1, 0 or 1."""
        return _compare_ranked(self, other, self.direction)


def classify(value: Any, direction: SortDirection = 1) -> RankedValue:
    """Classify a raw value into a ``RankedValue``.

    Args:
        value: Raw document value, ``None`` or ``ABSENT``.
        direction: 1 for ascending traversal, -1 for descending. Controls the
            null/absent rank swap and which list element leads a list.

    Returns:
        The ranked value.

    Raises:
        TypeError: If the value's type has no place in the ordering.
    """
    if isinstance(value, RankedValue):
        return value
    if value is ABSENT:
        return RankedValue(ValueKind.ABSENT, 1 if direction == 1 else 0, None, direction)
    if value is None:
        return RankedValue(ValueKind.NULL, 0 if direction == 1 else 1, None, direction)
    # bool is a subclass of int, so it is tested before numbers
    if isinstance(value, bool):
        return RankedValue(ValueKind.BOOLEAN, 8.5 if value else 8, value, direction)
    if isinstance(value, (int, float, Decimal, Decimal128)):
        return RankedValue(ValueKind.NUMBER, 2, _number_key(value), direction)
    if isinstance(value, str):
        return RankedValue(ValueKind.STRING, 3, value, direction)
    if isinstance(value, ObjectId):
        return RankedValue(ValueKind.OBJECT_ID, 7, str(value), direction)
    if isinstance(value, (bytes, bytearray, memoryview)):
        return RankedValue(ValueKind.BINARY, 6, bytes(value), direction)
    if isinstance(value, uuid.UUID):
        return RankedValue(ValueKind.BINARY, 6, value.bytes, direction)
    if isinstance(value, datetime):
        return RankedValue(ValueKind.DATE, 9, _epoch_micros(value), direction)
    if isinstance(value, DatetimeMS):
        return RankedValue(ValueKind.DATE, 9, int(value) * 1000, direction)
    if isinstance(value, (re.Pattern, Regex)):
        return RankedValue(ValueKind.REGEX, 10, _regex_text(value), direction)
    if isinstance(value, Mapping):
        items = tuple((str(key), classify(item, direction)) for key, item in value.items())
        return RankedValue(ValueKind.MAPPING, 4, items, direction)
    if isinstance(value, (list, tuple)):
        if not value:
            return RankedValue(ValueKind.EMPTY_LIST, -1, (), direction)
        elements = sorted(
            (classify(item, direction) for item in value),
            key=_ElementKey.for_direction(direction),
        )
        return RankedValue(ValueKind.LIST, 5, tuple(elements), direction)
    raise TypeError(f"Unsupported value type for ordering: {type(value).__name__}")


def compare(a: Any, b: Any, direction: SortDirection = 1) -> int:
    """Compare two raw (or ranked) values.

    Args:
        a: First value.
        b: Second value.
        direction: Traversal direction, see ``classify``.

    Returns:
        -1 if ``a`` sorts before ``b``, 1 if after, 0 if equal.
    """
    return _compare_ranked(classify(a, direction), classify(b, direction), direction)


# ──────────────────────────────────────────────────────────────
# Normalization helpers
# ──────────────────────────────────────────────────────────────


def _number_key(value: int | float | Decimal | Decimal128) -> tuple[int, Any]:
    if isinstance(value, Decimal128):
        value = value.to_decimal()
    if isinstance(value, Decimal):
        if value.is_nan():
            return (0, None)
        return (1, value)
    if isinstance(value, float) and math.isnan(value):
        return (0, None)
    return (1, value)


def _epoch_micros(value: datetime) -> int:
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    delta = value - _EPOCH
    return (delta.days * 86_400 + delta.seconds) * 1_000_000 + delta.microseconds


def _regex_text(value: re.Pattern[Any] | Regex) -> str:
    pattern = value.pattern
    if isinstance(pattern, bytes):
        pattern = pattern.decode("utf-8", errors="replace")
    flags = value.flags if isinstance(value.flags, int) else 0
    letters = "".join(letter for flag, letter in _REGEX_FLAG_LETTERS if flags & flag)
    return f"/{pattern}/{letters}"


class _ElementKey:
    """Sort key ordering list elements by the traversal direction."""

    __slots__ = ("direction", "ranked")

    def __init__(self, ranked: RankedValue, direction: SortDirection) -> None:
        self.ranked = ranked
        self.direction = direction

    def __lt__(self, other: _ElementKey) -> bool:
        return _compare_ranked(self.ranked, other.ranked, self.direction) * self.direction < 0

    @classmethod
    def for_direction(cls, direction: SortDirection) -> Callable[[RankedValue], _ElementKey]:
        return lambda ranked: cls(ranked, direction)


# ──────────────────────────────────────────────────────────────
# Comparison
# ──────────────────────────────────────────────────────────────


def _sign(a: Any, b: Any) -> int:
    if a == b:
        return 0
    return 1 if a > b else -1


def _compare_ranked(a: RankedValue, b: RankedValue, direction: SortDirection) -> int:
    if a.kind is ValueKind.LIST or b.kind is ValueKind.LIST:
        return _compare_lists(a, b, direction)
    if a.rank != b.rank:
        return 1 if a.rank > b.rank else -1

    match a.kind:
        case ValueKind.NUMBER:
            return _compare_numbers(a.value, b.value)
        case ValueKind.STRING:
            if a.value == b.value:
                return 0
            return _sign(locale.strcoll(a.value, b.value), 0)
        case ValueKind.MAPPING:
            return _compare_mappings(a.value, b.value, direction)
        case ValueKind.BINARY:
            if len(a.value) != len(b.value):
                return 1 if len(a.value) > len(b.value) else -1
            return _sign(a.value, b.value)
        case ValueKind.EMPTY_LIST | ValueKind.NULL | ValueKind.ABSENT | ValueKind.BOOLEAN:
            return 0
        case _:
            return _sign(a.value, b.value)


def _compare_numbers(a: tuple[int, Any], b: tuple[int, Any]) -> int:
    if a[0] != b[0]:
        return 1 if a[0] > b[0] else -1
    if a[0] == 0:
        return 0
    return _sign(a[1], b[1])


def _leading_rank(ranked: RankedValue) -> float:
    # a list ranks with the element it sorts by
    while ranked.kind is ValueKind.LIST:
        ranked = ranked.value[0]
    return ranked.rank


def _compare_mappings(
    a: tuple[tuple[str, RankedValue], ...],
    b: tuple[tuple[str, RankedValue], ...],
    direction: SortDirection,
) -> int:
    for (key_a, value_a), (key_b, value_b) in zip(a, b, strict=False):
        # a differing nested rank decides before the key names are looked at
        rank_a, rank_b = _leading_rank(value_a), _leading_rank(value_b)
        if rank_a != rank_b:
            return 1 if rank_a > rank_b else -1
        if key_a != key_b:
            return 1 if key_a > key_b else -1
        result = _compare_ranked(value_a, value_b, direction)
        if result:
            return result
    return _sign(len(a), len(b))


def _compare_lists(a: RankedValue, b: RankedValue, direction: SortDirection) -> int:
    elements_a = a.value if a.kind is ValueKind.LIST else (a,)
    elements_b = b.value if b.kind is ValueKind.LIST else (b,)
    mixed = a.kind is not b.kind

    for index, (item_a, item_b) in enumerate(zip(elements_a, elements_b, strict=False)):
        result = _compare_ranked(item_a, item_b, direction)
        if result:
            return result
        if index == 0 and mixed:
            # a list sorts next to its leading element without equalling it
            return -direction if a.kind is ValueKind.LIST else direction

    return _sign(len(elements_a), len(elements_b))


__all__ = [
    "ABSENT",
    "RankedValue",
    "SortDirection",
    "ValueKind",
    "classify",
    "compare",
]
