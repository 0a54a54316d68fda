"""Unit tests for the heterogeneous value comparator."""

from __future__ import annotations

import copy
import re
import uuid
from datetime import UTC, datetime
from decimal import Decimal
from functools import cmp_to_key
from itertools import combinations, product

import pytest
from bson import Decimal128, ObjectId
from bson.datetime_ms import DatetimeMS
from bson.regex import Regex

from keyset_service.core.pagination.ranking import ABSENT, ValueKind, classify, compare


@pytest.mark.unit
class TestClassify:
    """Tests for value classification."""

    @pytest.mark.parametrize(
        ("value", "kind", "rank"),
        [
            ([], ValueKind.EMPTY_LIST, -1),
            (None, ValueKind.NULL, 0),
            (ABSENT, ValueKind.ABSENT, 1),
            (3, ValueKind.NUMBER, 2),
            (2.5, ValueKind.NUMBER, 2),
            (Decimal("1.5"), ValueKind.NUMBER, 2),
            (Decimal128("1.5"), ValueKind.NUMBER, 2),
            ("x", ValueKind.STRING, 3),
            ({"a": 1}, ValueKind.MAPPING, 4),
            ([1], ValueKind.LIST, 5),
            (b"\x00", ValueKind.BINARY, 6),
            (uuid.UUID(int=1), ValueKind.BINARY, 6),
            (ObjectId("0" * 24), ValueKind.OBJECT_ID, 7),
            (False, ValueKind.BOOLEAN, 8),
            (True, ValueKind.BOOLEAN, 8.5),
            (datetime(2024, 1, 1), ValueKind.DATE, 9),
            (re.compile("a"), ValueKind.REGEX, 10),
        ],
    )
    def test_rank_table(self, value, kind, rank):
        """Each value kind should land on its fixed rank."""
        ranked = classify(value)

        assert ranked.kind is kind
        assert ranked.rank == rank

    def test_null_and_absent_swap_when_descending(self):
        """Null and absent ranks should swap for the descending direction."""
        assert classify(None, -1).rank == 1
        assert classify(ABSENT, -1).rank == 0

    def test_bool_is_not_a_number(self):
        """Booleans should never be classified as numbers."""
        assert classify(True).kind is ValueKind.BOOLEAN
        assert classify(1).kind is ValueKind.NUMBER

    def test_unsupported_type_raises(self):
        """Values with no place in the ordering should raise TypeError."""
        with pytest.raises(TypeError, match="Unsupported value type"):
            classify(object())

    def test_list_elements_sorted_by_direction(self):
        """List elements should lead with the min ascending and the max descending."""
        ascending = classify([3, 1, 2])
        descending = classify([3, 1, 2], -1)

        assert [element.value[1] for element in ascending.value] == [1, 2, 3]
        assert [element.value[1] for element in descending.value] == [3, 2, 1]

    def test_regex_flags_rendered_as_letters(self):
        """Regex payloads should use the /pattern/flags form."""
        assert classify(re.compile("ab", re.IGNORECASE | re.MULTILINE)).value == "/ab/im"
        assert classify(Regex("ab", "i")).value == "/ab/i"

    def test_ranked_value_compare(self):
        """RankedValue.compare should delegate to the comparator."""
        assert classify(1).compare(classify(2)) == -1
        assert classify("b").compare(classify("a")) == 1


@pytest.mark.unit
class TestAbsent:
    """Tests for the missing-field sentinel."""

    def test_singleton(self):
        """Constructing the sentinel type again should return ABSENT."""
        assert type(ABSENT)() is ABSENT

    def test_falsy_and_repr(self):
        """ABSENT should be falsy and print as ABSENT."""
        assert not ABSENT
        assert repr(ABSENT) == "ABSENT"


@pytest.mark.unit
class TestCompareAcrossTypes:
    """Tests for cross-type ordering."""

    ORDERED_SCALARS = [
        None,
        1,
        "a",
        {"a": 1},
        b"x",
        ObjectId("0" * 24),
        False,
        True,
        datetime(2024, 1, 1),
        re.compile("a"),
    ]

    def test_ranks_decide_across_types(self):
        """A lower-ranked value should sort first regardless of payload."""
        for lower, higher in combinations(self.ORDERED_SCALARS, 2):
            assert compare(lower, higher) == -1, (lower, higher)
            assert compare(higher, lower) == 1, (higher, lower)

    def test_null_sorts_before_absent_ascending(self):
        """Ascending, null should precede a missing field."""
        assert compare(None, ABSENT) == -1

    def test_null_sorts_after_absent_descending(self):
        """Descending, the raw null/absent comparison should flip."""
        assert compare(None, ABSENT, direction=-1) == 1

    def test_empty_list_sorts_first(self):
        """An empty list should precede null."""
        assert compare([], None) == -1


@pytest.mark.unit
class TestCompareWithinType:
    """Tests for same-type ordering."""

    def test_numbers_compare_by_value(self):
        """Ints, floats and decimals should compare numerically."""
        assert compare(1, 1.0) == 0
        assert compare(Decimal128("2.5"), 3) == -1
        assert compare(Decimal("10"), 9.5) == 1

    def test_nan_sorts_below_every_number(self):
        """NaN should sort below every other number and equal itself."""
        assert compare(float("nan"), -1e308) == -1
        assert compare(Decimal("NaN"), float("nan")) == 0

    def test_strings(self):
        """Strings should compare by collation."""
        assert compare("a", "b") == -1
        assert compare("a", "a") == 0

    def test_binary_compares_length_first(self):
        """Shorter binaries should sort first before bytes are compared."""
        assert compare(b"zz", b"aaa") == -1
        assert compare(b"ab", b"aa") == 1

    def test_object_ids(self):
        """ObjectIds should compare by their hex form."""
        assert compare(ObjectId("0" * 23 + "1"), ObjectId("0" * 23 + "2")) == -1

    def test_booleans(self):
        """False should sort before True."""
        assert compare(False, True) == -1
        assert compare(True, True) == 0

    def test_naive_datetime_is_utc(self):
        """Naive datetimes should compare as UTC."""
        assert compare(datetime(2024, 1, 1), datetime(2024, 1, 1, tzinfo=UTC)) == 0
        assert compare(DatetimeMS(1000), datetime(1970, 1, 1, 0, 0, 1)) == 0

    def test_regex_forms_compare_equal(self):
        """Python and BSON regexes with the same pattern and flags should tie."""
        assert compare(Regex("a", "i"), re.compile("a", re.IGNORECASE)) == 0
        assert compare(re.compile("a"), re.compile("b")) == -1


@pytest.mark.unit
class TestCompareMappings:
    """Tests for mapping comparison."""

    def test_values_compared_when_keys_match(self):
        """Matching keys should fall through to value comparison."""
        assert compare({"a": 1}, {"a": 2}) == -1

    def test_keys_compared_in_order(self):
        """Differing keys should decide by name."""
        assert compare({"a": 1}, {"b": 1}) == -1

    def test_nested_rank_decides_before_key(self):
        """A differing value rank should decide before the key names."""
        assert compare({"b": 1}, {"a": "x"}) == -1

    def test_shorter_mapping_first(self):
        """An equal prefix should leave the shorter mapping first."""
        assert compare({"a": 1}, {"a": 1, "b": 1}) == -1


@pytest.mark.unit
class TestCompareLists:
    """Tests for list comparison."""

    def test_lists_compare_by_leading_element(self):
        """Ascending, lists should compare by their smallest elements first."""
        assert compare([1, 5], [2]) == -1

    def test_lists_compare_by_largest_element_descending(self):
        """Descending, the largest element should lead."""
        assert compare([1, 5], [2], direction=-1) == 1

    def test_list_next_to_its_leading_scalar(self):
        """A list should sort just before the scalar equal to its leading element."""
        assert compare([1, 2], 1) == -1
        assert compare(1, [1, 2]) == 1

    def test_shorter_list_first(self):
        """An equal prefix should leave the shorter list first."""
        assert compare([1, 2], [1, 2, 3]) == -1


@pytest.mark.unit
class TestTotalOrder:
    """Tests for comparator consistency."""

    VALUES = [
        None,
        ABSENT,
        [],
        -3,
        0.5,
        Decimal128("7"),
        "alpha",
        "beta",
        {"a": 1},
        {"a": 1, "b": 2},
        [2, 4],
        b"abc",
        ObjectId("0" * 24),
        False,
        True,
        datetime(2020, 5, 17),
        re.compile("z"),
    ]

    NESTED_VALUES = [
        *VALUES,
        [1, "a"],
        ["b", None],
        [[1], 2],
        [{"a": 1}, 0],
        {"a": [1, 2]},
        {"a": [3]},
        {"a": {"b": None}},
        {"a": None},
        {"a": ["z"]},
        {"a": "s"},
        {"b": 0},
        7,
        Decimal("7"),
    ]

    @pytest.mark.parametrize("direction", [1, -1])
    def test_antisymmetric(self, direction):
        """compare(a, b) should always be the negation of compare(b, a)."""
        for a, b in combinations(self.VALUES, 2):
            assert compare(a, b, direction) == -compare(b, a, direction), (a, b)

    @pytest.mark.parametrize("direction", [1, -1])
    def test_sorting_is_stable_under_reshuffle(self, direction):
        """Sorting any permutation should produce the same order."""
        key = cmp_to_key(lambda a, b: compare(a, b, direction))
        expected = sorted(self.VALUES, key=key)

        assert sorted(reversed(self.VALUES), key=key) == expected

    @pytest.mark.parametrize("direction", [1, -1])
    def test_reflexive(self, direction):
        """Every value should compare equal to itself and to a copy of itself."""
        for value in self.NESTED_VALUES:
            assert compare(value, value, direction) == 0, value
            assert compare(value, copy.deepcopy(value), direction) == 0, value

    @pytest.mark.parametrize("direction", [1, -1])
    def test_transitive(self, direction):
        """a <= b and b <= c should imply a <= c for every triple."""
        values = self.NESTED_VALUES
        order = {
            (i, j): compare(a, b, direction)
            for i, a in enumerate(values)
            for j, b in enumerate(values)
        }
        for i, j, k in product(range(len(values)), repeat=3):
            if order[i, j] <= 0 and order[j, k] <= 0:
                assert order[i, k] <= 0, (values[i], values[j], values[k])
            if order[i, j] == 0 and order[j, k] == 0:
                assert order[i, k] == 0, (values[i], values[j], values[k])

    def test_list_in_mapping_ranks_by_leading_element(self):
        """A nested list should take the rank of the element it sorts by."""
        with_list, with_string, with_number = {"a": ["z"]}, {"a": "s"}, {"b": 0}

        assert compare(with_number, with_string) == -1
        assert compare(with_string, with_list) == -1
        assert compare(with_number, with_list) == -1
