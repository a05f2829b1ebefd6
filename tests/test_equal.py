"""Tests for deep equality and the equal check."""

import math
from collections import OrderedDict, deque, namedtuple
from dataclasses import dataclass, field
from decimal import Decimal
from pathlib import Path

import pytest

from soft_assert import deep_equal, equal


@dataclass
class Point:
    x: int
    y: int
    tags: list = field(default_factory=list)


class Record:
    def __init__(self, name, children=None):
        self.name = name
        self.children = children or []


class Subclassed(list):
    pass


class AlwaysRaises:
    def __eq__(self, other):
        raise TypeError("cannot compare")

    __hash__ = object.__hash__


class BadStr:
    def __str__(self):
        raise ValueError("no text")


class Slotted:
    __slots__ = ("x", "children")

    def __init__(self, x, children):
        self.x = x
        self.children = children


class SlottedChild(Slotted):
    __slots__ = ("__hidden",)

    def __init__(self, x, children, hidden):
        super().__init__(x, children)
        self.__hidden = hidden


class Elementwise:
    """Stand-in for array types whose == returns one boolean per element."""

    def __init__(self, *values):
        self.values = list(values)

    def __eq__(self, other):
        return [x == y for x, y in zip(self.values, other.values)]

    __hash__ = object.__hash__


Pair = namedtuple("Pair", "left right")


# --- deep_equal ---


@pytest.mark.parametrize(
    "a, b",
    [
        (None, None),
        (1, 1),
        ("abc", "abc"),
        ([1, 2], [1, 2]),
        ((1, [2, 3]), (1, [2, 3])),
        ({"a": [1, {"b": 2}]}, {"a": [1, {"b": 2}]}),
        ({1, 2}, {2, 1}),
        (deque([1, 2]), deque([1, 2])),
        (Point(1, 2, ["x"]), Point(1, 2, ["x"])),
        (Record("root", [Record("leaf")]), Record("root", [Record("leaf")])),
        (Pair(1, 2), Pair(1, 2)),
        (Decimal("1.10"), Decimal("1.1")),
        (Path("a/b"), Path("a/b")),
        (len, len),
    ],
)
def test_deep_equal_same_structure(a, b):
    assert deep_equal(a, b) is True


@pytest.mark.parametrize(
    "a, b",
    [
        (None, 0),
        ([], None),
        (1, 1.0),
        (True, 1),
        ([1, 2], (1, 2)),
        ([1, 2], [1, 3]),
        ([1, 2], [1, 2, 3]),
        ({"a": 1}, {"b": 1}),
        ({"a": 1}, {"a": 1, "b": 2}),
        ({"a": [1]}, {"a": [1.0]}),
        (Subclassed([1]), [1]),
        (OrderedDict(a=1), {"a": 1}),
        (Point(1, 2), Point(1, 3)),
        (Point(1, 2), Point(1.0, 2)),
        (Record("root"), Record("other")),
        (Pair(1, 2), (1, 2)),
    ],
)
def test_deep_equal_different(a, b):
    assert deep_equal(a, b) is False


def test_deep_equal_nan_never_equal():
    nan = math.nan
    assert deep_equal(nan, nan) is False
    assert deep_equal([nan], [nan]) is False


def test_deep_equal_distinct_functions():
    def first():
        pass

    def second():
        pass

    assert deep_equal(first, first) is True
    assert deep_equal(first, second) is False


def test_deep_equal_plain_objects_without_state():
    a, b = object(), object()
    assert deep_equal(a, a) is True
    assert deep_equal(a, b) is False


def test_deep_equal_cycles_terminate():
    a = [1]
    a.append(a)
    b = [1]
    b.append(b)
    assert deep_equal(a, b) is True


def test_deep_equal_cyclic_records():
    a = Record("a")
    a.children.append(a)
    b = Record("a")
    b.children.append(b)
    assert deep_equal(a, b) is True


# --- equal ---


def test_equal_pass(reporter):
    equal(reporter, [1, 2], [1, 2])
    assert reporter.errors == []
    assert reporter.helper_calls == 1


def test_equal_both_none(reporter):
    equal(reporter, None, None)
    assert reporter.errors == []


def test_equal_fail_message(reporter):
    equal(reporter, [1, 2], [1, 3])
    assert reporter.errors == ["got (list) [1, 2] but expect (list) [1, 3]"]


def test_equal_type_mismatch_message(reporter):
    equal(reporter, 1, 1.0)
    assert reporter.errors == ["got (int) 1 but expect (float) 1.0"]


def test_equal_comparison_error_is_reported(reporter):
    a, b = AlwaysRaises(), AlwaysRaises()
    equal(reporter, a, b)
    assert len(reporter.errors) == 1
    assert "comparison raised TypeError('cannot compare')" in reporter.errors[0]


def test_equal_unprintable_value(reporter):
    equal(reporter, BadStr(), 1)
    assert len(reporter.errors) == 1
    assert "str() raised ValueError('no text')" in reporter.errors[0]


# --- records without __dict__ and elementwise equality ---


def test_deep_equal_slotted_records():
    assert deep_equal(Slotted(1, [2]), Slotted(1, [2])) is True
    assert deep_equal(Slotted(1, [2]), Slotted(1, [3])) is False


def test_deep_equal_slots_across_mro():
    assert deep_equal(SlottedChild(1, [], "a"), SlottedChild(1, [], "a")) is True
    assert deep_equal(SlottedChild(1, [], "a"), SlottedChild(1, [], "b")) is False


def test_deep_equal_unset_slots():
    a, b = Slotted.__new__(Slotted), Slotted.__new__(Slotted)
    assert deep_equal(a, b) is True
    b.x = 1
    assert deep_equal(a, b) is False


def test_deep_equal_cyclic_slotted_records():
    a = Slotted(1, [])
    a.children.append(a)
    b = Slotted(1, [])
    b.children.append(b)
    assert deep_equal(a, b) is True


def test_deep_equal_elementwise_eq():
    assert deep_equal(Elementwise(1, 2), Elementwise(1, 2)) is True
    assert deep_equal(Elementwise(1, 2), Elementwise(1, 3)) is False


def test_equal_elementwise_values(reporter):
    equal(reporter, Elementwise(1, 2), Elementwise(1, 2))
    assert reporter.errors == []
