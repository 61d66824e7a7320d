"""
objectenvy — unit tests for type coercion

File: tests/unit/core/test_coercion.py

Purpose
- Validate scalar and comma-separated array coercion of raw environment strings.

What this test file should cover
- Boolean vocabulary (case-insensitive), integers, floats, and passthrough text.
- Array splitting, trimming, empty-piece removal, and single-element collapse.
- Totality over arbitrary text.

Functional requirements
- Offline only.

Non-functional requirements
- Deterministic.
"""

from __future__ import annotations

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from objectenvy.core.coercion import coerce_scalar, coerce_value


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("true", True),
        ("TRUE", True),
        ("Yes", True),
        ("y", True),
        ("false", False),
        ("No", False),
        ("N", False),
        ("42", 42),
        ("-7", -7),
        ("007", 7),
        ("3.14", 3.14),
        ("-0.5", -0.5),
    ],
)
def test_coerce_scalar_recognized_forms(raw: str, expected: object) -> None:
    result = coerce_scalar(raw)
    assert result == expected
    assert type(result) is type(expected)


@pytest.mark.parametrize(
    "raw",
    ["1.", ".5", "1e5", "+5", " 42", "0x1F", "hello", "", "on", "off", "1.2.3", "TRUEISH"],
)
def test_coerce_scalar_leaves_other_text_unchanged(raw: str) -> None:
    assert coerce_scalar(raw) == raw


def test_coerce_value_without_comma_is_scalar_coercion() -> None:
    assert coerce_value("8080") == 8080
    assert coerce_value("localhost") == "localhost"
    assert coerce_value("yes") is True


def test_coerce_value_splits_mixed_arrays() -> None:
    assert coerce_value("1,hello,true,3.14") == [1, "hello", True, 3.14]


def test_coerce_value_trims_pieces() -> None:
    assert coerce_value(" tag1 , tag2 , tag3 ") == ["tag1", "tag2", "tag3"]


def test_coerce_value_drops_empty_pieces() -> None:
    assert coerce_value("a,,b,") == ["a", "b"]


def test_coerce_value_single_surviving_piece_collapses_to_scalar() -> None:
    assert coerce_value("single,") == "single"
    assert coerce_value(",5") == 5
    assert coerce_value(" , no , ") is False


def test_coerce_value_only_separators_is_empty_string() -> None:
    assert coerce_value(",") == ""
    assert coerce_value(" , , ") == ""


def test_coerce_value_empty_string_is_empty_string() -> None:
    assert coerce_value("") == ""


@given(raw=st.text(max_size=40))
@settings(max_examples=25, derandomize=True, deadline=None)
def test_property_coerce_value_is_total_and_pure(raw: str) -> None:
    first = coerce_value(raw)
    second = coerce_value(raw)
    assert first == second
    assert isinstance(first, (str, int, float, bool, list))
    if isinstance(first, list):
        assert len(first) >= 2
        assert all(not isinstance(item, list) for item in first)


def test_overlong_digit_strings_stay_text() -> None:
    digits = "1" * 5000
    negative = "-" + "9" * 5000

    assert coerce_scalar(digits) == digits
    assert coerce_scalar(negative) == negative
    assert coerce_value(f"{digits},2") == [digits, 2]
