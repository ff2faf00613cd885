"""Tests for free-text cell parsing."""

import math

import pytest

from utils.strategic_performance.parsing import has_value, parse_cell, parse_numeric


@pytest.mark.parametrize("text, expected", [
    ("120", 120.0),
    ("2,5", 2.5),
    ("R$ 1500", 1500.0),
    ("-3", -3.0),
    ("85%", 85.0),
    ("1.234.56", 1.234),
    ("abc", 0.0),
    ("", 0.0),
    ("   ", 0.0),
])
def test_parse_numeric_text(text, expected):
    assert parse_numeric(text) == pytest.approx(expected)


def test_parse_numeric_passes_numbers_through():
    assert parse_numeric(42) == 42.0
    assert parse_numeric(0.5) == 0.5
    assert parse_numeric(None) == 0.0


def test_parse_numeric_non_finite_is_zero():
    assert parse_numeric(float("inf")) == 0.0
    assert parse_numeric(float("nan")) == 0.0


def test_has_value():
    assert has_value("0")
    assert has_value("abc")
    assert has_value(0)
    assert not has_value("")
    assert not has_value("   ")
    assert not has_value(None)
    assert not has_value(math.nan)


def test_parse_cell_distinguishes_empty_from_zero():
    assert parse_cell("") is None
    assert parse_cell(None) is None
    assert parse_cell("0") == 0.0
    # Non-numeric text counts as entered, with value 0
    assert parse_cell("n/d") == 0.0


def test_parse_numeric_overflowing_text_is_zero():
    assert parse_numeric("9" * 400) == 0.0
    assert parse_numeric("-" + "9" * 400) == 0.0
    assert parse_cell("9" * 400) == 0.0
