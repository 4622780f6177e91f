import math

import numpy as np
import pandas as pd
import pytest

from venues import parsers


@pytest.mark.parametrize(
    "raw, expected",
    [("4,5/5", 4.5), ("3,8/5", 3.8), ("9,7/10", 9.7), (" 4 ", 4.0), ("1.234,5", 1234.5), (4.5, 4.5), (3, 3.0)],
)
def test_parse_locale_number(raw, expected):
    assert parsers.parse_locale_number(raw) == pytest.approx(expected)


@pytest.mark.parametrize("raw", [None, "", "   ", "abc", "/5", float("nan"), pd.NA, np.nan, "inf"])
def test_parse_locale_number_unknown_is_nan(raw):
    assert not math.isfinite(parsers.parse_locale_number(raw))


def test_parse_review_count():
    assert parsers.parse_review_count("1.234") == 1234
    assert parsers.parse_review_count("1.234 opiniones") == 1234
    assert parsers.parse_review_count("120 opiniones") == 120
    assert parsers.parse_review_count("(5)") == 5
    assert parsers.parse_review_count(87) == 87
    assert math.isnan(parsers.parse_review_count("sin opiniones"))
    assert math.isnan(parsers.parse_review_count(None))


def test_parse_coordinate():
    assert parsers.parse_coordinate("42,1") == pytest.approx(42.1)
    assert parsers.parse_coordinate(" -8, 6 ") == pytest.approx(-8.6)
    assert parsers.parse_coordinate("42.43N") == pytest.approx(42.43)
    assert parsers.parse_coordinate(-8.644) == pytest.approx(-8.644)
    assert math.isnan(parsers.parse_coordinate("abc"))
    assert math.isnan(parsers.parse_coordinate(""))


def test_split_delimited():
    assert parsers.split_delimited("A | B |C", "|") == ["A", "B", "C"]
    assert parsers.split_delimited("wifi, , parking,", ",") == ["wifi", "parking"]
    assert parsers.split_delimited("", "|") == []
    assert parsers.split_delimited(None, "|") == []


def test_parsers_return_the_shared_nan():
    assert parsers.parse_locale_number("x") is parsers.NAN
    assert parsers.parse_coordinate(None) is parsers.NAN


def test_clean_text_and_format_value():
    assert parsers.clean_text("  Hotel ") == "Hotel"
    assert parsers.clean_text(np.nan) == ""
    assert parsers.clean_text(986123456) == "986123456"
    assert parsers.clean_text(986123456.0) == "986123456"
    assert parsers.format_value(("a", "b")) == "a, b"
    assert parsers.format_value(float("nan")) == ""
    assert parsers.format_value(4.5) == "4.5"
    assert parsers.format_value(120.0) == "120"


@pytest.mark.parametrize(
    "raw, expected",
    [("4.5/5", 4.5), ("4,5/5", 4.5), ("1.234", 1234.0), ("1.234,5", 1234.5), ("12.345.678", 12345678.0), ("4. 5", 4.5)],
)
def test_parse_cell_number_only_drops_grouping_dots(raw, expected):
    assert parsers.parse_cell_number(raw) == pytest.approx(expected)


def test_parse_cell_review_count():
    assert parsers.parse_cell_review_count("1.234 opiniones") == 1234
    assert parsers.parse_cell_review_count("2.5k") == pytest.approx(2.5)
    assert math.isnan(parsers.parse_cell_review_count("sin opiniones"))
    assert parsers.parse_cell_number("n/d") is parsers.NAN
