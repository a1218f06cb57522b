"""Tests for dates.py: day-month-year codec and Feb 29 rules."""

from datetime import date

import pytest

from datekeeper.dates import (
    YEARLY,
    OneTime,
    TaskDate,
    normalize,
    parse_date,
    swap_order,
    to_date,
)
from datekeeper.errors import InvalidFormat


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("10-5", "10-5-0"),
        ("10-5-0", "10-5-0"),
        ("10-5-2026", "10-5-2026"),
        (" 05-06 ", "5-6-0"),
        ("01-01-2024", "1-1-2024"),
    ],
)
def test_normalize_canonical_form(text, expected):
    assert normalize(text) == expected


@pytest.mark.parametrize("year", ["", "-0", "-2024"])
def test_normalize_then_to_date_keeps_day_and_month(year):
    result = to_date(normalize(f"29-2{year}"))

    assert (result.day, result.month) == (29, 2)


def test_to_date_uses_placeholder_for_yearly():
    assert to_date("10-5-0") == date(2000, 5, 10)


def test_to_date_concrete_year():
    assert to_date("10-5-2026") == date(2026, 5, 10)


@pytest.mark.parametrize(
    "text",
    ["not-a-date", "10", "10-5-2026-1", "a-5", "10-b", "10-5-x", "", "-5", "10--2026"],
)
def test_normalize_rejects_malformed(text):
    with pytest.raises(InvalidFormat):
        normalize(text)


@pytest.mark.parametrize("text", ["1-13", "1-0-2024", "0-5", "32-1", "31-4-2026"])
def test_normalize_rejects_out_of_range(text):
    with pytest.raises(InvalidFormat):
        normalize(text)


def test_feb_29_one_time_follows_literal_year():
    assert normalize("29-2-2024") == "29-2-2024"
    with pytest.raises(InvalidFormat, match="between 1 and 28"):
        normalize("29-2-2023")


def test_feb_29_yearly_is_accepted():
    assert normalize("29-2") == "29-2-0"
    assert normalize("29-2-0") == "29-2-0"


def test_parse_date_yearly():
    parsed = parse_date("10-5")

    assert parsed == TaskDate(day=10, month=5, recurrence=YEARLY)
    assert parsed.recurring is True
    assert parsed.year == 0
    assert str(parsed) == "10-5-0"


def test_parse_date_zero_year_is_yearly():
    assert parse_date("10-5-0").recurring is True


def test_parse_date_one_time():
    parsed = parse_date("10-5-2026")

    assert parsed.recurrence == OneTime(2026)
    assert parsed.recurring is False
    assert parsed.year == 2026


def test_task_date_key_ignores_year():
    assert parse_date("10-5-2026").key == parse_date("10-5").key == "10-5"


def test_swap_order_swaps_day_and_month():
    assert swap_order("10-5-2026") == "5-10-2026"


def test_swap_order_is_its_own_inverse():
    assert swap_order(swap_order("29-2-0")) == "29-2-0"


def test_swap_order_leaves_single_field_alone():
    assert swap_order("10") == "10"


@pytest.mark.parametrize("text", ["1-1-" + "9" * 5000, "9" * 5000 + "-1", "1-" + "0" * 10 + "5"])
def test_normalize_rejects_overlong_fields(text):
    with pytest.raises(InvalidFormat, match="at most 4 digits"):
        normalize(text)


def test_normalize_accepts_zero_padded_four_digit_fields():
    assert normalize("0010-0005-2026") == "10-5-2026"
