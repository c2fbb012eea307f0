"""Tests for utils/date_helpers.py - calendar math and display helpers."""

from datetime import date, datetime

import pytest

from utils.date_helpers import (
    add_months,
    clamp_day_to_month,
    days_in_month,
    days_remaining_in_year,
    format_date,
    format_display_date,
    is_same_day,
    is_same_week,
    iter_days,
    normalize_month,
    parse_date,
    parse_display_date,
    period_label,
    start_of_week,
)


def test_parse_date_accepts_iso_date_and_timestamp():
    assert parse_date("2024-03-05") == date(2024, 3, 5)
    assert parse_date("2024-03-05T12:00:00") == date(2024, 3, 5)
    assert parse_date("2024-03-05T23:59:59.000Z") == date(2024, 3, 5)


def test_parse_date_passes_dates_through():
    assert parse_date(date(2024, 1, 1)) == date(2024, 1, 1)
    assert parse_date(datetime(2024, 1, 1, 18, 30)) == date(2024, 1, 1)


@pytest.mark.parametrize("raw", ["", None, "not a date", "2024-13-01", "2023-02-29"])
def test_parse_date_returns_none_on_garbage(raw):
    assert parse_date(raw) is None


def test_format_date_is_iso():
    assert format_date(date(2024, 7, 9)) == "2024-07-09"


def test_is_same_day_ignores_time():
    assert is_same_day(datetime(2024, 5, 1, 0, 1), date(2024, 5, 1))
    assert not is_same_day(date(2024, 5, 1), date(2024, 5, 2))


def test_start_of_week_is_monday():
    # 2024-03-07 is a Thursday
    assert start_of_week(date(2024, 3, 7)) == date(2024, 3, 4)
    assert start_of_week(date(2024, 3, 4)) == date(2024, 3, 4)
    assert start_of_week(date(2024, 3, 10)) == date(2024, 3, 4)


def test_is_same_week_crosses_month_boundary():
    assert is_same_week(date(2024, 4, 29), date(2024, 5, 5))
    assert not is_same_week(date(2024, 5, 5), date(2024, 5, 6))


def test_days_in_month_handles_leap_years():
    assert days_in_month(2024, 2) == 29
    assert days_in_month(2023, 2) == 28
    assert days_in_month(2100, 2) == 28
    assert days_in_month(2024, 4) == 30


def test_normalize_month_rolls_years():
    assert normalize_month(2024, 0) == (2023, 12)
    assert normalize_month(2024, 13) == (2025, 1)
    assert normalize_month(2024, -11) == (2023, 1)


def test_clamp_day_to_month():
    assert clamp_day_to_month(2024, 2, 31) == 29
    assert clamp_day_to_month(2023, 2, 30) == 28
    assert clamp_day_to_month(2024, 4, 31) == 30
    assert clamp_day_to_month(2024, 5, 0) == 1


def test_add_months_clamps_to_month_end():
    assert add_months(date(2024, 1, 31), 1) == date(2024, 2, 29)
    assert add_months(date(2024, 12, 15), 1) == date(2025, 1, 15)
    assert add_months(date(2024, 3, 31), -1) == date(2024, 2, 29)


def test_iter_days_is_inclusive():
    days = list(iter_days(date(2024, 2, 27), date(2024, 3, 1)))
    assert days == [date(2024, 2, 27), date(2024, 2, 28), date(2024, 2, 29), date(2024, 3, 1)]
    assert list(iter_days(date(2024, 3, 2), date(2024, 3, 1))) == []


def test_days_remaining_in_year_counts_today_and_dec_31():
    assert days_remaining_in_year(date(2024, 12, 31)) == 1
    assert days_remaining_in_year(date(2024, 12, 30)) == 2
    assert days_remaining_in_year(date(2024, 1, 1)) == 366
    assert days_remaining_in_year(date(2023, 1, 1)) == 365


def test_display_date_round_trip():
    assert format_display_date("2024-03-05T12:00:00", "DD/MM/YYYY") == "05/03/2024"
    assert parse_display_date("05/03/2024", "DD/MM/YYYY") == date(2024, 3, 5)
    # Falls back to ISO when the display format does not match
    assert parse_display_date("2024-03-05", "DD/MM/YYYY") == date(2024, 3, 5)


def test_period_label():
    assert period_label(date(2024, 3, 5), date(2024, 4, 4)) == "05 Mar - 04 Apr"
