"""Billing cycle ("work month") computation.

A cycle either starts on a configured day of every month (auto mode) or
closes on a configured day (end-day mode). Every day-of-month is clamped to
the length of the month it lands in, so short months never overflow into the
next one and consecutive cycles are always contiguous.
"""
from datetime import date, timedelta

from models.period import BillingPeriod
from utils.date_helpers import clamp_day_to_month, month_index, normalize_month, parse_date


def _valid_day(day: int | None) -> int:
    return max(1, min(31, int(day or 1)))


def cycle_start_date(year: int, month: int, day: int) -> date:
    """The given day-of-month clamped to that month.

    e.g. cycle_start_date(2024, 2, 31) -> 2024-02-29. Month indices outside
    1-12 roll into the neighbouring years.
    """
    year, month = normalize_month(year, month)
    return date(year, month, clamp_day_to_month(year, month, day))


def billing_period(reference, start_day: int = 1, end_day: int | None = None) -> BillingPeriod:
    """Return the cycle containing `reference` (a date, datetime or ISO string)."""
    ref = parse_date(reference)
    y, m = ref.year, ref.month

    if end_day is None:
        start_day = _valid_day(start_day)
        candidate = cycle_start_date(y, m, start_day)
        if ref >= candidate:
            start = candidate
            end = cycle_start_date(y, m + 1, start_day) - timedelta(days=1)
        else:
            start = cycle_start_date(y, m - 1, start_day)
            end = candidate - timedelta(days=1)
        return BillingPeriod(start, end)

    # End-day mode: the cycle closes on end_day and opens the day after the
    # previous month's closing date.
    end_day = _valid_day(end_day)
    closing = cycle_start_date(y, m, end_day)
    if ref <= closing:
        end = closing
        previous_closing = cycle_start_date(y, m - 1, end_day)
    else:
        end = cycle_start_date(y, m + 1, end_day)
        previous_closing = closing
    return BillingPeriod(previous_closing + timedelta(days=1), end)


def cycle_anchor(period: BillingPeriod, end_day: int | None = None) -> date:
    """The boundary date that identifies a cycle's month: its start in auto
    mode, its closing date in end-day mode."""
    return period.start if end_day is None else period.end


def shift_period(
    period: BillingPeriod, n: int, start_day: int = 1, end_day: int | None = None
) -> BillingPeriod:
    """Return the cycle n cycles after (n < 0: before) `period`."""
    if n == 0:
        return period
    anchor = cycle_anchor(period, end_day)
    day = _valid_day(start_day if end_day is None else end_day)
    target = cycle_start_date(anchor.year, anchor.month + n, day)
    return billing_period(target, start_day, end_day)


def cycles_between(
    first: BillingPeriod, second: BillingPeriod, end_day: int | None = None
) -> int:
    """Number of cycles from `first` to `second` (negative if second is earlier)."""
    return month_index(cycle_anchor(second, end_day)) - month_index(cycle_anchor(first, end_day))


def periods_between(
    start: date, end: date, start_day: int = 1, end_day: int | None = None
) -> list[BillingPeriod]:
    """Every cycle overlapping [start, end], in order."""
    periods = []
    if end < start:
        return periods
    current = billing_period(start, start_day, end_day)
    while current.start <= end:
        periods.append(current)
        current = billing_period(current.end + timedelta(days=1), start_day, end_day)
    return periods


def is_in_period(d, reference, start_day: int = 1, end_day: int | None = None) -> bool:
    return billing_period(reference, start_day, end_day).contains(parse_date(d))


def cycle_length(period: BillingPeriod) -> int:
    return period.length
