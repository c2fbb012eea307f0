import logging
import uuid
from dataclasses import replace
from datetime import date

from database.fixed_expense_dao import FixedExpenseDAO
from database.goal_settings_dao import GoalSettingsDAO
from models.fixed_expense import FixedExpense, Occurrence
from models.period import BillingPeriod
from utils.billing_period import billing_period, cycle_start_date, cycles_between, shift_period
from utils.constants import RECURRENCE_TYPES, TRANSACTION_TYPES
from utils.date_helpers import days_in_month, format_date, normalize_month, parse_date

logger = logging.getLogger(__name__)


# ── Expansion ────────────────────────────────────────────────────────────────

def occurrences_in_range(
    obligations,
    range_start,
    range_end,
    start_day: int = 1,
    end_day: int | None = None,
) -> list[Occurrence]:
    """Expand obligation templates into the dated occurrences inside
    [range_start, range_end].

    Monthly and installment obligations produce one occurrence per billing
    cycle, starting with the cycle that contains their start date and falling
    on the start date's day of month inside each later cycle.
    """
    first = parse_date(range_start)
    last = parse_date(range_end)
    result: list[Occurrence] = []
    if first is None or last is None or last < first:
        return result
    for obligation in obligations:
        result.extend(_expand(obligation, first, last, start_day, end_day))
    return result


def sort_occurrences(occurrences) -> list[Occurrence]:
    """Newest first; occurrences on the same date keep their input order."""
    return sorted(occurrences, key=lambda o: o.occurrence_date, reverse=True)


def _expand(obligation: FixedExpense, first: date, last: date, start_day, end_day) -> list[Occurrence]:
    start = obligation.start
    if start is None or start > last:
        return []

    if obligation.recurrence == "installments" and not obligation.installments:
        logger.warning({
            "event": "expand_obligation",
            "status": "degenerate",
            "reason": "installments_without_count",
            "id": obligation.id,
        })
        return _expand_single(obligation, start, first, last)
    if obligation.recurrence not in ("monthly", "installments"):
        return _expand_single(obligation, start, first, last)

    limit = obligation.installments if obligation.recurrence == "installments" else None
    anchor = billing_period(start, start_day, end_day)
    k = max(0, cycles_between(anchor, billing_period(first, start_day, end_day), end_day))

    result = []
    while limit is None or k < limit:
        period = shift_period(anchor, k, start_day, end_day)
        if period.start > last:
            break
        occurrence_date = start if k == 0 else _day_in_period(period, start.day)
        if first <= occurrence_date <= last:
            occurrence = _make_occurrence(
                obligation, occurrence_date, k + 1 if limit is not None else None
            )
            if occurrence is not None:
                result.append(occurrence)
        k += 1
    return result


def _expand_single(obligation: FixedExpense, start: date, first: date, last: date) -> list[Occurrence]:
    if not first <= start <= last:
        return []
    occurrence = _make_occurrence(obligation, start, None)
    return [occurrence] if occurrence is not None else []


def _make_occurrence(obligation: FixedExpense, d: date, installment: int | None) -> Occurrence | None:
    key = format_date(d)
    if key in obligation.excluded_dates:
        return None
    return Occurrence(
        obligation=obligation,
        occurrence_date=d,
        is_paid=key in obligation.paid_dates,
        current_installment=installment,
    )


def _day_in_period(period: BillingPeriod, day: int) -> date:
    """The date inside `period` that falls on `day` of the month.

    An exact match wins; otherwise the day is clamped to a short month; if
    clamping leaves the day outside the cycle the cycle's last day is used.
    """
    months = [normalize_month(period.start.year, period.start.month + i) for i in (0, 1)]
    for y, m in months:
        if day <= days_in_month(y, m) and period.contains(date(y, m, day)):
            return date(y, m, day)
    for y, m in months:
        candidate = cycle_start_date(y, m, day)
        if period.contains(candidate):
            return candidate
    return period.end


# ── Occurrence toggles ───────────────────────────────────────────────────────

def toggle_paid(obligation: FixedExpense, occurrence_date) -> FixedExpense:
    """Mark an occurrence paid, or unpaid if it already was."""
    key = format_date(parse_date(occurrence_date))
    return replace(obligation, paid_dates=obligation.paid_dates ^ {key})


def toggle_excluded(obligation: FixedExpense, occurrence_date) -> FixedExpense:
    """Skip an occurrence without deleting the template, or restore it."""
    key = format_date(parse_date(occurrence_date))
    return replace(obligation, excluded_dates=obligation.excluded_dates ^ {key})


class RecurringService:
    def __init__(self, fixed_expense_dao: FixedExpenseDAO, settings_dao: GoalSettingsDAO):
        self._dao = fixed_expense_dao
        self._settings_dao = settings_dao

    def get_all(self) -> list[FixedExpense]:
        return self._dao.get_all()

    def get_by_id(self, expense_id: str) -> FixedExpense | None:
        return self._dao.get_by_id(expense_id)

    def create(
        self,
        title: str,
        amount: float,
        start_date: str,
        recurrence: str = "monthly",
        type_: str = "expense",
        category: str = "",
        installments: int | None = None,
        card_id: str | None = None,
    ) -> FixedExpense:
        self._validate(title, amount, type_, recurrence, start_date, installments)
        expense = FixedExpense(
            id=str(uuid.uuid4()),
            title=title.strip(),
            amount=amount,
            category=(category or title).strip(),
            start_date=format_date(parse_date(start_date)),
            recurrence=recurrence,
            type=type_,
            installments=installments if recurrence == "installments" else None,
            card_id=card_id if type_ == "expense" else None,
        )
        return self._dao.create(expense)

    def update(
        self,
        expense_id: str,
        title: str,
        amount: float,
        start_date: str,
        recurrence: str = "monthly",
        type_: str = "expense",
        category: str = "",
        installments: int | None = None,
        card_id: str | None = None,
    ) -> FixedExpense:
        current = self._require(expense_id)
        self._validate(title, amount, type_, recurrence, start_date, installments)
        updated = replace(
            current,
            title=title.strip(),
            amount=amount,
            category=(category or title).strip(),
            start_date=format_date(parse_date(start_date)),
            recurrence=recurrence,
            type=type_,
            installments=installments if recurrence == "installments" else None,
            card_id=card_id if type_ == "expense" else None,
        )
        return self._dao.update(updated)

    def delete(self, expense_id: str):
        self._dao.delete(expense_id)

    def toggle_paid(self, expense_id: str, occurrence_date) -> FixedExpense:
        return self._dao.update(toggle_paid(self._require(expense_id), occurrence_date))

    def skip_occurrence(self, expense_id: str, occurrence_date) -> FixedExpense:
        expense = self._require(expense_id)
        if format_date(parse_date(occurrence_date)) in expense.excluded_dates:
            return expense
        return self._dao.update(toggle_excluded(expense, occurrence_date))

    def restore_occurrence(self, expense_id: str, occurrence_date) -> FixedExpense:
        expense = self._require(expense_id)
        if format_date(parse_date(occurrence_date)) not in expense.excluded_dates:
            return expense
        return self._dao.update(toggle_excluded(expense, occurrence_date))

    def get_for_period(self, period: BillingPeriod) -> list[Occurrence]:
        """Occurrences inside `period`, newest first."""
        settings = self._settings_dao.get()
        return sort_occurrences(occurrences_in_range(
            self._dao.get_all(), period.start, period.end,
            settings.start_day_of_month, settings.end_day_of_month,
        ))

    def get_totals(self, period: BillingPeriod) -> dict:
        occurrences = self.get_for_period(period)
        income = sum(o.amount for o in occurrences if o.type == "income")
        expense = sum(o.amount for o in occurrences if o.type == "expense")
        paid = sum(o.amount for o in occurrences if o.type == "expense" and o.is_paid)
        return {"income": income, "expense": expense, "paid": paid, "net": income - expense}

    def _require(self, expense_id: str) -> FixedExpense:
        expense = self._dao.get_by_id(expense_id)
        if expense is None:
            raise ValueError("Fixed expense not found.")
        return expense

    def _validate(self, title, amount, type_, recurrence, start_date, installments):
        if not title or not title.strip():
            raise ValueError("Title cannot be empty.")
        if type_ not in TRANSACTION_TYPES:
            raise ValueError("Type must be income or expense.")
        if amount is None or amount <= 0:
            raise ValueError("Amount must be positive.")
        if recurrence not in RECURRENCE_TYPES:
            raise ValueError("Invalid recurrence.")
        if not parse_date(start_date):
            raise ValueError("Invalid start date.")
        if recurrence == "installments" and (not installments or installments < 1):
            raise ValueError("Installments must be at least 1.")
