from collections import defaultdict
from datetime import date, timedelta

from database.credit_card_dao import CreditCardDAO
from database.fixed_expense_dao import FixedExpenseDAO
from database.goal_settings_dao import GoalSettingsDAO
from database.transaction_dao import TransactionDAO
from models.period import BillingPeriod
from models.summary import PeriodSummary
from services.recurring_service import occurrences_in_range, sort_occurrences
from utils.billing_period import billing_period, shift_period
from utils.constants import FUEL_KEYWORDS
from utils.date_helpers import is_same_day, is_same_week, iter_days, parse_date, start_of_week


# ── Aggregation ──────────────────────────────────────────────────────────────

def transactions_in_period(transactions, start, end) -> list:
    """Transactions dated inside [start, end], newest first."""
    first, last = parse_date(start), parse_date(end)
    rows = [t for t in transactions if t.day is not None and first <= t.day <= last]
    return sorted(rows, key=lambda t: t.date, reverse=True)


def aggregate(transactions, occurrences, start, end) -> PeriodSummary:
    """Totals over [start, end].

    Ad-hoc transactions have already moved money and always count. Recurring
    occurrences are planned money and count only once marked paid.
    """
    first, last = parse_date(start), parse_date(end)
    summary = PeriodSummary()
    by_category: dict[str, float] = defaultdict(float)

    for tx in transactions:
        if tx.day is None or not first <= tx.day <= last:
            continue
        if tx.is_income:
            summary.income += tx.amount
            summary.gross_income += tx.amount
        else:
            summary.expense += tx.amount
            by_category[tx.description] += tx.amount

    for occ in occurrences:
        if not first <= occ.occurrence_date <= last:
            continue
        if occ.type == "expense":
            summary.planned_expense += occ.amount
        if not occ.is_paid:
            continue
        if occ.type == "income":
            summary.income += occ.amount
        else:
            summary.expense += occ.amount
            by_category[occ.category] += occ.amount

    summary.by_category = dict(sorted(by_category.items(), key=lambda kv: kv[1], reverse=True))
    return summary


def _matches(text: str, keywords) -> bool:
    text = (text or "").lower()
    return any(k.lower() in text for k in keywords)


def keyword_total(transactions, occurrences=(), keywords=FUEL_KEYWORDS, start=None, end=None) -> float:
    """Expense spent on anything whose description or category mentions a keyword.

    Plain substring matching; "Posto Shell" and "gasolina" both count as fuel.
    """
    first = parse_date(start) if start is not None else date.min
    last = parse_date(end) if end is not None else date.max
    total = sum(
        t.amount for t in transactions
        if not t.is_income and t.day is not None and first <= t.day <= last
        and _matches(t.description, keywords)
    )
    total += sum(
        o.amount for o in occurrences
        if o.type == "expense" and o.is_paid and first <= o.occurrence_date <= last
        and _matches(o.category, keywords)
    )
    return total


def card_totals(occurrences) -> dict:
    """Expense occurrences per card id, paid or not."""
    totals: dict[str, float] = defaultdict(float)
    for occ in occurrences:
        if occ.type == "expense" and occ.card_id:
            totals[occ.card_id] += occ.amount
    return dict(totals)


def day_income(transactions, d) -> float:
    return sum(
        t.amount for t in transactions
        if t.is_income and t.day is not None and is_same_day(t.day, d)
    )


def week_balance(transactions, d) -> float:
    """Net of ad-hoc transactions in the Monday-Sunday week containing `d`."""
    total = 0.0
    for tx in transactions:
        if tx.day is None or not is_same_week(tx.day, d):
            continue
        total += tx.amount if tx.is_income else -tx.amount
    return total


def weekly_income(transactions, d) -> list[tuple[date, float]]:
    monday = start_of_week(parse_date(d))
    return [(day, day_income(transactions, day)) for day in iter_days(monday, monday + timedelta(days=6))]


def group_by_day(transactions) -> list[tuple[date, list]]:
    groups: dict[date, list] = defaultdict(list)
    for tx in sorted(transactions, key=lambda t: t.date, reverse=True):
        if tx.day is not None:
            groups[tx.day].append(tx)
    return sorted(groups.items(), key=lambda kv: kv[0], reverse=True)


class ReportService:
    def __init__(
        self,
        tx_dao: TransactionDAO,
        fixed_expense_dao: FixedExpenseDAO,
        card_dao: CreditCardDAO,
        settings_dao: GoalSettingsDAO,
    ):
        self._tx_dao = tx_dao
        self._fixed_dao = fixed_expense_dao
        self._card_dao = card_dao
        self._settings_dao = settings_dao

    def get_period(self, today: date, offset: int = 0) -> BillingPeriod:
        """The cycle containing `today`, shifted `offset` cycles."""
        settings = self._settings_dao.get()
        current = billing_period(today, settings.start_day_of_month, settings.end_day_of_month)
        return shift_period(current, offset, settings.start_day_of_month, settings.end_day_of_month)

    def _occurrences(self, period: BillingPeriod) -> list:
        settings = self._settings_dao.get()
        return sort_occurrences(occurrences_in_range(
            self._fixed_dao.get_all(), period.start, period.end,
            settings.start_day_of_month, settings.end_day_of_month,
        ))

    def get_summary(self, period: BillingPeriod) -> PeriodSummary:
        return aggregate(self._tx_dao.get_all(), self._occurrences(period), period.start, period.end)

    def get_dashboard(self, today: date, period: BillingPeriod) -> dict:
        """Everything the dashboard shows for `period`, with day/week figures
        taken relative to `today`."""
        transactions = self._tx_dao.get_all()
        occurrences = self._occurrences(period)
        in_period = transactions_in_period(transactions, period.start, period.end)
        return {
            "period": period,
            "summary": aggregate(transactions, occurrences, period.start, period.end),
            "today_income": day_income(transactions, today),
            "week_balance": week_balance(transactions, today),
            "fuel": keyword_total(transactions, occurrences, FUEL_KEYWORDS, period.start, period.end),
            "weekly_income": weekly_income(transactions, today),
            "groups": group_by_day(in_period),
        }

    def get_card_breakdown(self, period: BillingPeriod) -> list[dict]:
        """Return [{card, total, usage}, ...]; usage is None for unlimited cards."""
        totals = card_totals(self._occurrences(period))
        rows = []
        for card in self._card_dao.get_all():
            total = totals.get(card.id, 0.0)
            usage = total / card.limit if card.has_limit else None
            rows.append({"card": card, "total": total, "usage": usage})
        return rows
