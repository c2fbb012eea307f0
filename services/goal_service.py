"""Daily earnings target for the current billing cycle.

The cycle goal is the gap between recurring expenses and recurring income.
Each day the remaining gap is spread over the work days left, and a day with
income is judged against the target as it stood before that income arrived.
"""
from dataclasses import replace
from datetime import date

from database.fixed_expense_dao import FixedExpenseDAO
from database.goal_settings_dao import GoalSettingsDAO
from database.transaction_dao import TransactionDAO
from models.goal_settings import GoalSettings
from models.period import BillingPeriod
from models.summary import DailyGoal, DailyTarget, GoalState
from services.recurring_service import occurrences_in_range
from services.report_service import day_income, transactions_in_period
from utils.billing_period import billing_period, is_in_period, shift_period
from utils.date_helpers import format_date, parse_date


def cycle_goal(occurrences) -> float:
    """Recurring expense not covered by recurring income; never negative."""
    expense = sum(o.amount for o in occurrences if o.type == "expense")
    income = sum(o.amount for o in occurrences if o.type == "income")
    return max(0.0, expense - income)


def work_days(period: BillingPeriod, days_off, today: date) -> tuple[int, bool, int]:
    """Return (future_work_days, is_today_work_day, total_work_days).

    Future days are those strictly after `today`; both day-relative figures
    are zero when `today` is outside the period.
    """
    future = 0
    is_today = False
    total = 0
    in_period = period.contains(today)
    for d in period.days():
        if format_date(d) in days_off:
            continue
        total += 1
        if in_period:
            if d > today:
                future += 1
            elif d == today:
                is_today = True
    return future, is_today, total


def daily_target(
    remaining: float,
    income_today: float,
    future_work_days: int,
    is_today_work_day: bool,
) -> DailyTarget:
    baseline_remaining = remaining + income_today
    baseline_days = future_work_days + (1 if is_today_work_day else 0)
    start_of_day = baseline_remaining / baseline_days if baseline_days > 0 else 0.0

    if income_today == 0:
        return DailyTarget(start_of_day, GoalState.NOT_WORKED_TODAY, start_of_day, baseline_days)

    # Today is settled; the displayed figure is tomorrow's.
    hit = income_today >= start_of_day
    target = remaining / future_work_days if future_work_days > 0 else remaining
    state = GoalState.WORKED_TODAY_HIT_GOAL if hit else GoalState.WORKED_TODAY_MISSED_GOAL
    return DailyTarget(target, state, start_of_day, future_work_days)


def _helper_text(result: DailyTarget) -> str:
    if result.state == GoalState.NOT_WORKED_TODAY:
        if result.days > 0:
            return f"To reach the goal in {result.days} days (including today)"
        return "No work days left"
    if result.days > 0:
        return f"New target for the {result.days} remaining days"
    return "Cycle finished!"


def daily_goal(
    settings: GoalSettings,
    transactions,
    obligations,
    today: date,
    view_date: date | None = None,
) -> DailyGoal:
    """Goal figures for the cycle containing `view_date` (default: today)."""
    start_day, end_day = settings.start_day_of_month, settings.end_day_of_month
    today = parse_date(today)
    period = billing_period(view_date or today, start_day, end_day)
    current = billing_period(today, start_day, end_day)

    occurrences = occurrences_in_range(obligations, period.start, period.end, start_day, end_day)
    goal = cycle_goal(occurrences)
    net = sum(
        t.amount if t.is_income else -t.amount
        for t in transactions_in_period(transactions, period.start, period.end)
    )
    remaining = max(0.0, goal - net)
    future, is_today, total = work_days(period, settings.days_off, today)

    common = dict(
        period=period, cycle_goal=goal, net_earned=net,
        remaining=remaining, total_work_days=total,
    )

    if period == current:
        income_today = day_income(transactions, today)
        result = daily_target(remaining, income_today, future, is_today)
        return DailyGoal(
            view="current",
            target=result.target,
            helper_text=_helper_text(result),
            state=result.state,
            income_today=income_today,
            start_of_day_target=result.start_of_day_target,
            **common,
        )
    if period.start > current.end:
        return DailyGoal(
            view="future",
            target=goal / total if total > 0 else 0.0,
            helper_text=f"Forecast based on {total} work days",
            **common,
        )
    return DailyGoal(view="past", target=0.0, helper_text="Cycle closed", **common)


class GoalService:
    def __init__(
        self,
        settings_dao: GoalSettingsDAO,
        tx_dao: TransactionDAO,
        fixed_expense_dao: FixedExpenseDAO,
    ):
        self._settings_dao = settings_dao
        self._tx_dao = tx_dao
        self._fixed_dao = fixed_expense_dao

    def get_settings(self) -> GoalSettings:
        return self._settings_dao.get()

    def period_for(self, today: date, offset: int = 0) -> BillingPeriod:
        """The cycle `offset` cycles away from the one containing `today`."""
        settings = self._settings_dao.get()
        current = billing_period(today, settings.start_day_of_month, settings.end_day_of_month)
        return shift_period(current, offset, settings.start_day_of_month, settings.end_day_of_month)

    def get_goal(self, today: date, view_date: date | None = None) -> DailyGoal:
        return daily_goal(
            self._settings_dao.get(),
            self._tx_dao.get_all(),
            self._fixed_dao.get_all(),
            today,
            view_date,
        )

    def toggle_day_off(self, d, today: date) -> GoalSettings:
        """Flip `d` between work day and day off.

        Days already gone in the current cycle are locked.
        """
        settings = self._settings_dao.get()
        day = parse_date(d)
        if day is None:
            raise ValueError("Invalid date.")
        in_current = is_in_period(day, today, settings.start_day_of_month, settings.end_day_of_month)
        if in_current and day < today:
            raise ValueError("Past days in the current cycle cannot be changed.")
        return self._settings_dao.save(
            replace(settings, days_off=settings.days_off ^ {format_date(day)})
        )

    def set_cycle_days(self, start_day: int, end_day: int | None = None) -> GoalSettings:
        if not 1 <= int(start_day) <= 31:
            raise ValueError("Start day must be between 1 and 31.")
        if end_day is not None and not 1 <= int(end_day) <= 31:
            raise ValueError("End day must be between 1 and 31.")
        settings = self._settings_dao.get()
        return self._settings_dao.save(replace(
            settings,
            start_day_of_month=int(start_day),
            end_day_of_month=int(end_day) if end_day is not None else None,
        ))
