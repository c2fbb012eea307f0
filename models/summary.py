from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from models.period import BillingPeriod


@dataclass
class PeriodSummary:
    income: float = 0.0
    expense: float = 0.0
    gross_income: float = 0.0        # ad-hoc income only
    planned_expense: float = 0.0     # every recurring expense occurrence, paid or not
    by_category: dict = field(default_factory=dict)

    @property
    def balance(self) -> float:
        return self.income - self.expense


class GoalState(str, Enum):
    NOT_WORKED_TODAY = "not_worked_today"
    WORKED_TODAY_HIT_GOAL = "worked_today_hit_goal"
    WORKED_TODAY_MISSED_GOAL = "worked_today_missed_goal"


@dataclass
class DailyTarget:
    target: float
    state: GoalState
    start_of_day_target: float
    days: int               # work days the target is spread over


@dataclass
class DailyGoal:
    period: BillingPeriod
    view: str                         # 'current' | 'future' | 'past'
    target: float
    helper_text: str
    state: Optional[GoalState] = None
    cycle_goal: float = 0.0
    net_earned: float = 0.0
    remaining: float = 0.0
    income_today: float = 0.0
    start_of_day_target: float = 0.0
    total_work_days: int = 0

    @property
    def progress(self) -> float:
        """Share of the cycle goal already covered, 0.0-1.0."""
        if self.cycle_goal <= 0:
            return 1.0 if self.net_earned >= 0 else 0.0
        return max(0.0, min(1.0, self.net_earned / self.cycle_goal))


@dataclass
class YearlyProjection:
    reserve_balance: float
    projected_year_end: float
    days_marked: int
    total_saved: float
    total_adjustments: float
    total_withdrawals: float
    remaining_days: int
