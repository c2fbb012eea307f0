from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class GoalSettings:
    start_day_of_month: int = 1             # 1-31
    end_day_of_month: Optional[int] = None  # 1-31, None = automatic (start - 1)
    days_off: frozenset = field(default_factory=frozenset)
    daily_saving_target: float = 0.0
    savings_dates: frozenset = field(default_factory=frozenset)
    savings_adjustments: dict = field(default_factory=dict)   # 'YYYY-MM-DD' -> amount
    savings_withdrawals: dict = field(default_factory=dict)   # 'YYYY-MM-DD' -> amount

    def to_dict(self) -> dict:
        data = {
            "startDayOfMonth": self.start_day_of_month,
            "daysOff": sorted(self.days_off),
            "dailySavingTarget": self.daily_saving_target,
            "savingsDates": sorted(self.savings_dates),
            "savingsAdjustments": dict(sorted(self.savings_adjustments.items())),
            "savingsWithdrawals": dict(sorted(self.savings_withdrawals.items())),
        }
        if self.end_day_of_month is not None:
            data["endDayOfMonth"] = self.end_day_of_month
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "GoalSettings":
        end_day = data.get("endDayOfMonth")
        return cls(
            start_day_of_month=int(data.get("startDayOfMonth") or 1),
            end_day_of_month=int(end_day) if end_day not in (None, "") else None,
            days_off=frozenset(data.get("daysOff") or ()),
            daily_saving_target=float(data.get("dailySavingTarget") or 0),
            savings_dates=frozenset(data.get("savingsDates") or ()),
            savings_adjustments=_amount_map(data.get("savingsAdjustments")),
            savings_withdrawals=_amount_map(data.get("savingsWithdrawals")),
        )


def _amount_map(raw) -> dict:
    # Zero is represented by an absent key
    if not raw:
        return {}
    return {k: float(v) for k, v in raw.items() if float(v or 0) != 0}
