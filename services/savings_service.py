from dataclasses import replace
from datetime import date

from database.goal_settings_dao import GoalSettingsDAO
from models.goal_settings import GoalSettings
from models.summary import YearlyProjection
from utils.date_helpers import days_remaining_in_year, format_date, parse_date


def yearly_projection(settings: GoalSettings, today: date) -> YearlyProjection:
    target = settings.daily_saving_target
    total_saved = target * len(settings.savings_dates)
    adjustments = sum(settings.savings_adjustments.values())
    withdrawals = sum(settings.savings_withdrawals.values())
    reserve = total_saved + adjustments - withdrawals
    remaining = days_remaining_in_year(parse_date(today))
    return YearlyProjection(
        reserve_balance=reserve,
        projected_year_end=reserve + target * remaining,
        days_marked=len(settings.savings_dates),
        total_saved=total_saved,
        total_adjustments=adjustments,
        total_withdrawals=withdrawals,
        remaining_days=remaining,
    )


def _key(d) -> str:
    day = parse_date(d)
    if day is None:
        raise ValueError("Invalid date.")
    return format_date(day)


def _set_amount(amounts: dict, key: str, amount: float) -> dict:
    # Zero means no entry
    updated = {k: v for k, v in amounts.items() if k != key}
    if amount:
        updated[key] = float(amount)
    return updated


def toggle_savings_date(settings: GoalSettings, d) -> GoalSettings:
    return replace(settings, savings_dates=settings.savings_dates ^ {_key(d)})


def set_adjustment(settings: GoalSettings, d, amount: float) -> GoalSettings:
    return replace(
        settings,
        savings_adjustments=_set_amount(settings.savings_adjustments, _key(d), amount),
    )


def set_withdrawal(settings: GoalSettings, d, amount: float) -> GoalSettings:
    return replace(
        settings,
        savings_withdrawals=_set_amount(settings.savings_withdrawals, _key(d), amount),
    )


class SavingsService:
    def __init__(self, settings_dao: GoalSettingsDAO):
        self._dao = settings_dao

    def get_settings(self) -> GoalSettings:
        return self._dao.get()

    def get_projection(self, today: date) -> YearlyProjection:
        return yearly_projection(self._dao.get(), today)

    def set_daily_target(self, amount: float) -> GoalSettings:
        if amount is None or amount < 0:
            raise ValueError("Daily target cannot be negative.")
        return self._dao.save(replace(self._dao.get(), daily_saving_target=float(amount)))

    def toggle_date(self, d) -> GoalSettings:
        return self._dao.save(toggle_savings_date(self._dao.get(), d))

    def set_adjustment(self, d, amount: float) -> GoalSettings:
        if amount is None or amount < 0:
            raise ValueError("Amount cannot be negative.")
        return self._dao.save(set_adjustment(self._dao.get(), d, amount))

    def set_withdrawal(self, d, amount: float) -> GoalSettings:
        if amount is None or amount < 0:
            raise ValueError("Amount cannot be negative.")
        return self._dao.save(set_withdrawal(self._dao.get(), d, amount))
