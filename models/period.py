from dataclasses import dataclass
from datetime import date, datetime

from utils.date_helpers import iter_days, start_of_day, end_of_day, period_label


@dataclass(frozen=True)
class BillingPeriod:
    start: date     # first day of the cycle, inclusive
    end: date       # last day of the cycle, inclusive

    @property
    def start_at(self) -> datetime:
        return start_of_day(self.start)

    @property
    def end_at(self) -> datetime:
        return end_of_day(self.end)

    @property
    def length(self) -> int:
        return (self.end - self.start).days + 1

    @property
    def label(self) -> str:
        return period_label(self.start, self.end)

    def contains(self, d: date) -> bool:
        if isinstance(d, datetime):
            d = d.date()
        return self.start <= d <= self.end

    def days(self) -> list[date]:
        return list(iter_days(self.start, self.end))
