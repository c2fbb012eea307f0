from dataclasses import dataclass
from datetime import date

from utils.date_helpers import parse_date


@dataclass(frozen=True)
class Transaction:
    id: str
    amount: float
    type: str               # 'income' | 'expense'
    description: str
    date: str               # ISO timestamp, e.g. '2024-03-01T12:00:00'

    @property
    def day(self) -> date | None:
        """Calendar date used for period math; the time-of-day is ignored."""
        return parse_date(self.date)

    @property
    def is_income(self) -> bool:
        return self.type == "income"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "amount": self.amount,
            "type": self.type,
            "description": self.description,
            "date": self.date,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Transaction":
        return cls(
            id=str(data["id"]),
            amount=float(data.get("amount") or 0),
            type=data.get("type", "expense"),
            description=data.get("description", ""),
            date=data.get("date", ""),
        )
