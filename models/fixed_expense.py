from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from utils.date_helpers import parse_date


@dataclass(frozen=True)
class FixedExpense:
    """Template for a recurring (or one-off) obligation."""

    id: str
    title: str
    amount: float
    category: str
    start_date: str                      # 'YYYY-MM-DD', first occurrence
    recurrence: str = "monthly"          # 'monthly' | 'installments' | 'single'
    type: str = "expense"                # 'income' | 'expense'
    installments: Optional[int] = None   # required iff recurrence == 'installments'
    card_id: Optional[str] = None
    excluded_dates: frozenset = field(default_factory=frozenset)
    paid_dates: frozenset = field(default_factory=frozenset)

    @property
    def start(self) -> date | None:
        return parse_date(self.start_date)

    @property
    def is_income(self) -> bool:
        return self.type == "income"

    def to_dict(self) -> dict:
        data = {
            "id": self.id,
            "title": self.title,
            "amount": self.amount,
            "category": self.category,
            "startDate": self.start_date,
            "recurrence": self.recurrence,
            "type": self.type,
            "excludedDates": sorted(self.excluded_dates),
            "paidDates": sorted(self.paid_dates),
        }
        if self.installments is not None:
            data["installments"] = self.installments
        if self.card_id is not None:
            data["cardId"] = self.card_id
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "FixedExpense":
        installments = data.get("installments")
        return cls(
            id=str(data["id"]),
            title=data.get("title", ""),
            amount=float(data.get("amount") or 0),
            category=data.get("category") or data.get("title", ""),
            start_date=data.get("startDate", ""),
            recurrence=data.get("recurrence", "monthly"),
            type=data.get("type") or "expense",
            installments=int(installments) if installments not in (None, "") else None,
            card_id=data.get("cardId") or None,
            excluded_dates=frozenset(data.get("excludedDates") or ()),
            paid_dates=frozenset(data.get("paidDates") or ()),
        )


@dataclass(frozen=True)
class Occurrence:
    """One dated instance generated from a FixedExpense."""

    obligation: FixedExpense
    occurrence_date: date
    is_paid: bool = False
    current_installment: Optional[int] = None

    @property
    def id(self) -> str:
        return self.obligation.id

    @property
    def title(self) -> str:
        return self.obligation.title

    @property
    def category(self) -> str:
        return self.obligation.category

    @property
    def amount(self) -> float:
        return self.obligation.amount

    @property
    def type(self) -> str:
        return self.obligation.type

    @property
    def card_id(self) -> Optional[str]:
        return self.obligation.card_id

    @property
    def installment_label(self) -> str:
        """e.g. '3/12' for installments, '' otherwise."""
        if self.current_installment is None or not self.obligation.installments:
            return ""
        return f"{self.current_installment}/{self.obligation.installments}"
