import uuid
from dataclasses import replace

from database.transaction_dao import TransactionDAO
from models.period import BillingPeriod
from models.transaction import Transaction
from utils.constants import TRANSACTION_TIME, TRANSACTION_TYPES
from utils.date_helpers import format_date, parse_date


class TransactionService:
    def __init__(self, tx_dao: TransactionDAO):
        self._dao = tx_dao

    def get_all(self) -> list[Transaction]:
        return self._dao.get_all()

    def get_by_id(self, tx_id: str) -> Transaction | None:
        return self._dao.get_by_id(tx_id)

    def get_for_period(self, period: BillingPeriod) -> list[Transaction]:
        return self._dao.get_between(period.start, period.end)

    def create(
        self,
        type_: str,
        amount: float,
        date: str,
        description: str = "",
    ) -> Transaction:
        self._validate(type_, amount, date)
        return self._dao.create(Transaction(
            id=str(uuid.uuid4()),
            amount=float(amount),
            type=type_,
            description=description.strip(),
            date=self._stamp(date),
        ))

    def update(
        self,
        tx_id: str,
        type_: str,
        amount: float,
        date: str,
        description: str = "",
    ) -> Transaction:
        current = self._dao.get_by_id(tx_id)
        if current is None:
            raise ValueError("Transaction not found.")
        self._validate(type_, amount, date)
        return self._dao.update(replace(
            current,
            type=type_,
            amount=float(amount),
            description=description.strip(),
            date=self._stamp(date),
        ))

    def delete(self, tx_id: str):
        self._dao.delete(tx_id)

    @staticmethod
    def _stamp(date) -> str:
        # A fixed midday time keeps the calendar date stable across timezones
        return f"{format_date(parse_date(date))}T{TRANSACTION_TIME}"

    def _validate(self, type_: str, amount: float, date):
        if type_ not in TRANSACTION_TYPES:
            raise ValueError(f"Invalid type: {type_}")
        if amount is None or amount <= 0:
            raise ValueError("Amount must be positive.")
        if not parse_date(date):
            raise ValueError("Invalid date format. Use YYYY-MM-DD.")
