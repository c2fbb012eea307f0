from datetime import date

from database.collection_dao import CollectionDAO
from models.transaction import Transaction
from utils.constants import DATASET_TRANSACTIONS


class TransactionDAO(CollectionDAO):
    dataset = DATASET_TRANSACTIONS
    model = Transaction

    def get_between(self, start: date, end: date) -> list[Transaction]:
        """Transactions whose calendar date falls in [start, end], newest first."""
        rows = [t for t in self._load() if t.day is not None and start <= t.day <= end]
        return sorted(rows, key=lambda t: t.date, reverse=True)
