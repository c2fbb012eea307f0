from dataclasses import replace

from database.collection_dao import CollectionDAO
from models.fixed_expense import FixedExpense
from utils.constants import DATASET_FIXED_EXPENSES


class FixedExpenseDAO(CollectionDAO):
    dataset = DATASET_FIXED_EXPENSES
    model = FixedExpense

    def get_by_card(self, card_id: str) -> list[FixedExpense]:
        return [e for e in self._load() if e.card_id == card_id]

    def clear_card(self, card_id: str) -> int:
        """Detach every expense from the card. Returns how many were touched."""
        return self._detach(lambda e: e.card_id == card_id)

    def clear_unknown_cards(self, card_ids) -> int:
        """Detach expenses charged to a card id not in `card_ids`."""
        known = set(card_ids)
        return self._detach(lambda e: e.card_id is not None and e.card_id not in known)

    def _detach(self, matches) -> int:
        items = self._load()
        count = sum(1 for e in items if matches(e))
        if count:
            self._items = [replace(e, card_id=None) if matches(e) else e for e in items]
            self._save()
        return count
