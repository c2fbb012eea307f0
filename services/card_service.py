import logging
import uuid
from dataclasses import replace

from database.credit_card_dao import CreditCardDAO
from database.fixed_expense_dao import FixedExpenseDAO
from models.credit_card import CreditCard

logger = logging.getLogger(__name__)


class CardService:
    def __init__(self, card_dao: CreditCardDAO, fixed_expense_dao: FixedExpenseDAO):
        self._dao = card_dao
        self._fixed_dao = fixed_expense_dao

    def get_all(self) -> list[CreditCard]:
        return self._dao.get_all()

    def get_by_id(self, card_id: str) -> CreditCard | None:
        return self._dao.get_by_id(card_id)

    def create(self, name: str, color: str = "#3b82f6", limit: float = 0.0) -> CreditCard:
        name = name.strip()
        self._validate(name, limit)
        if self._dao.get_by_name(name):
            raise ValueError(f"A card named '{name}' already exists.")
        return self._dao.create(CreditCard(
            id=str(uuid.uuid4()), name=name, color=color, limit=float(limit or 0),
        ))

    def update(self, card_id: str, name: str, color: str, limit: float = 0.0) -> CreditCard:
        name = name.strip()
        self._validate(name, limit)
        current = self._dao.get_by_id(card_id)
        if current is None:
            raise ValueError("Card not found.")
        existing = self._dao.get_by_name(name)
        if existing and existing.id != card_id:
            raise ValueError(f"A card named '{name}' already exists.")
        return self._dao.update(replace(current, name=name, color=color, limit=float(limit or 0)))

    def delete(self, card_id: str) -> int:
        """Remove the card; expenses charged to it stay, detached.

        Returns how many expenses were detached.
        """
        detached = self._fixed_dao.clear_card(card_id)
        self._dao.delete(card_id)
        logger.info({"event": "delete_card", "card_id": card_id, "detached": detached})
        return detached

    @staticmethod
    def _validate(name: str, limit: float):
        if not name:
            raise ValueError("Card name cannot be empty.")
        if limit is not None and limit < 0:
            raise ValueError("Limit must be 0 (unlimited) or greater.")
