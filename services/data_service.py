"""Export and import all user data (transactions, fixed expenses, credit
cards, goal settings) as a single JSON document.
"""
import logging
from datetime import datetime

from database.collection_dao import ROW_ERRORS
from database.credit_card_dao import CreditCardDAO
from database.db_manager import DatabaseManager
from database.fixed_expense_dao import FixedExpenseDAO
from database.goal_settings_dao import GoalSettingsDAO
from database.transaction_dao import TransactionDAO
from models.credit_card import CreditCard
from models.fixed_expense import FixedExpense
from models.goal_settings import GoalSettings
from models.transaction import Transaction
from utils.constants import (
    DATASET_CREDIT_CARDS,
    DATASET_FIXED_EXPENSES,
    DATASET_GOAL_SETTINGS,
    DATASET_TRANSACTIONS,
)

logger = logging.getLogger(__name__)

EXPORT_VERSION = 1


class DataService:
    def __init__(
        self,
        db: DatabaseManager,
        tx_dao: TransactionDAO,
        fixed_expense_dao: FixedExpenseDAO,
        card_dao: CreditCardDAO,
        settings_dao: GoalSettingsDAO,
    ):
        self._db = db
        self._tx_dao = tx_dao
        self._fixed_dao = fixed_expense_dao
        self._card_dao = card_dao
        self._settings_dao = settings_dao

    # ── Export ────────────────────────────────────────────────────────────────

    def export_json(self) -> dict:
        """Return a full export dict (caller writes to disk)."""
        return {
            "export_version": EXPORT_VERSION,
            "exported_at": datetime.now().isoformat(timespec="seconds"),
            DATASET_TRANSACTIONS: [t.to_dict() for t in self._tx_dao.get_all()],
            DATASET_FIXED_EXPENSES: [e.to_dict() for e in self._fixed_dao.get_all()],
            DATASET_CREDIT_CARDS: [c.to_dict() for c in self._card_dao.get_all()],
            DATASET_GOAL_SETTINGS: self._settings_dao.get().to_dict(),
        }

    # ── Import ────────────────────────────────────────────────────────────────

    def import_json(self, data: dict, mode: str) -> dict:
        """Import from a previously exported JSON dict.

        mode: 'merge' keeps existing records and adds those with unseen ids;
        'replace' discards everything first.
        Returns stats dict with counts of imported records.
        """
        if mode not in ("merge", "replace"):
            raise ValueError(f"Invalid import mode: {mode}")
        if not isinstance(data, dict):
            raise ValueError("Backup file is not a JSON object.")

        transactions = self._parse(data.get(DATASET_TRANSACTIONS), Transaction.from_dict)
        expenses = self._parse(data.get(DATASET_FIXED_EXPENSES), FixedExpense.from_dict)
        cards = self._parse(data.get(DATASET_CREDIT_CARDS), CreditCard.from_dict)
        settings = self._parse_settings(data.get(DATASET_GOAL_SETTINGS)) if mode == "replace" else None

        # Nothing local is touched until the whole file has parsed
        if mode == "replace":
            self.clear_all()

        stats = {
            "transactions": self._merge(self._tx_dao, transactions),
            "fixed_expenses": self._merge(self._fixed_dao, expenses),
            "credit_cards": self._merge(self._card_dao, cards),
            "goal_settings": 0,
        }
        # Merge keeps the local goal configuration
        if settings is not None:
            self._settings_dao.save(settings)
            stats["goal_settings"] = 1
        detached = self._fixed_dao.clear_unknown_cards(c.id for c in self._card_dao.get_all())
        if detached:
            logger.warning({"event": "import_json", "status": "unknown_cards", "detached": detached})

        logger.info({"event": "import_json", "mode": mode, **stats})
        return stats

    def clear_all(self):
        self._db.delete_all_datasets()
        for dao in (self._tx_dao, self._fixed_dao, self._card_dao, self._settings_dao):
            dao.reload()
        logger.info({"event": "clear_all"})

    # ── Private helpers ───────────────────────────────────────────────────────

    @staticmethod
    def _parse(rows, from_dict) -> list:
        if not isinstance(rows, list):
            return []
        parsed = []
        for row in rows:
            try:
                parsed.append(from_dict(row))
            except ROW_ERRORS:
                logger.warning({"event": "import_json", "status": "skipped_row", "row": repr(row)[:80]})
        return parsed

    @staticmethod
    def _parse_settings(raw) -> GoalSettings | None:
        if raw is None:
            return None
        if not isinstance(raw, dict):
            raise ValueError("Backup goal settings are not a JSON object.")
        try:
            return GoalSettings.from_dict(raw)
        except ROW_ERRORS as e:
            raise ValueError(f"Backup goal settings are invalid: {e}") from e

    @staticmethod
    def _merge(dao, records: list) -> int:
        seen = {r.id for r in dao.get_all()}
        new = []
        for record in records:
            if record.id not in seen:
                seen.add(record.id)
                new.append(record)
        if new:
            dao.replace_all(dao.get_all() + new)
        return len(new)
