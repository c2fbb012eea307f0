import logging
import os
import sys
import customtkinter as ctk

# Ensure project root is on sys.path when run directly
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from database.db_manager import DatabaseManager
from database.credit_card_dao import CreditCardDAO
from database.fixed_expense_dao import FixedExpenseDAO
from database.goal_settings_dao import GoalSettingsDAO
from database.transaction_dao import TransactionDAO

from services.card_service import CardService
from services.data_service import DataService
from services.goal_service import GoalService
from services.recurring_service import RecurringService
from services.report_service import ReportService
from services.savings_service import SavingsService
from services.transaction_service import TransactionService

from ui.app_window import AppWindow
from utils.app_config import get_db_folder, get_log_level

logger = logging.getLogger(__name__)


def main():
    # ── Bootstrap: logging and DB folder from pre-DB config ──────────────────
    logging.basicConfig(
        level=get_log_level(),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    db_folder = get_db_folder()

    # ── Database ─────────────────────────────────────────────────────────────
    db = DatabaseManager.open(db_folder=db_folder)

    # ── DAOs ─────────────────────────────────────────────────────────────────
    tx_dao = TransactionDAO(db)
    fixed_dao = FixedExpenseDAO(db)
    card_dao = CreditCardDAO(db)
    settings_dao = GoalSettingsDAO(db)

    # ── Services ─────────────────────────────────────────────────────────────
    tx_svc = TransactionService(tx_dao)
    recurring_svc = RecurringService(fixed_dao, settings_dao)
    report_svc = ReportService(tx_dao, fixed_dao, card_dao, settings_dao)
    goal_svc = GoalService(settings_dao, tx_dao, fixed_dao)
    savings_svc = SavingsService(settings_dao)
    card_svc = CardService(card_dao, fixed_dao)
    data_svc = DataService(db, tx_dao, fixed_dao, card_dao, settings_dao)

    # ── Appearance ───────────────────────────────────────────────────────────
    appearance = db.get_setting("appearance_mode", "system")
    ctk.set_appearance_mode(appearance)
    ctk.set_default_color_theme("blue")

    # ── Launch UI ────────────────────────────────────────────────────────────
    app = AppWindow(
        tx_service=tx_svc,
        recurring_service=recurring_svc,
        report_service=report_svc,
        goal_service=goal_svc,
        savings_service=savings_svc,
        card_service=card_svc,
        data_service=data_svc,
        db=db,
        date_format=db.get_setting("date_format", "DD/MM/YYYY"),
        currency=db.get_setting("currency_symbol", "R$"),
    )

    def on_close():
        db.close()
        app.destroy()

    app.protocol("WM_DELETE_WINDOW", on_close)
    logger.info({"event": "startup", "db": db.db_path})
    app.mainloop()


if __name__ == "__main__":
    main()
