import customtkinter as ctk

from database.db_manager import DatabaseManager
from services.card_service import CardService
from services.data_service import DataService
from services.goal_service import GoalService
from services.recurring_service import RecurringService
from services.report_service import ReportService
from services.savings_service import SavingsService
from services.transaction_service import TransactionService
from ui.tabs.dashboard_tab import DashboardTab
from ui.tabs.fixed_expenses_tab import FixedExpensesTab
from ui.tabs.goals_tab import GoalsTab
from ui.tabs.savings_tab import SavingsTab
from ui.tabs.settings_tab import SettingsTab
from utils.constants import APP_NAME, APP_WIDTH, APP_HEIGHT


# Tabs to redraw after each kind of change
_REFRESH_SCOPES: dict[str, set[str]] = {
    "transaction": {"dashboard", "goals"},
    "recurring":   {"dashboard", "goals", "fixed"},
    "goals":       {"goals"},
    "card":        {"fixed", "settings"},
    "full":        {"dashboard", "goals", "fixed", "savings", "settings"},
}


class AppWindow(ctk.CTk):
    def __init__(
        self,
        tx_service: TransactionService,
        recurring_service: RecurringService,
        report_service: ReportService,
        goal_service: GoalService,
        savings_service: SavingsService,
        card_service: CardService,
        data_service: DataService,
        db: DatabaseManager,
        date_format: str = "DD/MM/YYYY",
        currency: str = "R$",
        **kwargs,
    ):
        super().__init__(**kwargs)
        self._tx_svc = tx_service
        self._recurring_svc = recurring_service
        self._report_svc = report_service
        self._goal_svc = goal_service
        self._savings_svc = savings_service
        self._card_svc = card_service
        self._data_svc = data_service
        self._db = db
        self._date_format = date_format
        self._currency = currency

        self.title(APP_NAME)
        self.minsize(APP_WIDTH, APP_HEIGHT)
        self.geometry(f"{APP_WIDTH}x{APP_HEIGHT}")

        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(0, weight=1)
        self._build_tabs()

    def _build_tabs(self):
        self._tabview = ctk.CTkTabview(self)
        self._tabview.grid(row=0, column=0, sticky="nsew", padx=8, pady=8)

        for tab_name in ("Dashboard", "Goals", "Fixed Expenses", "Savings", "Settings"):
            self._tabview.add(tab_name)
            self._tabview.tab(tab_name).grid_columnconfigure(0, weight=1)
            self._tabview.tab(tab_name).grid_rowconfigure(0, weight=1)

        self._tabs = {
            "dashboard": DashboardTab(
                self._tabview.tab("Dashboard"),
                report_service=self._report_svc,
                tx_service=self._tx_svc,
                notify_refresh=self.notify_tabs_refresh,
                date_format=self._date_format,
                currency=self._currency,
            ),
            "goals": GoalsTab(
                self._tabview.tab("Goals"),
                goal_service=self._goal_svc,
                notify_refresh=self.notify_tabs_refresh,
                currency=self._currency,
            ),
            "fixed": FixedExpensesTab(
                self._tabview.tab("Fixed Expenses"),
                recurring_service=self._recurring_svc,
                report_service=self._report_svc,
                card_service=self._card_svc,
                notify_refresh=self.notify_tabs_refresh,
                date_format=self._date_format,
                currency=self._currency,
            ),
            "savings": SavingsTab(
                self._tabview.tab("Savings"),
                savings_service=self._savings_svc,
                date_format=self._date_format,
                currency=self._currency,
            ),
            "settings": SettingsTab(
                self._tabview.tab("Settings"),
                db=self._db,
                goal_service=self._goal_svc,
                card_service=self._card_svc,
                data_service=self._data_svc,
                notify_refresh=self.notify_tabs_refresh,
            ),
        }
        for tab in self._tabs.values():
            tab.grid(row=0, column=0, sticky="nsew")

    # ── Refresh ──────────────────────────────────────────────────────────────
    def notify_tabs_refresh(self, scope: str = "full"):
        for name in _REFRESH_SCOPES.get(scope, _REFRESH_SCOPES["full"]):
            self._tabs[name].refresh()
