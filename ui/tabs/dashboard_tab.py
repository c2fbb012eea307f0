import customtkinter as ctk
from matplotlib.backends.backend_tkagg import FigureCanvasTkAgg
from matplotlib.figure import Figure

from services.report_service import ReportService
from services.transaction_service import TransactionService
from ui.components.transaction_form import TransactionForm
from utils.constants import COLOR_EXPENSE, COLOR_INCOME, COLOR_INFO, COLOR_WARNING
from utils.currency import format_currency, format_signed
from utils.date_helpers import format_display_date, short_date, today


class DashboardTab(ctk.CTkFrame):
    def __init__(
        self,
        master,
        report_service: ReportService,
        tx_service: TransactionService,
        notify_refresh,
        date_format: str = "DD/MM/YYYY",
        currency: str = "R$",
        **kwargs,
    ):
        super().__init__(master, fg_color="transparent", **kwargs)
        self._report_svc = report_service
        self._tx_svc = tx_service
        self._notify_refresh = notify_refresh
        self._date_format = date_format
        self._currency = currency
        self._offset = 0
        self._period_var = ctk.StringVar()

        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(2, weight=1)

        self._build_toolbar()
        self._build_summary_cards()
        self._build_bottom_section()
        self._load()

    def refresh(self):
        self._load()

    # ── Layout ───────────────────────────────────────────────────────────────

    def _build_toolbar(self):
        nav = ctk.CTkFrame(self, fg_color="transparent")
        nav.grid(row=0, column=0, sticky="ew", padx=16, pady=(12, 0))
        ctk.CTkButton(nav, text="◀", width=28, command=lambda: self._shift(-1)).pack(side="left")
        ctk.CTkLabel(
            nav, textvariable=self._period_var,
            font=ctk.CTkFont(size=15, weight="bold"), width=170, anchor="center",
        ).pack(side="left", padx=8)
        ctk.CTkButton(nav, text="▶", width=28, command=lambda: self._shift(1)).pack(side="left")
        ctk.CTkButton(
            nav, text="Today", width=60,
            fg_color="transparent", border_width=1, text_color=("gray10", "gray90"),
            command=lambda: self._shift(-self._offset),
        ).pack(side="left", padx=8)

        ctk.CTkButton(
            nav, text="+ Expense", width=100, fg_color=COLOR_EXPENSE, hover_color="#D32F2F",
            command=lambda: self._open_form("expense"),
        ).pack(side="right")
        ctk.CTkButton(
            nav, text="+ Income", width=100, fg_color=COLOR_INCOME, hover_color="#388E3C",
            command=lambda: self._open_form("income"),
        ).pack(side="right", padx=8)

    def _build_summary_cards(self):
        self._card_frame = ctk.CTkFrame(self, fg_color="transparent")
        self._card_frame.grid(row=1, column=0, sticky="ew", padx=16, pady=12)
        self._card_frame.grid_columnconfigure((0, 1, 2, 3, 4), weight=1)

    def _build_bottom_section(self):
        bottom = ctk.CTkFrame(self, fg_color="transparent")
        bottom.grid(row=2, column=0, sticky="nsew", padx=16, pady=(0, 12))
        bottom.grid_columnconfigure(0, weight=1)
        bottom.grid_columnconfigure(1, weight=1)
        bottom.grid_rowconfigure(0, weight=1)

        self._tx_frame = ctk.CTkScrollableFrame(bottom, label_text="Transactions", height=260)
        self._tx_frame.grid(row=0, column=0, sticky="nsew", padx=(0, 8))

        chart = ctk.CTkFrame(bottom, fg_color=("gray90", "gray20"), corner_radius=8)
        chart.grid(row=0, column=1, sticky="nsew", padx=(8, 0))
        ctk.CTkLabel(
            chart, text="Income This Week", font=ctk.CTkFont(size=13, weight="bold"),
        ).pack(pady=(10, 0))
        self._fig = Figure(figsize=(4, 3), dpi=80, tight_layout=True)
        self._ax = self._fig.add_subplot(111)
        self._canvas = FigureCanvasTkAgg(self._fig, master=chart)
        self._canvas.get_tk_widget().pack(fill="both", expand=True, padx=8, pady=(4, 10))

    # ── Actions ──────────────────────────────────────────────────────────────

    def _shift(self, n: int):
        self._offset += n
        self._load()

    def _open_form(self, type_: str, transaction=None):
        form = TransactionForm(
            self.winfo_toplevel(), self._tx_svc,
            initial_type=type_, transaction=transaction, date_format=self._date_format,
        )
        self.wait_window(form)
        if form.saved:
            self._notify_refresh("transaction")

    # ── Rendering ────────────────────────────────────────────────────────────

    def _load(self):
        ref = today()
        period = self._report_svc.get_period(ref, self._offset)
        data = self._report_svc.get_dashboard(ref, period)
        summary = data["summary"]
        self._period_var.set(period.label)

        for w in self._card_frame.winfo_children():
            w.destroy()
        cards = [
            ("Today", data["today_income"], COLOR_INCOME),
            ("This Week", data["week_balance"], COLOR_INFO if data["week_balance"] >= 0 else COLOR_WARNING),
            ("Cycle Balance", summary.balance, COLOR_INFO if summary.balance >= 0 else COLOR_EXPENSE),
            ("Gross Income", summary.gross_income, COLOR_INCOME),
            ("Fuel", data["fuel"], COLOR_WARNING),
        ]
        for i, (label, value, color) in enumerate(cards):
            self._make_card(self._card_frame, i, label, value, color)

        self._render_transactions(data["groups"])
        self._render_chart(data["weekly_income"])

    def _render_transactions(self, groups):
        for w in self._tx_frame.winfo_children():
            w.destroy()
        if not groups:
            ctk.CTkLabel(
                self._tx_frame, text="No transactions in this cycle.", text_color="gray60",
            ).pack(pady=20)
            return

        for day, transactions in groups:
            net = sum(t.amount if t.is_income else -t.amount for t in transactions)
            header = ctk.CTkFrame(self._tx_frame, fg_color="transparent")
            header.pack(fill="x", pady=(8, 2))
            ctk.CTkLabel(
                header, text=format_display_date(day.isoformat(), self._date_format),
                font=ctk.CTkFont(size=12, weight="bold"), anchor="w",
            ).pack(side="left", padx=4)
            ctk.CTkLabel(
                header, text=format_signed(net, self._currency), text_color="gray60", anchor="e",
            ).pack(side="right", padx=4)

            for idx, tx in enumerate(transactions):
                bg = ("gray90", "gray20") if idx % 2 == 0 else ("gray86", "gray24")
                row = ctk.CTkFrame(self._tx_frame, fg_color=bg, corner_radius=4)
                row.pack(fill="x", pady=1)
                row.grid_columnconfigure(0, weight=1)
                color = COLOR_INCOME if tx.is_income else COLOR_EXPENSE
                sign = "+" if tx.is_income else "-"
                ctk.CTkLabel(row, text=tx.description, anchor="w").grid(
                    row=0, column=0, padx=6, pady=3, sticky="ew"
                )
                ctk.CTkLabel(
                    row, text=f"{sign}{format_currency(tx.amount, self._currency)}",
                    text_color=color, anchor="e", width=110,
                ).grid(row=0, column=1, padx=6)
                for widget in (row, *row.winfo_children()):
                    widget.bind("<Double-Button-1>", lambda e, t=tx: self._open_form(t.type, t))

    def _render_chart(self, series):
        is_dark = ctk.get_appearance_mode() == "Dark"
        bg = "#2b2b2b" if is_dark else "#e4e4e4"
        fg = "#aaaaaa" if is_dark else "#444444"

        self._ax.clear()
        self._fig.patch.set_facecolor(bg)
        self._ax.set_facecolor(bg)
        labels = [short_date(d) for d, _ in series]
        values = [v for _, v in series]
        self._ax.bar(labels, values, color=COLOR_INCOME)
        self._ax.tick_params(colors=fg, labelsize=8)
        for spine in self._ax.spines.values():
            spine.set_edgecolor(fg)
        self._canvas.draw()

    def _make_card(self, parent, col, label, value, color):
        card = ctk.CTkFrame(parent, fg_color=("gray90", "gray20"), corner_radius=10)
        card.grid(row=0, column=col, padx=6, sticky="ew")
        card.grid_columnconfigure(0, weight=1)
        ctk.CTkLabel(
            card, text=label, font=ctk.CTkFont(size=12), text_color="gray60",
        ).grid(row=0, column=0, pady=(12, 0), padx=16)
        ctk.CTkLabel(
            card, text=format_currency(value, self._currency),
            font=ctk.CTkFont(size=18, weight="bold"), text_color=color,
        ).grid(row=1, column=0, pady=(4, 12), padx=16)
