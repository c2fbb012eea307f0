import calendar
from datetime import date

import customtkinter as ctk

from services.savings_service import SavingsService
from utils.constants import COLOR_EXPENSE, COLOR_INCOME, COLOR_INFO, COLOR_SAVINGS
from utils.currency import format_currency, parse_amount
from utils.date_helpers import (
    add_months, format_date, format_display_date, friendly_month, parse_display_date, today,
)

_WEEKDAYS = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]


class SavingsTab(ctk.CTkFrame):
    """Yearly reserve: tick the days the daily saving target was set aside."""

    def __init__(
        self,
        master,
        savings_service: SavingsService,
        date_format: str = "DD/MM/YYYY",
        currency: str = "R$",
        **kwargs,
    ):
        super().__init__(master, fg_color="transparent", **kwargs)
        self._svc = savings_service
        self._date_format = date_format
        self._currency = currency
        self._month = today().replace(day=1)
        self._target_var = ctk.StringVar()
        self._status_var = ctk.StringVar()

        self.grid_columnconfigure(0, weight=1)
        self.grid_columnconfigure(1, weight=1)
        self.grid_rowconfigure(2, weight=1)

        self._build_target_bar()
        self._stats = ctk.CTkFrame(self, fg_color="transparent")
        self._stats.grid(row=1, column=0, columnspan=2, sticky="ew", padx=16, pady=12)
        self._stats.grid_columnconfigure((0, 1, 2, 3), weight=1)
        self._calendar = ctk.CTkFrame(self, fg_color=("gray90", "gray20"), corner_radius=10)
        self._calendar.grid(row=2, column=0, sticky="nsew", padx=(16, 8), pady=(0, 12))
        self._moves = ctk.CTkScrollableFrame(self, label_text="Adjustments & Withdrawals")
        self._moves.grid(row=2, column=1, sticky="nsew", padx=(8, 16), pady=(0, 12))
        self._load()

    def refresh(self):
        self._load()

    def _build_target_bar(self):
        bar = ctk.CTkFrame(self, fg_color=("gray88", "gray18"), corner_radius=8)
        bar.grid(row=0, column=0, columnspan=2, sticky="ew", padx=8, pady=(8, 0))
        ctk.CTkLabel(bar, text="Daily saving target:").pack(side="left", padx=(12, 4), pady=8)
        ctk.CTkEntry(bar, textvariable=self._target_var, width=90).pack(side="left")
        ctk.CTkButton(bar, text="Save", width=60, command=self._save_target).pack(side="left", padx=8)
        ctk.CTkLabel(bar, textvariable=self._status_var, text_color=COLOR_EXPENSE).pack(side="left")

    def _save_target(self):
        amount = parse_amount(self._target_var.get())
        if amount is None:
            self._status_var.set("Invalid amount.")
            return
        try:
            self._svc.set_daily_target(amount)
        except ValueError as e:
            self._status_var.set(str(e))
            return
        self._status_var.set("")
        self._load()

    def _load(self):
        settings = self._svc.get_settings()
        projection = self._svc.get_projection(today())
        self._target_var.set(f"{settings.daily_saving_target:.2f}")

        for w in self._stats.winfo_children():
            w.destroy()
        stats = [
            ("Reserve", format_currency(projection.reserve_balance, self._currency), COLOR_SAVINGS),
            ("Projected Dec 31", format_currency(projection.projected_year_end, self._currency), COLOR_INFO),
            ("Days saved", str(projection.days_marked), COLOR_INCOME),
            ("Days left in year", str(projection.remaining_days), "gray60"),
        ]
        for col, (label, value, color) in enumerate(stats):
            card = ctk.CTkFrame(self._stats, fg_color=("gray90", "gray20"), corner_radius=10)
            card.grid(row=0, column=col, padx=6, sticky="ew")
            ctk.CTkLabel(card, text=label, text_color="gray60").pack(pady=(10, 0))
            ctk.CTkLabel(
                card, text=value, text_color=color, font=ctk.CTkFont(size=18, weight="bold"),
            ).pack(pady=(2, 10))

        self._render_calendar(settings)
        self._render_moves(settings)

    # ── Month calendar ───────────────────────────────────────────────────────

    def _render_calendar(self, settings):
        for w in self._calendar.winfo_children():
            w.destroy()
        nav = ctk.CTkFrame(self._calendar, fg_color="transparent")
        nav.grid(row=0, column=0, columnspan=7, pady=(8, 4))
        ctk.CTkButton(nav, text="◀", width=28, command=lambda: self._shift_month(-1)).pack(side="left")
        ctk.CTkLabel(
            nav, text=friendly_month(self._month), width=150, font=ctk.CTkFont(weight="bold"),
        ).pack(side="left", padx=8)
        ctk.CTkButton(nav, text="▶", width=28, command=lambda: self._shift_month(1)).pack(side="left")

        for col, name in enumerate(_WEEKDAYS):
            ctk.CTkLabel(self._calendar, text=name, text_color="gray60", width=40).grid(row=1, column=col)

        weeks = calendar.Calendar(firstweekday=0).monthdatescalendar(self._month.year, self._month.month)
        for r, week in enumerate(weeks, start=2):
            for col, d in enumerate(week):
                if d.month != self._month.month:
                    continue
                key = format_date(d)
                marked = key in settings.savings_dates
                extra = key in settings.savings_adjustments or key in settings.savings_withdrawals
                ctk.CTkButton(
                    self._calendar, text=f"{d.day}{'*' if extra else ''}", width=40, height=32,
                    fg_color=COLOR_SAVINGS if marked else ("gray75", "gray30"),
                    text_color=("gray10", "gray90"),
                    command=lambda day=d: self._toggle(day),
                ).grid(row=r, column=col, padx=2, pady=2)

        actions = ctk.CTkFrame(self._calendar, fg_color="transparent")
        actions.grid(row=len(weeks) + 2, column=0, columnspan=7, pady=8)
        ctk.CTkButton(actions, text="+ Adjustment", width=110, command=self._add_adjustment).pack(side="left", padx=4)
        ctk.CTkButton(
            actions, text="- Withdrawal", width=110, fg_color=COLOR_EXPENSE, hover_color="#D32F2F",
            command=self._add_withdrawal,
        ).pack(side="left", padx=4)

    def _shift_month(self, n: int):
        self._month = add_months(self._month, n)
        self._load()

    def _toggle(self, d: date):
        self._svc.toggle_date(d)
        self._load()

    # ── Adjustments / withdrawals ────────────────────────────────────────────

    def _ask(self, title: str) -> tuple[date, float] | None:
        day = ctk.CTkInputDialog(
            title=title, text=f"Date ({self._date_format}), blank for today:",
        ).get_input()
        if day is None:
            return None
        d = parse_display_date(day, self._date_format) if day.strip() else today()
        if d is None:
            self._status_var.set("Invalid date.")
            return None
        raw = ctk.CTkInputDialog(title=title, text="Amount (0 removes the entry):").get_input()
        amount = parse_amount(raw) if raw is not None else None
        if amount is None:
            if raw is not None:
                self._status_var.set("Invalid amount.")
            return None
        return d, amount

    def _add_adjustment(self):
        result = self._ask("Adjustment")
        if result:
            self._apply(self._svc.set_adjustment, *result)

    def _add_withdrawal(self):
        result = self._ask("Withdrawal")
        if result:
            self._apply(self._svc.set_withdrawal, *result)

    def _apply(self, setter, d, amount):
        try:
            setter(d, amount)
        except ValueError as e:
            self._status_var.set(str(e))
            return
        self._status_var.set("")
        self._load()

    def _render_moves(self, settings):
        for w in self._moves.winfo_children():
            w.destroy()
        rows = [(k, v, "+", COLOR_INCOME) for k, v in settings.savings_adjustments.items()]
        rows += [(k, v, "-", COLOR_EXPENSE) for k, v in settings.savings_withdrawals.items()]
        if not rows:
            ctk.CTkLabel(self._moves, text="None yet.", text_color="gray60").pack(pady=20)
            return
        for key, amount, sign, color in sorted(rows, reverse=True):
            f = ctk.CTkFrame(self._moves, fg_color="transparent")
            f.pack(fill="x", pady=1)
            ctk.CTkLabel(f, text=format_display_date(key, self._date_format), anchor="w").pack(side="left", padx=4)
            ctk.CTkLabel(
                f, text=f"{sign}{format_currency(amount, self._currency)}", text_color=color,
            ).pack(side="right", padx=4)
