import customtkinter as ctk
from tkinter import messagebox

from models.summary import GoalState
from services.goal_service import GoalService
from utils.billing_period import cycle_length
from utils.constants import COLOR_EXPENSE, COLOR_INCOME, COLOR_INFO
from utils.currency import format_currency
from utils.date_helpers import format_date, friendly_month, today

_WEEKDAYS = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]

_STATE_MESSAGES = {
    GoalState.WORKED_TODAY_HIT_GOAL: (
        "You hit today's target. Your daily target from tomorrow gets lower.", COLOR_INCOME,
    ),
    GoalState.WORKED_TODAY_MISSED_GOAL: (
        "You missed today's target. Tomorrow's target will be a little higher.", COLOR_EXPENSE,
    ),
}


class GoalsTab(ctk.CTkFrame):
    def __init__(
        self,
        master,
        goal_service: GoalService,
        notify_refresh,
        currency: str = "R$",
        **kwargs,
    ):
        super().__init__(master, fg_color="transparent", **kwargs)
        self._goal_svc = goal_service
        self._notify_refresh = notify_refresh
        self._currency = currency
        self._offset = 0
        self._title_var = ctk.StringVar()
        self._period_var = ctk.StringVar()

        self.grid_columnconfigure(0, weight=1)
        self.grid_columnconfigure(1, weight=1)
        self.grid_rowconfigure(1, weight=1)

        self._build_toolbar()
        self._summary = ctk.CTkFrame(self, fg_color="transparent")
        self._summary.grid(row=1, column=0, sticky="nsew", padx=(16, 8), pady=12)
        self._summary.grid_columnconfigure(0, weight=1)
        self._calendar = ctk.CTkFrame(self, fg_color=("gray90", "gray20"), corner_radius=10)
        self._calendar.grid(row=1, column=1, sticky="nsew", padx=(8, 16), pady=12)
        self._load()

    def refresh(self):
        self._load()

    def _build_toolbar(self):
        nav = ctk.CTkFrame(self, fg_color="transparent")
        nav.grid(row=0, column=0, columnspan=2, sticky="ew", padx=16, pady=(12, 0))
        ctk.CTkButton(nav, text="◀", width=28, command=lambda: self._shift(-1)).pack(side="left")
        label_box = ctk.CTkFrame(nav, fg_color="transparent")
        label_box.pack(side="left", padx=8)
        ctk.CTkLabel(
            label_box, textvariable=self._title_var, font=ctk.CTkFont(size=15, weight="bold"),
        ).pack()
        ctk.CTkLabel(label_box, textvariable=self._period_var, text_color="gray60").pack()
        ctk.CTkButton(nav, text="▶", width=28, command=lambda: self._shift(1)).pack(side="left")

    def _shift(self, n: int):
        self._offset += n
        self._load()

    def _load(self):
        ref = today()
        period = self._goal_svc.period_for(ref, self._offset)
        goal = self._goal_svc.get_goal(ref, period.start)
        self._title_var.set(friendly_month(period.start + (period.end - period.start) / 2))
        self._period_var.set(period.label)
        self._render_summary(goal)
        self._render_calendar(goal, ref)

    def _render_summary(self, goal):
        for w in self._summary.winfo_children():
            w.destroy()

        self._stat(0, "Cycle goal (fixed expenses - fixed income)", goal.cycle_goal, COLOR_INFO)
        self._stat(1, "Net earned this cycle", goal.net_earned, COLOR_INCOME)
        self._stat(2, "Still to earn", goal.remaining, COLOR_EXPENSE if goal.remaining else COLOR_INCOME)

        bar = ctk.CTkProgressBar(self._summary, progress_color=COLOR_INCOME)
        bar.grid(row=3, column=0, sticky="ew", padx=8, pady=(4, 12))
        bar.set(goal.progress)

        card = ctk.CTkFrame(self._summary, corner_radius=10)
        card.grid(row=4, column=0, sticky="ew", padx=4, pady=4)
        card.grid_columnconfigure(0, weight=1)
        ctk.CTkLabel(card, text="Daily target", text_color="gray60").grid(row=0, column=0, pady=(12, 0))
        ctk.CTkLabel(
            card, text=format_currency(goal.target, self._currency),
            font=ctk.CTkFont(size=26, weight="bold"),
        ).grid(row=1, column=0)
        ctk.CTkLabel(card, text=goal.helper_text, text_color="gray60").grid(row=2, column=0, pady=(0, 8))

        message = _STATE_MESSAGES.get(goal.state)
        if message:
            text, color = message
            ctk.CTkLabel(card, text=text, text_color=color, wraplength=320).grid(row=3, column=0, pady=4)
            ctk.CTkLabel(
                card,
                text=(
                    f"Today's target: {format_currency(goal.start_of_day_target, self._currency)}   "
                    f"Earned today: {format_currency(goal.income_today, self._currency)}"
                ),
            ).grid(row=4, column=0, pady=(0, 12))

    def _stat(self, row, label, value, color):
        f = ctk.CTkFrame(self._summary, fg_color="transparent")
        f.grid(row=row, column=0, sticky="ew", padx=8, pady=2)
        ctk.CTkLabel(f, text=label, anchor="w").pack(side="left")
        ctk.CTkLabel(
            f, text=format_currency(value, self._currency), text_color=color,
            font=ctk.CTkFont(weight="bold"),
        ).pack(side="right")

    def _render_calendar(self, goal, ref):
        for w in self._calendar.winfo_children():
            w.destroy()
        ctk.CTkLabel(
            self._calendar,
            text=f"Days off ({goal.total_work_days} work days out of {cycle_length(goal.period)})",
            font=ctk.CTkFont(size=13, weight="bold"),
        ).grid(row=0, column=0, columnspan=7, pady=(10, 4))
        for col, name in enumerate(_WEEKDAYS):
            ctk.CTkLabel(self._calendar, text=name, text_color="gray60", width=40).grid(row=1, column=col)

        days_off = self._goal_svc.get_settings().days_off
        row = 2
        for d in goal.period.days():
            col = d.weekday()
            if col == 0 and d != goal.period.start:
                row += 1
            is_off = format_date(d) in days_off
            locked = goal.view == "current" and d < ref
            ctk.CTkButton(
                self._calendar, text=str(d.day), width=40, height=32,
                fg_color="gray50" if is_off else COLOR_INFO,
                border_width=2 if d == ref else 0, border_color=COLOR_INCOME,
                state="disabled" if locked else "normal",
                command=lambda day=d: self._toggle(day, ref),
            ).grid(row=row, column=col, padx=2, pady=2)

    def _toggle(self, d, ref):
        try:
            self._goal_svc.toggle_day_off(d, ref)
        except ValueError as e:
            messagebox.showerror("Days Off", str(e))
            return
        self._notify_refresh("goals")
