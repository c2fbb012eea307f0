import customtkinter as ctk

from services.card_service import CardService
from services.recurring_service import RecurringService
from services.report_service import ReportService
from ui.components.confirm_dialog import confirm
from ui.components.fixed_expense_form import FixedExpenseForm
from utils.constants import COLOR_EXPENSE, COLOR_INCOME, COLOR_INFO, RECURRENCE_LABELS
from utils.currency import format_currency
from utils.date_helpers import format_display_date, today


class FixedExpensesTab(ctk.CTkFrame):
    def __init__(
        self,
        master,
        recurring_service: RecurringService,
        report_service: ReportService,
        card_service: CardService,
        notify_refresh,
        date_format: str = "DD/MM/YYYY",
        currency: str = "R$",
        **kwargs,
    ):
        super().__init__(master, fg_color="transparent", **kwargs)
        self._svc = recurring_service
        self._report_svc = report_service
        self._card_svc = card_service
        self._notify_refresh = notify_refresh
        self._date_format = date_format
        self._currency = currency
        self._offset = 0
        self._period_var = ctk.StringVar()
        self._totals_var = ctk.StringVar()

        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(2, weight=1)

        self._build_toolbar()
        self._cards_frame = ctk.CTkFrame(self, fg_color="transparent")
        self._cards_frame.grid(row=1, column=0, sticky="ew", padx=8, pady=(6, 0))
        self._scroll = ctk.CTkScrollableFrame(self)
        self._scroll.grid(row=2, column=0, sticky="nsew", padx=8, pady=8)
        self._scroll.grid_columnconfigure(0, weight=1)
        self._load()

    def refresh(self):
        self._load()

    def _build_toolbar(self):
        bar = ctk.CTkFrame(self, fg_color=("gray88", "gray18"), corner_radius=8)
        bar.grid(row=0, column=0, sticky="ew", padx=8, pady=(8, 0))
        ctk.CTkButton(bar, text="◀", width=28, command=lambda: self._shift(-1)).pack(side="left", padx=(12, 0))
        ctk.CTkLabel(
            bar, textvariable=self._period_var, width=170,
            font=ctk.CTkFont(size=14, weight="bold"),
        ).pack(side="left", padx=8, pady=8)
        ctk.CTkButton(bar, text="▶", width=28, command=lambda: self._shift(1)).pack(side="left")
        ctk.CTkLabel(bar, textvariable=self._totals_var, text_color="gray60").pack(side="left", padx=16)
        ctk.CTkButton(bar, text="+ Add Fixed Item", command=self._open_add).pack(
            side="right", padx=8, pady=6
        )

    def _shift(self, n: int):
        self._offset += n
        self._load()

    def _load(self):
        period = self._report_svc.get_period(today(), self._offset)
        self._period_var.set(period.label)
        totals = self._svc.get_totals(period)
        self._totals_var.set(
            f"Expenses {format_currency(totals['expense'], self._currency)}  ·  "
            f"Paid {format_currency(totals['paid'], self._currency)}  ·  "
            f"Fixed income {format_currency(totals['income'], self._currency)}"
        )
        self._render_cards(period)

        for w in self._scroll.winfo_children():
            w.destroy()
        occurrences = self._svc.get_for_period(period)
        if not occurrences:
            ctk.CTkLabel(
                self._scroll,
                text="Nothing due in this cycle. Click '+ Add Fixed Item' to create one.",
                text_color="gray60",
            ).grid(row=0, column=0, pady=40)
            return
        for idx, occ in enumerate(occurrences):
            self._add_row(idx, occ)

    def _render_cards(self, period):
        for w in self._cards_frame.winfo_children():
            w.destroy()
        for col, row in enumerate(self._report_svc.get_card_breakdown(period)):
            card = row["card"]
            text = f"{card.name}: {format_currency(row['total'], self._currency)}"
            if row["usage"] is not None:
                text += f" ({row['usage']:.0%} of limit)"
            ctk.CTkLabel(
                self._cards_frame, text=text, fg_color=card.color, text_color="white",
                corner_radius=6, padx=8,
            ).grid(row=0, column=col, padx=4, pady=2)

    def _add_row(self, idx, occ):
        bg = ("gray92", "gray17") if idx % 2 == 0 else ("gray88", "gray21")
        row = ctk.CTkFrame(self._scroll, fg_color=bg, corner_radius=4)
        row.grid(row=idx, column=0, sticky="ew", pady=1, padx=2)
        row.grid_columnconfigure(1, weight=1)

        title = occ.title
        if occ.installment_label:
            title += f"  ({occ.installment_label})"
        recurrence = RECURRENCE_LABELS.get(occ.obligation.recurrence, occ.obligation.recurrence)
        color = COLOR_INCOME if occ.type == "income" else COLOR_EXPENSE

        ctk.CTkLabel(
            row, text=format_display_date(occ.occurrence_date.isoformat(), self._date_format),
            width=90, anchor="w",
        ).grid(row=0, column=0, padx=6, pady=4)
        ctk.CTkLabel(row, text=f"{title}  ·  {occ.category}  ·  {recurrence}", anchor="w").grid(
            row=0, column=1, padx=4, sticky="ew"
        )
        ctk.CTkLabel(
            row, text=format_currency(occ.amount, self._currency), text_color=color, width=100, anchor="e",
        ).grid(row=0, column=2, padx=4)

        acts = ctk.CTkFrame(row, fg_color="transparent")
        acts.grid(row=0, column=3, padx=(4, 6))
        ctk.CTkButton(
            acts, text="Paid ✓" if occ.is_paid else "Mark paid", width=80, height=24,
            fg_color=COLOR_INCOME if occ.is_paid else COLOR_INFO,
            command=lambda o=occ: self._toggle_paid(o),
        ).pack(side="left", padx=2)
        ctk.CTkButton(
            acts, text="Skip", width=44, height=24,
            fg_color="transparent", border_width=1, text_color=("gray10", "gray90"),
            command=lambda o=occ: self._skip(o),
        ).pack(side="left", padx=2)
        ctk.CTkButton(
            acts, text="Edit", width=44, height=24,
            command=lambda o=occ: self._open_edit(o.obligation),
        ).pack(side="left", padx=2)
        ctk.CTkButton(
            acts, text="Delete", width=52, height=24,
            fg_color="#F44336", hover_color="#D32F2F",
            command=lambda o=occ: self._delete(o.obligation),
        ).pack(side="left", padx=2)

    def _open_add(self):
        self._open_form(None)

    def _open_edit(self, expense):
        self._open_form(expense)

    def _open_form(self, expense):
        form = FixedExpenseForm(
            self.winfo_toplevel(), self._svc, self._card_svc.get_all(),
            expense=expense, date_format=self._date_format,
        )
        self.wait_window(form)
        if form.saved:
            self._notify_refresh("recurring")

    def _toggle_paid(self, occ):
        self._svc.toggle_paid(occ.id, occ.occurrence_date)
        self._notify_refresh("recurring")

    def _skip(self, occ):
        if confirm(
            self.winfo_toplevel(), "Skip Occurrence",
            f"Skip '{occ.title}' on this date? The other months are kept.",
            confirm_text="Skip",
        ):
            self._svc.skip_occurrence(occ.id, occ.occurrence_date)
            self._notify_refresh("recurring")

    def _delete(self, expense):
        if confirm(
            self.winfo_toplevel(), "Delete Fixed Item",
            f"Delete '{expense.title}' and all of its occurrences?",
            confirm_text="Delete",
        ):
            self._svc.delete(expense.id)
            self._notify_refresh("recurring")
