import customtkinter as ctk

from models.credit_card import CreditCard
from models.fixed_expense import FixedExpense
from services.recurring_service import RecurringService
from ui.components.date_picker import DatePickerWidget
from ui.components.modal_form import ModalForm
from utils.constants import FIXED_CATEGORIES, RECURRENCE_LABELS
from utils.currency import parse_amount
from utils.date_helpers import today_str

_NO_CARD = "(none)"


class FixedExpenseForm(ModalForm):
    """Add or edit a fixed expense or fixed income template."""

    def __init__(
        self,
        master,
        recurring_service: RecurringService,
        cards: list[CreditCard],
        expense: FixedExpense | None = None,
        date_format: str = "DD/MM/YYYY",
        **kwargs,
    ):
        super().__init__(master, "Edit Fixed Item" if expense else "New Fixed Item", **kwargs)
        self._svc = recurring_service
        self._expense = expense
        self._cards = cards
        self._recurrence_by_label = {v: k for k, v in RECURRENCE_LABELS.items()}

        r = 0
        self._label("Type:", r)
        self._type_var = ctk.StringVar(value=expense.type if expense else "expense")
        type_frame = ctk.CTkFrame(self, fg_color="transparent")
        type_frame.grid(row=r, column=1, padx=(0, 16), pady=4, sticky="w")
        for t in ("expense", "income"):
            ctk.CTkRadioButton(
                type_frame, text=t.title(), variable=self._type_var, value=t,
                command=self._on_type_change,
            ).pack(side="left", padx=4)
        r += 1

        self._label("Title:", r)
        self._title_var = ctk.StringVar(value=expense.title if expense else "")
        self._entry(self._title_var, r, width=220)
        r += 1

        self._label("Category:", r)
        self._cat_var = ctk.StringVar(value=expense.category if expense else FIXED_CATEGORIES[0])
        ctk.CTkComboBox(
            self, values=FIXED_CATEGORIES, variable=self._cat_var, width=220,
        ).grid(row=r, column=1, padx=(0, 16), pady=4, sticky="ew")
        r += 1

        self._label("Amount:", r)
        self._amount_var = ctk.StringVar(value=f"{expense.amount:.2f}" if expense else "")
        self._entry(self._amount_var, r, width=220)
        r += 1

        self._label("First date:", r)
        self._date_picker = DatePickerWidget(
            self, initial_date=expense.start_date if expense else today_str(), date_format=date_format,
        )
        self._date_picker.grid(row=r, column=1, padx=(0, 16), pady=4, sticky="w")
        r += 1

        self._label("Repeats:", r)
        self._recurrence_var = ctk.StringVar(
            value=RECURRENCE_LABELS[expense.recurrence if expense else "monthly"]
        )
        ctk.CTkComboBox(
            self, values=list(RECURRENCE_LABELS.values()), variable=self._recurrence_var,
            width=220, state="readonly", command=lambda _: self._on_recurrence_change(),
        ).grid(row=r, column=1, padx=(0, 16), pady=4, sticky="ew")
        r += 1

        self._label("Installments:", r)
        self._installments_var = ctk.StringVar(
            value=str(expense.installments) if expense and expense.installments else ""
        )
        self._installments_entry = self._entry(self._installments_var, r, width=220)
        r += 1

        self._label("Card:", r)
        current_card = next((c.name for c in cards if expense and c.id == expense.card_id), _NO_CARD)
        self._card_var = ctk.StringVar(value=current_card)
        self._card_combo = ctk.CTkComboBox(
            self, values=[_NO_CARD] + [c.name for c in cards], variable=self._card_var,
            width=220, state="readonly",
        )
        self._card_combo.grid(row=r, column=1, padx=(0, 16), pady=4, sticky="ew")
        r += 1

        self._build_footer(r)
        self._on_recurrence_change()
        self._on_type_change()
        self._show_modal()

    def _recurrence(self) -> str:
        return self._recurrence_by_label.get(self._recurrence_var.get(), "monthly")

    def _on_recurrence_change(self):
        state = "normal" if self._recurrence() == "installments" else "disabled"
        self._installments_entry.configure(state=state)

    def _on_type_change(self):
        # Only expenses can be charged to a card
        if self._type_var.get() == "income":
            self._card_var.set(_NO_CARD)
            self._card_combo.configure(state="disabled")
        else:
            self._card_combo.configure(state="readonly")

    def _on_save(self):
        amount = parse_amount(self._amount_var.get())
        if amount is None:
            self._error_var.set("Invalid amount.")
            return
        if not self._date_picker.is_valid():
            self._error_var.set("Invalid date.")
            return

        recurrence = self._recurrence()
        installments = None
        if recurrence == "installments":
            try:
                installments = int(self._installments_var.get())
            except ValueError:
                self._error_var.set("Installments must be a whole number.")
                return

        card = next((c for c in self._cards if c.name == self._card_var.get()), None)
        fields = dict(
            title=self._title_var.get(),
            amount=amount,
            start_date=self._date_picker.get(),
            recurrence=recurrence,
            type_=self._type_var.get(),
            category=self._cat_var.get(),
            installments=installments,
            card_id=card.id if card else None,
        )
        try:
            if self._expense:
                self._svc.update(self._expense.id, **fields)
            else:
                self._svc.create(**fields)
        except ValueError as e:
            self._error_var.set(str(e))
            return
        self.saved = True
        self.destroy()
