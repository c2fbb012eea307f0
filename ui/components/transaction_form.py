import customtkinter as ctk

from models.transaction import Transaction
from services.transaction_service import TransactionService
from ui.components.date_picker import DatePickerWidget
from ui.components.modal_form import ModalForm
from utils.constants import DELIVERY_APPS, EXPENSE_CATEGORIES
from utils.currency import parse_amount
from utils.date_helpers import today_str


class TransactionForm(ModalForm):
    """Add or edit a day's income (per delivery app) or an expense."""

    _last_date: str = today_str()  # reset to today on each app launch

    def __init__(
        self,
        master,
        tx_service: TransactionService,
        initial_type: str = "income",
        transaction: Transaction | None = None,
        date_format: str = "DD/MM/YYYY",
        **kwargs,
    ):
        type_ = transaction.type if transaction else initial_type
        super().__init__(
            master, f"{'Edit' if transaction else 'Add'} {type_.title()}", **kwargs
        )
        self._tx_svc = tx_service
        self._transaction = transaction

        r = 0
        self._label("Type:", r)
        self._type_var = ctk.StringVar(value=type_)
        type_frame = ctk.CTkFrame(self, fg_color="transparent")
        type_frame.grid(row=r, column=1, padx=(0, 16), pady=4, sticky="w")
        for t in ("income", "expense"):
            ctk.CTkRadioButton(
                type_frame, text=t.title(), variable=self._type_var, value=t,
                command=self._on_type_change,
            ).pack(side="left", padx=4)
        r += 1

        self._label("Description:", r)
        self._desc_var = ctk.StringVar(value=transaction.description if transaction else "")
        self._desc_combo = ctk.CTkComboBox(self, variable=self._desc_var, width=200)
        self._desc_combo.grid(row=r, column=1, padx=(0, 16), pady=4, sticky="ew")
        self._on_type_change()
        r += 1

        self._label("Amount:", r)
        self._amount_var = ctk.StringVar(value=f"{transaction.amount:.2f}" if transaction else "")
        self._entry(self._amount_var, r)
        r += 1

        self._label("Date:", r)
        self._date_picker = DatePickerWidget(
            self,
            initial_date=transaction.date if transaction else TransactionForm._last_date,
            date_format=date_format,
        )
        self._date_picker.grid(row=r, column=1, padx=(0, 16), pady=4, sticky="w")
        r += 1

        self._build_footer(r, delete_cmd=self._on_delete if transaction else None)
        self._show_modal()

    def _on_type_change(self):
        # Income is labelled by the app it came from, expenses by category
        values = DELIVERY_APPS if self._type_var.get() == "income" else EXPENSE_CATEGORIES
        self._desc_combo.configure(values=values)
        if not self._desc_var.get():
            self._desc_var.set(values[0])

    def _on_save(self):
        amount = parse_amount(self._amount_var.get())
        if amount is None:
            self._error_var.set("Invalid amount.")
            return
        if not self._date_picker.is_valid():
            self._error_var.set("Invalid date.")
            return

        date_str = self._date_picker.get()
        try:
            if self._transaction:
                self._tx_svc.update(
                    self._transaction.id, self._type_var.get(), amount, date_str, self._desc_var.get()
                )
            else:
                self._tx_svc.create(self._type_var.get(), amount, date_str, self._desc_var.get())
        except ValueError as e:
            self._error_var.set(str(e))
            return
        TransactionForm._last_date = date_str
        self.saved = True
        self.destroy()

    def _on_delete(self):
        self._tx_svc.delete(self._transaction.id)
        self.saved = True
        self.destroy()
