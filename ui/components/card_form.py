import customtkinter as ctk

from models.credit_card import CreditCard
from services.card_service import CardService
from ui.components.confirm_dialog import confirm
from ui.components.modal_form import ModalForm
from utils.constants import CARD_COLORS
from utils.currency import parse_amount


class CardForm(ModalForm):
    def __init__(
        self,
        master,
        card_service: CardService,
        card: CreditCard | None = None,
        **kwargs,
    ):
        super().__init__(master, "Edit Card" if card else "New Card", **kwargs)
        self._card_svc = card_service
        self._card = card

        self._label("Name:", 0)
        self._name_var = ctk.StringVar(value=card.name if card else "")
        self._entry(self._name_var, 0)

        self._label("Limit (0 = none):", 1)
        self._limit_var = ctk.StringVar(value=f"{card.limit:.2f}" if card else "0")
        self._entry(self._limit_var, 1)

        self._label("Color:", 2)
        self._color_var = ctk.StringVar(value=card.color if card else CARD_COLORS[0])
        swatches = ctk.CTkFrame(self, fg_color="transparent")
        swatches.grid(row=2, column=1, padx=(0, 16), pady=4, sticky="w")
        for color in CARD_COLORS:
            ctk.CTkRadioButton(
                swatches, text="", width=22, variable=self._color_var, value=color,
                fg_color=color, hover_color=color, border_color=color,
            ).pack(side="left", padx=2)

        self._build_footer(3, delete_cmd=self._on_delete if card else None)
        self._show_modal()

    def _on_save(self):
        limit = parse_amount(self._limit_var.get() or "0")
        if limit is None:
            self._error_var.set("Invalid limit.")
            return
        try:
            if self._card:
                self._card_svc.update(self._card.id, self._name_var.get(), self._color_var.get(), limit)
            else:
                self._card_svc.create(self._name_var.get(), self._color_var.get(), limit)
        except ValueError as e:
            self._error_var.set(str(e))
            return
        self.saved = True
        self.destroy()

    def _on_delete(self):
        if not confirm(
            self, "Delete Card",
            f"Delete '{self._card.name}'? Fixed expenses on this card are kept without a card.",
            confirm_text="Delete",
        ):
            return
        self._card_svc.delete(self._card.id)
        self.saved = True
        self.destroy()
