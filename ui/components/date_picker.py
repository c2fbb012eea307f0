import tkinter as tk
from datetime import date
from tkinter import ttk

import customtkinter as ctk
from tkcalendar import Calendar

from utils.date_helpers import format_date, format_display_date, parse_date, parse_display_date


def _calendar_colors() -> dict:
    if ctk.get_appearance_mode() == "Dark":
        bg, fg = "#2b2b2b", "#ffffff"
    else:
        bg, fg = "#ffffff", "#000000"
    return dict(
        background=bg, foreground=fg,
        headersbackground=bg, headersforeground=fg,
        selectbackground="#1f6aa5",
        weekendbackground=bg, weekendforeground=fg,
        othermonthforeground="gray60",
        bordercolor=bg,
    )


class DatePickerWidget(ctk.CTkFrame):
    """Entry in the display format plus a tkcalendar popup.

    .get() returns YYYY-MM-DD (or '' when empty); .set() accepts an ISO date
    or timestamp.
    """

    def __init__(
        self,
        master,
        initial_date: str | None = None,
        date_format: str = "DD/MM/YYYY",
        **kwargs,
    ):
        super().__init__(master, fg_color="transparent", **kwargs)
        self.grid_columnconfigure(0, weight=1)
        self._date_format = date_format
        self._popup: ctk.CTkToplevel | None = None
        self._var = tk.StringVar()

        self._entry = ctk.CTkEntry(self, textvariable=self._var, width=110)
        self._entry.grid(row=0, column=0, sticky="ew")
        self._entry.bind("<FocusOut>", self._on_focus_out)
        self._entry.bind("<Return>", self._on_focus_out)
        ctk.CTkButton(self, text="📅", width=32, command=self._toggle_popup).grid(
            row=0, column=1, padx=(4, 0)
        )
        self.set(initial_date or "")

    def _parsed(self) -> date | None:
        raw = self._var.get().strip()
        if not raw:
            return None
        d = parse_display_date(raw, self._date_format)
        return d or parse_date(raw.replace("/", "-").replace(".", "-"))

    def get(self) -> str:
        d = self._parsed()
        if d:
            return format_date(d)
        return self._var.get().strip()

    def get_date(self) -> date | None:
        return self._parsed()

    def set(self, value):
        d = parse_date(value)
        if d:
            self._var.set(format_display_date(format_date(d), self._date_format))
        else:
            self._var.set(value or "")
        self._entry.configure(border_color=("gray65", "gray35"))

    def is_valid(self) -> bool:
        return self._parsed() is not None

    def _on_focus_out(self, _event=None):
        if not self._var.get().strip():
            return
        d = self._parsed()
        if d:
            self.set(d)
        else:
            self._entry.configure(border_color="#F44336")

    def _toggle_popup(self):
        if self._popup and self._popup.winfo_exists():
            self._close_popup()
            return

        popup = ctk.CTkToplevel(self)
        popup.overrideredirect(True)
        popup.resizable(False, False)
        self._popup = popup

        colors = _calendar_colors()
        style = ttk.Style(popup)
        style.theme_use("default")
        style.configure(
            "Calendar.Treeview",
            background=colors["background"], foreground=colors["foreground"],
            fieldbackground=colors["background"],
        )

        current = self._parsed() or date.today()
        # tkcalendar works in ISO; the entry keeps the display format
        cal = Calendar(
            popup, selectmode="day",
            year=current.year, month=current.month, day=current.day,
            date_pattern="yyyy-mm-dd", **colors,
        )
        cal.pack(padx=4, pady=4)
        cal.bind("<<CalendarSelected>>", lambda e: self._on_selected(cal.get_date()))

        self._entry.update_idletasks()
        x = self._entry.winfo_rootx()
        y = self._entry.winfo_rooty() + self._entry.winfo_height() + 2
        popup.geometry(f"+{x}+{y}")
        popup.bind("<FocusOut>", lambda e: self._maybe_close())

    def _on_selected(self, iso: str):
        self.set(iso)
        self._close_popup()

    def _close_popup(self):
        if self._popup is not None:
            self._popup.destroy()
            self._popup = None

    def _maybe_close(self):
        if self._popup is None or not self._popup.winfo_exists():
            return
        try:
            focused = self._popup.focus_get()
        except KeyError:
            # tk raises for focus inside native popdowns
            focused = None
        if focused is None or not str(focused).startswith(str(self._popup)):
            self._close_popup()
