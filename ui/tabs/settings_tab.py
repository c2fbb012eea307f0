import json
import customtkinter as ctk
from tkinter import filedialog, messagebox

from database.db_manager import DatabaseManager
from services.card_service import CardService
from services.data_service import DataService
from services.goal_service import GoalService
from ui.components.card_form import CardForm
from ui.components.confirm_dialog import confirm
from ui.components.modal_form import center_on_master
from utils.app_config import get_db_folder, set_db_folder
from utils.currency import format_currency
from utils.date_helpers import DATE_FORMAT_OPTIONS

_AUTO_END = "Auto"


class SettingsTab(ctk.CTkFrame):
    """Settings tab: billing cycle, cards, DB folder, backup, preferences."""

    def __init__(
        self,
        master,
        db: DatabaseManager,
        goal_service: GoalService,
        card_service: CardService,
        data_service: DataService,
        notify_refresh,
        **kwargs,
    ):
        super().__init__(master, fg_color="transparent", **kwargs)
        self._db = db
        self._goal_svc = goal_service
        self._card_svc = card_service
        self._data_svc = data_service
        self._notify_refresh = notify_refresh

        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(0, weight=1)

        scroll = ctk.CTkScrollableFrame(self, fg_color="transparent")
        scroll.grid(row=0, column=0, sticky="nsew")
        scroll.grid_columnconfigure(0, weight=1)

        self._build_cycle_section(scroll)
        self._build_cards_section(scroll)
        self._build_db_folder_section(scroll)
        self._build_export_import_section(scroll)
        self._build_app_settings_section(scroll)
        self.refresh()

    def refresh(self):
        """Re-read settings and update displayed values."""
        settings = self._goal_svc.get_settings()
        self._start_day_var.set(str(settings.start_day_of_month))
        self._end_day_var.set(str(settings.end_day_of_month) if settings.end_day_of_month else _AUTO_END)
        self._render_cards()

        appearance = self._db.get_setting("appearance_mode", "system")
        self._appearance_var.set(appearance.title())
        self._currency_var.set(self._db.get_setting("currency_symbol", "R$"))
        date_fmt = self._db.get_setting("date_format", "DD/MM/YYYY")
        if date_fmt in DATE_FORMAT_OPTIONS:
            self._date_fmt_var.set(date_fmt)

    # ── Section 1: Billing cycle ──────────────────────────────────────────────

    def _build_cycle_section(self, parent):
        section = self._make_section(parent, "Work Cycle", row=0)
        days = [str(d) for d in range(1, 32)]

        ctk.CTkLabel(section, text="Cycle starts on day:", anchor="e", width=160).grid(
            row=0, column=0, padx=(8, 4), pady=6, sticky="e"
        )
        self._start_day_var = ctk.StringVar()
        ctk.CTkComboBox(
            section, values=days, variable=self._start_day_var, width=80, state="readonly",
        ).grid(row=0, column=1, padx=4, pady=6, sticky="w")

        ctk.CTkLabel(section, text="Cycle closes on day:", anchor="e", width=160).grid(
            row=1, column=0, padx=(8, 4), pady=6, sticky="e"
        )
        self._end_day_var = ctk.StringVar()
        ctk.CTkComboBox(
            section, values=[_AUTO_END] + days, variable=self._end_day_var, width=80, state="readonly",
        ).grid(row=1, column=1, padx=4, pady=6, sticky="w")

        ctk.CTkLabel(
            section,
            text="'Auto' closes the cycle the day before the next start. "
                 "Days past the end of a short month fall on its last day.",
            text_color="gray60", font=ctk.CTkFont(size=11), anchor="w", wraplength=460,
        ).grid(row=2, column=0, columnspan=3, sticky="w", padx=8)

        ctk.CTkButton(section, text="Save Cycle", width=120, command=self._save_cycle).grid(
            row=3, column=0, columnspan=2, pady=(8, 4)
        )
        self._cycle_status_var = ctk.StringVar()
        ctk.CTkLabel(
            section, textvariable=self._cycle_status_var, text_color="#4CAF50", font=ctk.CTkFont(size=11),
        ).grid(row=4, column=0, columnspan=2)

    def _save_cycle(self):
        end_raw = self._end_day_var.get()
        end_day = None if end_raw in ("", _AUTO_END) else int(end_raw)
        try:
            self._goal_svc.set_cycle_days(int(self._start_day_var.get() or 1), end_day)
        except ValueError as e:
            messagebox.showerror("Work Cycle", str(e))
            return
        self._cycle_status_var.set("Cycle saved.")
        self._notify_refresh("full")

    # ── Section 2: Credit cards ───────────────────────────────────────────────

    def _build_cards_section(self, parent):
        section = self._make_section(parent, "Credit Cards", row=1)
        self._cards_list = ctk.CTkFrame(section, fg_color="transparent")
        self._cards_list.grid(row=0, column=0, sticky="ew", padx=8)
        self._cards_list.grid_columnconfigure(1, weight=1)
        ctk.CTkButton(section, text="+ Add Card", width=110, command=self._open_card_form).grid(
            row=1, column=0, sticky="w", padx=8, pady=6
        )

    def _render_cards(self):
        for w in self._cards_list.winfo_children():
            w.destroy()
        cards = self._card_svc.get_all()
        if not cards:
            ctk.CTkLabel(self._cards_list, text="No cards yet.", text_color="gray60").grid(
                row=0, column=0, sticky="w", pady=4
            )
            return
        currency = self._db.get_setting("currency_symbol", "R$")
        for r, card in enumerate(cards):
            ctk.CTkLabel(self._cards_list, text="", width=16, fg_color=card.color, corner_radius=4).grid(
                row=r, column=0, padx=(0, 8), pady=2
            )
            limit = format_currency(card.limit, currency) if card.has_limit else "no limit"
            ctk.CTkLabel(self._cards_list, text=f"{card.name}  ({limit})", anchor="w").grid(
                row=r, column=1, sticky="ew"
            )
            ctk.CTkButton(
                self._cards_list, text="Edit", width=50, height=24,
                command=lambda c=card: self._open_card_form(c),
            ).grid(row=r, column=2, padx=4)

    def _open_card_form(self, card=None):
        form = CardForm(self.winfo_toplevel(), self._card_svc, card=card)
        self.wait_window(form)
        if form.saved:
            self._notify_refresh("card")

    # ── Section 3: DB folder ──────────────────────────────────────────────────

    def _build_db_folder_section(self, parent):
        section = self._make_section(parent, "Database Folder", row=2)

        ctk.CTkLabel(
            section,
            text="The database file (corre.db) is stored in this folder.",
            text_color="gray60",
            font=ctk.CTkFont(size=11),
            anchor="w",
        ).grid(row=0, column=0, columnspan=3, sticky="w", padx=8, pady=(4, 6))

        self._db_folder_var = ctk.StringVar(value=get_db_folder() or "(default: app folder)")
        ctk.CTkEntry(section, textvariable=self._db_folder_var, state="readonly", width=340).grid(
            row=1, column=0, padx=(8, 4), pady=4, sticky="ew"
        )
        ctk.CTkButton(section, text="Browse…", width=90, command=self._browse_db_folder).grid(
            row=1, column=1, padx=4
        )
        ctk.CTkButton(
            section, text="Reset to Default", width=120,
            fg_color="transparent", border_width=1,
            text_color=("gray10", "gray90"),
            command=lambda: self._set_db_folder(None),
        ).grid(row=1, column=2, padx=(4, 8))

        self._db_restart_label = ctk.CTkLabel(
            section, text="", text_color="#FF9800", font=ctk.CTkFont(size=11), anchor="w",
        )
        self._db_restart_label.grid(row=2, column=0, columnspan=3, sticky="w", padx=8, pady=(0, 6))

    def _browse_db_folder(self):
        path = filedialog.askdirectory(title="Choose DB folder")
        if path:
            self._set_db_folder(path)

    def _set_db_folder(self, path: str | None):
        try:
            set_db_folder(path)
        except OSError as e:
            messagebox.showerror("Database Folder", f"Could not save the setting:\n{e}")
            return
        self._db_folder_var.set(path or "(default: app folder)")
        self._db_restart_label.configure(text="Restart the app for the change to take effect.")

    # ── Section 4: Export / Import / Clear ────────────────────────────────────

    def _build_export_import_section(self, parent):
        section = self._make_section(parent, "Backup", row=3)
        self._io_status_var = ctk.StringVar()

        btn_frame = ctk.CTkFrame(section, fg_color="transparent")
        btn_frame.grid(row=0, column=0, sticky="w", padx=8, pady=6)
        ctk.CTkButton(btn_frame, text="Export as JSON", width=130, command=self._export_json).pack(
            side="left", padx=4
        )
        ctk.CTkButton(
            btn_frame, text="Import JSON…", width=120,
            fg_color="transparent", border_width=1,
            text_color=("gray10", "gray90"),
            command=self._import_json,
        ).pack(side="left", padx=4)
        ctk.CTkButton(
            btn_frame, text="Clear All Data", width=130,
            fg_color="#F44336", hover_color="#D32F2F",
            command=self._clear_all,
        ).pack(side="left", padx=(24, 4))

        ctk.CTkLabel(
            section, textvariable=self._io_status_var,
            text_color="#4CAF50", font=ctk.CTkFont(size=11), anchor="w",
        ).grid(row=1, column=0, sticky="w", padx=8, pady=(0, 6))

    def _export_json(self):
        path = filedialog.asksaveasfilename(
            title="Export as JSON",
            defaultextension=".json",
            filetypes=[("JSON files", "*.json"), ("All files", "*.*")],
        )
        if not path:
            return
        try:
            with open(path, "w", encoding="utf-8") as f:
                json.dump(self._data_svc.export_json(), f, indent=2, ensure_ascii=False)
        except OSError as e:
            messagebox.showerror("Export Failed", str(e))
            return
        self._io_status_var.set(f"Exported to {path}")

    def _import_json(self):
        path = filedialog.askopenfilename(
            title="Import JSON",
            filetypes=[("JSON files", "*.json"), ("All files", "*.*")],
        )
        if not path:
            return
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            messagebox.showerror("Import Failed", f"Could not read file:\n{e}")
            return

        mode = self._ask_import_mode()
        if not mode:
            return
        try:
            stats = self._data_svc.import_json(data, mode)
        except ValueError as e:
            messagebox.showerror("Import Failed", str(e))
            return
        self._notify_refresh("full")
        self._io_status_var.set(self._format_stats(stats))

    def _clear_all(self):
        if not confirm(
            self.winfo_toplevel(), "Clear All Data",
            "Delete every transaction, fixed expense, card and goal setting? This cannot be undone.",
            confirm_text="Delete all",
        ):
            return
        self._data_svc.clear_all()
        self._notify_refresh("full")
        self._io_status_var.set("All data cleared.")

    def _ask_import_mode(self) -> str | None:
        dlg = _ImportModeDialog(self.winfo_toplevel())
        self.wait_window(dlg)
        return dlg.mode

    def _format_stats(self, stats: dict) -> str:
        parts = [f"{v} {k.replace('_', ' ')}" for k, v in stats.items() if v > 0]
        return "Imported: " + ", ".join(parts) if parts else "Nothing new imported."

    # ── Section 5: Preferences ────────────────────────────────────────────────

    def _build_app_settings_section(self, parent):
        section = self._make_section(parent, "Preferences", row=4)
        self._appearance_var = ctk.StringVar()
        self._currency_var = ctk.StringVar()
        self._date_fmt_var = ctk.StringVar()
        self._settings_status_var = ctk.StringVar()

        fields = [
            ("Theme", ctk.CTkSegmentedButton(
                section, values=["System", "Light", "Dark"], variable=self._appearance_var,
            )),
            ("Currency", ctk.CTkEntry(section, textvariable=self._currency_var, width=60)),
            ("Dates", ctk.CTkOptionMenu(
                section, values=DATE_FORMAT_OPTIONS, variable=self._date_fmt_var, width=150,
            )),
        ]
        for row, (label, widget) in enumerate(fields):
            ctk.CTkLabel(section, text=label, width=90, anchor="w").grid(
                row=row, column=0, padx=(8, 4), pady=4, sticky="w"
            )
            widget.grid(row=row, column=1, padx=4, pady=4, sticky="w")

        footer = ctk.CTkFrame(section, fg_color="transparent")
        footer.grid(row=len(fields), column=0, columnspan=2, sticky="ew", padx=8, pady=(8, 4))
        ctk.CTkButton(footer, text="Apply", width=90, command=self._save_settings).pack(side="left")
        ctk.CTkLabel(
            footer, textvariable=self._settings_status_var,
            text_color="gray60", font=ctk.CTkFont(size=11),
        ).pack(side="left", padx=10)

    def _save_settings(self):
        mode = self._appearance_var.get().lower() or "system"
        values = {
            "appearance_mode": mode,
            "currency_symbol": self._currency_var.get().strip() or "R$",
            "date_format": self._date_fmt_var.get(),
        }
        for key, value in values.items():
            self._db.set_setting(key, value)
        ctk.set_appearance_mode(mode)
        # Currency and date format are read once at startup
        self._settings_status_var.set("Saved. Currency and date changes apply after a restart.")

    # ── Helpers ───────────────────────────────────────────────────────────────

    def _make_section(self, parent, title: str, row: int) -> ctk.CTkFrame:
        box = ctk.CTkFrame(parent, corner_radius=8)
        box.grid(row=row, column=0, sticky="ew", padx=12, pady=8)
        box.grid_columnconfigure(0, weight=1)
        ctk.CTkLabel(box, text=title, font=ctk.CTkFont(size=14, weight="bold")).grid(
            row=0, column=0, sticky="w", padx=12, pady=(10, 4)
        )
        body = ctk.CTkFrame(box, fg_color="transparent")
        body.grid(row=1, column=0, sticky="ew", padx=4, pady=(0, 8))
        body.grid_columnconfigure(0, weight=1)
        return body


_IMPORT_MODES = [
    ("merge", "Merge: add records not already here", None),
    ("replace", "Replace: wipe local data and restore the backup", "#F44336"),
]


class _ImportModeDialog(ctk.CTkToplevel):
    def __init__(self, master):
        super().__init__(master)
        self.mode: str | None = None
        self.title("Import Backup")
        self.resizable(False, False)
        self.grid_columnconfigure(0, weight=1)

        ctk.CTkLabel(self, text="What should happen to the data already in the app?", wraplength=300).grid(
            row=0, column=0, padx=24, pady=(20, 8)
        )
        for row, (mode, text, color) in enumerate(_IMPORT_MODES, start=1):
            button = ctk.CTkButton(self, text=text, command=lambda m=mode: self._choose(m))
            if color:
                button.configure(fg_color=color, hover_color="#D32F2F")
            button.grid(row=row, column=0, padx=24, pady=4, sticky="ew")
        ctk.CTkButton(
            self, text="Cancel", fg_color="transparent", border_width=1,
            text_color=("gray10", "gray90"), command=self.destroy,
        ).grid(row=len(_IMPORT_MODES) + 1, column=0, padx=24, pady=(4, 16), sticky="ew")

        self.transient(master)
        self.grab_set()
        center_on_master(self)

    def _choose(self, mode: str):
        self.mode = mode
        self.destroy()
