import customtkinter as ctk


class ModalForm(ctk.CTkToplevel):
    """Base for the add/edit dialogs: label column, error line, Save/Cancel.

    Subclasses build their fields, call _build_footer(row) and implement
    _on_save(); `saved` tells the caller whether anything changed.
    """

    def __init__(self, master, title: str, **kwargs):
        super().__init__(master, **kwargs)
        self.saved = False
        self.title(title)
        self.resizable(False, False)
        self.grid_columnconfigure(1, weight=1)
        self._error_var = ctk.StringVar()

    def _label(self, text, row):
        ctk.CTkLabel(self, text=text).grid(
            row=row, column=0, padx=(16, 8), pady=4, sticky="e"
        )

    def _entry(self, var, row, width=200):
        entry = ctk.CTkEntry(self, textvariable=var, width=width)
        entry.grid(row=row, column=1, padx=(0, 16), pady=4, sticky="ew")
        return entry

    def _build_footer(self, row, delete_cmd=None):
        ctk.CTkLabel(
            self, textvariable=self._error_var, text_color="#F44336", wraplength=300,
        ).grid(row=row, column=0, columnspan=2, padx=16)

        btns = ctk.CTkFrame(self, fg_color="transparent")
        btns.grid(row=row + 1, column=0, columnspan=2, pady=(4, 16), padx=16, sticky="ew")
        if delete_cmd:
            ctk.CTkButton(
                btns, text="Delete", width=80,
                fg_color="#F44336", hover_color="#D32F2F",
                command=delete_cmd,
            ).pack(side="left")
        ctk.CTkButton(btns, text="Save", width=90, command=self._on_save).pack(side="right")
        ctk.CTkButton(
            btns, text="Cancel", width=90,
            fg_color="transparent", border_width=1,
            text_color=("gray10", "gray90"),
            command=self.destroy,
        ).pack(side="right", padx=(0, 8))

    def _show_modal(self):
        self.transient(self.master)
        self.grab_set()
        center_on_master(self)

    def _on_save(self):
        raise NotImplementedError


def center_on_master(window):
    window.update_idletasks()
    mw = window.master.winfo_x() + window.master.winfo_width() // 2
    mh = window.master.winfo_y() + window.master.winfo_height() // 2
    w, h = window.winfo_reqwidth(), window.winfo_reqheight()
    window.geometry(f"+{mw - w // 2}+{mh - h // 2}")
