import customtkinter as ctk
from tkinter import filedialog

from database.db_manager import DatabaseManager
from utils.app_config import get_db_folder, set_db_folder
from utils.currency import CURRENCIES
from utils.date_helpers import DATE_FORMAT_OPTIONS
from utils.logging_setup import get_logger

logger = get_logger("ui.settings")


class SettingsTab(ctk.CTkFrame):
    """Settings tab: DB folder and display preferences."""

    def __init__(self, master, db: DatabaseManager, notify_refresh, **kwargs):
        super().__init__(master, fg_color="transparent", **kwargs)
        self._db = db
        self._notify_refresh = notify_refresh

        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(0, weight=1)

        scroll = ctk.CTkScrollableFrame(self, fg_color="transparent")
        scroll.grid(row=0, column=0, sticky="nsew")
        scroll.grid_columnconfigure(0, weight=1)

        self._build_db_folder_section(scroll)
        self._build_app_settings_section(scroll)

    def refresh(self):
        """Re-read settings from DB and update displayed values."""
        appearance = self._db.get_setting("appearance_mode", "system")
        self._appearance_var.set(appearance.title())
        self._currency_var.set(self._currency_label(self._db.get_setting("currency_code", "INR")))
        date_fmt = self._db.get_setting("date_format", "MM/DD/YYYY")
        if date_fmt in DATE_FORMAT_OPTIONS:
            self._date_fmt_var.set(date_fmt)
        self._threshold_var.set(self._db.get_setting("budget_alert_threshold", "0.8"))

    @staticmethod
    def _currency_label(code: str) -> str:
        cur = CURRENCIES.get(code, CURRENCIES["INR"])
        return f"{cur.code} ({cur.symbol}) {cur.name}"

    def _build_db_folder_section(self, parent):
        section = self._make_section(parent, "Database Folder", row=0)

        ctk.CTkLabel(
            section,
            text="finance.db is stored in this folder.",
            text_color="gray60",
            font=ctk.CTkFont(size=11),
            anchor="w",
        ).grid(row=0, column=0, columnspan=3, sticky="w", padx=8, pady=(4, 6))

        self._db_folder_var = ctk.StringVar(value=get_db_folder() or "(default: app folder)")
        ctk.CTkEntry(
            section, textvariable=self._db_folder_var,
            state="readonly", width=340,
        ).grid(row=1, column=0, padx=(8, 4), pady=4, sticky="ew")

        ctk.CTkButton(
            section, text="Browse…", width=90,
            command=self._browse_db_folder,
        ).grid(row=1, column=1, padx=4)

        ctk.CTkButton(
            section, text="Reset to Default", width=120,
            fg_color="transparent", border_width=1,
            text_color=("gray10", "gray90"),
            command=lambda: self._change_db_folder(None),
        ).grid(row=1, column=2, padx=(4, 8))

        self._db_restart_label = ctk.CTkLabel(
            section, text="", text_color="#FF9800",
            font=ctk.CTkFont(size=11), anchor="w",
        )
        self._db_restart_label.grid(row=2, column=0, columnspan=3, sticky="w", padx=8, pady=(0, 6))

    def _browse_db_folder(self):
        path = filedialog.askdirectory(title="Choose DB folder")
        if path:
            self._change_db_folder(path)

    def _change_db_folder(self, path: str | None):
        try:
            set_db_folder(path)
        except OSError as e:
            logger.error("Could not save DB folder: %s", e)
            self._db_restart_label.configure(text=f"Could not save setting: {e}")
            return
        self._db_folder_var.set(path or "(default: app folder)")
        self._db_restart_label.configure(text="Restart the app for the change to take effect.")

    def _build_app_settings_section(self, parent):
        section = self._make_section(parent, "Display", row=1)

        def field(row, text):
            ctk.CTkLabel(section, text=text, anchor="e", width=140).grid(
                row=row, column=0, padx=(8, 4), pady=6, sticky="e"
            )

        field(0, "Appearance:")
        self._appearance_var = ctk.StringVar(
            value=self._db.get_setting("appearance_mode", "system").title()
        )
        ctk.CTkComboBox(
            section, values=["System", "Light", "Dark"],
            variable=self._appearance_var, width=220, state="readonly",
        ).grid(row=0, column=1, padx=4, pady=6, sticky="w")

        field(1, "Currency:")
        self._currency_var = ctk.StringVar(
            value=self._currency_label(self._db.get_setting("currency_code", "INR"))
        )
        ctk.CTkComboBox(
            section, values=[self._currency_label(c) for c in CURRENCIES],
            variable=self._currency_var, width=220, state="readonly",
        ).grid(row=1, column=1, padx=4, pady=6, sticky="w")

        field(2, "Date Format:")
        self._date_fmt_var = ctk.StringVar(
            value=self._db.get_setting("date_format", "MM/DD/YYYY")
        )
        ctk.CTkComboBox(
            section, values=DATE_FORMAT_OPTIONS,
            variable=self._date_fmt_var, width=220, state="readonly",
        ).grid(row=2, column=1, padx=4, pady=6, sticky="w")

        field(3, "Budget Alert At:")
        self._threshold_var = ctk.StringVar(
            value=self._db.get_setting("budget_alert_threshold", "0.8")
        )
        ctk.CTkEntry(section, textvariable=self._threshold_var, width=60).grid(
            row=3, column=1, padx=4, pady=6, sticky="w"
        )

        ctk.CTkLabel(
            section,
            text="Currency and date format changes take effect on next app restart.",
            text_color="gray60", font=ctk.CTkFont(size=11), anchor="w",
        ).grid(row=4, column=0, columnspan=2, sticky="w", padx=8)

        ctk.CTkButton(
            section, text="Save Settings", width=140,
            command=self._save_settings,
        ).grid(row=5, column=0, columnspan=2, pady=(10, 8))

        self._settings_status_var = ctk.StringVar()
        self._settings_status = ctk.CTkLabel(
            section, textvariable=self._settings_status_var,
            text_color="#4CAF50", font=ctk.CTkFont(size=11),
        )
        self._settings_status.grid(row=6, column=0, columnspan=2, pady=(0, 8))

    def _save_settings(self):
        try:
            threshold = float(self._threshold_var.get())
        except ValueError:
            threshold = -1.0
        if not 0 < threshold <= 1:
            self._settings_status.configure(text_color="#F44336")
            self._settings_status_var.set("Alert threshold must be between 0 and 1.")
            return

        appearance_key = self._appearance_var.get().lower()
        currency_code = self._currency_var.get().split(" ", 1)[0]
        self._db.set_setting("appearance_mode", appearance_key)
        self._db.set_setting("currency_code", currency_code)
        self._db.set_setting("date_format", self._date_fmt_var.get())
        self._db.set_setting("budget_alert_threshold", str(threshold))
        ctk.set_appearance_mode(appearance_key)
        logger.info("Settings saved (currency=%s, appearance=%s)", currency_code, appearance_key)
        self._settings_status.configure(text_color="#4CAF50")
        self._settings_status_var.set("Settings saved.")
        self._notify_refresh("settings")

    def _make_section(self, parent, title: str, row: int) -> ctk.CTkFrame:
        """Create a labelled card section and return its inner frame."""
        outer = ctk.CTkFrame(parent, corner_radius=8)
        outer.grid(row=row, column=0, sticky="ew", padx=12, pady=8)
        outer.grid_columnconfigure(0, weight=1)

        ctk.CTkLabel(
            outer, text=title,
            font=ctk.CTkFont(size=14, weight="bold"), anchor="w",
        ).grid(row=0, column=0, sticky="w", padx=12, pady=(10, 4))

        inner = ctk.CTkFrame(outer, fg_color="transparent")
        inner.grid(row=1, column=0, sticky="ew", padx=4, pady=(0, 8))
        inner.grid_columnconfigure(0, weight=1)
        return inner
