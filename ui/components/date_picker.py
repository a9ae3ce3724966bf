import customtkinter as ctk
from tkcalendar import Calendar
import tkinter as tk
from tkinter import ttk
from utils.date_helpers import (
    parse_date, format_date, format_display_date, parse_display_date,
)
from datetime import date

_INVALID_BORDER = "#F44336"
_DEFAULT_BORDER = ("gray65", "gray35")
_SELECT_BG = "#1f6aa5"


def _calendar_palette() -> dict:
    """tkcalendar colour options matching the current CTk appearance mode."""
    dark = ctk.get_appearance_mode() == "Dark"
    bg, fg = ("#2b2b2b", "#ffffff") if dark else ("#ffffff", "#000000")
    return {
        "background": bg,
        "foreground": fg,
        "headersbackground": bg,
        "headersforeground": fg,
        "selectbackground": _SELECT_BG,
        "weekendbackground": bg,
        "weekendforeground": fg,
        "othermonthforeground": "gray60",
        "bordercolor": bg,
    }


class _CalendarPopup(ctk.CTkToplevel):
    """Borderless calendar shown under an anchor widget.

    Calls on_pick with a YYYY-MM-DD string and closes itself on selection
    or when focus leaves it.
    """

    def __init__(self, anchor, initial: date, on_pick, on_close):
        super().__init__(anchor)
        self.overrideredirect(True)
        self.resizable(False, False)
        self._on_pick = on_pick
        self._on_close = on_close

        palette = _calendar_palette()
        style = ttk.Style(self)
        style.theme_use("default")
        style.configure(
            "Calendar.Treeview",
            background=palette["background"],
            foreground=palette["foreground"],
            fieldbackground=palette["background"],
        )

        self._cal = Calendar(
            self,
            selectmode="day",
            year=initial.year,
            month=initial.month,
            day=initial.day,
            date_pattern="yyyy-mm-dd",
            **palette,
        )
        self._cal.pack(padx=4, pady=4)
        self._cal.bind("<<CalendarSelected>>", self._picked)
        self.bind("<FocusOut>", self._focus_left)

        anchor.update_idletasks()
        x = anchor.winfo_rootx()
        y = anchor.winfo_rooty() + anchor.winfo_height() + 2
        self.geometry(f"+{x}+{y}")

    def _picked(self, _event=None):
        self._on_pick(self._cal.get_date())
        self.close()

    def _focus_left(self, _event=None):
        if not self.winfo_exists():
            return
        focused = self.focus_get()
        if focused is None or not str(focused).startswith(str(self)):
            self.close()

    def close(self):
        if self.winfo_exists():
            self.destroy()
        self._on_close()


class DatePickerWidget(ctk.CTkFrame):
    """Date entry in the user's display format with a calendar popup.

    .get() returns YYYY-MM-DD for storage ('' when empty).
    .set(date_str) accepts YYYY-MM-DD.
    """

    def __init__(
        self,
        master,
        initial_date: str | None = None,
        date_format: str = "MM/DD/YYYY",
        **kwargs,
    ):
        super().__init__(master, fg_color="transparent", **kwargs)
        self.grid_columnconfigure(0, weight=1)

        self._date_format = date_format
        self._popup: _CalendarPopup | None = None
        self._var = tk.StringVar()

        self._entry = ctk.CTkEntry(self, textvariable=self._var, width=110)
        self._entry.grid(row=0, column=0, sticky="ew")
        self._entry.bind("<FocusOut>", self._normalize)
        self._entry.bind("<Return>", self._normalize)

        ctk.CTkButton(self, text="📅", width=32, command=self._toggle_popup).grid(
            row=0, column=1, padx=(4, 0)
        )
        if initial_date:
            self.set(initial_date)

    def _parsed(self) -> date | None:
        # display format first, then anything ISO-like
        raw = self._var.get().strip()
        if not raw:
            return None
        return parse_display_date(raw, self._date_format) or parse_date(
            raw.replace("/", "-").replace(".", "-")
        )

    def get(self) -> str:
        d = self._parsed()
        return format_date(d) if d else self._var.get().strip()

    def set(self, date_str: str):
        d = parse_date(date_str) if date_str else None
        if d:
            self._var.set(format_display_date(format_date(d), self._date_format))
        else:
            self._var.set(date_str or "")
        self._entry.configure(border_color=_DEFAULT_BORDER)

    def is_valid(self) -> bool:
        return self._parsed() is not None

    def _normalize(self, _event=None):
        if not self._var.get().strip():
            self._entry.configure(border_color=_DEFAULT_BORDER)
        elif self.is_valid():
            self.set(self.get())
        else:
            self._entry.configure(border_color=_INVALID_BORDER)

    def _toggle_popup(self):
        if self._popup is not None:
            self._popup.close()
            return
        self._popup = _CalendarPopup(
            self._entry,
            self._parsed() or date.today(),
            on_pick=self.set,
            on_close=self._popup_closed,
        )

    def _popup_closed(self):
        self._popup = None
