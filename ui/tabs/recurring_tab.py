import customtkinter as ctk
from services.recurring_service import RecurringService
from ui.components.recurring_form import RecurringForm
from ui.components.confirm_dialog import confirm
from utils.currency import format_currency
from utils.date_helpers import format_date, format_display_date, today


class RecurringTab(ctk.CTkFrame):
    def __init__(
        self,
        master,
        recurring_service: RecurringService,
        notify_refresh,
        date_format: str = "MM/DD/YYYY",
        currency_code: str = "INR",
        **kwargs,
    ):
        super().__init__(master, fg_color="transparent", **kwargs)
        self._svc = recurring_service
        self._notify_refresh = notify_refresh
        self._date_format = date_format
        self._currency_code = currency_code
        self._status_var = ctk.StringVar(value="All")

        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(1, weight=1)

        self._build_toolbar()
        self._build_list()
        self._load()

    def refresh(self):
        self._load()

    def _build_toolbar(self):
        bar = ctk.CTkFrame(self, fg_color=("gray88", "gray18"), corner_radius=8)
        bar.grid(row=0, column=0, sticky="ew", padx=8, pady=(8, 0))
        ctk.CTkLabel(
            bar, text="Recurring Transactions",
            font=ctk.CTkFont(size=14, weight="bold"),
        ).pack(side="left", padx=12, pady=8)
        ctk.CTkSegmentedButton(
            bar, values=["All", "Active", "Paused"],
            variable=self._status_var, command=lambda _v: self._load(),
        ).pack(side="left", padx=8)
        ctk.CTkButton(bar, text="+ Add Recurring", command=self._open_add).pack(
            side="right", padx=8, pady=6
        )
        ctk.CTkButton(
            bar, text="Generate Now", command=self._generate_now,
            fg_color="transparent", border_width=1,
            text_color=("gray10", "gray90"),
        ).pack(side="right", padx=4, pady=6)

    def _build_list(self):
        self._scroll = ctk.CTkScrollableFrame(self)
        self._scroll.grid(row=1, column=0, sticky="nsew", padx=8, pady=8)
        self._scroll.grid_columnconfigure(0, weight=1)

    def _load(self):
        for w in self._scroll.winfo_children():
            w.destroy()

        is_active = {"All": None, "Active": True, "Paused": False}[self._status_var.get()]
        schedules = self._svc.get_all(is_active=is_active)
        if not schedules:
            ctk.CTkLabel(
                self._scroll,
                text="No recurring transactions. Click '+ Add Recurring' to create one.",
                text_color="gray60",
            ).grid(row=0, column=0, pady=40)
            return

        hdr = ctk.CTkFrame(self._scroll, fg_color=("gray82", "gray22"), corner_radius=0)
        hdr.grid(row=0, column=0, sticky="ew", pady=(0, 2))
        for i, (col, w) in enumerate(self._COLUMNS):
            ctk.CTkLabel(
                hdr, text=col, width=w, anchor="w",
                font=ctk.CTkFont(weight="bold"),
            ).grid(row=0, column=i, padx=4, pady=4)

        ref = today()
        for idx, schedule in enumerate(schedules):
            self._add_row(idx + 1, schedule, ref)

    _COLUMNS = [
        ("Description", 150), ("Type", 70), ("Amount", 90), ("Category", 110),
        ("Frequency", 80), ("Next Due", 100), ("Last Generated", 110),
        ("Status", 60), ("Actions", 150),
    ]

    def _display(self, value) -> str:
        return format_display_date(value, self._date_format) if value else "—"

    def _add_row(self, idx, schedule, ref):
        bg = ("gray92", "gray17") if idx % 2 == 0 else ("gray88", "gray21")
        row = ctk.CTkFrame(self._scroll, fg_color=bg, corner_radius=4)
        row.grid(row=idx, column=0, sticky="ew", pady=1, padx=2)

        next_due = self._svc.next_due_date(schedule, ref) if schedule.is_active else None
        amount_color = "#4CAF50" if schedule.type == "income" else "#F44336"

        cells = [
            (schedule.description or schedule.category, 150, None),
            (schedule.type.title(), 70, None),
            (format_currency(schedule.amount, self._currency_code), 90, amount_color),
            (schedule.category, 110, None),
            (schedule.frequency.title(), 80, None),
            (self._display(format_date(next_due) if next_due else None), 100, None),
            (self._display(schedule.last_generated), 110, None),
            ("Active" if schedule.is_active else "Paused", 60,
             "#4CAF50" if schedule.is_active else "gray60"),
        ]
        for i, (text, width, color) in enumerate(cells):
            label = ctk.CTkLabel(row, text=text, width=width, anchor="w")
            if color:
                label.configure(text_color=color)
            label.grid(row=0, column=i, padx=4, pady=4)

        acts = ctk.CTkFrame(row, fg_color="transparent")
        acts.grid(row=0, column=len(cells), padx=(4, 6))
        ctk.CTkButton(
            acts, text="Edit", width=40, height=24,
            command=lambda s=schedule: self._open_edit(s),
        ).pack(side="left", padx=2)
        ctk.CTkButton(
            acts, text="Pause" if schedule.is_active else "Resume", width=56, height=24,
            fg_color="transparent", border_width=1,
            text_color=("gray10", "gray90"),
            command=lambda s=schedule: self._toggle_active(s),
        ).pack(side="left", padx=2)
        ctk.CTkButton(
            acts, text="✕", width=28, height=24,
            fg_color="transparent", text_color="#F44336",
            command=lambda s=schedule: self._delete(s),
        ).pack(side="left", padx=2)

    def _open_add(self):
        form = RecurringForm(
            self.winfo_toplevel(), self._svc, date_format=self._date_format,
        )
        self.wait_window(form)
        if form.saved:
            self._notify_refresh("recurring")

    def _open_edit(self, schedule):
        form = RecurringForm(
            self.winfo_toplevel(), self._svc,
            schedule=schedule, date_format=self._date_format,
        )
        self.wait_window(form)
        if form.saved:
            self._notify_refresh("recurring")

    def _toggle_active(self, schedule):
        self._svc.set_active(schedule.id, not schedule.is_active)
        self._notify_refresh("recurring")

    def _delete(self, schedule):
        label = schedule.description or schedule.category
        if confirm(
            self.winfo_toplevel(), "Delete Recurring Transaction",
            f"Delete '{label}'? Transactions it already generated are kept.",
        ):
            self._svc.delete(schedule.id)
            self._notify_refresh("recurring")

    def _generate_now(self):
        created = self._svc.apply_due_schedules()
        self._notify_refresh("transaction" if created else "recurring")
