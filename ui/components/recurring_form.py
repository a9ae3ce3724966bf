import customtkinter as ctk
from services.recurring_service import RecurringService
from models.recurring_schedule import RecurringSchedule
from ui.components.confirm_dialog import center_on_master
from ui.components.date_picker import DatePickerWidget
from utils.constants import FREQUENCIES, TRANSACTION_TYPES, categories_for_type
from utils.date_helpers import today_str


class RecurringForm(ctk.CTkToplevel):
    """Add or edit a recurring schedule."""

    def __init__(
        self,
        master,
        recurring_service: RecurringService,
        schedule: RecurringSchedule | None = None,
        date_format: str = "MM/DD/YYYY",
        **kwargs,
    ):
        super().__init__(master, **kwargs)
        self._svc = recurring_service
        self._schedule = schedule
        self._date_format = date_format
        self.saved = False

        self.title("Edit Recurring Transaction" if schedule else "New Recurring Transaction")
        self.resizable(False, False)
        self.grid_columnconfigure(1, weight=1)

        r = 0

        self._add_label("Type:", r)
        self._type_var = ctk.StringVar(value=schedule.type if schedule else "expense")
        type_frame = ctk.CTkFrame(self, fg_color="transparent")
        type_frame.grid(row=r, column=1, padx=(0, 16), pady=4, sticky="w")
        for t in TRANSACTION_TYPES:
            ctk.CTkRadioButton(
                type_frame, text=t.title(),
                variable=self._type_var, value=t,
                command=self._on_type_change,
            ).pack(side="left", padx=4)
        r += 1

        self._add_label("Amount:", r)
        self._amount_var = ctk.StringVar(value=f"{schedule.amount:.2f}" if schedule else "")
        ctk.CTkEntry(self, textvariable=self._amount_var, width=220).grid(
            row=r, column=1, padx=(0, 16), pady=4, sticky="ew"
        )
        r += 1

        # Free text is allowed; the list only offers suggestions.
        self._add_label("Category:", r)
        cats = categories_for_type(self._type_var.get())
        self._cat_var = ctk.StringVar(value=schedule.category if schedule else cats[0])
        self._cat_combo = ctk.CTkComboBox(
            self, values=cats, variable=self._cat_var, width=220
        )
        self._cat_combo.grid(row=r, column=1, padx=(0, 16), pady=4, sticky="ew")
        r += 1

        self._add_label("Description:", r)
        self._desc_var = ctk.StringVar(value=(schedule.description or "") if schedule else "")
        ctk.CTkEntry(self, textvariable=self._desc_var, width=220).grid(
            row=r, column=1, padx=(0, 16), pady=4, sticky="ew"
        )
        r += 1

        self._add_label("Frequency:", r)
        self._freq_var = ctk.StringVar(value=schedule.frequency if schedule else "monthly")
        ctk.CTkComboBox(
            self, values=FREQUENCIES, variable=self._freq_var,
            width=220, state="readonly",
        ).grid(row=r, column=1, padx=(0, 16), pady=4, sticky="ew")
        r += 1

        self._add_label("Start Date:", r)
        self._start_picker = DatePickerWidget(
            self,
            initial_date=schedule.start_date if schedule else today_str(),
            date_format=self._date_format,
        )
        self._start_picker.grid(row=r, column=1, padx=(0, 16), pady=4, sticky="w")
        r += 1

        self._add_label("End Date:", r)
        self._end_picker = DatePickerWidget(
            self,
            initial_date=(schedule.end_date or "") if schedule else "",
            date_format=self._date_format,
        )
        self._end_picker.grid(row=r, column=1, padx=(0, 16), pady=4, sticky="w")
        ctk.CTkLabel(self, text="(optional)", text_color="gray60", font=ctk.CTkFont(size=11)).grid(
            row=r, column=1, padx=(160, 0), pady=4, sticky="w"
        )
        r += 1

        self._active_var = ctk.BooleanVar(value=schedule.is_active if schedule else True)
        ctk.CTkCheckBox(self, text="Active", variable=self._active_var).grid(
            row=r, column=1, padx=(0, 16), pady=4, sticky="w"
        )
        r += 1

        self._error_var = ctk.StringVar()
        ctk.CTkLabel(
            self, textvariable=self._error_var,
            text_color="#F44336", wraplength=280, anchor="w"
        ).grid(row=r, column=0, columnspan=2, padx=16, pady=(0, 4), sticky="ew")
        r += 1

        btn_frame = ctk.CTkFrame(self, fg_color="transparent")
        btn_frame.grid(row=r, column=0, columnspan=2, padx=16, pady=(4, 16), sticky="ew")
        ctk.CTkButton(
            btn_frame, text="Cancel", width=90,
            fg_color="transparent", border_width=1,
            text_color=("gray10", "gray90"),
            command=self.destroy,
        ).pack(side="left")
        ctk.CTkButton(btn_frame, text="Save", width=90, command=self._on_save).pack(side="right")

        self.transient(master)
        self.grab_set()
        center_on_master(self)

    def _add_label(self, text, row):
        ctk.CTkLabel(self, text=text).grid(
            row=row, column=0, padx=(16, 8), pady=4, sticky="e"
        )

    def _on_type_change(self):
        cats = categories_for_type(self._type_var.get())
        self._cat_combo.configure(values=cats)
        if self._cat_var.get() not in cats:
            self._cat_var.set(cats[0])
            self._cat_combo.set(cats[0])

    def _on_save(self):
        if not self._start_picker.is_valid():
            self._error_var.set("Start date must be a valid date.")
            return
        end_date = self._end_picker.get() or None
        if end_date and not self._end_picker.is_valid():
            self._error_var.set("End date must be a valid date.")
            return

        fields = dict(
            type_=self._type_var.get(),
            amount=self._amount_var.get(),
            category=self._cat_var.get(),
            frequency=self._freq_var.get(),
            start_date=self._start_picker.get(),
            description=self._desc_var.get(),
            end_date=end_date,
            is_active=self._active_var.get(),
        )
        try:
            if self._schedule:
                self._svc.update(self._schedule.id, **fields)
            else:
                self._svc.create(**fields)
        except ValueError as e:
            self._error_var.set(str(e))
            return
        self.saved = True
        self.destroy()
