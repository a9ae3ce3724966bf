import customtkinter as ctk
from services.transaction_service import TransactionService
from ui.components.confirm_dialog import center_on_master
from ui.components.date_picker import DatePickerWidget
from utils.constants import TRANSACTION_TYPES, categories_for_type
from utils.date_helpers import today_str


class TransactionForm(ctk.CTkToplevel):
    """Record a one-off income or expense."""

    _last_date: str = today_str()  # reset to today on each app launch

    def __init__(
        self,
        master,
        tx_service: TransactionService,
        initial_type: str = "expense",
        date_format: str = "MM/DD/YYYY",
        **kwargs,
    ):
        super().__init__(master, **kwargs)
        self._tx_svc = tx_service
        self._date_format = date_format
        self.saved = False

        self.title("Add Transaction")
        self.resizable(False, False)
        self.grid_columnconfigure(1, weight=1)

        r = 0
        self._label("Type:", r)
        self._type_var = ctk.StringVar(value=initial_type)
        type_frame = ctk.CTkFrame(self, fg_color="transparent")
        type_frame.grid(row=r, column=1, padx=(0, 16), pady=4, sticky="w")
        for t in TRANSACTION_TYPES:
            ctk.CTkRadioButton(
                type_frame, text=t.title(),
                variable=self._type_var, value=t,
                command=self._on_type_change,
            ).pack(side="left", padx=4)
        r += 1

        self._label("Amount:", r)
        self._amount_var = ctk.StringVar()
        ctk.CTkEntry(self, textvariable=self._amount_var, width=200).grid(
            row=r, column=1, padx=(0, 16), pady=4, sticky="ew"
        )
        r += 1

        self._label("Category:", r)
        cats = categories_for_type(initial_type)
        self._cat_var = ctk.StringVar(value=cats[0])
        self._cat_combo = ctk.CTkComboBox(
            self, values=cats, variable=self._cat_var, width=200
        )
        self._cat_combo.grid(row=r, column=1, padx=(0, 16), pady=4, sticky="ew")
        r += 1

        self._label("Description:", r)
        self._desc_var = ctk.StringVar()
        ctk.CTkEntry(self, textvariable=self._desc_var, width=200).grid(
            row=r, column=1, padx=(0, 16), pady=4, sticky="ew"
        )
        r += 1

        self._label("Date:", r)
        self._date_picker = DatePickerWidget(
            self, initial_date=TransactionForm._last_date, date_format=self._date_format,
        )
        self._date_picker.grid(row=r, column=1, padx=(0, 16), pady=4, sticky="w")
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
        ctk.CTkButton(btn_frame, text="Save", width=110, command=self._on_save).pack(side="right")

        self.transient(master)
        self.grab_set()
        center_on_master(self)

    def _label(self, text, row):
        ctk.CTkLabel(self, text=text).grid(
            row=row, column=0, padx=(16, 8), pady=4, sticky="e"
        )

    def _on_type_change(self):
        cats = categories_for_type(self._type_var.get())
        self._cat_combo.configure(values=cats)
        self._cat_var.set(cats[0])
        self._cat_combo.set(cats[0])

    def _on_save(self):
        if not self._date_picker.is_valid():
            self._error_var.set("Invalid date format. Use YYYY-MM-DD.")
            return
        try:
            self._tx_svc.create(
                type_=self._type_var.get(),
                amount=self._amount_var.get(),
                category=self._cat_var.get(),
                date=self._date_picker.get(),
                description=self._desc_var.get(),
            )
        except ValueError as e:
            self._error_var.set(str(e))
            return
        TransactionForm._last_date = self._date_picker.get()
        self.saved = True
        self.destroy()
