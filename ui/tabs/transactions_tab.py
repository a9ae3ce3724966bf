import customtkinter as ctk
from services.transaction_service import TransactionService
from ui.components.transaction_form import TransactionForm
from ui.components.confirm_dialog import confirm
from ui.components.date_picker import DatePickerWidget
from utils.constants import TRANSACTION_LIST_LIMIT
from utils.currency import format_currency
from utils.date_helpers import format_display_date


class TransactionsTab(ctk.CTkFrame):
    """Searchable list of manual and auto-generated transactions."""

    _COLUMNS = [
        ("Date", 95), ("Type", 70), ("Category", 130),
        ("Description", 260), ("Amount", 110), ("", 40),
    ]

    def __init__(
        self,
        master,
        tx_service: TransactionService,
        notify_refresh,
        date_format: str = "MM/DD/YYYY",
        currency_code: str = "INR",
        **kwargs,
    ):
        super().__init__(master, fg_color="transparent", **kwargs)
        self._tx_svc = tx_service
        self._notify_refresh = notify_refresh
        self._date_format = date_format
        self._currency_code = currency_code

        self._type_var = ctk.StringVar(value="All")
        self._search_var = ctk.StringVar()
        self._search_var.trace_add("write", lambda *_: self._load())

        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(2, weight=1)

        self._build_filter_bar()
        self._build_header()
        self._build_list()
        self._load()

    def refresh(self):
        self._load()

    def _build_filter_bar(self):
        bar = ctk.CTkFrame(self, fg_color=("gray88", "gray18"), corner_radius=8)
        bar.grid(row=0, column=0, sticky="ew", padx=8, pady=(8, 0))

        ctk.CTkSegmentedButton(
            bar, values=["All", "Income", "Expense"],
            variable=self._type_var, command=lambda _v: self._load(),
        ).pack(side="left", padx=(12, 8), pady=8)

        ctk.CTkEntry(
            bar, textvariable=self._search_var, width=160,
            placeholder_text="Search category…",
        ).pack(side="left", padx=4)

        ctk.CTkLabel(bar, text="From:").pack(side="left", padx=(12, 4))
        self._from_picker = DatePickerWidget(bar, date_format=self._date_format)
        self._from_picker.pack(side="left")
        ctk.CTkLabel(bar, text="To:").pack(side="left", padx=(8, 4))
        self._to_picker = DatePickerWidget(bar, date_format=self._date_format)
        self._to_picker.pack(side="left")
        ctk.CTkButton(bar, text="Apply", width=60, command=self._load).pack(side="left", padx=8)

        ctk.CTkButton(bar, text="+ Add", width=80, command=self._open_add).pack(
            side="right", padx=8
        )
        self._count_label = ctk.CTkLabel(bar, text="", text_color="gray60")
        self._count_label.pack(side="right", padx=8)

    def _build_header(self):
        hdr = ctk.CTkFrame(self, fg_color=("gray82", "gray22"), corner_radius=0)
        hdr.grid(row=1, column=0, sticky="ew", padx=8, pady=(8, 0))
        for i, (col, w) in enumerate(self._COLUMNS):
            ctk.CTkLabel(
                hdr, text=col, width=w, anchor="w",
                font=ctk.CTkFont(weight="bold"),
            ).grid(row=0, column=i, padx=4, pady=4)

    def _build_list(self):
        self._scroll = ctk.CTkScrollableFrame(self)
        self._scroll.grid(row=2, column=0, sticky="nsew", padx=8, pady=(0, 8))
        self._scroll.grid_columnconfigure(0, weight=1)

    def _load(self):
        for w in self._scroll.winfo_children():
            w.destroy()

        start = self._from_picker.get() if self._from_picker.is_valid() else None
        end = self._to_picker.get() if self._to_picker.is_valid() else None
        transactions = self._tx_svc.search(
            type_filter=self._type_var.get(),
            category_search=self._search_var.get(),
            start_date=start,
            end_date=end,
        )
        suffix = "+" if len(transactions) >= TRANSACTION_LIST_LIMIT else ""
        self._count_label.configure(text=f"{len(transactions)}{suffix} shown")

        if not transactions:
            ctk.CTkLabel(
                self._scroll, text="No transactions match these filters.",
                text_color="gray60",
            ).grid(row=0, column=0, pady=40)
            return

        for idx, tx in enumerate(transactions):
            self._add_row(idx, tx)

    def _add_row(self, idx, tx):
        bg = ("gray92", "gray17") if idx % 2 == 0 else ("gray88", "gray21")
        row = ctk.CTkFrame(self._scroll, fg_color=bg, corner_radius=4)
        row.grid(row=idx, column=0, sticky="ew", pady=1, padx=2)

        is_income = tx.type == "income"
        sign = "+" if is_income else "-"
        cells = [
            format_display_date(tx.date, self._date_format),
            tx.type.title(),
            tx.category,
            ("↻ " if tx.is_auto else "") + (tx.description or ""),
            f"{sign}{format_currency(tx.amount, self._currency_code)}",
        ]
        for i, text in enumerate(cells):
            label = ctk.CTkLabel(row, text=text, width=self._COLUMNS[i][1], anchor="w")
            if i == 4:
                label.configure(text_color="#4CAF50" if is_income else "#F44336")
            label.grid(row=0, column=i, padx=4, pady=3)

        ctk.CTkButton(
            row, text="✕", width=28, height=24,
            fg_color="transparent", text_color="#F44336",
            command=lambda t=tx: self._delete(t),
        ).grid(row=0, column=len(cells), padx=4)

    def _open_add(self):
        form = TransactionForm(
            self.winfo_toplevel(), self._tx_svc, date_format=self._date_format,
        )
        self.wait_window(form)
        if form.saved:
            self._notify_refresh("transaction")

    def _delete(self, tx):
        message = f"Delete this {tx.type} of {format_currency(tx.amount, self._currency_code)}?"
        if tx.is_auto:
            message += "\nIt was generated by a recurring schedule and will not be recreated."
        if confirm(self.winfo_toplevel(), "Delete Transaction", message):
            self._tx_svc.delete(tx.id)
            self._notify_refresh("transaction")
