import customtkinter as ctk
from services.budget_service import BudgetService
from ui.components.budget_form import BudgetForm
from ui.components.confirm_dialog import confirm
from utils.constants import STATUS_COLORS
from utils.currency import format_currency
from utils.date_helpers import current_month_str, friendly_month


class BudgetsTab(ctk.CTkFrame):
    """Per-category monthly limits against this month's spending."""

    def __init__(
        self,
        master,
        budget_service: BudgetService,
        notify_refresh,
        currency_code: str = "INR",
        **kwargs,
    ):
        super().__init__(master, fg_color="transparent", **kwargs)
        self._svc = budget_service
        self._notify_refresh = notify_refresh
        self._currency_code = currency_code

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
        self._title = ctk.CTkLabel(
            bar, text="", font=ctk.CTkFont(size=14, weight="bold"),
        )
        self._title.pack(side="left", padx=12, pady=8)
        self._summary = ctk.CTkLabel(bar, text="", text_color="gray60")
        self._summary.pack(side="left", padx=8)
        ctk.CTkButton(bar, text="+ Add Budget", command=self._open_add).pack(
            side="right", padx=8, pady=6
        )

    def _build_list(self):
        self._scroll = ctk.CTkScrollableFrame(self)
        self._scroll.grid(row=1, column=0, sticky="nsew", padx=8, pady=8)
        self._scroll.grid_columnconfigure(0, weight=1)

    def _load(self):
        for w in self._scroll.winfo_children():
            w.destroy()

        month = current_month_str()
        self._title.configure(text=f"Budgets · {friendly_month(month)}")
        budgets = self._svc.get_budget_status(month)

        counts = {"warning": 0, "danger": 0}
        for b in budgets:
            if b.status in counts:
                counts[b.status] += 1
        self._summary.configure(
            text=f"{counts['danger']} over limit, {counts['warning']} near limit"
            if budgets else ""
        )

        if not budgets:
            ctk.CTkLabel(
                self._scroll,
                text="No budgets yet. Click '+ Add Budget' to create one.",
                text_color="gray60",
            ).grid(row=0, column=0, pady=40)
            return

        for idx, b in enumerate(budgets):
            self._add_budget_card(idx, b)

    def _add_budget_card(self, idx, b):
        card = ctk.CTkFrame(
            self._scroll, fg_color=("gray90", "gray20"), corner_radius=8
        )
        card.grid(row=idx, column=0, sticky="ew", padx=4, pady=4)
        card.grid_columnconfigure(0, weight=1)

        hdr = ctk.CTkFrame(card, fg_color="transparent")
        hdr.grid(row=0, column=0, sticky="ew", padx=12, pady=(10, 4))
        hdr.grid_columnconfigure(0, weight=1)

        ctk.CTkLabel(
            hdr, text=b.display_name,
            font=ctk.CTkFont(size=13, weight="bold"), anchor="w",
        ).grid(row=0, column=0, sticky="w")

        color = STATUS_COLORS[b.status]
        ctk.CTkLabel(hdr, text=f"{b.percentage * 100:.1f}%", text_color=color).grid(
            row=0, column=1, padx=(8, 0)
        )
        ctk.CTkButton(
            hdr, text="Edit", width=50, height=24,
            fg_color="transparent", border_width=1,
            text_color=("gray10", "gray90"),
            command=lambda budget=b: self._open_edit(budget),
        ).grid(row=0, column=2, padx=(8, 0))
        ctk.CTkButton(
            hdr, text="✕", width=28, height=24,
            fg_color="transparent", text_color="#F44336",
            command=lambda budget=b: self._delete(budget),
        ).grid(row=0, column=3, padx=(4, 0))

        fmt = lambda v: format_currency(v, self._currency_code)
        ctk.CTkLabel(
            card,
            text=f"Spent: {fmt(b.spent_amount)}  /  Limit: {fmt(b.limit_amount)}  |  Remaining: {fmt(b.remaining)}",
            text_color="gray60", anchor="w",
        ).grid(row=1, column=0, padx=12, sticky="ew")

        bar = ctk.CTkProgressBar(card, progress_color=color)
        bar.grid(row=2, column=0, padx=12, pady=(4, 10), sticky="ew")
        bar.set(min(b.percentage, 1.0))

    def _open_add(self):
        form = BudgetForm(self.winfo_toplevel(), self._svc)
        self.wait_window(form)
        if form.saved:
            self._notify_refresh("budget")

    def _open_edit(self, budget):
        form = BudgetForm(self.winfo_toplevel(), self._svc, budget=budget)
        self.wait_window(form)
        if form.saved:
            self._notify_refresh("budget")

    def _delete(self, budget):
        if confirm(
            self.winfo_toplevel(), "Delete Budget",
            f"Delete the budget for {budget.display_name}?",
        ):
            self._svc.delete(budget.id)
            self._notify_refresh("budget")
