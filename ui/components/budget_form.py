import customtkinter as ctk
from services.budget_service import BudgetService
from models.budget import Budget
from ui.components.confirm_dialog import center_on_master
from utils.currency import get_currency


class BudgetForm(ctk.CTkToplevel):
    """Add a category budget, or change an existing one's limit."""

    def __init__(
        self,
        master,
        budget_service: BudgetService,
        budget: Budget | None = None,
        **kwargs,
    ):
        super().__init__(master, **kwargs)
        self._svc = budget_service
        self._budget = budget
        self.saved = False

        self.title("Edit Budget" if budget else "New Budget")
        self.resizable(False, False)
        self.grid_columnconfigure(1, weight=1)

        r = 0
        ctk.CTkLabel(self, text="Category:").grid(
            row=r, column=0, padx=(16, 8), pady=(16, 4), sticky="e"
        )
        cat_names = budget_service.get_available_categories()
        current_cat = budget.display_name if budget else (cat_names[0] if cat_names else "")
        self._cat_var = ctk.StringVar(value=current_cat)
        ctk.CTkComboBox(
            self, values=cat_names, variable=self._cat_var,
            width=200, state="normal" if not budget else "disabled"
        ).grid(row=r, column=1, padx=(0, 16), pady=(16, 4), sticky="ew")
        r += 1

        # Limits are stored in INR; the label only tells the user which unit to type.
        symbol = get_currency("INR").symbol
        ctk.CTkLabel(self, text=f"Monthly Limit ({symbol}):").grid(
            row=r, column=0, padx=(16, 8), pady=4, sticky="e"
        )
        self._limit_var = ctk.StringVar(
            value=f"{budget.limit_amount:.2f}" if budget else ""
        )
        ctk.CTkEntry(self, textvariable=self._limit_var, width=200).grid(
            row=r, column=1, padx=(0, 16), pady=4, sticky="ew"
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

    def _on_save(self):
        try:
            self._svc.upsert(self._cat_var.get(), self._limit_var.get())
        except ValueError as e:
            self._error_var.set(str(e))
            return
        self.saved = True
        self.destroy()
