import customtkinter as ctk
from models.transaction import Transaction
from services.transaction_service import TransactionService
from services.budget_service import BudgetService
from services.recurring_service import RecurringService
from services.report_service import ReportService
from database.db_manager import DatabaseManager
from ui.components.alert_banner import AlertBanner
from ui.tabs.dashboard_tab import DashboardTab
from ui.tabs.transactions_tab import TransactionsTab
from ui.tabs.budgets_tab import BudgetsTab
from ui.tabs.recurring_tab import RecurringTab
from ui.tabs.settings_tab import SettingsTab
from utils.constants import APP_NAME, APP_WIDTH, APP_HEIGHT


_REFRESH_SCOPES: dict[str, set[str]] = {
    "transaction": {"dashboard", "transactions", "budgets", "recurring"},
    "budget":      {"budgets"},
    "recurring":   {"recurring"},
    "settings":    {"settings"},
    "full":        {"dashboard", "transactions", "budgets", "recurring", "settings"},
}


class AppWindow(ctk.CTk):
    def __init__(
        self,
        tx_service: TransactionService,
        budget_service: BudgetService,
        recurring_service: RecurringService,
        report_service: ReportService,
        db: DatabaseManager,
        startup_transactions: list[Transaction] | None = None,
        date_format: str = "MM/DD/YYYY",
        currency_code: str = "INR",
        **kwargs,
    ):
        super().__init__(**kwargs)
        self._tx_svc = tx_service
        self._budget_svc = budget_service
        self._recurring_svc = recurring_service
        self._report_svc = report_service
        self._db = db
        self._startup_transactions = startup_transactions or []
        self._date_format = date_format
        self._currency_code = currency_code

        self.title(APP_NAME)
        self.minsize(APP_WIDTH, APP_HEIGHT)
        self.geometry(f"{APP_WIDTH}x{APP_HEIGHT}")

        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(1, weight=1)

        self._build_banner_area()
        self._build_tabs()

        if self._startup_transactions:
            count = len(self._startup_transactions)
            self.after(300, lambda: self._show_recurring_banner(count))
        self.after(400, self._show_budget_banner)

    def _build_banner_area(self):
        self._banner_frame = ctk.CTkFrame(self, fg_color="transparent", height=0)
        self._banner_frame.grid(row=0, column=0, sticky="ew", padx=8)

    def _build_tabs(self):
        self._tabview = ctk.CTkTabview(self)
        self._tabview.grid(row=1, column=0, sticky="nsew", padx=8, pady=(0, 8))

        for tab_name in ("Dashboard", "Transactions", "Budgets", "Recurring", "Settings"):
            self._tabview.add(tab_name)
            self._tabview.tab(tab_name).grid_columnconfigure(0, weight=1)
            self._tabview.tab(tab_name).grid_rowconfigure(0, weight=1)

        self._dashboard_tab = DashboardTab(
            self._tabview.tab("Dashboard"),
            report_service=self._report_svc,
            date_format=self._date_format,
            currency_code=self._currency_code,
        )
        self._dashboard_tab.grid(row=0, column=0, sticky="nsew")

        self._transactions_tab = TransactionsTab(
            self._tabview.tab("Transactions"),
            tx_service=self._tx_svc,
            notify_refresh=self.notify_tabs_refresh,
            date_format=self._date_format,
            currency_code=self._currency_code,
        )
        self._transactions_tab.grid(row=0, column=0, sticky="nsew")

        self._budgets_tab = BudgetsTab(
            self._tabview.tab("Budgets"),
            budget_service=self._budget_svc,
            notify_refresh=self.notify_tabs_refresh,
            currency_code=self._currency_code,
        )
        self._budgets_tab.grid(row=0, column=0, sticky="nsew")

        self._recurring_tab = RecurringTab(
            self._tabview.tab("Recurring"),
            recurring_service=self._recurring_svc,
            notify_refresh=self.notify_tabs_refresh,
            date_format=self._date_format,
            currency_code=self._currency_code,
        )
        self._recurring_tab.grid(row=0, column=0, sticky="nsew")

        self._settings_tab = SettingsTab(
            self._tabview.tab("Settings"),
            db=self._db,
            notify_refresh=self.notify_tabs_refresh,
        )
        self._settings_tab.grid(row=0, column=0, sticky="nsew")

    def notify_tabs_refresh(self, scope: str = "full"):
        tabs = _REFRESH_SCOPES.get(scope, _REFRESH_SCOPES["full"])
        if "dashboard"    in tabs: self._dashboard_tab.refresh()
        if "transactions" in tabs: self._transactions_tab.refresh()
        if "budgets"      in tabs: self._budgets_tab.refresh()
        if "recurring"    in tabs: self._recurring_tab.refresh()
        if "settings"     in tabs: self._settings_tab.refresh()

    def _show_recurring_banner(self, count: int):
        banner = AlertBanner(
            self._banner_frame,
            message=f"{count} recurring transaction{'s were' if count != 1 else ' was'} added automatically.",
            severity="info",
            action_text="View",
            action_cmd=lambda: self._tabview.set("Transactions"),
        )
        banner.pack(fill="x", pady=2)

    def _show_budget_banner(self):
        counts = self._budget_svc.get_alert_counts()
        if not counts["danger"] and not counts["warning"]:
            return
        parts = []
        if counts["danger"]:
            parts.append(f"{counts['danger']} over limit")
        if counts["warning"]:
            parts.append(f"{counts['warning']} near limit")
        banner = AlertBanner(
            self._banner_frame,
            message="Budgets this month: " + ", ".join(parts) + ".",
            severity="danger" if counts["danger"] else "warning",
            action_text="View",
            action_cmd=lambda: self._tabview.set("Budgets"),
        )
        banner.pack(fill="x", pady=2)
