import os
import sqlite3
import sys
import customtkinter as ctk

# Ensure project root is on sys.path when run directly
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from database.db_manager import DatabaseManager
from database.transaction_dao import TransactionDAO
from database.budget_dao import BudgetDAO
from database.recurring_dao import RecurringDAO

from services.transaction_service import TransactionService
from services.budget_service import BudgetService
from services.recurring_service import RecurringService
from services.report_service import ReportService

from ui.app_window import AppWindow
from utils.app_config import get_db_folder, get_log_level
from utils.constants import BUDGET_ALERT_THRESHOLD
from utils.currency import CURRENCIES
from utils.logging_setup import configure_logging, get_logger

logger = get_logger("main")


def _read_threshold(db: DatabaseManager) -> float:
    raw = db.get_setting("budget_alert_threshold", str(BUDGET_ALERT_THRESHOLD))
    try:
        value = float(raw)
    except ValueError:
        logger.warning("Ignoring invalid budget_alert_threshold %r", raw)
        return BUDGET_ALERT_THRESHOLD
    return value if 0 < value <= 1 else BUDGET_ALERT_THRESHOLD


def _read_currency(db: DatabaseManager) -> str:
    code = db.get_setting("currency_code", "INR")
    if code not in CURRENCIES:
        logger.warning("Unknown currency_code %r, falling back to INR", code)
        return "INR"
    return code


def main():
    # ── Bootstrap: logging and DB folder from pre-DB config ──────────────────
    configure_logging(fallback=get_log_level())
    db = DatabaseManager.open(db_folder=get_db_folder())

    # ── DAOs ─────────────────────────────────────────────────────────────────
    tx_dao = TransactionDAO(db)
    budget_dao = BudgetDAO(db)
    recurring_dao = RecurringDAO(db)

    # ── Services ─────────────────────────────────────────────────────────────
    tx_svc = TransactionService(tx_dao)
    budget_svc = BudgetService(budget_dao, tx_dao, alert_threshold=_read_threshold(db))
    recurring_svc = RecurringService(recurring_dao, tx_dao)
    report_svc = ReportService(tx_dao)

    # ── Apply due recurring schedules ────────────────────────────────────────
    # A failed pass must not keep the app from starting; the next launch retries.
    try:
        new_transactions = recurring_svc.apply_due_schedules()
    except sqlite3.Error:
        logger.exception("Recurring generation failed at startup")
        new_transactions = []

    # ── Appearance ───────────────────────────────────────────────────────────
    ctk.set_appearance_mode(db.get_setting("appearance_mode", "system"))
    ctk.set_default_color_theme("blue")

    # ── Launch UI ────────────────────────────────────────────────────────────
    app = AppWindow(
        tx_service=tx_svc,
        budget_service=budget_svc,
        recurring_service=recurring_svc,
        report_service=report_svc,
        db=db,
        startup_transactions=new_transactions,
        date_format=db.get_setting("date_format", "MM/DD/YYYY"),
        currency_code=_read_currency(db),
    )

    def on_close():
        db.close()
        app.destroy()

    app.protocol("WM_DELETE_WINDOW", on_close)
    app.mainloop()


if __name__ == "__main__":
    main()
