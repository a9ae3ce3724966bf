from models.budget import Budget
from database.budget_dao import BudgetDAO
from database.transaction_dao import TransactionDAO
from utils.constants import BUDGET_ALERT_THRESHOLD, EXPENSE_CATEGORIES
from utils.date_helpers import current_month_str


class BudgetService:
    def __init__(
        self,
        budget_dao: BudgetDAO,
        tx_dao: TransactionDAO,
        alert_threshold: float = BUDGET_ALERT_THRESHOLD,
    ):
        self._budget_dao = budget_dao
        self._tx_dao = tx_dao
        self._alert_threshold = alert_threshold

    def get_budget_status(self, month: str | None = None) -> list[Budget]:
        """Return all budgets with the month's spending filled in."""
        if month is None:
            month = current_month_str()
        budgets = self._budget_dao.get_all()
        spending = self._tx_dao.get_spending_by_category(month)
        for b in budgets:
            b.spent_amount = spending.get(b.category, 0.0)
            b.alert_threshold = self._alert_threshold
        return budgets

    def get_alert_counts(self, month: str | None = None) -> dict[str, int]:
        counts = {"warning": 0, "danger": 0}
        for b in self.get_budget_status(month):
            if b.status in counts:
                counts[b.status] += 1
        return counts

    def upsert(self, category: str, limit_amount: float) -> Budget:
        category = (category or "").strip().lower()
        if not category:
            raise ValueError("Category is required and must not be empty.")
        try:
            limit_amount = float(limit_amount)
        except (TypeError, ValueError):
            raise ValueError("Limit must be a positive number.") from None
        if not limit_amount > 0:
            raise ValueError("Limit must be a positive number.")
        return self._budget_dao.upsert(category, limit_amount)

    def delete(self, budget_id: int):
        self._budget_dao.delete(budget_id)

    def get_available_categories(self) -> list[str]:
        """Expense categories that don't have a budget yet."""
        taken = {b.category for b in self._budget_dao.get_all()}
        return [c for c in EXPENSE_CATEGORIES if c.lower() not in taken]
