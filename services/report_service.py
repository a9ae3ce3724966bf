from datetime import date
from models.transaction import Transaction
from database.transaction_dao import TransactionDAO
from utils.date_helpers import month_range, today, year_range

PERIODS = ("month", "year", "overall")


class ReportService:
    """Dashboard aggregates over a month, a year, or all time."""

    def __init__(self, tx_dao: TransactionDAO):
        self._tx_dao = tx_dao

    @staticmethod
    def period_range(
        period: str = "month", year: int | None = None, month: int | None = None
    ) -> tuple[str, str] | None:
        """Return inclusive (start, end) YYYY-MM-DD bounds, or None for 'overall'.

        `month` is 1-12; year/month default to the current ones.
        """
        if period not in PERIODS:
            raise ValueError(f"Invalid period: {period}")
        if period == "overall":
            return None
        ref = today()
        year = year or ref.year
        if period == "year":
            return year_range(year)
        return month_range(f"{year}-{(month or ref.month):02d}")

    @staticmethod
    def period_label(
        period: str = "month", year: int | None = None, month: int | None = None
    ) -> str:
        if period == "overall":
            return "All Time"
        ref = today()
        if period == "year":
            return str(year or ref.year)
        return date(year or ref.year, month or ref.month, 1).strftime("%B %Y")

    def get_period_stats(
        self,
        period: str = "month",
        year: int | None = None,
        month: int | None = None,
        type_filter: str = "all",
        category: str = "all",
    ) -> dict:
        """Return {income, expense, net} for the period and filters."""
        bounds = self.period_range(period, year, month) or (None, None)
        totals = self._tx_dao.get_totals(bounds[0], bounds[1], type_filter, category)
        totals["net"] = totals["income"] - totals["expense"]
        return totals

    def get_category_breakdown(
        self,
        period: str = "month",
        year: int | None = None,
        month: int | None = None,
        type_filter: str = "all",
        category: str = "all",
    ) -> list[dict]:
        """Return [{category, total}, ...] of expenses, largest first."""
        if type_filter == "income":
            return []
        bounds = self.period_range(period, year, month) or (None, None)
        return self._tx_dao.get_expense_by_category(bounds[0], bounds[1], category)

    def get_overall_stats(self, period_stats: dict | None = None) -> dict:
        """Lifetime net worth plus the savings rate of `period_stats` (percent)."""
        lifetime = self._tx_dao.get_totals()
        stats = period_stats or lifetime
        income = stats.get("income", 0.0)
        expense = stats.get("expense", 0.0)
        return {
            "net_worth": lifetime["income"] - lifetime["expense"],
            "savings_rate": (income - expense) / income * 100 if income > 0 else 0.0,
        }

    def get_monthly_chart_data(self, months: int = 6) -> list[dict]:
        """Return list of {month, income, expense, net} for bar chart."""
        rows = self._tx_dao.get_monthly_totals(months)
        for row in rows:
            row["net"] = row.get("income", 0) - row.get("expense", 0)
        return rows

    def get_available_years(self) -> list[int]:
        return self._tx_dao.get_years()

    def get_transactions(
        self,
        period: str = "month",
        year: int | None = None,
        month: int | None = None,
        type_filter: str = "all",
        category: str = "all",
    ) -> list[Transaction]:
        bounds = self.period_range(period, year, month) or (None, None)
        return self._tx_dao.get_filtered(
            type_filter=type_filter,
            category=category,
            start_date=bounds[0],
            end_date=bounds[1],
        )
