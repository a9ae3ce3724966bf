from models.transaction import Transaction
from database.transaction_dao import TransactionDAO
from utils.constants import TRANSACTION_LIST_LIMIT, TRANSACTION_LIST_MAX, TRANSACTION_TYPES
from utils.date_helpers import parse_date, format_date


class TransactionService:
    def __init__(self, tx_dao: TransactionDAO):
        self._dao = tx_dao

    def search(
        self,
        type_filter: str | None = None,
        category_search: str | None = None,
        start_date: str | None = None,
        end_date: str | None = None,
        limit: int = TRANSACTION_LIST_LIMIT,
        offset: int = 0,
    ) -> list[Transaction]:
        """Newest first. Unknown type filters are ignored; limit is capped."""
        type_ = (type_filter or "").strip().lower()
        if type_ not in TRANSACTION_TYPES:
            type_ = None
        limit = max(0, min(int(limit), TRANSACTION_LIST_MAX))
        return self._dao.get_filtered(
            type_filter=type_,
            category_search=category_search.strip() if category_search else None,
            start_date=start_date.strip() if start_date else None,
            end_date=end_date.strip() if end_date else None,
            limit=limit,
            offset=max(0, int(offset)),
        )

    def get_by_id(self, tx_id: int) -> Transaction | None:
        return self._dao.get_by_id(tx_id)

    def get_for_schedule(self, recurring_id: int) -> list[Transaction]:
        return self._dao.get_by_recurring_id(recurring_id)

    def create(
        self,
        type_: str,
        amount: float,
        category: str,
        date: str,
        description: str = "",
        recurring_id: int | None = None,
    ) -> Transaction:
        type_, amount, category, date = self._validate(type_, amount, category, date)
        conn = self._dao._db.get_connection()
        try:
            tx = self._dao.create(
                type_=type_,
                amount=amount,
                category=category,
                date=date,
                description=(description or "").strip(),
                recurring_id=recurring_id,
            )
            conn.commit()
            return tx
        except Exception:
            conn.rollback()
            raise

    def delete(self, tx_id: int):
        self._dao.delete(tx_id)

    def _validate(self, type_, amount, category, date) -> tuple[str, float, str, str]:
        type_ = (type_ or "").strip().lower()
        if type_ not in TRANSACTION_TYPES:
            raise ValueError('Type must be either "income" or "expense".')
        try:
            amount = float(amount)
        except (TypeError, ValueError):
            raise ValueError("Amount must be a positive number.") from None
        if not amount > 0:
            raise ValueError("Amount must be a positive number.")
        category = (category or "").strip()
        if not category:
            raise ValueError("Category must not be empty.")
        d = parse_date(date)
        if not d:
            raise ValueError("Invalid date format. Use YYYY-MM-DD.")
        return type_, amount, category, format_date(d)
