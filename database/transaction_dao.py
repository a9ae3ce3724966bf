from typing import Optional
from database.db_manager import DatabaseManager
from models.transaction import Transaction


class TransactionDAO:
    def __init__(self, db: DatabaseManager):
        self._db = db

    def _row_to_model(self, row) -> Transaction:
        return Transaction(
            id=row["id"],
            type=row["type"],
            amount=row["amount"],
            category=row["category"],
            description=row["description"] or "",
            date=row["date"],
            recurring_id=row["recurring_id"],
            created_at=row["created_at"],
        )

    @staticmethod
    def _filters(
        start_date: str | None = None,
        end_date: str | None = None,
        type_filter: str | None = None,
        category: str | None = None,
        category_search: str | None = None,
    ) -> tuple[str, list]:
        """Build a WHERE clause shared by the listing and aggregate queries.
        start/end are inclusive YYYY-MM-DD bounds; category is an exact match,
        category_search a substring match."""
        sql = " WHERE 1=1"
        params: list = []
        if start_date:
            sql += " AND date >= ?"
            params.append(start_date)
        if end_date:
            sql += " AND date <= ?"
            params.append(end_date)
        if type_filter and type_filter != "all":
            sql += " AND type = ?"
            params.append(type_filter)
        if category and category != "all":
            sql += " AND category = ?"
            params.append(category)
        if category_search:
            sql += " AND category LIKE ?"
            params.append(f"%{category_search}%")
        return sql, params

    def get_filtered(
        self,
        type_filter: str | None = None,
        category: str | None = None,
        category_search: str | None = None,
        start_date: str | None = None,
        end_date: str | None = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[Transaction]:
        conn = self._db.get_connection()
        where, params = self._filters(
            start_date, end_date, type_filter, category, category_search
        )
        sql = "SELECT * FROM transactions" + where + " ORDER BY date DESC, id DESC"
        if limit is not None:
            sql += " LIMIT ? OFFSET ?"
            params.extend([limit, offset])
        rows = conn.execute(sql, params).fetchall()
        return [self._row_to_model(r) for r in rows]

    def get_by_id(self, tx_id: int) -> Optional[Transaction]:
        conn = self._db.get_connection()
        row = conn.execute(
            "SELECT * FROM transactions WHERE id = ?", (tx_id,)
        ).fetchone()
        return self._row_to_model(row) if row else None

    def get_by_recurring_id(self, recurring_id: int) -> list[Transaction]:
        conn = self._db.get_connection()
        rows = conn.execute(
            "SELECT * FROM transactions WHERE recurring_id = ? ORDER BY date ASC, id ASC",
            (recurring_id,),
        ).fetchall()
        return [self._row_to_model(r) for r in rows]

    def create(
        self,
        type_: str,
        amount: float,
        category: str,
        date: str,
        description: str = "",
        recurring_id: int | None = None,
    ) -> Transaction:
        """Insert without committing; callers own the transaction boundary."""
        conn = self._db.get_connection()
        cursor = conn.execute(
            """INSERT INTO transactions
               (type, amount, category, description, date, recurring_id)
               VALUES (?, ?, ?, ?, ?, ?)""",
            (type_, amount, category, description, date, recurring_id),
        )
        return self.get_by_id(cursor.lastrowid)

    def delete(self, tx_id: int):
        conn = self._db.get_connection()
        conn.execute("DELETE FROM transactions WHERE id = ?", (tx_id,))
        conn.commit()

    def get_totals(
        self,
        start_date: str | None = None,
        end_date: str | None = None,
        type_filter: str | None = None,
        category: str | None = None,
    ) -> dict:
        """Return income and expense totals for the filtered range."""
        conn = self._db.get_connection()
        where, params = self._filters(start_date, end_date, type_filter, category)
        row = conn.execute(
            """SELECT
                SUM(CASE WHEN type='income'  THEN amount ELSE 0 END) AS income,
                SUM(CASE WHEN type='expense' THEN amount ELSE 0 END) AS expense
               FROM transactions""" + where,
            params,
        ).fetchone()
        return {
            "income":  row["income"]  or 0.0,
            "expense": row["expense"] or 0.0,
        }

    def get_spending_by_category(self, month: str) -> dict[str, float]:
        """Sum of expense amounts per lower-cased category for the given month."""
        conn = self._db.get_connection()
        rows = conn.execute(
            """SELECT LOWER(TRIM(category)) AS category, SUM(amount) AS total
               FROM transactions
               WHERE type = 'expense'
                 AND strftime('%Y-%m', date) = ?
               GROUP BY LOWER(TRIM(category))""",
            (month,),
        ).fetchall()
        return {r["category"]: r["total"] for r in rows}

    def get_expense_by_category(
        self,
        start_date: str | None = None,
        end_date: str | None = None,
        category: str | None = None,
    ) -> list[dict]:
        conn = self._db.get_connection()
        where, params = self._filters(start_date, end_date, "expense", category)
        rows = conn.execute(
            """SELECT category, SUM(amount) AS total
               FROM transactions""" + where + """
               GROUP BY category
               ORDER BY total DESC, category ASC""",
            params,
        ).fetchall()
        return [dict(r) for r in rows]

    def get_monthly_totals(self, months: int = 6) -> list[dict]:
        """Return list of {month, income, expense} for the last N months with data."""
        conn = self._db.get_connection()
        rows = conn.execute(
            """SELECT strftime('%Y-%m', date) AS month,
                      SUM(CASE WHEN type='income' THEN amount ELSE 0 END) AS income,
                      SUM(CASE WHEN type='expense' THEN amount ELSE 0 END) AS expense
               FROM transactions
               GROUP BY month
               ORDER BY month DESC
               LIMIT ?""",
            (months,),
        ).fetchall()
        return [dict(r) for r in reversed(rows)]

    def get_years(self) -> list[int]:
        conn = self._db.get_connection()
        rows = conn.execute(
            """SELECT DISTINCT CAST(strftime('%Y', date) AS INTEGER) AS year
               FROM transactions
               WHERE date IS NOT NULL
               ORDER BY year DESC"""
        ).fetchall()
        return [r["year"] for r in rows if r["year"] is not None]
