from typing import Optional
from database.db_manager import DatabaseManager
from models.budget import Budget


class BudgetDAO:
    def __init__(self, db: DatabaseManager):
        self._db = db

    def _row_to_model(self, row) -> Budget:
        return Budget(
            id=row["id"],
            category=row["category"],
            limit_amount=row["limit_amount"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )

    def get_all(self) -> list[Budget]:
        conn = self._db.get_connection()
        rows = conn.execute(
            "SELECT * FROM budgets ORDER BY category"
        ).fetchall()
        return [self._row_to_model(r) for r in rows]

    def get_by_category(self, category: str) -> Optional[Budget]:
        conn = self._db.get_connection()
        row = conn.execute(
            "SELECT * FROM budgets WHERE category = ?", (category,)
        ).fetchone()
        return self._row_to_model(row) if row else None

    def upsert(self, category: str, limit_amount: float) -> Budget:
        conn = self._db.get_connection()
        conn.execute(
            """INSERT INTO budgets(category, limit_amount)
               VALUES (?, ?)
               ON CONFLICT(category)
               DO UPDATE SET limit_amount = excluded.limit_amount,
                             updated_at   = datetime('now')""",
            (category, limit_amount),
        )
        conn.commit()
        return self.get_by_category(category)

    def delete(self, budget_id: int):
        conn = self._db.get_connection()
        conn.execute("DELETE FROM budgets WHERE id = ?", (budget_id,))
        conn.commit()
