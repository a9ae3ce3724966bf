from typing import Optional
from database.db_manager import DatabaseManager
from models.recurring_schedule import RecurringSchedule


class RecurringDAO:
    def __init__(self, db: DatabaseManager):
        self._db = db

    def _row_to_model(self, row) -> RecurringSchedule:
        return RecurringSchedule(
            id=row["id"],
            type=row["type"],
            amount=row["amount"],
            category=row["category"],
            description=row["description"],
            frequency=row["frequency"],
            start_date=row["start_date"],
            end_date=row["end_date"],
            last_generated=row["last_generated"],
            is_active=bool(row["is_active"]),
            created_at=row["created_at"],
        )

    def get_all(
        self, is_active: bool | None = None, type_filter: str | None = None
    ) -> list[RecurringSchedule]:
        conn = self._db.get_connection()
        sql = "SELECT * FROM recurring_transactions WHERE 1=1"
        params: list = []
        if is_active is not None:
            sql += " AND is_active = ?"
            params.append(1 if is_active else 0)
        if type_filter:
            sql += " AND type = ?"
            params.append(type_filter)
        sql += " ORDER BY created_at DESC, id DESC"
        rows = conn.execute(sql, params).fetchall()
        return [self._row_to_model(r) for r in rows]

    def get_active(self) -> list[RecurringSchedule]:
        conn = self._db.get_connection()
        rows = conn.execute(
            "SELECT * FROM recurring_transactions WHERE is_active = 1 ORDER BY id"
        ).fetchall()
        return [self._row_to_model(r) for r in rows]

    def get_by_id(self, schedule_id: int) -> Optional[RecurringSchedule]:
        conn = self._db.get_connection()
        row = conn.execute(
            "SELECT * FROM recurring_transactions WHERE id = ?", (schedule_id,)
        ).fetchone()
        return self._row_to_model(row) if row else None

    def create(
        self,
        type_: str,
        amount: float,
        category: str,
        frequency: str,
        start_date: str,
        description: str | None = None,
        end_date: str | None = None,
        is_active: bool = True,
    ) -> RecurringSchedule:
        conn = self._db.get_connection()
        cursor = conn.execute(
            """INSERT INTO recurring_transactions
               (type, amount, category, description, frequency,
                start_date, end_date, last_generated, is_active)
               VALUES (?, ?, ?, ?, ?, ?, ?, NULL, ?)""",
            (
                type_, amount, category, description, frequency,
                start_date, end_date, 1 if is_active else 0,
            ),
        )
        conn.commit()
        return self.get_by_id(cursor.lastrowid)

    def update(
        self,
        schedule_id: int,
        type_: str,
        amount: float,
        category: str,
        frequency: str,
        start_date: str,
        description: str | None = None,
        end_date: str | None = None,
        is_active: bool = True,
    ) -> RecurringSchedule:
        conn = self._db.get_connection()
        conn.execute(
            """UPDATE recurring_transactions SET
               type=?, amount=?, category=?, description=?, frequency=?,
               start_date=?, end_date=?, is_active=?
               WHERE id=?""",
            (
                type_, amount, category, description, frequency,
                start_date, end_date, 1 if is_active else 0, schedule_id,
            ),
        )
        conn.commit()
        return self.get_by_id(schedule_id)

    def set_active(self, schedule_id: int, is_active: bool):
        conn = self._db.get_connection()
        conn.execute(
            "UPDATE recurring_transactions SET is_active = ? WHERE id = ?",
            (1 if is_active else 0, schedule_id),
        )
        conn.commit()

    def set_last_generated(self, schedule_id: int, date_str: str | None):
        conn = self._db.get_connection()
        conn.execute(
            "UPDATE recurring_transactions SET last_generated = ? WHERE id = ?",
            (date_str, schedule_id),
        )
        conn.commit()

    def advance_checkpoint(
        self, schedule_id: int, expected: str | None, new_value: str
    ) -> bool:
        """Move last_generated from `expected` to `new_value` without committing.

        Returns False when the stored checkpoint no longer equals `expected`,
        i.e. another pass already advanced it.
        """
        conn = self._db.get_connection()
        cursor = conn.execute(
            """UPDATE recurring_transactions
               SET last_generated = ?
               WHERE id = ? AND last_generated IS ?""",
            (new_value, schedule_id, expected),
        )
        return cursor.rowcount == 1

    def delete(self, schedule_id: int):
        conn = self._db.get_connection()
        conn.execute("DELETE FROM recurring_transactions WHERE id = ?", (schedule_id,))
        conn.commit()
