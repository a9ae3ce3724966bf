import threading
from datetime import date
from models.recurring_schedule import RecurringSchedule
from models.transaction import Transaction
from database.recurring_dao import RecurringDAO
from database.transaction_dao import TransactionDAO
from services.recurrence import due_occurrences, next_due_date
from utils.constants import FREQUENCIES, TRANSACTION_TYPES
from utils.date_helpers import parse_date, format_date, today, to_day
from utils.logging_setup import get_logger

logger = get_logger("services.recurring")


class RecurringService:
    def __init__(
        self,
        recurring_dao: RecurringDAO,
        tx_dao: TransactionDAO,
        backfill_lapsed: bool = False,
    ):
        self._dao = recurring_dao
        self._tx_dao = tx_dao
        self._backfill_lapsed = backfill_lapsed
        self._apply_lock = threading.Lock()

    def get_all(
        self, is_active: bool | None = None, type_filter: str | None = None
    ) -> list[RecurringSchedule]:
        if type_filter and type_filter not in TRANSACTION_TYPES:
            raise ValueError("Type must be either 'income' or 'expense'.")
        return self._dao.get_all(is_active, type_filter)

    def get_active(self) -> list[RecurringSchedule]:
        return self._dao.get_active()

    def get_by_id(self, schedule_id: int) -> RecurringSchedule | None:
        return self._dao.get_by_id(schedule_id)

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
        fields = self._validate(
            type_, amount, category, frequency, start_date, description, end_date
        )
        schedule = self._dao.create(is_active=is_active, **fields)
        logger.info(
            "Created %s schedule %s (%s %s)",
            schedule.frequency, schedule.id, schedule.type, schedule.category,
        )
        return schedule

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
        if self._dao.get_by_id(schedule_id) is None:
            raise ValueError("Recurring transaction not found.")
        fields = self._validate(
            type_, amount, category, frequency, start_date, description, end_date
        )
        return self._dao.update(schedule_id, is_active=is_active, **fields)

    def set_active(self, schedule_id: int, is_active: bool):
        self._dao.set_active(schedule_id, is_active)

    def set_last_generated(self, schedule_id: int, value: date | str | None):
        """Manually move or clear the checkpoint."""
        if value is None:
            self._dao.set_last_generated(schedule_id, None)
            return
        d = to_day(value)
        if d is None:
            raise ValueError("Last generated must be a valid date.")
        self._dao.set_last_generated(schedule_id, format_date(d))

    def delete(self, schedule_id: int):
        self._dao.delete(schedule_id)

    def next_due_date(
        self, schedule: RecurringSchedule, after: date | None = None
    ) -> date | None:
        """Return the next date the schedule will generate after `after` (default: today)."""
        return next_due_date(schedule, after or today())

    def apply_due_schedules(self, reference_date: date | None = None) -> list[Transaction]:
        """
        Materialize every due occurrence of every active schedule up to
        reference_date (default: today). Returns the newly created transactions.

        Each schedule is one unit: its transactions and its advanced checkpoint
        are committed together or not at all.
        """
        ref = reference_date or today()
        new_transactions: list[Transaction] = []
        with self._apply_lock:
            for schedule in self._dao.get_active():
                new_transactions.extend(self._apply_schedule(schedule, ref))
        if new_transactions:
            logger.info(
                "Generated %d recurring transaction(s) as of %s",
                len(new_transactions), format_date(ref),
            )
        return new_transactions

    def _apply_schedule(self, schedule: RecurringSchedule, ref: date) -> list[Transaction]:
        occurrences = list(
            due_occurrences(schedule, ref, backfill_lapsed=self._backfill_lapsed)
        )
        if not occurrences:
            logger.debug("Schedule %s: nothing due", schedule.id)
            return []

        conn = self._tx_dao._db.get_connection()
        try:
            advanced = self._dao.advance_checkpoint(
                schedule.id, schedule.last_generated, occurrences[-1].date
            )
            if not advanced:
                conn.rollback()
                logger.warning(
                    "Schedule %s: checkpoint changed since it was read; skipping",
                    schedule.id,
                )
                return []
            created = [
                self._tx_dao.create(
                    type_=occ.type,
                    amount=occ.amount,
                    category=occ.category,
                    date=occ.date,
                    description=occ.description,
                    recurring_id=occ.recurring_id,
                )
                for occ in occurrences
            ]
            conn.commit()
        except Exception:
            conn.rollback()
            logger.exception("Schedule %s: generation pass rolled back", schedule.id)
            raise

        logger.debug(
            "Schedule %s: %d occurrence(s), checkpoint %s -> %s",
            schedule.id, len(created), schedule.last_generated, occurrences[-1].date,
        )
        return created

    def _validate(
        self, type_, amount, category, frequency, start_date, description, end_date
    ) -> dict:
        if type_ not in TRANSACTION_TYPES:
            raise ValueError("Type must be either 'income' or 'expense'.")
        try:
            amount = float(amount)
        except (TypeError, ValueError):
            raise ValueError("Amount must be a positive number.") from None
        if not amount > 0:
            raise ValueError("Amount must be a positive number.")
        category = (category or "").strip()
        if not category:
            raise ValueError("Category must not be empty.")
        if frequency not in FREQUENCIES:
            raise ValueError(
                "Frequency must be one of: 'daily', 'weekly', 'monthly', 'yearly'."
            )
        start = parse_date(start_date)
        if not start:
            raise ValueError("Start date must be a valid date.")
        end = None
        if end_date:
            end = parse_date(end_date)
            if not end:
                raise ValueError("End date must be a valid date.")
            if end <= start:
                raise ValueError("End date must be after start date.")
        description = description.strip() if description else None
        return {
            "type_": type_,
            "amount": amount,
            "category": category,
            "frequency": frequency,
            "start_date": format_date(start),
            "description": description or None,
            "end_date": format_date(end) if end else None,
        }
