"""Recurring-schedule occurrence engine.

Pure functions over a RecurringSchedule snapshot: no I/O, no clock reads.
All arithmetic is at whole-day granularity.

Month and year steps clamp to the last valid day of the target month
(Jan 31 + 1 month = Feb 28/29, Feb 29 + 1 year = Feb 28). Each step is taken
from the previous occurrence, so a clamped day carries forward
(Jan 31 -> Feb 29 -> Mar 29).
"""
from collections.abc import Iterator
from datetime import date, datetime

from models.recurring_schedule import GeneratedTransaction, RecurringSchedule
from utils.constants import AUTO_SUFFIX
from utils.date_helpers import add_days, add_months, add_years, format_date, to_day

_STEPS = {
    "daily":   lambda d: add_days(d, 1),
    "weekly":  lambda d: add_days(d, 7),
    "monthly": lambda d: add_months(d, 1),
    "yearly":  lambda d: add_years(d, 1),
}


def next_occurrence(frequency: str, from_date: date) -> date:
    """Return from_date advanced by exactly one frequency unit."""
    try:
        step = _STEPS[frequency]
    except KeyError:
        raise ValueError(f"Invalid frequency: {frequency}") from None
    return step(to_day(from_date))


def auto_description(description: str | None) -> str:
    return f"{description or ''} {AUTO_SUFFIX}".strip()


def _bounds(schedule: RecurringSchedule) -> tuple[date, date | None]:
    start = to_day(schedule.start_date)
    if start is None:
        raise ValueError(f"Schedule {schedule.id} has no valid start date")
    return start, to_day(schedule.end_date)


def _iter_dates(
    schedule: RecurringSchedule,
    start: date,
    end: date | None,
    anchor: date,
    until: date | None = None,
) -> Iterator[date]:
    """In-window candidates after `anchor`, up to `until` (inclusive) and end_date."""
    while True:
        candidate = next_occurrence(schedule.frequency, anchor)
        anchor = candidate
        if until is not None and candidate > until:
            return
        if candidate < start:
            continue
        if end is not None and candidate > end:
            return
        yield candidate


def due_occurrences(
    schedule: RecurringSchedule,
    now: date | datetime | str,
    backfill_lapsed: bool = False,
) -> Iterator[GeneratedTransaction]:
    """Yield the occurrences of `schedule` that are due as of `now`, oldest first.

    Generation resumes after ``schedule.last_generated`` (or ``start_date``
    when nothing has been generated yet) and stops at the first occurrence
    later than `now` or later than ``end_date``. An occurrence falling exactly
    on ``end_date`` is due. Inactive schedules yield nothing.

    A lapsed schedule (``end_date`` already behind `now`) yields nothing
    either, unless `backfill_lapsed` is set, in which case the un-generated
    occurrences up to ``end_date`` are still produced.

    The result depends only on the schedule snapshot and `now`; the caller
    persists the instances and advances the checkpoint.
    """
    if not schedule.is_active:
        return
    today = to_day(now)
    start, end = _bounds(schedule)
    if end is not None and today > end and not backfill_lapsed:
        return

    anchor = to_day(schedule.last_generated) or start
    for occurrence in _iter_dates(schedule, start, end, anchor, until=today):
        yield GeneratedTransaction(
            type=schedule.type,
            amount=schedule.amount,
            category=schedule.category,
            description=auto_description(schedule.description),
            date=format_date(occurrence),
            recurring_id=schedule.id,
        )


def next_due_date(
    schedule: RecurringSchedule, after: date | datetime | str
) -> date | None:
    """First occurrence strictly after `after` that a future pass would emit.

    None for inactive or exhausted schedules.
    """
    if not schedule.is_active:
        return None
    ref = to_day(after)
    start, end = _bounds(schedule)
    if end is not None and ref > end:
        return None

    anchor = to_day(schedule.last_generated) or start
    for occurrence in _iter_dates(schedule, start, end, anchor):
        if occurrence > ref:
            return occurrence
    return None
