from dataclasses import replace
from datetime import date, datetime

import pytest

from models.recurring_schedule import RecurringSchedule
from services.recurrence import (
    auto_description,
    due_occurrences,
    next_due_date,
    next_occurrence,
)


def make_schedule(**overrides) -> RecurringSchedule:
    fields = dict(
        id=1,
        type="expense",
        amount=1200.0,
        category="Rent",
        frequency="monthly",
        start_date="2024-01-15",
        description="Flat rent",
    )
    fields.update(overrides)
    return RecurringSchedule(**fields)


def dates(schedule, now, **kwargs):
    return [occ.date for occ in due_occurrences(schedule, now, **kwargs)]


# ---------------------------------------------------------------------------
# Reference scenarios
# ---------------------------------------------------------------------------

def test_monthly_from_start_stops_before_now():
    schedule = make_schedule()
    assert dates(schedule, date(2024, 4, 10)) == ["2024-02-15", "2024-03-15"]


def test_lapsed_schedule_is_suppressed_by_default():
    schedule = make_schedule(end_date="2024-03-01")
    assert dates(schedule, date(2024, 4, 10)) == []


def test_lapsed_schedule_backfills_up_to_end_date_when_enabled():
    schedule = make_schedule(end_date="2024-03-01")
    assert dates(schedule, date(2024, 4, 10), backfill_lapsed=True) == ["2024-02-15"]


def test_checkpoint_at_now_yields_nothing():
    schedule = make_schedule(
        frequency="daily", start_date="2024-01-01", last_generated="2024-01-05"
    )
    assert dates(schedule, date(2024, 1, 5)) == []


def test_inactive_schedule_yields_nothing():
    schedule = make_schedule(
        frequency="weekly", start_date="2020-01-01", is_active=False
    )
    assert dates(schedule, date(2024, 1, 1)) == []


# ---------------------------------------------------------------------------
# Properties
# ---------------------------------------------------------------------------

def test_same_inputs_same_output():
    schedule = make_schedule(frequency="weekly", start_date="2024-01-01")
    now = date(2024, 3, 1)
    assert list(due_occurrences(schedule, now)) == list(due_occurrences(schedule, now))


def test_resuming_from_last_emitted_date_emits_nothing_new():
    schedule = make_schedule(frequency="weekly", start_date="2024-01-01")
    now = date(2024, 3, 1)
    first = dates(schedule, now)
    assert first
    advanced = replace(schedule, last_generated=first[-1])
    assert dates(advanced, now) == []


def test_resuming_mid_sequence_continues_where_it_left_off():
    schedule = make_schedule(frequency="daily", start_date="2024-01-01")
    full = dates(schedule, date(2024, 1, 10))
    partial = dates(replace(schedule, last_generated="2024-01-04"), date(2024, 1, 10))
    assert partial == full[3:]


def test_occurrences_are_strictly_increasing_and_within_bounds():
    schedule = make_schedule(
        frequency="weekly", start_date="2024-01-03", end_date="2024-06-30"
    )
    now = date(2024, 5, 1)
    result = [date.fromisoformat(d) for d in dates(schedule, now)]
    assert result == sorted(set(result))
    assert all(date(2024, 1, 3) < d <= now for d in result)


def test_occurrence_on_end_date_is_included():
    schedule = make_schedule(start_date="2024-01-15", end_date="2024-03-15")
    assert dates(schedule, date(2024, 3, 15)) == ["2024-02-15", "2024-03-15"]


def test_backfill_stops_on_end_date_not_the_day_after():
    schedule = make_schedule(
        frequency="daily", start_date="2024-01-01", end_date="2024-01-05"
    )
    emitted = dates(schedule, date(2024, 1, 20), backfill_lapsed=True)
    assert emitted[-1] == "2024-01-05"
    assert "2024-01-06" not in emitted
    assert emitted == ["2024-01-02", "2024-01-03", "2024-01-04", "2024-01-05"]


def test_occurrence_on_now_is_included():
    schedule = make_schedule(frequency="daily", start_date="2024-01-01")
    assert dates(schedule, date(2024, 1, 3)) == ["2024-01-02", "2024-01-03"]


def test_start_date_itself_is_not_emitted():
    schedule = make_schedule(frequency="daily", start_date="2024-01-01")
    assert dates(schedule, date(2024, 1, 1)) == []


def test_future_start_emits_nothing():
    schedule = make_schedule(start_date="2030-01-01")
    assert dates(schedule, date(2024, 1, 1)) == []


def test_generated_instances_copy_schedule_fields():
    schedule = make_schedule(id=7, type="income", amount=50000.0, category="Salary",
                             description="Salary")
    (occ,) = due_occurrences(schedule, date(2024, 2, 20))
    assert occ.type == "income"
    assert occ.amount == 50000.0
    assert occ.category == "Salary"
    assert occ.recurring_id == 7
    assert occ.description == "Salary (Auto)"


def test_empty_description_still_gets_marker():
    assert auto_description(None) == "(Auto)"
    assert auto_description("") == "(Auto)"
    assert auto_description("Gym") == "Gym (Auto)"


def test_now_may_be_datetime_or_iso_timestamp():
    schedule = make_schedule()
    expected = ["2024-02-15", "2024-03-15"]
    assert dates(schedule, datetime(2024, 4, 10, 23, 59)) == expected
    assert dates(schedule, "2024-04-10T08:00:00.000Z") == expected


def test_checkpoint_stored_as_timestamp_is_truncated_to_day():
    schedule = make_schedule(last_generated="2024-02-15T00:00:00.000Z")
    assert dates(schedule, date(2024, 4, 10)) == ["2024-03-15"]


# ---------------------------------------------------------------------------
# Calendar arithmetic
# ---------------------------------------------------------------------------

def test_month_end_clamps_and_carries_forward():
    schedule = make_schedule(start_date="2024-01-31")
    assert dates(schedule, date(2024, 4, 30)) == ["2024-02-29", "2024-03-29", "2024-04-29"]


def test_month_end_clamps_in_non_leap_year():
    assert next_occurrence("monthly", date(2023, 1, 31)) == date(2023, 2, 28)


def test_leap_day_yearly_clamps_to_feb_28():
    schedule = make_schedule(frequency="yearly", start_date="2024-02-29")
    assert dates(schedule, date(2026, 3, 1)) == ["2025-02-28", "2026-02-28"]


def test_weekly_and_daily_steps():
    assert next_occurrence("weekly", date(2024, 12, 28)) == date(2025, 1, 4)
    assert next_occurrence("daily", date(2024, 2, 28)) == date(2024, 2, 29)


def test_december_rolls_into_next_year():
    assert next_occurrence("monthly", date(2024, 12, 15)) == date(2025, 1, 15)


def test_invalid_frequency_raises():
    with pytest.raises(ValueError, match="Invalid frequency"):
        next_occurrence("fortnightly", date(2024, 1, 1))


# ---------------------------------------------------------------------------
# next_due_date
# ---------------------------------------------------------------------------

def test_next_due_date_after_checkpoint():
    schedule = make_schedule(last_generated="2024-03-15")
    assert next_due_date(schedule, date(2024, 4, 10)) == date(2024, 4, 15)


def test_next_due_date_skips_dates_not_after_reference():
    schedule = make_schedule()
    assert next_due_date(schedule, date(2024, 3, 15)) == date(2024, 4, 15)


def test_next_due_date_none_when_exhausted_or_inactive():
    assert next_due_date(make_schedule(end_date="2024-03-01"), date(2024, 4, 1)) is None
    assert next_due_date(
        make_schedule(end_date="2024-04-01", last_generated="2024-03-15"), date(2024, 3, 20)
    ) is None
    assert next_due_date(make_schedule(is_active=False), date(2024, 1, 1)) is None
