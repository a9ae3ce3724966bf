import logging
import sqlite3
from datetime import date

import pytest


def create_rent(svc, **overrides):
    fields = dict(
        type_="expense",
        amount=1200,
        category="Rent",
        frequency="monthly",
        start_date="2024-01-15",
        description="Flat rent",
    )
    fields.update(overrides)
    return svc.create(**fields)


# ---------------------------------------------------------------------------
# CRUD and validation
# ---------------------------------------------------------------------------

def test_create_stores_schedule_without_checkpoint(recurring_service):
    schedule = create_rent(recurring_service, description="  Flat rent  ")
    assert schedule.id is not None
    assert schedule.amount == 1200.0
    assert schedule.description == "Flat rent"
    assert schedule.last_generated is None
    assert schedule.is_active is True


@pytest.mark.parametrize("overrides, message", [
    ({"type_": "transfer"}, "Type must be either"),
    ({"amount": 0}, "Amount must be a positive number."),
    ({"amount": "abc"}, "Amount must be a positive number."),
    ({"category": "   "}, "Category must not be empty."),
    ({"frequency": "hourly"}, "Frequency must be one of"),
    ({"start_date": "15/01/2024"}, "Start date must be a valid date."),
    ({"end_date": "not-a-date"}, "End date must be a valid date."),
    ({"end_date": "2024-01-15"}, "End date must be after start date."),
])
def test_create_rejects_invalid_input(recurring_service, overrides, message):
    with pytest.raises(ValueError, match=message):
        create_rent(recurring_service, **overrides)
    assert recurring_service.get_all() == []


def test_blank_description_is_stored_as_null(recurring_service):
    assert create_rent(recurring_service, description="  ").description is None


def test_get_all_filters_by_status_and_type(recurring_service):
    rent = create_rent(recurring_service)
    salary = create_rent(recurring_service, type_="income", category="Salary")
    recurring_service.set_active(rent.id, False)

    assert [s.id for s in recurring_service.get_all()] == [salary.id, rent.id]
    assert [s.id for s in recurring_service.get_all(is_active=True)] == [salary.id]
    assert [s.id for s in recurring_service.get_all(is_active=False)] == [rent.id]
    assert [s.id for s in recurring_service.get_all(type_filter="income")] == [salary.id]
    with pytest.raises(ValueError):
        recurring_service.get_all(type_filter="bogus")


def test_update_replaces_fields(recurring_service):
    schedule = create_rent(recurring_service)
    updated = recurring_service.update(
        schedule.id, type_="expense", amount=1500, category="Rent",
        frequency="monthly", start_date="2024-01-15", end_date="2024-12-31",
    )
    assert updated.amount == 1500.0
    assert updated.end_date == "2024-12-31"
    assert updated.description is None


def test_update_missing_schedule_raises(recurring_service):
    with pytest.raises(ValueError, match="not found"):
        recurring_service.update(
            999, type_="expense", amount=1, category="X",
            frequency="daily", start_date="2024-01-01",
        )


def test_set_last_generated_accepts_dates_and_clears(recurring_service):
    schedule = create_rent(recurring_service)
    recurring_service.set_last_generated(schedule.id, date(2024, 3, 15))
    assert recurring_service.get_by_id(schedule.id).last_generated == "2024-03-15"
    recurring_service.set_last_generated(schedule.id, "2024-04-15T00:00:00Z")
    assert recurring_service.get_by_id(schedule.id).last_generated == "2024-04-15"
    recurring_service.set_last_generated(schedule.id, None)
    assert recurring_service.get_by_id(schedule.id).last_generated is None
    with pytest.raises(ValueError):
        recurring_service.set_last_generated(schedule.id, "garbage")


# ---------------------------------------------------------------------------
# Generation pass
# ---------------------------------------------------------------------------

def test_apply_creates_transactions_and_advances_checkpoint(recurring_service, tx_service):
    schedule = create_rent(recurring_service)
    created = recurring_service.apply_due_schedules(date(2024, 4, 10))

    assert [t.date for t in created] == ["2024-02-15", "2024-03-15"]
    assert all(t.recurring_id == schedule.id for t in created)
    assert all(t.description == "Flat rent (Auto)" for t in created)
    assert recurring_service.get_by_id(schedule.id).last_generated == "2024-03-15"
    assert len(tx_service.get_for_schedule(schedule.id)) == 2


def test_second_pass_creates_nothing(recurring_service, tx_service):
    create_rent(recurring_service)
    recurring_service.apply_due_schedules(date(2024, 4, 10))
    assert recurring_service.apply_due_schedules(date(2024, 4, 10)) == []
    assert len(tx_service.search()) == 2


def test_later_pass_only_adds_new_occurrences(recurring_service):
    create_rent(recurring_service)
    recurring_service.apply_due_schedules(date(2024, 4, 10))
    created = recurring_service.apply_due_schedules(date(2024, 5, 20))
    assert [t.date for t in created] == ["2024-04-15", "2024-05-15"]


def test_paused_and_lapsed_schedules_are_skipped(recurring_service):
    paused = create_rent(recurring_service)
    recurring_service.set_active(paused.id, False)
    create_rent(recurring_service, end_date="2024-03-01")
    assert recurring_service.apply_due_schedules(date(2024, 4, 10)) == []


def test_backfill_option_generates_lapsed_backlog(recurring_dao, tx_dao):
    from services.recurring_service import RecurringService

    svc = RecurringService(recurring_dao, tx_dao, backfill_lapsed=True)
    schedule = create_rent(svc, end_date="2024-03-01")
    created = svc.apply_due_schedules(date(2024, 4, 10))
    assert [t.date for t in created] == ["2024-02-15"]
    assert svc.get_by_id(schedule.id).last_generated == "2024-02-15"


def test_stale_snapshot_is_skipped_without_duplicates(
    recurring_service, recurring_dao, tx_service, monkeypatch, caplog
):
    schedule = create_rent(recurring_service)
    stale = recurring_dao.get_by_id(schedule.id)
    recurring_service.apply_due_schedules(date(2024, 4, 10))

    # A second pass still holding the pre-advance snapshot.
    monkeypatch.setattr(recurring_dao, "get_active", lambda: [stale])
    with caplog.at_level(logging.WARNING, logger="finance_tracker"):
        assert recurring_service.apply_due_schedules(date(2024, 4, 10)) == []

    assert len(tx_service.search()) == 2
    assert "checkpoint changed" in caplog.text


def test_failure_rolls_back_the_whole_schedule(
    recurring_service, recurring_dao, tx_dao, tx_service, monkeypatch
):
    schedule = create_rent(recurring_service)
    real_create = tx_dao.create
    calls = []

    def flaky_create(**kwargs):
        calls.append(kwargs["date"])
        if len(calls) == 2:
            raise sqlite3.OperationalError("disk I/O error")
        return real_create(**kwargs)

    monkeypatch.setattr(tx_dao, "create", flaky_create)
    with pytest.raises(sqlite3.OperationalError):
        recurring_service.apply_due_schedules(date(2024, 4, 10))

    assert tx_service.search() == []
    assert recurring_dao.get_by_id(schedule.id).last_generated is None

    monkeypatch.setattr(tx_dao, "create", real_create)
    assert len(recurring_service.apply_due_schedules(date(2024, 4, 10))) == 2


def test_schedules_are_independent_units(recurring_service, tx_service):
    create_rent(recurring_service)
    create_rent(recurring_service, type_="income", category="Salary",
                frequency="weekly", start_date="2024-04-01", description=None)
    created = recurring_service.apply_due_schedules(date(2024, 4, 10))
    assert sorted(t.date for t in created) == [
        "2024-02-15", "2024-03-15", "2024-04-08",
    ]
    salary = [t for t in created if t.category == "Salary"]
    assert salary[0].description == "(Auto)"


def test_deleting_schedule_keeps_generated_transactions(recurring_service, tx_service):
    schedule = create_rent(recurring_service)
    recurring_service.apply_due_schedules(date(2024, 4, 10))
    recurring_service.delete(schedule.id)

    remaining = tx_service.search()
    assert len(remaining) == 2
    assert all(t.recurring_id is None for t in remaining)
    assert recurring_service.get_by_id(schedule.id) is None


def test_next_due_date_uses_checkpoint(recurring_service):
    schedule = create_rent(recurring_service)
    recurring_service.apply_due_schedules(date(2024, 4, 10))
    refreshed = recurring_service.get_by_id(schedule.id)
    assert recurring_service.next_due_date(refreshed, date(2024, 4, 10)) == date(2024, 4, 15)
