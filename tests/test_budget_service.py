import pytest

from models.budget import Budget
from utils.date_helpers import current_month_str, today_str


def spend(tx_service, category, amount, date=None):
    tx_service.create(
        type_="expense", amount=amount, category=category, date=date or today_str()
    )


def test_upsert_lowercases_and_replaces(budget_service):
    first = budget_service.upsert("  Food ", 5000)
    again = budget_service.upsert("FOOD", 6000)
    assert first.category == "food"
    assert again.id == first.id
    assert again.limit_amount == 6000.0
    assert len(budget_service.get_budget_status()) == 1


@pytest.mark.parametrize("category, limit, message", [
    ("", 100, "Category is required"),
    ("Food", 0, "Limit must be a positive number."),
    ("Food", "x", "Limit must be a positive number."),
])
def test_upsert_validation(budget_service, category, limit, message):
    with pytest.raises(ValueError, match=message):
        budget_service.upsert(category, limit)


def test_status_reflects_current_month_spending(budget_service, tx_service):
    budget_service.upsert("Food", 1000)
    budget_service.upsert("Transport", 1000)
    budget_service.upsert("Shopping", 1000)
    spend(tx_service, "food", 500)
    spend(tx_service, "Transport", 850)
    spend(tx_service, "Shopping ", 1200)
    spend(tx_service, "Food", 9999, date="2000-01-01")  # outside the month

    status = {b.category: b for b in budget_service.get_budget_status()}
    assert status["food"].spent_amount == 500
    assert status["food"].status == "ok"
    assert status["transport"].status == "warning"
    assert status["shopping"].status == "danger"
    assert status["shopping"].remaining == -200
    assert budget_service.get_alert_counts() == {"warning": 1, "danger": 1}


def test_status_for_explicit_month(budget_service, tx_service):
    budget_service.upsert("Food", 100)
    spend(tx_service, "Food", 100, date="2024-02-10")
    (b,) = budget_service.get_budget_status("2024-02")
    assert b.percentage == 1.0
    assert b.status == "danger"
    (b,) = budget_service.get_budget_status(current_month_str())
    assert b.spent_amount == 0


def test_custom_threshold(budget_dao, tx_dao, tx_service):
    from services.budget_service import BudgetService

    svc = BudgetService(budget_dao, tx_dao, alert_threshold=0.5)
    svc.upsert("Food", 100)
    spend(tx_service, "Food", 60)
    assert svc.get_budget_status()[0].status == "warning"


def test_budget_status_thresholds():
    b = Budget(id=1, category="food", limit_amount=100)
    for spent, expected in [(0, "ok"), (79.99, "ok"), (80, "warning"),
                            (99.99, "warning"), (100, "danger"), (150, "danger")]:
        b.spent_amount = spent
        assert b.status == expected
    assert b.display_name == "Food"


def test_delete_and_available_categories(budget_service):
    groceries = budget_service.upsert("Groceries", 100)
    assert "Groceries" not in budget_service.get_available_categories()
    budget_service.delete(groceries.id)
    assert budget_service.get_budget_status() == []
    assert "Groceries" in budget_service.get_available_categories()
