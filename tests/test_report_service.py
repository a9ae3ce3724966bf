import pytest

from services.report_service import ReportService


@pytest.fixture
def seeded(tx_service):
    rows = [
        ("income", 50000, "Salary", "2024-01-01"),
        ("expense", 12000, "Rent", "2024-01-05"),
        ("expense", 3000, "Groceries", "2024-01-20"),
        ("income", 50000, "Salary", "2024-02-01"),
        ("expense", 12000, "Rent", "2024-02-05"),
        ("expense", 8000, "Travel", "2023-12-24"),
    ]
    for type_, amount, category, date in rows:
        tx_service.create(type_=type_, amount=amount, category=category, date=date)


def test_period_range():
    assert ReportService.period_range("month", 2024, 2) == ("2024-02-01", "2024-02-29")
    assert ReportService.period_range("year", 2023) == ("2023-01-01", "2023-12-31")
    assert ReportService.period_range("overall") is None
    with pytest.raises(ValueError):
        ReportService.period_range("week")


def test_period_label():
    assert ReportService.period_label("month", 2024, 2) == "February 2024"
    assert ReportService.period_label("year", 2023) == "2023"
    assert ReportService.period_label("overall") == "All Time"


def test_period_stats(report_service, seeded):
    jan = report_service.get_period_stats("month", 2024, 1)
    assert jan == {"income": 50000, "expense": 15000, "net": 35000}

    year = report_service.get_period_stats("year", 2024)
    assert year["net"] == 100000 - 27000

    overall = report_service.get_period_stats("overall")
    assert overall["expense"] == 35000


def test_period_stats_filters(report_service, seeded):
    assert report_service.get_period_stats("overall", type_filter="expense")["income"] == 0
    rent = report_service.get_period_stats("overall", category="Rent")
    assert rent == {"income": 0, "expense": 24000, "net": -24000}


def test_overall_stats(report_service, seeded):
    jan = report_service.get_period_stats("month", 2024, 1)
    stats = report_service.get_overall_stats(jan)
    assert stats["net_worth"] == 100000 - 35000
    assert stats["savings_rate"] == pytest.approx(70.0)


def test_savings_rate_is_zero_without_income(report_service, tx_service):
    tx_service.create(type_="expense", amount=10, category="Rent", date="2024-01-01")
    assert report_service.get_overall_stats()["savings_rate"] == 0.0


def test_category_breakdown(report_service, seeded):
    breakdown = report_service.get_category_breakdown("overall")
    assert breakdown[0] == {"category": "Rent", "total": 24000}
    assert [d["category"] for d in breakdown] == ["Rent", "Travel", "Groceries"]
    assert report_service.get_category_breakdown("overall", type_filter="income") == []


def test_monthly_chart_data(report_service, seeded):
    data = report_service.get_monthly_chart_data(months=2)
    assert [d["month"] for d in data] == ["2024-01", "2024-02"]
    assert data[1]["net"] == 38000


def test_available_years_and_transactions(report_service, seeded):
    assert report_service.get_available_years() == [2024, 2023]
    feb = report_service.get_transactions("month", 2024, 2)
    assert [t.date for t in feb] == ["2024-02-05", "2024-02-01"]
