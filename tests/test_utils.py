import json
import logging
from datetime import date, datetime

import pytest

from utils import app_config, logging_setup
from utils.currency import convert_currency, format_currency, format_signed, get_currency
from utils.date_helpers import (
    add_months,
    add_years,
    format_display_date,
    friendly_month,
    month_range,
    parse_date,
    parse_display_date,
    to_day,
)


# ---------------------------------------------------------------------------
# date helpers
# ---------------------------------------------------------------------------

def test_parse_date_accepts_iso_timestamps():
    assert parse_date("2024-01-15") == date(2024, 1, 15)
    assert parse_date("2024-01-15T23:59:59.999Z") == date(2024, 1, 15)
    assert parse_date("2024-01-15 08:30:00") == date(2024, 1, 15)
    assert parse_date("2024-02-30") is None
    assert parse_date("") is None


def test_to_day():
    assert to_day(datetime(2024, 5, 1, 12)) == date(2024, 5, 1)
    assert to_day(date(2024, 5, 1)) == date(2024, 5, 1)
    assert to_day("2024-05-01") == date(2024, 5, 1)
    assert to_day(None) is None


def test_add_months_clamps():
    assert add_months(date(2024, 1, 31), 1) == date(2024, 2, 29)
    assert add_months(date(2024, 3, 31), -1) == date(2024, 2, 29)
    assert add_months(date(2024, 11, 30), 3) == date(2025, 2, 28)
    assert add_years(date(2024, 2, 29), 4) == date(2028, 2, 29)


def test_month_range_and_label():
    assert month_range("2023-02") == ("2023-02-01", "2023-02-28")
    with pytest.raises(ValueError):
        month_range("2024-13")
    assert friendly_month("2026-02") == "February 2026"
    assert friendly_month("bogus") == "bogus"


def test_display_date_round_trip():
    assert format_display_date("2024-03-07", "DD/MM/YYYY") == "07/03/2024"
    assert parse_display_date("07.03.2024", "DD.MM.YYYY") == date(2024, 3, 7)
    assert parse_display_date("2024-03-07", "MM/DD/YYYY") == date(2024, 3, 7)


# ---------------------------------------------------------------------------
# currency
# ---------------------------------------------------------------------------

def test_format_currency_applies_static_rate():
    assert format_currency(1234.5) == "₹1,234.50"
    assert format_currency(10000, "USD") == "$120.00"
    assert format_signed(-50) == "-₹50.00"
    assert format_signed(0, "EUR") == "+€0.00"


def test_convert_currency_goes_through_base():
    assert convert_currency(120, "USD", "INR") == pytest.approx(10000)
    assert convert_currency(100, "INR", "INR") == 100


def test_unknown_currency():
    with pytest.raises(ValueError, match="Unknown currency: XYZ"):
        get_currency("XYZ")


# ---------------------------------------------------------------------------
# app config
# ---------------------------------------------------------------------------

def test_config_missing_or_corrupt_is_empty(isolated_home):
    assert app_config.load_config() == {}
    isolated_home.mkdir(parents=True)
    (isolated_home / "config.json").write_text("{not json", encoding="utf-8")
    assert app_config.load_config() == {}
    (isolated_home / "config.json").write_text("[1, 2]", encoding="utf-8")
    assert app_config.load_config() == {}


def test_db_folder_round_trip(isolated_home):
    app_config.set_db_folder("/data/finance")
    assert app_config.get_db_folder() == "/data/finance"
    saved = json.loads((isolated_home / "config.json").read_text(encoding="utf-8"))
    assert saved == {"db_folder": "/data/finance"}
    assert not (isolated_home / "config.tmp").exists()

    app_config.set_db_folder(None)
    assert app_config.get_db_folder() is None


def test_log_level_from_config(isolated_home):
    app_config.save_config({"log_level": "DEBUG"})
    assert app_config.get_log_level() == "DEBUG"


# ---------------------------------------------------------------------------
# logging
# ---------------------------------------------------------------------------

@pytest.fixture
def fresh_logging(monkeypatch):
    root = logging.getLogger("finance_tracker")
    saved = (list(root.handlers), root.level, root.propagate)
    monkeypatch.setattr(logging_setup, "_CONFIGURED", False)
    root.handlers = []
    yield root
    root.handlers, level, root.propagate = saved[0], saved[1], saved[2]
    root.setLevel(level)


def test_get_logger_namespaces_under_app_root():
    assert logging_setup.get_logger("services.x").name == "finance_tracker.services.x"
    assert logging_setup.get_logger("finance_tracker.db").name == "finance_tracker.db"


def test_parse_level(monkeypatch):
    assert logging_setup._parse_level("debug") == logging.DEBUG
    assert logging_setup._parse_level(30) == 30
    monkeypatch.setenv("FINANCE_TRACKER_LOG_LEVEL", "ERROR")
    assert logging_setup._parse_level(None) == logging.ERROR
    monkeypatch.delenv("FINANCE_TRACKER_LOG_LEVEL")
    assert logging_setup._parse_level("nonsense") == logging.INFO


@pytest.mark.parametrize("env_value", ["verbose", "VERBOSE", " "])
def test_parse_level_unknown_env_value_defaults_to_info(monkeypatch, env_value):
    monkeypatch.setenv("FINANCE_TRACKER_LOG_LEVEL", env_value)
    assert logging_setup._parse_level(None) == logging.INFO
    assert logging_setup._parse_level("nonsense") == logging.INFO
    assert logging_setup._parse_level(None, fallback="warning") == logging.WARNING


def test_parse_level_precedence(monkeypatch):
    assert logging_setup._parse_level(None, fallback="DEBUG") == logging.DEBUG
    monkeypatch.setenv("FINANCE_TRACKER_LOG_LEVEL", "error")
    assert logging_setup._parse_level(None, fallback="DEBUG") == logging.ERROR
    assert logging_setup._parse_level("warning", fallback="DEBUG") == logging.WARNING


def test_configure_logging_once(fresh_logging, capsys):
    logging_setup.configure_logging("WARNING")
    logging_setup.configure_logging("DEBUG")

    log = logging_setup.get_logger("tests")
    log.info("hidden")
    log.warning("shown")
    err = capsys.readouterr().err
    assert "finance_tracker.tests WARNING shown" in err
    assert "hidden" not in err
    assert len(fresh_logging.handlers) == 1
    assert fresh_logging.level == logging.WARNING


def test_configure_logging_env_beats_config_fallback(fresh_logging, monkeypatch):
    monkeypatch.setenv("FINANCE_TRACKER_LOG_LEVEL", "error")
    logging_setup.configure_logging(fallback="DEBUG")
    assert fresh_logging.level == logging.ERROR
