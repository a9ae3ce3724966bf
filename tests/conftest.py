import pytest

from database.db_manager import DatabaseManager
from database.budget_dao import BudgetDAO
from database.recurring_dao import RecurringDAO
from database.transaction_dao import TransactionDAO
from services.budget_service import BudgetService
from services.recurring_service import RecurringService
from services.report_service import ReportService
from services.transaction_service import TransactionService


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch):
    """Keep config.json reads and writes inside the test's tmp dir."""
    home = tmp_path / "home"
    monkeypatch.setenv("FINANCE_TRACKER_HOME", str(home))
    monkeypatch.delenv("FINANCE_TRACKER_LOG_LEVEL", raising=False)
    return home


@pytest.fixture
def db(tmp_path):
    manager = DatabaseManager.open(db_folder=str(tmp_path / "data"))
    yield manager
    manager.close()


@pytest.fixture
def tx_dao(db):
    return TransactionDAO(db)


@pytest.fixture
def recurring_dao(db):
    return RecurringDAO(db)


@pytest.fixture
def budget_dao(db):
    return BudgetDAO(db)


@pytest.fixture
def tx_service(tx_dao):
    return TransactionService(tx_dao)


@pytest.fixture
def recurring_service(recurring_dao, tx_dao):
    return RecurringService(recurring_dao, tx_dao)


@pytest.fixture
def budget_service(budget_dao, tx_dao):
    return BudgetService(budget_dao, tx_dao)


@pytest.fixture
def report_service(tx_dao):
    return ReportService(tx_dao)
