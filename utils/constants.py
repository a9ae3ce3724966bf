APP_NAME = "Finance Tracker"
APP_WIDTH = 1200
APP_HEIGHT = 750
DB_FILE = "finance.db"

DATE_FORMAT = "%Y-%m-%d"
MONTH_FORMAT = "%Y-%m"
BUDGET_ALERT_THRESHOLD = 0.80  # default 80%
AUTO_SUFFIX = "(Auto)"

TRANSACTION_TYPES = ["income", "expense"]
FREQUENCIES = ["daily", "weekly", "monthly", "yearly"]

TRANSACTION_LIST_LIMIT = 100
TRANSACTION_LIST_MAX = 500

INCOME_CATEGORIES = [
    "Salary",
    "Freelance",
    "Business",
    "Investments",
    "Rental",
    "Gifts",
    "Other Income",
]

EXPENSE_CATEGORIES = [
    "Food & Dining",
    "Groceries",
    "Rent",
    "Utilities",
    "Transport",
    "Healthcare",
    "Entertainment",
    "Shopping",
    "Education",
    "Insurance",
    "Subscriptions",
    "Travel",
    "Other",
]

CHART_COLORS = [
    "#C0C0C8", "#A0A0AF", "#8C8CA0", "#B4B4C2", "#9696AA",
    "#ACACBA", "#8080A0", "#B8B8C8", "#9090A8",
]

STATUS_COLORS = {
    "ok":      "#4CAF50",
    "warning": "#FF9800",
    "danger":  "#F44336",
}

DEFAULT_SETTINGS = [
    ("appearance_mode", "system"),
    ("currency_code", "INR"),
    ("budget_alert_threshold", str(BUDGET_ALERT_THRESHOLD)),
    ("date_format", "MM/DD/YYYY"),
]


def categories_for_type(type_: str) -> list[str]:
    if type_ == "income":
        return list(INCOME_CATEGORIES)
    if type_ == "expense":
        return list(EXPENSE_CATEGORIES)
    return sorted(set(INCOME_CATEGORIES) | set(EXPENSE_CATEGORIES))
