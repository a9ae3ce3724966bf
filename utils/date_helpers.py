from datetime import date, datetime, timedelta
import calendar
from utils.constants import DATE_FORMAT, MONTH_FORMAT

# ── Display date formats (settings key → strftime) ────────────────────────────

_DISPLAY_FORMATS = {
    "MM/DD/YYYY": "%m/%d/%Y",
    "DD/MM/YYYY": "%d/%m/%Y",
    "YYYY-MM-DD": "%Y-%m-%d",
    "DD.MM.YYYY": "%d.%m.%Y",
    "MM-DD-YYYY": "%m-%d-%Y",
}
DATE_FORMAT_OPTIONS = list(_DISPLAY_FORMATS)

_ISO_LIKE = ("%Y-%m-%d", "%Y/%m/%d", "%Y.%m.%d")


def today() -> date:
    return date.today()


def today_str() -> str:
    return format_date(today())


def current_month_str() -> str:
    return today().strftime(MONTH_FORMAT)


def parse_date(date_str: str | None) -> date | None:
    """Parse a YYYY-MM-DD string (or an ISO timestamp, truncated to the day).

    Returns None on failure.
    """
    if not date_str:
        return None
    text = date_str.strip()
    # '2024-01-15T00:00:00.000Z' / '2024-01-15 08:30:00'
    if len(text) > 10 and text[10] in ("T", " "):
        text = text[:10]
    for fmt in _ISO_LIKE:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            pass
    return None


def to_day(value: date | datetime | str | None) -> date | None:
    """Truncate a date, datetime or date string to a plain calendar day."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return parse_date(value)


def format_date(d: date) -> str:
    return d.strftime(DATE_FORMAT)


def _last_day(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def month_range(month_str: str) -> tuple[str, str]:
    """Return (first_day_str, last_day_str) for a YYYY-MM month."""
    try:
        first = datetime.strptime(month_str or "", MONTH_FORMAT).date()
    except ValueError:
        raise ValueError(f"Invalid month: {month_str}") from None
    last = first.replace(day=_last_day(first.year, first.month))
    return format_date(first), format_date(last)


def year_range(year: int) -> tuple[str, str]:
    return format_date(date(year, 1, 1)), format_date(date(year, 12, 31))


def add_days(d: date, n: int) -> date:
    return d + timedelta(days=n)


def add_months(d: date, n: int) -> date:
    """Add n months to d. A day past the target month's end becomes its last day."""
    year, month0 = divmod(d.year * 12 + d.month - 1 + n, 12)
    month = month0 + 1
    return date(year, month, min(d.day, _last_day(year, month)))


def add_years(d: date, n: int) -> date:
    """Add n years to d; Feb 29 lands on Feb 28 in non-leap years."""
    return add_months(d, 12 * n)


def friendly_month(month_str: str) -> str:
    """'2026-02' → 'February 2026'. Unparseable input comes back unchanged."""
    try:
        return datetime.strptime(month_str, MONTH_FORMAT).strftime("%B %Y")
    except (TypeError, ValueError):
        return month_str


def format_display_date(date_str: str, fmt_key: str = "MM/DD/YYYY") -> str:
    """Render a stored YYYY-MM-DD string in the user's display format."""
    d = parse_date(date_str)
    if d is None:
        return date_str
    return d.strftime(_DISPLAY_FORMATS.get(fmt_key, "%m/%d/%Y"))


def parse_display_date(display_str: str, fmt_key: str) -> date | None:
    """Parse a date typed in the given display format.

    Falls back to the ISO parser, so '2024-03-07' is accepted under any format.
    """
    if not display_str:
        return None
    try:
        return datetime.strptime(
            display_str.strip(), _DISPLAY_FORMATS.get(fmt_key, "%m/%d/%Y")
        ).date()
    except ValueError:
        return parse_date(display_str)
