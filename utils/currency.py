"""Display-only currency table.

Amounts are stored in the base currency (INR). Exchange rates are static
multipliers applied at display time; nothing is converted in storage.
"""
from dataclasses import dataclass

BASE_CURRENCY = "INR"


@dataclass(frozen=True)
class Currency:
    code: str
    symbol: str
    name: str
    exchange_rate: float    # units per 1 INR


CURRENCIES: dict[str, Currency] = {
    "INR": Currency("INR", "₹", "Indian Rupee", 1.0),
    "USD": Currency("USD", "$", "US Dollar", 0.012),
    "EUR": Currency("EUR", "€", "Euro", 0.011),
    "GBP": Currency("GBP", "£", "British Pound", 0.0095),
    "JPY": Currency("JPY", "¥", "Japanese Yen", 1.78),
    "AUD": Currency("AUD", "A$", "Australian Dollar", 0.019),
    "CAD": Currency("CAD", "C$", "Canadian Dollar", 0.017),
}


def get_currency(code: str) -> Currency:
    try:
        return CURRENCIES[code]
    except KeyError:
        raise ValueError(f"Unknown currency: {code}") from None


def convert_currency(amount: float, from_code: str, to_code: str) -> float:
    """Convert between two display currencies via the base currency."""
    base_amount = amount / get_currency(from_code).exchange_rate
    return base_amount * get_currency(to_code).exchange_rate


def format_currency(amount: float, code: str = BASE_CURRENCY) -> str:
    """Format a base-currency amount in the display currency, e.g. '$1,234.56'."""
    cur = get_currency(code)
    return f"{cur.symbol}{amount * cur.exchange_rate:,.2f}"


def format_signed(amount: float, code: str = BASE_CURRENCY) -> str:
    """Format with +/- sign."""
    sign = "+" if amount >= 0 else "-"
    return f"{sign}{format_currency(abs(amount), code)}"
