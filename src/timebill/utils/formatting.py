"""Display formatting for numbers, money, durations and text.

All formatters are plain functions of their inputs, using en-US separators
(comma for thousands, period for decimals).
"""

from decimal import Decimal, ROUND_HALF_UP

CURRENCY_SYMBOLS = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
}

ELLIPSIS = "…"


def _to_decimal(value: float | int | Decimal) -> Decimal:
    if isinstance(value, Decimal):
        return value
    # repr() keeps the shortest round-tripping form, e.g. 0.15 not 0.1499...
    return Decimal(repr(value)) if isinstance(value, float) else Decimal(value)


def format_integer(value: float | int | Decimal) -> str:
    """Format a number rounded to a whole number, e.g. ``1,234``."""
    rounded = _to_decimal(value).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return f"{rounded:,f}"


def format_one_decimal(value: float | int | Decimal) -> str:
    """Format a number with exactly one decimal, e.g. ``1,234.5``."""
    rounded = _to_decimal(value).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)
    return f"{rounded:,f}"


def format_hours(hours: float) -> str:
    """Format hours for invoices, e.g. ``1.5``."""
    return format_one_decimal(hours)


def format_currency_from_cents(cents: int, currency: str = "USD") -> str:
    """Format an amount in cents as money, e.g. ``$1,234.56`` or ``-$0.50``.

    Args:
        cents: Amount in minor units
        currency: ISO currency code

    Returns:
        Currency string with symbol prefix; unknown codes are prefixed with
        the code itself and a space
    """
    amount = (Decimal(cents) / 100).quantize(Decimal("0.01"))
    prefix = CURRENCY_SYMBOLS.get(currency.upper(), f"{currency.upper()} ")
    sign = "-" if amount < 0 else ""
    return f"{sign}{prefix}{abs(amount):,.2f}"


def format_duration(ms: int) -> str:
    """Format a duration as ``h:mm:ss``, or ``m:ss`` under an hour."""
    total_seconds = ms // 1000
    seconds = total_seconds % 60
    total_minutes = total_seconds // 60
    minutes = total_minutes % 60
    hours = total_minutes // 60

    if hours > 0:
        return f"{hours}:{minutes:02d}:{seconds:02d}"
    return f"{minutes}:{seconds:02d}"


def truncate(text: str, max_len: int) -> str:
    """Cut text to ``max_len`` characters, ending in an ellipsis when cut."""
    if len(text) <= max_len:
        return text
    return f"{text[:max(0, max_len - 1)]}{ELLIPSIS}"
