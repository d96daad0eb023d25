"""Utility functions for timebill."""

from timebill.utils.date_parser import parse_date, resolve_zone
from timebill.utils.amount_parser import parse_hourly_rate_to_cents
from timebill.utils.formatting import format_currency_from_cents, format_hours

__all__ = [
    "parse_date",
    "resolve_zone",
    "parse_hourly_rate_to_cents",
    "format_currency_from_cents",
    "format_hours",
]
