"""Amount parsing utilities."""

import re
from typing import Optional


def parse_hourly_rate_to_cents(rate_str: str) -> Optional[int]:
    """Parse an hourly rate such as "$1,250.50" into cents.

    Args:
        rate_str: Rate entered by the user

    Returns:
        Rate in cents, or None if the value is empty, negative, has more than
        two decimals or is not a number
    """
    normalized = re.sub(r"[$,]", "", rate_str.strip())
    if not normalized:
        return None
    if not re.fullmatch(r"\d+(\.\d{0,2})?", normalized):
        return None

    dollars_part, _, cents_part = normalized.partition(".")
    cents = int(cents_part.ljust(2, "0")[:2] or "0")
    return int(dollars_part) * 100 + cents
