"""Date parsing and time zone utilities.

Time entries and invoice periods are stored as epoch milliseconds; these
helpers convert them to calendar dates in a given zone and back.
"""

from datetime import date, datetime, time, timedelta, tzinfo
from typing import Optional

from dateutil import parser as date_parser
from dateutil import tz
from dateutil.relativedelta import relativedelta

from timebill.domain.errors import ValidationError

EPOCH = datetime(1970, 1, 1, tzinfo=tz.UTC)

MONTH_ABBREVIATIONS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)

PERIOD_PRESETS = ("this-week", "last-week", "this-month", "last-month")

WEEKDAYS = ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]


def resolve_zone(name: Optional[str]) -> tzinfo:
    """Resolve a time zone name, falling back to the local zone.

    Raises:
        ValidationError: If the zone name is unknown
    """
    if not name:
        return tz.tzlocal()
    zone = tz.gettz(name)
    if zone is None:
        raise ValidationError(f"Unknown timezone '{name}'")
    return zone


def from_millis(ms: int, zone: tzinfo) -> datetime:
    """Convert epoch milliseconds to an aware datetime in ``zone``."""
    return (EPOCH + timedelta(milliseconds=ms)).astimezone(zone)


def to_millis(dt: datetime) -> int:
    """Convert an aware datetime to epoch milliseconds."""
    return (dt - EPOCH) // timedelta(milliseconds=1)


def now_millis() -> int:
    """Current time in epoch milliseconds."""
    return to_millis(datetime.now(tz.UTC))


def start_of_day(day: date, zone: tzinfo) -> datetime:
    """Midnight of ``day`` in ``zone`` (shifted forward if it does not exist)."""
    return tz.resolve_imaginary(datetime.combine(day, time(), tzinfo=zone))


def inclusive_period_end(period_end: int, zone: tzinfo) -> date:
    """Last calendar day covered by a period with exclusive end ``period_end``."""
    return (from_millis(period_end, zone) - relativedelta(days=1)).date()


def format_iso_date(day: date) -> str:
    """Format a date as ``YYYY-MM-DD``."""
    return day.isoformat()


def format_medium_date(day: date) -> str:
    """Format a date as ``Jan 5, 2024``."""
    return f"{MONTH_ABBREVIATIONS[day.month - 1]} {day.day}, {day.year}"


def format_period_label(period_start: int, period_end: int, zone: tzinfo) -> str:
    """Format a half-open period as ``Jan 1, 2024 – Jan 31, 2024``."""
    start = format_medium_date(from_millis(period_start, zone).date())
    end = format_medium_date(inclusive_period_end(period_end, zone))
    return f"{start} – {end}"


def get_period_range(
    preset: str, zone: tzinfo, now: Optional[datetime] = None
) -> tuple[int, int]:
    """Get the half-open millisecond range for a named period.

    Weeks start on Monday.

    Args:
        preset: One of this-week, last-week, this-month, last-month
        zone: Time zone the calendar boundaries are taken in
        now: Reference time (defaults to the current time)

    Returns:
        Tuple of (period_start, period_end) in epoch milliseconds

    Raises:
        ValidationError: If preset is not recognized
    """
    preset = preset.strip().lower().replace("_", "-")
    today = (now or datetime.now(tz.UTC)).astimezone(zone).date()
    monday = today - timedelta(days=today.weekday())
    first_of_month = today.replace(day=1)

    if preset == "this-week":
        start, end = monday, monday + timedelta(weeks=1)
    elif preset == "last-week":
        start, end = monday - timedelta(weeks=1), monday
    elif preset == "this-month":
        start, end = first_of_month, first_of_month + relativedelta(months=1)
    elif preset == "last-month":
        start, end = first_of_month - relativedelta(months=1), first_of_month
    else:
        raise ValidationError(
            f"Unknown period: '{preset}'. Supported periods: {', '.join(PERIOD_PRESETS)}"
        )

    return to_millis(start_of_day(start, zone)), to_millis(start_of_day(end, zone))


def custom_period_range(start_date: date, end_date: date, zone: tzinfo) -> tuple[int, int]:
    """Get the half-open range covering ``start_date`` through ``end_date`` inclusive.

    Raises:
        ValidationError: If the range is empty
    """
    period_start = to_millis(start_of_day(start_date, zone))
    period_end = to_millis(start_of_day(end_date + timedelta(days=1), zone))
    if period_end <= period_start:
        raise ValidationError("Select a valid date range.")
    return period_start, period_end


def parse_date(date_str: str, today: Optional[date] = None) -> date:
    """Parse a date string into a date object.

    Supports various formats including relative dates:
    - Absolute dates: "2024-01-15", "January 15, 2024", etc.
    - Relative dates: "today", "yesterday", "last monday", "this month", etc.

    Args:
        date_str: Date string in various formats
        today: Reference date for relative dates (defaults to today)

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    date_str = date_str.strip().lower()
    today = today or date.today()

    relative_dates = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
    }
    if date_str in relative_dates:
        return relative_dates[date_str]

    if date_str.startswith("last "):
        period = date_str[5:]
        if period == "month":
            return (today - relativedelta(months=1)).replace(day=1)
        elif period == "week":
            return today - timedelta(days=today.weekday() + 7)
        elif period in WEEKDAYS:
            days_ago = (today.weekday() - WEEKDAYS.index(period)) % 7
            return today - timedelta(days=days_ago or 7)

    elif date_str.startswith("this "):
        period = date_str[5:]
        if period == "month":
            return today.replace(day=1)
        elif period == "week":
            return today - timedelta(days=today.weekday())

    try:
        return date_parser.parse(date_str).date()
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}") from e


def parse_datetime(value: str, zone: tzinfo) -> datetime:
    """Parse a date-time string; naive values are taken to be in ``zone``.

    Raises:
        ValueError: If the string cannot be parsed
    """
    try:
        parsed = date_parser.parse(value)
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Could not parse date/time '{value}': {e}") from e
    if parsed.tzinfo is None:
        parsed = tz.resolve_imaginary(parsed.replace(tzinfo=zone))
    return parsed
