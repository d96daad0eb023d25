"""Tests for date parsing, periods and time zone conversion."""

import pytest
from datetime import date, datetime, timedelta
from dateutil import tz
from dateutil.relativedelta import relativedelta

from timebill.domain.errors import ValidationError
from timebill.utils.date_parser import (
    custom_period_range,
    format_iso_date,
    format_medium_date,
    format_period_label,
    from_millis,
    get_period_range,
    inclusive_period_end,
    parse_date,
    parse_datetime,
    resolve_zone,
    to_millis,
)

from conftest import utc_ms

NEW_YORK = tz.gettz("America/New_York")


def test_parse_absolute_date():
    """Test parsing absolute dates."""
    assert parse_date("2024-01-15") == date(2024, 1, 15)


def test_parse_today():
    """Test parsing 'today'."""
    assert parse_date("today") == date.today()


def test_parse_yesterday():
    """Test parsing 'yesterday'."""
    assert parse_date("yesterday") == date.today() - timedelta(days=1)


def test_parse_relative_with_reference_day():
    """Relative dates are computed from the given reference day."""
    wednesday = date(2024, 1, 17)
    assert parse_date("last monday", today=wednesday) == date(2024, 1, 15)
    assert parse_date("last wednesday", today=wednesday) == date(2024, 1, 10)
    assert parse_date("this week", today=wednesday) == date(2024, 1, 15)
    assert parse_date("last week", today=wednesday) == date(2024, 1, 8)
    assert parse_date("this month", today=wednesday) == date(2024, 1, 1)
    assert parse_date("last month", today=wednesday) == date(2023, 12, 1)


def test_parse_last_month():
    """Test parsing 'last month'."""
    today = date.today()
    assert parse_date("last month") == (today - relativedelta(months=1)).replace(day=1)


def test_parse_invalid_relative():
    """Test parsing invalid relative date."""
    with pytest.raises(ValueError):
        parse_date("last invalid")


def test_parse_standard_formats():
    """Test parsing various standard date formats."""
    assert parse_date("January 15, 2024") == date(2024, 1, 15)
    assert parse_date("15/01/2024") == date(2024, 1, 15)


class TestZones:
    def test_resolve_named_zone(self):
        assert resolve_zone("UTC") is not None
        assert resolve_zone("America/New_York") == NEW_YORK

    def test_resolve_default_is_local(self):
        assert resolve_zone(None) == tz.tzlocal()

    def test_unknown_zone(self):
        with pytest.raises(ValidationError, match="Unknown timezone"):
            resolve_zone("Nowhere/Special")

    def test_millis_round_trip(self):
        dt = datetime(2024, 3, 10, 12, 30, tzinfo=tz.UTC)
        assert to_millis(dt) == 1710073800000
        assert from_millis(1710073800000, tz.UTC) == dt

    def test_parse_naive_datetime_uses_zone(self):
        parsed = parse_datetime("2024-01-15 09:00", NEW_YORK)
        assert to_millis(parsed) == utc_ms(2024, 1, 15, 14)

    def test_parse_datetime_with_offset(self):
        parsed = parse_datetime("2024-01-15T09:00:00+01:00", NEW_YORK)
        assert to_millis(parsed) == utc_ms(2024, 1, 15, 8)

    def test_parse_datetime_invalid(self):
        with pytest.raises(ValueError, match="Could not parse"):
            parse_datetime("not a time", tz.UTC)


class TestPeriodRange:
    now = datetime(2024, 1, 17, 12, tzinfo=tz.UTC)  # Wednesday

    def test_this_week_starts_monday(self):
        assert get_period_range("this-week", tz.UTC, now=self.now) == (
            utc_ms(2024, 1, 15),
            utc_ms(2024, 1, 22),
        )

    def test_last_week(self):
        assert get_period_range("last-week", tz.UTC, now=self.now) == (
            utc_ms(2024, 1, 8),
            utc_ms(2024, 1, 15),
        )

    def test_this_month(self):
        assert get_period_range("this-month", tz.UTC, now=self.now) == (
            utc_ms(2024, 1, 1),
            utc_ms(2024, 2, 1),
        )

    def test_last_month_crosses_year(self):
        assert get_period_range("last-month", tz.UTC, now=self.now) == (
            utc_ms(2023, 12, 1),
            utc_ms(2024, 1, 1),
        )

    def test_boundaries_follow_zone(self):
        """At 03:00 UTC on Feb 1 it is still January in New York."""
        now = datetime(2024, 2, 1, 3, tzinfo=tz.UTC)
        assert get_period_range("this-month", NEW_YORK, now=now) == (
            utc_ms(2024, 1, 1, 5),
            utc_ms(2024, 2, 1, 5),
        )

    def test_underscore_alias(self):
        assert get_period_range("this_week", tz.UTC, now=self.now)[0] == utc_ms(2024, 1, 15)

    def test_unknown_period(self):
        with pytest.raises(ValidationError, match="Unknown period"):
            get_period_range("next-decade", tz.UTC, now=self.now)

    def test_custom_range_is_inclusive_of_end_day(self):
        assert custom_period_range(date(2024, 1, 1), date(2024, 1, 31), tz.UTC) == (
            utc_ms(2024, 1, 1),
            utc_ms(2024, 2, 1),
        )

    def test_custom_range_reversed(self):
        with pytest.raises(ValidationError, match="valid date range"):
            custom_period_range(date(2024, 2, 1), date(2024, 1, 1), tz.UTC)


class TestDateFormatting:
    def test_iso_and_medium(self):
        assert format_iso_date(date(2024, 1, 5)) == "2024-01-05"
        assert format_medium_date(date(2024, 1, 5)) == "Jan 5, 2024"
        assert format_medium_date(date(2023, 12, 31)) == "Dec 31, 2023"

    def test_inclusive_period_end(self):
        assert inclusive_period_end(utc_ms(2024, 2, 1), tz.UTC) == date(2024, 1, 31)

    def test_period_label(self):
        label = format_period_label(utc_ms(2024, 1, 1), utc_ms(2024, 2, 1), tz.UTC)
        assert label == "Jan 1, 2024 – Jan 31, 2024"

    def test_period_label_in_zone(self):
        label = format_period_label(utc_ms(2024, 1, 1, 5), utc_ms(2024, 2, 1, 5), NEW_YORK)
        assert label == "Jan 1, 2024 – Jan 31, 2024"
