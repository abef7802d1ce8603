"""Tests for local-calendar date helpers."""

from datetime import date, datetime

import pytest

from taskflow_mcp.core.dates import format_local_date, parse_local_date, start_of_week, upcoming_window
from taskflow_mcp.enums import WeekStart


class TestStartOfWeek:
    """Tests for start_of_week."""

    def test_sunday_start(self):
        """Friday 2025-01-10 belongs to the week starting Sunday 2025-01-05."""
        assert start_of_week(date(2025, 1, 10)) == date(2025, 1, 5)

    def test_sunday_is_its_own_start(self):
        assert start_of_week(date(2025, 1, 5)) == date(2025, 1, 5)

    def test_monday_start(self):
        assert start_of_week(date(2025, 1, 10), WeekStart.MONDAY) == date(2025, 1, 6)

    def test_sunday_with_monday_start(self):
        """A Sunday closes the Monday-start week."""
        assert start_of_week(date(2025, 1, 12), WeekStart.MONDAY) == date(2025, 1, 6)

    def test_crosses_year_boundary(self):
        assert start_of_week(date(2025, 1, 1)) == date(2024, 12, 29)


class TestUpcomingWindow:
    """Tests for the two-week upcoming window."""

    def test_window_is_fourteen_days_inclusive(self):
        start, end = upcoming_window(date(2025, 1, 10))
        assert start == date(2025, 1, 5)
        assert end == date(2025, 1, 18)
        assert (end - start).days == 13

    def test_window_with_monday_start(self):
        assert upcoming_window(date(2025, 1, 10), WeekStart.MONDAY) == (date(2025, 1, 6), date(2025, 1, 19))


class TestParseLocalDate:
    """Tests for parse_local_date."""

    def test_plain_date_string(self):
        assert parse_local_date("2025-01-10") == date(2025, 1, 10)

    def test_datetime_string_keeps_calendar_day(self):
        """No time zone conversion: the written day is the day."""
        assert parse_local_date("2025-01-10T23:30:00-08:00") == date(2025, 1, 10)

    def test_datetime_instance(self):
        assert parse_local_date(datetime(2025, 1, 10, 23, 59)) == date(2025, 1, 10)

    def test_empty_values(self):
        assert parse_local_date(None) is None
        assert parse_local_date("") is None
        assert parse_local_date("   ") is None

    def test_invalid_string(self):
        with pytest.raises(ValueError):
            parse_local_date("tomorrow")


def test_format_local_date_zero_pads():
    assert format_local_date(date(2025, 3, 4)) == "2025-03-04"
