"""Local-calendar date arithmetic."""

from __future__ import annotations

from datetime import date, datetime, timedelta

from taskflow_mcp.enums import WeekStart

UPCOMING_WINDOW_DAYS = 14


def local_today() -> date:
    """Today's date on the local calendar."""
    return datetime.now().astimezone().date()


def parse_local_date(value: str | date | datetime | None) -> date | None:
    """
    Parse a calendar day.

    Accepts ``YYYY-MM-DD``, an ISO datetime (its date part is used, no time
    zone conversion), a ``date``/``datetime`` instance, or an empty value.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = value.strip()
    if not text:
        return None
    return date.fromisoformat(text[:10])


def format_local_date(day: date) -> str:
    """Format a day as ``YYYY-MM-DD``."""
    return day.isoformat()


def start_of_week(day: date, week_start: WeekStart = WeekStart.SUNDAY) -> date:
    """First day of the week containing ``day``."""
    offset = (day.weekday() - week_start.value) % 7
    return day - timedelta(days=offset)


def upcoming_window(today: date, week_start: WeekStart = WeekStart.SUNDAY) -> tuple[date, date]:
    """Inclusive bounds of the current plus the following week."""
    start = start_of_week(today, week_start)
    return start, start + timedelta(days=UPCOMING_WINDOW_DAYS - 1)
