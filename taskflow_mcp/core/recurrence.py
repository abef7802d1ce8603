"""Roll repeating tasks forward."""

from __future__ import annotations

from datetime import date, timedelta

from dateutil.relativedelta import relativedelta

from taskflow_mcp.enums import RepeatFrequency
from taskflow_mcp.errors import UnknownFrequencyError

_DAY_STEPS = {
    RepeatFrequency.EVERY_DAY: timedelta(days=1),
    RepeatFrequency.EVERY_WEEK: timedelta(days=7),
}

_CALENDAR_STEPS = {
    RepeatFrequency.EVERY_MONTH: relativedelta(months=1),
    RepeatFrequency.EVERY_YEAR: relativedelta(years=1),
}


def normalize_frequency(value: str | RepeatFrequency | None) -> RepeatFrequency:
    """
    Map a stored repeat value to a ``RepeatFrequency``.

    Accepts the canonical strings ("every day"), underscore aliases
    ("every_day") and empty/"none" values.

    Raises:
        UnknownFrequencyError: for any other value
    """
    if isinstance(value, RepeatFrequency):
        return value
    if value is None:
        return RepeatFrequency.NONE
    normalized = value.strip().lower().replace("_", " ")
    if not normalized:
        return RepeatFrequency.NONE
    try:
        return RepeatFrequency(normalized)
    except ValueError:
        raise UnknownFrequencyError(value) from None


def is_repeating(value: str | RepeatFrequency | None) -> bool:
    """True when a stored repeat value asks for roll-forward instead of completion."""
    return normalize_frequency(value) != RepeatFrequency.NONE


def _first_of_month(day: date) -> date:
    return day.replace(day=1)


def _step_calendar(day: date, step: relativedelta) -> date:
    # Step from the first of the month, then add the day offset back so that
    # days past the end of the target month spill into the month after
    # (Jan 31 -> Mar 3 in 2025, Feb 29 2024 + 1 year -> Mar 1 2025).
    return _first_of_month(day) + step + timedelta(days=day.day - 1)


def advance(day: date, frequency: str | RepeatFrequency) -> date:
    """
    Compute the next due date for a repeating task.

    Monthly and yearly steps never clamp: a day the target month does not
    have overflows into the month after it.

    Args:
        day: Current due date
        frequency: every day, every week, every month or every year

    Returns:
        The next due date

    Raises:
        UnknownFrequencyError: if the frequency is not one of the four
            recognized values ("none" included)
    """
    normalized = normalize_frequency(frequency)
    if normalized in _DAY_STEPS:
        return day + _DAY_STEPS[normalized]
    if normalized in _CALENDAR_STEPS:
        return _step_calendar(day, _CALENDAR_STEPS[normalized])
    raise UnknownFrequencyError(frequency)
