"""Field validation utilities for Horologe.

Unlike the pure calendar helpers, these checks never raise: they return a
failed Validity describing the first out-of-range field, or None when the
fields are acceptable. DateTime factories use them to build Invalid values.

This module is not part of the public API.
"""

from __future__ import annotations

from typing import Any

from horologe._internal.calendar import days_in_month, days_in_year, weeks_in_week_year
from horologe._internal.constants import (
    ISO_FIRST_DAY_OF_WEEK,
    ISO_MIN_DAYS_IN_FIRST_WEEK,
)
from horologe.units.validity import Reason, Validity


def is_integer(value: Any) -> bool:
    """Return True for ints and integral floats (bools excluded)."""
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, float) and value.is_integer()


def integer_between(value: Any, low: int, high: int) -> bool:
    return is_integer(value) and low <= value <= high


def unit_out_of_range(unit: str, value: Any) -> Validity:
    """Build the failure reported for an out-of-range calendar field.

    Examples:
        >>> unit_out_of_range("month", 13).explanation
        'you specified 13 (of type int) as a month, which is invalid'
    """
    return Validity.failure(
        Reason.INVALID_UNIT_VALUE,
        f"you specified {value!r} (of type {type(value).__name__}) as a {unit}, "
        "which is invalid",
    )


def check_gregorian(fields: dict[str, Any]) -> Validity | None:
    """Validate ``year``/``month``/``day``."""
    year, month, day = fields["year"], fields["month"], fields["day"]
    if not is_integer(year):
        return unit_out_of_range("year", year)
    if not integer_between(month, 1, 12):
        return unit_out_of_range("month", month)
    if not integer_between(day, 1, days_in_month(int(year), int(month))):
        return unit_out_of_range("day", day)
    return None


def check_ordinal(fields: dict[str, Any]) -> Validity | None:
    """Validate ``year``/``ordinal``."""
    year, ordinal = fields["year"], fields["ordinal"]
    if not is_integer(year):
        return unit_out_of_range("year", year)
    if not integer_between(ordinal, 1, days_in_year(int(year))):
        return unit_out_of_range("ordinal", ordinal)
    return None


def check_week(
    fields: dict[str, Any],
    first_day_of_week: int = ISO_FIRST_DAY_OF_WEEK,
    min_days_in_first_week: int = ISO_MIN_DAYS_IN_FIRST_WEEK,
) -> Validity | None:
    """Validate ``week_year``/``week_number``/``weekday``.

    Locale week fields are renamed to these keys before calling.
    """
    week_year, week_number, weekday = (
        fields["week_year"],
        fields["week_number"],
        fields["weekday"],
    )
    if not is_integer(week_year):
        return unit_out_of_range("week_year", week_year)
    max_week = weeks_in_week_year(
        int(week_year), first_day_of_week, min_days_in_first_week
    )
    if not integer_between(week_number, 1, max_week):
        return unit_out_of_range("week_number", week_number)
    if not integer_between(weekday, 1, 7):
        return unit_out_of_range("weekday", weekday)
    return None


def check_time(fields: dict[str, Any]) -> Validity | None:
    """Validate ``hour``/``minute``/``second``/``millisecond``.

    Hour 24 is accepted only as 24:00:00.000, which rolls over to midnight
    of the following day.
    """
    hour = fields["hour"]
    minute = fields["minute"]
    second = fields["second"]
    millisecond = fields["millisecond"]
    end_of_day = (
        hour == 24 and minute == 0 and second == 0 and millisecond == 0
    )
    if not (integer_between(hour, 0, 23) or end_of_day):
        return unit_out_of_range("hour", hour)
    if not integer_between(minute, 0, 59):
        return unit_out_of_range("minute", minute)
    if not integer_between(second, 0, 59):
        return unit_out_of_range("second", second)
    if not integer_between(millisecond, 0, 999):
        return unit_out_of_range("millisecond", millisecond)
    return None


__all__ = [
    "is_integer",
    "integer_between",
    "unit_out_of_range",
    "check_gregorian",
    "check_ordinal",
    "check_week",
    "check_time",
]
