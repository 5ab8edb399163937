"""Calendar utilities for Horologe.

This module provides the zone-independent calendar math the rest of the
library is built on: leap years, month lengths, ordinal dates, ISO and
locale week dates, and conversions between civil fields and epoch
milliseconds in the proleptic Gregorian calendar.

Years are astronomical: year 0 is 1 BCE, year -1 is 2 BCE. Every function
works for any integer year, including negative years and years beyond 9999.

This module is not part of the public API.
"""

from __future__ import annotations

from horologe._internal.constants import (
    DAYS_BEFORE_MONTH,
    DAYS_IN_MONTH,
    DAYS_PER_400_YEARS,
    EPOCH_SHIFT_DAYS,
    ISO_FIRST_DAY_OF_WEEK,
    ISO_MIN_DAYS_IN_FIRST_WEEK,
    MILLIS_PER_DAY,
    MILLIS_PER_HOUR,
    MILLIS_PER_MINUTE,
    MILLIS_PER_SECOND,
)
from horologe.errors import InvalidUnitValueError


def is_leap_year(year: int) -> bool:
    """Check if a year is a leap year in the proleptic Gregorian calendar.

    A year is a leap year if:
    - Divisible by 4, AND
    - NOT divisible by 100, unless also divisible by 400

    Args:
        year: The year to check (can be negative for BCE).

    Returns:
        True if the year is a leap year.

    Examples:
        >>> is_leap_year(2000)  # Divisible by 400
        True
        >>> is_leap_year(1900)  # Divisible by 100 but not 400
        False
        >>> is_leap_year(2024)
        True
    """
    return year % 4 == 0 and (year % 100 != 0 or year % 400 == 0)


def days_in_year(year: int) -> int:
    """Return 366 for leap years, 365 otherwise."""
    return 366 if is_leap_year(year) else 365


def days_in_month(year: int, month: int) -> int:
    """Return the number of days in a given month.

    Args:
        year: The year (needed for February in leap years).
        month: The month (1-12).

    Returns:
        Number of days in the month (28, 29, 30 or 31).

    Raises:
        InvalidUnitValueError: If month is not in 1-12.
    """
    if month < 1 or month > 12:
        raise InvalidUnitValueError(f"month must be 1-12, got {month}")

    if month == 2 and is_leap_year(year):
        return 29
    return DAYS_IN_MONTH[month]


def ordinal_from_date(year: int, month: int, day: int) -> int:
    """Convert a civil date to its day of the year (1-366).

    Raises:
        InvalidUnitValueError: If month is outside 1-12 or day exceeds the
            length of the month.

    Examples:
        >>> ordinal_from_date(2024, 3, 1)
        61
    """
    max_day = days_in_month(year, month)
    if day < 1 or day > max_day:
        raise InvalidUnitValueError(
            f"day must be 1-{max_day} for {year}-{month:02d}, got {day}"
        )
    result = DAYS_BEFORE_MONTH[month] + day
    if month > 2 and is_leap_year(year):
        result += 1
    return result


def date_from_ordinal(year: int, ordinal: int) -> tuple[int, int]:
    """Convert a day of the year back to (month, day).

    Raises:
        InvalidUnitValueError: If ordinal is outside the year.

    Examples:
        >>> date_from_ordinal(2024, 61)
        (3, 1)
    """
    if ordinal < 1 or ordinal > days_in_year(year):
        raise InvalidUnitValueError(
            f"ordinal must be 1-{days_in_year(year)} for {year}, got {ordinal}"
        )
    leap = 1 if is_leap_year(year) else 0
    for month in range(12, 0, -1):
        before = DAYS_BEFORE_MONTH[month] + (leap if month > 2 else 0)
        if ordinal > before:
            return (month, ordinal - before)
    # ordinal >= 1 always lands in January above
    raise InvalidUnitValueError(f"ordinal {ordinal} out of range for {year}")


def days_from_civil(year: int, month: int, day: int) -> int:
    """Return the number of days from 1970-01-01 to the given civil date.

    The date is assumed valid; use ``epoch_millis_from_civil`` for roll-over
    of out-of-range fields.
    """
    # Shift the year to start in March so the leap day is the last day
    y = year - 1 if month <= 2 else year
    era = y // 400
    year_of_era = y - era * 400
    month_from_march = (month + 9) % 12
    day_of_year = (153 * month_from_march + 2) // 5 + day - 1
    day_of_era = (
        year_of_era * 365 + year_of_era // 4 - year_of_era // 100 + day_of_year
    )
    return era * DAYS_PER_400_YEARS + day_of_era - EPOCH_SHIFT_DAYS


def civil_from_days(days: int) -> tuple[int, int, int]:
    """Inverse of ``days_from_civil``: epoch days to (year, month, day)."""
    z = days + EPOCH_SHIFT_DAYS
    era = z // DAYS_PER_400_YEARS
    day_of_era = z - era * DAYS_PER_400_YEARS
    year_of_era = (
        day_of_era
        - day_of_era // 1460
        + day_of_era // 36524
        - day_of_era // 146096
    ) // 365
    day_of_year = day_of_era - (
        365 * year_of_era + year_of_era // 4 - year_of_era // 100
    )
    month_from_march = (5 * day_of_year + 2) // 153
    day = day_of_year - (153 * month_from_march + 2) // 5 + 1
    month = month_from_march + 3 if month_from_march < 10 else month_from_march - 9
    year = year_of_era + era * 400 + (1 if month <= 2 else 0)
    return (year, month, day)


def iso_weekday(year: int, month: int, day: int) -> int:
    """Return the ISO weekday of a date (1 = Monday ... 7 = Sunday).

    Examples:
        >>> iso_weekday(1970, 1, 1)  # Thursday
        4
    """
    return (days_from_civil(year, month, day) + 3) % 7 + 1


def _iso_weekday_to_local(weekday: int, first_day_of_week: int) -> int:
    return (weekday - first_day_of_week + 7) % 7 + 1


def _first_week_offset(year: int, first_day_of_week: int, min_days: int) -> int:
    # Local weekday of the last day that must fall in week 1
    anchor = _iso_weekday_to_local(iso_weekday(year, 1, min_days), first_day_of_week)
    return -anchor + min_days - 1


def weeks_in_week_year(
    week_year: int,
    first_day_of_week: int = ISO_FIRST_DAY_OF_WEEK,
    min_days_in_first_week: int = ISO_MIN_DAYS_IN_FIRST_WEEK,
) -> int:
    """Return the number of weeks (52 or 53) in a week-numbering year.

    Examples:
        >>> weeks_in_week_year(2004)
        53
        >>> weeks_in_week_year(2005)
        52
    """
    offset = _first_week_offset(week_year, first_day_of_week, min_days_in_first_week)
    offset_next = _first_week_offset(
        week_year + 1, first_day_of_week, min_days_in_first_week
    )
    return (days_in_year(week_year) - offset + offset_next) // 7


def local_week_info(
    year: int,
    month: int,
    day: int,
    first_day_of_week: int,
    min_days_in_first_week: int,
) -> tuple[int, int, int]:
    """Return (week_year, week_number, weekday) under a locale week definition.

    ``first_day_of_week`` is an ISO weekday (1 = Monday, 7 = Sunday) and the
    returned weekday counts from it (1 = first day of the locale's week).
    Week 1 is the first week holding at least ``min_days_in_first_week``
    days of the year.
    """
    ordinal = ordinal_from_date(year, month, day)
    weekday = _iso_weekday_to_local(iso_weekday(year, month, day), first_day_of_week)
    week_number = (ordinal - weekday + 14 - min_days_in_first_week) // 7

    if week_number < 1:
        week_year = year - 1
        week_number = weeks_in_week_year(
            week_year, first_day_of_week, min_days_in_first_week
        )
    elif week_number > weeks_in_week_year(
        year, first_day_of_week, min_days_in_first_week
    ):
        week_year = year + 1
        week_number = 1
    else:
        week_year = year
    return (week_year, week_number, weekday)


def iso_week_info(year: int, month: int, day: int) -> tuple[int, int, int]:
    """Return the ISO-8601 (week_year, week_number, weekday) of a date.

    Week 1 is the week holding the year's first Thursday; weeks start on
    Monday. The week year differs from the calendar year near January 1.

    Examples:
        >>> iso_week_info(2004, 12, 31)
        (2004, 53, 5)
        >>> iso_week_info(2008, 12, 29)
        (2009, 1, 1)
        >>> iso_week_info(2010, 1, 3)
        (2009, 53, 7)
    """
    return local_week_info(
        year, month, day, ISO_FIRST_DAY_OF_WEEK, ISO_MIN_DAYS_IN_FIRST_WEEK
    )


def date_from_week_info(
    week_year: int,
    week_number: int,
    weekday: int,
    first_day_of_week: int = ISO_FIRST_DAY_OF_WEEK,
    min_days_in_first_week: int = ISO_MIN_DAYS_IN_FIRST_WEEK,
) -> tuple[int, int, int]:
    """Convert a week date back to (year, month, day).

    The week fields are assumed to be in range; validate them with
    ``weeks_in_week_year`` first.

    Examples:
        >>> date_from_week_info(2004, 53, 5)
        (2004, 12, 31)
    """
    anchor = _iso_weekday_to_local(
        iso_weekday(week_year, 1, min_days_in_first_week), first_day_of_week
    )
    ordinal = week_number * 7 + weekday - anchor - 7 + min_days_in_first_week

    if ordinal < 1:
        year = week_year - 1
        ordinal += days_in_year(year)
    elif ordinal > days_in_year(week_year):
        year = week_year + 1
        ordinal -= days_in_year(week_year)
    else:
        year = week_year

    month, day = date_from_ordinal(year, ordinal)
    return (year, month, day)


def epoch_millis_from_civil(
    year: int,
    month: int,
    day: int,
    hour: int = 0,
    minute: int = 0,
    second: int = 0,
    millisecond: int = 0,
) -> int:
    """Convert civil fields, read as UTC, to milliseconds since the epoch.

    Out-of-range fields roll over into the next larger unit: month 13 is
    January of the following year, day 0 is the last day of the previous
    month, hour 24 is midnight of the next day.

    Examples:
        >>> epoch_millis_from_civil(1970, 1, 2)
        86400000
        >>> epoch_millis_from_civil(2023, 13, 1) == epoch_millis_from_civil(2024, 1, 1)
        True
    """
    carry, month_index = divmod(month - 1, 12)
    days = days_from_civil(year + carry, month_index + 1, 1) + (day - 1)
    return (
        days * MILLIS_PER_DAY
        + hour * MILLIS_PER_HOUR
        + minute * MILLIS_PER_MINUTE
        + second * MILLIS_PER_SECOND
        + millisecond
    )


def civil_from_epoch_millis(ms: int) -> tuple[int, int, int, int, int, int, int]:
    """Split epoch milliseconds, read as UTC, into civil fields.

    Returns:
        Tuple of (year, month, day, hour, minute, second, millisecond).
    """
    days, rem = divmod(ms, MILLIS_PER_DAY)
    year, month, day = civil_from_days(days)
    hour, rem = divmod(rem, MILLIS_PER_HOUR)
    minute, rem = divmod(rem, MILLIS_PER_MINUTE)
    second, millisecond = divmod(rem, MILLIS_PER_SECOND)
    return (year, month, day, hour, minute, second, millisecond)


def untruncate_year(year: int, cutoff: int) -> int:
    """Expand a two-digit year around a pivot.

    Two-digit years above ``cutoff`` land in the 1900s, the rest in the
    2000s; years that already have more than two digits pass through.

    Examples:
        >>> untruncate_year(14, 60)
        2014
        >>> untruncate_year(75, 60)
        1975
    """
    if year > 99:
        return year
    return 1900 + year if year > cutoff else 2000 + year


__all__ = [
    "is_leap_year",
    "days_in_year",
    "days_in_month",
    "ordinal_from_date",
    "date_from_ordinal",
    "days_from_civil",
    "civil_from_days",
    "iso_weekday",
    "weeks_in_week_year",
    "local_week_info",
    "iso_week_info",
    "date_from_week_info",
    "epoch_millis_from_civil",
    "civil_from_epoch_millis",
    "untruncate_year",
]
