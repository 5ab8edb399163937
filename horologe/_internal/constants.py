"""Internal constants for Horologe.

These constants define the limits and magic numbers used throughout
the library. This module is not part of the public API.
"""

from __future__ import annotations

# Time unit conversions
MILLIS_PER_SECOND: int = 1_000
MILLIS_PER_MINUTE: int = 60 * MILLIS_PER_SECOND
MILLIS_PER_HOUR: int = 60 * MILLIS_PER_MINUTE
MILLIS_PER_DAY: int = 24 * MILLIS_PER_HOUR  # 86_400_000
MILLIS_PER_WEEK: int = 7 * MILLIS_PER_DAY

MINUTES_PER_HOUR: int = 60

# Days in each month (non-leap year)
DAYS_IN_MONTH: tuple[int, ...] = (
    0,   # Placeholder for 1-indexed access
    31,  # January
    28,  # February (non-leap)
    31,  # March
    30,  # April
    31,  # May
    30,  # June
    31,  # July
    31,  # August
    30,  # September
    31,  # October
    30,  # November
    31,  # December
)

# Days before each month (cumulative), for non-leap years
DAYS_BEFORE_MONTH: tuple[int, ...] = (0, 0, 31, 59, 90, 120, 151, 181, 212, 243, 273, 304, 334)

# Length of the 400-year Gregorian cycle
DAYS_PER_400_YEARS: int = 146_097

# Days from 0000-03-01 to 1970-01-01, used by the civil <-> epoch-day algorithm
EPOCH_SHIFT_DAYS: int = 719_468

# Fixed-offset zone limits (in minutes)
MAX_OFFSET_MINUTES: int = 16 * MINUTES_PER_HOUR

# ISO week defaults: weeks start on Monday, week 1 holds the first Thursday
ISO_FIRST_DAY_OF_WEEK: int = 1
ISO_MIN_DAYS_IN_FIRST_WEEK: int = 4

# Range of instants the standard library can evaluate zone rules for
PY_DATETIME_MIN_MILLIS: int = -62_135_596_800_000  # 0001-01-01T00:00:00Z
PY_DATETIME_MAX_MILLIS: int = 253_402_300_799_999  # 9999-12-31T23:59:59.999Z

# Largest representable instant, 100 million days either side of the epoch
MAX_TIMESTAMP_MILLIS: int = 100_000_000 * MILLIS_PER_DAY


__all__ = [
    "MILLIS_PER_SECOND",
    "MILLIS_PER_MINUTE",
    "MILLIS_PER_HOUR",
    "MILLIS_PER_DAY",
    "MILLIS_PER_WEEK",
    "MINUTES_PER_HOUR",
    "DAYS_IN_MONTH",
    "DAYS_BEFORE_MONTH",
    "DAYS_PER_400_YEARS",
    "EPOCH_SHIFT_DAYS",
    "MAX_OFFSET_MINUTES",
    "ISO_FIRST_DAY_OF_WEEK",
    "ISO_MIN_DAYS_IN_FIRST_WEEK",
    "PY_DATETIME_MIN_MILLIS",
    "PY_DATETIME_MAX_MILLIS",
    "MAX_TIMESTAMP_MILLIS",
]
