"""Horologe: immutable, zone-aware calendar date and time values.

Horologe models instants viewed in IANA or fixed-offset zones, with
calendar-aware arithmetic across DST transitions, ISO week dates, a
duration engine and a token-based formatter and parser.

Core Types:
    DateTime: An instant viewed in a zone, with calendar fields
    Duration: An amount of time in calendar and clock units
    Interval: The half-open span [start, end) between two DateTimes

Units:
    TimeUnit: Calendar and clock units (YEAR ... MILLISECOND)
    Zone: Fixed-offset, system, IANA or invalid zone

Configuration:
    configure: Change process-wide defaults (zone, locale, ...)
    configure_logging: Route library logs through structlog

Exceptions:
    HorologeError: Base exception
    InvalidArgumentError: Misuse of the API
    ConflictingUnitsError: Incompatible field sets
    InvalidDateTimeError / InvalidDurationError / InvalidIntervalError:
        Raised for Invalid values when ``throw_on_invalid`` is set

Invalid input never raises by default: it yields a value whose
``is_valid`` is False and whose ``invalid_reason`` says why.

Example:
    >>> from horologe import DateTime
    >>> dt = DateTime(2017, 3, 12, 1, 30, zone="America/New_York")
    >>> dt.plus({"hours": 1}).to_iso()
    '2017-03-12T03:30:00.000-04:00'
    >>> DateTime(2017, 13, 1).invalid_reason
    'unit out of range'
"""

from __future__ import annotations

__version__ = "0.1.0"

# Configuration
from horologe.config import (
    configure,
    configure_logging,
    get_settings,
    override_settings,
    reset_settings,
    set_now,
)

# Core types
from horologe.core.datetime import DateTime
from horologe.core.duration import Duration
from horologe.core.interval import Interval
from horologe.core.locale import LocaleConfig

# Units
from horologe.providers.locale import WeekSettings
from horologe.units.timeunit import TimeUnit
from horologe.units.validity import Reason
from horologe.units.zone import Zone

# Exceptions
from horologe.errors import (
    ConflictingUnitsError,
    HorologeError,
    InvalidArgumentError,
    InvalidDateTimeError,
    InvalidDurationError,
    InvalidIntervalError,
    InvalidUnitValueError,
    UnsupportedZoneError,
)

__all__: list[str] = [
    "__version__",
    # Core types
    "DateTime",
    "Duration",
    "Interval",
    "LocaleConfig",
    # Units
    "TimeUnit",
    "Reason",
    "WeekSettings",
    "Zone",
    # Configuration
    "configure",
    "configure_logging",
    "get_settings",
    "override_settings",
    "reset_settings",
    "set_now",
    # Exceptions
    "HorologeError",
    "InvalidArgumentError",
    "ConflictingUnitsError",
    "InvalidUnitValueError",
    "UnsupportedZoneError",
    "InvalidDateTimeError",
    "InvalidDurationError",
    "InvalidIntervalError",
]
