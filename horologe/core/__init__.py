"""Core value types.

This package provides the immutable values of the library:
    - DateTime: An instant viewed in a zone, with calendar fields
    - Duration: An amount of time in calendar and clock units
    - Interval: The half-open span between two DateTimes
    - LocaleConfig: Locale, numbering system, calendar and week settings
"""

from __future__ import annotations

from horologe.core.datetime import DateTime
from horologe.core.duration import Duration
from horologe.core.interval import Interval
from horologe.core.locale import LocaleConfig

__all__: list[str] = [
    "DateTime",
    "Duration",
    "Interval",
    "LocaleConfig",
]
