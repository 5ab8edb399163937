"""TimeUnit enumeration and unit-name normalization.

Duration values are keyed by plural unit names (``"years"`` ...
``"milliseconds"``); DateTime fields are keyed by singular names plus the
week and ordinal fields. Both accept singular, plural and a few compact
spellings from callers, normalized here.
"""

from __future__ import annotations

from enum import Enum

from horologe.errors import InvalidArgumentError


class TimeUnit(Enum):
    """Units of calendar and clock time, largest first.

    Examples:
        >>> TimeUnit.parse("Days")
        <TimeUnit.DAY: 'day'>
        >>> TimeUnit.MONTH.plural
        'months'
        >>> TimeUnit.HOUR.is_calendar
        False
    """

    YEAR = "year"
    QUARTER = "quarter"
    MONTH = "month"
    WEEK = "week"
    DAY = "day"
    HOUR = "hour"
    MINUTE = "minute"
    SECOND = "second"
    MILLISECOND = "millisecond"

    @property
    def plural(self) -> str:
        return self.value + "s"

    @property
    def is_calendar(self) -> bool:
        """True for units whose length depends on the calendar or zone."""
        return self in _CALENDAR_UNITS

    @classmethod
    def parse(cls, name: str | TimeUnit) -> TimeUnit:
        """Resolve a singular or plural unit name (case-insensitive).

        Raises:
            InvalidArgumentError: If the name is not a known unit.
        """
        if isinstance(name, TimeUnit):
            return name
        if not isinstance(name, str):
            raise InvalidArgumentError(f"Invalid unit {name!r}")
        key = name.strip().lower()
        if key.endswith("s"):
            key = key[:-1]
        try:
            return cls(key)
        except ValueError:
            raise InvalidArgumentError(f"Invalid unit {name!r}") from None


_CALENDAR_UNITS = frozenset(
    {TimeUnit.YEAR, TimeUnit.QUARTER, TimeUnit.MONTH, TimeUnit.WEEK, TimeUnit.DAY}
)

# Duration keys, largest first
ORDERED_DURATION_UNITS: tuple[str, ...] = tuple(unit.plural for unit in TimeUnit)
TIME_DURATION_UNITS: tuple[str, ...] = ("hours", "minutes", "seconds", "milliseconds")

# DateTime gregorian fields, largest first
ORDERED_FIELDS: tuple[str, ...] = (
    "year",
    "month",
    "day",
    "hour",
    "minute",
    "second",
    "millisecond",
)
ORDERED_WEEK_FIELDS: tuple[str, ...] = (
    "week_year",
    "week_number",
    "weekday",
    "hour",
    "minute",
    "second",
    "millisecond",
)
ORDERED_ORDINAL_FIELDS: tuple[str, ...] = (
    "year",
    "ordinal",
    "hour",
    "minute",
    "second",
    "millisecond",
)

_FIELD_ALIASES: dict[str, str] = {
    "year": "year",
    "years": "year",
    "quarter": "quarter",
    "quarters": "quarter",
    "month": "month",
    "months": "month",
    "day": "day",
    "days": "day",
    "hour": "hour",
    "hours": "hour",
    "minute": "minute",
    "minutes": "minute",
    "second": "second",
    "seconds": "second",
    "millisecond": "millisecond",
    "milliseconds": "millisecond",
    "ordinal": "ordinal",
    "weekday": "weekday",
    "weekdays": "weekday",
    "week_number": "week_number",
    "weeknumber": "week_number",
    "week_numbers": "week_number",
    "week_year": "week_year",
    "weekyear": "week_year",
    "week_years": "week_year",
    "local_weekday": "local_weekday",
    "local_week_number": "local_week_number",
    "local_week_year": "local_week_year",
    "localweekday": "local_weekday",
    "localweeknumber": "local_week_number",
    "localweekyear": "local_week_year",
}


def normalize_field(name: str) -> str:
    """Map a DateTime field spelling onto its canonical snake_case name.

    Raises:
        InvalidArgumentError: If the name is not a DateTime field.

    Examples:
        >>> normalize_field("weekNumber")
        'week_number'
        >>> normalize_field("Days")
        'day'
    """
    if not isinstance(name, str):
        raise InvalidArgumentError(f"Invalid unit {name!r}")
    key = name.strip().lower()
    try:
        return _FIELD_ALIASES[key]
    except KeyError:
        raise InvalidArgumentError(f"Invalid unit {name!r}") from None


def normalize_duration_unit(name: str | TimeUnit) -> str:
    """Map a unit spelling onto its plural Duration key."""
    return TimeUnit.parse(name).plural


__all__ = [
    "TimeUnit",
    "ORDERED_DURATION_UNITS",
    "TIME_DURATION_UNITS",
    "ORDERED_FIELDS",
    "ORDERED_WEEK_FIELDS",
    "ORDERED_ORDINAL_FIELDS",
    "normalize_field",
    "normalize_duration_unit",
]
