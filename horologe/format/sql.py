"""SQL date/time formatting and parsing.

Accepted input: ``2017-05-15``, ``2017-05-15 09:24:15``,
``2017-05-15 09:24:15.123 -05:00``, ``09:24:15 America/New_York``, and a
bare time (read as a time on the current date).
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from horologe.format.iso8601 import extract_offset, extract_time, format_iso_date
from horologe.format.parsed import ParsedFields, zone_from_text
from horologe.format.tokens import format_datetime

if TYPE_CHECKING:
    from horologe.core.datetime import DateTime

_ZONE_ID = r"[A-Za-z_]{1,256}(?:/[A-Za-z0-9_+-]{1,256}(?:/[A-Za-z0-9_+-]{1,256})?)?"
_TIME = (
    r"(?P<hour>\d\d)"
    r"(?::?(?P<minute>\d\d)"
    r"(?::?(?P<second>\d\d)"
    r"(?:[.,](?P<fraction>\d{1,30}))?)?)?"
    r" ?(?:(?:(?P<utc>Z)|(?P<off_hour>[+-]\d\d)(?::?(?P<off_minute>\d\d))?)"
    rf"|(?P<iana>{_ZONE_ID}))?"
)

_SQL_DATETIME_PATTERN = re.compile(
    rf"(?P<year>\d{{4}})-(?P<month>\d\d)-(?P<day>\d\d)(?: {_TIME})?"
)
_SQL_TIME_PATTERN = re.compile(_TIME)


def parse_sql(text: str) -> ParsedFields | None:
    """Extract fields from SQL-style text; None if it does not match."""
    match = _SQL_DATETIME_PATTERN.fullmatch(text)
    if match:
        fields = {
            "year": int(match.group("year")),
            "month": int(match.group("month")),
            "day": int(match.group("day")),
        }
        if match.group("hour") is not None:
            fields.update(extract_time(match))
    else:
        match = _SQL_TIME_PATTERN.fullmatch(text)
        if match is None:
            return None
        fields = extract_time(match)
    zone, specific_offset = zone_from_text(extract_offset(match), match.group("iana"))
    return ParsedFields(fields, zone, specific_offset)


def format_sql_date(dt: DateTime) -> str:
    return format_iso_date(dt)


def format_sql_time(
    dt: DateTime,
    *,
    include_offset: bool = True,
    include_zone: bool = False,
    include_offset_space: bool = True,
) -> str:
    """Render ``HH:mm:ss.SSS`` plus an optional offset or zone name.

    Examples:
        >>> format_sql_time(DateTime.utc(2017, 5, 15, 9, 24, 15))
        '09:24:15.000 Z'
    """
    from horologe.core.locale import LocaleConfig

    fmt = "HH:mm:ss.SSS"
    if include_zone or include_offset:
        if include_offset_space:
            fmt += " "
        fmt += "z" if include_zone else "ZZ"
    return format_datetime(dt, fmt, LocaleConfig.english(), allow_z=True)


def format_sql(
    dt: DateTime,
    *,
    include_offset: bool = True,
    include_zone: bool = False,
    include_offset_space: bool = True,
) -> str:
    time_part = format_sql_time(
        dt,
        include_offset=include_offset,
        include_zone=include_zone,
        include_offset_space=include_offset_space,
    )
    return f"{format_sql_date(dt)} {time_part}"


__all__ = ["parse_sql", "format_sql_date", "format_sql_time", "format_sql"]
