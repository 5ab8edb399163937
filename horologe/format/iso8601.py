"""ISO 8601 formatting and parsing.

Parsing returns plain field mappings (:class:`ParsedFields`); building and
validating the DateTime is left to the caller so that every factory shares
the same defaulting and validity rules.

Supported date shapes, each optionally followed by ``T`` and a time:

    - ``2016``, ``2016-05``, ``2016-05-25``, ``20160525``
    - ``+012016-05-25`` (six-digit signed years)
    - ``2016-W21-3``, ``2016W213`` (ISO week dates)
    - ``2016-146``, ``2016146`` (ordinal dates)

Times: ``09``, ``09:24``, ``09:24:15``, ``09:24:15.123`` (``,`` also
accepted as decimal mark, basic format without colons too), followed by an
optional ``Z`` or ``±HH[:mm]`` offset and an optional ``[Zone/Id]``. A bare
time (``09:24``, ``T09:24Z``) is read as a time on the current date.

Examples:
    >>> parse_iso("2016-05-25T09:24:15.123+02:00").fields["millisecond"]
    123
    >>> parse_iso_duration("P1Y2M10DT2H30M")
    {'years': 1, 'months': 2, 'days': 10, 'hours': 2, 'minutes': 30}
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any

from horologe.errors import InvalidArgumentError
from horologe.format.parsed import (
    ParsedFields,
    millis_from_fraction,
    signed_offset,
    zone_from_text,
)
from horologe.units.timeunit import ORDERED_FIELDS, TimeUnit

if TYPE_CHECKING:
    from horologe.core.datetime import DateTime

_TIME = (
    r"(?P<hour>\d\d)"
    r"(?::?(?P<minute>\d\d)"
    r"(?::?(?P<second>\d\d)"
    r"(?:[.,](?P<fraction>\d{1,30}))?)?)?"
)
_OFFSET = r"(?:(?P<utc>Z)|(?P<off_hour>[+-]\d\d)(?::?(?P<off_minute>\d\d))?)"
_ZONE_ID = r"(?:\[(?P<iana>[^\]]{1,256})\])"
_TIME_EXTENSION = rf"(?:T{_TIME}{_OFFSET}?{_ZONE_ID}?)?"

_YMD_PATTERN = re.compile(
    r"(?P<year>[+-]\d{6}|\d{4})(?:-?(?P<month>\d\d)(?:-?(?P<day>\d\d))?)?"
    + _TIME_EXTENSION,
    re.IGNORECASE,
)
_WEEK_PATTERN = re.compile(
    r"(?P<week_year>\d{4})-?W(?P<week_number>\d\d)(?:-?(?P<weekday>\d))?"
    + _TIME_EXTENSION,
    re.IGNORECASE,
)
_ORDINAL_PATTERN = re.compile(
    r"(?P<year>\d{4})-?(?P<ordinal>\d{3})" + _TIME_EXTENSION,
    re.IGNORECASE,
)
_TIME_ONLY_PATTERN = re.compile(
    rf"T?{_TIME}{_OFFSET}?{_ZONE_ID}?",
    re.IGNORECASE,
)
_BARE_TIME_PATTERN = re.compile(rf"T?{_TIME}", re.IGNORECASE)

_DURATION_NUMBER = r"(-?\d{1,20}(?:[.,]\d{1,20})?)"
_DURATION_PATTERN = re.compile(
    r"(?P<negative>-)?P"
    rf"(?:{_DURATION_NUMBER}Y)?"
    rf"(?:{_DURATION_NUMBER}M)?"
    rf"(?:{_DURATION_NUMBER}W)?"
    rf"(?:{_DURATION_NUMBER}D)?"
    r"(?:T"
    rf"(?:{_DURATION_NUMBER}H)?"
    rf"(?:{_DURATION_NUMBER}M)?"
    r"(?:(-?\d{1,20})(?:[.,](\d{1,20}))?S)?"
    r")?",
    re.IGNORECASE,
)
_DURATION_UNITS = ("years", "months", "weeks", "days", "hours", "minutes")


# --- parsing ---


def extract_time(match: re.Match[str]) -> dict[str, int]:
    """Time-of-day fields present in a match of one of the time patterns."""
    fields: dict[str, int] = {}
    for name in ("hour", "minute", "second"):
        value = match.group(name)
        if value is not None:
            fields[name] = int(value)
    millisecond = millis_from_fraction(match.group("fraction"))
    if millisecond is not None:
        fields["millisecond"] = millisecond
    return fields


def extract_offset(match: re.Match[str]) -> int | None:
    """Offset minutes from a match of a pattern containing the offset groups."""
    if match.group("utc"):
        return 0
    if match.group("off_hour"):
        return signed_offset(match.group("off_hour"), match.group("off_minute"))
    return None


def _with_zone(fields: dict[str, Any], match: re.Match[str]) -> ParsedFields:
    zone, specific_offset = zone_from_text(extract_offset(match), match.group("iana"))
    return ParsedFields(fields, zone, specific_offset)


def parse_iso(text: str) -> ParsedFields | None:
    """Extract fields from an ISO 8601 date, date-time or time string.

    Returns:
        The parsed fields, or None if the text is not ISO 8601.
    """
    match = _YMD_PATTERN.fullmatch(text)
    if match:
        fields: dict[str, Any] = {"year": int(match.group("year"))}
        if match.group("month"):
            fields["month"] = int(match.group("month"))
        if match.group("day"):
            fields["day"] = int(match.group("day"))
        fields.update(extract_time(match))
        return _with_zone(fields, match)

    match = _WEEK_PATTERN.fullmatch(text)
    if match:
        fields = {
            "week_year": int(match.group("week_year")),
            "week_number": int(match.group("week_number")),
        }
        if match.group("weekday"):
            fields["weekday"] = int(match.group("weekday"))
        fields.update(extract_time(match))
        return _with_zone(fields, match)

    match = _ORDINAL_PATTERN.fullmatch(text)
    if match:
        fields = {"year": int(match.group("year")), "ordinal": int(match.group("ordinal"))}
        fields.update(extract_time(match))
        return _with_zone(fields, match)

    match = _TIME_ONLY_PATTERN.fullmatch(text)
    if match:
        return _with_zone(extract_time(match), match)
    return None


def parse_iso_time_fields(text: str) -> dict[str, int] | None:
    """Parse a bare ISO time (no offset) into all four time fields.

    Examples:
        >>> parse_iso_time_fields("11:22:33.444")
        {'hour': 11, 'minute': 22, 'second': 33, 'millisecond': 444}
        >>> parse_iso_time_fields("T1122")
        {'hour': 11, 'minute': 22, 'second': 0, 'millisecond': 0}
    """
    match = _BARE_TIME_PATTERN.fullmatch(text)
    if match is None:
        return None
    fields = {"hour": 0, "minute": 0, "second": 0, "millisecond": 0}
    fields.update(extract_time(match))
    return fields


def _duration_number(text: str) -> int | float:
    text = text.replace(",", ".")
    return float(text) if "." in text else int(text)


def parse_iso_duration(text: str) -> dict[str, int | float] | None:
    """Parse an ISO 8601 duration into unit magnitudes.

    A leading ``-`` negates every component. Fractional seconds become
    milliseconds carrying the sign of the seconds.

    Returns:
        Ordered mapping of plural unit names, or None when the text is not
        a duration or has no components.
    """
    match = _DURATION_PATTERN.fullmatch(text)
    if match is None:
        return None
    groups = match.groups()[1:]
    values: dict[str, int | float] = {}
    for unit, raw in zip(_DURATION_UNITS, groups[:6]):
        if raw is not None:
            values[unit] = _duration_number(raw)

    seconds_text, fraction = groups[6], groups[7]
    if seconds_text is not None:
        values["seconds"] = int(seconds_text)
        if fraction:
            millis = int((fraction + "000")[:3])
            values["milliseconds"] = -millis if seconds_text.startswith("-") else millis
    if not values:
        return None
    if match.group("negative"):
        values = {unit: -value for unit, value in values.items()}
    return values


# --- formatting ---


def _normalize_precision(precision: str) -> int:
    unit = TimeUnit.parse(precision).value
    if unit not in ORDERED_FIELDS:
        raise InvalidArgumentError(f"Invalid ISO precision {precision!r}")
    return ORDERED_FIELDS.index(unit)


def _is_extended(format: str) -> bool:
    if format not in ("extended", "basic"):
        raise InvalidArgumentError(f"Unknown ISO format {format!r}")
    return format == "extended"


def iso_year(year: int) -> str:
    """Four-digit year, or signed six-digit year outside 0..9999."""
    if 0 <= year <= 9999:
        return f"{year:04d}"
    return f"{'-' if year < 0 else '+'}{abs(year):06d}"


def format_iso_date(dt: DateTime, *, format: str = "extended", precision: str = "day") -> str:
    """Render the calendar date of ``dt``, e.g. ``2016-05-25``."""
    extended = _is_extended(format)
    level = min(_normalize_precision(precision), 2)
    separator = "-" if extended else ""
    text = iso_year(dt.year)
    if level >= 1:
        text += f"{separator}{dt.month:02d}"
    if level >= 2:
        text += f"{separator}{dt.day:02d}"
    return text


def format_iso_week_date(dt: DateTime) -> str:
    """Render the ISO week date of ``dt``, e.g. ``2004-W53-5``."""
    return f"{iso_year(dt.week_year)}-W{dt.week_number:02d}-{dt.weekday}"


def format_iso_offset(dt: DateTime, *, extended: bool = True, extended_zone: bool = False) -> str:
    offset = dt.offset
    if dt.is_offset_fixed and offset == 0 and not extended_zone:
        return "Z"
    sign = "-" if offset < 0 else "+"
    hours, minutes = divmod(abs(offset), 60)
    return f"{sign}{hours:02d}{':' if extended else ''}{minutes:02d}"


def format_iso_time(
    dt: DateTime,
    *,
    format: str = "extended",
    suppress_seconds: bool = False,
    suppress_milliseconds: bool = False,
    include_offset: bool = True,
    extended_zone: bool = False,
    include_prefix: bool = False,
    precision: str = "millisecond",
) -> str:
    """Render the time of day of ``dt``, e.g. ``09:24:15.123+02:00``.

    ``suppress_seconds`` and ``suppress_milliseconds`` only drop components
    that are zero. ``precision`` truncates to the given unit.
    """
    extended = _is_extended(format)
    level = _normalize_precision(precision)
    separator = ":" if extended else ""
    text = ""
    if level >= 3:
        show_seconds = not suppress_seconds or dt.second != 0 or dt.millisecond != 0
        text = "T" if include_prefix else ""
        text += f"{dt.hour:02d}"
        if level >= 4:
            text += f"{separator}{dt.minute:02d}"
        if level >= 5 and show_seconds:
            text += f"{separator}{dt.second:02d}"
        if level >= 6 and show_seconds and (not suppress_milliseconds or dt.millisecond != 0):
            text += f".{dt.millisecond:03d}"
        if include_offset:
            text += format_iso_offset(dt, extended=extended, extended_zone=extended_zone)
    if extended_zone:
        text += f"[{dt.zone_name}]"
    return text


def format_iso(
    dt: DateTime,
    *,
    format: str = "extended",
    suppress_seconds: bool = False,
    suppress_milliseconds: bool = False,
    include_offset: bool = True,
    extended_zone: bool = False,
    precision: str = "millisecond",
) -> str:
    """Render ``dt`` as a full ISO 8601 date-time."""
    text = format_iso_date(dt, format=format, precision=precision)
    if _normalize_precision(precision) >= 3:
        text += "T"
    return text + format_iso_time(
        dt,
        format=format,
        suppress_seconds=suppress_seconds,
        suppress_milliseconds=suppress_milliseconds,
        include_offset=include_offset,
        extended_zone=extended_zone,
        precision=precision,
    )


__all__ = [
    "parse_iso",
    "parse_iso_time_fields",
    "parse_iso_duration",
    "extract_time",
    "extract_offset",
    "iso_year",
    "format_iso",
    "format_iso_date",
    "format_iso_week_date",
    "format_iso_offset",
    "format_iso_time",
]
