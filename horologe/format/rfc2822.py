"""RFC 2822 (email) and HTTP date formatting and parsing.

Both formats are English-only regardless of the value's locale.

Examples:
    >>> parse_rfc2822("Sun, 13 Jul 2014 00:00:00 +0000").fields
    {'year': 2014, 'month': 7, 'day': 13, 'hour': 0, 'minute': 0, 'second': 0, 'weekday': 7}
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from horologe._internal.calendar import untruncate_year
from horologe.config.settings import get_settings
from horologe.format.parsed import ParsedFields, signed_offset
from horologe.format.tokens import format_datetime
from horologe.units.zone import Zone

if TYPE_CHECKING:
    from horologe.core.datetime import DateTime

RFC2822_FORMAT = "EEE, dd LLL yyyy HH:mm:ss ZZZ"
HTTP_FORMAT = "EEE, dd LLL yyyy HH:mm:ss 'GMT'"

_WEEKDAYS_SHORT = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
_WEEKDAYS_LONG = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")
_MONTHS_SHORT = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)

_WEEKDAY = "(" + "|".join(_WEEKDAYS_SHORT) + ")"
_WEEKDAY_LONG = "(" + "|".join(_WEEKDAYS_LONG) + ")"
_MONTH = "(" + "|".join(_MONTHS_SHORT) + ")"

# obsolete US zone abbreviations allowed by RFC 2822
_OBSOLETE_OFFSETS = {
    "UT": 0,
    "GMT": 0,
    "EDT": -4 * 60,
    "EST": -5 * 60,
    "CDT": -5 * 60,
    "CST": -6 * 60,
    "MDT": -6 * 60,
    "MST": -7 * 60,
    "PDT": -7 * 60,
    "PST": -8 * 60,
}

_RFC2822_PATTERN = re.compile(
    rf"(?:{_WEEKDAY},\s)?(\d{{1,2}})\s{_MONTH}\s(\d{{2,4}})\s(\d\d):(\d\d)(?::(\d\d))?\s"
    r"(?:(UT|GMT|[ECMP][SD]T)|([Zz])|(?:([+-]\d\d)(\d\d)))"
)
_RFC1123_PATTERN = re.compile(
    rf"{_WEEKDAY}, (\d\d) {_MONTH} (\d{{4}}) (\d\d):(\d\d):(\d\d) GMT"
)
_RFC850_PATTERN = re.compile(
    rf"{_WEEKDAY_LONG}, (\d\d)-{_MONTH}-(\d\d) (\d\d):(\d\d):(\d\d) GMT"
)
_ASCTIME_PATTERN = re.compile(
    rf"{_WEEKDAY} {_MONTH} ( \d|\d\d) (\d\d):(\d\d):(\d\d) (\d{{4}})"
)

_COMMENT_OR_FOLD = re.compile(r"\([^()]*\)|[\n\t]")
_MULTIPLE_SPACES = re.compile(r"\s\s+")


def _fields(
    weekday: str | None,
    year: str,
    month: str,
    day: str,
    hour: str,
    minute: str,
    second: str | None,
) -> dict[str, int]:
    year_value = int(year)
    if len(year) == 2:
        year_value = untruncate_year(year_value, get_settings().two_digit_cutoff_year)
    fields = {
        "year": year_value,
        "month": _MONTHS_SHORT.index(month) + 1,
        "day": int(day),
        "hour": int(hour),
        "minute": int(minute),
    }
    if second:
        fields["second"] = int(second)
    if weekday:
        names = _WEEKDAYS_LONG if len(weekday) > 3 else _WEEKDAYS_SHORT
        fields["weekday"] = names.index(weekday) + 1
    return fields


def preprocess_rfc2822(text: str) -> str:
    """Drop comments and folding whitespace, collapse runs of spaces."""
    text = _COMMENT_OR_FOLD.sub(" ", text)
    return _MULTIPLE_SPACES.sub(" ", text).strip()


def parse_rfc2822(text: str) -> ParsedFields | None:
    """Extract fields from an RFC 2822 date; None if it does not match."""
    match = _RFC2822_PATTERN.fullmatch(preprocess_rfc2822(text))
    if match is None:
        return None
    (weekday, day, month, year, hour, minute, second,
     obsolete, military, offset_hour, offset_minute) = match.groups()
    fields = _fields(weekday, year, month, day, hour, minute, second)
    if obsolete:
        offset = _OBSOLETE_OFFSETS[obsolete]
    elif military:
        offset = 0
    else:
        offset = signed_offset(offset_hour, offset_minute)
    return ParsedFields(fields, Zone.fixed(offset))


def parse_http(text: str) -> ParsedFields | None:
    """Extract fields from an RFC 1123, RFC 850 or asctime HTTP date."""
    for pattern in (_RFC1123_PATTERN, _RFC850_PATTERN):
        match = pattern.fullmatch(text)
        if match:
            weekday, day, month, year, hour, minute, second = match.groups()
            return ParsedFields(
                _fields(weekday, year, month, day, hour, minute, second), Zone.utc()
            )
    match = _ASCTIME_PATTERN.fullmatch(text)
    if match:
        weekday, month, day, hour, minute, second, year = match.groups()
        return ParsedFields(
            _fields(weekday, year, month, day.strip(), hour, minute, second), Zone.utc()
        )
    return None


def format_rfc2822(dt: DateTime) -> str:
    from horologe.core.locale import LocaleConfig

    return format_datetime(dt, RFC2822_FORMAT, LocaleConfig.english())


def format_http(dt: DateTime) -> str:
    """Render in UTC as ``Sun, 13 Jul 2014 00:00:00 GMT``."""
    from horologe.core.locale import LocaleConfig

    return format_datetime(dt.to_utc(), HTTP_FORMAT, LocaleConfig.english())


__all__ = [
    "RFC2822_FORMAT",
    "HTTP_FORMAT",
    "preprocess_rfc2822",
    "parse_rfc2822",
    "parse_http",
    "format_rfc2822",
    "format_http",
]
