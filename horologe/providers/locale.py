"""Locale service: names, week data, macro formats and relative phrasing.

Horologe does not implement CLDR. Everything locale-specific is consumed
through the ``LocaleService`` protocol; the default implementation carries
English tables (``en``, ``en-US``, ``en-GB``) and answers every other
locale from the closest English table. Only Latin digits are rendered.
"""

from __future__ import annotations

import logging
import math
import threading
from dataclasses import dataclass, field
from typing import Protocol

from horologe.errors import InvalidArgumentError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WeekSettings:
    """Locale week definition.

    Attributes:
        first_day: ISO weekday the week starts on (1 = Monday, 7 = Sunday).
        minimal_days: Minimum days of the new year in week 1 (1-7).
        weekend: ISO weekdays considered the weekend.

    Examples:
        >>> WeekSettings(first_day=7, minimal_days=1).weekend
        (6, 7)
    """

    first_day: int = 1
    minimal_days: int = 4
    weekend: tuple[int, ...] = field(default=(6, 7))

    def __post_init__(self) -> None:
        if not 1 <= self.first_day <= 7:
            raise InvalidArgumentError(f"first_day must be 1-7, got {self.first_day}")
        if not 1 <= self.minimal_days <= 7:
            raise InvalidArgumentError(
                f"minimal_days must be 1-7, got {self.minimal_days}"
            )
        if any(not 1 <= day <= 7 for day in self.weekend):
            raise InvalidArgumentError(f"weekend days must be 1-7, got {self.weekend}")


class LocaleService(Protocol):
    """Locale-specific strings and data consumed by the formatter and parser."""

    def months(self, locale: str, width: str, standalone: bool = False) -> tuple[str, ...]:
        """Return the 12 month names (January first) at ``width``."""
        ...

    def weekdays(self, locale: str, width: str, standalone: bool = False) -> tuple[str, ...]:
        """Return the 7 weekday names (Monday first) at ``width``."""
        ...

    def eras(self, locale: str, width: str) -> tuple[str, str]:
        """Return (before-common-era, common-era) names at ``width``."""
        ...

    def meridiems(self, locale: str) -> tuple[str, str]:
        """Return (AM, PM) labels."""
        ...

    def format_number(
        self, locale: str, numbering_system: str, value: int, min_digits: int = 0
    ) -> str: ...

    def week_settings(self, locale: str) -> WeekSettings: ...

    def macro_format(self, locale: str, token: str) -> str | None:
        """Return the token format a macro token (``D``, ``ff`` ...) expands to."""
        ...

    def relative_time(
        self, locale: str, value: float, unit: str, numeric: str = "always", style: str = "long"
    ) -> str: ...

    def unit_phrase(self, locale: str, value: float, unit: str, width: str = "long") -> str: ...

    def format_list(self, locale: str, items: list[str]) -> str: ...

    def resolve_locale(self, locale: str) -> str:
        """Return the locale tag actually used for ``locale``."""
        ...


_MONTHS_LONG = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)
_MONTHS_SHORT = tuple(name[:3] for name in _MONTHS_LONG)
_MONTHS_NARROW = tuple(name[0] for name in _MONTHS_LONG)

_WEEKDAYS_LONG = (
    "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday",
)
_WEEKDAYS_SHORT = tuple(name[:3] for name in _WEEKDAYS_LONG)
_WEEKDAYS_NARROW = tuple(name[0] for name in _WEEKDAYS_LONG)

_ERAS = {
    "short": ("BC", "AD"),
    "long": ("Before Christ", "Anno Domini"),
    "narrow": ("B", "A"),
}

_MACROS_US = {
    "D": "M/d/yyyy",
    "DD": "LLL d, yyyy",
    "DDD": "LLLL d, yyyy",
    "DDDD": "EEEE, LLLL d, yyyy",
    "t": "h:mm a",
    "tt": "h:mm:ss a",
    "ttt": "h:mm:ss a ZZZZ",
    "tttt": "h:mm:ss a ZZZZZ",
    "T": "HH:mm",
    "TT": "HH:mm:ss",
    "TTT": "HH:mm:ss ZZZZ",
    "TTTT": "HH:mm:ss ZZZZZ",
    "f": "M/d/yyyy, h:mm a",
    "ff": "LLL d, yyyy, h:mm a",
    "fff": "LLLL d, yyyy 'at' h:mm a ZZZZ",
    "ffff": "EEEE, LLLL d, yyyy 'at' h:mm a ZZZZZ",
    "F": "M/d/yyyy, h:mm:ss a",
    "FF": "LLL d, yyyy, h:mm:ss a",
    "FFF": "LLLL d, yyyy 'at' h:mm:ss a ZZZZ",
    "FFFF": "EEEE, LLLL d, yyyy 'at' h:mm:ss a ZZZZZ",
}

_MACROS_GB = {
    "D": "dd/MM/yyyy",
    "DD": "d LLL yyyy",
    "DDD": "d LLLL yyyy",
    "DDDD": "EEEE d LLLL yyyy",
    "t": "HH:mm",
    "tt": "HH:mm:ss",
    "ttt": "HH:mm:ss ZZZZ",
    "tttt": "HH:mm:ss ZZZZZ",
    "T": "HH:mm",
    "TT": "HH:mm:ss",
    "TTT": "HH:mm:ss ZZZZ",
    "TTTT": "HH:mm:ss ZZZZZ",
    "f": "dd/MM/yyyy, HH:mm",
    "ff": "d LLL yyyy, HH:mm",
    "fff": "d LLLL yyyy 'at' HH:mm ZZZZ",
    "ffff": "EEEE d LLLL yyyy 'at' HH:mm ZZZZZ",
    "F": "dd/MM/yyyy, HH:mm:ss",
    "FF": "d LLL yyyy, HH:mm:ss",
    "FFF": "d LLLL yyyy 'at' HH:mm:ss ZZZZ",
    "FFFF": "EEEE d LLLL yyyy 'at' HH:mm:ss ZZZZZ",
}

_UNIT_SHORT = {
    "year": ("yr.", "yr."),
    "quarter": ("qtr.", "qtrs."),
    "month": ("mo.", "mo."),
    "week": ("wk.", "wk."),
    "day": ("day", "days"),
    "hour": ("hr.", "hr."),
    "minute": ("min.", "min."),
    "second": ("sec.", "sec."),
    "millisecond": ("ms", "ms"),
}

_AUTO_PHRASES = {
    "year": {-1: "last year", 0: "this year", 1: "next year"},
    "quarter": {-1: "last quarter", 0: "this quarter", 1: "next quarter"},
    "month": {-1: "last month", 0: "this month", 1: "next month"},
    "week": {-1: "last week", 0: "this week", 1: "next week"},
    "day": {-1: "yesterday", 0: "today", 1: "tomorrow"},
    "hour": {0: "this hour"},
    "minute": {0: "this minute"},
    "second": {0: "now"},
}

_WEEK_SETTINGS = {
    "en-US": WeekSettings(first_day=7, minimal_days=1),
    "en-GB": WeekSettings(first_day=1, minimal_days=4),
    "en": WeekSettings(first_day=1, minimal_days=4),
}


def _number_text(value: float) -> str:
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if isinstance(value, int):
        return f"{value:,}"
    return f"{value:,.3f}".rstrip("0").rstrip(".")


def _singular(value: float) -> bool:
    return abs(value) == 1


class EnglishLocaleService:
    """Default LocaleService with English tables.

    Region subtags other than ``US`` and ``GB`` map to plain ``en``;
    non-English locales are answered from the ``en-US`` tables and logged
    once at DEBUG level.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._reported: set[str] = set()

    def resolve_locale(self, locale: str) -> str:
        parts = locale.replace("_", "-").split("-")
        language = parts[0].lower()
        region = parts[1].upper() if len(parts) > 1 else ""
        if language == "en":
            if region in ("US", "GB"):
                return f"en-{region}"
            return "en"
        with self._lock:
            if locale not in self._reported:
                self._reported.add(locale)
                logger.debug("No tables for locale %r, using en-US", locale)
        return "en-US"

    def months(self, locale: str, width: str, standalone: bool = False) -> tuple[str, ...]:
        if width == "long":
            return _MONTHS_LONG
        if width == "short":
            return _MONTHS_SHORT
        if width == "narrow":
            return _MONTHS_NARROW
        raise InvalidArgumentError(f"Unknown name width {width!r}")

    def weekdays(self, locale: str, width: str, standalone: bool = False) -> tuple[str, ...]:
        if width == "long":
            return _WEEKDAYS_LONG
        if width == "short":
            return _WEEKDAYS_SHORT
        if width == "narrow":
            return _WEEKDAYS_NARROW
        raise InvalidArgumentError(f"Unknown name width {width!r}")

    def eras(self, locale: str, width: str) -> tuple[str, str]:
        try:
            return _ERAS[width]
        except KeyError:
            raise InvalidArgumentError(f"Unknown name width {width!r}") from None

    def meridiems(self, locale: str) -> tuple[str, str]:
        return ("AM", "PM")

    def format_number(
        self, locale: str, numbering_system: str, value: int, min_digits: int = 0
    ) -> str:
        digits = str(abs(value)).rjust(min_digits, "0")
        return "-" + digits if value < 0 else digits

    def week_settings(self, locale: str) -> WeekSettings:
        return _WEEK_SETTINGS[self.resolve_locale(locale)]

    def macro_format(self, locale: str, token: str) -> str | None:
        table = _MACROS_GB if self.resolve_locale(locale) == "en-GB" else _MACROS_US
        return table.get(token)

    def unit_phrase(self, locale: str, value: float, unit: str, width: str = "long") -> str:
        """Render ``value`` with its unit, e.g. ``"2 hours"`` or ``"2 hr."``."""
        text = _number_text(value)
        if width == "long":
            return f"{text} {unit if _singular(value) else unit + 's'}"
        one, many = _UNIT_SHORT[unit]
        return f"{text} {one if _singular(value) else many}"

    def relative_time(
        self, locale: str, value: float, unit: str, numeric: str = "always", style: str = "long"
    ) -> str:
        """Phrase a signed offset from now.

        Examples:
            >>> EnglishLocaleService().relative_time("en", -2, "day")
            '2 days ago'
            >>> EnglishLocaleService().relative_time("en", 1, "day", numeric="auto")
            'tomorrow'
        """
        if numeric == "auto" and value in _AUTO_PHRASES.get(unit, {}):
            return _AUTO_PHRASES[unit][int(value)]
        phrase = self.unit_phrase(
            locale, abs(value), unit, "long" if style == "long" else "short"
        )
        if math.copysign(1, value) < 0:
            return f"{phrase} ago"
        return f"in {phrase}"

    def format_list(self, locale: str, items: list[str]) -> str:
        return ", ".join(items)


_service_lock = threading.Lock()
_service: LocaleService = EnglishLocaleService()


def get_locale_service() -> LocaleService:
    return _service


def set_locale_service(service: LocaleService | None) -> None:
    """Install a custom locale service (None restores the English default)."""
    global _service
    with _service_lock:
        _service = service if service is not None else EnglishLocaleService()


__all__ = [
    "WeekSettings",
    "LocaleService",
    "EnglishLocaleService",
    "get_locale_service",
    "set_locale_service",
]
