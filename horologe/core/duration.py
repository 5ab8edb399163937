"""Duration: a bag of calendar and clock unit quantities.

A Duration keeps the units it was given (``{"months": 2, "hours": 5}``
stays two months and five hours) and only converts between units on
request: ``shift_to``, ``normalize``, ``as_unit`` and ``to_millis``. Those
conversions use one of two fixed unit-length tables:

- ``casual``: a year is 365 days, a month 30 days, a quarter 91 days
- ``longterm``: mean Gregorian lengths (a year is 365.2425 days)
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable, Mapping
from typing import Any

from horologe._internal.constants import (
    MILLIS_PER_DAY,
    MILLIS_PER_HOUR,
    MILLIS_PER_MINUTE,
    MILLIS_PER_SECOND,
)
from horologe.config.settings import get_settings
from horologe.core.locale import LocaleConfig
from horologe.errors import InvalidArgumentError, InvalidDurationError
from horologe.units.timeunit import ORDERED_DURATION_UNITS, normalize_duration_unit
from horologe.units.validity import Reason, Validity

logger = logging.getLogger(__name__)

Matrix = dict[str, dict[str, float]]

_LOW_ORDER: Matrix = {
    "weeks": {
        "days": 7,
        "hours": 7 * 24,
        "minutes": 7 * 24 * 60,
        "seconds": 7 * 24 * 60 * 60,
        "milliseconds": 7 * MILLIS_PER_DAY,
    },
    "days": {
        "hours": 24,
        "minutes": 24 * 60,
        "seconds": 24 * 60 * 60,
        "milliseconds": MILLIS_PER_DAY,
    },
    "hours": {"minutes": 60, "seconds": 60 * 60, "milliseconds": MILLIS_PER_HOUR},
    "minutes": {"seconds": 60, "milliseconds": MILLIS_PER_MINUTE},
    "seconds": {"milliseconds": MILLIS_PER_SECOND},
}


def _day_based(days: float) -> dict[str, float]:
    return {
        "days": days,
        "hours": days * 24,
        "minutes": days * 24 * 60,
        "seconds": days * 24 * 60 * 60,
        "milliseconds": days * MILLIS_PER_DAY,
    }


CASUAL_MATRIX: Matrix = {
    "years": {"quarters": 4, "months": 12, "weeks": 52, **_day_based(365)},
    "quarters": {"months": 3, "weeks": 13, **_day_based(91)},
    "months": {"weeks": 4, **_day_based(30)},
    **_LOW_ORDER,
}


DAYS_IN_YEAR_ACCURATE = 146097 / 400
DAYS_IN_MONTH_ACCURATE = 146097 / 4800

LONGTERM_MATRIX: Matrix = {
    "years": {
        "quarters": 4,
        "months": 12,
        "weeks": DAYS_IN_YEAR_ACCURATE / 7,
        **_day_based(DAYS_IN_YEAR_ACCURATE),
    },
    "quarters": {
        "months": 3,
        "weeks": DAYS_IN_YEAR_ACCURATE / 28,
        **_day_based(DAYS_IN_YEAR_ACCURATE / 4),
    },
    "months": {
        "weeks": DAYS_IN_MONTH_ACCURATE / 7,
        **_day_based(DAYS_IN_MONTH_ACCURATE),
    },
    **_LOW_ORDER,
}


_MATRICES = {"casual": CASUAL_MATRIX, "longterm": LONGTERM_MATRIX}


def duration_to_millis(matrix: Matrix, values: Mapping[str, float]) -> float:
    """Total milliseconds represented by ``values`` under ``matrix``."""
    total = values.get("milliseconds", 0)
    for unit in ORDERED_DURATION_UNITS[:-1]:
        if values.get(unit):
            total += values[unit] * matrix[unit]["milliseconds"]
    return total


def normalize_values(matrix: Matrix, values: dict[str, float]) -> None:
    """Carry overflow between the units present in ``values``, in place.

    Only units already present take part. Lower units roll up into higher
    ones (so their absolute values stay below one higher unit), signs are
    made consistent with the overall sign, and fractional parts of higher
    units are pushed down into the next present lower unit.
    """
    factor = -1 if duration_to_millis(matrix, values) < 0 else 1

    previous: str | None = None
    for unit in reversed(ORDERED_DURATION_UNITS):
        if unit not in values:
            continue
        if previous is not None:
            conv = matrix[unit][previous]
            # floor rounds away from zero for negative lower units, which
            # borrows from the higher unit
            roll_up = math.floor(values[previous] * factor / conv)
            if roll_up:
                values[unit] += roll_up * factor
                values[previous] -= roll_up * conv * factor
        previous = unit

    previous = None
    for unit in ORDERED_DURATION_UNITS:
        if unit not in values:
            continue
        if previous is not None:
            fraction = math.fmod(values[previous], 1)
            if fraction:
                values[previous] -= fraction
                values[unit] += fraction * matrix[previous][unit]
        previous = unit


def _remove_zeros(values: Mapping[str, float]) -> dict[str, float]:
    return {unit: value for unit, value in values.items() if value != 0}


def _clean(value: float) -> float:
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def _iso_number(value: float) -> str:
    value = _clean(value)
    if isinstance(value, int):
        return str(value)
    return f"{value:.15f}".rstrip("0").rstrip(".")


class Duration:
    """An immutable quantity of time expressed in calendar and clock units.

    Attributes:
        years ... milliseconds: Per-unit magnitudes (0 when absent).
        conversion_accuracy: ``"casual"`` or ``"longterm"``.

    Examples:
        >>> d = Duration(hours=1, minutes=30)
        >>> d.as_unit("minutes")
        90
        >>> Duration.from_iso("P1Y2M").to_object()
        {'years': 1, 'months': 2}
        >>> Duration.from_millis(90_000_000).shift_to("days", "hours").to_object()
        {'days': 1, 'hours': 1}
    """

    __slots__ = ("_values", "_accuracy", "_loc", "_invalid")

    def __init__(self, **units: float) -> None:
        """Create a Duration from unit keyword arguments with casual accuracy.

        Raises:
            InvalidArgumentError: For unknown units or non-numeric values.
        """
        self._values = _normalize_object(units)
        self._accuracy = "casual"
        self._loc = LocaleConfig.create()
        self._invalid: Validity | None = None

    @classmethod
    def _from_internal(
        cls,
        values: dict[str, float],
        accuracy: str,
        loc: LocaleConfig,
        invalid: Validity | None = None,
    ) -> Duration:
        duration = object.__new__(cls)
        duration._values = values
        duration._accuracy = accuracy
        duration._loc = loc
        duration._invalid = invalid
        return duration

    def _clone(self, values: dict[str, float] | None = None, **changes: Any) -> Duration:
        return Duration._from_internal(
            self._values if values is None else values,
            changes.get("accuracy", self._accuracy),
            changes.get("loc", self._loc),
        )

    # --- factories ---

    @classmethod
    def from_object(
        cls,
        obj: Mapping[str, float],
        *,
        conversion_accuracy: str = "casual",
        locale: str | None = None,
        numbering_system: str | None = None,
    ) -> Duration:
        """Create a Duration from a mapping of unit names to magnitudes.

        Unit names may be singular or plural.

        Raises:
            InvalidArgumentError: If ``obj`` is not a mapping, holds unknown
                units or non-numeric values, or the accuracy is unknown.
        """
        if not isinstance(obj, Mapping):
            raise InvalidArgumentError(
                f"Duration.from_object: argument expected to be a mapping, got {obj!r}"
            )
        if conversion_accuracy not in _MATRICES:
            raise InvalidArgumentError(
                f"Unknown conversion accuracy {conversion_accuracy!r}"
            )
        return cls._from_internal(
            _normalize_object(obj),
            conversion_accuracy,
            LocaleConfig.create(locale=locale, numbering_system=numbering_system),
        )

    @classmethod
    def from_millis(cls, ms: float, **options: Any) -> Duration:
        return cls.from_object({"milliseconds": ms}, **options)

    @classmethod
    def from_iso(cls, text: str, **options: Any) -> Duration:
        """Parse an ISO 8601 duration such as ``"P1Y2M3DT4H5M6.007S"``.

        Unparsable text yields an Invalid Duration.
        """
        from horologe.format.iso8601 import parse_iso_duration

        parsed = parse_iso_duration(text)
        if parsed is None:
            return cls.invalid(
                Reason.UNPARSABLE, f'the input "{text}" can\'t be parsed as ISO 8601'
            )
        return cls.from_object(parsed, **options)

    @classmethod
    def from_iso_time(cls, text: str, **options: Any) -> Duration:
        """Parse an ISO 8601 time of day (``"11:22:33.444"``) as a duration."""
        from horologe.format.iso8601 import parse_iso_time_fields

        parsed = parse_iso_time_fields(text)
        if parsed is None:
            return cls.invalid(
                Reason.UNPARSABLE, f'the input "{text}" can\'t be parsed as ISO 8601'
            )
        fields = {
            "hours": parsed["hour"],
            "minutes": parsed["minute"],
            "seconds": parsed["second"],
            "milliseconds": parsed["millisecond"],
        }
        return cls.from_object(fields, **options)

    @classmethod
    def from_duration_like(cls, value: Duration | float | Mapping[str, float]) -> Duration:
        """Coerce a Duration, a number of milliseconds, or a unit mapping.

        Raises:
            InvalidArgumentError: For any other type.
        """
        if isinstance(value, Duration):
            return value
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return cls.from_millis(value)
        if isinstance(value, Mapping):
            return cls.from_object(value)
        raise InvalidArgumentError(
            f"Unknown duration argument {value!r} of type {type(value).__name__}"
        )

    @classmethod
    def invalid(cls, reason: str | Reason, explanation: str | None = None) -> Duration:
        """Create an Invalid Duration (or raise in fail-fast mode).

        Raises:
            InvalidDurationError: If ``throw_on_invalid`` is enabled.
        """
        validity = Validity.failure(reason, explanation)
        if get_settings().throw_on_invalid:
            logger.debug("Raising for invalid Duration", extra={"reason": validity.reason})
            raise InvalidDurationError(validity.reason or "", explanation)
        logger.debug(
            "Invalid Duration created",
            extra={"reason": validity.reason, "explanation": explanation},
        )
        return cls._from_internal({}, "casual", LocaleConfig.create(), validity)

    @staticmethod
    def is_duration(obj: object) -> bool:
        return isinstance(obj, Duration)

    @staticmethod
    def normalize_unit(unit: str) -> str:
        """Map a unit spelling onto its plural key (``"Day"`` -> ``"days"``)."""
        return normalize_duration_unit(unit)

    # --- accessors ---

    @property
    def is_valid(self) -> bool:
        return self._invalid is None

    @property
    def invalid_reason(self) -> str | None:
        return self._invalid.reason if self._invalid is not None else None

    @property
    def invalid_explanation(self) -> str | None:
        return self._invalid.explanation if self._invalid is not None else None

    @property
    def locale(self) -> str | None:
        return self._loc.locale if self.is_valid else None

    @property
    def numbering_system(self) -> str | None:
        return self._loc.numbering_system if self.is_valid else None

    @property
    def conversion_accuracy(self) -> str:
        return self._accuracy

    @property
    def _matrix(self) -> Matrix:
        return _MATRICES[self._accuracy]

    def get(self, unit: str) -> float:
        """Return the magnitude of one unit (0 if absent, NaN if invalid)."""
        if not self.is_valid:
            return math.nan
        return self._values.get(normalize_duration_unit(unit), 0)

    @property
    def years(self) -> float:
        return self.get("years")

    @property
    def quarters(self) -> float:
        return self.get("quarters")

    @property
    def months(self) -> float:
        return self.get("months")

    @property
    def weeks(self) -> float:
        return self.get("weeks")

    @property
    def days(self) -> float:
        return self.get("days")

    @property
    def hours(self) -> float:
        return self.get("hours")

    @property
    def minutes(self) -> float:
        return self.get("minutes")

    @property
    def seconds(self) -> float:
        return self.get("seconds")

    @property
    def milliseconds(self) -> float:
        return self.get("milliseconds")

    # --- arithmetic ---

    def plus(self, other: Duration | float | Mapping[str, float]) -> Duration:
        """Add unit by unit; units present in either operand are kept."""
        if not self.is_valid:
            return self
        duration = Duration.from_duration_like(other)
        if not duration.is_valid:
            return duration
        result: dict[str, float] = {}
        for unit in ORDERED_DURATION_UNITS:
            if unit in self._values or unit in duration._values:
                result[unit] = self._values.get(unit, 0) + duration._values.get(unit, 0)
        return self._clone(result)

    def minus(self, other: Duration | float | Mapping[str, float]) -> Duration:
        if not self.is_valid:
            return self
        return self.plus(Duration.from_duration_like(other).negate())

    def negate(self) -> Duration:
        if not self.is_valid:
            return self
        return self._clone({unit: -value for unit, value in self._values.items()})

    def map_units(self, fn: Callable[[float, str], float]) -> Duration:
        """Apply ``fn(value, unit)`` to every present unit.

        Raises:
            InvalidArgumentError: If ``fn`` returns a non-number.
        """
        if not self.is_valid:
            return self
        mapped = {unit: fn(value, unit) for unit, value in self._values.items()}
        return self._clone(_normalize_object(mapped))

    def multiply(self, factor: float) -> Duration:
        """Scale every unit by ``factor``."""
        return self.map_units(lambda value, _unit: value * factor)

    def set(self, values: Mapping[str, float]) -> Duration:
        """Replace the given units, keeping the others."""
        if not self.is_valid:
            return self
        merged = dict(self._values)
        merged.update(_normalize_object(values))
        ordered = {unit: merged[unit] for unit in ORDERED_DURATION_UNITS if unit in merged}
        return self._clone(ordered)

    def reconfigure(
        self,
        *,
        locale: str | None = None,
        numbering_system: str | None = None,
        conversion_accuracy: str | None = None,
    ) -> Duration:
        if not self.is_valid:
            return self
        if conversion_accuracy is not None and conversion_accuracy not in _MATRICES:
            raise InvalidArgumentError(
                f"Unknown conversion accuracy {conversion_accuracy!r}"
            )
        loc = self._loc.clone(locale=locale, numbering_system=numbering_system)
        return self._clone(accuracy=conversion_accuracy or self._accuracy, loc=loc)

    # --- unit conversion ---

    def shift_to(self, *units: str) -> Duration:
        """Re-express the duration in exactly ``units``.

        Whole quantities are carried from larger to smaller requested units;
        whatever cannot be expressed in whole units ends up as a fraction of
        the smallest requested unit.

        Examples:
            >>> Duration(hours=1, seconds=30).shift_to("minutes").to_object()
            {'minutes': 60.5}
        """
        if not self.is_valid or not units:
            return self
        targets = {normalize_duration_unit(unit) for unit in units}
        matrix = self._matrix
        built: dict[str, float] = {}
        accumulated: dict[str, float] = {}
        last_unit = ""

        for unit in ORDERED_DURATION_UNITS:
            if unit in targets:
                last_unit = unit
                own: float = 0
                for higher, amount in accumulated.items():
                    own += matrix[higher][unit] * amount
                    accumulated[higher] = 0
                own += self._values.get(unit, 0)
                whole = math.trunc(own)
                built[unit] = whole
                accumulated[unit] = (own * 1000 - whole * 1000) / 1000
            elif unit in self._values:
                accumulated[unit] = self._values[unit]

        for unit, amount in accumulated.items():
            if amount != 0:
                if unit == last_unit:
                    built[last_unit] += amount
                else:
                    built[last_unit] += amount / matrix[last_unit][unit]

        normalize_values(matrix, built)
        return self._clone({unit: _clean(value) for unit, value in built.items()})

    def shift_to_all(self) -> Duration:
        """Shift to every unit except quarters."""
        return self.shift_to(
            "years", "months", "weeks", "days", "hours", "minutes", "seconds", "milliseconds"
        )

    def normalize(self) -> Duration:
        """Carry overflow between the units already present.

        Examples:
            >>> Duration(years=2, days=5000).normalize().to_object()
            {'years': 15, 'days': 255}
        """
        if not self.is_valid:
            return self
        values = dict(self._values)
        normalize_values(self._matrix, values)
        return self._clone({unit: _clean(value) for unit, value in values.items()})

    def rescale(self) -> Duration:
        """Normalize, shift to every unit and drop zero units."""
        if not self.is_valid:
            return self
        values = _remove_zeros(self.normalize().shift_to_all()._values)
        return self._clone(values)

    def remove_zeros(self) -> Duration:
        if not self.is_valid:
            return self
        return self._clone(_remove_zeros(self._values))

    def as_unit(self, unit: str) -> float:
        """Return the whole duration measured in one unit."""
        return self.shift_to(unit).get(unit)

    def to_millis(self) -> float:
        if not self.is_valid:
            return math.nan
        return _clean(duration_to_millis(self._matrix, self._values))

    # --- output ---

    def to_object(self) -> dict[str, float]:
        if not self.is_valid:
            return {}
        return dict(self._values)

    def to_iso(self) -> str | None:
        """Render as an ISO 8601 duration (None if invalid).

        Quarters fold into months; seconds and milliseconds share the
        ``S`` component.

        Examples:
            >>> Duration(years=3, seconds=45).to_iso()
            'P3YT45S'
            >>> Duration().to_iso()
            'PT0S'
        """
        if not self.is_valid:
            return None
        text = "P"
        if self.years != 0:
            text += _iso_number(self.years) + "Y"
        if self.months != 0 or self.quarters != 0:
            text += _iso_number(self.months + self.quarters * 3) + "M"
        if self.weeks != 0:
            text += _iso_number(self.weeks) + "W"
        if self.days != 0:
            text += _iso_number(self.days) + "D"
        if self.hours != 0 or self.minutes != 0 or self.seconds != 0 or self.milliseconds != 0:
            text += "T"
        if self.hours != 0:
            text += _iso_number(self.hours) + "H"
        if self.minutes != 0:
            text += _iso_number(self.minutes) + "M"
        if self.seconds != 0 or self.milliseconds != 0:
            text += _iso_number(round(self.seconds + self.milliseconds / 1000, 3)) + "S"
        if text == "P":
            text += "T0S"
        return text

    def to_iso_time(
        self,
        *,
        suppress_milliseconds: bool = False,
        suppress_seconds: bool = False,
        include_prefix: bool = False,
        format: str = "extended",
    ) -> str | None:
        """Render as a time of day; None unless 0 <= duration < 24h."""
        if not self.is_valid:
            return None
        millis = self.to_millis()
        if millis < 0 or millis >= MILLIS_PER_DAY:
            return None
        from horologe.core.datetime import DateTime

        return DateTime.from_millis(int(millis), zone="utc").to_iso_time(
            suppress_milliseconds=suppress_milliseconds,
            suppress_seconds=suppress_seconds,
            include_prefix=include_prefix,
            include_offset=False,
            format=format,
        )

    def to_json(self) -> str | None:
        return self.to_iso()

    def to_format(self, fmt: str, *, floor: bool = True) -> str:
        """Render with duration tokens (``y M w d h m s S``).

        Repeating a token pads it: ``"hh:mm:ss"`` renders two-digit fields.

        Examples:
            >>> Duration(hours=1, minutes=2, seconds=3).to_format("hh:mm:ss")
            '01:02:03'
        """
        from horologe.format.tokens import format_duration

        if not self.is_valid:
            return "Invalid Duration"
        return format_duration(self, fmt, floor=floor)

    def to_human(self, *, unit_display: str = "long") -> str:
        """Render as an English-style list, e.g. ``"1 day, 5 hours"``."""
        if not self.is_valid:
            return "Invalid Duration"
        service = self._loc.service
        parts = [
            service.unit_phrase(self._loc.locale, value, unit[:-1], unit_display)
            for unit, value in self._values.items()
        ]
        return service.format_list(self._loc.locale, parts)

    # --- comparison ---

    def equals(self, other: object) -> bool:
        """Unit-by-unit equality (absent and zero units are equal)."""
        if not isinstance(other, Duration):
            return False
        if not self.is_valid or not other.is_valid:
            return False
        if self._loc != other._loc:
            return False
        return all(
            self._values.get(unit, 0) == other._values.get(unit, 0)
            for unit in ORDERED_DURATION_UNITS
        )

    def _comparable_millis(self, other: Duration) -> tuple[float, float]:
        both_longterm = self._accuracy == "longterm" and other._accuracy == "longterm"
        matrix = LONGTERM_MATRIX if both_longterm else CASUAL_MATRIX
        return (
            duration_to_millis(matrix, self._values),
            duration_to_millis(matrix, other._values),
        )

    def _comparable(self, other: Duration) -> bool:
        return self.is_valid and other.is_valid

    def compare(self, other: Duration) -> int:
        """Order by total length: -1, 0 or 1.

        Lengths use casual accuracy unless both durations are longterm.

        Raises:
            InvalidArgumentError: If either Duration is invalid.
        """
        if not self._comparable(other):
            raise InvalidArgumentError("Cannot compare an Invalid Duration")
        mine, theirs = self._comparable_millis(other)
        return (mine > theirs) - (mine < theirs)

    # --- operators ---

    def __add__(self, other: object) -> Duration:
        if not isinstance(other, (Duration, int, float, Mapping)) or isinstance(other, bool):
            return NotImplemented
        return self.plus(other)

    def __sub__(self, other: object) -> Duration:
        if not isinstance(other, (Duration, int, float, Mapping)) or isinstance(other, bool):
            return NotImplemented
        return self.minus(other)

    def __neg__(self) -> Duration:
        return self.negate()

    def __mul__(self, other: object) -> Duration:
        if not isinstance(other, (int, float)) or isinstance(other, bool):
            return NotImplemented
        return self.multiply(other)

    def __rmul__(self, other: object) -> Duration:
        return self.__mul__(other)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Duration):
            return NotImplemented
        return self.equals(other)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Duration):
            return NotImplemented
        return self._comparable(other) and self.compare(other) < 0

    def __le__(self, other: object) -> bool:
        if not isinstance(other, Duration):
            return NotImplemented
        return self._comparable(other) and self.compare(other) <= 0

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, Duration):
            return NotImplemented
        return self._comparable(other) and self.compare(other) > 0

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, Duration):
            return NotImplemented
        return self._comparable(other) and self.compare(other) >= 0

    def __hash__(self) -> int:
        return hash((tuple(sorted(_remove_zeros(self._values).items())), self._loc))

    def __repr__(self) -> str:
        if not self.is_valid:
            return f"Duration.invalid({self.invalid_reason!r})"
        inner = ", ".join(f"{unit}={value!r}" for unit, value in self._values.items())
        return f"Duration({inner})"

    def __str__(self) -> str:
        return self.to_iso() or "Invalid Duration"


def _normalize_object(obj: Mapping[str, Any]) -> dict[str, float]:
    normalized: dict[str, float] = {}
    for key, value in obj.items():
        if value is None:
            continue
        unit = normalize_duration_unit(key)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise InvalidArgumentError(
                f"Invalid unit value {value!r} for {unit}"
            )
        if isinstance(value, float) and not math.isfinite(value):
            raise InvalidArgumentError(f"Invalid unit value {value!r} for {unit}")
        normalized[unit] = value
    return {unit: normalized[unit] for unit in ORDERED_DURATION_UNITS if unit in normalized}


__all__ = [
    "Duration",
    "CASUAL_MATRIX",
    "LONGTERM_MATRIX",
    "duration_to_millis",
    "normalize_values",
]
