"""Interval class representing the half-open span [start, end).

An Interval is made of two DateTimes with ``start <= end``. The start is
contained in the interval and the end is not, so adjacent intervals
[a, b) and [b, c) share no instant. An interval whose start equals its end
is valid and empty. Construction with the end before the start, or with an
Invalid endpoint, produces an Invalid Interval.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable, Iterator, Mapping, Sequence
from typing import Any

from horologe.arithmetic import range_ops
from horologe.config.settings import get_settings
from horologe.core.datetime import DateTime
from horologe.core.duration import Duration
from horologe.errors import InvalidArgumentError, InvalidIntervalError
from horologe.units.validity import Reason, Validity

logger = logging.getLogger(__name__)

DEFAULT_SEPARATOR = " – "


def _endpoint(value: DateTime | Any, name: str) -> DateTime:
    if not isinstance(value, DateTime):
        raise InvalidArgumentError(f"Unknown DateTime {name}: {value!r}")
    return value


class SplitSequence:
    """Sub-intervals of a fixed length, produced on demand.

    Iterating again starts over from the interval's start. Every piece has
    the same length except the last, which is cut off at the interval's
    end.

    Examples:
        >>> i = Interval.from_iso("2024-01-01T00:00Z/2024-01-01T05:00Z")
        >>> pieces = i.split_by({"hours": 2})
        >>> [p.length("hours") for p in pieces]
        [2, 2, 1]
        >>> len(list(pieces))
        3
    """

    __slots__ = ("_interval", "_duration")

    def __init__(self, interval: Interval, duration: Duration) -> None:
        self._interval = interval
        self._duration = duration

    def __iter__(self) -> Iterator[Interval]:
        interval = self._interval
        if not interval.is_valid or not self._duration.is_valid:
            return
        if self._duration.as_unit("milliseconds") <= 0:
            return
        start, end = interval.start, interval.end
        cursor = start
        index = 1
        while cursor < end:
            # step from the original start so month clamping does not accumulate
            added = start.plus(self._duration.map_units(lambda value, _unit: value * index))
            upper = end if added > end else added
            yield Interval.from_datetimes(cursor, upper)
            cursor = upper
            index += 1

    def __repr__(self) -> str:
        return f"SplitSequence({self._interval!r}, {self._duration!r})"


class Interval:
    """A span of time between two DateTimes, half-open [start, end).

    Attributes:
        start: First instant of the interval (None if invalid).
        end: First instant after the interval (None if invalid).

    Examples:
        >>> i = Interval.from_datetimes(DateTime.utc(2024, 1, 1), DateTime.utc(2024, 1, 31))
        >>> i.contains(DateTime.utc(2024, 1, 15))
        True
        >>> DateTime.utc(2024, 1, 31) in i
        False
        >>> i.length("days")
        30
    """

    __slots__ = ("_start", "_end", "_invalid")

    def __init__(self, start: DateTime, end: DateTime) -> None:
        """Create the interval [start, end).

        Invalid endpoints or ``end < start`` give an Invalid Interval.
        """
        built = Interval.from_datetimes(start, end)
        self._start = built._start
        self._end = built._end
        self._invalid = built._invalid

    @classmethod
    def _from_internal(
        cls,
        start: DateTime | None,
        end: DateTime | None,
        invalid: Validity | None = None,
    ) -> Interval:
        instance = object.__new__(cls)
        instance._start = start
        instance._end = end
        instance._invalid = invalid
        return instance

    # --- factories ---

    @classmethod
    def invalid(cls, reason: str | Reason, explanation: str | None = None) -> Interval:
        """Create an Invalid Interval (or raise in fail-fast mode).

        Raises:
            InvalidIntervalError: If ``throw_on_invalid`` is enabled.
        """
        validity = Validity.failure(reason, explanation)
        if get_settings().throw_on_invalid:
            raise InvalidIntervalError(validity.reason or "", explanation)
        logger.debug(
            "Invalid Interval created",
            extra={"reason": validity.reason, "explanation": explanation},
        )
        return cls._from_internal(None, None, validity)

    @classmethod
    def from_datetimes(cls, start: DateTime, end: DateTime) -> Interval:
        """Create [start, end).

        Raises:
            InvalidArgumentError: If an endpoint is not a DateTime.
        """
        start = _endpoint(start, "start")
        end = _endpoint(end, "end")
        if not start.is_valid:
            return cls.invalid(Reason.INVALID_ENDPOINT, "missing or invalid start")
        if not end.is_valid:
            return cls.invalid(Reason.INVALID_ENDPOINT, "missing or invalid end")
        if end < start:
            return cls.invalid(
                Reason.INVALID_INTERVAL,
                "The end of an interval must be after its start, but you had "
                f"start={start.to_iso()} and end={end.to_iso()}",
            )
        return cls._from_internal(start, end)

    @classmethod
    def after(
        cls, start: DateTime, duration: Duration | float | Mapping[str, float]
    ) -> Interval:
        """The interval of length ``duration`` beginning at ``start``."""
        start = _endpoint(start, "start")
        return cls.from_datetimes(start, start.plus(Duration.from_duration_like(duration)))

    @classmethod
    def before(
        cls, end: DateTime, duration: Duration | float | Mapping[str, float]
    ) -> Interval:
        """The interval of length ``duration`` ending at ``end``."""
        end = _endpoint(end, "end")
        return cls.from_datetimes(end.minus(Duration.from_duration_like(duration)), end)

    @classmethod
    def from_iso(cls, text: str, **options: Any) -> Interval:
        """Parse an ISO 8601 interval.

        Accepts ``start/end``, ``start/duration`` and ``duration/end``.
        Offsets found in the text are kept. Options are passed to
        :meth:`DateTime.from_iso`.

        Examples:
            >>> Interval.from_iso("2007-03-01T13:00:00Z/P1Y2M10DT2H30M").end.to_iso()
            '2008-05-11T15:30:00.000Z'
        """
        head, sep, tail = text.partition("/")
        if sep and head and tail:
            options = {"set_zone": True, **options}
            start = DateTime.from_iso(head, **options)
            end = DateTime.from_iso(tail, **options)
            if start.is_valid and end.is_valid:
                return cls.from_datetimes(start, end)
            if start.is_valid:
                duration = Duration.from_iso(tail)
                if duration.is_valid:
                    return cls.after(start, duration)
            elif end.is_valid:
                duration = Duration.from_iso(head)
                if duration.is_valid:
                    return cls.before(end, duration)
        return cls.invalid(
            Reason.UNPARSABLE, f'the input "{text}" can\'t be parsed as ISO 8601'
        )

    @staticmethod
    def is_interval(obj: object) -> bool:
        return isinstance(obj, Interval)

    @staticmethod
    def merge(intervals: Sequence[Interval]) -> list[Interval]:
        """Combine overlapping and abutting intervals (see ``merge_intervals``)."""
        return range_ops.merge_intervals(intervals)

    @staticmethod
    def xor(intervals: Sequence[Interval]) -> list[Interval]:
        """Spans covered by exactly one of ``intervals`` (see ``xor_intervals``)."""
        return range_ops.xor_intervals(intervals)

    # --- properties ---

    @property
    def start(self) -> DateTime | None:
        return self._start

    @property
    def end(self) -> DateTime | None:
        return self._end

    @property
    def last_datetime(self) -> DateTime | None:
        """The last millisecond inside the interval."""
        if self._invalid is not None:
            return None
        return self._end.minus(1)

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
    def is_empty(self) -> bool:
        if self._invalid is not None:
            return False
        return self._start.to_millis() == self._end.to_millis()

    # --- measurement ---

    def length(self, unit: str = "milliseconds") -> float:
        """Length of the interval in ``unit`` (NaN if invalid)."""
        if self._invalid is not None:
            return math.nan
        return self.to_duration(unit).get(unit)

    def count(self, unit: str = "milliseconds", *, use_locale_weeks: bool = False) -> int:
        """Number of calendar ``unit`` boundaries the interval touches.

        An interval from Monday noon to Wednesday noon counts 3 days.

        Examples:
            >>> i = Interval.from_iso("2024-01-01T12:00Z/2024-01-03T12:00Z")
            >>> i.count("days")
            3
        """
        if self._invalid is not None:
            return math.nan  # type: ignore[return-value]
        start = self._start.start_of(unit, use_locale_weeks=use_locale_weeks)
        end = self._end
        if use_locale_weeks:
            end = end.reconfigure(locale=start.locale)
        end = end.start_of(unit, use_locale_weeks=use_locale_weeks)
        whole = math.floor(end.diff(start, unit).get(unit))
        return whole + (end.to_millis() != self._end.to_millis())

    def has_same(self, unit: str) -> bool:
        """True if the whole interval lies within one ``unit``."""
        if self._invalid is not None:
            return False
        return self.is_empty or self._end.minus(1).has_same(self._start, unit)

    def to_duration(
        self,
        unit: str | Sequence[str] = "milliseconds",
        *,
        conversion_accuracy: str = "casual",
    ) -> Duration:
        """Length as a Duration in the given units."""
        if self._invalid is not None:
            return Duration.invalid(self._invalid.reason or "", self._invalid.explanation)
        return self._end.diff(self._start, unit, conversion_accuracy=conversion_accuracy)

    # --- point queries ---

    def is_after(self, dt: DateTime) -> bool:
        """True if the interval starts after ``dt``."""
        if self._invalid is not None:
            return False
        return self._start > dt

    def is_before(self, dt: DateTime) -> bool:
        """True if the interval ends at or before ``dt``."""
        if self._invalid is not None:
            return False
        return self._end <= dt

    def contains(self, dt: DateTime) -> bool:
        if self._invalid is not None:
            return False
        return self._start <= dt < self._end

    def __contains__(self, dt: object) -> bool:
        return isinstance(dt, DateTime) and self.contains(dt)

    # --- transformations ---

    def set(self, *, start: DateTime | None = None, end: DateTime | None = None) -> Interval:
        """Replace one or both endpoints."""
        if self._invalid is not None:
            return self
        return Interval.from_datetimes(start or self._start, end or self._end)

    def map_endpoints(self, fn: Callable[[DateTime], DateTime]) -> Interval:
        """Apply ``fn`` to both endpoints."""
        if self._invalid is not None:
            return self
        return Interval.from_datetimes(fn(self._start), fn(self._end))

    def split_at(self, *dts: DateTime) -> list[Interval]:
        """Cut the interval at each of ``dts`` that falls inside it."""
        if self._invalid is not None:
            return []
        cuts = sorted(
            (_endpoint(dt, "split point") for dt in dts if self.contains(dt)),
            key=lambda dt: dt.to_millis(),
        )
        results: list[Interval] = []
        cursor = self._start
        for upper in [*cuts, self._end]:
            if upper > cursor:
                results.append(Interval.from_datetimes(cursor, upper))
                cursor = upper
        return results

    def split_by(self, duration: Duration | float | Mapping[str, float]) -> SplitSequence:
        """Split into consecutive pieces of ``duration``.

        The result is iterated lazily and may be iterated more than once.
        It is empty when the interval or duration is invalid, or the
        duration is not positive.
        """
        return SplitSequence(self, Duration.from_duration_like(duration))

    def divide_equally(self, parts: int) -> list[Interval]:
        """Split into ``parts`` pieces of equal length."""
        if self._invalid is not None:
            return []
        if parts < 1:
            raise InvalidArgumentError(f"Cannot divide an interval into {parts} parts")
        pieces = self.split_by(self.length() / parts)
        return list(pieces)[:parts]

    # --- relations ---

    def overlaps(self, other: Interval) -> bool:
        if self._invalid is not None or not other.is_valid:
            return False
        return self._end > other._start and self._start < other._end

    def abuts_start(self, other: Interval) -> bool:
        """True if this interval ends exactly where ``other`` starts."""
        if self._invalid is not None or not other.is_valid:
            return False
        return self._end.to_millis() == other._start.to_millis()

    def abuts_end(self, other: Interval) -> bool:
        """True if ``other`` ends exactly where this interval starts."""
        if self._invalid is not None or not other.is_valid:
            return False
        return other._end.to_millis() == self._start.to_millis()

    def engulfs(self, other: Interval) -> bool:
        """True if ``other`` lies entirely within this interval."""
        if self._invalid is not None or not other.is_valid:
            return False
        return self._start <= other._start and self._end >= other._end

    def equals(self, other: object) -> bool:
        if not isinstance(other, Interval):
            return False
        if self._invalid is not None or other._invalid is not None:
            return False
        return self._start.equals(other._start) and self._end.equals(other._end)

    # --- set operations ---

    def intersection(self, other: Interval) -> Interval | None:
        """The overlap of both intervals, None if they do not overlap."""
        if self._invalid is not None:
            return self
        if not other.is_valid:
            return other
        start = self._start if self._start > other._start else other._start
        end = self._end if self._end < other._end else other._end
        if start >= end:
            return None
        return Interval.from_datetimes(start, end)

    def union(self, other: Interval) -> Interval:
        """The smallest interval covering both (gaps included)."""
        if self._invalid is not None:
            return self
        if not other.is_valid:
            return other
        start = self._start if self._start < other._start else other._start
        end = self._end if self._end > other._end else other._end
        return Interval.from_datetimes(start, end)

    def difference(self, *intervals: Interval) -> list[Interval]:
        """The parts of this interval not covered by any of ``intervals``.

        Examples:
            >>> whole = Interval.from_iso("2024-01-01T00:00Z/2024-01-10T00:00Z")
            >>> hole = Interval.from_iso("2024-01-04T00:00Z/2024-01-06T00:00Z")
            >>> [str(piece) for piece in whole.difference(hole)]  # doctest: +NORMALIZE_WHITESPACE
            ['[2024-01-01T00:00:00.000Z – 2024-01-04T00:00:00.000Z)',
             '[2024-01-06T00:00:00.000Z – 2024-01-10T00:00:00.000Z)']
        """
        pieces = []
        for piece in Interval.xor([self, *intervals]):
            inside = self.intersection(piece)
            if inside is not None and not inside.is_empty:
                pieces.append(inside)
        return pieces

    # --- output ---

    def to_iso(self, **options: Any) -> str:
        """``start/end`` in ISO 8601; options go to :meth:`DateTime.to_iso`."""
        if self._invalid is not None:
            return "Invalid Interval"
        return f"{self._start.to_iso(**options)}/{self._end.to_iso(**options)}"

    def to_iso_date(self) -> str:
        if self._invalid is not None:
            return "Invalid Interval"
        return f"{self._start.to_iso_date()}/{self._end.to_iso_date()}"

    def to_iso_time(self, **options: Any) -> str:
        if self._invalid is not None:
            return "Invalid Interval"
        return f"{self._start.to_iso_time(**options)}/{self._end.to_iso_time(**options)}"

    def to_format(self, fmt: str, *, separator: str = DEFAULT_SEPARATOR) -> str:
        """Format both endpoints with ``fmt``, joined by ``separator``."""
        if self._invalid is not None:
            return "Invalid Interval"
        return f"{self._start.to_format(fmt)}{separator}{self._end.to_format(fmt)}"

    def __str__(self) -> str:
        if self._invalid is not None:
            return "Invalid Interval"
        return f"[{self._start.to_iso()}{DEFAULT_SEPARATOR}{self._end.to_iso()})"

    def __repr__(self) -> str:
        if self._invalid is not None:
            return f"Interval.invalid({self.invalid_reason!r})"
        return f"Interval({self._start!r}, {self._end!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Interval):
            return NotImplemented
        return self.equals(other)

    def __hash__(self) -> int:
        if self._invalid is not None:
            return hash(("invalid", self._invalid.reason))
        return hash((self._start, self._end))


__all__ = ["Interval", "SplitSequence", "DEFAULT_SEPARATOR"]
