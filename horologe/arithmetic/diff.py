"""Difference between two DateTimes expressed in chosen units.

Calendar units are counted greedily from the largest down, starting at the
anchor and walking toward the target: as many whole years as fit, then
months, and so on. Every candidate is ``anchor.plus(counts)`` with the
zone-aware ``plus``, so month lengths and DST transitions are respected and
the anchor plus the result lands exactly on the target. Counts are negative
when the target is before the anchor.

What is left is expressed in the requested time units, or, when none were
requested, as a fraction of the span from ``anchor.plus(counts)`` to the
next whole step of the smallest calendar unit. ``DateTime.plus`` reads
fractional calendar units back against the same span.

This module is not part of the public API; use ``DateTime.diff``.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING, Any

from horologe.units.timeunit import TIME_DURATION_UNITS

if TYPE_CHECKING:
    from horologe.core.datetime import DateTime
    from horologe.core.duration import Duration


def _utc_day_start(dt: DateTime) -> int:
    return dt.to_utc(keep_local_time=True).start_of("day").to_millis()


def day_diff(start: DateTime, end: DateTime) -> int:
    """Whole civil days from ``start`` to ``end``, ignoring time of day."""
    from horologe.core.duration import Duration

    millis = _utc_day_start(end) - _utc_day_start(start)
    return math.floor(Duration.from_millis(millis).as_unit("days"))


def _week_diff(start: DateTime, end: DateTime) -> int:
    return math.trunc(day_diff(start, end) / 7)


_DIFFERS: tuple[tuple[str, Callable[[DateTime, DateTime], int]], ...] = (
    ("years", lambda a, b: b.year - a.year),
    ("quarters", lambda a, b: b.quarter - a.quarter + (b.year - a.year) * 4),
    ("months", lambda a, b: b.month - a.month + (b.year - a.year) * 12),
    ("weeks", _week_diff),
    ("days", day_diff),
)


def _past(candidate: DateTime, target: DateTime, sign: int) -> bool:
    """True if ``candidate`` overshoots ``target`` walking in ``sign``'s direction."""
    if not candidate.is_valid:
        return True
    return sign * (candidate.to_millis() - target.to_millis()) > 0


def _high_order_diffs(
    anchor: DateTime, target: DateTime, units: Sequence[str], sign: int
) -> tuple[DateTime, dict[str, float], str | None]:
    cursor = anchor
    results: dict[str, float] = {}
    lowest_order: str | None = None

    for unit, differ in _DIFFERS:
        if unit not in units:
            continue
        lowest_order = unit
        results[unit] = differ(cursor, target)
        candidate = anchor.plus(results)
        # the estimate can overshoot by a unit, or two after month-end clamping
        while results[unit] and _past(candidate, target, sign):
            results[unit] -= sign
            candidate = anchor.plus(results)
        cursor = candidate
    return cursor, results, lowest_order


def diff_datetimes(
    anchor: DateTime, target: DateTime, units: Sequence[str], **options: Any
) -> Duration:
    """Duration ``d`` in ``units`` such that ``anchor.plus(d)`` is ``target``.

    Args:
        anchor: The instant the walk starts from.
        target: The instant the walk ends at, before or after ``anchor``.
        units: Plural Duration unit names.
        **options: Passed to ``Duration.from_object`` (locale,
            numbering_system, conversion_accuracy).
    """
    from horologe.core.duration import Duration

    sign = -1 if target.to_millis() < anchor.to_millis() else 1
    cursor, results, lowest_order = _high_order_diffs(anchor, target, units, sign)
    remaining = target.to_millis() - cursor.to_millis()
    time_units = [unit for unit in units if unit in TIME_DURATION_UNITS]

    if not time_units and lowest_order is not None and remaining:
        bumped = dict(results)
        bumped[lowest_order] += sign
        next_step = anchor.plus(bumped)
        # no fraction when the next step leaves the supported range
        if next_step.is_valid:
            span = next_step.to_millis() - cursor.to_millis()
            if span:
                results[lowest_order] += sign * abs(remaining / span)

    duration = Duration.from_object(results, **options)
    if time_units:
        return Duration.from_millis(remaining, **options).shift_to(*time_units).plus(duration)
    return duration


__all__ = ["day_diff", "diff_datetimes"]
