"""Operations on collections of Intervals.

This module provides utility functions for sequences of intervals:
    - merge_intervals: Combine overlapping or abutting intervals
    - xor_intervals: Spans covered by exactly one interval
    - find_gaps: Spans between the merged intervals
    - span_intervals: One interval covering all of them

Invalid intervals in the input are ignored.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from horologe.core.datetime import DateTime
    from horologe.core.interval import Interval


def _valid(intervals: Sequence[Interval]) -> list[Interval]:
    return [interval for interval in intervals if interval.is_valid]


def merge_intervals(intervals: Sequence[Interval]) -> list[Interval]:
    """Merge overlapping or abutting intervals into a minimal sorted list.

    Args:
        intervals: The intervals to merge.

    Returns:
        Non-overlapping intervals ordered by start.

    Examples:
        >>> from horologe import Interval
        >>> merged = merge_intervals([
        ...     Interval.from_iso("2024-01-01/2024-01-15"),
        ...     Interval.from_iso("2024-01-10/2024-01-20"),
        ...     Interval.from_iso("2024-02-01/2024-02-10"),
        ... ])
        >>> [piece.to_iso_date() for piece in merged]
        ['2024-01-01/2024-01-20', '2024-02-01/2024-02-10']
    """
    ordered = sorted(_valid(intervals), key=lambda interval: interval.start.to_millis())
    if not ordered:
        return []

    result: list[Interval] = []
    current = ordered[0]
    for interval in ordered[1:]:
        if current.overlaps(interval) or current.abuts_start(interval):
            current = current.union(interval)
        else:
            result.append(current)
            current = interval
    result.append(current)
    return result


def xor_intervals(intervals: Sequence[Interval]) -> list[Interval]:
    """Return the spans covered by exactly one of ``intervals``.

    Endpoints are swept in time order while counting how many intervals
    are open; a span is emitted whenever the count leaves one.
    """
    from horologe.core.interval import Interval

    events: list[tuple[DateTime, int]] = []
    for interval in _valid(intervals):
        events.append((interval.start, 1))
        events.append((interval.end, -1))
    events.sort(key=lambda event: event[0].to_millis())

    pieces: list[Interval] = []
    open_count = 0
    start: DateTime | None = None
    for time, step in events:
        open_count += step
        if open_count == 1:
            start = time
        else:
            if start is not None and start.to_millis() != time.to_millis():
                pieces.append(Interval.from_datetimes(start, time))
            start = None
    return merge_intervals(pieces)


def find_gaps(intervals: Sequence[Interval]) -> list[Interval]:
    """Find the spans between intervals.

    Input intervals are merged first, so only real gaps are returned.

    Examples:
        >>> from horologe import Interval
        >>> gaps = find_gaps([
        ...     Interval.from_iso("2024-01-01/2024-01-10"),
        ...     Interval.from_iso("2024-01-20/2024-01-30"),
        ... ])
        >>> [gap.to_iso_date() for gap in gaps]
        ['2024-01-10/2024-01-20']
    """
    from horologe.core.interval import Interval

    merged = merge_intervals(intervals)
    return [
        Interval.from_datetimes(current.end, following.start)
        for current, following in zip(merged, merged[1:])
        if current.end < following.start
    ]


def span_intervals(intervals: Sequence[Interval]) -> Interval | None:
    """Get the interval from the earliest start to the latest end.

    Returns:
        The covering interval, or None when there is no valid input.
    """
    from horologe.core.interval import Interval

    valid = _valid(intervals)
    if not valid:
        return None
    start = min((interval.start for interval in valid), key=lambda dt: dt.to_millis())
    end = max((interval.end for interval in valid), key=lambda dt: dt.to_millis())
    return Interval.from_datetimes(start, end)


__all__ = [
    "merge_intervals",
    "xor_intervals",
    "find_gaps",
    "span_intervals",
]
