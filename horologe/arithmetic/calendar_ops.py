"""Civil arithmetic: resolving local times to instants and adding durations.

A local civil time maps to zero, one or two instants in a zone. Resolution
rules:

- one instant: used as is
- two instants (DST fall-back overlap): a caller-supplied preferred offset
  wins if it is one of the candidates, otherwise the earlier instant
- no instant (DST spring-forward gap): the time is pushed forward by the
  length of the gap, and the caller is told that it was skipped

This module is not part of the public API.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, NamedTuple

from horologe._internal.calendar import (
    civil_from_epoch_millis,
    days_in_month,
    epoch_millis_from_civil,
)
from horologe._internal.constants import (
    MILLIS_PER_DAY,
    MILLIS_PER_HOUR,
    MILLIS_PER_MINUTE,
    MILLIS_PER_SECOND,
)

if TYPE_CHECKING:
    from horologe.core.duration import Duration
    from horologe.units.zone import Zone


class CivilFields(NamedTuple):
    """Zone-less civil date and time."""

    year: int
    month: int
    day: int
    hour: int = 0
    minute: int = 0
    second: int = 0
    millisecond: int = 0

    @classmethod
    def from_local_millis(cls, local_ms: int) -> CivilFields:
        return cls(*civil_from_epoch_millis(local_ms))

    def to_local_millis(self) -> int:
        return epoch_millis_from_civil(*self)


class Resolution(NamedTuple):
    """Outcome of resolving a local time in a zone."""

    ts: int
    offset: int
    skipped: bool = False


def civil_at(ts: int, offset: int) -> CivilFields:
    """Civil fields of the instant ``ts`` seen at ``offset`` minutes."""
    return CivilFields.from_local_millis(ts + offset * MILLIS_PER_MINUTE)


def possible_instants(local_ms: int, zone: Zone, hint: int | None = None) -> list[int]:
    """Every instant whose local time in ``zone`` is ``local_ms``, in order.

    Candidate offsets are taken from a day either side of the local time,
    which covers any single transition.
    """
    if zone.is_fixed:
        return [local_ms - zone.offset_at(0) * MILLIS_PER_MINUTE]
    candidates = {
        zone.offset_at(local_ms - MILLIS_PER_DAY),
        zone.offset_at(local_ms),
        zone.offset_at(local_ms + MILLIS_PER_DAY),
    }
    if hint is not None:
        candidates.add(hint)
    instants = set()
    for offset in candidates:
        ts = local_ms - offset * MILLIS_PER_MINUTE
        if zone.offset_at(ts) == offset:
            instants.add(ts)
    return sorted(instants)


def resolve_local(local_ms: int, zone: Zone, hint: int | None = None) -> Resolution:
    """Find the instant for a local time, following the module rules.

    Args:
        local_ms: Civil time encoded as if it were UTC epoch milliseconds.
        zone: A valid zone.
        hint: Preferred offset in minutes when the local time is ambiguous.

    Examples:
        >>> berlin = Zone.named("Europe/Berlin")
        >>> local = epoch_millis_from_civil(2023, 10, 29, 2, 30)
        >>> resolve_local(local, berlin).offset
        120
        >>> resolve_local(local, berlin, hint=60).offset
        60
    """
    if zone.is_fixed:
        offset = zone.offset_at(0)
        return Resolution(local_ms - offset * MILLIS_PER_MINUTE, offset)

    instants = possible_instants(local_ms, zone, hint)
    if hint is not None:
        preferred = local_ms - hint * MILLIS_PER_MINUTE
        if preferred in instants:
            return Resolution(preferred, hint)
    if instants:
        return Resolution(instants[0], zone.offset_at(instants[0]))

    # In a gap the offset in force before the transition is the smaller one
    before = min(
        zone.offset_at(local_ms - MILLIS_PER_DAY),
        zone.offset_at(local_ms),
        zone.offset_at(local_ms + MILLIS_PER_DAY),
    )
    ts = local_ms - before * MILLIS_PER_MINUTE
    return Resolution(ts, zone.offset_at(ts), skipped=True)


_CALENDAR_DURATION_UNITS = ("years", "quarters", "months", "weeks", "days")


def _calendar_step(
    ts: int, offset: int, zone: Zone, civil: CivilFields, counts: dict[str, int]
) -> tuple[int, int]:
    """Move the civil date by whole calendar units and re-resolve it."""
    if not any(counts.values()):
        return ts, offset
    year_index, month_index = divmod(
        civil.year * 12
        + civil.month
        - 1
        + counts["years"] * 12
        + counts["quarters"] * 3
        + counts["months"],
        12,
    )
    month = month_index + 1
    day = min(civil.day, days_in_month(year_index, month)) + counts["days"] + counts["weeks"] * 7
    local_ms = epoch_millis_from_civil(
        year_index,
        month,
        day,
        civil.hour,
        civil.minute,
        civil.second,
        civil.millisecond,
    )
    resolved = resolve_local(local_ms, zone, hint=offset)
    return resolved.ts, resolved.offset


def add_duration(
    ts: int, offset: int, zone: Zone, civil: CivilFields, duration: Duration
) -> tuple[int, int]:
    """Add a duration to an instant with calendar semantics.

    Whole years, quarters and months move the civil month (clamping the day
    to the target month's length), whole weeks and days move the civil day,
    and the result is re-resolved in ``zone`` keeping ``offset`` when it is
    still valid. A fractional calendar unit is that fraction of the span
    between the whole-unit result and the result one more unit along, so
    half a month after January 1 is mid-January and after February 1 is
    mid-February. Time units are then added as exact milliseconds.

    Returns:
        Tuple of (ts, offset) of the result.
    """
    values = duration.to_object()
    counts = {unit: math.trunc(values.get(unit, 0)) for unit in _CALENDAR_DURATION_UNITS}
    base_ts, base_offset = _calendar_step(ts, offset, zone, civil, counts)

    shift = 0.0
    for unit in _CALENDAR_DURATION_UNITS:
        fraction = values.get(unit, 0) - counts[unit]
        if not fraction:
            continue
        bumped = dict(counts)
        bumped[unit] += 1 if fraction > 0 else -1
        next_ts, _ = _calendar_step(ts, offset, zone, civil, bumped)
        shift += abs(fraction) * (next_ts - base_ts)

    shift += (
        values.get("hours", 0) * MILLIS_PER_HOUR
        + values.get("minutes", 0) * MILLIS_PER_MINUTE
        + values.get("seconds", 0) * MILLIS_PER_SECOND
        + values.get("milliseconds", 0)
    )
    millis_to_add = round(shift)
    if not millis_to_add:
        return base_ts, base_offset
    moved = base_ts + millis_to_add
    return moved, zone.offset_at(moved)


__all__ = [
    "CivilFields",
    "Resolution",
    "civil_at",
    "possible_instants",
    "resolve_local",
    "add_duration",
]
