"""Calendar arithmetic behind the core types.

This package holds the algorithms the core types delegate to:
    - calendar_ops: Civil fields, local-time resolution, duration addition
    - diff: Greedy unit-by-unit difference of two DateTimes
    - range_ops: Merge, xor, gaps and span of interval collections

The modules import the core types lazily, so this package can be
imported before ``horologe.core``.
"""

from __future__ import annotations

from horologe.arithmetic.calendar_ops import (
    CivilFields,
    Resolution,
    add_duration,
    civil_at,
    possible_instants,
    resolve_local,
)
from horologe.arithmetic.diff import day_diff, diff_datetimes
from horologe.arithmetic.range_ops import (
    find_gaps,
    merge_intervals,
    span_intervals,
    xor_intervals,
)

__all__ = [
    "CivilFields",
    "Resolution",
    "add_duration",
    "civil_at",
    "possible_instants",
    "resolve_local",
    "day_diff",
    "diff_datetimes",
    "merge_intervals",
    "xor_intervals",
    "find_gaps",
    "span_intervals",
]
