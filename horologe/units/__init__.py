"""Temporal units, zones and validity.

This module provides:
    - TimeUnit: Calendar and clock units (YEAR ... MILLISECOND)
    - Zone: Fixed, system, named (IANA) or invalid time zone
    - Validity / Reason: Success/failure status carried by every value
"""

from __future__ import annotations

from horologe.units.timeunit import TimeUnit
from horologe.units.validity import Reason, Validity
from horologe.units.zone import Zone, ZoneKind

__all__: list[str] = [
    "TimeUnit",
    "Reason",
    "Validity",
    "Zone",
    "ZoneKind",
]
