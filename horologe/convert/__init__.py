"""Conversion utilities.

This module provides functions for converting horologe values to and from
tagged JSON dictionaries.

Examples:
    >>> from horologe import DateTime
    >>> from horologe.convert import to_json, from_json

    >>> dt = DateTime(2024, 1, 15, 14, 30, 45)
    >>> from_json(to_json(dt)) == dt
    True
"""

from __future__ import annotations

from horologe.convert.json import from_json, to_json

__all__ = [
    "to_json",
    "from_json",
]
