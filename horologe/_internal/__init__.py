"""Internal utilities for Horologe.

This module contains private implementation details:
    - Constants and magic numbers
    - Proleptic Gregorian calendar math
    - Field validation producing Validity failures
    - Custom decorators (@deprecated)

Note: This module is not part of the public API.
"""

from __future__ import annotations

from horologe._internal.decorators import deprecated

__all__: list[str] = [
    "deprecated",
]
