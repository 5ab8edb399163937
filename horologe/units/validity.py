"""Validity tracking for Horologe values.

Every DateTime, Duration and Interval carries a Validity. A failed Validity
records a reason code and an optional human-readable explanation; the
failure travels unchanged through every transformation applied to the
value.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Reason(str, Enum):
    """Reason codes attached to Invalid values.

    The enum members compare equal to their string values, so callers can
    check ``dt.invalid_reason == "unparsable"`` without importing this enum.
    """

    INVALID_INPUT = "invalid input"
    INVALID_UNIT_VALUE = "unit out of range"
    UNPARSABLE = "unparsable"
    UNSUPPORTED_ZONE = "unsupported zone"
    INVALID_INTERVAL = "end before start"
    MISMATCHED_WEEKDAY = "mismatched weekday"
    SKIPPED_TIME = "skipped local time"
    INVALID_ENDPOINT = "invalid endpoint"
    DIFF_OF_INVALID = "created by diffing an invalid DateTime"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Validity:
    """Success/failure status of a computed value.

    Attributes:
        ok: True for valid values.
        reason: Reason code string for failures, None when ok.
        explanation: Optional detail for failures.

    Examples:
        >>> Validity.valid().ok
        True
        >>> v = Validity.failure(Reason.UNPARSABLE, "no match")
        >>> v.reason
        'unparsable'
    """

    ok: bool
    reason: str | None = None
    explanation: str | None = None

    @classmethod
    def valid(cls) -> Validity:
        return _VALID

    @classmethod
    def failure(cls, reason: str | Reason, explanation: str | None = None) -> Validity:
        """Build a failed Validity.

        Args:
            reason: A Reason member or a caller-supplied reason string.
            explanation: Optional human-readable detail.
        """
        code = reason.value if isinstance(reason, Reason) else str(reason)
        return cls(False, code, explanation)

    def __bool__(self) -> bool:
        return self.ok


_VALID = Validity(True)


def first_failure(*validities: Validity | None) -> Validity | None:
    """Return the first failed Validity, scanning left to right."""
    for validity in validities:
        if validity is not None and not validity.ok:
            return validity
    return None


__all__ = [
    "Reason",
    "Validity",
    "first_failure",
]
