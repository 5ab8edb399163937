"""Horologe exception hierarchy.

All Horologe-specific exceptions inherit from HorologeError.

Most bad data never raises: factories and transformations return Invalid
values instead (see ``horologe.units.validity``). The exceptions below are
reserved for programmer errors that are detectable independent of the data,
for the pure calendar helpers, and for the opt-in fail-fast mode
(``throw_on_invalid``).
"""

from __future__ import annotations


class HorologeError(Exception):
    """Base exception for all Horologe errors."""

    pass


class InvalidArgumentError(HorologeError):
    """A call was made with arguments that can never be valid.

    Examples:
        - Unknown unit name passed to ``Duration.from_object``
        - Non-numeric unit magnitude
        - Reusing a compiled format parser with a different locale
    """

    pass


class ConflictingUnitsError(InvalidArgumentError):
    """Units that cannot be combined were supplied together.

    Examples:
        - ISO week fields mixed with locale week fields in ``set``
        - ``week_number`` mixed with ``month``/``day``
        - ``ordinal`` mixed with ``month``/``day``
    """

    pass


class InvalidUnitValueError(HorologeError):
    """A calendar field is outside its valid range.

    Raised by the pure calendar helpers. DateTime factories catch the
    condition up front and return an Invalid value instead.

    Examples:
        - Month value outside 1-12
        - Day 30 in February
    """

    pass


class UnsupportedZoneError(HorologeError):
    """A zone identifier could not be resolved and strict lookup was requested."""

    pass


class InvalidValueError(HorologeError):
    """An Invalid value was produced while ``throw_on_invalid`` is enabled.

    Attributes:
        reason: The reason code of the failure.
        explanation: Human-readable explanation, if any.
    """

    def __init__(self, kind: str, reason: str, explanation: str | None = None) -> None:
        message = f"Invalid {kind}: {reason}"
        if explanation:
            message += f": {explanation}"
        super().__init__(message)
        self.reason = reason
        self.explanation = explanation


class InvalidDateTimeError(InvalidValueError):
    """An Invalid DateTime was produced in fail-fast mode."""

    def __init__(self, reason: str, explanation: str | None = None) -> None:
        super().__init__("DateTime", reason, explanation)


class InvalidDurationError(InvalidValueError):
    """An Invalid Duration was produced in fail-fast mode."""

    def __init__(self, reason: str, explanation: str | None = None) -> None:
        super().__init__("Duration", reason, explanation)


class InvalidIntervalError(InvalidValueError):
    """An Invalid Interval was produced in fail-fast mode."""

    def __init__(self, reason: str, explanation: str | None = None) -> None:
        super().__init__("Interval", reason, explanation)


__all__ = [
    "HorologeError",
    "InvalidArgumentError",
    "ConflictingUnitsError",
    "InvalidUnitValueError",
    "UnsupportedZoneError",
    "InvalidValueError",
    "InvalidDateTimeError",
    "InvalidDurationError",
    "InvalidIntervalError",
]
