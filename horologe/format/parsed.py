"""Intermediate result shared by the string parsers."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, NamedTuple

if TYPE_CHECKING:
    from horologe.units.zone import Zone


class ParsedFields(NamedTuple):
    """Fields extracted from text, before a DateTime is built from them.

    Attributes:
        fields: DateTime field values keyed by canonical field name.
        zone: Zone named or implied by the text, if any.
        specific_offset: Offset found in the text when ``zone`` is a named
            zone, used to pick between ambiguous local times.
    """

    fields: dict[str, Any]
    zone: Zone | None = None
    specific_offset: int | None = None


def zone_from_text(
    offset: int | None, iana_id: str | None = None
) -> tuple[Zone | None, int | None]:
    """Turn a parsed offset and/or bracketed zone id into (zone, specific offset).

    A zone id takes precedence and keeps the offset as a hint; a lone offset
    becomes a fixed zone.
    """
    from horologe.units.zone import Zone

    if iana_id:
        return Zone.named(iana_id), offset
    if offset is not None:
        return Zone.fixed(offset), None
    return None, None


def millis_from_fraction(digits: str | None) -> int | None:
    """Truncate a decimal fraction of a second to whole milliseconds.

    Examples:
        >>> millis_from_fraction("5")
        500
        >>> millis_from_fraction("123456")
        123
    """
    if not digits:
        return None
    return int((digits + "000")[:3])


def signed_offset(hours: str, minutes: str | None) -> int:
    """Offset in minutes from ``"+05"`` / ``"30"`` style groups."""
    hour_value = int(hours)
    minute_value = int(minutes) if minutes else 0
    sign = -1 if hours.startswith("-") else 1
    return hour_value * 60 + sign * minute_value


__all__ = ["ParsedFields", "zone_from_text", "millis_from_fraction", "signed_offset"]
