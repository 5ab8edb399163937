"""Zone: a tagged union of fixed-offset, system, named and invalid zones.

A Zone maps an instant (epoch milliseconds) to a UTC offset in minutes and
to display names. Behavior is dispatched on the ``kind`` tag rather than
through subclasses.
"""

from __future__ import annotations

import functools
import logging
import re
from enum import Enum
from typing import Any, ClassVar

from horologe._internal.constants import MAX_OFFSET_MINUTES, MINUTES_PER_HOUR
from horologe.errors import UnsupportedZoneError
from horologe.providers.zoneinfo import (
    ZoneInfoProvider,
    ZoneRules,
    get_zone_info_provider,
)

logger = logging.getLogger(__name__)

_OFFSET_SPEC_PATTERN = re.compile(
    r"^utc(?:([+-])(\d{1,2})(?::?([0-5]\d))?)?$", re.IGNORECASE
)


class ZoneKind(Enum):
    """Variant tag of a Zone."""

    FIXED = "fixed"
    SYSTEM = "system"
    NAMED = "iana"
    INVALID = "invalid"


def format_offset_minutes(offset: int, style: str = "short") -> str:
    """Render an offset in minutes.

    Args:
        offset: Minutes east of UTC.
        style: ``"narrow"`` (+5, +5:30), ``"short"`` (+05:00) or
            ``"techie"`` (+0500).

    Examples:
        >>> format_offset_minutes(330, "narrow")
        '+5:30'
        >>> format_offset_minutes(-300, "short")
        '-05:00'
        >>> format_offset_minutes(60, "techie")
        '+0100'
    """
    sign = "+" if offset >= 0 else "-"
    hours, minutes = divmod(abs(offset), MINUTES_PER_HOUR)
    if style == "narrow":
        return f"{sign}{hours}" + (f":{minutes:02d}" if minutes else "")
    if style == "short":
        return f"{sign}{hours:02d}:{minutes:02d}"
    if style == "techie":
        return f"{sign}{hours:02d}{minutes:02d}"
    raise ValueError(f"Unknown offset style {style!r}")


def parse_offset_spec(text: str) -> int | None:
    """Parse ``UTC``, ``UTC+5``, ``UTC-03:30`` or ``UTC+0530`` into minutes.

    Returns None if the text is not an offset specifier.
    """
    match = _OFFSET_SPEC_PATTERN.match(text.strip())
    if match is None:
        return None
    sign, hours, minutes = match.groups()
    if sign is None:
        return 0
    total = int(hours) * MINUTES_PER_HOUR + int(minutes or 0)
    return -total if sign == "-" else total


@functools.lru_cache(maxsize=256)
def _resolve_rules(provider: ZoneInfoProvider, iana_id: str) -> ZoneRules | None:
    return provider.resolve(iana_id)


class Zone:
    """A time zone.

    Zones are immutable and compare equal when they have the same kind and
    the same identifier (or offset, for fixed zones).

    Examples:
        >>> Zone.utc().name
        'UTC'
        >>> Zone.fixed(330).name
        'UTC+5:30'
        >>> Zone.named("Europe/Berlin").is_valid
        True
        >>> Zone.named("Mars/Olympus").is_valid
        False
    """

    __slots__ = ("_kind", "_name", "_offset", "_rules")

    _utc_instance: ClassVar[Zone | None] = None

    def __init__(self) -> None:
        raise TypeError("Use Zone.utc(), Zone.fixed(), Zone.named() or Zone.normalize()")

    @classmethod
    def _create(
        cls,
        kind: ZoneKind,
        name: str,
        offset: int = 0,
        rules: ZoneRules | None = None,
    ) -> Zone:
        zone = object.__new__(cls)
        zone._kind = kind
        zone._name = name
        zone._offset = offset
        zone._rules = rules
        return zone

    # --- factories ---

    @classmethod
    def utc(cls) -> Zone:
        """Return the UTC zone (a shared fixed zone with offset 0)."""
        if cls._utc_instance is None:
            cls._utc_instance = cls._create(ZoneKind.FIXED, "UTC")
        return cls._utc_instance

    @classmethod
    def fixed(cls, minutes: int) -> Zone:
        """Return a fixed-offset zone.

        Offsets must be a whole number of minutes within +/-16 hours; other
        values produce an invalid zone.
        """
        if isinstance(minutes, bool) or not isinstance(minutes, (int, float)):
            return cls.invalid(repr(minutes))
        if isinstance(minutes, float) and not minutes.is_integer():
            return cls.invalid(f"UTC{minutes:+}m")
        if abs(minutes) > MAX_OFFSET_MINUTES:
            return cls.invalid(f"UTC{minutes:+}m")
        minutes = int(minutes)
        if minutes == 0:
            return cls.utc()
        return cls._create(
            ZoneKind.FIXED, "UTC" + format_offset_minutes(minutes, "narrow"), minutes
        )

    @classmethod
    def named(cls, iana_id: str, *, strict: bool = False) -> Zone:
        """Return a zone backed by the zone-info provider.

        Args:
            iana_id: IANA identifier such as ``"America/New_York"``.
            strict: Raise instead of returning an invalid zone.

        Raises:
            UnsupportedZoneError: If strict and the identifier is unknown.
        """
        rules = _resolve_rules(get_zone_info_provider(), iana_id)
        if rules is None:
            if strict:
                raise UnsupportedZoneError(f"Unknown zone {iana_id!r}")
            return cls.invalid(iana_id)
        return cls._create(ZoneKind.NAMED, rules.name, rules=rules)

    @classmethod
    def system(cls) -> Zone:
        """Return the host's zone, resolved through tzlocal."""
        provider = get_zone_info_provider()
        iana_id = provider.local_zone_id()
        rules = _resolve_rules(provider, iana_id)
        if rules is None:
            logger.debug(
                "System zone is not in the zone database, using UTC", extra={"zone": iana_id}
            )
            rules = _resolve_rules(provider, "UTC")
        if rules is None:
            return cls._create(ZoneKind.SYSTEM, "UTC")
        return cls._create(ZoneKind.SYSTEM, rules.name, rules=rules)

    @classmethod
    def invalid(cls, name: str) -> Zone:
        return cls._create(ZoneKind.INVALID, name)

    @classmethod
    def normalize(cls, value: Any, default: Zone) -> Zone:
        """Coerce a zone-like value into a Zone.

        Accepts None (the default), a Zone, an offset in minutes, or a
        string: ``"default"``, ``"local"``/``"system"``, ``"utc"``/
        ``"gmt"``/``"z"``, ``"UTC+5:30"``-style specifiers, or an IANA
        identifier. Anything else yields an invalid zone.
        """
        if value is None:
            return default
        if isinstance(value, Zone):
            return value
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return cls.fixed(value)
        if isinstance(value, str):
            lowered = value.strip().lower()
            if lowered == "default":
                return default
            if lowered in ("local", "system"):
                return cls.system()
            if lowered in ("utc", "gmt", "z"):
                return cls.utc()
            offset = parse_offset_spec(value)
            if offset is not None:
                return cls.fixed(offset)
            return cls.named(value.strip())
        return cls.invalid(repr(value))

    # --- properties ---

    @property
    def kind(self) -> ZoneKind:
        return self._kind

    @property
    def type(self) -> str:
        """``"fixed"``, ``"system"``, ``"iana"`` or ``"invalid"``."""
        return self._kind.value

    @property
    def name(self) -> str:
        return self._name

    @property
    def is_valid(self) -> bool:
        return self._kind is not ZoneKind.INVALID

    @property
    def is_fixed(self) -> bool:
        return self._kind is ZoneKind.FIXED

    @property
    def is_universal(self) -> bool:
        """True if the offset never changes."""
        return self._kind is ZoneKind.FIXED

    @property
    def fixed_offset(self) -> int | None:
        """The offset of a fixed zone, None for other kinds."""
        return self._offset if self._kind is ZoneKind.FIXED else None

    # --- capabilities ---

    def offset_at(self, ms: int) -> int:
        """Return the UTC offset in minutes at the instant ``ms``.

        Raises:
            UnsupportedZoneError: For invalid zones.
        """
        if self._kind is ZoneKind.FIXED:
            return self._offset
        if self._rules is not None:
            return self._rules.offset_at(ms)
        if self._kind is ZoneKind.SYSTEM:
            return 0
        raise UnsupportedZoneError(f"Zone {self._name!r} is invalid")

    def offset_name(self, ms: int, width: str = "short") -> str | None:
        """Return the abbreviation (``"short"``) or long name of the offset.

        Fixed zones are named after their offset. Named zones fall back to
        the identifier when the provider has no long name. Invalid zones
        return None.
        """
        if self._kind is ZoneKind.INVALID:
            return None
        if self._kind is ZoneKind.FIXED:
            if width == "long" and self._offset == 0:
                return "Coordinated Universal Time"
            return self._name
        if self._rules is not None:
            found = self._rules.offset_name(ms, width)
            if found:
                return found
        return self._name

    def format_offset(self, ms: int, style: str = "short") -> str:
        return format_offset_minutes(self.offset_at(ms), style)

    def equals(self, other: object) -> bool:
        if not isinstance(other, Zone):
            return False
        if self._kind is not other._kind:
            return False
        if self._kind is ZoneKind.FIXED:
            return self._offset == other._offset
        if self._kind is ZoneKind.SYSTEM:
            return True
        return self._name == other._name

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Zone):
            return NotImplemented
        return self.equals(other)

    def __hash__(self) -> int:
        if self._kind is ZoneKind.FIXED:
            return hash((self._kind, self._offset))
        if self._kind is ZoneKind.SYSTEM:
            return hash(self._kind)
        return hash((self._kind, self._name))

    def __repr__(self) -> str:
        return f"Zone({self._kind.value}, {self._name!r})"

    def __str__(self) -> str:
        return self._name


__all__ = [
    "Zone",
    "ZoneKind",
    "format_offset_minutes",
    "parse_offset_spec",
]
