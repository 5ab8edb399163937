"""Zone-info provider, system zone lookup and system clock.

Horologe does not ship its own time-zone rule database. Named zones are
resolved through a ``ZoneInfoProvider``; the default one is backed by the
standard library ``zoneinfo`` module, which reads the host database or the
``tzdata`` distribution. The host's own zone is looked up with ``tzlocal``.
"""

from __future__ import annotations

import logging
import threading
import time
from datetime import datetime, timedelta, timezone
from typing import Protocol
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError, available_timezones

from tzlocal import get_localzone_name

from horologe._internal.constants import (
    MILLIS_PER_DAY,
    PY_DATETIME_MAX_MILLIS,
    PY_DATETIME_MIN_MILLIS,
)

logger = logging.getLogger(__name__)

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

# Keep a day of headroom so astimezone() never leaves datetime's range
_MIN_PROBE_MILLIS = PY_DATETIME_MIN_MILLIS + MILLIS_PER_DAY
_MAX_PROBE_MILLIS = PY_DATETIME_MAX_MILLIS - MILLIS_PER_DAY


class ZoneRules(Protocol):
    """Offset rules of one resolved named zone."""

    @property
    def name(self) -> str: ...

    def offset_at(self, ms: int) -> int:
        """Return the UTC offset in minutes in force at the instant ``ms``."""
        ...

    def offset_name(self, ms: int, width: str) -> str | None:
        """Return the zone abbreviation (``"short"``) or full name (``"long"``)."""
        ...


class ZoneInfoProvider(Protocol):
    """Resolves IANA identifiers to zone rules."""

    def resolve(self, iana_id: str) -> ZoneRules | None:
        """Return the rules for ``iana_id``, or None if it is unknown."""
        ...

    def local_zone_id(self) -> str:
        """Return the IANA identifier of the host's zone."""
        ...


def _probe(ms: int, tz: ZoneInfo) -> datetime:
    clamped = min(max(ms, _MIN_PROBE_MILLIS), _MAX_PROBE_MILLIS)
    return (_EPOCH + timedelta(milliseconds=clamped)).astimezone(tz)


class ZoneInfoRules:
    """ZoneRules backed by a ``zoneinfo.ZoneInfo`` instance.

    Instants outside the range of ``datetime`` are evaluated at the nearest
    representable instant, which extends the first and last known offsets
    indefinitely.
    """

    __slots__ = ("_name", "_tz")

    def __init__(self, name: str, tz: ZoneInfo) -> None:
        self._name = name
        self._tz = tz

    @property
    def name(self) -> str:
        return self._name

    def offset_at(self, ms: int) -> int:
        offset = _probe(ms, self._tz).utcoffset()
        if offset is None:
            return 0
        # Local mean time offsets carry seconds; truncate to whole minutes
        return int(offset.total_seconds() / 60)

    def offset_name(self, ms: int, width: str) -> str | None:
        if width != "short":
            return None
        return _probe(ms, self._tz).tzname()

    def __repr__(self) -> str:
        return f"ZoneInfoRules({self._name!r})"


class DefaultZoneInfoProvider:
    """ZoneInfoProvider backed by ``zoneinfo`` and ``tzlocal``.

    Identifiers are matched case-insensitively: an identifier that the
    database does not know verbatim is looked up again against the list of
    available zones ignoring case.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._folded: dict[str, str] | None = None

    def _canonical(self, iana_id: str) -> str | None:
        with self._lock:
            if self._folded is None:
                self._folded = {key.lower(): key for key in available_timezones()}
            return self._folded.get(iana_id.lower())

    def _load(self, key: str) -> ZoneInfo | None:
        try:
            return ZoneInfo(key)
        except (ZoneInfoNotFoundError, ValueError, OSError):
            return None

    def resolve(self, iana_id: str) -> ZoneRules | None:
        if not iana_id or iana_id.startswith("/") or ".." in iana_id:
            return None
        tz = self._load(iana_id)
        name = iana_id
        if tz is None:
            canonical = self._canonical(iana_id)
            if canonical is None:
                logger.debug("Unknown zone identifier", extra={"zone": iana_id})
                return None
            tz = self._load(canonical)
            name = canonical
            if tz is None:
                return None
        return ZoneInfoRules(name, tz)

    def local_zone_id(self) -> str:
        try:
            name = get_localzone_name()
        except (LookupError, OSError, ValueError) as exc:
            logger.debug("Could not determine the system zone: %s", exc)
            return "UTC"
        return name or "UTC"


_provider_lock = threading.Lock()
_provider: ZoneInfoProvider = DefaultZoneInfoProvider()


def get_zone_info_provider() -> ZoneInfoProvider:
    return _provider


def set_zone_info_provider(provider: ZoneInfoProvider | None) -> None:
    """Install a custom zone-info provider (None restores the default).

    Zones already constructed keep the rules they resolved.
    """
    from horologe.units.zone import _resolve_rules

    global _provider
    with _provider_lock:
        _provider = provider if provider is not None else DefaultZoneInfoProvider()
    _resolve_rules.cache_clear()


def system_now_millis() -> int:
    """Read the system clock as epoch milliseconds."""
    return time.time_ns() // 1_000_000


__all__ = [
    "ZoneRules",
    "ZoneInfoProvider",
    "ZoneInfoRules",
    "DefaultZoneInfoProvider",
    "get_zone_info_provider",
    "set_zone_info_provider",
    "system_now_millis",
]
