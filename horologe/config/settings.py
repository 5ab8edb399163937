"""Process-wide defaults for Horologe.

Priority chain (highest to lowest):
  1. ``configure()`` / ``override_settings()`` keyword arguments
  2. Env vars:      ``HOROLOGE_*`` prefix
  3. Code defaults: baked into :class:`HorologeSettings`

The active settings are one frozen object replaced atomically under a
lock. Every operation reads the snapshot once, so a concurrent
``configure()`` call never produces a half-updated view, and values built
earlier keep the defaults they were built with.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings

from horologe.errors import InvalidArgumentError
from horologe.providers.locale import WeekSettings
from horologe.providers.zoneinfo import system_now_millis

if TYPE_CHECKING:
    from horologe.units.zone import Zone

logger = logging.getLogger(__name__)


class HorologeSettings(BaseSettings):
    """Defaults applied when a value is constructed without explicit options.

    Attributes:
        default_zone: Zone specifier used when none is given (``"system"``,
            ``"utc"``, ``"UTC+3"`` or an IANA identifier).
        default_locale: Locale tag for new values.
        default_numbering_system: Numbering system for new values.
        default_output_calendar: Output calendar for new values.
        default_week_settings: Week definition overriding the locale's.
        throw_on_invalid: Raise instead of returning Invalid values.
        two_digit_cutoff_year: Two-digit years above this parse as 19xx.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "HOROLOGE_",
    }

    default_zone: str = "system"
    default_locale: str = "en-US"
    default_numbering_system: str = "latn"
    default_output_calendar: str = "gregory"
    default_week_settings: WeekSettings | None = None
    throw_on_invalid: bool = False
    two_digit_cutoff_year: int = Field(default=60, ge=0, le=99)

    @field_validator("default_zone", "default_locale", "default_numbering_system")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value.strip()


_lock = threading.Lock()
_settings: HorologeSettings | None = None
_now: Callable[[], int] = system_now_millis


def get_settings() -> HorologeSettings:
    """Return the current settings snapshot."""
    global _settings
    current = _settings
    if current is None:
        with _lock:
            if _settings is None:
                _settings = HorologeSettings()
            current = _settings
    return current


def _zone_spec(value: Any) -> Any:
    from horologe.units.zone import Zone, ZoneKind

    if isinstance(value, Zone):
        return "system" if value.kind is ZoneKind.SYSTEM else value.name
    return value


def configure(**changes: Any) -> HorologeSettings:
    """Replace the current settings with a copy carrying ``changes``.

    ``default_zone`` also accepts a Zone instance.

    Returns:
        The new settings snapshot.

    Raises:
        InvalidArgumentError: If a field name or value is invalid.

    Examples:
        >>> configure(default_zone="Europe/Paris").default_zone
        'Europe/Paris'
    """
    global _settings
    if "default_zone" in changes:
        changes["default_zone"] = _zone_spec(changes["default_zone"])
    with _lock:
        base = _settings if _settings is not None else HorologeSettings()
        data = base.model_dump()
        data.update(changes)
        try:
            updated = HorologeSettings(**data)
        except ValidationError as exc:
            raise InvalidArgumentError(f"Invalid settings: {exc}") from exc
        _settings = updated
    logger.debug("Settings updated: %s", sorted(changes))
    return updated


def reset_settings() -> HorologeSettings:
    """Discard configured values and reload defaults and env vars."""
    global _settings
    with _lock:
        _settings = HorologeSettings()
        return _settings


@contextmanager
def override_settings(**changes: Any) -> Iterator[HorologeSettings]:
    """Apply ``changes`` for the duration of a ``with`` block.

    Examples:
        >>> with override_settings(throw_on_invalid=True):
        ...     pass
    """
    global _settings
    with _lock:
        previous = _settings
    try:
        yield configure(**changes)
    finally:
        with _lock:
            _settings = previous


def default_zone(settings: HorologeSettings | None = None) -> Zone:
    """Resolve the configured default zone specifier into a Zone."""
    from horologe.units.zone import Zone

    spec = (settings or get_settings()).default_zone
    return Zone.normalize(spec, Zone.system())


def set_now(fn: Callable[[], int] | None) -> None:
    """Replace the clock used by ``DateTime.now()`` (None restores it)."""
    global _now
    _now = fn if fn is not None else system_now_millis


def now_millis() -> int:
    """Read the configured clock as epoch milliseconds."""
    return _now()


__all__ = [
    "HorologeSettings",
    "get_settings",
    "configure",
    "reset_settings",
    "override_settings",
    "default_zone",
    "set_now",
    "now_millis",
]
