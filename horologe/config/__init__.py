"""Configuration: process-wide defaults and logging setup."""

from __future__ import annotations

from horologe.config.logging import configure_logging
from horologe.config.settings import (
    HorologeSettings,
    configure,
    get_settings,
    override_settings,
    reset_settings,
    set_now,
)

__all__: list[str] = [
    "HorologeSettings",
    "configure",
    "configure_logging",
    "get_settings",
    "override_settings",
    "reset_settings",
    "set_now",
]
