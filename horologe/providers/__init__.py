"""External collaborators consumed by Horologe.

This module provides:
    - ZoneInfoProvider: IANA zone rules (default: ``zoneinfo`` + ``tzdata``)
    - LocaleService: names, week data and phrasing (default: English)
    - system_now_millis: the system clock
"""

from __future__ import annotations

from horologe.providers.locale import (
    EnglishLocaleService,
    LocaleService,
    WeekSettings,
    get_locale_service,
    set_locale_service,
)
from horologe.providers.zoneinfo import (
    DefaultZoneInfoProvider,
    ZoneInfoProvider,
    ZoneRules,
    get_zone_info_provider,
    set_zone_info_provider,
    system_now_millis,
)

__all__: list[str] = [
    "EnglishLocaleService",
    "LocaleService",
    "WeekSettings",
    "get_locale_service",
    "set_locale_service",
    "DefaultZoneInfoProvider",
    "ZoneInfoProvider",
    "ZoneRules",
    "get_zone_info_provider",
    "set_zone_info_provider",
    "system_now_millis",
]
