"""LocaleConfig: the locale-related options carried by values."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any

from horologe.config.settings import HorologeSettings, get_settings
from horologe.providers.locale import LocaleService, WeekSettings, get_locale_service


@dataclass(frozen=True)
class LocaleConfig:
    """Locale tag, numbering system, output calendar and week definition.

    Attributes:
        locale: BCP-47 style tag such as ``"en-US"``.
        numbering_system: Numbering system name (``"latn"``).
        output_calendar: Calendar name (``"gregory"``).
        week_settings: Explicit week definition, or None to use the
            locale's own.
    """

    locale: str
    numbering_system: str
    output_calendar: str
    week_settings: WeekSettings | None = None

    @classmethod
    def create(
        cls,
        locale: str | None = None,
        numbering_system: str | None = None,
        output_calendar: str | None = None,
        week_settings: WeekSettings | dict[str, Any] | None = None,
        settings: HorologeSettings | None = None,
    ) -> LocaleConfig:
        """Build a config, filling unspecified options from settings."""
        settings = settings or get_settings()
        if isinstance(week_settings, dict):
            week_settings = WeekSettings(**week_settings)
        return cls(
            locale=locale or settings.default_locale,
            numbering_system=numbering_system or settings.default_numbering_system,
            output_calendar=output_calendar or settings.default_output_calendar,
            week_settings=week_settings or settings.default_week_settings,
        )

    @classmethod
    def english(cls) -> LocaleConfig:
        """Config used by fixed technical formats (RFC 2822, HTTP)."""
        return cls("en-US", "latn", "gregory")

    @property
    def service(self) -> LocaleService:
        return get_locale_service()

    def clone(self, **changes: Any) -> LocaleConfig:
        changes = {key: value for key, value in changes.items() if value is not None}
        if isinstance(changes.get("week_settings"), dict):
            changes["week_settings"] = WeekSettings(**changes["week_settings"])
        return replace(self, **changes)

    def get_week_settings(self) -> WeekSettings:
        if self.week_settings is not None:
            return self.week_settings
        return self.service.week_settings(self.locale)

    def resolved_options(self) -> dict[str, str]:
        return {
            "locale": self.service.resolve_locale(self.locale),
            "numbering_system": self.numbering_system,
            "output_calendar": self.output_calendar,
        }

    # --- locale service shortcuts ---

    def months(self, width: str, standalone: bool = False) -> tuple[str, ...]:
        return self.service.months(self.locale, width, standalone)

    def weekdays(self, width: str, standalone: bool = False) -> tuple[str, ...]:
        return self.service.weekdays(self.locale, width, standalone)

    def eras(self, width: str) -> tuple[str, str]:
        return self.service.eras(self.locale, width)

    def meridiems(self) -> tuple[str, str]:
        return self.service.meridiems(self.locale)

    def number(self, value: int, min_digits: int = 0) -> str:
        return self.service.format_number(
            self.locale, self.numbering_system, value, min_digits
        )


__all__ = ["LocaleConfig", "WeekSettings"]
