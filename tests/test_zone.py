"""Tests for Zone construction, normalization and offset lookup."""

import pytest

from horologe import DateTime, UnsupportedZoneError, Zone
from horologe.providers.zoneinfo import set_zone_info_provider
from horologe.units.zone import (
    ZoneKind,
    _resolve_rules,
    format_offset_minutes,
    parse_offset_spec,
)

JANUARY = DateTime.utc(2024, 1, 15).to_millis()
JULY = DateTime.utc(2024, 7, 15).to_millis()


class TestZoneFactories:
    """Tests for the Zone factory methods."""

    def test_utc_is_shared(self) -> None:
        """Test that UTC is a single fixed zone."""
        assert Zone.utc() is Zone.utc()
        assert Zone.utc().name == "UTC"
        assert Zone.utc().kind is ZoneKind.FIXED

    def test_fixed_names(self) -> None:
        """Test fixed zone naming."""
        assert Zone.fixed(330).name == "UTC+5:30"
        assert Zone.fixed(-300).name == "UTC-5"
        assert Zone.fixed(0) is Zone.utc()

    def test_fixed_out_of_range_is_invalid(self) -> None:
        """Test that offsets beyond 16 hours are invalid."""
        assert not Zone.fixed(17 * 60).is_valid
        assert not Zone.fixed(1.5).is_valid

    def test_named(self) -> None:
        """Test IANA zones."""
        berlin = Zone.named("Europe/Berlin")
        assert berlin.is_valid
        assert berlin.type == "iana"
        assert berlin.name == "Europe/Berlin"

    def test_named_unknown(self) -> None:
        """Test that unknown identifiers give an invalid zone."""
        zone = Zone.named("Mars/Olympus")
        assert not zone.is_valid
        assert zone.type == "invalid"
        assert zone.name == "Mars/Olympus"

    def test_named_strict_raises(self) -> None:
        """Test strict lookup of an unknown identifier."""
        with pytest.raises(UnsupportedZoneError, match="Mars/Olympus"):
            Zone.named("Mars/Olympus", strict=True)

    def test_named_is_case_insensitive(self) -> None:
        """Test lookup that ignores case."""
        zone = Zone.named("europe/berlin")
        assert zone.is_valid
        assert zone.name == "Europe/Berlin"

    def test_system_zone_is_valid(self) -> None:
        """Test that the host zone always resolves."""
        zone = Zone.system()
        assert zone.is_valid
        assert zone.kind is ZoneKind.SYSTEM

    def test_direct_construction_is_rejected(self) -> None:
        """Test that Zone() cannot be called directly."""
        with pytest.raises(TypeError):
            Zone()


class TestZoneNormalize:
    """Tests for Zone.normalize."""

    def test_none_gives_default(self) -> None:
        """Test that None falls back to the default."""
        default = Zone.named("Asia/Tokyo")
        assert Zone.normalize(None, default) is default
        assert Zone.normalize("default", default) is default

    @pytest.mark.parametrize("spec", ["utc", "UTC", "gmt", "Z"])
    def test_utc_spellings(self, spec: str) -> None:
        """Test the names accepted for UTC."""
        assert Zone.normalize(spec, Zone.system()) is Zone.utc()

    def test_offset_specifiers(self) -> None:
        """Test UTC+N style specifiers and plain numbers."""
        assert Zone.normalize("UTC+3", Zone.utc()).fixed_offset == 180
        assert Zone.normalize("UTC-03:30", Zone.utc()).fixed_offset == -210
        assert Zone.normalize(60, Zone.utc()).fixed_offset == 60

    def test_iana_string(self) -> None:
        """Test that other strings are looked up as IANA identifiers."""
        zone = Zone.normalize("America/New_York", Zone.utc())
        assert zone.kind is ZoneKind.NAMED

    def test_unsupported_type_is_invalid(self) -> None:
        """Test that other objects give an invalid zone."""
        assert not Zone.normalize(object(), Zone.utc()).is_valid


class TestZoneOffsets:
    """Tests for offset lookup and names."""

    def test_named_offsets_follow_dst(self) -> None:
        """Test winter and summer offsets."""
        berlin = Zone.named("Europe/Berlin")
        assert berlin.offset_at(JANUARY) == 60
        assert berlin.offset_at(JULY) == 120

    def test_fixed_offset_never_changes(self) -> None:
        """Test that a fixed zone ignores the instant."""
        zone = Zone.fixed(-300)
        assert zone.offset_at(JANUARY) == zone.offset_at(JULY) == -300
        assert zone.is_universal

    def test_invalid_zone_offset_raises(self) -> None:
        """Test that an invalid zone has no offsets."""
        with pytest.raises(UnsupportedZoneError):
            Zone.invalid("nowhere").offset_at(0)

    def test_offset_names(self) -> None:
        """Test short and long names."""
        new_york = Zone.named("America/New_York")
        assert new_york.offset_name(JANUARY, "short") == "EST"
        assert new_york.offset_name(JULY, "short") == "EDT"
        assert new_york.offset_name(JANUARY, "long") == "America/New_York"
        assert Zone.utc().offset_name(0, "long") == "Coordinated Universal Time"
        assert Zone.fixed(330).offset_name(0, "short") == "UTC+5:30"
        assert Zone.invalid("nowhere").offset_name(0) is None

    def test_format_offset(self) -> None:
        """Test offset rendering styles."""
        assert format_offset_minutes(330, "narrow") == "+5:30"
        assert format_offset_minutes(-300, "short") == "-05:00"
        assert format_offset_minutes(60, "techie") == "+0100"
        assert Zone.named("Europe/Berlin").format_offset(JULY) == "+02:00"

    def test_parse_offset_spec(self) -> None:
        """Test parsing of UTC offset specifiers."""
        assert parse_offset_spec("UTC") == 0
        assert parse_offset_spec("UTC+0530") == 330
        assert parse_offset_spec("America/New_York") is None

    def test_parse_offset_spec_rejects_minutes_past_59(self) -> None:
        """Test that the minutes of an offset specifier stay below 60."""
        assert parse_offset_spec("UTC+05:59") == 359
        assert parse_offset_spec("UTC+5:99") is None
        assert parse_offset_spec("UTC+0560") is None
        assert not Zone.normalize("UTC+5:99", Zone.utc()).is_valid


class TestZoneEquality:
    """Tests for zone equality and hashing."""

    def test_equal_zones(self) -> None:
        """Test that zones compare by kind and identity."""
        assert Zone.named("Europe/Berlin") == Zone.named("Europe/Berlin")
        assert Zone.fixed(60) == Zone.normalize("UTC+1", Zone.utc())
        assert Zone.named("Europe/Berlin") != Zone.named("Europe/Paris")
        assert Zone.utc() != Zone.named("Etc/UTC")

    def test_hash_matches_equality(self) -> None:
        """Test that equal zones hash the same."""
        zones = {Zone.named("Europe/Berlin"), Zone.named("Europe/Berlin"), Zone.fixed(60)}
        assert len(zones) == 2


class _MoonRules:
    name = "Moon/Base"

    def offset_at(self, ms: int) -> int:
        return 90

    def offset_name(self, ms: int, width: str) -> str | None:
        return "MBT" if width == "short" else None


class _MoonProvider:
    def resolve(self, iana_id: str) -> _MoonRules | None:
        return _MoonRules() if iana_id == "Moon/Base" else None

    def local_zone_id(self) -> str:
        return "Moon/Base"


class TestZoneInfoProvider:
    """Tests for swapping the zone-info provider."""

    def test_custom_provider(self) -> None:
        """Test that named zones resolve through the installed provider."""
        assert not Zone.named("Moon/Base").is_valid
        set_zone_info_provider(_MoonProvider())
        try:
            zone = Zone.named("Moon/Base")
            assert zone.is_valid
            assert zone.offset_at(JANUARY) == 90
            assert zone.offset_name(JANUARY, "short") == "MBT"
            assert not Zone.named("Europe/Berlin").is_valid
        finally:
            set_zone_info_provider(None)
        assert not Zone.named("Moon/Base").is_valid
        assert Zone.named("Europe/Berlin").is_valid

    def test_resolution_cache_is_bounded(self) -> None:
        """Test that unknown identifiers do not grow the resolution cache without limit."""
        for index in range(1000):
            assert not Zone.named(f"Nowhere/Zone{index}").is_valid
        assert _resolve_rules.cache_info().currsize <= _resolve_rules.cache_info().maxsize
        assert Zone.named("Europe/Berlin").is_valid
