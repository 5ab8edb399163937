"""Tests for the proleptic Gregorian and week-date helpers."""

import pytest

from horologe._internal.calendar import (
    civil_from_days,
    civil_from_epoch_millis,
    date_from_ordinal,
    date_from_week_info,
    days_from_civil,
    days_in_month,
    days_in_year,
    epoch_millis_from_civil,
    is_leap_year,
    iso_week_info,
    iso_weekday,
    local_week_info,
    ordinal_from_date,
    untruncate_year,
    weeks_in_week_year,
)
from horologe.errors import InvalidUnitValueError


class TestLeapYears:
    """Tests for leap year rules."""

    @pytest.mark.parametrize(
        "year,expected",
        [(2016, True), (2013, False), (2000, True), (1900, False), (2400, True), (-4, True)],
    )
    def test_is_leap_year(self, year: int, expected: bool) -> None:
        """Test the divisible-by-4/100/400 rule."""
        assert is_leap_year(year) is expected

    def test_days_in_year(self) -> None:
        """Test year lengths."""
        assert days_in_year(2016) == 366
        assert days_in_year(2013) == 365


class TestMonthLengths:
    """Tests for days_in_month."""

    def test_february(self) -> None:
        """Test February in leap and common years."""
        assert days_in_month(2016, 2) == 29
        assert days_in_month(2013, 2) == 28
        assert days_in_month(1900, 2) == 28

    def test_long_and_short_months(self) -> None:
        """Test 30 and 31 day months."""
        assert days_in_month(2024, 1) == 31
        assert days_in_month(2024, 4) == 30
        assert days_in_month(2024, 12) == 31

    def test_month_out_of_range(self) -> None:
        """Test that month 13 raises."""
        with pytest.raises(InvalidUnitValueError, match="month must be 1-12"):
            days_in_month(2024, 13)


class TestOrdinals:
    """Tests for ordinal (day-of-year) conversion."""

    def test_ordinal_from_date(self) -> None:
        """Test ordinals before and after February."""
        assert ordinal_from_date(2024, 1, 1) == 1
        assert ordinal_from_date(2024, 3, 1) == 61
        assert ordinal_from_date(2023, 3, 1) == 60
        assert ordinal_from_date(2016, 12, 31) == 366

    def test_ordinal_rejects_bad_day(self) -> None:
        """Test that a day past the month's end raises."""
        with pytest.raises(InvalidUnitValueError):
            ordinal_from_date(2023, 2, 29)

    def test_date_from_ordinal(self) -> None:
        """Test the inverse conversion."""
        assert date_from_ordinal(2024, 61) == (3, 1)
        assert date_from_ordinal(2016, 60) == (2, 29)
        assert date_from_ordinal(2024, 366) == (12, 31)

    def test_date_from_ordinal_out_of_range(self) -> None:
        """Test that an ordinal past the year's end raises."""
        with pytest.raises(InvalidUnitValueError):
            date_from_ordinal(2023, 366)


class TestDayNumbers:
    """Tests for days since the Unix epoch."""

    def test_epoch(self) -> None:
        """Test that 1970-01-01 is day zero."""
        assert days_from_civil(1970, 1, 1) == 0
        assert civil_from_days(0) == (1970, 1, 1)

    def test_before_epoch(self) -> None:
        """Test negative day numbers."""
        assert civil_from_days(-1) == (1969, 12, 31)
        assert days_from_civil(1969, 12, 31) == -1

    @pytest.mark.parametrize(
        "date",
        [(2000, 2, 29), (1600, 3, 1), (-1, 12, 31), (275760, 9, 13), (1, 1, 1)],
    )
    def test_round_trip(self, date: tuple[int, int, int]) -> None:
        """Test civil -> days -> civil for distant dates."""
        assert civil_from_days(days_from_civil(*date)) == date

    def test_iso_weekday(self) -> None:
        """Test weekday numbering (Monday is 1)."""
        assert iso_weekday(1970, 1, 1) == 4
        assert iso_weekday(2024, 1, 15) == 1
        assert iso_weekday(2024, 1, 14) == 7


class TestIsoWeeks:
    """Tests for ISO week dates."""

    def test_end_of_long_year(self) -> None:
        """Test that 2004-12-31 is in week 53 of 2004."""
        assert iso_week_info(2004, 12, 31) == (2004, 53, 5)
        assert iso_week_info(2005, 1, 1) == (2004, 53, 6)

    def test_week_year_ahead_of_calendar_year(self) -> None:
        """Test that late December can belong to the next week year."""
        assert iso_week_info(2008, 12, 29) == (2009, 1, 1)

    def test_weeks_in_week_year(self) -> None:
        """Test 52 and 53 week years."""
        assert weeks_in_week_year(2004) == 53
        assert weeks_in_week_year(2005) == 52
        assert weeks_in_week_year(2020) == 53

    def test_date_from_week_info(self) -> None:
        """Test converting week dates back to calendar dates."""
        assert date_from_week_info(2004, 53, 5) == (2004, 12, 31)
        assert date_from_week_info(2009, 1, 1) == (2008, 12, 29)


class TestLocaleWeeks:
    """Tests for week dates under a locale's week definition."""

    def test_sunday_first_week(self) -> None:
        """Test US-style weeks: Sunday first, one day in week 1."""
        assert local_week_info(2024, 1, 1, 7, 1) == (2024, 1, 2)
        assert local_week_info(2023, 12, 31, 7, 1) == (2024, 1, 1)

    def test_iso_definition_matches_iso_week_info(self) -> None:
        """Test that Monday/4 is the ISO definition."""
        assert local_week_info(2004, 12, 31, 1, 4) == iso_week_info(2004, 12, 31)


class TestEpochMillis:
    """Tests for civil <-> epoch millisecond conversion."""

    def test_civil_to_millis(self) -> None:
        """Test a simple conversion."""
        assert epoch_millis_from_civil(1970, 1, 2) == 86_400_000
        assert epoch_millis_from_civil(1970, 1, 1, 0, 0, 1, 5) == 1005

    def test_roll_over(self) -> None:
        """Test that out-of-range fields roll into larger units."""
        assert epoch_millis_from_civil(2023, 13, 1) == epoch_millis_from_civil(2024, 1, 1)
        assert epoch_millis_from_civil(2024, 3, 0) == epoch_millis_from_civil(2024, 2, 29)
        assert epoch_millis_from_civil(2024, 1, 1, 24) == epoch_millis_from_civil(2024, 1, 2)

    def test_millis_to_civil(self) -> None:
        """Test splitting epoch milliseconds."""
        assert civil_from_epoch_millis(0) == (1970, 1, 1, 0, 0, 0, 0)
        assert civil_from_epoch_millis(-1) == (1969, 12, 31, 23, 59, 59, 999)


class TestTwoDigitYears:
    """Tests for two-digit year expansion."""

    def test_untruncate(self) -> None:
        """Test both sides of the cutoff."""
        assert untruncate_year(14, 60) == 2014
        assert untruncate_year(60, 60) == 2060
        assert untruncate_year(61, 60) == 1961
        assert untruncate_year(1999, 60) == 1999
