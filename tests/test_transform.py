"""Tests for DateTime transformations: plus/minus, set, start_of, set_zone."""

import pytest

from horologe import DateTime, Duration, InvalidArgumentError


class TestPlusMinus:
    """Tests for calendar-aware addition and subtraction."""

    def test_month_end_clamps(self) -> None:
        """Test that adding a month to January 31 lands on the last day of February."""
        assert DateTime(2017, 1, 31).plus({"months": 1}).to_iso_date() == "2017-02-28"
        assert DateTime(2016, 1, 31).plus({"months": 1}).to_iso_date() == "2016-02-29"
        assert DateTime(2024, 3, 31).minus({"months": 1}).to_iso_date() == "2024-02-29"

    def test_leap_day_plus_year(self) -> None:
        """Test that February 29 plus a year clamps to February 28."""
        assert DateTime(2016, 2, 29).plus({"years": 1}).to_iso_date() == "2017-02-28"

    def test_quarters_and_weeks(self) -> None:
        """Test quarters and weeks."""
        assert DateTime(2024, 1, 15).plus({"quarters": 1}).month == 4
        assert DateTime(2024, 1, 15).plus({"weeks": 2}).day == 29

    def test_hours_across_spring_forward(self) -> None:
        """Test that time units move the instant across a DST gap."""
        dt = DateTime(2017, 3, 12, 1, 30, zone="America/New_York")
        assert dt.plus({"hours": 1}).to_iso() == "2017-03-12T03:30:00.000-04:00"

    def test_days_keep_wall_clock(self) -> None:
        """Test that days move the calendar and keep the local time."""
        dt = DateTime(2017, 3, 11, 12)
        later = dt.plus({"days": 1})
        assert later.hour == 12
        assert later.offset == -240
        assert later.diff(dt, "hours").hours == 23

    def test_day_into_gap_is_pushed_forward(self) -> None:
        """Test that a calendar move into a DST gap lands after the gap."""
        dt = DateTime(2017, 3, 11, 2, 30)
        assert dt.plus({"days": 1}).to_iso() == "2017-03-12T03:30:00.000-04:00"

    def test_fractional_days(self) -> None:
        """Test that a fraction of a day is a share of the next day."""
        dt = DateTime.utc(2024, 1, 1).plus({"days": 1.5})
        assert dt.to_iso() == "2024-01-02T12:00:00.000Z"

    def test_fractional_months_use_the_month_reached(self) -> None:
        """Test that a fraction of a month is a share of the month it lands in."""
        assert DateTime.utc(2024, 2, 1).plus({"months": 0.5}).to_iso() == (
            "2024-02-15T12:00:00.000Z"
        )
        assert DateTime.utc(2024, 1, 1).plus({"months": 1.5}).to_iso() == (
            "2024-02-15T12:00:00.000Z"
        )
        assert DateTime.utc(2024, 3, 1).minus({"months": 0.5}).to_iso() == (
            "2024-02-15T12:00:00.000Z"
        )

    def test_non_finite_values_raise(self) -> None:
        """Test that infinite or NaN amounts are rejected."""
        dt = DateTime.utc(2024, 1, 1)
        with pytest.raises(InvalidArgumentError, match="Invalid unit value"):
            dt.plus({"hours": float("inf")})
        with pytest.raises(InvalidArgumentError, match="Invalid unit value"):
            dt.minus({"days": float("-inf")})
        with pytest.raises(InvalidArgumentError, match="Invalid unit value"):
            dt.plus({"months": float("nan")})

    def test_duration_like_arguments(self) -> None:
        """Test Duration, mapping and millisecond arguments."""
        dt = DateTime.utc(2024, 1, 1)
        assert dt.plus(Duration(hours=1)).hour == 1
        assert dt.plus(3_600_000).hour == 1
        assert (dt + Duration(hours=2)).hour == 2
        assert (dt + {"minutes": 5}).minute == 5
        assert (dt - {"days": 1}).day == 31

    def test_round_trip(self) -> None:
        """Test that minus undoes plus for calendar units."""
        dt = DateTime(2024, 1, 15, 10)
        step = {"months": 1, "days": 3}
        assert dt.plus(step).to_iso_date() == "2024-02-18"
        assert dt.plus(step).minus(step) == dt

    def test_calendar_units_do_not_round_trip_across_a_gap(self) -> None:
        """Test that a day pushed past a DST gap is not undone by minus."""
        dt = DateTime(2017, 3, 11, 2, 30)
        step = {"days": 1}
        assert dt.plus(step).to_iso() == "2017-03-12T03:30:00.000-04:00"
        assert dt.plus(step).minus(step).to_iso() == "2017-03-11T03:30:00.000-05:00"
        assert dt.plus(step).minus(step) != dt

    def test_time_units_round_trip_across_a_gap(self) -> None:
        """Test that time units are undone exactly across a DST gap."""
        dt = DateTime(2017, 3, 11, 2, 30)
        step = {"hours": 24}
        assert dt.plus(step).to_iso() == "2017-03-12T03:30:00.000-04:00"
        assert dt.plus(step).minus(step) == dt

    def test_unknown_argument(self) -> None:
        """Test that unsupported argument types raise."""
        with pytest.raises(InvalidArgumentError):
            DateTime.utc(2024, 1, 1).plus("1 day")  # type: ignore[arg-type]

    def test_invalid_duration(self) -> None:
        """Test that adding an Invalid Duration gives an Invalid DateTime."""
        result = DateTime.utc(2024, 1, 1).plus(Duration.from_iso("nonsense"))
        assert not result.is_valid


class TestSet:
    """Tests for DateTime.set."""

    def test_set_fields(self) -> None:
        """Test replacing some fields."""
        dt = DateTime(2024, 1, 15, 10, 30).set(hour=5, minute=0)
        assert (dt.day, dt.hour, dt.minute) == (15, 5, 0)
        assert DateTime(2024, 1, 15).set({"year": 2020}).year == 2020

    def test_set_month_clamps_day(self) -> None:
        """Test that a shorter month clamps the day."""
        assert DateTime(2017, 1, 31).set(month=2).day == 28

    def test_set_weekday(self) -> None:
        """Test moving within the ISO week."""
        dt = DateTime(2024, 5, 15).set(weekday=1)
        assert dt.to_iso_date() == "2024-05-13"

    def test_set_local_weekday(self) -> None:
        """Test moving within the US week (Sunday first)."""
        dt = DateTime(2024, 5, 15).set(local_weekday=1)
        assert dt.to_iso_date() == "2024-05-12"

    def test_set_year_and_weekday(self) -> None:
        """Test that gregorian fields apply before the weekday."""
        dt = DateTime(2023, 5, 15).set(year=2024, weekday=1)
        assert dt.to_iso_date() == "2024-05-13"

    def test_set_ordinal(self) -> None:
        """Test setting the day of the year."""
        assert DateTime(2024, 5, 15, 8).set(ordinal=1).to_iso() == (
            "2024-01-01T08:00:00.000-05:00"
        )

    def test_set_out_of_range(self) -> None:
        """Test that out-of-range values give an Invalid DateTime."""
        dt = DateTime(2024, 1, 15).set(month=13)
        assert dt.invalid_reason == "unit out of range"

    def test_set_into_gap(self) -> None:
        """Test that a local time in a DST gap is pushed forward."""
        dt = DateTime(2017, 3, 12, 1, 30).set(hour=2)
        assert (dt.hour, dt.minute) == (3, 30)


class TestStartEndOf:
    """Tests for start_of and end_of."""

    @pytest.mark.parametrize(
        "unit,expected",
        [
            ("year", "2024-01-01T00:00:00.000-05:00"),
            ("quarter", "2024-07-01T00:00:00.000-04:00"),
            ("month", "2024-08-01T00:00:00.000-04:00"),
            ("week", "2024-08-12T00:00:00.000-04:00"),
            ("day", "2024-08-15T00:00:00.000-04:00"),
            ("hour", "2024-08-15T10:00:00.000-04:00"),
            ("minute", "2024-08-15T10:30:00.000-04:00"),
            ("second", "2024-08-15T10:30:45.000-04:00"),
            ("millisecond", "2024-08-15T10:30:45.123-04:00"),
        ],
    )
    def test_start_of(self, unit: str, expected: str) -> None:
        """Test the start of each unit."""
        assert DateTime(2024, 8, 15, 10, 30, 45, 123).start_of(unit).to_iso() == expected

    def test_plural_unit_names(self) -> None:
        """Test that plural unit names are accepted."""
        assert DateTime(2014, 3, 3, 5, 30).start_of("months").to_iso_date() == "2014-03-01"

    def test_locale_week(self) -> None:
        """Test that locale weeks start on Sunday in en-US."""
        dt = DateTime(2024, 5, 15).start_of("week", use_locale_weeks=True)
        assert dt.to_iso_date() == "2024-05-12"

    def test_start_of_is_idempotent(self) -> None:
        """Test that start_of applied twice changes nothing."""
        dt = DateTime(2024, 8, 15, 10, 30)
        for unit in ("year", "quarter", "month", "week", "day", "hour"):
            once = dt.start_of(unit)
            assert once.start_of(unit) == once

    def test_start_of_day_in_skipped_midnight(self) -> None:
        """Test a zone whose midnight did not exist."""
        dt = DateTime(2018, 11, 4, 12, zone="America/Sao_Paulo").start_of("day")
        assert (dt.day, dt.hour) == (4, 1)

    def test_end_of(self) -> None:
        """Test the last millisecond of a unit."""
        assert DateTime(2024, 2, 10, 8).end_of("month").to_iso() == (
            "2024-02-29T23:59:59.999-05:00"
        )
        assert DateTime(2024, 2, 10, 8).end_of("day").millisecond == 999

    def test_unknown_unit(self) -> None:
        """Test that an unknown unit raises."""
        with pytest.raises(InvalidArgumentError, match="Invalid unit"):
            DateTime(2024, 1, 1).start_of("fortnight")


class TestZoneChanges:
    """Tests for set_zone, to_utc and to_local."""

    def test_set_zone_keeps_instant(self) -> None:
        """Test viewing the same instant in another zone."""
        dt = DateTime.utc(2017, 5, 15, 12)
        moved = dt.set_zone("America/New_York")
        assert moved.hour == 8
        assert moved.to_millis() == dt.to_millis()

    def test_set_zone_keep_local_time(self) -> None:
        """Test keeping the wall clock instead of the instant."""
        dt = DateTime.utc(2017, 5, 15, 12)
        moved = dt.set_zone("America/New_York", keep_local_time=True)
        assert moved.hour == 12
        assert moved.offset == -240
        assert moved.to_millis() - dt.to_millis() == 4 * 3_600_000

    def test_set_zone_invalid(self) -> None:
        """Test that an unknown zone gives an Invalid DateTime."""
        assert DateTime.utc(2017, 5, 15).set_zone("Mars/Olympus").invalid_reason == (
            "unsupported zone"
        )

    def test_to_utc(self) -> None:
        """Test conversion to UTC and to a fixed offset."""
        dt = DateTime(2024, 1, 15, 10)
        assert dt.to_utc().to_iso() == "2024-01-15T15:00:00.000Z"
        assert dt.to_utc(60).offset == 60
        assert dt.to_utc(60).zone_name == "UTC+1"

    def test_to_local(self) -> None:
        """Test conversion to the default zone."""
        assert DateTime.utc(2024, 1, 15, 15).to_local().hour == 10
        assert DateTime.utc(2024, 1, 15, 15).set_zone(None).zone_name == "America/New_York"


class TestReconfigure:
    """Tests for locale reconfiguration."""

    def test_set_locale(self) -> None:
        """Test replacing the locale."""
        dt = DateTime(2024, 1, 15).set_locale("en-GB")
        assert dt.locale == "en-GB"
        assert dt.resolved_locale_options()["locale"] == "en-GB"

    def test_reconfigure(self) -> None:
        """Test replacing several options at once."""
        dt = DateTime(2024, 1, 15).reconfigure(numbering_system="arab", output_calendar="iso8601")
        assert dt.numbering_system == "arab"
        assert dt.output_calendar == "iso8601"
        assert dt.locale == "en-US"

    def test_week_settings(self) -> None:
        """Test explicit week settings."""
        dt = DateTime(2024, 1, 1).reconfigure(week_settings={"first_day": 1, "minimal_days": 4})
        assert dt.local_weekday == 1
        assert dt.local_week_number == dt.week_number
