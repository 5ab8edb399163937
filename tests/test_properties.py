"""Property-based tests for arithmetic and conversion invariants."""

import datetime as dt_module

from hypothesis import HealthCheck, given, settings
from hypothesis import strategies as st

from horologe import DateTime, Duration
from horologe._internal.calendar import (
    date_from_ordinal,
    date_from_week_info,
    iso_week_info,
    local_week_info,
    ordinal_from_date,
)

# 1900-01-01 to 2100-01-01 in epoch milliseconds
instants = st.integers(min_value=-2_208_988_800_000, max_value=4_102_444_800_000).map(
    lambda ms: DateTime.from_millis(ms, zone="utc")
)
time_durations = st.builds(
    Duration,
    hours=st.integers(-10_000, 10_000),
    minutes=st.integers(-1_000, 1_000),
    milliseconds=st.integers(-100_000, 100_000),
)
iso_durations = st.builds(
    Duration,
    years=st.integers(0, 50),
    months=st.integers(0, 24),
    weeks=st.integers(0, 10),
    days=st.integers(0, 60),
    hours=st.integers(0, 48),
    minutes=st.integers(0, 120),
    seconds=st.integers(0, 120),
)
units = st.sampled_from(["year", "quarter", "month", "week", "day", "hour", "minute", "second"])

zones = st.sampled_from(["utc", "America/New_York", "Europe/Berlin", "Australia/Lord_Howe"])
# 1970-01-01 to 2100-01-01 in epoch milliseconds
zoned_millis = st.integers(min_value=0, max_value=4_102_444_800_000)
zoned_pairs = zones.flatmap(
    lambda zone: st.tuples(
        zoned_millis.map(lambda ms: DateTime.from_millis(ms, zone=zone)),
        zoned_millis.map(lambda ms: DateTime.from_millis(ms, zone=zone)),
    )
)
diff_units = st.lists(
    st.sampled_from(
        ["years", "quarters", "months", "weeks", "days", "hours", "minutes", "seconds", "milliseconds"]
    ),
    min_size=1,
    unique=True,
)

dates = st.dates(min_value=dt_module.date(1600, 1, 1), max_value=dt_module.date(2400, 12, 31))
week_definitions = st.tuples(st.integers(1, 7), st.integers(1, 7))

# The autouse settings fixture is idempotent across examples.
fixture_safe = settings(suppress_health_check=[HealthCheck.function_scoped_fixture])


class TestArithmeticProperties:
    """Invariants of plus, minus and diff."""

    @fixture_safe
    @given(instants, time_durations)
    def test_plus_then_minus(self, dt: DateTime, duration: Duration) -> None:
        """Test that time units are undone exactly."""
        assert dt.plus(duration).minus(duration) == dt

    @fixture_safe
    @given(instants, instants)
    def test_diff_then_plus(self, a: DateTime, b: DateTime) -> None:
        """Test that adding a diff to its start reaches its end."""
        earlier, later = min(a, b), max(a, b)
        diff = later.diff(
            earlier, ["years", "months", "days", "hours", "minutes", "seconds", "milliseconds"]
        )
        assert earlier.plus(diff) == later

    @fixture_safe
    @given(zoned_pairs, diff_units)
    def test_diff_then_plus_either_order(
        self, pair: tuple[DateTime, DateTime], chosen: list[str]
    ) -> None:
        """Test that adding a diff to its argument reaches the receiver in either order."""
        a, b = pair
        assert b.plus(a.diff(b, chosen)) == a

    @fixture_safe
    @given(instants, instants)
    def test_millisecond_diff_is_exact(self, a: DateTime, b: DateTime) -> None:
        """Test that a millisecond diff equals the difference of epoch values."""
        assert b.diff(a).milliseconds == b.to_millis() - a.to_millis()


class TestBoundaryProperties:
    """Invariants of start_of and end_of."""

    @fixture_safe
    @given(instants, units)
    def test_start_of_is_idempotent(self, dt: DateTime, unit: str) -> None:
        """Test that a start is its own start."""
        start = dt.start_of(unit)
        assert start.start_of(unit) == start

    @fixture_safe
    @given(instants, units)
    def test_bounds_enclose(self, dt: DateTime, unit: str) -> None:
        """Test that the unit's bounds contain the DateTime."""
        assert dt.start_of(unit) <= dt <= dt.end_of(unit)
        assert dt.end_of(unit).plus({"milliseconds": 1}) == dt.plus({unit: 1}).start_of(unit)


class TestCalendarProperties:
    """Invariants of ordinal and week-date conversions."""

    @fixture_safe
    @given(dates)
    def test_ordinal_round_trip(self, date: dt_module.date) -> None:
        """Test that an ordinal date converts back to its month and day."""
        ordinal = ordinal_from_date(date.year, date.month, date.day)
        assert ordinal == date.timetuple().tm_yday
        assert date_from_ordinal(date.year, ordinal) == (date.month, date.day)

    @fixture_safe
    @given(dates)
    def test_iso_week_round_trip(self, date: dt_module.date) -> None:
        """Test that ISO week fields agree with the standard library and convert back."""
        week_year, week_number, weekday = iso_week_info(date.year, date.month, date.day)
        assert (week_year, week_number, weekday) == tuple(date.isocalendar())
        assert date_from_week_info(week_year, week_number, weekday) == (
            date.year,
            date.month,
            date.day,
        )

    @fixture_safe
    @given(dates, week_definitions)
    def test_local_week_round_trip(self, date: dt_module.date, definition: tuple[int, int]) -> None:
        """Test that any locale week definition converts back to the same date."""
        first_day, min_days = definition
        week_year, week_number, weekday = local_week_info(
            date.year, date.month, date.day, first_day, min_days
        )
        assert 1 <= weekday <= 7
        assert date_from_week_info(week_year, week_number, weekday, first_day, min_days) == (
            date.year,
            date.month,
            date.day,
        )


class TestDurationProperties:
    """Invariants of Duration conversions."""

    @fixture_safe
    @given(iso_durations)
    def test_iso_round_trip(self, duration: Duration) -> None:
        """Test that ISO text parses back to the same units."""
        assert Duration.from_iso(duration.to_iso()) == duration

    @fixture_safe
    @given(time_durations)
    def test_shift_to_keeps_length(self, duration: Duration) -> None:
        """Test that shifting to smaller units keeps the length."""
        shifted = duration.shift_to("minutes", "milliseconds")
        assert shifted.to_millis() == duration.to_millis()
