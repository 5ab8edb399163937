"""Tests for the Interval class and interval collection operations."""

import math

import pytest

from horologe import (
    DateTime,
    Duration,
    InvalidArgumentError,
    InvalidIntervalError,
    Interval,
    override_settings,
)
from horologe.arithmetic.range_ops import find_gaps, span_intervals


def utc_interval(start: tuple[int, ...], end: tuple[int, ...]) -> Interval:
    return Interval(DateTime.utc(*start), DateTime.utc(*end))


def day_interval(start_day: int, end_day: int) -> Interval:
    return utc_interval((2024, 1, start_day), (2024, 1, end_day))


class TestIntervalConstruction:
    """Tests for Interval factories."""

    def test_valid(self) -> None:
        """Test a plain interval."""
        interval = day_interval(1, 2)
        assert interval.is_valid
        assert interval.start == DateTime.utc(2024, 1, 1)
        assert interval.end == DateTime.utc(2024, 1, 2)
        assert not interval.is_empty

    def test_empty(self) -> None:
        """Test that equal endpoints make a valid, empty interval."""
        interval = day_interval(1, 1)
        assert interval.is_valid
        assert interval.is_empty
        assert not interval.contains(DateTime.utc(2024, 1, 1))

    def test_end_before_start(self) -> None:
        """Test that a reversed interval is Invalid."""
        interval = day_interval(2, 1)
        assert not interval.is_valid
        assert interval.invalid_reason == "end before start"
        assert interval.start is None
        assert math.isnan(interval.length())

    def test_invalid_endpoint(self) -> None:
        """Test that an Invalid DateTime gives an Invalid Interval."""
        interval = Interval(DateTime(2024, 13, 1), DateTime.utc(2024, 1, 1))
        assert interval.invalid_reason == "invalid endpoint"

    def test_non_datetime_endpoint(self) -> None:
        """Test that endpoints must be DateTimes."""
        with pytest.raises(InvalidArgumentError):
            Interval.from_datetimes("2024-01-01", DateTime.utc(2024, 1, 1))  # type: ignore[arg-type]

    def test_after_and_before(self) -> None:
        """Test building from an endpoint and a duration."""
        start = DateTime.utc(2024, 1, 1)
        assert Interval.after(start, {"hours": 2}).end.hour == 2
        assert Interval.before(start, Duration(days=1)).start.to_iso_date() == "2023-12-31"

    def test_throw_on_invalid(self) -> None:
        """Test fail-fast mode."""
        with override_settings(throw_on_invalid=True):
            with pytest.raises(InvalidIntervalError, match="end before start"):
                day_interval(2, 1)


class TestIntervalFromIso:
    """Tests for parsing ISO 8601 intervals."""

    def test_start_and_end(self) -> None:
        """Test two DateTimes."""
        interval = Interval.from_iso("2024-01-01T00:00Z/2024-01-02T00:00Z")
        assert interval == day_interval(1, 2)

    def test_start_and_duration(self) -> None:
        """Test a start followed by a duration."""
        interval = Interval.from_iso("2007-03-01T13:00:00Z/P1Y2M10DT2H30M")
        assert interval.end.to_iso() == "2008-05-11T15:30:00.000Z"

    def test_duration_and_end(self) -> None:
        """Test a duration followed by an end."""
        interval = Interval.from_iso("P1D/2024-01-02T00:00Z")
        assert interval.start.to_iso() == "2024-01-01T00:00:00.000Z"

    def test_keeps_offsets(self) -> None:
        """Test that offsets in the text set the endpoint zones."""
        interval = Interval.from_iso("2024-01-01T00:00+02:00/2024-01-02T00:00+02:00")
        assert interval.start.offset == 120

    @pytest.mark.parametrize("text", ["nonsense", "2024-01-01", "/2024-01-01", "P1D/P2D"])
    def test_unparsable(self, text: str) -> None:
        """Test that bad text gives an Invalid Interval."""
        assert Interval.from_iso(text).invalid_reason == "unparsable"


class TestIntervalMeasurement:
    """Tests for length, count and has_same."""

    def test_length(self) -> None:
        """Test lengths in several units."""
        interval = day_interval(1, 31)
        assert interval.length("days") == 30
        assert interval.length("hours") == 720
        assert interval.to_duration(["weeks", "days"]).to_object() == {"weeks": 4, "days": 2}

    def test_count(self) -> None:
        """Test counting touched calendar units."""
        interval = Interval.from_iso("2024-01-01T12:00Z/2024-01-03T12:00Z")
        assert interval.count("days") == 3
        assert utc_interval((2024, 1, 1), (2024, 1, 3)).count("days") == 2

    def test_has_same(self) -> None:
        """Test whether an interval fits in one unit."""
        assert day_interval(1, 2).has_same("day")
        assert not day_interval(1, 3).has_same("day")
        assert day_interval(1, 31).has_same("month")

    def test_last_datetime(self) -> None:
        """Test the last instant inside the interval."""
        assert day_interval(1, 2).last_datetime.to_iso() == "2024-01-01T23:59:59.999Z"


class TestIntervalPointQueries:
    """Tests for comparisons against a single DateTime."""

    def test_contains_is_half_open(self) -> None:
        """Test that the start is inside and the end is not."""
        interval = day_interval(1, 3)
        assert interval.contains(DateTime.utc(2024, 1, 1))
        assert DateTime.utc(2024, 1, 2) in interval
        assert DateTime.utc(2024, 1, 3) not in interval
        assert "2024-01-02" not in interval

    def test_before_and_after(self) -> None:
        """Test is_before and is_after."""
        interval = day_interval(5, 10)
        assert interval.is_after(DateTime.utc(2024, 1, 4))
        assert interval.is_before(DateTime.utc(2024, 1, 10))
        assert not interval.is_before(DateTime.utc(2024, 1, 9))


class TestIntervalSplitting:
    """Tests for split_at, split_by and divide_equally."""

    def test_split_at(self) -> None:
        """Test cutting at points inside the interval."""
        interval = utc_interval((2024, 1, 1), (2024, 1, 1, 10))
        pieces = interval.split_at(
            DateTime.utc(2024, 1, 1, 6), DateTime.utc(2024, 1, 1, 3), DateTime.utc(2024, 1, 2)
        )
        assert [piece.length("hours") for piece in pieces] == [3, 3, 4]

    def test_split_by(self) -> None:
        """Test fixed-length pieces with a shorter last piece."""
        interval = utc_interval((2024, 1, 1), (2024, 1, 1, 5))
        pieces = interval.split_by({"hours": 2})
        assert [piece.length("hours") for piece in pieces] == [2, 2, 1]

    def test_split_by_is_restartable(self) -> None:
        """Test that the pieces can be iterated more than once."""
        pieces = utc_interval((2024, 1, 1), (2024, 1, 1, 5)).split_by(Duration(hours=2))
        assert len(list(pieces)) == 3
        assert len(list(pieces)) == 3

    def test_split_by_months_steps_from_start(self) -> None:
        """Test that month steps are taken from the original start."""
        interval = utc_interval((2024, 1, 31), (2024, 4, 30))
        starts = [piece.start.to_iso_date() for piece in interval.split_by({"months": 1})]
        assert starts == ["2024-01-31", "2024-02-29", "2024-03-31"]

    @pytest.mark.parametrize("step", [{"hours": 0}, {"hours": -1}])
    def test_split_by_non_positive(self, step: dict[str, int]) -> None:
        """Test that a non-positive step gives no pieces."""
        assert list(day_interval(1, 2).split_by(step)) == []

    def test_split_invalid(self) -> None:
        """Test that an Invalid Interval splits into nothing."""
        assert list(day_interval(2, 1).split_by({"hours": 1})) == []
        assert day_interval(2, 1).split_at(DateTime.utc(2024, 1, 1)) == []

    def test_divide_equally(self) -> None:
        """Test splitting into equal parts."""
        pieces = utc_interval((2024, 1, 1), (2024, 1, 1, 8)).divide_equally(4)
        assert len(pieces) == 4
        assert all(piece.length("hours") == 2 for piece in pieces)

    def test_divide_into_nothing(self) -> None:
        """Test that fewer than one part raises."""
        with pytest.raises(InvalidArgumentError):
            day_interval(1, 2).divide_equally(0)


class TestIntervalRelations:
    """Tests for relations between intervals."""

    def test_overlaps(self) -> None:
        """Test overlapping and merely abutting intervals."""
        assert day_interval(1, 5).overlaps(day_interval(4, 8))
        assert not day_interval(1, 5).overlaps(day_interval(5, 8))

    def test_abuts(self) -> None:
        """Test abutting in both directions."""
        assert day_interval(1, 5).abuts_start(day_interval(5, 8))
        assert day_interval(5, 8).abuts_end(day_interval(1, 5))
        assert not day_interval(1, 5).abuts_end(day_interval(5, 8))

    def test_engulfs(self) -> None:
        """Test containment of another interval."""
        assert day_interval(1, 10).engulfs(day_interval(2, 5))
        assert day_interval(1, 10).engulfs(day_interval(1, 10))
        assert not day_interval(2, 5).engulfs(day_interval(1, 10))

    def test_equality(self) -> None:
        """Test equality and hashing."""
        assert day_interval(1, 2) == day_interval(1, 2)
        assert day_interval(1, 2) != day_interval(1, 3)
        assert day_interval(2, 1) != day_interval(2, 1)
        assert len({day_interval(1, 2), day_interval(1, 2)}) == 1

    def test_set_and_map_endpoints(self) -> None:
        """Test replacing endpoints."""
        assert day_interval(1, 5).set(end=DateTime.utc(2024, 1, 3)) == day_interval(1, 3)
        shifted = day_interval(1, 5).map_endpoints(lambda dt: dt.plus({"days": 1}))
        assert shifted == day_interval(2, 6)
        assert not day_interval(1, 5).set(end=DateTime.utc(2023, 1, 1)).is_valid


class TestIntervalSetOperations:
    """Tests for intersection, union, difference, merge, xor and gaps."""

    def test_intersection(self) -> None:
        """Test the overlap of two intervals."""
        assert day_interval(1, 5).intersection(day_interval(3, 8)) == day_interval(3, 5)
        assert day_interval(1, 5).intersection(day_interval(5, 8)) is None

    def test_union(self) -> None:
        """Test the covering interval, gaps included."""
        assert day_interval(1, 3).union(day_interval(6, 8)) == day_interval(1, 8)

    def test_difference(self) -> None:
        """Test removing a hole from the middle."""
        pieces = day_interval(1, 10).difference(day_interval(4, 6))
        assert pieces == [day_interval(1, 4), day_interval(6, 10)]

    def test_difference_with_disjoint(self) -> None:
        """Test that a disjoint interval removes nothing."""
        assert day_interval(1, 5).difference(day_interval(7, 9)) == [day_interval(1, 5)]

    def test_merge(self) -> None:
        """Test merging overlapping and abutting intervals."""
        merged = Interval.merge(
            [day_interval(10, 12), day_interval(1, 5), day_interval(4, 8), day_interval(8, 9)]
        )
        assert merged == [day_interval(1, 9), day_interval(10, 12)]

    def test_merge_ignores_invalid(self) -> None:
        """Test that Invalid intervals are dropped."""
        assert Interval.merge([day_interval(2, 1), day_interval(1, 3)]) == [day_interval(1, 3)]
        assert Interval.merge([]) == []

    def test_xor(self) -> None:
        """Test spans covered by exactly one interval."""
        pieces = Interval.xor([day_interval(1, 5), day_interval(3, 8)])
        assert pieces == [day_interval(1, 3), day_interval(5, 8)]

    def test_xor_abutting(self) -> None:
        """Test that abutting intervals join into one span."""
        assert Interval.xor([day_interval(3, 5), day_interval(1, 3)]) == [day_interval(1, 5)]

    def test_find_gaps(self) -> None:
        """Test the spans between intervals."""
        gaps = find_gaps([day_interval(1, 3), day_interval(2, 4), day_interval(6, 8)])
        assert gaps == [day_interval(4, 6)]

    def test_span(self) -> None:
        """Test the interval covering all others."""
        assert span_intervals([day_interval(5, 6), day_interval(1, 2)]) == day_interval(1, 6)
        assert span_intervals([day_interval(2, 1)]) is None


class TestIntervalOutput:
    """Tests for text output."""

    def test_to_iso(self) -> None:
        """Test ISO renderings."""
        interval = day_interval(1, 2)
        assert interval.to_iso() == "2024-01-01T00:00:00.000Z/2024-01-02T00:00:00.000Z"
        assert interval.to_iso_date() == "2024-01-01/2024-01-02"

    def test_to_format(self) -> None:
        """Test formatting both endpoints."""
        interval = day_interval(1, 2)
        assert interval.to_format("yyyy-MM-dd") == "2024-01-01 – 2024-01-02"
        assert interval.to_format("yyyy-MM-dd", separator=" to ") == "2024-01-01 to 2024-01-02"

    def test_str_and_repr(self) -> None:
        """Test string forms."""
        assert str(day_interval(1, 2)) == (
            "[2024-01-01T00:00:00.000Z – 2024-01-02T00:00:00.000Z)"
        )
        assert repr(day_interval(2, 1)) == "Interval.invalid('end before start')"

    def test_invalid_output(self) -> None:
        """Test that an Invalid Interval renders a fixed marker."""
        interval = day_interval(2, 1)
        assert str(interval) == "Invalid Interval"
        assert interval.to_iso() == "Invalid Interval"
        assert interval.to_format("yyyy") == "Invalid Interval"
