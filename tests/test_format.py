"""Tests for token formatting of DateTimes."""

import pytest

from horologe import DateTime
from horologe.format.tokens import tokenize

# Wednesday, in daylight saving time in New York
SAMPLE = DateTime(2014, 8, 6, 13, 7, 4, 54, zone="America/New_York")


class TestTokenize:
    """Tests for splitting format strings."""

    def test_runs_and_literals(self) -> None:
        """Test runs of one letter and quoted text."""
        tokens = tokenize("yyyy 'at' HH")
        assert [token.value for token in tokens] == ["yyyy", " ", "at", " ", "HH"]
        assert [token.literal for token in tokens] == [False, True, True, True, False]

    def test_escaped_quote(self) -> None:
        """Test that two quotes give one literal quote."""
        assert [token.value for token in tokenize("HH''mm")] == ["HH", "'", "mm"]


class TestDateTimeTokens:
    """Tests for individual formatting tokens."""

    @pytest.mark.parametrize(
        "fmt,expected",
        [
            ("MMMM dd, yyyy", "August 06, 2014"),
            ("yyyy-MM-dd HH:mm:ss.SSS", "2014-08-06 13:07:04.054"),
            ("y yy yyyy yyyyyy", "2014 14 2014 002014"),
            ("M MM MMM MMMM MMMMM", "8 08 Aug August A"),
            ("L LL LLL LLLL", "8 08 Aug August"),
            ("d dd", "6 06"),
            ("E EEE EEEE EEEEE", "3 Wed Wednesday W"),
            ("c ccc cccc", "3 Wed Wednesday"),
            ("h hh H HH a", "1 01 13 13 PM"),
            ("m mm s ss", "7 07 4 04"),
            ("S SSS u uu uuu", "54 054 054 05 0"),
            ("o ooo", "218 218"),
            ("q qq", "3 03"),
            ("kkkk-'W'WW-c", "2014-W32-3"),
            ("G GG GGGGG", "AD Anno Domini A"),
            ("HH''mm", "13'07"),
        ],
    )
    def test_token(self, fmt: str, expected: str) -> None:
        """Test one format string."""
        assert SAMPLE.to_format(fmt) == expected

    def test_midnight_is_twelve_am(self) -> None:
        """Test the 12-hour clock at midnight and noon."""
        assert DateTime(2014, 8, 6).to_format("h:mm a") == "12:00 AM"
        assert DateTime(2014, 8, 6, 12).to_format("h:mm a") == "12:00 PM"

    def test_offset_tokens(self) -> None:
        """Test offsets and zone names."""
        assert SAMPLE.to_format("Z|ZZ|ZZZ") == "-4|-04:00|-0400"
        assert SAMPLE.to_format("ZZZZ") == "EDT"
        assert SAMPLE.to_format("ZZZZZ") == "America/New_York"
        assert SAMPLE.to_format("z") == "America/New_York"
        assert DateTime.utc(2014, 8, 6).to_format("ZZ") == "+00:00"

    def test_unix_tokens(self) -> None:
        """Test epoch seconds and milliseconds."""
        dt = DateTime.utc(2014, 8, 6)
        assert dt.to_format("X") == "1407283200"
        assert dt.to_format("x") == "1407283200000"

    def test_unknown_letters_pass_through(self) -> None:
        """Test that characters without a meaning are copied."""
        assert SAMPLE.to_format("yyyy/MM/dd!") == "2014/08/06!"

    def test_invalid(self) -> None:
        """Test the marker for an Invalid DateTime."""
        assert DateTime(2014, 13, 1).to_format("yyyy") == "Invalid DateTime"

    def test_python_format_protocol(self) -> None:
        """Test format() and f-strings."""
        assert f"{SAMPLE:yyyy-MM-dd}" == "2014-08-06"
        assert format(SAMPLE) == "2014-08-06T13:07:04.054-04:00"


class TestMacroTokens:
    """Tests for locale macro tokens."""

    @pytest.mark.parametrize(
        "fmt,expected",
        [
            ("D", "8/6/2014"),
            ("DD", "Aug 6, 2014"),
            ("DDD", "August 6, 2014"),
            ("DDDD", "Wednesday, August 6, 2014"),
            ("t", "1:07 PM"),
            ("tt", "1:07:04 PM"),
            ("T", "13:07"),
            ("TT", "13:07:04"),
            ("f", "8/6/2014, 1:07 PM"),
            ("fff", "August 6, 2014 at 1:07 PM EDT"),
        ],
    )
    def test_us_macros(self, fmt: str, expected: str) -> None:
        """Test the en-US expansions."""
        assert SAMPLE.to_format(fmt) == expected

    def test_gb_macros(self) -> None:
        """Test the en-GB expansions."""
        assert SAMPLE.to_format("D", locale="en-GB") == "06/08/2014"
        assert SAMPLE.to_format("t", locale="en-GB") == "13:07"
        assert SAMPLE.set_locale("en-GB").to_format("DDD") == "6 August 2014"

    def test_quoted_macro_letters_are_literal(self) -> None:
        """Test that quoting prevents expansion."""
        assert SAMPLE.to_format("'D' D") == "D 8/6/2014"

    def test_expand_format(self) -> None:
        """Test turning macros into explicit tokens."""
        assert DateTime.expand_format("D") == "M/d/yyyy"
        assert DateTime.expand_format("D", locale="en-GB") == "dd/MM/yyyy"
        assert DateTime.expand_format("fff") == "LLLL d, yyyy 'at' h:mm a ZZZZ"
