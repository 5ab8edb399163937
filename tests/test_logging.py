"""Tests for rendering Horologe's debug records."""

import io
import json
import logging
from collections.abc import Iterator

import pytest

from horologe import DateTime, Duration, Zone, configure_logging
from horologe.config.logging import LOGGER_NAME


@pytest.fixture(autouse=True)
def restore_library_logger() -> Iterator[logging.Logger]:
    """Undo configure_logging changes to the library logger."""
    library_logger = logging.getLogger(LOGGER_NAME)
    handlers = list(library_logger.handlers)
    level = library_logger.level
    propagate = library_logger.propagate
    yield library_logger
    library_logger.handlers[:] = handlers
    library_logger.setLevel(level)
    library_logger.propagate = propagate


def _json_records(stream: io.StringIO) -> list[dict]:
    return [json.loads(line) for line in stream.getvalue().splitlines() if line.strip()]


class TestConfigureLogging:
    """Tests for installing the library handler."""

    def test_quiet_by_default(self) -> None:
        """Test that debug records are dropped unless verbose."""
        stream = io.StringIO()
        configure_logging(stream=stream)
        DateTime(2024, 13, 1)
        assert logging.getLogger(LOGGER_NAME).level == logging.WARNING
        assert stream.getvalue() == ""

    def test_replaces_previous_handler(self) -> None:
        """Test that configuring twice keeps only the latest handler."""
        first = configure_logging()
        second = configure_logging(verbose=True)
        assert logging.getLogger(LOGGER_NAME).handlers == [second]
        assert first is not second


class TestInvalidValueRecords:
    """Tests for the records emitted when Invalid values are created."""

    def test_datetime_reason_and_explanation(self) -> None:
        """Test that an Invalid DateTime record carries its reason and explanation."""
        stream = io.StringIO()
        configure_logging(verbose=True, log_json=True, stream=stream)
        dt = DateTime(2024, 13, 1)
        record = next(
            r for r in _json_records(stream) if r["event"] == "Invalid DateTime created"
        )
        assert record["level"] == "debug"
        assert record["logger"] == "horologe.core.datetime"
        assert record["reason"] == dt.invalid_reason == "unit out of range"
        assert record["explanation"] == dt.invalid_explanation
        assert "timestamp" in record

    def test_duration_without_explanation(self) -> None:
        """Test that a missing explanation is left out of the record."""
        stream = io.StringIO()
        configure_logging(verbose=True, log_json=True, stream=stream)
        Duration.invalid("because")
        record = next(
            r for r in _json_records(stream) if r["event"] == "Invalid Duration created"
        )
        assert record["reason"] == "because"
        assert "explanation" not in record

    def test_console_rendering(self) -> None:
        """Test that console lines show the reason as a key-value pair."""
        stream = io.StringIO()
        configure_logging(verbose=True, stream=stream)
        DateTime.from_format("nope", "yyyy")
        output = stream.getvalue()
        assert "Invalid DateTime created" in output
        assert "reason=unparsable" in output


class TestZoneResolutionRecords:
    """Tests for the records emitted while resolving zones."""

    def test_unknown_zone(self) -> None:
        """Test that an unknown identifier is logged once with the zone name."""
        stream = io.StringIO()
        configure_logging(verbose=True, log_json=True, stream=stream)
        assert not Zone.named("Nowhere/Logged").is_valid
        assert not Zone.named("Nowhere/Logged").is_valid
        records = [
            r for r in _json_records(stream) if r["event"] == "Unknown zone identifier"
        ]
        assert len(records) == 1
        assert records[0]["zone"] == "Nowhere/Logged"
        assert records[0]["logger"] == "horologe.providers.zoneinfo"
