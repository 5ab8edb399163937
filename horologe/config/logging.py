"""Rendering of Horologe's debug records through structlog.

The library logs with plain ``logging.getLogger(__name__)`` loggers under
the ``horologe`` namespace and only at DEBUG. Two kinds of records carry
structured fields passed through ``extra=``:

- Invalid values: ``reason`` and ``explanation`` (``horologe.core.*``)
- Zone resolution: ``zone`` (``horologe.units.zone``,
  ``horologe.providers.zoneinfo``)

:func:`configure_logging` attaches one handler to the ``horologe`` logger
whose structlog ``ProcessorFormatter`` lifts those fields into the event.
structlog's own global configuration is left to the application.
"""

from __future__ import annotations

import logging
import sys
from typing import TextIO

import structlog

LOGGER_NAME = "horologe"

#: ``extra=`` keys the library attaches to its records
RECORD_FIELDS = ("reason", "explanation", "zone")


def _drop_empty_fields(
    logger: object, method_name: str, event_dict: structlog.types.EventDict
) -> structlog.types.EventDict:
    for key in RECORD_FIELDS:
        if key in event_dict and event_dict[key] is None:
            del event_dict[key]
    return event_dict


def build_formatter(*, log_json: bool = False) -> structlog.stdlib.ProcessorFormatter:
    """Formatter for ``horologe`` records: console lines or one JSON object each."""
    if log_json:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)

    return structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=[
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.ExtraAdder(allow=RECORD_FIELDS),
            _drop_empty_fields,
            structlog.processors.TimeStamper(fmt="iso"),
        ],
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )


def configure_logging(
    *,
    verbose: bool = False,
    log_json: bool = False,
    stream: TextIO | None = None,
) -> logging.Handler:
    """Send ``horologe`` records to ``stream`` (stderr by default).

    Calling it again replaces the handler it installed before.

    Args:
        verbose: Show the library's DEBUG records. When False, only WARNING+.
        log_json: Render JSON lines instead of console lines.
        stream: Where records are written.

    Returns:
        The installed handler.
    """
    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setFormatter(build_formatter(log_json=log_json))

    library_logger = logging.getLogger(LOGGER_NAME)
    library_logger.handlers.clear()
    library_logger.addHandler(handler)
    library_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    library_logger.propagate = False
    return handler


__all__ = ["LOGGER_NAME", "RECORD_FIELDS", "build_formatter", "configure_logging"]
