"""Text codecs: ISO 8601, RFC 2822 / HTTP, SQL and token formats."""

from __future__ import annotations

from horologe.format.iso8601 import (
    format_iso,
    format_iso_date,
    format_iso_time,
    format_iso_week_date,
    parse_iso,
    parse_iso_duration,
)
from horologe.format.parsed import ParsedFields
from horologe.format.rfc2822 import format_http, format_rfc2822, parse_http, parse_rfc2822
from horologe.format.sql import format_sql, format_sql_date, format_sql_time, parse_sql
from horologe.format.tokens import (
    ExplainedFormat,
    TokenParser,
    expand_format,
    format_datetime,
    format_duration,
    tokenize,
)

__all__ = [
    "ParsedFields",
    "parse_iso",
    "parse_iso_duration",
    "format_iso",
    "format_iso_date",
    "format_iso_time",
    "format_iso_week_date",
    "parse_rfc2822",
    "parse_http",
    "format_rfc2822",
    "format_http",
    "parse_sql",
    "format_sql",
    "format_sql_date",
    "format_sql_time",
    "tokenize",
    "expand_format",
    "format_datetime",
    "format_duration",
    "ExplainedFormat",
    "TokenParser",
]
