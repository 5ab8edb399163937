"""DateTime: an immutable instant viewed in a zone with a locale.

A DateTime is an epoch-millisecond instant plus the zone and locale it is
viewed in. Civil fields (year ... millisecond) are derived from the instant
and the zone's offset at that instant. Construction never raises on bad
data: out-of-range fields, unparsable text and unknown zones produce an
Invalid DateTime that carries a reason and propagates through every
transformation (unless ``throw_on_invalid`` is configured).

Numeric accessors of an Invalid DateTime return NaN, string accessors
return None and boolean accessors return False.
"""

from __future__ import annotations

import datetime as _datetime
import logging
import math
from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any, overload
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from horologe._internal.calendar import (
    civil_from_days,
    date_from_ordinal,
    date_from_week_info,
    days_from_civil,
    days_in_month,
    days_in_year,
    is_leap_year,
    iso_week_info,
    iso_weekday,
    local_week_info,
    ordinal_from_date,
    weeks_in_week_year,
)
from horologe._internal.constants import (
    ISO_FIRST_DAY_OF_WEEK,
    ISO_MIN_DAYS_IN_FIRST_WEEK,
    MAX_TIMESTAMP_MILLIS,
)
from horologe._internal.decorators import deprecated
from horologe._internal.validation import (
    check_gregorian,
    check_ordinal,
    check_time,
    check_week,
    integer_between,
    is_integer,
    unit_out_of_range,
)
from horologe.arithmetic.calendar_ops import (
    CivilFields,
    add_duration,
    civil_at,
    possible_instants,
    resolve_local,
)
from horologe.arithmetic.diff import diff_datetimes
from horologe.config.settings import default_zone, get_settings, now_millis
from horologe.core.duration import Duration
from horologe.core.locale import LocaleConfig
from horologe.errors import ConflictingUnitsError, InvalidArgumentError, InvalidDateTimeError
from horologe.format import iso8601, rfc2822, sql, tokens
from horologe.format.parsed import ParsedFields
from horologe.units.timeunit import (
    ORDERED_FIELDS,
    ORDERED_ORDINAL_FIELDS,
    ORDERED_WEEK_FIELDS,
    TimeUnit,
    normalize_duration_unit,
    normalize_field,
)
from horologe.units.validity import Reason, Validity, first_failure
from horologe.units.zone import Zone, ZoneKind

if TYPE_CHECKING:
    from horologe.core.interval import Interval

logger = logging.getLogger(__name__)

_EPOCH = _datetime.datetime(1970, 1, 1, tzinfo=_datetime.timezone.utc)

_GREGORIAN_DEFAULTS = {
    "month": 1,
    "day": 1,
    "hour": 0,
    "minute": 0,
    "second": 0,
    "millisecond": 0,
}
_WEEK_DEFAULTS = {
    "week_number": 1,
    "weekday": 1,
    "hour": 0,
    "minute": 0,
    "second": 0,
    "millisecond": 0,
}
_ORDINAL_DEFAULTS = {
    "ordinal": 1,
    "hour": 0,
    "minute": 0,
    "second": 0,
    "millisecond": 0,
}
_TIME_FIELDS = ("hour", "minute", "second", "millisecond")
_ISO_WEEK_FIELDS = ("week_year", "week_number", "weekday")
_LOCAL_WEEK_FIELDS = {
    "local_week_year": "week_year",
    "local_week_number": "week_number",
    "local_weekday": "weekday",
}


def _normalize_fields(obj: Mapping[str, Any]) -> dict[str, Any]:
    if not isinstance(obj, Mapping):
        raise InvalidArgumentError(f"Expected a mapping of DateTime fields, got {obj!r}")
    normalized: dict[str, Any] = {}
    for key, value in obj.items():
        if value is None:
            continue
        name = normalize_field(key)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise InvalidArgumentError(f"Invalid unit value {value!r} for {name}")
        normalized[name] = value
    return normalized


def _week_definition(
    fields: dict[str, Any], loc: LocaleConfig
) -> tuple[dict[str, Any], int, int, bool]:
    """Rename locale week fields and pick the week rules they imply.

    Returns:
        (fields, first_day_of_week, min_days_in_first_week, uses_locale_weeks)
    """
    local_keys = [key for key in _LOCAL_WEEK_FIELDS if key in fields]
    if not local_keys:
        return fields, ISO_FIRST_DAY_OF_WEEK, ISO_MIN_DAYS_IN_FIRST_WEEK, False
    if any(key in fields for key in _ISO_WEEK_FIELDS):
        raise ConflictingUnitsError(
            "Cannot mix locale-based week fields with ISO-based week fields"
        )
    renamed = {_LOCAL_WEEK_FIELDS.get(key, key): value for key, value in fields.items()}
    week = loc.get_week_settings()
    return renamed, week.first_day, week.minimal_days, True


def _apply_quarter(fields: dict[str, Any]) -> Validity | None:
    if "quarter" not in fields:
        return None
    quarter = fields.pop("quarter")
    if not integer_between(quarter, 1, 4):
        return unit_out_of_range("quarter", quarter)
    fields.setdefault("month", (int(quarter) - 1) * 3 + 1)
    return None


def _check_conflicts(fields: dict[str, Any]) -> None:
    contains_ordinal = "ordinal" in fields
    contains_month_day = "month" in fields or "day" in fields
    contains_gregorian = "year" in fields or contains_month_day
    definite_week = "week_year" in fields or "week_number" in fields
    if (contains_gregorian or contains_ordinal) and definite_week:
        raise ConflictingUnitsError(
            "Can't mix week_year/week_number units with year/month/day or ordinals"
        )
    if contains_month_day and contains_ordinal:
        raise ConflictingUnitsError("Can't mix ordinal dates with month/day")


def _unsupported_zone(zone: Zone) -> tuple[Reason, str]:
    return Reason.UNSUPPORTED_ZONE, f'the zone "{zone.name}" is not supported'


def _describe_civil(civil: CivilFields) -> str:
    return (
        f"{iso8601.iso_year(civil.year)}-{civil.month:02d}-{civil.day:02d}"
        f"T{civil.hour:02d}:{civil.minute:02d}:{civil.second:02d}.{civil.millisecond:03d}"
    )


def _zone_from_tzinfo(value: _datetime.datetime) -> Zone:
    tzinfo = value.tzinfo
    if isinstance(tzinfo, ZoneInfo):
        return Zone.named(tzinfo.key)
    offset = value.utcoffset()
    return Zone.fixed(int(offset.total_seconds() // 60)) if offset else Zone.utc()


class DateTime:
    """An immutable, zone-aware instant with calendar fields.

    Create values with the factories (``local``, ``utc``, ``from_object``,
    ``from_iso`` ...) or the constructor, which behaves like ``local``.

    Attributes:
        year, month, day, hour, minute, second, millisecond: Civil fields.
        zone: The Zone the instant is viewed in.
        offset: UTC offset in minutes at this instant.

    Examples:
        >>> dt = DateTime(2017, 3, 12, 5, 45, zone="America/New_York")
        >>> dt.to_iso()
        '2017-03-12T05:45:00.000-04:00'
        >>> dt.plus({"days": 1}).day
        13
        >>> DateTime(2017, 13, 1).invalid_reason
        'unit out of range'
    """

    __slots__ = ("_ts", "_zone", "_loc", "_invalid", "_offset", "_civil", "_iso_week", "_local_week")

    def __init__(
        self,
        year: int,
        month: int = 1,
        day: int = 1,
        hour: int = 0,
        minute: int = 0,
        second: int = 0,
        millisecond: int = 0,
        *,
        zone: Zone | str | int | None = None,
        **options: Any,
    ) -> None:
        """Create a DateTime from civil fields in ``zone`` (default zone if None).

        Out-of-range fields produce an Invalid DateTime rather than raising.

        Args:
            year ... millisecond: Civil fields.
            zone: Zone, zone name or fixed offset in minutes.
            **options: ``locale``, ``numbering_system``, ``output_calendar``,
                ``week_settings``, ``adjust_skipped``.
        """
        built = DateTime.local(
            year, month, day, hour, minute, second, millisecond, zone=zone, **options
        )
        for name in DateTime.__slots__:
            object.__setattr__(self, name, getattr(built, name))

    @classmethod
    def _from_internal(
        cls,
        ts: int,
        zone: Zone,
        loc: LocaleConfig,
        offset: int | None = None,
    ) -> DateTime:
        dt = object.__new__(cls)
        dt._ts = ts
        dt._zone = zone
        dt._loc = loc
        dt._invalid = None
        dt._offset = zone.offset_at(ts) if offset is None else offset
        dt._civil = civil_at(ts, dt._offset)
        dt._iso_week = None
        dt._local_week = None
        return dt

    def _clone(
        self,
        ts: int | None = None,
        *,
        offset: int | None = None,
        zone: Zone | None = None,
        loc: LocaleConfig | None = None,
    ) -> DateTime:
        if ts is None and zone is None and offset is None:
            ts, offset = self._ts, self._offset
        elif ts is None:
            ts = self._ts
        if abs(ts) > MAX_TIMESTAMP_MILLIS:
            return DateTime.invalid(Reason.INVALID_INPUT, "Timestamp out of range")
        return DateTime._from_internal(ts, zone or self._zone, loc or self._loc, offset)

    def _with_civil(self, civil: CivilFields) -> DateTime:
        # transformations keep the current offset when it is still valid
        ts, offset, _skipped = resolve_local(civil.to_local_millis(), self._zone, self._offset)
        return self._clone(ts, offset=offset)

    @classmethod
    def _from_civil(
        cls,
        civil: CivilFields,
        zone: Zone,
        loc: LocaleConfig,
        *,
        hint: int | None = None,
        adjust_skipped: bool = False,
    ) -> DateTime:
        ts, offset, skipped = resolve_local(civil.to_local_millis(), zone, hint)
        if skipped and not adjust_skipped:
            return cls.invalid(
                Reason.SKIPPED_TIME,
                f"the local time {_describe_civil(civil)} does not exist in {zone.name}",
            )
        if abs(ts) > MAX_TIMESTAMP_MILLIS:
            return cls.invalid(Reason.INVALID_INPUT, "Timestamp out of range")
        return cls._from_internal(ts, zone, loc, offset)

    @classmethod
    def _build(
        cls,
        obj: Mapping[str, Any],
        zone: Zone,
        loc: LocaleConfig,
        *,
        adjust_skipped: bool = False,
        specific_offset: int | None = None,
    ) -> DateTime:
        """Build from fields, filling missing ones from "now" and minimums.

        Units larger than the largest given one come from the current time;
        units smaller than it default to their minimum.
        """
        if not zone.is_valid:
            return cls.invalid(*_unsupported_zone(zone))

        fields = _normalize_fields(obj)
        fields, first_day, min_days, locale_weeks = _week_definition(fields, loc)
        quarter_failure = _apply_quarter(fields)
        if quarter_failure is not None:
            return cls.invalid(quarter_failure.reason or "", quarter_failure.explanation)
        _check_conflicts(fields)

        contains_ordinal = "ordinal" in fields
        contains_gregorian = "year" in fields or "month" in fields or "day" in fields
        definite_week = "week_year" in fields or "week_number" in fields
        use_week = definite_week or ("weekday" in fields and not contains_gregorian)

        now = now_millis()
        provisional = specific_offset if specific_offset is not None else zone.offset_at(now)
        now_civil = civil_at(now, provisional)
        now_values: dict[str, int] = now_civil._asdict()

        if use_week:
            order, defaults = ORDERED_WEEK_FIELDS, _WEEK_DEFAULTS
            week_year, week_number, weekday = local_week_info(
                now_civil.year, now_civil.month, now_civil.day, first_day, min_days
            )
            now_values.update(week_year=week_year, week_number=week_number, weekday=weekday)
        elif contains_ordinal:
            order, defaults = ORDERED_ORDINAL_FIELDS, _ORDINAL_DEFAULTS
            now_values["ordinal"] = ordinal_from_date(
                now_civil.year, now_civil.month, now_civil.day
            )
        else:
            order, defaults = ORDERED_FIELDS, _GREGORIAN_DEFAULTS

        found_first = False
        for unit in order:
            if unit in fields:
                found_first = True
            elif found_first:
                fields[unit] = defaults[unit]
            else:
                fields[unit] = now_values[unit]

        if use_week:
            date_failure = check_week(fields, first_day, min_days)
        elif contains_ordinal:
            date_failure = check_ordinal(fields)
        else:
            date_failure = check_gregorian(fields)
        failure = first_failure(date_failure, check_time(fields))
        if failure is not None:
            return cls.invalid(failure.reason or "", failure.explanation)

        if use_week:
            year, month, day = date_from_week_info(
                int(fields["week_year"]),
                int(fields["week_number"]),
                int(fields["weekday"]),
                first_day,
                min_days,
            )
        elif contains_ordinal:
            year = int(fields["year"])
            month, day = date_from_ordinal(year, int(fields["ordinal"]))
        else:
            year, month, day = int(fields["year"]), int(fields["month"]), int(fields["day"])

        civil = CivilFields(
            year, month, day, *(int(fields[name]) for name in _TIME_FIELDS)
        )
        result = cls._from_civil(
            civil, zone, loc, hint=specific_offset, adjust_skipped=adjust_skipped
        )

        if result.is_valid and "weekday" in fields and contains_gregorian and not use_week:
            actual = result.local_weekday if locale_weeks else result.weekday
            if fields["weekday"] != actual:
                return cls.invalid(
                    Reason.MISMATCHED_WEEKDAY,
                    f"you can't specify both a weekday of {fields['weekday']} "
                    f"and a date of {result.to_iso()}",
                )
        return result

    # --- factories ---

    @classmethod
    def invalid(cls, reason: str | Reason, explanation: str | None = None) -> DateTime:
        """Create an Invalid DateTime (or raise in fail-fast mode).

        Raises:
            InvalidDateTimeError: If ``throw_on_invalid`` is enabled.
        """
        validity = Validity.failure(reason, explanation)
        if get_settings().throw_on_invalid:
            logger.debug("Raising for invalid DateTime", extra={"reason": validity.reason})
            raise InvalidDateTimeError(validity.reason or "", explanation)
        logger.debug(
            "Invalid DateTime created",
            extra={"reason": validity.reason, "explanation": explanation},
        )
        dt = object.__new__(cls)
        dt._ts = 0
        dt._zone = Zone.utc()
        dt._loc = LocaleConfig.create()
        dt._invalid = validity
        dt._offset = 0
        dt._civil = CivilFields(1970, 1, 1)
        dt._iso_week = None
        dt._local_week = None
        return dt

    @classmethod
    def now(cls, **options: Any) -> DateTime:
        """The current instant in the default zone."""
        return cls.from_millis(now_millis(), **options)

    @classmethod
    def local(
        cls,
        year: int | None = None,
        month: int | None = None,
        day: int | None = None,
        hour: int | None = None,
        minute: int | None = None,
        second: int | None = None,
        millisecond: int | None = None,
        *,
        zone: Zone | str | int | None = None,
        **options: Any,
    ) -> DateTime:
        """Create from civil fields in the default zone (or ``zone``).

        With no fields this is the current instant. Fields below the
        largest given one default to their minimum.

        Examples:
            >>> DateTime.local(2016, 2).to_iso_date()
            '2016-02-01'
        """
        fields = {
            "year": year,
            "month": month,
            "day": day,
            "hour": hour,
            "minute": minute,
            "second": second,
            "millisecond": millisecond,
        }
        if all(value is None for value in fields.values()):
            locale_options = {k: v for k, v in options.items() if k != "adjust_skipped"}
            return cls.from_millis(now_millis(), zone=zone, **locale_options)
        return cls.from_object(fields, zone=zone, **options)

    @classmethod
    def utc(
        cls,
        year: int | None = None,
        month: int | None = None,
        day: int | None = None,
        hour: int | None = None,
        minute: int | None = None,
        second: int | None = None,
        millisecond: int | None = None,
        **options: Any,
    ) -> DateTime:
        """Like :meth:`local` but in UTC."""
        return cls.local(
            year, month, day, hour, minute, second, millisecond, zone=Zone.utc(), **options
        )

    @classmethod
    def from_object(
        cls,
        obj: Mapping[str, Any] | None = None,
        *,
        zone: Zone | str | int | None = None,
        locale: str | None = None,
        numbering_system: str | None = None,
        output_calendar: str | None = None,
        week_settings: Any = None,
        adjust_skipped: bool = False,
    ) -> DateTime:
        """Create from a mapping of fields.

        Accepts gregorian (year/month/day), ordinal (year/ordinal), ISO week
        (week_year/week_number/weekday) or locale week fields, plus
        hour/minute/second/millisecond. Field names may be singular, plural
        or camelCase.

        Args:
            obj: The fields.
            zone: Interpretation zone (default zone if None).
            locale, numbering_system, output_calendar, week_settings:
                Locale options.
            adjust_skipped: Push times in a DST gap forward instead of
                returning Invalid.

        Raises:
            ConflictingUnitsError: When week, ordinal and gregorian fields
                are mixed.
            InvalidArgumentError: For unknown field names or non-numeric
                values.
        """
        loc = LocaleConfig.create(
            locale=locale,
            numbering_system=numbering_system,
            output_calendar=output_calendar,
            week_settings=week_settings,
        )
        target = Zone.normalize(zone, default_zone())
        return cls._build(obj or {}, target, loc, adjust_skipped=adjust_skipped)

    @classmethod
    def from_millis(
        cls, ms: float, *, zone: Zone | str | int | None = None, **options: Any
    ) -> DateTime:
        """Create from milliseconds since the Unix epoch.

        Raises:
            InvalidArgumentError: If ``ms`` is not a number.
        """
        if isinstance(ms, bool) or not isinstance(ms, (int, float)):
            raise InvalidArgumentError(
                f"from_millis requires a numerical input, but received a "
                f"{type(ms).__name__} with value {ms!r}"
            )
        if math.isnan(ms) or abs(ms) > MAX_TIMESTAMP_MILLIS:
            return cls.invalid(Reason.INVALID_INPUT, "Timestamp out of range")
        target = Zone.normalize(zone, default_zone())
        if not target.is_valid:
            return cls.invalid(*_unsupported_zone(target))
        return cls._from_internal(round(ms), target, LocaleConfig.create(**options))

    @classmethod
    def from_seconds(
        cls, seconds: float, *, zone: Zone | str | int | None = None, **options: Any
    ) -> DateTime:
        """Create from seconds since the Unix epoch."""
        if isinstance(seconds, bool) or not isinstance(seconds, (int, float)):
            raise InvalidArgumentError(
                f"from_seconds requires a numerical input, but received a "
                f"{type(seconds).__name__} with value {seconds!r}"
            )
        return cls.from_millis(seconds * 1000, zone=zone, **options)

    @classmethod
    def from_py_datetime(
        cls,
        value: _datetime.datetime,
        *,
        zone: Zone | str | int | None = None,
        **options: Any,
    ) -> DateTime:
        """Create from a standard-library ``datetime``.

        Aware values keep their instant (viewed in ``zone``, or in their own
        zone when ``zone`` is None). Naive values are read as civil time in
        ``zone``. Microseconds are truncated to milliseconds.
        """
        if not isinstance(value, _datetime.datetime):
            raise InvalidArgumentError(f"Expected a datetime.datetime, got {value!r}")
        if value.tzinfo is None or value.utcoffset() is None:
            fields = {
                "year": value.year,
                "month": value.month,
                "day": value.day,
                "hour": value.hour,
                "minute": value.minute,
                "second": value.second,
                "millisecond": value.microsecond // 1000,
            }
            return cls.from_object(fields, zone=zone, **options)
        ms = (value - _EPOCH) // _datetime.timedelta(milliseconds=1)
        target = zone if zone is not None else _zone_from_tzinfo(value)
        return cls.from_millis(ms, zone=target, **options)

    @classmethod
    def _from_parsed(
        cls,
        parsed: ParsedFields | None,
        text: str,
        format_name: str,
        *,
        zone: Zone | str | int | None,
        set_zone: bool,
        adjust_skipped: bool,
        loc: LocaleConfig,
    ) -> DateTime:
        if parsed is None or (not parsed.fields and parsed.zone is None):
            return cls.invalid(
                Reason.UNPARSABLE, f'the input "{text}" can\'t be parsed as {format_name}'
            )
        target = Zone.normalize(zone, default_zone())
        interpretation = parsed.zone or target
        result = cls._build(
            parsed.fields,
            interpretation,
            loc,
            adjust_skipped=adjust_skipped,
            specific_offset=parsed.specific_offset,
        )
        if set_zone or not result.is_valid:
            return result
        return result.set_zone(target)

    @classmethod
    def from_iso(
        cls,
        text: str,
        *,
        zone: Zone | str | int | None = None,
        set_zone: bool = False,
        adjust_skipped: bool = False,
        **options: Any,
    ) -> DateTime:
        """Parse ISO 8601 text.

        Args:
            text: Date, date-time, week date, ordinal date or time.
            zone: Zone used when the text has no offset; the result is
                converted to it.
            set_zone: Keep the offset (or zone) found in the text instead.
            adjust_skipped: Push times in a DST gap forward.
            **options: Locale options.

        Examples:
            >>> DateTime.from_iso("2016-05-25T09:08:34.123+06:00", set_zone=True).offset
            360
        """
        return cls._from_parsed(
            iso8601.parse_iso(text),
            text,
            "ISO 8601",
            zone=zone,
            set_zone=set_zone,
            adjust_skipped=adjust_skipped,
            loc=LocaleConfig.create(**options),
        )

    @classmethod
    def from_rfc2822(
        cls,
        text: str,
        *,
        zone: Zone | str | int | None = None,
        set_zone: bool = False,
        **options: Any,
    ) -> DateTime:
        """Parse an RFC 2822 date such as ``Tue, 01 Nov 2016 13:23:12 +0630``."""
        return cls._from_parsed(
            rfc2822.parse_rfc2822(text),
            text,
            "RFC 2822",
            zone=zone,
            set_zone=set_zone,
            adjust_skipped=False,
            loc=LocaleConfig.create(**options),
        )

    @classmethod
    def from_http(
        cls,
        text: str,
        *,
        zone: Zone | str | int | None = None,
        set_zone: bool = False,
        **options: Any,
    ) -> DateTime:
        """Parse an HTTP header date (RFC 1123, RFC 850 or asctime)."""
        return cls._from_parsed(
            rfc2822.parse_http(text),
            text,
            "HTTP",
            zone=zone,
            set_zone=set_zone,
            adjust_skipped=False,
            loc=LocaleConfig.create(**options),
        )

    @classmethod
    def from_sql(
        cls,
        text: str,
        *,
        zone: Zone | str | int | None = None,
        set_zone: bool = False,
        adjust_skipped: bool = False,
        **options: Any,
    ) -> DateTime:
        """Parse SQL text such as ``2017-05-15 09:24:15.123 -05:00``."""
        return cls._from_parsed(
            sql.parse_sql(text),
            text,
            "SQL",
            zone=zone,
            set_zone=set_zone,
            adjust_skipped=adjust_skipped,
            loc=LocaleConfig.create(**options),
        )

    @classmethod
    def _from_explained(
        cls,
        explained: tokens.ExplainedFormat,
        fmt: str,
        *,
        zone: Zone | str | int | None,
        set_zone: bool,
        adjust_skipped: bool,
        loc: LocaleConfig,
    ) -> DateTime:
        if explained.result is None:
            return cls.invalid(Reason.UNPARSABLE, explained.invalid_explanation)
        return cls._from_parsed(
            explained.to_parsed(),
            explained.input,
            f"format {fmt}",
            zone=zone,
            set_zone=set_zone,
            adjust_skipped=adjust_skipped,
            loc=loc,
        )

    @classmethod
    def from_format(
        cls,
        text: str,
        fmt: str,
        *,
        zone: Zone | str | int | None = None,
        set_zone: bool = False,
        adjust_skipped: bool = False,
        **options: Any,
    ) -> DateTime:
        """Parse ``text`` with a token format.

        Examples:
            >>> DateTime.from_format("May 25, 1982", "MMMM dd, yyyy").month
            5
        """
        loc = LocaleConfig.create(**options)
        parser = tokens.cached_parser(loc, fmt, get_settings().two_digit_cutoff_year)
        return cls._from_explained(
            parser.explain(text),
            fmt,
            zone=zone,
            set_zone=set_zone,
            adjust_skipped=adjust_skipped,
            loc=loc,
        )

    @classmethod
    @deprecated("use DateTime.from_format instead")
    def from_string(cls, text: str, fmt: str, **options: Any) -> DateTime:
        return cls.from_format(text, fmt, **options)

    @staticmethod
    def from_format_explain(text: str, fmt: str, **options: Any) -> tokens.ExplainedFormat:
        """Report how ``text`` is matched by ``fmt``, for debugging formats."""
        return tokens.TokenParser(LocaleConfig.create(**options), fmt).explain(text)

    @staticmethod
    def build_format_parser(fmt: str, **options: Any) -> tokens.TokenParser:
        """Compile ``fmt`` once for repeated use with :meth:`from_format_parser`."""
        return tokens.TokenParser(LocaleConfig.create(**options), fmt)

    @classmethod
    def from_format_parser(
        cls,
        text: str,
        parser: tokens.TokenParser,
        *,
        zone: Zone | str | int | None = None,
        set_zone: bool = False,
        adjust_skipped: bool = False,
        **options: Any,
    ) -> DateTime:
        """Parse with a parser from :meth:`build_format_parser`.

        Raises:
            InvalidArgumentError: If the locale differs from the parser's.
        """
        loc = LocaleConfig.create(**options)
        if loc.locale != parser.locale:
            raise InvalidArgumentError(
                f"from_format_parser called with a locale of {loc.locale}, "
                f"but the format parser was created for {parser.locale}"
            )
        return cls._from_explained(
            parser.explain(text),
            parser.format,
            zone=zone,
            set_zone=set_zone,
            adjust_skipped=adjust_skipped,
            loc=loc,
        )

    @staticmethod
    def expand_format(fmt: str, **options: Any) -> str:
        """Expand locale macro tokens (``D``, ``t`` ...) into explicit tokens."""
        return tokens.expand_format(fmt, LocaleConfig.create(**options))

    @staticmethod
    def is_datetime(obj: object) -> bool:
        return isinstance(obj, DateTime)

    @staticmethod
    def _extreme(dts: Sequence[DateTime], pick: Any) -> DateTime | None:
        if not dts:
            return None
        if not all(isinstance(dt, DateTime) for dt in dts):
            raise InvalidArgumentError("min and max require all arguments be DateTimes")
        for dt in dts:
            if not dt.is_valid:
                return dt
        return pick(dts, key=lambda dt: dt._ts)

    @staticmethod
    def min(*dts: DateTime) -> DateTime | None:
        """Earliest of the arguments (None if empty, the first Invalid if any)."""
        return DateTime._extreme(dts, min)

    @staticmethod
    def max(*dts: DateTime) -> DateTime | None:
        """Latest of the arguments (None if empty, the first Invalid if any)."""
        return DateTime._extreme(dts, max)

    # --- validity ---

    @property
    def is_valid(self) -> bool:
        return self._invalid is None

    @property
    def invalid_reason(self) -> str | None:
        return self._invalid.reason if self._invalid is not None else None

    @property
    def invalid_explanation(self) -> str | None:
        return self._invalid.explanation if self._invalid is not None else None

    # --- civil fields ---

    def _field(self, name: str) -> int:
        if self._invalid is not None:
            return math.nan  # type: ignore[return-value]
        return getattr(self._civil, name)

    @property
    def year(self) -> int:
        return self._field("year")

    @property
    def quarter(self) -> int:
        if self._invalid is not None:
            return math.nan  # type: ignore[return-value]
        return (self._civil.month - 1) // 3 + 1

    @property
    def month(self) -> int:
        return self._field("month")

    @property
    def day(self) -> int:
        return self._field("day")

    @property
    def hour(self) -> int:
        return self._field("hour")

    @property
    def minute(self) -> int:
        return self._field("minute")

    @property
    def second(self) -> int:
        return self._field("second")

    @property
    def millisecond(self) -> int:
        return self._field("millisecond")

    @property
    def ordinal(self) -> int:
        if self._invalid is not None:
            return math.nan  # type: ignore[return-value]
        return ordinal_from_date(self._civil.year, self._civil.month, self._civil.day)

    # --- week data ---

    def _iso_week_info(self) -> tuple[int, int, int]:
        if self._iso_week is None:
            self._iso_week = iso_week_info(self._civil.year, self._civil.month, self._civil.day)
        return self._iso_week

    def _locale_week_info(self) -> tuple[int, int, int]:
        if self._local_week is None:
            week = self._loc.get_week_settings()
            self._local_week = local_week_info(
                self._civil.year,
                self._civil.month,
                self._civil.day,
                week.first_day,
                week.minimal_days,
            )
        return self._local_week

    def _week_part(self, index: int, local: bool) -> int:
        if self._invalid is not None:
            return math.nan  # type: ignore[return-value]
        info = self._locale_week_info() if local else self._iso_week_info()
        return info[index]

    @property
    def week_year(self) -> int:
        return self._week_part(0, local=False)

    @property
    def week_number(self) -> int:
        return self._week_part(1, local=False)

    @property
    def weekday(self) -> int:
        """ISO weekday: 1 is Monday, 7 is Sunday."""
        return self._week_part(2, local=False)

    @property
    def local_week_year(self) -> int:
        return self._week_part(0, local=True)

    @property
    def local_week_number(self) -> int:
        return self._week_part(1, local=True)

    @property
    def local_weekday(self) -> int:
        """Weekday counted from the locale's first day of the week."""
        return self._week_part(2, local=True)

    @property
    def is_weekend(self) -> bool:
        if self._invalid is not None:
            return False
        return self.weekday in self._loc.get_week_settings().weekend

    @property
    def weeks_in_week_year(self) -> int:
        if self._invalid is not None:
            return math.nan  # type: ignore[return-value]
        return weeks_in_week_year(self.week_year)

    @property
    def weeks_in_local_week_year(self) -> int:
        if self._invalid is not None:
            return math.nan  # type: ignore[return-value]
        week = self._loc.get_week_settings()
        return weeks_in_week_year(self.local_week_year, week.first_day, week.minimal_days)

    # --- names ---

    @property
    def month_short(self) -> str | None:
        if self._invalid is not None:
            return None
        return self._loc.months("short")[self._civil.month - 1]

    @property
    def month_long(self) -> str | None:
        if self._invalid is not None:
            return None
        return self._loc.months("long")[self._civil.month - 1]

    @property
    def weekday_short(self) -> str | None:
        if self._invalid is not None:
            return None
        return self._loc.weekdays("short")[self.weekday - 1]

    @property
    def weekday_long(self) -> str | None:
        if self._invalid is not None:
            return None
        return self._loc.weekdays("long")[self.weekday - 1]

    # --- zone and offset ---

    @property
    def zone(self) -> Zone:
        return self._zone

    @property
    def zone_name(self) -> str | None:
        return self._zone.name if self._invalid is None else None

    @property
    def offset(self) -> int:
        """UTC offset in minutes."""
        if self._invalid is not None:
            return math.nan  # type: ignore[return-value]
        return self._offset

    @property
    def offset_name_short(self) -> str | None:
        if self._invalid is not None:
            return None
        return self._zone.offset_name(self._ts, "short")

    @property
    def offset_name_long(self) -> str | None:
        if self._invalid is not None:
            return None
        return self._zone.offset_name(self._ts, "long")

    @property
    def is_offset_fixed(self) -> bool:
        return self._invalid is None and self._zone.is_universal

    @property
    def is_in_dst(self) -> bool:
        """True when the offset is larger than at some other time of year."""
        if self._invalid is not None or self.is_offset_fixed:
            return False
        return (
            self._offset > self.set(month=1, day=1).offset
            or self._offset > self.set(month=5).offset
        )

    def get_possible_offsets(self) -> list[DateTime]:
        """Every DateTime sharing this local time in this zone, earliest first.

        Examples:
            >>> dt = DateTime(2023, 10, 29, 2, 30, zone="Europe/Berlin")
            >>> [o.offset for o in dt.get_possible_offsets()]
            [120, 60]
        """
        if self._invalid is not None or self._zone.is_fixed:
            return [self]
        instants = possible_instants(self._civil.to_local_millis(), self._zone)
        if len(instants) < 2:
            return [self]
        return [self._clone(ts) for ts in instants]

    # --- calendar info ---

    @property
    def is_in_leap_year(self) -> bool:
        return self._invalid is None and is_leap_year(self._civil.year)

    @property
    def days_in_month(self) -> int:
        if self._invalid is not None:
            return math.nan  # type: ignore[return-value]
        return days_in_month(self._civil.year, self._civil.month)

    @property
    def days_in_year(self) -> int:
        if self._invalid is not None:
            return math.nan  # type: ignore[return-value]
        return days_in_year(self._civil.year)

    # --- locale ---

    @property
    def locale(self) -> str | None:
        return self._loc.locale if self._invalid is None else None

    @property
    def numbering_system(self) -> str | None:
        return self._loc.numbering_system if self._invalid is None else None

    @property
    def output_calendar(self) -> str | None:
        return self._loc.output_calendar if self._invalid is None else None

    def resolved_locale_options(self) -> dict[str, str]:
        return self._loc.resolved_options()

    def get(self, unit: str) -> Any:
        """Read a field by name, e.g. ``dt.get("weekNumber")``."""
        return getattr(self, normalize_field(unit))

    # --- transformations ---

    def plus(self, duration: Duration | float | Mapping[str, float]) -> DateTime:
        """Add a duration with calendar semantics.

        Years, quarters, months, weeks and days move the calendar (a month
        after January 31 is the end of February); hours and smaller units
        move the instant.
        """
        if self._invalid is not None:
            return self
        dur = Duration.from_duration_like(duration)
        if not dur.is_valid:
            return DateTime.invalid(Reason.INVALID_INPUT, "cannot add an invalid Duration")
        ts, offset = add_duration(self._ts, self._offset, self._zone, self._civil, dur)
        return self._clone(ts, offset=offset)

    def minus(self, duration: Duration | float | Mapping[str, float]) -> DateTime:
        if self._invalid is not None:
            return self
        return self.plus(Duration.from_duration_like(duration).negate())

    def set(self, values: Mapping[str, Any] | None = None, /, **fields: Any) -> DateTime:
        """Replace some fields, keeping the others.

        When the day is not set and the new month is shorter, the day is
        clamped to the month's last day. Out-of-range values yield an
        Invalid DateTime.

        Raises:
            ConflictingUnitsError: When week, ordinal and gregorian fields
                are mixed.

        Examples:
            >>> DateTime(2017, 1, 31).set(month=2).day
            28
        """
        if self._invalid is not None:
            return self
        normalized = _normalize_fields({**(values or {}), **fields})
        normalized, first_day, min_days, locale_weeks = _week_definition(normalized, self._loc)
        quarter_failure = _apply_quarter(normalized)
        if quarter_failure is not None:
            return DateTime.invalid(quarter_failure.reason or "", quarter_failure.explanation)
        _check_conflicts(normalized)

        contains_gregorian = any(key in normalized for key in ("year", "month", "day"))
        if "weekday" in normalized and contains_gregorian:
            weekday = normalized.pop("weekday")
            key = "local_weekday" if locale_weeks else "weekday"
            return self.set(normalized).set({key: weekday})

        time = {name: getattr(self._civil, name) for name in _TIME_FIELDS}
        if any(key in normalized for key in _ISO_WEEK_FIELDS):
            if locale_weeks:
                current = self._locale_week_info()
            else:
                current = self._iso_week_info()
            mixed = dict(zip(_ISO_WEEK_FIELDS, current), **time)
            mixed.update(normalized)
            failure = first_failure(check_week(mixed, first_day, min_days), check_time(mixed))
            if failure is None:
                year, month, day = date_from_week_info(
                    int(mixed["week_year"]),
                    int(mixed["week_number"]),
                    int(mixed["weekday"]),
                    first_day,
                    min_days,
                )
        elif "ordinal" in normalized:
            mixed = {"year": self._civil.year, "ordinal": self.ordinal, **time}
            mixed.update(normalized)
            failure = first_failure(check_ordinal(mixed), check_time(mixed))
            if failure is None:
                year = int(mixed["year"])
                month, day = date_from_ordinal(year, int(mixed["ordinal"]))
        else:
            mixed = self._civil._asdict()
            mixed.update(normalized)
            if (
                "day" not in normalized
                and is_integer(mixed["year"])
                and integer_between(mixed["month"], 1, 12)
            ):
                mixed["day"] = min(
                    days_in_month(int(mixed["year"]), int(mixed["month"])), mixed["day"]
                )
            failure = first_failure(check_gregorian(mixed), check_time(mixed))
            if failure is None:
                year, month, day = int(mixed["year"]), int(mixed["month"]), int(mixed["day"])

        if failure is not None:
            return DateTime.invalid(failure.reason or "", failure.explanation)
        civil = CivilFields(year, month, day, *(int(mixed[name]) for name in _TIME_FIELDS))
        return self._with_civil(civil)

    def start_of(self, unit: str, *, use_locale_weeks: bool = False) -> DateTime:
        """Move to the first instant of the enclosing ``unit``.

        Weeks start on Monday, or on the locale's first day with
        ``use_locale_weeks=True``.

        Examples:
            >>> DateTime(2014, 3, 3, 5, 30).start_of("month").to_iso_date()
            '2014-03-01'
        """
        if self._invalid is not None:
            return self
        time_unit = TimeUnit.parse(unit)
        c = self._civil
        if time_unit is TimeUnit.YEAR:
            civil = CivilFields(c.year, 1, 1)
        elif time_unit is TimeUnit.QUARTER:
            civil = CivilFields(c.year, (c.month - 1) // 3 * 3 + 1, 1)
        elif time_unit is TimeUnit.MONTH:
            civil = CivilFields(c.year, c.month, 1)
        elif time_unit is TimeUnit.WEEK:
            first_day = (
                self._loc.get_week_settings().first_day
                if use_locale_weeks
                else ISO_FIRST_DAY_OF_WEEK
            )
            back = (iso_weekday(c.year, c.month, c.day) - first_day) % 7
            civil = CivilFields(*civil_from_days(days_from_civil(c.year, c.month, c.day) - back))
        elif time_unit is TimeUnit.DAY:
            civil = CivilFields(c.year, c.month, c.day)
        elif time_unit is TimeUnit.HOUR:
            civil = CivilFields(c.year, c.month, c.day, c.hour)
        elif time_unit is TimeUnit.MINUTE:
            civil = CivilFields(c.year, c.month, c.day, c.hour, c.minute)
        elif time_unit is TimeUnit.SECOND:
            civil = CivilFields(c.year, c.month, c.day, c.hour, c.minute, c.second)
        else:
            return self
        return self._with_civil(civil)

    def end_of(self, unit: str, *, use_locale_weeks: bool = False) -> DateTime:
        """Move to the last millisecond of the enclosing ``unit``."""
        if self._invalid is not None:
            return self
        plural = normalize_duration_unit(unit)
        return (
            self.plus({plural: 1})
            .start_of(unit, use_locale_weeks=use_locale_weeks)
            .minus(1)
        )

    def set_zone(
        self,
        zone: Zone | str | int | None,
        *,
        keep_local_time: bool = False,
        keep_calendar_time: bool = False,
    ) -> DateTime:
        """View the same instant in another zone.

        With ``keep_local_time`` the civil fields are kept instead and the
        instant moves.

        Examples:
            >>> dt = DateTime.utc(2017, 5, 15, 12)
            >>> dt.set_zone("America/New_York").hour
            8
            >>> dt.set_zone("America/New_York", keep_local_time=True).hour
            12
        """
        target = Zone.normalize(zone, default_zone())
        if target.equals(self._zone) or self._invalid is not None:
            return self
        if not target.is_valid:
            return DateTime.invalid(*_unsupported_zone(target))
        if keep_local_time or keep_calendar_time:
            ts, offset, _skipped = resolve_local(
                self._civil.to_local_millis(), target, target.offset_at(self._ts)
            )
            return self._clone(ts, offset=offset, zone=target)
        return self._clone(self._ts, zone=target)

    def to_utc(self, offset: int = 0, *, keep_local_time: bool = False) -> DateTime:
        """View in UTC (or a fixed ``offset`` in minutes)."""
        return self.set_zone(Zone.fixed(offset), keep_local_time=keep_local_time)

    def to_local(self) -> DateTime:
        """View in the default zone."""
        return self.set_zone(default_zone())

    def reconfigure(
        self,
        *,
        locale: str | None = None,
        numbering_system: str | None = None,
        output_calendar: str | None = None,
        week_settings: Any = None,
    ) -> DateTime:
        if self._invalid is not None:
            return self
        loc = self._loc.clone(
            locale=locale,
            numbering_system=numbering_system,
            output_calendar=output_calendar,
            week_settings=week_settings,
        )
        return self._clone(loc=loc)

    def set_locale(self, locale: str) -> DateTime:
        return self.reconfigure(locale=locale)

    # --- comparison and queries ---

    def to_millis(self) -> int:
        """Milliseconds since the Unix epoch (NaN if invalid)."""
        if self._invalid is not None:
            return math.nan  # type: ignore[return-value]
        return self._ts

    def to_seconds(self) -> float:
        if self._invalid is not None:
            return math.nan
        return self._ts / 1000

    def to_unix_integer(self) -> int:
        if self._invalid is not None:
            return math.nan  # type: ignore[return-value]
        return self._ts // 1000

    def equals(self, other: object) -> bool:
        """Same instant, same zone and same locale (Invalid never equals)."""
        if not isinstance(other, DateTime):
            return False
        if self._invalid is not None or other._invalid is not None:
            return False
        return self._ts == other._ts and self._zone.equals(other._zone) and self._loc == other._loc

    def has_same(self, other: DateTime, unit: str, *, use_locale_weeks: bool = False) -> bool:
        """True if ``other`` falls in the same ``unit`` as this DateTime.

        The comparison happens in ``other``'s zone.
        """
        if self._invalid is not None or not other.is_valid:
            return False
        adjusted = self.set_zone(other.zone, keep_local_time=True)
        start = adjusted.start_of(unit, use_locale_weeks=use_locale_weeks)
        end = adjusted.end_of(unit, use_locale_weeks=use_locale_weeks)
        return start._ts <= other._ts <= end._ts

    def diff(
        self,
        other: DateTime,
        unit: str | Sequence[str] = "milliseconds",
        *,
        conversion_accuracy: str = "casual",
    ) -> Duration:
        """Duration from ``other`` to this DateTime in the given units.

        Examples:
            >>> end = DateTime(2017, 4, 13)
            >>> end.diff(DateTime(2017, 1, 13), "months").months
            3
            >>> end.diff(DateTime(2017, 4, 12, 12), ["days", "hours"]).hours
            12
        """
        if self._invalid is not None or not other.is_valid:
            return Duration.invalid(Reason.DIFF_OF_INVALID)
        units = [unit] if isinstance(unit, str) else list(unit)
        plural_units = [normalize_duration_unit(name) for name in units]
        options = {
            "locale": self.locale,
            "numbering_system": self.numbering_system,
            "conversion_accuracy": conversion_accuracy,
        }
        return diff_datetimes(other, self, plural_units, **options)

    def diff_now(
        self, unit: str | Sequence[str] = "milliseconds", *, conversion_accuracy: str = "casual"
    ) -> Duration:
        return self.diff(DateTime.now(), unit, conversion_accuracy=conversion_accuracy)

    def until(self, other: DateTime) -> Interval:
        """Interval from this DateTime to ``other``."""
        from horologe.core.interval import Interval

        return Interval.from_datetimes(self, other)

    # --- output ---

    def to_format(self, fmt: str, *, locale: str | None = None) -> str:
        """Render with a token format (see :mod:`horologe.format.tokens`).

        Examples:
            >>> DateTime(2014, 8, 6).to_format("MMMM dd, yyyy")
            'August 06, 2014'
        """
        if self._invalid is not None:
            return "Invalid DateTime"
        return tokens.format_datetime(self, fmt, self._loc.clone(locale=locale))

    def to_iso(
        self,
        *,
        format: str = "extended",
        suppress_seconds: bool = False,
        suppress_milliseconds: bool = False,
        include_offset: bool = True,
        extended_zone: bool = False,
        precision: str = "millisecond",
    ) -> str | None:
        if self._invalid is not None:
            return None
        return iso8601.format_iso(
            self,
            format=format,
            suppress_seconds=suppress_seconds,
            suppress_milliseconds=suppress_milliseconds,
            include_offset=include_offset,
            extended_zone=extended_zone,
            precision=precision,
        )

    def to_iso_date(self, *, format: str = "extended", precision: str = "day") -> str | None:
        if self._invalid is not None:
            return None
        return iso8601.format_iso_date(self, format=format, precision=precision)

    def to_iso_week_date(self) -> str | None:
        if self._invalid is not None:
            return None
        return iso8601.format_iso_week_date(self)

    def to_iso_time(
        self,
        *,
        suppress_milliseconds: bool = False,
        suppress_seconds: bool = False,
        include_offset: bool = True,
        include_prefix: bool = False,
        extended_zone: bool = False,
        format: str = "extended",
        precision: str = "millisecond",
    ) -> str | None:
        if self._invalid is not None:
            return None
        return iso8601.format_iso_time(
            self,
            format=format,
            suppress_seconds=suppress_seconds,
            suppress_milliseconds=suppress_milliseconds,
            include_offset=include_offset,
            extended_zone=extended_zone,
            include_prefix=include_prefix,
            precision=precision,
        )

    def to_rfc2822(self) -> str | None:
        if self._invalid is not None:
            return None
        return rfc2822.format_rfc2822(self)

    def to_http(self) -> str | None:
        if self._invalid is not None:
            return None
        return rfc2822.format_http(self)

    def to_sql_date(self) -> str | None:
        if self._invalid is not None:
            return None
        return sql.format_sql_date(self)

    def to_sql_time(
        self,
        *,
        include_offset: bool = True,
        include_zone: bool = False,
        include_offset_space: bool = True,
    ) -> str | None:
        if self._invalid is not None:
            return None
        return sql.format_sql_time(
            self,
            include_offset=include_offset,
            include_zone=include_zone,
            include_offset_space=include_offset_space,
        )

    def to_sql(
        self,
        *,
        include_offset: bool = True,
        include_zone: bool = False,
        include_offset_space: bool = True,
    ) -> str | None:
        if self._invalid is not None:
            return None
        return sql.format_sql(
            self,
            include_offset=include_offset,
            include_zone=include_zone,
            include_offset_space=include_offset_space,
        )

    def to_json(self) -> str | None:
        return self.to_iso()

    def to_object(self, *, include_config: bool = False) -> dict[str, Any]:
        """Civil fields as a dict (empty if invalid)."""
        if self._invalid is not None:
            return {}
        result: dict[str, Any] = self._civil._asdict()
        if include_config:
            result.update(
                locale=self._loc.locale,
                numbering_system=self._loc.numbering_system,
                output_calendar=self._loc.output_calendar,
            )
        return result

    def to_py_datetime(self) -> _datetime.datetime | None:
        """Convert to an aware standard-library ``datetime`` (None if invalid).

        Raises:
            InvalidArgumentError: If the year is outside 1..9999.
        """
        if self._invalid is not None:
            return None
        c = self._civil
        if not 1 <= c.year <= 9999:
            raise InvalidArgumentError(f"Year {c.year} is out of range for datetime.datetime")
        fixed = _datetime.timezone(_datetime.timedelta(minutes=self._offset))
        value = _datetime.datetime(
            c.year, c.month, c.day, c.hour, c.minute, c.second, c.millisecond * 1000, fixed
        )
        if self._zone.kind in (ZoneKind.NAMED, ZoneKind.SYSTEM):
            try:
                return value.astimezone(ZoneInfo(self._zone.name))
            except ZoneInfoNotFoundError:
                logger.debug(
                    "No zoneinfo, keeping a fixed offset", extra={"zone": self._zone.name}
                )
        return value

    def to_relative(
        self,
        *,
        base: DateTime | None = None,
        style: str = "long",
        unit: str | Sequence[str] | None = None,
        round_result: bool = True,
        padding: int = 0,
        locale: str | None = None,
    ) -> str | None:
        """Phrase this DateTime relative to ``base`` (now by default).

        The largest unit with a magnitude of at least one is used.

        Examples:
            >>> now = DateTime.utc(2024, 1, 10)
            >>> now.plus({"days": 3}).to_relative(base=now)
            'in 3 days'
            >>> now.minus({"hours": 2}).to_relative(base=now)
            '2 hours ago'
        """
        if self._invalid is not None:
            return None
        start = base if base is not None else DateTime.now(zone=self._zone)
        end = self.plus(-padding if self._ts < start._ts else padding) if padding else self
        units: Sequence[str] = ("years", "months", "days", "hours", "minutes", "seconds")
        single: str | None = None
        if isinstance(unit, str):
            single = normalize_duration_unit(unit)
        elif unit is not None:
            units = [normalize_duration_unit(name) for name in unit]
        return _diff_relative(
            start,
            end,
            units=units,
            unit=single,
            round_result=round_result,
            calendary=False,
            numeric="always",
            style=style,
            locale=locale,
        )

    def to_relative_calendar(
        self,
        *,
        base: DateTime | None = None,
        unit: str | None = None,
        locale: str | None = None,
    ) -> str | None:
        """Phrase the calendar distance to ``base``: "tomorrow", "last year".

        Examples:
            >>> now = DateTime.utc(2024, 1, 10, 20)
            >>> now.plus({"hours": 5}).to_relative_calendar(base=now)
            'tomorrow'
        """
        if self._invalid is not None:
            return None
        start = base if base is not None else DateTime.now(zone=self._zone)
        return _diff_relative(
            start,
            self,
            units=("years", "months", "days"),
            unit=normalize_duration_unit(unit) if unit else None,
            round_result=True,
            calendary=True,
            numeric="auto",
            style="long",
            locale=locale,
        )

    # --- operators ---

    @overload
    def __add__(self, other: Duration) -> DateTime: ...

    @overload
    def __add__(self, other: Mapping[str, float]) -> DateTime: ...

    def __add__(self, other: object) -> DateTime:
        if isinstance(other, (Duration, Mapping)):
            return self.plus(other)
        return NotImplemented

    @overload
    def __sub__(self, other: DateTime) -> Duration: ...

    @overload
    def __sub__(self, other: Duration) -> DateTime: ...

    def __sub__(self, other: object) -> DateTime | Duration:
        if isinstance(other, DateTime):
            return self.diff(other)
        if isinstance(other, (Duration, Mapping)):
            return self.minus(other)
        return NotImplemented

    def _comparable(self, other: object) -> bool:
        if not isinstance(other, DateTime):
            return False
        return self._invalid is None and other._invalid is None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DateTime):
            return NotImplemented
        return self.equals(other)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, DateTime):
            return NotImplemented
        return self._comparable(other) and self._ts < other._ts

    def __le__(self, other: object) -> bool:
        if not isinstance(other, DateTime):
            return NotImplemented
        return self._comparable(other) and self._ts <= other._ts

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, DateTime):
            return NotImplemented
        return self._comparable(other) and self._ts > other._ts

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, DateTime):
            return NotImplemented
        return self._comparable(other) and self._ts >= other._ts

    def __hash__(self) -> int:
        if self._invalid is not None:
            return hash(("invalid", self._invalid.reason))
        return hash((self._ts, self._zone, self._loc))

    def __repr__(self) -> str:
        if self._invalid is not None:
            return f"DateTime.invalid({self.invalid_reason!r})"
        return f"DateTime({self.to_iso()!r}, zone={self._zone.name!r})"

    def __str__(self) -> str:
        return self.to_iso() or "Invalid DateTime"

    def __format__(self, format_spec: str) -> str:
        if not format_spec:
            return str(self)
        return self.to_format(format_spec)


def _diff_relative(
    start: DateTime,
    end: DateTime,
    *,
    units: Sequence[str],
    unit: str | None,
    round_result: bool,
    calendary: bool,
    numeric: str,
    style: str,
    locale: str | None,
) -> str:
    loc = end._loc.clone(locale=locale)

    def phrase(count: float, plural: str) -> str:
        # truncate toward zero, keeping the sign of zero
        if round_result or calendary:
            count = math.copysign(math.trunc(count), count)
        else:
            count = math.copysign(math.trunc(count * 100) / 100, count)
        return loc.service.relative_time(loc.locale, count, plural[:-1], numeric, style)

    def differ(plural: str) -> float:
        if calendary:
            if end.has_same(start, plural):
                return 0
            return end.start_of(plural).diff(start.start_of(plural), plural).get(plural)
        return end.diff(start, plural).get(plural)

    if unit is not None:
        return phrase(differ(unit), unit)
    for plural in units:
        count = differ(plural)
        if abs(count) >= 1:
            return phrase(count, plural)
    return phrase(-0.0 if start > end else 0.0, units[-1])


__all__ = ["DateTime"]
