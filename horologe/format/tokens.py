"""Token-based formatting and parsing (``"yyyy-MM-dd HH:mm"`` style).

A format string is split into runs of identical characters; each run is a
token such as ``yyyy`` or ``MM``. Text inside single quotes is literal
(``''`` is a literal quote), as are runs of whitespace and any character
that is not a known token.

Formatting tokens:

    ====================  ==============================================
    S, SSS                millisecond, unpadded / 3 digits
    u, uu, uuu            fraction of second: 3 / 2 / 1 digits
    s, ss, m, mm          second, minute
    h, hh / H, HH         12-hour / 24-hour hour
    a                     meridiem
    d, dd                 day of month
    E, EEE, EEEE, EEEEE   weekday number / short / long / narrow name
    c, ccc, cccc, ccccc   stand-alone weekday
    M, MM, MMM .. MMMMM   month number / padded / short / long / narrow
    L, LL, LLL .. LLLLL   stand-alone month
    y, yy, yyyy, yyyyyy   year: as is / two digits / 4 / 6 digits
    G, GG, GGGGG          era short / long / narrow
    kk, kkkk              ISO week year
    W, WW                 ISO week number
    n, nn, ii, iiii       locale week number / locale week year
    o, ooo                ordinal day
    q, qq                 quarter
    Z .. ZZZZZ            offset narrow / short / techie / name / long name
    z                     zone name
    X, x                  Unix seconds / milliseconds
    ====================  ==============================================

Macro tokens (``D``, ``DD``, ``t``, ``FFFF`` ...) are expanded through the
locale service before formatting or parsing.
"""

from __future__ import annotations

import functools
import logging
import math
import re
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, NamedTuple

from horologe._internal.calendar import untruncate_year
from horologe.arithmetic.calendar_ops import civil_at
from horologe.config.settings import get_settings
from horologe.errors import ConflictingUnitsError
from horologe.format.parsed import ParsedFields, millis_from_fraction, signed_offset
from horologe.units.validity import Reason
from horologe.units.zone import Zone, format_offset_minutes

if TYPE_CHECKING:
    from horologe.core.datetime import DateTime
    from horologe.core.duration import Duration
    from horologe.core.locale import LocaleConfig

logger = logging.getLogger(__name__)

MACRO_TOKENS = frozenset(
    {
        "D", "DD", "DDD", "DDDD",
        "t", "tt", "ttt", "tttt",
        "T", "TT", "TTT", "TTTT",
        "f", "ff", "fff", "ffff",
        "F", "FF", "FFF", "FFFF",
    }
)

_WHITESPACE = re.compile(r"\s+")


class Token(NamedTuple):
    """One piece of a format string."""

    value: str
    literal: bool


def tokenize(fmt: str) -> list[Token]:
    """Split a format string into tokens.

    Examples:
        >>> [token.value for token in tokenize("yyyy 'at' HH")]
        ['yyyy', ' ', 'at', ' ', 'HH']
    """
    tokens: list[Token] = []
    current = ""
    run_char: str | None = None
    quoted = False

    for char in fmt:
        if char == "'":
            if current or quoted:
                # '' inside or outside quotes is one literal quote
                tokens.append(
                    Token(current or "'", quoted or bool(_WHITESPACE.fullmatch(current)))
                )
            current = ""
            run_char = None
            quoted = not quoted
        elif quoted:
            current += char
        elif char == run_char:
            current += char
        else:
            if current:
                tokens.append(Token(current, bool(_WHITESPACE.fullmatch(current))))
            current = char
            run_char = char

    if current:
        tokens.append(Token(current, quoted or bool(_WHITESPACE.fullmatch(current))))
    return tokens


def expand_macro_tokens(tokens: list[Token], loc: LocaleConfig) -> list[Token]:
    """Replace macro tokens by the locale's equivalent token sequence."""
    expanded: list[Token] = []
    for token in tokens:
        if not token.literal and token.value in MACRO_TOKENS:
            macro = loc.service.macro_format(loc.locale, token.value)
            if macro is not None:
                expanded.extend(tokenize(macro))
                continue
        expanded.append(token)
    return expanded


def expand_format(fmt: str, loc: LocaleConfig) -> str:
    """Expand macro tokens in ``fmt`` into an equivalent explicit format.

    Examples:
        >>> expand_format("D", LocaleConfig.english())
        'M/d/yyyy'
    """
    parts = []
    for token in expand_macro_tokens(tokenize(fmt), loc):
        if token.literal and not _WHITESPACE.fullmatch(token.value):
            parts.append("'" + token.value.replace("'", "''") + "'")
        else:
            parts.append(token.value)
    return "".join(parts)


# --- formatting ---

_Renderer = Callable[["DateTime", "LocaleConfig", bool], str]


def _num(attr: str, digits: int = 0) -> _Renderer:
    return lambda dt, loc, allow_z: loc.number(getattr(dt, attr), digits)


def _month_name(width: str, standalone: bool) -> _Renderer:
    return lambda dt, loc, allow_z: loc.months(width, standalone)[dt.month - 1]


def _weekday_name(width: str, standalone: bool) -> _Renderer:
    return lambda dt, loc, allow_z: loc.weekdays(width, standalone)[dt.weekday - 1]


def _era(width: str) -> _Renderer:
    return lambda dt, loc, allow_z: loc.eras(width)[0 if dt.year < 0 else 1]


def _offset(style: str) -> _Renderer:
    def render(dt: DateTime, loc: LocaleConfig, allow_z: bool) -> str:
        if allow_z and dt.is_offset_fixed and dt.offset == 0:
            return "Z"
        return format_offset_minutes(dt.offset, style)

    return render


def _two_digit(attr: str) -> _Renderer:
    def render(dt: DateTime, loc: LocaleConfig, allow_z: bool) -> str:
        return loc.number(int(str(getattr(dt, attr))[-2:]), 2)

    return render


def _hour12(digits: int) -> _Renderer:
    def render(dt: DateTime, loc: LocaleConfig, allow_z: bool) -> str:
        hour = dt.hour % 12
        return loc.number(12 if hour == 0 else hour, digits)

    return render


_DATETIME_RENDERERS: dict[str, _Renderer] = {
    "S": _num("millisecond"),
    "SSS": _num("millisecond", 3),
    "u": _num("millisecond", 3),
    "uu": lambda dt, loc, allow_z: loc.number(dt.millisecond // 10, 2),
    "uuu": lambda dt, loc, allow_z: loc.number(dt.millisecond // 100, 1),
    "s": _num("second"),
    "ss": _num("second", 2),
    "m": _num("minute"),
    "mm": _num("minute", 2),
    "h": _hour12(0),
    "hh": _hour12(2),
    "H": _num("hour"),
    "HH": _num("hour", 2),
    "Z": _offset("narrow"),
    "ZZ": _offset("short"),
    "ZZZ": _offset("techie"),
    "ZZZZ": lambda dt, loc, allow_z: dt.offset_name_short or "",
    "ZZZZZ": lambda dt, loc, allow_z: dt.offset_name_long or "",
    "z": lambda dt, loc, allow_z: dt.zone_name or "",
    "a": lambda dt, loc, allow_z: loc.meridiems()[0 if dt.hour < 12 else 1],
    "d": _num("day"),
    "dd": _num("day", 2),
    "c": _num("weekday"),
    "ccc": _weekday_name("short", True),
    "cccc": _weekday_name("long", True),
    "ccccc": _weekday_name("narrow", True),
    "E": _num("weekday"),
    "EEE": _weekday_name("short", False),
    "EEEE": _weekday_name("long", False),
    "EEEEE": _weekday_name("narrow", False),
    "L": _num("month"),
    "LL": _num("month", 2),
    "LLL": _month_name("short", True),
    "LLLL": _month_name("long", True),
    "LLLLL": _month_name("narrow", True),
    "M": _num("month"),
    "MM": _num("month", 2),
    "MMM": _month_name("short", False),
    "MMMM": _month_name("long", False),
    "MMMMM": _month_name("narrow", False),
    "y": _num("year"),
    "yy": _two_digit("year"),
    "yyyy": _num("year", 4),
    "yyyyyy": _num("year", 6),
    "G": _era("short"),
    "GG": _era("long"),
    "GGGGG": _era("narrow"),
    "kk": _two_digit("week_year"),
    "kkkk": _num("week_year", 4),
    "W": _num("week_number"),
    "WW": _num("week_number", 2),
    "n": _num("local_week_number"),
    "nn": _num("local_week_number", 2),
    "ii": _two_digit("local_week_year"),
    "iiii": _num("local_week_year", 4),
    "o": _num("ordinal"),
    "ooo": _num("ordinal", 3),
    "q": _num("quarter"),
    "qq": _num("quarter", 2),
    "X": lambda dt, loc, allow_z: loc.number(math.floor(dt.to_millis() / 1000)),
    "x": lambda dt, loc, allow_z: loc.number(dt.to_millis()),
}


def format_datetime(
    dt: DateTime, fmt: str, loc: LocaleConfig, *, allow_z: bool = False
) -> str:
    """Render a valid DateTime with a token format.

    Args:
        dt: The value to render.
        fmt: Token format string.
        loc: Locale used for names, numbers and macros.
        allow_z: Render a zero offset of a fixed zone as ``Z``.
    """
    parts = []
    for token in expand_macro_tokens(tokenize(fmt), loc):
        renderer = None if token.literal else _DATETIME_RENDERERS.get(token.value)
        parts.append(token.value if renderer is None else renderer(dt, loc, allow_z))
    return "".join(parts)


_DURATION_TOKEN_UNITS = {
    "S": "milliseconds",
    "s": "seconds",
    "m": "minutes",
    "h": "hours",
    "d": "days",
    "w": "weeks",
    "M": "months",
    "y": "years",
}


def _pad(value: float, digits: int) -> str:
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    text = str(abs(value)).rjust(digits, "0")
    return "-" + text if value < 0 else text


def format_duration(duration: Duration, fmt: str, *, floor: bool = True) -> str:
    """Render a Duration with unit tokens; the duration is first shifted to
    exactly the units the format mentions.

    Args:
        duration: A valid Duration.
        fmt: Format using ``y M w d h m s S``; repetition sets the padding.
        floor: Round each unit down to a whole number.
    """
    tokens = tokenize(fmt)
    units = [
        _DURATION_TOKEN_UNITS[token.value[0]]
        for token in tokens
        if not token.literal and token.value[0] in _DURATION_TOKEN_UNITS
    ]
    collapsed = duration.shift_to(*units) if units else duration
    parts = []
    for token in tokens:
        unit = None if token.literal else _DURATION_TOKEN_UNITS.get(token.value[0])
        if unit is None:
            parts.append(token.value)
            continue
        value = collapsed.get(unit)
        if floor:
            value = math.floor(value)
        parts.append(_pad(value, len(token.value)))
    return "".join(parts)


# --- parsing ---


@dataclass(frozen=True)
class _Unit:
    """How one token is matched and decoded."""

    token: Token
    regex: str
    decode: Callable[[tuple[str | None, ...]], Any] | None = None
    groups: int = 0

    @property
    def literal(self) -> bool:
        return self.decode is None


def _alternatives(names: tuple[str, ...] | list[str]) -> str:
    ordered = sorted(names, key=len, reverse=True)
    return "(?:" + "|".join(re.escape(name) for name in ordered) + ")"


def _index_of(names: tuple[str, ...], start: int) -> Callable[[tuple[str | None, ...]], int]:
    lowered = [name.lower() for name in names]
    return lambda groups: lowered.index((groups[0] or "").lower()) + start


def _as_int(groups: tuple[str | None, ...]) -> int:
    return int(groups[0] or 0)


def _literal_regex(text: str) -> str:
    # a space also matches a no-break space
    return "".join("[ \u00a0]" if char == " " else re.escape(char) for char in text)


def _unit_for_token(token: Token, loc: LocaleConfig, cutoff: int) -> _Unit:
    if token.literal:
        return _Unit(token, _literal_regex(token.value))

    def integer(regex: str) -> _Unit:
        return _Unit(token, regex, _as_int)

    def two_digit_year(groups: tuple[str | None, ...]) -> int:
        return untruncate_year(int(groups[0] or 0), cutoff)

    def one_of(names: tuple[str, ...], start: int) -> _Unit:
        return _Unit(token, _alternatives(names), _index_of(names, start))

    value = token.value
    if value in ("y",):
        return integer(r"\d{1,6}")
    if value in ("yy", "kk", "ii"):
        return _Unit(token, r"\d{2,4}", two_digit_year)
    if value in ("yyyy", "kkkk", "iiii"):
        return integer(r"\d{4}")
    if value == "yyyyy":
        return integer(r"\d{4,6}")
    if value == "yyyyyy":
        return integer(r"\d{6}")
    if value in ("M", "L", "d", "h", "H", "m", "s", "W", "n", "q"):
        return integer(r"\d{1,2}")
    if value in ("MM", "LL", "dd", "hh", "HH", "mm", "ss", "WW", "nn", "qq"):
        return integer(r"\d{2}")
    if value == "MMM":
        return one_of(loc.months("short", False), 1)
    if value == "MMMM":
        return one_of(loc.months("long", False), 1)
    if value == "LLL":
        return one_of(loc.months("short", True), 1)
    if value == "LLLL":
        return one_of(loc.months("long", True), 1)
    if value == "o":
        return integer(r"\d{1,3}")
    if value in ("ooo", "SSS"):
        return integer(r"\d{3}")
    if value == "S":
        return integer(r"\d{1,3}")
    if value == "u":
        return _Unit(token, r"\d{1,9}", lambda groups: millis_from_fraction(groups[0]))
    if value == "uu":
        return _Unit(token, r"\d{1,2}", lambda groups: millis_from_fraction(groups[0]))
    if value == "uuu":
        return _Unit(token, r"\d", lambda groups: millis_from_fraction(groups[0]))
    if value in ("E", "c"):
        return integer(r"\d")
    if value in ("EEE", "ccc"):
        return one_of(loc.weekdays("short", value == "ccc"), 1)
    if value in ("EEEE", "cccc"):
        return one_of(loc.weekdays("long", value == "cccc"), 1)
    if value == "a":
        return one_of(loc.meridiems(), 0)
    if value == "G":
        return one_of(loc.eras("short"), 0)
    if value == "GG":
        return one_of(loc.eras("long"), 0)
    if value in ("Z", "ZZ"):
        return _Unit(
            token,
            r"([+-]\d{1,2})(?::(\d{2}))?",
            lambda groups: signed_offset(groups[1] or "", groups[2]),
            groups=2,
        )
    if value == "ZZZ":
        return _Unit(
            token,
            r"([+-]\d{1,2})(\d{2})?",
            lambda groups: signed_offset(groups[1] or "", groups[2]),
            groups=2,
        )
    if value == "z":
        return _Unit(token, r"[a-z_+\-/0-9]{1,256}?", lambda groups: groups[0])
    if value == "X":
        return _Unit(token, r"-?\d+(?:\.\d{1,3})?", lambda groups: float(groups[0] or 0))
    if value == "x":
        return integer(r"-?\d+")
    return _Unit(token, _literal_regex(value))


_FIELD_FOR_KEY = {
    "S": "millisecond",
    "s": "second",
    "m": "minute",
    "h": "hour",
    "H": "hour",
    "d": "day",
    "o": "ordinal",
    "L": "month",
    "M": "month",
    "y": "year",
    "E": "weekday",
    "c": "weekday",
    "W": "week_number",
    "k": "week_year",
    "n": "local_week_number",
    "i": "local_week_year",
}


def _fields_from_matches(
    matches: dict[str, Any],
) -> tuple[dict[str, Any], Zone | None, int | None]:
    matches = dict(matches)
    zone: Zone | None = None
    specific_offset: int | None = None
    if "z" in matches:
        zone = Zone.named(matches["z"])
    if "Z" in matches:
        if zone is None:
            zone = Zone.fixed(matches["Z"])
        specific_offset = matches["Z"]
    if "q" in matches and "M" not in matches and "L" not in matches:
        matches["M"] = (matches["q"] - 1) * 3 + 1
    if "h" in matches:
        if matches["h"] < 12 and matches.get("a") == 1:
            matches["h"] += 12
        elif matches["h"] == 12 and matches.get("a") == 0:
            matches["h"] = 0
    if matches.get("G") == 0 and matches.get("y"):
        matches["y"] = -matches["y"]
    if "u" in matches:
        matches["S"] = matches["u"]

    if "X" in matches or "x" in matches:
        ts = round(matches["X"] * 1000) if "X" in matches else matches["x"]
        if zone is None:
            zone = Zone.utc()
        offset = zone.offset_at(ts) if zone.is_valid else 0
        return civil_at(ts, offset)._asdict(), zone, offset

    fields = {
        _FIELD_FOR_KEY[key]: value for key, value in matches.items() if key in _FIELD_FOR_KEY
    }
    return fields, zone, specific_offset


@dataclass(frozen=True)
class ExplainedFormat:
    """Everything a parser did with one input, for debugging formats.

    Attributes:
        input: The parsed text.
        tokens: Tokens after macro expansion.
        regex: The combined regular expression.
        raw_matches: Captured groups, or None if the regex did not match.
        matches: Decoded value per token letter.
        result: DateTime fields derived from the matches.
        zone: Zone found in the text.
        specific_offset: Offset found alongside a named zone.
        invalid_reason: ``"unparsable"`` when the text did not match.
        invalid_explanation: Names the input, format and mismatch position.
    """

    input: str
    tokens: tuple[Token, ...]
    regex: str
    raw_matches: tuple[str | None, ...] | None = None
    matches: dict[str, Any] = field(default_factory=dict)
    result: dict[str, Any] | None = None
    zone: Zone | None = None
    specific_offset: int | None = None
    invalid_reason: str | None = None
    invalid_explanation: str | None = None

    def to_parsed(self) -> ParsedFields | None:
        if self.result is None:
            return None
        return ParsedFields(self.result, self.zone, self.specific_offset)


class TokenParser:
    """A compiled format, reusable across inputs.

    Examples:
        >>> parser = TokenParser(LocaleConfig.english(), "yyyy-MM-dd")
        >>> parser.explain("2024-01-15").result
        {'year': 2024, 'month': 1, 'day': 15}
    """

    def __init__(self, loc: LocaleConfig, fmt: str) -> None:
        self.loc = loc
        self.format = fmt
        self.tokens = tuple(expand_macro_tokens(tokenize(fmt), loc))
        cutoff = get_settings().two_digit_cutoff_year
        self.units = tuple(_unit_for_token(token, loc, cutoff) for token in self.tokens)
        self.regex = "".join(f"({unit.regex})" for unit in self.units)
        self._pattern = re.compile(self.regex, re.IGNORECASE)
        self._unit_patterns = tuple(re.compile(unit.regex, re.IGNORECASE) for unit in self.units)
        logger.debug("Compiled format parser for %r: %s", fmt, self.regex)

    @property
    def locale(self) -> str:
        return self.loc.locale

    def mismatch_position(self, text: str) -> int:
        """Index of the first character no token could consume."""
        position = 0
        for pattern in self._unit_patterns:
            match = pattern.match(text, position)
            if match is None:
                return position
            position = match.end()
        return position

    def explain(self, text: str) -> ExplainedFormat:
        """Match ``text`` and report every intermediate step.

        Raises:
            ConflictingUnitsError: If the format mixes a meridiem with a
                24-hour hour token.
        """
        match = self._pattern.fullmatch(text)
        if match is None:
            position = self.mismatch_position(text)
            return ExplainedFormat(
                input=text,
                tokens=self.tokens,
                regex=self.regex,
                invalid_reason=Reason.UNPARSABLE.value,
                invalid_explanation=(
                    f'the input "{text}" can\'t be parsed as format {self.format} '
                    f"(mismatch at position {position})"
                ),
            )

        groups = match.groups()
        matches: dict[str, Any] = {}
        index = 0
        for unit in self.units:
            span = groups[index : index + unit.groups + 1]
            if not unit.literal and unit.decode is not None:
                matches[unit.token.value[0]] = unit.decode(span)
            index += unit.groups + 1

        if "a" in matches and "H" in matches:
            raise ConflictingUnitsError("Can't include meridiem when specifying 24-hour format")

        result, zone, specific_offset = _fields_from_matches(matches)
        return ExplainedFormat(
            input=text,
            tokens=self.tokens,
            regex=self.regex,
            raw_matches=groups,
            matches=matches,
            result=result,
            zone=zone,
            specific_offset=specific_offset,
        )


@functools.lru_cache(maxsize=128)
def cached_parser(loc: LocaleConfig, fmt: str, cutoff: int) -> TokenParser:
    """Shared compiled parser per (locale, format, two-digit cutoff)."""
    return TokenParser(loc, fmt)


__all__ = [
    "MACRO_TOKENS",
    "Token",
    "tokenize",
    "expand_macro_tokens",
    "expand_format",
    "format_datetime",
    "format_duration",
    "ExplainedFormat",
    "TokenParser",
    "cached_parser",
]
