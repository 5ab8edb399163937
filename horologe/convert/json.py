"""JSON serialization and deserialization for horologe values.

This module provides functions for converting DateTime, Duration and
Interval values to and from JSON-serializable dictionaries.

Functions:
    to_json: Convert a value to a JSON-serializable dict.
    from_json: Create a value from a JSON dict.

Every dict carries a ``_type`` tag for polymorphic deserialization:

    {"_type": "DateTime", "value": "2024-01-15T14:30:00.000-05:00",
     "zone": "America/New_York", "locale": "en-US"}
    {"_type": "Duration", "value": "P1DT2H", "values": {"days": 1, "hours": 2}}
    {"_type": "Interval", "start": {...}, "end": {...}}

Invalid values round-trip as ``{"_type": ..., "invalid": reason,
"explanation": ...}``.

Examples:
    >>> from horologe import DateTime
    >>> dt = DateTime(2024, 1, 15, 14, 30, zone="Europe/Paris")
    >>> data = to_json(dt)
    >>> data["zone"]
    'Europe/Paris'
    >>> from_json(data) == dt
    True
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Union

from horologe.errors import InvalidArgumentError

if TYPE_CHECKING:
    from horologe.core.datetime import DateTime
    from horologe.core.duration import Duration
    from horologe.core.interval import Interval

JsonValue = Union["DateTime", "Duration", "Interval"]


def _invalid_payload(type_name: str, value: Any) -> dict[str, Any]:
    return {
        "_type": type_name,
        "invalid": value.invalid_reason,
        "explanation": value.invalid_explanation,
    }


def to_json(value: JsonValue) -> dict[str, Any]:
    """Convert a value to a JSON-serializable dictionary.

    Args:
        value: A DateTime, Duration or Interval.

    Returns:
        A dictionary with a ``_type`` tag.

    Raises:
        TypeError: If value is not a supported type.

    Examples:
        >>> from horologe import Duration
        >>> to_json(Duration.from_object({"hours": 2}))
        {'_type': 'Duration', 'value': 'PT2H', 'values': {'hours': 2}}
    """
    from horologe.core.datetime import DateTime
    from horologe.core.duration import Duration
    from horologe.core.interval import Interval

    if isinstance(value, DateTime):
        if not value.is_valid:
            return _invalid_payload("DateTime", value)
        return {
            "_type": "DateTime",
            "value": value.to_iso(),
            "zone": value.zone_name,
            "locale": value.locale,
        }
    if isinstance(value, Duration):
        if not value.is_valid:
            return _invalid_payload("Duration", value)
        return {
            "_type": "Duration",
            "value": value.to_iso(),
            "values": value.to_object(),
        }
    if isinstance(value, Interval):
        if not value.is_valid:
            return _invalid_payload("Interval", value)
        return {
            "_type": "Interval",
            "start": to_json(value.start),
            "end": to_json(value.end),
        }
    raise TypeError(f"expected DateTime, Duration or Interval, got {type(value).__name__}")


def _require(data: dict[str, Any], key: str, type_name: str) -> Any:
    value = data.get(key)
    if value is None:
        raise InvalidArgumentError(f"missing {key!r} field for {type_name}")
    return value


def from_json(data: dict[str, Any]) -> JsonValue:
    """Create a value from a dictionary produced by :func:`to_json`.

    Raises:
        InvalidArgumentError: If required fields are missing.
        TypeError: If ``_type`` is not a recognized type.
    """
    from horologe.core.datetime import DateTime
    from horologe.core.duration import Duration
    from horologe.core.interval import Interval

    if not isinstance(data, dict):
        raise InvalidArgumentError(f"expected dict, got {type(data).__name__}")

    type_name = data.get("_type")
    if not type_name:
        raise InvalidArgumentError("missing '_type' field in JSON data")

    factories = {"DateTime": DateTime, "Duration": Duration, "Interval": Interval}
    if type_name not in factories:
        raise TypeError(f"unknown type: {type_name!r}")
    if data.get("invalid"):
        return factories[type_name].invalid(data["invalid"], data.get("explanation"))

    if type_name == "DateTime":
        text = _require(data, "value", type_name)
        return DateTime.from_iso(text, zone=data.get("zone"), locale=data.get("locale"))

    if type_name == "Duration":
        values = data.get("values")
        if values is not None:
            return Duration.from_object(values)
        return Duration.from_iso(_require(data, "value", type_name))

    start = from_json(_require(data, "start", type_name))
    end = from_json(_require(data, "end", type_name))
    return Interval.from_datetimes(start, end)


__all__ = ["to_json", "from_json"]
