"""Helpers for reading loosely typed notification fields."""

import json
import math
import re
from typing import Any

__all__ = [
    "DEFAULT_MOTIVATION",
    "RANGE_TYPE",
    "as_text",
    "is_missing",
    "loads_json",
    "normalize_targets",
    "notification_value",
    "parse_object_id",
]

DEFAULT_MOTIVATION = "iiifsupplement"
RANGE_TYPE = "sc:Range"

_OBJECT_ID_PATTERN = re.compile(r"^[0-9a-fA-F]{24}$")


def parse_object_id(value: Any) -> str | None:
    """Parse a public notification identifier.

    Args:
        value (Any): Raw identifier, usually a URL path segment.

    Returns:
        str | None: The lower-cased identifier, or None when `value` is not a
            24 character hexadecimal string.
    """
    if not isinstance(value, str):
        return None
    value = value.strip()
    if not _OBJECT_ID_PATTERN.fullmatch(value):
        return None
    return value.lower()


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def _parse_finite_float(text: str) -> float:
    value = float(text)
    if not math.isfinite(value):
        raise ValueError(f"{text} does not fit a finite number")
    return value


def loads_json(data: str | bytes) -> Any:
    """Parse JSON text strictly.

    `NaN`, `Infinity` and numbers overflowing to infinity are refused, so every
    parsed value can be serialized back to standard JSON.

    Raises:
        ValueError: If `data` is not valid JSON, including undecodable bytes.
    """
    return json.loads(
        data, parse_constant=_reject_constant, parse_float=_parse_finite_float
    )


def normalize_targets(target: Any) -> list[Any]:
    """Coerce a notification `target` into a list of target values.

    A scalar (including None) becomes a single-element list so that a missing
    target is still visited and reported once.
    """
    if isinstance(target, list | tuple):
        return list(target)
    return [target]


def is_missing(value: Any) -> bool:
    """Return True for None and for empty strings, lists and objects."""
    if value is None:
        return True
    if isinstance(value, str | list | tuple | dict):
        return len(value) == 0
    return False


def notification_value(value: Any, value_type: str) -> Any:
    """Apply presentation defaults to a stored notification field.

    Only `motivation` has a default; every other field passes through.
    """
    if value_type == "motivation" and is_missing(value):
        return DEFAULT_MOTIVATION
    return value


def as_text(value: Any) -> str:
    """Render a stored field as listing text; non-strings are JSON encoded."""
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False)
