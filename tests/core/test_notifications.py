"""Tests for the notification field helpers."""

import pytest

from src.core.notifications import (
    DEFAULT_MOTIVATION,
    as_text,
    is_missing,
    loads_json,
    normalize_targets,
    notification_value,
    parse_object_id,
)


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("5f1b2c3d4e5f6a7b8c9d0e1f", "5f1b2c3d4e5f6a7b8c9d0e1f"),
        ("5F1B2C3D4E5F6A7B8C9D0E1F", "5f1b2c3d4e5f6a7b8c9d0e1f"),
        ("not-an-id", None),
        ("5f1b2c3d4e5f6a7b8c9d0e1", None),
        ("5f1b2c3d4e5f6a7b8c9d0e1f0", None),
        ("zz1b2c3d4e5f6a7b8c9d0e1f", None),
        ("", None),
        (None, None),
        (12345, None),
    ],
)
def test_parse_object_id(value, expected) -> None:
    """Only 24 character hexadecimal strings are accepted, lower-cased."""
    assert parse_object_id(value) == expected


def test_normalize_targets_wraps_scalars() -> None:
    """A scalar target is treated as a one-element list."""
    assert normalize_targets("http://example.org/a") == ["http://example.org/a"]
    assert normalize_targets(None) == [None]


def test_normalize_targets_keeps_sequence_order() -> None:
    """List and tuple targets keep their order."""
    assert normalize_targets(["b", "a"]) == ["b", "a"]
    assert normalize_targets(("b", "a")) == ["b", "a"]


def test_is_missing() -> None:
    """None and empty containers are missing; falsy scalars are not."""
    assert is_missing(None)
    assert is_missing("")
    assert is_missing([])
    assert is_missing({})
    assert not is_missing(0)
    assert not is_missing(False)
    assert not is_missing("x")


def test_notification_value_defaults_motivation() -> None:
    """Missing or empty motivations fall back to the default."""
    assert notification_value(None, "motivation") == DEFAULT_MOTIVATION
    assert notification_value("", "motivation") == DEFAULT_MOTIVATION
    assert notification_value("painting", "motivation") == "painting"


def test_notification_value_passes_other_fields_through() -> None:
    """Fields other than motivation never get a default."""
    assert notification_value(None, "source") is None
    assert notification_value("", "updated") == ""


def test_as_text() -> None:
    """Strings pass through and other JSON values are encoded."""
    assert as_text("2019-01-01") == "2019-01-01"
    assert as_text(3) == "3"
    assert as_text({"a": 1}) == '{"a": 1}'


def test_loads_json_parses_standard_json() -> None:
    """Standard JSON text and bytes are parsed."""
    assert loads_json(b'{"ranges": [{"@id": "r1"}], "n": 1.5}') == {
        "ranges": [{"@id": "r1"}],
        "n": 1.5,
    }


@pytest.mark.parametrize(
    "text", ["NaN", '{"x": Infinity}', "[-Infinity]", "[1e999]", "{", b"\xff"]
)
def test_loads_json_rejects_non_standard_json(text) -> None:
    """Non-finite numbers, malformed text and undecodable bytes are refused."""
    with pytest.raises(ValueError):
        loads_json(text)
