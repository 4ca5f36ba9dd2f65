"""Tests for terminal capability helpers."""

import locale
import sys
from types import SimpleNamespace

import pytest

from src.utils.terminal import supports_color, supports_utf8


@pytest.fixture(autouse=True)
def clear_terminal_caches(monkeypatch: pytest.MonkeyPatch) -> None:
    """Clear the capability caches and NO_COLOR before each test."""
    supports_utf8.cache_clear()
    supports_color.cache_clear()
    monkeypatch.delenv("NO_COLOR", raising=False)
    yield
    supports_utf8.cache_clear()
    supports_color.cache_clear()


def _fake_stdout(*, encoding: str | None, isatty: bool) -> SimpleNamespace:
    """Create a fake stdout object with specified encoding and isatty behavior."""
    return SimpleNamespace(encoding=encoding, isatty=lambda: isatty)


def test_supports_utf8_true_with_stdout_encoding(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """UTF-8 standard output supports the banner characters."""
    monkeypatch.setattr(sys, "stdout", _fake_stdout(encoding="UTF-8", isatty=True))

    assert supports_utf8()


def test_supports_utf8_uses_locale_fallback(monkeypatch: pytest.MonkeyPatch) -> None:
    """Without a stream encoding the locale encoding decides."""
    monkeypatch.setattr(sys, "stdout", _fake_stdout(encoding=None, isatty=True))
    monkeypatch.setattr(locale, "getpreferredencoding", lambda _: "latin-1")

    assert not supports_utf8()


def test_supports_color_false_when_not_tty(monkeypatch: pytest.MonkeyPatch) -> None:
    """Redirected output is never colored."""
    monkeypatch.setattr(sys, "stdout", _fake_stdout(encoding="UTF-8", isatty=False))
    monkeypatch.setattr(sys, "platform", "linux")

    assert not supports_color()


def test_supports_color_true_on_linux_tty(monkeypatch: pytest.MonkeyPatch) -> None:
    """Interactive POSIX terminals are colored."""
    monkeypatch.setattr(sys, "stdout", _fake_stdout(encoding="UTF-8", isatty=True))
    monkeypatch.setattr(sys, "platform", "linux")

    assert supports_color()


def test_supports_color_honors_no_color(monkeypatch: pytest.MonkeyPatch) -> None:
    """NO_COLOR disables colors even on a terminal."""
    monkeypatch.setattr(sys, "stdout", _fake_stdout(encoding="UTF-8", isatty=True))
    monkeypatch.setattr(sys, "platform", "linux")
    monkeypatch.setenv("NO_COLOR", "1")

    assert not supports_color()


def test_supports_color_windows_terminal(monkeypatch: pytest.MonkeyPatch) -> None:
    """Windows Terminal sessions are colored."""
    monkeypatch.setattr(sys, "stdout", _fake_stdout(encoding="UTF-8", isatty=True))
    monkeypatch.setattr(sys, "platform", "win32")
    monkeypatch.setenv("WT_SESSION", "1")

    assert supports_color()
