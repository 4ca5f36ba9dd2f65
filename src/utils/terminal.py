"""Terminal capability detection."""

import locale
import os
import sys
from functools import lru_cache

import colorama


@lru_cache(maxsize=1)
def supports_utf8() -> bool:
    """Check if standard output can encode the box-drawing banner characters.

    Returns:
        bool: True if the output encoding is a UTF variant
    """
    encoding = sys.stdout.encoding or locale.getpreferredencoding(False)
    return encoding.lower().startswith("utf")


def _windows_vt_enabled() -> bool:
    try:
        import winreg
    except ImportError:
        return False

    try:
        reg_key = winreg.OpenKey(winreg.HKEY_CURRENT_USER, "Console")
        value, _ = winreg.QueryValueEx(reg_key, "VirtualTerminalLevel")
    except FileNotFoundError:
        return False
    return value == 1


@lru_cache(maxsize=1)
def supports_color() -> bool:
    """Check if the console handler should emit ANSI color codes.

    Honors the `NO_COLOR` convention and only colors interactive terminals.

    Returns:
        bool: True if the terminal supports color, False otherwise
    """
    if os.environ.get("NO_COLOR"):
        return False
    if not (hasattr(sys.stdout, "isatty") and sys.stdout.isatty()):
        return False
    if sys.platform != "win32":
        return True

    return bool(
        getattr(colorama, "fixed_windows_console", False)
        or "ANSICON" in os.environ
        or "WT_SESSION" in os.environ  # Windows Terminal
        or os.environ.get("TERM_PROGRAM") == "vscode"
        or _windows_vt_enabled()
    )
