"""Logging utilities module.

Log messages may highlight values with two inline markers:

- `$$'value'$$` for quoted values such as URIs and identifiers
- `$${key: value}$$` for structured details

Console output renders the markers as colors, file output strips them.
"""

import logging
import re
import sys
from functools import lru_cache
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import ClassVar

import colorama
from colorama import Fore, Style

__all__ = ["Logger", "get_logger"]

QUOTED_PATTERN = re.compile(r"\$\$'((?:[^']|'(?!\$\$))*)'\$\$")
BRACED_PATTERN = re.compile(r"\$\$\{(.*?)\}\$\$")
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class _MarkerFormatter(logging.Formatter):
    """Formatter that rewrites the `$$` markers before delegating to logging."""

    def render_markers(self, msg: str) -> str:
        """Rewrite marker syntax within a message string."""
        raise NotImplementedError

    def render_levelname(self, levelname: str) -> str:
        """Return the level name as it should appear in the output."""
        return levelname

    def format(self, record: logging.LogRecord) -> str:
        """Format a record without leaking the rewritten message to other handlers.

        Args:
            record (logging.LogRecord): Log record to format

        Returns:
            str: Formatted log message
        """
        orig_msg = record.msg
        orig_levelname = record.levelname
        try:
            record.levelname = self.render_levelname(record.levelname)
            if isinstance(record.msg, str):
                record.msg = self.render_markers(record.msg)
            return super().format(record)
        finally:
            record.msg = orig_msg
            record.levelname = orig_levelname


class ColorFormatter(_MarkerFormatter):
    """Formatter that colors level names and marked values with ANSI codes."""

    COLORS: ClassVar[dict[str, str]] = {
        "DEBUG": Fore.CYAN,
        "INFO": Fore.GREEN,
        "SUCCESS": Fore.GREEN + Style.BRIGHT,
        "WARNING": Fore.YELLOW,
        "ERROR": Fore.RED,
        "CRITICAL": Fore.RED + Style.BRIGHT,
    }

    def render_levelname(self, levelname: str) -> str:
        """Wrap the level name in its severity color."""
        return f"{self.COLORS.get(levelname, '')}{levelname}{Style.RESET_ALL}"

    def render_markers(self, msg: str) -> str:
        """Highlight quoted values and dim braced values."""
        msg = QUOTED_PATTERN.sub(f"{Fore.LIGHTBLUE_EX}'\\1'{Style.RESET_ALL}", msg)
        return BRACED_PATTERN.sub(f"{Style.DIM}{{\\1}}{Style.RESET_ALL}", msg)


class CleanFormatter(_MarkerFormatter):
    """Formatter that strips the markers, used for files and dumb terminals."""

    def render_markers(self, msg: str) -> str:
        """Keep the marked content and drop the markers."""
        msg = QUOTED_PATTERN.sub("'\\1'", msg)
        return BRACED_PATTERN.sub("{\\1}", msg)


def _enable_color() -> bool:
    try:
        from src.utils.terminal import supports_color

        if not supports_color():
            return False
        if sys.platform == "win32":
            colorama.just_fix_windows_console()
        else:
            colorama.init()
        return True
    except (AttributeError, ImportError, OSError):
        return False


class Logger(logging.Logger):
    """Logger with a SUCCESS level that prefixes messages with the caller's class."""

    SUCCESS = logging.INFO + 5

    def __init__(self, name, level=logging.NOTSET):
        """Initialize the logger and register the SUCCESS level name."""
        super().__init__(name, level)

        if logging.getLevelName(self.SUCCESS) != "SUCCESS":
            logging.addLevelName(self.SUCCESS, "SUCCESS")

    def _log(
        self,
        level,
        msg,
        args,
        exc_info=None,
        extra=None,
        stack_info=False,
        stacklevel=1,
    ):
        """Prefix messages logged from within a method with the class name."""
        try:
            # Frame 0 is _log, frame 1 the public logging method, frame 2 the caller
            frame = sys._getframe(2)
            owner = frame.f_locals.get("self", frame.f_locals.get("cls"))
            if isinstance(owner, type):
                class_name = owner.__name__
            elif owner is not None and not isinstance(owner, logging.Logger):
                class_name = owner.__class__.__name__
            else:
                class_name = None

            if class_name and isinstance(msg, str):
                msg = f"{class_name}: {msg}"
        except (ValueError, KeyError, AttributeError):
            pass

        super()._log(
            level,
            msg,
            args,
            exc_info=exc_info,
            extra=extra,
            stack_info=stack_info,
            stacklevel=stacklevel + 1,
        )

    def success(self, msg, *args, **kwargs):
        """Log a message with SUCCESS level."""
        self.log(self.SUCCESS, msg, *args, **kwargs)

    def setup(self, log_level: str, log_dir: str | None = None) -> None:
        """Attach console and, optionally, rotating file handlers.

        Args:
            log_level (str): Logging level ('DEBUG', 'INFO', 'SUCCESS', etc.)
            log_dir (str | None, optional): Directory where log files will be stored.
        """
        level = self.SUCCESS if log_level == "SUCCESS" else getattr(logging, log_level)
        self.setLevel(level)

        for handler in self.handlers[:]:
            self.removeHandler(handler)

        if level <= logging.DEBUG:
            log_format = (
                "%(asctime)s - %(name)s - %(levelname)s\t%(filename)s:%(lineno)d\t"
                "%(message)s"
            )
        else:
            log_format = "%(asctime)s - %(name)s - %(levelname)s\t%(message)s"

        console_formatter_cls = ColorFormatter if _enable_color() else CleanFormatter
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(
            console_formatter_cls(log_format, datefmt=DATE_FORMAT)
        )
        console_handler.setLevel(level)
        self.addHandler(console_handler)

        if log_dir is None:
            return

        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_path / f"{self.name}.{log_level}.log",
            maxBytes=10 * 1024 * 1024,  # 10MB
            backupCount=5,
            encoding="utf-8",
        )
        file_handler.setFormatter(CleanFormatter(log_format, datefmt=DATE_FORMAT))
        file_handler.setLevel(level)
        self.addHandler(file_handler)


logging.setLoggerClass(Logger)


def _get_logger(
    log_name: str, log_level: str = "INFO", log_dir: str | Path | None = None
) -> Logger:
    """Get a configured instance of Logger.

    Args:
        log_name (str): Name of the logger and base name for log file.
        log_level (str): Logging level. Defaults to "INFO".
        log_dir (str | Path | None): Directory where log files will be stored.

    Returns:
        Logger: Configured logger instance
    """
    logger = logging.getLogger(log_name)
    if not isinstance(logger, Logger):
        logger = Logger(log_name)

    logger.setup(log_level, str(log_dir) if log_dir is not None else None)
    return logger


@lru_cache(maxsize=1)
def get_logger() -> Logger:
    """Get the main application logger.

    Returns:
        Logger: Main application logger instance
    """
    from src.config.settings import get_config

    config = get_config()

    return _get_logger(
        log_name="IIIFNotifications",
        log_level=str(config.log_level),
        log_dir=config.data_path / "logs",
    )
