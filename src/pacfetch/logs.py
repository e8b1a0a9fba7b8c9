"""Warning log configuration and the sinks the layout engine reports through."""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import List, Optional, Protocol

_LOGGER_NAME = "pacfetch"
_LOG_FORMAT = "[%(asctime)s] %(levelname)s: %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
_DEBUG_HANDLER = "pacfetch-debug"


class WarningSink(Protocol):
    """Append-only destination for non-fatal layout warnings."""

    def warn(self, message: str) -> None: ...


class LoggerSink:
    """Forward warnings to a standard library logger."""

    def __init__(self, logger: Optional[logging.Logger] = None) -> None:
        self._logger = logger or get_logger()

    def warn(self, message: str) -> None:
        self._logger.warning(message)


class RecordingSink:
    """Keep warnings in memory; used by tests and by callers that batch output."""

    def __init__(self) -> None:
        self.messages: List[str] = []

    def warn(self, message: str) -> None:
        self.messages.append(message)


class _ShortLevelFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        if record.levelno == logging.WARNING:
            record.levelname = "WARN"
        return super().format(record)


def invoking_user_home() -> Optional[Path]:
    """Home directory of the user behind ``sudo``, when it exists."""

    sudo_user = os.environ.get("SUDO_USER")
    if not sudo_user:
        return None
    home = Path("/home") / sudo_user
    return home if home.exists() else None


def cache_root() -> Path:
    home = invoking_user_home()
    if home is not None:
        return home / ".cache" / "pacfetch"
    xdg = os.environ.get("XDG_CACHE_HOME")
    base = Path(xdg) if xdg else Path.home() / ".cache"
    return base / "pacfetch"


def log_path() -> Path:
    return cache_root() / "pacfetch.log"


def configure_logging(*, debug: bool = False, path: Optional[Path] = None) -> logging.Logger:
    """
    Attach the pacfetch handlers once and return the package logger.

    Warnings always go to the append-only log file. In debug mode a stderr handler is
    added as well and the level is lowered so collector timings become visible. A later
    call with ``debug=True`` adds the stderr handler if it is still missing. A log
    file that cannot be created is skipped; logging must never stop the output.
    """
    logger = logging.getLogger(_LOGGER_NAME)
    if not logger.handlers:
        logger.setLevel(logging.WARNING)
        logger.propagate = False
        formatter = _ShortLevelFormatter(_LOG_FORMAT, datefmt=_DATE_FORMAT)

        target = path or log_path()
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(target, mode="a", encoding="utf-8")
        except OSError:
            file_handler = None
        if file_handler is not None:
            file_handler.setLevel(logging.WARNING)
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)

    if debug and not any(handler.get_name() == _DEBUG_HANDLER for handler in logger.handlers):
        logger.setLevel(logging.DEBUG)
        logger.propagate = False
        stream_handler = logging.StreamHandler(sys.stderr)
        stream_handler.set_name(_DEBUG_HANDLER)
        stream_handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(stream_handler)
    return logger


def get_logger() -> logging.Logger:
    return logging.getLogger(_LOGGER_NAME)


__all__ = [
    "LoggerSink",
    "RecordingSink",
    "WarningSink",
    "cache_root",
    "invoking_user_home",
    "configure_logging",
    "get_logger",
    "log_path",
]
