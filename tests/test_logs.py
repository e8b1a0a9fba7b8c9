from __future__ import annotations

import logging
from pathlib import Path

from src.pacfetch.logs import LoggerSink, RecordingSink, configure_logging, log_path


def test_log_path_follows_xdg_cache_home(tmp_path: Path) -> None:
    assert log_path() == tmp_path / "cache" / "pacfetch" / "pacfetch.log"


def test_warnings_are_appended_to_log_file() -> None:
    configure_logging()

    LoggerSink().warn("first")
    LoggerSink().warn("second")

    text = log_path().read_text(encoding="utf-8")
    assert "WARN: first" in text
    assert text.index("first") < text.index("second")


def test_debug_can_be_enabled_after_setup() -> None:
    logger = configure_logging()
    assert logger.level == logging.WARNING
    assert len(logger.handlers) == 1

    configure_logging(debug=True)
    configure_logging(debug=True)

    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 2
    assert isinstance(logger.handlers[1], logging.StreamHandler)


def test_recording_sink_keeps_order() -> None:
    sink = RecordingSink()

    sink.warn("a")
    sink.warn("b")

    assert sink.messages == ["a", "b"]
