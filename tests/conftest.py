from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path

import pytest
from click.testing import CliRunner

from src.pacfetch.layout import AnsiColorMapper, LineRenderer
from src.pacfetch.logs import RecordingSink
from src.pacfetch.stats import PacmanStats


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Iterator[None]:
    """Keep config, cache and color settings of the host out of every test."""

    monkeypatch.delenv("NO_COLOR", raising=False)
    monkeypatch.delenv("SUDO_USER", raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_CACHE_HOME", str(tmp_path / "cache"))
    logger = logging.getLogger("pacfetch")
    handlers = list(logger.handlers)
    level = logger.level
    propagate = logger.propagate
    yield
    for handler in logger.handlers:
        if handler not in handlers:
            handler.close()
    logger.handlers = handlers
    logger.setLevel(level)
    logger.propagate = propagate


@pytest.fixture
def sink() -> RecordingSink:
    """In-memory warning sink."""

    return RecordingSink()


@pytest.fixture
def plain_mapper() -> AnsiColorMapper:
    return AnsiColorMapper(no_color=True)


@pytest.fixture
def color_mapper() -> AnsiColorMapper:
    return AnsiColorMapper(no_color=False)


@pytest.fixture
def plain_renderer(plain_mapper: AnsiColorMapper) -> LineRenderer:
    """Renderer with colors disabled so assertions compare plain text."""

    return LineRenderer(plain_mapper, glyph=": ")


@pytest.fixture
def sample_stats() -> PacmanStats:
    return PacmanStats(
        total_installed=1268,
        total_upgradable=3,
        seconds_since_last_update=90061,
        download_size_mb=12.5,
        total_installed_size_mb=40.25,
        net_upgrade_size_mb=1.0,
        orphaned_packages=2,
        orphaned_size_mb=3.5,
        cache_size_mb=2048.0,
        mirror_url="https://mirror.example.org/archlinux",
        pacman_version="Pacman v7.1.0 - libalpm v16.0.1",
        disk_used_bytes=50 * 1073741824,
        disk_total_bytes=100 * 1073741824,
    )


@pytest.fixture
def runner() -> CliRunner:
    """Provide a Click runner configured for CLI smoke tests."""

    return CliRunner()
