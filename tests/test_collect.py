"""Collector tests driven by a scripted command runner and temporary files."""

from __future__ import annotations

import logging
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Mapping, Optional, Sequence

import pytest

from src.pacfetch.collect import (
    StatsCollector,
    parse_installed_sizes,
    parse_last_upgrade,
    parse_mirror_url,
    parse_pacman_version,
    parse_size_field,
    parse_upgrade_names,
    run_command,
)
from src.pacfetch.stats import PacmanStats, StatId

PACMAN_LOG = """\
[2024-05-01T10:00:00+0000] [PACMAN] Running 'pacman -Syu'
[2024-05-01T10:00:01+0000] [PACMAN] starting full system upgrade
[2024-05-01T10:02:00+0000] [ALPM] transaction completed
[2024-05-03T08:00:00+0000] [PACMAN] starting full system upgrade
[2024-05-03T08:00:05+0000] [ALPM] transaction started
"""

VERSION_OUTPUT = """
 .--.                  Pacman v7.1.0 - libalpm v16.0.1
/ _.-' .-.  .-.  .-.   Copyright (C) 2006-2024 Pacman Development Team
"""

SI_OUTPUT = """\
Repository      : core
Name            : linux
Download Size   : 140.50 MiB
Installed Size  : 130.00 MiB

Repository      : extra
Name            : vim
Download Size   : 512.00 KiB
Installed Size  : 4.00 MiB
"""

QI_OUTPUT = """\
Name            : linux
Installed Size  : 129.00 MiB

Name            : vim
Installed Size  : 3.00 MiB
"""


class ScriptedRunner:
    """Return canned stdout per command line and record every call."""

    def __init__(self, outputs: Mapping[tuple[str, ...], Optional[str]]) -> None:
        self.outputs = dict(outputs)
        self.calls: list[tuple[str, ...]] = []

    def __call__(self, args: Sequence[str]) -> Optional[str]:
        key = tuple(args)
        self.calls.append(key)
        return self.outputs.get(key)


def _collector(tmp_path: Path, runner: ScriptedRunner, **overrides: object) -> StatsCollector:
    values: dict[str, object] = {
        "runner": runner,
        "pacman_log": tmp_path / "pacman.log",
        "mirrorlist": tmp_path / "mirrorlist",
        "package_cache": tmp_path / "pkg",
        "clock": lambda: datetime(2024, 5, 2, 10, 0, 1, tzinfo=timezone.utc),
    }
    values.update(overrides)
    return StatsCollector(**values)  # type: ignore[arg-type]


def test_parse_last_upgrade_needs_completed_transaction() -> None:
    started = parse_last_upgrade(PACMAN_LOG.splitlines())

    assert started == datetime(2024, 5, 1, 10, 0, 1, tzinfo=timezone.utc)
    assert parse_last_upgrade(["[2024-05-01T10:00:01+0000] starting full system upgrade"]) is None


def test_parse_size_fields() -> None:
    assert parse_size_field(SI_OUTPUT, "Download Size") == 140.5 * 1024**2 + 512 * 1024
    assert parse_installed_sizes(QI_OUTPUT) == 132 * 1024**2
    assert parse_installed_sizes("Installed Size : 1,024.00 KiB") == 1024 * 1024


def test_parse_upgrade_names_skips_ignored_packages() -> None:
    output = "linux 6.8.1-1 -> 6.8.2-1\nvim 9.1-1 -> 9.1-2\nfoo 1-1 -> 2-1 [ignored]\n"

    assert parse_upgrade_names(output) == ["linux", "vim"]


def test_parse_mirror_url_strips_repo_suffix() -> None:
    lines = [
        "## Worldwide",
        "#Server = https://commented.example/$repo/os/$arch",
        "Server = https://mirror.example.org/archlinux/$repo/os/$arch",
        "Server = https://second.example/$repo/os/$arch",
    ]

    assert parse_mirror_url(lines) == "https://mirror.example.org/archlinux"
    assert parse_mirror_url(["# nothing"]) is None


def test_parse_pacman_version() -> None:
    assert parse_pacman_version(VERSION_OUTPUT) == "Pacman v7.1.0 - libalpm v16.0.1"
    assert parse_pacman_version("pacman: command not found") is None


def test_counts_and_orphans(tmp_path: Path) -> None:
    runner = ScriptedRunner(
        {
            ("pacman", "-Q"): "a 1\nb 2\nc 3\n",
            ("pacman", "-Qu"): "a 1 -> 2\n",
            ("pacman", "-Qdtq"): "linux\nvim\n",
            ("pacman", "-Qi", "linux", "vim"): QI_OUTPUT,
        }
    )
    collector = _collector(tmp_path, runner)

    assert collector.installed_count() == 3
    assert collector.upgradable_count() == 1
    assert collector.orphans() == (2, 132.0)


def test_no_orphans_skips_size_query(tmp_path: Path) -> None:
    runner = ScriptedRunner({("pacman", "-Qdtq"): ""})

    assert _collector(tmp_path, runner).orphans() == (0, 0.0)
    assert runner.calls == [("pacman", "-Qdtq")]


def test_upgrade_sizes(tmp_path: Path) -> None:
    runner = ScriptedRunner(
        {
            ("pacman", "-Si", "linux", "vim"): SI_OUTPUT,
            ("pacman", "-Qi", "linux", "vim"): QI_OUTPUT,
        }
    )

    download, installed, net = _collector(tmp_path, runner).upgrade_sizes(["linux", "vim"])

    assert download == pytest.approx(141.0)
    assert installed == pytest.approx(134.0)
    assert net == pytest.approx(2.0)


def test_upgrade_sizes_without_upgrades_or_sync_data(tmp_path: Path) -> None:
    collector = _collector(tmp_path, ScriptedRunner({}))

    assert collector.upgrade_sizes([]) == (0.0, 0.0, 0.0)
    assert collector.upgrade_sizes(["linux"]) == (None, None, None)


def test_seconds_since_update_reads_log(tmp_path: Path) -> None:
    (tmp_path / "pacman.log").write_text(PACMAN_LOG, encoding="utf-8")

    assert _collector(tmp_path, ScriptedRunner({})).seconds_since_update() == 86400


def test_missing_log_is_reported(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING):
        assert _collector(tmp_path, ScriptedRunner({})).seconds_since_update() is None

    assert "pacman.log" in caplog.text


def test_cache_size_sums_regular_files(tmp_path: Path) -> None:
    cache = tmp_path / "pkg"
    (cache / "sub").mkdir(parents=True)
    (cache / "a.pkg.tar.zst").write_bytes(b"x" * 1048576)
    (cache / "b.pkg.tar.zst").write_bytes(b"x" * 524288)

    assert _collector(tmp_path, ScriptedRunner({})).cache_size_mb() == 1.5


def test_mirror_url_and_disk_usage(tmp_path: Path) -> None:
    (tmp_path / "mirrorlist").write_text(
        "Server = https://mirror.example.org/archlinux/$repo/os/$arch\n", encoding="utf-8"
    )
    collector = _collector(tmp_path, ScriptedRunner({}))

    used, total = collector.disk_usage(str(tmp_path))

    assert collector.mirror_url() == "https://mirror.example.org/archlinux"
    assert used is not None and total is not None and total >= used


def test_collect_runs_only_requested_collectors(tmp_path: Path) -> None:
    runner = ScriptedRunner(
        {("pacman", "-Q"): "a 1\n", ("pacman", "--version"): VERSION_OUTPUT}
    )

    stats = _collector(tmp_path, runner).collect([StatId.INSTALLED])

    assert stats == PacmanStats(total_installed=1, pacman_version="Pacman v7.1.0 - libalpm v16.0.1")
    assert runner.calls == [("pacman", "-Q"), ("pacman", "--version")]


def test_collect_upgrade_stats(tmp_path: Path) -> None:
    runner = ScriptedRunner(
        {
            ("pacman", "-Qu"): "linux 1 -> 2\nvim 1 -> 2\n",
            ("pacman", "-Si", "linux", "vim"): SI_OUTPUT,
            ("pacman", "-Qi", "linux", "vim"): QI_OUTPUT,
        }
    )

    stats = _collector(tmp_path, runner).collect([StatId.NET_UPGRADE_SIZE])

    assert stats.total_upgradable == 2
    assert stats.download_size_mb == pytest.approx(141.0)
    assert stats.net_upgrade_size_mb == pytest.approx(2.0)
    assert stats.pacman_version is None


def test_collect_failures_leave_fields_missing(tmp_path: Path) -> None:
    stats = _collector(tmp_path, ScriptedRunner({})).collect(
        [StatId.INSTALLED, StatId.UPGRADABLE, StatId.ORPHANED_PACKAGES, StatId.CACHE_SIZE],
        disk_path=str(tmp_path),
    )

    assert stats.total_installed is None
    assert stats.total_upgradable is None
    assert stats.orphaned_packages is None
    assert stats.cache_size_mb is None
    assert stats.disk_used_bytes is None


def test_collect_logs_timings_at_debug(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.DEBUG, logger="pacfetch.collect"):
        _collector(tmp_path, ScriptedRunner({})).collect([StatId.INSTALLED])

    assert "Installed count:" in caplog.text
    assert "Upgradable count: SKIP" in caplog.text
    assert "TOTAL:" in caplog.text


def test_run_command_treats_status_one_as_empty_result() -> None:
    assert run_command([sys.executable, "-c", "print('ok'); raise SystemExit(1)"]) == "ok\n"


def test_run_command_failures_return_none(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING):
        assert run_command([sys.executable, "-c", "raise SystemExit(2)"]) is None
        assert run_command(["/nonexistent/pacman-binary"]) is None

    assert "exited with 2" in caplog.text
    assert "Failed to run /nonexistent/pacman-binary" in caplog.text
