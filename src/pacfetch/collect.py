"""
Local stat collectors backed by pacman, its log, and the filesystem.
"""
from __future__ import annotations

import logging
import re
import shutil
import subprocess
import time
from datetime import datetime
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Sequence

from src.pacfetch.logs import invoking_user_home
from src.pacfetch.stats import (
    PacmanStats,
    StatId,
    needs_disk_stat,
    needs_mirror_url,
    needs_orphan_stats,
    needs_upgrade_stats,
)

logger = logging.getLogger("pacfetch.collect")

BYTES_PER_MIB = 1048576.0

PACMAN_LOG = Path("/var/log/pacman.log")
MIRRORLIST = Path("/etc/pacman.d/mirrorlist")
PACKAGE_CACHE = Path("/var/cache/pacman/pkg")

_LOG_TIMESTAMP_RE = re.compile(r"^\[([^\]]+)\]")
_SIZE_RE = re.compile(r"^(Installed Size|Download Size)\s*:\s*([\d.,]+)\s*(B|KiB|MiB|GiB|TiB)\s*$")
_SIZE_UNITS = {"B": 1.0, "KiB": 1024.0, "MiB": 1024.0**2, "GiB": 1024.0**3, "TiB": 1024.0**4}

CommandRunner = Callable[[Sequence[str]], Optional[str]]


def run_command(args: Sequence[str]) -> Optional[str]:
    """
    Run ``args`` and return stdout, or None when the command cannot run.

    pacman exits with status 1 when a query matches nothing (no upgrades, no
    orphans); that is an empty result, not a failure.
    """
    try:
        completed = subprocess.run(list(args), capture_output=True, text=True, check=False)
    except OSError as exc:
        logger.warning("Failed to run %s: %s", " ".join(args), exc)
        return None
    if completed.returncode not in (0, 1):
        logger.warning(
            "%s exited with %d: %s", " ".join(args), completed.returncode, completed.stderr.strip()
        )
        return None
    return completed.stdout


def _count_lines(output: Optional[str]) -> Optional[int]:
    if output is None:
        return None
    return sum(1 for line in output.splitlines() if line.strip())


def parse_last_upgrade(lines: Iterable[str]) -> Optional[datetime]:
    """Start time of the last full system upgrade whose transaction completed."""

    pending: Optional[str] = None
    last: Optional[str] = None
    for line in lines:
        stripped = line.strip()
        match = _LOG_TIMESTAMP_RE.match(stripped)
        stamp = match.group(1) if match else ""
        if "starting full system upgrade" in stripped:
            pending = stamp
        elif pending is not None and "transaction completed" in stripped:
            last = pending
            pending = None
    if last is None:
        return None
    try:
        return datetime.strptime(last, "%Y-%m-%dT%H:%M:%S%z")
    except ValueError:
        logger.warning("Unrecognised pacman.log timestamp '%s'", last)
        return None


def parse_size_field(output: str, field: str = "Installed Size") -> float:
    """Sum one size field (``Installed Size`` or ``Download Size``) of ``pacman -Qi/-Si`` output, in bytes."""

    total = 0.0
    for line in output.splitlines():
        match = _SIZE_RE.match(line.strip())
        if match and match.group(1) == field:
            total += float(match.group(2).replace(",", "")) * _SIZE_UNITS[match.group(3)]
    return total


def parse_installed_sizes(output: str) -> float:
    return parse_size_field(output, "Installed Size")


def parse_upgrade_names(output: str) -> List[str]:
    """Package names from ``pacman -Qu`` lines (``name old -> new``)."""

    names = []
    for line in output.splitlines():
        parts = line.split()
        if parts and not parts[-1].startswith("["):
            names.append(parts[0])
    return names


def parse_mirror_url(lines: Iterable[str]) -> Optional[str]:
    for line in lines:
        stripped = line.strip()
        if stripped.startswith("Server = "):
            url = stripped[len("Server = "):]
            return url.split("/$repo", 1)[0]
    return None


def parse_pacman_version(output: str) -> Optional[str]:
    for line in output.splitlines():
        if "Pacman v" in line and "libalpm v" in line:
            return line[line.index("Pacman v"):].strip()
    return None


def _expand_home(path: str) -> Path:
    if path == "~" or path.startswith("~/"):
        home = invoking_user_home() or Path.home()
        return Path(str(home) + path[1:])
    return Path(path)


class StatsCollector:
    """Gather the stats a layout needs; every failure degrades to a missing value."""

    def __init__(
        self,
        *,
        runner: CommandRunner = run_command,
        pacman_log: Path = PACMAN_LOG,
        mirrorlist: Path = MIRRORLIST,
        package_cache: Path = PACKAGE_CACHE,
        clock: Callable[[], datetime] = lambda: datetime.now().astimezone(),
    ) -> None:
        self._run = runner
        self._pacman_log = pacman_log
        self._mirrorlist = mirrorlist
        self._package_cache = package_cache
        self._clock = clock

    def installed_count(self) -> Optional[int]:
        return _count_lines(self._run(["pacman", "-Q"]))

    def upgradable(self) -> Optional[List[str]]:
        output = self._run(["pacman", "-Qu"])
        return None if output is None else parse_upgrade_names(output)

    def upgradable_count(self) -> Optional[int]:
        names = self.upgradable()
        return None if names is None else len(names)

    def upgrade_sizes(
        self, names: Sequence[str]
    ) -> tuple[Optional[float], Optional[float], Optional[float]]:
        """
        Download size, new installed size and net size change of upgrading ``names``, in MiB.

        Sizes of the new versions come from the sync databases (``pacman -Si``); the
        net change subtracts the installed size of the current versions.
        """
        if not names:
            return 0.0, 0.0, 0.0
        remote = self._run(["pacman", "-Si", *names])
        if remote is None:
            return None, None, None
        download = parse_size_field(remote, "Download Size") / BYTES_PER_MIB
        installed = parse_size_field(remote, "Installed Size") / BYTES_PER_MIB
        local = self._run(["pacman", "-Qi", *names])
        if local is None:
            return download, installed, None
        net = installed - parse_installed_sizes(local) / BYTES_PER_MIB
        if abs(net) < 0.01:
            net = 0.0
        return download, installed, net

    def orphans(self) -> tuple[Optional[int], Optional[float]]:
        output = self._run(["pacman", "-Qdtq"])
        if output is None:
            return None, None
        names = [line.strip() for line in output.splitlines() if line.strip()]
        if not names:
            return 0, 0.0
        details = self._run(["pacman", "-Qi", *names])
        if details is None:
            return len(names), None
        return len(names), parse_installed_sizes(details) / BYTES_PER_MIB

    def seconds_since_update(self) -> Optional[int]:
        try:
            with open(self._pacman_log, "r", encoding="utf-8", errors="replace") as handle:
                started = parse_last_upgrade(handle)
        except OSError as exc:
            logger.warning("Failed to read %s: %s", self._pacman_log, exc)
            return None
        if started is None:
            return None
        return max(0, int((self._clock() - started).total_seconds()))

    def cache_size_mb(self) -> Optional[float]:
        try:
            entries: List[Path] = list(self._package_cache.iterdir())
        except OSError as exc:
            logger.warning("Failed to list %s: %s", self._package_cache, exc)
            return None
        total = 0
        for entry in entries:
            try:
                if entry.is_file():
                    total += entry.stat().st_size
            except OSError:
                continue
        return total / BYTES_PER_MIB

    def disk_usage(self, path: str) -> tuple[Optional[int], Optional[int]]:
        try:
            usage = shutil.disk_usage(_expand_home(path))
        except OSError as exc:
            logger.warning("Failed to read disk usage for %s: %s", path, exc)
            return None, None
        return usage.used, usage.total

    def mirror_url(self) -> Optional[str]:
        try:
            with open(self._mirrorlist, "r", encoding="utf-8", errors="replace") as handle:
                return parse_mirror_url(handle)
        except OSError as exc:
            logger.warning("Failed to read %s: %s", self._mirrorlist, exc)
            return None

    def pacman_version(self) -> Optional[str]:
        output = self._run(["pacman", "--version"])
        return parse_pacman_version(output) if output is not None else None

    def collect(self, requested: Sequence[StatId], *, disk_path: str = "/") -> PacmanStats:
        """
        Collect the stats listed in ``requested`` plus the pacman version used by titles.

        Collectors for stats that are not requested are skipped. Timings are logged at
        debug level.
        """
        wanted = set(requested)
        values: dict[str, object] = {}

        def timed(label: str, collector: Callable[[], None]) -> None:
            start = time.perf_counter()
            collector()
            logger.debug("%s: %.1fms", label, (time.perf_counter() - start) * 1000.0)

        def _upgrades() -> None:
            names = self.upgradable()
            values["total_upgradable"] = None if names is None else len(names)
            if names is None:
                return
            (
                values["download_size_mb"],
                values["total_installed_size_mb"],
                values["net_upgrade_size_mb"],
            ) = self.upgrade_sizes(names)

        def _orphans() -> None:
            values["orphaned_packages"], values["orphaned_size_mb"] = self.orphans()

        def _mirror() -> None:
            values["mirror_url"] = self.mirror_url()

        def _installed() -> None:
            values["total_installed"] = self.installed_count()

        def _last_update() -> None:
            values["seconds_since_last_update"] = self.seconds_since_update()

        def _cache() -> None:
            values["cache_size_mb"] = self.cache_size_mb()

        def _disk() -> None:
            values["disk_used_bytes"], values["disk_total_bytes"] = self.disk_usage(disk_path)

        def _version() -> None:
            values["pacman_version"] = self.pacman_version()

        total_start = time.perf_counter()
        if needs_upgrade_stats(wanted):
            timed("Upgradable count", _upgrades)
        else:
            logger.debug("Upgradable count: SKIP")
        if needs_orphan_stats(wanted):
            timed("Orphaned packages", _orphans)
        else:
            logger.debug("Orphaned packages: SKIP")
        if needs_mirror_url(wanted):
            timed("Mirror URL", _mirror)
        else:
            logger.debug("Mirror URL: SKIP")
        if StatId.INSTALLED in wanted:
            timed("Installed count", _installed)
        if StatId.LAST_UPDATE in wanted:
            timed("Last update time", _last_update)
        if StatId.CACHE_SIZE in wanted:
            timed("Cache size", _cache)
        if needs_disk_stat(wanted):
            timed("Disk usage", _disk)
        else:
            logger.debug("Disk usage: SKIP")
        timed("Pacman version", _version)
        logger.debug("TOTAL: %.1fms", (time.perf_counter() - total_start) * 1000.0)
        return PacmanStats(**values)  # type: ignore[arg-type]


__all__ = [
    "StatsCollector",
    "parse_installed_sizes",
    "parse_last_upgrade",
    "parse_mirror_url",
    "parse_pacman_version",
    "parse_size_field",
    "parse_upgrade_names",
    "run_command",
]
