"""Stat identifiers, the collected stats snapshot, and value formatting."""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Iterable, Optional

BYTES_PER_GIB = 1073741824.0

MISSING_VALUE = "-"


class StatId(str, Enum):
    """Stats that can be listed in ``[display].stats``."""

    INSTALLED = "installed"
    UPGRADABLE = "upgradable"
    LAST_UPDATE = "last_update"
    DOWNLOAD_SIZE = "download_size"
    INSTALLED_SIZE = "installed_size"
    NET_UPGRADE_SIZE = "net_upgrade_size"
    ORPHANED_PACKAGES = "orphaned_packages"
    CACHE_SIZE = "cache_size"
    MIRROR_URL = "mirror_url"
    MIRROR_HEALTH = "mirror_health"
    DISK = "disk"

    @property
    def label(self) -> str:
        return _LABELS[self]


_LABELS: Dict[StatId, str] = {
    StatId.INSTALLED: "Installed",
    StatId.UPGRADABLE: "Upgradable",
    StatId.LAST_UPDATE: "Last System Update",
    StatId.DOWNLOAD_SIZE: "Download Size",
    StatId.INSTALLED_SIZE: "Installed Size",
    StatId.NET_UPGRADE_SIZE: "Net Upgrade Size",
    StatId.ORPHANED_PACKAGES: "Orphaned Packages",
    StatId.CACHE_SIZE: "Package Cache",
    StatId.MIRROR_URL: "Mirror URL",
    StatId.MIRROR_HEALTH: "Mirror Health",
    StatId.DISK: "Disk",
}

_UPGRADE_STATS = frozenset(
    {StatId.UPGRADABLE, StatId.DOWNLOAD_SIZE, StatId.INSTALLED_SIZE, StatId.NET_UPGRADE_SIZE}
)


@dataclass(frozen=True)
class PacmanStats:
    """Immutable snapshot produced by the collectors; absent values are None."""

    total_installed: Optional[int] = None
    total_upgradable: Optional[int] = None
    seconds_since_last_update: Optional[int] = None
    download_size_mb: Optional[float] = None
    total_installed_size_mb: Optional[float] = None
    net_upgrade_size_mb: Optional[float] = None
    orphaned_packages: Optional[int] = None
    orphaned_size_mb: Optional[float] = None
    cache_size_mb: Optional[float] = None
    mirror_url: Optional[str] = None
    mirror_sync_age_hours: Optional[float] = None
    pacman_version: Optional[str] = None
    disk_used_bytes: Optional[int] = None
    disk_total_bytes: Optional[int] = None


@dataclass(frozen=True)
class StatEntry:
    """A labelled stat ready for layout; ``value`` is None when no data exists."""

    stat: StatId
    label: str
    value: Optional[str]


Highlighter = Callable[[str, str], str]
"""Callback ``(role, text) -> text`` used to highlight parts of a value."""


def _plain(role: str, text: str) -> str:
    return text


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}{'' if count == 1 else 's'}"


def normalize_duration(seconds: int) -> str:
    """Render a duration in seconds the way a person would say it."""

    if seconds < 60:
        return _plural(seconds, "second")
    if seconds < 3600:
        return _plural(seconds // 60, "minute")
    if seconds < 86400:
        return _plural(seconds // 3600, "hour")
    days = seconds // 86400
    hours = (seconds % 86400) // 3600
    return f"{_plural(days, 'day')} {_plural(hours, 'hour')}"


def _mib(value: Optional[float]) -> Optional[str]:
    if value is None:
        return None
    return f"{value:.2f} MiB"


def _disk_usage(stats: PacmanStats, highlight: Highlighter) -> Optional[str]:
    used, total = stats.disk_used_bytes, stats.disk_total_bytes
    if used is None or total is None:
        return None
    pct = (used / total) * 100.0 if total > 0 else 0.0
    if pct > 90.0:
        role = "bad"
    elif pct >= 70.0:
        role = "warn"
    else:
        role = "ok"
    pct_text = highlight(role, f"({pct:.0f}%)")
    return f"{used / BYTES_PER_GIB:.2f} GiB / {total / BYTES_PER_GIB:.2f} GiB {pct_text}"


def _mirror_health(stats: PacmanStats, highlight: Highlighter) -> str:
    if stats.mirror_url is None:
        return f"{highlight('bad', 'Err')} - no mirror found"
    if stats.mirror_sync_age_hours is None:
        return f"{highlight('bad', 'Err')} - could not check sync status"
    return f"{highlight('ok', 'OK')} (last sync {stats.mirror_sync_age_hours:.1f} hours)"


def _orphans(stats: PacmanStats) -> Optional[str]:
    count = stats.orphaned_packages
    if count is None:
        return None
    if count > 0 and stats.orphaned_size_mb is not None:
        return f"{count} ({stats.orphaned_size_mb:.2f} MiB)"
    return str(count)


def format_value(
    stat: StatId, stats: PacmanStats, highlight: Optional[Highlighter] = None
) -> Optional[str]:
    """
    Format the value of ``stat`` from ``stats``.

    Returns None when the snapshot has no data for the stat. ``highlight`` is applied
    to the status words of mirror health and to the disk percentage; it receives a
    role of ``"ok"``, ``"warn"`` or ``"bad"``.
    """
    mark = highlight or _plain
    if stat is StatId.INSTALLED:
        return None if stats.total_installed is None else str(stats.total_installed)
    if stat is StatId.UPGRADABLE:
        return None if stats.total_upgradable is None else str(stats.total_upgradable)
    if stat is StatId.LAST_UPDATE:
        seconds = stats.seconds_since_last_update
        return None if seconds is None else normalize_duration(seconds)
    if stat is StatId.DOWNLOAD_SIZE:
        return _mib(stats.download_size_mb)
    if stat is StatId.INSTALLED_SIZE:
        return _mib(stats.total_installed_size_mb)
    if stat is StatId.NET_UPGRADE_SIZE:
        return _mib(stats.net_upgrade_size_mb)
    if stat is StatId.ORPHANED_PACKAGES:
        return _orphans(stats)
    if stat is StatId.CACHE_SIZE:
        return _mib(stats.cache_size_mb)
    if stat is StatId.MIRROR_URL:
        return stats.mirror_url
    if stat is StatId.MIRROR_HEALTH:
        return _mirror_health(stats, mark)
    if stat is StatId.DISK:
        return _disk_usage(stats, mark)
    raise ValueError(f"Unhandled stat: {stat!r}")


def stat_label(stat: StatId, disk_path: str = "/") -> str:
    if stat is StatId.DISK:
        return f"Disk ({disk_path})"
    return stat.label


def build_entry(
    stat: StatId,
    stats: PacmanStats,
    *,
    disk_path: str = "/",
    highlight: Optional[Highlighter] = None,
) -> StatEntry:
    return StatEntry(stat, stat_label(stat, disk_path), format_value(stat, stats, highlight))


def stats_to_json(stats: PacmanStats) -> str:
    """Pretty JSON object of every stat that has a value, keyed by stat name."""

    payload = {}
    for stat in StatId:
        value = format_value(stat, stats)
        if value is not None:
            payload[stat.value] = value
    return json.dumps(payload, indent=2)


def needs_upgrade_stats(requested: Iterable[StatId]) -> bool:
    return any(stat in _UPGRADE_STATS for stat in requested)


def needs_orphan_stats(requested: Iterable[StatId]) -> bool:
    return StatId.ORPHANED_PACKAGES in set(requested)


def needs_mirror_url(requested: Iterable[StatId]) -> bool:
    wanted = set(requested)
    return StatId.MIRROR_URL in wanted or StatId.MIRROR_HEALTH in wanted


def needs_disk_stat(requested: Iterable[StatId]) -> bool:
    return StatId.DISK in set(requested)


__all__ = [
    "MISSING_VALUE",
    "PacmanStats",
    "StatEntry",
    "StatId",
    "build_entry",
    "format_value",
    "needs_disk_stat",
    "needs_mirror_url",
    "needs_orphan_stats",
    "needs_upgrade_stats",
    "normalize_duration",
    "stat_label",
    "stats_to_json",
]
