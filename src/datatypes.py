"""Configuration dataclasses for pacfetch."""
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional


class TitleStyle(str, Enum):
    """How a title is drawn relative to its separator line."""

    STACKED = "stacked"
    EMBEDDED = "embedded"


class TitleAlign(str, Enum):
    """Horizontal placement of title text inside its resolved width."""

    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


class TitleWidthMode(str, Enum):
    """Width policies for titles."""

    TITLE = "title"
    CONTENT = "content"
    FIXED = "fixed"


class TitleText(str, Enum):
    """Symbolic title templates; any other text is used literally."""

    DEFAULT = "default"
    PACMAN_VERSION = "pacman_ver"
    PACFETCH_VERSION = "pacfetch_ver"
    EMPTY = ""
    LITERAL = "literal"


@dataclass(frozen=True)
class TitleWidth:
    """Width setting of a title: its own footprint, the shared content width, or fixed."""

    mode: TitleWidthMode = TitleWidthMode.TITLE
    columns: int = 0

    @classmethod
    def fixed(cls, columns: int) -> "TitleWidth":
        return cls(TitleWidthMode.FIXED, columns)


@dataclass
class TitleConfig:
    """One ``[display.titles.<name>]`` table (or the legacy ``[display.title]``)."""

    text: str = "default"
    text_color: str = "bright_yellow"
    line_color: str = "none"
    style: TitleStyle = TitleStyle.STACKED
    width: TitleWidth = field(default_factory=TitleWidth)
    align: Optional[TitleAlign] = None
    line: str = "-"
    left_cap: str = ""
    right_cap: str = ""


@dataclass
class GlyphConfig:
    """Separator placed between a stat label and its value."""

    glyph: str = ": "


def _default_stats() -> List[str]:
    return [
        "title.header",
        "installed",
        "upgradable",
        "last_update",
        "download_size",
        "installed_size",
        "net_upgrade_size",
        "orphaned_packages",
        "cache_size",
        "disk",
        "mirror_url",
    ]


def _default_titles() -> Dict[str, TitleConfig]:
    return {"header": TitleConfig()}


@dataclass
class DisplayConfig:
    """Layout, art, and title options from ``[display]``."""

    stats: List[str] = field(default_factory=_default_stats)
    ascii: str = "PACMAN_DEFAULT"
    ascii_color: str = "yellow"
    glyph: GlyphConfig = field(default_factory=GlyphConfig)
    title: TitleConfig = field(default_factory=TitleConfig)
    titles: Dict[str, TitleConfig] = field(default_factory=_default_titles)


@dataclass
class DiskConfig:
    """Filesystem inspected by the ``disk`` stat."""

    path: str = "/"


@dataclass
class AppConfig:
    """Top-level configuration object."""

    default_args: str = ""
    display: DisplayConfig = field(default_factory=DisplayConfig)
    disk: DiskConfig = field(default_factory=DiskConfig)
