"""Configuration loader that parses, validates, and defaults user-provided TOML."""

from __future__ import annotations

import logging
import os
import tomllib
from dataclasses import fields
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .datatypes import (
    AppConfig,
    DiskConfig,
    DisplayConfig,
    GlyphConfig,
    TitleAlign,
    TitleConfig,
    TitleStyle,
    TitleWidth,
    TitleWidthMode,
)
from .pacfetch.layout.models import (
    Declaration,
    LegacyTitleDeclaration,
    StatDeclaration,
    TitleDeclaration,
    TitleSpec,
    UnresolvedDeclaration,
)
from .pacfetch.logs import invoking_user_home
from .pacfetch.stats import StatId

logger = logging.getLogger("pacfetch.config")

LEGACY_TITLE_TOKEN = "title"
TITLE_PREFIX = "title."
ALIGN_UNSET = "unset"

DEFAULT_CONFIG_TOML = """\
# pacfetch configuration

# Flags applied to every run, e.g. "--ascii PACMAN_SMALL --no-color".
# Flags given on the command line are added after these.
default_args = ""

[display]
# Stats shown beside the art, in order. Titles are referenced as "title.<name>".
stats = [
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
# PACMAN_DEFAULT, PACMAN_SMALL, NONE, a file path, or inline art
ascii = "PACMAN_DEFAULT"
# Named color, "#RRGGBB", or "none"
ascii_color = "yellow"

[display.glyph]
glyph = ": "

[display.titles.header]
# "default", "pacman_ver", "pacfetch_ver", "" or any literal text
text = "default"
text_color = "bright_yellow"
line_color = "none"
# "stacked" or "embedded"
style = "stacked"
# "title", "content", or a number of columns
width = "title"
line = "-"
left_cap = ""
right_cap = ""

[disk]
path = "/"
"""


class ConfigError(ValueError):
    """Raised when a configuration value is malformed or fails validation."""


def _coerce_enum(value: Any, dotted_key: str, enum_type: type[Enum]) -> Enum:
    """Return an enum member, coercing string values case-insensitively."""

    if isinstance(value, enum_type):
        return value
    if isinstance(value, str):
        normalized = value.strip().lower()
        for member in enum_type:
            member_value = str(member.value).lower()
            if normalized == member_value:
                return member
    raise ConfigError(
        f"{dotted_key} must be one of: {', '.join(str(member.value) for member in enum_type)}"
    )


def _coerce_str(value: Any, dotted_key: str) -> str:
    if isinstance(value, str):
        return value
    raise ConfigError(f"{dotted_key} must be a string")


def _coerce_width(value: Any, dotted_key: str) -> TitleWidth:
    """Accept ``"title"``, ``"content"``, or a non-negative column count."""

    if isinstance(value, bool):
        raise ConfigError(f"{dotted_key} must be 'title', 'content', or a number")
    if isinstance(value, int):
        if value < 0:
            raise ConfigError(f"{dotted_key} must be >= 0")
        return TitleWidth.fixed(value)
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized == TitleWidthMode.TITLE.value:
            return TitleWidth(TitleWidthMode.TITLE)
        if normalized == TitleWidthMode.CONTENT.value:
            return TitleWidth(TitleWidthMode.CONTENT)
    raise ConfigError(f"{dotted_key} must be 'title', 'content', or a number")


def _coerce_align(value: Any, dotted_key: str) -> Optional[TitleAlign]:
    """Accept an alignment name, or ``"unset"`` for the style's default."""

    if isinstance(value, str) and value.strip().lower() == ALIGN_UNSET:
        return None
    try:
        return _coerce_enum(value, dotted_key, TitleAlign)  # type: ignore[return-value]
    except ConfigError:
        choices = ", ".join(member.value for member in TitleAlign)
        raise ConfigError(f"{dotted_key} must be one of: {choices}, {ALIGN_UNSET}") from None


def _coerce_line(value: Any, dotted_key: str) -> str:
    line = _coerce_str(value, dotted_key)
    if not line:
        raise ConfigError(f"{dotted_key} must not be empty")
    return line


_TITLE_COERCERS = {
    "text": _coerce_str,
    "text_color": _coerce_str,
    "line_color": _coerce_str,
    "style": lambda value, key: _coerce_enum(value, key, TitleStyle),
    "width": _coerce_width,
    "align": _coerce_align,
    "line": _coerce_line,
    "left_cap": _coerce_str,
    "right_cap": _coerce_str,
}


def _table(raw: Any, name: str) -> Dict[str, Any]:
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        logger.warning("Config: [%s] must be a table; using defaults", name)
        return {}
    return raw


def _warn_unknown_keys(raw: Mapping[str, Any], known: Tuple[str, ...], name: str) -> None:
    for key in raw:
        if key not in known:
            logger.warning("Config: unknown key '%s' in [%s] ignored", key, name)


def _parse_title(raw: Any, name: str) -> TitleConfig:
    """
    Build a ``TitleConfig`` from a raw TOML table, defaulting malformed fields.

    Each field is coerced independently; a value that fails validation is replaced
    by its default and a warning is logged, so one typo never discards the rest of
    the title definition.
    """
    table = _table(raw, name)
    _warn_unknown_keys(table, tuple(_TITLE_COERCERS), name)
    values: Dict[str, Any] = {}
    for key, coerce in _TITLE_COERCERS.items():
        if key not in table:
            continue
        try:
            values[key] = coerce(table[key], f"{name}.{key}")
        except ConfigError as exc:
            logger.warning("Config: %s; using default", exc)
    return TitleConfig(**values)


def _parse_stats(raw: Any) -> List[str]:
    default = DisplayConfig().stats
    if raw is None:
        return default
    if not isinstance(raw, list):
        logger.warning("Config: display.stats must be a list of strings; using defaults")
        return default
    tokens: List[str] = []
    for entry in raw:
        if isinstance(entry, str):
            tokens.append(entry.strip())
        else:
            logger.warning("Config: display.stats entry %r is not a string; ignored", entry)
    return tokens


def _parse_display(raw: Any) -> DisplayConfig:
    table = _table(raw, "display")
    defaults = DisplayConfig()
    _warn_unknown_keys(table, tuple(field.name for field in fields(DisplayConfig)), "display")

    def _string(key: str, fallback: str) -> str:
        if key not in table:
            return fallback
        try:
            return _coerce_str(table[key], f"display.{key}")
        except ConfigError as exc:
            logger.warning("Config: %s; using default", exc)
            return fallback

    glyph_table = _table(table.get("glyph"), "display.glyph")
    glyph = GlyphConfig()
    if "glyph" in glyph_table:
        try:
            glyph = GlyphConfig(_coerce_str(glyph_table["glyph"], "display.glyph.glyph"))
        except ConfigError as exc:
            logger.warning("Config: %s; using default", exc)

    titles: Dict[str, TitleConfig] = dict(defaults.titles)
    for name, title_raw in _table(table.get("titles"), "display.titles").items():
        titles[str(name)] = _parse_title(title_raw, f"display.titles.{name}")

    return DisplayConfig(
        stats=_parse_stats(table.get("stats")),
        ascii=_string("ascii", defaults.ascii),
        ascii_color=_string("ascii_color", defaults.ascii_color),
        glyph=glyph,
        title=_parse_title(table.get("title"), "display.title"),
        titles=titles,
    )


def _parse_disk(raw: Any) -> DiskConfig:
    table = _table(raw, "disk")
    if "path" not in table:
        return DiskConfig()
    try:
        return DiskConfig(path=_coerce_str(table["path"], "disk.path"))
    except ConfigError as exc:
        logger.warning("Config: %s; using default", exc)
        return DiskConfig()


def parse_config(raw: Mapping[str, Any]) -> AppConfig:
    """Turn a parsed TOML document into an ``AppConfig``; never raises for bad values."""

    default_args = AppConfig().default_args
    if "default_args" in raw:
        try:
            default_args = _coerce_str(raw["default_args"], "default_args")
        except ConfigError as exc:
            logger.warning("Config: %s; using default", exc)
    return AppConfig(
        default_args=default_args,
        display=_parse_display(raw.get("display")),
        disk=_parse_disk(raw.get("disk")),
    )


def load_config(path: str | os.PathLike[str]) -> AppConfig:
    """
    Load an application configuration from a TOML file.

    Reads the file at `path` as UTF-8 TOML (BOM is accepted). A file that is missing,
    unreadable, not UTF-8, or not valid TOML yields the default configuration and a
    logged warning; individual malformed values fall back to their defaults.

    Returns:
        AppConfig: The validated configuration.
    """
    try:
        with open(path, "rb") as handle:
            raw_bytes = handle.read()
    except FileNotFoundError:
        return AppConfig()
    except OSError as exc:
        logger.warning("Config: unable to read %s: %s; using defaults", path, exc)
        return AppConfig()
    if raw_bytes.startswith(b"\xef\xbb\xbf"):
        raw_bytes = raw_bytes[3:]
    try:
        raw = tomllib.loads(raw_bytes.decode("utf-8"))
    except UnicodeDecodeError:
        logger.warning("Config: %s must be UTF-8 encoded; using defaults", path)
        return AppConfig()
    except tomllib.TOMLDecodeError as exc:
        logger.warning("Config: failed to parse TOML in %s: %s; using defaults", path, exc)
        return AppConfig()
    return parse_config(raw)


def config_path() -> Path:
    """Return the config file path, preferring the sudo caller's home."""

    home = invoking_user_home()
    if home is not None:
        return home / ".config" / "pacfetch" / "pacfetch.toml"
    xdg = os.environ.get("XDG_CONFIG_HOME")
    base = Path(xdg) if xdg else Path.home() / ".config"
    return base / "pacfetch" / "pacfetch.toml"


def write_default_config(path: Path) -> bool:
    """Write the commented default config when ``path`` does not exist yet."""

    if path.exists():
        return False
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(DEFAULT_CONFIG_TOML, encoding="utf-8")
    except OSError as exc:
        logger.warning("Config: unable to write default config to %s: %s", path, exc)
        return False
    return True


def parse_declaration(token: str, display: DisplayConfig) -> Declaration:
    """Resolve one ``[display].stats`` entry into a typed declaration."""

    if token.startswith(TITLE_PREFIX):
        name = token[len(TITLE_PREFIX):]
        if not name:
            return UnresolvedDeclaration(token, "title name cannot be empty in 'title.'")
        title = display.titles.get(name)
        if title is None:
            return UnresolvedDeclaration(
                token, f"title '{name}' is not defined in [display.titles]; skipped"
            )
        return TitleDeclaration(TitleSpec.from_config(name, title))
    if token == LEGACY_TITLE_TOKEN:
        return LegacyTitleDeclaration(TitleSpec.from_config(LEGACY_TITLE_TOKEN, display.title))
    try:
        return StatDeclaration(StatId(token))
    except ValueError:
        return UnresolvedDeclaration(token, f"unknown stat '{token}'; skipped")


def parse_declarations(display: DisplayConfig) -> Tuple[Declaration, ...]:
    """Resolve the configured stats list once, preserving its order."""

    return tuple(parse_declaration(token, display) for token in display.stats)


def requested_stats(declarations: Tuple[Declaration, ...]) -> List[StatId]:
    return [item.stat for item in declarations if isinstance(item, StatDeclaration)]


__all__ = [
    "ConfigError",
    "DEFAULT_CONFIG_TOML",
    "config_path",
    "load_config",
    "parse_config",
    "parse_declaration",
    "parse_declarations",
    "requested_stats",
    "write_default_config",
]
