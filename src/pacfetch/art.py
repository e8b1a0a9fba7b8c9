"""ASCII art sources shown beside the stat column."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Sequence, Tuple

from src.pacfetch.layout.terminal import visible_width
from src.pacfetch.logs import invoking_user_home

logger = logging.getLogger("pacfetch.art")

NO_ART = "NONE"
DEFAULT_ART = "PACMAN_DEFAULT"

# Modified from https://emojicombos.com/pacman
PACMAN_DEFAULT: Tuple[str, ...] = (
    "⠀⠀⠀⠀⠀⠀⠀⠀⠀⠀⠀⢀⣀⣤⣤⣤⣤⣤⣤⣤⣤⣀⣀⠀⠀⠀⠀⠀⠀⠀⠀⠀⠀⠀⠀⠀⠀⠀⠀",
    "⠀⠀⠀⠀⠀⠀⠀⢀⣤⣶⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣶⣤⡀⠀⠀⠀⠀⠀⠀⠀⠀⠀⠀⠀⠀",
    "⠀⠀⠀⠀⠀⣠⣾⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣷⡄  ⠀⠀⠀⠀⠀⠀⠀⠀",
    "⠀⠀⠀⢠⣾⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⠟⠛⠻⣿⣿⣿⣿⣿⣿⣿⣿⣆⠀⠀ ⠀⠀⠀⠀⠀⠀",
    "⠀⠀⣰⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⡇⠀⠀⠀⢸⣿⣿⣿⣿⣿⣿⣿⡿⠃⠀⠀⠀⠀⠀⠀⠀⠀",
    "⠀⣸⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣦⣤⣴⣿⣿⣿⣿⣿⡿⠛⠁⠀⠀⠀⠀⠀⠀⠀⠀⠀⠀",
    "⢰⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⠿⠛⠁⠀⠀⠀⠀⠀⠀⠀⠀⠀⠀⠀⠀⠀",
    "⣾⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⠿⠋⠁⠀⠀⠀⣴⣿⣿⣿⣆⠀⠀⠀⣴⣿⣿⣿⣆",
    "⢿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣷⣦⣄⠀⠀⠀⠀⢿⣿⣿⣿⠏⠀⠀⠀⢿⣿⣿⣿⠏",
    "⠸⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣦⣄⠀⠀⠉⠉⠁⠀ ⠀⠀⠀⠉⠉⠁⠀",
    "⠀⢻⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣶⣄⡀⠀⠀⠀⠀⠀⠀⠀⠀⠀⠀",
    "⠀⠀⠻⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣷⡄⠀⠀⠀⠀⠀⠀⠀⠀",
    "⠀⠀⠀⠙⢿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⡿⠋⠀⠀⠀⠀⠀⠀⠀⠀⠀",
    "⠀⠀⠀⠀⠀⠛⢿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⡿⠋⠁⠀⠀⠀⠀⠀⠀⠀⠀⠀⠀",
    "⠀⠀⠀⠀⠀⠀⠀⠉⠻⢿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⣿⠿⠛⠉⠀⠀⠀⠀⠀⠀⠀⠀⠀⠀⠀⠀⠀",
    "⠀⠀⠀⠀⠀⠀⠀⠀⠀⠀⠀⠉⠙⠛⠛⠛⠛⠛⠛⠋⠉⠀⠀⠀⠀⠀ ⠀⠀⠀⠀⠀⠀⠀⠀⠀⠀⠀⠀",
)

# From pacman -v
PACMAN_SMALL: Tuple[str, ...] = (
    "  .--.                ",
    " / _.-' .-.  .-.  .-. ",
    " \\  '-. '-'  '-'  '-' ",
    "  '--'                ",
)

BUILTIN_ART: Dict[str, Tuple[str, ...]] = {
    "PACMAN_DEFAULT": PACMAN_DEFAULT,
    "PACMAN_SMALL": PACMAN_SMALL,
}


def normalize_width(lines: Sequence[str]) -> List[str]:
    """Right-pad every row to the widest visible row so the gutter lines up."""

    width = max((visible_width(line) for line in lines), default=0)
    return [line + " " * (width - visible_width(line)) for line in lines]


def _expand_home(path: str) -> str:
    if path == "~" or path.startswith("~/"):
        home = invoking_user_home() or Path.home()
        return str(home) + path[1:]
    return path


def load_from_file(path: str) -> List[str]:
    """Read art rows from ``path``; unreadable files fall back to the default art."""

    expanded = _expand_home(path)
    try:
        contents = Path(expanded).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning("Failed to load ASCII art from '%s': %s", expanded, exc)
        return list(PACMAN_DEFAULT)
    return contents.splitlines()


def _looks_like_path(spec: str) -> bool:
    return spec.startswith(("/", "~", "."))


def get_art(spec: str) -> List[str]:
    """
    Resolve the ``[display].ascii`` setting to art rows.

    ``NONE`` disables art, text containing newlines is used as inline art, path-like
    values are read from disk, and built-in names select bundled art. Unknown names
    fall back to the default art.
    """
    if spec == NO_ART:
        return []
    if "\n" in spec:
        return normalize_width(spec.splitlines())
    if _looks_like_path(spec):
        return normalize_width(load_from_file(spec))
    art = BUILTIN_ART.get(spec)
    if art is None:
        logger.warning("Unknown built-in ASCII art '%s'; using %s", spec, DEFAULT_ART)
        art = PACMAN_DEFAULT
    return normalize_width(art)


__all__ = ["BUILTIN_ART", "NO_ART", "PACMAN_DEFAULT", "PACMAN_SMALL", "get_art", "normalize_width"]
