"""Resolve user color tokens to terminal colors."""
from __future__ import annotations

import re
from typing import Dict, Optional

from rich.color import Color

from src.pacfetch.logs import WarningSink

NO_COLOR_TOKEN = "none"

_HEX_RE = re.compile(r"^[0-9a-f]{6}$")

# Indexes follow the 16-color terminal palette: 0-7 normal, 8-15 bright.
_NAMED_COLORS: Dict[str, int] = {
    "black": 0,
    "red": 1,
    "dark_red": 1,
    "green": 2,
    "dark_green": 2,
    "yellow": 3,
    "dark_yellow": 3,
    "blue": 4,
    "dark_blue": 4,
    "magenta": 5,
    "dark_magenta": 5,
    "cyan": 6,
    "dark_cyan": 6,
    "grey": 7,
    "gray": 7,
    "dark_grey": 8,
    "dark_gray": 8,
    "bright_black": 8,
    "bright_red": 9,
    "bright_green": 10,
    "bright_yellow": 11,
    "bright_blue": 12,
    "bright_magenta": 13,
    "bright_cyan": 14,
    "white": 15,
    "bright_white": 15,
}

PALETTE_NORMAL = tuple(Color.from_ansi(index) for index in range(8))
PALETTE_BRIGHT = tuple(Color.from_ansi(index) for index in range(8, 16))


def parse_hex(token: str) -> Optional[Color]:
    """Parse ``#RRGGBB`` into an exact RGB color, or None when malformed."""

    digits = token[1:] if token.startswith("#") else token
    if not _HEX_RE.match(digits.lower()):
        return None
    return Color.from_rgb(int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16))


def parse_named(token: str) -> Optional[Color]:
    index = _NAMED_COLORS.get(token)
    if index is None:
        return None
    return Color.from_ansi(index)


def parse_color(token: Optional[str], sink: Optional[WarningSink] = None) -> Optional[Color]:
    """
    Resolve a color token to a terminal color.

    ``"none"`` (any case) is the explicit "do not colorize" token and resolves to None
    without a warning. Named colors map onto the indexed terminal palette and
    ``#RRGGBB`` parses to an exact RGB triple. Anything else also resolves to None,
    but a warning is reported through ``sink`` so the element degrades to uncolored
    output instead of failing.

    Parameters:
        token (Optional[str]): Raw token from the configuration or command line.
        sink (Optional[WarningSink]): Destination for parse warnings.

    Returns:
        Optional[Color]: The resolved color, or None for "no color".
    """
    normalized = (token or "").strip().lower()
    if normalized == NO_COLOR_TOKEN:
        return None
    if normalized.startswith("#"):
        color = parse_hex(normalized)
        if color is None and sink is not None:
            sink.warn(f"invalid hex color '{token}', expected #RRGGBB; using no color")
        return color
    color = parse_named(normalized)
    if color is None and sink is not None:
        sink.warn(f"unknown color '{token}'; using no color")
    return color


__all__ = ["PALETTE_BRIGHT", "PALETTE_NORMAL", "parse_color", "parse_hex", "parse_named"]
