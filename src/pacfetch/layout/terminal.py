"""Terminal output, visible-width measurement, and color handling."""
from __future__ import annotations

import os
import re
from typing import Optional

from rich.cells import cell_len, set_cell_size
from rich.color import Color
from rich.color import ColorSystem
from rich.style import Style

ANSI_ESCAPE_RE = re.compile(r"\x1b\[[0-9;]*m")
ANSI_RESET = "\x1b[0m"


def strip_ansi(text: str) -> str:
    """Remove ANSI SGR styling sequences from ``text``."""

    return ANSI_ESCAPE_RE.sub("", text)


def visible_width(text: str) -> int:
    """
    Return the number of terminal cells ``text`` occupies on screen.

    ANSI SGR sequences are discarded before measuring, and wide glyphs are
    counted by their cell width rather than their encoded length.
    """
    if not text:
        return 0
    return cell_len(strip_ansi(text))


def fit_to_cells(text: str, width: int) -> str:
    """Crop or pad ``text`` so it occupies exactly ``width`` cells; styling is dropped."""

    if width <= 0:
        return ""
    return set_cell_size(strip_ansi(text), width)


class AnsiColorMapper:
    """Translate resolved colors into ANSI escape sequences."""

    def __init__(self, *, no_color: bool) -> None:
        """
        Initialize the color mapper.

        Color output is disabled when either the explicit `no_color` flag is set or the
        `NO_COLOR` environment variable is non-empty; the combined state is recorded on
        `self.no_color`.

        Parameters:
            no_color (bool): If True, force-disable all ANSI color output regardless of environment.
        """
        env_no_color = bool(os.environ.get("NO_COLOR"))
        self.no_color = no_color or env_no_color

    def apply(self, color: Optional[Color], text: str, *, bold: bool = False) -> str:
        """
        Apply `color` to `text` using ANSI SGR sequences.

        A `None` color leaves `text` untouched, including any styling already embedded in
        it. A concrete color replaces embedded styling: existing sequences are stripped
        before the new style is applied so the requested color always wins.

        Parameters:
            color (Optional[Color]): Resolved terminal color, or None for "do not colorize".
            text (str): The text to wrap; returned unchanged if empty. With styling
                disabled a concrete color still strips embedded sequences.
            bold (bool): Add the bold attribute alongside the color.

        Returns:
            str: `text` wrapped with the SGR sequence for `color` and a reset, or the original `text`.
        """
        if not text or color is None:
            return text
        if self.no_color:
            return strip_ansi(text)
        style = Style(color=color, bold=bold or None)
        return style.render(strip_ansi(text), color_system=ColorSystem.TRUECOLOR)

    def apply_background(self, color: Color, text: str) -> str:
        """Paint ``text`` on a background of ``color``."""

        if not text or self.no_color:
            return text
        return Style(bgcolor=color).render(text, color_system=ColorSystem.TRUECOLOR)
