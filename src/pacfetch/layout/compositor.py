"""Place rendered stat lines beside the ASCII art block."""
from __future__ import annotations

from itertools import zip_longest
from typing import List, Optional, Sequence

from rich.color import Color

from src.pacfetch.layout.colors import PALETTE_BRIGHT, PALETTE_NORMAL
from src.pacfetch.layout.terminal import AnsiColorMapper, visible_width

ART_MARGIN = " "
GUTTER = "   "
SWATCH = "   "


def palette_rows(color_mapper: AnsiColorMapper) -> List[str]:
    """Two rows of color swatches: the eight normal colors, then the eight bright ones."""

    return [
        "".join(color_mapper.apply_background(color, SWATCH) for color in row)
        for row in (PALETTE_NORMAL, PALETTE_BRIGHT)
    ]


def stat_column(lines: Sequence[str], color_mapper: AnsiColorMapper) -> List[str]:
    """Rendered lines followed by a blank separator and the palette block."""

    return [*lines, "", *palette_rows(color_mapper)]


def compose(
    stat_rows: Sequence[str],
    art: Sequence[str],
    *,
    art_color: Optional[Color],
    color_mapper: AnsiColorMapper,
) -> List[str]:
    """
    Merge the stat column with the art block into the printed block.

    Row *i* is the art row (or blank padding of the art's width once the art runs
    out), the gutter, then stat row *i* (or nothing once the stats run out). The block
    is bracketed by blank lines. Without art the stat rows are emitted unindented.

    Parameters:
        stat_rows (Sequence[str]): Fully rendered stat column, top to bottom.
        art (Sequence[str]): Pre-rendered art rows, already padded to a common width.
        art_color (Optional[Color]): Color applied to every art row; None keeps the art as-is.
        color_mapper (AnsiColorMapper): Mapper used to colorize the art.

    Returns:
        List[str]: Lines ready to print.
    """
    if not art:
        return ["", *stat_rows, ""]

    art_width = max(visible_width(row) for row in art)
    padding = " " * art_width
    block = [""]
    for art_row, stat_row in zip_longest(art, stat_rows):
        left = color_mapper.apply(art_color, art_row) if art_row is not None else padding
        block.append(f"{ART_MARGIN}{left}{GUTTER}{stat_row or ''}")
    block.append("")
    return block


__all__ = ["ART_MARGIN", "GUTTER", "compose", "palette_rows", "stat_column"]
