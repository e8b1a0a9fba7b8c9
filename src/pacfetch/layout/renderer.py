"""Second layout pass: turn titles and stats into finished text lines."""
from __future__ import annotations

from typing import List, Optional, Tuple

from rich.color import Color

from src.datatypes import TitleAlign, TitleStyle
from src.pacfetch.layout.models import TitleSpec
from src.pacfetch.layout.terminal import (
    AnsiColorMapper,
    fit_to_cells,
    strip_ansi,
    visible_width,
)
from src.pacfetch.stats import MISSING_VALUE, StatEntry

STAT_LABEL_COLOR = Color.from_ansi(11)


def repeat_pattern(pattern: str, width: int) -> str:
    """
    Repeat ``pattern`` end to end and cut the result to exactly ``width`` cells.

    The pattern is repeated in full before cutting, so a multi-character pattern
    keeps its phase from the left edge. An empty pattern fills with spaces. Styling
    sequences in the pattern are dropped; the fill is colored as a whole.
    """
    if width <= 0:
        return ""
    pattern = strip_ansi(pattern)
    unit = visible_width(pattern)
    if unit == 0:
        return " " * width
    repeats = width // unit + 1
    return fit_to_cells(pattern * repeats, width)


def split_padding(total: int, align: TitleAlign) -> Tuple[int, int]:
    """Split ``total`` pad cells into (left, right) for stacked text."""

    if total <= 0:
        return 0, 0
    if align is TitleAlign.CENTER:
        left = total // 2
        return left, total - left
    if align is TitleAlign.RIGHT:
        return total, 0
    return 0, total


def split_fill(total: int, align: TitleAlign) -> Tuple[int, int]:
    """
    Split ``total`` fill cells around embedded text into (left, right).

    Left and right alignment keep a single fill cell on the near side so the text
    never touches a cap; center splits floor/ceil.
    """
    if total <= 0:
        return 0, 0
    if align is TitleAlign.CENTER:
        left = total // 2
        return left, total - left
    edge = min(1, total)
    if align is TitleAlign.RIGHT:
        return total - edge, edge
    return edge, total - edge


class LineRenderer:
    """Render title and stat lines with resolved widths and colors."""

    def __init__(
        self,
        color_mapper: AnsiColorMapper,
        *,
        glyph: str = ": ",
        label_color: Optional[Color] = STAT_LABEL_COLOR,
    ) -> None:
        self._color_mapper = color_mapper
        self.glyph = glyph
        self.label_color = label_color

    def _text(self, color: Optional[Color], text: str) -> str:
        return self._color_mapper.apply(color, text, bold=True)

    def _line(self, color: Optional[Color], text: str) -> str:
        return self._color_mapper.apply(color, text)

    def render_title(
        self,
        spec: TitleSpec,
        text: str,
        width: int,
        text_color: Optional[Color],
        line_color: Optional[Color],
    ) -> List[str]:
        """
        Render a title at ``width`` cells.

        Parameters:
            spec (TitleSpec): Title definition providing style, alignment, pattern and caps.
            text (str): Resolved title text; may be empty.
            width (int): Resolved width from the first pass.
            text_color (Optional[Color]): Color of the text segment; None leaves it as-is.
            line_color (Optional[Color]): Color of fill and caps; None leaves them as-is.

        Returns:
            List[str]: One line for embedded titles; one or two lines for stacked titles
            (the text line is dropped when the text is empty).
        """
        if spec.style is TitleStyle.EMBEDDED:
            return [self._render_embedded(spec, text, width, text_color, line_color)]
        return self._render_stacked(spec, text, width, text_color, line_color)

    def _render_stacked(
        self,
        spec: TitleSpec,
        text: str,
        width: int,
        text_color: Optional[Color],
        line_color: Optional[Color],
    ) -> List[str]:
        lines: List[str] = []
        if text:
            left, right = split_padding(width - visible_width(text), spec.effective_align)
            lines.append(" " * left + self._text(text_color, text) + " " * right)
        lines.append(self._line(line_color, repeat_pattern(spec.line, width)))
        return lines

    def _render_embedded(
        self,
        spec: TitleSpec,
        text: str,
        width: int,
        text_color: Optional[Color],
        line_color: Optional[Color],
    ) -> str:
        caps = visible_width(spec.left_cap) + visible_width(spec.right_cap)
        inner = max(0, width - caps)
        if not text:
            return self._line(line_color, spec.left_cap + repeat_pattern(spec.line, inner) + spec.right_cap)

        label = f" {text} "
        remaining = max(0, inner - visible_width(label))
        left, right = split_fill(remaining, spec.effective_align)
        head = self._line(line_color, spec.left_cap + repeat_pattern(spec.line, left))
        tail = self._line(line_color, repeat_pattern(spec.line, right) + spec.right_cap)
        return f"{head} {self._text(text_color, text)} {tail}"

    def render_stat(self, entry: StatEntry, glyph: Optional[str] = None) -> str:
        """Render ``label + glyph + value``; a missing value shows the placeholder."""

        separator = self.glyph if glyph is None else glyph
        value = entry.value if entry.value is not None else MISSING_VALUE
        label = self._color_mapper.apply(self.label_color, entry.label, bold=True)
        return f"{label}{separator}{value}"


__all__ = ["LineRenderer", "repeat_pattern", "split_fill", "split_padding"]
