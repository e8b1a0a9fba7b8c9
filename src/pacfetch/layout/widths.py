"""First layout pass: width measurement."""
from __future__ import annotations

from typing import Iterable

from src.datatypes import TitleStyle, TitleWidthMode
from src.pacfetch.layout.models import RenderItem, StatItem, TitleItem
from src.pacfetch.layout.terminal import visible_width
from src.pacfetch.stats import MISSING_VALUE, StatEntry

# Embedded titles keep one space either side of the text.
EMBEDDED_TEXT_PADDING = 2
# An embedded title without text still draws at least one fill cell.
EMBEDDED_MIN_FILL = 1


def stat_text(entry: StatEntry, glyph: str) -> str:
    value = entry.value if entry.value is not None else MISSING_VALUE
    return f"{entry.label}{glyph}{value}"


def title_footprint(item: TitleItem) -> int:
    """Smallest width a title needs to show its text and decorations."""

    spec = item.spec
    if spec.style is TitleStyle.STACKED:
        return visible_width(item.text)
    caps = visible_width(spec.left_cap) + visible_width(spec.right_cap)
    if item.text:
        return caps + EMBEDDED_TEXT_PADDING + visible_width(item.text)
    return caps + EMBEDDED_MIN_FILL


def item_width(item: RenderItem, glyph: str) -> int:
    if isinstance(item, StatItem):
        return visible_width(stat_text(item.entry, glyph))
    if isinstance(item, TitleItem):
        return title_footprint(item)
    return 0


def compute_content_width(items: Iterable[RenderItem], glyph: str) -> int:
    """
    Return the shared content width of ``items``.

    This is the widest visible footprint over the whole ordered list: full stat lines
    and the minimum footprint of every title. The result is at least 1 so that an
    empty layout still yields a drawable width.
    """
    return max((item_width(item, glyph) for item in items), default=0) or 1


def resolve_width(item: TitleItem, content_width: int) -> int:
    """Map a title's width setting onto columns, given the pass-1 content width."""

    width = item.spec.width
    if width.mode is TitleWidthMode.CONTENT:
        columns = content_width
    elif width.mode is TitleWidthMode.FIXED:
        columns = width.columns
    else:
        columns = title_footprint(item)
    return max(1, columns)


__all__ = [
    "compute_content_width",
    "item_width",
    "resolve_width",
    "stat_text",
    "title_footprint",
]
