"""Two-pass layout engine: declarations and a stats snapshot in, printable lines out."""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from rich.color import Color

from src.pacfetch.layout.colors import parse_color
from src.pacfetch.layout.compositor import compose, stat_column
from src.pacfetch.layout.models import (
    Declaration,
    LegacyTitleDeclaration,
    RenderItem,
    StatDeclaration,
    StatItem,
    TitleDeclaration,
    TitleItem,
    UnresolvedDeclaration,
    UnresolvedItem,
)
from src.pacfetch.layout.renderer import LineRenderer
from src.pacfetch.layout.terminal import AnsiColorMapper
from src.pacfetch.layout.titles import resolve_title_text
from src.pacfetch.layout.widths import compute_content_width, resolve_width
from src.pacfetch.logs import WarningSink
from src.pacfetch.stats import Highlighter, PacmanStats, build_entry

_HIGHLIGHT_COLORS = {
    "ok": Color.from_ansi(10),
    "warn": Color.from_ansi(11),
    "bad": Color.from_ansi(9),
}

LEGACY_TITLE_WARNING = (
    "'title' in [display].stats is deprecated; define [display.titles.<name>] "
    "and list it as 'title.<name>'"
)


@dataclass(frozen=True)
class RenderOptions:
    """Per-run presentation options."""

    glyph: str = ": "
    disk_path: str = "/"
    no_color: bool = False


def value_highlighter(color_mapper: AnsiColorMapper) -> Highlighter:
    def highlight(role: str, text: str) -> str:
        return color_mapper.apply(_HIGHLIGHT_COLORS.get(role), text)

    return highlight


def build_render_items(
    declarations: Sequence[Declaration],
    stats: PacmanStats,
    *,
    sink: WarningSink,
    disk_path: str = "/",
    highlight: Optional[Highlighter] = None,
) -> Tuple[RenderItem, ...]:
    """
    Join declarations with the stats snapshot, preserving declaration order.

    Unresolved declarations stay in the sequence as ``UnresolvedItem`` so order is
    kept intact; each one reports exactly one warning here and renders nothing later.
    The legacy ``title`` form renders normally but reports a deprecation warning.
    """
    items: List[RenderItem] = []
    for declaration in declarations:
        if isinstance(declaration, StatDeclaration):
            entry = build_entry(
                declaration.stat, stats, disk_path=disk_path, highlight=highlight
            )
            items.append(StatItem(entry))
        elif isinstance(declaration, (TitleDeclaration, LegacyTitleDeclaration)):
            if isinstance(declaration, LegacyTitleDeclaration):
                sink.warn(LEGACY_TITLE_WARNING)
            spec = declaration.spec
            items.append(TitleItem(spec, resolve_title_text(spec, stats.pacman_version)))
        elif isinstance(declaration, UnresolvedDeclaration):
            sink.warn(declaration.reason)
            items.append(UnresolvedItem(declaration.token))
        else:  # pragma: no cover - closed union
            raise TypeError(f"Unsupported declaration: {declaration!r}")
    return tuple(items)


def render_items(
    items: Sequence[RenderItem], *, renderer: LineRenderer, sink: WarningSink
) -> List[str]:
    """Run both passes over ``items``: measure the content width, then render."""

    content_width = compute_content_width(items, renderer.glyph)
    lines: List[str] = []
    for item in items:
        if isinstance(item, StatItem):
            lines.append(renderer.render_stat(item.entry))
        elif isinstance(item, TitleItem):
            lines.extend(
                renderer.render_title(
                    item.spec,
                    item.text,
                    resolve_width(item, content_width),
                    parse_color(item.spec.text_color, sink),
                    parse_color(item.spec.line_color, sink),
                )
            )
    return lines


def render(
    declarations: Sequence[Declaration],
    stats: PacmanStats,
    *,
    sink: WarningSink,
    options: RenderOptions = RenderOptions(),
) -> List[str]:
    """Render the stat column (titles and stats only, no art or palette)."""

    return _render(
        declarations,
        stats,
        sink=sink,
        options=options,
        color_mapper=AnsiColorMapper(no_color=options.no_color),
    )


def _render(
    declarations: Sequence[Declaration],
    stats: PacmanStats,
    *,
    sink: WarningSink,
    options: RenderOptions,
    color_mapper: AnsiColorMapper,
) -> List[str]:
    renderer = LineRenderer(color_mapper, glyph=options.glyph)
    items = build_render_items(
        declarations,
        stats,
        sink=sink,
        disk_path=options.disk_path,
        highlight=value_highlighter(color_mapper),
    )
    return render_items(items, renderer=renderer, sink=sink)


def render_block(
    declarations: Sequence[Declaration],
    stats: PacmanStats,
    *,
    art: Sequence[str],
    art_color: str,
    sink: WarningSink,
    options: RenderOptions = RenderOptions(),
) -> List[str]:
    """Render the full block: stat column with palette, composed beside the art."""

    color_mapper = AnsiColorMapper(no_color=options.no_color)
    lines = _render(
        declarations, stats, sink=sink, options=options, color_mapper=color_mapper
    )
    return compose(
        stat_column(lines, color_mapper),
        art,
        art_color=parse_color(art_color, sink),
        color_mapper=color_mapper,
    )


__all__ = [
    "LEGACY_TITLE_WARNING",
    "RenderOptions",
    "build_render_items",
    "render",
    "render_block",
    "render_items",
    "value_highlighter",
]
