"""Layout engine for the pacfetch stat column."""

from .colors import parse_color
from .compositor import compose, stat_column
from .engine import RenderOptions, build_render_items, render, render_block, render_items
from .models import (
    Declaration,
    LegacyTitleDeclaration,
    RenderItem,
    StatDeclaration,
    StatItem,
    TitleDeclaration,
    TitleItem,
    TitleSpec,
    TitleTemplate,
    UnresolvedDeclaration,
    UnresolvedItem,
)
from .renderer import LineRenderer
from .terminal import AnsiColorMapper, visible_width
from .titles import resolve_title_text
from .widths import compute_content_width, resolve_width

__all__ = [
    "AnsiColorMapper",
    "Declaration",
    "LegacyTitleDeclaration",
    "LineRenderer",
    "RenderItem",
    "RenderOptions",
    "StatDeclaration",
    "StatItem",
    "TitleDeclaration",
    "TitleItem",
    "TitleSpec",
    "TitleTemplate",
    "UnresolvedDeclaration",
    "UnresolvedItem",
    "build_render_items",
    "compose",
    "compute_content_width",
    "parse_color",
    "render",
    "render_block",
    "render_items",
    "resolve_title_text",
    "resolve_width",
    "stat_column",
    "visible_width",
]
