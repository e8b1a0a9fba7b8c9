"""Typed declarations and render items shared by both layout passes."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from src.datatypes import (
    TitleAlign,
    TitleConfig,
    TitleStyle,
    TitleText,
    TitleWidth,
)
from src.pacfetch.stats import StatEntry, StatId


@dataclass(frozen=True)
class TitleTemplate:
    """Parsed title text: one of the symbolic templates or a literal string."""

    kind: TitleText
    literal: str = ""

    @classmethod
    def parse(cls, raw: str) -> "TitleTemplate":
        for kind in (
            TitleText.DEFAULT,
            TitleText.PACMAN_VERSION,
            TitleText.PACFETCH_VERSION,
            TitleText.EMPTY,
        ):
            if raw == kind.value:
                return cls(kind)
        return cls(TitleText.LITERAL, raw)


@dataclass(frozen=True)
class TitleSpec:
    """Validated, immutable definition of a named title."""

    name: str
    template: TitleTemplate
    text_color: str = "bright_yellow"
    line_color: str = "none"
    style: TitleStyle = TitleStyle.STACKED
    width: TitleWidth = TitleWidth()
    align: Optional[TitleAlign] = None
    line: str = "-"
    left_cap: str = ""
    right_cap: str = ""

    @classmethod
    def from_config(cls, name: str, config: TitleConfig) -> "TitleSpec":
        return cls(
            name=name,
            template=TitleTemplate.parse(config.text),
            text_color=config.text_color,
            line_color=config.line_color,
            style=config.style,
            width=config.width,
            align=config.align,
            line=config.line,
            left_cap=config.left_cap,
            right_cap=config.right_cap,
        )

    @property
    def effective_align(self) -> TitleAlign:
        if self.align is not None:
            return self.align
        if self.style is TitleStyle.EMBEDDED:
            return TitleAlign.CENTER
        return TitleAlign.LEFT


# Declarations: the ``[display].stats`` list resolved once at config-load time.


@dataclass(frozen=True)
class StatDeclaration:
    stat: StatId


@dataclass(frozen=True)
class TitleDeclaration:
    spec: TitleSpec


@dataclass(frozen=True)
class LegacyTitleDeclaration:
    """The bare ``title`` entry backed by ``[display.title]``."""

    spec: TitleSpec


@dataclass(frozen=True)
class UnresolvedDeclaration:
    """An entry that names no known stat or title; kept to report it in order."""

    token: str
    reason: str


Declaration = Union[
    StatDeclaration, TitleDeclaration, LegacyTitleDeclaration, UnresolvedDeclaration
]


# Render items: declarations joined with the stats snapshot.


@dataclass(frozen=True)
class StatItem:
    entry: StatEntry


@dataclass(frozen=True)
class TitleItem:
    spec: TitleSpec
    text: str


@dataclass(frozen=True)
class UnresolvedItem:
    name: str


RenderItem = Union[StatItem, TitleItem, UnresolvedItem]


__all__ = [
    "Declaration",
    "LegacyTitleDeclaration",
    "RenderItem",
    "StatDeclaration",
    "StatItem",
    "TitleDeclaration",
    "TitleItem",
    "TitleSpec",
    "TitleTemplate",
    "UnresolvedDeclaration",
    "UnresolvedItem",
]
