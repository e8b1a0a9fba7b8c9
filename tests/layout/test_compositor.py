from __future__ import annotations

from rich.color import Color

from src.pacfetch.layout import AnsiColorMapper, compose, stat_column
from src.pacfetch.layout.compositor import palette_rows

BLANK_PALETTE_ROW = " " * 24


def test_palette_rows_without_color_are_blank_swatches(plain_mapper: AnsiColorMapper) -> None:
    assert palette_rows(plain_mapper) == [BLANK_PALETTE_ROW, BLANK_PALETTE_ROW]


def test_palette_rows_paint_sixteen_backgrounds(color_mapper: AnsiColorMapper) -> None:
    normal, bright = palette_rows(color_mapper)

    assert normal.startswith("\x1b[40m   \x1b[0m")
    assert normal.count("\x1b[0m") == 8
    assert bright.startswith("\x1b[100m   \x1b[0m")
    assert bright.endswith("\x1b[107m   \x1b[0m")


def test_stat_column_appends_separator_and_palette(plain_mapper: AnsiColorMapper) -> None:
    assert stat_column(["a", "b"], plain_mapper) == [
        "a",
        "b",
        "",
        BLANK_PALETTE_ROW,
        BLANK_PALETTE_ROW,
    ]


def test_compose_without_art_emits_stats_unindented(plain_mapper: AnsiColorMapper) -> None:
    assert compose(["a", "b"], [], art_color=None, color_mapper=plain_mapper) == ["", "a", "b", ""]


def test_compose_pads_stat_rows_past_the_art(plain_mapper: AnsiColorMapper) -> None:
    block = compose(["x", "y"], ["ab"], art_color=None, color_mapper=plain_mapper)

    assert block == ["", " ab   x", "      y", ""]


def test_compose_keeps_art_rows_past_the_stats(plain_mapper: AnsiColorMapper) -> None:
    block = compose(["x"], ["ab", "cd"], art_color=None, color_mapper=plain_mapper)

    assert block == ["", " ab   x", " cd   ", ""]


def test_compose_colors_art_rows(color_mapper: AnsiColorMapper) -> None:
    block = compose(["x"], ["ab"], art_color=Color.from_ansi(3), color_mapper=color_mapper)

    assert block == ["", " \x1b[33mab\x1b[0m   x", ""]
