from __future__ import annotations

from src.datatypes import TitleStyle, TitleText, TitleWidth, TitleWidthMode
from src.pacfetch.layout import (
    StatItem,
    TitleItem,
    TitleSpec,
    TitleTemplate,
    UnresolvedItem,
    compute_content_width,
    resolve_width,
)
from src.pacfetch.layout.widths import stat_text, title_footprint
from src.pacfetch.stats import StatEntry, StatId


def _stat(label: str, value: str | None) -> StatItem:
    return StatItem(StatEntry(StatId.INSTALLED, label, value))


def _title(
    text: str,
    *,
    style: TitleStyle = TitleStyle.STACKED,
    width: TitleWidth = TitleWidth(),
    left_cap: str = "",
    right_cap: str = "",
) -> TitleItem:
    spec = TitleSpec(
        name="t",
        template=TitleTemplate(TitleText.LITERAL, text),
        style=style,
        width=width,
        left_cap=left_cap,
        right_cap=right_cap,
    )
    return TitleItem(spec, text)


def test_stat_text_uses_placeholder_for_missing_value() -> None:
    assert stat_text(StatEntry(StatId.INSTALLED, "Installed", None), ": ") == "Installed: -"
    assert stat_text(StatEntry(StatId.INSTALLED, "Installed", "12"), " -> ") == "Installed -> 12"


def test_content_width_is_widest_item() -> None:
    items = (
        _title("Pacman v7.1.0 - libalpm v16.0.1"),
        _stat("Installed", "1268"),
    )

    assert compute_content_width(items, ": ") == 31


def test_content_width_ignores_ansi_in_values() -> None:
    items = (_stat("Disk", "\x1b[92m(50%)\x1b[0m"),)

    assert compute_content_width(items, ": ") == len("Disk: (50%)")


def test_content_width_of_empty_layout_is_one() -> None:
    assert compute_content_width((), ": ") == 1
    assert compute_content_width((UnresolvedItem("bogus"),), ": ") == 1


def test_unresolved_items_do_not_contribute() -> None:
    items = (_stat("A", "1"), UnresolvedItem("a-very-long-unknown-stat-name"))

    assert compute_content_width(items, ": ") == 4


def test_embedded_footprint_counts_caps_and_padding() -> None:
    with_text = _title("X", style=TitleStyle.EMBEDDED, left_cap="├", right_cap="┤")
    without_text = _title("", style=TitleStyle.EMBEDDED, left_cap="├", right_cap="┤")

    assert title_footprint(with_text) == 5
    assert title_footprint(without_text) == 3


def test_stacked_footprint_is_text_width() -> None:
    assert title_footprint(_title("日本")) == 4
    assert title_footprint(_title("")) == 0


def test_resolve_width_modes() -> None:
    assert resolve_width(_title("abc"), 40) == 3
    assert resolve_width(_title("abc", width=TitleWidth(TitleWidthMode.CONTENT)), 40) == 40
    assert resolve_width(_title("abc", width=TitleWidth.fixed(12)), 40) == 12


def test_resolve_width_never_drops_below_one() -> None:
    assert resolve_width(_title(""), 40) == 1
    assert resolve_width(_title("abc", width=TitleWidth.fixed(0)), 40) == 1
