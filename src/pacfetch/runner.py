"""Run orchestration shared by the CLI and library callers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from rich.console import Console

from src.config_loader import (
    config_path,
    load_config,
    parse_declarations,
    requested_stats,
    write_default_config,
)
from src.datatypes import AppConfig
from src.pacfetch.art import get_art
from src.pacfetch.collect import StatsCollector
from src.pacfetch.layout import RenderOptions, render, render_block
from src.pacfetch.logs import LoggerSink, WarningSink
from src.pacfetch.stats import PacmanStats, StatId, stats_to_json


@dataclass
class RunRequest:
    config_path: str | None = None
    ascii_override: str | None = None
    color_override: str | None = None
    json_output: bool = False
    debug: bool = False
    no_color: bool = False
    show_spinner: bool = False
    console: Console | None = None
    config: AppConfig | None = None


@dataclass
class RunResult:
    lines: List[str]
    config: AppConfig
    stats: PacmanStats


@dataclass(slots=True)
class RunDependencies:
    """Services used by a run; tests swap in fakes."""

    collector: StatsCollector = field(default_factory=StatsCollector)
    sink: WarningSink = field(default_factory=LoggerSink)


def load_run_config(path: str | None = None) -> AppConfig:
    """Load ``path``, or the user config file after writing the default one if absent."""
    if path is not None:
        return load_config(path)
    target = config_path()
    write_default_config(target)
    return load_config(target)


def _apply_overrides(cfg: AppConfig, request: RunRequest) -> AppConfig:
    if request.ascii_override is not None:
        cfg.display.ascii = request.ascii_override
    if request.color_override is not None:
        cfg.display.ascii_color = request.color_override
    return cfg


def run(request: RunRequest, *, dependencies: RunDependencies | None = None) -> RunResult:
    """
    Load config, collect stats, and produce the lines to print.

    JSON mode returns a single pretty-printed JSON document. Debug mode returns the
    plain stat column without art, palette or colors. Otherwise the full block is
    composed beside the configured art.
    """
    deps = dependencies or RunDependencies()
    cfg = request.config if request.config is not None else load_run_config(request.config_path)
    cfg = _apply_overrides(cfg, request)
    declarations = parse_declarations(cfg.display)
    wanted = requested_stats(declarations)

    stats = _collect(deps.collector, wanted, cfg, request)

    if request.json_output:
        return RunResult([stats_to_json(stats)], cfg, stats)

    options = RenderOptions(
        glyph=cfg.display.glyph.glyph,
        disk_path=cfg.disk.path,
        no_color=request.no_color or request.debug,
    )
    if request.debug:
        lines = render(declarations, stats, sink=deps.sink, options=options)
        return RunResult([*lines, ""], cfg, stats)

    lines = render_block(
        declarations,
        stats,
        art=get_art(cfg.display.ascii),
        art_color=cfg.display.ascii_color,
        sink=deps.sink,
        options=options,
    )
    return RunResult(lines, cfg, stats)


def _collect(
    collector: StatsCollector, wanted: List[StatId], cfg: AppConfig, request: RunRequest
) -> PacmanStats:
    if not request.show_spinner or request.json_output or request.debug:
        return collector.collect(wanted, disk_path=cfg.disk.path)
    console = request.console or Console(stderr=True)
    with console.status("Gathering stats", spinner="dots"):
        return collector.collect(wanted, disk_path=cfg.disk.path)


__all__ = ["RunDependencies", "RunRequest", "RunResult", "load_run_config", "run"]
