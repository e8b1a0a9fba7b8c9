"""Click CLI wiring and entry point for pacfetch."""

from __future__ import annotations

import logging
import shlex
import sys
from typing import Any, Dict, List

import click

from src.pacfetch import __version__
from src.pacfetch.logs import configure_logging
from src.pacfetch.runner import RunDependencies, RunRequest, load_run_config, run

logger = logging.getLogger("pacfetch.cli")

_EPILOG = """\
\b
Examples:
  pacfetch                       Show stats beside the default art
  pacfetch --ascii PACMAN_SMALL  Use the small built-in art
  pacfetch --ascii NONE          Stats only
  pacfetch --color '#ffcc00'     Recolor the art
  pacfetch --json                Machine-readable stats
"""


@click.command(
    context_settings={"help_option_names": ["-h", "--help"]},
    epilog=_EPILOG,
)
@click.option(
    "--ascii",
    "ascii_art",
    default=None,
    help="Use custom ASCII art (path, built-in name, or NONE).",
)
@click.option(
    "--color",
    "art_color",
    default=None,
    help="Override ASCII art color (name, hex #RRGGBB, or none).",
)
@click.option("--json", "json_output", is_flag=True, help="Output stats as JSON.")
@click.option("-d", "--debug", is_flag=True, help="Plain output with collector timings on stderr.")
@click.option("--no-color", is_flag=True, help="Disable ANSI colour output.")
@click.option(
    "--config",
    "config_path",
    default=None,
    type=click.Path(dir_okay=False),
    help="Read configuration from this file instead of ~/.config/pacfetch/pacfetch.toml.",
)
@click.version_option(
    __version__, "-V", "--version", prog_name="pacfetch", message="%(prog)s %(version)s"
)
@click.pass_context
def main(
    ctx: click.Context,
    ascii_art: str | None,
    art_color: str | None,
    json_output: bool,
    debug: bool,
    no_color: bool,
    config_path: str | None,
) -> None:
    """A neofetch style summary of pacman statistics."""

    configure_logging(debug=debug)
    cfg = load_run_config(config_path)
    params: Dict[str, Any] = {
        "ascii_art": ascii_art,
        "art_color": art_color,
        "json_output": json_output,
        "debug": debug,
        "no_color": no_color,
    }
    if cfg.default_args.strip():
        params = _merge_default_args(ctx, cfg.default_args, params)
        configure_logging(debug=params["debug"])

    dependencies = ctx.obj if isinstance(ctx.obj, RunDependencies) else None
    request = RunRequest(
        config_path=config_path,
        ascii_override=params["ascii_art"],
        color_override=params["art_color"],
        json_output=params["json_output"],
        debug=params["debug"],
        no_color=params["no_color"],
        show_spinner=sys.stderr.isatty(),
        config=cfg,
    )
    result = run(request, dependencies=dependencies)
    for line in result.lines:
        click.echo(line)


def _explicit_args(params: Dict[str, Any]) -> List[str]:
    args: List[str] = []
    if params["debug"]:
        args.append("--debug")
    if params["ascii_art"] is not None:
        args.extend(["--ascii", params["ascii_art"]])
    if params["art_color"] is not None:
        args.extend(["--color", params["art_color"]])
    if params["json_output"]:
        args.append("--json")
    if params["no_color"]:
        args.append("--no-color")
    return args


def _merge_default_args(
    ctx: click.Context, default_args: str, params: Dict[str, Any]
) -> Dict[str, Any]:
    """
    Re-parse ``default_args`` from the config followed by the flags given on the
    command line, so explicit flags win for valued options.

    A value that does not parse is logged and the command line is used as given.
    """
    try:
        args = shlex.split(default_args) + _explicit_args(params)
        merged = ctx.command.make_context(ctx.info_name or "pacfetch", args)
    except (ValueError, click.ClickException) as exc:
        logger.warning("invalid default_args in config: %r (%s)", default_args, exc)
        return params
    return {key: merged.params[key] for key in params}


__all__ = ["main"]
