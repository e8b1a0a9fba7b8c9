"""Public shim exposing the pacfetch CLI and library surface."""

from __future__ import annotations

from typing import Callable, cast

import src.pacfetch.cli_entry as _cli_entry
from src.pacfetch import __version__
from src.pacfetch.layout import RenderOptions, render, render_block
from src.pacfetch.runner import RunDependencies, RunRequest, RunResult, run

__all__ = (
    "main",
    "run",
    "render",
    "render_block",
    "RenderOptions",
    "RunDependencies",
    "RunRequest",
    "RunResult",
    "__version__",
)

main = _cli_entry.main


if __name__ == "__main__":
    _entry_point = cast(Callable[[], None], main)
    _entry_point()
