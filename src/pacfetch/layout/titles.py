"""Title text resolution."""
from __future__ import annotations

from typing import Optional

from src.datatypes import TitleText
from src.pacfetch import __version__
from src.pacfetch.layout.models import TitleSpec, TitleTemplate

_PACMAN_VERSION_SEPARATOR = " - "


def pacfetch_banner() -> str:
    return f"pacfetch {__version__}"


def resolve_template(template: TitleTemplate, pacman_version: Optional[str]) -> str:
    """
    Turn a title template into display text.

    ``default`` shows the full pacman version line when known and the pacfetch banner
    otherwise; ``pacman_ver`` keeps only the part before ``" - "`` (dropping the
    libalpm suffix) and falls back to ``"Pacman"``.
    """
    kind = template.kind
    if kind is TitleText.EMPTY:
        return ""
    if kind is TitleText.DEFAULT:
        return pacman_version if pacman_version is not None else pacfetch_banner()
    if kind is TitleText.PACMAN_VERSION:
        if pacman_version is None:
            return "Pacman"
        head, separator, _ = pacman_version.partition(_PACMAN_VERSION_SEPARATOR)
        return head.strip() if separator else pacman_version
    if kind is TitleText.PACFETCH_VERSION:
        return pacfetch_banner()
    return template.literal


def resolve_title_text(spec: TitleSpec, pacman_version: Optional[str]) -> str:
    return resolve_template(spec.template, pacman_version)


__all__ = ["pacfetch_banner", "resolve_template", "resolve_title_text"]
