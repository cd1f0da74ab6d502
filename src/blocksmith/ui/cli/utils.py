"""Helpers shared by CLI commands."""

from __future__ import annotations

from pathlib import Path

import typer

from blocksmith.core.config import ThemeConfig, load_theme_config
from blocksmith.core.exceptions import BlocksmithError

from .state import emit_error, get_cli_state


def load_config_or_exit(theme_dir: Path, *, theme_uri: str | None = None) -> ThemeConfig:
    """Load the theme configuration, turning failures into exit code 1."""
    state = get_cli_state()
    try:
        return load_theme_config(
            theme_dir,
            theme_uri=theme_uri,
            debug=True if state.show_tracebacks else None,
        )
    except BlocksmithError as exc:
        emit_error(str(exc), exception=exc)
        raise typer.Exit(code=1) from exc


def display_path(path: Path, root: Path) -> str:
    """Return ``path`` relative to ``root`` when possible."""
    try:
        return path.relative_to(root).as_posix()
    except ValueError:
        return path.as_posix()


__all__ = ["display_path", "load_config_or_exit"]
