"""Shared Typer option definitions for CLI commands."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer


THEME_PANEL = "Theme"

ThemeDirOption = Annotated[
    Path,
    typer.Option(
        "--theme-dir",
        "-t",
        help="Theme root holding blocksmith.toml, the block sources, and the build output.",
        exists=True,
        file_okay=False,
        dir_okay=True,
        resolve_path=True,
        rich_help_panel=THEME_PANEL,
    ),
]

ThemeUriOption = Annotated[
    str | None,
    typer.Option(
        "--theme-uri",
        help="Public URL of the theme, used to build asset URLs.",
        rich_help_panel=THEME_PANEL,
    ),
]

BlockNameArgument = Annotated[
    str,
    typer.Argument(
        metavar="NAME",
        help="Human-readable block name, e.g. 'Hero Section'.",
    ),
]
