"""Implementation of the `blocksmith make-block` and `blocksmith init` commands."""

from __future__ import annotations

from pathlib import Path

import typer

from blocksmith.core.exceptions import BlocksmithError
from blocksmith.core.scaffold import BlockScaffolder, title_case

from .._options import BlockNameArgument, ThemeDirOption
from ..diagnostics import CliEmitter
from ..state import emit_error, get_cli_state
from ..utils import display_path, load_config_or_exit


def make_block(name: BlockNameArgument, theme_dir: ThemeDirOption = Path(".")) -> None:
    """Create a new block and add it to the registry and the import aggregator."""
    state = get_cli_state()
    config = load_config_or_exit(theme_dir)
    typer.echo(f"Creating block: {title_case(name)}")

    try:
        scaffolder = BlockScaffolder(config, emitter=CliEmitter(state))
        result = scaffolder.scaffold(name)
    except BlocksmithError as exc:
        emit_error(f"Error creating block: {exc}", exception=exc)
        raise typer.Exit(code=1) from exc

    for path in result.patched:
        typer.echo(f"Updated: {display_path(path, config.theme_dir)}")

    typer.echo("")
    typer.echo(f"Block '{result.title}' created successfully!")
    typer.echo(f"Location: {display_path(config.block_dir(result.block_id), config.theme_dir)}")
    for path in result.created:
        typer.echo(f"  - {display_path(path, config.theme_dir)}")
    if result.warnings:
        typer.echo(f"Add '{result.block_id}' by hand where the patches above failed.")
    typer.echo("Next: run 'npm run build' to compile the block assets.")


def init_theme(theme_dir: ThemeDirOption = Path(".")) -> None:
    """Create the block registry and import aggregator when they are missing."""
    config = load_config_or_exit(theme_dir)
    try:
        created = BlockScaffolder(config).init_theme()
    except BlocksmithError as exc:
        emit_error(f"Error initialising theme: {exc}", exception=exc)
        raise typer.Exit(code=1) from exc

    if not created:
        typer.echo("Theme already initialised.")
        return
    for path in created:
        typer.echo(f"Created: {display_path(path, config.theme_dir)}")


__all__ = ["init_theme", "make_block"]
