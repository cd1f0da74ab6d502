"""CLI helpers inspecting declared blocks and their compiled assets."""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Annotated

import typer

from blocksmith.adapters.host import InMemoryHost
from blocksmith.core.assets import AssetKind, asset_key
from blocksmith.core.exceptions import BlocksmithError
from blocksmith.core.lifecycle import BlockState, LifecyclePhase, check_block
from blocksmith.core.runtime import ThemeRuntime

from .._options import ThemeDirOption, ThemeUriOption
from ..diagnostics import CliEmitter
from ..state import emit_error, get_cli_state
from ..utils import load_config_or_exit


class PhaseChoice(str, Enum):
    """Lifecycle phases selectable from the command line."""

    editor = "editor"
    frontend = "frontend"

    @property
    def phase(self) -> LifecyclePhase:
        return LifecyclePhase.EDITOR if self is PhaseChoice.editor else LifecyclePhase.FRONTEND


PhaseOption = Annotated[
    PhaseChoice | None,
    typer.Option(
        "--phase",
        help="Only fire this lifecycle phase (both phases run by default).",
        case_sensitive=False,
    ),
]

_STATE_LABELS = {
    BlockState.ABSENT: "missing folder",
    BlockState.INVALID: "missing block.json",
    BlockState.UNCHECKED: "ok",
}

_SKIP_SUMMARY = (
    ("block_invalid_id", "malformed identifier"),
    ("block_absent", "missing folder"),
    ("block_invalid", "missing block.json"),
    ("asset_missing", "asset not in manifest"),
)


def _summarise_skipped() -> None:
    state = get_cli_state()
    counts: list[str] = []
    for name, label in _SKIP_SUMMARY:
        events = state.consume_events(name)
        if events:
            counts.append(f"{len(events)} {label}")
    if counts:
        typer.echo(f"Skipped: {', '.join(counts)}")


def _runtime_or_exit(theme_dir: Path, theme_uri: str | None, host: InMemoryHost) -> ThemeRuntime:
    state = get_cli_state()
    config = load_config_or_exit(theme_dir, theme_uri=theme_uri)
    try:
        return ThemeRuntime.create(config, host, emitter=CliEmitter(state))
    except BlocksmithError as exc:
        emit_error(f"Unable to load the block registry: {exc}", exception=exc)
        raise typer.Exit(code=1) from exc


def list_blocks(theme_dir: ThemeDirOption = Path(".")) -> None:
    """Print the declared blocks with their on-disk and build status."""
    from rich import box
    from rich.table import Table

    runtime = _runtime_or_exit(theme_dir, None, InMemoryHost())
    registry = runtime.registry
    resolver = runtime.resolver

    table = Table(
        title=f"Blocks ({registry.namespace()})",
        box=box.SQUARE,
        show_edge=True,
        header_style="bold cyan",
    )
    table.add_column("Block", style="magenta")
    table.add_column("Files", style="green")
    table.add_column("Script", justify="center")
    table.add_column("Style", justify="center")

    blocks = registry.list()
    if not blocks:
        table.add_row("-", "No blocks declared", "", "")
    for block_id in blocks:
        status = check_block(runtime.config.blocks_dir, block_id)
        compiled = [
            "yes" if resolver.resolve(asset_key(kind, block_id=block_id)) else "no"
            for kind in (AssetKind.SCRIPT, AssetKind.STYLE)
        ]
        table.add_row(block_id, _STATE_LABELS[status], *compiled)

    get_cli_state().console.print(table)
    if resolver.load() is None:
        typer.echo("No build manifest found; run the build to compile block assets.")


def show_assets(
    theme_dir: ThemeDirOption = Path("."),
    theme_uri: ThemeUriOption = None,
    phase: PhaseOption = None,
) -> None:
    """Register the blocks against an in-memory host and list the enqueued assets."""
    from rich import box
    from rich.table import Table

    host = InMemoryHost()
    runtime = _runtime_or_exit(theme_dir, theme_uri, host)
    runtime.boot()

    phases = [phase.phase] if phase is not None else list(LifecyclePhase)
    table = Table(
        title="Enqueued assets",
        box=box.SQUARE,
        show_edge=True,
        header_style="bold cyan",
    )
    table.add_column("Phase", style="magenta")
    table.add_column("Handle", style="green")
    table.add_column("Version")
    table.add_column("URL")

    for selected in phases:
        start = len(host.enqueued)
        host.do_action(selected.value)
        for asset in host.enqueued[start:]:
            table.add_row(selected.name.lower(), asset.handle, asset.version, asset.url)

    if host.enqueued:
        get_cli_state().console.print(table)
    else:
        typer.echo("No assets resolved. Run the build before publishing block assets.")
    _summarise_skipped()


__all__ = ["PhaseChoice", "list_blocks", "show_assets"]
