"""Typer application wiring for the blocksmith CLI."""

from __future__ import annotations

from rich.traceback import Traceback
import typer

from blocksmith.version import get_version

from .commands import init_theme, list_blocks, make_block, show_assets
from .state import debug_enabled, emit_error, get_cli_state, set_cli_state


app = typer.Typer(
    help="Scaffold theme blocks and inspect how they register with the host.",
    context_settings={"help_option_names": ["--help"]},
    no_args_is_help=True,
)


def _print_version(value: bool) -> None:
    if value:
        typer.echo(get_version())
        raise typer.Exit(code=0)


@app.callback()
def _app_root(
    ctx: typer.Context,
    verbose: int = typer.Option(
        0,
        "--verbose",
        "-v",
        count=True,
        help="Increase CLI verbosity. Combine multiple times for additional diagnostics.",
    ),
    debug: bool = typer.Option(
        False,
        "--debug/--no-debug",
        help="Report skipped blocks and assets, and show full tracebacks.",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        help="Print the blocksmith version and exit.",
        is_eager=True,
        callback=_print_version,
    ),
) -> None:
    state = set_cli_state(verbosity=verbose, debug=debug)
    state.events.clear()
    ctx.obj = state


app.command(name="make-block")(make_block)
app.command(name="init")(init_theme)
app.command(name="list")(list_blocks)
app.command(name="assets")(show_assets)


def main() -> None:
    """Entry point compatible with console scripts."""
    try:
        app()
    except typer.Exit:
        raise
    except KeyboardInterrupt as exc:
        if debug_enabled():
            raise
        emit_error("Operation cancelled by user.", exception=exc)
        raise typer.Exit(code=1) from exc
    except SystemExit:
        raise
    except Exception as exc:  # pragma: no cover - unexpected failures
        state = get_cli_state()
        if state.show_tracebacks:
            tb = Traceback.from_exception(
                type(exc),
                exc,
                exc.__traceback__,
                show_locals=state.verbosity >= 2,
            )
            state.err_console.print(tb)
        else:
            emit_error(str(exc), exception=exc)
        raise typer.Exit(code=1) from exc


__all__ = ["app", "main"]
