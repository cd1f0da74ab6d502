"""CLI command implementations exposed via `blocksmith.ui.cli`."""

from __future__ import annotations

from .blocks import list_blocks, show_assets
from .make import init_theme, make_block


__all__ = ["init_theme", "list_blocks", "make_block", "show_assets"]
