"""Adapters bridging the block framework with host runtimes."""

from __future__ import annotations

from .host import BlockHost, EnqueuedAsset, InMemoryHost


__all__ = ["BlockHost", "EnqueuedAsset", "InMemoryHost"]
