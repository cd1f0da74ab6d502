"""Publication of compiled block assets through the host enqueue API."""

from __future__ import annotations

from collections.abc import Sequence
from enum import Enum
import logging
from typing import TYPE_CHECKING

from .diagnostics import DiagnosticEmitter, NullEmitter
from .manifest import ManifestResolver


if TYPE_CHECKING:  # pragma: no cover - typing only
    from blocksmith.adapters.host import BlockHost


logger = logging.getLogger(__name__)


class AssetKind(Enum):
    """Kinds of assets a block ships, valued by their source extension."""

    SCRIPT = "js"
    STYLE = "css"

    @property
    def extension(self) -> str:
        return self.value


def asset_key(
    kind: AssetKind, logical_name: str = "", *, block_id: str | None = None
) -> str:
    """Return the manifest key of a global asset, or of a block asset when ``block_id`` is set."""
    if block_id is not None:
        return f"resources/blocks/{block_id}/block.{kind.extension}"
    return f"resources/{kind.extension}/{logical_name}.{kind.extension}"


def asset_handle(
    kind: AssetKind, logical_name: str = "", *, block_id: str | None = None
) -> str:
    """Return the host handle naming an enqueued asset."""
    if block_id is not None:
        return f"block-{block_id}-{kind.extension}"
    return f"custom-blocks-{logical_name}"


class AssetPublisher:
    """Resolve assets through the manifest and hand them to the host."""

    def __init__(
        self,
        host: BlockHost,
        resolver: ManifestResolver,
        *,
        base_url: str,
        emitter: DiagnosticEmitter | None = None,
    ) -> None:
        self.host = host
        self.resolver = resolver
        self.base_url = base_url
        self.emitter = emitter or NullEmitter()

    def publish(
        self,
        kind: AssetKind,
        logical_name: str,
        dependencies: Sequence[str] = (),
        *,
        block_specific: bool = False,
        block_id: str | None = None,
    ) -> None:
        """Enqueue one asset, or do nothing when the manifest cannot resolve it."""
        if block_specific and not block_id:
            raise ValueError("Block-specific assets require a block identifier.")
        scope = block_id if block_specific else None
        key = asset_key(kind, logical_name, block_id=scope)

        record = self.resolver.resolve(key)
        if record is None or not record.file:
            logger.debug("No compiled output for %s", key)
            if self.emitter.debug_enabled and self.resolver.load() is not None:
                self.emitter.event("asset_missing", {"key": key})
            return

        url = f"{self.base_url}{record.file.lstrip('/')}"
        version = self.resolver.version(record)
        handle = asset_handle(kind, logical_name, block_id=scope)

        if kind is AssetKind.SCRIPT:
            self.host.enqueue_script(handle, url, list(dependencies), version, True)
        else:
            self.host.enqueue_style(handle, url, [], version)

        if self.emitter.debug_enabled:
            self.emitter.event(
                "asset_enqueued",
                {"kind": kind.extension, "handle": handle, "url": url, "block": scope},
            )


__all__ = ["AssetKind", "AssetPublisher", "asset_handle", "asset_key"]
