"""Ordered registry of the blocks a theme declares."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
import logging
from pathlib import Path
import re

from .diagnostics import DiagnosticEmitter, NullEmitter
from .exceptions import InvalidBlockIdentifierError
from .sources import read_registry_source


logger = logging.getLogger(__name__)

BLOCK_ID_PATTERN = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")


def validate_block_id(value: str) -> str:
    """Return ``value`` unchanged when it is a valid block identifier."""
    if not isinstance(value, str) or not BLOCK_ID_PATTERN.match(value):
        raise InvalidBlockIdentifierError(
            f"Invalid block identifier {value!r}: use lowercase letters, digits and hyphens."
        )
    return value


class BlockRegistry:
    """Authoritative, duplicate-free list of block identifiers.

    Insertion order is the registration order. The namespace prefixes every
    block name presented to the host.
    """

    def __init__(self, namespace: str, blocks: Iterable[str] = ()) -> None:
        if not namespace:
            raise ValueError("Block namespace cannot be empty.")
        self._namespace = namespace
        self._blocks: list[str] = []
        for block_id in blocks:
            self.add(block_id)

    @classmethod
    def from_source(
        cls,
        path: Path,
        *,
        default_namespace: str,
        emitter: DiagnosticEmitter | None = None,
    ) -> BlockRegistry:
        """Build a registry from the ``BLOCKS`` list declared in ``path``.

        A missing file gives an empty registry so a theme without blocks still
        boots. Malformed identifiers are skipped so the remaining blocks still
        register.
        """
        if not path.is_file():
            return cls(default_namespace)
        emitter = emitter or NullEmitter()
        declaration = read_registry_source(path)
        registry = cls(declaration.namespace or default_namespace)
        for block_id in declaration.blocks:
            try:
                registry.add(block_id)
            except InvalidBlockIdentifierError as exc:
                logger.debug("Skipping declared block in %s: %s", path, exc)
                if emitter.debug_enabled:
                    emitter.event("block_invalid_id", {"block": block_id, "path": str(path)})
        return registry

    def namespace(self) -> str:
        return self._namespace

    def list(self) -> list[str]:
        """Return a copy of the identifiers in registration order."""
        return list(self._blocks)

    def add(self, block_id: str) -> bool:
        """Append ``block_id`` unless already present; return whether it was added."""
        validate_block_id(block_id)
        if block_id in self._blocks:
            return False
        self._blocks.append(block_id)
        return True

    def qualified_name(self, block_id: str) -> str:
        return f"{self._namespace}/{block_id}"

    def __contains__(self, block_id: object) -> bool:
        return block_id in self._blocks

    def __iter__(self) -> Iterator[str]:
        return iter(self.list())

    def __len__(self) -> int:
        return len(self._blocks)

    def __repr__(self) -> str:
        return f"BlockRegistry(namespace={self._namespace!r}, blocks={self._blocks!r})"


__all__ = ["BLOCK_ID_PATTERN", "BlockRegistry", "validate_block_id"]
