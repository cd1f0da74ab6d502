"""Host runtime protocol and an in-memory implementation.

The content-management host owns block registration, asset enqueueing and
lifecycle scheduling. The framework only talks to it through
:class:`BlockHost`. :class:`InMemoryHost` records every call and fires
callbacks on demand; the CLI dry run and the tests rely on it.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
import json
from pathlib import Path
from typing import Literal, Protocol, runtime_checkable


@runtime_checkable
class BlockHost(Protocol):
    """Primitives the host runtime exposes to themes."""

    def register_block_type(self, path: Path) -> bool: ...

    def enqueue_script(
        self,
        handle: str,
        url: str,
        dependencies: Sequence[str],
        version: str,
        in_footer: bool,
    ) -> None: ...

    def enqueue_style(
        self,
        handle: str,
        url: str,
        dependencies: Sequence[str],
        version: str,
    ) -> None: ...

    def add_action(self, phase: str, callback: Callable[[], None]) -> None: ...


@dataclass(slots=True, frozen=True)
class EnqueuedAsset:
    """Script or stylesheet handed to the host."""

    kind: Literal["script", "style"]
    handle: str
    url: str
    dependencies: tuple[str, ...]
    version: str
    in_footer: bool = False


@dataclass(slots=True)
class InMemoryHost:
    """Host double recording registrations, enqueues, and scheduled actions."""

    registered: list[Path] = field(default_factory=list)
    rejected: list[Path] = field(default_factory=list)
    enqueued: list[EnqueuedAsset] = field(default_factory=list)
    actions: dict[str, list[Callable[[], None]]] = field(default_factory=dict)
    fired: list[str] = field(default_factory=list)

    def register_block_type(self, path: Path) -> bool:
        """Accept ``path`` when its ``block.json`` parses and declares a name."""
        definition = Path(path) / "block.json"
        try:
            payload = json.loads(definition.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            self.rejected.append(Path(path))
            return False
        if not isinstance(payload, dict) or not isinstance(payload.get("name"), str):
            self.rejected.append(Path(path))
            return False
        self.registered.append(Path(path))
        return True

    def enqueue_script(
        self,
        handle: str,
        url: str,
        dependencies: Sequence[str],
        version: str,
        in_footer: bool,
    ) -> None:
        self.enqueued.append(
            EnqueuedAsset("script", handle, url, tuple(dependencies), version, in_footer)
        )

    def enqueue_style(
        self,
        handle: str,
        url: str,
        dependencies: Sequence[str],
        version: str,
    ) -> None:
        self.enqueued.append(EnqueuedAsset("style", handle, url, tuple(dependencies), version))

    def add_action(self, phase: str, callback: Callable[[], None]) -> None:
        self.actions.setdefault(phase, []).append(callback)

    def do_action(self, phase: str) -> None:
        """Run every callback scheduled for ``phase`` in insertion order."""
        self.fired.append(phase)
        for callback in list(self.actions.get(phase, ())):
            callback()

    def scripts(self) -> list[EnqueuedAsset]:
        return [asset for asset in self.enqueued if asset.kind == "script"]

    def styles(self) -> list[EnqueuedAsset]:
        return [asset for asset in self.enqueued if asset.kind == "style"]


__all__ = ["BlockHost", "EnqueuedAsset", "InMemoryHost"]
