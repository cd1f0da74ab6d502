"""Block registration and lifecycle-phase asset scheduling.

:class:`BlockLifecycleManager` walks the registry once per process. Each
block moves from ``UNCHECKED`` to one of three terminal states:

``ABSENT``
: the block directory does not exist (the registry may list blocks that are
  not built yet).

``INVALID``
: the directory exists but has no ``block.json``.

``REGISTERED``
: the definition was handed to the host. Whatever the host answered, the
  block's script and style are scheduled for the editor and front-end phases.

Deferred work is kept as a list of :class:`ScheduledPublication` entries.
The host receives one callback per phase, and that callback resolves the
entries for its phase when it fires.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from functools import partial
import logging
from pathlib import Path
from typing import TYPE_CHECKING

from .assets import AssetKind, AssetPublisher
from .diagnostics import DiagnosticEmitter, NullEmitter
from .exceptions import HostRejectedError
from .registry import BlockRegistry


if TYPE_CHECKING:  # pragma: no cover - typing only
    from blocksmith.adapters.host import BlockHost


logger = logging.getLogger(__name__)

DEFINITION_FILENAME = "block.json"
GLOBAL_ASSET_NAME = "blocks"
GLOBAL_SCRIPT_DEPENDENCIES: tuple[str, ...] = (
    "wp-blocks",
    "wp-element",
    "wp-block-editor",
    "wp-components",
    "wp-i18n",
)
BLOCK_SCRIPT_DEPENDENCIES: tuple[str, ...] = ("wp-blocks", "wp-element", "wp-dom-ready")


class LifecyclePhase(Enum):
    """Host lifecycle phases, valued by the host's hook names."""

    EDITOR = "enqueue_block_editor_assets"
    """Block editor is loading its assets."""

    FRONTEND = "wp_enqueue_scripts"
    """Public page is loading its assets."""


class BlockState(Enum):
    """Outcome of checking one declared block."""

    UNCHECKED = "unchecked"
    ABSENT = "absent"
    INVALID = "invalid"
    REGISTERED = "registered"


@dataclass(slots=True, frozen=True)
class ScheduledPublication:
    """Assets to publish when ``phase`` fires; ``block_id=None`` means the global bundle."""

    phase: LifecyclePhase
    block_id: str | None = None


@dataclass(slots=True)
class BlockOutcome:
    """Diagnostic record of one block's pass through :meth:`register_all`."""

    block_id: str
    path: Path
    state: BlockState = BlockState.UNCHECKED
    host_accepted: bool | None = None
    error: BaseException | None = None


def check_block(blocks_dir: Path, block_id: str) -> BlockState:
    """Return ``ABSENT`` or ``INVALID`` for broken file sets, ``UNCHECKED`` otherwise."""
    path = blocks_dir / block_id
    if not path.is_dir():
        return BlockState.ABSENT
    if not (path / DEFINITION_FILENAME).is_file():
        return BlockState.INVALID
    return BlockState.UNCHECKED


class BlockLifecycleManager:
    """Validate, register, and schedule asset publication for declared blocks."""

    def __init__(
        self,
        registry: BlockRegistry,
        host: BlockHost,
        publisher: AssetPublisher,
        *,
        blocks_dir: Path,
        emitter: DiagnosticEmitter | None = None,
    ) -> None:
        self.registry = registry
        self.host = host
        self.publisher = publisher
        self.blocks_dir = Path(blocks_dir)
        self.emitter = emitter or NullEmitter()
        self._schedule: list[ScheduledPublication] = []
        self._hooked: set[LifecyclePhase] = set()

    @property
    def schedule(self) -> list[ScheduledPublication]:
        """Return a copy of the pending publication entries."""
        return list(self._schedule)

    def register_all(self) -> list[BlockOutcome]:
        """Register every declared block and schedule its assets."""
        self._enqueue(ScheduledPublication(LifecyclePhase.EDITOR))
        outcomes = [self._register_block(block_id) for block_id in self.registry.list()]
        registered = sum(1 for outcome in outcomes if outcome.state is BlockState.REGISTERED)
        logger.debug("Registered %d of %d declared blocks", registered, len(outcomes))
        return outcomes

    def _register_block(self, block_id: str) -> BlockOutcome:
        path = self.blocks_dir / block_id
        outcome = BlockOutcome(block_id=block_id, path=path)

        state = check_block(self.blocks_dir, block_id)
        if state is BlockState.ABSENT:
            outcome.state = state
            self._debug_event("block_absent", block_id, path)
            return outcome
        if state is BlockState.INVALID:
            outcome.state = state
            self._debug_event("block_invalid", block_id, path / DEFINITION_FILENAME)
            return outcome

        try:
            accepted = bool(self.host.register_block_type(path))
        except Exception as exc:  # host failures stay scoped to this block
            logger.debug("Host raised while registering %s", block_id, exc_info=exc)
            accepted = False
            outcome.error = exc
        if not accepted and outcome.error is None:
            outcome.error = HostRejectedError(block_id, path)

        outcome.state = BlockState.REGISTERED
        outcome.host_accepted = accepted
        if accepted:
            self._debug_event("block_registered", block_id, path)
        elif self.emitter.debug_enabled:
            self.emitter.event("block_rejected", {"block": block_id, "path": str(path)})
            self.emitter.warning(str(outcome.error), exc=outcome.error)

        for phase in (LifecyclePhase.EDITOR, LifecyclePhase.FRONTEND):
            self._enqueue(ScheduledPublication(phase, block_id))
        return outcome

    def _debug_event(self, name: str, block_id: str, path: Path) -> None:
        if self.emitter.debug_enabled:
            self.emitter.event(name, {"block": block_id, "path": str(path)})

    def _enqueue(self, entry: ScheduledPublication) -> None:
        if entry in self._schedule:
            return
        self._schedule.append(entry)
        if entry.phase not in self._hooked:
            self._hooked.add(entry.phase)
            self.host.add_action(entry.phase.value, partial(self.dispatch, entry.phase))

    def dispatch(self, phase: LifecyclePhase) -> None:
        """Publish every asset scheduled for ``phase``."""
        for entry in self.entries_for(phase):
            try:
                if entry.block_id is None:
                    self.publish_global_assets()
                else:
                    self.publish_block_assets(entry.block_id)
            except Exception as exc:  # host failures stay scoped to this entry
                scope = entry.block_id or GLOBAL_ASSET_NAME
                logger.debug("Host raised while publishing %s assets", scope, exc_info=exc)
                if self.emitter.debug_enabled:
                    self.emitter.warning(f"Failed to publish assets for '{scope}': {exc}", exc=exc)

    def entries_for(self, phase: LifecyclePhase) -> list[ScheduledPublication]:
        return [entry for entry in self._schedule if entry.phase is phase]

    def publish_global_assets(self) -> None:
        """Publish the shared editor script and stylesheet."""
        self.publisher.publish(AssetKind.SCRIPT, GLOBAL_ASSET_NAME, GLOBAL_SCRIPT_DEPENDENCIES)
        self.publisher.publish(AssetKind.STYLE, GLOBAL_ASSET_NAME)

    def publish_block_assets(
        self, block_id: str, dependencies: Sequence[str] = BLOCK_SCRIPT_DEPENDENCIES
    ) -> None:
        """Publish the script then the stylesheet compiled for ``block_id``."""
        self.publisher.publish(
            AssetKind.SCRIPT, block_id, dependencies, block_specific=True, block_id=block_id
        )
        self.publisher.publish(AssetKind.STYLE, block_id, block_specific=True, block_id=block_id)


__all__ = [
    "BLOCK_SCRIPT_DEPENDENCIES",
    "DEFINITION_FILENAME",
    "GLOBAL_ASSET_NAME",
    "GLOBAL_SCRIPT_DEPENDENCIES",
    "BlockLifecycleManager",
    "BlockOutcome",
    "BlockState",
    "LifecyclePhase",
    "ScheduledPublication",
    "check_block",
]
