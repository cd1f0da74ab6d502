"""Wiring of the block framework for one theme process."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .assets import AssetPublisher
from .config import ThemeConfig
from .diagnostics import DiagnosticEmitter, LoggingEmitter
from .lifecycle import BlockLifecycleManager, BlockOutcome
from .manifest import ManifestResolver
from .registry import BlockRegistry


if TYPE_CHECKING:  # pragma: no cover - typing only
    from blocksmith.adapters.host import BlockHost


@dataclass(slots=True)
class ThemeRuntime:
    """Components sharing one manifest resolver for the lifetime of a process."""

    config: ThemeConfig
    registry: BlockRegistry
    resolver: ManifestResolver
    publisher: AssetPublisher
    manager: BlockLifecycleManager
    outcomes: list[BlockOutcome] = field(default_factory=list)

    @classmethod
    def create(
        cls,
        config: ThemeConfig,
        host: BlockHost,
        *,
        emitter: DiagnosticEmitter | None = None,
        registry: BlockRegistry | None = None,
    ) -> ThemeRuntime:
        """Build the registry, resolver, publisher, and manager for ``config``."""
        emitter = emitter or LoggingEmitter(debug_enabled=config.debug)
        if registry is None:
            registry = BlockRegistry.from_source(
                config.registry_source, default_namespace=config.namespace, emitter=emitter
            )
        resolver = ManifestResolver(
            config.build_dir, fallback_version=config.theme_version, emitter=emitter
        )
        publisher = AssetPublisher(
            host, resolver, base_url=config.build_base_url, emitter=emitter
        )
        manager = BlockLifecycleManager(
            registry, host, publisher, blocks_dir=config.blocks_dir, emitter=emitter
        )
        return cls(
            config=config,
            registry=registry,
            resolver=resolver,
            publisher=publisher,
            manager=manager,
        )

    def boot(self) -> list[BlockOutcome]:
        """Register every declared block; only the first call does any work."""
        if not self.outcomes:
            self.outcomes = self.manager.register_all()
        return self.outcomes


def register_blocks(
    config: ThemeConfig,
    host: BlockHost,
    *,
    emitter: DiagnosticEmitter | None = None,
) -> ThemeRuntime:
    """Create a runtime for ``config`` and register its blocks with ``host``."""
    runtime = ThemeRuntime.create(config, host, emitter=emitter)
    runtime.boot()
    return runtime


__all__ = ["ThemeRuntime", "register_blocks"]
