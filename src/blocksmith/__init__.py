"""Primary public API for blocksmith."""

from __future__ import annotations

from blocksmith.adapters import BlockHost, EnqueuedAsset, InMemoryHost
from blocksmith.core import (
    AssetKind,
    AssetPublisher,
    AssetRecord,
    BlockLifecycleManager,
    BlockOutcome,
    BlockRegistry,
    BlockScaffolder,
    BlocksmithError,
    BlockState,
    LifecyclePhase,
    ManifestResolver,
    PatchTargetNotFoundError,
    ScaffoldError,
    ScaffoldIOError,
    ScaffoldResult,
    ThemeConfig,
    ThemeRuntime,
    load_theme_config,
    register_blocks,
)
from blocksmith.version import get_version


__version__ = get_version()

__all__ = [
    "AssetKind",
    "AssetPublisher",
    "AssetRecord",
    "BlockHost",
    "BlockLifecycleManager",
    "BlockOutcome",
    "BlockRegistry",
    "BlockScaffolder",
    "BlockState",
    "BlocksmithError",
    "EnqueuedAsset",
    "InMemoryHost",
    "LifecyclePhase",
    "ManifestResolver",
    "PatchTargetNotFoundError",
    "ScaffoldError",
    "ScaffoldIOError",
    "ScaffoldResult",
    "ThemeConfig",
    "ThemeRuntime",
    "__version__",
    "load_theme_config",
    "register_blocks",
]
