"""Core block registration, asset resolution, and scaffolding."""

from __future__ import annotations

from .assets import AssetKind, AssetPublisher, asset_handle, asset_key
from .config import ThemeConfig, load_theme_config
from .diagnostics import DiagnosticEmitter, LoggingEmitter, NullEmitter
from .exceptions import (
    BlocksmithError,
    HostRejectedError,
    InvalidBlockIdentifierError,
    InvalidBlockNameError,
    PatchTargetNotFoundError,
    RegistrySourceError,
    ScaffoldError,
    ScaffoldIOError,
)
from .lifecycle import (
    BlockLifecycleManager,
    BlockOutcome,
    BlockState,
    LifecyclePhase,
    ScheduledPublication,
)
from .manifest import AssetRecord, ManifestResolver, asset_version
from .registry import BlockRegistry, validate_block_id
from .runtime import ThemeRuntime, register_blocks
from .scaffold import BlockScaffolder, ScaffoldResult, kebab_case, title_case


__all__ = [
    "AssetKind",
    "AssetPublisher",
    "AssetRecord",
    "BlockLifecycleManager",
    "BlockOutcome",
    "BlockRegistry",
    "BlockScaffolder",
    "BlockState",
    "BlocksmithError",
    "DiagnosticEmitter",
    "HostRejectedError",
    "InvalidBlockIdentifierError",
    "InvalidBlockNameError",
    "LifecyclePhase",
    "LoggingEmitter",
    "ManifestResolver",
    "NullEmitter",
    "PatchTargetNotFoundError",
    "RegistrySourceError",
    "ScaffoldError",
    "ScaffoldIOError",
    "ScaffoldResult",
    "ScheduledPublication",
    "ThemeConfig",
    "ThemeRuntime",
    "asset_handle",
    "asset_key",
    "asset_version",
    "kebab_case",
    "load_theme_config",
    "register_blocks",
    "title_case",
    "validate_block_id",
]
