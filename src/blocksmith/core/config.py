"""Theme configuration consumed by the block framework.

ThemeConfig

`theme_dir` (`Path`)
: Root of the theme. Every relative path below resolves against it.

`theme_uri` (`str`)
: Public URL of the theme root. Compiled asset URLs are built from it.

`theme_version` (`str | None`)
: Version declared by the theme. Used as the asset version when a manifest
  record has no ``file`` entry.

`namespace` (`str`)
: Prefix of every block name handed to the host (``<namespace>/<id>``).
  The registry source may declare its own ``NAMESPACE`` which takes
  precedence at runtime.

`blocks_dir` (`Path`)
: Directory holding one sub-directory per block.

`views_dir` (`Path`)
: Directory receiving the presentation templates of scaffolded blocks.

`build_dir` (`Path`)
: Bundler output directory containing ``manifest.json``.

`aggregator` (`Path`)
: Script importing every block entry, patched by the scaffolder.

`registry_source` (`Path`)
: Python module declaring ``NAMESPACE`` and the ``BLOCKS`` list.

`category` / `icon` (`str`)
: Defaults written into scaffolded ``block.json`` documents.

`debug` (`bool`)
: Emit diagnostics for skipped blocks and assets. Also enabled by the
  ``BLOCKSMITH_DEBUG`` environment variable.
"""

from __future__ import annotations

import os
from pathlib import Path
import tomllib
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError, model_validator

from .exceptions import BlocksmithError


CONFIG_FILENAME = "blocksmith.toml"
DEFAULT_NAMESPACE = "blocksmith"

_TRUTHY = {"1", "true", "yes", "on"}


class ThemeConfig(BaseModel):
    """Paths and defaults describing a theme that ships blocks."""

    model_config = ConfigDict(extra="forbid")

    theme_dir: Path
    theme_uri: str = ""
    theme_version: str | None = None
    namespace: str = DEFAULT_NAMESPACE
    blocks_dir: Path = Path("resources/blocks")
    views_dir: Path = Path("resources/views/blocks")
    build_dir: Path = Path("public/build")
    aggregator: Path = Path("resources/js/blocks.js")
    registry_source: Path = Path("app/blocks.py")
    category: str = "design"
    icon: str = "block-default"
    debug: bool = False

    @model_validator(mode="after")
    def _resolve_paths(self) -> ThemeConfig:
        root = self.theme_dir.expanduser().resolve()
        self.theme_dir = root
        for name in ("blocks_dir", "views_dir", "build_dir", "aggregator", "registry_source"):
            value: Path = getattr(self, name)
            if not value.is_absolute():
                setattr(self, name, root / value)
        return self

    @property
    def build_base_url(self) -> str:
        """Public URL of the build directory, always ending with a slash."""
        try:
            relative = self.build_dir.relative_to(self.theme_dir).as_posix()
        except ValueError:
            relative = self.build_dir.name
        base = self.theme_uri.rstrip("/")
        prefix = f"{base}/" if base else ""
        return f"{prefix}{relative.strip('/')}/"

    def block_dir(self, block_id: str) -> Path:
        """Return the root directory of ``block_id``."""
        return self.blocks_dir / block_id


def _read_config_file(path: Path) -> dict[str, Any]:
    try:
        payload = tomllib.loads(path.read_text(encoding="utf-8"))
    except OSError as exc:  # pragma: no cover - IO edge cases
        raise BlocksmithError(f"Failed to read configuration {path}: {exc}") from exc
    except tomllib.TOMLDecodeError as exc:
        raise BlocksmithError(f"Invalid configuration {path}: {exc}") from exc
    section = payload.get("blocksmith", payload)
    if not isinstance(section, dict):
        raise BlocksmithError(f"Configuration {path} must contain a [blocksmith] table.")
    return dict(section)


def _environment_overrides() -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    debug = os.environ.get("BLOCKSMITH_DEBUG")
    if debug is not None:
        overrides["debug"] = debug.strip().lower() in _TRUTHY
    theme_uri = os.environ.get("BLOCKSMITH_THEME_URI")
    if theme_uri:
        overrides["theme_uri"] = theme_uri
    return overrides


def load_theme_config(theme_dir: str | Path | None = None, **overrides: Any) -> ThemeConfig:
    """Build a :class:`ThemeConfig` from ``blocksmith.toml``, env, and overrides."""
    root = Path(theme_dir) if theme_dir is not None else Path.cwd()
    values: dict[str, Any] = {}
    config_path = root / CONFIG_FILENAME
    if config_path.is_file():
        values.update(_read_config_file(config_path))
    values.update(_environment_overrides())
    values.update({key: value for key, value in overrides.items() if value is not None})
    values["theme_dir"] = root
    try:
        return ThemeConfig.model_validate(values)
    except ValidationError as exc:
        raise BlocksmithError(f"Invalid theme configuration in {root}: {exc}") from exc


__all__ = ["CONFIG_FILENAME", "DEFAULT_NAMESPACE", "ThemeConfig", "load_theme_config"]
