"""Generation of new block file sets.

Scaffolding writes the block directory (definition, script, style, render
entry), a presentation template, and then patches the import aggregator and
the registry source so the next process start picks the block up. Files are
overwritten on every run; the two patches are idempotent.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
import json
import logging
import os
from pathlib import Path
import re
from typing import Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined, TemplateNotFound
from slugify import slugify

from .config import ThemeConfig
from .diagnostics import DiagnosticEmitter, NullEmitter
from .exceptions import (
    InvalidBlockIdentifierError,
    InvalidBlockNameError,
    PatchTargetNotFoundError,
    RegistrySourceError,
    ScaffoldError,
    ScaffoldIOError,
)
from .lifecycle import DEFINITION_FILENAME
from .registry import validate_block_id
from .sources import (
    AGGREGATOR_MARKER,
    aggregator_import,
    patch_import_aggregator,
    patch_registry_source,
    read_registry_source,
    render_registry_source,
)


logger = logging.getLogger(__name__)

STUBS_DIR = Path(__file__).parent / "stubs"
SCRIPT_ENTRY = "block.jsx"
STYLE_ENTRY = "block.css"
RENDER_ENTRY = "block.php"
VIEW_SUFFIX = ".blade.php"

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")
_SEPARATORS = re.compile(r"[-_]+")

AGGREGATOR_TEMPLATE = f"""/**
 * Block entry points bundled for the editor.
 */

{AGGREGATOR_MARKER} Created blocks are automatically imported below this line
"""


def kebab_case(name: str) -> str:
    """Return the block identifier derived from a human-readable name."""
    return slugify(_CAMEL_BOUNDARY.sub(" ", name), separator="-")


def title_case(name: str) -> str:
    """Return ``name`` with separators turned into spaces and each word capitalised."""
    words = _SEPARATORS.sub(" ", name).split()
    return " ".join(word[:1].upper() + word[1:].lower() for word in words)


def _php_string(value: Any) -> str:
    return str(value).replace("\\", "\\\\").replace("'", "\\'")


def _build_environment(stubs_dir: Path) -> Environment:
    environment = Environment(
        loader=FileSystemLoader(str(stubs_dir)),
        autoescape=False,
        undefined=StrictUndefined,
        keep_trailing_newline=True,
        block_start_string="[%",
        block_end_string="%]",
        variable_start_string="[[",
        variable_end_string="]]",
        comment_start_string="[#",
        comment_end_string="#]",
    )
    environment.filters.setdefault("php_string", _php_string)
    return environment


@dataclass(slots=True)
class ScaffoldResult:
    """Files touched by one scaffold run."""

    block_id: str
    title: str
    created: list[Path] = field(default_factory=list)
    patched: list[Path] = field(default_factory=list)
    warnings: list[ScaffoldError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.warnings


class BlockScaffolder:
    """Materialise a block file set and register it in the theme sources."""

    def __init__(
        self,
        config: ThemeConfig,
        *,
        namespace: str | None = None,
        emitter: DiagnosticEmitter | None = None,
        stubs_dir: Path = STUBS_DIR,
    ) -> None:
        self.config = config
        self.namespace = namespace or self._declared_namespace() or config.namespace
        self.emitter = emitter or NullEmitter()
        self.environment = _build_environment(stubs_dir)

    def _declared_namespace(self) -> str | None:
        path = self.config.registry_source
        if not path.is_file():
            return None
        try:
            return read_registry_source(path).namespace
        except RegistrySourceError as exc:
            logger.debug("Ignoring namespace of unreadable registry: %s", exc)
            return None

    def scaffold(self, human_name: str) -> ScaffoldResult:
        """Create the block named ``human_name`` and patch the theme sources."""
        try:
            block_id = validate_block_id(kebab_case(human_name))
        except InvalidBlockIdentifierError as exc:
            raise InvalidBlockNameError(
                f"Cannot derive a block identifier from {human_name!r}: {exc}"
            ) from exc
        title = title_case(human_name)
        result = ScaffoldResult(block_id=block_id, title=title)

        try:
            result.created.extend(self._write_block_files(block_id, title))
            result.created.append(self._write_view(block_id, title))
        except OSError as exc:
            raise ScaffoldIOError(f"Failed to write files for block '{block_id}': {exc}") from exc

        statement = aggregator_import(self.import_specifier(block_id))
        self._patch(
            result,
            self.config.aggregator,
            lambda: patch_import_aggregator(self.config.aggregator, statement),
        )
        self._patch(
            result,
            self.config.registry_source,
            lambda: patch_registry_source(self.config.registry_source, block_id),
        )
        return result

    def init_theme(self) -> list[Path]:
        """Create the registry source and aggregator when they do not exist yet."""
        created: list[Path] = []
        targets = (
            (self.config.registry_source, render_registry_source(self.namespace)),
            (self.config.aggregator, AGGREGATOR_TEMPLATE),
        )
        for path, content in targets:
            if path.exists():
                continue
            try:
                path.parent.mkdir(parents=True, exist_ok=True)
                path.write_text(content, encoding="utf-8")
            except OSError as exc:
                raise ScaffoldIOError(f"Failed to create {path}: {exc}") from exc
            created.append(path)
        return created

    def import_specifier(self, block_id: str) -> str:
        """Return the aggregator-relative path of the block's script entry."""
        target = self.config.block_dir(block_id) / SCRIPT_ENTRY
        relative = os.path.relpath(target, self.config.aggregator.parent)
        specifier = Path(relative).as_posix()
        return specifier if specifier.startswith(".") else f"./{specifier}"

    def definition(self, block_id: str, title: str) -> dict[str, Any]:
        """Return the ``block.json`` payload of a new block."""
        return {
            "name": f"{self.namespace}/{block_id}",
            "title": title,
            "category": self.config.category,
            "icon": self.config.icon,
            "description": f"Custom {title} block",
            "textdomain": self.namespace,
            "editorScript": f"file:./{SCRIPT_ENTRY}",
            "style": f"file:./{STYLE_ENTRY}",
            "render": f"file:./{RENDER_ENTRY}",
        }

    def _context(self, block_id: str, title: str) -> dict[str, Any]:
        return {
            "slug": block_id,
            "title": title,
            "name": f"{self.namespace}/{block_id}",
            "view": f"{self.config.views_dir.name}.{block_id}",
        }

    def _render(self, stub: str, context: dict[str, Any]) -> str:
        try:
            template = self.environment.get_template(stub)
        except TemplateNotFound as exc:
            raise ScaffoldError(f"Scaffold stub '{stub}' is missing") from exc
        return template.render(context)

    def _write_block_files(self, block_id: str, title: str) -> list[Path]:
        block_dir = self.config.block_dir(block_id)
        block_dir.mkdir(parents=True, exist_ok=True)
        context = self._context(block_id, title)

        files: dict[str, str] = {
            DEFINITION_FILENAME: json.dumps(
                self.definition(block_id, title), indent=4, ensure_ascii=False
            )
            + "\n",
        }
        for entry in (SCRIPT_ENTRY, STYLE_ENTRY, RENDER_ENTRY):
            files[entry] = self._render(f"{entry}.jinja", context)

        written: list[Path] = []
        for filename, content in files.items():
            target = block_dir / filename
            target.write_text(content, encoding="utf-8")
            written.append(target)
        return written

    def _write_view(self, block_id: str, title: str) -> Path:
        views_dir = self.config.views_dir
        views_dir.mkdir(parents=True, exist_ok=True)
        target = views_dir / f"{block_id}{VIEW_SUFFIX}"
        target.write_text(
            self._render("view.blade.php.jinja", self._context(block_id, title)),
            encoding="utf-8",
        )
        return target

    def _patch(self, result: ScaffoldResult, path: Path, apply: Callable[[], bool]) -> None:
        try:
            changed = apply()
        except PatchTargetNotFoundError as exc:
            result.warnings.append(exc)
            self.emitter.warning(f"{exc}. Add '{result.block_id}' manually.")
            return
        except OSError as exc:
            raise ScaffoldIOError(f"Failed to update {path}: {exc}") from exc
        if changed:
            result.patched.append(path)


__all__ = [
    "BlockScaffolder",
    "ScaffoldResult",
    "kebab_case",
    "title_case",
]
