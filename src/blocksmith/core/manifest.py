"""Build manifest loading and asset record resolution.

The bundler writes a JSON object mapping logical source paths (for example
``resources/js/blocks.js``) to records describing the compiled output::

    {
        "resources/js/blocks.js": {"file": "assets/blocks-ABC123.js", "isEntry": true}
    }

A :class:`ManifestResolver` reads that document at most once. A missing or
unreadable manifest is not an error: it only means no asset can be resolved,
which lets blocks register before the first build has run.
"""

from __future__ import annotations

from collections.abc import Mapping
import json
import logging
from pathlib import Path
from typing import Any
import zlib

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .diagnostics import DiagnosticEmitter, NullEmitter
from .exceptions import ManifestError


logger = logging.getLogger(__name__)

DEFAULT_ASSET_VERSION = "1.0.0"
MANIFEST_CANDIDATES = ("manifest.json", ".vite/manifest.json")


class AssetRecord(BaseModel):
    """One manifest entry describing a compiled asset."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    file: str | None = None
    src: str | None = None
    is_entry: bool = Field(default=False, alias="isEntry")
    css: list[str] = Field(default_factory=list)


Manifest = dict[str, AssetRecord]

_UNLOADED = object()


def asset_version(record: AssetRecord | None, fallback: str | None = None) -> str:
    """Return a cache-busting token derived from the record's output file.

    The token is the CRC-32 of ``record.file`` as eight hex digits, so every
    process reading the same manifest computes the same value. Records
    without a file fall back to ``fallback`` then to ``"1.0.0"``.
    """
    if record is not None and record.file:
        checksum = zlib.crc32(record.file.encode("utf-8")) & 0xFFFFFFFF
        return f"{checksum:08x}"
    return fallback or DEFAULT_ASSET_VERSION


def _parse_records(payload: Mapping[str, Any], source: Path) -> Manifest:
    records: Manifest = {}
    for key, entry in payload.items():
        if not isinstance(entry, Mapping):
            logger.debug("Ignoring non-object manifest entry %r in %s", key, source)
            continue
        try:
            records[str(key)] = AssetRecord.model_validate(entry)
        except ValidationError as exc:
            logger.debug("Ignoring malformed manifest entry %r in %s: %s", key, source, exc)
    return records


def read_manifest(path: Path) -> Manifest:
    """Parse ``path`` into asset records, raising :class:`ManifestError` on failure."""
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ManifestError(f"Failed to read manifest {path}: {exc}") from exc
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise ManifestError(f"Invalid manifest {path}: {exc}") from exc
    if not isinstance(payload, Mapping):
        raise ManifestError(f"Manifest {path} must contain a JSON object.")
    return _parse_records(payload, path)


class ManifestResolver:
    """Resolve logical asset keys through a build manifest loaded once.

    Build one resolver per process and share it: the first call to
    :meth:`load` (or :meth:`resolve`) reads the manifest, and every later
    call reuses the outcome, absence included. Records are never mutated
    after loading.
    """

    def __init__(
        self,
        build_dir: Path,
        *,
        fallback_version: str | None = None,
        emitter: DiagnosticEmitter | None = None,
    ) -> None:
        self.build_dir = Path(build_dir)
        self.fallback_version = fallback_version
        self.emitter = emitter or NullEmitter()
        self._manifest: Manifest | None | object = _UNLOADED

    @property
    def loaded(self) -> bool:
        return self._manifest is not _UNLOADED

    def locate(self) -> Path | None:
        """Return the first existing manifest file under the build directory."""
        for candidate in MANIFEST_CANDIDATES:
            path = self.build_dir / candidate
            if path.is_file():
                return path
        return None

    def load(self) -> Manifest | None:
        """Return the cached manifest, reading it on first use."""
        if self._manifest is _UNLOADED:
            self._manifest = self._read()
        return self._manifest  # type: ignore[return-value]

    def _read(self) -> Manifest | None:
        path = self.locate()
        if path is None:
            if self.emitter.debug_enabled:
                self.emitter.event("manifest_missing", {"path": str(self.build_dir)})
            return None
        try:
            return read_manifest(path)
        except ManifestError as exc:
            logger.debug("Discarding manifest: %s", exc)
            if self.emitter.debug_enabled:
                self.emitter.event(
                    "manifest_invalid",
                    {"path": str(path), "reason": str(exc.__cause__ or exc)},
                )
            return None

    def resolve(self, key: str) -> AssetRecord | None:
        """Return the record stored under ``key``, or ``None``."""
        manifest = self.load()
        if manifest is None:
            return None
        return manifest.get(key)

    def version(self, record: AssetRecord | None) -> str:
        """Return the version token of ``record``."""
        return asset_version(record, self.fallback_version)


__all__ = [
    "DEFAULT_ASSET_VERSION",
    "MANIFEST_CANDIDATES",
    "AssetRecord",
    "Manifest",
    "ManifestResolver",
    "asset_version",
    "read_manifest",
]
