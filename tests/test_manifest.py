from __future__ import annotations

from collections.abc import Mapping
import json
from pathlib import Path
from typing import Any
import zlib

from blocksmith.core.manifest import AssetRecord, ManifestResolver, asset_version, read_manifest


class RecordingEmitter:
    debug_enabled = True

    def __init__(self) -> None:
        self.events: list[tuple[str, dict[str, Any]]] = []

    def warning(self, message: str, exc: BaseException | None = None) -> None:
        return

    def error(self, message: str, exc: BaseException | None = None) -> None:
        return

    def event(self, name: str, payload: Mapping[str, Any]) -> None:
        self.events.append((name, dict(payload)))


def _write(build_dir: Path, payload: Any, name: str = "manifest.json") -> Path:
    path = build_dir / name
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(payload if isinstance(payload, str) else json.dumps(payload), encoding="utf-8")
    return path


def test_missing_manifest_resolves_nothing(tmp_path: Path) -> None:
    emitter = RecordingEmitter()
    resolver = ManifestResolver(tmp_path / "public" / "build", emitter=emitter)

    assert resolver.load() is None
    assert resolver.resolve("resources/js/blocks.js") is None
    assert resolver.loaded is True
    assert [name for name, _ in emitter.events] == ["manifest_missing"]


def test_malformed_manifest_is_treated_as_absent(tmp_path: Path) -> None:
    _write(tmp_path, "{not json")
    emitter = RecordingEmitter()
    resolver = ManifestResolver(tmp_path, emitter=emitter)

    assert resolver.resolve("resources/js/blocks.js") is None
    assert emitter.events[0][0] == "manifest_invalid"


def test_non_object_manifest_is_treated_as_absent(tmp_path: Path) -> None:
    _write(tmp_path, ["resources/js/blocks.js"])
    assert ManifestResolver(tmp_path).load() is None


def test_resolve_unknown_key_returns_none(tmp_path: Path) -> None:
    _write(tmp_path, {"resources/js/blocks.js": {"file": "assets/blocks-ABC123.js"}})
    resolver = ManifestResolver(tmp_path)

    assert resolver.resolve("resources/css/blocks.css") is None
    record = resolver.resolve("resources/js/blocks.js")
    assert record is not None
    assert record.file == "assets/blocks-ABC123.js"


def test_manifest_is_read_once(tmp_path: Path) -> None:
    path = _write(tmp_path, {"resources/js/blocks.js": {"file": "assets/blocks-1.js"}})
    resolver = ManifestResolver(tmp_path)
    assert resolver.resolve("resources/js/blocks.js") is not None

    _write(tmp_path, {"resources/js/blocks.js": {"file": "assets/blocks-2.js"}})
    record = resolver.resolve("resources/js/blocks.js")
    assert record is not None and record.file == "assets/blocks-1.js"

    path.unlink()
    assert resolver.resolve("resources/js/blocks.js") is not None
    assert ManifestResolver(tmp_path).load() is None


def test_absent_manifest_stays_absent_within_a_resolver(tmp_path: Path) -> None:
    resolver = ManifestResolver(tmp_path)
    assert resolver.load() is None
    _write(tmp_path, {"resources/js/blocks.js": {"file": "assets/blocks.js"}})
    assert resolver.load() is None


def test_vite_subdirectory_manifest_is_found(tmp_path: Path) -> None:
    _write(tmp_path, {"resources/js/blocks.js": {"file": "assets/a.js"}}, ".vite/manifest.json")
    resolver = ManifestResolver(tmp_path)
    assert resolver.locate() == tmp_path / ".vite" / "manifest.json"
    assert resolver.resolve("resources/js/blocks.js") is not None


def test_malformed_entries_are_dropped_individually(tmp_path: Path) -> None:
    path = _write(
        tmp_path,
        {
            "resources/js/blocks.js": {"file": "assets/blocks.js", "isEntry": True},
            "resources/css/blocks.css": "assets/blocks.css",
            "resources/blocks/hero/block.js": {"file": 42},
        },
    )
    records = read_manifest(path)

    assert list(records) == ["resources/js/blocks.js"]
    assert records["resources/js/blocks.js"].is_entry is True


def test_version_is_crc32_of_file() -> None:
    record = AssetRecord(file="assets/blocks-ABC123.js")
    expected = f"{zlib.crc32(b'assets/blocks-ABC123.js'):08x}"

    assert asset_version(record) == expected
    assert asset_version(AssetRecord(file="assets/blocks-ABC123.js")) == expected
    assert len(expected) == 8


def test_version_falls_back_without_file(tmp_path: Path) -> None:
    assert asset_version(AssetRecord()) == "1.0.0"
    assert asset_version(None, "2.4.0") == "2.4.0"
    resolver = ManifestResolver(tmp_path, fallback_version="3.1.4")
    assert resolver.version(AssetRecord(src="resources/js/blocks.js")) == "3.1.4"
    assert ManifestResolver(tmp_path, fallback_version="").version(AssetRecord()) == "1.0.0"


def test_extra_bundler_fields_are_kept() -> None:
    record = AssetRecord.model_validate(
        {"file": "assets/a.js", "css": ["assets/a.css"], "imports": ["_vendor.js"]}
    )
    assert record.css == ["assets/a.css"]
    assert record.model_extra == {"imports": ["_vendor.js"]}
