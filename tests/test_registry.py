from __future__ import annotations

from pathlib import Path

import pytest

from blocksmith.core.exceptions import InvalidBlockIdentifierError, RegistrySourceError
from blocksmith.core.registry import BlockRegistry, validate_block_id


def test_add_is_idempotent_and_keeps_position() -> None:
    registry = BlockRegistry("acme", ["hero", "cards"])

    assert registry.add("x") is True
    assert registry.add("hero") is False
    assert registry.add("x") is False

    assert registry.list() == ["hero", "cards", "x"]
    assert registry.list().count("x") == 1


def test_duplicates_in_declaration_collapse() -> None:
    registry = BlockRegistry("acme", ["hero", "hero", "cards"])
    assert registry.list() == ["hero", "cards"]
    assert len(registry) == 2
    assert "cards" in registry


def test_list_returns_a_copy() -> None:
    registry = BlockRegistry("acme", ["hero"])
    registry.list().append("cards")
    assert list(registry) == ["hero"]


def test_namespace_prefixes_names() -> None:
    registry = BlockRegistry("acme")
    assert registry.namespace() == "acme"
    assert registry.qualified_name("hero-section") == "acme/hero-section"
    with pytest.raises(ValueError):
        BlockRegistry("")


@pytest.mark.parametrize("value", ["", "Hero", "hero section", "hero_section", "-hero", "hero-"])
def test_invalid_identifiers_are_rejected(value: str) -> None:
    with pytest.raises(InvalidBlockIdentifierError):
        validate_block_id(value)
    with pytest.raises(ValueError):
        BlockRegistry("acme").add(value)


def test_from_source_reads_declaration(tmp_path: Path) -> None:
    source = tmp_path / "blocks.py"
    source.write_text(
        'NAMESPACE = "doctailwind"\n\nBLOCKS = [\n    "block-name",\n    "hero",\n]\n',
        encoding="utf-8",
    )
    registry = BlockRegistry.from_source(source, default_namespace="acme")

    assert registry.namespace() == "doctailwind"
    assert registry.list() == ["block-name", "hero"]


def test_from_source_without_namespace_uses_default(tmp_path: Path) -> None:
    source = tmp_path / "blocks.py"
    source.write_text("BLOCKS: list[str] = ['hero']\n", encoding="utf-8")
    registry = BlockRegistry.from_source(source, default_namespace="acme")
    assert registry.namespace() == "acme"
    assert registry.list() == ["hero"]


def test_from_source_missing_file_is_empty(tmp_path: Path) -> None:
    registry = BlockRegistry.from_source(tmp_path / "missing.py", default_namespace="acme")
    assert registry.list() == []


def test_from_source_without_list_fails(tmp_path: Path) -> None:
    source = tmp_path / "blocks.py"
    source.write_text("BLOCKS = discover()\n", encoding="utf-8")
    with pytest.raises(RegistrySourceError):
        BlockRegistry.from_source(source, default_namespace="acme")


def test_from_source_skips_malformed_identifiers(tmp_path: Path) -> None:
    source = tmp_path / "blocks.py"
    source.write_text("BLOCKS = ['hero', 'Legacy_Block', 'cards']\n", encoding="utf-8")
    events: list[tuple[str, dict]] = []

    class Emitter:
        debug_enabled = True

        def warning(self, message, exc=None) -> None:
            return

        def error(self, message, exc=None) -> None:
            return

        def event(self, name, payload) -> None:
            events.append((name, dict(payload)))

    registry = BlockRegistry.from_source(source, default_namespace="acme", emitter=Emitter())

    assert registry.list() == ["hero", "cards"]
    assert events == [("block_invalid_id", {"block": "Legacy_Block", "path": str(source)})]
    with pytest.raises(InvalidBlockIdentifierError):
        registry.add("Legacy_Block")
