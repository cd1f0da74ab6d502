from __future__ import annotations

from pathlib import Path

import pytest

from blocksmith.core.exceptions import PatchTargetNotFoundError, RegistrySourceError
from blocksmith.core.sources import (
    REGISTRY_MARKER,
    aggregator_import,
    insert_aggregator_import,
    insert_registry_entry,
    parse_registry_source,
    patch_import_aggregator,
    patch_registry_source,
    render_registry_source,
)


def test_rendered_registry_round_trips() -> None:
    text = render_registry_source("acme", ["hero", "cards"])
    declaration = parse_registry_source(text)
    assert declaration.namespace == "acme"
    assert declaration.blocks == ("hero", "cards")
    assert REGISTRY_MARKER in text


def test_entry_is_inserted_above_marker() -> None:
    text = render_registry_source("acme", ["hero"])
    updated = insert_registry_entry(text, "cards")

    lines = updated.splitlines()
    marker_index = next(i for i, line in enumerate(lines) if REGISTRY_MARKER in line)
    assert lines[marker_index - 1] == '    "cards",'
    assert lines[marker_index - 2] == '    "hero",'
    assert parse_registry_source(updated).blocks == ("hero", "cards")


def test_entries_after_marker_are_preserved() -> None:
    text = (
        "BLOCKS = [\n"
        '    "hero",\n'
        f"    # {REGISTRY_MARKER}\n"
        '    "legacy",\n'
        "]\n"
    )
    updated = insert_registry_entry(text, "cards")
    assert parse_registry_source(updated).blocks == ("hero", "cards", "legacy")


def test_missing_trailing_comma_is_added() -> None:
    text = f"BLOCKS = [\n    'hero'  # main banner\n    # {REGISTRY_MARKER}\n]\n"
    updated = insert_registry_entry(text, "cards")

    assert "'hero',  # main banner" in updated
    assert "    'cards',\n" in updated
    assert parse_registry_source(updated).blocks == ("hero", "cards")


def test_surrounding_code_is_untouched() -> None:
    text = (
        '"""Theme blocks."""\n\n'
        "NAMESPACE = 'acme'\n\n"
        "BLOCKS = [\n"
        f"    # {REGISTRY_MARKER}\n"
        "]\n\n"
        "def extra():\n"
        "    return [1, 2]\n"
    )
    updated = insert_registry_entry(text, "hero")
    assert updated.replace('    "hero",\n', "") == text


def test_missing_marker_fails_loudly(tmp_path: Path) -> None:
    source = tmp_path / "blocks.py"
    original = 'BLOCKS = [\n    "hero",\n]\n'
    source.write_text(original, encoding="utf-8")

    with pytest.raises(PatchTargetNotFoundError) as excinfo:
        patch_registry_source(source, "cards")

    assert excinfo.value.path == source
    assert source.read_text(encoding="utf-8") == original


def test_marker_outside_list_is_not_used() -> None:
    text = f'# {REGISTRY_MARKER}\nBLOCKS = [\n    "hero",\n]\n'
    with pytest.raises(PatchTargetNotFoundError):
        insert_registry_entry(text, "cards")


def test_missing_list_fails_loudly() -> None:
    with pytest.raises(PatchTargetNotFoundError):
        insert_registry_entry(f"# {REGISTRY_MARKER}\nOTHER = []\n", "cards")
    with pytest.raises(PatchTargetNotFoundError):
        insert_registry_entry("BLOCKS = [\n", "cards")


def test_registry_patch_is_idempotent(tmp_path: Path) -> None:
    source = tmp_path / "blocks.py"
    source.write_text(render_registry_source("acme"), encoding="utf-8")

    assert patch_registry_source(source, "my-block") is True
    assert patch_registry_source(source, "my-block") is False
    assert source.read_text(encoding="utf-8").count('"my-block"') == 1


def test_registry_patch_missing_file(tmp_path: Path) -> None:
    with pytest.raises(PatchTargetNotFoundError):
        patch_registry_source(tmp_path / "blocks.py", "hero")


def test_parse_rejects_non_string_entries() -> None:
    with pytest.raises(RegistrySourceError):
        parse_registry_source("BLOCKS = ['hero', 3]\n")
    with pytest.raises(RegistrySourceError):
        parse_registry_source("BLOCKS = [\n")


def test_aggregator_import_goes_below_marker() -> None:
    text = "import '../css/blocks.css';\n// AUTO-IMPORTS: below\nconsole.log('ok');\n"
    statement = aggregator_import("../blocks/hero/block.jsx")
    updated = insert_aggregator_import(text, statement)

    assert updated.splitlines() == [
        "import '../css/blocks.css';",
        "// AUTO-IMPORTS: below",
        "import '../blocks/hero/block.jsx';",
        "console.log('ok');",
    ]


def test_aggregator_import_is_prepended_without_marker() -> None:
    statement = aggregator_import("../blocks/hero/block.jsx")
    updated = insert_aggregator_import("console.log('ok');\n", statement)
    assert updated == "import '../blocks/hero/block.jsx';\nconsole.log('ok');\n"


def test_aggregator_patch_is_idempotent(tmp_path: Path) -> None:
    aggregator = tmp_path / "blocks.js"
    aggregator.write_text("// AUTO-IMPORTS: below", encoding="utf-8")
    statement = aggregator_import("../blocks/hero/block.jsx")

    assert patch_import_aggregator(aggregator, statement) is True
    assert patch_import_aggregator(aggregator, statement) is False
    assert aggregator.read_text(encoding="utf-8") == (
        "// AUTO-IMPORTS: below\nimport '../blocks/hero/block.jsx';\n"
    )


@pytest.mark.parametrize("patch", ["registry", "aggregator"])
def test_undecodable_targets_are_reported(tmp_path: Path, patch: str) -> None:
    target = tmp_path / "target"
    target.write_bytes(b"BLOCKS = [\n    '\xff\xfe',\n]\n")

    with pytest.raises(PatchTargetNotFoundError, match="not valid UTF-8"):
        if patch == "registry":
            patch_registry_source(target, "hero")
        else:
            patch_import_aggregator(target, aggregator_import("./hero/block.jsx"))
