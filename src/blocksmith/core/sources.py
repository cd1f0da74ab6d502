"""Structured edits of the source files that list blocks.

Two artefacts reference every block and are updated by the scaffolder:

* the registry source, a Python module declaring the ordered ``BLOCKS`` list::

      NAMESPACE = "acme"

      BLOCKS = [
          "hero-section",
          # blocksmith: new blocks are inserted above this line
      ]

* the import aggregator, a script importing each block entry below a
  ``// AUTO-IMPORTS:`` marker line.

The registry is never rewritten through text substitution: the module is
parsed, the list literal and its marker comment are located in the syntax
tree, the entry is inserted, and the result is parsed again to check that
the list gained exactly the new identifier.
"""

from __future__ import annotations

import ast
from collections.abc import Sequence
from dataclasses import dataclass
import io
from pathlib import Path
import tokenize

from .exceptions import PatchTargetNotFoundError, RegistrySourceError


REGISTRY_LIST_NAME = "BLOCKS"
REGISTRY_NAMESPACE_NAME = "NAMESPACE"
REGISTRY_MARKER = "blocksmith: new blocks are inserted above this line"
AGGREGATOR_MARKER = "// AUTO-IMPORTS:"


@dataclass(slots=True, frozen=True)
class RegistryDeclaration:
    """Values declared by a registry source module."""

    namespace: str | None
    blocks: tuple[str, ...]


def _assigned_value(tree: ast.Module, name: str) -> ast.expr | None:
    for statement in tree.body:
        if isinstance(statement, ast.Assign):
            targets = statement.targets
        elif isinstance(statement, ast.AnnAssign) and statement.value is not None:
            targets = [statement.target]
        else:
            continue
        if any(isinstance(target, ast.Name) and target.id == name for target in targets):
            return statement.value
    return None


def _string_entries(node: ast.List | ast.Tuple) -> list[str] | None:
    values: list[str] = []
    for element in node.elts:
        if not isinstance(element, ast.Constant) or not isinstance(element.value, str):
            return None
        values.append(element.value)
    return values


def parse_registry_source(text: str, *, source: Path | str = "<registry>") -> RegistryDeclaration:
    """Extract the namespace and block list declared by a registry module."""
    try:
        tree = ast.parse(text, filename=str(source))
    except SyntaxError as exc:
        raise RegistrySourceError(f"Invalid registry source {source}: {exc.msg}") from exc

    node = _assigned_value(tree, REGISTRY_LIST_NAME)
    if not isinstance(node, (ast.List, ast.Tuple)):
        raise RegistrySourceError(
            f"Registry source {source} must assign a list literal to {REGISTRY_LIST_NAME}."
        )
    blocks = _string_entries(node)
    if blocks is None:
        raise RegistrySourceError(
            f"Registry source {source} may only list string literals in {REGISTRY_LIST_NAME}."
        )

    namespace_node = _assigned_value(tree, REGISTRY_NAMESPACE_NAME)
    namespace: str | None = None
    if isinstance(namespace_node, ast.Constant) and isinstance(namespace_node.value, str):
        namespace = namespace_node.value
    return RegistryDeclaration(namespace=namespace, blocks=tuple(blocks))


def read_registry_source(path: Path) -> RegistryDeclaration:
    """Read and parse the registry module at ``path``."""
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise RegistrySourceError(f"Failed to read registry source {path}: {exc}") from exc
    except UnicodeDecodeError as exc:
        raise RegistrySourceError(f"Registry source {path} is not valid UTF-8: {exc}") from exc
    return parse_registry_source(text, source=path)


def render_registry_source(namespace: str, blocks: Sequence[str] = ()) -> str:
    """Return a fresh registry module declaring ``blocks``."""
    lines = [
        '"""Blocks registered by the theme, in registration order."""',
        "",
        f"{REGISTRY_NAMESPACE_NAME} = {namespace!r}",
        "",
        f"{REGISTRY_LIST_NAME} = [",
    ]
    lines.extend(f'    "{block}",' for block in blocks)
    lines.append(f"    # {REGISTRY_MARKER}")
    lines.append("]")
    return "\n".join(lines) + "\n"


def _char_column(line: str, byte_offset: int) -> int:
    return len(line.encode("utf-8")[:byte_offset].decode("utf-8", errors="ignore"))


def _locate_marker(text: str, node: ast.List, marker: str) -> tuple[int, str] | None:
    """Return the line number and indentation of the marker comment inside ``node``."""
    readline = io.StringIO(text).readline
    try:
        for token in tokenize.generate_tokens(readline):
            if token.type != tokenize.COMMENT or marker not in token.string:
                continue
            line_number, column = token.start
            prefix = token.line[:column]
            if prefix.strip():
                continue
            if node.lineno < line_number < (node.end_lineno or node.lineno):
                return line_number, prefix
    except (tokenize.TokenError, SyntaxError):
        return None
    return None


def insert_registry_entry(
    text: str,
    block_id: str,
    *,
    marker: str = REGISTRY_MARKER,
    source: Path = Path("<registry>"),
) -> str:
    """Return ``text`` with ``block_id`` inserted just above the marker comment."""
    try:
        tree = ast.parse(text, filename=str(source))
    except SyntaxError as exc:
        raise PatchTargetNotFoundError(source, f"invalid Python source ({exc.msg})") from exc

    node = _assigned_value(tree, REGISTRY_LIST_NAME)
    if not isinstance(node, ast.List):
        raise PatchTargetNotFoundError(source, f"no {REGISTRY_LIST_NAME} list literal")
    existing = _string_entries(node)
    if existing is None:
        raise PatchTargetNotFoundError(source, f"{REGISTRY_LIST_NAME} holds non-string entries")

    located = _locate_marker(text, node, marker)
    if located is None:
        raise PatchTargetNotFoundError(
            source, f"marker comment '{marker}' not found inside {REGISTRY_LIST_NAME}"
        )
    marker_line, indent = located

    lines = text.splitlines(keepends=True)
    before = [element for element in node.elts if element.lineno < marker_line]
    after = existing[len(before) :]

    quote = '"'
    if before:
        last = before[-1]
        row = (last.end_lineno or last.lineno) - 1
        column = _char_column(lines[row], last.end_col_offset or 0)
        remainder = lines[row][column:].lstrip()
        if not remainder.startswith(","):
            lines[row] = f"{lines[row][:column]},{lines[row][column:]}"
        segment = ast.get_source_segment(text, last) or ""
        if segment.startswith("'"):
            quote = "'"

    lines.insert(marker_line - 1, f"{indent}{quote}{block_id}{quote},\n")
    updated = "".join(lines)

    expected = [*existing[: len(before)], block_id, *after]
    try:
        declared = parse_registry_source(updated, source=source).blocks
    except RegistrySourceError as exc:
        raise PatchTargetNotFoundError(source, "patched source no longer parses") from exc
    if list(declared) != expected:
        raise PatchTargetNotFoundError(source, "patched list does not match the expected entries")
    return updated


def _read_patch_target(path: Path) -> str:
    if not path.is_file():
        raise PatchTargetNotFoundError(path, "file does not exist")
    try:
        return path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise PatchTargetNotFoundError(path, "file is not valid UTF-8") from exc


def patch_registry_source(path: Path, block_id: str, *, marker: str = REGISTRY_MARKER) -> bool:
    """Add ``block_id`` to the registry module, returning whether the file changed."""
    text = _read_patch_target(path)
    if f'"{block_id}"' in text or f"'{block_id}'" in text:
        return False
    updated = insert_registry_entry(text, block_id, marker=marker, source=path)
    path.write_text(updated, encoding="utf-8")
    return True


def aggregator_import(specifier: str) -> str:
    """Return the import statement pulling a block entry into the aggregator."""
    return f"import '{specifier}';"


def insert_aggregator_import(text: str, statement: str, *, marker: str = AGGREGATOR_MARKER) -> str:
    """Return ``text`` with ``statement`` below the marker line, or prepended."""
    if statement in text:
        return text
    lines = text.splitlines(keepends=True)
    for index, line in enumerate(lines):
        if marker in line:
            if not line.endswith("\n"):
                lines[index] = f"{line}\n"
            lines.insert(index + 1, f"{statement}\n")
            return "".join(lines)
    return f"{statement}\n{text}"


def patch_import_aggregator(
    path: Path, statement: str, *, marker: str = AGGREGATOR_MARKER
) -> bool:
    """Add ``statement`` to the aggregator at ``path``, returning whether it changed."""
    text = _read_patch_target(path)
    updated = insert_aggregator_import(text, statement, marker=marker)
    if updated == text:
        return False
    path.write_text(updated, encoding="utf-8")
    return True


__all__ = [
    "AGGREGATOR_MARKER",
    "REGISTRY_LIST_NAME",
    "REGISTRY_MARKER",
    "REGISTRY_NAMESPACE_NAME",
    "RegistryDeclaration",
    "aggregator_import",
    "insert_aggregator_import",
    "insert_registry_entry",
    "parse_registry_source",
    "patch_import_aggregator",
    "patch_registry_source",
    "read_registry_source",
    "render_registry_source",
]
