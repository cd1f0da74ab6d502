"""Exception hierarchy shared by block registration and scaffolding."""

from __future__ import annotations

from pathlib import Path


class BlocksmithError(RuntimeError):
    """Base exception for block framework failures."""


class ManifestError(BlocksmithError):
    """Raised internally when the build manifest cannot be read or parsed."""


class RegistrySourceError(BlocksmithError):
    """Raised when the registry source file does not declare a block list."""


class InvalidBlockIdentifierError(BlocksmithError, ValueError):
    """Raised when a block identifier is empty or outside ``[a-z0-9-]``."""


class HostRejectedError(BlocksmithError):
    """Raised (or recorded) when the host refuses to register a block."""

    def __init__(self, block_id: str, path: Path, reason: str | None = None) -> None:
        detail = f": {reason}" if reason else ""
        super().__init__(f"Host rejected block '{block_id}' at {path}{detail}")
        self.block_id = block_id
        self.path = path


class ScaffoldError(BlocksmithError):
    """Base exception for block scaffolding failures."""


class ScaffoldIOError(ScaffoldError):
    """Raised when generated files cannot be written."""


class InvalidBlockNameError(ScaffoldError, InvalidBlockIdentifierError):
    """Raised when a human-readable name yields no valid block identifier."""


class PatchTargetNotFoundError(ScaffoldError):
    """Raised when a source file to patch lacks the expected structure."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Unable to patch {path}: {reason}")
        self.path = path
        self.reason = reason


def exception_messages(exc: BaseException) -> list[str]:
    """Return the collected message chain for an exception and its causes."""
    messages: list[str] = []
    visited: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in visited:
        visited.add(id(current))
        text = str(current).strip()
        if text:
            first_line = text.splitlines()[0].strip()
            if first_line:
                messages.append(first_line)
        current = current.__cause__ or current.__context__
    return messages


def exception_hint(exc: BaseException) -> str | None:
    """Return the most specific message available for an exception chain."""
    messages = exception_messages(exc)
    return messages[-1] if messages else None


__all__ = [
    "BlocksmithError",
    "HostRejectedError",
    "InvalidBlockIdentifierError",
    "InvalidBlockNameError",
    "ManifestError",
    "PatchTargetNotFoundError",
    "RegistrySourceError",
    "ScaffoldError",
    "ScaffoldIOError",
    "exception_hint",
    "exception_messages",
]
