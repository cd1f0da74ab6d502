"""Diagnostic abstractions shared by registration, publication and scaffolding."""

from __future__ import annotations

from collections.abc import Mapping
import logging
from typing import Any, Protocol, runtime_checkable


logger = logging.getLogger(__name__)


@runtime_checkable
class DiagnosticEmitter(Protocol):
    """Interface used to surface warnings, errors, and structured events."""

    debug_enabled: bool

    def warning(self, message: str, exc: BaseException | None = None) -> None: ...

    def error(self, message: str, exc: BaseException | None = None) -> None: ...

    def event(self, name: str, payload: Mapping[str, Any]) -> None: ...


class NullEmitter:
    """Emitter that ignores every diagnostic."""

    debug_enabled: bool = False

    def warning(self, message: str, exc: BaseException | None = None) -> None:
        return

    def error(self, message: str, exc: BaseException | None = None) -> None:
        return

    def event(self, name: str, payload: Mapping[str, Any]) -> None:
        return


class LoggingEmitter:
    """Emitter that forwards diagnostics to the standard logging module."""

    def __init__(
        self, *, logger_obj: logging.Logger | None = None, debug_enabled: bool = False
    ) -> None:
        self._logger = logger_obj or logger
        self.debug_enabled = debug_enabled

    def warning(self, message: str, exc: BaseException | None = None) -> None:
        if exc is not None:
            self._logger.warning(message, exc_info=exc)
        else:
            self._logger.warning(message)

    def error(self, message: str, exc: BaseException | None = None) -> None:
        if exc is not None:
            self._logger.error(message, exc_info=exc)
        else:
            self._logger.error(message)

    def event(self, name: str, payload: Mapping[str, Any]) -> None:
        message = format_event_message(name, payload)
        if message:
            self._logger.info(message)
            return
        self._logger.debug("diagnostic event %s: %s", name, dict(payload))


def format_event_message(name: str, payload: Mapping[str, Any]) -> str | None:
    """Return a human-friendly summary for selected diagnostic events."""
    data = dict(payload)
    block = data.get("block") or "<unknown>"

    if name == "block_absent":
        return f"Block folder '{block}' not found at {data.get('path')}"

    if name == "block_invalid":
        return f"block.json not found for '{block}' at {data.get('path')}"

    if name == "block_invalid_id":
        return f"Skipping malformed block identifier '{block}' declared in {data.get('path')}"

    if name == "block_registered":
        return f"Block '{block}' registered successfully"

    if name == "block_rejected":
        return f"Failed to register block '{block}'"

    if name == "asset_enqueued":
        kind = data.get("kind") or "asset"
        handle = data.get("handle") or "<unknown>"
        return f"Asset {kind} '{handle}' loaded: {data.get('url')}"

    if name == "asset_missing":
        return f"Asset '{data.get('key')}' not found in manifest"

    if name == "manifest_missing":
        return f"manifest.json not found under {data.get('path')}"

    if name == "manifest_invalid":
        reason = data.get("reason")
        suffix = f" ({reason})" if reason else ""
        return f"manifest at {data.get('path')} is unreadable{suffix}"

    return None


__all__ = [
    "DiagnosticEmitter",
    "LoggingEmitter",
    "NullEmitter",
    "format_event_message",
]
