"""Diagnostics raised while loading records and resolving keys.

`RecordCollection` reports through a `DiagnosticEmitter` so callers decide
where warnings and structured events end up: nowhere (`NullEmitter`), the
``logging`` module (`LoggingEmitter`), or a rich console (the CLI emitter).

Events

`key_reassigned`
: ``original``, ``assigned`` and ``attempts`` when a key collision was resolved.

`source_loaded`
: ``source`` and ``count`` after a BibTeX source has been merged.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
import logging
from typing import Any, Protocol, runtime_checkable


logger = logging.getLogger(__name__)


@runtime_checkable
class DiagnosticEmitter(Protocol):
    """Sink for warnings, errors, and structured events."""

    debug_enabled: bool

    def warning(self, message: str, exc: BaseException | None = None) -> None: ...

    def error(self, message: str, exc: BaseException | None = None) -> None: ...

    def event(self, name: str, payload: Mapping[str, Any]) -> None: ...


class NullEmitter:
    """Discard every diagnostic."""

    debug_enabled: bool = False

    def warning(self, message: str, exc: BaseException | None = None) -> None:
        del message, exc

    def error(self, message: str, exc: BaseException | None = None) -> None:
        del message, exc

    def event(self, name: str, payload: Mapping[str, Any]) -> None:
        del name, payload


class LoggingEmitter:
    """Forward diagnostics to a `logging.Logger`.

    Known events are logged at INFO with a readable summary, unknown ones at
    DEBUG with their raw payload.
    """

    def __init__(
        self, *, logger_obj: logging.Logger | None = None, debug_enabled: bool = False
    ) -> None:
        self._logger = logger_obj or logger
        self.debug_enabled = debug_enabled

    def warning(self, message: str, exc: BaseException | None = None) -> None:
        self._logger.warning(message, exc_info=exc)

    def error(self, message: str, exc: BaseException | None = None) -> None:
        self._logger.error(message, exc_info=exc)

    def event(self, name: str, payload: Mapping[str, Any]) -> None:
        summary = format_event_message(name, payload)
        if summary is None:
            self._logger.debug("Unhandled event %s: %s", name, dict(payload))
        else:
            self._logger.info(summary)


def _key_reassigned(data: Mapping[str, Any]) -> str:
    attempts = data.get("attempts")
    tail = f" after {attempts} attempt(s)" if attempts else ""
    return (
        f"Key '{data.get('original') or '<unknown>'}' already taken; "
        f"assigned '{data.get('assigned') or '<unknown>'}'{tail}"
    )


def _source_loaded(data: Mapping[str, Any]) -> str:
    return f"Loaded {data.get('count', 0)} reference(s) from {data.get('source') or '<unknown>'}"


_EVENT_FORMATTERS: dict[str, Callable[[Mapping[str, Any]], str]] = {
    "key_reassigned": _key_reassigned,
    "source_loaded": _source_loaded,
}


def format_event_message(name: str, payload: Mapping[str, Any]) -> str | None:
    """Return a one-line summary of a known event, ``None`` otherwise."""
    formatter = _EVENT_FORMATTERS.get(name)
    return formatter(payload) if formatter is not None else None


__all__ = [
    "DiagnosticEmitter",
    "LoggingEmitter",
    "NullEmitter",
    "format_event_message",
]
