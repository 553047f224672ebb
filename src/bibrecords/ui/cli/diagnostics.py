"""Rich-backed diagnostic emitter used by the CLI commands."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from bibrecords.core.diagnostics import format_event_message

from .state import CLIState, emit_error, emit_warning, get_cli_state, render_message


class CliEmitter:
    """Print collection warnings on stderr; event summaries need ``-v``.

    Every event is also kept in `events` so commands can inspect what the
    collection reported.
    """

    def __init__(self, state: CLIState | None = None) -> None:
        self._state = state or get_cli_state()
        self.events: list[tuple[str, dict[str, Any]]] = []

    @property
    def debug_enabled(self) -> bool:
        return self._state.show_tracebacks

    def warning(self, message: str, exc: BaseException | None = None) -> None:
        emit_warning(message, exception=exc)

    def error(self, message: str, exc: BaseException | None = None) -> None:
        emit_error(message, exception=exc)

    def event(self, name: str, payload: Mapping[str, Any]) -> None:
        self.events.append((name, dict(payload)))
        summary = format_event_message(name, payload)
        if summary and self._state.verbosity >= 1:
            render_message("info", summary)


__all__ = ["CliEmitter"]
