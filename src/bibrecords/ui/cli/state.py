"""Per-invocation CLI state: verbosity, traceback policy, and rich consoles."""

from __future__ import annotations

from contextvars import ContextVar
from dataclasses import dataclass
import sys
from typing import Literal

import click
from rich.console import Console
from rich.text import Text
import typer


__all__ = [
    "CLIState",
    "debug_enabled",
    "emit_error",
    "emit_warning",
    "get_cli_state",
    "render_message",
    "set_cli_state",
]

MessageLevel = Literal["info", "warning", "error"]

_LEVEL_STYLES: dict[str, str] = {"warning": "yellow", "error": "red"}


@dataclass(slots=True)
class CLIState:
    """Options shared by every command of one CLI invocation."""

    verbosity: int = 0
    show_tracebacks: bool = False

    @property
    def console(self) -> Console:
        """Console bound to the current ``sys.stdout``."""
        return Console(file=sys.stdout)

    @property
    def err_console(self) -> Console:
        """Console bound to the current ``sys.stderr``."""
        return Console(file=sys.stderr, highlight=False)


_STATE_VAR: ContextVar[CLIState | None] = ContextVar("bibrecords_cli_state", default=None)


def _state_from_context(ctx: click.Context | None) -> CLIState | None:
    while ctx is not None:
        if isinstance(ctx.obj, CLIState):
            return ctx.obj
        ctx = ctx.parent
    return None


def get_cli_state(
    ctx: typer.Context | click.Context | None = None,
    *,
    create: bool = True,
) -> CLIState:
    """Return the state attached to the click context chain or the current task.

    Raises `RuntimeError` when no state exists and *create* is false.
    """
    if ctx is None:
        ctx = click.get_current_context(silent=True)

    state = _state_from_context(ctx) or _STATE_VAR.get()
    if state is None:
        if not create:
            raise RuntimeError("CLI state is not initialised for this context.")
        state = CLIState()
    if ctx is not None and ctx.obj is None:
        ctx.obj = state
    _STATE_VAR.set(state)
    return state


def set_cli_state(
    *,
    ctx: typer.Context | None = None,
    verbosity: int | None = None,
    debug: bool | None = None,
) -> CLIState:
    state = get_cli_state(ctx)
    if verbosity is not None:
        state.verbosity = max(0, verbosity)
    if debug is not None:
        state.show_tracebacks = debug
    return state


def _cause_lines(exc: BaseException) -> list[str]:
    lines: list[str] = []
    seen: set[int] = set()
    cause = exc.__cause__ or exc.__context__
    while cause is not None and id(cause) not in seen:
        seen.add(id(cause))
        lines.append(f"  {type(cause).__name__}: {cause}")
        cause = cause.__cause__ or cause.__context__
    return lines


def render_message(
    level: MessageLevel,
    message: str,
    *,
    exception: BaseException | None = None,
) -> None:
    """Print *message* on stderr; details of *exception* follow with ``-v``."""
    state = get_cli_state()
    console = state.err_console
    if level == "info":
        console.log(message)
        return

    style = _LEVEL_STYLES[level]
    text = Text.assemble((f"{level}: ", f"bold {style}"), (message, style))
    if exception is not None and state.verbosity >= 1:
        details = [f"type: {type(exception).__name__}"]
        reason = str(exception).strip()
        if reason and reason not in message:
            details.insert(0, reason)
        if state.verbosity >= 2:
            causes = _cause_lines(exception)
            if causes:
                details += ["caused by:", *causes]
        text.append("\n" + "\n".join(details), style=style)
    console.print(text)


def emit_warning(message: str, *, exception: BaseException | None = None) -> None:
    render_message("warning", message, exception=exception)


def emit_error(message: str, *, exception: BaseException | None = None) -> None:
    render_message("error", message, exception=exception)


def debug_enabled() -> bool:
    """Return whether full tracebacks were requested with ``--debug``."""
    try:
        return get_cli_state(create=False).show_tracebacks
    except RuntimeError:
        return False
