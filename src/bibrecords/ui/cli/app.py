"""Typer application wiring for the bibrecords CLI."""

from __future__ import annotations

from typing import Annotated

import typer

from bibrecords.core.exceptions import exception_hint
from bibrecords.version import get_version

from .commands import citeproc, list_records
from .state import debug_enabled, emit_error, get_cli_state


app = typer.Typer(
    help="Inspect BibTeX records, their citation keys, and CSL-JSON exports.",
    context_settings={"help_option_names": ["--help"]},
    no_args_is_help=True,
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(get_version())
        raise typer.Exit()


@app.callback()
def _root(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            help="Show the bibrecords version and exit.",
            callback=_version_callback,
            is_eager=True,
        ),
    ] = False,
) -> None:
    """Inspect BibTeX records, their citation keys, and CSL-JSON exports."""


app.command("list")(list_records)
app.command("citeproc")(citeproc)


def _report_failure(exc: Exception) -> None:
    state = get_cli_state()
    if not state.show_tracebacks:
        emit_error(exception_hint(exc) or str(exc), exception=exc)
        return
    from rich.traceback import Traceback

    state.err_console.print(
        Traceback.from_exception(
            type(exc), exc, exc.__traceback__, show_locals=state.verbosity >= 2
        )
    )


def main() -> None:
    """Run the CLI; unexpected failures become a one-line error and exit code 1."""
    try:
        app()
    except KeyboardInterrupt as exc:
        if debug_enabled():
            raise
        emit_error("Interrupted.", exception=exc)
        raise typer.Exit(code=1) from exc
    except (typer.Exit, SystemExit):
        raise
    except Exception as exc:
        _report_failure(exc)
        raise typer.Exit(code=1) from exc


__all__ = ["app", "main"]
