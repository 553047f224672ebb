"""Implementation of the ``bibrecords citeproc`` command."""

from __future__ import annotations

import json

from pydantic import ValidationError
import typer

from bibrecords.core.bibliography import RecordCollection
from bibrecords.core.config import CitationOptions, CollectionOptions

from .._options import (
    BibFilesArgument,
    DebugOption,
    NoParseNamesOption,
    ParticleOption,
    VerboseOption,
)
from ..diagnostics import CliEmitter
from ..state import emit_error, set_cli_state


def citeproc(
    ctx: typer.Context,
    files: BibFilesArgument,
    particle: ParticleOption = "dropping-particle",
    no_parse_names: NoParseNamesOption = False,
    verbose: VerboseOption = 0,
    debug: DebugOption = False,
) -> None:
    """Export the records of the given BibTeX files as CSL-JSON."""
    state = set_cli_state(ctx=ctx, verbosity=verbose, debug=debug)
    try:
        options = CitationOptions(particle_key=particle)
    except ValidationError as exc:
        emit_error(f"Invalid particle key '{particle}'.", exception=exc)
        raise typer.Exit(code=2) from exc

    collection = RecordCollection(
        options=CollectionOptions(parse_names=not no_parse_names),
        emitter=CliEmitter(state),
    )
    collection.load_files(files)
    typer.echo(json.dumps(collection.to_citations(options), indent=2, ensure_ascii=False))
