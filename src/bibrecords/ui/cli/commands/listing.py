"""Implementation of the ``bibrecords list`` command."""

from __future__ import annotations

import typer

from bibrecords.core.bibliography import RecordCollection
from bibrecords.core.config import CollectionOptions

from .._options import BibFilesArgument, DebugOption, NoParseNamesOption, VerboseOption
from ..bibliography import print_collection_overview
from ..diagnostics import CliEmitter
from ..state import set_cli_state


def list_records(
    ctx: typer.Context,
    files: BibFilesArgument,
    no_parse_names: NoParseNamesOption = False,
    verbose: VerboseOption = 0,
    debug: DebugOption = False,
) -> None:
    """Print the records of the given BibTeX files with their resolved keys."""
    state = set_cli_state(ctx=ctx, verbosity=verbose, debug=debug)
    collection = RecordCollection(
        options=CollectionOptions(parse_names=not no_parse_names),
        emitter=CliEmitter(state),
    )
    collection.load_files(files)
    print_collection_overview(collection, console=state.console)
