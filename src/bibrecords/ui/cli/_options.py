"""Shared Typer option definitions for CLI commands."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer


INPUTS_PANEL = "Input Handling"
OUTPUT_PANEL = "Output"
DIAGNOSTICS_PANEL = "Diagnostics"

BibFilesArgument = Annotated[
    list[Path],
    typer.Argument(
        metavar="BIBFILE...",
        help="BibTeX files (.bib) to load.",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
        resolve_path=True,
        rich_help_panel=INPUTS_PANEL,
    ),
]

ParticleOption = Annotated[
    str,
    typer.Option(
        "--particle",
        help="Key used for name particles: 'dropping-particle' or 'non-dropping-particle'.",
        rich_help_panel=OUTPUT_PANEL,
    ),
]

NoParseNamesOption = Annotated[
    bool,
    typer.Option(
        "--no-parse-names",
        help="Keep author and editor fields as single unparsed names.",
        rich_help_panel=INPUTS_PANEL,
    ),
]

VerboseOption = Annotated[
    int,
    typer.Option(
        "--verbose",
        "-v",
        count=True,
        help="Increase diagnostic verbosity (repeatable).",
        rich_help_panel=DIAGNOSTICS_PANEL,
    ),
]

DebugOption = Annotated[
    bool,
    typer.Option(
        "--debug",
        help="Show full tracebacks on failure.",
        rich_help_panel=DIAGNOSTICS_PANEL,
    ),
]
