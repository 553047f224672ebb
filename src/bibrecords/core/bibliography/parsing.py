"""Adapters between pybtex's BibTeX grammar and `Record` instances."""

from __future__ import annotations

import io
from pathlib import Path

from pybtex.database import BibliographyData, Entry
from pybtex.database.input import bibtex
from pybtex.exceptions import PybtexError

from .names import Name
from .record import Record


def record_from_entry(key: str, entry: Entry, *, structured_names: bool = True) -> Record:
    """Convert a pybtex entry into a record.

    Person roles become ``and``-joined field strings. With *structured_names*
    the persons pybtex already decomposed are kept as the parsed names of
    those fields; otherwise the fields stay unparsed until `Record.parse_names`.
    """
    record = Record(kind=entry.type, key=key)
    for field_name, value in entry.fields.items():
        record.set(str(field_name), value)
    for role, persons in entry.persons.items():
        if not persons:
            continue
        if structured_names:
            record.set_names(str(role), (Name.from_person(person) for person in persons))
        else:
            record.set(str(role), " and ".join(str(person) for person in persons))
    return record


def records_from_data(
    data: BibliographyData, *, structured_names: bool = True
) -> list[Record]:
    """Return records for every entry of *data*, in source order."""
    return [
        record_from_entry(key, entry, structured_names=structured_names)
        for key, entry in data.entries.items()
    ]


def records_from_string(payload: str, *, structured_names: bool = True) -> list[Record]:
    """Parse a BibTeX payload into records."""
    parser = bibtex.Parser()
    try:
        data = parser.parse_stream(io.StringIO(payload))
    except (OSError, PybtexError) as exc:
        raise PybtexError(f"Failed to parse bibliography payload: {exc}") from exc
    return records_from_data(data, structured_names=structured_names)


def records_from_file(path: Path | str, *, structured_names: bool = True) -> list[Record]:
    """Parse a BibTeX file into records; parser errors propagate."""
    parser = bibtex.Parser()
    data = parser.parse_file(str(path))
    return records_from_data(data, structured_names=structured_names)


__all__ = [
    "record_from_entry",
    "records_from_data",
    "records_from_file",
    "records_from_string",
]
