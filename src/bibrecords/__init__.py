"""Primary public API for bibrecords."""

from __future__ import annotations

from bibrecords.core.bibliography import (
    BibliographyIssue,
    CollectionView,
    Filter,
    Literal,
    Name,
    Record,
    RecordCollection,
    SymbolRef,
    Value,
    parse_name,
    parse_names,
    records_from_file,
    records_from_string,
    split_names,
)
from bibrecords.core.config import CitationOptions, CollectionOptions
from bibrecords.core.exceptions import (
    BibliographyError,
    InvalidValueType,
    KeySpaceExhausted,
    UnparseableName,
)
from bibrecords.version import get_version


__version__ = get_version()


__all__ = [
    "BibliographyError",
    "BibliographyIssue",
    "CitationOptions",
    "CollectionOptions",
    "CollectionView",
    "Filter",
    "InvalidValueType",
    "KeySpaceExhausted",
    "Literal",
    "Name",
    "Record",
    "RecordCollection",
    "SymbolRef",
    "UnparseableName",
    "Value",
    "__version__",
    "get_version",
    "parse_name",
    "parse_names",
    "records_from_file",
    "records_from_string",
    "split_names",
]
