"""Bibliographic records exposed through the public API.

Architecture
: `Value` stores a field as an ordered sequence of `Literal` and `SymbolRef`
  tokens, so concatenations such as ``jan # " 1"`` survive until a caller
  chooses to render or substitute them.
: `Name` and `parse_name` decompose free-text author strings using the BibTeX
  ``First von Last`` / ``von Last, Jr, First`` conventions.
: `Record` owns its field values, derives names on demand, generates citation
  keys, and exports CSL-style citation dictionaries.
: `RecordCollection` owns key uniqueness: when a key is already taken it asks
  the record for successive candidates until one is free.
: `records_from_string` and `records_from_file` adapt pybtex's BibTeX grammar
  so file parsing stays outside the record layer.

Usage Example

```pycon
>>> from bibrecords.core.bibliography import Record, RecordCollection
>>> record = Record("book", author="van Beethoven, Ludwig", year=1801).parse_names()
>>> record.generate_key()
'beethoven1801a'
>>> record.to_citation()["author"]
[{'family': 'Beethoven', 'given': 'Ludwig', 'dropping-particle': 'van'}]
```
"""

from __future__ import annotations

from .collection import CollectionView, RecordCollection, resolve_unique_key
from .issues import BibliographyIssue
from .months import month_number, month_symbol
from .names import Name, parse_name, parse_names, split_names
from .parsing import record_from_entry, records_from_data, records_from_file, records_from_string
from .record import NAME_FIELDS, UNSPECIFIED_KIND, Filter, Record, suffix_letters
from .value import Literal, SymbolRef, Token, Value


__all__ = [
    "NAME_FIELDS",
    "UNSPECIFIED_KIND",
    "BibliographyIssue",
    "CollectionView",
    "Filter",
    "Literal",
    "Name",
    "Record",
    "RecordCollection",
    "SymbolRef",
    "Token",
    "Value",
    "month_number",
    "month_symbol",
    "parse_name",
    "parse_names",
    "record_from_entry",
    "records_from_data",
    "records_from_file",
    "records_from_string",
    "resolve_unique_key",
    "split_names",
    "suffix_letters",
]
