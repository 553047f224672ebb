"""Record collections that own key uniqueness."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
import copy
import logging
from pathlib import Path
import threading
from typing import Any, Protocol, runtime_checkable

from pybtex.exceptions import PybtexError

from bibrecords.core.config import MAX_KEY_CANDIDATES, CitationOptions, CollectionOptions
from bibrecords.core.diagnostics import DiagnosticEmitter, NullEmitter
from bibrecords.core.exceptions import KeySpaceExhausted

from .issues import BibliographyIssue
from .parsing import records_from_file, records_from_string
from .record import Record


logger = logging.getLogger(__name__)


@runtime_checkable
class CollectionView(Protocol):
    """Read-only membership test used while resolving key collisions."""

    def __contains__(self, key: object) -> bool: ...


def resolve_unique_key(
    record: Record,
    view: CollectionView,
    *,
    max_candidates: int = MAX_KEY_CANDIDATES,
) -> tuple[str, int]:
    """Return a key for *record* absent from *view* and the number of candidates tried.

    The record's current key is kept when free; otherwise its candidates are
    tried from suffix ``a`` upward.
    """
    key = record.key
    if key not in view:
        return key, 0
    for index in range(max_candidates):
        candidate = record.candidate_key(index)
        if candidate not in view:
            return candidate, index + 1
    raise KeySpaceExhausted(
        f"All {max_candidates} key candidates for '{key}' are already taken."
    )


class RecordCollection:
    """Ordered collection of records indexed by unique key.

    Insertions are serialised, so each record's key is resolved against a
    stable view of the collection.
    """

    def __init__(
        self,
        records: Iterable[Record] = (),
        *,
        options: CollectionOptions | None = None,
        emitter: DiagnosticEmitter | None = None,
    ) -> None:
        self.options = options or CollectionOptions()
        self._emitter: DiagnosticEmitter = emitter or NullEmitter()
        self._records: dict[str, Record] = {}
        self._sources: dict[str, Path] = {}
        self._issues: list[BibliographyIssue] = []
        self._file_entry_counts: dict[Path, int] = {}
        self._file_order: list[Path] = []
        self._lock = threading.Lock()
        self.extend(records)

    @property
    def issues(self) -> Sequence[BibliographyIssue]:
        """Return the issues recorded while loading and registering records."""
        return tuple(self._issues)

    @property
    def file_stats(self) -> Sequence[tuple[Path, int]]:
        """Return (file, entry_count) pairs in the order files were processed."""
        return tuple((path, self._file_entry_counts.get(path, 0)) for path in self._file_order)

    def __contains__(self, key: object) -> bool:
        return key in self._records

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[Record]:
        return iter(list(self._records.values()))

    def __getitem__(self, key: str) -> Record:
        return self._records[key]

    def keys(self) -> list[str]:
        return list(self._records)

    def add(self, record: Record, *, source: Path | str | None = None) -> Record:
        """Register *record*, assigning it a key that is unique in the collection."""
        with self._lock:
            if any(existing is record for existing in self._records.values()):
                return record

            original = record.key
            key, attempts = resolve_unique_key(
                record, self, max_candidates=self.options.max_key_candidates
            )
            record.key = key
            self._records[key] = record
            source_path = Path(source) if source is not None else None
            if source_path is not None:
                self._sources[key] = source_path

            if key != original:
                logger.debug("Reassigned key %r to %r.", original, key)
                self._issues.append(
                    BibliographyIssue(
                        message=f"Key '{original}' already in use; registered as '{key}'.",
                        key=key,
                        source=source_path,
                    )
                )
                self._emitter.event(
                    "key_reassigned",
                    {"original": original, "assigned": key, "attempts": attempts},
                )
        return record

    def extend(self, records: Iterable[Record], *, source: Path | str | None = None) -> None:
        for record in records:
            self.add(record, source=source)

    def find(self, key: str) -> Record | None:
        return self._records.get(key)

    def remove(self, key: str) -> Record | None:
        """Remove and return the record registered under *key*."""
        with self._lock:
            self._sources.pop(key, None)
            return self._records.pop(key, None)

    def source_of(self, key: str) -> Path | None:
        return self._sources.get(key)

    def sorted_records(self) -> list[Record]:
        """Return the records in ascending key order."""
        return sorted(self._records.values())

    def to_citations(
        self, options: CitationOptions | None = None, **overrides: Any
    ) -> list[dict[str, Any]]:
        """Return citation structures for every record, sorted by key."""
        return [record.to_citation(options, **overrides) for record in self.sorted_records()]

    def to_dict(self, options: CitationOptions | None = None) -> dict[str, dict[str, Any]]:
        """Return citation structures keyed by record key."""
        return {key: record.to_citation(options) for key, record in self._records.items()}

    def clone(self) -> RecordCollection:
        """Return a deep copy of the collection without reparsing sources."""
        cloned = RecordCollection(options=self.options, emitter=self._emitter)
        cloned._records = {key: record.copy() for key, record in self._records.items()}
        cloned._sources = dict(self._sources)
        cloned._issues = copy.copy(self._issues)
        cloned._file_entry_counts = dict(self._file_entry_counts)
        cloned._file_order = list(self._file_order)
        return cloned

    # Loading through the BibTeX grammar

    def load_files(self, files: Iterable[Path | str]) -> None:
        """Load BibTeX entries from one or more files."""
        for file_path in files:
            self._load_file(Path(file_path))

    def _load_file(self, file_path: Path) -> None:
        file_path = file_path.resolve()
        self._file_order.append(file_path)

        try:
            records = records_from_file(file_path, structured_names=self.options.parse_names)
        except (OSError, PybtexError) as exc:
            self._issues.append(
                BibliographyIssue(
                    message=f"Failed to parse '{file_path}': {exc}",
                    key=None,
                    source=file_path,
                )
            )
            self._emitter.warning(f"Failed to parse '{file_path}'", exc)
            self._file_entry_counts[file_path] = 0
            return

        self._register_loaded(records, file_path, empty_message="No references found in file.")

    def load_string(self, payload: str, *, source: Path | str | None = None) -> None:
        """Merge an inline BibTeX payload into the collection.

        Parse failures propagate as `PybtexError`.
        """
        source_path = Path(source) if source is not None else Path("inline-bibliography.bib")
        records = records_from_string(payload, structured_names=self.options.parse_names)
        if source_path not in self._file_order:
            self._file_order.append(source_path)
        self._register_loaded(
            records,
            source_path,
            empty_message="No references found in inline bibliography data.",
        )

    def _register_loaded(self, records: list[Record], source: Path, *, empty_message: str) -> None:
        self._file_entry_counts[source] = self._file_entry_counts.get(source, 0) + len(records)
        if not records:
            self._issues.append(BibliographyIssue(message=empty_message, key=None, source=source))
            return

        for record in records:
            self.add(record, source=source)
        self._emitter.event("source_loaded", {"source": str(source), "count": len(records)})


__all__ = ["CollectionView", "RecordCollection", "resolve_unique_key"]
