"""Bibliographic records: fields, derived names, keys, and citation export."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator, Mapping
from string import ascii_lowercase
import logging
import re
from types import MappingProxyType
from typing import Any, Protocol, Union, runtime_checkable

from bibrecords.core.config import CitationOptions
from bibrecords.core.exceptions import InvalidValueType, KeySpaceExhausted

from .months import month_number, month_symbol
from .names import Name, parse_names
from .value import Literal, SymbolRef, Value, ValueInput


logger = logging.getLogger(__name__)

UNSPECIFIED_KIND = "unspecified"
NAME_FIELDS: tuple[str, ...] = ("author", "editor", "translator")

FieldInput = Union[Value, str, Literal, SymbolRef, int, list[Any], tuple[Any, ...]]
FieldPredicate = Callable[[str, Value], bool]

_KEY_WORD_RE = re.compile(r"[^\W\d_]+")
_DIGITS_RE = re.compile(r"\d+")
_YEAR_RE = re.compile(r"(?<!\d)\d{4}(?!\d)")

# BibTeX fields exported under their CSL name.
_CITATION_FIELD_NAMES: dict[str, str] = {"address": "publisher-place", "type": "genre"}
_RESERVED_CITATION_KEYS = frozenset({"id", "type", "issued", "publisher-place"})


@runtime_checkable
class Filter(Protocol):
    """Capability applied to field values by `Record.convert`."""

    def apply(self, value: Value) -> ValueInput: ...


def suffix_letters(index: int) -> str:
    """Return the key suffix for *index*: ``a`` … ``z``, then ``aa`` … ``zz``."""
    if index < 0:
        raise ValueError(f"Suffix index must be non-negative, got {index}.")
    if index < 26:
        return ascii_lowercase[index]
    index -= 26
    if index < 26 * 26:
        return ascii_lowercase[index // 26] + ascii_lowercase[index % 26]
    raise KeySpaceExhausted(f"No key suffix is available for index {index + 26}.")


def _field_name(field: object) -> str:
    name = str(field).strip().lower()
    if not name:
        raise KeyError("Field names must not be empty.")
    return name


class Record:
    """A single bibliography entry.

    Fields map lowercase names to `Value` instances owned by the record. Name
    fields are parsed on request through `parse_names`; until then `names`
    returns one `Name` per field whose family is the whole field text.
    """

    def __init__(
        self,
        kind: str | None = None,
        key: str | None = None,
        fields: Mapping[str, FieldInput] | None = None,
        **extra_fields: FieldInput,
    ) -> None:
        self.kind = str(kind).strip().lower() if kind else UNSPECIFIED_KIND
        self._key: str | None = None
        self._fields: dict[str, Value] = {}
        self._parsed_names: dict[str, list[Name]] = {}
        self.key = key
        for field, value in {**dict(fields or {}), **extra_fields}.items():
            self.set(field, value)

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> Record:
        """Build a record from a mapping where ``type`` and ``key`` are special."""
        payload = {str(name).lower(): value for name, value in mapping.items()}
        kind, alias = payload.pop("type", None), payload.pop("kind", None)
        key = payload.pop("key", None)
        return cls(kind=kind or alias, key=key, fields=payload)

    # Keys

    @property
    def key(self) -> str:
        """Return the assigned key, or the generated one when none is assigned."""
        return self._key if self._key is not None else self.generate_key()

    @key.setter
    def key(self, value: str | None) -> None:
        if value is None:
            self._key = None
            return
        text = str(value).strip()
        self._key = text or None

    @property
    def has_assigned_key(self) -> bool:
        return self._key is not None

    def generate_key(self) -> str:
        """Return the first key candidate (suffix ``a``) for the current fields."""
        return self.candidate_key(0)

    def candidate_key(self, index: int) -> str:
        """Return the key candidate with the suffix at position *index*."""
        return f"{self._key_base()}{suffix_letters(index)}"

    def _key_base(self) -> str:
        names = self.names()
        source = (names[0].family or "") if names else ""
        match = _KEY_WORD_RE.search(source)
        base = match.group(0) if match else "unknown"
        year = self._fields.get("year")
        digits = _DIGITS_RE.search(str(year)) if year is not None else None
        base += digits.group(0) if digits else "-"
        return base.lower()

    # Field access

    @property
    def fields(self) -> Mapping[str, Value]:
        return MappingProxyType(self._fields)

    def field_names(self) -> list[str]:
        return list(self._fields)

    def items(self) -> Iterator[tuple[str, Value]]:
        yield from self._fields.items()

    def get(self, field: str, default: Value | None = None) -> Value | None:
        return self._fields.get(_field_name(field), default)

    def has(self, field: str) -> bool:
        return _field_name(field) in self._fields

    def set(self, field: str, value: FieldInput) -> Record:
        """Assign *value* to *field*, replacing any previous value."""
        name = _field_name(field)
        self._fields[name] = self._coerce(name, value)
        self._parsed_names.pop(name, None)
        return self

    def delete(self, field: str) -> Value | None:
        """Remove *field* and return its value, if any."""
        name = _field_name(field)
        self._parsed_names.pop(name, None)
        return self._fields.pop(name, None)

    def __getitem__(self, field: str) -> Value:
        return self._fields[_field_name(field)]

    def __setitem__(self, field: str, value: FieldInput) -> None:
        self.set(field, value)

    def __delitem__(self, field: str) -> None:
        name = _field_name(field)
        if name not in self._fields:
            raise KeyError(field)
        self.delete(name)

    def __contains__(self, field: object) -> bool:
        return isinstance(field, str) and self.has(field)

    def _coerce(self, field: str, value: object) -> Value:
        if value is None or isinstance(value, bool):
            raise InvalidValueType(
                f"Cannot assign {value!r} to field '{field}'; "
                "expected str, int, SymbolRef or Value instance."
            )
        if field == "month":
            symbol = self._month_symbol(value)
            if symbol is not None:
                return Value(SymbolRef(symbol))
        if isinstance(value, int):
            return Value(str(value))
        return Value(value)  # type: ignore[arg-type]

    def _month_symbol(self, value: object) -> str | None:
        if isinstance(value, Value):
            return month_symbol(str(value)) if value.is_atomic() else None
        if isinstance(value, (int, str, SymbolRef, Literal)):
            return month_symbol(value if isinstance(value, int) else str(value))
        return None

    # Copies, renaming and conversion

    def copy(self) -> Record:
        """Return a record with independent copies of every value."""
        clone = Record(kind=self.kind, key=self._key)
        clone._fields = {name: value.copy() for name, value in self._fields.items()}
        clone._parsed_names = {name: list(names) for name, names in self._parsed_names.items()}
        return clone

    __copy__ = copy

    def __deepcopy__(self, memo: dict[int, Any]) -> Record:
        return self.copy()

    def rename(self, mapping: Mapping[str, str]) -> Record:
        """Return a copy with fields renamed; the receiver is left untouched."""
        return self.copy().rename_in_place(mapping)

    def rename_in_place(self, mapping: Mapping[str, str]) -> Record:
        """Rename fields of this record; missing source fields are skipped."""
        for old, new in mapping.items():
            source, target = _field_name(old), _field_name(new)
            if source not in self._fields or source == target:
                continue
            self._fields[target] = self._fields.pop(source)
            self._parsed_names.pop(source, None)
            self._parsed_names.pop(target, None)
        return self

    def convert(
        self, value_filter: Filter, predicate: FieldPredicate | None = None
    ) -> Record:
        """Return a copy with *value_filter* applied to the selected field values."""
        return self.copy().convert_in_place(value_filter, predicate)

    def convert_in_place(
        self, value_filter: Filter, predicate: FieldPredicate | None = None
    ) -> Record:
        """Apply *value_filter* to every field (or those matching *predicate*) in place.

        Either every selected field is converted or, when the filter returns an
        unsupported value, none is.
        """
        converted = {
            name: self._coerce(name, value_filter.apply(value.copy()))
            for name, value in self._fields.items()
            if predicate is None or predicate(name, value)
        }
        self._fields.update(converted)
        for name in converted:
            self._parsed_names.pop(name, None)
        return self

    # Names

    def parse_names(self) -> Record:
        """Parse the author, editor, and translator fields into `Name` lists."""
        for field in NAME_FIELDS:
            value = self._fields.get(field)
            if value is not None:
                self._parsed_names[field] = parse_names(str(value))
        return self

    def set_names(self, field: str, names: Iterable[Name]) -> Record:
        """Store already structured *names* under *field*.

        The field value becomes the ``and``-joined sort-order rendering and the
        names are kept as the parsed form of that field.
        """
        people = [name for name in names if not name.is_empty()]
        self.set(field, " and ".join(str(name) for name in people))
        self._parsed_names[_field_name(field)] = people
        return self

    def names(self) -> list[Name]:
        """Return the names of the author, else the editor, else the translator."""
        for field in NAME_FIELDS:
            if field in self._fields:
                return self.names_for(field)
        return []

    def names_for(self, field: str) -> list[Name]:
        name = _field_name(field)
        if name in self._parsed_names:
            return list(self._parsed_names[name])
        value = self._fields.get(name)
        if value is None or value.is_empty():
            return []
        return [Name(family=str(value))]

    # Export

    def to_citation(
        self, options: CitationOptions | None = None, **overrides: Any
    ) -> dict[str, Any]:
        """Export the record as a CSL-style citation dictionary.

        Never raises on field content: unparseable dates are omitted.
        """
        opts = options or CitationOptions()
        if overrides:
            opts = CitationOptions.model_validate({**opts.model_dump(), **overrides})

        payload: dict[str, Any] = {}
        if opts.include_id:
            payload["id"] = self.key
        payload["type"] = self.kind.lower()

        for name, value in self._fields.items():
            if name in opts.name_fields or name in {"year", "month"}:
                continue
            target = _CITATION_FIELD_NAMES.get(name)
            if target is None:
                if name in _RESERVED_CITATION_KEYS:
                    logger.debug("Skipping reserved field %r of %r.", name, self.key)
                    continue
                target = name
            payload[target] = str(value)

        authors = self.names()
        if authors:
            payload["author"] = [person.to_citation(opts.particle_key) for person in authors]
        for role in opts.name_fields:
            if role == "author" or role not in self._fields:
                continue
            people = self.names_for(role)
            if people:
                payload[role] = [person.to_citation(opts.particle_key) for person in people]

        date_parts = self._date_parts()
        if date_parts:
            payload["issued"] = {"date-parts": [date_parts]}
        return payload

    def _date_parts(self) -> list[int] | None:
        year_value = self._fields.get("year")
        if year_value is None:
            return None
        year = self._year_number(year_value)
        if year is None:
            logger.debug(
                "Omitting date-parts for %r: year %r is not a number.", self.key, str(year_value)
            )
            return None

        parts = [year]
        month_value = self._fields.get("month")
        if month_value is not None:
            month = month_number(str(month_value)) if month_value.is_atomic() else None
            if month is None:
                logger.debug("Ignoring unrecognised month %r for %r.", str(month_value), self.key)
            else:
                parts.append(month)
        return parts

    def _year_number(self, value: Value) -> int | None:
        try:
            return int(value)
        except (TypeError, ValueError):
            pass
        match = _YEAR_RE.search(str(value))
        return int(match.group(0)) if match else None

    # Ordering

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Record):
            return NotImplemented
        return self.key < other.key

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, Record):
            return NotImplemented
        return self.key > other.key

    def __repr__(self) -> str:
        fields = ", ".join(f"{name}={str(value)!r}" for name, value in self._fields.items())
        return f"Record({self.kind!r}, key={self.key!r}, {fields})"


__all__ = [
    "NAME_FIELDS",
    "UNSPECIFIED_KIND",
    "FieldInput",
    "FieldPredicate",
    "Filter",
    "Record",
    "suffix_letters",
]
