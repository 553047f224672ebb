"""Personal name parsing following the BibTeX conventions.

Three input shapes are recognised:

- ``First von Last`` (no comma), e.g. ``Ludwig van Beethoven``;
- ``von Last, First``, e.g. ``van Beethoven, Ludwig``;
- ``von Last, Jr, First``, e.g. ``King, Jr., Martin Luther``.

Splitting and the von/Last/Jr/First decomposition come from pybtex, so
braced words (``{de la}``) are case-protected and separators inside braces
(``{Barnes and Noble}``) are ignored. On top of pybtex, the first word of the
space form is never a particle and a trailing ``Jr``/``III`` is read as the
suffix.
"""

from __future__ import annotations

from dataclasses import dataclass
import functools
import logging
import re
from typing import Literal

from pybtex.bibtex.utils import split_name_list, split_tex_string
from pybtex.database import Person

from bibrecords.core.exceptions import UnparseableName


logger = logging.getLogger(__name__)

NameForm = Literal["sort", "display"]

_SUFFIX_RE = re.compile(r"^(?:jr|sr|jnr|snr)\.?$|^(?:ii|iii|iv)$", re.IGNORECASE)


def _join(words: list[str]) -> str | None:
    return " ".join(words) if words else None


@functools.total_ordering
@dataclass(frozen=True, slots=True, eq=False)
class Name:
    """Structured personal name; compares and sorts by ``(family, given)``."""

    family: str | None = None
    given: str | None = None
    particle: str | None = None
    suffix: str | None = None

    @classmethod
    def parse(cls, text: str, *, strict: bool = False) -> Name:
        return parse_name(text, strict=strict)

    @classmethod
    def from_person(cls, person: Person) -> Name:
        """Build a name from an already decomposed pybtex `Person`."""
        return cls(
            family=_join(person.last_names),
            given=_join(person.first_names + person.middle_names),
            particle=_join(person.prelast_names),
            suffix=_join(person.lineage_names),
        )

    def _sort_key(self) -> tuple[str, str]:
        return (self.family or "", self.given or "")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Name):
            return NotImplemented
        return self._sort_key() == other._sort_key()

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Name):
            return NotImplemented
        return self._sort_key() < other._sort_key()

    def __hash__(self) -> int:
        return hash(self._sort_key())

    def __str__(self) -> str:
        return self.sort_order()

    def is_empty(self) -> bool:
        return not any((self.family, self.given, self.particle, self.suffix))

    def sort_order(self) -> str:
        """Render as ``von Last, Jr, First``."""
        head = " ".join(part for part in (self.particle, self.family) if part)
        parts = [head]
        if self.suffix:
            parts.append(self.suffix)
        if self.given:
            parts.append(self.given)
        return ", ".join(part for part in parts if part)

    def display_order(self) -> str:
        """Render as ``First von Last, Jr``."""
        text = " ".join(part for part in (self.given, self.particle, self.family) if part)
        if self.suffix:
            text = f"{text}, {self.suffix}" if text else self.suffix
        return text

    def to_string(self, form: NameForm = "sort") -> str:
        if form == "display":
            return self.display_order()
        if form == "sort":
            return self.sort_order()
        raise ValueError(f"Unknown name form '{form}'.")

    def initials(self) -> str:
        """Return the initials of the given names, e.g. ``E. A.`` for ``Edgar Allan``."""
        if not self.given:
            return ""
        initials: list[str] = []
        for word in split_tex_string(self.given):
            hyphenated = [_initial(part) for part in word.split("-") if part]
            initials.append("-".join(initial for initial in hyphenated if initial))
        return " ".join(initial for initial in initials if initial)

    def to_citation(self, particle_key: str = "dropping-particle") -> dict[str, str]:
        payload: dict[str, str] = {}
        if self.family:
            payload["family"] = self.family
        if self.given:
            payload["given"] = self.given
        if self.particle:
            payload[particle_key] = self.particle
        if self.suffix:
            payload["suffix"] = self.suffix
        return payload


def _initial(word: str) -> str:
    for char in word:
        if char.isalpha():
            return f"{char.upper()}."
    return ""


def split_names(text: str) -> list[str]:
    """Split an ``and``-separated name list, ignoring ``and`` inside braces.

    Whitespace runs and ties (``~``) outside braces are collapsed first, so the
    separator is matched whatever spacing surrounds it.
    """
    normalised = " ".join(split_tex_string(text or ""))
    return [piece for piece in split_name_list(normalised) if piece]


def parse_name(text: str, *, strict: bool = False) -> Name:
    """Parse a single name string into a `Name`.

    Empty or malformed input yields an empty `Name` unless *strict* is set, in
    which case `UnparseableName` is raised.
    """
    try:
        return _parse(text)
    except UnparseableName:
        if strict:
            raise
        logger.debug("Unable to parse name %r; using an empty name.", text)
        return Name()


def parse_names(text: str) -> list[Name]:
    """Parse every non-empty name of an ``and``-separated list."""
    names = [parse_name(piece) for piece in split_names(text)]
    return [name for name in names if not name.is_empty()]


def _parse(text: str) -> Name:
    if not any(char.isalnum() for char in text or ""):
        raise UnparseableName(f"Name {text!r} is empty.")

    segments = split_tex_string(text, ",")
    if len(segments) > 1:
        name = _parse_comma_form(segments)
    else:
        name = _parse_space_form(split_tex_string(text))
    if not name.family:
        raise UnparseableName(f"Name {text!r} has no family name.")
    return name


def _parse_comma_form(segments: list[str]) -> Name:
    # pybtex rejects more than three segments; extra ones belong to the given name.
    name = Name.from_person(Person(", ".join(segments[:3])))
    if len(segments) > 3:
        given = ", ".join(segment for segment in segments[2:] if segment)
        name = Name(name.family, given or None, name.particle, name.suffix)
    return name


def _parse_space_form(words: list[str]) -> Name:
    suffix = None
    if len(words) >= 3 and _SUFFIX_RE.match(words[-1]):
        suffix = words[-1]
        words = words[:-1]

    if len(words) == 1:
        return Name(family=words[0], suffix=suffix)

    # The first word is never a particle, so only the rest goes through pybtex.
    rest = Name.from_person(Person(" ".join(words[1:])))
    return Name(
        family=rest.family,
        given=" ".join(part for part in (words[0], rest.given) if part),
        particle=rest.particle,
        suffix=suffix,
    )


__all__ = [
    "Name",
    "NameForm",
    "parse_name",
    "parse_names",
    "split_names",
]
