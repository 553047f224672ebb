"""Option models used by citation export and record collections.

CitationOptions

`particle_key` (`"dropping-particle" | "non-dropping-particle"`)
: Name of the key under which a name particle ("van", "de la") is exported.
  CSL processors treat dropping particles as part of the given name when
  sorting, and non-dropping particles as part of the family name.

`include_id` (`bool`)
: Emit the record key under `id` in each citation structure.

`name_fields` (`tuple[str, ...]`)
: Fields exported as structured name lists rather than rendered strings.

CollectionOptions

`max_key_candidates` (`int`)
: Upper bound on the suffix candidates (`a` … `z`, `aa` … `zz`) tried while
  resolving a key collision. At most 702.

`parse_names` (`bool`)
: Parse author, editor, and translator fields of records loaded from BibTeX
  sources so keys and exports use family names.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


MAX_KEY_CANDIDATES = 26 + 26 * 26

ParticleKey = Literal["dropping-particle", "non-dropping-particle"]


class CitationOptions(BaseModel):
    """Options controlling `Record.to_citation`."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    particle_key: ParticleKey = "dropping-particle"
    include_id: bool = True
    name_fields: tuple[str, ...] = ("author", "editor", "translator")

    @field_validator("name_fields")
    @classmethod
    def lower_name_fields(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        """Field names are case-insensitive; store them lowercased."""
        return tuple(name.lower() for name in value)


class CollectionOptions(BaseModel):
    """Options controlling `RecordCollection` key assignment and loading."""

    model_config = ConfigDict(extra="forbid")

    max_key_candidates: int = Field(default=MAX_KEY_CANDIDATES, ge=1, le=MAX_KEY_CANDIDATES)
    parse_names: bool = True


__all__ = [
    "MAX_KEY_CANDIDATES",
    "CitationOptions",
    "CollectionOptions",
    "ParticleKey",
]
