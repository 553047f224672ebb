"""Field values as ordered sequences of literal and symbolic tokens.

A BibTeX field such as ``month = nov # "~12"`` is stored as a `Value` holding
a `SymbolRef` followed by a `Literal`. String-like behaviour (comparison,
substring tests, case conversion, regex matching, numeric coercion) always
operates on the rendered display string, never on individual tokens.

```pycon
>>> from bibrecords.core.bibliography.value import Value, SymbolRef
>>> str(Value("foo"))
'foo'
>>> str(Value(SymbolRef("foo"), "bar"))
'foo # "bar"'
>>> str(Value("foo", "bar").join())
'foobar'
```
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
import functools
import re
from typing import Any, Union

from bibrecords.core.exceptions import InvalidValueType


@dataclass(frozen=True, slots=True)
class Literal:
    """Literal text segment of a value."""

    text: str

    def __str__(self) -> str:
        return self.text


@dataclass(frozen=True, slots=True)
class SymbolRef:
    """Reference to a string macro (``@string``) or predefined symbol."""

    identifier: str

    def __str__(self) -> str:
        return self.identifier


Token = Union[Literal, SymbolRef]
ValueInput = Union["Value", str, Literal, SymbolRef, Iterable[Any]]
Quotes = Union[str, tuple[str, str], list[str]]

_NUMERIC_RE = re.compile(r"^\s*[+-]?\d+[/.]?\d*\s*$")


def _tokens_from(argument: object) -> Iterator[Token]:
    match argument:
        case Value():
            yield from argument.tokens
        case str():
            yield Literal(argument)
        case Literal() | SymbolRef():
            yield argument
        case list() | tuple():
            for item in argument:
                yield from _tokens_from(item)
        case _:
            raise InvalidValueType(
                f"Failed to create Value from argument {argument!r}; "
                "expected str, SymbolRef or Value instance."
            )


def _quote_pair(quotes: Quotes) -> tuple[str, str]:
    if isinstance(quotes, str):
        return quotes, quotes
    pair = list(quotes)
    if not pair:
        return "", ""
    return pair[0], pair[-1]


@functools.total_ordering
class Value:
    """Ordered, concatenated sequence of tokens making up one field."""

    __slots__ = ("_tokens",)

    def __init__(self, *inputs: ValueInput) -> None:
        self._tokens: list[Token] = list(_tokens_from(list(inputs)))

    @property
    def tokens(self) -> tuple[Token, ...]:
        """Return the token sequence in concatenation order."""
        return tuple(self._tokens)

    def append(self, *inputs: ValueInput) -> Value:
        """Append further tokens and return the value."""
        self._tokens.extend(_tokens_from(list(inputs)))
        return self

    def copy(self) -> Value:
        return Value(self)

    __copy__ = copy

    def __deepcopy__(self, memo: dict[int, Any]) -> Value:
        return Value(self)

    def join(self) -> Value:
        """Merge every run of adjacent literals into a single literal, in place.

        Symbol references act as breaks, so ``Value(SymbolRef("a"), "b", "c")``
        joins to ``<a, "bc">``.
        """
        joined: list[Token] = []
        for token in self._tokens:
            if joined and isinstance(token, Literal) and isinstance(joined[-1], Literal):
                joined[-1] = Literal(joined[-1].text + token.text)
            else:
                joined.append(token)
        self._tokens = joined
        return self

    def replace(self, *substitutions: str | Literal | Mapping[Any, ValueInput]) -> Value:
        """Substitute symbol references, in place.

        Values without symbol references are returned untouched. A plain
        string (or `Literal`) replaces the whole token sequence. A mapping is
        a lookup table keyed by token: symbol references are also looked up by
        their identifier, while literal text is only matched by `Literal` keys,
        so ``{"jan": ...}`` never rewrites a literal ``"jan"``.
        """
        if not self.contains_symbol():
            return self

        for substitution in substitutions:
            match substitution:
                case str() | Literal():
                    self._tokens = [Literal(str(substitution))]
                case Mapping():
                    self._tokens = self._substitute(substitution)
                case _:
                    raise InvalidValueType(
                        f"Cannot replace tokens using {substitution!r}; "
                        "expected a string or a mapping."
                    )
        return self

    def _substitute(self, table: Mapping[Any, ValueInput]) -> list[Token]:
        substituted: list[Token] = []
        for token in self._tokens:
            replacement = table.get(token)
            if replacement is None and isinstance(token, SymbolRef):
                replacement = table.get(token.identifier)
            if replacement is None:
                substituted.append(token)
            else:
                substituted.extend(_tokens_from(replacement))
        return substituted

    def to_display_string(self, quotes: Quotes | None = None) -> str:
        """Render the value as text.

        Atomic values render as the bare token text. Concatenations render
        BibTeX style, literals quoted and joined with ``" # "``. When *quotes*
        is given the whole rendered value is wrapped once; a lone symbol
        reference is never quoted.
        """
        rendered = self._render()
        if quotes is None:
            return rendered
        if self.is_atomic() and self._tokens and isinstance(self._tokens[0], SymbolRef):
            return rendered
        opening, closing = _quote_pair(quotes)
        return f"{opening}{rendered}{closing}"

    def _render(self) -> str:
        if self.is_atomic():
            return str(self._tokens[0]) if self._tokens else ""
        parts = [
            f'"{token.text}"' if isinstance(token, Literal) else token.identifier
            for token in self._tokens
        ]
        return " # ".join(parts)

    def is_atomic(self) -> bool:
        """Return ``True`` when the value has no concatenation."""
        return len(self._tokens) < 2

    def is_numeric(self) -> bool:
        return _NUMERIC_RE.match(self._render()) is not None

    def contains_symbol(self) -> bool:
        return any(isinstance(token, SymbolRef) for token in self._tokens)

    def symbols(self) -> list[SymbolRef]:
        return [token for token in self._tokens if isinstance(token, SymbolRef)]

    def is_empty(self) -> bool:
        return not self._render()

    # String-like interface, always on the rendered string.

    def __str__(self) -> str:
        return self._render()

    def __repr__(self) -> str:
        inner = ", ".join(
            repr(token.text) if isinstance(token, Literal) else token.identifier
            for token in self._tokens
        )
        return f"<{inner}>"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, (Value, str)):
            return self._render() == str(other)
        return NotImplemented

    def __lt__(self, other: object) -> bool:
        if isinstance(other, (Value, str)):
            return self._render() < str(other)
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __contains__(self, item: object) -> bool:
        return str(item) in self._render()

    def __len__(self) -> int:
        return len(self._render())

    def __int__(self) -> int:
        return int(self._render().strip())

    def __float__(self) -> float:
        return float(self._render().strip())

    def lower(self) -> str:
        return self._render().lower()

    def upper(self) -> str:
        return self._render().upper()

    def strip(self) -> str:
        return self._render().strip()

    def startswith(self, prefix: str | tuple[str, ...]) -> bool:
        return self._render().startswith(prefix)

    def endswith(self, suffix: str | tuple[str, ...]) -> bool:
        return self._render().endswith(suffix)

    def match(self, pattern: str | re.Pattern[str], flags: int = 0) -> re.Match[str] | None:
        if isinstance(pattern, re.Pattern):
            return pattern.match(self._render())
        return re.match(pattern, self._render(), flags)

    def search(self, pattern: str | re.Pattern[str], flags: int = 0) -> re.Match[str] | None:
        if isinstance(pattern, re.Pattern):
            return pattern.search(self._render())
        return re.search(pattern, self._render(), flags)


__all__ = [
    "Literal",
    "SymbolRef",
    "Token",
    "Value",
    "ValueInput",
]
