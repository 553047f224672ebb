"""Custom exception hierarchy for bibliographic record handling."""

from __future__ import annotations


class BibliographyError(RuntimeError):
    """Base exception for bibliography record failures."""


class InvalidValueType(BibliographyError, TypeError):
    """Raised when a field value is built from an unsupported kind of input."""


class UnparseableName(BibliographyError, ValueError):
    """Raised by strict name parsing when a name string has no usable parts."""


class KeySpaceExhausted(BibliographyError):
    """Raised when every suffix candidate for a citation key is already taken."""


def exception_messages(exc: BaseException) -> list[str]:
    """Return the collected message chain for an exception and its causes."""
    messages: list[str] = []
    visited: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in visited:
        visited.add(id(current))
        text = str(current).strip()
        if text:
            first_line = text.splitlines()[0].strip()
            if first_line:
                messages.append(first_line)
        current = current.__cause__ or current.__context__
    return messages


def exception_hint(exc: BaseException) -> str | None:
    """Return the most specific message available for an exception chain."""
    messages = exception_messages(exc)
    return messages[-1] if messages else None


__all__ = [
    "BibliographyError",
    "InvalidValueType",
    "KeySpaceExhausted",
    "UnparseableName",
    "exception_hint",
    "exception_messages",
]
