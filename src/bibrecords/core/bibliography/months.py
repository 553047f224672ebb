"""Month name table shared by field assignment and citation export."""

from __future__ import annotations

import re


MONTH_SYMBOLS: tuple[str, ...] = (
    "jan",
    "feb",
    "mar",
    "apr",
    "may",
    "jun",
    "jul",
    "aug",
    "sep",
    "oct",
    "nov",
    "dec",
)

MONTH_NAMES: tuple[str, ...] = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)

_MONTH_NAME_TO_INT: dict[str, int] = {
    **{symbol: index for index, symbol in enumerate(MONTH_SYMBOLS, start=1)},
    **{name.lower(): index for index, name in enumerate(MONTH_NAMES, start=1)},
    "sept": 9,
}

_DIGITS_RE = re.compile(r"^[+]?\d+$")


def month_number(value: object) -> int | None:
    """Return the month as an integer in ``1..12``, or ``None`` if unrecognised.

    Accepts integers, digit strings, English month names, and the BibTeX
    three-letter symbols, all case-insensitively.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if 1 <= value <= 12 else None

    candidate = str(value).strip().strip("{}\"'").strip().rstrip(".").lower()
    if not candidate:
        return None

    if _DIGITS_RE.match(candidate):
        month_int = int(candidate)
        return month_int if 1 <= month_int <= 12 else None

    return _MONTH_NAME_TO_INT.get(candidate)


def month_symbol(value: object) -> str | None:
    """Return the BibTeX month symbol (``jan`` … ``dec``) for *value*."""
    number = month_number(value)
    if number is None:
        return None
    return MONTH_SYMBOLS[number - 1]


__all__ = ["MONTH_NAMES", "MONTH_SYMBOLS", "month_number", "month_symbol"]
