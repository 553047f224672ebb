"""CLI command implementations."""

from __future__ import annotations

from .citeproc import citeproc
from .listing import list_records


__all__ = ["citeproc", "list_records"]
