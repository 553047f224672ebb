"""Rich rendering helpers for record collections."""

from __future__ import annotations

from collections.abc import Iterable

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from bibrecords.core.bibliography import NAME_FIELDS, Name, Record, RecordCollection


def format_name_list(names: Iterable[Name]) -> str:
    """Render names in display order, comma separated."""
    return ", ".join(text for text in (name.display_order() for name in names) if text)


def build_record_panel(record: Record, *, source: object | None = None) -> Panel:
    fields = {name: str(value) for name, value in record.items()}
    grid = Table.grid(padding=(0, 1))
    grid.add_column(style="bold green", no_wrap=True)
    grid.add_column()

    def _add_field(label: str, value: str | None) -> None:
        if value is None or not value.strip():
            return
        grid.add_row(label, value)

    _add_field("Title", fields.pop("title", None))
    _add_field("Year", fields.pop("year", None))
    journal = fields.pop("journal", None) or fields.pop("booktitle", None)
    _add_field("Journal", journal)

    for role in NAME_FIELDS:
        if role in fields:
            fields.pop(role)
            _add_field(f"{role.title()}s", format_name_list(record.names_for(role)))

    if source is not None:
        _add_field("Source", str(source))

    for name, value in sorted(fields.items()):
        _add_field(name.title(), value)

    return Panel(grid, title=f"{record.key} ({record.kind})", box=box.SIMPLE)


def _files_table(stats: Iterable[tuple[object, int]]) -> Table:
    table = Table(title="Bibliography Files", box=box.SIMPLE, header_style="bold cyan")
    table.add_column("File", overflow="fold")
    table.add_column("Entries", justify="right")
    for path, count in stats:
        table.add_row(str(path), str(count))
    return table


def _issues_table(collection: RecordCollection) -> Table:
    table = Table(title="Warnings", box=box.SIMPLE, header_style="bold yellow")
    for column in ("Key", "Message", "Source"):
        table.add_column(column, style="yellow", no_wrap=column == "Key")
    for issue in collection.issues:
        table.add_row(issue.key or "-", issue.message, str(issue.source or "-"))
    return table


def print_collection_overview(
    collection: RecordCollection, *, console: Console | None = None
) -> None:
    """Print loaded files, collection issues, then one panel per record in key order."""
    console = console or Console()
    if collection.file_stats:
        console.print(_files_table(collection.file_stats))
    if collection.issues:
        console.print(_issues_table(collection))

    records = collection.sorted_records()
    if not records:
        console.print("[dim]No references found.[/]")
        return
    for record in records:
        console.print(build_record_panel(record, source=collection.source_of(record.key)))
        console.print()


__all__ = ["build_record_panel", "format_name_list", "print_collection_overview"]
