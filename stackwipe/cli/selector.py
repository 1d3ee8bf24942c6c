"""Interactive resource selection."""

from __future__ import annotations

from datetime import timezone
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from ..models.resource_kind import EPOCH, ResourceKind
from ..snapshot.catalog import Catalog


def parse_selection(text: str, count: int) -> list[int]:
    """Parse a selection like "1,3-5" into zero-based indexes.

    "all" selects everything; "", "none" and "n" select nothing.

    Args:
        text: Operator input
        count: Number of listed items

    Returns:
        Sorted unique zero-based indexes

    Raises:
        ValueError: If the input is malformed or out of range
    """
    text = text.strip().lower()
    if text in ("", "none", "n"):
        return []
    if text in ("all", "a", "*"):
        return list(range(count))

    indexes = set()
    for part in text.split(","):
        part = part.strip()
        if not part:
            continue
        if "-" in part:
            start_text, end_text = part.split("-", 1)
            start, end = int(start_text), int(end_text)
            if start > end:
                raise ValueError(f"Invalid range: {part}")
        else:
            start = end = int(part)
        if start < 1 or end > count:
            raise ValueError(f"Selection out of range 1-{count}: {part}")
        indexes.update(range(start - 1, end))

    return sorted(indexes)


def format_timestamp(kind: ResourceKind, record: dict) -> str:
    timestamp = kind.timestamp(record)
    if timestamp == EPOCH:
        return "-"
    return timestamp.astimezone(timezone.utc).strftime("%Y-%m-%d %H:%M")


def resource_table(kind: ResourceKind, records: list[dict], title: Optional[str] = None) -> Table:
    """Numbered table of a kind's records, newest first."""
    table = Table(show_header=True, title=title or f"{kind.label} ({len(records)})")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Name", style="cyan")
    table.add_column("ID")
    table.add_column("Created / modified (UTC)", style="green")

    for number, record in enumerate(records, start=1):
        resource_id = kind.resource_id(record)
        name = kind.display_name(record)
        table.add_row(str(number), name, resource_id if resource_id != name else "", format_timestamp(kind, record))

    return table


def select_resources(catalog: Catalog, console: Console) -> dict[ResourceKind, list[dict]]:
    """Ask the operator which resources of each kind to delete.

    Args:
        catalog: Discovered resources per kind
        console: Console to print tables to

    Returns:
        Mapping containing only kinds with at least one selected record,
        each list in catalog order
    """
    selection: dict[ResourceKind, list[dict]] = {}

    for kind, records in catalog.items():
        if not records:
            continue

        console.print(resource_table(kind, records))
        while True:
            answer = typer.prompt(
                f"Delete which {kind.label}? (e.g. 1,3-5, 'all', blank for none)",
                default="",
                show_default=False,
            )
            try:
                indexes = parse_selection(answer, len(records))
                break
            except ValueError as e:
                console.print(f"✗ {e}", style="bold red")

        if indexes:
            selection[kind] = [records[index] for index in indexes]

    return selection
