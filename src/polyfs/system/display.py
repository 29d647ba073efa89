# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.06.14
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/polyfs/system/display.py

# Standard library imports
from datetime import datetime
from typing import Any, Iterable, Optional

# Third-party imports
import humanize
from rich.table import Table

# Local polyfs imports
from polyfs.core.entry import Entry
from polyfs.system.exceptions import NotSupported


UNKNOWN = "-"


def _modification_time(entry: Entry) -> Optional[datetime]:
    try:
        return entry.modification_time
    except NotSupported:
        return None


def _size(entry: Entry) -> Optional[int]:
    if entry.is_directory:
        return None
    try:
        return entry.size
    except NotSupported:
        return None


def entry_to_dict(entry: Entry) -> dict[str, Any]:
    """JSON-ready description of an entry. Unsupported attributes are None."""
    modification_time = _modification_time(entry)
    return {
        "name": entry.name,
        "kind": entry.kind.value,
        "location": str(entry),
        "modification_time": modification_time.isoformat() if modification_time else None,
        "size": _size(entry),
    }


def entries_to_table(entries: Iterable[Entry], title: Optional[str] = None) -> Table:
    """Convert entries to a rich Table for display.

    Args:
        entries: Entries to list, in display order
        title: Optional table title (usually the listed directory)

    Returns:
        Rich Table object ready for display
    """
    table = Table(title=title)
    table.add_column("Name")
    table.add_column("Kind")
    table.add_column("Modified")
    table.add_column("Size", justify="right")

    for entry in entries:
        modification_time = _modification_time(entry)
        size = _size(entry)
        table.add_row(
            entry.name + ("/" if entry.is_directory else ""),
            entry.kind.value,
            modification_time.strftime("%Y-%m-%d %H:%M:%S") if modification_time else UNKNOWN,
            humanize.naturalsize(size) if size is not None else UNKNOWN,
        )

    return table
