"""Summary statistics for a completed walk."""

from __future__ import annotations

from io import StringIO
from typing import Any

from rich.console import Console
from rich.table import Table

from mediawalk.collector import ScannedEntry
from mediawalk.result import ScanResult


def compute_statistics(entries: list[ScannedEntry]) -> dict[str, Any]:
    """Count reported files and directories.

    Returns:
        Dict with keys: files, directories, no_media_files,
        no_media_directories, total_bytes.
    """
    files = 0
    directories = 0
    no_media_files = 0
    no_media_directories = 0
    total_bytes = 0

    for entry in entries:
        if entry.is_directory:
            directories += 1
            if entry.no_media:
                no_media_directories += 1
        else:
            files += 1
            total_bytes += entry.size
            if entry.no_media:
                no_media_files += 1

    return {
        "files": files,
        "directories": directories,
        "no_media_files": no_media_files,
        "no_media_directories": no_media_directories,
        "total_bytes": total_bytes,
    }


def format_report(stats: dict[str, Any], result: ScanResult) -> str:
    """Render the statistics as a rich table and return it as a string."""
    console = Console(file=StringIO(), force_terminal=False, width=100)

    table = Table(title="Scan Summary", show_header=True, header_style="bold")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")

    table.add_row("Result", result.value)
    table.add_row("Files", str(stats.get("files", 0)))
    table.add_row("Directories", str(stats.get("directories", 0)))
    table.add_row("No-media files", str(stats.get("no_media_files", 0)))
    table.add_row("No-media directories", str(stats.get("no_media_directories", 0)))
    table.add_row("Total size", _format_size(stats.get("total_bytes", 0)))

    console.print(table)

    output = console.file
    assert isinstance(output, StringIO)
    return output.getvalue()


def _format_size(num_bytes: int) -> str:
    """Format a byte count into a human-readable string."""
    if num_bytes < 1024:
        return f"{num_bytes} B"
    elif num_bytes < 1024 * 1024:
        return f"{num_bytes / 1024:.1f} KB"
    elif num_bytes < 1024 * 1024 * 1024:
        return f"{num_bytes / (1024 * 1024):.1f} MB"
    else:
        return f"{num_bytes / (1024 * 1024 * 1024):.1f} GB"
