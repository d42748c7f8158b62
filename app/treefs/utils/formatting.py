"""Rich console formatting utilities.

Provides consistent formatting for CLI output using Rich.
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING

from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from treefs.core.theme import get_theme

if TYPE_CHECKING:
    from treefs.filesystem.audit import LeakReport
    from treefs.filesystem.models import Entry


def _detect_color_system() -> str | None:
    """Detect the best color system for the current terminal.

    Returns "truecolor" for interactive terminals to enable full hex color support,
    None otherwise to let Rich auto-detect.
    """
    if sys.stdout.isatty():
        return "truecolor"
    return None


# Shared console instances (theme loaded once at import)
console = Console(theme=get_theme(), color_system=_detect_color_system())
err_console = Console(theme=get_theme(), stderr=True, color_system=_detect_color_system())


def configure_logging(verbose: bool = False) -> None:
    """Route library logging through Rich on stderr.

    Args:
        verbose: If True, log at DEBUG (listing open/close events included);
            otherwise only warnings are shown.
    """
    level = logging.DEBUG if verbose else logging.WARNING
    root = logging.getLogger()
    for handler in list(root.handlers):
        if isinstance(handler, RichHandler):
            root.removeHandler(handler)
    root.addHandler(RichHandler(console=err_console, show_path=False, rich_tracebacks=True))
    root.setLevel(level)


def create_entry_table(title: str) -> Table:
    """Create a pre-configured table for displaying filesystem entries.

    Args:
        title: Table title.

    Returns:
        Rich Table with Kind, Path and Size columns.
    """
    table = Table(
        title=title,
        show_header=True,
        header_style="bold_header",
        border_style="border",
        row_styles=["", "on grey7"],
    )
    table.add_column("Kind", width=9)
    table.add_column("Path", no_wrap=True)
    table.add_column("Size", style="info", justify="right")
    return table


def format_entry_row(entry: Entry, label: str, size_bytes: int | None) -> tuple[str, str, str]:
    """Format an entry as a table row with its kind's style.

    Args:
        entry: The classified entry.
        label: Text shown in the path column (often a relative path).
        size_bytes: Size to display, or None for "-".

    Returns:
        Tuple of (kind, path, size) with Rich markup.
    """
    style = f"kind.{entry.kind.value}"
    name = f"{label}/" if entry.is_directory and label else label
    if entry.is_symlink and entry.link_target is not None:
        name = f"{name} -> {entry.link_target}"
    size = format_size(size_bytes) if size_bytes is not None else "-"
    return (f"[{style}]{entry.kind.value}[/]", f"[{style}]{name}[/]", size)


def format_size(size_bytes: int | None) -> str:
    """Format byte count as human-readable string."""
    if size_bytes is None or size_bytes == 0:
        return "0 B"
    size = float(size_bytes)
    for unit in ("B", "KB", "MB", "GB"):
        if abs(size) < 1024:
            return f"{size:.1f} {unit}" if unit != "B" else f"{int(size)} B"
        size /= 1024
    return f"{size:.1f} TB"


def print_leak_report(report: LeakReport) -> None:
    """Print the findings of an audited block."""
    if report.handle_increase is None:
        console.print("[muted]File descriptors: not sampled[/]")
    elif report.handle_increase > 0:
        console.print(f"[warning]File descriptors increased by {report.handle_increase}[/]")
    else:
        console.print("[success]File descriptors: no increase[/]")

    if report.open_streams:
        console.print(f"[warning]Unclosed directory streams: {len(report.open_streams)}[/]")
        for key in report.open_streams:
            console.print(f"  [muted]{key}[/]")
    else:
        console.print("[success]Directory streams: all closed[/]")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[info]{message}[/]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    err_console.print(f"[warning]Warning:[/] {message}")


def print_error(message: str) -> None:
    """Print an error message."""
    err_console.print(f"[error]Error:[/] {message}")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[success]{message}[/]")
