"""Read-only tree commands: ls, walk, digest."""

import json
import os
from pathlib import Path
from typing import Annotated

import typer

from treefs.cli.types import OutputFormat, cli_errors, get_settings
from treefs.filesystem.models import Entry
from treefs.filesystem.path import FsPath
from treefs.filesystem.walker import UNBOUNDED_DEPTH
from treefs.operations.digest import digest as digest_tree
from treefs.utils.formatting import console, create_entry_table, format_entry_row


def _entry_size(entry: Entry) -> int | None:
    """Size of a regular file, None for anything else."""
    if not entry.is_file:
        return None
    try:
        return os.stat(entry.path.path_str).st_size
    except OSError:
        return None


def ls(
    path: Annotated[Path, typer.Argument(help="Directory to list.")] = Path("."),
) -> None:
    """List the direct children of a directory."""
    root = FsPath(path)
    with cli_errors():
        with root.list() as children:
            entries = sorted(
                (child.classify(follow_links=False) for child in children),
                key=lambda entry: entry.path,
            )

    table = create_entry_table(str(root))
    for entry in entries:
        table.add_row(*format_entry_row(entry, entry.path.name, _entry_size(entry)))
    console.print(table)
    console.print(f"\n[dim]{len(entries)} entries[/dim]")


def walk(
    ctx: typer.Context,
    path: Annotated[Path, typer.Argument(help="Root of the walk.")] = Path("."),
    max_depth: Annotated[
        int | None,
        typer.Option("--max-depth", "-d", min=0, help="Maximum depth (0 = root only)."),
    ] = None,
    follow_links: Annotated[
        bool | None,
        typer.Option(
            "--follow-links/--no-follow-links",
            help="Descend into symbolic links (default from config).",
        ),
    ] = None,
    output_format: Annotated[
        OutputFormat,
        typer.Option(
            "--format",
            "-f",
            help="Output format: table or json.",
            case_sensitive=False,
        ),
    ] = OutputFormat.TABLE,
) -> None:
    """Walk a tree depth-first, parents before children."""
    settings = get_settings(ctx)
    root = FsPath(path)
    follow = settings.follow_links if follow_links is None else follow_links
    depth = UNBOUNDED_DEPTH if max_depth is None else max_depth

    with cli_errors():
        entries = [
            p.classify(follow_links=False)
            for p in root.walk(depth, follow_links=follow)
        ]

    if output_format == OutputFormat.JSON:
        data = [
            {
                "path": root.relativize(entry.path),
                "kind": entry.kind.value,
                "size_bytes": _entry_size(entry),
            }
            for entry in entries
        ]
        console.print_json(json.dumps(data))
        return

    table = create_entry_table(f"Walk of {root}")
    for entry in entries:
        label = root.relativize(entry.path) or "."
        table.add_row(*format_entry_row(entry, label, _entry_size(entry)))
    console.print(table)
    console.print(f"\n[dim]{len(entries)} paths[/dim]")


def digest(
    ctx: typer.Context,
    path: Annotated[Path, typer.Argument(help="File or directory to digest.")],
    algorithm: Annotated[
        str | None,
        typer.Option(
            "--algorithm",
            "-a",
            help="Hash algorithm, e.g. MD5, SHA-256 (default from config).",
        ),
    ] = None,
) -> None:
    """Print the order-independent checksum of a file or tree."""
    settings = get_settings(ctx)
    name = algorithm or settings.digest_algorithm
    with cli_errors():
        value = digest_tree(
            FsPath(path),
            name,
            follow_links=settings.follow_links,
            buffer_size=settings.buffer_size,
        )
    console.print(f"[digest]{value.hex().upper()}[/]  {path}")
