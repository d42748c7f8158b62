"""Mutating tree commands: copy, move, delete."""

from pathlib import Path
from typing import Annotated

import typer

from treefs.cli.types import cli_errors, get_settings, report_success
from treefs.filesystem.path import FsPath
from treefs.operations.copy import copy_to, move_to
from treefs.operations.delete import delete as delete_tree
from treefs.utils.formatting import print_error, print_info


def copy(
    ctx: typer.Context,
    source: Annotated[Path, typer.Argument(help="File or directory to copy.")],
    destination: Annotated[Path, typer.Argument(help="Target path.")],
    overwrite: Annotated[
        bool,
        typer.Option("--overwrite", help="Replace existing targets."),
    ] = False,
) -> None:
    """Copy a file or directory tree."""
    settings = get_settings(ctx)
    with cli_errors():
        target = copy_to(
            FsPath(source),
            FsPath(destination),
            overwrite=overwrite,
            buffer_size=settings.buffer_size,
        )
    report_success(ctx, f"Copied {source} to {target}")


def move(
    ctx: typer.Context,
    source: Annotated[Path, typer.Argument(help="File or directory to move.")],
    destination: Annotated[Path, typer.Argument(help="New location.")],
    overwrite: Annotated[
        bool,
        typer.Option("--overwrite", help="Replace an existing destination."),
    ] = False,
) -> None:
    """Move a file or directory tree."""
    with cli_errors():
        target = move_to(FsPath(source), FsPath(destination), overwrite=overwrite)
    report_success(ctx, f"Moved {source} to {target}")


def delete(
    ctx: typer.Context,
    path: Annotated[Path, typer.Argument(help="File, link or directory to delete.")],
    swallow: Annotated[
        bool | None,
        typer.Option(
            "--swallow/--no-swallow",
            help="Ignore per-entry I/O failures (default from config).",
        ),
    ] = None,
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Skip confirmation prompt."),
    ] = False,
) -> None:
    """Delete a file, link or whole directory tree."""
    settings = get_settings(ctx)
    target = FsPath(path)

    if not target.exists(follow_links=False):
        print_error(f"Path does not exist: {target}")
        raise typer.Exit(code=1)

    if not yes:
        confirmed = typer.confirm(f"Delete {target}?", default=False)
        if not confirmed:
            print_info("Aborted.")
            raise typer.Exit(code=0)

    swallow_errors = settings.swallow_delete_errors if swallow is None else swallow
    with cli_errors():
        delete_tree(target, swallow_io_errors=swallow_errors)

    if target.exists(follow_links=False):
        print_error(f"Some entries could not be deleted under {target}")
        raise typer.Exit(code=1)
    report_success(ctx, f"Deleted {target}")
