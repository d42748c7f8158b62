"""Archive commands: zip, unzip."""

from pathlib import Path
from typing import Annotated

import typer

from treefs.cli.types import cli_errors, get_settings, report_success
from treefs.filesystem.path import FsPath
from treefs.operations.archive import unzip_to, zip_to


def zip_command(
    ctx: typer.Context,
    source: Annotated[Path, typer.Argument(help="File or directory to archive.")],
    destination: Annotated[Path, typer.Argument(help="ZIP file to write.")],
    level: Annotated[
        int | None,
        typer.Option(
            "--level",
            "-l",
            min=-1,
            max=9,
            help="Compression level, -1 (default) to 9 (default from config).",
        ),
    ] = None,
) -> None:
    """Archive a file or directory tree into a ZIP file."""
    settings = get_settings(ctx)
    compression = settings.compression_level if level is None else level
    with cli_errors():
        target = zip_to(
            FsPath(source),
            FsPath(destination),
            compression,
            buffer_size=settings.buffer_size,
        )
    report_success(ctx, f"Archived {source} to {target}")


def unzip_command(
    ctx: typer.Context,
    archive: Annotated[Path, typer.Argument(help="ZIP file to extract.")],
    destination: Annotated[Path, typer.Argument(help="Directory to extract into.")],
) -> None:
    """Extract a ZIP file into a directory."""
    settings = get_settings(ctx)
    with cli_errors():
        target = unzip_to(FsPath(archive), FsPath(destination), buffer_size=settings.buffer_size)
    report_success(ctx, f"Extracted {archive} to {target}")
