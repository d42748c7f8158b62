"""Main CLI application entry point.

Defines the Typer application and global options.
"""

from pathlib import Path
from typing import Annotated

import typer

from treefs import __version__
from treefs.cli.commands import archive, audit, config, transfer, tree
from treefs.utils.formatting import configure_logging

# Create main Typer app
app = typer.Typer(
    name="treefs",
    help="Resource-safe filesystem tree operations.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"treefs version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable debug logging (listing open/close events).",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Suppress non-essential output.",
        ),
    ] = False,
    config_path: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Settings file to use instead of ~/.config/treefs/config.toml.",
        ),
    ] = None,
) -> None:
    """treefs - walk, digest, copy, delete and archive directory trees.

    Every directory listing and file stream opened by a command is
    released before the command returns, even on failure.
    """
    # Store options in context for subcommands
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["config_path"] = config_path
    if verbose:
        configure_logging(verbose=True)


# Register commands
app.command(name="ls")(tree.ls)
app.command(name="walk")(tree.walk)
app.command(name="digest")(tree.digest)
app.command(name="copy")(transfer.copy)
app.command(name="move")(transfer.move)
app.command(name="delete")(transfer.delete)
app.command(name="zip")(archive.zip_command)
app.command(name="unzip")(archive.unzip_command)
app.add_typer(audit.app, name="audit")
app.add_typer(config.app, name="config")


if __name__ == "__main__":
    app()
