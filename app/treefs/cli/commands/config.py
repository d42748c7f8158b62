"""Settings commands: show, init, path."""

from pathlib import Path
from typing import Annotated

import typer
from rich.table import Table

from treefs.cli.types import get_settings, report_success
from treefs.core.config import TreeFsSettings, save_settings
from treefs.core.errors import ConfigError
from treefs.core.paths import get_config_path
from treefs.utils.formatting import console, print_error, print_warning

app = typer.Typer(
    help="Show and manage treefs settings.",
    no_args_is_help=True,
)


def _config_path(ctx: typer.Context) -> Path:
    ctx.ensure_object(dict)
    return ctx.obj.get("config_path") or get_config_path()


@app.command()
def show(ctx: typer.Context) -> None:
    """Show the effective settings."""
    settings = get_settings(ctx)
    config_path = _config_path(ctx)

    table = Table(
        title="Settings",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Key", no_wrap=True)
    table.add_column("Value", style="info")
    for key, value in settings.model_dump().items():
        table.add_row(key, str(value))
    console.print(table)

    source = str(config_path) if config_path.exists() else "defaults (no config file)"
    console.print(f"\n[dim]Source: {source}[/dim]")


@app.command()
def init(
    ctx: typer.Context,
    force: Annotated[
        bool,
        typer.Option("--force", help="Overwrite an existing config file."),
    ] = False,
) -> None:
    """Write a config file with default settings."""
    config_path = _config_path(ctx)
    if config_path.exists() and not force:
        print_warning(f"Config already exists: {config_path} (use --force to overwrite)")
        raise typer.Exit(code=1)

    try:
        saved = save_settings(TreeFsSettings(), config_path)
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e
    report_success(ctx, f"Wrote default settings to {saved}")


@app.command()
def path(ctx: typer.Context) -> None:
    """Print the config file location."""
    typer.echo(str(_config_path(ctx)))
