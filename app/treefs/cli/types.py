"""Shared types and utilities for CLI commands.

This module provides common enums and helper functions used across
multiple CLI command modules to avoid code duplication.
"""

from collections.abc import Iterator
from contextlib import contextmanager
from enum import Enum

import typer

from treefs.core.config import TreeFsSettings, load_settings_or_default
from treefs.core.errors import ConfigError, TreeFsError
from treefs.utils.formatting import print_error, print_success


class OutputFormat(str, Enum):
    """Output format options."""

    TABLE = "table"
    JSON = "json"


@contextmanager
def cli_errors() -> Iterator[None]:
    """Report treefs errors on stderr and exit with code 1."""
    try:
        yield
    except TreeFsError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e


def get_settings(ctx: typer.Context) -> TreeFsSettings:
    """Load settings once per invocation and cache them on the context.

    Raises:
        typer.Exit: If the config file exists but is invalid.
    """
    ctx.ensure_object(dict)
    settings = ctx.obj.get("settings")
    if settings is None:
        try:
            settings = load_settings_or_default(ctx.obj.get("config_path"))
        except ConfigError as e:
            print_error(str(e))
            raise typer.Exit(code=1) from e
        ctx.obj["settings"] = settings
    return settings


def is_quiet(ctx: typer.Context) -> bool:
    return bool(ctx.obj and ctx.obj.get("quiet"))


def report_success(ctx: typer.Context, message: str) -> None:
    """Print a success message unless --quiet was given."""
    if not is_quiet(ctx):
        print_success(message)
