"""Leak audit commands.

Run a tree operation inside an audited block and report listing streams
left open and growth of the process's open file descriptors.
"""

import os
from pathlib import Path
from typing import Annotated

import typer

from treefs.cli.types import cli_errors, get_settings
from treefs.filesystem.audit import LeakAudit
from treefs.filesystem.path import FsPath
from treefs.operations.digest import checksum
from treefs.utils.formatting import console, print_leak_report

app = typer.Typer(
    help="Run tree operations under leak auditing.",
    no_args_is_help=True,
)


def _new_audit() -> LeakAudit:
    return LeakAudit(sample_handles=os.name == "posix")


def _finish(audit: LeakAudit) -> None:
    report = audit.last_report
    if report is None:
        return
    print_leak_report(report)
    if report.has_leaks:
        raise typer.Exit(code=1)


@app.command()
def walk(
    ctx: typer.Context,
    path: Annotated[Path, typer.Argument(help="Root of the walk.")] = Path("."),
) -> None:
    """Walk a tree under audit and report leaks."""
    settings = get_settings(ctx)
    root = FsPath(path)
    audit = _new_audit()
    with cli_errors():
        count = audit.audited_block(
            lambda a: sum(1 for _ in root.walk(follow_links=settings.follow_links, audit=a))
        )
    console.print(f"[dim]Walked {count} paths under {root}[/dim]")
    _finish(audit)


@app.command()
def digest(
    ctx: typer.Context,
    path: Annotated[Path, typer.Argument(help="File or directory to digest.")],
) -> None:
    """Digest a tree under audit and report leaks."""
    settings = get_settings(ctx)
    root = FsPath(path)
    audit = _new_audit()
    with cli_errors():
        value = audit.audited_block(
            lambda a: checksum(
                root, settings.digest_algorithm, follow_links=settings.follow_links, audit=a
            )
        )
    console.print(f"[digest]{value}[/]  {root}")
    _finish(audit)
