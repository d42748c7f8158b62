"""CLI commands for treefs.

This package contains all subcommand implementations.
"""

from treefs.cli.commands import archive, audit, config, transfer, tree

__all__ = ["archive", "audit", "config", "transfer", "tree"]
