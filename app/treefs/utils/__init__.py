"""Utility modules for treefs.

This module exports commonly used utility functions.
"""

from treefs.utils.formatting import (
    configure_logging,
    console,
    create_entry_table,
    err_console,
    format_entry_row,
    format_size,
    print_error,
    print_info,
    print_leak_report,
    print_success,
    print_warning,
)

__all__ = [
    "configure_logging",
    "console",
    "create_entry_table",
    "err_console",
    "format_entry_row",
    "format_size",
    "print_error",
    "print_info",
    "print_leak_report",
    "print_success",
    "print_warning",
]
