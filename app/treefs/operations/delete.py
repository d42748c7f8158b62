"""Recursive deletion.

Directories are emptied depth-first before being removed. Files and links
(including links to directories) are unlinked directly; links are never
followed, so deleting a link never touches its target.
"""

from __future__ import annotations

import logging
import os

from treefs.core.errors import IOFailureError, os_errors
from treefs.filesystem.audit import LeakAudit
from treefs.filesystem.models import EntryKind
from treefs.filesystem.path import FsPath

logger = logging.getLogger(__name__)


def delete(
    path: FsPath,
    *,
    swallow_io_errors: bool = False,
    audit: LeakAudit | None = None,
) -> FsPath:
    """Delete a file, link or directory tree.

    Args:
        path: Path to delete.
        swallow_io_errors: If True, I/O failures on individual entries are
            logged at DEBUG and deletion continues with the next entry.
        audit: Leak audit receiving listing events.

    Returns:
        The deleted path.

    Raises:
        NotFoundError: If the path does not exist (unless swallowed).
        IOFailureError: On any other OS failure (unless swallowed).
    """
    try:
        if path.classify(follow_links=False).kind is EntryKind.DIRECTORY:
            with path.list(audit) as children:
                for child in children:
                    delete(child, swallow_io_errors=swallow_io_errors, audit=audit)
            with os_errors(path.path_str):
                os.rmdir(path.path_str)
        else:
            with os_errors(path.path_str):
                os.unlink(path.path_str)
    except IOFailureError as e:
        if not swallow_io_errors:
            raise
        logger.debug("Ignoring failure deleting %s: %s", path, e)
    return path


def clear(path: FsPath, *, audit: LeakAudit | None = None) -> FsPath:
    """Empty a directory (keeping it) or truncate a file, creating it if absent."""
    if path.is_directory():
        with path.list(audit) as children:
            for child in children:
                delete(child, audit=audit)
    else:
        path.write_bytes(b"")
    return path
