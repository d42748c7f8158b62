"""Copy, move and rename.

Directory copies walk the source in pre-order, so every directory is
created in the destination before any file beneath it is written. File
bytes are piped through scoped streams.
"""

from __future__ import annotations

import logging
import shutil

from treefs.core.errors import AlreadyExistsError, IOFailureError, os_errors
from treefs.filesystem.audit import LeakAudit
from treefs.filesystem.models import EntryKind
from treefs.filesystem.path import DEFAULT_BUFFER_SIZE, FsPath
from treefs.filesystem.walker import walk
from treefs.operations.delete import delete
from treefs.resources.scoped import managed, pipe

logger = logging.getLogger(__name__)


def copy_to(
    source: FsPath,
    destination: FsPath,
    *,
    overwrite: bool = False,
    buffer_size: int = DEFAULT_BUFFER_SIZE,
    audit: LeakAudit | None = None,
) -> FsPath:
    """Copy a file or directory tree to ``destination``.

    For a directory source with ``overwrite``, an existing destination is
    deleted first (failures swallowed), then the tree is mirrored.

    Args:
        source: File or directory to copy.
        destination: Target path (not a parent to copy into).
        overwrite: Replace existing targets instead of failing.
        buffer_size: Read size when piping file content.
        audit: Leak audit receiving listing events.

    Returns:
        The destination path.

    Raises:
        AlreadyExistsError: If a target file exists and overwrite is False.
        NotFoundError: If the source does not exist.
        IOFailureError: If the destination is the source or lies inside it.
    """
    if destination == source:
        msg = f"Cannot copy {source} onto itself"
        raise IOFailureError(msg)

    if not source.is_directory():
        _copy_file(source, destination, overwrite, buffer_size)
        return destination

    if source.is_parent_of(destination):
        msg = f"Cannot copy {source} into its own subtree {destination}"
        raise IOFailureError(msg)

    if overwrite:
        delete(destination, swallow_io_errors=True, audit=audit)

    copied = 0
    for path in walk(source, audit=audit):
        target = destination / source.relativize(path)
        entry = path.classify()
        if entry.kind is EntryKind.DIRECTORY:
            target.create_directories()
        elif entry.kind is EntryKind.OTHER:
            msg = f"Cannot copy special file {path}"
            raise IOFailureError(msg)
        else:
            _copy_file(path, target, overwrite, buffer_size)
            copied += 1

    logger.debug("Copied %d files from %s to %s", copied, source, destination)
    return destination


def _copy_file(source: FsPath, target: FsPath, overwrite: bool, buffer_size: int) -> None:
    reader = source.new_input_stream()
    try:
        with os_errors(target.path_str):
            writer = open(target.path_str, "wb" if overwrite else "xb")
    except BaseException:
        reader.close()
        raise
    pipe(managed(reader), managed(writer), buffer_size=buffer_size)


def move_to(source: FsPath, destination: FsPath, *, overwrite: bool = False) -> FsPath:
    """Move a file or directory tree to ``destination``.

    Works across filesystems (falls back to copy and delete).

    Args:
        source: Path to move.
        destination: New location.
        overwrite: Delete an existing destination first.

    Returns:
        The destination path.

    Raises:
        AlreadyExistsError: If the destination exists and overwrite is False.
        NotFoundError: If the source does not exist.
        IOFailureError: If the destination is the source.
    """
    if destination == source:
        msg = f"Cannot move {source} onto itself"
        raise IOFailureError(msg)

    if destination.exists(follow_links=False):
        if not overwrite:
            msg = f"Destination already exists: {destination}"
            raise AlreadyExistsError(msg)
        delete(destination)

    with os_errors(source.path_str):
        shutil.move(source.path_str, destination.path_str)
    logger.debug("Moved %s to %s", source, destination)
    return destination


def rename_to(source: FsPath, new_name: str) -> FsPath:
    """Rename ``source`` within its parent directory."""
    return move_to(source, source.sibling(new_name))
