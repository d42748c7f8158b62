"""Directory listing streams.

A DirectoryListingStream opens a native directory handle (``os.scandir``)
and exposes the direct children of a directory as an auto-closing
sequence of FsPath objects. The handle is released when the sequence is
drained or closed explicitly; each acquisition and release is recorded in
the LeakAudit passed in, if any.
"""

from __future__ import annotations

import os
from collections.abc import Iterator

from treefs.core.errors import translate_os_error
from treefs.filesystem.audit import LeakAudit
from treefs.filesystem.path import FsPath
from treefs.resources.sequence import AutoClosingSequence


class DirectoryListingStream(AutoClosingSequence["os.DirEntry[str] | None", FsPath]):
    """Auto-closing sequence over the children of one directory.

    Child order is whatever the OS returns. Use the stream as a context
    manager to release the handle even when iteration stops early.

    Example:
        >>> with DirectoryListingStream(FsPath("/etc")) as children:
        ...     first = next(children, None)

    Attributes:
        directory: The directory being listed.
    """

    def __init__(self, directory: FsPath, audit: LeakAudit | None = None) -> None:
        """Open the listing handle.

        Args:
            directory: Directory to list.
            audit: Leak audit receiving open/closed events.

        Raises:
            NotFoundError: If the directory does not exist.
            NotADirectoryPathError: If the path is not a directory.
            PermissionDeniedError: If the directory cannot be read.
        """
        self.directory = directory
        self._audit = audit
        self._key = directory.path_str

        try:
            handle = os.scandir(self._key)
        except OSError as e:
            raise translate_os_error(e, self._key) from e

        if audit is not None:
            audit.record_open(self._key)

        super().__init__(
            handle,
            produce=lambda: self._next_entry(handle),
            is_end=lambda entry: entry is None,
            transform=lambda entry: FsPath(entry.path),  # type: ignore[union-attr]
            on_close=self._on_close,
        )

    def _next_entry(self, handle: Iterator[os.DirEntry[str]]) -> os.DirEntry[str] | None:
        try:
            return next(handle, None)
        except OSError as e:
            raise translate_os_error(e, self._key) from e

    def _on_close(self) -> None:
        if self._audit is not None:
            self._audit.record_close(self._key)

    def __repr__(self) -> str:
        state = "closed" if self.closed else "open"
        return f"DirectoryListingStream({self._key!r}, {state})"


def list_directory(directory: FsPath, audit: LeakAudit | None = None) -> DirectoryListingStream:
    """Open a listing stream over ``directory``'s children."""
    return DirectoryListingStream(directory, audit)
