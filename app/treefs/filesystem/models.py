"""Filesystem domain models.

This module defines the classification of filesystem entries and the
event kinds reported by directory change notification.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from treefs.filesystem.path import FsPath


class EntryKind(str, Enum):
    """Type of a filesystem entry at the moment it was classified.

    Attributes:
        FILE: Regular file.
        DIRECTORY: Directory.
        SYMLINK: Symbolic link (only reported when links are not followed).
        OTHER: Socket, FIFO or device node.
        ABSENT: Nothing exists at the path.
    """

    FILE = "file"
    DIRECTORY = "directory"
    SYMLINK = "symlink"
    OTHER = "other"
    ABSENT = "absent"


@dataclass(frozen=True, slots=True)
class Entry:
    """A path tagged with its classification.

    Entries are snapshots: the filesystem may change right after the
    classification query, so an Entry is never reused as a cache.

    Attributes:
        path: The classified path.
        kind: Classification result.
        link_target: Target of the link when kind is SYMLINK, else None.
    """

    path: FsPath
    kind: EntryKind
    link_target: FsPath | None = None

    @property
    def is_file(self) -> bool:
        return self.kind is EntryKind.FILE

    @property
    def is_directory(self) -> bool:
        return self.kind is EntryKind.DIRECTORY

    @property
    def is_symlink(self) -> bool:
        return self.kind is EntryKind.SYMLINK

    @property
    def exists(self) -> bool:
        return self.kind is not EntryKind.ABSENT


class WatchEventKind(str, Enum):
    """Directory change notification kinds.

    Attributes:
        CREATE: An entry was created in the watched directory.
        MODIFY: An entry was modified.
        DELETE: An entry was deleted.
    """

    CREATE = "create"
    MODIFY = "modify"
    DELETE = "delete"
