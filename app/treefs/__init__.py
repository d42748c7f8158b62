"""treefs - resource-safe filesystem trees.

Paths, content I/O and whole-tree operations (walk, digest, copy, delete,
zip) that release every directory handle and stream they open.
"""

from treefs.core.errors import (
    AlreadyExistsError,
    FileSystemLoopError,
    IOFailureError,
    NotADirectoryPathError,
    NotFoundError,
    PermissionDeniedError,
    TreeFsError,
    UnsupportedAlgorithmError,
    UnsupportedPlatformError,
)
from treefs.filesystem import Entry, EntryKind, FsPath, LeakAudit, Monitor, WatchEventKind
from treefs.resources import AutoClosingSequence, ScopedResource, managed

__version__ = "0.1.0"

__all__ = [
    "AlreadyExistsError",
    "AutoClosingSequence",
    "Entry",
    "EntryKind",
    "FileSystemLoopError",
    "FsPath",
    "IOFailureError",
    "LeakAudit",
    "Monitor",
    "NotADirectoryPathError",
    "NotFoundError",
    "PermissionDeniedError",
    "ScopedResource",
    "TreeFsError",
    "UnsupportedAlgorithmError",
    "UnsupportedPlatformError",
    "WatchEventKind",
    "__version__",
    "managed",
]
