"""Filesystem entities: paths, listings, walking, auditing, monitoring."""

from treefs.filesystem.audit import LeakAudit, LeakReport, StreamState, audited_block
from treefs.filesystem.listing import DirectoryListingStream, list_directory
from treefs.filesystem.models import Entry, EntryKind, WatchEventKind
from treefs.filesystem.monitor import Monitor
from treefs.filesystem.path import FsPath
from treefs.filesystem.walker import walk

__all__ = [
    "DirectoryListingStream",
    "Entry",
    "EntryKind",
    "FsPath",
    "LeakAudit",
    "LeakReport",
    "Monitor",
    "StreamState",
    "WatchEventKind",
    "audited_block",
    "list_directory",
    "walk",
]
