"""Abstract base class for directory change monitors.

This module defines the Monitor interface. A concrete monitor wires an OS
notification source (inotify, polling, ...) to ``on_event``, which
dispatches each change to the matching callback.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from treefs.filesystem.models import WatchEventKind
from treefs.filesystem.path import FsPath

logger = logging.getLogger(__name__)


class Monitor(ABC):
    """Abstract base class for change monitors on one path.

    Example:
        >>> class Printer(Monitor):
        ...     def on_create(self, file, count): print("created", file)
        ...     def on_modify(self, file, count): print("modified", file)
        ...     def on_delete(self, file, count): print("deleted", file)
        >>> Printer(FsPath("/tmp/inbox")).on_event(WatchEventKind.CREATE, FsPath("/tmp/inbox/a"))

    Attributes:
        root: The watched file or directory.
    """

    def __init__(self, root: FsPath) -> None:
        self.root = root

    @abstractmethod
    def on_create(self, file: FsPath, count: int) -> None:
        """Handle creation of ``file``.

        Args:
            file: The created path.
            count: Number of coalesced events (1 for a single change).
        """

    @abstractmethod
    def on_modify(self, file: FsPath, count: int) -> None:
        """Handle modification of ``file``."""

    @abstractmethod
    def on_delete(self, file: FsPath, count: int) -> None:
        """Handle deletion of ``file``."""

    def on_unknown_event(self, kind: object, file: FsPath, count: int) -> None:
        """Handle an event kind this monitor does not know.

        The default implementation logs and ignores it.
        """
        logger.debug("Ignoring unknown event %r for %s (count=%d)", kind, file, count)

    def on_event(self, kind: WatchEventKind | str, file: FsPath, count: int = 1) -> None:
        """Dispatch one change notification to the matching callback.

        Args:
            kind: Event kind, as enum or its string value.
            file: Path the event refers to.
            count: Number of coalesced events.
        """
        try:
            event = WatchEventKind(kind)
        except ValueError:
            self.on_unknown_event(kind, file, count)
            return

        if event is WatchEventKind.CREATE:
            self.on_create(file, count)
        elif event is WatchEventKind.MODIFY:
            self.on_modify(file, count)
        else:
            self.on_delete(file, count)
