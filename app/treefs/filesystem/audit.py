"""Leak auditing for directory listing streams.

A LeakAudit records an "open" event whenever a directory listing is
acquired and a "closed" event when its handle is released. Keys left at
"open" at the end of an audited block are listings nobody drained or
closed. The audit also samples the process-wide open file descriptor count
before and after the block.

An audit is a plain object created per run and handed to the operations
being audited (``audit=`` keyword). It is not thread-safe and is meant for
diagnostics and tests, not for enforcing correctness.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import Enum
from typing import TypeVar

import psutil

from treefs.core.errors import UnsupportedPlatformError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class StreamState(str, Enum):
    """Last known state of an audited handle."""

    OPEN = "open"
    CLOSED = "closed"


@dataclass(frozen=True, slots=True)
class LeakReport:
    """Findings of one audited block.

    Attributes:
        handle_increase: Growth of the OS open-descriptor count across the
            block (None when sampling was disabled).
        open_streams: Keys of listing streams still open at the end.
    """

    handle_increase: int | None
    open_streams: tuple[str, ...] = field(default_factory=tuple)

    @property
    def has_leaks(self) -> bool:
        """Check if the block leaked descriptors or streams."""
        return bool(self.open_streams) or (self.handle_increase or 0) > 0


def open_handle_count() -> int:
    """Return the number of file descriptors open in this process.

    Returns:
        Current open descriptor count.

    Raises:
        UnsupportedPlatformError: On platforms without descriptor accounting.
    """
    if os.name != "posix":
        msg = f"Open handle counting is only supported on Unix, not {os.name!r}"
        raise UnsupportedPlatformError(msg)
    return psutil.Process().num_fds()


class LeakAudit:
    """Registry of listing-stream open/close events.

    Example:
        >>> audit = LeakAudit()
        >>> entries = audit.audited_block(lambda a: list(walk(root, audit=a)))
        >>> audit.last_report.has_leaks
        False
    """

    def __init__(self, *, sample_handles: bool = True) -> None:
        """Initialize an empty audit.

        Args:
            sample_handles: If True, audited blocks also compare the OS
                open-descriptor count before and after.
        """
        self._sample_handles = sample_handles
        self._streams: dict[str, StreamState] = {}
        self.last_report: LeakReport | None = None

    def record(self, state: StreamState, key: str) -> None:
        """Record the latest state for ``key``."""
        logger.debug("Directory stream %s for path: %s", state.value, key)
        self._streams[key] = state

    def record_open(self, key: str) -> None:
        """Record that a listing handle was acquired."""
        self.record(StreamState.OPEN, key)

    def record_close(self, key: str) -> None:
        """Record that a listing handle was released."""
        self.record(StreamState.CLOSED, key)

    def state_of(self, key: str) -> StreamState | None:
        """Return the last recorded state for ``key``, if any."""
        return self._streams.get(key)

    @property
    def open_streams(self) -> list[str]:
        """Keys whose last recorded state is open."""
        return [key for key, state in self._streams.items() if state is StreamState.OPEN]

    def reset(self) -> None:
        """Forget all recorded events."""
        self._streams = {}

    @contextmanager
    def audited(self) -> Iterator[LeakAudit]:
        """Run the ``with`` body as an audited block.

        The registry is reset on entry. On exit, including when the body
        raises, the report is stored in ``last_report`` and any findings are
        logged as warnings.

        Yields:
            This audit, to pass to the operations under test.

        Raises:
            UnsupportedPlatformError: If handle sampling is enabled on a
                platform without descriptor accounting.
        """
        initial = open_handle_count() if self._sample_handles else None
        self.reset()

        try:
            yield self
        finally:
            increase = open_handle_count() - initial if initial is not None else None
            report = LeakReport(handle_increase=increase, open_streams=tuple(self.open_streams))
            self.last_report = report
            _log_report(report)

    def audited_block(self, block: Callable[[LeakAudit], T]) -> T:
        """Run ``block`` as an audited block and return its value.

        Args:
            block: Function receiving this audit.

        Returns:
            Whatever ``block`` returns. The report is in ``last_report``.
        """
        with self.audited():
            return block(self)


def audited_block(block: Callable[[LeakAudit], T], audit: LeakAudit | None = None) -> T:
    """Run ``block`` inside a (new or given) audit.

    Args:
        block: Function receiving the audit.
        audit: Existing audit to reuse. A new one is created if None.

    Returns:
        Whatever ``block`` returns.
    """
    return (audit or LeakAudit()).audited_block(block)


def _log_report(report: LeakReport) -> None:
    if report.handle_increase is not None and report.handle_increase > 0:
        logger.warning("leak: file descriptors increase: %d", report.handle_increase)
    if report.open_streams:
        logger.warning(
            "leak: unclosed directory streams: %d. unclosed streams:\n%s",
            len(report.open_streams),
            "\n".join(report.open_streams),
        )
