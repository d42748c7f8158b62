"""Auto-closing sequences over resources.

An AutoClosingSequence pulls raw values from a resource one at a time and
releases the resource the moment the producer returns the end-of-data
sentinel. If the consumer stops pulling before the sentinel, nothing is
released: drain the sequence, call ``close()``, or use it as a context
manager. Not safe for concurrent pulls from multiple threads.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from types import TracebackType
from typing import Any, Generic, TypeVar

from treefs.resources.scoped import ScopedResource

logger = logging.getLogger(__name__)

T = TypeVar("T")
RawT = TypeVar("RawT")


def _identity(value: Any) -> Any:
    return value


class AutoClosingSequence(Generic[RawT, T]):
    """Lazy, single-pass iterator that closes its resource at the sentinel.

    Example:
        >>> stream = open("data.bin", "rb")
        >>> chunks = AutoClosingSequence(stream, lambda: stream.read(4096), lambda b: not b)
        >>> total = sum(len(c) for c in chunks)  # stream is closed now
    """

    def __init__(
        self,
        resource: object,
        produce: Callable[[], RawT],
        is_end: Callable[[RawT], bool],
        transform: Callable[[RawT], T] = _identity,
        on_close: Callable[[], object] | None = None,
    ) -> None:
        """Build a sequence over ``resource``.

        Args:
            resource: Closable handle, or a ScopedResource wrapping one.
            produce: Zero-argument function returning the next raw value.
            is_end: Predicate recognising the end-of-data sentinel.
            transform: Mapping applied to every non-sentinel raw value.
            on_close: Callback run once, right after the resource is released.
        """
        self._scope = resource if isinstance(resource, ScopedResource) else ScopedResource(resource)
        self._produce = produce
        self._is_end = is_end
        self._transform = transform
        self._on_close = on_close
        self._closed = False

    @property
    def closed(self) -> bool:
        """Whether the backing resource has been released."""
        return self._closed

    def __iter__(self) -> AutoClosingSequence[RawT, T]:
        return self

    def __next__(self) -> T:
        if self._closed:
            raise StopIteration
        raw = self._produce()
        if self._is_end(raw):
            self.close()
            raise StopIteration
        return self._transform(raw)

    def close(self) -> None:
        """Release the resource early. Idempotent."""
        if self._closed:
            return
        self._closed = True
        try:
            self._scope.close()
        finally:
            if self._on_close is not None:
                self._on_close()

    def __enter__(self) -> AutoClosingSequence[RawT, T]:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if exc is None:
            self.close()
            return
        try:
            self.close()
        except Exception as close_error:
            logger.warning(
                "Failed to close sequence while handling %s: %s", type(exc).__name__, close_error
            )
            exc.add_note(f"sequence close also failed: {close_error!r}")
