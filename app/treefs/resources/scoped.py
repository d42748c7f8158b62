"""Scoped resources with guaranteed release.

A ScopedResource wraps any object exposing ``close()`` and releases it
exactly once, whether the code using it returns, raises, or abandons an
iteration early.

Close failures follow one fixed policy:

- If the body raised, the body exception propagates. A close failure during
  that unwind is logged and attached to the body exception as a note.
- If the body succeeded, the close failure propagates (OSErrors are
  translated into the treefs error taxonomy).
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator
from types import TracebackType
from typing import Generic, Protocol, TypeVar

from treefs.core.errors import translate_os_error

logger = logging.getLogger(__name__)


class Closeable(Protocol):
    """Anything with a ``close()`` method."""

    def close(self) -> object: ...


T = TypeVar("T")
R = TypeVar("R")


class ScopedResource(Generic[T]):
    """Capability wrapping a closable handle.

    Example:
        >>> with ScopedResource(open("data.bin", "rb")) as f:
        ...     header = f.read(4)
        >>> ScopedResource(open("data.bin", "rb")).use(lambda f: f.read())

    Attributes:
        resource: The wrapped handle.
    """

    def __init__(
        self,
        resource: T,
        closer: Callable[[T], object] | None = None,
    ) -> None:
        """Wrap a resource.

        Args:
            resource: Handle to manage.
            closer: Custom release function. Defaults to ``resource.close()``.
        """
        self.resource = resource
        self._closer = closer
        self._closed = False

    @property
    def closed(self) -> bool:
        """Whether the resource has been released."""
        return self._closed

    def close(self) -> None:
        """Release the resource. Subsequent calls do nothing.

        Raises:
            IOFailureError: If the underlying close raised an OSError.
        """
        if self._closed:
            return
        self._closed = True
        try:
            if self._closer is not None:
                self._closer(self.resource)
            else:
                self.resource.close()  # type: ignore[attr-defined]
        except OSError as e:
            raise translate_os_error(e) from e

    def close_after_failure(self, error: BaseException) -> None:
        """Release the resource while ``error`` is propagating."""
        try:
            self.close()
        except Exception as close_error:
            logger.warning(
                "Failed to close %r while handling %s: %s",
                self.resource,
                type(error).__name__,
                close_error,
            )
            error.add_note(f"resource close also failed: {close_error!r}")

    def use(self, fn: Callable[[T], R]) -> R:
        """Invoke ``fn`` with the resource, then release it.

        Args:
            fn: Function receiving the resource.

        Returns:
            Whatever ``fn`` returns.
        """
        try:
            result = fn(self.resource)
        except BaseException as e:
            self.close_after_failure(e)
            raise
        self.close()
        return result

    def iterate(self, fn: Callable[[T], Iterable[R]]) -> ScopedIterator[R]:
        """Iterate over ``fn(resource)`` and release the resource afterwards.

        The resource is released when the iteration is exhausted, when it
        raises, and when the consumer stops early by calling ``close()`` or
        dropping the iterator, even before the first item is pulled.

        Args:
            fn: Function producing an iterable from the resource.

        Returns:
            A ScopedIterator over the items produced by ``fn``.
        """
        return ScopedIterator(self, fn)

    def __enter__(self) -> T:
        return self.resource

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if exc is not None:
            self.close_after_failure(exc)
            return
        self.close()

    def __repr__(self) -> str:
        state = "closed" if self._closed else "open"
        return f"ScopedResource({self.resource!r}, {state})"


class ScopedIterator(Generic[R]):
    """Single-pass iterator that owns a ScopedResource.

    ``fn`` is applied lazily on the first pull. The scope is released on
    exhaustion, on error, on ``close()``, and on garbage collection.
    """

    def __init__(self, scope: ScopedResource, fn: Callable[[object], Iterable[R]]) -> None:
        self._scope = scope
        self._fn = fn
        self._items: Iterator[R] | None = None

    @property
    def closed(self) -> bool:
        """Whether the backing resource has been released."""
        return self._scope.closed

    def __iter__(self) -> ScopedIterator[R]:
        return self

    def __next__(self) -> R:
        if self._scope.closed:
            raise StopIteration
        try:
            if self._items is None:
                self._items = iter(self._fn(self._scope.resource))
            return next(self._items)
        except StopIteration:
            self._scope.close()
            raise
        except BaseException as e:
            self._scope.close_after_failure(e)
            raise

    def close(self) -> None:
        """Stop iterating and release the resource. Idempotent."""
        items, self._items = self._items, None
        try:
            if items is not None and hasattr(items, "close"):
                items.close()
        finally:
            self._scope.close()

    def __del__(self) -> None:
        if self._scope.closed:
            return
        try:
            self.close()
        except Exception as e:
            logger.warning("Failed to close %r on collection: %s", self._scope.resource, e)


def managed(resource: T, closer: Callable[[T], object] | None = None) -> ScopedResource[T]:
    """Wrap ``resource`` in a ScopedResource."""
    return ScopedResource(resource, closer)


def pipe(source: ScopedResource, sink: ScopedResource, *, buffer_size: int = 65536) -> int:
    """Copy all bytes from ``source`` into ``sink``, then release both.

    Args:
        source: Readable binary resource.
        sink: Writable binary resource.
        buffer_size: Read size per chunk.

    Returns:
        Number of bytes copied.
    """

    def _copy(reader: object) -> int:
        copied = 0
        while True:
            chunk = reader.read(buffer_size)  # type: ignore[attr-defined]
            if not chunk:
                return copied
            sink.resource.write(chunk)
            copied += len(chunk)

    try:
        copied = source.use(_copy)
    except BaseException as e:
        sink.close_after_failure(e)
        raise
    sink.close()
    return copied
