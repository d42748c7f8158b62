"""Unit tests for scoped resources.

Tests for ScopedResource, managed and pipe.
"""

import io
import logging

import pytest
from treefs.core.errors import IOFailureError
from treefs.resources.scoped import ScopedResource, managed, pipe


class Handle:
    """Closable test double counting close calls."""

    def __init__(self, fail_on_close: bool = False) -> None:
        self.close_calls = 0
        self.fail_on_close = fail_on_close

    def close(self) -> None:
        self.close_calls += 1
        if self.fail_on_close:
            raise OSError(5, "Input/output error")


class TestScopedResourceUse:
    """Tests for ScopedResource.use."""

    def test_returns_value_and_closes_once(self) -> None:
        """use returns fn's value and closes exactly once."""
        handle = Handle()
        scope = ScopedResource(handle)

        result = scope.use(lambda h: 42)

        assert result == 42
        assert handle.close_calls == 1
        assert scope.closed

    def test_closes_when_body_raises(self) -> None:
        """use closes the resource and propagates the body error."""
        handle = Handle()

        def body(h: Handle) -> None:
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError, match="boom"):
            ScopedResource(handle).use(body)

        assert handle.close_calls == 1

    def test_close_failure_after_success_propagates(self) -> None:
        """A close failure after a successful body is raised as IOFailureError."""
        scope = ScopedResource(Handle(fail_on_close=True))

        with pytest.raises(IOFailureError):
            scope.use(lambda h: None)

    def test_close_failure_during_unwind_is_attached(self, caplog: pytest.LogCaptureFixture) -> None:
        """Body error wins; the close failure is logged and added as a note."""
        scope = ScopedResource(Handle(fail_on_close=True))

        def body(h: Handle) -> None:
            raise ValueError("body failed")

        with caplog.at_level(logging.WARNING), pytest.raises(ValueError) as exc_info:
            scope.use(body)

        assert any("close also failed" in note for note in exc_info.value.__notes__)
        assert "Failed to close" in caplog.text


class TestScopedResourceClose:
    """Tests for close idempotence and custom closers."""

    def test_close_is_idempotent(self) -> None:
        """Repeated close calls release the resource once."""
        handle = Handle()
        scope = ScopedResource(handle)

        scope.close()
        scope.close()

        assert handle.close_calls == 1

    def test_custom_closer(self) -> None:
        """A custom closer replaces resource.close()."""
        released: list[str] = []
        scope = managed("token", closer=released.append)

        scope.close()

        assert released == ["token"]


class TestScopedResourceContextManager:
    """Tests for the with-statement protocol."""

    def test_with_yields_resource_and_closes(self) -> None:
        """with binds the raw resource and closes on exit."""
        handle = Handle()
        scope = ScopedResource(handle)

        with scope as bound:
            assert bound is handle

        assert handle.close_calls == 1

    def test_with_closes_on_error(self) -> None:
        """with closes the resource when the body raises."""
        handle = Handle()

        with pytest.raises(KeyError), ScopedResource(handle):
            raise KeyError("x")

        assert handle.close_calls == 1


class TestScopedResourceIterate:
    """Tests for ScopedResource.iterate."""

    def test_closes_on_exhaustion(self) -> None:
        """Draining the iterator closes the resource."""
        handle = Handle()

        items = list(ScopedResource(handle).iterate(lambda h: [1, 2, 3]))

        assert items == [1, 2, 3]
        assert handle.close_calls == 1

    def test_closes_on_early_termination(self) -> None:
        """Closing the iterator early still closes the resource."""
        handle = Handle()
        gen = ScopedResource(handle).iterate(lambda h: iter([1, 2, 3]))

        assert next(gen) == 1
        gen.close()

        assert handle.close_calls == 1

    def test_closes_when_closed_before_first_item(self) -> None:
        """Closing before the first pull releases the resource and skips the producer."""
        handle = Handle()
        calls: list[Handle] = []

        def produce(h: Handle) -> list[int]:
            calls.append(h)
            return [1, 2]

        items = ScopedResource(handle).iterate(produce)
        items.close()
        items.close()

        assert handle.close_calls == 1
        assert calls == []
        assert list(items) == []

    def test_closes_when_dropped_before_first_item(self) -> None:
        """Dropping an unstarted iterator releases the resource."""
        handle = Handle()

        items = ScopedResource(handle).iterate(lambda h: iter([1, 2]))
        del items

        assert handle.close_calls == 1

    def test_closes_on_error(self) -> None:
        """An error from the producer closes the resource and propagates."""
        handle = Handle()

        def produce(h: Handle):
            yield 1
            raise RuntimeError("producer failed")

        with pytest.raises(RuntimeError):
            list(ScopedResource(handle).iterate(produce))

        assert handle.close_calls == 1


class TestPipe:
    """Tests for pipe."""

    def test_copies_all_bytes_and_closes_both(self) -> None:
        """pipe copies everything in chunks and releases source and sink."""
        source = io.BytesIO(b"x" * 10_000)
        sink = io.BytesIO()
        captured: list[bytes] = []

        copied = pipe(
            managed(source),
            managed(sink, closer=lambda s: captured.append(s.getvalue())),
            buffer_size=1024,
        )

        assert copied == 10_000
        assert captured == [b"x" * 10_000]
        assert source.closed

    def test_sink_released_when_source_fails(self) -> None:
        """A read failure still closes the sink and propagates."""

        class BrokenReader(io.BytesIO):
            def read(self, size: int | None = -1) -> bytes:
                raise OSError("device gone")

        sink = io.BytesIO()

        with pytest.raises(OSError, match="device gone"):
            pipe(managed(BrokenReader()), managed(sink))

        assert sink.closed
