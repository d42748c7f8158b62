"""Unit tests for directory listing streams."""

from pathlib import Path

import pytest
from treefs.core.errors import NotADirectoryPathError, NotFoundError
from treefs.filesystem.audit import LeakAudit, StreamState
from treefs.filesystem.listing import DirectoryListingStream, list_directory
from treefs.filesystem.path import FsPath


class TestDirectoryListingStream:
    """Tests for DirectoryListingStream."""

    def test_yields_direct_children(self, sample_tree: FsPath) -> None:
        """Only direct children are listed, as FsPaths."""
        children = set(DirectoryListingStream(sample_tree))

        assert children == {sample_tree / "a", sample_tree / "b.txt"}

    def test_records_open_then_closed(self, sample_tree: FsPath) -> None:
        """Draining records open at acquisition and closed at the end."""
        audit = LeakAudit(sample_handles=False)
        stream = list_directory(sample_tree, audit)

        assert audit.state_of(sample_tree.path_str) is StreamState.OPEN
        list(stream)

        assert stream.closed
        assert audit.state_of(sample_tree.path_str) is StreamState.CLOSED

    def test_abandoned_stream_stays_open(self, sample_tree: FsPath) -> None:
        """Pulling one child and stopping leaves the key open."""
        audit = LeakAudit(sample_handles=False)
        stream = DirectoryListingStream(sample_tree, audit)

        next(stream)

        assert audit.open_streams == [sample_tree.path_str]
        stream.close()
        assert audit.open_streams == []

    def test_context_manager_releases(self, sample_tree: FsPath) -> None:
        """with releases the handle even when iteration stops early."""
        audit = LeakAudit(sample_handles=False)

        with DirectoryListingStream(sample_tree, audit) as children:
            next(children)

        assert audit.state_of(sample_tree.path_str) is StreamState.CLOSED

    def test_empty_directory(self, tmp_path: Path) -> None:
        """An empty directory yields nothing and closes immediately."""
        audit = LeakAudit(sample_handles=False)
        stream = DirectoryListingStream(FsPath(tmp_path), audit)

        assert list(stream) == []
        assert audit.open_streams == []

    def test_missing_directory(self, tmp_path: Path) -> None:
        """Listing an absent path raises NotFoundError and records nothing."""
        audit = LeakAudit(sample_handles=False)

        with pytest.raises(NotFoundError):
            DirectoryListingStream(FsPath(tmp_path / "missing"), audit)

        assert audit.state_of(str(tmp_path / "missing")) is None

    def test_file_is_not_a_directory(self, sample_tree: FsPath) -> None:
        """Listing a regular file raises NotADirectoryPathError."""
        with pytest.raises(NotADirectoryPathError):
            DirectoryListingStream(sample_tree / "b.txt")

    def test_path_list_returns_stream(self, sample_tree: FsPath) -> None:
        """FsPath.list and children return listing streams."""
        with sample_tree.list() as listed, sample_tree.children() as children:
            assert isinstance(listed, DirectoryListingStream)
            assert set(listed) == set(children)
