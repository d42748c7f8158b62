"""Unit tests for filesystem models and the Monitor base class."""

from pathlib import Path

import pytest
from treefs.filesystem.models import Entry, EntryKind, WatchEventKind
from treefs.filesystem.monitor import Monitor
from treefs.filesystem.path import FsPath


class TestEntryKind:
    """Tests for EntryKind enum."""

    def test_values(self) -> None:
        """EntryKind has the expected string values."""
        assert [k.value for k in EntryKind] == ["file", "directory", "symlink", "other", "absent"]

    def test_is_string_enum(self) -> None:
        """EntryKind members compare equal to their values."""
        assert EntryKind.FILE == "file"


class TestEntry:
    """Tests for the Entry snapshot."""

    def test_predicates(self, tmp_path: Path) -> None:
        """Predicates follow the kind tag."""
        entry = Entry(FsPath(tmp_path), EntryKind.DIRECTORY)

        assert entry.is_directory
        assert not entry.is_file
        assert not entry.is_symlink
        assert entry.exists

    def test_absent_does_not_exist(self, tmp_path: Path) -> None:
        """ABSENT entries do not exist."""
        assert not Entry(FsPath(tmp_path / "x"), EntryKind.ABSENT).exists

    def test_frozen(self, tmp_path: Path) -> None:
        """Entries are immutable."""
        entry = Entry(FsPath(tmp_path), EntryKind.FILE)

        with pytest.raises(AttributeError):
            entry.kind = EntryKind.DIRECTORY  # type: ignore[misc]


class RecordingMonitor(Monitor):
    """Monitor that records every callback."""

    def __init__(self, root: FsPath) -> None:
        super().__init__(root)
        self.calls: list[tuple[str, FsPath, int]] = []

    def on_create(self, file: FsPath, count: int) -> None:
        self.calls.append(("create", file, count))

    def on_modify(self, file: FsPath, count: int) -> None:
        self.calls.append(("modify", file, count))

    def on_delete(self, file: FsPath, count: int) -> None:
        self.calls.append(("delete", file, count))


class TestMonitor:
    """Tests for Monitor event dispatch."""

    def test_dispatches_each_kind(self, tmp_path: Path) -> None:
        """Each event kind reaches its callback."""
        root = FsPath(tmp_path)
        monitor = RecordingMonitor(root)

        monitor.on_event(WatchEventKind.CREATE, root / "a")
        monitor.on_event(WatchEventKind.MODIFY, root / "a", 3)
        monitor.on_event("delete", root / "a")

        assert monitor.calls == [
            ("create", root / "a", 1),
            ("modify", root / "a", 3),
            ("delete", root / "a", 1),
        ]

    def test_unknown_kind_ignored(self, tmp_path: Path) -> None:
        """Unknown kinds go to on_unknown_event and do not raise."""
        monitor = RecordingMonitor(FsPath(tmp_path))

        monitor.on_event("overflow", FsPath(tmp_path))

        assert monitor.calls == []

    def test_is_abstract(self, tmp_path: Path) -> None:
        """Monitor cannot be instantiated without callbacks."""
        with pytest.raises(TypeError):
            Monitor(FsPath(tmp_path))  # type: ignore[abstract]
