"""Immutable filesystem path entity.

FsPath is a normalized, absolute location with content I/O helpers and
entry points into the tree operations (walk, digest, copy, delete, zip).
Equality, hashing and ordering use only the normalized path string, so two
FsPaths are equal exactly when they name the same absolute location,
regardless of how they were built. Nothing about the filesystem is cached:
every query goes back to the OS.
"""

from __future__ import annotations

import errno
import os
import stat
import sys
import tempfile
from collections.abc import Callable, Iterator
from functools import total_ordering
from typing import IO, TYPE_CHECKING

from treefs.core.errors import os_errors, translate_os_error
from treefs.filesystem.models import Entry, EntryKind
from treefs.resources.scoped import ScopedResource, managed, pipe
from treefs.resources.sequence import AutoClosingSequence

if TYPE_CHECKING:
    from treefs.filesystem.audit import LeakAudit
    from treefs.filesystem.listing import DirectoryListingStream

DEFAULT_BUFFER_SIZE = 65536
UNBOUNDED_DEPTH = sys.maxsize


@total_ordering
class FsPath:
    """Normalized absolute filesystem path.

    Example:
        >>> root = FsPath.home() / "projects"
        >>> (root / "notes.txt").write_text("hello")
        >>> root.checksum("SHA-256")
    """

    __slots__ = ("_path",)

    def __init__(self, path: str | os.PathLike[str], *fragments: str) -> None:
        """Build a path, joining ``fragments`` and normalizing the result.

        Args:
            path: Base path, absolute or relative to the working directory.
            fragments: Further components joined onto ``path``.
        """
        joined = os.path.join(os.fspath(path), *fragments)
        self._path = os.path.abspath(joined)

    # ------------------------------------------------------------------
    # Identity
    # ------------------------------------------------------------------

    @property
    def path_str(self) -> str:
        """The normalized absolute path string."""
        return self._path

    def __fspath__(self) -> str:
        return self._path

    def __str__(self) -> str:
        return self._path

    def __repr__(self) -> str:
        return f"FsPath({self._path!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FsPath):
            return NotImplemented
        return self._path == other._path

    def __lt__(self, other: FsPath) -> bool:
        if not isinstance(other, FsPath):
            return NotImplemented
        return self._path < other._path

    def __hash__(self) -> int:
        return hash(self._path)

    def __setattr__(self, name: str, value: object) -> None:
        if hasattr(self, "_path"):
            msg = "FsPath is immutable"
            raise AttributeError(msg)
        object.__setattr__(self, name, value)

    # ------------------------------------------------------------------
    # Path manipulation
    # ------------------------------------------------------------------

    @property
    def name(self) -> str:
        """Final path component (empty for the filesystem root)."""
        return os.path.basename(self._path)

    @property
    def name_without_extension(self) -> str:
        """Name with the extension removed, when there is one."""
        if self.has_extension:
            return self.name[: self.name.rindex(".")]
        return self.name

    @property
    def extension(self) -> str | None:
        """Lowercased extension including the dot, for files only."""
        if self.has_extension:
            return self.name[self.name.rindex(".") :].lower()
        return None

    @property
    def has_extension(self) -> bool:
        """Check if this is a regular file (or absent path) whose name has a dot."""
        if "." not in self.name:
            return False
        return self.classify().kind in (EntryKind.FILE, EntryKind.ABSENT)

    @property
    def parent(self) -> FsPath | None:
        """Parent directory, or None for the filesystem root."""
        head = os.path.dirname(self._path)
        if head == self._path:
            return None
        return FsPath(head)

    @property
    def root(self) -> FsPath:
        """Filesystem root (or drive) containing this path."""
        drive, _ = os.path.splitdrive(self._path)
        return FsPath(drive + os.sep)

    def __truediv__(self, child: str) -> FsPath:
        return FsPath(self._path, child)

    def child(self, name: str) -> FsPath:
        """Resolve ``name`` against this path."""
        return FsPath(self._path, name)

    def sibling(self, name: str) -> FsPath:
        """Resolve ``name`` against this path's parent."""
        return FsPath(os.path.dirname(self._path), name)

    def is_parent_of(self, other: FsPath) -> bool:
        """Check, lexically, whether ``other`` lies strictly below this path."""
        prefix = self._path if self._path.endswith(os.sep) else self._path + os.sep
        return other._path.startswith(prefix)

    def is_child_of(self, other: FsPath) -> bool:
        """Check, lexically, whether this path lies strictly below ``other``."""
        return other.is_parent_of(self)

    def is_sibling_of(self, other: FsPath) -> bool:
        """Check, lexically, whether ``other`` shares this path's parent directory."""
        parent = self.parent
        return parent is not None and other.parent == parent

    def contains(self, other: FsPath) -> bool:
        """Check if this is a directory and ``other`` lies below it."""
        return self.is_directory() and self.is_parent_of(other)

    def relativize(self, other: FsPath) -> str:
        """Path of ``other`` relative to this path.

        Returns an empty string when both are the same path.
        """
        if other._path == self._path:
            return ""
        return os.path.relpath(other._path, self._path)

    def is_same_path_as(self, other: FsPath) -> bool:
        return self._path == other._path

    def is_same_file_as(self, other: FsPath) -> bool:
        """Check if both paths denote the same file (links resolved)."""
        with os_errors(self._path):
            return os.path.samefile(self._path, other._path)

    # ------------------------------------------------------------------
    # Classification
    # ------------------------------------------------------------------

    def classify(self, follow_links: bool = True) -> Entry:
        """Classify this path with a single OS query.

        With ``follow_links`` a link is classified by its target, and a
        dangling link is ABSENT. Without it a link is SYMLINK.

        Args:
            follow_links: Whether to resolve symbolic links.

        Returns:
            Entry snapshot for this path.

        Raises:
            PermissionDeniedError: If the path cannot be inspected.
        """
        try:
            st = os.stat(self._path) if follow_links else os.lstat(self._path)
        except (FileNotFoundError, NotADirectoryError):
            return Entry(self, EntryKind.ABSENT)
        except OSError as e:
            if e.errno == errno.ELOOP:
                return Entry(self, EntryKind.ABSENT)
            raise translate_os_error(e, self._path) from e

        mode = st.st_mode
        if stat.S_ISLNK(mode):
            return Entry(self, EntryKind.SYMLINK, self._read_link())
        if stat.S_ISDIR(mode):
            return Entry(self, EntryKind.DIRECTORY)
        if stat.S_ISREG(mode):
            return Entry(self, EntryKind.FILE)
        return Entry(self, EntryKind.OTHER)

    def _read_link(self) -> FsPath:
        with os_errors(self._path):
            target = os.readlink(self._path)
        return FsPath(os.path.dirname(self._path), target)

    @property
    def kind(self) -> EntryKind:
        """Classification following links."""
        return self.classify().kind

    def exists(self, follow_links: bool = True) -> bool:
        return self.classify(follow_links).exists

    def not_exists(self, follow_links: bool = True) -> bool:
        return not self.exists(follow_links)

    def is_directory(self, follow_links: bool = True) -> bool:
        return self.classify(follow_links).is_directory

    def is_regular_file(self, follow_links: bool = True) -> bool:
        return self.classify(follow_links).is_file

    def is_symlink(self) -> bool:
        return self.classify(follow_links=False).is_symlink

    @property
    def symbolic_link(self) -> FsPath | None:
        """Link target if this is a symbolic link, else None."""
        return self.classify(follow_links=False).link_target

    def is_empty(self, audit: LeakAudit | None = None) -> bool:
        """Check if this is an empty directory, an empty file, or absent."""
        kind = self.kind
        if kind is EntryKind.DIRECTORY:
            with self.list(audit) as children:
                return next(children, None) is None
        if kind is EntryKind.FILE:
            with os_errors(self._path):
                return os.path.getsize(self._path) == 0
        return kind is EntryKind.ABSENT

    # ------------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------------

    def create_directory(self) -> FsPath:
        with os_errors(self._path):
            os.mkdir(self._path)
        return self

    def create_directories(self) -> FsPath:
        with os_errors(self._path):
            os.makedirs(self._path, exist_ok=True)
        return self

    def create_if_not_exists(self, as_directory: bool = False) -> FsPath:
        """Create this path (and missing parents) unless it already exists."""
        if self.exists():
            return self
        if as_directory:
            return self.create_directories()
        if self.parent is not None:
            self.parent.create_directories()
        with os_errors(self._path):
            fd = os.open(self._path, os.O_CREAT | os.O_EXCL | os.O_WRONLY, 0o666)
            os.close(fd)
        return self

    def create_child(self, name: str, as_directory: bool = False) -> FsPath:
        return self.child(name).create_if_not_exists(as_directory)

    def symlink_to(self, target: FsPath) -> FsPath:
        """Create a symbolic link at this path pointing to ``target``."""
        with os_errors(self._path):
            os.symlink(target.path_str, self._path, target_is_directory=target.is_directory())
        return self

    def hard_link_to(self, target: FsPath) -> FsPath:
        """Create a hard link at this path to ``target``."""
        with os_errors(self._path):
            os.link(target.path_str, self._path)
        return self

    # ------------------------------------------------------------------
    # Streams
    # ------------------------------------------------------------------

    def new_input_stream(self) -> IO[bytes]:
        """Open this file for binary reading. The caller must close it."""
        with os_errors(self._path):
            return open(self._path, "rb")

    def input_stream(self) -> ScopedResource[IO[bytes]]:
        return managed(self.new_input_stream())

    def new_output_stream(self, append: bool = False) -> IO[bytes]:
        """Open this file for binary writing. The caller must close it."""
        with os_errors(self._path):
            return open(self._path, "ab" if append else "wb")

    def output_stream(self, append: bool = False) -> ScopedResource[IO[bytes]]:
        return managed(self.new_output_stream(append))

    def new_reader(self, encoding: str = "utf-8") -> IO[str]:
        with os_errors(self._path):
            return open(self._path, encoding=encoding)

    def reader(self, encoding: str = "utf-8") -> ScopedResource[IO[str]]:
        return managed(self.new_reader(encoding))

    def new_writer(self, encoding: str = "utf-8", append: bool = False) -> IO[str]:
        with os_errors(self._path):
            return open(self._path, "a" if append else "w", encoding=encoding)

    def writer(self, encoding: str = "utf-8", append: bool = False) -> ScopedResource[IO[str]]:
        return managed(self.new_writer(encoding, append))

    def chunks(self, size: int = DEFAULT_BUFFER_SIZE) -> AutoClosingSequence[bytes, bytes]:
        """Byte chunks of this file; the file closes after the last chunk."""
        stream = self.new_input_stream()
        return AutoClosingSequence(stream, lambda: stream.read(size), lambda chunk: not chunk)

    def line_iterator(self, encoding: str = "utf-8") -> AutoClosingSequence[str, str]:
        """Lines of this file without line endings; closes after the last line."""
        stream = self.new_reader(encoding)
        return AutoClosingSequence(
            stream,
            stream.readline,
            lambda line: line == "",
            lambda line: line.rstrip("\r\n"),
        )

    # ------------------------------------------------------------------
    # Content I/O
    # ------------------------------------------------------------------

    def read_bytes(self) -> bytes:
        return self.input_stream().use(lambda f: f.read())

    def read_text(self, encoding: str = "utf-8") -> str:
        return self.reader(encoding).use(lambda f: f.read())

    def lines(self, encoding: str = "utf-8") -> list[str]:
        """All lines of the file. Prefer line_iterator for large files."""
        return self.read_text(encoding).splitlines()

    def write_bytes(self, data: bytes) -> FsPath:
        self.output_stream().use(lambda f: f.write(data))
        return self

    def write_text(self, text: str, encoding: str = "utf-8") -> FsPath:
        self.writer(encoding).use(lambda f: f.write(text))
        return self

    def append_bytes(self, data: bytes) -> FsPath:
        self.output_stream(append=True).use(lambda f: f.write(data))
        return self

    def append_text(self, text: str, encoding: str = "utf-8") -> FsPath:
        self.writer(encoding, append=True).use(lambda f: f.write(text))
        return self

    def append_lines(self, *lines: str, encoding: str = "utf-8") -> FsPath:
        """Append each line followed by the platform line separator."""
        self.writer(encoding, append=True).use(
            lambda f: f.writelines(line + os.linesep for line in lines)
        )
        return self

    def append_line(self, line: str = "", encoding: str = "utf-8") -> FsPath:
        return self.append_lines(line, encoding=encoding)

    def pipe_to(self, destination: FsPath, buffer_size: int = DEFAULT_BUFFER_SIZE) -> int:
        """Stream this file's bytes into ``destination`` (truncating it)."""
        source = self.input_stream()
        try:
            sink = destination.output_stream()
        except BaseException as e:
            source.close_after_failure(e)
            raise
        return pipe(source, sink, buffer_size=buffer_size)

    # ------------------------------------------------------------------
    # Tree operations
    # ------------------------------------------------------------------

    def list(self, audit: LeakAudit | None = None) -> DirectoryListingStream:
        """Direct children as an auto-closing listing stream."""
        from treefs.filesystem.listing import DirectoryListingStream

        return DirectoryListingStream(self, audit)

    def children(self, audit: LeakAudit | None = None) -> DirectoryListingStream:
        return self.list(audit)

    def siblings(self, audit: LeakAudit | None = None) -> Iterator[FsPath]:
        parent = self.parent
        if parent is None:
            return
        with parent.list(audit) as entries:
            yield from (p for p in entries if p != self)

    def walk(
        self,
        max_depth: int = UNBOUNDED_DEPTH,
        follow_links: bool = False,
        audit: LeakAudit | None = None,
    ) -> Iterator[FsPath]:
        from treefs.filesystem.walker import walk

        return walk(self, max_depth, follow_links=follow_links, audit=audit)

    def list_recursively(
        self, follow_links: bool = False, audit: LeakAudit | None = None
    ) -> Iterator[FsPath]:
        from treefs.filesystem.walker import list_recursively

        return list_recursively(self, follow_links=follow_links, audit=audit)

    def relative_paths(
        self, follow_links: bool = False, audit: LeakAudit | None = None
    ) -> Iterator[str]:
        from treefs.filesystem.walker import relative_paths

        return relative_paths(self, follow_links=follow_links, audit=audit)

    def glob(
        self, pattern: str, syntax: str = "glob", audit: LeakAudit | None = None
    ) -> Iterator[FsPath]:
        from treefs.filesystem.walker import glob

        return glob(self, pattern, syntax=syntax, audit=audit)

    def collect_children(
        self, predicate: Callable[[FsPath], bool], audit: LeakAudit | None = None
    ) -> Iterator[FsPath]:
        from treefs.filesystem.walker import collect_children

        return collect_children(self, predicate, audit=audit)

    def size(self, follow_links: bool = False, audit: LeakAudit | None = None) -> int:
        """Size in bytes; for directories, the sum over the whole walk."""
        from treefs.filesystem.walker import total_size

        return total_size(self, follow_links=follow_links, audit=audit)

    def digest(self, algorithm: str = "MD5", audit: LeakAudit | None = None) -> bytes:
        from treefs.operations.digest import digest

        return digest(self, algorithm, audit=audit)

    def checksum(self, algorithm: str = "MD5", audit: LeakAudit | None = None) -> str:
        from treefs.operations.digest import checksum

        return checksum(self, algorithm, audit=audit)

    def md5(self, audit: LeakAudit | None = None) -> str:
        return self.checksum("MD5", audit)

    def is_same_content_as(self, other: FsPath) -> bool:
        from treefs.operations.digest import is_same_content

        return is_same_content(self, other)

    def copy_to(
        self, destination: FsPath, overwrite: bool = False, audit: LeakAudit | None = None
    ) -> FsPath:
        from treefs.operations.copy import copy_to

        return copy_to(self, destination, overwrite=overwrite, audit=audit)

    def move_to(self, destination: FsPath, overwrite: bool = False) -> FsPath:
        from treefs.operations.copy import move_to

        return move_to(self, destination, overwrite=overwrite)

    def rename_to(self, new_name: str) -> FsPath:
        from treefs.operations.copy import rename_to

        return rename_to(self, new_name)

    def change_extension_to(self, extension: str) -> FsPath:
        """Rename a regular file to carry ``extension`` (dot included).

        Anything that is not a regular file is returned unchanged.
        """
        if not self.is_regular_file():
            return self
        new_name = self.name_without_extension + extension
        if new_name == self.name:
            return self
        return self.rename_to(new_name)

    def delete(self, swallow_io_errors: bool = False, audit: LeakAudit | None = None) -> FsPath:
        from treefs.operations.delete import delete

        return delete(self, swallow_io_errors=swallow_io_errors, audit=audit)

    def clear(self, audit: LeakAudit | None = None) -> FsPath:
        from treefs.operations.delete import clear

        return clear(self, audit=audit)

    def zip_to(
        self,
        destination: FsPath,
        compression_level: int = -1,
        audit: LeakAudit | None = None,
    ) -> FsPath:
        from treefs.operations.archive import zip_to

        return zip_to(self, destination, compression_level, audit=audit)

    def zip(self, compression_level: int = -1, audit: LeakAudit | None = None) -> FsPath:
        from treefs.operations.archive import zip_to_temporary

        return zip_to_temporary(self, compression_level, audit=audit)

    def unzip_to(self, destination: FsPath) -> FsPath:
        from treefs.operations.archive import unzip_to

        return unzip_to(self, destination)

    def unzip(self) -> FsPath:
        from treefs.operations.archive import unzip_to_temporary

        return unzip_to_temporary(self)

    # ------------------------------------------------------------------
    # Well-known locations
    # ------------------------------------------------------------------

    @classmethod
    def home(cls) -> FsPath:
        return cls(os.path.expanduser("~"))

    @classmethod
    def temp(cls) -> FsPath:
        return cls(tempfile.gettempdir())

    @classmethod
    def cwd(cls) -> FsPath:
        return cls(os.getcwd())

    @classmethod
    def temporary_directory(cls, prefix: str = "", parent: FsPath | None = None) -> FsPath:
        """Create a new empty directory under ``parent`` (or the temp dir)."""
        with os_errors(parent.path_str if parent else None):
            return cls(tempfile.mkdtemp(prefix=prefix, dir=parent.path_str if parent else None))

    @classmethod
    def temporary_file(
        cls, prefix: str = "", suffix: str = "", parent: FsPath | None = None
    ) -> FsPath:
        """Create a new empty file under ``parent`` (or the temp dir)."""
        with os_errors(parent.path_str if parent else None):
            fd, name = tempfile.mkstemp(
                suffix=suffix, prefix=prefix, dir=parent.path_str if parent else None
            )
            os.close(fd)
        return cls(name)
