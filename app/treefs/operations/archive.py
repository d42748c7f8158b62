"""ZIP archiving and extraction.

Archives are written with the deflate method for every entry, even at
compression level 0. Directory entries are named with a trailing ``/`` and
carry no content. Entry names are paths relative to the archived root,
using ``/`` as separator.
"""

from __future__ import annotations

import logging
import os
import sys
import zipfile

from treefs.core.errors import IOFailureError, os_errors
from treefs.filesystem.audit import LeakAudit
from treefs.filesystem.path import DEFAULT_BUFFER_SIZE, FsPath
from treefs.filesystem.walker import walk
from treefs.resources.scoped import managed, pipe

logger = logging.getLogger(__name__)

DEFAULT_COMPRESSION_LEVEL = -1
MIN_COMPRESSION_LEVEL = -1
MAX_COMPRESSION_LEVEL = 9


def _zipfile_level(compression_level: int) -> int | None:
    if not MIN_COMPRESSION_LEVEL <= compression_level <= MAX_COMPRESSION_LEVEL:
        msg = (
            f"Compression level must be between {MIN_COMPRESSION_LEVEL} and "
            f"{MAX_COMPRESSION_LEVEL}, got {compression_level}"
        )
        raise ValueError(msg)
    return None if compression_level == DEFAULT_COMPRESSION_LEVEL else compression_level


def zip_to(
    source: FsPath,
    destination: FsPath,
    compression_level: int = DEFAULT_COMPRESSION_LEVEL,
    *,
    buffer_size: int = DEFAULT_BUFFER_SIZE,
    audit: LeakAudit | None = None,
) -> FsPath:
    """Archive a file or directory tree into a ZIP file.

    For a directory, every walked path except the root becomes one entry,
    in walker order. A single file becomes one entry named after it. An
    existing destination is overwritten.

    Args:
        source: File or directory to archive.
        destination: ZIP file to write. Missing parents are created.
        compression_level: -1 (library default) or 0 to 9.
        buffer_size: Read size when piping file content.
        audit: Leak audit receiving listing events.

    Returns:
        The destination path.

    Raises:
        ValueError: If the compression level is out of range.
        NotFoundError: If the source does not exist.
    """
    level = _zipfile_level(compression_level)
    if destination.parent is not None:
        destination.parent.create_directories()

    with os_errors(destination.path_str):
        archive = zipfile.ZipFile(
            destination.path_str, "w", compression=zipfile.ZIP_DEFLATED, compresslevel=level
        )

    entries = 0
    with managed(archive) as zf:
        if source.is_directory():
            for path in walk(source, audit=audit):
                if path == source or path == destination:
                    continue
                _add_entry(zf, path, source.relativize(path), level, buffer_size)
                entries += 1
        else:
            _add_entry(zf, source, source.name, level, buffer_size)
            entries += 1

    logger.debug("Wrote %d entries from %s to %s", entries, source, destination)
    return destination


def _add_entry(
    zf: zipfile.ZipFile, path: FsPath, name: str, level: int | None, buffer_size: int
) -> None:
    with os_errors(path.path_str):
        info = zipfile.ZipInfo.from_file(
            path.path_str, arcname=name.replace(os.sep, "/"), strict_timestamps=False
        )

    info.compress_type = zipfile.ZIP_DEFLATED
    if info.is_dir():
        zf.mkdir(info)
        return

    if sys.version_info >= (3, 13):
        info.compress_level = level
    else:
        info._compresslevel = level
    source = path.input_stream()
    try:
        sink = managed(zf.open(info, "w"))
    except BaseException as e:
        source.close_after_failure(e)
        raise
    pipe(source, sink, buffer_size=buffer_size)


def zip_to_temporary(
    source: FsPath,
    compression_level: int = DEFAULT_COMPRESSION_LEVEL,
    *,
    audit: LeakAudit | None = None,
) -> FsPath:
    """Archive ``source`` into a new temporary ``.zip`` file."""
    destination = FsPath.temporary_file(prefix=source.name_without_extension, suffix=".zip")
    return zip_to(source, destination, compression_level, audit=audit)


def unzip_to(
    archive: FsPath,
    destination: FsPath,
    *,
    buffer_size: int = DEFAULT_BUFFER_SIZE,
) -> FsPath:
    """Extract a ZIP file into ``destination``.

    Entries are processed in archive order. Directories are created before
    any file is written beneath them; existing files are overwritten.

    Args:
        archive: ZIP file to read.
        destination: Directory to extract into (created if missing).
        buffer_size: Read size when piping entry content.

    Returns:
        The destination directory.

    Raises:
        NotFoundError: If the archive does not exist.
        IOFailureError: If the archive is invalid or an entry name would
            escape the destination.
    """
    try:
        with os_errors(archive.path_str):
            opened = zipfile.ZipFile(archive.path_str)
    except zipfile.BadZipFile as e:
        msg = f"Not a valid ZIP archive: {archive}"
        raise IOFailureError(msg) from e

    destination.create_directories()
    with managed(opened) as zf:
        for info in zf.infolist():
            target = _entry_target(destination, info.filename)
            if info.is_dir():
                target.create_directories()
                continue
            target.create_if_not_exists()
            source = managed(zf.open(info))
            try:
                sink = target.output_stream()
            except BaseException as e:
                source.close_after_failure(e)
                raise
            pipe(source, sink, buffer_size=buffer_size)

    logger.debug("Extracted %s to %s", archive, destination)
    return destination


def _entry_target(destination: FsPath, name: str) -> FsPath:
    target = FsPath(destination.path_str, name)
    if target != destination and not destination.is_parent_of(target):
        msg = f"Archive entry {name!r} escapes destination {destination}"
        raise IOFailureError(msg)
    return target


def unzip_to_temporary(archive: FsPath) -> FsPath:
    """Extract ``archive`` into a new temporary directory."""
    destination = FsPath.temporary_directory(prefix=archive.name_without_extension)
    return unzip_to(archive, destination)
