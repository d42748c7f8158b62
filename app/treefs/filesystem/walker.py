"""Depth-bounded pre-order tree walking.

The walker yields the root, then descends through directory listings,
yielding each entry before its own children. Every listing it opens is
used as a context manager inside the generator, so abandoning the walk
(closing the generator or dropping it) releases all open listing handles.
"""

from __future__ import annotations

import logging
import os
import re
from collections.abc import Callable, Iterator

from treefs.core.errors import FileSystemLoopError, os_errors
from treefs.filesystem.audit import LeakAudit
from treefs.filesystem.listing import DirectoryListingStream
from treefs.filesystem.path import UNBOUNDED_DEPTH, FsPath

logger = logging.getLogger(__name__)

GLOB_SYNTAX = "glob"
REGEX_SYNTAX = "regex"


def walk(
    root: FsPath,
    max_depth: int = UNBOUNDED_DEPTH,
    *,
    follow_links: bool = False,
    audit: LeakAudit | None = None,
) -> Iterator[FsPath]:
    """Walk the tree under ``root`` in pre-order.

    The root itself is the first item and is descended into when it is a
    directory (a link to a directory counts). Below the root, links are
    only followed when ``follow_links`` is set. Sibling order is whatever
    the OS returns.

    Args:
        root: Starting path. A non-directory root yields only itself.
        max_depth: Maximum depth to descend; 0 yields only the root.
        follow_links: Descend into directories reached through links.
        audit: Leak audit receiving listing open/closed events.

    Yields:
        Paths of the tree, parents before their children.

    Raises:
        ValueError: If max_depth is negative.
        FileSystemLoopError: If following links leads back into an ancestor.
        IOFailureError: If a listing fails mid-walk; the walk stops there.
    """
    if max_depth < 0:
        msg = f"max_depth must be non-negative, got {max_depth}"
        raise ValueError(msg)

    yield root
    if max_depth == 0 or not root.is_directory():
        return

    ancestors = {_file_key(root)} if follow_links else set()
    yield from _walk_children(root, 1, max_depth, follow_links, audit, ancestors)


def _walk_children(
    directory: FsPath,
    depth: int,
    max_depth: int,
    follow_links: bool,
    audit: LeakAudit | None,
    ancestors: set[tuple[int, int]],
) -> Iterator[FsPath]:
    with DirectoryListingStream(directory, audit) as children:
        for child in children:
            yield child
            if depth >= max_depth or not child.is_directory(follow_links):
                continue

            if not follow_links:
                yield from _walk_children(child, depth + 1, max_depth, False, audit, ancestors)
                continue

            key = _file_key(child)
            if key in ancestors:
                msg = f"Symbolic link loop detected at {child}"
                raise FileSystemLoopError(msg)
            ancestors.add(key)
            try:
                yield from _walk_children(child, depth + 1, max_depth, True, audit, ancestors)
            finally:
                ancestors.discard(key)


def _file_key(path: FsPath) -> tuple[int, int]:
    with os_errors(path.path_str):
        st = os.stat(path.path_str)
    return st.st_dev, st.st_ino


def list_recursively(
    root: FsPath,
    *,
    follow_links: bool = False,
    audit: LeakAudit | None = None,
) -> Iterator[FsPath]:
    """Walk the tree under ``root`` without yielding the root itself."""
    return (path for path in walk(root, follow_links=follow_links, audit=audit) if path != root)


def relative_paths(
    root: FsPath,
    *,
    follow_links: bool = False,
    audit: LeakAudit | None = None,
) -> Iterator[str]:
    """Walk the tree and yield each path relative to ``root`` (root is "")."""
    return (root.relativize(path) for path in walk(root, follow_links=follow_links, audit=audit))


def compile_pattern(pattern: str, syntax: str = GLOB_SYNTAX) -> re.Pattern[str]:
    """Compile a glob or regex matched against relative paths.

    In glob syntax ``**`` matches across directory separators while ``*``
    and ``?`` stay within one path component.

    Args:
        pattern: The pattern text.
        syntax: ``"glob"`` or ``"regex"``.

    Returns:
        Compiled regular expression, applied with ``fullmatch``.

    Raises:
        ValueError: If the syntax is unknown.
    """
    if syntax == REGEX_SYNTAX:
        return re.compile(pattern)
    if syntax != GLOB_SYNTAX:
        msg = f"Unknown pattern syntax: {syntax!r} (expected 'glob' or 'regex')"
        raise ValueError(msg)

    return re.compile(_glob_to_regex(pattern), re.DOTALL)


def _glob_to_regex(pattern: str) -> str:
    component = f"[^{re.escape(os.sep)}]"
    out: list[str] = []
    i, n = 0, len(pattern)
    while i < n:
        char = pattern[i]
        i += 1
        if char == "*":
            if i < n and pattern[i] == "*":
                i += 1
                out.append(".*")
            else:
                out.append(component + "*")
        elif char == "?":
            out.append(component)
        elif char == "[":
            end = pattern.find("]", i + 1 if i < n and pattern[i] in "!^" else i)
            if end == -1:
                out.append(re.escape(char))
                continue
            body = pattern[i:end]
            i = end + 1
            if body[:1] in ("!", "^"):
                body = "^" + body[1:]
            out.append("[" + body.replace("\\", "\\\\") + "]")
        elif char == "{":
            end = pattern.find("}", i)
            if end == -1:
                out.append(re.escape(char))
                continue
            choices = pattern[i:end].split(",")
            i = end + 1
            out.append("(?:" + "|".join(_glob_to_regex(c) for c in choices) + ")")
        else:
            out.append(re.escape(char))
    return "".join(out)


def glob(
    root: FsPath,
    pattern: str,
    *,
    syntax: str = GLOB_SYNTAX,
    audit: LeakAudit | None = None,
) -> Iterator[FsPath]:
    """Yield paths below ``root`` whose relative path matches ``pattern``."""
    matcher = compile_pattern(pattern, syntax)
    return (
        path
        for path in list_recursively(root, audit=audit)
        if matcher.fullmatch(root.relativize(path))
    )


def collect_children(
    root: FsPath,
    predicate: Callable[[FsPath], bool],
    *,
    audit: LeakAudit | None = None,
) -> Iterator[FsPath]:
    """Yield paths below ``root`` accepted by ``predicate``."""
    return (path for path in list_recursively(root, audit=audit) if predicate(path))


def total_size(
    root: FsPath,
    *,
    follow_links: bool = False,
    audit: LeakAudit | None = None,
) -> int:
    """Sum of the sizes reported by the OS for every walked path.

    Raises:
        NotFoundError: If ``root`` does not exist or a dangling link is met.
    """
    total = 0
    for path in walk(root, follow_links=follow_links, audit=audit):
        with os_errors(path.path_str):
            total += os.stat(path.path_str).st_size
    logger.debug("Computed size %d for %s", total, root)
    return total
