"""Order-independent content digests of files and directory trees.

The digest of a tree is computed over its walked paths sorted by their
path relative to the root. Directories contribute their relative path
bytes, everything else contributes its full content. The result therefore
does not depend on the order the OS lists directory entries in, and is
unchanged by copying the tree elsewhere.
"""

from __future__ import annotations

import hashlib
import logging
import os

from treefs.core.errors import UnsupportedAlgorithmError
from treefs.filesystem.audit import LeakAudit
from treefs.filesystem.path import DEFAULT_BUFFER_SIZE, FsPath
from treefs.filesystem.walker import walk

logger = logging.getLogger(__name__)

DEFAULT_ALGORITHM = "MD5"


def new_hasher(algorithm: str) -> hashlib._Hash:
    """Create a hash object from a display name.

    Names are matched case-insensitively, with or without dashes, so "MD5",
    "SHA-256", "sha256" and "SHA3-256" all resolve.

    Args:
        algorithm: Algorithm name.

    Returns:
        Fresh hash object.

    Raises:
        UnsupportedAlgorithmError: If hashlib does not provide the algorithm.
    """
    available = hashlib.algorithms_available
    lowered = algorithm.strip().lower()
    for candidate in (lowered, lowered.replace("-", ""), lowered.replace("-", "_")):
        if candidate in available:
            return hashlib.new(candidate)
    msg = f"Unsupported digest algorithm: {algorithm!r}"
    raise UnsupportedAlgorithmError(msg)


def digest(
    root: FsPath,
    algorithm: str = DEFAULT_ALGORITHM,
    *,
    follow_links: bool = False,
    buffer_size: int = DEFAULT_BUFFER_SIZE,
    audit: LeakAudit | None = None,
) -> bytes:
    """Compute the digest of a file or directory tree.

    Args:
        root: File or directory to digest.
        algorithm: Hash algorithm name.
        follow_links: Descend into linked directories while walking.
        buffer_size: Read size when streaming file content.
        audit: Leak audit receiving listing events.

    Returns:
        Raw digest bytes.

    Raises:
        UnsupportedAlgorithmError: If the algorithm is unknown.
        NotFoundError: If the root (or a walked file) does not exist.
    """
    hasher = new_hasher(algorithm)
    walked = walk(root, follow_links=follow_links, audit=audit)
    relative = sorted(root.relativize(path) for path in walked)
    logger.debug("Digesting %d entries under %s with %s", len(relative), root, hasher.name)

    for name in relative:
        path = root / name if name else root
        if path.is_directory():
            hasher.update(os.fsencode(name))
            continue
        with path.chunks(buffer_size) as chunks:
            for chunk in chunks:
                hasher.update(chunk)
    return hasher.digest()


def checksum(
    root: FsPath,
    algorithm: str = DEFAULT_ALGORITHM,
    *,
    follow_links: bool = False,
    audit: LeakAudit | None = None,
) -> str:
    """Digest rendered as uppercase hexadecimal."""
    return digest(root, algorithm, follow_links=follow_links, audit=audit).hex().upper()


def md5(root: FsPath, *, audit: LeakAudit | None = None) -> str:
    return checksum(root, "MD5", audit=audit)


def is_same_content(first: FsPath, second: FsPath) -> bool:
    """Check if two files or trees have the same MD5 checksum."""
    return md5(first) == md5(second)
