"""Error taxonomy for treefs.

Every failure raised by treefs derives from TreeFsError. Errors that stem
from the operating system also derive from the matching builtin OSError
subclass, so callers can catch either ``treefs`` types or the standard ones
(``FileNotFoundError``, ``PermissionError`` and so on).

Raw OSErrors are converted at the call site with :func:`translate_os_error`
or the :func:`os_errors` context manager.
"""

from __future__ import annotations

import errno
from collections.abc import Iterator
from contextlib import contextmanager
from os import PathLike


class TreeFsError(Exception):
    """Base exception for all treefs errors."""


class IOFailureError(TreeFsError, OSError):
    """Catch-all transport or device failure."""


class NotFoundError(IOFailureError, FileNotFoundError):
    """Raised when a path does not exist."""


class NotADirectoryPathError(IOFailureError, NotADirectoryError):
    """Raised when a directory was required but the path is something else."""


class AlreadyExistsError(IOFailureError, FileExistsError):
    """Raised when a target path exists and overwriting was not requested."""


class PermissionDeniedError(IOFailureError, PermissionError):
    """Raised when the OS refuses access to a path."""


class FileSystemLoopError(IOFailureError):
    """Raised when following symbolic links leads back into an ancestor."""


class UnsupportedPlatformError(TreeFsError):
    """Raised when a query is not available on the running platform."""


class UnsupportedAlgorithmError(TreeFsError, ValueError):
    """Raised when a digest algorithm name is not known to hashlib."""


class ConfigError(TreeFsError):
    """Base exception for configuration errors."""


class ConfigNotFoundError(ConfigError):
    """Raised when the config file is not found."""


class ConfigParseError(ConfigError):
    """Raised when the config file cannot be parsed."""


_ERRNO_MAP: dict[int, type[IOFailureError]] = {
    errno.ENOENT: NotFoundError,
    errno.ENOTDIR: NotADirectoryPathError,
    errno.EEXIST: AlreadyExistsError,
    errno.EACCES: PermissionDeniedError,
    errno.EPERM: PermissionDeniedError,
    errno.ELOOP: FileSystemLoopError,
}

_BUILTIN_MAP: tuple[tuple[type[OSError], type[IOFailureError]], ...] = (
    (FileNotFoundError, NotFoundError),
    (NotADirectoryError, NotADirectoryPathError),
    (FileExistsError, AlreadyExistsError),
    (PermissionError, PermissionDeniedError),
)


def translate_os_error(
    error: OSError,
    path: str | PathLike[str] | None = None,
) -> IOFailureError:
    """Convert a raw OSError into the treefs taxonomy.

    Errors that already belong to the taxonomy are returned unchanged.

    Args:
        error: The error raised by the OS call.
        path: Path the call operated on, used when the error carries none.

    Returns:
        An IOFailureError subclass instance (not raised).
    """
    if isinstance(error, IOFailureError):
        return error

    error_cls = _ERRNO_MAP.get(error.errno or 0)
    if error_cls is None:
        for builtin_cls, mapped_cls in _BUILTIN_MAP:
            if isinstance(error, builtin_cls):
                error_cls = mapped_cls
                break
        else:
            error_cls = IOFailureError

    filename = error.filename if error.filename is not None else path
    if filename is not None:
        filename = str(filename)
    message = error.strerror or str(error)

    if error.filename2 is not None:
        return error_cls(error.errno, message, filename, None, str(error.filename2))
    return error_cls(error.errno, message, filename)


@contextmanager
def os_errors(path: str | PathLike[str] | None = None) -> Iterator[None]:
    """Translate OSErrors raised inside the block.

    Args:
        path: Path the block operates on.

    Raises:
        IOFailureError: Translated error, chained to the original.
    """
    try:
        yield
    except IOFailureError:
        raise
    except OSError as e:
        raise translate_os_error(e, path) from e
