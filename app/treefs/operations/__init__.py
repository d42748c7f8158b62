"""Recursive tree operations: digest, copy, delete, archive."""

from treefs.operations.archive import unzip_to, unzip_to_temporary, zip_to, zip_to_temporary
from treefs.operations.copy import copy_to, move_to, rename_to
from treefs.operations.delete import clear, delete
from treefs.operations.digest import checksum, digest, is_same_content, md5, new_hasher

__all__ = [
    "checksum",
    "clear",
    "copy_to",
    "delete",
    "digest",
    "is_same_content",
    "md5",
    "move_to",
    "new_hasher",
    "rename_to",
    "unzip_to",
    "unzip_to_temporary",
    "zip_to",
    "zip_to_temporary",
]
