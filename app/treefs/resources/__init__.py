"""Resource-lifetime primitives.

Scoped resources release their handle on every exit path; auto-closing
sequences release it when the producer reports the end of data.
"""

from treefs.resources.scoped import Closeable, ScopedResource, managed, pipe
from treefs.resources.sequence import AutoClosingSequence

__all__ = [
    "AutoClosingSequence",
    "Closeable",
    "ScopedResource",
    "managed",
    "pipe",
]
