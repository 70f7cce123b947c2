"""Data models and protocols for fastcdc-stream."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

# Type aliases (Python 3.12+)
type Offset = int
type Span = tuple[Offset, Offset]


@runtime_checkable
class ByteSource(Protocol):
    """Pull-based byte source consumed by the chunker.

    ``readinto`` fills as much of ``buffer`` as it can and returns the number
    of bytes written. Returning 0 for a non-empty buffer means end of data;
    raising means the read failed. Binary files, ``io.BytesIO`` and
    ``socket.makefile("rb")`` objects all qualify.
    """

    def readinto(self, buffer: memoryview, /) -> int: ...


class _Readable(Protocol):
    """Objects offering only ``read(n)``."""

    def read(self, size: int, /) -> bytes | None: ...
