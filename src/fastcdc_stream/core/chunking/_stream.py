"""Convenience wrappers around Chunker for common source types."""

from __future__ import annotations

import io
from collections.abc import Buffer, Iterator

from ...config import CHUNK_AVG_SIZE, CHUNK_MAX_SIZE, CHUNK_MIN_SIZE
from ...types import ByteSource, Offset, Span, _Readable
from ._chunker import Chunker


class _ReadAdapter:
    """Expose ``readinto`` on top of an object that only has ``read(n)``."""

    __slots__ = ("_reader",)

    def __init__(self, reader: _Readable) -> None:
        self._reader = reader

    def readinto(self, buffer: memoryview, /) -> int | None:
        data = self._reader.read(len(buffer))
        if data is None:
            # Non-blocking stream with nothing ready; the buffer rejects it
            return None
        n = len(data)
        if n:
            buffer[:n] = data
        return n


def as_byte_source(obj: ByteSource | _Readable | Buffer) -> ByteSource:
    """Adapt ``obj`` to the ``readinto`` capability the chunker consumes.

    Bytes-like objects are wrapped in ``io.BytesIO``; objects offering only
    ``read(n)`` get a small adapter; anything with ``readinto`` is returned
    unchanged.

    Raises:
        TypeError: If ``obj`` is none of the above
    """
    if hasattr(obj, "readinto"):
        return obj  # type: ignore[return-value]
    if isinstance(obj, (bytes, bytearray, memoryview)):
        return io.BytesIO(obj)
    if hasattr(obj, "read"):
        return _ReadAdapter(obj)  # type: ignore[arg-type]
    if isinstance(obj, Buffer):
        return io.BytesIO(memoryview(obj).cast("B").tobytes())
    raise TypeError(f"cannot read bytes from {type(obj).__name__}")


def iter_boundaries(
    source: ByteSource | _Readable | Buffer,
    min_size: int = CHUNK_MIN_SIZE,
    avg_size: int = CHUNK_AVG_SIZE,
    max_size: int = CHUNK_MAX_SIZE,
    *,
    backend: str | None = None,
) -> Iterator[Offset]:
    """Iterate over the end offset of every chunk in ``source``.

    Args:
        source: Byte source, file-like object, or bytes-like data
        min_size: Minimum chunk size (default: 2KB)
        avg_size: Target average chunk size (default: 8KB)
        max_size: Maximum chunk size (default: 32KB)
        backend: Cut-point detector, "python" or "numpy"

    Returns:
        Iterator of strictly increasing offsets; the last one is the stream length

    Raises:
        ConfigurationError: Immediately, if the sizes or backend are invalid
    """
    return Chunker(as_byte_source(source), min_size, avg_size, max_size, backend=backend)


def iter_spans(
    source: ByteSource | _Readable | Buffer,
    min_size: int = CHUNK_MIN_SIZE,
    avg_size: int = CHUNK_AVG_SIZE,
    max_size: int = CHUNK_MAX_SIZE,
    *,
    backend: str | None = None,
) -> Iterator[Span]:
    """Iterate over ``(start, end)`` byte indices for each chunk in ``source``."""
    return _spans(iter_boundaries(source, min_size, avg_size, max_size, backend=backend))


def _spans(boundaries: Iterator[Offset]) -> Iterator[Span]:
    start = 0
    for end in boundaries:
        yield (start, end)
        start = end


def chunk_boundaries(
    data: Buffer,
    min_size: int = CHUNK_MIN_SIZE,
    avg_size: int = CHUNK_AVG_SIZE,
    max_size: int = CHUNK_MAX_SIZE,
    *,
    backend: str | None = None,
) -> list[Offset]:
    """Return all chunk end offsets for in-memory ``data``."""
    return list(iter_boundaries(data, min_size, avg_size, max_size, backend=backend))
