"""Streaming buffer: keeps enough look-ahead from a pull-based byte source."""

from __future__ import annotations

import logging

from ...exceptions import SourceReadError
from ...types import ByteSource

logger = logging.getLogger(__name__)


class StreamBuffer:
    """Fixed-capacity window over a byte source.

    Bytes ``[pos, filled)`` of ``buf`` are read but not yet consumed. ``origin``
    counts the bytes compacted away from the front, so ``origin + i`` is the
    stream offset of ``buf[i]``.

    Invariant: ``0 <= pos <= filled <= capacity``. Single owner, no locking.
    """

    __slots__ = ("_source", "buf", "origin", "pos", "filled", "exhausted")

    def __init__(self, source: ByteSource, capacity: int) -> None:
        """Initialize an empty buffer.

        Args:
            source: Object with ``readinto``; not closed by the buffer
            capacity: Buffer size in bytes (the chunker uses 2 * max_size)
        """
        self._source = source
        self.buf = bytearray(capacity)
        self.origin = 0
        self.pos = 0
        self.filled = 0
        self.exhausted = False

    @property
    def capacity(self) -> int:
        return len(self.buf)

    @property
    def available(self) -> int:
        """Unconsumed bytes currently buffered."""
        return self.filled - self.pos

    @property
    def offset(self) -> int:
        """Stream offset of the scan position."""
        return self.origin + self.pos

    def window(self) -> memoryview:
        """Return a view of the unconsumed bytes."""
        return memoryview(self.buf)[self.pos : self.filled]

    def advance(self, n: int) -> None:
        """Mark ``n`` bytes as consumed."""
        if not 0 <= n <= self.available:
            raise ValueError(f"cannot advance {n} bytes with {self.available} available")
        self.pos += n

    def ensure(self, lookahead: int) -> None:
        """Make at least ``lookahead`` unconsumed bytes available, unless at EOF.

        Compacts the unconsumed bytes to the front and refills the tail. Does
        nothing when enough bytes are buffered or the source is exhausted.

        Raises:
            SourceReadError: If the source fails during the refill
        """
        if self.exhausted or self.available >= lookahead:
            return
        self._compact()
        self._fill()

    def _compact(self) -> None:
        """Move ``[pos, filled)`` to the start of the buffer."""
        if self.pos == 0:
            return
        remaining = self.filled - self.pos
        self.buf[:remaining] = self.buf[self.pos : self.filled]
        self.origin += self.pos
        self.filled = remaining
        self.pos = 0
        logger.debug(f"Compacted buffer: origin={self.origin}, kept={remaining}")

    def _fill(self) -> None:
        """Read from the source until the buffer is full or the source is exhausted."""
        capacity = len(self.buf)
        view = memoryview(self.buf)
        while self.filled < capacity:
            wanted = capacity - self.filled
            try:
                n = self._source.readinto(view[self.filled :])
            except Exception as e:
                raise SourceReadError(
                    f"source read failed at offset {self.origin + self.filled}: {e}"
                ) from e

            # None is what non-blocking streams return when no data is ready
            if not isinstance(n, int) or not 0 <= n <= wanted:
                raise SourceReadError(
                    f"source returned invalid byte count {n!r} "
                    f"for a {wanted}-byte read at offset {self.origin + self.filled}"
                )
            if n == 0:
                self.exhausted = True
                logger.debug(f"Source exhausted at offset {self.origin + self.filled}")
                break
            self.filled += n

        logger.debug(f"Refilled buffer: filled={self.filled}/{capacity}, origin={self.origin}")
