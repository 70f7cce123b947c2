"""
Streaming chunker: turns a byte source into absolute chunk-end offsets.

Each boundary request tops up the buffer so at least ``max_size`` unconsumed
bytes are visible (or the source is exhausted), scans that window for the
next cut point, advances past it and returns the stream offset. Cut points
therefore never depend on how the source splits its reads.
"""

from __future__ import annotations

import logging
from collections.abc import Buffer, Callable, Iterator
from typing import Self

from ...config import CDC_BACKEND, CHUNK_AVG_SIZE, CHUNK_MAX_SIZE, CHUNK_MIN_SIZE
from ...exceptions import ConfigurationError, SourceReadError
from ...types import ByteSource, Offset
from ._buffer import StreamBuffer
from ._gear import ChunkerConfig, find_cut_point
from ._simd import find_cut_point_vectorized

logger = logging.getLogger(__name__)

type CutPointFinder = Callable[[Buffer, ChunkerConfig], int]

_FINDERS: dict[str, CutPointFinder] = {
    "python": find_cut_point,
    "numpy": find_cut_point_vectorized,
}


def get_cut_point_finder(backend: str | None = None) -> CutPointFinder:
    """Return the cut-point detector for ``backend``.

    Args:
        backend: "python" (scalar loop) or "numpy" (vectorized);
            None uses the CDC_BACKEND setting

    Raises:
        ConfigurationError: If the backend is unknown or not a string
    """
    if backend is None:
        backend = CDC_BACKEND
    elif not isinstance(backend, str):
        raise ConfigurationError(f"CDC backend must be a string, got {type(backend).__name__}")
    name = backend.strip().lower()
    try:
        return _FINDERS[name]
    except KeyError:
        raise ConfigurationError(
            f"unknown CDC backend {backend!r}, expected one of: {', '.join(sorted(_FINDERS))}"
        ) from None


def get_optimal_finder(prefer_simd: bool = True) -> CutPointFinder:
    """Return the vectorized detector, or the scalar one if ``prefer_simd`` is False."""
    return get_cut_point_finder("numpy" if prefer_simd else "python")


class Chunker:
    """Content-defined chunker over a pull-based byte source.

    Iterating yields the offset where each chunk ends; the first chunk starts
    at 0 and the last offset equals the stream length. Exhaustion is signalled
    with ``StopIteration`` and repeats on every later call.

    Example:
        >>> import io
        >>> list(Chunker(io.BytesIO(b"abc")))
        [3]

    Not thread-safe: one chunker per stream, driven from one thread.
    """

    __slots__ = ("_config", "_buffer", "_find", "_done", "_failed")

    def __init__(
        self,
        source: ByteSource,
        min_size: int = CHUNK_MIN_SIZE,
        avg_size: int = CHUNK_AVG_SIZE,
        max_size: int = CHUNK_MAX_SIZE,
        *,
        backend: str | None = None,
    ) -> None:
        """Initialize a chunker.

        Args:
            source: Object with ``readinto(memoryview) -> int``; not closed here
            min_size: Minimum chunk size (default: 2KB)
            avg_size: Target average chunk size (default: 8KB)
            max_size: Maximum chunk size (default: 32KB)
            backend: Cut-point detector, "python" or "numpy" (default: CDC_BACKEND)

        Raises:
            ConfigurationError: If the sizes or backend are invalid
        """
        self._setup(source, ChunkerConfig(min_size, avg_size, max_size), backend)

    @classmethod
    def from_config(
        cls,
        source: ByteSource,
        config: ChunkerConfig,
        *,
        backend: str | None = None,
    ) -> Self:
        """Create a chunker from an existing ChunkerConfig."""
        chunker = cls.__new__(cls)
        chunker._setup(source, config, backend)
        return chunker

    def _setup(self, source: ByteSource, config: ChunkerConfig, backend: str | None) -> None:
        self._find = get_cut_point_finder(backend)
        self._config = config
        self._buffer = StreamBuffer(source, config.buffer_size)
        self._done = False
        self._failed: SourceReadError | None = None
        logger.debug(f"Chunker ready: {config}, backend={backend or CDC_BACKEND}")

    @property
    def config(self) -> ChunkerConfig:
        return self._config

    @property
    def offset(self) -> Offset:
        """Stream offset of the last returned boundary (0 before the first)."""
        return self._buffer.offset

    @property
    def done(self) -> bool:
        """True once the whole stream has been partitioned."""
        return self._done

    def __iter__(self) -> Iterator[Offset]:
        return self

    def __next__(self) -> Offset:
        """Return the end offset of the next chunk.

        Raises:
            StopIteration: When the stream is fully partitioned
            SourceReadError: If the source failed, now or on an earlier call
        """
        if self._failed is not None:
            raise SourceReadError(f"chunker unusable after read error: {self._failed}")
        if self._done:
            raise StopIteration

        buffer = self._buffer
        try:
            buffer.ensure(self._config.max_size)
        except SourceReadError as e:
            self._failed = e
            raise

        if buffer.available == 0:
            self._done = True
            logger.debug(f"Chunking complete at offset {buffer.offset}")
            raise StopIteration

        cut = self._find(buffer.window(), self._config)
        buffer.advance(cut)
        return buffer.offset

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} offset={self.offset} done={self._done} {self._config}>"
