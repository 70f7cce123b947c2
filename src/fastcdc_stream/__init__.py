"""fastcdc-stream - Streaming FastCDC content-defined chunking over any byte source."""

from importlib.metadata import version as _pkg_version

from .config import CDC_BACKEND, CHUNK_AVG_SIZE, CHUNK_MAX_SIZE, CHUNK_MIN_SIZE
from .core import (
    DEFAULT_CONFIG,
    Chunker,
    ChunkerConfig,
    chunk_boundaries,
    iter_boundaries,
    iter_spans,
)
from .exceptions import ChunkerError, ConfigurationError, SourceReadError
from .types import ByteSource

__version__ = _pkg_version("fastcdc-stream")

__all__ = [
    # Main classes
    "Chunker",
    "ChunkerConfig",
    "ByteSource",
    # Functions
    "iter_boundaries",
    "iter_spans",
    "chunk_boundaries",
    # Errors
    "ChunkerError",
    "ConfigurationError",
    "SourceReadError",
    # Configuration
    "DEFAULT_CONFIG",
    "CDC_BACKEND",
    "CHUNK_MIN_SIZE",
    "CHUNK_AVG_SIZE",
    "CHUNK_MAX_SIZE",
]
