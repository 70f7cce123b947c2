"""Chunking sub-package: streaming FastCDC with scalar and NumPy detectors."""

from __future__ import annotations

from ._buffer import StreamBuffer
from ._chunker import (
    Chunker,
    CutPointFinder,
    get_cut_point_finder,
    get_optimal_finder,
)
from ._gear import DEFAULT_CONFIG, ChunkerConfig, find_cut_point
from ._masks import bit_length, derive_masks, spread
from ._simd import find_cut_point_vectorized
from ._stream import as_byte_source, chunk_boundaries, iter_boundaries, iter_spans
from ._table import GEAR_ARRAY, GEAR_TABLE, MASK_64

__all__ = [
    "ChunkerConfig",
    "DEFAULT_CONFIG",
    "Chunker",
    "CutPointFinder",
    "StreamBuffer",
    "find_cut_point",
    "find_cut_point_vectorized",
    "get_cut_point_finder",
    "get_optimal_finder",
    "iter_boundaries",
    "iter_spans",
    "chunk_boundaries",
    "as_byte_source",
    "bit_length",
    "spread",
    "derive_masks",
    "GEAR_TABLE",
    "GEAR_ARRAY",
    "MASK_64",
]
