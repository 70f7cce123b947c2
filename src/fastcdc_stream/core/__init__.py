"""Core algorithms for content-defined chunking."""

from .chunking import (
    DEFAULT_CONFIG,
    Chunker,
    ChunkerConfig,
    StreamBuffer,
    as_byte_source,
    chunk_boundaries,
    derive_masks,
    find_cut_point,
    find_cut_point_vectorized,
    get_cut_point_finder,
    get_optimal_finder,
    iter_boundaries,
    iter_spans,
    spread,
)

__all__ = [
    "Chunker",
    "ChunkerConfig",
    "DEFAULT_CONFIG",
    "StreamBuffer",
    "find_cut_point",
    "find_cut_point_vectorized",
    "get_cut_point_finder",
    "get_optimal_finder",
    "iter_boundaries",
    "iter_spans",
    "chunk_boundaries",
    "as_byte_source",
    "spread",
    "derive_masks",
]
