"""
Vectorized cut-point detection using NumPy.

Produces exactly the cut points of the scalar gear loop. The gear update
``fp = (fp << 1) + G[b]`` with 64-bit wraparound unrolls to

    fp[i] = sum(G[data[i - j]] << j for j in range(64))   (mod 2**64)

because every term shifted 64 or more places falls off the top. Bytes before
``min_size`` are never hashed, so their terms are zero. The 64-term sum is
built with six shift-and-add doubling passes:

    h_{2s}[i] = h_s[i] + (h_s[i - s] << s),   s = 1, 2, 4, ..., 32

Positions are evaluated in blocks (with 63 bytes of left context) so an
early cut does not pay for the whole window.
"""

from __future__ import annotations

from collections.abc import Buffer

import numpy as np
from numpy.typing import NDArray

from ...config import SIMD_BLOCK_SIZE
from ._gear import DEFAULT_CONFIG, ChunkerConfig
from ._table import GEAR_ARRAY

_WINDOW = 64
_DOUBLING_STEPS = tuple(np.uint64(1 << k) for k in range(6))  # 1, 2, ..., 32


def _gear_fingerprints(gears: NDArray[np.uint64]) -> NDArray[np.uint64]:
    """Return the 64-byte gear fingerprint ending at every position of ``gears``.

    Positions before index 0 count as zero. uint64 array arithmetic wraps
    silently, which is the required mod 2**64 behavior.
    """
    h = gears.copy()
    shifted = np.empty_like(h)
    for step in _DOUBLING_STEPS:
        s = int(step)
        shifted[:s] = 0
        np.left_shift(h[:-s] if s < len(h) else h[:0], step, out=shifted[s:])
        h += shifted
    return h


def find_cut_point_vectorized(
    window: Buffer,
    cfg: ChunkerConfig = DEFAULT_CONFIG,
    block_size: int = SIMD_BLOCK_SIZE,
) -> int:
    """Return the offset in ``window`` where the next chunk ends.

    Same contract and result as ``find_cut_point``.

    Args:
        window: Unconsumed bytes
        cfg: Chunk size limits and masks
        block_size: Positions evaluated per pass (default: 8192)

    Returns:
        Cut offset ``k`` with ``0 <= k <= len(window)``
    """
    n = len(memoryview(window).cast("B"))
    if n <= cfg.min_size:
        return n

    end = min(cfg.max_size, n)
    data = np.frombuffer(window, dtype=np.uint8, count=end)

    # Gear values of hashed bytes; index k is window position min_size + k
    gears = GEAR_ARRAY[data[cfg.min_size :]]
    total = len(gears)

    # Positions before this index use the small mask
    split = cfg.avg_size - cfg.min_size
    mask_small = np.uint64(cfg.mask_small)
    mask_large = np.uint64(cfg.mask_large)

    for start in range(0, total, block_size):
        stop = min(start + block_size, total)
        context = min(start, _WINDOW - 1)
        fp = _gear_fingerprints(gears[start - context : stop])[context:]

        if stop <= split:
            hits = np.flatnonzero((fp & mask_small) == 0)
        elif start >= split:
            hits = np.flatnonzero((fp & mask_large) == 0)
        else:
            masks = np.full(stop - start, mask_large, dtype=np.uint64)
            masks[: split - start] = mask_small
            hits = np.flatnonzero((fp & masks) == 0)

        if hits.size:
            return cfg.min_size + start + int(hits[0])

    return end
