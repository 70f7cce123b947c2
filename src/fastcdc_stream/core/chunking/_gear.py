"""
Gear-hash cut-point detection (FastCDC normalized chunking).

Features:
- Gear rolling fingerprint: ``fp = (fp << 1) + GEAR[byte]`` with 64-bit
  wraparound. A byte stops influencing the fingerprint after 64 shifts, so
  no explicit sliding-window removal is needed.
- Dual masks: a harder-to-match mask between ``min_size`` and ``avg_size``
  and an easier one between ``avg_size`` and ``max_size``. This concentrates
  chunk sizes around the average while keeping both hard limits.
- No hashing below ``min_size``: those bytes can never end a chunk.

This is the scalar reference detector. ``_simd`` evaluates the same
fingerprint with NumPy and must return the same cut points.
"""

from __future__ import annotations

import operator
from collections.abc import Buffer
from dataclasses import dataclass, field
from typing import Any

from ...config import CHUNK_AVG_SIZE, CHUNK_MAX_SIZE, CHUNK_MIN_SIZE
from ...exceptions import ConfigurationError
from ._masks import bit_length, derive_masks
from ._table import GEAR_TABLE, MASK_64

# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


@dataclass(slots=True, frozen=True)
class ChunkerConfig:
    """Validated chunk size limits plus the masks derived from them."""

    min_size: int = CHUNK_MIN_SIZE  # never cut below this
    avg_size: int = CHUNK_AVG_SIZE  # small mask before, large mask after
    max_size: int = CHUNK_MAX_SIZE  # forced cut here

    mask_small: int = field(init=False, repr=False)
    mask_large: int = field(init=False, repr=False)

    def __post_init__(self) -> None:
        sizes = _validate_sizes(self.min_size, self.avg_size, self.max_size)
        for name, value in zip(("min_size", "avg_size", "max_size"), sizes, strict=True):
            object.__setattr__(self, name, value)
        mask_small, mask_large = derive_masks(self.avg_size)
        object.__setattr__(self, "mask_small", mask_small)
        object.__setattr__(self, "mask_large", mask_large)

    @property
    def buffer_size(self) -> int:
        """Capacity of the streaming buffer: two maximum-size chunks."""
        return 2 * self.max_size

    def describe(self) -> dict[str, Any]:
        """Sizes and masks as a plain dict (masks in hex)."""
        return {
            "min_size": self.min_size,
            "avg_size": self.avg_size,
            "max_size": self.max_size,
            "mask_small": f"{self.mask_small:#018x}",
            "mask_large": f"{self.mask_large:#018x}",
            "mask_small_bits": self.mask_small.bit_count(),
            "mask_large_bits": self.mask_large.bit_count(),
        }


def _validate_sizes(min_size: int, avg_size: int, max_size: int) -> tuple[int, int, int]:
    """Return the sizes as plain ints, or raise ConfigurationError listing every problem.

    Integer-like values such as NumPy integers are accepted via ``operator.index``;
    bools, floats and strings are not.
    """
    errors: list[str] = []
    raw = {"min_size": min_size, "avg_size": avg_size, "max_size": max_size}
    sizes: dict[str, int] = {}

    for name, value in raw.items():
        try:
            size = operator.index(value)
        except TypeError:
            size = None
        if size is None or isinstance(value, bool):
            errors.append(f"{name} ({value!r}) must be an int")
            continue
        if size <= 0:
            errors.append(f"{name} ({size}) must be > 0")
        sizes[name] = size

    if errors:
        raise ConfigurationError("Invalid chunker config:\n  " + "\n  ".join(errors))

    min_size, avg_size, max_size = sizes["min_size"], sizes["avg_size"], sizes["max_size"]

    if min_size >= avg_size:
        errors.append(f"min_size ({min_size}) must be < avg_size ({avg_size})")
    if avg_size >= max_size:
        errors.append(f"avg_size ({avg_size}) must be < max_size ({max_size})")

    # Both masks need 2..64 bits: spread(b - 2) and spread(b + 2)
    b = bit_length(avg_size) - 1
    if b - 2 < 2:
        errors.append(f"avg_size ({avg_size}) must be >= 16 to derive the large mask")
    if b + 2 > 64:
        errors.append(f"avg_size ({avg_size}) must be < 2**63 to derive the small mask")

    if errors:
        raise ConfigurationError("Invalid chunker config:\n  " + "\n  ".join(errors))

    return min_size, avg_size, max_size


DEFAULT_CONFIG = ChunkerConfig()


# ---------------------------------------------------------------------------
# Scalar detector
# ---------------------------------------------------------------------------


def find_cut_point(window: Buffer, cfg: ChunkerConfig = DEFAULT_CONFIG) -> int:
    """Return the offset in ``window`` where the next chunk ends.

    ``window`` holds the unconsumed bytes. The result ``k`` satisfies
    ``0 <= k <= len(window)``: the chunk is ``window[:k]`` and the next one
    starts at ``k``. A window no longer than ``min_size`` is returned whole;
    that only happens for the final chunk of a stream.
    """
    data = memoryview(window).cast("B")
    n = len(data)
    if n <= cfg.min_size:
        return n

    # Local references (hot loop)
    gear = GEAR_TABLE
    mask_small = cfg.mask_small
    mask_large = cfg.mask_large

    fp = 0
    i = cfg.min_size

    # Region B: small mask, rarely matches
    end = min(cfg.avg_size, n)
    while i < end:
        fp = ((fp << 1) + gear[data[i]]) & MASK_64
        if not fp & mask_small:
            return i
        i += 1

    # Region C: large mask, fingerprint carried over
    end = min(cfg.max_size, n)
    while i < end:
        fp = ((fp << 1) + gear[data[i]]) & MASK_64
        if not fp & mask_large:
            return i
        i += 1

    return i
