"""Normalized-chunking masks derived from the average chunk size."""

from __future__ import annotations

from ...exceptions import ConfigurationError
from ._table import MASK_64


def bit_length(n: int) -> int:
    """Return the number of bits needed to represent positive ``n`` (8192 -> 14)."""
    return n.bit_length()


def spread(n: int) -> int:
    """Spread ``n`` one-bits evenly over a 64-bit mask.

    There are ``64 - n`` zero bits to place in the ``n - 1`` gaps between
    the ones, so each step shifts by ``(64 - n) // (n - 1) + 1``.
    """
    if not 2 <= n <= 64:
        raise ConfigurationError(f"cannot spread {n} bits over 64 (need 2..64)")

    shift = (64 - n) // (n - 1) + 1
    mask = 1
    for _ in range(n - 1):
        mask = ((mask << shift) + 1) & MASK_64
    return mask


def derive_masks(avg_size: int) -> tuple[int, int]:
    """Return ``(mask_small, mask_large)`` for ``avg_size``.

    The small mask has more bits set, so it matches less often and is used
    below the average size. The large mask has fewer and is used above it.
    """
    b = bit_length(avg_size) - 1
    return spread(b + 2), spread(b - 2)
