"""Pytest fixtures for fastcdc-stream tests."""

from __future__ import annotations

import random

import pytest

from fastcdc_stream.core import ChunkerConfig

KIB = 1024
MIB = 1024 * KIB

# Boundaries of lcg_bytes(1 MiB, seed=42) with sizes 8K/32K/128K
REFERENCE_OFFSETS = [
    36714, 59235, 100431, 133475, 183955, 227175, 262536, 331968,
    367735, 418065, 450929, 504275, 555138, 588843, 645038, 684445,
    720786, 745512, 783877, 828354, 871489, 906239, 945918, 982639,
    1007331, 1043460, 1048576,
]  # fmt: skip


def lcg_bytes(size: int, seed: int) -> bytes:
    """Pseudorandom bytes from the ANSI C LCG (a=1103515245, c=12345, m=2**31)."""
    out = bytearray(size)
    for i in range(size):
        seed = (1103515245 * seed + 12345) & 0x7FFFFFFF
        out[i] = (seed >> 16) & 0xFF
    return bytes(out)


class TrickleSource:
    """Byte source that hands out at most ``step`` bytes per readinto call."""

    def __init__(self, data: bytes, step: int = 1) -> None:
        self._data = data
        self._pos = 0
        self._step = step
        self.calls = 0

    def readinto(self, buffer: memoryview, /) -> int:
        self.calls += 1
        n = min(self._step, len(buffer), len(self._data) - self._pos)
        buffer[:n] = self._data[self._pos : self._pos + n]
        self._pos += n
        return n


class FailingSource:
    """Byte source that raises OSError once ``fail_after`` bytes were delivered."""

    def __init__(self, data: bytes, fail_after: int, step: int = 4096) -> None:
        self._data = data
        self._pos = 0
        self._fail_after = fail_after
        self._step = step
        self.calls = 0

    def readinto(self, buffer: memoryview, /) -> int:
        self.calls += 1
        if self._pos >= self._fail_after:
            raise OSError("simulated device error")
        n = min(self._step, len(buffer), len(self._data) - self._pos)
        buffer[:n] = self._data[self._pos : self._pos + n]
        self._pos += n
        return n


@pytest.fixture(scope="session")
def reference_data() -> bytes:
    """1 MiB of LCG output, seed 42."""
    return lcg_bytes(1 * MIB, 42)


@pytest.fixture(scope="session")
def reference_offsets() -> list[int]:
    return list(REFERENCE_OFFSETS)


@pytest.fixture(scope="session")
def reference_config() -> ChunkerConfig:
    return ChunkerConfig(8 * KIB, 32 * KIB, 128 * KIB)


@pytest.fixture(scope="session")
def small_config() -> ChunkerConfig:
    """Small sizes so modest inputs produce many chunks."""
    return ChunkerConfig(256, 1024, 4096)


@pytest.fixture(scope="session")
def random_data() -> bytes:
    """256 KiB of seeded random bytes."""
    return random.Random(1234).randbytes(256 * KIB)


@pytest.fixture
def trickle_source() -> type[TrickleSource]:
    """Factory for sources with short reads: ``trickle_source(data, step)``."""
    return TrickleSource


@pytest.fixture
def failing_source() -> type[FailingSource]:
    """Factory for sources that fail mid-stream: ``failing_source(data, fail_after)``."""
    return FailingSource


@pytest.fixture(params=["python", "numpy"])
def backend(request: pytest.FixtureRequest) -> str:
    """Run a test once per cut-point detector."""
    return request.param
