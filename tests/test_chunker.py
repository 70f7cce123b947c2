"""Tests for the streaming Chunker."""

from __future__ import annotations

import io
import random

import numpy as np
import pytest

from fastcdc_stream import Chunker, ChunkerConfig, ConfigurationError, SourceReadError


def _chunk_lengths(offsets: list[int]) -> list[int]:
    return [end - start for start, end in zip([0, *offsets], offsets, strict=False)]


class TestReferenceVector:
    """Boundaries must match the published FastCDC corpus exactly."""

    def test_reference_offsets(
        self,
        backend: str,
        reference_data: bytes,
        reference_config: ChunkerConfig,
        reference_offsets: list[int],
    ) -> None:
        """1 MiB of LCG data (seed 42) with 8K/32K/128K sizes."""
        chunker = Chunker.from_config(io.BytesIO(reference_data), reference_config, backend=backend)
        assert list(chunker) == reference_offsets

    def test_reference_offsets_with_short_reads(
        self,
        reference_data: bytes,
        reference_config: ChunkerConfig,
        trickle_source: type,
        reference_offsets: list[int],
    ) -> None:
        """Odd-sized reads from the source do not move any boundary."""
        source = trickle_source(reference_data, step=4099)
        chunker = Chunker.from_config(source, reference_config, backend="numpy")
        assert list(chunker) == reference_offsets

    def test_reference_via_sizes(
        self, reference_data: bytes, reference_offsets: list[int]
    ) -> None:
        """Parameterized construction matches from_config."""
        chunker = Chunker(io.BytesIO(reference_data), 8192, 32768, 131072)
        assert list(chunker) == reference_offsets


class TestEdgeCases:
    """Tests for tiny and boundary-sized inputs."""

    def test_empty_input(self, backend: str) -> None:
        """Empty input ends immediately, and keeps ending."""
        chunker = Chunker(io.BytesIO(b""), backend=backend)
        with pytest.raises(StopIteration):
            next(chunker)
        with pytest.raises(StopIteration):
            next(chunker)
        assert chunker.done
        assert chunker.offset == 0

    @pytest.mark.parametrize("size", [1, 100, 2047])
    def test_shorter_than_min_size(self, backend: str, size: int) -> None:
        """One chunk covering the whole input."""
        assert list(Chunker(io.BytesIO(bytes(size)), backend=backend)) == [size]

    def test_exactly_min_size(self, backend: str) -> None:
        """Input of exactly min_size is one chunk."""
        data = random.Random(0).randbytes(2048)
        assert list(Chunker(io.BytesIO(data), backend=backend)) == [2048]

    def test_exactly_max_size_of_zeros(self, backend: str) -> None:
        """Zeros never match a mask, so max_size bytes form one chunk."""
        assert list(Chunker(io.BytesIO(bytes(32768)), backend=backend)) == [32768]

    def test_zeros_cut_at_max_size(self, backend: str) -> None:
        """Unmatchable data is cut every max_size bytes, tail left over."""
        offsets = list(Chunker(io.BytesIO(bytes(100_000)), backend=backend))
        assert offsets == [32768, 65536, 98304, 100_000]

    def test_end_of_data_is_idempotent(self, backend: str) -> None:
        chunker = Chunker(io.BytesIO(b"x" * 10), backend=backend)
        assert next(chunker) == 10
        for _ in range(3):
            with pytest.raises(StopIteration):
                next(chunker)
        assert list(chunker) == []


class TestChunkProperties:
    """Invariants that hold for any input and configuration."""

    @pytest.mark.parametrize(
        ("min_size", "avg_size", "max_size"),
        [(256, 1024, 4096), (64, 128, 256), (2048, 8192, 32768), (1000, 3000, 5000)],
    )
    def test_coverage_and_limits(
        self, backend: str, random_data: bytes, min_size: int, avg_size: int, max_size: int
    ) -> None:
        """Offsets increase, end at the input length, and respect the size limits."""
        offsets = list(
            Chunker(io.BytesIO(random_data), min_size, avg_size, max_size, backend=backend)
        )

        assert offsets[-1] == len(random_data)
        assert all(a < b for a, b in zip(offsets, offsets[1:], strict=False))
        lengths = _chunk_lengths(offsets)
        assert all(n <= max_size for n in lengths)
        # Only the tail may fall short of min_size
        assert all(n >= min_size for n in lengths[:-1])

    def test_average_near_target(self, random_data: bytes, small_config: ChunkerConfig) -> None:
        """Normalized chunking keeps the mean chunk size close to avg_size."""
        offsets = list(Chunker.from_config(io.BytesIO(random_data), small_config))
        mean = len(random_data) / len(offsets)
        assert small_config.avg_size * 0.5 < mean < small_config.avg_size * 2

    def test_independent_of_read_granularity(
        self, small_config: ChunkerConfig, trickle_source: type
    ) -> None:
        """One byte per read gives the same boundaries as a single read."""
        data = random.Random(99).randbytes(40_000)
        whole = list(Chunker.from_config(io.BytesIO(data), small_config, backend="python"))
        trickled = list(
            Chunker.from_config(trickle_source(data, step=1), small_config, backend="python")
        )
        assert trickled == whole

    @pytest.mark.parametrize("step", [1000, 4095, 4096, 8191, 100_000])
    def test_read_sizes_around_buffer_limits(
        self, random_data: bytes, small_config: ChunkerConfig, trickle_source: type, step: int
    ) -> None:
        expected = list(Chunker.from_config(io.BytesIO(random_data), small_config))
        got = list(Chunker.from_config(trickle_source(random_data, step=step), small_config))
        assert got == expected

    def test_backends_agree(self, random_data: bytes, small_config: ChunkerConfig) -> None:
        scalar = list(Chunker.from_config(io.BytesIO(random_data), small_config, backend="python"))
        vector = list(Chunker.from_config(io.BytesIO(random_data), small_config, backend="numpy"))
        assert scalar == vector

    def test_deterministic(self, random_data: bytes) -> None:
        first = list(Chunker(io.BytesIO(random_data)))
        second = list(Chunker(io.BytesIO(random_data)))
        assert first == second

    def test_boundaries_resynchronize_after_insert(
        self, random_data: bytes, small_config: ChunkerConfig
    ) -> None:
        """Prepending bytes shifts later boundaries instead of changing them."""
        original = list(Chunker.from_config(io.BytesIO(random_data), small_config))
        prefix = random.Random(5).randbytes(100)
        shifted = list(Chunker.from_config(io.BytesIO(prefix + random_data), small_config))

        moved = {b - len(prefix) for b in shifted}
        shared = sum(1 for b in original if b in moved)
        assert shared >= 0.8 * len(original)


class TestChunkerState:
    """Tests for construction and observable state."""

    def test_default_config(self) -> None:
        chunker = Chunker(io.BytesIO(b""))
        assert chunker.config == ChunkerConfig(2048, 8192, 32768)

    def test_offset_tracks_last_boundary(self, random_data: bytes) -> None:
        chunker = Chunker(io.BytesIO(random_data))
        assert chunker.offset == 0
        first = next(chunker)
        assert chunker.offset == first
        assert not chunker.done

    def test_done_after_exhaustion(self, random_data: bytes) -> None:
        chunker = Chunker(io.BytesIO(random_data))
        offsets = list(chunker)
        assert chunker.done
        assert chunker.offset == offsets[-1] == len(random_data)

    def test_invalid_sizes_raise_before_reading(self, trickle_source: type) -> None:
        """Configuration errors surface at construction; the source is untouched."""
        source = trickle_source(b"abc")
        with pytest.raises(ConfigurationError):
            Chunker(source, 8192, 4096, 32768)
        assert source.calls == 0

    def test_invalid_backend(self) -> None:
        with pytest.raises(ConfigurationError):
            Chunker(io.BytesIO(b""), backend="gpu")

    def test_numpy_sizes(self) -> None:
        chunker = Chunker(io.BytesIO(b"x"), np.int64(2048), 8192, 32768)
        assert list(chunker) == [1]

    @pytest.mark.parametrize("name", ["", 1])
    def test_blank_or_non_string_backend(self, name: object) -> None:
        with pytest.raises(ConfigurationError):
            Chunker(io.BytesIO(b""), backend=name)  # type: ignore[arg-type]

    def test_source_not_read_until_iterated(self, trickle_source: type) -> None:
        source = trickle_source(b"abc")
        Chunker(source)
        assert source.calls == 0

    def test_repr(self) -> None:
        assert "offset=0" in repr(Chunker(io.BytesIO(b"")))


class TestSourceErrors:
    """Tests for read failures."""

    def test_error_propagates(self, random_data: bytes, failing_source: type) -> None:
        """A failing read raises SourceReadError from next()."""
        chunker = Chunker(failing_source(random_data, fail_after=50_000))
        with pytest.raises(SourceReadError) as exc_info:
            list(chunker)
        assert isinstance(exc_info.value.__cause__, OSError)

    def test_boundaries_before_failure_returned(
        self, random_data: bytes, failing_source: type
    ) -> None:
        """Offsets produced before the failing refill are valid."""
        expected = list(Chunker(io.BytesIO(random_data)))
        chunker = Chunker(failing_source(random_data, fail_after=100_000))
        produced = []
        with pytest.raises(SourceReadError):
            for offset in chunker:
                produced.append(offset)
        assert produced
        assert produced == expected[: len(produced)]

    def test_instance_unusable_after_error(self, failing_source: type) -> None:
        """Later calls keep failing without touching the source again."""
        source = failing_source(bytes(10), fail_after=0)
        chunker = Chunker(source)
        with pytest.raises(SourceReadError):
            next(chunker)
        calls = source.calls
        with pytest.raises(SourceReadError, match="unusable"):
            next(chunker)
        assert source.calls == calls
        assert not chunker.done
