#!/usr/bin/env python3
"""
Benchmark of the streaming FastCDC chunker.

Compares:
- FastCDC, scalar detector (pure Python gear loop)
- FastCDC, vectorized detector (NumPy)
- Fixed-size chunking (baseline)

Metrics:
1. Throughput (MB/s)
2. Deduplication ratio (chunks of modified content reused from the original)
3. Average chunk size
4. Chunk size variance (coefficient of variation) and percentiles

Based on CDC Investigation paper (arXiv:2409.06066v3) methodology.
"""

from __future__ import annotations

import os
import random
import statistics
import time
from collections.abc import Callable, Iterator
from dataclasses import dataclass

import numpy as np

from fastcdc_stream import iter_spans

# ---------------------------------------------------------------------------
# Chunkers under test
# ---------------------------------------------------------------------------


def fastcdc_chunks(
    content: bytes,
    min_size: int = 2048,
    avg_size: int = 8192,
    max_size: int = 32768,
    backend: str = "numpy",
) -> Iterator[bytes]:
    """
    Yield FastCDC chunks as byte strings.

    Args:
        content: Raw bytes to chunk
        min_size: Minimum chunk size
        avg_size: Target average chunk size
        max_size: Maximum chunk size
        backend: Cut-point detector ("python" or "numpy")

    Yields:
        Content chunks
    """
    for start, end in iter_spans(content, min_size, avg_size, max_size, backend=backend):
        yield content[start:end]


def fixed_chunks(
    content: bytes,
    chunk_size: int = 8192,
) -> Iterator[bytes]:
    """
    Fixed-size chunking (baseline for comparison).

    No content-awareness - just splits at fixed intervals.
    Maximum throughput, zero deduplication benefit after insertions.
    """
    n = len(content)
    for i in range(0, n, chunk_size):
        yield content[i : i + chunk_size]


# ---------------------------------------------------------------------------
# Benchmark framework
# ---------------------------------------------------------------------------


@dataclass
class ChunkSizeStats:
    """Distribution of chunk sizes."""

    count: int
    mean: float
    cv: float  # Coefficient of variation
    minimum: int
    maximum: int
    p50: float
    p95: float


@dataclass
class BenchmarkResult:
    """Results from a single benchmark run."""

    algorithm: str
    throughput_mbs: float
    avg_chunk_size: float
    chunk_count: int
    size_variance_cv: float  # Coefficient of variation
    dedup_ratio: float  # reused_chunks / total_chunks after modification


def chunk_size_stats(sizes: list[int]) -> ChunkSizeStats:
    """Summarize chunk sizes with NumPy."""
    if not sizes:
        return ChunkSizeStats(0, 0.0, 0.0, 0, 0, 0.0, 0.0)

    arr = np.asarray(sizes, dtype=np.int64)
    mean = float(arr.mean())
    std = float(arr.std(ddof=1)) if arr.size > 1 else 0.0
    p50, p95 = np.percentile(arr, [50, 95])
    return ChunkSizeStats(
        count=int(arr.size),
        mean=mean,
        cv=std / mean if mean > 0 else 0.0,
        minimum=int(arr.min()),
        maximum=int(arr.max()),
        p50=float(p50),
        p95=float(p95),
    )


def measure_throughput(
    chunker: Callable[[bytes], Iterator[bytes]],
    data: bytes,
    iterations: int = 5,
) -> tuple[float, list[int]]:
    """
    Measure chunking throughput.

    Returns (throughput_mbs, chunk_sizes)
    """
    size_mb = len(data) / (1024 * 1024)

    # Warmup
    list(chunker(data))

    # Timed runs
    times: list[float] = []
    chunk_sizes: list[int] = []

    for _ in range(iterations):
        start = time.perf_counter()
        chunks = list(chunker(data))
        elapsed = time.perf_counter() - start
        times.append(elapsed)

        if not chunk_sizes:
            chunk_sizes = [len(c) for c in chunks]

    avg_time = statistics.mean(times)
    throughput = size_mb / avg_time if avg_time > 0 else 0

    return throughput, chunk_sizes


def measure_dedup_ratio(
    chunker: Callable[[bytes], Iterator[bytes]],
    original: bytes,
    modified: bytes,
) -> float:
    """
    Measure deduplication effectiveness.

    Returns the share of chunks in ``modified`` that also occur, byte for
    byte, among the chunks of ``original`` (higher = better).
    """
    original_chunks = set(chunker(original))

    modified_chunks = list(chunker(modified))
    total = len(modified_chunks)

    if total == 0:
        return 1.0

    reused = sum(1 for c in modified_chunks if c in original_chunks)
    return reused / total


def create_test_data(size: int, pattern: str = "random") -> bytes:
    """Create test data of specified size and pattern."""
    if pattern == "random":
        return os.urandom(size)
    elif pattern == "text":
        # Simulated text with some repetition
        words = [
            b"the ",
            b"quick ",
            b"brown ",
            b"fox ",
            b"jumps ",
            b"over ",
            b"lazy ",
            b"dog.\n",
        ]
        result = bytearray()
        while len(result) < size:
            result.extend(random.choice(words))
        return bytes(result[:size])
    elif pattern == "binary":
        # Mix of zero runs and random spans (simulates disk images)
        result = bytearray()
        while len(result) < size:
            if random.random() < 0.3:
                result.extend(b"\x00" * random.randint(100, 1000))
            else:
                result.extend(os.urandom(random.randint(100, 500)))
        return bytes(result[:size])
    else:
        return os.urandom(size)


def modify_data(data: bytes, change_ratio: float = 5.0) -> bytes:
    """
    Create modified version of data for dedup testing.

    Inserts short random runs at a few positions, shifting everything after
    them. Fixed-size chunking loses alignment; CDC re-synchronizes.

    Args:
        data: Original data
        change_ratio: Percentage of data to insert (e.g., 5.0 = 5%)
    """
    result = bytearray(data)
    n = len(result)

    total_insert_bytes = int(n * change_ratio / 100)
    n_regions = max(1, total_insert_bytes // 500)  # ~500 bytes per insertion
    bytes_per_region = max(1, total_insert_bytes // n_regions)

    for _ in range(n_regions):
        pos = random.randint(0, len(result))
        result[pos:pos] = os.urandom(bytes_per_region)

    return bytes(result)


def run_benchmark(
    data_size: int = 8 * 1024 * 1024,  # 8 MB
    data_pattern: str = "random",
    change_ratio: float = 1.0,
) -> list[BenchmarkResult]:
    """
    Run the benchmark on all chunkers.

    Args:
        data_size: Size of test data in bytes
        data_pattern: Type of test data (random, text, binary)
        change_ratio: Percentage of data inserted for the dedup test

    Returns:
        List of BenchmarkResult for each chunker
    """
    print(f"Generating {data_size / 1024 / 1024:.1f} MB {data_pattern} test data...")
    original = create_test_data(data_size, data_pattern)
    modified = modify_data(original, change_ratio)

    algorithms: list[tuple[str, Callable[[bytes], Iterator[bytes]]]] = [
        ("Fixed (baseline)", lambda d: fixed_chunks(d, chunk_size=8192)),
        ("FastCDC (python)", lambda d: fastcdc_chunks(d, backend="python")),
        ("FastCDC (numpy)", lambda d: fastcdc_chunks(d, backend="numpy")),
    ]

    results = []

    for name, chunker in algorithms:
        print(f"  Benchmarking {name}...")

        throughput, chunk_sizes = measure_throughput(chunker, original, iterations=3)
        stats = chunk_size_stats(chunk_sizes)
        dedup = measure_dedup_ratio(chunker, original, modified)

        results.append(
            BenchmarkResult(
                algorithm=name,
                throughput_mbs=throughput,
                avg_chunk_size=stats.mean,
                chunk_count=stats.count,
                size_variance_cv=stats.cv,
                dedup_ratio=dedup,
            )
        )

    return results


def print_results(results: list[BenchmarkResult]) -> None:
    """Pretty-print benchmark results."""
    print("\n" + "=" * 80)
    print("CDC BENCHMARK RESULTS")
    print("=" * 80)

    print(
        f"{'Algorithm':<22} {'Throughput':>12} {'Avg Size':>10} "
        f"{'Chunks':>8} {'CV':>8} {'Dedup':>8}"
    )
    print("-" * 80)

    for r in results:
        print(
            f"{r.algorithm:<22} {r.throughput_mbs:>10.2f} MB/s "
            f"{r.avg_chunk_size:>10,.0f} {r.chunk_count:>8,} "
            f"{r.size_variance_cv:>8.3f} {r.dedup_ratio:>7.1%}"
        )

    print("-" * 80)
    print("\nLegend:")
    print("  Throughput: Processing speed in MB/s (higher = faster)")
    print("  Avg Size: Average chunk size in bytes")
    print("  Chunks: Number of chunks produced")
    print("  CV: Coefficient of variation (lower = more consistent sizes)")
    print("  Dedup: Chunks reused after inserting 1% new bytes (higher = better)")


def main() -> None:
    """Run benchmarks with different data patterns."""
    print("FastCDC Streaming Benchmark\n")

    for pattern in ["random", "text", "binary"]:
        print(f"\n{'=' * 40}")
        print(f"Pattern: {pattern.upper()}")
        print("=" * 40)

        results = run_benchmark(data_size=4 * 1024 * 1024, data_pattern=pattern)
        print_results(results)


if __name__ == "__main__":
    main()
