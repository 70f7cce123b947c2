"""Configuration constants for fastcdc-stream."""

import logging
from os import environ
from typing import Final

# Logging configuration
LOG_LEVEL: Final = environ.get("LOG_LEVEL", "INFO").upper()
LOG_FORMAT: Final = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT)


def _env_int(name: str, default: int) -> int:
    """Read integer env var with fallback."""
    raw = environ.get(name)
    if raw is None:
        return default
    try:
        return int(raw.strip())
    except ValueError:
        return default


def _env_mode(name: str, default: str) -> str:
    """Read normalized mode env var."""
    raw = environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower()


# Default chunk sizes (bytes)
CHUNK_MIN_SIZE: Final = 2 * 1024
CHUNK_AVG_SIZE: Final = 8 * 1024
CHUNK_MAX_SIZE: Final = 32 * 1024

# Cut-point detector: "python" (scalar loop) or "numpy" (vectorized)
CDC_BACKENDS: Final = frozenset({"python", "numpy"})
CDC_BACKEND: Final = _env_mode("CDC_BACKEND", "numpy")

# Positions evaluated per vectorized block before checking for a cut
SIMD_BLOCK_SIZE: Final = _env_int("SIMD_BLOCK_SIZE", 8192)

# ---------------------------------------------------------------------------
# Configuration validation
# ---------------------------------------------------------------------------


def _validate_config() -> None:
    """Validate configuration constants at module load time."""
    errors: list[str] = []

    if not 0 < CHUNK_MIN_SIZE < CHUNK_AVG_SIZE < CHUNK_MAX_SIZE:
        errors.append(
            f"chunk sizes must satisfy 0 < CHUNK_MIN_SIZE ({CHUNK_MIN_SIZE}) "
            f"< CHUNK_AVG_SIZE ({CHUNK_AVG_SIZE}) < CHUNK_MAX_SIZE ({CHUNK_MAX_SIZE})"
        )

    if CDC_BACKEND not in CDC_BACKENDS:
        errors.append(f"CDC_BACKEND ({CDC_BACKEND}) must be one of: numpy, python")

    if SIMD_BLOCK_SIZE <= 0:
        errors.append(f"SIMD_BLOCK_SIZE ({SIMD_BLOCK_SIZE}) must be > 0")

    if errors:
        raise ValueError("Configuration errors:\n  " + "\n  ".join(errors))


_validate_config()
