"""Exceptions raised by fastcdc-stream.

End of data is not an exception of this package: a ``Chunker`` signals it
through ``StopIteration`` like any other iterator.
"""

from __future__ import annotations


class ChunkerError(Exception):
    """Base class for fastcdc-stream errors."""


class ConfigurationError(ChunkerError, ValueError):
    """Chunk size parameters are invalid.

    Raised at construction time, before any byte is read.
    """


class SourceReadError(ChunkerError, OSError):
    """The byte source failed while the buffer was being refilled.

    Fatal for the chunking pass: the chunker that raised it refuses
    further calls.
    """
