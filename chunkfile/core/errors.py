"""
errors.py — Chunked Reader Errors
===================================
Exceptions raised by the chunked file reader. Each one also derives
from the builtin a caller would naturally catch for the same failure.
"""


class ChunkedFileError(Exception):
    """Base class for all chunked reader errors."""


class NotFound(ChunkedFileError, FileNotFoundError):
    """The path does not exist."""


class StatFailure(ChunkedFileError, OSError):
    """The path exists but its metadata could not be read."""


class NotRegularFile(ChunkedFileError):
    """The path is a directory, device or other non-plain file."""


class ReadFailure(ChunkedFileError, OSError):
    """The underlying read call failed or returned no data."""


class OutOfRange(ChunkedFileError, IndexError):
    """A chunk index outside [0, whole_chunk_count)."""


class Disposed(ChunkedFileError):
    """The reader was used after dispose()."""


class InvalidArgument(ChunkedFileError, ValueError):
    """A malformed chunk size, offset or index."""
