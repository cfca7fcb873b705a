"""
reader.py — Chunked File Reader
=================================
Reads a regular file as a sequence of fixed-size chunks without
loading it into memory. One reusable working buffer backs both
forward iteration and random access by chunk index; every emitted
Chunk is an independent copy of that buffer.

States: OPEN -> EXHAUSTED (end of stream) -> DISPOSED (terminal).
Random access and reposition() return an EXHAUSTED reader to OPEN.
"""

import enum
import logging
import os
import stat
from dataclasses import dataclass
from typing import Callable, Optional, Union

from chunkfile.core.errors import (
    Disposed,
    InvalidArgument,
    NotFound,
    NotRegularFile,
    OutOfRange,
    ReadFailure,
    StatFailure,
)

logger = logging.getLogger(__name__)

PathLike = Union[str, "os.PathLike[str]"]


@dataclass(frozen=True)
class Chunk:
    """One slice of a file: an owned copy of its bytes and their length."""

    data: bytes
    length: int

    def __post_init__(self):
        if not isinstance(self.data, bytes):
            raise InvalidArgument(
                f"Chunk data must be bytes, got {type(self.data).__name__}"
            )
        if self.length != len(self.data):
            raise InvalidArgument(
                f"Chunk length {self.length} does not match "
                f"data length {len(self.data)}"
            )

    def __len__(self) -> int:
        return self.length


class ReaderState(enum.Enum):
    OPEN = "open"
    EXHAUSTED = "exhausted"
    DISPOSED = "disposed"


def _require_int(name: str, value) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidArgument(
            f"{name} must be an integer, got {type(value).__name__}"
        )


class ChunkedFileReader:
    """
    Bounded-memory reader over a regular file.

    Iterating the reader yields Chunk objects of at most ``chunk_size``
    bytes in file order; only the final chunk may be shorter.
    ``read_at(i)`` returns the i-th whole chunk directly.

    The reader owns its file handle. Release it with ``dispose()`` or
    by using the reader as a context manager. Instances are not safe
    to share between threads; open one reader per thread instead.

    Attributes:
        path: The file being read.
        file_size: Size of the file in bytes, captured at construction.
        chunk_size: Maximum number of bytes per chunk.
    """

    def __init__(self, path: PathLike, chunk_size: int, start_offset: int = 0):
        """
        Open ``path`` for chunked reading.

        Args:
            path: Path to a regular file.
            chunk_size: Chunk capacity in bytes, must be positive.
            start_offset: Absolute byte offset to start reading from.

        Raises:
            InvalidArgument: If chunk_size or start_offset is invalid.
            NotFound: If the path does not exist.
            StatFailure: If the path's metadata cannot be read.
            NotRegularFile: If the path is not a plain file.
            ReadFailure: If the file cannot be opened or positioned.
        """
        _require_int("chunk_size", chunk_size)
        if chunk_size <= 0:
            raise InvalidArgument("Chunk size must be a positive integer")
        _require_int("start_offset", start_offset)

        self.path = os.fspath(path)
        try:
            info = os.stat(self.path)
        except FileNotFoundError as exc:
            raise NotFound(f"Could not stat the file {self.path}: {exc}") from exc
        except OSError as exc:
            raise StatFailure(f"Could not stat the file {self.path}: {exc}") from exc

        if not stat.S_ISREG(info.st_mode):
            raise NotRegularFile(
                f"Cannot read by chunks on non-file entity {self.path}"
            )
        if not 0 <= start_offset <= info.st_size:
            raise InvalidArgument(
                f"Start offset {start_offset} outside file of {info.st_size} bytes"
            )

        try:
            handle = open(self.path, "rb", buffering=0)
        except OSError as exc:
            raise ReadFailure(f"Could not open {self.path}: {exc}") from exc
        try:
            handle.seek(start_offset, os.SEEK_SET)
        except OSError as exc:
            handle.close()
            raise ReadFailure(
                f"Could not seek {self.path} to {start_offset}: {exc}"
            ) from exc

        self.file_size: int = info.st_size
        self.chunk_size: int = chunk_size
        self._handle = handle
        self._buffer = bytearray(chunk_size)
        self._position = start_offset
        self._emitted_count = 0
        self._state = ReaderState.OPEN
        self._cursor_synced = True

        logger.info(
            "Opened %s for chunked reading (%d bytes, chunk_size=%d, offset=%d)",
            self.path,
            self.file_size,
            chunk_size,
            start_offset,
        )

    def __repr__(self) -> str:
        return (
            f"ChunkedFileReader({self.path!r}, chunk_size={self.chunk_size}, "
            f"state={self._state.value})"
        )

    # ── Context manager ───────────────────────────────────────

    def __enter__(self) -> "ChunkedFileReader":
        self._ensure_open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.dispose()

    # ── Internal reading ──────────────────────────────────────

    def _ensure_open(self) -> None:
        if self._state is ReaderState.DISPOSED:
            raise Disposed(f"Reader for {self.path} has been disposed")

    def _fill_buffer(self) -> int:
        """Read until the working buffer is full or EOF; return bytes read."""
        filled = 0
        with memoryview(self._buffer) as view:
            while filled < self.chunk_size:
                count = self._handle.readinto(view[filled:])
                if not count:
                    break
                filled += count
        return filled

    def _restore_cursor(self) -> None:
        """
        Put the handle back at the committed position after a failure.

        If that seek fails too, the cursor is flagged as unknown and the
        next sequential read seeks again before reading.
        """
        try:
            self._handle.seek(self._position, os.SEEK_SET)
        except OSError as exc:
            self._cursor_synced = False
            logger.warning(
                "Could not restore %s to offset %d: %s", self.path, self._position, exc
            )
        else:
            self._cursor_synced = True

    def _sync_cursor(self) -> None:
        if self._cursor_synced:
            return
        try:
            self._handle.seek(self._position, os.SEEK_SET)
        except OSError as exc:
            raise ReadFailure(
                f"Could not seek {self.path} to {self._position}: {exc}"
            ) from exc
        self._cursor_synced = True

    def _read_chunk(self, offset: int) -> Optional[Chunk]:
        """
        Read one chunk starting at ``offset``, where the handle's cursor
        already sits. Returns None at end of file.

        Bookkeeping is only updated after a successful read; on failure
        the cursor goes back to the last committed position.
        """
        try:
            count = self._fill_buffer()
        except OSError as exc:
            self._restore_cursor()
            raise ReadFailure(
                f"Read failed at offset {offset} of {self.path}: {exc}"
            ) from exc

        if count == 0:
            return None

        with memoryview(self._buffer) as view:
            chunk = Chunk(bytes(view[:count]), count)
        self._position = offset + count
        self._emitted_count += 1
        self._state = ReaderState.OPEN
        logger.debug(
            "Read chunk #%d from %s (offset=%d, %d bytes)",
            self._emitted_count,
            self.path,
            offset,
            count,
        )
        return chunk

    # ── Sequential access ─────────────────────────────────────

    def __iter__(self) -> "ChunkedFileReader":
        self._ensure_open()
        return self

    def __next__(self) -> Chunk:
        """Return the next chunk, or raise StopIteration at end of file."""
        self._ensure_open()
        self._sync_cursor()
        chunk = self._read_chunk(self._position)
        if chunk is None:
            if self._state is ReaderState.OPEN:
                logger.debug(
                    "End of stream for %s after %d chunks",
                    self.path,
                    self._emitted_count,
                )
            self._state = ReaderState.EXHAUSTED
            raise StopIteration
        return chunk

    def for_each(self, visitor: Callable[[Chunk], None]) -> int:
        """
        Call ``visitor`` once per remaining chunk, in file order.

        Returns:
            The number of chunks visited.
        """
        visited = 0
        for chunk in self:
            visitor(chunk)
            visited += 1
        return visited

    # ── Random access ─────────────────────────────────────────

    def read_at(self, chunk_index: int) -> Chunk:
        """
        Read the whole chunk at ``chunk_index``.

        Only full-capacity chunks are addressable; a short trailing
        chunk is reached through reposition() and iteration.

        Raises:
            InvalidArgument: If chunk_index is not an integer.
            OutOfRange: If chunk_index is outside [0, whole_chunk_count).
            ReadFailure: If the seek or read fails or returns no data.
        """
        self._ensure_open()
        _require_int("chunk_index", chunk_index)
        total = self.whole_chunk_count
        if not 0 <= chunk_index < total:
            raise OutOfRange(
                f"Chunk index {chunk_index} out of range [0, {total})"
            )

        offset = chunk_index * self.chunk_size
        try:
            self._handle.seek(offset, os.SEEK_SET)
        except OSError as exc:
            self._cursor_synced = False
            raise ReadFailure(
                f"Could not seek {self.path} to {offset}: {exc}"
            ) from exc

        chunk = self._read_chunk(offset)
        if chunk is None:
            self._restore_cursor()
            raise ReadFailure(
                f"No data for chunk {chunk_index} at offset {offset} of {self.path}"
            )
        return chunk

    def reposition(self, offset: int) -> None:
        """
        Move the read cursor to an absolute byte offset.

        Raises:
            InvalidArgument: If offset is outside [0, file_size].
            ReadFailure: If the seek fails.
        """
        self._ensure_open()
        _require_int("offset", offset)
        if not 0 <= offset <= self.file_size:
            raise InvalidArgument(
                f"Offset {offset} outside file of {self.file_size} bytes"
            )
        try:
            self._handle.seek(offset, os.SEEK_SET)
        except OSError as exc:
            self._cursor_synced = False
            raise ReadFailure(
                f"Could not seek {self.path} to {offset}: {exc}"
            ) from exc
        self._position = offset
        self._cursor_synced = True
        self._state = ReaderState.OPEN

    # ── Derived queries ───────────────────────────────────────

    @property
    def position(self) -> int:
        """Absolute offset just past the last chunk read."""
        self._ensure_open()
        return self._position

    @property
    def remaining_bytes(self) -> int:
        self._ensure_open()
        return self.file_size - self._position

    @property
    def whole_chunk_count(self) -> int:
        """Number of full-capacity chunks, i.e. the valid read_at range."""
        self._ensure_open()
        return self.file_size // self.chunk_size

    @property
    def emitted_count(self) -> int:
        self._ensure_open()
        return self._emitted_count

    @property
    def state(self) -> ReaderState:
        return self._state

    @property
    def closed(self) -> bool:
        return self._state is ReaderState.DISPOSED

    # ── Release ───────────────────────────────────────────────

    def dispose(self) -> None:
        """
        Close the file handle and zero the working buffer.

        Calling dispose() on an already disposed reader does nothing.
        """
        if self._state is ReaderState.DISPOSED:
            return
        try:
            self._handle.close()
        finally:
            self._buffer[:] = bytes(len(self._buffer))
            self._state = ReaderState.DISPOSED
        logger.info(
            "Disposed reader for %s after %d chunks",
            self.path,
            self._emitted_count,
        )
