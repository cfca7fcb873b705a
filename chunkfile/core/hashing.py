"""
hashing.py — SHA-256 Chunk Hashing
====================================
SHA-256 digests for individual chunks and for a whole file,
computed from a single pass over a ChunkedFileReader.
"""

import hashlib
import logging
from typing import List, Tuple

from chunkfile.core.reader import Chunk, ChunkedFileReader

logger = logging.getLogger(__name__)


def sha256_hash(data: bytes) -> str:
    """
    Compute the SHA-256 hash of the given data.

    Args:
        data: Raw bytes to hash.

    Returns:
        Hexadecimal string of the SHA-256 digest (64 characters).

    Raises:
        TypeError: If data is not bytes.
    """
    if not isinstance(data, bytes):
        raise TypeError(f"Expected bytes, got {type(data).__name__}")

    return hashlib.sha256(data).hexdigest()


def hash_chunks(reader: ChunkedFileReader) -> Tuple[List[str], str]:
    """
    Hash every remaining chunk of ``reader`` and the bytes they cover.

    Returns:
        (per-chunk hex digests in file order, hex digest of all chunk bytes)
    """
    chunk_hashes: List[str] = []
    file_digest = hashlib.sha256()

    def visit(chunk: Chunk) -> None:
        chunk_hashes.append(sha256_hash(chunk.data))
        file_digest.update(chunk.data)

    reader.for_each(visit)
    digest = file_digest.hexdigest()
    logger.debug(
        "Hashed %d chunks of %s: %s...", len(chunk_hashes), reader.path, digest[:16]
    )
    return chunk_hashes, digest
