"""
manifest.py — Chunk Manifests
===============================
Builds a FileManifest (per-chunk SHA-256 hashes plus a Merkle root)
from one sequential pass over a file, and verifies a file or a single
chunk against it.

Single-chunk verification reads only that chunk: whole chunks through
random access, the short trailing chunk by repositioning to its offset.
"""

import logging
import os
from typing import List

from chunkfile.core.errors import OutOfRange
from chunkfile.core.hashing import hash_chunks, sha256_hash
from chunkfile.core.merkle import MerkleTree
from chunkfile.core.reader import ChunkedFileReader, PathLike
from chunkfile.schemas import ChunkVerifyResult, FileManifest, FileVerifyResult

logger = logging.getLogger(__name__)

# Merkle root recorded for a file with no chunks.
EMPTY_ROOT = sha256_hash(b"")


def _merkle_root(chunk_hashes: List[str]) -> str:
    if not chunk_hashes:
        return EMPTY_ROOT
    return MerkleTree(chunk_hashes).root


def build_manifest(path: PathLike, chunk_size: int) -> FileManifest:
    """
    Hash ``path`` chunk by chunk and record the result.

    Args:
        path: File to describe.
        chunk_size: Chunk capacity in bytes.

    Returns:
        The manifest for the file as it is now.
    """
    with ChunkedFileReader(path, chunk_size) as reader:
        chunk_hashes, file_hash = hash_chunks(reader)
        file_size = reader.file_size

    manifest = FileManifest(
        path=os.fspath(path),
        file_size=file_size,
        chunk_size=chunk_size,
        chunk_count=len(chunk_hashes),
        chunk_hashes=chunk_hashes,
        file_hash=file_hash,
        merkle_root=_merkle_root(chunk_hashes),
    )
    logger.info(
        "Built manifest for %s: %d bytes, %d chunks, root=%s...",
        manifest.path,
        file_size,
        manifest.chunk_count,
        manifest.merkle_root[:16],
    )
    return manifest


def _check_chunk(
    manifest: FileManifest, tree: MerkleTree, index: int, chunk_hash: str
) -> ChunkVerifyResult:
    offset = index * manifest.chunk_size
    return ChunkVerifyResult(
        index=index,
        offset=offset,
        length=min(manifest.chunk_size, manifest.file_size - offset),
        chunk_hash=chunk_hash,
        hash_matches=chunk_hash == manifest.chunk_hashes[index],
        proof_valid=MerkleTree.verify_proof(
            chunk_hash, tree.get_proof(index), manifest.merkle_root
        ),
    )


def _require_same_size(reader: ChunkedFileReader, manifest: FileManifest) -> None:
    if reader.file_size != manifest.file_size:
        raise ValueError(
            f"File size {reader.file_size} does not match manifest "
            f"size {manifest.file_size}"
        )


def verify_chunk(path: PathLike, manifest: FileManifest, index: int) -> ChunkVerifyResult:
    """
    Verify the chunk at ``index`` without reading the rest of the file.

    Raises:
        OutOfRange: If index is outside [0, manifest.chunk_count).
        ValueError: If the file size differs from the manifest.
    """
    if not 0 <= index < manifest.chunk_count:
        raise OutOfRange(
            f"Chunk index {index} out of range [0, {manifest.chunk_count})"
        )

    tree = MerkleTree(manifest.chunk_hashes)
    with ChunkedFileReader(path, manifest.chunk_size) as reader:
        _require_same_size(reader, manifest)
        if index < reader.whole_chunk_count:
            chunk = reader.read_at(index)
        else:
            reader.reposition(index * manifest.chunk_size)
            chunk = next(reader)

    result = _check_chunk(manifest, tree, index, sha256_hash(chunk.data))
    logger.info(
        "Chunk %d of %s: %s", index, os.fspath(path), "PASS" if result.is_valid else "FAIL"
    )
    return result


def verify_file(path: PathLike, manifest: FileManifest) -> FileVerifyResult:
    """
    Verify every chunk of ``path`` against ``manifest`` in one pass.

    Raises:
        ValueError: If the file size differs from the manifest.
    """
    with ChunkedFileReader(path, manifest.chunk_size) as reader:
        _require_same_size(reader, manifest)
        chunk_hashes, file_hash = hash_chunks(reader)

    # Same size and chunk size guarantee the same chunk count.
    results: List[ChunkVerifyResult] = []
    if chunk_hashes:
        tree = MerkleTree(manifest.chunk_hashes)
        results = [
            _check_chunk(manifest, tree, index, chunk_hash)
            for index, chunk_hash in enumerate(chunk_hashes)
        ]

    file_hash_matches = file_hash == manifest.file_hash
    all_valid = (
        file_hash_matches
        and _merkle_root(chunk_hashes) == manifest.merkle_root
        and all(r.is_valid for r in results)
    )
    logger.info(
        "Verified %s: %d chunks, %s",
        os.fspath(path),
        len(results),
        "PASS" if all_valid else "FAIL",
    )
    return FileVerifyResult(
        path=os.fspath(path),
        file_hash_matches=file_hash_matches,
        chunks=results,
        all_valid=all_valid,
    )
