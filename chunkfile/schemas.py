"""
schemas.py — Pydantic Manifest Models
=======================================
Serializable records produced by manifest building and verification.
"""

from typing import List

from pydantic import BaseModel, Field, model_validator


class FileManifest(BaseModel):
    """Chunk-level integrity record for one file."""

    path: str
    file_size: int = Field(ge=0)
    chunk_size: int = Field(gt=0)
    chunk_count: int             # ceil(file_size / chunk_size)
    chunk_hashes: List[str]      # SHA-256 of each chunk, in file order
    file_hash: str               # SHA-256 of the whole file
    merkle_root: str             # Root over chunk_hashes

    @model_validator(mode="after")
    def _check_counts(self) -> "FileManifest":
        expected = -(-self.file_size // self.chunk_size)
        if self.chunk_count != expected:
            raise ValueError(
                f"chunk_count {self.chunk_count} does not match "
                f"{self.file_size} bytes at chunk_size {self.chunk_size}"
            )
        if len(self.chunk_hashes) != self.chunk_count:
            raise ValueError(
                f"Expected {self.chunk_count} chunk hashes, got {len(self.chunk_hashes)}"
            )
        return self


class ChunkVerifyResult(BaseModel):
    """Outcome of checking one chunk against a manifest."""

    index: int
    offset: int
    length: int
    chunk_hash: str
    hash_matches: bool
    proof_valid: bool

    @property
    def is_valid(self) -> bool:
        return self.hash_matches and self.proof_valid


class FileVerifyResult(BaseModel):
    """Outcome of checking every chunk of a file against a manifest."""

    path: str
    file_hash_matches: bool
    chunks: List[ChunkVerifyResult]
    all_valid: bool
