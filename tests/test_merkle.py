"""
test_merkle.py — Unit Tests for Merkle Tree and Hashing
=========================================================
"""

import hashlib

import pytest
from chunkfile.core.hashing import hash_chunks, sha256_hash
from chunkfile.core.merkle import MerkleTree
from chunkfile.core.reader import ChunkedFileReader


def _make_hashes(n: int) -> list:
    return [sha256_hash(f"chunk-{i}".encode()) for i in range(n)]


class TestHashing:
    """Tests for SHA-256 helpers."""

    def test_known_digest(self):
        assert sha256_hash(b"") == (
            "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"
        )

    def test_rejects_str(self):
        with pytest.raises(TypeError, match="Expected bytes"):
            sha256_hash("text")

    def test_hash_chunks(self, tmp_path):
        """Chunk digests and the file digest come from one pass."""
        data = bytes(range(256)) * 10
        path = tmp_path / "data.bin"
        path.write_bytes(data)

        with ChunkedFileReader(path, 1000) as reader:
            chunk_hashes, file_hash = hash_chunks(reader)

        assert chunk_hashes == [
            sha256_hash(data[0:1000]),
            sha256_hash(data[1000:2000]),
            sha256_hash(data[2000:]),
        ]
        assert file_hash == hashlib.sha256(data).hexdigest()


class TestMerkleTree:
    """Tests for the Merkle Tree implementation."""

    def test_single_leaf(self):
        """Tree with one leaf: root equals the leaf hash."""
        hashes = _make_hashes(1)
        tree = MerkleTree(hashes)
        assert tree.root == hashes[0]
        assert tree.get_proof(0) == []
        assert MerkleTree.verify_proof(hashes[0], [], tree.root)

    def test_two_leaves(self):
        hashes = _make_hashes(2)
        tree = MerkleTree(hashes)
        expected = hashlib.sha256(
            bytes.fromhex(hashes[0]) + bytes.fromhex(hashes[1])
        ).hexdigest()
        assert tree.root == expected

    def test_odd_leaves_duplicate_last(self):
        """With three leaves the third is paired with itself."""
        hashes = _make_hashes(3)
        tree = MerkleTree(hashes)
        assert len(tree.levels) == 3
        assert tree.levels[1][1] == hashlib.sha256(
            bytes.fromhex(hashes[2]) * 2
        ).hexdigest()

    def test_different_hashes_different_root(self):
        tree1 = MerkleTree(_make_hashes(5))
        tree2 = MerkleTree([sha256_hash(f"other-{i}".encode()) for i in range(5)])
        assert tree1.root != tree2.root

    def test_empty_hashes_raises(self):
        with pytest.raises(ValueError, match="Cannot build"):
            MerkleTree([])

    def test_every_proof_verifies(self):
        """Proofs verify for each leaf, for even and odd leaf counts."""
        for n in (2, 7, 8, 100):
            hashes = _make_hashes(n)
            tree = MerkleTree(hashes)
            for i in range(n):
                assert MerkleTree.verify_proof(hashes[i], tree.get_proof(i), tree.root)

    def test_proof_wrong_hash_fails(self):
        tree = MerkleTree(_make_hashes(4))
        proof = tree.get_proof(0)
        assert not MerkleTree.verify_proof(sha256_hash(b"tampered"), proof, tree.root)

    def test_proof_wrong_root_fails(self):
        hashes = _make_hashes(4)
        tree = MerkleTree(hashes)
        wrong_root = sha256_hash(b"wrong root")
        assert not MerkleTree.verify_proof(hashes[0], tree.get_proof(0), wrong_root)

    def test_proof_index_out_of_range(self):
        tree = MerkleTree(_make_hashes(4))
        with pytest.raises(IndexError):
            tree.get_proof(4)
        with pytest.raises(IndexError):
            tree.get_proof(-1)
