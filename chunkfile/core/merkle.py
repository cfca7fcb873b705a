"""
merkle.py — Merkle Tree over Chunk Hashes
===========================================
Leaf nodes: SHA-256 hex digests of the file's chunks.
Internal nodes: SHA-256( left_child || right_child ).
A level with an odd node count pairs its last node with itself.
"""

import hashlib
import logging
from typing import List, Tuple

logger = logging.getLogger(__name__)

# (sibling hash, side of the sibling: "left" or "right")
ProofStep = Tuple[str, str]


def _hash_pair(left: str, right: str) -> str:
    return hashlib.sha256(bytes.fromhex(left) + bytes.fromhex(right)).hexdigest()


def _parent_level(level: List[str]) -> List[str]:
    padded = level + level[-1:] if len(level) % 2 else level
    return [_hash_pair(padded[i], padded[i + 1]) for i in range(0, len(padded), 2)]


class MerkleTree:
    """
    Binary Merkle tree built from chunk hashes.

    Attributes:
        leaves: The chunk hashes the tree was built from.
        levels: Every level, leaves first and the root level last.
    """

    def __init__(self, hashes: List[str]):
        if not hashes:
            raise ValueError("Cannot build Merkle tree from empty hash list")

        self.leaves: List[str] = list(hashes)
        self.levels: List[List[str]] = [self.leaves]
        while len(self.levels[-1]) > 1:
            self.levels.append(_parent_level(self.levels[-1]))

        logger.debug(
            "Built Merkle tree: %d leaves, %d levels, root=%s...",
            len(self.leaves),
            len(self.levels),
            self.root[:16],
        )

    @property
    def root(self) -> str:
        return self.levels[-1][0]

    def get_proof(self, index: int) -> List[ProofStep]:
        """
        Authentication path for the leaf at ``index``, bottom-up.

        Raises:
            IndexError: If index is out of range.
        """
        if not 0 <= index < len(self.leaves):
            raise IndexError(
                f"Leaf index {index} out of range [0, {len(self.leaves)})"
            )

        proof: List[ProofStep] = []
        for level in self.levels[:-1]:
            if index % 2:
                proof.append((level[index - 1], "left"))
            else:
                sibling = index + 1 if index + 1 < len(level) else index
                proof.append((level[sibling], "right"))
            index //= 2
        return proof

    @staticmethod
    def verify_proof(leaf_hash: str, proof: List[ProofStep], expected_root: str) -> bool:
        """Recompute the root from ``leaf_hash`` and ``proof`` and compare."""
        current = leaf_hash
        for sibling, side in proof:
            if side == "left":
                current = _hash_pair(sibling, current)
            else:
                current = _hash_pair(current, sibling)
        return current == expected_root
