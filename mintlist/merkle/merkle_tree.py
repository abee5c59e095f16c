"""
Merkle Tree Implementation
Deterministic Merkle tree construction, proof generation, and verification.

This module provides:
- Canonical leaf ordering and bottom-up root computation
- Merkle proof generation for any leaf
- Merkle proof verification (shared by generator and client)

Canonical Commitment Rules (Hard Contracts):
1. Leaf hashing: keccak256(abi.encodePacked(address, uint256))
   - Implemented via mintlist.merkle.leaf.encode_leaf()
2. Leaf order: leaves sorted ascending by their 32-byte value
3. Parent hashing: keccak256(min(a, b) + max(a, b))
4. Odd node: carried forward unchanged to the next level (no duplication)
5. Single leaf: root = leaf
6. Empty leaf set: rejected (an allowlist always has at least one entry)

Determinism Notes:
- Root depends only on the SET of leaves, never on input order
- Verification needs no index or left/right flags; pairs are sorted
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from mintlist.crypto.hashing import hash_pair_sorted


@dataclass(frozen=True)
class MerkleProof:
    """
    A Merkle proof for a single leaf.

    Attributes:
        leaf: The leaf hash being proven
        siblings: Sibling hashes from bottom to top; levels where the node
                  was carried forward contribute no entry
        root: The Merkle root this proof is against
    """
    leaf: bytes
    siblings: list[bytes]
    root: bytes


def sort_leaves(leaves: Sequence[bytes]) -> list[bytes]:
    """
    Canonicalize leaf order: ascending big-endian numeric value.

    All leaves are 32 bytes, so byte-wise ordering equals numeric ordering.
    """
    return sorted(leaves)


def build_merkle_layers(leaves: Sequence[bytes]) -> list[list[bytes]]:
    """
    Build every level of the tree, bottom-up.

    Level 0 is the canonically sorted leaf list; the last level holds
    only the root.

    Example: sorted [a, b, c] -> [[a, b, c], [ab, c], [abc]]

    Args:
        leaves: Leaf hashes in any order

    Returns:
        List of levels

    Raises:
        ValueError: If leaves is empty
    """
    if len(leaves) == 0:
        raise ValueError("Cannot build Merkle tree from an empty leaf set")

    current_level = sort_leaves(leaves)
    layers = [current_level]

    while len(current_level) > 1:
        next_level: list[bytes] = []
        for i in range(0, len(current_level), 2):
            if i + 1 < len(current_level):
                next_level.append(hash_pair_sorted(current_level[i], current_level[i + 1]))
            else:
                # Odd node carried forward unchanged
                next_level.append(current_level[i])
        current_level = next_level
        layers.append(current_level)

    return layers


def build_merkle_root(leaves: Sequence[bytes]) -> bytes:
    """
    Compute the Merkle root for a set of leaves.

    Returns:
        32-byte root; for a single leaf, the leaf itself

    Raises:
        ValueError: If leaves is empty
    """
    return build_merkle_layers(leaves)[-1][0]


def build_merkle_proof(
    layers: Sequence[Sequence[bytes]],
    leaf: bytes,
    index: int | None = None,
) -> MerkleProof:
    """
    Generate a Merkle proof for a leaf from prebuilt layers.

    Algorithm:
    1. Start at the leaf's position in the sorted leaf level
    2. At each level, if the sibling (index XOR 1) exists, record it;
       otherwise the node was carried forward and nothing is recorded
    3. Move up: index = index // 2

    Args:
        layers: Output of build_merkle_layers()
        leaf: The leaf to prove
        index: Position of the leaf in layers[0], if already known

    Returns:
        MerkleProof with siblings bottom-up

    Raises:
        ValueError: If the leaf is not in the tree
    """
    if index is None:
        try:
            index = list(layers[0]).index(leaf)
        except ValueError:
            raise ValueError(f"Leaf 0x{leaf.hex()} is not part of this tree") from None
    elif layers[0][index] != leaf:
        raise ValueError(f"Leaf at index {index} does not match 0x{leaf.hex()}")

    siblings: list[bytes] = []
    current_index = index

    for level in layers[:-1]:
        sibling_index = current_index ^ 1
        if sibling_index < len(level):
            siblings.append(level[sibling_index])
        current_index //= 2

    return MerkleProof(leaf=leaf, siblings=siblings, root=layers[-1][0])


def compute_root_from_proof(leaf: bytes, siblings: Sequence[bytes]) -> bytes:
    """
    Fold a proof into a candidate root.

    current = leaf; for each sibling: current = hash_pair_sorted(current, sibling)
    """
    current = leaf
    for sibling in siblings:
        current = hash_pair_sorted(current, sibling)
    return current


def verify_proof(leaf: bytes, siblings: Sequence[bytes], root: bytes) -> bool:
    """
    Verify that a leaf and proof reconstruct the expected root.

    Pure and side-effect free; mirrors the on-chain verifier.

    Returns:
        True if the recomputed root equals root, False otherwise
    """
    return compute_root_from_proof(leaf, siblings) == root


def verify_merkle_proof(proof: MerkleProof) -> bool:
    """Verify a MerkleProof against its own claimed root."""
    return verify_proof(proof.leaf, proof.siblings, proof.root)


def compute_tree_depth(num_leaves: int) -> int:
    """
    Number of combination levels above the leaves.

    A single leaf has depth 0; this is also the maximum proof length.
    """
    if num_leaves < 0:
        raise ValueError(f"Leaf count must be non-negative, got {num_leaves}")

    depth = 0
    n = num_leaves
    while n > 1:
        n = (n + 1) // 2
        depth += 1

    return depth


__all__ = [
    "MerkleProof",
    "sort_leaves",
    "build_merkle_layers",
    "build_merkle_root",
    "build_merkle_proof",
    "compute_root_from_proof",
    "verify_proof",
    "verify_merkle_proof",
    "compute_tree_depth",
]
