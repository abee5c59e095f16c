"""
Merkle Allowlist Commitments
Leaf encoding, deterministic tree construction, proof generation and
verification, shared by the generator and the eligibility client.

Canonical Commitment Rules:
1. Leaf: keccak256(address bytes || uint256 big-endian amount)
2. Leaves sorted ascending before reduction
3. Parent: keccak256(min(a, b) + max(a, b))
4. Odd node carried forward unchanged
5. Single leaf: root = leaf

Usage:
    from mintlist.merkle import AllowlistTree, MerkleVerifier

    tree = AllowlistTree.from_records(records)
    proof = tree.proof_for(address)
    assert MerkleVerifier.verify(proof.leaf, proof.siblings, tree.root)
"""
from .leaf import (
    PACKED_SIZE,
    is_hex_address,
    normalize_address,
    encode_packed,
    encode_leaf,
)

from .merkle_tree import (
    MerkleProof,
    sort_leaves,
    build_merkle_layers,
    build_merkle_root,
    build_merkle_proof,
    compute_root_from_proof,
    verify_proof,
    verify_merkle_proof,
    compute_tree_depth,
)

from .merkle_proofs import (
    AllowlistTree,
    MerkleVerifier,
)


__all__ = [
    # Leaf encoding
    "PACKED_SIZE",
    "is_hex_address",
    "normalize_address",
    "encode_packed",
    "encode_leaf",
    # Core types
    "MerkleProof",
    # Core functions
    "sort_leaves",
    "build_merkle_layers",
    "build_merkle_root",
    "build_merkle_proof",
    "compute_root_from_proof",
    "verify_proof",
    "verify_merkle_proof",
    "compute_tree_depth",
    # Convenience classes
    "AllowlistTree",
    "MerkleVerifier",
]
