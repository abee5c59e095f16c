"""
Merkle Proofs - Allowlist Wrappers
Class-based interfaces over merkle_tree.py for allocation records.

This module provides:
- AllowlistTree: Build once, then prove any allocation in O(log n)
- MerkleVerifier: Verify allocations and hex-encoded proofs

The generator and the eligibility client both go through these classes,
so the leaf encoding and pair hashing cannot drift between them.
"""
from __future__ import annotations

from typing import Iterable, Sequence

from mintlist.crypto.hashing import hash_from_hex, to_hex
from mintlist.merkle.leaf import encode_leaf, normalize_address
from mintlist.merkle.merkle_tree import (
    MerkleProof,
    build_merkle_layers,
    build_merkle_proof,
    compute_root_from_proof,
    compute_tree_depth,
    verify_proof,
)
from mintlist.schemas.allowlist import AllocationRecord
from mintlist.schemas.errors import ErrorCodes, ProofMismatchException


class AllowlistTree:
    """
    Merkle tree over a set of allocation records.

    Example:
        >>> tree = AllowlistTree.from_records(records)
        >>> proof = tree.proof_for(records[0].address)
        >>> MerkleVerifier.verify(proof.leaf, proof.siblings, tree.root)
        True
    """

    def __init__(self, records: Iterable[AllocationRecord]) -> None:
        self._records: dict[str, AllocationRecord] = {}
        self._leaves: dict[str, bytes] = {}
        for record in records:
            if record.address in self._records:
                raise ValueError(f"Duplicate address in allowlist: {record.address}")
            self._records[record.address] = record
            self._leaves[record.address] = encode_leaf(record.address, record.max_allowed)

        if not self._records:
            raise ValueError("Cannot build an allowlist tree without records")

        self._layers = build_merkle_layers(list(self._leaves.values()))
        self._positions = {leaf: i for i, leaf in enumerate(self._layers[0])}

    @classmethod
    def from_records(cls, records: Iterable[AllocationRecord]) -> "AllowlistTree":
        return cls(records)

    @property
    def root(self) -> bytes:
        return self._layers[-1][0]

    @property
    def layers(self) -> list[list[bytes]]:
        return self._layers

    @property
    def depth(self) -> int:
        return compute_tree_depth(len(self._records))

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, address: str) -> bool:
        return address.lower() in self._records

    def leaf_for(self, address: str) -> bytes:
        return self._leaves[normalize_address(address)]

    def proof_for(self, address: str) -> MerkleProof:
        """
        Generate the proof for an address in the allowlist.

        Raises:
            KeyError: If the address is not in the allowlist
        """
        leaf = self.leaf_for(address)
        return build_merkle_proof(self._layers, leaf, index=self._positions[leaf])

    def records_in_leaf_order(self) -> list[tuple[AllocationRecord, bytes]]:
        """Records paired with their leaves, in canonical (sorted leaf) order."""
        by_leaf = {leaf: self._records[address] for address, leaf in self._leaves.items()}
        return [(by_leaf[leaf], leaf) for leaf in self._layers[0]]


class MerkleVerifier:
    """
    Convenience class for verifying allowlist proofs.

    verify() never raises on a mismatch; require() raises
    ProofMismatchException for callers that gate on exceptions.
    """

    @staticmethod
    def verify(leaf: bytes, siblings: Sequence[bytes], root: bytes) -> bool:
        return verify_proof(leaf, siblings, root)

    @staticmethod
    def verify_allocation(
        address: str,
        max_allowed: int,
        proof: Sequence[str],
        root: str,
    ) -> bool:
        """
        Verify a hex-encoded proof for (address, max_allowed) against a hex root.

        Malformed hex in the proof or root yields False.
        """
        try:
            siblings = [hash_from_hex(p) for p in proof]
            expected = hash_from_hex(root)
        except (TypeError, ValueError):
            return False
        leaf = encode_leaf(address, max_allowed)
        return verify_proof(leaf, siblings, expected)

    @staticmethod
    def require(
        address: str,
        max_allowed: int,
        proof: Sequence[str],
        root: str,
    ) -> None:
        """
        Verify a hex-encoded proof, raising on mismatch.

        Raises:
            ProofMismatchException: If the proof does not reconstruct root
        """
        try:
            siblings = [hash_from_hex(p) for p in proof]
        except (TypeError, ValueError) as e:
            raise ProofMismatchException(
                f"Malformed proof element: {e}",
                address=address,
                expected_root=root,
                code=ErrorCodes.MERKLE_PROOF_INVALID,
            ) from e
        computed = to_hex(compute_root_from_proof(encode_leaf(address, max_allowed), siblings))
        if computed != root.lower():
            raise ProofMismatchException(
                "Ineligible or stale proof: recomputed root does not match",
                address=address,
                expected_root=root,
                computed_root=computed,
            )


__all__ = [
    "AllowlistTree",
    "MerkleVerifier",
]
