"""
Schemas - Allowlist Records & Artifact
File: allowlist.py

Purpose: Typed records for allocations, leaves, proofs and the persisted
allowlist artifact (root.json / leaves.json / proofs.json).

Allocations are serialized under the key "maxAllowed" as decimal strings,
since uint256 values do not fit safely in JSON numbers.
"""

import re
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from mintlist.crypto.hashing import is_hash_hex


ADDRESS_PATTERN = re.compile(r"^0x[0-9a-fA-F]{40}$")
UINT256_MAX = 2**256 - 1


def _check_address(value: str) -> str:
    if not ADDRESS_PATTERN.match(value):
        raise ValueError(f"invalid address: {value!r}")
    return value.lower()


def _check_hash(value: str) -> str:
    if not is_hash_hex(value):
        raise ValueError(f"expected 0x-prefixed 32-byte hex, got {value!r}")
    return value.lower()


class AllocationRecord(BaseModel):
    """One allowlisted address and its maximum allocation."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")

    address: str = Field(..., description="Lowercase 0x-prefixed 20-byte address")
    max_allowed: int = Field(..., alias="maxAllowed", ge=0, le=UINT256_MAX)

    @field_validator("address")
    @classmethod
    def _normalize_address(cls, v: str) -> str:
        return _check_address(v)

    @field_serializer("max_allowed")
    def _serialize_max_allowed(self, v: int) -> str:
        return str(v)


class LeafRecord(BaseModel):
    """An allocation together with its leaf hash (an entry of leaves.json)."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")

    address: str
    max_allowed: int = Field(..., alias="maxAllowed", ge=0, le=UINT256_MAX)
    leaf: str

    @field_validator("address")
    @classmethod
    def _normalize_address(cls, v: str) -> str:
        return _check_address(v)

    @field_validator("leaf")
    @classmethod
    def _normalize_leaf(cls, v: str) -> str:
        return _check_hash(v)

    @field_serializer("max_allowed")
    def _serialize_max_allowed(self, v: int) -> str:
        return str(v)


class ProofEntry(BaseModel):
    """Allocation and proof for one address (a value of proofs.json)."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")

    max_allowed: int = Field(..., alias="maxAllowed", ge=0, le=UINT256_MAX)
    proof: tuple[str, ...] = Field(default_factory=tuple)

    @field_validator("proof")
    @classmethod
    def _normalize_proof(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        return tuple(_check_hash(p) for p in v)

    @field_serializer("max_allowed")
    def _serialize_max_allowed(self, v: int) -> str:
        return str(v)


class AllowlistArtifact(BaseModel):
    """
    The immutable result of one generation run.

    A change in eligibility means a new artifact with a new root; entries
    are never edited in place.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    root: str = Field(..., description="0x-prefixed 32-byte Merkle root")
    entries: dict[str, ProofEntry] = Field(
        ...,
        description="Lowercase address -> allocation and proof",
    )
    leaves: tuple[LeafRecord, ...] = Field(
        default_factory=tuple,
        description="Leaf records in canonical (sorted leaf) order",
    )

    @field_validator("root")
    @classmethod
    def _normalize_root(cls, v: str) -> str:
        return _check_hash(v)

    @field_validator("entries")
    @classmethod
    def _normalize_entries(cls, v: dict[str, ProofEntry]) -> dict[str, ProofEntry]:
        entries: dict[str, ProofEntry] = {}
        for address, entry in v.items():
            key = _check_address(address)
            if key in entries:
                raise ValueError(f"duplicate address (case-insensitive): {address!r}")
            entries[key] = entry
        return entries

    def __len__(self) -> int:
        return len(self.entries)

    def get(self, address: str) -> Optional[ProofEntry]:
        """Look up an entry by address (case-insensitive)."""
        return self.entries.get(address.lower())

    def to_root_document(self) -> dict[str, Any]:
        return {"root": self.root}

    def to_leaves_document(self) -> list[dict[str, Any]]:
        return [leaf.model_dump(mode="json", by_alias=True) for leaf in self.leaves]

    def to_proofs_document(self) -> dict[str, Any]:
        return {
            address: {
                "maxAllowed": str(self.entries[address].max_allowed),
                "proof": list(self.entries[address].proof),
            }
            for address in sorted(self.entries)
        }

    @classmethod
    def from_documents(
        cls,
        root_document: dict[str, Any],
        proofs_document: dict[str, Any],
        leaves_document: Optional[list[dict[str, Any]]] = None,
    ) -> "AllowlistArtifact":
        """Rebuild an artifact from the parsed contents of its three files."""
        return cls(
            root=root_document["root"],
            entries={
                address: ProofEntry.model_validate(entry)
                for address, entry in proofs_document.items()
            },
            leaves=tuple(LeafRecord.model_validate(leaf) for leaf in leaves_document or []),
        )
