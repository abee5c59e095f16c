"""
Core cryptographic utilities.

Keccak-256 hashing and hex helpers shared by the generator and the client.
"""
from .hashing import (
    HASH_SIZE,
    keccak256,
    hash_concat,
    hash_pair_sorted,
    to_hex,
    from_hex,
    is_hash_hex,
    hash_from_hex,
)

__all__ = [
    "HASH_SIZE",
    "keccak256",
    "hash_concat",
    "hash_pair_sorted",
    "to_hex",
    "from_hex",
    "is_hash_hex",
    "hash_from_hex",
]
