"""
Hashing Utilities
Keccak-256 hashing and hex helpers for allowlist commitments.

This module provides:
- Keccak-256 hashing for raw bytes (the EVM's keccak256)
- Sorted-pair hashing for Merkle parents
- Hex encoding/decoding with 0x prefix

Security/Determinism Notes:
- Keccak-256 is NOT NIST SHA3-256; hashlib.sha3_256 gives different digests
- Always hash raw bytes exactly as specified
- All operations are deterministic
"""
from __future__ import annotations

import re

from eth_utils import keccak


HASH_SIZE = 32

_HEX32_PATTERN = re.compile(rf"^0x[0-9a-fA-F]{{{HASH_SIZE * 2}}}$")


def keccak256(data: bytes) -> bytes:
    """
    Compute the Keccak-256 hash of raw bytes.

    Args:
        data: Raw bytes to hash

    Returns:
        32-byte Keccak-256 digest

    Example:
        >>> keccak256(b"").hex()
        'c5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470'
    """
    return keccak(primitive=data)


def hash_concat(left: bytes, right: bytes) -> bytes:
    """
    Hash the concatenation of two byte sequences: keccak256(left + right).

    Args:
        left: First hash
        right: Second hash

    Returns:
        32-byte digest of the concatenation
    """
    return keccak256(left + right)


def hash_pair_sorted(a: bytes, b: bytes) -> bytes:
    """
    Combine two node hashes into their parent.

    The two values are compared as big-endian unsigned integers and hashed
    smaller-then-larger, so hash_pair_sorted(a, b) == hash_pair_sorted(b, a).
    For equal-length inputs byte-wise comparison is the same ordering.

    Args:
        a: 32-byte node hash
        b: 32-byte node hash

    Returns:
        32-byte parent hash
    """
    if a <= b:
        return hash_concat(a, b)
    return hash_concat(b, a)


def to_hex(data: bytes) -> str:
    """
    Convert bytes to hexadecimal string with 0x prefix.

    Example:
        >>> to_hex(bytes.fromhex("deadbeef"))
        '0xdeadbeef'
    """
    return "0x" + data.hex()


def from_hex(hex_string: str) -> bytes:
    """
    Convert hexadecimal string (with 0x prefix) to bytes.

    Raises:
        ValueError: If string doesn't start with 0x, has odd length,
                   or contains invalid hex characters
    """
    if not hex_string.startswith("0x"):
        raise ValueError(
            f"Hex string must start with '0x' prefix, got: {hex_string[:10]}..."
        )

    hex_content = hex_string[2:]

    if len(hex_content) % 2 != 0:
        raise ValueError(
            f"Hex string must have even length after 0x prefix, "
            f"got length {len(hex_content)}"
        )

    try:
        return bytes.fromhex(hex_content)
    except ValueError as e:
        raise ValueError(f"Invalid hex characters in string: {e}") from e


def is_hash_hex(value: object) -> bool:
    """Check that a value is a 0x-prefixed 32-byte hex string."""
    return isinstance(value, str) and bool(_HEX32_PATTERN.match(value))


def hash_from_hex(hex_string: str) -> bytes:
    """
    Decode a 0x-prefixed 32-byte hash.

    Raises:
        ValueError: If the string is not exactly 32 bytes of hex
    """
    if not is_hash_hex(hex_string):
        raise ValueError(f"Expected 0x-prefixed 32-byte hex hash, got: {hex_string!r}")
    return from_hex(hex_string)


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
