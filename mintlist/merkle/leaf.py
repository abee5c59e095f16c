"""
Leaf Encoding
Turns an (address, maxAllowed) pair into a Merkle leaf.

Hard contract, shared with the on-chain verifier:

    leaf = keccak256(abi.encodePacked(address, uint256(maxAllowed)))

i.e. the 20 raw address bytes immediately followed by the amount as a
32-byte big-endian unsigned integer (52 bytes, no length prefixes or
separators). Any change in field order, padding or width breaks
cross-verification with the deployed contract.
"""
from __future__ import annotations

from mintlist.crypto.hashing import from_hex, keccak256
from mintlist.schemas.allowlist import ADDRESS_PATTERN, UINT256_MAX
from mintlist.schemas.errors import ErrorCodes, ValidationException


ADDRESS_SIZE = 20
AMOUNT_SIZE = 32
PACKED_SIZE = ADDRESS_SIZE + AMOUNT_SIZE


def is_hex_address(value: object) -> bool:
    """Check for a 0x-prefixed 20-byte hex identifier (any case)."""
    return isinstance(value, str) and bool(ADDRESS_PATTERN.match(value))


def normalize_address(address: str) -> str:
    """
    Return the canonical lowercase form of an address.

    Raises:
        ValidationException: If the address is not a 20-byte hex identifier
    """
    if not is_hex_address(address):
        raise ValidationException(
            f"Invalid address: {address!r}",
            code=ErrorCodes.INVALID_ADDRESS,
            value=str(address),
        )
    return address.lower()


def check_amount(max_allowed: int) -> int:
    """
    Validate an allocation as a uint256.

    Raises:
        ValidationException: If negative, above 2**256-1, or not an int
    """
    if isinstance(max_allowed, bool) or not isinstance(max_allowed, int):
        raise ValidationException(
            f"Allocation must be an integer, got {type(max_allowed).__name__}",
            code=ErrorCodes.INVALID_AMOUNT,
            value=repr(max_allowed),
        )
    if max_allowed < 0 or max_allowed > UINT256_MAX:
        raise ValidationException(
            f"Allocation out of uint256 range: {max_allowed}",
            code=ErrorCodes.INVALID_AMOUNT,
            value=str(max_allowed),
        )
    return max_allowed


def encode_packed(address: str, max_allowed: int) -> bytes:
    """
    Packed encoding of (address, uint256).

    Args:
        address: 0x-prefixed hex address (case-insensitive)
        max_allowed: Allocation in [0, 2**256-1]

    Returns:
        52 bytes: address bytes || 32-byte big-endian amount
    """
    address_bytes = from_hex(normalize_address(address))
    amount_bytes = check_amount(max_allowed).to_bytes(AMOUNT_SIZE, byteorder="big")
    return address_bytes + amount_bytes


def encode_leaf(address: str, max_allowed: int) -> bytes:
    """
    Compute the 32-byte leaf for an allocation.

    Example:
        >>> encode_leaf("0x" + "a" * 39 + "1", 10).hex()
        '378a8834f7b6521467ec5a27dd76d521f4a3e16e6a482500315fce45f0de5e03'
    """
    return keccak256(encode_packed(address, max_allowed))


__all__ = [
    "ADDRESS_PATTERN",
    "PACKED_SIZE",
    "UINT256_MAX",
    "is_hex_address",
    "normalize_address",
    "check_amount",
    "encode_packed",
    "encode_leaf",
]
