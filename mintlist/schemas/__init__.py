"""
Schemas
File: __init__.py

Purpose: Export the public API for the schemas module: allowlist records,
the artifact model, and the error taxonomy.
"""

# Allowlist records
from .allowlist import (
    ADDRESS_PATTERN,
    UINT256_MAX,
    AllocationRecord,
    AllowlistArtifact,
    LeafRecord,
    ProofEntry,
)

# Error models and exceptions
from .errors import (
    ArtifactFetchException,
    ArtifactIOException,
    ErrorCodes,
    MintlistError,
    MintlistException,
    ProofMismatchException,
    ValidationError,
    ValidationException,
)

__all__ = [
    # Records
    "ADDRESS_PATTERN",
    "UINT256_MAX",
    "AllocationRecord",
    "AllowlistArtifact",
    "LeafRecord",
    "ProofEntry",
    # Errors
    "ArtifactFetchException",
    "ArtifactIOException",
    "ErrorCodes",
    "MintlistError",
    "MintlistException",
    "ProofMismatchException",
    "ValidationError",
    "ValidationException",
]
