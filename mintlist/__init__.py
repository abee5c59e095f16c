"""
Mintlist - Merkle allowlists for allocation-gated mints.

Subpackages:
    crypto   - keccak256 and hex helpers
    merkle   - leaf encoding, tree, proofs, verification
    schemas  - allowlist records, artifact model, errors
    dataset  - allocation dataset normalization
    client   - artifact lookup and eligibility checks
    http     - async HTTP client
    config   - runtime configuration
"""

__version__ = "0.1.0"
