"""
Eligibility client.

Fetches published allowlist artifacts, caches per-address lookups for the
session, and re-verifies proofs before a mint is submitted.
"""

from .artifact_source import (
    PROOFS_FILE,
    ROOT_FILE,
    ArtifactSource,
    HttpArtifactSource,
    LocalArtifactSource,
)
from .cache import TTLCache
from .eligibility import EligibilityChecker
from .models import EligibilityResult, EligibilityStatus, ProofLookup

__all__ = [
    "PROOFS_FILE",
    "ROOT_FILE",
    "ArtifactSource",
    "HttpArtifactSource",
    "LocalArtifactSource",
    "TTLCache",
    "EligibilityChecker",
    "EligibilityResult",
    "EligibilityStatus",
    "ProofLookup",
]
