"""
Client Models

Typed records at the boundary between fetched JSON and the gating logic.
Loosely-typed artifact documents are parsed into ProofLookup before the
verifier sees them; checks report an EligibilityResult.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from mintlist.crypto.hashing import is_hash_hex
from mintlist.schemas.allowlist import ProofEntry
from mintlist.schemas.errors import (
    ArtifactFetchException,
    ErrorCodes,
    ProofMismatchException,
)


class ProofLookup(BaseModel):
    """
    Result of looking up one address in a published artifact.

    A missing entry is found=False with zero allocation and an empty proof.
    """

    model_config = ConfigDict(frozen=True)

    address: str
    found: bool = False
    max_allowed: int = 0
    proof: tuple[str, ...] = ()
    root: Optional[str] = Field(
        default=None,
        description="Root embedded in the proofs document, if any",
    )

    @classmethod
    def from_document(cls, address: str, document: Any) -> "ProofLookup":
        """
        Extract an address's entry from a proofs document.

        The document maps lowercase addresses to {"maxAllowed", "proof"} and
        may carry a top-level "root".

        Raises:
            ArtifactFetchException: If the document or the entry is malformed
        """
        if not isinstance(document, dict):
            raise ArtifactFetchException(
                "Proofs document is not a JSON object",
                code=ErrorCodes.ARTIFACT_MALFORMED,
            )

        root = document.get("root")
        if root is not None:
            if not is_hash_hex(root):
                raise ArtifactFetchException(
                    "Proofs document has a malformed root",
                    code=ErrorCodes.ARTIFACT_MALFORMED,
                )
            root = root.lower()

        key = address.lower()
        raw = document.get(key)
        if raw is None:
            return cls(address=key, found=False, root=root)

        try:
            entry = ProofEntry.model_validate(raw)
        except ValueError as e:
            raise ArtifactFetchException(
                f"Malformed proof entry for {key}: {e}",
                code=ErrorCodes.ARTIFACT_MALFORMED,
            ) from e

        return cls(
            address=key,
            found=True,
            max_allowed=entry.max_allowed,
            proof=entry.proof,
            root=root,
        )


class EligibilityStatus(str, Enum):
    """Outcome of an eligibility check."""
    ELIGIBLE = "eligible"
    NOT_LISTED = "not_listed"  # Address absent from the allowlist
    PROOF_MISMATCH = "proof_mismatch"  # Proof does not match the committed root
    UNAVAILABLE = "unavailable"  # Could not fetch or read the artifact


_USER_MESSAGES = {
    EligibilityStatus.ELIGIBLE: "You are on the allowlist.",
    EligibilityStatus.NOT_LISTED: "This address is not on the allowlist.",
    EligibilityStatus.PROOF_MISMATCH: "Your proof is out of date. Please refresh and try again.",
    EligibilityStatus.UNAVAILABLE: "Could not verify eligibility right now. Please try again later.",
}


class EligibilityResult(BaseModel):
    """
    Gating decision for one address.

    Any status other than ELIGIBLE carries max_allowed=0 (fail-closed).
    """

    model_config = ConfigDict(frozen=True)

    address: str
    status: EligibilityStatus
    max_allowed: int = 0
    proof: tuple[str, ...] = ()
    root: Optional[str] = None
    message: str = ""

    @property
    def eligible(self) -> bool:
        return self.status == EligibilityStatus.ELIGIBLE

    @property
    def retryable(self) -> bool:
        """Only unavailability is transient; mismatches need a fresh artifact."""
        return self.status == EligibilityStatus.UNAVAILABLE

    @property
    def user_message(self) -> str:
        return _USER_MESSAGES[self.status]

    def raise_for_status(self) -> None:
        """
        Raise if the address may not mint.

        Raises:
            ProofMismatchException: NOT_LISTED or PROOF_MISMATCH
            ArtifactFetchException: UNAVAILABLE
        """
        if self.status == EligibilityStatus.ELIGIBLE:
            return
        if self.status == EligibilityStatus.UNAVAILABLE:
            raise ArtifactFetchException(self.message or self.user_message)
        raise ProofMismatchException(
            self.message or self.user_message,
            address=self.address,
            expected_root=self.root,
            code=(
                ErrorCodes.MERKLE_PROOF_INVALID
                if self.status == EligibilityStatus.NOT_LISTED
                else ErrorCodes.ROOT_MISMATCH
            ),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "address": self.address,
            "status": self.status.value,
            "eligible": self.eligible,
            "maxAllowed": str(self.max_allowed),
            "proof": list(self.proof),
            "root": self.root,
            "message": self.message or self.user_message,
        }
