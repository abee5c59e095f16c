"""
Eligibility Checks

Client-side pre-check before a mint transaction: look up the address in
the published artifact, re-verify its proof against the committed root,
and return a gating decision.

Fail-closed policy: if the artifact cannot be fetched or parsed the
result is UNAVAILABLE with zero allocation. It is never reported as
eligible, and it is never reported as NOT_LISTED, so a network failure
does not tell a legitimate participant they are ineligible.

The on-chain contract re-verifies the same proof; this check only avoids
submitting transactions that are certain to revert.
"""

from __future__ import annotations

import logging
from typing import Optional

from mintlist.client.artifact_source import ArtifactSource, HttpArtifactSource
from mintlist.client.models import EligibilityResult, EligibilityStatus, ProofLookup
from mintlist.config.runtime import RuntimeConfig
from mintlist.http.client import AsyncHttpClient
from mintlist.merkle.leaf import normalize_address
from mintlist.merkle.merkle_proofs import MerkleVerifier
from mintlist.schemas.errors import ArtifactFetchException


logger = logging.getLogger(__name__)


class EligibilityChecker:
    """
    Checks addresses against a published allowlist artifact.

    Args:
        source: Where the artifact is read from
        expected_root: The root committed on-chain for the active phase.
            When given, proofs are verified against it and an artifact
            publishing a different root is reported as stale.

    Usage:
        async with HttpArtifactSource(url) as source:
            checker = EligibilityChecker(source, expected_root=onchain_root)
            result = await checker.check(address)
            if result.eligible:
                submit_mint(result.max_allowed, result.proof)
    """

    def __init__(
        self,
        source: ArtifactSource,
        *,
        expected_root: Optional[str] = None,
    ) -> None:
        self.source = source
        self.expected_root = expected_root.lower() if expected_root else None

    @classmethod
    def from_config(
        cls,
        config: RuntimeConfig,
        *,
        client: Optional[AsyncHttpClient] = None,
    ) -> "EligibilityChecker":
        """Checker over the configured HTTP artifact, gated on the active phase's root."""
        return cls(
            HttpArtifactSource.from_config(config, client=client),
            expected_root=config.resolve_expected_root(),
        )

    async def check(self, address: str) -> EligibilityResult:
        """
        Decide whether an address may mint, and with what allocation.

        Raises:
            ValidationException: If address is not a 20-byte hex identifier
        """
        address = normalize_address(address)

        try:
            lookup = await self.source.lookup(address)
            artifact_root = lookup.root or await self.source.fetch_root()
        except ArtifactFetchException as e:
            logger.warning(f"Artifact unavailable for {address}: {e.message}")
            return EligibilityResult(
                address=address,
                status=EligibilityStatus.UNAVAILABLE,
                message=e.message,
            )

        # A stale artifact cannot prove absence any more than presence
        if self.expected_root and artifact_root and artifact_root != self.expected_root:
            logger.warning(
                f"Artifact root {artifact_root} differs from expected root {self.expected_root}"
            )
            return EligibilityResult(
                address=address,
                status=EligibilityStatus.PROOF_MISMATCH,
                root=self.expected_root,
                message="Published artifact is stale: its root does not match the committed root",
            )

        if not lookup.found:
            return EligibilityResult(
                address=address,
                status=EligibilityStatus.NOT_LISTED,
                root=self.expected_root or artifact_root,
            )

        return self._verify(lookup, self.expected_root or artifact_root)

    def _verify(self, lookup: ProofLookup, root: Optional[str]) -> EligibilityResult:
        if root is None:
            return EligibilityResult(
                address=lookup.address,
                status=EligibilityStatus.UNAVAILABLE,
                message="No committed root available to verify against",
            )

        if not MerkleVerifier.verify_allocation(lookup.address, lookup.max_allowed, lookup.proof, root):
            logger.warning(f"Proof for {lookup.address} does not reconstruct root {root}")
            return EligibilityResult(
                address=lookup.address,
                status=EligibilityStatus.PROOF_MISMATCH,
                root=root,
                message="Proof does not match the committed root",
            )

        return EligibilityResult(
            address=lookup.address,
            status=EligibilityStatus.ELIGIBLE,
            max_allowed=lookup.max_allowed,
            proof=lookup.proof,
            root=root,
        )
