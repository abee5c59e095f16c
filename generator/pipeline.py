"""
Generation Pipeline

Deterministic, in-process runner composing the normalizer, leaf encoder,
tree builder and proof generator into a single batch job.

Fail-closed: every stage must succeed, and every proof must verify against
the new root, before anything is written to disk.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable

from mintlist.crypto.hashing import to_hex
from mintlist.dataset.normalizer import NormalizedDataset, load_dataset
from mintlist.merkle.merkle_proofs import AllowlistTree
from mintlist.schemas.allowlist import (
    AllocationRecord,
    AllowlistArtifact,
    LeafRecord,
    ProofEntry,
)
from mintlist.schemas.errors import ErrorCodes, ProofMismatchException, ValidationException

from generator.artifacts.io import ArtifactReport, save_artifact, verify_artifact


logger = logging.getLogger(__name__)


@dataclass
class GenerationResult:
    """Complete result of a generation run."""
    artifact: AllowlistArtifact
    dataset: NormalizedDataset
    report: ArtifactReport
    files: dict[str, Path] = field(default_factory=dict)

    @property
    def root(self) -> str:
        return self.artifact.root

    def to_dict(self) -> dict[str, Any]:
        return {
            "ok": self.report.ok,
            "root": self.root,
            "entries": len(self.artifact),
            "rows_read": self.dataset.rows_read,
            "rows_skipped": self.dataset.rows_skipped,
            "duplicates_collapsed": self.dataset.duplicates_collapsed,
            "files": {name: str(path) for name, path in self.files.items()},
        }


def generate_artifact(records: Iterable[AllocationRecord]) -> AllowlistArtifact:
    """
    Build the artifact for a set of unique allocation records.

    Raises:
        ValidationException: If records is empty or contains a duplicate address
    """
    records = list(records)
    if not records:
        raise ValidationException(
            "Allowlist is empty: no valid allocation records",
            code=ErrorCodes.DATASET_EMPTY,
        )

    try:
        tree = AllowlistTree.from_records(records)
    except ValueError as e:
        raise ValidationException(str(e)) from e

    logger.debug(f"Built tree over {len(tree)} leaves, depth {tree.depth}")

    leaves: list[LeafRecord] = []
    entries: dict[str, ProofEntry] = {}
    for record, leaf in tree.records_in_leaf_order():
        leaves.append(LeafRecord(address=record.address, max_allowed=record.max_allowed, leaf=to_hex(leaf)))
        proof = tree.proof_for(record.address)
        entries[record.address] = ProofEntry(
            max_allowed=record.max_allowed,
            proof=tuple(to_hex(s) for s in proof.siblings),
        )

    return AllowlistArtifact(root=to_hex(tree.root), entries=entries, leaves=tuple(leaves))


def run_generation(input_path: str | Path, out_dir: str | Path) -> GenerationResult:
    """
    Run the full generation job for a CSV dataset.

    Args:
        input_path: Allocation CSV
        out_dir: Directory receiving root.json, leaves.json and proofs.json

    Returns:
        GenerationResult with the artifact, dataset statistics and written paths

    Raises:
        ValidationException: If the dataset is missing, empty or malformed
        ProofMismatchException: If a generated proof fails self-verification
        ArtifactIOException: If the output cannot be written
    """
    logger.info(f"Normalizing dataset {input_path}")
    dataset = load_dataset(input_path)

    logger.info(f"Building Merkle tree for {len(dataset)} allocations")
    artifact = generate_artifact(dataset.records)
    logger.info(f"Merkle root: {artifact.root}")

    report = verify_artifact(artifact)
    if not report.ok:
        raise ProofMismatchException(
            f"Self-verification failed for {len(report.failures)} entries",
            expected_root=artifact.root,
            code=ErrorCodes.MERKLE_PROOF_INVALID,
            details={"failures": report.failures},
        )
    logger.info(f"Self-verified {report.entries_checked} proofs")

    files = save_artifact(artifact, out_dir)
    return GenerationResult(artifact=artifact, dataset=dataset, report=report, files=files)


__all__ = [
    "GenerationResult",
    "generate_artifact",
    "run_generation",
]
