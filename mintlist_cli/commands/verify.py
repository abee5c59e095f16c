"""
CLI Verify Command

Verify an allowlist artifact offline:
- Load root.json / proofs.json (and leaves.json when present)
- Recompute the root from every proof, or one address's proof
- Optionally compare the artifact root with the root committed on-chain

Usage:
    mintlist verify merkle/ [--address ADDR] [--root ROOT] [--json]
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

from generator.artifacts.io import ArtifactReport, load_artifact, verify_artifact
from mintlist.crypto.hashing import is_hash_hex
from mintlist.merkle.leaf import is_hex_address
from mintlist.schemas.errors import ArtifactIOException


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


@dataclass
class VerifySummary:
    """Summary of artifact verification for CLI output."""
    artifact_path: str = ""
    root: str = ""
    expected_root: str | None = None
    root_ok: bool = True
    proofs_ok: bool = False
    entries_checked: int = 0
    errors: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        if self.expected_root is None:
            del d["expected_root"]
        if not d["errors"]:
            del d["errors"]
        d["ok"] = self.all_ok
        return d

    @property
    def all_ok(self) -> bool:
        """Check if all verifications passed."""
        return self.root_ok and self.proofs_ok


def build_summary(artifact_path: str, report: ArtifactReport) -> VerifySummary:
    """Build a VerifySummary from an artifact report."""
    summary = VerifySummary(
        artifact_path=artifact_path,
        root=report.root,
        expected_root=report.expected_root,
        root_ok=report.root_matches,
        proofs_ok=not report.failures,
        entries_checked=report.entries_checked,
    )
    if not report.root_matches:
        summary.errors.append(f"Root: artifact root does not match {report.expected_root}")
    for address in report.failures:
        summary.errors.append(f"Proof: {address} does not verify")
    return summary


def print_summary_human(summary: VerifySummary) -> None:
    """Print summary in human-readable format."""
    print(f"artifact: {summary.artifact_path}")
    print(f"root: {summary.root}")
    if summary.expected_root is not None:
        print(f"expected_root: {summary.expected_root}")
        print(f"root_ok: {str(summary.root_ok).lower()}")
    print(f"entries_checked: {summary.entries_checked}")
    print(f"proofs_ok: {str(summary.proofs_ok).lower()}")

    if summary.errors:
        print(f"\nerrors ({len(summary.errors)}):")
        for err in summary.errors[:10]:
            print(f"  ✗ {err}")


def print_summary_json(summary: VerifySummary) -> None:
    """Print summary as JSON."""
    print(json.dumps(summary.to_dict(), indent=2))


def verify_cmd(args: Namespace) -> int:
    """
    Execute the verify command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code
    """
    artifact_path = Path(args.artifact_path)
    expected_root = args.root or args.cli_config.expected_root

    if not artifact_path.exists():
        print(f"Error: Artifact not found: {artifact_path}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    if args.address and not is_hex_address(args.address):
        print(f"Error: Invalid address: {args.address}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    if expected_root and not is_hash_hex(expected_root):
        print(f"Error: Invalid root: {expected_root}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    try:
        artifact = load_artifact(artifact_path)
    except ArtifactIOException as e:
        print(f"Error loading artifact: {e.message}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    logger.info(f"Verifying artifact {artifact_path} ({len(artifact)} entries)")
    report = verify_artifact(
        artifact,
        expected_root=expected_root or None,
        addresses=[args.address] if args.address else None,
    )

    summary = build_summary(str(artifact_path), report)
    if args.json or args.cli_config.default_output_format == "json":
        print_summary_json(summary)
    else:
        print_summary_human(summary)

    if summary.all_ok:
        logger.info("Verification passed")
        return EXIT_SUCCESS
    logger.warning("Verification failed")
    return EXIT_VERIFICATION_FAILED
