"""
CLI Generate Command

Build an allowlist artifact from an allocation CSV:
- Normalize and deduplicate the dataset
- Build the Merkle tree and per-address proofs
- Self-verify every proof, then write root.json, leaves.json, proofs.json

Usage:
    mintlist generate allowlist.csv [--out DIR] [--json]
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

from generator.pipeline import GenerationResult, run_generation
from mintlist.schemas.errors import MintlistException


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


@dataclass
class GenerateSummary:
    """Summary of a generation run for CLI output."""
    input_path: str = ""
    out_dir: str = ""
    root: str = ""
    entries: int = 0
    rows_read: int = 0
    rows_skipped: int = 0
    duplicates_collapsed: int = 0
    files: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def build_summary(input_path: str, out_dir: str, result: GenerationResult) -> GenerateSummary:
    """Build a GenerateSummary from a generation result."""
    return GenerateSummary(
        input_path=input_path,
        out_dir=out_dir,
        root=result.root,
        entries=len(result.artifact),
        rows_read=result.dataset.rows_read,
        rows_skipped=result.dataset.rows_skipped,
        duplicates_collapsed=result.dataset.duplicates_collapsed,
        files=[str(path) for path in result.files.values()],
    )


def print_summary_human(summary: GenerateSummary) -> None:
    """Print summary in human-readable format."""
    print(f"input: {summary.input_path}")
    print(f"root: {summary.root}")
    print(f"entries: {summary.entries}")
    print(f"rows_read: {summary.rows_read}")
    if summary.rows_skipped:
        print(f"rows_skipped: {summary.rows_skipped}")
    if summary.duplicates_collapsed:
        print(f"duplicates_collapsed: {summary.duplicates_collapsed}")
    print(f"\nwrote {len(summary.files)} files to {summary.out_dir}:")
    for path in summary.files:
        print(f"  {path}")


def print_summary_json(summary: GenerateSummary) -> None:
    """Print summary as JSON."""
    print(json.dumps(summary.to_dict(), indent=2))


def generate_cmd(args: Namespace) -> int:
    """
    Execute the generate command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code
    """
    input_path = Path(args.input)
    out_dir = args.out or args.cli_config.output_dir

    if not input_path.exists():
        print(f"Error: Input file not found: {input_path}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    try:
        result = run_generation(input_path, out_dir)
    except MintlistException as e:
        logger.error(f"Generation failed [{e.code}]: {e.message}")
        if args.json or args.cli_config.default_output_format == "json":
            print(json.dumps({"ok": False, "error": e.to_error_model().model_dump()}, indent=2))
        print(f"Error: {e.message}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    summary = build_summary(str(input_path), str(out_dir), result)
    if args.json or args.cli_config.default_output_format == "json":
        print_summary_json(summary)
    else:
        print_summary_human(summary)

    return EXIT_SUCCESS
