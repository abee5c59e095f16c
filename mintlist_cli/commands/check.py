"""
CLI Check Command

Run the client-side eligibility check for one address:
- Fetch the published proofs (HTTP URL or local artifact directory)
- Re-verify the address's proof against the committed root
- Report eligible / not listed / proof mismatch / unavailable

Usage:
    mintlist check 0xabc... [--source URL|DIR] [--root ROOT] [--version V] [--json]
"""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from argparse import Namespace
from pathlib import Path
from typing import Optional

from mintlist.client.artifact_source import ArtifactSource, HttpArtifactSource, LocalArtifactSource
from mintlist.client.eligibility import EligibilityChecker
from mintlist.client.models import EligibilityResult, EligibilityStatus
from mintlist.config.runtime import RuntimeConfig
from mintlist.crypto.hashing import is_hash_hex
from mintlist.http.client import AsyncHttpClient
from mintlist.merkle.leaf import is_hex_address


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


def build_source(
    source: str,
    runtime: RuntimeConfig,
    *,
    version: Optional[str] = None,
) -> ArtifactSource:
    """Local directory sources are read from disk; anything else is fetched over HTTP."""
    path = Path(source)
    if path.is_dir():
        return LocalArtifactSource(path)
    return HttpArtifactSource(
        source,
        root_url=runtime.artifact.root_url,
        version=version or runtime.artifact.version,
        client=AsyncHttpClient(
            timeout=runtime.http.timeout,
            default_headers={"User-Agent": runtime.http.user_agent},
        ),
    )


async def run_check(source: ArtifactSource, address: str, expected_root: Optional[str]) -> EligibilityResult:
    """Check one address and release the source."""
    async with source:
        checker = EligibilityChecker(source, expected_root=expected_root)
        return await checker.check(address)


def print_result_human(result: EligibilityResult) -> None:
    """Print result in human-readable format."""
    print(f"address: {result.address}")
    print(f"status: {result.status.value}")
    print(f"eligible: {str(result.eligible).lower()}")
    if result.eligible:
        print(f"max_allowed: {result.max_allowed}")
        print(f"proof ({len(result.proof)}):")
        for sibling in result.proof:
            print(f"  {sibling}")
    if result.root:
        print(f"root: {result.root}")
    print(f"\n{result.user_message}")
    if result.message and not result.eligible:
        print(f"  detail: {result.message}")


def print_result_json(result: EligibilityResult) -> None:
    """Print result as JSON."""
    print(json.dumps(result.to_dict(), indent=2))


def check_cmd(args: Namespace) -> int:
    """
    Execute the check command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 eligible, 2 not eligible, 1 unavailable or bad input)
    """
    runtime = RuntimeConfig.from_env()
    cli_config = args.cli_config

    source_location = args.source or cli_config.proofs_source or runtime.artifact.proofs_url
    if not source_location:
        print("Error: No artifact source; pass --source or set MINTLIST_PROOFS_URL", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    if not is_hex_address(args.address):
        print(f"Error: Invalid address: {args.address}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    expected_root = args.root or cli_config.expected_root or runtime.resolve_expected_root()
    if expected_root and not is_hash_hex(expected_root):
        print(f"Error: Invalid root: {expected_root}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    source = build_source(source_location, runtime, version=args.proof_version)
    logger.info(f"Checking {args.address} against {source.describe()}")
    result = asyncio.run(run_check(source, args.address, expected_root))

    if args.json or args.cli_config.default_output_format == "json":
        print_result_json(result)
    else:
        print_result_human(result)

    if result.eligible:
        return EXIT_SUCCESS
    if result.status == EligibilityStatus.UNAVAILABLE:
        return EXIT_RUNTIME_ERROR
    return EXIT_VERIFICATION_FAILED
