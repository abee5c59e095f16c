"""
CLI Main Entry Point

Parses command-line arguments and dispatches to subcommands.

Usage:
    python -m mintlist_cli generate <input.csv> [--out DIR] [--json]
    python -m mintlist_cli verify <artifact_dir> [--address ADDR] [--root ROOT] [--json]
    python -m mintlist_cli check <address> [--source URL|DIR] [--root ROOT] [--version V] [--json]
    python -m mintlist_cli config --init

Environment Variables:
    MINTLIST_LOG_LEVEL          Log level (default: INFO)
    MINTLIST_LOG_FILE           Also log to this file
    MINTLIST_OUTPUT_DIR         Default artifact directory for generate (default: merkle)
    MINTLIST_PROOFS_URL         Published proofs.json URL for check
    MINTLIST_ROOT_URL           Published root.json URL for check
    MINTLIST_PROOF_VERSION      Cache-busting version for artifact fetches
    MINTLIST_EXPECTED_ROOT      Root committed on-chain
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import traceback
from pathlib import Path
from typing import Sequence

from mintlist_cli import __version__
from mintlist_cli.commands import check, generate, verify
from mintlist_cli.config import DEFAULT_CONFIG_FILE, get_default_config_template, load_config


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


def setup_logging(level: str = "INFO", log_file: str | None = None) -> None:
    """Configure logging for the CLI."""
    log_level = getattr(logging, level.upper(), logging.INFO)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=handlers,
        force=True,
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="mintlist",
        description="Mintlist CLI - Generate Merkle allowlists, verify artifacts, and check eligibility.",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=None,
        help="Path to configuration file (default: ./mintlist.json or ~/.config/mintlist/config.json)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (overrides config)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- generate command ---
    generate_parser = subparsers.add_parser(
        "generate",
        help="Generate root and proofs from an allocation CSV",
        description="Normalize the dataset, build the Merkle tree, and write root.json, leaves.json and proofs.json.",
    )
    generate_parser.add_argument(
        "input",
        type=str,
        help="Allocation CSV (address column plus amount column)",
    )
    generate_parser.add_argument(
        "--out", "-o",
        type=str,
        default=None,
        help="Output directory (default: from config or ./merkle)",
    )
    generate_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON summary",
    )
    generate_parser.add_argument(
        "--debug",
        action="store_true",
        default=False,
        help="Print tracebacks on unexpected errors",
    )
    generate_parser.set_defaults(func=generate.generate_cmd)

    # --- verify command ---
    verify_parser = subparsers.add_parser(
        "verify",
        help="Verify an allowlist artifact offline",
        description="Recompute the root from every proof and optionally compare with an on-chain root.",
    )
    verify_parser.add_argument(
        "artifact_path",
        type=str,
        help="Artifact directory containing root.json and proofs.json",
    )
    verify_parser.add_argument(
        "--address",
        type=str,
        default=None,
        help="Verify only this address",
    )
    verify_parser.add_argument(
        "--root",
        type=str,
        default=None,
        help="Expected (on-chain) root to compare with",
    )
    verify_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON report",
    )
    verify_parser.add_argument(
        "--debug",
        action="store_true",
        default=False,
        help="Print tracebacks on unexpected errors",
    )
    verify_parser.set_defaults(func=verify.verify_cmd)

    # --- check command ---
    check_parser = subparsers.add_parser(
        "check",
        help="Check whether an address may mint",
        description="Fetch the published proofs, re-verify the address's proof and report eligibility.",
    )
    check_parser.add_argument(
        "address",
        type=str,
        help="Wallet address (0x-prefixed, 20 bytes)",
    )
    check_parser.add_argument(
        "--source",
        type=str,
        default=None,
        help="proofs.json URL or local artifact directory (default: from config)",
    )
    check_parser.add_argument(
        "--root",
        type=str,
        default=None,
        help="Expected (on-chain) root",
    )
    check_parser.add_argument(
        "--version",
        dest="proof_version",
        type=str,
        default=None,
        help="Cache-busting artifact version, sent as ?v=<version>",
    )
    check_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON result",
    )
    check_parser.add_argument(
        "--debug",
        action="store_true",
        default=False,
        help="Print tracebacks on unexpected errors",
    )
    check_parser.set_defaults(func=check.check_cmd)

    # --- config command ---
    config_parser = subparsers.add_parser(
        "config",
        help="Manage CLI configuration",
        description="Initialize or display configuration.",
    )
    config_parser.add_argument(
        "--init",
        action="store_true",
        default=False,
        help="Create a template configuration file",
    )
    config_parser.add_argument(
        "--show",
        action="store_true",
        default=False,
        help="Show current configuration",
    )
    config_parser.add_argument(
        "--path",
        type=str,
        default=DEFAULT_CONFIG_FILE,
        help=f"Path for config file (default: {DEFAULT_CONFIG_FILE})",
    )
    config_parser.set_defaults(func=config_cmd)

    return parser


def config_cmd(args: argparse.Namespace) -> int:
    """Handle config command."""
    if args.init:
        config_path = Path(args.path)
        if config_path.exists():
            print(f"Error: Config file already exists: {config_path}", file=sys.stderr)
            return EXIT_RUNTIME_ERROR

        config_path.write_text(get_default_config_template())
        print(f"Created configuration file: {config_path}")
        print("\nEdit this file to configure your settings.")
        print("You can also use environment variables (MINTLIST_* prefix).")
        return EXIT_SUCCESS

    if args.show:
        config_path = Path(args.path)
        config = load_config(config_path if config_path.exists() else None)
        print(json.dumps(config.to_dict(), indent=2))
        return EXIT_SUCCESS

    # Default: show help
    print("Usage: mintlist config [--init|--show]")
    print("  --init  Create a template configuration file")
    print("  --show  Show current configuration")
    return EXIT_SUCCESS


def main(argv: Sequence[str] | None = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0=success, 1=error, 2=verification failed or not eligible)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return EXIT_RUNTIME_ERROR

    # Load configuration
    try:
        config = load_config(args.config)
    except (OSError, ValueError) as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    # Setup logging
    log_level = args.log_level or config.log_level
    setup_logging(level=log_level, log_file=config.log_file)

    # Attach config to args for commands to use
    args.cli_config = config

    try:
        return args.func(args)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except Exception as e:
        if getattr(args, "debug", False):
            traceback.print_exc()
        else:
            print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR


if __name__ == "__main__":
    sys.exit(main())
