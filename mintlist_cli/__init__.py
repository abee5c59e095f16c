"""
Mintlist CLI

Command-line interface for generating and checking Merkle allowlists.

Usage:
    python -m mintlist_cli generate allowlist.csv --out merkle/
    python -m mintlist_cli verify merkle/
    python -m mintlist_cli check 0xabc... --source merkle/
"""

__version__ = "0.1.0"
