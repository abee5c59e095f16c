"""
CLI command modules.
"""

from mintlist_cli.commands import check, generate, verify

__all__ = ["check", "generate", "verify"]
