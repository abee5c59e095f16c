"""
Test fixtures package for mintlist tests.

- allowlist_fixtures.py: golden addresses, leaves, roots and proofs, plus
  record / CSV factories

Usage:
    from fixtures import make_records, THREE_ROOT

    def test_something():
        tree = AllowlistTree(make_records(3))
        assert to_hex(tree.root) == THREE_ROOT
"""

from .allowlist_fixtures import (
    ADDR_1,
    ADDR_2,
    ADDR_3,
    ADDR_4,
    ADDR_5,
    LEAF_1,
    LEAF_2,
    LEAF_3,
    LEAF_4,
    LEAF_5,
    THREE_ROOT,
    THREE_NODE_13,
    THREE_PROOFS,
    THREE_LEAF_ORDER,
    FIVE_ROOT,
    FIVE_PROOFS,
    FIVE_LEAF_ORDER,
    addr,
    make_records,
    make_csv_text,
    make_random_addresses,
)

__all__ = [
    "ADDR_1",
    "ADDR_2",
    "ADDR_3",
    "ADDR_4",
    "ADDR_5",
    "LEAF_1",
    "LEAF_2",
    "LEAF_3",
    "LEAF_4",
    "LEAF_5",
    "THREE_ROOT",
    "THREE_NODE_13",
    "THREE_PROOFS",
    "THREE_LEAF_ORDER",
    "FIVE_ROOT",
    "FIVE_PROOFS",
    "FIVE_LEAF_ORDER",
    "addr",
    "make_records",
    "make_csv_text",
    "make_random_addresses",
]
