"""
Allocation dataset parsing and normalization.
"""

from .normalizer import (
    ADDRESS_HEADERS,
    AMOUNT_HEADERS,
    NormalizedDataset,
    find_columns,
    load_dataset,
    normalize_csv_text,
    normalize_rows,
    parse_amount,
    parse_csv_text,
)

__all__ = [
    "ADDRESS_HEADERS",
    "AMOUNT_HEADERS",
    "NormalizedDataset",
    "find_columns",
    "load_dataset",
    "normalize_csv_text",
    "normalize_rows",
    "parse_amount",
    "parse_csv_text",
]
