"""
Dataset Normalizer

Parses a raw allocation table (CSV) into validated, deduplicated
AllocationRecords.

Rules:
- Header names are matched case-insensitively against fixed alias sets
- Rows with an empty address or empty amount are skipped
- A malformed address or amount aborts the whole run (no partial output)
- Duplicate addresses (case-insensitive) keep the largest allocation;
  ties keep the first-seen row
"""

from __future__ import annotations

import csv
import io
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Sequence

from mintlist.merkle.leaf import is_hex_address
from mintlist.schemas.allowlist import UINT256_MAX, AllocationRecord
from mintlist.schemas.errors import ErrorCodes, ValidationException


logger = logging.getLogger(__name__)


ADDRESS_HEADERS = frozenset({"wallet", "address", "wallet_address", "addy"})
AMOUNT_HEADERS = frozenset({"amount", "maxallowed", "allocation", "allo"})

_AMOUNT_PATTERN = re.compile(r"^[0-9]+$")
_BOM = "\ufeff"


@dataclass
class NormalizedDataset:
    """Deduplicated allocation records plus parsing statistics."""
    records: list[AllocationRecord] = field(default_factory=list)
    rows_read: int = 0
    rows_skipped: int = 0
    duplicates_collapsed: int = 0

    def __len__(self) -> int:
        return len(self.records)


def parse_csv_text(text: str) -> tuple[list[str], list[tuple[int, list[str]]]]:
    """
    Split CSV text into a lowercased header and numbered data rows.

    A leading BOM is stripped and blank lines are ignored.

    Returns:
        (header, [(line_number, cells), ...]) with 1-based line numbers

    Raises:
        ValidationException: If the text contains no lines
    """
    if text.startswith(_BOM):
        text = text[len(_BOM):]

    lines: list[tuple[int, list[str]]] = []
    reader = csv.reader(io.StringIO(text))
    for cells in reader:
        if not any(cell.strip() for cell in cells):
            continue
        lines.append((reader.line_num, [cell.strip() for cell in cells]))

    if not lines:
        raise ValidationException(
            "Dataset is empty",
            code=ErrorCodes.DATASET_EMPTY,
        )

    _, header_cells = lines[0]
    return [h.lower() for h in header_cells], lines[1:]


def find_columns(header: Sequence[str]) -> tuple[int, int]:
    """
    Locate the address and amount columns.

    When several columns match the same alias set, the right-most one wins.

    Raises:
        ValidationException: If either column cannot be found
    """
    address_idx = -1
    amount_idx = -1
    for i, name in enumerate(header):
        name = name.strip().lower()
        if name in ADDRESS_HEADERS:
            address_idx = i
        if name in AMOUNT_HEADERS:
            amount_idx = i

    if address_idx == -1:
        raise ValidationException(
            f"Address column not found; expected one of {sorted(ADDRESS_HEADERS)}",
            code=ErrorCodes.COLUMN_NOT_FOUND,
            column="address",
        )
    if amount_idx == -1:
        raise ValidationException(
            f"Amount column not found; expected one of {sorted(AMOUNT_HEADERS)}",
            code=ErrorCodes.COLUMN_NOT_FOUND,
            column="amount",
        )
    return address_idx, amount_idx


def parse_amount(value: str, *, line: int | None = None) -> int:
    """
    Parse an allocation as a non-negative decimal uint256.

    Raises:
        ValidationException: If the value is not a non-negative integer
                             or does not fit in 256 bits
    """
    if not _AMOUNT_PATTERN.match(value):
        raise ValidationException(
            f"Allocation is not a non-negative integer: {value!r} (line {line})",
            code=ErrorCodes.INVALID_AMOUNT,
            line=line,
            column="amount",
            value=value,
        )
    amount = int(value)
    if amount > UINT256_MAX:
        raise ValidationException(
            f"Allocation exceeds uint256: {value} (line {line})",
            code=ErrorCodes.INVALID_AMOUNT,
            line=line,
            column="amount",
            value=value,
        )
    return amount


def normalize_rows(
    header: Sequence[str],
    rows: Iterable[tuple[int, Sequence[str]]],
) -> NormalizedDataset:
    """
    Validate and deduplicate numbered rows.

    Args:
        header: Column names (matched case-insensitively)
        rows: (line_number, cells) pairs

    Returns:
        NormalizedDataset with records in first-seen address order

    Raises:
        ValidationException: On a missing column, malformed address or
                             amount, or when no valid rows remain
    """
    address_idx, amount_idx = find_columns(header)

    result = NormalizedDataset()
    by_address: dict[str, AllocationRecord] = {}

    for line, cells in rows:
        result.rows_read += 1
        address = cells[address_idx].strip() if address_idx < len(cells) else ""
        amount_text = cells[amount_idx].strip() if amount_idx < len(cells) else ""

        if not address or not amount_text:
            result.rows_skipped += 1
            continue

        if not is_hex_address(address):
            raise ValidationException(
                f"Invalid address: {address!r} (line {line})",
                code=ErrorCodes.INVALID_ADDRESS,
                line=line,
                column="address",
                value=address,
            )
        amount = parse_amount(amount_text, line=line)

        key = address.lower()
        previous = by_address.get(key)
        if previous is not None:
            result.duplicates_collapsed += 1
            if previous.max_allowed >= amount:
                continue
            logger.debug(f"Duplicate {key} on line {line}: {previous.max_allowed} -> {amount}")
        by_address[key] = AllocationRecord(address=key, max_allowed=amount)

    if not by_address:
        raise ValidationException(
            "No valid rows in dataset",
            code=ErrorCodes.DATASET_EMPTY,
        )

    result.records = list(by_address.values())
    return result


def normalize_csv_text(text: str) -> NormalizedDataset:
    """Parse and normalize CSV text."""
    header, rows = parse_csv_text(text)
    return normalize_rows(header, rows)


def load_dataset(path: str | Path) -> NormalizedDataset:
    """
    Read and normalize an allocation CSV file.

    Raises:
        ValidationException: If the file is missing or its contents invalid
    """
    path = Path(path)
    if not path.is_file():
        raise ValidationException(
            f"Dataset file not found: {path}",
            code=ErrorCodes.SCHEMA_VALIDATION_ERROR,
            details={"path": str(path)},
        )

    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise ValidationException(
            f"Dataset {path} is not valid UTF-8 (byte {e.start})",
            details={"path": str(path)},
        ) from e
    except OSError as e:
        raise ValidationException(
            f"Cannot read dataset {path}: {e}",
            details={"path": str(path)},
        ) from e

    dataset = normalize_csv_text(text)
    logger.info(
        f"Loaded {len(dataset)} allocations from {path} "
        f"(rows={dataset.rows_read}, skipped={dataset.rows_skipped}, "
        f"duplicates={dataset.duplicates_collapsed})"
    )
    return dataset


__all__ = [
    "ADDRESS_HEADERS",
    "AMOUNT_HEADERS",
    "NormalizedDataset",
    "parse_csv_text",
    "find_columns",
    "parse_amount",
    "normalize_rows",
    "normalize_csv_text",
    "load_dataset",
]
