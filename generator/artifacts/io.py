"""
Artifact IO
File: io.py

Purpose: Save and load allowlist artifacts to/from a directory of three
JSON files, and re-verify a loaded artifact.

Files are pretty-printed (2-space indent, trailing newline) and carry no
timestamps, so the same dataset always produces byte-identical output.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError as PydanticValidationError

from mintlist.crypto.hashing import is_hash_hex
from mintlist.merkle.merkle_proofs import MerkleVerifier
from mintlist.schemas.allowlist import AllowlistArtifact
from mintlist.schemas.errors import ArtifactIOException


logger = logging.getLogger(__name__)


# File name constants
ROOT_FILE = "root.json"
LEAVES_FILE = "leaves.json"
PROOFS_FILE = "proofs.json"


def dump_json(obj: Any) -> str:
    """Serialize a document the way artifact files are written."""
    return json.dumps(obj, indent=2) + "\n"


def _stage(path: Path, content: bytes) -> str:
    """Write content to a temp file beside path and return its name."""
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(content)
    except BaseException:
        os.unlink(tmp_name)
        raise
    return tmp_name


def _restore(replaced: list[tuple[Path, Optional[bytes]]]) -> None:
    """Put back files overwritten by a save that failed part-way."""
    for path, previous in reversed(replaced):
        try:
            if previous is None:
                path.unlink()
            else:
                tmp_name = _stage(path, previous)
                try:
                    os.replace(tmp_name, path)
                except OSError:
                    os.unlink(tmp_name)
                    raise
        except OSError as e:
            logger.error(f"Could not restore {path} after failed write: {e}")


def _read_json_file(path: Path) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ArtifactIOException(f"Cannot read {path.name}: {e}", path=str(path)) from e
    except ValueError as e:
        raise ArtifactIOException(f"Invalid JSON in {path.name}: {e}", path=str(path)) from e


def save_artifact(artifact: AllowlistArtifact, out_dir: str | Path) -> dict[str, Path]:
    """
    Save an artifact to a directory.

    All three files are staged as temp files first, then renamed into
    place with root.json last. If any step fails, files already replaced
    are restored, so readers never see a new root beside old proofs.

    Args:
        artifact: The artifact to save
        out_dir: Output directory path (created if missing)

    Returns:
        Mapping of file name to written path

    Raises:
        ArtifactIOException: If the directory or a file cannot be written
    """
    out_path = Path(out_dir)
    documents = [
        (PROOFS_FILE, artifact.to_proofs_document()),
        (LEAVES_FILE, artifact.to_leaves_document()),
        (ROOT_FILE, artifact.to_root_document()),
    ]

    staged: list[tuple[Path, str]] = []
    replaced: list[tuple[Path, Optional[bytes]]] = []
    try:
        out_path.mkdir(parents=True, exist_ok=True)
        for filename, document in documents:
            file_path = out_path / filename
            staged.append((file_path, _stage(file_path, dump_json(document).encode("utf-8"))))

        for file_path, tmp_name in staged:
            previous = file_path.read_bytes() if file_path.exists() else None
            os.replace(tmp_name, file_path)
            replaced.append((file_path, previous))
    except OSError as e:
        _restore(replaced)
        raise ArtifactIOException(f"Failed to write artifact: {e}", path=str(out_path)) from e
    finally:
        for _, tmp_name in staged:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)

    logger.info(f"Wrote artifact with {len(artifact)} entries to {out_path}")
    return {name: out_path / name for name in (ROOT_FILE, LEAVES_FILE, PROOFS_FILE)}


def load_artifact(dir_path: str | Path) -> AllowlistArtifact:
    """
    Load an artifact from a directory.

    root.json and proofs.json are required; leaves.json is optional.

    Raises:
        ArtifactIOException: If a required file is missing or malformed
    """
    path = Path(dir_path)
    if not path.is_dir():
        raise ArtifactIOException(f"Not a directory: {path}", path=str(path))

    for required in (ROOT_FILE, PROOFS_FILE):
        if not (path / required).exists():
            raise ArtifactIOException(f"Required file missing: {required}", path=str(path / required))

    root_document = _read_json_file(path / ROOT_FILE)
    proofs_document = _read_json_file(path / PROOFS_FILE)
    leaves_path = path / LEAVES_FILE
    leaves_document = _read_json_file(leaves_path) if leaves_path.exists() else None

    if not isinstance(root_document, dict) or "root" not in root_document:
        raise ArtifactIOException(f"{ROOT_FILE} has no 'root'", path=str(path / ROOT_FILE))
    if not isinstance(proofs_document, dict):
        raise ArtifactIOException(f"{PROOFS_FILE} is not a JSON object", path=str(path / PROOFS_FILE))
    if leaves_document is not None and not isinstance(leaves_document, list):
        raise ArtifactIOException(f"{LEAVES_FILE} is not a JSON array", path=str(leaves_path))

    try:
        return AllowlistArtifact.from_documents(root_document, proofs_document, leaves_document)
    except PydanticValidationError as e:
        raise ArtifactIOException(
            f"Malformed artifact in {path}: {e.error_count()} validation error(s)",
            path=str(path),
            details={"errors": e.errors(include_url=False, include_context=False)},
        ) from e


@dataclass
class ArtifactReport:
    """Result of re-verifying every entry of an artifact."""
    root: str
    entries_checked: int = 0
    failures: list[str] = field(default_factory=list)
    expected_root: Optional[str] = None

    @property
    def root_matches(self) -> bool:
        """True when no expected root was given, or it equals the artifact root."""
        return self.expected_root is None or self.expected_root == self.root

    @property
    def ok(self) -> bool:
        return self.root_matches and not self.failures

    def to_dict(self) -> dict[str, Any]:
        return {
            "ok": self.ok,
            "root": self.root,
            "expected_root": self.expected_root,
            "root_matches": self.root_matches,
            "entries_checked": self.entries_checked,
            "failures": list(self.failures),
        }


def verify_artifact(
    artifact: AllowlistArtifact,
    *,
    expected_root: Optional[str] = None,
    addresses: Optional[list[str]] = None,
) -> ArtifactReport:
    """
    Re-verify artifact entries against the artifact root.

    Args:
        artifact: The artifact to check
        expected_root: Root committed on-chain; compared with the artifact root
        addresses: Restrict the check to these addresses (default: all).
            A requested address absent from the artifact counts as a failure.

    Returns:
        ArtifactReport listing every address whose proof does not verify
    """
    if expected_root is not None:
        if not is_hash_hex(expected_root):
            raise ValueError(f"expected_root is not a 32-byte hex value: {expected_root!r}")
        expected_root = expected_root.lower()

    report = ArtifactReport(root=artifact.root, expected_root=expected_root)
    targets = sorted(artifact.entries) if addresses is None else [a.lower() for a in addresses]

    for address in targets:
        report.entries_checked += 1
        entry = artifact.get(address)
        if entry is None:
            report.failures.append(address)
            continue
        if not MerkleVerifier.verify_allocation(address, entry.max_allowed, entry.proof, artifact.root):
            report.failures.append(address)

    if report.failures:
        logger.warning(f"{len(report.failures)} of {report.entries_checked} entries failed verification")
    if not report.root_matches:
        logger.warning(f"Artifact root {artifact.root} does not match expected root {expected_root}")
    return report


__all__ = [
    "ROOT_FILE",
    "LEAVES_FILE",
    "PROOFS_FILE",
    "ArtifactReport",
    "dump_json",
    "save_artifact",
    "load_artifact",
    "verify_artifact",
]
