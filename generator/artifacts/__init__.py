"""
Allowlist Artifact IO

Saving, loading and re-verifying the root/leaves/proofs file set.
"""

from generator.artifacts.io import (
    ROOT_FILE,
    LEAVES_FILE,
    PROOFS_FILE,
    ArtifactReport,
    dump_json,
    save_artifact,
    load_artifact,
    verify_artifact,
)

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
