"""
Allowlist Generator

Batch job turning an allocation dataset into a committed Merkle root and
per-address proofs:

    dataset -> normalize -> encode leaves -> build tree -> prove
            -> self-verify -> root.json / leaves.json / proofs.json
"""

from generator.pipeline import GenerationResult, generate_artifact, run_generation

__all__ = [
    "GenerationResult",
    "generate_artifact",
    "run_generation",
]
