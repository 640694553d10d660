"""Replacement engine.

Builds ordered replacement maps, applies them to document text and verifies
that no original field forms remain.
"""

from prefix_swap.engine.builder import (
    build_replacement_map,
    decode_base64,
    encode_base64,
)
from prefix_swap.engine.models import (
    EntryReport,
    ReplacementEntry,
    ReplacementMap,
    ReplacementReport,
    Residue,
    VerificationResult,
)
from prefix_swap.engine.substitutor import apply_replacements
from prefix_swap.engine.verifier import report_coverage, verify_replacements

__all__ = [
    "EntryReport",
    "ReplacementEntry",
    "ReplacementMap",
    "ReplacementReport",
    "Residue",
    "VerificationResult",
    "apply_replacements",
    "build_replacement_map",
    "decode_base64",
    "encode_base64",
    "report_coverage",
    "verify_replacements",
]
