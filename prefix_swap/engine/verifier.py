"""Post-substitution coverage check."""

import logging
import warnings

from prefix_swap.core.exceptions import CoverageWarning
from prefix_swap.engine.literal import count_literal
from prefix_swap.engine.models import ReplacementMap, Residue, VerificationResult

logger = logging.getLogger(__name__)


def verify_replacements(output_text: str, replacement_map: ReplacementMap) -> VerificationResult:
    """Find original field forms that survived substitution.

    Residue is either a name that is a substring of an already rewritten
    longer replacement, or a real coverage gap. The text is not modified.

    Args:
        output_text: Text produced by apply_replacements.
        replacement_map: The map that was applied.

    Returns:
        The offending entries, empty when the output is clean.
    """
    residues = []
    for entry in replacement_map.entries:
        text_count = count_literal(output_text, entry.original)
        encoded_count = count_literal(output_text, entry.original_encoded)
        if text_count or encoded_count:
            residues.append(
                Residue(
                    original=entry.original,
                    text_count=text_count,
                    encoded_count=encoded_count,
                )
            )

    return VerificationResult(residues=tuple(residues))


def report_coverage(result: VerificationResult) -> None:
    """Log residue and raise a CoverageWarning when the output is not clean."""
    if result.all_clean:
        logger.info("Verification passed: no original field forms remain")
        return

    for residue in result.residues:
        if residue.text_count:
            logger.warning(
                f"{residue.text_count} text occurrences of {residue.original[:30]!r} remain"
            )
        if residue.encoded_count:
            logger.warning(
                f"{residue.encoded_count} base64 occurrences of {residue.original[:30]!r} remain"
            )

    warnings.warn(
        f"{len(result.residues)} fields still have original occurrences after substitution",
        CoverageWarning,
        stacklevel=2,
    )
