"""Order-sensitive substitution of field names in document text.

Shorter field names are often substrings of longer ones (``old.field`` inside
``old.field.sub``). Entries are therefore applied strictly in map order,
which the builder sets to longest first; this module never re-sorts.
"""

import logging

from prefix_swap.engine.literal import replace_literal
from prefix_swap.engine.models import EntryReport, ReplacementMap, ReplacementReport

logger = logging.getLogger(__name__)


def _preview(value: str, width: int = 50) -> str:
    return value if len(value) <= width else value[:width] + "..."


def apply_replacements(text: str, replacement_map: ReplacementMap) -> tuple[str, ReplacementReport]:
    """Rewrite every original and base64-encoded original in ``text``.

    Args:
        text: Raw document XML.
        replacement_map: Entries to apply, in order.

    Returns:
        The rewritten text and the replacement counts.
    """
    if not replacement_map.is_longest_first:
        logger.warning(
            "Replacement map is not ordered longest first; shorter names may "
            "corrupt longer ones. Applying in the given order."
        )

    logger.info(f"Applying {len(replacement_map)} replacements (longest first)")

    result = text
    reports = []
    total = 0

    for entry in replacement_map.entries:
        result, text_count = replace_literal(result, entry.original, entry.replacement)
        result, encoded_count = replace_literal(
            result, entry.original_encoded, entry.replacement_encoded
        )

        if text_count:
            logger.debug(f"Text: {_preview(entry.original)!r} -> {text_count} replacements")
        if encoded_count:
            logger.debug(f"Base64: {_preview(entry.original_encoded)!r} -> {encoded_count} replacements")

        reports.append(
            EntryReport(
                original=entry.original,
                text_count=text_count,
                encoded_count=encoded_count,
            )
        )
        total += text_count + encoded_count

    logger.info(f"Total replacements: {total}")
    return result, ReplacementReport(entries=tuple(reports), total=total)
