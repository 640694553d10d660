"""Replacement map construction.

Turns the unique field names of a document into an ordered replacement map.
Each entry also carries the base64 form of both names, because field-code
metadata in the document stores names base64-encoded.
"""

import base64
import binascii
import logging
from collections.abc import Iterable

from prefix_swap.core.exceptions import ConfigurationError
from prefix_swap.engine.models import ReplacementEntry, ReplacementMap

logger = logging.getLogger(__name__)


def encode_base64(text: str) -> str:
    """Return the standard padded base64 encoding of the UTF-8 bytes of ``text``."""
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


def decode_base64(encoded: str) -> str:
    """Inverse of encode_base64.

    Raises:
        ValueError: If ``encoded`` is not valid base64 of UTF-8 text.
    """
    try:
        return base64.b64decode(encoded.encode("ascii"), validate=True).decode("utf-8")
    except (binascii.Error, UnicodeError) as e:
        raise ValueError(f"Not base64-encoded UTF-8 text: {encoded!r}") from e


def build_entry(original: str, old_prefix: str, new_prefix: str) -> ReplacementEntry:
    """Build the entry for one field name.

    Every occurrence of ``old_prefix`` in the name is swapped, not only the
    leading one.
    """
    replacement = original.replace(old_prefix, new_prefix)
    return ReplacementEntry(
        original=original,
        original_encoded=encode_base64(original),
        replacement=replacement,
        replacement_encoded=encode_base64(replacement),
        length=len(original),
    )


def build_replacement_map(
    names: Iterable[str],
    old_prefix: str,
    new_prefix: str,
) -> ReplacementMap:
    """Build a replacement map ordered longest original first.

    Equal-length entries keep their input order, so the same input always
    produces the same map.

    Args:
        names: Unique field names, e.g. a UniqueNameSet or the uniqueNames artifact list.
        old_prefix: Prefix substring to replace.
        new_prefix: Prefix substring to insert.

    Returns:
        The ordered replacement map.

    Raises:
        ConfigurationError: If ``old_prefix`` is empty.
    """
    if not old_prefix:
        raise ConfigurationError("Original prefix must not be empty")
    if old_prefix == new_prefix:
        logger.warning(f"Old and new prefix are identical ({old_prefix!r}); map is a no-op")

    entries = []
    for name in dict.fromkeys(names):
        if not name:
            continue
        if old_prefix not in name:
            logger.warning(f"Field {name!r} does not contain prefix {old_prefix!r}")
        entries.append(build_entry(name, old_prefix, new_prefix))

    entries.sort(key=lambda entry: entry.length, reverse=True)

    logger.info(
        f"Built {len(entries)} replacements: {old_prefix!r} -> {new_prefix!r}"
    )
    return ReplacementMap(prefix_from=old_prefix, prefix_to=new_prefix, entries=tuple(entries))
