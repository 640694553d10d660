"""Literal substring matching.

Field names routinely contain pattern metacharacters (dots, parentheses,
"+" and "/" in base64), so every search and replacement goes through a
pattern that matches its source text literally.
"""

import re
from functools import lru_cache


@lru_cache(maxsize=1024)
def literal_pattern(value: str) -> re.Pattern[str]:
    """Compile a pattern that matches ``value`` and nothing else.

    Args:
        value: Any string, including regex metacharacters.

    Returns:
        A compiled pattern equivalent to a plain substring search.

    Raises:
        ValueError: If ``value`` is empty, since it would match everywhere.
    """
    if not value:
        raise ValueError("Cannot build a literal pattern for an empty string")
    return re.compile(re.escape(value))


def count_literal(text: str, value: str) -> int:
    """Count non-overlapping occurrences of ``value`` in ``text``."""
    return sum(1 for _ in literal_pattern(value).finditer(text))


def replace_literal(text: str, value: str, replacement: str) -> tuple[str, int]:
    """Replace every occurrence of ``value`` with ``replacement``.

    The replacement is inserted verbatim; backslashes, group references and
    similar template syntax are not interpreted.

    Returns:
        The new text and the number of replacements made.
    """
    return literal_pattern(value).subn(lambda _match: replacement, text)
