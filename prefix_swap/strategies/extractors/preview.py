"""Preview field extractor.

The extraction strategy behind the upload-and-analyze front end. Tokens are
normalized before the prefix filter: the construct keyword is removed and the
text inside the last parenthesis pair is taken as the field name. This also
unwraps function-call placeholders such as ``format(a.date)``, but a field
whose own name contains parentheses is stripped twice (``если(a.fmt(x))``
yields ``x``). The batch strategy does not do this second strip.
"""

import logging

from prefix_swap.interfaces.extractor import (
    BaseFieldExtractor,
    UniqueNameSet,
    contains_prefix,
    sort_longest_first,
    tokenize,
    unique_in_order,
)

logger = logging.getLogger(__name__)


def last_parenthesis_content(value: str) -> str:
    """Return the text between the last "(" and its closing ")".

    Runs to the end of the string when the parenthesis is never closed.
    Strings without "(" are returned unchanged.
    """
    start = value.rfind("(")
    if start == -1:
        return value
    end = value.find(")", start + 1)
    if end == -1:
        return value[start + 1:]
    return value[start + 1:end]


def collect_prefixes(names, separator: str = ".") -> list[str]:
    """Return the sorted namespace segments found before the first separator.

    Args:
        names: Field names, e.g. a UniqueNameSet.
        separator: Namespace separator.

    Returns:
        Distinct non-empty prefixes in lexical order.
    """
    prefixes = set()
    for name in names:
        head, found, _ = name.partition(separator)
        if found and head:
            prefixes.add(head)
    return sorted(prefixes)


class PreviewFieldExtractor(BaseFieldExtractor):
    """Normalize-first extractor with last-parenthesis extraction."""

    @property
    def name(self) -> str:
        return "preview"

    def strip_wrapper(self, token: str) -> str:
        """Remove a leading construct keyword and, for loops, the binding."""
        syntax = self._syntax

        if token.startswith(syntax.loop_open):
            body = token[len(syntax.loop_open):]
            _, found, source = body.partition(syntax.loop_separator)
            return source if found else body

        for opener in (syntax.choice_open, syntax.conditional_open):
            if token.startswith(opener):
                return token[len(opener):]

        return token

    def normalize(self, token: str) -> str:
        name = last_parenthesis_content(self.strip_wrapper(token))
        return name.rstrip(")").strip()

    def extract(
        self,
        text: str,
        old_prefix: str = "",
        clean_constructs: bool = True,
        sort_by_length: bool = True,
    ) -> UniqueNameSet:
        tokens = tokenize(text)

        if clean_constructs:
            normalized = [self.normalize(token) for token in tokens]
        else:
            normalized = tokens

        matched = [name for name in normalized if name and contains_prefix(name, old_prefix)]
        names = unique_in_order(matched)
        if sort_by_length:
            names = sort_longest_first(names)

        logger.info(
            f"Preview extraction: {len(tokens)} tokens, {len(matched)} matched, "
            f"{len(names)} unique"
        )
        return UniqueNameSet(
            names=tuple(names),
            old_prefix=old_prefix,
            strategy=self.name,
            token_count=len(tokens),
            matched_count=len(matched),
        )
