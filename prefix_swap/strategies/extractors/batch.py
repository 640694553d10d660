"""Batch field extractor.

The extraction strategy of the file-based pipeline: tokens are filtered by
prefix on their raw form, then at most one control-construct wrapper is
stripped from each survivor.
"""

import logging
import re

from prefix_swap.interfaces.extractor import (
    DEFAULT_SYNTAX,
    BaseFieldExtractor,
    ConstructSyntax,
    UniqueNameSet,
    contains_prefix,
    sort_longest_first,
    tokenize,
    unique_in_order,
)

logger = logging.getLogger(__name__)


class BatchFieldExtractor(BaseFieldExtractor):
    """Prefix-first extractor with single-level wrapper stripping.

    Recognized shapes (with the default keywords):

    - ``цикл(item из a.list)`` becomes ``a.list``
    - ``выбор(a.kind)`` becomes ``a.kind``
    - ``если(a.flag)`` becomes ``a.flag``

    Anything else is kept verbatim, including function-call wrappers such as
    ``format(a.date)``; those are still rewritten correctly because the
    substitution pass works on substrings.
    """

    def __init__(self, syntax: ConstructSyntax = DEFAULT_SYNTAX) -> None:
        super().__init__(syntax)
        self._loop_pattern = re.compile(
            re.escape(syntax.loop_open)
            + r"[^)]+"
            + re.escape(syntax.loop_separator)
            + r"([^)]+)\)"
        )

    @property
    def name(self) -> str:
        return "batch"

    def normalize(self, token: str) -> str:
        syntax = self._syntax

        if token.startswith(syntax.loop_open) and syntax.loop_separator in token:
            match = self._loop_pattern.match(token)
            return match.group(1) if match else token

        # Only one wrapper level is removed.
        for opener in (syntax.choice_open, syntax.conditional_open):
            if token.startswith(opener) and token.endswith(")"):
                return token[len(opener):-1]

        return token

    def extract(
        self,
        text: str,
        old_prefix: str,
        clean_constructs: bool = True,
        sort_by_length: bool = True,
    ) -> UniqueNameSet:
        tokens = tokenize(text)
        logger.info(f"Found {len(tokens)} brace-delimited tokens")

        matched = [token for token in tokens if contains_prefix(token, old_prefix)]
        logger.info(f"{len(matched)} tokens contain prefix {old_prefix!r}")

        if clean_constructs:
            cleaned = [self.normalize(token) for token in matched]
        else:
            cleaned = matched

        names = unique_in_order([name for name in cleaned if name])
        if sort_by_length:
            names = sort_longest_first(names)

        logger.info(f"{len(names)} unique field names remain")
        return UniqueNameSet(
            names=tuple(names),
            old_prefix=old_prefix,
            strategy=self.name,
            token_count=len(tokens),
            matched_count=len(matched),
        )
