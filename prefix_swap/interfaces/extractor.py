"""Abstract base class for field extraction strategies.

The Strategy Pattern lets the batch pipeline and the interactive preview
extract placeholder field names with different normalization rules while
sharing one contract.
"""

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass

# A "}" closes the nearest open "{"; spans never contain braces themselves.
BRACE_TOKEN_PATTERN = re.compile(r"\{([^{}]+)\}")


@dataclass(frozen=True)
class ConstructSyntax:
    """Keywords of the control constructs that can wrap a field reference.

    Attributes:
        loop: Loop keyword, as in ``loop(<binding> <separator> <source>)``.
        loop_separator: Text between the loop binding and its source.
        choice: Choice keyword, as in ``choice(<inner>)``.
        conditional: Conditional keyword, as in ``if(<inner>)``.
    """

    loop: str = "цикл"
    loop_separator: str = " из "
    choice: str = "выбор"
    conditional: str = "если"

    @property
    def loop_open(self) -> str:
        return self.loop + "("

    @property
    def choice_open(self) -> str:
        return self.choice + "("

    @property
    def conditional_open(self) -> str:
        return self.conditional + "("


DEFAULT_SYNTAX = ConstructSyntax()


@dataclass(frozen=True)
class UniqueNameSet:
    """Deduplicated field names produced by an extraction strategy.

    Attributes:
        names: Unique normalized names, longest first when sorting was requested.
        old_prefix: The prefix substring the names were filtered by.
        strategy: Name of the strategy that produced the set.
        token_count: Number of brace-delimited tokens found in the source text.
        matched_count: Number of tokens that passed the prefix filter.
    """

    names: tuple[str, ...]
    old_prefix: str
    strategy: str
    token_count: int = 0
    matched_count: int = 0

    def __len__(self) -> int:
        return len(self.names)

    def __iter__(self):
        return iter(self.names)

    def __contains__(self, name: object) -> bool:
        return name in self.names


def tokenize(text: str) -> list[str]:
    """Return the content of every brace-delimited span, left to right."""
    return BRACE_TOKEN_PATTERN.findall(text)


def contains_prefix(value: str, prefix: str) -> bool:
    """Substring predicate used for prefix filtering."""
    return prefix in value


def unique_in_order(values: list[str]) -> list[str]:
    """Drop duplicates, keeping the first occurrence of each value."""
    return list(dict.fromkeys(values))


def sort_longest_first(values: list[str]) -> list[str]:
    """Stable sort by descending character length."""
    return sorted(values, key=len, reverse=True)


class BaseFieldExtractor(ABC):
    """Abstract base class for field extraction strategies.

    All concrete extractors must inherit from this class and implement
    `normalize` and `extract`.

    Example:
        ```python
        extractor = BatchFieldExtractor()
        names = extractor.extract(xml, "old.", clean_constructs=True, sort_by_length=True)
        ```
    """

    def __init__(self, syntax: ConstructSyntax = DEFAULT_SYNTAX) -> None:
        self._syntax = syntax

    @property
    def syntax(self) -> ConstructSyntax:
        return self._syntax

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the registry name of this strategy."""
        ...

    @abstractmethod
    def normalize(self, token: str) -> str:
        """Strip control-construct wrappers from a single token.

        Args:
            token: Verbatim content of one brace-delimited span.

        Returns:
            The field name the token refers to, or the token unchanged.
        """
        ...

    @abstractmethod
    def extract(
        self,
        text: str,
        old_prefix: str,
        clean_constructs: bool = True,
        sort_by_length: bool = True,
    ) -> UniqueNameSet:
        """Extract unique field names carrying a prefix from raw document text.

        Args:
            text: Raw document XML.
            old_prefix: Prefix substring a field must contain.
            clean_constructs: Whether to strip loop/choice/conditional wrappers.
            sort_by_length: Whether to order names longest first.

        Returns:
            The unique names found.
        """
        ...
