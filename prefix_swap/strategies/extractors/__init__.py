"""Concrete field extraction strategies."""

from prefix_swap.strategies.extractors.batch import BatchFieldExtractor
from prefix_swap.strategies.extractors.preview import (
    PreviewFieldExtractor,
    collect_prefixes,
    last_parenthesis_content,
)

__all__ = [
    "BatchFieldExtractor",
    "PreviewFieldExtractor",
    "collect_prefixes",
    "last_parenthesis_content",
]
