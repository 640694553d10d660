"""Concrete strategy implementations."""

from prefix_swap.strategies.archives import (
    ZipArchiveReader,
)
from prefix_swap.strategies.extractors import (
    BatchFieldExtractor,
    PreviewFieldExtractor,
)

__all__ = [
    "BatchFieldExtractor",
    "PreviewFieldExtractor",
    "ZipArchiveReader",
]
