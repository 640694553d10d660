"""Abstract base classes for extraction and archive strategies."""

from prefix_swap.interfaces.archive import BaseArchiveReader
from prefix_swap.interfaces.extractor import (
    DEFAULT_SYNTAX,
    BaseFieldExtractor,
    ConstructSyntax,
    UniqueNameSet,
)

__all__ = [
    "BaseArchiveReader",
    "BaseFieldExtractor",
    "ConstructSyntax",
    "DEFAULT_SYNTAX",
    "UniqueNameSet",
]
