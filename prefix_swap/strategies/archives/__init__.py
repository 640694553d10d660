"""Concrete archive reader implementations."""

from prefix_swap.strategies.archives.zip_reader import DOCUMENT_ENTRY, ZipArchiveReader

__all__ = [
    "DOCUMENT_ENTRY",
    "ZipArchiveReader",
]
