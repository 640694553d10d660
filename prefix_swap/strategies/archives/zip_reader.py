"""Zip-based template archive reader.

Reads the main document part of a .docx template, or of the .docx carried
inside an .fdt wrapper archive.
"""

import io
import logging
import os
import zipfile
import zlib

from prefix_swap.core.exceptions import (
    ArchiveEntryMissingError,
    ParseError,
    UnsupportedArchiveError,
)
from prefix_swap.interfaces.archive import BaseArchiveReader

logger = logging.getLogger(__name__)

DOCUMENT_ENTRY = "word/document.xml"

# Errors ZipFile.read raises for a damaged or undecodable member.
CORRUPT_MEMBER_ERRORS = (zipfile.BadZipFile, zlib.error, NotImplementedError, EOFError)


class ZipArchiveReader(BaseArchiveReader):
    """Reader for .docx templates and .fdt wrappers around them."""

    def __init__(self, document_entry: str = DOCUMENT_ENTRY, encoding: str = "utf-8") -> None:
        """Initialize the reader.

        Args:
            document_entry: Member name of the main document part.
            encoding: Character encoding of the document part.
        """
        self._document_entry = document_entry
        self._encoding = encoding

    @property
    def supported_extensions(self) -> set[str]:
        return {".docx", ".fdt"}

    def read_document_bytes(self, data: bytes, filename: str) -> str:
        _, ext = os.path.splitext(filename)
        ext = ext.lower()
        if ext not in self.supported_extensions:
            raise UnsupportedArchiveError(
                f"Unsupported template type '{ext or filename}'. "
                f"Supported: {', '.join(sorted(self.supported_extensions))}"
            )

        archive = self._open(data, filename)
        with archive:
            if ext == ".fdt" and self._document_entry not in archive.namelist():
                return self._read_nested(archive, filename)
            return self._read_entry(archive, filename)

    def _open(self, data: bytes, filename: str) -> zipfile.ZipFile:
        try:
            return zipfile.ZipFile(io.BytesIO(data), "r")
        except zipfile.BadZipFile as e:
            raise ParseError(f"{filename} is not a valid zip archive") from e

    def _read_member(self, archive: zipfile.ZipFile, name: str, filename: str) -> bytes:
        try:
            return archive.read(name)
        except CORRUPT_MEMBER_ERRORS as e:
            raise ParseError(f"{name} in {filename} is corrupt: {e}") from e

    def _read_entry(self, archive: zipfile.ZipFile, filename: str) -> str:
        try:
            raw = self._read_member(archive, self._document_entry, filename)
        except KeyError as e:
            raise ArchiveEntryMissingError(
                f"{filename} has no {self._document_entry} entry"
            ) from e

        try:
            return raw.decode(self._encoding)
        except UnicodeDecodeError as e:
            raise ParseError(f"{self._document_entry} in {filename} is not {self._encoding}") from e

    def _read_nested(self, wrapper: zipfile.ZipFile, filename: str) -> str:
        """Read the document part of the first .docx stored inside a wrapper."""
        inner_names = [name for name in wrapper.namelist() if name.lower().endswith(".docx")]
        if not inner_names:
            raise ArchiveEntryMissingError(f"{filename} contains no .docx template")

        inner_name = inner_names[0]
        logger.debug(f"Reading nested template {inner_name} from {filename}")

        inner = self._open(
            self._read_member(wrapper, inner_name, filename),
            f"{filename}:{inner_name}",
        )
        with inner:
            return self._read_entry(inner, f"{filename}:{inner_name}")
