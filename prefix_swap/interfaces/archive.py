"""Abstract base class for template archive readers.

Template files are zip containers; the replacement pipeline works on the
inner word-processor XML, which a reader locates and returns as text.
"""

import os
from abc import ABC, abstractmethod
from pathlib import Path


class BaseArchiveReader(ABC):
    """Abstract base class for archive reading strategies."""

    @abstractmethod
    def read_document_bytes(self, data: bytes, filename: str) -> str:
        """Return the inner document XML of an in-memory archive.

        Args:
            data: Raw archive bytes.
            filename: Original file name; its extension selects the layout.

        Returns:
            The inner document XML as text.

        Raises:
            UnsupportedArchiveError: If the extension is not supported.
            ArchiveEntryMissingError: If the inner document entry is absent.
            ParseError: If the data is not a readable archive.
        """
        ...

    @property
    @abstractmethod
    def supported_extensions(self) -> set[str]:
        """Return the set of file extensions supported by this reader.

        Returns:
            A set of file extensions (e.g., {'.docx', '.fdt'}).
        """
        ...

    def read_document(self, file_path: str | Path) -> str:
        """Read an archive from disk and return its inner document XML.

        Raises:
            FileNotFoundError: If the archive does not exist.
        """
        path = Path(file_path)
        if not path.exists():
            raise FileNotFoundError(f"Archive not found: {file_path}")
        return self.read_document_bytes(path.read_bytes(), path.name)

    def supports_file(self, file_path: str) -> bool:
        """Check if this reader supports the given file.

        Args:
            file_path: The path to the file to check.

        Returns:
            True if the file extension is supported, False otherwise.
        """
        _, ext = os.path.splitext(file_path)
        return ext.lower() in self.supported_extensions
