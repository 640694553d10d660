"""Error taxonomy for the prefix swap pipeline.

Every fatal condition raised by the library derives from PrefixSwapError so the
CLI and the HTTP layer can report it with a single handler. Residual
occurrences after substitution are not errors; they are reported through the
CoverageWarning warning category.
"""


class PrefixSwapError(Exception):
    """Base exception for all pipeline failures."""


class ConfigurationError(PrefixSwapError):
    """Raised when a required option is missing or a referenced path does not exist."""


class ParseError(PrefixSwapError):
    """Raised when an artifact or archive cannot be parsed."""


class MissingInputError(ParseError):
    """Raised when an input artifact cannot be located or is not valid JSON."""


class MalformedInputError(ParseError):
    """Raised when an input artifact is valid JSON but lacks expected fields."""


class UnsupportedArchiveError(ParseError):
    """Raised when an uploaded template has an unsupported extension."""


class ArchiveEntryMissingError(ParseError):
    """Raised when a template archive has no inner document entry."""


class ArtifactIOError(PrefixSwapError):
    """Raised when reading or writing a file fails.

    Attributes:
        path: The file that could not be read or written.
    """

    def __init__(self, message: str, path: str | None = None) -> None:
        super().__init__(message)
        self.path = path


class CoverageWarning(UserWarning):
    """Original field forms are still present after substitution."""
