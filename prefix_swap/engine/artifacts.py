"""Stage hand-off artifacts.

The analyzer writes a unique-name artifact, the generator turns it into a
replacement-map artifact, and the replacer reads the map together with the
document text. JSON artifacts are written once and never modified by a later
stage; document text is read and written verbatim.
"""

import json
import logging
import os
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from prefix_swap.core.exceptions import (
    ArtifactIOError,
    MalformedInputError,
    MissingInputError,
    ParseError,
)
from prefix_swap.engine.models import ReplacementEntry, ReplacementMap
from prefix_swap.interfaces.extractor import UniqueNameSet

logger = logging.getLogger(__name__)


class ArtifactMetadata(BaseModel):
    """Provenance block written at the top of every JSON artifact."""

    model_config = ConfigDict(populate_by_name=True)

    generated_by: str = Field(alias="generatedBy")
    generated_at: datetime = Field(
        alias="generatedAt",
        default_factory=lambda: datetime.now(timezone.utc),
    )
    config_used: dict[str, Any] = Field(alias="configUsed", default_factory=dict)


class UniqueNamesStatistics(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    total_unique_names: int = Field(alias="totalUniqueNames")
    input_file: str | None = Field(default=None, alias="inputFile")
    output_file: str | None = Field(default=None, alias="outputFile")
    strategy: str | None = None


class UniqueNamesArtifact(BaseModel):
    """Analyzer output: the unique field names carrying the original prefix."""

    model_config = ConfigDict(populate_by_name=True)

    metadata: ArtifactMetadata | None = None
    original_prefix: str = Field(alias="originalPrefix", min_length=1)
    unique_names: list[str] = Field(alias="uniqueNames", default_factory=list)
    statistics: UniqueNamesStatistics | None = None


class PrefixSwap(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    from_prefix: str = Field(alias="from", min_length=1)
    to_prefix: str = Field(alias="to")


class ReplacementMapStatistics(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    total_entries: int = Field(alias="totalEntries")
    analysis_file: str | None = Field(default=None, alias="analysisFile")
    output_file: str | None = Field(default=None, alias="outputFile")


class ReplacementMapArtifact(BaseModel):
    """Generator output: the ordered replacement entries."""

    model_config = ConfigDict(populate_by_name=True)

    metadata: ArtifactMetadata | None = None
    prefix_swap: PrefixSwap = Field(alias="prefixSwap")
    entries: list[ReplacementEntry]
    statistics: ReplacementMapStatistics | None = None

    def to_replacement_map(self) -> ReplacementMap:
        return ReplacementMap(
            prefix_from=self.prefix_swap.from_prefix,
            prefix_to=self.prefix_swap.to_prefix,
            entries=tuple(self.entries),
        )


# =============================================================================
# File helpers
# =============================================================================


def read_json(path: str | Path) -> Any:
    """Read a JSON artifact.

    Raises:
        MissingInputError: If the file does not exist or is not valid JSON.
        ArtifactIOError: If the file exists but cannot be read.
    """
    path = Path(path)
    if not path.exists():
        raise MissingInputError(f"Input artifact not found: {path.resolve()}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        raise MissingInputError(f"Input artifact is not valid JSON: {path}: {e}") from e
    except UnicodeDecodeError as e:
        raise MissingInputError(f"Input artifact is not UTF-8 text: {path}") from e
    except OSError as e:
        raise ArtifactIOError(f"Could not read {path}: {e}", path=str(path)) from e


def write_text(path: str | Path, content: str) -> Path:
    """Write text verbatim, creating parent directories as needed.

    The content goes to a temporary file next to ``path`` that is renamed over
    it once complete, so a failed write never leaves a truncated file behind.

    Raises:
        ArtifactIOError: If the directory or file cannot be written.
    """
    path = Path(path)
    tmp_name = None
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            newline="",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
        ) as f:
            tmp_name = f.name
            f.write(content)
        os.replace(tmp_name, path)
    except OSError as e:
        if tmp_name is not None and os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise ArtifactIOError(f"Could not write {path}: {e}", path=str(path)) from e

    logger.debug(f"Wrote {len(content)} characters to {path}")
    return path


def _dump(model: BaseModel) -> str:
    return model.model_dump_json(by_alias=True, indent=2, exclude_none=True)


# =============================================================================
# Document text
# =============================================================================


def read_document(path: str | Path) -> str:
    """Read document XML without newline translation.

    Raises:
        MissingInputError: If the document does not exist.
        ParseError: If the document is not UTF-8 text.
        ArtifactIOError: If it cannot be read.
    """
    path = Path(path)
    if not path.exists():
        raise MissingInputError(f"Document not found: {path.resolve()}")

    try:
        with open(path, "r", encoding="utf-8", newline="") as f:
            return f.read()
    except UnicodeDecodeError as e:
        raise ParseError(f"Document {path} is not UTF-8 text: {e}") from e
    except OSError as e:
        raise ArtifactIOError(f"Could not read document {path}: {e}", path=str(path)) from e


def write_document(path: str | Path, content: str) -> Path:
    """Write document XML exactly as given."""
    return write_text(path, content)


# =============================================================================
# Unique-name artifact
# =============================================================================


def load_unique_names(path: str | Path) -> UniqueNamesArtifact:
    """Load the analyzer output.

    Raises:
        MissingInputError: If the artifact cannot be located or parsed.
        MalformedInputError: If it lacks originalPrefix or uniqueNames is malformed.
    """
    data = read_json(path)
    if not isinstance(data, dict) or not data.get("originalPrefix"):
        raise MalformedInputError(f"{path} has no originalPrefix field")

    try:
        return UniqueNamesArtifact.model_validate(data)
    except ValidationError as e:
        raise MalformedInputError(f"{path} is not a unique-name artifact: {e}") from e


def save_unique_names(
    path: str | Path,
    names: UniqueNameSet,
    config_used: dict[str, Any] | None = None,
    input_file: str | None = None,
) -> UniqueNamesArtifact:
    """Write the analyzer output and return what was written."""
    artifact = UniqueNamesArtifact(
        metadata=ArtifactMetadata(
            generated_by="Field Name Analyzer",
            config_used=config_used or {},
        ),
        original_prefix=names.old_prefix,
        unique_names=list(names.names),
        statistics=UniqueNamesStatistics(
            total_unique_names=len(names),
            input_file=input_file,
            output_file=str(path),
            strategy=names.strategy,
        ),
    )
    write_text(path, _dump(artifact))
    return artifact


# =============================================================================
# Replacement-map artifact
# =============================================================================


def load_replacement_map(path: str | Path) -> ReplacementMap:
    """Load the generator output, keeping the stored entry order.

    Raises:
        MissingInputError: If the artifact cannot be located or parsed.
        MalformedInputError: If required fields are missing or entries are invalid.
    """
    data = read_json(path)
    if not isinstance(data, dict) or "prefixSwap" not in data or "entries" not in data:
        raise MalformedInputError(f"{path} has no prefixSwap/entries fields")

    try:
        artifact = ReplacementMapArtifact.model_validate(data)
    except ValidationError as e:
        raise MalformedInputError(f"{path} is not a replacement-map artifact: {e}") from e

    return artifact.to_replacement_map()


def save_replacement_map(
    path: str | Path,
    replacement_map: ReplacementMap,
    config_used: dict[str, Any] | None = None,
    analysis_file: str | None = None,
) -> ReplacementMapArtifact:
    """Write the generator output and return what was written."""
    artifact = ReplacementMapArtifact(
        metadata=ArtifactMetadata(
            generated_by="Replacement Map Generator",
            config_used=config_used or {},
        ),
        prefix_swap=PrefixSwap(
            from_prefix=replacement_map.prefix_from,
            to_prefix=replacement_map.prefix_to,
        ),
        entries=list(replacement_map.entries),
        statistics=ReplacementMapStatistics(
            total_entries=len(replacement_map),
            analysis_file=analysis_file,
            output_file=str(path),
        ),
    )
    write_text(path, _dump(artifact))
    return artifact
