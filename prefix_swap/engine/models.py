"""Replacement engine domain models.

Pydantic models for the replacement map (it is persisted and validated) and
plain dataclasses for the per-run reports.
"""

from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ReplacementEntry(BaseModel):
    """One original field name, its rewrite and their base64 forms."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    original: str = Field(min_length=1, description="Field name as found in the document")
    original_encoded: str = Field(alias="originalEncoded", min_length=1)
    replacement: str = Field(description="Field name with the prefix swapped")
    replacement_encoded: str = Field(alias="replacementEncoded")
    length: int = Field(ge=1, description="Character length of the original, the sort key")

    @model_validator(mode="after")
    def check_length(self) -> "ReplacementEntry":
        if self.length != len(self.original):
            raise ValueError(
                f"length {self.length} does not match original {self.original!r} "
                f"({len(self.original)} characters)"
            )
        return self


class ReplacementMap(BaseModel):
    """Ordered replacement entries for one prefix swap.

    Entries must be applied in the stored order, which the builder sets to
    descending original length.
    """

    model_config = ConfigDict(frozen=True)

    prefix_from: str
    prefix_to: str
    entries: tuple[ReplacementEntry, ...] = ()

    def __len__(self) -> int:
        return len(self.entries)

    @property
    def is_longest_first(self) -> bool:
        """Whether entry lengths are non-increasing across the sequence."""
        return all(
            earlier.length >= later.length
            for earlier, later in zip(self.entries, self.entries[1:])
        )


@dataclass(frozen=True)
class EntryReport:
    """Replacement counts for one entry."""

    original: str
    text_count: int
    encoded_count: int

    @property
    def total(self) -> int:
        return self.text_count + self.encoded_count


@dataclass(frozen=True)
class ReplacementReport:
    """Counts for one substitution pass, in application order."""

    entries: tuple[EntryReport, ...]
    total: int

    @property
    def text_total(self) -> int:
        return sum(entry.text_count for entry in self.entries)

    @property
    def encoded_total(self) -> int:
        return sum(entry.encoded_count for entry in self.entries)


@dataclass(frozen=True)
class Residue:
    """Original forms of one entry still present after substitution."""

    original: str
    text_count: int
    encoded_count: int


@dataclass(frozen=True)
class VerificationResult:
    """Outcome of re-scanning substituted text for original forms."""

    residues: tuple[Residue, ...]

    @property
    def all_clean(self) -> bool:
        return not self.residues
