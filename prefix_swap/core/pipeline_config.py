"""Pipeline configuration models.

A pipeline configuration file (config.json) holds one section per stage. Each
section is parsed into a frozen model that is handed by value to the stage
runner, so no stage reads configuration from shared state.

Example:
    ```json
    {
      "analyzer": {"inputFile": "IN/document.xml", "outputFile": "OUT/unique_names.json",
                   "originalPrefix": "old.", "cleanLogicalConstructions": true,
                   "sortByLength": true},
      "generator": {"inputFile": "OUT/unique_names.json",
                    "outputFile": "OUT/replacement_map.json", "newPrefix": "new."},
      "replacer": {"inputFile": "IN/document.xml", "outputFile": "OUT/document.xml",
                   "replacementMapFile": "OUT/replacement_map.json"}
    }
    ```
"""

import json
import logging
import re
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from prefix_swap.core.exceptions import ArtifactIOError, ConfigurationError

logger = logging.getLogger(__name__)

PREFIX_SEPARATOR = "."

# Prefixes entered by users: letters (Latin and Cyrillic), digits, underscore.
PREFIX_PATTERN = re.compile(r"^[a-zA-Zа-яА-ЯёЁ0-9_]+$")


def validate_prefix(prefix: str | None) -> str | None:
    """Check a user-entered prefix.

    Returns:
        A message describing the problem, or None when the prefix is acceptable.
    """
    if not prefix or not prefix.strip():
        return "Prefix must not be empty"
    if not PREFIX_PATTERN.fullmatch(prefix):
        return "Only letters, digits and underscores are allowed"
    return None


class StageConfig(BaseModel):
    """Options shared by every stage section."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    input_file: str = Field(alias="inputFile", min_length=1)
    output_file: str = Field(alias="outputFile", min_length=1)

    def input_paths(self) -> dict[str, str]:
        """Return the option name and value of every path the stage reads."""
        return {"inputFile": self.input_file}

    def check_inputs(self) -> None:
        """Verify that every input path exists.

        Raises:
            ConfigurationError: If a referenced input file is missing.
        """
        for option, value in self.input_paths().items():
            self.check_path(option, value)

    @staticmethod
    def check_path(option: str, value: str) -> None:
        """Raise ConfigurationError when the file behind an option is missing."""
        path = Path(value).resolve()
        if not path.exists():
            raise ConfigurationError(f"{option} not found: {path}")

    def as_dict(self) -> dict[str, Any]:
        """Serialize with the camelCase option names used in config.json."""
        return self.model_dump(by_alias=True, exclude_none=True)


class AnalyzerConfig(StageConfig):
    """Options for the field extraction stage."""

    original_prefix: str = Field(alias="originalPrefix", min_length=1)
    clean_logical_constructions: bool = Field(default=False, alias="cleanLogicalConstructions")
    sort_by_length: bool = Field(default=False, alias="sortByLength")
    strategy: str | None = Field(
        default=None,
        description="Extraction strategy name; the process setting is used when unset.",
    )


class GeneratorConfig(StageConfig):
    """Options for the replacement map stage."""

    new_prefix: str = Field(alias="newPrefix", min_length=1)
    encoding: str = "utf8"

    @field_validator("encoding")
    @classmethod
    def only_utf8(cls, v: str) -> str:
        if v.lower().replace("-", "") != "utf8":
            raise ValueError("only utf8 is supported for base64 encoding")
        return v


class ReplacerConfig(StageConfig):
    """Options for the substitution stage."""

    replacement_map_file: str = Field(alias="replacementMapFile", min_length=1)
    verify: bool = True

    def input_paths(self) -> dict[str, str]:
        return {"inputFile": self.input_file, "replacementMapFile": self.replacement_map_file}


class PipelineConfig(BaseModel):
    """All three stage sections of a config.json file."""

    model_config = ConfigDict(frozen=True)

    analyzer: AnalyzerConfig | None = None
    generator: GeneratorConfig | None = None
    replacer: ReplacerConfig | None = None

    def section(self, name: str) -> StageConfig:
        """Return a stage section, failing when the file does not define it.

        Raises:
            ConfigurationError: If the section is absent.
        """
        config = getattr(self, name, None)
        if config is None:
            raise ConfigurationError(f"Config has no '{name}' section")
        return config

    def as_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


def _describe_validation_error(section: str, exc: ValidationError) -> str:
    missing = []
    invalid = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"])
        if error["type"] in ("missing", "string_too_short"):
            missing.append(location)
        else:
            invalid.append(f"{location}: {error['msg']}")

    parts = []
    if missing:
        parts.append(f"Config section '{section}' is missing required fields: {', '.join(missing)}")
    if invalid:
        parts.append(f"Config section '{section}' has invalid values: {'; '.join(invalid)}")
    return ". ".join(parts)


def parse_pipeline_config(data: dict[str, Any]) -> PipelineConfig:
    """Build a PipelineConfig from already-decoded JSON.

    Raises:
        ConfigurationError: If the document is not an object or a section is invalid.
    """
    if not isinstance(data, dict):
        raise ConfigurationError("Config must be a JSON object")

    sections: dict[str, StageConfig] = {}
    for name, model in (
        ("analyzer", AnalyzerConfig),
        ("generator", GeneratorConfig),
        ("replacer", ReplacerConfig),
    ):
        raw = data.get(name)
        if raw is None:
            continue
        if not isinstance(raw, dict):
            raise ConfigurationError(f"Config section '{name}' must be an object")
        try:
            sections[name] = model.model_validate(raw)
        except ValidationError as e:
            raise ConfigurationError(_describe_validation_error(name, e)) from e

    return PipelineConfig(**sections)


def load_pipeline_config(config_path: str | Path) -> PipelineConfig:
    """Read and validate a config.json file.

    Args:
        config_path: Path to the pipeline configuration file.

    Returns:
        The parsed configuration.

    Raises:
        ConfigurationError: If the file is missing, unreadable, not JSON, or invalid.
    """
    path = Path(config_path).resolve()
    if not path.exists():
        raise ConfigurationError(f"Config file not found: {path}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Config file is not valid JSON: {path}: {e}") from e
    except OSError as e:
        raise ConfigurationError(f"Could not read config file {path}: {e}") from e

    logger.debug(f"Loaded pipeline config from {path}")
    return parse_pipeline_config(data)


def build_pipeline_config(
    old_prefix: str,
    new_prefix: str,
    work_dir: str | Path = ".",
) -> PipelineConfig:
    """Build the standard IN/OUT pipeline layout for a prefix pair.

    The separator is appended to both prefixes so that only whole namespace
    segments are rewritten.

    Args:
        old_prefix: Namespace to replace, without the trailing separator.
        new_prefix: Replacement namespace, without the trailing separator.
        work_dir: Directory holding IN/ and OUT/.

    Returns:
        A configuration with all three sections filled in.
    """
    root = Path(work_dir)
    source_xml = str(root / "IN" / "document.xml")
    unique_names = str(root / "OUT" / "unique_names.json")
    replacement_map = str(root / "OUT" / "replacement_map.json")

    return PipelineConfig(
        analyzer=AnalyzerConfig(
            inputFile=source_xml,
            outputFile=unique_names,
            originalPrefix=old_prefix + PREFIX_SEPARATOR,
            cleanLogicalConstructions=True,
            sortByLength=True,
        ),
        generator=GeneratorConfig(
            inputFile=unique_names,
            outputFile=replacement_map,
            newPrefix=new_prefix + PREFIX_SEPARATOR,
            encoding="utf8",
        ),
        replacer=ReplacerConfig(
            inputFile=source_xml,
            outputFile=str(root / "OUT" / "document.xml"),
            replacementMapFile=replacement_map,
        ),
    )


def save_pipeline_config(config: PipelineConfig, config_path: str | Path) -> Path:
    """Write a config.json file, creating parent directories as needed.

    Raises:
        ArtifactIOError: If the file cannot be written.
    """
    path = Path(config_path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(config.as_dict(), f, ensure_ascii=False, indent=2)
    except OSError as e:
        raise ArtifactIOError(f"Could not write config file {path}: {e}", path=str(path)) from e

    logger.info(f"Pipeline config written to {path}")
    return path
