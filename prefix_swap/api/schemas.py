"""API request and response schemas.

Pydantic v2 models for API serialization/deserialization. Field names are
exposed in camelCase, which is what the browser front end sends and reads.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class ErrorResponse(CamelModel):
    """Body of every failed API call."""

    success: bool = False
    message: str


class AnalyzeResponse(CamelModel):
    """Fields and prefixes found in an uploaded template."""

    success: bool = True
    message: str = "Template analyzed"
    file_name: str = Field(alias="fileName")
    fields: list[str] = Field(default_factory=list, description="Unique normalized field names")
    prefixes: list[str] = Field(default_factory=list, description="Namespaces used by the fields")
    total_fields: int = Field(alias="totalFields")
    total_prefixes: int = Field(alias="totalPrefixes")


class GenerateConfigRequest(CamelModel):
    """Prefix pair chosen by the user for an uploaded template."""

    file_name: str = Field(default="", alias="fileName")
    old_prefix: str = Field(default="", alias="oldPrefix")
    new_prefix: str = Field(default="", alias="newPrefix")


class GenerateConfigResponse(CamelModel):
    success: bool = True
    message: str = "Configuration created"
    file_path: str = Field(alias="filePath")
    config: dict[str, Any]
