"""Process configuration using Pydantic v2 Settings.

Centralized configuration that loads from environment variables
and provides type-safe access throughout the application. Per-run stage
options (input/output files, prefixes) live in
prefix_swap.core.pipeline_config and are passed explicitly into each stage.
"""

import logging
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Process settings loaded from environment variables.

    All settings have sensible defaults and can be overridden via
    PREFIX_SWAP_* environment variables or a .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="PREFIX_SWAP_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Pipeline layout
    config_path: Path = Field(
        default=Path("config.json"),
        description="Where generate-config writes the pipeline configuration.",
    )
    work_dir: Path = Field(
        default=Path("."),
        description="Root holding the IN/ and OUT/ directories of a run.",
    )

    # Strategy Selection
    extractor_type: str = Field(
        default="batch",
        description="Extraction strategy for the analyzer stage: 'batch' or 'preview'.",
    )
    preview_extractor_type: str = Field(
        default="preview",
        description="Extraction strategy for upload-and-analyze: 'batch' or 'preview'.",
    )

    # File Storage
    upload_dir: Path = Field(
        default=Path("./uploads"),
        description="Directory under which per-request temporary upload folders are created.",
    )
    max_upload_bytes: int = Field(
        default=16 * 1024 * 1024,
        description="Largest accepted template upload.",
    )

    # Server
    host: str = Field(default="0.0.0.0", description="Bind address for the web front end.")
    port: int = Field(default=3000, description="Port for the web front end.")

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level: DEBUG, INFO, WARNING, ERROR.",
    )
    log_dir: Path | None = Field(
        default=None,
        description="Directory for info.log and error.log. Console only when unset.",
    )

    @field_validator("upload_dir")
    @classmethod
    def ensure_upload_dir(cls, v: Path) -> Path:
        """Ensure upload directory exists."""
        v.mkdir(parents=True, exist_ok=True)
        return v.resolve()

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """Normalize log level to uppercase."""
        return v.upper()

    @field_validator("extractor_type", "preview_extractor_type")
    @classmethod
    def normalize_strategy(cls, v: str) -> str:
        return v.strip().lower()

    def configure_logging(self) -> None:
        """Configure structlog to render through the stdlib logging tree."""
        import structlog

        level = getattr(logging, self.log_level, logging.INFO)

        structlog.configure(
            processors=[
                structlog.stdlib.filter_by_level,
                structlog.stdlib.add_logger_name,
                structlog.stdlib.add_log_level,
                structlog.stdlib.PositionalArgumentsFormatter(),
                structlog.processors.TimeStamper(fmt="iso"),
                structlog.processors.StackInfoRenderer(),
                structlog.processors.format_exc_info,
                structlog.processors.KeyValueRenderer(
                    key_order=["event", "stage"], drop_missing=True
                ),
            ],
            wrapper_class=structlog.stdlib.BoundLogger,
            context_class=dict,
            logger_factory=structlog.stdlib.LoggerFactory(),
            cache_logger_on_first_use=True,
        )

        logger.setLevel(level)


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get or create the global Settings instance.

    Returns:
        The singleton Settings instance.
    """
    global _settings
    if _settings is None:
        _settings = Settings()
        _settings.configure_logging()
    return _settings


def reset_settings() -> None:
    """Drop the cached Settings so the next call re-reads the environment."""
    global _settings
    _settings = None
