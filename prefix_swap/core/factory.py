"""Component Factory for strategy instantiation.

The Factory Pattern allows the application to pick the extraction strategy
and archive reader at runtime based on configuration or environment
variables.
"""

import logging

from prefix_swap.core.config import Settings, get_settings
from prefix_swap.core.exceptions import ConfigurationError
from prefix_swap.interfaces.archive import BaseArchiveReader
from prefix_swap.interfaces.extractor import BaseFieldExtractor
from prefix_swap.strategies.archives import ZipArchiveReader
from prefix_swap.strategies.extractors import BatchFieldExtractor, PreviewFieldExtractor

logger = logging.getLogger(__name__)

EXTRACTOR_TYPES = ("batch", "preview")


class ComponentFactory:
    """Factory for creating component instances based on configuration.

    Example:
        ```python
        factory = ComponentFactory(get_settings())

        extractor = factory.get_extractor()          # settings.extractor_type
        preview = factory.get_extractor("preview")
        reader = factory.get_archive_reader()
        ```
    """

    def __init__(self, settings: Settings | None = None) -> None:
        """Initialize the factory with optional settings.

        Args:
            settings: Process settings. If None, uses global settings.
        """
        self._settings = settings or get_settings()
        self._extractor_cache: dict[str, BaseFieldExtractor] = {}
        self._archive_reader_cache: BaseArchiveReader | None = None

    def get_extractor(self, extractor_type: str | None = None) -> BaseFieldExtractor:
        """Get an extraction strategy by name.

        Args:
            extractor_type: 'batch' or 'preview'. If None, uses settings.

        Returns:
            A BaseFieldExtractor implementation instance.

        Raises:
            ConfigurationError: If the extractor type is unknown.
        """
        extractor_type = (extractor_type or self._settings.extractor_type).strip().lower()

        if extractor_type not in self._extractor_cache:
            logger.info(f"Instantiating extractor: {extractor_type}")

            match extractor_type:
                case "batch":
                    self._extractor_cache[extractor_type] = BatchFieldExtractor()
                case "preview":
                    self._extractor_cache[extractor_type] = PreviewFieldExtractor()
                case _:
                    raise ConfigurationError(
                        f"Unknown extractor type: {extractor_type}. "
                        f"Valid options: {', '.join(repr(t) for t in EXTRACTOR_TYPES)}"
                    )

        return self._extractor_cache[extractor_type]

    def get_preview_extractor(self) -> BaseFieldExtractor:
        """Get the strategy used by the interactive upload preview."""
        return self.get_extractor(self._settings.preview_extractor_type)

    def get_archive_reader(self) -> BaseArchiveReader:
        """Get the template archive reader."""
        if self._archive_reader_cache is None:
            logger.info("Instantiating archive reader")
            self._archive_reader_cache = ZipArchiveReader()

        return self._archive_reader_cache

    def clear_cache(self) -> None:
        """Clear all cached component instances."""
        self._extractor_cache.clear()
        self._archive_reader_cache = None
        logger.debug("Component factory cache cleared")
