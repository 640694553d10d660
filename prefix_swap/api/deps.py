"""FastAPI dependencies for dependency injection.

Provides reusable dependencies for routes including:
- Component factory
- Per-request temporary upload storage
"""

import logging
import tempfile
from collections.abc import Iterator
from pathlib import Path

from fastapi import Depends

from prefix_swap.core.config import Settings, get_settings
from prefix_swap.core.factory import ComponentFactory

logger = logging.getLogger(__name__)


def get_factory(settings: Settings = Depends(get_settings)) -> ComponentFactory:
    """Dependency for a component factory bound to the current settings."""
    return ComponentFactory(settings)


def upload_workspace(settings: Settings = Depends(get_settings)) -> Iterator[Path]:
    """Dependency for a temporary directory private to one request.

    The directory and everything written into it are removed once the
    request has been handled, whether it succeeded or failed.

    Args:
        settings: Process settings.

    Yields:
        Path of the temporary directory.
    """
    settings.upload_dir.mkdir(parents=True, exist_ok=True)
    with tempfile.TemporaryDirectory(prefix="upload_", dir=settings.upload_dir) as tmp:
        logger.debug(f"Created upload workspace {tmp}")
        yield Path(tmp)
    logger.debug(f"Removed upload workspace {tmp}")
